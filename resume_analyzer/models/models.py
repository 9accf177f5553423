from enum import Enum
from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, NonNegativeInt


class DocumentKind(str, Enum):
    PDF = "pdf"
    IMAGE = "image"
    UNSUPPORTED = "unsupported"


class Strategy(str, Enum):
    """Scoring strategy for an analysis request"""
    DETERMINISTIC = "deterministic"
    AI = "ai"


class UploadedDocument(BaseModel):
    model_config = ConfigDict(frozen=True)

    content: bytes
    filename: str = ""
    content_type: str = ""


class Transcript(BaseModel):
    text: str
    source_kind: DocumentKind


class SkillMatch(BaseModel):
    skill_strength: Dict[str, NonNegativeInt] = Field(default_factory=dict)
    found_skills: List[str] = Field(default_factory=list)


class FitAssessment(BaseModel):
    fit_score: int = Field(default=0, ge=0, le=100)
    jd_skills: List[str] = Field(default_factory=list)
    matching_skills: List[str] = Field(default_factory=list)
    missing_skills: List[str] = Field(default_factory=list)


class AIAssessment(BaseModel):
    """Reasoning-service assessment; unset fields were omitted upstream"""
    model_config = ConfigDict(populate_by_name=True)

    ats_score: Optional[int] = Field(default=None, ge=0, le=100, alias="atsScore")
    fit_score: Optional[int] = Field(default=None, ge=0, le=100, alias="fitScore")
    skill_strength: Optional[Dict[str, NonNegativeInt]] = Field(default=None, alias="skillStrength")
    matching_skills: Optional[List[str]] = Field(default=None, alias="matchingSkills")
    missing_skills: Optional[List[str]] = Field(default=None, alias="missingSkills")
    interview_prep: Optional[str] = Field(default=None, alias="interviewPrep")

    def present_fields(self) -> Dict:
        return self.model_dump(by_alias=True, exclude_unset=True, exclude_none=True)


class ReportPayload(BaseModel):
    """Caller-assembled report contents; every section is optional"""
    model_config = ConfigDict(populate_by_name=True)

    ats_score: Optional[int] = Field(default=None, ge=0, le=100, alias="atsScore")
    fit_score: Optional[int] = Field(default=None, ge=0, le=100, alias="fitScore")
    skills: Optional[List[str]] = None
    skill_strength: Optional[Dict[str, NonNegativeInt]] = Field(default=None, alias="skillStrength")
    matching_skills: Optional[List[str]] = Field(default=None, alias="matchingSkills")
    missing_skills: Optional[List[str]] = Field(default=None, alias="missingSkills")
    interview_prep: Optional[str] = Field(default=None, alias="interviewPrep")


class AnalysisResult(BaseModel):
    strategy: Strategy
    source_kind: DocumentKind
    skill_match: Optional[SkillMatch] = None
    fit: Optional[FitAssessment] = None
    ai: Optional[AIAssessment] = None
    # Set when the AI path failed and the deterministic path answered instead
    ai_error: Optional[str] = None
