# models/response.py
from pydantic import BaseModel, ConfigDict, Field, NonNegativeInt
from typing import Dict, List, Optional
from datetime import datetime


class AnalyzeResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    success: bool = True
    strategy: str
    skills: Optional[List[str]] = None
    skill_strength: Optional[Dict[str, NonNegativeInt]] = Field(default=None, alias="skillStrength")
    ats_score: Optional[int] = Field(default=None, alias="atsScore")
    fit_score: Optional[int] = Field(default=None, alias="fitScore")
    matching_skills: Optional[List[str]] = Field(default=None, alias="matchingSkills")
    missing_skills: Optional[List[str]] = Field(default=None, alias="missingSkills")
    interview_prep: Optional[str] = Field(default=None, alias="interviewPrep")
    fallback_reason: Optional[str] = Field(default=None, alias="fallbackReason")


class InterviewResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    success: bool = True
    interview_prep: str = Field(alias="interviewPrep")


class HistorySaveRequest(BaseModel):
    score: Optional[int] = Field(default=None, ge=0, le=100)
    skills: List[str] = []


class HistoryEntry(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    score: Optional[int] = None
    skills: List[str] = []
    created_at: datetime = Field(alias="createdAt")
