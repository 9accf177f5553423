"""
Runtime Settings for the Resume Analyzer API
"""
import os
from functools import lru_cache
from typing import Optional

from dotenv import load_dotenv
from pydantic import BaseModel, Field, validator


class LLMSettings(BaseModel):
    """Reasoning service (OpenAI-compatible chat completions) settings"""
    api_key: Optional[str] = Field(default=None, description="Bearer token for the reasoning service")
    base_url: str = Field(default="https://openrouter.ai/api/v1", description="Chat completions base URL")
    model: str = Field(default="openai/gpt-4o-mini", description="Model identifier")
    temperature: float = Field(default=0.3, ge=0.0, le=2.0, description="Generation temperature")
    timeout: float = Field(default=60.0, gt=0, le=300, description="Request timeout in seconds")
    referer: str = Field(default="http://localhost:3000", description="HTTP-Referer header sent upstream")
    app_title: str = Field(default="AI Resume Analyzer", description="X-Title header sent upstream")

    @validator('base_url')
    def strip_trailing_slash(cls, v):
        return v.rstrip("/")


class ProcessingSettings(BaseModel):
    """Upload, extraction and scoring settings"""
    max_upload_bytes: int = Field(default=10 * 1024 * 1024, ge=1, description="Maximum accepted upload size")
    ocr_language: str = Field(default="eng", description="Tesseract language code")
    resume_excerpt_chars: int = Field(default=4000, ge=100, description="Transcript budget for the assessment prompt")
    interview_excerpt_chars: int = Field(default=2500, ge=100, description="Transcript budget for the interview prompt")
    max_job_description_chars: int = Field(default=20000, ge=1, description="Maximum job description length")
    jd_whole_word_matching: bool = Field(default=False, description="Scan job descriptions with whole-word matching")


class StorageSettings(BaseModel):
    """History storage settings"""
    mongo_uri: Optional[str] = Field(default=None, description="MongoDB URI; in-memory history when unset")
    db_name: str = Field(default="resume_analyzer", description="MongoDB database name")


class Settings(BaseModel):
    llm: LLMSettings = Field(default_factory=LLMSettings)
    processing: ProcessingSettings = Field(default_factory=ProcessingSettings)
    storage: StorageSettings = Field(default_factory=StorageSettings)


def _env_bool(name: str, default: str = "false") -> bool:
    return os.getenv(name, default).strip().lower() in ("1", "true", "yes", "on")


def load_settings() -> Settings:
    """Build settings from the environment (and .env, if present)"""
    load_dotenv()
    return Settings(
        llm=LLMSettings(
            api_key=os.getenv("OPENROUTER_API_KEY") or None,
            base_url=os.getenv("LLM_BASE_URL", "https://openrouter.ai/api/v1"),
            model=os.getenv("LLM_MODEL", "openai/gpt-4o-mini"),
            temperature=float(os.getenv("LLM_TEMPERATURE", "0.3")),
            timeout=float(os.getenv("LLM_TIMEOUT", "60")),
            referer=os.getenv("LLM_REFERER", "http://localhost:3000"),
            app_title=os.getenv("LLM_APP_TITLE", "AI Resume Analyzer"),
        ),
        processing=ProcessingSettings(
            max_upload_bytes=int(os.getenv("MAX_UPLOAD_BYTES", str(10 * 1024 * 1024))),
            ocr_language=os.getenv("OCR_LANGUAGE", "eng"),
            resume_excerpt_chars=int(os.getenv("RESUME_EXCERPT_CHARS", "4000")),
            interview_excerpt_chars=int(os.getenv("INTERVIEW_EXCERPT_CHARS", "2500")),
            max_job_description_chars=int(os.getenv("MAX_JOB_DESCRIPTION_CHARS", "20000")),
            jd_whole_word_matching=_env_bool("JD_WHOLE_WORD_MATCHING"),
        ),
        storage=StorageSettings(
            mongo_uri=os.getenv("MONGO_URI") or None,
            db_name=os.getenv("DB_NAME", "resume_analyzer"),
        ),
    )


@lru_cache()
def get_settings() -> Settings:
    return load_settings()
