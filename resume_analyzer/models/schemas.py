from pydantic import BaseModel, Field
from typing import List, Optional
from datetime import datetime, timezone

# -------- History --------
class HistoryRecord(BaseModel):
    score: Optional[int] = Field(default=None, ge=0, le=100)
    skills: List[str] = []
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
