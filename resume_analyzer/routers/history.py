from typing import List

from fastapi import APIRouter, Depends, Query

from resume_analyzer.models.response import HistoryEntry, HistorySaveRequest
from resume_analyzer.models.schemas import HistoryRecord
from resume_analyzer.services.history import HistoryRepository, get_history_repository

router = APIRouter(tags=["history"])


@router.post("/save-history")
async def save_history(body: HistorySaveRequest, repo: HistoryRepository = Depends(get_history_repository)):
    """Save a finished analysis"""
    await repo.create(HistoryRecord(score=body.score, skills=body.skills))
    return {"success": True}


@router.get("/history", response_model=List[HistoryEntry], response_model_by_alias=True)
async def list_history(
    limit: int = Query(50, ge=1, le=200, description="Maximum number of records"),
    repo: HistoryRepository = Depends(get_history_repository),
):
    """List saved analyses, newest first"""
    records = await repo.list(limit=limit)
    return [HistoryEntry(score=r.score, skills=r.skills, created_at=r.created_at) for r in records]
