"""Presentation endpoints: slide order, pacing and time distribution."""

from datetime import datetime, time
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query

from deck_backend.app.api.projects import get_owned_project
from deck_backend.app.core.errors import MalformedTime
from deck_backend.app.core.time import local_now
from deck_backend.app.crud.note_repository import SQLAlchemyNoteRepository
from deck_backend.app.dependencies.tree import get_note_repository
from deck_backend.app.models.project import Project
from deck_backend.app.schemas.note import FlatNoteRead
from deck_backend.app.schemas.pacing import PacingRead, SegmentSummaryRead, TimeDistributionRead
from deck_backend.app.services import pacing
from deck_backend.app.services.flattener import flatten_project

router = APIRouter(prefix="/projects", tags=["presentation"])


def _slides(repo: SQLAlchemyNoteRepository, project_id: int) -> list:
    return [flat.note for flat in flatten_project(repo, project_id)]


def _resolve_now(now: Optional[str]) -> datetime:
    if now is None:
        return local_now()
    try:
        minutes = pacing.parse_time_marker(now)
    except MalformedTime as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc
    return datetime.combine(local_now().date(), time(minutes // 60, minutes % 60))


@router.get("/{project_id}/flattened", response_model=list[FlatNoteRead])
def list_flattened(
    project: Project = Depends(get_owned_project),
    repo: SQLAlchemyNoteRepository = Depends(get_note_repository),
):
    return [
        {"index": flat.index, "depth": flat.depth, "title": flat.title, "note": flat.note}
        for flat in flatten_project(repo, project.id)
    ]


@router.get("/{project_id}/pacing", response_model=PacingRead)
def get_pacing(
    current_index: int = Query(ge=0),
    now: Optional[str] = Query(default=None, description="Wall clock as HH:MM; defaults to server time"),
    project: Project = Depends(get_owned_project),
    repo: SQLAlchemyNoteRepository = Depends(get_note_repository),
):
    return pacing.compute_pacing(_slides(repo, project.id), current_index, _resolve_now(now))


@router.get("/{project_id}/time-distribution", response_model=TimeDistributionRead)
def get_time_distribution(
    project: Project = Depends(get_owned_project),
    repo: SQLAlchemyNoteRepository = Depends(get_note_repository),
):
    segments = pacing.time_distribution(_slides(repo, project.id))
    return {"segments": segments, "total_minutes": sum(segment.minutes for segment in segments)}


@router.get("/{project_id}/notes/{note_id}/time-summary", response_model=SegmentSummaryRead)
def get_time_summary(
    note_id: int,
    project: Project = Depends(get_owned_project),
    repo: SQLAlchemyNoteRepository = Depends(get_note_repository),
):
    slides = _slides(repo, project.id)
    index = next((i for i, note in enumerate(slides) if note.id == note_id), None)
    if index is None:
        raise HTTPException(status_code=404, detail="Note not found")
    summary = pacing.segment_summary(slides, index)
    if summary is None:
        raise HTTPException(status_code=404, detail="No following time marker")
    return summary
