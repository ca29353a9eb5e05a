"""Project endpoints: CRUD, lock state and playback position."""

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from deck_backend.app.core.errors import NoteTreeError
from deck_backend.app.db.session import get_db
from deck_backend.app.dependencies.auth import get_current_user
from deck_backend.app.dependencies.tree import http_error
from deck_backend.app.models.project import Project
from deck_backend.app.models.user import User
from deck_backend.app.schemas.project import (
    ProjectCreate,
    ProjectDeleteResponse,
    ProjectLockUpdate,
    ProjectRead,
    ProjectSlideIndexUpdate,
    ProjectUpdate,
)
from deck_backend.app.services import projects as project_service

router = APIRouter(prefix="/projects", tags=["projects"])


def get_owned_project(
    project_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> Project:
    try:
        return project_service.get_owned_project(db, project_id, current_user.id)
    except NoteTreeError as exc:
        raise http_error(exc) from exc


@router.post("", response_model=ProjectRead, status_code=status.HTTP_201_CREATED)
def create_project(
    project_in: ProjectCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return project_service.create_project(db, current_user.id, project_in.name)


@router.get("", response_model=list[ProjectRead])
def list_projects(db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    return project_service.list_projects(db, current_user.id)


@router.get("/{project_id}", response_model=ProjectRead)
def get_project(project: Project = Depends(get_owned_project)):
    return project


@router.put("/{project_id}", response_model=ProjectRead)
def rename_project(
    project_in: ProjectUpdate,
    project: Project = Depends(get_owned_project),
    db: Session = Depends(get_db),
):
    return project_service.update_project(db, project, name=project_in.name)


@router.put("/{project_id}/lock", response_model=ProjectRead)
def set_project_lock(
    lock_in: ProjectLockUpdate,
    project: Project = Depends(get_owned_project),
    db: Session = Depends(get_db),
):
    return project_service.update_project(db, project, is_locked=lock_in.is_locked)


@router.put("/{project_id}/last-viewed-slide", response_model=ProjectRead)
def set_last_viewed_slide(
    position_in: ProjectSlideIndexUpdate,
    project: Project = Depends(get_owned_project),
    db: Session = Depends(get_db),
):
    return project_service.update_project(
        db, project, last_viewed_slide_index=position_in.last_viewed_slide_index
    )


@router.delete("/{project_id}", response_model=ProjectDeleteResponse)
def delete_project(project: Project = Depends(get_owned_project), db: Session = Depends(get_db)):
    project_id = project.id
    try:
        removed = project_service.delete_project(db, project)
    except NoteTreeError as exc:
        raise http_error(exc) from exc
    return {"project_id": project_id, "notes_removed": removed}
