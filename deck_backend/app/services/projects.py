"""Project services: ownership lookups, lock state and cascading delete."""

import logging
from typing import Callable, List

from sqlalchemy.orm import Session

from deck_backend.app.core.errors import NotFound, ProjectLocked
from deck_backend.app.models.note import Note
from deck_backend.app.models.project import Project

logger = logging.getLogger(__name__)


def create_project(db: Session, owner_id: int, name: str) -> Project:
    project = Project(owner_id=owner_id, name=name)
    db.add(project)
    db.commit()
    db.refresh(project)
    return project


def list_projects(db: Session, owner_id: int) -> List[Project]:
    return (
        db.query(Project)
        .filter(Project.owner_id == owner_id)
        .order_by(Project.created_at.asc(), Project.id.asc())
        .all()
    )


def get_owned_project(db: Session, project_id: int, owner_id: int) -> Project:
    project = db.query(Project).filter(Project.id == project_id, Project.owner_id == owner_id).first()
    if not project:
        raise NotFound(f"Project {project_id} not found")
    return project


def update_project(db: Session, project: Project, **changes) -> Project:
    for field, value in changes.items():
        if value is not None:
            setattr(project, field, value)
    db.commit()
    db.refresh(project)
    return project


def delete_project(db: Session, project: Project) -> int:
    """Delete the project and all of its notes in one transaction."""
    if project.is_locked:
        raise ProjectLocked(f"Project {project.id} is locked")
    project_id = project.id
    try:
        removed = db.query(Note).filter(Note.project_id == project_id).delete(synchronize_session=False)
        db.delete(project)
        db.commit()
    except Exception:
        db.rollback()
        logger.warning("Deleting project %s rolled back", project_id)
        raise
    logger.info("Deleted project %s with %s notes", project_id, removed)
    return removed


def project_lock_checker(db: Session) -> Callable[[int], bool]:
    """Build the lock predicate handed to ``NoteTree``."""

    def _is_locked(project_id: int) -> bool:
        project = db.get(Project, project_id)
        return bool(project and project.is_locked)

    return _is_locked
