"""Dependencies wiring the note tree services to the request's database session."""

from fastapi import Depends, HTTPException
from sqlalchemy.orm import Session

from deck_backend.app.core.errors import NoteTreeError
from deck_backend.app.crud.note_repository import SQLAlchemyNoteRepository
from deck_backend.app.db.session import get_db
from deck_backend.app.services.note_tree import NoteTree
from deck_backend.app.services.projects import project_lock_checker


def get_note_repository(db: Session = Depends(get_db)) -> SQLAlchemyNoteRepository:
    return SQLAlchemyNoteRepository(db)


def get_note_tree(
    db: Session = Depends(get_db),
    repo: SQLAlchemyNoteRepository = Depends(get_note_repository),
) -> NoteTree:
    return NoteTree(repo, is_locked=project_lock_checker(db))


def http_error(exc: NoteTreeError) -> HTTPException:
    return HTTPException(status_code=exc.status_code, detail=exc.message)
