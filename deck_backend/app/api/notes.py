"""Outline note endpoints: create, edit, move, reorder and delete."""

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from deck_backend.app.api.projects import get_owned_project
from deck_backend.app.core.errors import NoteTreeError
from deck_backend.app.crud.note_repository import SQLAlchemyNoteRepository
from deck_backend.app.db.session import get_db
from deck_backend.app.dependencies.auth import get_current_user
from deck_backend.app.dependencies.tree import get_note_repository, get_note_tree, http_error
from deck_backend.app.models.note import Note
from deck_backend.app.models.project import Project
from deck_backend.app.models.user import User
from deck_backend.app.schemas.note import (
    NoteCreate,
    NoteDeleteResponse,
    NoteRead,
    NoteReorder,
    NoteReparent,
    NoteUpdate,
)
from deck_backend.app.services.note_tree import NoteTree
from deck_backend.app.services.ordering import sort_siblings
from deck_backend.app.services.projects import get_owned_project as lookup_owned_project

router = APIRouter(tags=["notes"])


def _get_owned_note(db: Session, repo: SQLAlchemyNoteRepository, note_id: int, user_id: int) -> Note:
    note = repo.find(note_id)
    if note is None:
        raise HTTPException(status_code=404, detail="Note not found")
    try:
        lookup_owned_project(db, note.project_id, user_id)
    except NoteTreeError:
        raise HTTPException(status_code=404, detail="Note not found")
    return note


@router.get("/projects/{project_id}/notes", response_model=list[NoteRead])
def list_notes(
    project: Project = Depends(get_owned_project),
    repo: SQLAlchemyNoteRepository = Depends(get_note_repository),
):
    notes = repo.list_all(project.id)
    by_parent: dict = {}
    for note in notes:
        by_parent.setdefault(note.parent_id, []).append(note)
    ordered = []
    for parent_id in sorted(by_parent, key=lambda p: (p is not None, p or 0)):
        ordered.extend(sort_siblings(by_parent[parent_id]))
    return ordered


@router.post("/projects/{project_id}/notes", response_model=NoteRead, status_code=status.HTTP_201_CREATED)
def create_note(
    note_in: NoteCreate,
    project: Project = Depends(get_owned_project),
    tree: NoteTree = Depends(get_note_tree),
):
    fields = note_in.model_dump(exclude={"content", "parent_id", "order_key"})
    try:
        return tree.create(project.id, note_in.parent_id, note_in.content, note_in.order_key, **fields)
    except NoteTreeError as exc:
        raise http_error(exc) from exc


@router.post("/projects/{project_id}/notes/normalize")
def normalize_notes(
    project: Project = Depends(get_owned_project),
    tree: NoteTree = Depends(get_note_tree),
):
    try:
        changed = tree.normalize_project(project.id)
    except NoteTreeError as exc:
        raise http_error(exc) from exc
    return {"project_id": project.id, "changed": changed}


@router.get("/notes/{note_id}", response_model=NoteRead)
def get_note(
    note_id: int,
    db: Session = Depends(get_db),
    repo: SQLAlchemyNoteRepository = Depends(get_note_repository),
    current_user: User = Depends(get_current_user),
):
    return _get_owned_note(db, repo, note_id, current_user.id)


@router.put("/notes/{note_id}", response_model=NoteRead)
def update_note(
    note_id: int,
    note_in: NoteUpdate,
    db: Session = Depends(get_db),
    repo: SQLAlchemyNoteRepository = Depends(get_note_repository),
    tree: NoteTree = Depends(get_note_tree),
    current_user: User = Depends(get_current_user),
):
    _get_owned_note(db, repo, note_id, current_user.id)
    try:
        return tree.update(note_id, note_in.model_dump(exclude_unset=True))
    except NoteTreeError as exc:
        raise http_error(exc) from exc


@router.put("/notes/{note_id}/parent", response_model=NoteRead)
def reparent_note(
    note_id: int,
    move_in: NoteReparent,
    db: Session = Depends(get_db),
    repo: SQLAlchemyNoteRepository = Depends(get_note_repository),
    tree: NoteTree = Depends(get_note_tree),
    current_user: User = Depends(get_current_user),
):
    _get_owned_note(db, repo, note_id, current_user.id)
    try:
        return tree.reparent(note_id, move_in.parent_id, move_in.order_key)
    except NoteTreeError as exc:
        raise http_error(exc) from exc


@router.put("/notes/{note_id}/order", response_model=NoteRead)
def reorder_note(
    note_id: int,
    order_in: NoteReorder,
    db: Session = Depends(get_db),
    repo: SQLAlchemyNoteRepository = Depends(get_note_repository),
    tree: NoteTree = Depends(get_note_tree),
    current_user: User = Depends(get_current_user),
):
    _get_owned_note(db, repo, note_id, current_user.id)
    try:
        return tree.reorder(note_id, order_in.target_index)
    except NoteTreeError as exc:
        raise http_error(exc) from exc


@router.delete("/notes/{note_id}", response_model=NoteDeleteResponse)
def delete_note(
    note_id: int,
    delete_children: bool = True,
    db: Session = Depends(get_db),
    repo: SQLAlchemyNoteRepository = Depends(get_note_repository),
    tree: NoteTree = Depends(get_note_tree),
    current_user: User = Depends(get_current_user),
):
    _get_owned_note(db, repo, note_id, current_user.id)
    try:
        removed = tree.delete(note_id, delete_children=delete_children)
    except NoteTreeError as exc:
        raise http_error(exc) from exc
    return {"removed": removed}
