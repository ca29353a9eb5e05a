"""Keyed storage of note records.

Repositories hold no business rules. They expose get/put/delete by id, scans by
``(project_id, parent_id)`` and by project, and the ``commit``/``rollback`` pair
the tree services use to make each operation all-or-nothing.
"""

from abc import ABC, abstractmethod
from typing import Dict, List, Optional

from sqlalchemy.orm import Session

from deck_backend.app.core.errors import NotFound
from deck_backend.app.models.note import Note


class NoteRepository(ABC):
    """Interface for note storage, independent of the backing technology."""

    @abstractmethod
    def get(self, note_id: int) -> Note:
        """Return the note or raise ``NotFound``."""

    @abstractmethod
    def find(self, note_id: int) -> Optional[Note]:
        """Return the note or ``None``."""

    @abstractmethod
    def put(self, note: Note) -> Note:
        """Insert or replace a note; assigns ``id`` on insert."""

    @abstractmethod
    def delete(self, note_id: int) -> None:
        """Remove a single note. Children are not touched."""

    @abstractmethod
    def list_children(self, project_id: int, parent_id: Optional[int]) -> List[Note]:
        """Direct children of ``parent_id`` (``None`` for roots). Order is not guaranteed."""

    @abstractmethod
    def list_all(self, project_id: int) -> List[Note]:
        """Every note of the project."""

    @abstractmethod
    def commit(self) -> None:
        pass

    @abstractmethod
    def rollback(self) -> None:
        pass


class SQLAlchemyNoteRepository(NoteRepository):
    """Repository backed by a SQLAlchemy session."""

    def __init__(self, db: Session):
        self.db = db

    def get(self, note_id: int) -> Note:
        note = self.find(note_id)
        if note is None:
            raise NotFound(f"Note {note_id} not found")
        return note

    def find(self, note_id: int) -> Optional[Note]:
        return self.db.get(Note, note_id)

    def put(self, note: Note) -> Note:
        self.db.add(note)
        self.db.flush()
        return note

    def delete(self, note_id: int) -> None:
        note = self.get(note_id)
        self.db.delete(note)
        # Flush per row so callers control the order children and parents disappear in
        self.db.flush()

    def list_children(self, project_id: int, parent_id: Optional[int]) -> List[Note]:
        query = self.db.query(Note).filter(Note.project_id == project_id)
        if parent_id is None:
            query = query.filter(Note.parent_id.is_(None))
        else:
            query = query.filter(Note.parent_id == parent_id)
        return query.order_by(Note.id.asc()).all()

    def list_all(self, project_id: int) -> List[Note]:
        return self.db.query(Note).filter(Note.project_id == project_id).order_by(Note.id.asc()).all()

    def commit(self) -> None:
        self.db.commit()

    def rollback(self) -> None:
        self.db.rollback()


class InMemoryNoteRepository(NoteRepository):
    """Dictionary-backed repository.

    Notes are copied on the way in and out, so callers can only change stored
    state through ``put``. The first write after a commit snapshots the table;
    ``rollback`` restores that snapshot.
    """

    def __init__(self):
        self._notes: Dict[int, Note] = {}
        self._snapshot: Optional[Dict[int, Note]] = None
        self._next_id = 1

    def _begin_write(self) -> None:
        if self._snapshot is None:
            self._snapshot = dict(self._notes)

    def get(self, note_id: int) -> Note:
        note = self.find(note_id)
        if note is None:
            raise NotFound(f"Note {note_id} not found")
        return note

    def find(self, note_id: int) -> Optional[Note]:
        note = self._notes.get(note_id)
        return note.copy() if note is not None else None

    def put(self, note: Note) -> Note:
        self._begin_write()
        if note.id is None:
            note.id = self._next_id
            self._next_id += 1
        else:
            self._next_id = max(self._next_id, note.id + 1)
        self._notes[note.id] = note.copy()
        return note

    def delete(self, note_id: int) -> None:
        if note_id not in self._notes:
            raise NotFound(f"Note {note_id} not found")
        self._begin_write()
        del self._notes[note_id]

    def list_children(self, project_id: int, parent_id: Optional[int]) -> List[Note]:
        return [
            note.copy()
            for note in self._notes.values()
            if note.project_id == project_id and note.parent_id == parent_id
        ]

    def list_all(self, project_id: int) -> List[Note]:
        return [note.copy() for note in self._notes.values() if note.project_id == project_id]

    def commit(self) -> None:
        self._snapshot = None

    def rollback(self) -> None:
        if self._snapshot is not None:
            self._notes = self._snapshot
            self._snapshot = None
