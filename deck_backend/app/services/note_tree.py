"""Create, update, move and delete notes while keeping each project's forest valid.

Every public operation is one unit of work against the repository: it commits
when it finishes and rolls back on any error, so readers never see a
half-applied move or a partially deleted subtree.
"""

import logging
from collections import defaultdict
from contextlib import contextmanager
from typing import Any, Callable, Dict, Iterator, List, Optional

from deck_backend.app.core.errors import CycleDetected, ProjectLocked
from deck_backend.app.core.time import utc_now
from deck_backend.app.crud.note_repository import NoteRepository
from deck_backend.app.models.note import Note
from deck_backend.app.services import ordering

logger = logging.getLogger(__name__)

UPDATABLE_FIELDS = ("content", "time", "images", "url", "link_text", "youtube_link")


class NoteTree:
    def __init__(self, repo: NoteRepository, is_locked: Optional[Callable[[int], bool]] = None):
        self.repo = repo
        self._is_locked = is_locked

    @contextmanager
    def _unit_of_work(self, action: str) -> Iterator[None]:
        try:
            yield
            self.repo.commit()
        except Exception as exc:
            self.repo.rollback()
            logger.warning("%s rolled back: %s", action, exc)
            raise

    def _ensure_unlocked(self, project_id: int) -> None:
        if self._is_locked is not None and self._is_locked(project_id):
            raise ProjectLocked(f"Project {project_id} is locked")

    def create(
        self,
        project_id: int,
        parent_id: Optional[int],
        content: str,
        order_key: Optional[int] = None,
        **fields: Any,
    ) -> Note:
        with self._unit_of_work("create note"):
            self._ensure_unlocked(project_id)
            if order_key is None:
                key = ordering.next_order_key(self.repo, project_id, parent_id)
            else:
                key = ordering.reserve_order_key(self.repo, project_id, parent_id, order_key)
            now = utc_now()
            note = Note(
                project_id=project_id,
                parent_id=parent_id,
                order_key=key,
                content=content,
                images=list(fields.pop("images", None) or []),
                created_at=now,
                updated_at=now,
            )
            for field, value in fields.items():
                if field in UPDATABLE_FIELDS:
                    setattr(note, field, value)
            self.repo.put(note)
        logger.info("Created note %s in project %s under %s at %s", note.id, project_id, parent_id, key)
        return note

    def update(self, note_id: int, patch: Dict[str, Any]) -> Note:
        with self._unit_of_work("update note"):
            note = self.repo.get(note_id)
            self._ensure_unlocked(note.project_id)
            for field, value in patch.items():
                if field not in UPDATABLE_FIELDS or (field == "content" and value is None):
                    continue
                if field == "images":
                    value = list(value or [])
                setattr(note, field, value)
            note.updated_at = utc_now()
            self.repo.put(note)
        return note

    def _check_acyclic(self, note: Note, new_parent_id: int) -> None:
        seen = set()
        current: Optional[int] = new_parent_id
        while current is not None:
            if current == note.id:
                raise CycleDetected(f"Note {note.id} cannot be moved under its own descendant {new_parent_id}")
            if current in seen:
                raise CycleDetected(f"Ancestor chain of note {new_parent_id} loops at {current}")
            seen.add(current)
            current = self.repo.get(current).parent_id

    def reparent(self, note_id: int, new_parent_id: Optional[int], order_key: Optional[int] = None) -> Note:
        """Move a note (with its subtree) under ``new_parent_id``.

        Without ``order_key`` the note becomes the last child of its new parent;
        with one it is placed at that index. The old sibling group is renumbered.
        """
        with self._unit_of_work("reparent note"):
            note = self.repo.get(note_id)
            self._ensure_unlocked(note.project_id)
            ordering.resolve_parent(self.repo, note.project_id, new_parent_id)
            if new_parent_id is not None:
                self._check_acyclic(note, new_parent_id)

            old_parent_id = note.parent_id
            note.parent_id = new_parent_id
            if order_key is None:
                note.order_key = ordering.next_order_key(
                    self.repo, note.project_id, new_parent_id, exclude_id=note.id
                )
                note.updated_at = utc_now()
                self.repo.put(note)
            else:
                ordering.place_at_index(self.repo, note, order_key)
            if old_parent_id != new_parent_id:
                ordering.renumber_group(self.repo, note.project_id, old_parent_id)
        logger.info("Moved note %s from %s to %s", note_id, old_parent_id, new_parent_id)
        return note

    def reorder(self, note_id: int, target_index: int) -> Note:
        with self._unit_of_work("reorder note"):
            note = self.repo.get(note_id)
            self._ensure_unlocked(note.project_id)
            ordering.place_at_index(self.repo, note, target_index)
        logger.info("Reordered note %s to index %s", note_id, note.order_key)
        return note

    def _collect_subtree(self, root: Note) -> List[int]:
        order: List[int] = []
        seen = set()
        stack = [root.id]
        while stack:
            current = stack.pop()
            if current in seen:
                continue
            seen.add(current)
            order.append(current)
            for child in self.repo.list_children(root.project_id, current):
                stack.append(child.id)
        return order

    def delete(self, note_id: int, delete_children: bool = True) -> int:
        """Delete a note and return how many notes were removed.

        With ``delete_children`` the whole subtree goes; otherwise the children
        are promoted to the deleted note's parent, after its existing siblings.
        """
        with self._unit_of_work("delete note"):
            note = self.repo.get(note_id)
            self._ensure_unlocked(note.project_id)
            if delete_children:
                doomed = self._collect_subtree(note)
                # Deepest discoveries first so no row outlives its parent
                for doomed_id in reversed(doomed):
                    self.repo.delete(doomed_id)
                removed = len(doomed)
            else:
                children = ordering.sort_siblings(self.repo.list_children(note.project_id, note.id))
                base = ordering.next_order_key(self.repo, note.project_id, note.parent_id, exclude_id=note.id)
                now = utc_now()
                for offset, child in enumerate(children):
                    child.parent_id = note.parent_id
                    child.order_key = base + offset
                    child.updated_at = now
                    self.repo.put(child)
                self.repo.delete(note.id)
                removed = 1
            ordering.renumber_group(self.repo, note.project_id, note.parent_id)
        logger.info("Deleted note %s (%s removed)", note_id, removed)
        return removed

    def normalize_project(self, project_id: int) -> int:
        """Renumber every sibling group of the project to ``0..n-1``."""
        with self._unit_of_work("normalize project"):
            self._ensure_unlocked(project_id)
            groups: Dict[Optional[int], List[Note]] = defaultdict(list)
            for note in self.repo.list_all(project_id):
                groups[note.parent_id].append(note)
            changed = sum(ordering.renumber(self.repo, ordering.sort_siblings(group)) for group in groups.values())
        logger.info("Normalized project %s (%s keys changed)", project_id, changed)
        return changed
