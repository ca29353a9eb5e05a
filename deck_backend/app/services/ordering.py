"""Sibling ordering for notes.

Order keys are dense-ish integers scoped to one ``(project_id, parent_id)``
group. New notes are appended at ``max + 1``; explicit positions renumber the
whole group instead of squeezing fractional keys between neighbours.
"""

from typing import Iterable, List, Optional, Tuple

from deck_backend.app.core.errors import InvalidParent
from deck_backend.app.core.time import utc_now
from deck_backend.app.crud.note_repository import NoteRepository
from deck_backend.app.models.note import Note


def sibling_sort_key(note: Note) -> Tuple[int, int]:
    # Equal keys only exist in legacy data; the most recently inserted note wins the earlier slot.
    return (note.order_key or 0, -(note.id or 0))


def sort_siblings(siblings: Iterable[Note]) -> List[Note]:
    return sorted(siblings, key=sibling_sort_key)


def resolve_parent(repo: NoteRepository, project_id: int, parent_id: Optional[int]) -> Optional[Note]:
    """Return the parent note, ``None`` for the root group, or raise ``InvalidParent``."""
    if parent_id is None:
        return None
    parent = repo.find(parent_id)
    if parent is None:
        raise InvalidParent(f"Parent note {parent_id} does not exist")
    if parent.project_id != project_id:
        raise InvalidParent(f"Parent note {parent_id} belongs to another project")
    return parent


def load_siblings(
    repo: NoteRepository, project_id: int, parent_id: Optional[int], exclude_id: Optional[int] = None
) -> List[Note]:
    resolve_parent(repo, project_id, parent_id)
    return sort_siblings(n for n in repo.list_children(project_id, parent_id) if n.id != exclude_id)


def next_order_key(
    repo: NoteRepository, project_id: int, parent_id: Optional[int], exclude_id: Optional[int] = None
) -> int:
    """Append position: one past the largest key in the group, or 0 for an empty group."""
    siblings = load_siblings(repo, project_id, parent_id, exclude_id=exclude_id)
    if not siblings:
        return 0
    return max(n.order_key for n in siblings) + 1


def reserve_order_key(repo: NoteRepository, project_id: int, parent_id: Optional[int], order_key: int) -> int:
    """Free ``order_key`` in the group for a note about to be inserted there.

    When the key is taken, it and every larger key shift up by one so the newcomer
    lands in front of the previous holder.
    """
    siblings = load_siblings(repo, project_id, parent_id)
    if any(n.order_key == order_key for n in siblings):
        for sibling in sorted(siblings, key=sibling_sort_key, reverse=True):
            if sibling.order_key >= order_key:
                sibling.order_key += 1
                repo.put(sibling)
    return order_key


def renumber(repo: NoteRepository, siblings: Iterable[Note]) -> int:
    """Rewrite keys of an already ordered group to ``0..n-1``. Returns how many changed."""
    changed = 0
    for position, sibling in enumerate(siblings):
        if sibling.order_key != position:
            sibling.order_key = position
            repo.put(sibling)
            changed += 1
    return changed


def renumber_group(repo: NoteRepository, project_id: int, parent_id: Optional[int]) -> int:
    return renumber(repo, sort_siblings(repo.list_children(project_id, parent_id)))


def place_at_index(repo: NoteRepository, note: Note, target_index: int) -> Note:
    """Move ``note`` to ``target_index`` inside its current sibling group.

    The index is clamped to the group size. The note takes the slot and the
    previous occupant moves one step right; the group is renumbered densely.
    """
    siblings = load_siblings(repo, note.project_id, note.parent_id, exclude_id=note.id)
    index = max(0, min(target_index, len(siblings)))
    siblings.insert(index, note)
    for position, sibling in enumerate(siblings):
        if sibling is note:
            note.order_key = position
            note.updated_at = utc_now()
            repo.put(note)
        elif sibling.order_key != position:
            sibling.order_key = position
            repo.put(sibling)
    return note
