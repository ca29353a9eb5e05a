"""Linearize a project's outline into presentation order.

The sequence is a depth-first pre-order walk where each sibling group is
visited by ascending order key. It is recomputed from the stored notes on
every call.
"""

from collections import defaultdict
from dataclasses import dataclass, field
from typing import Dict, Iterable, Iterator, List, Optional

from deck_backend.app.crud.note_repository import NoteRepository
from deck_backend.app.models.note import Note
from deck_backend.app.services.ordering import sort_siblings


@dataclass
class FlatNote:
    index: int
    depth: int
    note: Note

    @property
    def title(self) -> str:
        return self.note.title


@dataclass
class TreeNode:
    note: Note
    children: List["TreeNode"] = field(default_factory=list)


def _children_by_parent(notes: Iterable[Note]) -> Dict[Optional[int], List[Note]]:
    grouped: Dict[Optional[int], List[Note]] = defaultdict(list)
    for note in notes:
        grouped[note.parent_id].append(note)
    return {parent_id: sort_siblings(group) for parent_id, group in grouped.items()}


def iter_flattened(notes: Iterable[Note]) -> Iterator[FlatNote]:
    """Yield notes in slide order. Notes not reachable from a root are skipped."""
    children = _children_by_parent(notes)
    stack = [(note, 0) for note in reversed(children.get(None, []))]
    seen = set()
    index = 0
    while stack:
        note, depth = stack.pop()
        if note.id in seen:
            continue
        seen.add(note.id)
        yield FlatNote(index=index, depth=depth, note=note)
        index += 1
        for child in reversed(children.get(note.id, [])):
            stack.append((child, depth + 1))


def iter_project(repo: NoteRepository, project_id: int) -> Iterator[FlatNote]:
    return iter_flattened(repo.list_all(project_id))


def flatten_project(repo: NoteRepository, project_id: int) -> List[FlatNote]:
    return list(iter_project(repo, project_id))


def build_forest(notes: Iterable[Note]) -> List[TreeNode]:
    """Rebuild the nested outline from notes using only ``parent_id`` and ``order_key``."""
    nodes = {note.id: TreeNode(note=note) for note in notes}
    roots: List[TreeNode] = []
    for node in nodes.values():
        parent = nodes.get(node.note.parent_id) if node.note.parent_id is not None else None
        if parent is None:
            roots.append(node)
        else:
            parent.children.append(node)

    def _sort(group: List[TreeNode]) -> List[TreeNode]:
        ordered = sort_siblings(n.note for n in group)
        by_id = {n.note.id: n for n in group}
        return [by_id[note.id] for note in ordered]

    roots = _sort(roots)
    pending = list(roots)
    while pending:
        node = pending.pop()
        node.children = _sort(node.children)
        pending.extend(node.children)
    return roots
