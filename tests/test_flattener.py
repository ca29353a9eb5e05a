from deck_backend.app.crud.note_repository import InMemoryNoteRepository
from deck_backend.app.db.base import Base  # noqa: F401
from deck_backend.app.models.note import Note
from deck_backend.app.services.flattener import build_forest, flatten_project, iter_flattened, iter_project
from deck_backend.app.services.note_tree import NoteTree


def outline():
    repo = InMemoryNoteRepository()
    tree = NoteTree(repo)
    agenda = tree.create(1, None, "Agenda\n- goals")
    history = tree.create(1, None, "History")
    tree.create(1, agenda.id, "Goals")
    early = tree.create(1, history.id, "Early days")
    tree.create(1, early.id, "\n\n  Founding  \nmore")
    tree.create(1, history.id, "Today")
    tree.create(1, None, "Questions")
    tree.reorder(history.id, 0)
    return repo


def test_depth_first_order_respects_sibling_keys():
    repo = outline()
    flat = flatten_project(repo, 1)
    assert [f.title for f in flat] == ["History", "Early days", "Founding", "Today", "Agenda", "Goals", "Questions"]
    assert [f.depth for f in flat] == [0, 1, 2, 1, 0, 1, 0]
    assert [f.index for f in flat] == list(range(7))


def test_flattening_is_recomputed_per_call():
    repo = outline()
    first = [f.note.id for f in iter_project(repo, 1)]
    assert [f.note.id for f in iter_project(repo, 1)] == first

    tree = NoteTree(repo)
    tree.reorder(first[-1], 0)
    assert [f.note.id for f in iter_project(repo, 1)][0] == first[-1]


def test_unreachable_notes_are_skipped():
    notes = [
        Note(id=1, project_id=1, parent_id=None, order_key=0, content="root"),
        Note(id=2, project_id=1, parent_id=99, order_key=0, content="dangling"),
        Note(id=3, project_id=1, parent_id=4, order_key=0, content="loop a"),
        Note(id=4, project_id=1, parent_id=3, order_key=0, content="loop b"),
    ]
    assert [f.note.content for f in iter_flattened(notes)] == ["root"]


def test_deep_outline_flattens_without_recursion():
    notes = [Note(id=1, project_id=1, parent_id=None, order_key=0, content="level 0")]
    for depth in range(1, 5000):
        notes.append(Note(id=depth + 1, project_id=1, parent_id=depth, order_key=0, content=f"level {depth}"))
    flat = list(iter_flattened(notes))
    assert len(flat) == 5000
    assert flat[-1].depth == 4999


def test_forest_rebuilt_from_flattened_sequence_matches_tree():
    repo = outline()
    flat = flatten_project(repo, 1)
    forest = build_forest(f.note for f in flat)

    def shape(nodes):
        return [(node.note.id, shape(node.children)) for node in nodes]

    def expected(parent_id):
        children = sorted(repo.list_children(1, parent_id), key=lambda n: n.order_key)
        return [(child.id, expected(child.id)) for child in children]

    assert shape(forest) == expected(None)

    # Re-flattening the rebuilt forest gives the same slide order
    order = []
    pending = list(reversed(forest))
    while pending:
        node = pending.pop()
        order.append(node.note.id)
        pending.extend(reversed(node.children))
    assert order == [f.note.id for f in flat]
