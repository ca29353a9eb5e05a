import pytest

from deck_backend.app.core.errors import NotFound
from deck_backend.app.crud.note_repository import InMemoryNoteRepository, SQLAlchemyNoteRepository
from deck_backend.app.db.base import Base
from deck_backend.app.db.session import SessionLocal, engine
from deck_backend.app.models.note import Note
from deck_backend.app.models.project import Project
from deck_backend.app.models.user import User


@pytest.fixture(autouse=True)
def setup_db():
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture(params=["memory", "sqlalchemy"])
def repo(request):
    if request.param == "memory":
        yield InMemoryNoteRepository()
        return
    db = SessionLocal()
    user = User(email="repo@example.com", hashed_password="x")
    db.add(user)
    db.flush()
    db.add_all([Project(owner_id=user.id, name="Talk"), Project(owner_id=user.id, name="Other")])
    db.commit()
    try:
        yield SQLAlchemyNoteRepository(db)
    finally:
        db.close()


def make_note(project_id=1, parent_id=None, order_key=0, content="Slide"):
    return Note(project_id=project_id, parent_id=parent_id, order_key=order_key, content=content, images=[])


def test_put_assigns_id_and_get_returns_note(repo):
    note = repo.put(make_note(content="Intro"))
    repo.commit()
    assert note.id is not None
    assert repo.get(note.id).content == "Intro"


def test_get_missing_raises_not_found(repo):
    with pytest.raises(NotFound):
        repo.get(999)
    assert repo.find(999) is None


def test_list_children_scopes_by_project_and_parent(repo):
    root = repo.put(make_note(content="root"))
    repo.put(make_note(parent_id=root.id, content="child"))
    repo.put(make_note(project_id=2, content="elsewhere"))
    repo.commit()

    assert [n.content for n in repo.list_children(1, None)] == ["root"]
    assert [n.content for n in repo.list_children(1, root.id)] == ["child"]
    assert {n.content for n in repo.list_all(1)} == {"root", "child"}
    assert [n.content for n in repo.list_all(2)] == ["elsewhere"]


def test_delete_removes_only_that_note(repo):
    root = repo.put(make_note(content="root"))
    child = repo.put(make_note(parent_id=root.id, content="child"))
    repo.commit()

    repo.delete(child.id)
    repo.commit()
    assert repo.find(child.id) is None
    assert repo.find(root.id) is not None


def test_rollback_discards_uncommitted_writes(repo):
    kept = repo.put(make_note(content="kept"))
    repo.commit()

    repo.put(make_note(content="scratch"))
    repo.delete(kept.id)
    repo.rollback()

    assert [n.content for n in repo.list_all(1)] == ["kept"]


def test_memory_repository_returns_copies():
    repo = InMemoryNoteRepository()
    note = repo.put(make_note(content="original"))
    repo.commit()

    loaded = repo.get(note.id)
    loaded.content = "edited without put"
    assert repo.get(note.id).content == "original"
