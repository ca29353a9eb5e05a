from deck_backend.app.db.base_class import Base

# Import models to register metadata for Base.metadata.create_all in tests
from deck_backend.app.models.user import User  # noqa: F401
from deck_backend.app.models.project import Project  # noqa: F401
from deck_backend.app.models.note import Note  # noqa: F401
