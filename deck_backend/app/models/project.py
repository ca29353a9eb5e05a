"""Project model: a named forest of notes owned by one user."""

from sqlalchemy import Boolean, Column, DateTime, ForeignKey, Integer, String
from sqlalchemy.orm import relationship

from deck_backend.app.core.time import utc_now
from deck_backend.app.db.base_class import Base
from deck_backend.app.models.user import User  # noqa: F401


class Project(Base):
    __tablename__ = "projects"

    id = Column(Integer, primary_key=True, index=True)
    owner_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    name = Column(String, nullable=False)
    is_locked = Column(Boolean, nullable=False, default=False)
    last_viewed_slide_index = Column(Integer, nullable=False, default=0)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utc_now)

    owner = relationship("User", back_populates="projects")
