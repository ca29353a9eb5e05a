"""Note model: one node of a project's outline and one presentation slide.

``parent_id`` is a plain back-reference; child lists are always derived by
querying ``(project_id, parent_id)`` and sorting by ``order_key``.
"""

from sqlalchemy import JSON, Column, DateTime, ForeignKey, Index, Integer, String, Text

from deck_backend.app.core.time import utc_now
from deck_backend.app.db.base_class import Base

NOTE_FIELDS = (
    "id",
    "project_id",
    "parent_id",
    "order_key",
    "content",
    "time",
    "images",
    "url",
    "link_text",
    "youtube_link",
    "created_at",
    "updated_at",
)


class Note(Base):
    __tablename__ = "notes"

    id = Column(Integer, primary_key=True, index=True)
    project_id = Column(Integer, ForeignKey("projects.id", ondelete="CASCADE"), nullable=False)
    parent_id = Column(Integer, ForeignKey("notes.id", ondelete="CASCADE"), nullable=True)
    order_key = Column(Integer, nullable=False, default=0)
    content = Column(Text, nullable=False, default="")
    time = Column(String(16), nullable=True)
    images = Column(JSON, nullable=False, default=list)
    url = Column(String, nullable=True)
    link_text = Column(String, nullable=True)
    youtube_link = Column(String, nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utc_now)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=utc_now)

    __table_args__ = (Index("ix_notes_project_parent", "project_id", "parent_id"),)

    @property
    def title(self) -> str:
        for line in (self.content or "").splitlines():
            if line.strip():
                return line.strip()
        return ""

    def copy(self) -> "Note":
        """Detached copy carrying the same column values."""
        values = {field: getattr(self, field) for field in NOTE_FIELDS}
        values["images"] = list(values["images"] or [])
        return Note(**values)

    def __repr__(self) -> str:
        return f"<Note id={self.id} project={self.project_id} parent={self.parent_id} order={self.order_key}>"
