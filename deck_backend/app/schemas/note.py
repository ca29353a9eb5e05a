"""Note schemas for the outline tree."""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


def _blank_to_none(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    value = value.strip()
    return value or None


class NoteMedia(BaseModel):
    time: Optional[str] = None
    images: List[str] = []
    url: Optional[str] = None
    link_text: Optional[str] = None
    youtube_link: Optional[str] = None

    @field_validator("time")
    @classmethod
    def strip_time(cls, value: Optional[str]) -> Optional[str]:
        return _blank_to_none(value)


class NoteCreate(NoteMedia):
    """Schema for creating a note; appended last unless ``order_key`` is given."""

    content: str
    parent_id: Optional[int] = None
    order_key: Optional[int] = Field(default=None, ge=0)


class NoteUpdate(BaseModel):
    """Partial update; only fields present in the request are applied."""

    content: Optional[str] = None
    time: Optional[str] = None
    images: Optional[List[str]] = None
    url: Optional[str] = None
    link_text: Optional[str] = None
    youtube_link: Optional[str] = None

    @field_validator("time")
    @classmethod
    def strip_time(cls, value: Optional[str]) -> Optional[str]:
        return _blank_to_none(value)


class NoteReparent(BaseModel):
    parent_id: Optional[int] = None
    order_key: Optional[int] = Field(default=None, ge=0)


class NoteReorder(BaseModel):
    target_index: int = Field(ge=0)


class NoteRead(BaseModel):
    id: int
    project_id: int
    parent_id: Optional[int]
    order_key: int
    content: str
    time: Optional[str]
    images: List[str]
    url: Optional[str]
    link_text: Optional[str]
    youtube_link: Optional[str]
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class NoteDeleteResponse(BaseModel):
    removed: int


class FlatNoteRead(BaseModel):
    index: int
    depth: int
    title: str
    note: NoteRead

    model_config = ConfigDict(from_attributes=True)
