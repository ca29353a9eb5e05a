"""Project schemas."""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class ProjectCreate(BaseModel):
    name: str = Field(min_length=1)


class ProjectUpdate(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1)


class ProjectLockUpdate(BaseModel):
    is_locked: bool


class ProjectSlideIndexUpdate(BaseModel):
    last_viewed_slide_index: int = Field(ge=0)


class ProjectRead(BaseModel):
    id: int
    name: str
    is_locked: bool
    last_viewed_slide_index: int
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class ProjectDeleteResponse(BaseModel):
    project_id: int
    notes_removed: int
