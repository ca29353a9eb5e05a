"""Pacing schemas for presentation playback."""

from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict


class DriftRead(BaseModel):
    minutes: float
    status: Literal["ahead", "behind", "on_time"]
    label: str

    model_config = ConfigDict(from_attributes=True)


class PacingRead(BaseModel):
    index: int
    note_id: Optional[int]
    duration_minutes: float
    expected_minutes: Optional[float] = None
    expected_time: Optional[str] = None
    drift: Optional[DriftRead] = None
    previous_anchor_index: Optional[int] = None
    next_anchor_index: Optional[int] = None
    percent_complete: float = 0.0
    expected_slide_index: int = 0
    slide_difference: int = 0
    should_show: bool = False

    model_config = ConfigDict(from_attributes=True)


class SegmentSummaryRead(BaseModel):
    slide_count: int
    total_minutes: float
    minutes_per_slide: float
    formatted_per_slide: str
    start_time: str
    end_time: str

    model_config = ConfigDict(from_attributes=True)


class TimeSegmentRead(BaseModel):
    start_index: int
    end_index: int
    start_time: str
    end_time: str
    minutes: float
    slide_count: int

    model_config = ConfigDict(from_attributes=True)


class TimeDistributionRead(BaseModel):
    segments: List[TimeSegmentRead]
    total_minutes: float
