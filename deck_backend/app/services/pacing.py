"""Presentation pacing derived from sparse ``HH:MM`` markers on slides.

Slides carrying a valid marker are anchors. Everything else (durations,
expected times of untimed slides, live drift) is computed from the anchors'
positions in the flattened slide sequence. All clock values are minutes past
midnight; spans that go backwards are taken to cross midnight.
"""

import re
from dataclasses import dataclass
from datetime import datetime
from typing import List, Optional, Sequence

from deck_backend.app.core.errors import MalformedTime
from deck_backend.app.core.settings import get_settings

MINUTES_PER_DAY = 24 * 60
HALF_DAY = 12 * 60
MAX_SLIDE_DIFFERENCE = 25

_MARKER_RE = re.compile(r"^\s*(\d{1,2}):(\d{2})\s*$")


@dataclass
class Anchor:
    index: int
    minutes: int


@dataclass
class Drift:
    minutes: float
    status: str
    label: str


@dataclass
class PacingResult:
    index: int
    note_id: Optional[int]
    duration_minutes: float
    expected_minutes: Optional[float] = None
    expected_time: Optional[str] = None
    drift: Optional[Drift] = None
    previous_anchor_index: Optional[int] = None
    next_anchor_index: Optional[int] = None
    percent_complete: float = 0.0
    expected_slide_index: int = 0
    slide_difference: int = 0
    should_show: bool = False


@dataclass
class SegmentSummary:
    slide_count: int
    total_minutes: float
    minutes_per_slide: float
    formatted_per_slide: str
    start_time: str
    end_time: str


@dataclass
class TimeSegment:
    start_index: int
    end_index: int
    start_time: str
    end_time: str
    minutes: float
    slide_count: int


def parse_time_marker(value: str) -> int:
    """Parse ``H:MM`` or ``HH:MM`` into minutes past midnight."""
    match = _MARKER_RE.match(value or "")
    if not match:
        raise MalformedTime(f"Not an HH:MM marker: {value!r}")
    hours, minutes = int(match.group(1)), int(match.group(2))
    if hours > 23 or minutes > 59:
        raise MalformedTime(f"Out of range marker: {value!r}")
    return hours * 60 + minutes


def marker_minutes(value: Optional[str]) -> Optional[int]:
    """Minutes for a marker, or ``None`` when it is missing or malformed."""
    if value is None:
        return None
    try:
        return parse_time_marker(value)
    except MalformedTime:
        return None


def format_clock(minutes: float) -> str:
    total = int(minutes) % MINUTES_PER_DAY
    return f"{total // 60:02d}:{total % 60:02d}"


def format_minutes_seconds(minutes: float) -> str:
    total_seconds = round(minutes * 60)
    return f"{total_seconds // 60}:{total_seconds % 60:02d}"


def forward_span(start: float, end: float) -> float:
    span = end - start
    if span < 0:
        span += MINUTES_PER_DAY
    return span


def normalize_drift(minutes: float) -> float:
    """Fold a clock difference into ``(-12h, +12h]``."""
    folded = minutes % MINUTES_PER_DAY
    if folded > HALF_DAY:
        folded -= MINUTES_PER_DAY
    return folded


def clock_minutes(now: datetime) -> float:
    return now.hour * 60 + now.minute + now.second / 60


def find_anchors(slides: Sequence) -> List[Anchor]:
    anchors = []
    for index, slide in enumerate(slides):
        minutes = marker_minutes(getattr(slide, "time", None))
        if minutes is not None:
            anchors.append(Anchor(index=index, minutes=minutes))
    return anchors


def _surrounding_anchors(anchors: List[Anchor], index: int):
    previous = next_ = None
    for anchor in anchors:
        if anchor.index < index:
            previous = anchor
        elif anchor.index > index:
            next_ = anchor
            break
    return previous, next_


def _anchor_at(anchors: List[Anchor], index: int) -> Optional[Anchor]:
    for anchor in anchors:
        if anchor.index == index:
            return anchor
    return None


def slide_durations(slides: Sequence) -> List[float]:
    """Duration in minutes for every slide.

    An anchor lasts until the next anchor. Untimed slides inside a segment get an
    equal share of it; slides with no following anchor get the default.
    """
    settings = get_settings()
    default = settings.default_slide_seconds / 60
    floor = settings.min_slide_seconds / 60
    anchors = find_anchors(slides)
    durations: List[float] = []
    for index in range(len(slides)):
        own = _anchor_at(anchors, index)
        previous, next_ = _surrounding_anchors(anchors, index)
        if own is not None:
            if next_ is None:
                durations.append(default)
            else:
                durations.append(max(forward_span(own.minutes, next_.minutes), floor))
        elif previous is not None and next_ is not None:
            share = forward_span(previous.minutes, next_.minutes) / (next_.index - previous.index)
            durations.append(max(share, floor))
        else:
            durations.append(default)
    return durations


def expected_minutes(slides: Sequence, index: int) -> Optional[float]:
    """When the slide at ``index`` should be on screen, in minutes past midnight."""
    anchors = find_anchors(slides)
    own = _anchor_at(anchors, index)
    if own is not None:
        return float(own.minutes)
    previous, next_ = _surrounding_anchors(anchors, index)
    if previous is None or next_ is None:
        return None
    steps = next_.index - previous.index
    if steps < 2:
        return None
    span = forward_span(previous.minutes, next_.minutes)
    expected = previous.minutes + span * (index - previous.index) / steps
    return expected % MINUTES_PER_DAY


def _plural(count: int, word: str) -> str:
    return f"{count} {word}{'' if count == 1 else 's'}"


def describe_drift(minutes: float, status: str) -> str:
    if status == "on_time":
        return "On time"
    direction = "behind" if status == "behind" else "ahead"
    magnitude = round(abs(minutes))
    if magnitude >= 60:
        hours, rest = divmod(magnitude, 60)
        if rest == 0:
            return f"{_plural(hours, 'hour')} {direction}"
        return f"{_plural(hours, 'hour')} {_plural(rest, 'minute')} {direction}"
    return f"{_plural(magnitude, 'minute')} {direction}"


def measure_drift(expected: float, now: float) -> Drift:
    """Positive drift means the presenter is behind schedule."""
    tolerance = get_settings().on_time_tolerance_minutes
    minutes = normalize_drift(now - expected)
    if abs(minutes) <= tolerance:
        status = "on_time"
    elif minutes > 0:
        status = "behind"
    else:
        status = "ahead"
    return Drift(minutes=minutes, status=status, label=describe_drift(minutes, status))


def _slide_progress(result: PacingResult, start: Anchor, end: Anchor, now_minutes: float) -> None:
    """Fill the slide-based indicator for a slide inside the segment ``start..end``.

    ``expected_slide_index`` is where the wall clock says the presenter should be;
    a positive ``slide_difference`` means they are ahead of it.
    """
    steps = end.index - start.index
    result.percent_complete = min(1.0, max(0.0, (result.index - start.index) / steps))
    span = forward_span(start.minutes, end.minutes)
    if span <= 0:
        return
    elapsed = normalize_drift(now_minutes - start.minutes)
    time_progress = min(1.0, max(0.0, elapsed / span))
    result.expected_slide_index = round(start.index + time_progress * steps)
    difference = result.index - result.expected_slide_index
    result.slide_difference = max(-MAX_SLIDE_DIFFERENCE, min(MAX_SLIDE_DIFFERENCE, difference))


def compute_pacing(slides: Sequence, current_index: int, now: datetime) -> PacingResult:
    """Pacing for the slide at ``current_index``.

    An empty deck or an index past the end yields a result with nothing to show.
    """
    if not 0 <= current_index < len(slides):
        return PacingResult(
            index=current_index,
            note_id=None,
            duration_minutes=get_settings().default_slide_seconds / 60,
            expected_slide_index=current_index,
        )
    anchors = find_anchors(slides)
    own = _anchor_at(anchors, current_index)
    previous, next_ = _surrounding_anchors(anchors, current_index)
    expected = expected_minutes(slides, current_index)
    result = PacingResult(
        index=current_index,
        note_id=getattr(slides[current_index], "id", None),
        duration_minutes=slide_durations(slides)[current_index],
        previous_anchor_index=previous.index if previous else None,
        next_anchor_index=next_.index if next_ else None,
        expected_slide_index=current_index,
        should_show=own is not None or previous is not None or next_ is not None,
    )
    now_minutes = clock_minutes(now)
    if expected is not None:
        result.expected_minutes = expected
        result.expected_time = format_clock(expected)
        result.drift = measure_drift(expected, now_minutes)
    start = own if own is not None else previous
    if start is not None and next_ is not None:
        _slide_progress(result, start, next_, now_minutes)
    return result


def segment_summary(slides: Sequence, index: int) -> Optional[SegmentSummary]:
    """Span from the timed slide at ``index`` to the next timed slide."""
    anchors = find_anchors(slides)
    own = _anchor_at(anchors, index)
    if own is None:
        return None
    _, next_ = _surrounding_anchors(anchors, index)
    if next_ is None:
        return None
    slide_count = next_.index - own.index
    total = forward_span(own.minutes, next_.minutes)
    per_slide = total / slide_count
    return SegmentSummary(
        slide_count=slide_count,
        total_minutes=total,
        minutes_per_slide=per_slide,
        formatted_per_slide=format_minutes_seconds(per_slide),
        start_time=format_clock(own.minutes),
        end_time=format_clock(next_.minutes),
    )


def time_distribution(slides: Sequence) -> List[TimeSegment]:
    anchors = find_anchors(slides)
    segments = []
    for start, end in zip(anchors, anchors[1:]):
        minutes = forward_span(start.minutes, end.minutes)
        if minutes <= 0:
            continue
        segments.append(
            TimeSegment(
                start_index=start.index,
                end_index=end.index,
                start_time=format_clock(start.minutes),
                end_time=format_clock(end.minutes),
                minutes=minutes,
                slide_count=end.index - start.index,
            )
        )
    return segments
