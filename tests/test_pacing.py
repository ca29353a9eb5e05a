from dataclasses import dataclass
from datetime import datetime
from typing import Optional

import pytest

from deck_backend.app.core.errors import MalformedTime
from deck_backend.app.services import pacing


@dataclass
class Slide:
    id: int
    time: Optional[str] = None


def deck(*markers):
    return [Slide(id=i + 1, time=marker) for i, marker in enumerate(markers)]


def at(hour, minute, second=0):
    return datetime(2026, 3, 14, hour, minute, second)


@pytest.mark.parametrize(
    "marker, minutes",
    [("10:00", 600), ("9:05", 545), (" 23:59 ", 1439), ("00:00", 0)],
)
def test_parse_time_marker(marker, minutes):
    assert pacing.parse_time_marker(marker) == minutes


@pytest.mark.parametrize("marker", ["", "10", "1000", "24:00", "12:60", "noon", "10:5", "1:2:3"])
def test_malformed_markers(marker):
    with pytest.raises(MalformedTime):
        pacing.parse_time_marker(marker)
    assert pacing.marker_minutes(marker) is None


def test_malformed_markers_are_not_anchors():
    slides = deck("10:00", "soon", None, "10:30")
    assert [a.index for a in pacing.find_anchors(slides)] == [0, 3]


def test_interpolates_untimed_slides_between_anchors():
    slides = deck("10:00", None, None, None, None, "10:10")
    assert pacing.expected_minutes(slides, 2) == pytest.approx(604)
    assert pacing.format_clock(pacing.expected_minutes(slides, 2)) == "10:04"
    assert pacing.expected_minutes(slides, 0) == 600
    assert pacing.expected_minutes(slides, 5) == 610


def test_interpolation_wraps_past_midnight():
    slides = deck("23:50", None, "00:10")
    assert pacing.expected_minutes(slides, 1) == pytest.approx(0)


def test_no_expected_time_outside_anchors():
    slides = deck(None, "10:00", None)
    assert pacing.expected_minutes(slides, 0) is None
    assert pacing.expected_minutes(slides, 2) is None


def test_duration_crosses_midnight():
    slides = deck("23:55", None, "00:05")
    assert pacing.slide_durations(slides)[0] == pytest.approx(10)


def test_durations_floor_default_and_share():
    slides = deck("10:00", "10:00", None, None, "10:06", None)
    durations = pacing.slide_durations(slides)
    assert durations[0] == pytest.approx(10 / 60)  # zero gap floored to ten seconds
    assert durations[1] == pytest.approx(6)
    assert durations[2] == pytest.approx(2)
    assert durations[4] == pytest.approx(1)  # last anchor gets the default
    assert durations[5] == pytest.approx(1)


@pytest.mark.parametrize(
    "raw, folded",
    [(0, 0), (720, 720), (-720, 720), (721, -719), (-1430, 10), (1435, -5)],
)
def test_normalize_drift_range(raw, folded):
    assert pacing.normalize_drift(raw) == pytest.approx(folded)


def test_drift_classification_and_labels():
    assert pacing.measure_drift(600, 600.5).status == "on_time"
    assert pacing.measure_drift(600, 601).label == "On time"

    behind = pacing.measure_drift(600, 605)
    assert (behind.status, behind.label) == ("behind", "5 minutes behind")

    ahead = pacing.measure_drift(600, 535)
    assert (ahead.status, ahead.label) == ("ahead", "1 hour 5 minutes ahead")

    wrapped = pacing.measure_drift(1435, 2)
    assert wrapped.minutes == pytest.approx(7)
    assert wrapped.status == "behind"


def test_whole_hours_drop_zero_minutes():
    assert pacing.measure_drift(600, 659.7).label == "1 hour behind"
    assert pacing.describe_drift(-120, "ahead") == "2 hours ahead"
    assert pacing.describe_drift(61, "behind") == "1 hour 1 minute behind"


def test_compute_pacing_for_interpolated_slide():
    slides = deck("10:00", None, None, None, None, "10:10")
    result = pacing.compute_pacing(slides, 2, at(10, 7))
    assert result.note_id == 3
    assert result.expected_time == "10:04"
    assert result.drift.status == "behind"
    assert result.drift.minutes == pytest.approx(3)
    assert result.duration_minutes == pytest.approx(2)
    assert (result.previous_anchor_index, result.next_anchor_index) == (0, 5)


def test_compute_pacing_without_anchors_has_no_drift():
    result = pacing.compute_pacing(deck(None, None), 1, at(9, 0))
    assert result.expected_time is None
    assert result.drift is None
    assert result.duration_minutes == pytest.approx(1)


def test_compute_pacing_out_of_range_has_nothing_to_show():
    for slides, index in ((deck("10:00"), 3), ([], 0)):
        result = pacing.compute_pacing(slides, index, at(10, 0))
        assert result.index == index
        assert result.note_id is None
        assert result.expected_time is None
        assert result.drift is None
        assert result.should_show is False
        assert result.expected_slide_index == index
        assert result.duration_minutes == pytest.approx(1)


def test_slide_progress_between_anchors():
    slides = deck("10:00", None, None, None, None, "10:10")

    behind = pacing.compute_pacing(slides, 2, at(10, 6))
    assert behind.should_show is True
    assert behind.percent_complete == pytest.approx(0.4)
    assert behind.expected_slide_index == 3
    assert behind.slide_difference == -1

    ahead = pacing.compute_pacing(slides, 4, at(10, 2))
    assert ahead.percent_complete == pytest.approx(0.8)
    assert ahead.expected_slide_index == 1
    assert ahead.slide_difference == 3


def test_slide_progress_clamps_clock_to_segment():
    slides = deck("10:00", None, None, None, None, "10:10")

    early = pacing.compute_pacing(slides, 1, at(9, 50))
    assert early.expected_slide_index == 0
    assert early.slide_difference == 1

    late = pacing.compute_pacing(slides, 1, at(11, 0))
    assert late.expected_slide_index == 5
    assert late.slide_difference == -4


def test_slide_progress_starts_at_current_anchor():
    slides = deck("10:00", None, None, None, None, "10:10")
    result = pacing.compute_pacing(slides, 0, at(10, 4))
    assert result.percent_complete == 0
    assert result.expected_slide_index == 2
    assert result.slide_difference == -2


def test_slide_difference_is_capped():
    slides = deck("10:00", *([None] * 60), "11:00")
    result = pacing.compute_pacing(slides, 0, at(10, 50))
    assert result.expected_slide_index == 51
    assert result.slide_difference == -pacing.MAX_SLIDE_DIFFERENCE


def test_slide_progress_needs_a_following_anchor():
    last_anchor = pacing.compute_pacing(deck(None, "10:00", None), 2, at(10, 30))
    assert last_anchor.should_show is True
    assert last_anchor.expected_slide_index == 2
    assert (last_anchor.slide_difference, last_anchor.percent_complete) == (0, 0)

    untimed = pacing.compute_pacing(deck(None, None), 0, at(10, 30))
    assert untimed.should_show is False



def test_segment_summary():
    slides = deck("09:00", None, None, "09:09")
    summary = pacing.segment_summary(slides, 0)
    assert summary.slide_count == 3
    assert summary.total_minutes == 9
    assert summary.formatted_per_slide == "3:00"
    assert (summary.start_time, summary.end_time) == ("09:00", "09:09")
    assert pacing.segment_summary(slides, 1) is None
    assert pacing.segment_summary(slides, 3) is None


def test_time_distribution_skips_empty_segments():
    slides = deck("10:00", "10:00", None, "10:20", "23:50", "00:20")
    segments = pacing.time_distribution(slides)
    assert [(s.start_time, s.end_time, s.minutes) for s in segments] == [
        ("10:00", "10:20", 20),
        ("10:20", "23:50", 810),
        ("23:50", "00:20", 30),
    ]
