from __future__ import annotations

from rt_cli.utils.formatting import (
    format_distance,
    format_duration,
    format_pace,
    format_pace_seconds,
    format_rep_distance,
)


def test_format_pace() -> None:
    assert format_pace(3.75) == "3:45/km"
    assert format_pace(5.3) == "5:18/km"
    assert format_pace(5.999) == "6:00/km"
    assert format_pace(None) == "N/A"
    assert format_pace(0) == "N/A"


def test_format_pace_seconds() -> None:
    assert format_pace_seconds(305) == "5:05/km"
    assert format_pace_seconds(None) == "N/A"


def test_format_distance() -> None:
    assert format_distance(800) == "800m"
    assert format_distance(8000) == "8.0km"
    assert format_distance(9940) == "9.9km"
    assert format_distance(21097) == "21km"
    assert format_distance(None) == "0m"


def test_format_rep_distance() -> None:
    assert format_rep_distance(398) == "400m"
    assert format_rep_distance(1000) == "1km"
    assert format_rep_distance(1500) == "1.5km"
    assert format_rep_distance(None) == "?"


def test_format_duration() -> None:
    assert format_duration(3725) == "1:02:05"
    assert format_duration(90) == "1:30"
    assert format_duration(None) == "N/A"
