"""Canonical per-segment view of laps and splits."""

from __future__ import annotations

import math
import statistics
from dataclasses import dataclass
from typing import Iterable, List, Optional, Sequence, Tuple

from rt_cli.core.models import Lap, SegmentSummary, Split


@dataclass(frozen=True)
class Segment:
    """One lap or split reduced to what the analyzers need."""

    index: int
    source: str  # lap | split
    distance: float
    moving_time: float
    elapsed_time: float
    pace: float  # min/km
    rest: float
    elevation: Optional[float] = None
    avg_hr: Optional[float] = None


def speed_to_pace(speed_m_s: float) -> float:
    """Convert m/s to min/km."""
    return 1000.0 / (speed_m_s * 60.0)


def pace_from_totals(distance: float, moving_time: float) -> Optional[float]:
    """Pace in min/km from distance and moving time, None when undefined."""
    if distance <= 0 or moving_time <= 0:
        return None
    return speed_to_pace(distance / moving_time)


def _finite(value: Optional[float]) -> Optional[float]:
    if value is None:
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    return number if math.isfinite(number) else None


def _segment_pace(distance: float, moving_time: float, average_speed: float) -> Optional[float]:
    if distance <= 0 or moving_time <= 0:
        return None
    speed = average_speed if average_speed > 0 else distance / moving_time
    pace = speed_to_pace(speed)
    return pace if math.isfinite(pace) else None


def _build(
    index: int,
    source: str,
    distance: float,
    moving_time: float,
    elapsed_time: float,
    average_speed: float,
    elevation: Optional[float],
    avg_hr: Optional[float],
) -> Optional[Segment]:
    distance = _finite(distance) or 0.0
    moving_time = _finite(moving_time) or 0.0
    elapsed_time = _finite(elapsed_time) or moving_time
    pace = _segment_pace(distance, moving_time, _finite(average_speed) or 0.0)
    if pace is None:
        return None

    hr = _finite(avg_hr)
    return Segment(
        index=index,
        source=source,
        distance=distance,
        moving_time=moving_time,
        elapsed_time=elapsed_time,
        pace=pace,
        rest=max(0.0, elapsed_time - moving_time),
        elevation=_finite(elevation),
        avg_hr=hr if hr and hr > 0 else None,
    )


def normalize_laps(laps: Iterable[Lap]) -> List[Segment]:
    """Laps as segments; laps without distance or moving time are dropped."""
    segments: List[Segment] = []
    for index, lap in enumerate(laps):
        segment = _build(
            index,
            "lap",
            lap.distance,
            lap.moving_time,
            lap.elapsed_time,
            lap.average_speed,
            lap.total_elevation_gain,
            lap.average_heartrate,
        )
        if segment is not None:
            segments.append(segment)
    return segments


def normalize_splits(splits: Iterable[Split]) -> List[Segment]:
    """Splits as segments; splits without distance or moving time are dropped."""
    segments: List[Segment] = []
    for index, split in enumerate(splits):
        segment = _build(
            index,
            "split",
            split.distance,
            split.moving_time,
            split.elapsed_time,
            split.average_speed,
            split.elevation_difference,
            None,
        )
        if segment is not None:
            segments.append(segment)
    return segments


def mean(values: Sequence[float]) -> float:
    return sum(values) / len(values) if values else 0.0


def coefficient_of_variation(values: Sequence[float]) -> float:
    """Population stddev / mean; 0 for empty or zero-mean input."""
    if len(values) < 2:
        return 0.0
    avg = mean(values)
    if avg <= 0:
        return 0.0
    return statistics.pstdev(values) / avg


def summarize(segments: Sequence[Segment]) -> Optional[SegmentSummary]:
    """Distance, time, and pace for a contiguous run of segments."""
    if not segments:
        return None
    distance = sum(segment.distance for segment in segments)
    time_s = sum(segment.moving_time for segment in segments)
    pace = pace_from_totals(distance, time_s)
    return SegmentSummary(
        distance_m=distance,
        time_s=time_s,
        pace_min_km=pace if pace is not None else mean([s.pace for s in segments]),
        start_index=segments[0].index,
        end_index=segments[-1].index,
    )


def trim_edges(
    segments: Sequence[Segment],
    pace_ratio: float = 1.15,
    max_edge: int = 3,
) -> Tuple[List[Segment], List[Segment], List[Segment]]:
    """
    Split segments into (warmup, main, cooldown).

    Up to ``max_edge`` leading and trailing segments slower than
    ``median pace * pace_ratio`` are treated as warm-up and cool-down.
    """
    items = list(segments)
    if len(items) < 3:
        return [], items, []

    limit = statistics.median([segment.pace for segment in items]) * pace_ratio
    max_edge = int(max_edge)

    warmup_end = 0
    for position in range(min(max_edge, len(items))):
        if items[position].pace > limit:
            warmup_end = position + 1
        else:
            break

    cooldown_start = len(items)
    for position in range(len(items) - 1, max(-1, len(items) - 1 - max_edge), -1):
        if items[position].pace > limit:
            cooldown_start = position
        else:
            break

    if cooldown_start <= warmup_end:
        cooldown_start = len(items)

    return items[:warmup_end], items[warmup_end:cooldown_start], items[cooldown_start:]
