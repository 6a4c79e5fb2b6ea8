"""Lap-based structure detection: intervals, pyramids, and hill repeats."""

from __future__ import annotations

import logging
import math
from typing import Dict, List, Optional, Sequence

from rt_cli.core.constants import DEFAULT_THRESHOLDS
from rt_cli.core.models import Candidate, Confidence, HillStructure, SeriesStructure, WorkoutType
from rt_cli.core.segments import Segment, mean, pace_from_totals, summarize, trim_edges

logger = logging.getLogger(__name__)


def distances_equal(distances: Sequence[float], tolerance: float = 0.10) -> bool:
    """True when every distance is within ``tolerance`` of the mean."""
    if len(distances) < 2:
        return False
    avg = mean(distances)
    return all(abs(distance - avg) <= avg * tolerance for distance in distances)


def is_pyramid(distances: Sequence[float], tolerance: float = 0.10) -> bool:
    """Strict rise to a single peak, then a mirrored fall (e.g. 400-800-1200-800-400)."""
    count = len(distances)
    if count < 3:
        return False

    peak = max(range(count), key=lambda position: distances[position])
    if peak in (0, count - 1):
        return False
    if any(distances[i] >= distances[i + 1] for i in range(peak)):
        return False
    if any(distances[i] <= distances[i + 1] for i in range(peak, count - 1)):
        return False

    for i in range(count // 2):
        left, right = distances[i], distances[count - 1 - i]
        if abs(left - right) > max(left, right) * tolerance:
            return False
    return True


def _has_rest_structure(laps: Sequence[Segment], min_rest: float, share: float) -> bool:
    rested = sum(1 for lap in laps if lap.rest >= min_rest)
    boundaries = max(len(laps) - 1, 1)
    return rested >= 1 and rested >= boundaries * share


def _average_rest(laps: Sequence[Segment], min_rest: float) -> Optional[float]:
    rests = [lap.rest for lap in laps if lap.rest >= min_rest]
    return round(mean(rests)) if rests else None


def _alternates(labels: Sequence[bool]) -> bool:
    return len(labels) >= 3 and all(labels[i] != labels[i + 1] for i in range(len(labels) - 1))


def _detect_hills(
    laps: Sequence[Segment],
    distance: float,
    has_rest: bool,
    thresholds: Dict[str, float],
) -> Optional[Candidate]:
    paces = sorted(lap.pace for lap in laps)
    fast_half = paces[: max(1, len(paces) // 2)]
    recovery_limit = mean(fast_half) * thresholds["recovery_lap_pace_ratio"]

    is_recovery = [lap.pace > recovery_limit for lap in laps]
    effort = [lap for lap, recovery in zip(laps, is_recovery) if not recovery]
    recovery = [lap for lap, recovery in zip(laps, is_recovery) if recovery]

    if len(effort) < 2:
        return None
    if any(lap.distance >= thresholds["hill_lap_max_m"] for lap in effort):
        return None

    gains = [lap.elevation or 0.0 for lap in effort]
    gain_per_rep = mean(gains)
    if gain_per_rep < thresholds["hill_min_gain_m"]:
        return None

    alternating = bool(recovery) and _alternates(is_recovery)
    if not (has_rest or alternating):
        return None

    if has_rest:
        rest_s = _average_rest(laps, thresholds["min_rest_s"])
    else:
        rest_s = round(mean([lap.moving_time for lap in recovery]))

    logger.debug(
        "Hill repeats: %d efforts, +%.0fm/rep, rest=%s, alternating=%s",
        len(effort),
        gain_per_rep,
        rest_s,
        alternating,
    )
    return Candidate(
        workout_type=WorkoutType.CUESTAS,
        confidence=Confidence.HIGH,
        structure=HillStructure(
            source="laps",
            distance_m=distance,
            repetitions=len(effort),
            rep_distance_m=round(mean([lap.distance for lap in effort])),
            gain_per_rep_m=round(gain_per_rep, 1),
            total_gain_m=round(sum(gains), 1),
            rest_s=rest_s,
        ),
        source="laps",
    )


def _recovery_lap_series(
    laps: Sequence[Segment],
    thresholds: Dict[str, float],
) -> Optional[Candidate]:
    """
    Intervals whose recoveries were lapped separately instead of paused.

    Work laps are at least ``recovery_lap_max_m`` long and run within
    ``work_lap_pace_ratio`` of the fastest half of the laps longer than
    ``work_lap_min_m``. Other laps between the first and last work lap are
    recoveries; the ones outside that range are warm-up and cool-down.
    """
    if len(laps) < 3:
        return None

    long_paces = sorted(lap.pace for lap in laps if lap.distance > thresholds["work_lap_min_m"])
    if len(long_paces) < 2:
        return None
    reference = mean(long_paces[: max(2, math.ceil(len(long_paces) / 2))])
    work_limit = reference * thresholds["work_lap_pace_ratio"]

    is_work = [lap.distance >= thresholds["recovery_lap_max_m"] and lap.pace <= work_limit for lap in laps]
    positions = [i for i, work in enumerate(is_work) if work]
    if len(positions) < 2:
        return None

    first, last = positions[0], positions[-1]
    work = [laps[i] for i in positions]
    recovery = [laps[i] for i in range(first, last + 1) if not is_work[i]]
    blocks = sum(1 for i in positions if i == first or not is_work[i - 1])
    # A steady run with one slow lap has a single long block of work laps.
    if not recovery or blocks * 2 < len(work):
        return None

    tolerance = thresholds["equal_distance_tolerance"]
    distances = [lap.distance for lap in work]
    times = [lap.moving_time for lap in work]
    pace = pace_from_totals(sum(distances), sum(times))
    equal = distances_equal(distances, tolerance)
    structure = SeriesStructure(
        repetitions=len(work),
        variant="equal" if equal else "mixed",
        pace_min_km=pace if pace is not None else mean([lap.pace for lap in work]),
        distance_m=round(mean(distances)) if equal else None,
        rest_s=round(mean([lap.elapsed_time for lap in recovery])),
        pattern=() if equal else tuple(float(round(d)) for d in distances),
        warmup=summarize(laps[:first]),
        cooldown=summarize(laps[last + 1 :]),
        recovery="laps",
        work_time_s=round(mean(times)) if distances_equal(times, tolerance) else None,
    )

    logger.debug(
        "Lap series with recovery laps: %d work, %d recovery, work pace <= %.2f min/km",
        len(work),
        len(recovery),
        work_limit,
    )
    return Candidate(
        workout_type=WorkoutType.SERIES,
        confidence=Confidence.HIGH,
        structure=structure,
        source="laps",
    )


def detect_structure(
    laps: Sequence[Segment],
    distance: float,
    thresholds: Dict[str, float] = DEFAULT_THRESHOLDS,
) -> Optional[Candidate]:
    """
    Interpret manually marked laps.

    Returns a SERIES or CUESTAS candidate, or None when the laps carry no
    work/rest structure, either as pauses or as separate recovery laps
    (including a single whole-activity lap).
    """
    if len(laps) < 2:
        return None

    warmup, main, cooldown = trim_edges(
        laps,
        pace_ratio=thresholds["warmup_pace_ratio"],
        max_edge=int(thresholds["max_edge_segments"]),
    )
    if len(main) < 2:
        warmup, main, cooldown = [], list(laps), []

    min_rest = thresholds["min_rest_s"]
    has_rest = _has_rest_structure(main, min_rest, thresholds["rest_lap_share"])

    hills = _detect_hills(main, distance, has_rest, thresholds)
    if hills is not None:
        return hills

    if not has_rest:
        series = _recovery_lap_series(laps, thresholds)
        if series is None:
            logger.debug("No rest gaps or recovery laps across %d laps; no lap structure", len(laps))
        return series

    distances: List[float] = [lap.distance for lap in main]
    main_distance = sum(distances)
    pace = pace_from_totals(main_distance, sum(lap.moving_time for lap in main))
    rest_s = _average_rest(main, min_rest)
    common = {
        "repetitions": len(main),
        "pace_min_km": pace if pace is not None else mean([lap.pace for lap in main]),
        "rest_s": rest_s,
        "warmup": summarize(warmup),
        "cooldown": summarize(cooldown),
    }

    tolerance = thresholds["equal_distance_tolerance"]
    if distances_equal(distances, tolerance):
        variant, confidence = "equal", Confidence.HIGH
        structure = SeriesStructure(variant=variant, distance_m=round(mean(distances)), **common)
    elif is_pyramid(distances, tolerance):
        variant, confidence = "pyramid", Confidence.HIGH
        structure = SeriesStructure(
            variant=variant,
            pattern=tuple(float(round(d)) for d in distances),
            **common,
        )
    else:
        variant, confidence = "mixed", Confidence.MEDIUM
        structure = SeriesStructure(variant=variant, pattern=tuple(float(round(d)) for d in distances), **common)

    logger.debug("Lap series (%s): %d reps, rest=%s", variant, len(main), rest_s)
    return Candidate(
        workout_type=WorkoutType.SERIES,
        confidence=confidence,
        structure=structure,
        source="laps",
    )
