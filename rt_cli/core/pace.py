"""Split-based pace statistics: steadiness, trends, trimming, and noise."""

from __future__ import annotations

import logging
from typing import Dict, List, Optional, Sequence

from rt_cli.core.constants import DEFAULT_THRESHOLDS
from rt_cli.core.models import (
    Activity,
    Candidate,
    ClassificationContext,
    Confidence,
    EasyRunStructure,
    FartlekStructure,
    HillStructure,
    OtherStructure,
    ProgressiveStructure,
    RecoveryStructure,
    SegmentSummary,
    SeriesStructure,
    TempoStructure,
    WorkoutType,
)
from rt_cli.core.segments import Segment, coefficient_of_variation, mean, summarize, trim_edges
from rt_cli.core.zones import zone_for_hr

logger = logging.getLogger(__name__)


def is_gps_noise(paces: Sequence[float], thresholds: Dict[str, float] = DEFAULT_THRESHOLDS) -> bool:
    """Splits no runner can produce: impossible pace or repeated huge jumps."""
    if not paces:
        return False
    if min(paces) < thresholds["min_human_pace"]:
        return True
    jumps = 0
    for previous, current in zip(paces, paces[1:]):
        if max(previous, current) / min(previous, current) > thresholds["noise_pace_ratio"]:
            jumps += 1
    return jumps >= thresholds["noise_jumps"]


def is_progressive(paces: Sequence[float], thresholds: Dict[str, float] = DEFAULT_THRESHOLDS) -> bool:
    """Negative split across the whole activity, within tolerance."""
    if len(paces) < 3:
        return False
    tolerance = thresholds["progressive_tolerance"]
    steps = [current - previous for previous, current in zip(paces, paces[1:])]
    if any(step > tolerance for step in steps):
        return False
    faster_steps = sum(1 for step in steps if step < -tolerance)
    if faster_steps * 2 < len(steps):
        return False
    return (paces[0] - paces[-1]) / paces[0] >= thresholds["progressive_min_drop"]


def hill_transitions(segments: Sequence[Segment], threshold_m: float = 5.0) -> int:
    """Count climb-then-descent transitions between consecutive segments."""
    deltas = [segment.elevation or 0.0 for segment in segments]
    return sum(
        1
        for current, following in zip(deltas, deltas[1:])
        if current > threshold_m and following < -threshold_m
    )


def detect_alternation(
    paces: Sequence[float],
    recovery_ratio: float = 1.4,
) -> Optional[Dict[str, float]]:
    """
    Find a repeating work/recovery 2-beat pattern.

    Segments slower than the midpoint of the pace range are recovery beats.
    A pattern needs isolated, evenly spaced recovery beats, at least three
    work beats, and recoveries clearly slower than the work.
    """
    if len(paces) < 5:
        return None
    midpoint = (min(paces) + max(paces)) / 2
    slow = [pace > midpoint for pace in paces]
    slow_positions = [position for position, is_slow in enumerate(slow) if is_slow]
    fast_paces = [pace for pace, is_slow in zip(paces, slow) if not is_slow]
    slow_paces = [pace for pace, is_slow in zip(paces, slow) if is_slow]

    if len(slow_positions) < 2 or len(fast_paces) < 3:
        return None
    gaps = [b - a for a, b in zip(slow_positions, slow_positions[1:])]
    if min(gaps) < 2 or max(gaps) - min(gaps) > 1:
        return None
    if mean(slow_paces) < mean(fast_paces) * recovery_ratio:
        return None

    work_blocks = 0
    previous_slow = True
    for is_slow in slow:
        if not is_slow and previous_slow:
            work_blocks += 1
        previous_slow = is_slow

    return {"work_blocks": work_blocks, "work_pace": mean(fast_paces), "recovery_pace": mean(slow_paces)}


def _activity_distance(activity: Activity, segments: Sequence[Segment]) -> float:
    return activity.distance if activity.distance > 0 else sum(s.distance for s in segments)


def _activity_time(activity: Activity, segments: Sequence[Segment]) -> float:
    return activity.moving_time if activity.moving_time > 0 else sum(s.moving_time for s in segments)


def _hr_zone(activity: Activity, context: Optional[ClassificationContext]) -> Optional[int]:
    if context is None or context.hr_zones is None or not activity.average_heartrate:
        return None
    return zone_for_hr(activity.average_heartrate, context.hr_zones)


def _baseline_ratio(pace_min_km: float, context: Optional[ClassificationContext]) -> Optional[float]:
    """Current pace relative to the athlete's easy pace (<1 is faster)."""
    if context is None or context.athlete_baseline is None:
        return None
    easy = context.athlete_baseline.avg_easy_pace
    if easy <= 0:
        return None
    return pace_min_km * 60.0 / easy


def _run_category(distance_m: float, thresholds: Dict[str, float]) -> str:
    distance_km = distance_m / 1000.0
    if distance_km < thresholds["short_run_km"]:
        return "corto"
    if distance_km >= thresholds["long_run_km"]:
        return "largo"
    return "normal"


def _easy_run(
    activity: Activity,
    segments: Sequence[Segment],
    main: SegmentSummary,
    confidence: Confidence,
    thresholds: Dict[str, float],
    warmup: Optional[SegmentSummary] = None,
    cooldown: Optional[SegmentSummary] = None,
) -> Candidate:
    distance = _activity_distance(activity, segments)
    return Candidate(
        workout_type=WorkoutType.RODAJE,
        confidence=confidence,
        structure=EasyRunStructure(
            distance_m=distance,
            time_s=_activity_time(activity, segments),
            pace_min_km=main.pace_min_km,
            category=_run_category(distance, thresholds),
            avg_hr=activity.average_heartrate,
            warmup=warmup,
            cooldown=cooldown,
        ),
        source="splits",
    )


def _tempo(
    activity: Activity,
    main: SegmentSummary,
    confidence: Confidence,
    warmup: Optional[SegmentSummary] = None,
    cooldown: Optional[SegmentSummary] = None,
) -> Candidate:
    return Candidate(
        workout_type=WorkoutType.TEMPO,
        confidence=confidence,
        structure=TempoStructure(
            main=main,
            warmup=warmup,
            cooldown=cooldown,
            avg_hr=activity.average_heartrate,
        ),
        source="splits",
    )


def _steady(
    activity: Activity,
    segments: Sequence[Segment],
    context: Optional[ClassificationContext],
    main: SegmentSummary,
    thresholds: Dict[str, float],
) -> Candidate:
    zone = _hr_zone(activity, context)
    ratio = _baseline_ratio(main.pace_min_km, context)
    distance_km = _activity_distance(activity, segments) / 1000.0

    if zone is not None:
        hard = zone >= 3
        very_easy = zone == 1
    else:
        hard = ratio is not None and ratio <= thresholds["tempo_pace_ratio"]
        hard = hard and distance_km >= thresholds["short_steady_km"]
        very_easy = ratio is not None and ratio >= thresholds["recovery_pace_ratio"]

    if hard:
        logger.debug("Steady effort above easy (zone=%s, ratio=%s): tempo", zone, ratio)
        return _tempo(activity, main, Confidence.HIGH)

    if very_easy and distance_km < thresholds["short_run_km"]:
        logger.debug("Short steady effort below easy (zone=%s, ratio=%s): recovery", zone, ratio)
        return Candidate(
            workout_type=WorkoutType.RECUPERACION,
            confidence=Confidence.HIGH,
            structure=RecoveryStructure(
                distance_m=_activity_distance(activity, segments),
                time_s=_activity_time(activity, segments),
                pace_min_km=main.pace_min_km,
                avg_hr=activity.average_heartrate,
            ),
            source="splits",
        )

    return _easy_run(activity, segments, main, Confidence.HIGH, thresholds)


def analyze_pace(
    segments: Sequence[Segment],
    activity: Activity,
    context: Optional[ClassificationContext] = None,
    thresholds: Dict[str, float] = DEFAULT_THRESHOLDS,
) -> Optional[Candidate]:
    """
    Classify an activity from per-segment paces.

    Returns None with fewer than two usable segments.
    """
    overall = summarize(segments)
    if overall is None or len(segments) < 2:
        return None

    paces = [segment.pace for segment in segments]
    distance = _activity_distance(activity, segments)
    time_s = _activity_time(activity, segments)

    if all(segment.source == "split" for segment in segments) and is_gps_noise(paces, thresholds):
        logger.debug("Unrealistic split paces %s; flagging GPS noise", [round(p, 2) for p in paces])
        return Candidate(
            workout_type=WorkoutType.OTRO,
            confidence=Confidence.LOW,
            structure=OtherStructure(
                reason="gps_noise",
                distance_m=distance,
                time_s=time_s,
                pace_min_km=overall.pace_min_km,
            ),
            source="splits",
        )

    gain = activity.total_elevation_gain or 0.0
    if distance > 0 and gain / (distance / 1000.0) > thresholds["hill_gain_per_km"]:
        transitions = hill_transitions(segments, thresholds["hill_transition_m"])
        if transitions >= thresholds["hill_min_transitions"]:
            logger.debug("Elevation %.0fm with %d up/down transitions: hills", gain, transitions)
            return Candidate(
                workout_type=WorkoutType.CUESTAS,
                confidence=Confidence.MEDIUM,
                structure=HillStructure(
                    source="elevation",
                    distance_m=distance,
                    repetitions=transitions,
                    total_gain_m=round(gain, 1),
                ),
                source="splits",
            )

    if is_progressive(paces, thresholds):
        return Candidate(
            workout_type=WorkoutType.PROGRESIVO,
            confidence=Confidence.HIGH,
            structure=ProgressiveStructure(
                distance_m=distance,
                time_s=time_s,
                pace_min_km=overall.pace_min_km,
                first_pace_min_km=paces[0],
                last_pace_min_km=paces[-1],
                segments=len(paces),
            ),
            source="splits",
        )

    cv = coefficient_of_variation(paces)
    logger.debug("Pace CV over %d segments: %.3f", len(paces), cv)
    if cv < thresholds["steady_cv"]:
        return _steady(activity, segments, context, overall, thresholds)

    warmup_segments, main_segments, cooldown_segments = trim_edges(
        segments,
        pace_ratio=thresholds["warmup_pace_ratio"],
        max_edge=int(thresholds["max_edge_segments"]),
    )
    if len(main_segments) < 2 or not (warmup_segments or cooldown_segments):
        warmup_segments, main_segments, cooldown_segments = [], list(segments), []

    main_paces: List[float] = [segment.pace for segment in main_segments]
    main_cv = coefficient_of_variation(main_paces)
    main = summarize(main_segments) or overall
    warmup = summarize(warmup_segments)
    cooldown = summarize(cooldown_segments)
    zone = _hr_zone(activity, context)
    ratio = _baseline_ratio(main.pace_min_km, context)

    if (warmup or cooldown) and main_cv < thresholds["steady_cv"]:
        logger.debug("Steady main set after trimming %d/%d edge segments", len(warmup_segments), len(cooldown_segments))
        if zone is not None and zone <= 2:
            return _easy_run(activity, segments, main, Confidence.MEDIUM, thresholds, warmup, cooldown)
        return _tempo(activity, main, Confidence.HIGH, warmup, cooldown)

    if main_cv <= thresholds["variable_cv"]:
        if zone is not None:
            hard = zone >= 3
        else:
            hard = ratio is not None and ratio <= thresholds["tempo_pace_ratio"]
        if hard:
            return _tempo(activity, main, Confidence.MEDIUM, warmup, cooldown)
        return _easy_run(activity, segments, main, Confidence.MEDIUM, thresholds, warmup, cooldown)

    pattern = detect_alternation(main_paces, thresholds["series_recovery_ratio"])
    if pattern is not None:
        logger.debug("Alternating work/recovery pattern: %s", pattern)
        return Candidate(
            workout_type=WorkoutType.SERIES,
            confidence=Confidence.MEDIUM,
            structure=SeriesStructure(
                repetitions=int(pattern["work_blocks"]),
                variant="alternating",
                pace_min_km=pattern["work_pace"],
                warmup=warmup,
                cooldown=cooldown,
            ),
            source="splits",
        )

    return Candidate(
        workout_type=WorkoutType.FARTLEK,
        confidence=Confidence.MEDIUM,
        structure=FartlekStructure(
            distance_m=distance,
            time_s=time_s,
            pace_min_km=main.pace_min_km,
            cv=round(main_cv, 3),
            fastest_pace_min_km=min(main_paces),
            slowest_pace_min_km=max(main_paces),
            warmup=warmup,
            cooldown=cooldown,
        ),
        source="splits",
    )
