"""Workout intent classification: combines lap structure, pace statistics, and athlete context."""

from __future__ import annotations

import logging
from typing import Dict, List, Optional, Sequence

from rt_cli.core.baseline import race_hr_by_history, race_pace_by_history
from rt_cli.core.constants import CONFIDENCE_RANK, DEFAULT_THRESHOLDS, RACE_DISTANCES, TYPE_PRIORITY
from rt_cli.core.explain import explain
from rt_cli.core.models import (
    Activity,
    Candidate,
    ClassificationContext,
    ClassificationResult,
    Confidence,
    EasyRunStructure,
    OtherStructure,
    RaceStructure,
    WorkoutType,
)
from rt_cli.core.pace import analyze_pace
from rt_cli.core.segments import Segment, normalize_laps, normalize_splits, pace_from_totals
from rt_cli.core.structure import detect_structure
from rt_cli.core.zones import race_effort_by_hr

logger = logging.getLogger(__name__)


def race_name_for_distance(distance_m: float) -> Optional[str]:
    """Standard race name when the distance falls in a known band."""
    distance_km = distance_m / 1000.0
    for name, low, high in RACE_DISTANCES:
        if low <= distance_km <= high:
            return name
    return None


def _too_short(activity: Activity) -> Candidate:
    return Candidate(
        workout_type=WorkoutType.OTRO,
        confidence=Confidence.LOW,
        structure=OtherStructure(
            reason="too_short",
            distance_m=max(activity.distance, 0.0),
            time_s=max(activity.moving_time, 0.0),
            pace_min_km=pace_from_totals(activity.distance, activity.moving_time),
        ),
        source="fallback",
    )


def _basic_run(activity: Activity) -> Candidate:
    return Candidate(
        workout_type=WorkoutType.RODAJE,
        confidence=Confidence.LOW,
        structure=EasyRunStructure(
            distance_m=activity.distance,
            time_s=max(activity.moving_time, 0.0),
            pace_min_km=pace_from_totals(activity.distance, activity.moving_time) or 0.0,
            category="normal",
            basic=True,
            avg_hr=activity.average_heartrate,
        ),
        source="fallback",
    )


def _race_candidate(
    activity: Activity,
    laps: Sequence[Segment],
    context: ClassificationContext,
    thresholds: Dict[str, float],
) -> Optional[Candidate]:
    """COMPETICION when pace and/or heart rate look like a race against the athlete's history."""
    baseline = context.athlete_baseline
    if baseline is None or activity.distance <= 0 or activity.moving_time <= 0:
        return None

    pace_s_km = activity.moving_time / (activity.distance / 1000.0)
    pace_signal, pace_reason = race_pace_by_history(
        pace_s_km,
        baseline,
        race_pace_ratio=thresholds["race_pace_ratio"],
        competition_margin=thresholds["competition_pace_margin"],
    )

    if context.hr_zones is not None:
        hr_signal, hr_reason = race_effort_by_hr(
            laps,
            context.hr_zones,
            activity.average_heartrate,
            z5_share=thresholds["race_z5_share"],
            z4z5_share=thresholds["race_z4z5_share"],
        )
    else:
        hr_signal, hr_reason = race_hr_by_history(
            activity.average_heartrate,
            baseline,
            hr_ratio=thresholds["race_hr_ratio"],
        )

    if not (pace_signal or hr_signal):
        return None

    reasons = tuple(reason for reason in (pace_reason, hr_reason) if reason)
    logger.debug("Race effort signals: pace=%s hr=%s (%s)", pace_signal, hr_signal, reasons)
    return Candidate(
        workout_type=WorkoutType.COMPETICION,
        confidence=Confidence.HIGH if pace_signal and hr_signal else Confidence.MEDIUM,
        structure=RaceStructure(
            distance_m=activity.distance,
            time_s=activity.moving_time,
            pace_min_km=pace_s_km / 60.0,
            race_name=race_name_for_distance(activity.distance),
            reasons=reasons,
            avg_hr=activity.average_heartrate,
        ),
        source="race",
    )


def resolve(candidates: Sequence[Candidate]) -> Candidate:
    """Pick the highest-priority type; ties go to the higher confidence."""
    return min(
        candidates,
        key=lambda candidate: (
            TYPE_PRIORITY.index(candidate.workout_type.value),
            -CONFIDENCE_RANK[candidate.confidence.value],
        ),
    )


def _finish(candidate: Candidate) -> ClassificationResult:
    return ClassificationResult(
        workout_type=candidate.workout_type,
        confidence=candidate.confidence,
        human_readable=explain(candidate.workout_type, candidate.structure),
        structure=candidate.structure,
    )


def classify(
    activity: Activity,
    context: Optional[ClassificationContext] = None,
    thresholds: Dict[str, float] = DEFAULT_THRESHOLDS,
) -> ClassificationResult:
    """
    Classify the intent of a completed running activity.

    Laps are checked for work/rest structure first. Without it, the laps
    themselves (or, with fewer than two laps, the per-km splits) go through
    the pace statistics. When an athlete baseline is known a race-effort check adds
    a COMPETICION candidate, and the final verdict is picked by a fixed
    type priority. Pure and deterministic; never raises on sparse data.
    """
    context = context or ClassificationContext()
    laps = normalize_laps(activity.laps)
    splits = normalize_splits(activity.splits)
    min_distance = thresholds["min_distance_km"] * 1000.0

    if not laps and not splits:
        logger.debug("No usable laps or splits for activity %s", activity.activity_id or activity.name)
        if activity.distance < min_distance:
            return _finish(_too_short(activity))
        return _finish(_basic_run(activity))

    structural = detect_structure(laps, activity.distance, thresholds)
    if structural is None and activity.distance < min_distance:
        return _finish(_too_short(activity))

    candidates: List[Candidate] = []
    if structural is not None:
        candidates.append(structural)
    else:
        statistical = analyze_pace(laps if len(laps) >= 2 else splits, activity, context, thresholds)
        candidates.append(statistical if statistical is not None else _basic_run(activity))

    if candidates[0].workout_type != WorkoutType.OTRO:
        race = _race_candidate(activity, laps, context, thresholds)
        if race is not None:
            candidates.append(race)

    verdict = resolve(candidates)
    logger.debug(
        "Candidates %s -> %s (%s)",
        [(c.workout_type.value, c.confidence.value, c.source) for c in candidates],
        verdict.workout_type.value,
        verdict.confidence.value,
    )
    return _finish(verdict)
