from __future__ import annotations

from datetime import date

import pytest

from rt_cli.core.models import (
    AthleteBaseline,
    ClassificationContext,
    Confidence,
    FartlekStructure,
    SeriesStructure,
    TempoStructure,
    WorkoutType,
)
from rt_cli.core.pace import (
    analyze_pace,
    detect_alternation,
    hill_transitions,
    is_gps_noise,
    is_progressive,
)
from rt_cli.core.segments import normalize_splits
from rt_cli.core.zones import calculate_hr_zones

ZONES = calculate_hr_zones(today=date(2026, 10, 17))
BASELINE = AthleteBaseline(avg_easy_pace=300.0, avg_competition_pace=250.0, avg_easy_hr=145.0, sample_count=12)


def _analyze(make_splits, make_activity, paces, context=None, elevations=None, **overrides):
    splits = make_splits(paces, elevations=elevations)
    activity = make_activity(splits=splits, **overrides)
    return analyze_pace(normalize_splits(splits), activity, context)


def test_is_gps_noise() -> None:
    assert is_gps_noise([5.0, 2.0, 5.0])
    assert is_gps_noise([4.0, 10.0, 4.0, 10.0])
    assert not is_gps_noise([5.0, 5.1, 4.9])
    assert not is_gps_noise([5.0, 4.2, 7.5, 4.1, 7.8, 4.3, 7.2, 4.0, 5.1])


def test_is_progressive() -> None:
    assert is_progressive([5.5, 5.3, 5.1, 4.9, 4.6, 4.4, 4.2, 4.0])
    assert is_progressive([5.0, 5.03, 4.8, 4.6, 4.4])
    assert not is_progressive([5.0, 5.0, 5.0, 5.0, 4.4])
    assert not is_progressive([5.5, 5.3, 5.6, 4.8])
    assert not is_progressive([5.0, 4.9, 4.8])
    assert not is_progressive([5.5, 4.0])


def test_hill_transitions(make_splits) -> None:
    segments = normalize_splits(make_splits([6.0] * 8, elevations=[20, 25, 30, -15, 22, -10, 18, -20]))
    assert hill_transitions(segments) == 3


def test_detect_alternation() -> None:
    pattern = detect_alternation([5.0, 4.2, 7.5, 4.1, 7.8, 4.3, 7.2, 4.0, 5.1])
    assert pattern is not None
    assert pattern["work_blocks"] == 4
    assert pattern["work_pace"] == pytest.approx(4.45)
    assert detect_alternation([5.0, 4.3, 5.6, 4.2, 5.8, 4.5, 5.2, 4.0]) is None
    assert detect_alternation([4.0, 4.0, 8.0, 8.0, 4.0, 4.0]) is None


def test_needs_two_segments(make_splits, make_activity) -> None:
    assert _analyze(make_splits, make_activity, [5.0]) is None


def test_gps_noise_verdict(make_splits, make_activity) -> None:
    candidate = _analyze(make_splits, make_activity, [5.0, 2.0, 5.0, 12.0, 5.0, 5.2])
    assert candidate is not None
    assert candidate.workout_type == WorkoutType.OTRO
    assert candidate.confidence == Confidence.LOW
    assert candidate.structure.reason == "gps_noise"


def test_elevation_override(make_splits, make_activity) -> None:
    candidate = _analyze(
        make_splits,
        make_activity,
        [5.5, 6.0, 5.8, 6.3, 5.6, 6.2, 5.7, 6.5],
        elevations=[20, 25, 30, -15, 22, -10, 18, -20],
        total_elevation_gain=150.0,
    )
    assert candidate is not None
    assert candidate.workout_type == WorkoutType.CUESTAS
    assert candidate.confidence == Confidence.MEDIUM
    assert candidate.structure.source == "elevation"


def test_progressive_verdict(make_splits, make_activity) -> None:
    candidate = _analyze(make_splits, make_activity, [5.5, 5.3, 5.1, 4.9, 4.6, 4.4, 4.2, 4.0])
    assert candidate is not None
    assert candidate.workout_type == WorkoutType.PROGRESIVO
    assert candidate.confidence == Confidence.HIGH
    assert candidate.structure.first_pace_min_km == pytest.approx(5.5)
    assert candidate.structure.last_pace_min_km == pytest.approx(4.0)


@pytest.mark.parametrize(
    "paces, category",
    [
        ([5.5] * 5, "corto"),
        ([5.0, 5.1, 4.9, 5.0, 5.1, 4.9, 5.0, 5.0, 5.1, 5.0], "normal"),
        ([5.3] * 20, "largo"),
    ],
)
def test_steady_run_categories(make_splits, make_activity, paces, category) -> None:
    candidate = _analyze(make_splits, make_activity, paces)
    assert candidate is not None
    assert candidate.workout_type == WorkoutType.RODAJE
    assert candidate.confidence == Confidence.HIGH
    assert candidate.structure.category == category


def test_steady_in_tempo_zone_is_tempo(make_splits, make_activity) -> None:
    context = ClassificationContext(hr_zones=ZONES)
    candidate = _analyze(make_splits, make_activity, [4.5] * 8, context=context, average_heartrate=160.0)
    assert candidate is not None
    assert candidate.workout_type == WorkoutType.TEMPO
    assert candidate.confidence == Confidence.HIGH


def test_steady_in_easy_zone_stays_rodaje_even_if_fast_vs_baseline(make_splits, make_activity) -> None:
    context = ClassificationContext(hr_zones=ZONES, athlete_baseline=BASELINE)
    candidate = _analyze(make_splits, make_activity, [4.5] * 8, context=context, average_heartrate=125.0)
    assert candidate is not None
    assert candidate.workout_type == WorkoutType.RODAJE


def test_steady_fast_against_baseline_is_tempo(make_splits, make_activity) -> None:
    context = ClassificationContext(athlete_baseline=BASELINE)
    candidate = _analyze(make_splits, make_activity, [4.5] * 8, context=context)
    assert candidate is not None
    assert candidate.workout_type == WorkoutType.TEMPO


def test_short_steady_fast_run_is_not_tempo(make_splits, make_activity) -> None:
    context = ClassificationContext(athlete_baseline=BASELINE)
    candidate = _analyze(make_splits, make_activity, [4.5] * 2, context=context)
    assert candidate is not None
    assert candidate.workout_type == WorkoutType.RODAJE


def test_recovery_from_zone_one(make_splits, make_activity) -> None:
    context = ClassificationContext(hr_zones=ZONES)
    candidate = _analyze(make_splits, make_activity, [6.5] * 5, context=context, average_heartrate=105.0)
    assert candidate is not None
    assert candidate.workout_type == WorkoutType.RECUPERACION
    assert candidate.confidence == Confidence.HIGH


def test_recovery_from_baseline_only_for_short_runs(make_splits, make_activity) -> None:
    context = ClassificationContext(athlete_baseline=BASELINE)
    short = _analyze(make_splits, make_activity, [6.0] * 5, context=context)
    long = _analyze(make_splits, make_activity, [6.0] * 12, context=context)
    assert short is not None and short.workout_type == WorkoutType.RECUPERACION
    assert long is not None and long.workout_type == WorkoutType.RODAJE


def test_tempo_with_warmup_and_cooldown(make_splits, make_activity) -> None:
    candidate = _analyze(make_splits, make_activity, [5.5, 5.3, 4.2, 4.1, 4.2, 4.1, 4.2, 4.1, 5.4, 5.5])
    assert candidate is not None
    assert candidate.workout_type == WorkoutType.TEMPO
    assert candidate.confidence == Confidence.HIGH
    structure = candidate.structure
    assert isinstance(structure, TempoStructure)
    assert structure.warmup is not None and structure.warmup.distance_m == 2000
    assert structure.cooldown is not None and structure.cooldown.distance_m == 2000
    assert structure.main.distance_m == 6000


def test_trimmed_steady_block_in_easy_zone_is_rodaje(make_splits, make_activity) -> None:
    context = ClassificationContext(hr_zones=ZONES)
    candidate = _analyze(
        make_splits,
        make_activity,
        [5.5, 5.3, 4.2, 4.1, 4.2, 4.1, 4.2, 4.1, 5.4, 5.5],
        context=context,
        average_heartrate=125.0,
    )
    assert candidate is not None
    assert candidate.workout_type == WorkoutType.RODAJE
    assert candidate.confidence == Confidence.MEDIUM


def test_mild_variability(make_splits, make_activity) -> None:
    paces = [5.0, 5.6, 5.0, 5.6, 5.0, 5.6]
    candidate = _analyze(make_splits, make_activity, paces)
    assert candidate is not None
    assert candidate.workout_type == WorkoutType.RODAJE
    assert candidate.confidence == Confidence.MEDIUM

    context = ClassificationContext(hr_zones=ZONES)
    candidate = _analyze(make_splits, make_activity, paces, context=context, average_heartrate=155.0)
    assert candidate is not None
    assert candidate.workout_type == WorkoutType.TEMPO
    assert candidate.confidence == Confidence.MEDIUM


def test_alternating_splits_are_series(make_splits, make_activity) -> None:
    candidate = _analyze(make_splits, make_activity, [5.0, 4.2, 7.5, 4.1, 7.8, 4.3, 7.2, 4.0, 5.1])
    assert candidate is not None
    assert candidate.workout_type == WorkoutType.SERIES
    assert candidate.confidence == Confidence.MEDIUM
    assert isinstance(candidate.structure, SeriesStructure)
    assert candidate.structure.variant == "alternating"


def test_irregular_variability_is_fartlek(make_splits, make_activity) -> None:
    candidate = _analyze(make_splits, make_activity, [5.0, 4.3, 5.6, 4.2, 5.8, 4.5, 5.2, 4.0])
    assert candidate is not None
    assert candidate.workout_type == WorkoutType.FARTLEK
    assert candidate.confidence == Confidence.MEDIUM
    assert isinstance(candidate.structure, FartlekStructure)
    assert candidate.structure.cv > 0.12
