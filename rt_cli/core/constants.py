"""Static constants, thresholds, and labels for the workout classifier."""

from __future__ import annotations

# Percent cut points (of max HR or of HR reserve) for zone boundaries z1..z5.
ZONE_CUT_POINTS = (0.50, 0.60, 0.70, 0.80, 0.90, 1.00)

DEFAULT_MAX_HR = 190
MAX_HR_AGE_BASE = 220
# Below this HR reserve (bpm) zones fall back to percent of max.
MIN_HR_RESERVE = 5

HISTORY_LIMIT = 50
MIN_HISTORY_SAMPLES = 3
EASY_LABELS = {"RODAJE"}
FAST_LABELS = {"SERIES", "TEMPO"}
DEFAULT_COMPETITION_PACE_RATIO = 0.85

DEFAULT_THRESHOLDS = {
    # Lap structure
    "min_rest_s": 15.0,
    "rest_lap_share": 0.7,
    "equal_distance_tolerance": 0.10,
    "hill_lap_max_m": 600.0,
    "hill_min_gain_m": 15.0,
    "recovery_lap_pace_ratio": 1.3,
    "work_lap_min_m": 500.0,
    "recovery_lap_max_m": 200.0,
    "work_lap_pace_ratio": 1.25,
    # Pace statistics
    "steady_cv": 0.05,
    "variable_cv": 0.12,
    "warmup_pace_ratio": 1.15,
    "max_edge_segments": 3,
    "progressive_tolerance": 0.05,
    "progressive_min_drop": 0.10,
    "series_recovery_ratio": 1.4,
    # GPS noise
    "min_human_pace": 2.2,
    "noise_pace_ratio": 2.2,
    "noise_jumps": 2,
    # Elevation
    "hill_gain_per_km": 15.0,
    "hill_transition_m": 5.0,
    "hill_min_transitions": 3,
    # Distance categories (km)
    "min_distance_km": 1.0,
    "short_steady_km": 3.0,
    "short_run_km": 8.0,
    "long_run_km": 18.0,
    # Baseline comparisons
    "race_pace_ratio": 0.90,
    "competition_pace_margin": 1.05,
    "tempo_pace_ratio": 0.95,
    "recovery_pace_ratio": 1.10,
    "race_z5_share": 0.40,
    "race_z4z5_share": 0.60,
    "race_hr_ratio": 1.15,
}

# Earlier entries win when several candidate verdicts exist.
TYPE_PRIORITY = (
    "SERIES",
    "CUESTAS",
    "COMPETICION",
    "TEMPO",
    "PROGRESIVO",
    "FARTLEK",
    "RECUPERACION",
    "RODAJE",
    "OTRO",
)

CONFIDENCE_RANK = {"low": 0, "medium": 1, "high": 2}

TYPE_LABELS = {
    "SERIES": "Series",
    "TEMPO": "Tempo",
    "RODAJE": "Rodaje",
    "CUESTAS": "Cuestas",
    "RECUPERACION": "Recuperación",
    "PROGRESIVO": "Progresivo",
    "FARTLEK": "Fartlek",
    "COMPETICION": "Competición",
    "OTRO": "Otro",
}

ZONE_LABELS = {
    1: "Recuperación",
    2: "Aeróbico",
    3: "Tempo",
    4: "Umbral",
    5: "VO2max",
}

# (name, min km, max km)
RACE_DISTANCES = [
    ("5K", 4.8, 5.2),
    ("10K", 9.8, 10.2),
    ("Media Maratón", 20.8, 21.5),
    ("Maratón", 41.5, 43.0),
]
