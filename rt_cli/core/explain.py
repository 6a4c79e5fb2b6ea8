"""Spanish one-line descriptions of classified workouts."""

from __future__ import annotations

from typing import List, Optional

from rt_cli.core.models import (
    EasyRunStructure,
    FartlekStructure,
    HillStructure,
    OtherStructure,
    ProgressiveStructure,
    RaceStructure,
    RecoveryStructure,
    SegmentSummary,
    SeriesStructure,
    Structure,
    TempoStructure,
    WorkoutType,
)
from rt_cli.utils.formatting import format_distance, format_pace, format_rep_distance

RUN_CATEGORY_LABELS = {
    "corto": "rodaje corto",
    "normal": "rodaje",
    "largo": "rodaje largo",
}

OTHER_REASON_LABELS = {
    "too_short": "distancia insuficiente para clasificar",
    "gps_noise": "datos GPS inconsistentes",
}


def _with_edges(main: str, warmup: Optional[SegmentSummary], cooldown: Optional[SegmentSummary]) -> str:
    parts: List[str] = []
    if warmup is not None:
        parts.append(f"Calent: {format_distance(warmup.distance_m)} @ {format_pace(warmup.pace_min_km)}")
    parts.append(main)
    if cooldown is not None:
        parts.append(f"V.calma: {format_distance(cooldown.distance_m)}")
    return " | ".join(parts)


def _rest_suffix(rest_s: Optional[float]) -> str:
    return f" con descansos de ~{int(round(rest_s))}s" if rest_s else ""


def _lap_recovery_series(structure: SeriesStructure) -> str:
    pace = format_pace(structure.pace_min_km)
    minutes = int(round(structure.work_time_s / 60.0)) if structure.work_time_s else 0
    if minutes >= 5:
        main = f"{structure.repetitions}x{minutes}' @ {pace}"
    elif structure.distance_m:
        main = f"{structure.repetitions}x{format_distance(structure.distance_m)} @ {pace}"
    else:
        main = f"{structure.repetitions} series @ {pace}"
    rest_minutes = int(round(structure.rest_s / 60.0)) if structure.rest_s else 0
    if rest_minutes:
        main += f" | r{rest_minutes}'"
    return _with_edges(main, structure.warmup, structure.cooldown)


def _series(structure: SeriesStructure) -> str:
    if structure.recovery == "laps":
        return _lap_recovery_series(structure)
    if structure.variant == "equal":
        main = (
            f"{structure.repetitions}x{format_rep_distance(structure.distance_m)} "
            f"@ {format_pace(structure.pace_min_km)}{_rest_suffix(structure.rest_s)}"
        )
    elif structure.variant == "pyramid":
        pattern = "-".join(str(int(round(d / 10.0) * 10)) for d in structure.pattern)
        main = f"Pirámide {pattern} @ {format_pace(structure.pace_min_km)}{_rest_suffix(structure.rest_s)}"
    elif structure.variant == "alternating":
        main = f"{structure.repetitions} series @ {format_pace(structure.pace_min_km)} (patrón detectado en GPS)"
    else:
        main = (
            f"{structure.repetitions} series mixtas @ {format_pace(structure.pace_min_km)}"
            f"{_rest_suffix(structure.rest_s)}"
        )
    return _with_edges(main, structure.warmup, structure.cooldown)


def _tempo(structure: TempoStructure) -> str:
    main = f"{format_distance(structure.main.distance_m)} tempo @ {format_pace(structure.main.pace_min_km)}"
    return _with_edges(main, structure.warmup, structure.cooldown)


def _easy(structure: EasyRunStructure) -> str:
    label = RUN_CATEGORY_LABELS.get(structure.category, "rodaje")
    if structure.basic:
        return (
            f"{format_distance(structure.distance_m)} rodaje @ {format_pace(structure.pace_min_km)} "
            "(clasificación básica sin datos de ritmo)"
        )
    main = f"{format_distance(structure.distance_m)} {label} @ {format_pace(structure.pace_min_km)}"
    return _with_edges(main, structure.warmup, structure.cooldown)


def _hills(structure: HillStructure) -> str:
    if structure.source == "laps":
        gain = f" (+{int(round(structure.gain_per_rep_m or 0))}m/rep)" if structure.gain_per_rep_m else ""
        return (
            f"{structure.repetitions}x{format_rep_distance(structure.rep_distance_m)} cuestas{gain}, "
            "detectadas por repeticiones cortas con recuperación"
        )
    gain = f" (+{int(round(structure.total_gain_m))}m)" if structure.total_gain_m else ""
    return f"{format_distance(structure.distance_m)} con cuestas{gain}, detectadas por patrón de desnivel"


def _progressive(structure: ProgressiveStructure) -> str:
    return (
        f"{format_distance(structure.distance_m)} progresivo de "
        f"{format_pace(structure.first_pace_min_km)} a {format_pace(structure.last_pace_min_km)}"
    )


def _fartlek(structure: FartlekStructure) -> str:
    main = f"{format_distance(structure.distance_m)} fartlek @ {format_pace(structure.pace_min_km)} (ritmo variable)"
    return _with_edges(main, structure.warmup, structure.cooldown)


def _race(structure: RaceStructure) -> str:
    name = structure.race_name or format_distance(structure.distance_m)
    reasons = f" ({', '.join(structure.reasons)})" if structure.reasons else ""
    return f"Competición {name} @ {format_pace(structure.pace_min_km)}{reasons}"


def _recovery(structure: RecoveryStructure) -> str:
    return f"{format_distance(structure.distance_m)} recuperación @ {format_pace(structure.pace_min_km)}"


def _other(structure: OtherStructure) -> str:
    reason = OTHER_REASON_LABELS.get(structure.reason)
    if reason is None:
        return f"{format_distance(structure.distance_m)} sin estructura definida"
    return f"{format_distance(structure.distance_m)} ({reason})"


def explain(workout_type: WorkoutType, structure: Structure) -> str:
    """Render a short description of a verdict. Never empty."""
    if isinstance(structure, SeriesStructure):
        return _series(structure)
    if isinstance(structure, TempoStructure):
        return _tempo(structure)
    if isinstance(structure, EasyRunStructure):
        return _easy(structure)
    if isinstance(structure, HillStructure):
        return _hills(structure)
    if isinstance(structure, ProgressiveStructure):
        return _progressive(structure)
    if isinstance(structure, FartlekStructure):
        return _fartlek(structure)
    if isinstance(structure, RaceStructure):
        return _race(structure)
    if isinstance(structure, RecoveryStructure):
        return _recovery(structure)
    if isinstance(structure, OtherStructure):
        return _other(structure)
    return WorkoutType(workout_type).value
