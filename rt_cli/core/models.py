"""Data models shared by the classifier and the commands."""

from __future__ import annotations

from dataclasses import asdict, dataclass
from enum import Enum
from typing import Any, ClassVar, Dict, List, Optional, Tuple, Union


class WorkoutType(str, Enum):
    """Closed set of workout intent tags."""

    SERIES = "SERIES"
    TEMPO = "TEMPO"
    RODAJE = "RODAJE"
    CUESTAS = "CUESTAS"
    RECUPERACION = "RECUPERACION"
    PROGRESIVO = "PROGRESIVO"
    FARTLEK = "FARTLEK"
    COMPETICION = "COMPETICION"
    OTRO = "OTRO"


class Confidence(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


@dataclass(frozen=True)
class Split:
    """GPS auto-detected kilometer segment."""

    distance: float
    moving_time: float
    elapsed_time: float
    average_speed: float
    elevation_difference: Optional[float] = None


@dataclass(frozen=True)
class Lap:
    """Athlete-triggered segment; may be a work or a rest interval."""

    distance: float
    moving_time: float
    elapsed_time: float
    average_speed: float
    total_elevation_gain: Optional[float] = None
    average_heartrate: Optional[float] = None
    max_heartrate: Optional[float] = None


@dataclass(frozen=True)
class Activity:
    """Completed activity with aggregate stats and optional segments."""

    distance: float
    moving_time: float
    elapsed_time: float
    average_speed: float
    total_elevation_gain: Optional[float] = None
    average_heartrate: Optional[float] = None
    max_heartrate: Optional[float] = None
    splits: Tuple[Split, ...] = ()
    laps: Tuple[Lap, ...] = ()
    name: Optional[str] = None
    activity_id: Optional[str] = None


@dataclass(frozen=True)
class HRZone:
    """Closed bpm interval."""

    lower: int
    upper: int

    def contains(self, hr: float) -> bool:
        return self.lower <= hr <= self.upper


@dataclass(frozen=True)
class HRZones:
    """Five contiguous heart-rate bands; z5.upper is the max heart rate."""

    z1: HRZone
    z2: HRZone
    z3: HRZone
    z4: HRZone
    z5: HRZone

    @property
    def max_hr(self) -> int:
        return self.z5.upper

    def as_list(self) -> List[HRZone]:
        return [self.z1, self.z2, self.z3, self.z4, self.z5]

    def to_dict(self) -> Dict[str, Dict[str, int]]:
        return {
            f"z{number}": {"min": zone.lower, "max": zone.upper}
            for number, zone in enumerate(self.as_list(), 1)
        }


@dataclass(frozen=True)
class AthleteBaseline:
    """Typical easy and fast efforts of an athlete (paces in s/km)."""

    avg_easy_pace: float
    avg_competition_pace: float
    avg_easy_hr: Optional[float]
    sample_count: int

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class ClassificationContext:
    """Athlete context; both parts may be missing."""

    hr_zones: Optional[HRZones] = None
    athlete_baseline: Optional[AthleteBaseline] = None


@dataclass(frozen=True)
class SegmentSummary:
    """Aggregate of a contiguous run of segments (indices inclusive)."""

    distance_m: float
    time_s: float
    pace_min_km: float
    start_index: int
    end_index: int


class _Structure:
    type: ClassVar[str] = ""

    def to_dict(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {"type": self.type}
        for key, value in asdict(self).items():  # type: ignore[call-overload]
            payload[key] = list(value) if isinstance(value, tuple) else value
        return payload


@dataclass(frozen=True)
class SeriesStructure(_Structure):
    repetitions: int
    variant: str  # equal | pyramid | mixed | alternating
    pace_min_km: float
    distance_m: Optional[float] = None
    rest_s: Optional[float] = None
    pattern: Tuple[float, ...] = ()
    warmup: Optional[SegmentSummary] = None
    cooldown: Optional[SegmentSummary] = None
    recovery: str = "rest"  # rest | laps
    work_time_s: Optional[float] = None

    type: ClassVar[str] = "SERIES"


@dataclass(frozen=True)
class TempoStructure(_Structure):
    main: SegmentSummary
    warmup: Optional[SegmentSummary] = None
    cooldown: Optional[SegmentSummary] = None
    avg_hr: Optional[float] = None

    type: ClassVar[str] = "TEMPO"


@dataclass(frozen=True)
class EasyRunStructure(_Structure):
    distance_m: float
    time_s: float
    pace_min_km: float
    category: str  # corto | normal | largo
    basic: bool = False
    avg_hr: Optional[float] = None
    warmup: Optional[SegmentSummary] = None
    cooldown: Optional[SegmentSummary] = None

    type: ClassVar[str] = "RODAJE"


@dataclass(frozen=True)
class HillStructure(_Structure):
    source: str  # laps | elevation
    distance_m: float
    repetitions: Optional[int] = None
    rep_distance_m: Optional[float] = None
    gain_per_rep_m: Optional[float] = None
    total_gain_m: Optional[float] = None
    rest_s: Optional[float] = None

    type: ClassVar[str] = "CUESTAS"


@dataclass(frozen=True)
class RecoveryStructure(_Structure):
    distance_m: float
    time_s: float
    pace_min_km: float
    avg_hr: Optional[float] = None

    type: ClassVar[str] = "RECUPERACION"


@dataclass(frozen=True)
class ProgressiveStructure(_Structure):
    distance_m: float
    time_s: float
    pace_min_km: float
    first_pace_min_km: float
    last_pace_min_km: float
    segments: int

    type: ClassVar[str] = "PROGRESIVO"


@dataclass(frozen=True)
class FartlekStructure(_Structure):
    distance_m: float
    time_s: float
    pace_min_km: float
    cv: float
    fastest_pace_min_km: float
    slowest_pace_min_km: float
    warmup: Optional[SegmentSummary] = None
    cooldown: Optional[SegmentSummary] = None

    type: ClassVar[str] = "FARTLEK"


@dataclass(frozen=True)
class RaceStructure(_Structure):
    distance_m: float
    time_s: float
    pace_min_km: float
    race_name: Optional[str] = None
    reasons: Tuple[str, ...] = ()
    avg_hr: Optional[float] = None

    type: ClassVar[str] = "COMPETICION"


@dataclass(frozen=True)
class OtherStructure(_Structure):
    reason: str  # too_short | gps_noise
    distance_m: float
    time_s: float
    pace_min_km: Optional[float] = None

    type: ClassVar[str] = "OTRO"


Structure = Union[
    SeriesStructure,
    TempoStructure,
    EasyRunStructure,
    HillStructure,
    RecoveryStructure,
    ProgressiveStructure,
    FartlekStructure,
    RaceStructure,
    OtherStructure,
]


@dataclass(frozen=True)
class Candidate:
    """Verdict proposed by one analyzer, before resolution."""

    workout_type: WorkoutType
    confidence: Confidence
    structure: Structure
    source: str  # laps | splits | race | fallback


@dataclass(frozen=True)
class ClassificationResult:
    """Typed verdict returned by ``classify``."""

    workout_type: WorkoutType
    confidence: Confidence
    human_readable: str
    structure: Structure

    def to_dict(self) -> Dict[str, Any]:
        return {
            "workout_type": self.workout_type.value,
            "confidence": self.confidence.value,
            "human_readable": self.human_readable,
            "structure": self.structure.to_dict(),
        }
