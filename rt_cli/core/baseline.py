"""Athlete historical baseline from recent completed activities."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Iterable, List, Optional, Sequence, Tuple

from rt_cli.core.constants import (
    DEFAULT_COMPETITION_PACE_RATIO,
    EASY_LABELS,
    FAST_LABELS,
    HISTORY_LIMIT,
    MIN_HISTORY_SAMPLES,
)
from rt_cli.core.models import AthleteBaseline

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class HistoryRecord:
    """One stored completed activity (distance in m, duration in s)."""

    distance: float
    duration: float
    avg_heartrate: Optional[float] = None
    label: Optional[str] = None

    @property
    def pace(self) -> float:
        """Pace in s/km."""
        return self.duration / (self.distance / 1000.0)


HistoryFetcher = Callable[[str, int], Iterable[HistoryRecord]]


def _mean(values: Sequence[float]) -> float:
    return sum(values) / len(values)


def _mean_hr(records: Sequence[HistoryRecord]) -> Optional[float]:
    rates = [r.avg_heartrate for r in records if r.avg_heartrate and r.avg_heartrate > 0]
    if not rates:
        return None
    return _mean(rates)


def estimate_baseline(
    records: Iterable[HistoryRecord],
    limit: int = HISTORY_LIMIT,
    min_samples: int = MIN_HISTORY_SAMPLES,
) -> Optional[AthleteBaseline]:
    """
    Summarize typical easy and fast effort from history, most recent first.

    Only records with positive distance and duration count, capped at
    ``limit``. Returns None with fewer than ``min_samples`` records.
    Easy = RODAJE (falls back to all records), fast = SERIES/TEMPO (falls
    back to 85% of easy pace).
    """
    qualifying: List[HistoryRecord] = []
    for record in records:
        if record.distance > 0 and record.duration > 0:
            qualifying.append(record)
        if len(qualifying) >= limit:
            break

    if len(qualifying) < min_samples:
        logger.debug("Only %d usable history records; no baseline", len(qualifying))
        return None

    easy = [r for r in qualifying if (r.label or "").upper() in EASY_LABELS]
    fast = [r for r in qualifying if (r.label or "").upper() in FAST_LABELS]

    easy_source = easy or qualifying
    avg_easy_pace = _mean([r.pace for r in easy_source])
    avg_easy_hr = _mean_hr(easy_source)

    if fast:
        avg_competition_pace = _mean([r.pace for r in fast])
    else:
        avg_competition_pace = avg_easy_pace * DEFAULT_COMPETITION_PACE_RATIO

    baseline = AthleteBaseline(
        avg_easy_pace=avg_easy_pace,
        avg_competition_pace=avg_competition_pace,
        avg_easy_hr=avg_easy_hr,
        sample_count=len(qualifying),
    )
    logger.debug(
        "Baseline from %d records (easy=%d, fast=%d): %s",
        len(qualifying),
        len(easy),
        len(fast),
        baseline,
    )
    return baseline


def athlete_baseline(
    athlete_id: str,
    fetch_history: HistoryFetcher,
    limit: int = HISTORY_LIMIT,
) -> Optional[AthleteBaseline]:
    """Baseline for an athlete using an injected history source."""
    return estimate_baseline(fetch_history(athlete_id, limit), limit=limit)


def race_pace_by_history(
    current_pace: float,
    baseline: AthleteBaseline,
    race_pace_ratio: float = 0.90,
    competition_margin: float = 1.05,
) -> Tuple[bool, str]:
    """Pace (s/km) markedly faster than easy, or close to competition pace."""
    if current_pace <= 0 or baseline.avg_easy_pace <= 0:
        return False, ""

    if current_pace < baseline.avg_easy_pace * race_pace_ratio:
        faster = round((1 - current_pace / baseline.avg_easy_pace) * 100)
        return True, f"{faster}% más rápido que habitual"

    if 0 < baseline.avg_competition_pace and current_pace <= baseline.avg_competition_pace * competition_margin:
        return True, "ritmo de competición"

    return False, ""


def race_hr_by_history(
    current_hr: Optional[float],
    baseline: AthleteBaseline,
    hr_ratio: float = 1.15,
) -> Tuple[bool, str]:
    """Average HR well above the athlete's usual easy HR."""
    if not current_hr or not baseline.avg_easy_hr:
        return False, ""
    if current_hr > baseline.avg_easy_hr * hr_ratio:
        higher = round((current_hr / baseline.avg_easy_hr - 1) * 100)
        return True, f"FC {higher}% mayor que habitual"
    return False, ""
