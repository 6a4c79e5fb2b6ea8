"""Personalized heart-rate zones and time-in-zone helpers."""

from __future__ import annotations

import logging
import math
from datetime import date
from typing import Dict, Iterable, Optional, Tuple

from rt_cli.core.constants import DEFAULT_MAX_HR, MAX_HR_AGE_BASE, MIN_HR_RESERVE, ZONE_CUT_POINTS
from rt_cli.core.models import HRZone, HRZones
from rt_cli.core.segments import Segment

logger = logging.getLogger(__name__)


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def calculate_age(birth_date: date, today: Optional[date] = None) -> int:
    """Age in whole years at ``today``."""
    today = today or date.today()
    age = today.year - birth_date.year
    if (today.month, today.day) < (birth_date.month, birth_date.day):
        age -= 1
    return age


def calculate_max_hr(
    birth_date: Optional[date] = None,
    manual_max_hr: Optional[float] = None,
    today: Optional[date] = None,
) -> int:
    """Manual override, else 220 - age, else the default of 190."""
    if manual_max_hr is not None and manual_max_hr > 0:
        return _round_half_up(manual_max_hr)
    if birth_date is None:
        return DEFAULT_MAX_HR

    max_hr = MAX_HR_AGE_BASE - calculate_age(birth_date, today)
    if max_hr <= 0:
        logger.debug("Birth date %s gives max HR %s; using default", birth_date, max_hr)
        return DEFAULT_MAX_HR
    return max_hr


def zone_method(max_hr: float, resting_hr: Optional[float]) -> str:
    """'karvonen' when the resting HR leaves a usable reserve, else 'percent-max'."""
    if resting_hr is not None and resting_hr > 0 and max_hr - resting_hr >= MIN_HR_RESERVE:
        return "karvonen"
    return "percent-max"


def calculate_hr_zones(
    birth_date: Optional[date] = None,
    manual_max_hr: Optional[float] = None,
    resting_hr: Optional[float] = None,
    today: Optional[date] = None,
) -> HRZones:
    """
    Five heart-rate zones from the athlete profile.

    With a usable resting HR the boundaries follow the heart-rate-reserve
    (Karvonen) method, ``resting + (max - resting) * pct``; otherwise they
    are ``max * pct``. Cut points are 50/60/70/80/90/100%.

    Each zone below z5 ends one beat before the next zone starts and z5
    always ends at the max heart rate.
    """
    max_hr = calculate_max_hr(birth_date, manual_max_hr, today)

    method = zone_method(max_hr, resting_hr)
    if method == "karvonen" and resting_hr is not None:
        reserve = max_hr - resting_hr
        bounds = [_round_half_up(resting_hr + reserve * pct) for pct in ZONE_CUT_POINTS]
    else:
        bounds = [_round_half_up(max_hr * pct) for pct in ZONE_CUT_POINTS]

    zones = []
    lower = bounds[0]
    for number in range(5):
        # Leave one beat per remaining zone so z5 still ends at max_hr.
        ceiling = max_hr - (4 - number)
        lower = min(lower, ceiling)
        upper = max_hr if number == 4 else max(lower, min(bounds[number + 1] - 1, ceiling))
        zones.append(HRZone(lower=lower, upper=upper))
        lower = upper + 1

    logger.debug("HR zones (%s, max=%s): %s", method, max_hr, bounds)
    return HRZones(*zones)


def zone_for_hr(hr: float, zones: HRZones) -> int:
    """Zone number (1-5) for a heart rate; values below z1 count as zone 1."""
    if hr >= zones.z5.lower:
        return 5
    if hr >= zones.z4.lower:
        return 4
    if hr >= zones.z3.lower:
        return 3
    if hr >= zones.z2.lower:
        return 2
    return 1


def time_in_zones(segments: Iterable[Segment], zones: HRZones) -> Dict[str, float]:
    """Moving time per zone, assuming each segment's average HR held throughout."""
    totals = {"z1": 0.0, "z2": 0.0, "z3": 0.0, "z4": 0.0, "z5": 0.0, "total": 0.0}
    for segment in segments:
        if not segment.avg_hr:
            continue
        key = f"z{zone_for_hr(segment.avg_hr, zones)}"
        totals[key] += segment.moving_time
        totals["total"] += segment.moving_time
    return totals


def z5_fraction(segments: Iterable[Segment], zones: HRZones) -> float:
    totals = time_in_zones(segments, zones)
    if totals["total"] <= 0:
        return 0.0
    return totals["z5"] / totals["total"]


def race_effort_by_hr(
    segments: Iterable[Segment],
    zones: HRZones,
    avg_hr: Optional[float],
    z5_share: float = 0.40,
    z4z5_share: float = 0.60,
) -> Tuple[bool, str]:
    """
    Race signal from heart rate.

    Any of: at least ``z5_share`` of the time in Z5, an average HR in Z5,
    or more than ``z4z5_share`` of the time in Z4-Z5 with an average HR
    at or above the Z4 floor.
    """
    totals = time_in_zones(segments, zones)
    total = totals["total"]
    share = totals["z5"] / total if total > 0 else 0.0
    if share >= z5_share:
        return True, f"{_round_half_up(share * 100)}% en Z5"
    if avg_hr and avg_hr >= zones.z5.lower:
        return True, f"FC {_round_half_up(avg_hr)} (Z5)"
    high_share = (totals["z4"] + totals["z5"]) / total if total > 0 else 0.0
    if avg_hr and avg_hr >= zones.z4.lower and high_share > z4z5_share:
        return True, f"{_round_half_up(high_share * 100)}% en Z4-Z5"
    return False, ""
