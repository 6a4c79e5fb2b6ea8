"""Formatting helpers used by explanations and console output."""

from __future__ import annotations

from typing import Optional


def format_pace(pace_min_km: Optional[float]) -> str:
    """Format min/km as M:SS/km."""
    if not pace_min_km or pace_min_km <= 0:
        return "N/A"
    total_seconds = int(round(float(pace_min_km) * 60))
    m, s = divmod(total_seconds, 60)
    return f"{m}:{s:02d}/km"


def format_pace_seconds(pace_s_km: Optional[float]) -> str:
    """Format s/km as M:SS/km."""
    if not pace_s_km:
        return "N/A"
    return format_pace(float(pace_s_km) / 60.0)


def format_distance(meters: Optional[float]) -> str:
    """Format meters as 800m, 8.5km or 21km."""
    if not meters or meters <= 0:
        return "0m"
    meters = float(meters)
    if meters < 1000:
        return f"{int(round(meters))}m"
    km = meters / 1000
    if km >= 10:
        return f"{km:.0f}km"
    return f"{km:.1f}km"


def format_rep_distance(meters: Optional[float]) -> str:
    """Format an interval distance, rounded to 10 m below one kilometer."""
    if not meters:
        return "?"
    meters = float(meters)
    if meters < 1000:
        return f"{int(round(meters / 10.0) * 10)}m"
    km = meters / 1000
    return f"{km:g}km" if km == round(km, 1) else f"{km:.1f}km"


def format_duration(seconds: Optional[float]) -> str:
    """Format seconds to H:MM:SS or M:SS."""
    if not seconds:
        return "N/A"
    total_seconds = int(round(float(seconds)))
    h, rem = divmod(total_seconds, 3600)
    m, s = divmod(rem, 60)
    if h:
        return f"{h}:{m:02d}:{s:02d}"
    return f"{m}:{s:02d}"
