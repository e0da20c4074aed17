import math
from datetime import datetime, timezone
from typing import Optional, Tuple, Union

from astropy.time import Time

from .paths import (
    DEFAULT_LOCATION,
    REFERENCE_EPOCH_ISO,
    SECONDS_PER_DAY,
    SYNODIC_PERIOD_DAYS,
)


Timestamp = Union[datetime, Time]

REFERENCE_EPOCH = Time(REFERENCE_EPOCH_ISO, format="isot", scale="utc")


def _to_unix_seconds(at: Timestamp) -> float:
    if isinstance(at, Time):
        return float(at.unix)
    if at.tzinfo is None:
        at = at.replace(tzinfo=timezone.utc)
    return at.timestamp()


def fractional_phase(at: Timestamp) -> float:
    """Simple synodic-period based phase fraction in [0, 1).

    0 is new moon and 0.5 full moon. Timestamps before the reference epoch give
    negative elapsed days, which still wrap into [0, 1) thanks to floor().
    Naive datetimes are taken as UTC.
    """
    seconds_since_reference = _to_unix_seconds(at) - float(REFERENCE_EPOCH.unix)
    days_since_reference = seconds_since_reference / SECONDS_PER_DAY
    phase = days_since_reference / SYNODIC_PERIOD_DAYS
    phase = phase - math.floor(phase)
    # floor() of a tiny negative value can round up to exactly 1.0
    return 0.0 if phase >= 1.0 else phase


def clamp_phase(phase: float) -> float:
    """Clip a phase fraction to [0, 1]. NaN becomes 0 (new moon)."""
    phase = float(phase)
    if math.isnan(phase):
        return 0.0
    return max(0.0, min(1.0, phase))


def phase_to_angle(phase: float) -> float:
    """Map a phase fraction onto [0, 2*pi). Phase 1.0 is the same new moon as 0.0."""
    angle = (clamp_phase(phase) % 1.0) * 2.0 * math.pi
    return 0.0 if angle >= 2.0 * math.pi else angle


def resolve_location(location: Optional[Tuple[float, float]]) -> Tuple[float, float]:
    """Return (lat, lon) of the observer, defaulting to Kyoto City.

    The lunar phase does not depend on the observer, so the result is not used
    by the phase or scene computation. It is kept for apparent orientation and
    bright limb support.
    """
    if location is None:
        return DEFAULT_LOCATION
    lat, lon = location
    return (float(lat), float(lon))
