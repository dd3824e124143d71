#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Time Conversion and Simulation Clock

Maps simulated timestamps to Julian Dates (for orbital position) and to
elapsed hours (for body spin), and tracks the simulated timestamp as it is
advanced by real elapsed time and a speed multiplier.
"""

import logging
from datetime import datetime, timedelta, timezone
from typing import Optional

logger = logging.getLogger(__name__)

# Julian Date of the Unix epoch (1970-01-01T00:00Z)
UNIX_EPOCH_JD = 2440587.5

# Julian Date of the J2000.0 epoch (2000-01-01T12:00 TT)
J2000_JD = 2451545.0

SECONDS_PER_DAY = 86400.0
SECONDS_PER_HOUR = 3600.0

_UNIX_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)

# Range the simulation clock is held to
EARLIEST_TIMESTAMP = datetime.min.replace(tzinfo=timezone.utc)
LATEST_TIMESTAMP = datetime.max.replace(tzinfo=timezone.utc)


def _as_utc(timestamp: datetime) -> datetime:
    """Attach UTC to naive timestamps."""
    if timestamp.tzinfo is None:
        return timestamp.replace(tzinfo=timezone.utc)
    return timestamp


def to_julian_date(timestamp: datetime) -> float:
    """
    Convert a timestamp to a Julian Date.

    The date is taken from the timestamp's wall-clock reading: the UTC
    instant shifted by the timestamp's own UTC offset. The result therefore
    does not depend on the time zone of the machine running the simulation.
    Naive timestamps are read as UTC.

    Parameters
    ----------
    timestamp : datetime
        Simulated timestamp

    Returns
    -------
    float
        Julian Date (days)
    """
    aware = _as_utc(timestamp)
    offset = aware.utcoffset() or timedelta(0)
    unix_seconds = (aware - _UNIX_EPOCH).total_seconds()
    return (unix_seconds + offset.total_seconds()) / SECONDS_PER_DAY + UNIX_EPOCH_JD


def to_elapsed_hours(timestamp: datetime) -> float:
    """
    Hours elapsed since the Unix epoch.

    Only used for spin angles; positions always go through the Julian Date.
    """
    return (_as_utc(timestamp) - _UNIX_EPOCH).total_seconds() / SECONDS_PER_HOUR


def days_since_j2000(jd: float) -> float:
    """Days elapsed between J2000.0 and the given Julian Date."""
    return jd - J2000_JD


# Speed multipliers at or beyond this magnitude (one simulated day per real
# second) are labelled as fast forward / rewind.
FAST_SPEED_THRESHOLD = 86400


def speed_label(speed_multiplier: float) -> str:
    """Human-readable label for a speed multiplier."""
    if speed_multiplier == 0:
        return "Paused"
    if speed_multiplier == 1:
        return "Real Time"
    if speed_multiplier >= FAST_SPEED_THRESHOLD:
        return "Fast Forward"
    if speed_multiplier <= -FAST_SPEED_THRESHOLD:
        return "Rewind"
    return f"x{speed_multiplier:g}"


class SimulationClock:
    """
    Simulated timestamp advanced by scaled real time.

    Parameters
    ----------
    timestamp : datetime, optional
        Initial simulated timestamp (default: now, UTC)
    speed_multiplier : float
        Simulated seconds per real second. Zero pauses the clock, negative
        values run it backwards.

    Attributes
    ----------
    timestamp : datetime
        Current simulated timestamp
    speed_multiplier : float
        Current speed multiplier
    """

    def __init__(
        self,
        timestamp: Optional[datetime] = None,
        speed_multiplier: float = 1.0
    ):
        self.timestamp = timestamp if timestamp is not None else datetime.now(timezone.utc)
        self.speed_multiplier = speed_multiplier

    @property
    def julian_date(self) -> float:
        """Julian Date of the current timestamp."""
        return to_julian_date(self.timestamp)

    @property
    def elapsed_hours(self) -> float:
        """Hours since the Unix epoch at the current timestamp."""
        return to_elapsed_hours(self.timestamp)

    @property
    def paused(self) -> bool:
        return self.speed_multiplier == 0

    def advance(self, real_elapsed: float) -> datetime:
        """
        Advance the clock by real elapsed time.

        The timestamp stops at the earliest or latest representable instant
        instead of overflowing; a warning is logged when it reaches the limit.

        Parameters
        ----------
        real_elapsed : float
            Real time since the previous tick (seconds)

        Returns
        -------
        datetime
            The new simulated timestamp
        """
        seconds = real_elapsed * self.speed_multiplier
        try:
            self.timestamp = self.timestamp + timedelta(seconds=seconds)
        except OverflowError:
            limit = LATEST_TIMESTAMP if seconds > 0 else EARLIEST_TIMESTAMP
            if self.timestamp != limit:
                logger.warning(
                    f"Simulated time reached its range limit, holding at {limit.isoformat()}"
                )
            self.timestamp = limit
        return self.timestamp

    def set_speed(self, speed_multiplier: float) -> None:
        """Change the speed multiplier."""
        self.speed_multiplier = speed_multiplier
        logger.info(f"Speed set to {speed_multiplier:g} ({speed_label(speed_multiplier)})")

    def reset(self, timestamp: Optional[datetime] = None) -> None:
        """Return to the given timestamp (default: now) at real-time speed."""
        self.timestamp = timestamp if timestamp is not None else datetime.now(timezone.utc)
        self.speed_multiplier = 1.0

    def __repr__(self) -> str:
        return (
            f"SimulationClock({self.timestamp.isoformat()}, "
            f"speed={self.speed_multiplier:g} [{speed_label(self.speed_multiplier)}])"
        )
