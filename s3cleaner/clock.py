# SPDX-License-Identifier: LGPL-2.1-only
# Copyright (c) 2026 Akshat Kotpalliwar (alias IntegerAlex)

"""
Time sources for age computation.

The pipeline asks a Clock how long ago an object was modified instead of
reading the wall clock itself, so tests can pin "now" to a fixed instant.
"""

from datetime import UTC, datetime, timedelta
from typing import Protocol


def _as_utc(moment: datetime) -> datetime:
    # S3 timestamps are aware; naive values are taken to be UTC
    if moment.tzinfo is None:
        return moment.replace(tzinfo=UTC)
    return moment


class Clock(Protocol):
    """Anything that can tell the elapsed time since a moment."""

    def since(self, moment: datetime) -> timedelta: ...


class RealClock:
    """Wall clock backed time source."""

    def since(self, moment: datetime) -> timedelta:
        return datetime.now(UTC) - _as_utc(moment)


class FixedClock:
    """Time source frozen at a given instant."""

    def __init__(self, now: datetime):
        self.now = _as_utc(now)

    def since(self, moment: datetime) -> timedelta:
        return self.now - _as_utc(moment)

    def __repr__(self) -> str:
        return f"FixedClock({self.now.isoformat()})"
