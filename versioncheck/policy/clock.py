"""Policy clock — decides whether a version check is due.

A check is due when the configured interval has elapsed since the last
attempt, compared in whole seconds. An interval of 0 disables automatic
checks; a missing last attempt means the check has never run and is due.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import datetime
from enum import Enum

from versioncheck.policy.timeutil import parse_interval, parse_timestamp


class DueKind(str, Enum):
    DISABLED = "disabled"
    TOO_EARLY = "too-early"
    DUE = "due"


@dataclass(frozen=True)
class DueDecision:
    kind: DueKind
    seconds_remaining: int = 0


@dataclass(frozen=True)
class CheckPolicy:
    """Check interval and last attempt, as read from the config store."""

    interval_seconds: int = 0
    last_attempt: datetime | None = None

    @property
    def disabled(self) -> bool:
        return self.interval_seconds <= 0

    @classmethod
    def from_attrs(cls, interval: str | None, last_attempt: str | None) -> CheckPolicy:
        """Build a policy from raw attribute strings.

        The last attempt is only parsed when the interval enables checks.
        Raises ConfigurationError if a value that is read cannot be parsed.
        """
        interval_seconds = parse_interval(interval)
        if interval_seconds <= 0 or not last_attempt:
            return cls(interval_seconds=interval_seconds)
        return cls(
            interval_seconds=interval_seconds,
            last_attempt=parse_timestamp(last_attempt),
        )


def _epoch_seconds(ts: datetime) -> int:
    if ts.tzinfo is None:
        raise ValueError(f"Timestamp must be timezone-aware: {ts!r}")
    return math.floor(ts.timestamp())


def is_check_due(policy: CheckPolicy, now: datetime) -> DueDecision:
    """Evaluate the policy at ``now`` (an aware datetime)."""
    if policy.disabled:
        return DueDecision(DueKind.DISABLED)
    if policy.last_attempt is None:
        return DueDecision(DueKind.DUE)

    elapsed = _epoch_seconds(now) - _epoch_seconds(policy.last_attempt)
    if elapsed >= policy.interval_seconds:
        return DueDecision(DueKind.DUE)
    return DueDecision(DueKind.TOO_EARLY, policy.interval_seconds - elapsed)
