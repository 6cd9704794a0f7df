"""Parsers for duration strings and extended-format timestamps."""

from __future__ import annotations

import re
from datetime import datetime, timezone

from versioncheck.errors import ConfigurationError

# "1d", "12h", "30m", "45s", "1500ms", "3600" (bare number = seconds)
_INTERVAL = re.compile(r"^\s*(\d+)\s*(ms|d|h|m|s)?\s*$", re.IGNORECASE)

_UNIT_SECONDS = {"d": 86400, "h": 3600, "m": 60, "s": 1}

# LDAP generalized time: 20250101120000Z, 20250101120000.123Z, 20250101120000-0500
_GENERALIZED = re.compile(
    r"^(?P<stamp>\d{14})(?:[.,](?P<frac>\d{1,6}))?(?P<tz>Z|[+-]\d{4})$"
)


def parse_interval(value: str | None) -> int:
    """Convert a duration string to whole seconds. Empty or None is 0."""
    if value is None or not value.strip():
        return 0
    m = _INTERVAL.match(value)
    if not m:
        raise ConfigurationError(f"Invalid check interval: {value!r}")
    amount = int(m.group(1))
    unit = (m.group(2) or "s").lower()
    if unit == "ms":
        return amount // 1000
    return amount * _UNIT_SECONDS[unit]


def parse_timestamp(value: str) -> datetime:
    """Parse generalized time or ISO-8601 into an aware datetime.

    Values without a UTC offset are rejected.
    """
    text = value.strip()
    m = _GENERALIZED.match(text)
    if m:
        try:
            dt = datetime.strptime(m.group("stamp"), "%Y%m%d%H%M%S")
        except ValueError as e:
            raise ConfigurationError(f"Invalid timestamp: {value!r}") from e
        if m.group("frac"):
            dt = dt.replace(microsecond=int(m.group("frac").ljust(6, "0")))
        tz = m.group("tz")
        if tz == "Z":
            return dt.replace(tzinfo=timezone.utc)
        try:
            offset = datetime.strptime(tz, "%z").tzinfo
        except ValueError as e:
            raise ConfigurationError(f"Invalid UTC offset in timestamp: {value!r}") from e
        return dt.replace(tzinfo=offset)

    try:
        dt = datetime.fromisoformat(text.replace("Z", "+00:00"))
    except ValueError as e:
        raise ConfigurationError(f"Invalid timestamp: {value!r}") from e
    if dt.tzinfo is None:
        raise ConfigurationError(f"Timestamp has no UTC offset: {value!r}")
    return dt
