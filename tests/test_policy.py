"""Tests for the policy clock, time parsers and cluster authority."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest

from versioncheck.errors import ConfigurationError
from versioncheck.policy.authority import ClusterAuthority, is_authorized, resolve_authority
from versioncheck.policy.clock import CheckPolicy, DueKind, is_check_due
from versioncheck.policy.timeutil import parse_interval, parse_timestamp
from versioncheck.provisioning.store import ProvisioningStore, Server

NOW = datetime(2025, 6, 1, 12, 0, 0, tzinfo=timezone.utc)

LOCAL = Server(id="1b6a4c2e-local", name="mail1.example.com")
OTHER = Server(id="7f00d9aa-other", name="mail2.example.com")


# ── Interval parsing ─────────────────────────────────────────────────────────


class TestParseInterval:
    @pytest.mark.parametrize(
        "value, expected",
        [
            ("1h", 3600),
            ("30m", 1800),
            ("2d", 172800),
            ("45s", 45),
            ("3600", 3600),
            ("1500ms", 1),
            (" 12H ", 43200),
        ],
    )
    def test_units(self, value: str, expected: int) -> None:
        assert parse_interval(value) == expected

    @pytest.mark.parametrize("value", [None, "", "   ", "0", "0h"])
    def test_disabled_values(self, value: str | None) -> None:
        assert parse_interval(value) == 0

    @pytest.mark.parametrize("value", ["soon", "-5m", "1w", "1.5h"])
    def test_invalid(self, value: str) -> None:
        with pytest.raises(ConfigurationError):
            parse_interval(value)


# ── Timestamp parsing ────────────────────────────────────────────────────────


class TestParseTimestamp:
    def test_generalized_time(self) -> None:
        assert parse_timestamp("20250601120000Z") == NOW

    def test_generalized_time_fraction(self) -> None:
        ts = parse_timestamp("20250601120000.250Z")
        assert ts.microsecond == 250000

    def test_generalized_time_offset(self) -> None:
        ts = parse_timestamp("20250601070000-0500")
        assert ts == NOW

    def test_iso8601(self) -> None:
        assert parse_timestamp("2025-06-01T12:00:00Z") == NOW
        assert parse_timestamp("2025-06-01T14:00:00+02:00") == NOW

    def test_naive_iso_rejected(self) -> None:
        with pytest.raises(ConfigurationError):
            parse_timestamp("2025-06-01T12:00:00")

    @pytest.mark.parametrize(
        "value",
        [
            "yesterday",
            "20251301120000Z",
            "2025-06-01Tnope",
            "20250601120000+9999",
            "20250601120000+9960",
        ],
    )
    def test_invalid(self, value: str) -> None:
        with pytest.raises(ConfigurationError):
            parse_timestamp(value)


# ── Policy clock ─────────────────────────────────────────────────────────────


class TestPolicyClock:
    @pytest.mark.parametrize("interval", [0, -1])
    def test_disabled_regardless_of_elapsed(self, interval: int) -> None:
        for last in (None, NOW - timedelta(days=365), NOW):
            decision = is_check_due(CheckPolicy(interval, last), NOW)
            assert decision.kind is DueKind.DISABLED

    def test_never_checked_is_due(self) -> None:
        decision = is_check_due(CheckPolicy(3600, None), NOW)
        assert decision.kind is DueKind.DUE

    @pytest.mark.parametrize("elapsed", [3600, 3601, 7200, 10**6])
    def test_due_when_elapsed_reaches_interval(self, elapsed: int) -> None:
        policy = CheckPolicy(3600, NOW - timedelta(seconds=elapsed))
        assert is_check_due(policy, NOW).kind is DueKind.DUE

    @pytest.mark.parametrize("elapsed", [0, 1, 600, 3599])
    def test_too_early_below_interval(self, elapsed: int) -> None:
        policy = CheckPolicy(3600, NOW - timedelta(seconds=elapsed))
        decision = is_check_due(policy, NOW)
        assert decision.kind is DueKind.TOO_EARLY
        assert decision.seconds_remaining == 3600 - elapsed

    def test_sub_second_precision_discarded(self) -> None:
        # 3599.6s apart, but 3600 whole seconds once both are truncated
        last = datetime(2025, 6, 1, 10, 59, 59, 900000, tzinfo=timezone.utc)
        now = datetime(2025, 6, 1, 11, 59, 59, 500000, tzinfo=timezone.utc)
        assert is_check_due(CheckPolicy(3600, last), now).kind is DueKind.DUE

    def test_naive_now_rejected(self) -> None:
        policy = CheckPolicy(3600, NOW - timedelta(hours=2))
        with pytest.raises(ValueError):
            is_check_due(policy, datetime(2025, 6, 1, 12, 0, 0))

    def test_scenario_hourly_two_hours_ago(self) -> None:
        policy = CheckPolicy.from_attrs("1h", "20250601100000Z")
        assert is_check_due(policy, NOW).kind is DueKind.DUE

    def test_scenario_hourly_ten_minutes_ago(self) -> None:
        policy = CheckPolicy.from_attrs("1h", "20250601115000Z")
        decision = is_check_due(policy, NOW)
        assert decision.kind is DueKind.TOO_EARLY
        assert decision.seconds_remaining == 3000

    def test_from_attrs_missing_values(self) -> None:
        policy = CheckPolicy.from_attrs(None, None)
        assert policy.disabled
        assert policy.last_attempt is None

    def test_from_attrs_bad_timestamp(self) -> None:
        with pytest.raises(ConfigurationError):
            CheckPolicy.from_attrs("1h", "not-a-date")

    @pytest.mark.parametrize("interval", ["0", "", None])
    def test_from_attrs_disabled_skips_last_attempt(self, interval) -> None:
        policy = CheckPolicy.from_attrs(interval, "not-a-date")
        assert policy.disabled
        assert policy.last_attempt is None
        assert is_check_due(policy, NOW).kind is DueKind.DISABLED


# ── Cluster authority ────────────────────────────────────────────────────────


class TestIsAuthorized:
    def test_no_designated_server(self) -> None:
        assert is_authorized(ClusterAuthority(designated_server_id=None))

    def test_reflexive_case_insensitive(self) -> None:
        upper = Server(id=LOCAL.id.upper(), name=LOCAL.name)
        authority = ClusterAuthority(LOCAL.id, designated_server=upper, local_server=LOCAL)
        assert is_authorized(authority)

    def test_other_designated_server(self) -> None:
        authority = ClusterAuthority(OTHER.id, designated_server=OTHER, local_server=LOCAL)
        assert not is_authorized(authority)

    def test_unresolvable_designated_fails_open(self) -> None:
        authority = ClusterAuthority("gone", designated_server=None, local_server=LOCAL)
        assert is_authorized(authority)

    def test_unresolvable_local_fails_open(self) -> None:
        authority = ClusterAuthority(OTHER.id, designated_server=OTHER, local_server=None)
        assert is_authorized(authority)


class TestResolveAuthority:
    def test_unset(self, write_provisioning) -> None:
        store = ProvisioningStore(write_provisioning())
        authority = resolve_authority(store, "mail1.example.com")
        assert authority.designated_server_id is None
        assert is_authorized(authority)

    def test_resolves_both_servers(self, write_provisioning) -> None:
        store = ProvisioningStore(write_provisioning(versionCheckServer=OTHER.id))
        authority = resolve_authority(store, "MAIL1.example.com")
        assert authority.designated_server == OTHER
        assert authority.local_server == LOCAL
        assert not is_authorized(authority)

    def test_unknown_designated_fails_open(self, write_provisioning, caplog) -> None:
        store = ProvisioningStore(write_provisioning(versionCheckServer="missing-id"))
        authority = resolve_authority(store, "mail1.example.com")
        assert is_authorized(authority)
        assert "not in inventory" in caplog.text

    def test_unknown_local_fails_open(self, write_provisioning) -> None:
        store = ProvisioningStore(write_provisioning(versionCheckServer=OTHER.id))
        authority = resolve_authority(store, "unlisted.example.com")
        assert authority.local_server is None
        assert is_authorized(authority)

    def test_fail_closed_unknown_designated(self, write_provisioning) -> None:
        store = ProvisioningStore(write_provisioning(versionCheckServer="missing-id"))
        with pytest.raises(ConfigurationError, match="missing-id"):
            resolve_authority(store, "mail1.example.com", fail_closed=True)

    def test_fail_closed_unknown_local(self, write_provisioning) -> None:
        store = ProvisioningStore(write_provisioning(versionCheckServer=OTHER.id))
        with pytest.raises(ConfigurationError, match="unlisted"):
            resolve_authority(store, "unlisted.example.com", fail_closed=True)
