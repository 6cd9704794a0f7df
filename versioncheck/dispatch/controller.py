"""Dispatch controller — routes one invocation to a check or a status report.

Check path:  authority -> policy clock -> VersionCheckRequest(check)
Status path: VersionCheckRequest(status) -> one rendered line per update

The routing decision itself lives in ``next_step`` so every terminal outcome
can be tested without a config store or network.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import datetime, timezone
from enum import Enum

from versioncheck.admin_client.client import AdminClient
from versioncheck.admin_client.models import (
    AdminSession,
    CheckAction,
    CheckResponse,
    StatusReport,
    UpdateRecord,
)
from versioncheck.errors import DecodeFailure, VersionCheckError
from versioncheck.policy.authority import is_authorized, resolve_authority
from versioncheck.policy.clock import CheckPolicy, DueDecision, DueKind, is_check_due
from versioncheck.provisioning.store import (
    A_VERSION_CHECK_INTERVAL,
    A_VERSION_CHECK_LAST_ATTEMPT,
    ProvisioningStore,
)

logger = logging.getLogger(__name__)


class Mode(str, Enum):
    AUTO = "auto"  # scheduled; exits when checks are disabled
    MANUAL = "manual"  # operator-initiated; ignores a disabled interval
    RESULT = "result"  # show the last check's findings


class Outcome(str, Enum):
    CHECK_SENT = "check-sent"
    SKIPPED_DISABLED = "skipped-disabled"
    SKIPPED_TOO_EARLY = "skipped-too-early"
    SKIPPED_UNAUTHORIZED = "skipped-unauthorized"
    RENDERED = "rendered"

    @property
    def message(self) -> str:
        return _OUTCOME_MESSAGES[self]

    @property
    def exit_code(self) -> int:
        return 0


_OUTCOME_MESSAGES = {
    Outcome.CHECK_SENT: "Version check request sent",
    Outcome.SKIPPED_DISABLED: "Automatic updates are disabled",
    Outcome.SKIPPED_TOO_EARLY: "Too early",
    Outcome.SKIPPED_UNAUTHORIZED: "Wrong server",
    Outcome.RENDERED: "",
}


class Step(str, Enum):
    SEND_CHECK = "send-check"


def next_step(
    mode: Mode,
    authorized: bool,
    decision: DueDecision | None = None,
) -> Outcome | Step:
    """Pure transition for the check path.

    ``decision`` may be omitted when ``authorized`` is False; authority is
    settled before the policy clock is consulted.
    """
    if mode is Mode.RESULT:
        raise ValueError("next_step only covers the check path")
    if not authorized:
        return Outcome.SKIPPED_UNAUTHORIZED
    if decision is None:
        raise ValueError("A policy decision is required once authorized")

    if decision.kind is DueKind.DISABLED:
        return Outcome.SKIPPED_DISABLED if mode is Mode.AUTO else Step.SEND_CHECK
    if decision.kind is DueKind.TOO_EARLY:
        return Outcome.SKIPPED_TOO_EARLY
    return Step.SEND_CHECK


def render_update(update: UpdateRecord) -> str:
    critical = "critical" if update.critical else "not critical"
    return (
        f"Found a {update.type} update. Update is {critical} . "
        f"Update version: {update.version}. For more info visit: {update.updateURL}"
    )


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class DispatchController:
    """Runs a single version-check invocation end to end."""

    def __init__(
        self,
        store: ProvisioningStore,
        client: AdminClient,
        authenticate: Callable[[], AdminSession],
        local_server: str,
        fail_closed: bool = False,
        echo: Callable[[str], None] = print,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self.store = store
        self.client = client
        self.authenticate = authenticate
        self.local_server = local_server
        self.fail_closed = fail_closed
        self.echo = echo
        self.clock = clock

    def run(self, mode: Mode) -> Outcome:
        if mode is Mode.RESULT:
            return self.show_status()
        return self.run_check(mode)

    def run_check(self, mode: Mode) -> Outcome:
        authority = resolve_authority(self.store, self.local_server, self.fail_closed)
        if not is_authorized(authority):
            logger.info(
                "Skipping version check: designated server is %s, this is %s",
                authority.designated_server_id, self.local_server,
            )
            return Outcome.SKIPPED_UNAUTHORIZED

        policy = CheckPolicy.from_attrs(
            self.store.get_attr(A_VERSION_CHECK_INTERVAL),
            self.store.get_attr(A_VERSION_CHECK_LAST_ATTEMPT),
        )
        decision = is_check_due(policy, self.clock())
        step = next_step(mode, True, decision)

        if step is Outcome.SKIPPED_TOO_EARLY:
            logger.info(
                "Skipping version check: next check due in %ds",
                decision.seconds_remaining,
            )
        if isinstance(step, Outcome):
            return step

        session = self._session()
        self._send(session, CheckAction.CHECK)
        logger.info("Version check requested from %s", self.client.url)
        return Outcome.CHECK_SENT

    def show_status(self) -> Outcome:
        session = self._session()
        report = self._send(session, CheckAction.STATUS)
        if not isinstance(report, StatusReport):
            raise DecodeFailure("Expected a status report for action 'status'")
        for update in report.updates:
            self.echo(render_update(update))
        logger.debug("Rendered %d update records", len(report.updates))
        return Outcome.RENDERED

    def _session(self) -> AdminSession:
        try:
            return self.authenticate()
        except VersionCheckError:
            logger.exception("Admin authentication failed")
            raise

    def _send(self, session: AdminSession, action: CheckAction) -> CheckResponse:
        try:
            return self.client.send_check(session, action)
        except VersionCheckError:
            logger.exception("Version check action '%s' failed", action.value)
            raise
