"""httpx-based client for the admin service version check API.

All methods return typed responses or raise TransportFailure /
ProtocolFault / DecodeFailure. Nothing is retried here.
"""

from __future__ import annotations

import logging
from typing import Any

import httpx
from pydantic import ValidationError

from versioncheck import __version__
from versioncheck.admin_client.models import (
    Acknowledged,
    AdminSession,
    AuthRequest,
    CheckAction,
    CheckResponse,
    StatusReport,
    VersionCheckRequest,
)
from versioncheck.errors import DecodeFailure, ProtocolFault, TransportFailure

logger = logging.getLogger(__name__)

ADMIN_PATH = "/service/admin/json"
USER_AGENT = f"versioncheck/{__version__}"


class AdminClient:
    """Synchronous httpx client for the admin JSON endpoint."""

    def __init__(
        self,
        base_url: str,
        timeout: float = 30.0,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self._url = f"{base_url.rstrip('/')}{ADMIN_PATH}"
        self._timeout = timeout
        self._transport = transport

    @property
    def url(self) -> str:
        return self._url

    def _invoke(self, envelope: dict[str, Any]) -> dict[str, Any]:
        """POST an envelope and return its ``Body`` element."""
        try:
            with httpx.Client(timeout=self._timeout, transport=self._transport) as client:
                resp = client.post(
                    self._url,
                    json=envelope,
                    headers={"User-Agent": USER_AGENT},
                )
        except httpx.TimeoutException as e:
            raise TransportFailure(f"Admin request to {self._url} timed out") from e
        except httpx.TransportError as e:
            raise TransportFailure(f"Admin service unreachable at {self._url}: {e}") from e

        try:
            payload = resp.json()
        except ValueError:
            if resp.status_code >= 400:
                raise TransportFailure(f"HTTP {resp.status_code} from {self._url}")
            raise DecodeFailure("Response body is not valid JSON")

        body = payload.get("Body") if isinstance(payload, dict) else None
        if isinstance(body, dict) and isinstance(body.get("Fault"), dict):
            raise _fault(body["Fault"])
        if resp.status_code >= 400:
            raise TransportFailure(f"HTTP {resp.status_code} from {self._url}")
        if not isinstance(body, dict):
            raise DecodeFailure("Response has no Body element")
        return body

    # ── High-level methods ───────────────────────────────────────────────

    def authenticate(self, name: str, password: str) -> AdminSession:
        """AuthRequest -> AdminSession"""
        body = self._invoke(AuthRequest(name=name, password=password).to_envelope())
        element = body.get("AuthResponse")
        if not isinstance(element, dict):
            raise DecodeFailure("Missing AuthResponse element")
        token = _content(element.get("authToken"))
        if not token:
            raise DecodeFailure("AuthResponse carries no authToken")
        lifetime = _content(element.get("lifetime"))
        try:
            return AdminSession(auth_token=str(token), lifetime_ms=lifetime)
        except ValidationError as e:
            raise DecodeFailure(f"Malformed AuthResponse: {e}") from e

    def send_check(self, session: AdminSession, action: CheckAction) -> CheckResponse:
        """VersionCheckRequest -> Acknowledged | StatusReport"""
        req = VersionCheckRequest(action=action, session=session)
        logger.debug("Sending VersionCheckRequest action=%s to %s", action.value, self._url)
        body = self._invoke(req.to_envelope())

        element = body.get("VersionCheckResponse")
        if not isinstance(element, dict):
            raise DecodeFailure("Missing VersionCheckResponse element")
        if action is CheckAction.CHECK:
            return Acknowledged()
        return _decode_status(element)


# ── Decoders ─────────────────────────────────────────────────────────────────


def _content(value: Any) -> Any:
    """Unwrap ``[{"_content": x}]`` / ``{"_content": x}`` into ``x``."""
    if isinstance(value, list):
        value = value[0] if value else None
    if isinstance(value, dict):
        return value.get("_content")
    return value


def _fault(fault: dict[str, Any]) -> ProtocolFault:
    reason = (fault.get("Reason") or {}).get("Text", "unknown fault")
    code = ((fault.get("Detail") or {}).get("Error") or {}).get("Code", "unknown")
    return ProtocolFault(str(code), str(reason))


def _decode_status(element: dict[str, Any]) -> StatusReport:
    updates = element.get("updates") or {}
    if isinstance(updates, list):
        # Container wrapped in a list: [{"update": [...]}]
        updates = updates[0] if len(updates) == 1 else None
    if not isinstance(updates, dict):
        raise DecodeFailure("Malformed updates element")
    records = updates.get("update") or []
    if isinstance(records, dict):
        records = [records]
    try:
        return StatusReport(updates=records)
    except ValidationError as e:
        raise DecodeFailure(f"Malformed update record: {e}") from e
