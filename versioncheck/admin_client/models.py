"""Pydantic models for admin-service version check requests and responses."""

from __future__ import annotations

from enum import Enum
from typing import Annotated, Any, Literal, Union

from pydantic import BaseModel, ConfigDict, Field

ADMIN_NS = "urn:zimbraAdmin"
CONTEXT_NS = "urn:zimbra"


class CheckAction(str, Enum):
    CHECK = "check"
    STATUS = "status"


class AdminSession(BaseModel):
    """Authenticated admin session handle."""

    auth_token: str
    lifetime_ms: int | None = None


# ── Requests ─────────────────────────────────────────────────────────────────


class VersionCheckRequest(BaseModel):
    action: CheckAction
    session: AdminSession

    def to_envelope(self) -> dict[str, Any]:
        return {
            "Header": {
                "context": {
                    "_jsns": CONTEXT_NS,
                    "authToken": [{"_content": self.session.auth_token}],
                }
            },
            "Body": {
                "VersionCheckRequest": {"_jsns": ADMIN_NS, "action": self.action.value}
            },
        }


class AuthRequest(BaseModel):
    name: str
    password: str

    def to_envelope(self) -> dict[str, Any]:
        return {
            "Header": {"context": {"_jsns": CONTEXT_NS}},
            "Body": {
                "AuthRequest": {
                    "_jsns": ADMIN_NS,
                    "name": self.name,
                    "password": self.password,
                }
            },
        }


# ── Responses ────────────────────────────────────────────────────────────────


class UpdateRecord(BaseModel):
    """A single available update, as reported by the admin service."""

    model_config = ConfigDict(frozen=True)

    type: str
    critical: bool
    version: str
    updateURL: str


class Acknowledged(BaseModel):
    """Reply to a ``check`` action; the check runs server-side."""

    kind: Literal["ack"] = "ack"


class StatusReport(BaseModel):
    """Reply to a ``status`` action; updates keep server order."""

    kind: Literal["status"] = "status"
    updates: list[UpdateRecord] = Field(default_factory=list)


CheckResponse = Annotated[Union[Acknowledged, StatusReport], Field(discriminator="kind")]
