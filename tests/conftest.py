"""Shared test fixtures."""

from __future__ import annotations

import json
from collections.abc import Callable
from pathlib import Path
from typing import Any

import httpx
import pytest
import yaml

from versioncheck.admin_client.client import AdminClient

LOCAL_ID = "1b6a4c2e-local"
OTHER_ID = "7f00d9aa-other"


@pytest.fixture
def write_provisioning(tmp_path: Path) -> Callable[..., Path]:
    """Write a provisioning.yaml with the given attrs and a two-node inventory."""

    def _write(servers: list[dict[str, str]] | None = None, **attrs: Any) -> Path:
        data = {
            "config": attrs,
            "servers": servers if servers is not None else [
                {"id": LOCAL_ID, "name": "mail1.example.com"},
                {"id": OTHER_ID, "name": "mail2.example.com"},
            ],
        }
        path = tmp_path / "provisioning.yaml"
        path.write_text(yaml.dump(data))
        return path

    return _write


class FakeAdminService:
    """In-memory admin endpoint for httpx.MockTransport."""

    def __init__(self, updates: list[dict[str, Any]] | None = None) -> None:
        self.updates = updates or []
        self.requests: list[dict[str, Any]] = []

    @property
    def actions(self) -> list[str]:
        return [
            r["Body"]["VersionCheckRequest"]["action"]
            for r in self.requests
            if "VersionCheckRequest" in r["Body"]
        ]

    def handler(self, request: httpx.Request) -> httpx.Response:
        envelope = json.loads(request.content)
        self.requests.append(envelope)
        body = envelope["Body"]
        if "AuthRequest" in body:
            return httpx.Response(200, json={
                "Body": {"AuthResponse": {
                    "authToken": [{"_content": "tok-123"}],
                    "lifetime": [{"_content": 43200000}],
                }},
            })
        action = body["VersionCheckRequest"]["action"]
        if action == "status":
            return httpx.Response(200, json={
                "Body": {"VersionCheckResponse": {"updates": {"update": self.updates}}},
            })
        return httpx.Response(200, json={"Body": {"VersionCheckResponse": {}}})


@pytest.fixture
def admin_service() -> FakeAdminService:
    return FakeAdminService()


@pytest.fixture
def admin_client(admin_service: FakeAdminService) -> AdminClient:
    return AdminClient(
        "https://admin.example.com:7071",
        transport=httpx.MockTransport(admin_service.handler),
    )


@pytest.fixture
def make_client() -> Callable[..., AdminClient]:
    """Build an AdminClient whose transport is served by a handler function."""

    def _make(handler: Callable[[httpx.Request], httpx.Response]) -> AdminClient:
        return AdminClient(
            "https://admin.example.com:7071/",
            transport=httpx.MockTransport(handler),
        )

    return _make
