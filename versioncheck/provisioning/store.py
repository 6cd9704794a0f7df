"""Provisioning store — read-only key/value config plus server inventory.

Backed by a YAML file of the form::

    config:
      versionCheckServer: 9f1c...
      versionCheckInterval: 1d
      versionCheckLastAttempt: "20250101120000Z"
    servers:
      - id: 9f1c...
        name: mail1.example.com

Attributes are looked up by name; the store never writes back.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml

from versioncheck.errors import ConfigurationError

logger = logging.getLogger(__name__)

# ── Attribute names ──────────────────────────────────────────────────────────

A_VERSION_CHECK_SERVER = "versionCheckServer"
A_VERSION_CHECK_INTERVAL = "versionCheckInterval"
A_VERSION_CHECK_LAST_ATTEMPT = "versionCheckLastAttempt"


# ── Data models ──────────────────────────────────────────────────────────────


@dataclass(frozen=True)
class Server:
    """A cluster member from the server inventory."""

    id: str
    name: str


# ── Store ────────────────────────────────────────────────────────────────────


class ProvisioningStore:
    """Loads and caches global config attributes and servers from YAML."""

    def __init__(self, path: Path) -> None:
        self._path = path
        self._attrs: dict[str, str] = {}
        self._servers: list[Server] = []
        self._loaded = False

    def load(self, force: bool = False) -> None:
        """Parse the provisioning file. Raises ConfigurationError on failure."""
        if self._loaded and not force:
            return

        if not self._path.exists():
            raise ConfigurationError(f"Provisioning file not found: {self._path}")

        try:
            raw = yaml.safe_load(self._path.read_text(encoding="utf-8")) or {}
        except (OSError, yaml.YAMLError) as e:
            raise ConfigurationError(f"Failed to read {self._path}: {e}") from e

        if not isinstance(raw, dict):
            raise ConfigurationError(f"{self._path}: expected a mapping at top level")

        self._attrs = _parse_attrs(raw.get("config") or {})
        self._servers = []
        for entry in raw.get("servers") or []:
            try:
                self._servers.append(_parse_server(entry))
            except (KeyError, TypeError) as e:
                logger.warning("Skipping malformed server entry: %r (%s)", entry, e)

        self._loaded = True
        logger.debug(
            "Loaded %d attributes and %d servers from %s",
            len(self._attrs), len(self._servers), self._path,
        )

    def get_attr(self, name: str) -> str | None:
        """Return a config attribute as a string, or None when unset."""
        self.load()
        return self._attrs.get(name)

    @property
    def servers(self) -> list[Server]:
        self.load()
        return list(self._servers)

    def get_server(self, server_id: str) -> Server | None:
        """Look up a server by id (case-insensitive)."""
        wanted = server_id.lower()
        return next((s for s in self.servers if s.id.lower() == wanted), None)

    def get_server_by_name(self, name: str) -> Server | None:
        """Look up a server by name (case-insensitive)."""
        wanted = name.lower()
        return next((s for s in self.servers if s.name.lower() == wanted), None)

    def local_server(self, local_name: str) -> Server | None:
        """Resolve this node in the inventory, or None if it is not listed."""
        return self.get_server_by_name(local_name)


# ── Parsers ──────────────────────────────────────────────────────────────────


def _parse_attrs(raw: Any) -> dict[str, str]:
    if not isinstance(raw, dict):
        raise ConfigurationError("'config' section must be a mapping")
    attrs: dict[str, str] = {}
    for key, value in raw.items():
        if value is None:
            continue
        attrs[str(key)] = str(value)
    return attrs


def _parse_server(raw: dict[str, Any]) -> Server:
    server_id = str(raw["id"])
    return Server(id=server_id, name=str(raw.get("name", server_id)))
