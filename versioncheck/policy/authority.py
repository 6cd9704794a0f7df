"""Cluster authority — only the designated server may initiate checks.

Unresolvable designated or local server identities are treated as
authorized (fail open) unless ``fail_closed`` is requested, in which case
they raise ConfigurationError.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from versioncheck.errors import ConfigurationError
from versioncheck.provisioning.store import (
    A_VERSION_CHECK_SERVER,
    ProvisioningStore,
    Server,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ClusterAuthority:
    designated_server_id: str | None
    designated_server: Server | None = None
    local_server: Server | None = None


def is_authorized(authority: ClusterAuthority) -> bool:
    """True if the local node may run the version check."""
    if not authority.designated_server_id:
        return True
    if authority.designated_server is None or authority.local_server is None:
        return True
    return authority.local_server.id.lower() == authority.designated_server.id.lower()


def resolve_authority(
    store: ProvisioningStore,
    local_name: str,
    fail_closed: bool = False,
) -> ClusterAuthority:
    """Read the designated server id and resolve both ends in the inventory."""
    designated_id = store.get_attr(A_VERSION_CHECK_SERVER) or None
    if designated_id is None:
        return ClusterAuthority(designated_server_id=None)

    designated = store.get_server(designated_id)
    if designated is None:
        if fail_closed:
            raise ConfigurationError(
                f"Designated version check server {designated_id} not found"
            )
        logger.warning(
            "Designated version check server %s not in inventory; allowing check",
            designated_id,
        )
        return ClusterAuthority(designated_server_id=designated_id)

    local = store.local_server(local_name)
    if local is None:
        if fail_closed:
            raise ConfigurationError(f"Local server {local_name} not found")
        logger.warning(
            "Local server %s not in inventory; allowing check", local_name,
        )

    return ClusterAuthority(
        designated_server_id=designated_id,
        designated_server=designated,
        local_server=local,
    )
