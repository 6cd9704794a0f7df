from versioncheck.provisioning.store import (
    A_VERSION_CHECK_INTERVAL,
    A_VERSION_CHECK_LAST_ATTEMPT,
    A_VERSION_CHECK_SERVER,
    ProvisioningStore,
    Server,
)

__all__ = [
    "A_VERSION_CHECK_INTERVAL",
    "A_VERSION_CHECK_LAST_ATTEMPT",
    "A_VERSION_CHECK_SERVER",
    "ProvisioningStore",
    "Server",
]
