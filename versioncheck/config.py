from __future__ import annotations

import socket

from pydantic import Field
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Central configuration loaded from environment / .env file."""

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "env_prefix": "VERSIONCHECK_",
        "extra": "ignore",
    }

    # Admin service
    admin_url: str = "https://localhost:7071"
    admin_user: str = "admin"
    admin_password: str = ""
    request_timeout: float = 30.0  # seconds, applies to connect + read

    # Config store (YAML file holding global attrs + server inventory)
    provisioning_file: str = "provisioning.yaml"

    # Name of this node in the server inventory
    local_server: str = Field(default_factory=socket.getfqdn)

    # Unresolvable designated/local server ids are allowed by default
    authority_fail_closed: bool = False

    # Logging
    log_level: str = "INFO"
    log_file: str = ""  # empty = console only
    log_max_bytes: int = 5 * 1024 * 1024
    log_backup_count: int = 3


settings = Settings()
