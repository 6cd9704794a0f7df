"""Entry point for the `versioncheck` console script."""

from __future__ import annotations

import argparse
import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path

from rich.console import Console

from versioncheck import __version__
from versioncheck.admin_client.client import AdminClient
from versioncheck.config import settings
from versioncheck.dispatch.controller import DispatchController, Mode
from versioncheck.errors import VersionCheckError
from versioncheck.provisioning.store import ProvisioningStore

logger = logging.getLogger(__name__)

console = Console()
err_console = Console(stderr=True)

LOG_FORMAT = "%(asctime)s [%(name)s] %(levelname)s: %(message)s"


def setup_logging() -> None:
    """Console logging, plus a rotating diagnostic log when log_file is set."""
    logging.basicConfig(
        level=getattr(logging, settings.log_level.upper(), logging.INFO),
        format=LOG_FORMAT,
    )
    if settings.log_file:
        file_handler = RotatingFileHandler(
            settings.log_file,
            maxBytes=settings.log_max_bytes,
            backupCount=settings.log_backup_count,
            encoding="utf-8",
        )
        file_handler.setFormatter(logging.Formatter(LOG_FORMAT))
        logging.getLogger().addHandler(file_handler)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="versioncheck",
        description="Request or report an admin-service version check",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    group = parser.add_mutually_exclusive_group()
    # Used by the scheduler; exits early when the check interval is 0
    group.add_argument(
        "-c", "--autocheck", dest="mode", action="store_const", const=Mode.AUTO,
        help=argparse.SUPPRESS,
    )
    group.add_argument(
        "-m", "--manual", dest="mode", action="store_const", const=Mode.MANUAL,
        help="Initiate version check request.",
    )
    group.add_argument(
        "-r", "--result", dest="mode", action="store_const", const=Mode.RESULT,
        help="Show results of last version check.",
    )
    return parser


def _echo(line: str) -> None:
    # Update URLs may contain brackets; print verbatim on one line
    console.print(line, markup=False, highlight=False, soft_wrap=True)


def build_controller() -> DispatchController:
    """Wire the config store, admin client and operator output together."""
    provisioning_path = Path(settings.provisioning_file)
    if not provisioning_path.is_absolute():
        provisioning_path = Path.cwd() / provisioning_path

    client = AdminClient(settings.admin_url, timeout=settings.request_timeout)
    return DispatchController(
        store=ProvisioningStore(provisioning_path),
        client=client,
        authenticate=lambda: client.authenticate(
            settings.admin_user, settings.admin_password
        ),
        local_server=settings.local_server,
        fail_closed=settings.authority_fail_closed,
        echo=_echo,
    )


def main(argv: list[str] | None = None) -> None:
    parser = build_parser()
    args = parser.parse_args(argv)
    if args.mode is None:
        parser.print_help()
        sys.exit(1)

    setup_logging()

    try:
        outcome = build_controller().run(args.mode)
    except VersionCheckError as e:
        logger.error("Version check failed (%s): %s", type(e).__name__, e)
        err_console.print(
            str(e), style="bold red", markup=False, highlight=False, soft_wrap=True
        )
        sys.exit(e.exit_code)

    if outcome.message:
        _echo(outcome.message)
    sys.exit(outcome.exit_code)


if __name__ == "__main__":
    main()
