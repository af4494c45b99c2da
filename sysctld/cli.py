"""Command line entry point for sysctld."""

from __future__ import annotations

import logging

import click
import uvicorn

from sysctld.config import default_config, parse_address

logger = logging.getLogger(__name__)

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


@click.command()
@click.version_option(package_name="sysctld")
@click.option(
    "--address",
    default=default_config.address,
    show_default=True,
    help="address to listen on (host:port)",
)
@click.option(
    "--log-level",
    type=click.Choice(LOG_LEVELS, case_sensitive=False),
    default=None,
    help="Override SYSCTLD_LOG_LEVEL.",
)
def main(address: str, log_level: str | None) -> None:
    """Serve integer and string sysctl values as JSON over HTTP."""
    try:
        host, port = parse_address(address)
    except ValueError as exc:
        raise click.BadParameter(str(exc), param_hint="--address") from exc

    from sysctld.server import app

    level = (log_level or default_config.log_level).upper()
    logging.getLogger().setLevel(level)

    logger.info('Listening on "%s"...', address)
    uvicorn.run(app, host=host, port=port, log_level=level.lower())
