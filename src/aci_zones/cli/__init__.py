"""Command line entry point: ``aci-zones``."""

from __future__ import annotations

import logging
import os
import sys
from typing import Annotated

import typer

from aci_zones import __version__

app = typer.Typer(
    name="aci-zones",
    help="Provision Default / ZoneOfZones / ZoneOfEndpoints zones on Cisco APIC.",
    no_args_is_help=True,
    add_completion=False,
)

LOG_ENV_VAR = "ACI_ZONES_LOG"
_LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"

# -v count → level of the aci_zones logger.
_VERBOSITY_LEVELS = (logging.INFO, logging.DEBUG)


def _level_from_env(value: str) -> int:
    level = logging.getLevelName(value.upper())
    if isinstance(level, int):
        return level
    typer.echo(
        f"Ignoring {LOG_ENV_VAR}={value!r}: not a logging level, using INFO.",
        err=True,
    )
    return logging.INFO


def _configure_logging(verbose: int) -> None:
    """Route ``aci_zones`` log records to stderr.

    ``ACI_ZONES_LOG`` wins over ``-v`` flags. With neither, logging is left
    untouched so library users keep control of it.
    """
    env_value = os.environ.get(LOG_ENV_VAR, "")
    if env_value:
        level = _level_from_env(env_value)
    elif verbose > 0:
        level = _VERBOSITY_LEVELS[min(verbose, len(_VERBOSITY_LEVELS)) - 1]
    else:
        return
    # Root stays at WARNING so requests/urllib3 do not flood -vv output.
    logging.basicConfig(
        level=logging.WARNING,
        format=_LOG_FORMAT,
        stream=sys.stderr,
        force=True,
    )
    logging.getLogger("aci_zones").setLevel(level)


def _print_version(value: bool) -> None:
    if not value:
        return
    typer.echo(f"aci-zones {__version__}")
    raise typer.Exit


@app.callback()
def main(
    version: Annotated[
        bool | None,
        typer.Option(
            "--version",
            "-V",
            help="Print the version and exit.",
            callback=_print_version,
            is_eager=True,
        ),
    ] = None,
    verbose: Annotated[
        int,
        typer.Option("--verbose", "-v", count=True, help="-v for info logs, -vv for debug."),
    ] = 0,
) -> None:
    del version
    _configure_logging(verbose)


from aci_zones.cli import commands as _commands  # noqa: E402, F401
