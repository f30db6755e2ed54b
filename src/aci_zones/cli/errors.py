"""Map exceptions to clean stderr messages and exit codes."""

from __future__ import annotations

import typer


def _err(msg: str, *, fg: str | None) -> None:
    """Print a styled message to stderr."""
    typer.echo(typer.style(msg, fg=fg), err=True)


def handle_error(exc: Exception, *, color: bool = True) -> int:
    """Print a clean error message to stderr and return an exit code.

    All errors map to exit code 1.  No tracebacks are printed.
    """
    from aci_zones.config.loader import ConfigError
    from aci_zones.engine.errors import ApplyError, ExternalAdapterError, ZoneError

    fg = typer.colors.RED if color else None

    if isinstance(exc, ConfigError):
        _err("Configuration error:", fg=fg)
        for line in str(exc).splitlines():
            _err(f"  - {line}", fg=fg)
    elif isinstance(exc, ApplyError):
        _err(f"Apply failed: {exc}", fg=fg)
        cause = exc.__cause__
        if isinstance(cause, ExternalAdapterError) and cause.partial:
            _err(f"  Left on the controller: {', '.join(cause.partial)}.", fg=fg)
        if exc.created:
            names = ", ".join(z.name for z in exc.created)
            _err(f"  Partial result: {len(exc.created)} created ({names}).", fg=fg)
    elif isinstance(exc, ZoneError):
        _err(f"Zone error: {exc}", fg=fg)
    else:
        _err(f"Error: {exc}", fg=fg)

    return 1
