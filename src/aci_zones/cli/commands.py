"""``apply`` and ``validate`` commands."""

from __future__ import annotations

import os
from pathlib import Path
from typing import TYPE_CHECKING, Annotated, Literal

import typer

from aci_zones.cli import app
from aci_zones.cli.errors import handle_error

if TYPE_CHECKING:
    from aci_zones.config.schema import Config, ZoneSpec
    from aci_zones.resources.zone import Zone

DEFAULT_CONFIG = Path("aci-zones.yaml")

ConfigOption = Annotated[
    Path,
    typer.Option("--config", "-c", help="Zone declaration file.", show_default=True),
]
NoColorOption = Annotated[bool, typer.Option("--no-color", help="Plain, uncolored output.")]
AutoApproveOption = Annotated[
    bool, typer.Option("--auto-approve", help="Create zones without asking for confirmation.")
]


def _color_enabled(no_color: bool) -> bool:
    return not no_color and "NO_COLOR" not in os.environ


def _load_or_exit(path: Path, *, color: bool) -> Config:
    from aci_zones.config import load

    try:
        return load(path)
    except Exception as exc:
        raise typer.Exit(handle_error(exc, color=color)) from exc


def _create_zones(cfg: Config, *, color: bool) -> list[Zone]:
    """Run the apply with one progress step per declared zone."""
    from rich.console import Console
    from rich.progress import (
        BarColumn,
        MofNCompleteColumn,
        Progress,
        SpinnerColumn,
        TextColumn,
        TimeElapsedColumn,
    )

    from aci_zones.config import apply

    with Progress(
        SpinnerColumn(),
        TextColumn("{task.description}"),
        BarColumn(),
        MofNCompleteColumn(),
        TimeElapsedColumn(),
        console=Console(no_color=not color, stderr=False),
        transient=True,
    ) as bar:
        step = bar.add_task("Creating zones", total=len(cfg.zones))

        def report(spec: ZoneSpec, event: Literal["start", "done"]) -> None:
            if event == "start":
                bar.update(step, description=f"{spec.name}: Creating...")
                return
            bar.console.print(f"  {spec.name}: Creation complete")
            bar.advance(step)

        return apply(cfg, progress=report)


@app.command(name="apply")
def apply_cmd(
    config: ConfigOption = DEFAULT_CONFIG,
    auto_approve: AutoApproveOption = False,
    no_color: NoColorOption = False,
) -> None:
    """Create the declared zones on the controller, in declaration order."""
    from aci_zones.cli.formatting import format_apply_summary, format_hierarchy

    color = _color_enabled(no_color)
    cfg = _load_or_exit(config, color=color)
    if not cfg.zones:
        typer.echo("No zones declared.")
        return

    typer.echo(format_hierarchy(cfg.zones, color=color) + "\n")
    if not auto_approve and not typer.confirm("Do you want to create these zones?"):
        typer.echo("Apply canceled.", err=True)
        raise typer.Exit(1)

    try:
        created = _create_zones(cfg, color=color)
    except Exception as exc:
        raise typer.Exit(handle_error(exc, color=color)) from exc

    typer.echo("\n" + format_apply_summary(len(created), color=color))


@app.command()
def validate(config: ConfigOption = DEFAULT_CONFIG, no_color: NoColorOption = False) -> None:
    """Check the declaration without contacting the controller."""
    from aci_zones.cli.formatting import styler

    color = _color_enabled(no_color)
    cfg = _load_or_exit(config, color=color)
    n = len(cfg.zones)
    message = f"Configuration is valid ({n} zone{'' if n == 1 else 's'})."
    typer.echo(styler(color)(message, fg="green"))
