"""Zone hierarchy and apply output rendering."""

from __future__ import annotations

from typing import TYPE_CHECKING

import typer

from aci_zones.resources.zone import ZoneType

if TYPE_CHECKING:
    from collections.abc import Callable

    from aci_zones.config.schema import ZoneSpec


def styler(color: bool) -> Callable[..., str]:
    """Return ``typer.style`` when *color* is True, otherwise a passthrough."""
    if color:
        return typer.style
    return lambda text, **_kw: text


def controller_objects(spec: ZoneSpec) -> str:
    """Describe the APIC objects a declared zone maps to."""
    match spec.type:
        case ZoneType.DEFAULT:
            return f"tenant {spec.name}"
        case ZoneType.ZONE_OF_ZONES:
            return f"application profile {spec.name}, VRF {spec.name}-VRF"
        case ZoneType.ZONE_OF_ENDPOINTS:
            return f"bridge domain {spec.name}"
    return ""


def format_hierarchy(zones: list[ZoneSpec], *, color: bool = True) -> str:
    """Render declared zones as a tree, children indented under their parent."""
    s = styler(color)
    children: dict[str | None, list[ZoneSpec]] = {}
    for z in zones:
        children.setdefault(z.parent, []).append(z)

    lines = ["Zones to create:", ""]

    def _walk(parent: str | None, depth: int) -> None:
        for z in children.get(parent, []):
            indent = "  " + "    " * depth
            symbol = s("+", fg="green")
            detail = s(f"({z.type.value}, fabric {z.fabric}: {controller_objects(z)})", dim=True)
            lines.append(f"{indent}{symbol} {s(z.name, bold=True)} {detail}")
            _walk(z.name, depth + 1)

    _walk(None, 0)
    return "\n".join(lines)


def format_apply_summary(created: int, *, color: bool = True) -> str:
    s = styler(color)
    noun = "zone" if created == 1 else "zones"
    return s(f"Apply complete! {created} {noun} created.", fg="green", bold=True)
