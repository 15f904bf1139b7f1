"""Terminal rendering of client results for the CLI."""

from __future__ import annotations

import re
from datetime import datetime
from typing import Tuple

import typer

from .config import ColorOption
from .models import Connection, Departure, Footway, Location, Station

RGB = Tuple[int, int, int]
WHITE: RGB = (255, 255, 255)

_HEX = re.compile(r"^#([0-9a-fA-F]{3}|[0-9a-fA-F]{6})$")
_RGB_FUNC = re.compile(r"^rgba?\(\s*(\d{1,3})\s*,\s*(\d{1,3})\s*,\s*(\d{1,3})\s*(?:,\s*[\d.]+\s*)?\)$")


def parse_css_color(value: str) -> RGB:
    """Parse ``#rgb``, ``#rrggbb`` or ``rgb(r, g, b)``; anything else is white."""
    value = (value or "").strip()
    m = _HEX.match(value)
    if m:
        digits = m.group(1)
        if len(digits) == 3:
            digits = "".join(c * 2 for c in digits)
        return int(digits[0:2], 16), int(digits[2:4], 16), int(digits[4:6], 16)
    m = _RGB_FUNC.match(value)
    if m:
        r, g, b = (min(int(x), 255) for x in m.groups())
        return r, g, b
    return WHITE


def to_ansi256(rgb: RGB) -> int:
    r, g, b = (round(c / 255 * 5) for c in rgb)
    return 16 + 36 * r + 6 * g + b


def style_label(label: str, color: str, option: ColorOption) -> str:
    if option is ColorOption.NO:
        return label
    rgb = parse_css_color(color)
    bg = rgb if option is ColorOption.TRUECOLOR else to_ansi256(rgb)
    # dark text on light backgrounds
    fg = "black" if sum(rgb) > 382 else "white"
    return typer.style(f" {label} ", fg=fg, bg=bg)


def format_time(value: datetime) -> str:
    # hour padded with a space, like strftime's %_H
    return f"{value.hour:>2}:{value.minute:02d}"


def format_station(station: Station) -> str:
    return station.display_name()


def format_location(location: Location) -> str:
    return location.display_name()


def format_departure(dep: Departure, option: ColorOption) -> str:
    label = style_label(dep.label, dep.line_background_color, option)
    # pad destination to a tab stop column
    tabs = "\t" * max(5 - len(dep.destination) // 8, 1)
    line = f"{label}\t{dep.destination}{tabs}{format_time(dep.departure_local())}"
    if dep.cancelled:
        line += "  (cancelled)"
    return line


def format_connection(conn: Connection) -> str:
    legs = []
    for part in conn.connection_part_list:
        if isinstance(part, Footway):
            legs.append("walk")
        else:
            legs.append(part.display_label())
    minutes = int(conn.duration().total_seconds() // 60)
    return (
        f"{format_time(conn.departure_time())} - {format_time(conn.arrival_time())}"
        f" ({minutes} min, {conn.transfers} transfers): {' > '.join(legs)}"
    )
