"""Typed dataclasses for the DayBoard data model.

All models use from_dict/to_dict for JSON serialization.
camelCase in JSON is mapped to snake_case in Python.
Unknown keys are ignored; missing keys use defaults.
"""

from __future__ import annotations

import logging
import re
import secrets
from dataclasses import dataclass, field, replace
from datetime import date
from enum import Enum
from typing import Any

logger = logging.getLogger(__name__)


# ── Containers & colours ──────────────────────────────────────

TRAY = "tray"
ROOT = "root"

DEFAULT_COLOR = "#A9B700"
DIM_COLOR = "#D3D3D3"

PALETTE = {
    "Olive": DEFAULT_COLOR,
    "Teal": "#00897B",
    "Blue": "#1E88E5",
    "Indigo": "#3949AB",
    "Purple": "#8E24AA",
    "Red": "#E53935",
    "Orange": "#FB8C00",
    "Brown": "#6D4C41",
}

_HEX_RE = re.compile(r"^#?([0-9a-fA-F]{6})$")


def slot_name(index: int) -> str:
    return f"day{index}"


def normalize_color(value: Any) -> str:
    """Return '#RRGGBB' upper-cased, or the default colour for anything else."""
    m = _HEX_RE.match(str(value or "").strip())
    if not m:
        return DEFAULT_COLOR
    return "#" + m.group(1).upper()


def new_tile_id() -> str:
    return secrets.token_hex(6)


def _parse_day(raw: Any) -> date:
    """Parse 'YYYY-MM-DD' or a full ISO timestamp down to its date."""
    if isinstance(raw, date):
        return raw
    s = str(raw).strip()
    return date.fromisoformat(s[:10])


# ── Tiles ─────────────────────────────────────────────────────


class TileKind(str, Enum):
    TEMPLATE = "template"
    SCHEDULED = "scheduled"


@dataclass
class Tile:
    """One task block. Position is relative to its container."""

    text: str = ""
    color: str = DEFAULT_COLOR
    kind: TileKind = TileKind.TEMPLATE
    container: str = TRAY
    x: int = 0
    y: int = 0
    width: int = 0
    height: int = 0
    visible: bool = True
    restore_color: str | None = None
    owner_day: date | None = None
    id: str = field(default_factory=new_tile_id, compare=False)

    @property
    def dimmed(self) -> bool:
        return not self.visible

    def copy(self, **changes: Any) -> Tile:
        """Same-styled sibling with a fresh id."""
        changes.setdefault("id", new_tile_id())
        return replace(self, **changes)

    @classmethod
    def from_dict(cls, d: dict[str, Any], kind: TileKind = TileKind.TEMPLATE) -> Tile:
        owner_day = None
        raw_day = d.get("ownerDay")
        if raw_day not in (None, ""):
            try:
                owner_day = _parse_day(raw_day)
            except (TypeError, ValueError):
                logger.warning("Malformed ownerDay %r on tile %r, returning it to the tray", raw_day, d.get("text"))
                kind = TileKind.TEMPLATE
        if kind is TileKind.TEMPLATE:
            owner_day = None
        restore = d.get("restoreColor")
        return cls(
            id=str(d.get("id") or new_tile_id()),
            text=str(d.get("text", "") or ""),
            color=normalize_color(d.get("color")),
            kind=kind,
            container=str(d.get("container", TRAY) or TRAY),
            x=int(d.get("x", 0) or 0),
            y=int(d.get("y", 0) or 0),
            width=int(d.get("width", 0) or 0),
            height=int(d.get("height", 0) or 0),
            visible=bool(d.get("visible", True)),
            restore_color=normalize_color(restore) if restore else None,
            owner_day=owner_day,
        )

    def to_dict(self) -> dict[str, Any]:
        d: dict[str, Any] = {
            "id": self.id,
            "text": self.text,
            "color": self.color,
            "container": self.container,
            "ownerDay": self.owner_day.isoformat() if self.owner_day else None,
            "x": self.x,
            "y": self.y,
            "width": self.width,
            "height": self.height,
            "visible": self.visible,
        }
        if self.restore_color:
            d["restoreColor"] = self.restore_color
        return d


# ── Snapshot ──────────────────────────────────────────────────


@dataclass
class AppSnapshot:
    scheduled_tiles: list[Tile] = field(default_factory=list)
    template_tiles: list[Tile] = field(default_factory=list)
    last_saved_date: date = field(default_factory=date.today)

    @classmethod
    def empty(cls, today: date | None = None) -> AppSnapshot:
        return cls(last_saved_date=today or date.today())

    def validate(self) -> list[str]:
        """Check the day/tray partition and return a list of errors (empty if valid)."""
        errors = []
        for t in self.scheduled_tiles:
            if t.owner_day is None:
                errors.append(f"Scheduled tile {t.text!r} has no owner day")
            if t.kind is not TileKind.SCHEDULED:
                errors.append(f"Tile {t.text!r} in scheduled list is {t.kind.value}")
        for t in self.template_tiles:
            if t.owner_day is not None:
                errors.append(f"Template tile {t.text!r} has owner day {t.owner_day}")
            if t.kind is not TileKind.TEMPLATE:
                errors.append(f"Tile {t.text!r} in template list is {t.kind.value}")
        return errors

    @classmethod
    def from_dict(cls, d: dict[str, Any], today: date | None = None) -> AppSnapshot:
        if not d or not isinstance(d, dict):
            return cls.empty(today)
        try:
            last_saved = _parse_day(d.get("lastSavedDate"))
        except (TypeError, ValueError):
            last_saved = today or date.today()
        return cls(
            scheduled_tiles=[
                Tile.from_dict(t, TileKind.SCHEDULED)
                for t in (d.get("scheduledTiles") or [])
                if isinstance(t, dict)
            ],
            template_tiles=[
                Tile.from_dict(t, TileKind.TEMPLATE)
                for t in (d.get("templateTiles") or [])
                if isinstance(t, dict)
            ],
            last_saved_date=last_saved,
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "lastSavedDate": self.last_saved_date.isoformat(),
            "scheduledTiles": [t.to_dict() for t in self.scheduled_tiles],
            "templateTiles": [t.to_dict() for t in self.template_tiles],
        }
