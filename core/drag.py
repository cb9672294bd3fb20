"""Pointer interaction for tiles: drag to schedule, copy, delete or revert.

A left press on a tile opens a DragSession. While it is open the tile
lives on the root surface so it paints above every container. The release
is always resolved by where the pointer ends up, in this order:

1. over a visible day slot   -> the tile is scheduled on that day; if it
                                came from the tray a template copy stays
                                behind at its old spot
2. over the tray             -> a tray tile is repositioned, a scheduled
                                tile is deleted
3. anywhere else             -> the tile goes back where it came from

Right presses never drag: tray tiles are deleted, scheduled tiles toggle
their dimmed state.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Callable

from core.layout import BoardGeometry, Point, Rect
from core.models import DIM_COLOR, ROOT, TRAY, Tile, TileKind
from core.registry import TileRegistry
from core.window import DayWindow

logger = logging.getLogger(__name__)


class MouseButton(Enum):
    LEFT = 1
    MIDDLE = 2
    RIGHT = 3


class PressAction(str, Enum):
    NONE = "none"
    DRAG_STARTED = "drag_started"
    CREATE_REQUESTED = "create_requested"
    DELETED = "deleted"
    DIMMED = "dimmed"
    UNDIMMED = "undimmed"


class DropOutcome(str, Enum):
    SCHEDULED = "scheduled"
    TRAY_MOVED = "tray_moved"
    DELETED = "deleted"
    REVERTED = "reverted"


@dataclass(frozen=True)
class DragSession:
    tile_id: str
    offset: Point
    origin_container: str
    origin: Point


@dataclass
class PressResult:
    action: PressAction
    tile: Tile | None = None


@dataclass
class DropResult:
    outcome: DropOutcome
    tile: Tile
    copy: Tile | None = None


class DragController:
    def __init__(
        self,
        registry: TileRegistry,
        window: DayWindow,
        geometry: Callable[[], BoardGeometry],
    ) -> None:
        self.registry = registry
        self.window = window
        self._geometry = geometry
        self.session: DragSession | None = None

    @property
    def geometry(self) -> BoardGeometry:
        return self._geometry()

    @property
    def dragging(self) -> bool:
        return self.session is not None

    # ── Hit testing ───────────────────────────────────────────

    def tile_rect(self, tile: Tile) -> Rect:
        """Absolute bounds of a tile on the root surface."""
        origin = self.geometry.container_rect(tile.container).origin
        return Rect(origin.x + tile.x, origin.y + tile.y, tile.width, tile.height)

    def tile_at(self, p: Point) -> Tile | None:
        """Topmost tile under the pointer, ignoring parts clipped off screen."""
        geo = self.geometry
        for tile in reversed(list(self.registry)):
            try:
                clip = geo.visible_rect(tile.container)
            except KeyError:
                continue
            if clip.contains(p) and self.tile_rect(tile).contains(p):
                return tile
        return None

    # ── Press / move / release ────────────────────────────────

    def press(self, p: Point, button: MouseButton) -> PressResult:
        if self.session is not None:
            return PressResult(PressAction.NONE)

        tile = self.tile_at(p)
        if button is MouseButton.RIGHT:
            if tile is None:
                return PressResult(PressAction.NONE)
            if tile.container == TRAY:
                self.registry.remove(tile.id)
                logger.info("Deleted tray tile %r", tile.text)
                return PressResult(PressAction.DELETED, tile)
            return self._toggle_dim(tile)

        if button is not MouseButton.LEFT:
            return PressResult(PressAction.NONE)
        if tile is None:
            if self.geometry.in_tray(p):
                return PressResult(PressAction.CREATE_REQUESTED)
            return PressResult(PressAction.NONE)

        absolute = self.tile_rect(tile).origin
        self.session = DragSession(
            tile_id=tile.id,
            offset=p - absolute,
            origin_container=tile.container,
            origin=Point(tile.x, tile.y),
        )
        tile.container = ROOT
        tile.x, tile.y = absolute.x, absolute.y
        self.registry.raise_to_top(tile.id)
        return PressResult(PressAction.DRAG_STARTED, tile)

    def move(self, p: Point) -> Tile | None:
        if self.session is None:
            return None
        tile = self.registry.get(self.session.tile_id)
        if tile is None:
            return None
        tile.x = p.x - self.session.offset.x
        tile.y = p.y - self.session.offset.y
        return tile

    def release(self, p: Point) -> DropResult | None:
        session, self.session = self.session, None
        if session is None:
            return None
        tile = self.registry.get(session.tile_id)
        if tile is None:
            return None

        geo = self.geometry
        slot_name = geo.slot_at(p)
        if slot_name is not None:
            return self._drop_on_slot(tile, session, slot_name, p)

        if geo.in_tray(p):
            if session.origin_container != TRAY:
                self.registry.remove(tile.id)
                logger.info("Removed %r from %s", tile.text, session.origin_container)
                return DropResult(DropOutcome.DELETED, tile)
            self._place(tile, TRAY, p, session.offset)
            return DropResult(DropOutcome.TRAY_MOVED, tile)

        tile.container = session.origin_container
        tile.x, tile.y = session.origin.x, session.origin.y
        return DropResult(DropOutcome.REVERTED, tile)

    def restore_origin(self, tile: Tile) -> Tile:
        """Copy of the dragged tile as it was before the press, for snapshots."""
        if self.session is None or tile.id != self.session.tile_id:
            return tile
        return tile.copy(
            id=tile.id,
            container=self.session.origin_container,
            x=self.session.origin.x,
            y=self.session.origin.y,
        )

    # ── Outcomes ──────────────────────────────────────────────

    def _place(self, tile: Tile, container: str, p: Point, offset: Point) -> None:
        origin = self.geometry.container_rect(container).origin
        tile.container = container
        tile.x = p.x - origin.x - offset.x
        tile.y = p.y - origin.y - offset.y

    def _drop_on_slot(self, tile: Tile, session: DragSession, name: str, p: Point) -> DropResult:
        slot = self.window.slot_named(name)
        self._place(tile, name, p, session.offset)
        tile.kind = TileKind.SCHEDULED
        tile.owner_day = slot.day if slot else None

        copy = None
        if session.origin_container == TRAY:
            copy = tile.copy(
                kind=TileKind.TEMPLATE,
                container=TRAY,
                x=session.origin.x,
                y=session.origin.y,
                owner_day=None,
            )
            self.registry.add(copy)
        logger.info("Scheduled %r on %s", tile.text, tile.owner_day)
        return DropResult(DropOutcome.SCHEDULED, tile, copy)

    def _toggle_dim(self, tile: Tile) -> PressResult:
        if tile.visible:
            tile.restore_color = tile.color
            tile.color = DIM_COLOR
            tile.visible = False
            return PressResult(PressAction.DIMMED, tile)
        tile.color = tile.restore_color or tile.color
        tile.restore_color = None
        tile.visible = True
        return PressResult(PressAction.UNDIMMED, tile)
