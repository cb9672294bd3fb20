"""The live board session.

PlannerBoard owns the tile registry, the day window, the current geometry
and the drag controller. The presentation layer forwards pointer, resize
and timer events here and redraws from the registry afterwards.

Save points are close(), the daily rollover in tick() and explicit save()
calls; nothing is written continuously.
"""

from __future__ import annotations

import logging
from datetime import date
from typing import Callable

from core.drag import DragController, DropResult, MouseButton, PressResult
from core.layout import (
    BoardGeometry,
    LayoutMetrics,
    Point,
    Rect,
    compute_geometry,
    layout_slot_tiles,
    layout_tray_tiles,
)
from core.models import TRAY, AppSnapshot, Tile, TileKind, new_tile_id, normalize_color
from core.registry import TileRegistry
from core.storage import StateStore, StorageError
from core.window import DayWindow, Rollover

logger = logging.getLogger(__name__)


class PlannerBoard:
    def __init__(
        self,
        store: StateStore,
        today: Callable[[], date] = date.today,
        metrics: LayoutMetrics = LayoutMetrics(),
    ) -> None:
        self.store = store
        self._today = today
        self.metrics = metrics
        self.registry = TileRegistry()
        self.window = DayWindow.build(today())
        self.geometry: BoardGeometry = compute_geometry(0, 0, len(self.window), metrics=metrics)
        self.drag = DragController(self.registry, self.window, lambda: self.geometry)

    def today(self) -> date:
        return self._today()

    # ── Load / save ───────────────────────────────────────────

    def load(self) -> AppSnapshot:
        snapshot = self.store.load()
        self.restore(snapshot)
        return snapshot

    def restore(self, snapshot: AppSnapshot) -> None:
        """Rebuild the registry from a snapshot against the current window."""
        self.registry.clear()
        self.drag.session = None
        if snapshot.last_saved_date != self.window.last_checked:
            logger.info(
                "Board last saved %s, placing tiles into window starting %s",
                snapshot.last_saved_date,
                self.window.slots[0].day,
            )

        dropped = 0
        for saved in snapshot.scheduled_tiles + snapshot.template_tiles:
            home = self._home_for(saved)
            if home is None:
                dropped += 1
                logger.info("Dropping %r dated %s: no slot in the current window", saved.text, saved.owner_day)
                continue
            tile = saved.copy(id=new_tile_id() if saved.id in self.registry else saved.id)
            tile.container = home
            if home == TRAY:
                tile.kind = TileKind.TEMPLATE
                tile.owner_day = None
            else:
                tile.kind = TileKind.SCHEDULED
                tile.owner_day = self.window.slot_named(home).day
            self.registry.add(tile)
        if dropped:
            logger.warning("%d saved tiles fell outside the day window", dropped)

    def _home_for(self, tile: Tile) -> str | None:
        if tile.kind is TileKind.TEMPLATE:
            return TRAY
        if tile.owner_day is not None:
            slot = self.window.slot_for_day(tile.owner_day)
        else:
            slot = self.window.slot_named(tile.container)
        return slot.name if slot else None

    def snapshot(self) -> AppSnapshot:
        """Serialisable copy of the live board; owner days follow the slot a tile sits in."""
        scheduled: list[Tile] = []
        templates: list[Tile] = []
        for live in self.registry:
            tile = self.drag.restore_origin(live)
            if tile.container == TRAY:
                templates.append(tile.copy(id=tile.id, kind=TileKind.TEMPLATE, owner_day=None))
                continue
            slot = self.window.slot_named(tile.container)
            if slot is None:
                continue
            scheduled.append(tile.copy(id=tile.id, kind=TileKind.SCHEDULED, owner_day=slot.day))
        return AppSnapshot(
            scheduled_tiles=scheduled,
            template_tiles=templates,
            last_saved_date=self.today(),
        )

    def save(self) -> bool:
        """Write the snapshot; a failed write is logged and the session carries on."""
        snapshot = self.snapshot()
        try:
            self.store.save(snapshot)
        except StorageError as e:
            logger.error("Save failed, keeping in-memory board: %s", e)
            return False
        logger.info(
            "Saved %d scheduled and %d template tiles",
            len(snapshot.scheduled_tiles),
            len(snapshot.template_tiles),
        )
        return True

    def close(self) -> bool:
        saved = self.save()
        self.store.close()
        return saved

    # ── Day rollover ──────────────────────────────────────────

    def tick(self) -> Rollover | None:
        """Timer callback: shift the window on a new date, evict, then save."""
        rollover = self.window.check_rollover(self.today())
        if rollover is None:
            return None
        for name in rollover.evicted:
            removed = self.registry.clear_container(name)
            if removed:
                logger.info("Cleared %d tiles from %s", len(removed), name)
        session = self.drag.session
        if session is not None and session.origin_container in rollover.evicted:
            # the dragged tile sits on the root surface, outside its evicted slot
            self.registry.remove(session.tile_id)
            self.drag.session = None
            logger.info("Dropped the tile being dragged from %s", session.origin_container)
        self.save()
        return rollover

    # ── Layout ────────────────────────────────────────────────

    def resize(self, width: int, height: int) -> None:
        self.geometry = compute_geometry(
            width, height, len(self.window), self.geometry.scroll_x, self.metrics
        )
        self.rescale()

    def scroll(self, delta: int) -> int:
        g = self.geometry
        self.geometry = compute_geometry(
            g.width, g.height, len(self.window), g.scroll_x + delta, self.metrics
        )
        return self.geometry.scroll_x

    def rescale(self) -> None:
        """Re-pack the tray grid and every day column."""
        self._pack_tray()
        for name in self.window.names:
            tiles = self.registry.in_container(name)
            rects = layout_slot_tiles(self.geometry.container_rect(name), len(tiles), self.metrics)
            for tile, rect in zip(tiles, rects):
                _apply(tile, rect)

    def _pack_tray(self) -> None:
        tiles = self.registry.in_container(TRAY)
        for tile, rect in zip(tiles, layout_tray_tiles(self.geometry.tray, len(tiles), self.metrics)):
            _apply(tile, rect)

    # ── Tiles ─────────────────────────────────────────────────

    def create_tile(self, text: str, color: str) -> Tile:
        text = (text or "").strip()
        if not text:
            raise ValueError("Tile text must not be empty")
        tile = self.registry.add(Tile(text=text, color=normalize_color(color)))
        self._pack_tray()
        logger.info("Created tray tile %r", text)
        return tile

    def tray_tiles(self) -> list[Tile]:
        return self.registry.in_container(TRAY)

    def slot_tiles(self, name: str) -> list[Tile]:
        return self.registry.in_container(name)

    def dragged_tile(self) -> Tile | None:
        if self.drag.session is None:
            return None
        return self.registry.get(self.drag.session.tile_id)

    def tile_rect(self, tile: Tile) -> Rect:
        return self.drag.tile_rect(tile)

    # ── Pointer input ─────────────────────────────────────────

    def press(self, p: Point, button: MouseButton) -> PressResult:
        return self.drag.press(p, button)

    def move(self, p: Point) -> Tile | None:
        return self.drag.move(p)

    def release(self, p: Point) -> DropResult | None:
        return self.drag.release(p)


def _apply(tile: Tile, rect: Rect) -> None:
    tile.x, tile.y, tile.width, tile.height = rect.x, rect.y, rect.width, rect.height
