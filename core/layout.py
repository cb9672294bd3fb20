"""Board geometry: pure functions of container size and tile counts.

Everything here is deterministic and stateless. Rectangles returned by
``compute_geometry`` are in root-surface coordinates; the packing helpers
return rectangles relative to the container they pack.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from core.models import ROOT, TRAY, slot_name


# ── Primitives ────────────────────────────────────────────────


@dataclass(frozen=True)
class Point:
    x: int
    y: int

    def __sub__(self, other: Point) -> Point:
        return Point(self.x - other.x, self.y - other.y)

    def __add__(self, other: Point) -> Point:
        return Point(self.x + other.x, self.y + other.y)


@dataclass(frozen=True)
class Rect:
    x: int = 0
    y: int = 0
    width: int = 0
    height: int = 0

    @property
    def origin(self) -> Point:
        return Point(self.x, self.y)

    @property
    def right(self) -> int:
        return self.x + self.width

    @property
    def bottom(self) -> int:
        return self.y + self.height

    def contains(self, p: Point) -> bool:
        return self.x <= p.x < self.right and self.y <= p.y < self.bottom

    def intersect(self, other: Rect) -> Rect:
        """Overlap of two rects; zero-sized when they do not overlap."""
        x = max(self.x, other.x)
        y = max(self.y, other.y)
        right = min(self.right, other.right)
        bottom = min(self.bottom, other.bottom)
        return Rect(x, y, max(0, right - x), max(0, bottom - y))

    def translate(self, dx: int, dy: int) -> Rect:
        return Rect(self.x + dx, self.y + dy, self.width, self.height)


@dataclass(frozen=True)
class LayoutMetrics:
    """Fixed spacings, in the same unit as the board size."""

    tile_spacing: int = 10  # tray grid, both axes
    slot_gutter: int = 10  # between day slots
    slot_top: int = 10  # day slots start this far below the day area top
    stack_gutter: int = 5  # between tiles stacked in a slot
    label_height: int = 25  # date header at the top of each slot


DAY_AREA_RATIO = 0.7
SLOT_WIDTH_RATIO = 0.2
SLOT_HEIGHT_RATIO = 0.9
TRAY_TILE_WIDTH_RATIO = 0.15
TRAY_TILE_HEIGHT_RATIO = 0.3
SLOT_TILE_HEIGHT_RATIO = 0.1


# ── Packing ───────────────────────────────────────────────────


def split_board(width: int, height: int) -> tuple[Rect, Rect]:
    """Top 70% is the day area, the remaining height is the tray."""
    day_height = int(height * DAY_AREA_RATIO)
    return Rect(0, 0, width, day_height), Rect(0, day_height, width, height - day_height)


def layout_day_slots(area: Rect, count: int, metrics: LayoutMetrics = LayoutMetrics()) -> list[Rect]:
    """Day slots left to right, relative to the day area's content origin."""
    w = int(area.width * SLOT_WIDTH_RATIO)
    h = int(area.height * SLOT_HEIGHT_RATIO)
    return [Rect(i * (w + metrics.slot_gutter), metrics.slot_top, w, h) for i in range(count)]


def tray_columns(tray_width: int, tile_width: int, metrics: LayoutMetrics = LayoutMetrics()) -> int:
    return max(1, tray_width // max(1, tile_width + metrics.tile_spacing))


def layout_tray_tiles(tray: Rect, count: int, metrics: LayoutMetrics = LayoutMetrics()) -> list[Rect]:
    """Row-major grid of equally sized tiles, relative to the tray."""
    if count <= 0:
        return []
    w = int(tray.width * TRAY_TILE_WIDTH_RATIO)
    h = int(tray.height * TRAY_TILE_HEIGHT_RATIO)
    columns = tray_columns(tray.width, w, metrics)
    out = []
    for i in range(count):
        row, col = divmod(i, columns)
        out.append(Rect(col * (w + metrics.tile_spacing), row * (h + metrics.tile_spacing), w, h))
    return out


def layout_slot_tiles(slot: Rect, count: int, metrics: LayoutMetrics = LayoutMetrics()) -> list[Rect]:
    """Full-width tiles stacked under the slot header, relative to the slot."""
    content_height = slot.height - metrics.label_height
    if count <= 0 or content_height <= 0:
        return []
    h = int(content_height * SLOT_TILE_HEIGHT_RATIO)
    out = []
    y = metrics.label_height
    for _ in range(count):
        out.append(Rect(0, y, slot.width, h))
        y += h + metrics.stack_gutter
    return out


# ── Whole board ───────────────────────────────────────────────


@dataclass(frozen=True)
class BoardGeometry:
    width: int = 0
    height: int = 0
    day_area: Rect = Rect()
    tray: Rect = Rect()
    slots: tuple[Rect, ...] = field(default_factory=tuple)
    scroll_x: int = 0
    max_scroll: int = 0

    def container_rect(self, name: str) -> Rect:
        """Absolute bounds of a container (slots include the scroll offset)."""
        if name == TRAY:
            return self.tray
        if name == ROOT:
            return Rect(0, 0, self.width, self.height)
        for i, rect in enumerate(self.slots):
            if slot_name(i) == name:
                return rect
        raise KeyError(name)

    def visible_rect(self, name: str) -> Rect:
        """Part of a container that is on screen; slots are clipped to the day area."""
        rect = self.container_rect(name)
        if name in (TRAY, ROOT):
            return rect
        return rect.intersect(self.day_area)

    def slot_at(self, p: Point) -> str | None:
        for i in range(len(self.slots)):
            name = slot_name(i)
            if self.visible_rect(name).contains(p):
                return name
        return None

    def in_tray(self, p: Point) -> bool:
        return self.tray.contains(p)


def compute_geometry(
    width: int,
    height: int,
    slot_count: int,
    scroll_x: int = 0,
    metrics: LayoutMetrics = LayoutMetrics(),
) -> BoardGeometry:
    day_area, tray = split_board(width, height)
    relative = layout_day_slots(day_area, slot_count, metrics)
    content_width = max((r.right for r in relative), default=0)
    max_scroll = max(0, content_width - day_area.width)
    scroll_x = max(0, min(scroll_x, max_scroll))
    slots = tuple(r.translate(day_area.x - scroll_x, day_area.y) for r in relative)
    return BoardGeometry(
        width=width,
        height=height,
        day_area=day_area,
        tray=tray,
        slots=slots,
        scroll_x=scroll_x,
        max_scroll=max_scroll,
    )
