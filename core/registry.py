"""Live tile set keyed by id.

Iteration order is paint order: later tiles draw on top, and within a
container it is also the stacking order used by the layout engine.
"""

from __future__ import annotations

from typing import Iterator

from core.models import Tile


class TileRegistry:
    def __init__(self) -> None:
        self._tiles: dict[str, Tile] = {}

    def __len__(self) -> int:
        return len(self._tiles)

    def __iter__(self) -> Iterator[Tile]:
        return iter(list(self._tiles.values()))

    def __contains__(self, tile_id: object) -> bool:
        return tile_id in self._tiles

    def get(self, tile_id: str) -> Tile | None:
        return self._tiles.get(tile_id)

    def add(self, tile: Tile) -> Tile:
        if tile.id in self._tiles:
            raise ValueError(f"Tile '{tile.id}' already registered")
        self._tiles[tile.id] = tile
        return tile

    def remove(self, tile_id: str) -> Tile | None:
        return self._tiles.pop(tile_id, None)

    def raise_to_top(self, tile_id: str) -> None:
        tile = self._tiles.pop(tile_id)
        self._tiles[tile_id] = tile

    def in_container(self, container: str) -> list[Tile]:
        return [t for t in self._tiles.values() if t.container == container]

    def clear_container(self, container: str) -> list[Tile]:
        """Remove every tile in *container*; returns what was removed."""
        removed = self.in_container(container)
        for t in removed:
            del self._tiles[t.id]
        return removed

    def clear(self) -> None:
        self._tiles.clear()
