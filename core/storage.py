"""Snapshot persistence: one contract, two interchangeable backends.

- JsonStateStore writes the whole AppSnapshot as one indented JSON document.
- SqliteStateStore keeps scheduled and template tiles in two tables and
  replaces both inside a single transaction.

Both load() implementations fall back to an empty snapshot for a missing
or unreadable store; save() raises StorageError and leaves the previous
snapshot intact.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from datetime import date
from pathlib import Path
from typing import Any, Callable

from sqlalchemy import Boolean, Column, Integer, String, Text, create_engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import declarative_base, sessionmaker

from core.config import BoardConfig
from core.fileio import read_json, write_json_atomic
from core.models import AppSnapshot, Tile, TileKind

logger = logging.getLogger(__name__)


class StorageError(Exception):
    """A snapshot could not be written."""


class StateStore(ABC):
    def __init__(self, path: Path, today: Callable[[], date] = date.today) -> None:
        self.path = Path(path)
        self._today = today

    def empty(self) -> AppSnapshot:
        return AppSnapshot.empty(self._today())

    @abstractmethod
    def save(self, snapshot: AppSnapshot) -> None:
        """Replace the stored snapshot wholesale."""

    @abstractmethod
    def load(self) -> AppSnapshot:
        """Return the stored snapshot, or an empty one."""

    def close(self) -> None:
        pass


# ── JSON document ─────────────────────────────────────────────


class JsonStateStore(StateStore):
    def save(self, snapshot: AppSnapshot) -> None:
        try:
            write_json_atomic(self.path, snapshot.to_dict())
        except OSError as e:
            raise StorageError(f"Could not write {self.path}: {e}") from e

    def load(self) -> AppSnapshot:
        if not self.path.exists():
            logger.info("No saved board at %s, starting empty", self.path)
            return self.empty()
        try:
            return AppSnapshot.from_dict(read_json(self.path), self._today())
        except (OSError, TypeError, ValueError) as e:
            logger.warning("Unreadable board file %s (%s), starting empty", self.path, e)
            return self.empty()


# ── SQLite via SQLAlchemy ─────────────────────────────────────


Base = declarative_base()


class _TileColumns:
    id = Column(Integer, primary_key=True, autoincrement=True)
    text = Column(Text, nullable=False, default="")
    color = Column(String, nullable=False)
    parent_container = Column(String, nullable=False)
    owner_date = Column(String, nullable=True)  # ISO date
    x = Column(Integer, default=0)
    y = Column(Integer, default=0)
    width = Column(Integer, default=0)
    height = Column(Integer, default=0)
    visible = Column(Boolean, default=True)
    restore_color = Column(String, nullable=True)

    @classmethod
    def from_tile(cls, tile: Tile) -> Any:
        return cls(
            text=tile.text,
            color=tile.color,
            parent_container=tile.container,
            owner_date=tile.owner_day.isoformat() if tile.owner_day else None,
            x=tile.x,
            y=tile.y,
            width=tile.width,
            height=tile.height,
            visible=tile.visible,
            restore_color=tile.restore_color,
        )

    def to_tile(self, kind: TileKind) -> Tile:
        return Tile.from_dict(
            {
                "text": self.text,
                "color": self.color,
                "container": self.parent_container,
                "ownerDay": self.owner_date,
                "x": self.x,
                "y": self.y,
                "width": self.width,
                "height": self.height,
                "visible": self.visible,
                "restoreColor": self.restore_color,
            },
            kind,
        )


class ScheduledTileRow(_TileColumns, Base):
    __tablename__ = "scheduled_tiles"


class TemplateTileRow(_TileColumns, Base):
    __tablename__ = "template_tiles"


class BoardStateRow(Base):
    __tablename__ = "board_state"
    id = Column(Integer, primary_key=True)
    last_saved_date = Column(String, nullable=False)


class SqliteStateStore(StateStore):
    def __init__(self, path: Path, today: Callable[[], date] = date.today) -> None:
        super().__init__(path, today)
        self.engine = create_engine(f"sqlite:///{self.path}")
        self.Session = sessionmaker(bind=self.engine)
        self._schema_ready = False

    def _ensure_schema(self) -> None:
        if not self._schema_ready:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            Base.metadata.create_all(self.engine)
            self._schema_ready = True

    def save(self, snapshot: AppSnapshot) -> None:
        try:
            self._ensure_schema()
            with self.Session.begin() as s:
                s.query(ScheduledTileRow).delete()
                s.query(TemplateTileRow).delete()
                s.query(BoardStateRow).delete()
                s.add_all([ScheduledTileRow.from_tile(t) for t in snapshot.scheduled_tiles])
                s.add_all([TemplateTileRow.from_tile(t) for t in snapshot.template_tiles])
                s.add(BoardStateRow(id=1, last_saved_date=snapshot.last_saved_date.isoformat()))
        except (SQLAlchemyError, OSError) as e:
            raise StorageError(f"Could not write {self.path}: {e}") from e

    def load(self) -> AppSnapshot:
        try:
            self._ensure_schema()
            with self.Session() as s:
                scheduled = [
                    r.to_tile(TileKind.SCHEDULED)
                    for r in s.query(ScheduledTileRow).order_by(ScheduledTileRow.id)
                ]
                templates = [
                    r.to_tile(TileKind.TEMPLATE)
                    for r in s.query(TemplateTileRow).order_by(TemplateTileRow.id)
                ]
                state = s.query(BoardStateRow).first()
                raw_date = state.last_saved_date if state else None
        except (SQLAlchemyError, OSError) as e:
            logger.warning("Unreadable board database %s (%s), starting empty", self.path, e)
            return self.empty()

        try:
            last_saved = date.fromisoformat(raw_date) if raw_date else self._today()
        except ValueError:
            last_saved = self._today()
        return AppSnapshot(
            scheduled_tiles=scheduled,
            template_tiles=templates,
            last_saved_date=last_saved,
        )

    def close(self) -> None:
        self.engine.dispose()


# ── Backend selection ─────────────────────────────────────────


BACKENDS: dict[str, type[StateStore]] = {
    "json": JsonStateStore,
    "sqlite": SqliteStateStore,
}


def open_store(config: BoardConfig, today: Callable[[], date] = date.today) -> StateStore:
    cls = BACKENDS.get(config.backend, JsonStateStore)
    logger.info("Using %s store at %s", config.backend, config.store_path)
    return cls(config.store_path, today)
