"""Board configuration, read from <board root>/config.yaml."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml

from core.fileio import read_yaml, write_yaml_atomic
from core.workspace import config_path, default_store_path

logger = logging.getLogger(__name__)

VALID_BACKENDS = {"json", "sqlite"}
DEFAULT_TICK_SECONDS = 60


@dataclass
class BoardConfig:
    backend: str = "json"
    store_path: Path | None = None
    tick_seconds: int = DEFAULT_TICK_SECONDS

    @classmethod
    def from_dict(cls, d: dict[str, Any], root: Path | None = None) -> BoardConfig:
        if not d or not isinstance(d, dict):
            d = {}
        backend = str(d.get("backend", "json")).strip().lower()
        if backend not in VALID_BACKENDS:
            logger.warning("Unknown backend %r in config, using json", backend)
            backend = "json"
        raw_path = d.get("store_path")
        if raw_path:
            store = Path(str(raw_path)).expanduser()
            if not store.is_absolute():
                store = default_store_path(backend, root).parent / store
        else:
            store = default_store_path(backend, root)
        try:
            tick = int(d.get("tick_seconds", DEFAULT_TICK_SECONDS))
        except (TypeError, ValueError):
            tick = DEFAULT_TICK_SECONDS
        return cls(backend=backend, store_path=store, tick_seconds=max(1, tick))

    def to_dict(self) -> dict[str, Any]:
        d: dict[str, Any] = {"backend": self.backend}
        if self.store_path is not None:
            d["store_path"] = str(self.store_path)
        if self.tick_seconds != DEFAULT_TICK_SECONDS:
            d["tick_seconds"] = self.tick_seconds
        return d


def load_config(root: Path | None = None) -> BoardConfig:
    """Load config.yaml, falling back to defaults when missing or unreadable."""
    path = config_path(root)
    try:
        data = read_yaml(path)
    except (OSError, yaml.YAMLError) as e:
        logger.error("Error loading config file %s: %s", path, e)
        data = {}
    return BoardConfig.from_dict(data, root)


def save_config(config: BoardConfig, root: Path | None = None) -> None:
    write_yaml_atomic(config_path(root), config.to_dict())
