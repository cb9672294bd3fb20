"""Board root and path helpers for DayBoard."""

from __future__ import annotations

from pathlib import Path


DEFAULT_ROOT = Path.home() / ".dayboard"

STORE_FILENAMES = {
    "json": "board.json",
    "sqlite": "board.sqlite",
}


def board_root(root: Path | None = None) -> Path:
    """Directory holding config.yaml, the store and the log."""
    if root is None:
        root = DEFAULT_ROOT
    return Path(root).expanduser().resolve()


# ── Path helpers ──────────────────────────────────────────────

def config_path(root: Path | None = None) -> Path:
    return board_root(root) / "config.yaml"


def log_path(root: Path | None = None) -> Path:
    return board_root(root) / "dayboard.log"


def default_store_path(backend: str, root: Path | None = None) -> Path:
    return board_root(root) / STORE_FILENAMES.get(backend, STORE_FILENAMES["json"])
