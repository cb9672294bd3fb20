"""DayBoard core library — board model, persistence and interaction engines.

Public API re-exports for convenient imports:
    from core import PlannerBoard, open_store, load_config, ...
"""

# Workspace & paths
from core.workspace import (
    board_root,
    config_path,
    log_path,
    default_store_path,
)

# File I/O
from core.fileio import (
    read_text,
    read_json,
    read_yaml,
    write_json_atomic,
    write_yaml_atomic,
)

# Configuration
from core.config import BoardConfig, load_config, save_config

# Models
from core.models import (
    TRAY,
    ROOT,
    DEFAULT_COLOR,
    DIM_COLOR,
    PALETTE,
    Tile,
    TileKind,
    AppSnapshot,
    normalize_color,
    slot_name,
)

# Layout
from core.layout import (
    Point,
    Rect,
    LayoutMetrics,
    BoardGeometry,
    compute_geometry,
    split_board,
    layout_day_slots,
    layout_tray_tiles,
    layout_slot_tiles,
)

# Day window
from core.window import DaySlot, DayWindow, Rollover, in_range

# Persistence
from core.storage import (
    StorageError,
    StateStore,
    JsonStateStore,
    SqliteStateStore,
    open_store,
)

# Interaction
from core.registry import TileRegistry
from core.drag import (
    MouseButton,
    PressAction,
    DropOutcome,
    DragSession,
    DragController,
    PressResult,
    DropResult,
)

# Session
from core.board import PlannerBoard
