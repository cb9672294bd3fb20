"""Tests for core/board.py — session load/save, rollover and layout passes."""

from datetime import timedelta

import pytest

from core.board import PlannerBoard
from core.drag import DropOutcome, MouseButton
from core.layout import Point
from core.models import TRAY, AppSnapshot, Tile, TileKind
from core.storage import JsonStateStore

LEFT = MouseButton.LEFT


def _grab(board, tile):
    origin = board.tile_rect(tile).origin
    return Point(origin.x + 10, origin.y + 10)


def _drop(board, tile, at):
    board.press(_grab(board, tile), LEFT)
    return board.release(at)


def _reopen(store, clock):
    b = PlannerBoard(store, today=clock)
    b.resize(1200, 900)
    b.load()
    return b


# ── End-to-end ────────────────────────────────────────────────


def test_write_report_scenario(store, clock, today):
    board = PlannerBoard(store, today=clock)
    board.resize(1200, 900)
    board.load()
    assert len(board.registry) == 0

    tile = board.create_tile("Write report", "#A9B700")
    origin = (tile.x, tile.y)
    result = _drop(board, tile, Point(800, 300))
    assert result.outcome is DropOutcome.SCHEDULED

    tray = board.tray_tiles()
    assert len(tray) == 1
    assert (tray[0].x, tray[0].y) == origin
    assert (tray[0].text, tray[0].color) == ("Write report", "#A9B700")
    scheduled = board.slot_tiles("day3")
    assert len(scheduled) == 1
    assert scheduled[0].kind is TileKind.SCHEDULED
    assert scheduled[0].owner_day == today + timedelta(days=1)

    before = board.snapshot()
    assert board.save() is True

    reopened = _reopen(store, clock)
    after = reopened.snapshot()
    assert after == before
    assert len(reopened.tray_tiles()) == 1
    assert [t.text for t in reopened.slot_tiles("day3")] == ["Write report"]


def test_deleted_tile_stays_deleted_after_reload(store, clock):
    board = PlannerBoard(store, today=clock)
    board.resize(1200, 900)
    tile = board.create_tile("Gym", "#1E88E5")
    scheduled = _drop(board, tile, Point(800, 300)).tile
    assert _drop(board, scheduled, Point(600, 800)).outcome is DropOutcome.DELETED
    board.close()

    reopened = _reopen(store, clock)
    assert reopened.snapshot().scheduled_tiles == []
    assert len(reopened.tray_tiles()) == 1


# ── Snapshot ──────────────────────────────────────────────────


def test_snapshot_partitions_by_container(board, today):
    tile = board.create_tile("Write report", "#A9B700")
    _drop(board, tile, Point(800, 300))
    snap = board.snapshot()
    assert snap.validate() == []
    assert [t.owner_day for t in snap.scheduled_tiles] == [today + timedelta(days=1)]
    assert [t.container for t in snap.template_tiles] == [TRAY]
    assert snap.last_saved_date == today


def test_snapshot_during_drag_records_origin(board):
    tile = board.create_tile("Write report", "#A9B700")
    board.press(Point(10, 640), LEFT)
    board.move(Point(700, 200))
    snap = board.snapshot()
    saved = snap.template_tiles[0]
    assert (saved.container, saved.x, saved.y) == (TRAY, 0, 0)
    assert tile.container != TRAY  # live tile still on the drag surface


def test_snapshot_does_not_share_tiles_with_registry(board):
    tile = board.create_tile("Write report", "#A9B700")
    snap = board.snapshot()
    snap.template_tiles[0].text = "changed"
    assert tile.text == "Write report"


# ── Restore ───────────────────────────────────────────────────


def test_restore_places_scheduled_by_owner_day(board, today):
    snap = AppSnapshot(
        scheduled_tiles=[Tile(text="Gym", kind=TileKind.SCHEDULED, container="day5", owner_day=today)],
        last_saved_date=today,
    )
    board.restore(snap)
    assert [t.text for t in board.slot_tiles("day2")] == ["Gym"]
    assert board.slot_tiles("day5") == []


def test_restore_falls_back_to_container_without_date(board, today):
    snap = AppSnapshot(
        scheduled_tiles=[Tile(text="Gym", kind=TileKind.SCHEDULED, container="day4")],
        last_saved_date=today,
    )
    board.restore(snap)
    tiles = board.slot_tiles("day4")
    assert [t.text for t in tiles] == ["Gym"]
    assert tiles[0].owner_day == today + timedelta(days=2)


def test_restore_templates_always_go_to_tray(board, today):
    snap = AppSnapshot(template_tiles=[Tile(text="Read", container="day3")], last_saved_date=today)
    board.restore(snap)
    assert [t.text for t in board.tray_tiles()] == ["Read"]


def test_restore_drops_tiles_outside_window(board, today):
    snap = AppSnapshot(
        scheduled_tiles=[
            Tile(text="Old", kind=TileKind.SCHEDULED, owner_day=today - timedelta(days=3)),
            Tile(text="Far", kind=TileKind.SCHEDULED, owner_day=today + timedelta(days=7)),
            Tile(text="Edge", kind=TileKind.SCHEDULED, owner_day=today + timedelta(days=6)),
            Tile(text="Lost", kind=TileKind.SCHEDULED, container="nowhere"),
        ],
        last_saved_date=today,
    )
    board.restore(snap)
    assert [t.text for t in board.registry] == ["Edge"]
    assert board.slot_tiles("day8")[0].text == "Edge"


def test_restore_after_missed_day_matches_dates(board, clock, today):
    yesterday = today - timedelta(days=1)
    snap = AppSnapshot(
        scheduled_tiles=[Tile(text="Gym", kind=TileKind.SCHEDULED, container="day2", owner_day=yesterday)],
        last_saved_date=yesterday,
    )
    board.restore(snap)
    assert [t.text for t in board.slot_tiles("day1")] == ["Gym"]
    # resuming never shifts the freshly built window
    assert board.tick() is None


def test_restore_malformed_date_returns_tile_to_tray(board, today):
    snap = AppSnapshot.from_dict(
        {
            "lastSavedDate": today.isoformat(),
            "scheduledTiles": [{"text": "Gym", "ownerDay": "not-a-date", "container": "day3"}],
        },
        today,
    )
    board.restore(snap)
    assert [t.text for t in board.tray_tiles()] == ["Gym"]
    assert board.snapshot().validate() == []


def test_load_returns_snapshot_detached_from_registry(store, clock, today):
    store.save(AppSnapshot(template_tiles=[Tile(text="Read")], last_saved_date=today))
    board = _reopen(store, clock)
    loaded = board.load()
    loaded.template_tiles[0].text = "changed"
    assert [t.text for t in board.tray_tiles()] == ["Read"]
    assert all(t is not board.tray_tiles()[0] for t in loaded.template_tiles)


def test_restore_reassigns_duplicate_ids(board, today):
    snap = AppSnapshot(template_tiles=[Tile(text="A", id="x"), Tile(text="B", id="x")], last_saved_date=today)
    board.restore(snap)
    assert len(board.registry) == 2


# ── Rollover ──────────────────────────────────────────────────


def test_tick_same_day_does_nothing(board, json_store):
    assert board.tick() is None
    assert not json_store.path.exists()


def test_tick_rolls_over_once_and_saves(board, clock, json_store, today):
    tile = board.create_tile("Write report", "#A9B700")
    _drop(board, tile, Point(800, 300))

    clock.advance()
    rollover = board.tick()
    assert rollover is not None
    assert rollover.evicted == []
    assert board.tick() is None

    # the tile stays in its slot; its day follows the slot
    assert board.slot_tiles("day3") == [tile]
    saved = json_store.load()
    assert saved.last_saved_date == clock.today
    assert saved.scheduled_tiles[0].owner_day == today + timedelta(days=2)


def test_tick_evicts_out_of_range_slots(board, clock):
    first = board.create_tile("Oldest", "#A9B700")
    _drop(board, first, Point(100, 300))  # day0
    second = board.create_tile("Kept", "#1E88E5")
    _drop(board, second, Point(300, 300))  # day1

    clock.advance(2)
    rollover = board.tick()
    assert rollover.evicted == ["day0"]
    assert board.slot_tiles("day0") == []
    assert [t.text for t in board.slot_tiles("day1")] == ["Kept"]
    assert board.slot_tiles("day1")[0] is second
    assert len(board.tray_tiles()) == 2


def test_tick_evicts_tile_dragged_from_evicted_slot(board, clock, json_store):
    tile = board.create_tile("Oldest", "#A9B700")
    scheduled = _drop(board, tile, Point(100, 300)).tile  # day0
    board.press(_grab(board, scheduled), LEFT)

    clock.advance(2)
    assert board.tick().evicted == ["day0"]
    assert scheduled.id not in board.registry
    assert board.drag.session is None
    assert board.release(Point(800, 5)) is None
    assert board.slot_tiles("day0") == []
    assert json_store.load().scheduled_tiles == []


def test_tick_keeps_tile_dragged_from_surviving_slot(board, clock):
    tile = board.create_tile("Kept", "#A9B700")
    scheduled = _drop(board, tile, Point(300, 300))  # day1
    board.press(_grab(board, scheduled.tile), LEFT)

    clock.advance(2)
    board.tick()
    result = board.release(Point(800, 5))
    assert result.outcome is DropOutcome.REVERTED
    assert board.slot_tiles("day1") == [scheduled.tile]


def test_tick_backwards_evicts_far_slots(board, clock):
    board.restore(
        AppSnapshot(
            scheduled_tiles=[
                Tile(text="Six", kind=TileKind.SCHEDULED, container="day6"),
                Tile(text="Seven", kind=TileKind.SCHEDULED, container="day7"),
            ],
            last_saved_date=clock.today,
        )
    )
    clock.advance(-1)
    board.tick()
    assert [t.text for t in board.registry] == ["Six"]


# ── Save failures ─────────────────────────────────────────────


def test_failed_save_is_not_fatal(tmp_path, clock):
    target = tmp_path / "board.json"
    target.mkdir()
    board = PlannerBoard(JsonStateStore(target, today=clock), today=clock)
    board.resize(1200, 900)
    board.create_tile("Write report", "#A9B700")
    assert board.save() is False
    assert len(board.registry) == 1

    clock.advance()
    assert board.tick() is not None
    assert len(board.registry) == 1


# ── Layout passes ─────────────────────────────────────────────


def test_create_tile_packs_tray(board):
    a = board.create_tile("A", "#A9B700")
    b = board.create_tile("B", "not a colour")
    assert (a.x, a.y, a.width, a.height) == (0, 0, 180, 81)
    assert (b.x, b.y) == (190, 0)
    assert b.color == "#A9B700"
    assert a.kind is TileKind.TEMPLATE


def test_create_tile_rejects_blank_text(board):
    with pytest.raises(ValueError, match="empty"):
        board.create_tile("   ", "#A9B700")


def test_rescale_stacks_slot_tiles(board):
    for text in ("A", "B"):
        _drop(board, board.create_tile(text, "#A9B700"), Point(800, 300))
    board.rescale()
    tiles = board.slot_tiles("day3")
    assert [(t.x, t.y, t.width, t.height) for t in tiles] == [(0, 25, 240, 54), (0, 84, 240, 54)]


def test_resize_repacks_everything(board):
    tile = board.create_tile("A", "#A9B700")
    board.resize(600, 400)
    assert (tile.width, tile.height) == (90, 36)
    assert board.geometry.tray.y == 280


def test_scroll_is_clamped(board):
    assert board.scroll(250) == 250
    assert board.scroll(10_000) == board.geometry.max_scroll
    assert board.scroll(-10_000) == 0
