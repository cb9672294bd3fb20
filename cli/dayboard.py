#!/usr/bin/env python3
"""DayBoard TUI — drag task blocks onto a rolling nine-day board, powered by Textual."""

from __future__ import annotations

import logging

from rich.style import Style
from rich.text import Text
from textual import events, on
from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import Horizontal, Vertical
from textual.message import Message
from textual.screen import ModalScreen
from textual.widget import Widget
from textual.widgets import Button, Footer, Header, Input, Label, Select

from core import (
    DEFAULT_COLOR,
    PALETTE,
    TRAY,
    LayoutMetrics,
    MouseButton,
    PlannerBoard,
    Point,
    PressAction,
    Rect,
    board_root,
    config_path,
    load_config,
    log_path,
    open_store,
    save_config,
)

logger = logging.getLogger(__name__)


# Layout constants in terminal cells instead of pixels.
TUI_METRICS = LayoutMetrics(
    tile_spacing=1,
    slot_gutter=1,
    slot_top=1,
    stack_gutter=1,
    label_height=2,
)

BOARD_BG = "#424242"
TRAY_BG = "#383838"
SLOT_BG = "#B0B0B0"
TODAY_BG = "yellow"

_BUTTONS = {
    1: MouseButton.LEFT,
    2: MouseButton.MIDDLE,
    3: MouseButton.RIGHT,
}


# ── Canvas ─────────────────────────────────────────────────────


class Canvas:
    """A grid of styled cells painted back to front, then flattened to Rich Text."""

    def __init__(self, width: int, height: int, background: Style) -> None:
        self.width = max(0, width)
        self.height = max(0, height)
        self.bounds = Rect(0, 0, self.width, self.height)
        self.cells = [[(" ", background) for _ in range(self.width)] for _ in range(self.height)]

    def fill(self, rect: Rect, style: Style, clip: Rect | None = None) -> None:
        area = rect.intersect(clip.intersect(self.bounds) if clip else self.bounds)
        for y in range(area.y, area.bottom):
            row = self.cells[y]
            for x in range(area.x, area.right):
                row[x] = (" ", style)

    def write(self, x: int, y: int, text: str, style: Style, clip: Rect | None = None) -> None:
        area = clip.intersect(self.bounds) if clip else self.bounds
        if not area.y <= y < area.bottom:
            return
        row = self.cells[y]
        for i, ch in enumerate(text):
            cx = x + i
            if area.x <= cx < area.right:
                row[cx] = (ch, style)

    def write_centered(self, rect: Rect, line: int, text: str, style: Style, clip: Rect | None = None) -> None:
        text = text[: max(0, rect.width)]
        x = rect.x + max(0, (rect.width - len(text)) // 2)
        self.write(x, rect.y + line, text, style, clip)

    def to_text(self) -> Text:
        out = Text(no_wrap=True, overflow="crop")
        for n, row in enumerate(self.cells):
            if n:
                out.append("\n")
            run, run_style = "", None
            for ch, style in row:
                if style is not run_style and run:
                    out.append(run, run_style)
                    run = ""
                run_style = style
                run += ch
            if run:
                out.append(run, run_style)
        return out


# ── Board widget ───────────────────────────────────────────────


class BoardView(Widget):
    """Projection of the board registry; the one listener for all pointer input."""

    class CreateRequested(Message):
        """Left click on empty tray space."""

    class Changed(Message):
        """The tile set changed through a press or a drop."""

    def __init__(self, board: PlannerBoard, **kwargs) -> None:
        super().__init__(**kwargs)
        self.board = board

    def render(self) -> Text:
        geo = self.board.geometry
        canvas = Canvas(geo.width, geo.height, Style(bgcolor=BOARD_BG))
        canvas.fill(geo.tray, Style(bgcolor=TRAY_BG))
        hint = "click to add a block · right-click deletes"
        canvas.write(geo.tray.right - len(hint) - 1, geo.tray.bottom - 1, hint, Style(color="grey62", bgcolor=TRAY_BG))

        today = self.board.today()
        label_rows = self.board.metrics.label_height
        for slot in self.board.window.slots:
            clip = geo.visible_rect(slot.name)
            rect = geo.container_rect(slot.name)
            canvas.fill(rect, Style(bgcolor=SLOT_BG), clip)
            weekday, day = self.board.window.header(slot)
            header_bg = TODAY_BG if self.board.window.is_today(slot, today) else SLOT_BG
            header = Style(color="black", bgcolor=header_bg, bold=True)
            canvas.fill(Rect(rect.x, rect.y, rect.width, label_rows), header, clip)
            canvas.write_centered(rect, 0, weekday, header, clip)
            if label_rows > 1:
                canvas.write_centered(rect, 1, day, Style(color="black", bgcolor=header_bg), clip)

        for tile in self.board.registry:
            clip = geo.visible_rect(tile.container)
            rect = self.board.tile_rect(tile)
            fg = "grey30" if tile.dimmed else "white"
            style = Style(color=fg, bgcolor=tile.color, bold=True)
            canvas.fill(rect, style, clip)
            canvas.write_centered(rect, max(0, (rect.height - 1) // 2), tile.text, style, clip)
        return canvas.to_text()

    def on_resize(self, event: events.Resize) -> None:
        self.board.resize(event.size.width, event.size.height)
        self.refresh()

    def on_mouse_down(self, event: events.MouseDown) -> None:
        button = _BUTTONS.get(event.button, MouseButton.MIDDLE)
        result = self.board.press(Point(event.x, event.y), button)
        if result.action is PressAction.DRAG_STARTED:
            self.capture_mouse()
        elif result.action is PressAction.CREATE_REQUESTED:
            self.post_message(self.CreateRequested())
        elif result.action is not PressAction.NONE:
            self.post_message(self.Changed())
        self.refresh()

    def on_mouse_move(self, event: events.MouseMove) -> None:
        if self.board.move(Point(event.x, event.y)) is not None:
            self.refresh()

    def on_mouse_up(self, event: events.MouseUp) -> None:
        result = self.board.release(Point(event.x, event.y))
        self.release_mouse()
        if result is not None:
            logger.debug("Drop resolved: %s", result.outcome.value)
            self.post_message(self.Changed())
            self.refresh()


# ── Create-block dialog ────────────────────────────────────────


class CreateTileScreen(ModalScreen[dict | None]):
    """Asks for block text and colour; dismisses with {text, color} or None."""

    BINDINGS = [Binding("escape", "cancel", "Cancel")]

    def compose(self) -> ComposeResult:
        yield Vertical(
            Label("New task block", classes="section-title"),
            Input(placeholder="Enter block text", id="tile-text"),
            Select(
                [(name, value) for name, value in PALETTE.items()],
                value=DEFAULT_COLOR,
                allow_blank=False,
                id="tile-color",
            ),
            Horizontal(
                Button("OK", variant="primary", id="ok"),
                Button("Cancel", id="cancel"),
                id="dialog-buttons",
            ),
            id="dialog",
        )

    def on_mount(self) -> None:
        self.query_one("#tile-text", Input).focus()

    @on(Button.Pressed, "#ok")
    @on(Input.Submitted, "#tile-text")
    def _submit(self) -> None:
        text = self.query_one("#tile-text", Input).value.strip()
        if not text:
            self.notify("Enter some text for the block", severity="warning")
            return
        color = self.query_one("#tile-color", Select).value
        self.dismiss({"text": text, "color": str(color)})

    @on(Button.Pressed, "#cancel")
    def action_cancel(self) -> None:
        self.dismiss(None)


# ── Stylesheet ─────────────────────────────────────────────────

CSS = """
Screen {
    background: $surface;
}

#board {
    width: 1fr;
    height: 1fr;
}

CreateTileScreen {
    align: center middle;
}

#dialog {
    width: 50;
    height: auto;
    padding: 1 2;
    border: thick $primary-background;
    background: $panel;
}

#dialog Input, #dialog Select {
    margin: 1 0 0 0;
}

#dialog-buttons {
    height: auto;
    margin: 1 0 0 0;
    align-horizontal: right;
}

#dialog-buttons Button {
    margin: 0 0 0 1;
}

.section-title {
    text-style: bold;
    color: $text;
}
"""


# ── Main app ───────────────────────────────────────────────────


class DayBoardApp(App):
    """DayBoard — weekly drag-and-drop planner."""

    TITLE = "DayBoard"
    CSS = CSS
    AUTO_FOCUS = None

    BINDINGS = [
        Binding("n", "new_tile", "New block"),
        Binding("s", "rescale", "Scale"),
        Binding("left", "scroll_days(-1)", "Earlier"),
        Binding("right", "scroll_days(1)", "Later"),
        Binding("ctrl+s", "save", "Save"),
        Binding("q", "quit_app", "Quit"),
    ]

    def __init__(self, board: PlannerBoard, tick_seconds: int = 60) -> None:
        super().__init__()
        self.board = board
        self.tick_seconds = tick_seconds
        self._closed = False

    def compose(self) -> ComposeResult:
        yield Header()
        yield BoardView(self.board, id="board")
        yield Footer()

    def on_mount(self) -> None:
        self.set_interval(self.tick_seconds, self._on_tick)
        self._update_subtitle()

    def _board_view(self) -> BoardView:
        return self.query_one("#board", BoardView)

    def _update_subtitle(self) -> None:
        today = self.board.today()
        tray = len(self.board.registry.in_container(TRAY))
        scheduled = len(self.board.registry) - tray
        self.sub_title = f"{today:%a %b %d}  ·  {scheduled} scheduled  ·  {tray} in tray"

    def _on_tick(self) -> None:
        rollover = self.board.tick()
        if rollover is None:
            return
        self.notify(f"Moved to {rollover.today:%a %b %d}", title="New day")
        self._board_view().refresh()
        self._update_subtitle()

    @on(BoardView.CreateRequested)
    def action_new_tile(self) -> None:
        self.push_screen(CreateTileScreen(), self._on_tile_created)

    def _on_tile_created(self, result: dict | None) -> None:
        if result is None:
            return
        self.board.create_tile(result["text"], result["color"])
        self._board_view().refresh()
        self._update_subtitle()

    def action_rescale(self) -> None:
        self.board.rescale()
        self._board_view().refresh()

    def action_scroll_days(self, direction: int) -> None:
        slots = self.board.geometry.slots
        step = (slots[0].width + self.board.metrics.slot_gutter) if slots else 1
        self.board.scroll(direction * step)
        self._board_view().refresh()

    def action_save(self) -> None:
        if self.board.save():
            self.notify("Board saved", severity="information")
        else:
            self.notify("Could not save board, see dayboard.log", title="Save failed", severity="error")

    @on(BoardView.Changed)
    def _on_board_changed(self) -> None:
        self._update_subtitle()

    def _shutdown(self) -> None:
        if self._closed:
            return
        self._closed = True
        self.board.close()

    def action_quit_app(self) -> None:
        self._shutdown()
        self.exit()

    def on_unmount(self) -> None:
        self._shutdown()


# ── Entry point ────────────────────────────────────────────────


def main() -> None:
    root = board_root()
    root.mkdir(parents=True, exist_ok=True)
    logging.basicConfig(
        filename=log_path(root),
        level=logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    config = load_config(root)
    if not config_path(root).exists():
        save_config(config, root)
        logger.info("Default config file created at %s", config_path(root))

    board = PlannerBoard(open_store(config), metrics=TUI_METRICS)
    board.load()

    app = DayBoardApp(board, tick_seconds=config.tick_seconds)
    app.run()


if __name__ == "__main__":
    main()
