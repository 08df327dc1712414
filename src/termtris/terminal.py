"""Curses front-end: keyboard polling, drawing and the game loop.

The loop has a single suspension point: waiting for a key with a timeout equal
to the time left before the next gravity tick.  Every key press or timeout is
turned into exactly one engine step before waiting again.
"""

from __future__ import annotations

import curses
import logging
from typing import Callable, List, Optional

from .engine import Command, GameEngine, Snapshot
from .gravity import GravityClock
from .render import (
    CELL_WIDTH,
    EMPTY,
    FILLED,
    PANEL_GAP,
    TAG_COLORS,
    cell_origin,
    compose_frame,
    panel_lines,
    required_size,
)


LOGGER = logging.getLogger(__name__)

NO_KEY = -1
RESTART_KEYS = {ord("r"), ord("R")}

KEY_COMMANDS = {
    curses.KEY_LEFT: Command.LEFT,
    curses.KEY_RIGHT: Command.RIGHT,
    curses.KEY_UP: Command.ROTATE,
    curses.KEY_DOWN: Command.DROP,
}

GAME_OVER_TEXT = ("GAME OVER", "r: play again", "other: leave")


class DisplayError(RuntimeError):
    """Raised when the terminal is too small to show the board."""


def command_for_key(key: int) -> Optional[Command]:
    """Map a curses key code to an engine command.

    Arrow keys drive the piece and any other key quits.  Terminal resizes
    arrive as ``KEY_RESIZE`` and map to ``None`` (redraw only).
    """

    if key == curses.KEY_RESIZE:
        return None
    return KEY_COMMANDS.get(key, Command.QUIT)


class CursesScreen:
    """Draw snapshots onto a curses window and read keys from it."""

    def __init__(self, stdscr, scale: int = 1) -> None:
        if scale < 1:
            raise ValueError("Display scale must be at least 1")
        self.stdscr = stdscr
        self.scale = scale
        self._colors = False

    def setup(self) -> None:
        try:
            curses.curs_set(0)
        except curses.error:
            LOGGER.debug("Terminal cannot hide the cursor")
        curses.noecho()
        curses.cbreak()
        self.stdscr.keypad(True)
        if curses.has_colors():
            curses.start_color()
            background = curses.COLOR_BLACK
            try:
                curses.use_default_colors()
                background = -1
            except curses.error:
                pass
            for tag, color in TAG_COLORS.items():
                curses.init_pair(tag, color, background)
            self._colors = True

    def ensure_fits(self, width: int, height: int) -> None:
        """Raise :class:`DisplayError` if a ``width`` x ``height`` board won't fit."""

        rows, cols = required_size(width, height, self.scale)
        max_y, max_x = self.stdscr.getmaxyx()
        if max_y < rows or max_x < cols:
            raise DisplayError(
                f"Terminal is {max_x}x{max_y} characters; at least {cols}x{rows} is needed"
            )

    def timeout(self, ms: Optional[int]) -> None:
        """Make :meth:`read_key` wait at most ``ms`` milliseconds (forever for ``None``)."""

        self.stdscr.timeout(-1 if ms is None else ms)

    def read_key(self) -> int:
        return self.stdscr.getch()

    def _attr(self, tag: int) -> int:
        if self._colors and tag:
            return curses.color_pair(tag) | curses.A_BOLD
        return 0

    def _put(self, y: int, x: int, text: str, attr: int = 0) -> None:
        try:
            self.stdscr.addstr(y, x, text, attr)
        except curses.error:
            # Writing the bottom-right cell moves the cursor off-screen.
            pass

    def draw(self, snapshot: Snapshot) -> None:
        scale = self.scale
        inner_w = snapshot.width * CELL_WIDTH * scale
        inner_h = snapshot.height * scale
        self.stdscr.erase()

        border = "+" + "-" * inner_w + "+"
        self._put(0, 0, border)
        self._put(inner_h + 1, 0, border)
        for y in range(1, inner_h + 1):
            self._put(y, 0, "|")
            self._put(y, inner_w + 1, "|")

        frame = compose_frame(snapshot)
        for row in range(snapshot.height):
            for col in range(snapshot.width):
                tag = int(frame[row, col])
                text = (FILLED if tag else EMPTY) * scale
                y, x = cell_origin(col, row, scale)
                for dy in range(scale):
                    self._put(1 + y + dy, 1 + x, text, self._attr(tag))

        panel_x = inner_w + 2 + PANEL_GAP
        for i, line in enumerate(panel_lines(snapshot)):
            self._put(1 + i, panel_x, line)

        if snapshot.game_over:
            top = max(1, inner_h // 2 - 1)
            for i, line in enumerate(GAME_OVER_TEXT):
                x = max(1, 1 + (inner_w - len(line)) // 2)
                self._put(top + i, x, line[:inner_w], curses.A_REVERSE)

        self.stdscr.refresh()


def run_session(
    screen: CursesScreen,
    engine: GameEngine,
    *,
    clock: Optional[Callable[[], float]] = None,
) -> bool:
    """Play until the engine reaches game over.

    Returns ``True`` if the session ended because the player quit.
    """

    gravity = GravityClock(engine.level, clock=clock)
    screen.draw(engine.snapshot())
    quit_requested = False
    while not engine.game_over:
        screen.timeout(gravity.timeout_ms())
        try:
            key = screen.read_key()
        except KeyboardInterrupt:
            engine.apply(Command.QUIT)
            quit_requested = True
            break

        changed = False
        if key != NO_KEY:
            command = command_for_key(key)
            if command is None:
                changed = True
            else:
                result = engine.apply(command)
                quit_requested = result.quit
                changed = result.changed
                if result.locked and not engine.game_over:
                    # A fresh piece gets a full interval before it falls.
                    gravity.restart(engine.level)

        if not engine.game_over and gravity.due():
            engine.tick()
            gravity.fired(engine.level)
            changed = True

        if changed:
            screen.draw(engine.snapshot())

    gravity.stop()
    return quit_requested


def play(
    screen: CursesScreen,
    engine: GameEngine,
    *,
    clock: Optional[Callable[[], float]] = None,
) -> List[int]:
    """Run games until the player leaves and return every final score."""

    finished: List[int] = []
    while True:
        quit_requested = run_session(screen, engine, clock=clock)
        finished.append(engine.score)
        LOGGER.info("Game finished with score %d", engine.score)
        if quit_requested:
            return finished

        screen.timeout(None)
        while True:
            try:
                key = screen.read_key()
            except KeyboardInterrupt:
                return finished
            if key != curses.KEY_RESIZE:
                break
            screen.draw(engine.snapshot())
        if key not in RESTART_KEYS:
            return finished
        engine.reset()


def run(
    engine: GameEngine,
    scale: int = 1,
    *,
    clock: Optional[Callable[[], float]] = None,
) -> List[int]:
    """Play in the real terminal; the terminal is restored on exit."""

    def _main(stdscr) -> List[int]:
        screen = CursesScreen(stdscr, scale)
        screen.setup()
        screen.ensure_fits(engine.board.width, engine.board.height)
        return play(screen, engine, clock=clock)

    return curses.wrapper(_main)
