"""Settings shared by the engine and the terminal front-end."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .board import HEIGHT, WIDTH

# The I piece needs four columns in its spawn orientation.
MIN_WIDTH = 4
MIN_HEIGHT = 4

# Rendering scale factors selectable with ``--display``.
DISPLAY_SCALES = {"single": 1, "double": 2}


@dataclass(frozen=True)
class GameConfig:
    """Parameters for one game session."""

    width: int = WIDTH
    height: int = HEIGHT
    start_level: int = 0
    seed: Optional[int] = None

    def __post_init__(self) -> None:
        if self.width < MIN_WIDTH or self.height < MIN_HEIGHT:
            raise ValueError(
                f"Board must be at least {MIN_WIDTH}x{MIN_HEIGHT}, got {self.width}x{self.height}"
            )
        if self.start_level < 0:
            raise ValueError("Starting level must be non-negative")
