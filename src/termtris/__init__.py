"""Terminal falling-block puzzle game."""

from .board import Board
from .tetromino import Tetromino, TetrominoType, shape_offsets
from .game_state import GameState
from .config import GameConfig
from .engine import Command, GameEngine, Phase, Snapshot, StepResult
from .gravity import GravityClock
from .scores import ScoreEntry, ScoreStore, format_scores
from .utils import can_move, gravity_interval_ms, line_clear_score

__all__ = [
    "Board",
    "Tetromino",
    "TetrominoType",
    "GameState",
    "GameConfig",
    "GameEngine",
    "Command",
    "Phase",
    "Snapshot",
    "StepResult",
    "GravityClock",
    "ScoreEntry",
    "ScoreStore",
    "can_move",
    "format_scores",
    "gravity_interval_ms",
    "line_clear_score",
    "shape_offsets",
]
