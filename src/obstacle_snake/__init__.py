"""Grid snake with obstacles: game core, difficulty progression and a pygame front end."""

from .config import Config, EdgePolicy, Move, RestartPolicy, load_config
from .game import (
    GameState, Phase, Snapshot, StepResult,
    handle_move, new_game_state, reset_game, snapshot, step_game,
)
from .difficulty import target_obstacle_count, tick_interval

__all__ = [
    "Config", "EdgePolicy", "Move", "RestartPolicy", "load_config",
    "GameState", "Phase", "Snapshot", "StepResult",
    "handle_move", "new_game_state", "reset_game", "snapshot", "step_game",
    "target_obstacle_count", "tick_interval",
]
