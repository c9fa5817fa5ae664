from dataclasses import dataclass, fields, replace
from enum import Enum
from typing import Optional
import os

from dotenv import load_dotenv  # type: ignore

# ----- Window & grid -----
CELL_SIZE = 24
HUD_HEIGHT = 56

# ----- Colors -----
BG       = (11, 18, 32)
SNAKE    = (139, 213, 202)
HEAD     = (166, 218, 149)
FOOD     = (239, 159, 118)
OBSTACLE = (247, 118, 142)
TEXT     = (220, 220, 230)

# ----- Headings (dx, dy) -----
UP, DOWN, LEFT, RIGHT = (0, -1), (0, 1), (-1, 0), (1, 0)

BEST_SCORE_KEY = "snake-best-score"


class Move(Enum):
    """The four logical directions an input event can request."""
    UP = (0, -1)
    DOWN = (0, 1)
    LEFT = (-1, 0)
    RIGHT = (1, 0)

    @property
    def vector(self):
        return self.value


class EdgePolicy(str, Enum):
    WRAP = "wrap"
    WALL = "wall"


class RestartPolicy(str, Enum):
    ANY_KEY = "any-key"    # movement input while over restarts the game
    EXPLICIT = "explicit"  # only the restart action restarts


# ----- Tunables (what you'd tweak for difficulty) -----
@dataclass(frozen=True)
class Config:
    grid_size: int = 20
    initial_length: int = 5
    edge_policy: EdgePolicy = EdgePolicy.WRAP
    restart_policy: RestartPolicy = RestartPolicy.ANY_KEY

    base_obstacles: int = 3
    obstacle_increase_every: int = 3
    max_obstacles: int = 45

    speed_progression: bool = True
    move_every_ms: int = 120
    foods_per_speedup: int = 5
    speedup_step_ms: int = 10
    min_move_ms: int = 60

    seed: Optional[int] = None
    best_score_path: str = "data/best_score.json"

    def __post_init__(self):
        # Accept plain strings for the policy fields (env vars, CLI)
        object.__setattr__(self, "edge_policy", EdgePolicy(self.edge_policy))
        object.__setattr__(self, "restart_policy", RestartPolicy(self.restart_policy))

        if self.grid_size < 1:
            raise ValueError(f"grid_size must be >= 1, got {self.grid_size}")
        if self.initial_length < 1:
            raise ValueError(f"initial_length must be >= 1, got {self.initial_length}")
        if self.base_obstacles < 0 or self.max_obstacles < 0:
            raise ValueError("obstacle counts must be non-negative")
        if self.move_every_ms < 1 or self.min_move_ms < 1:
            raise ValueError("tick intervals must be positive")
        if self.speed_progression and self.foods_per_speedup < 1:
            raise ValueError("foods_per_speedup must be >= 1 when speed progression is on")
        if self.speedup_step_ms < 0:
            raise ValueError("speedup_step_ms must be non-negative")

    @property
    def wraps(self) -> bool:
        return self.edge_policy is EdgePolicy.WRAP

    @property
    def window_size(self):
        side = self.grid_size * CELL_SIZE
        return side, side + HUD_HEIGHT


# Environment variable -> Config field
_ENV_FIELDS = {
    "SNAKE_GRID_SIZE": "grid_size",
    "SNAKE_INITIAL_LENGTH": "initial_length",
    "SNAKE_EDGE_POLICY": "edge_policy",
    "SNAKE_RESTART_POLICY": "restart_policy",
    "SNAKE_BASE_OBSTACLES": "base_obstacles",
    "SNAKE_OBSTACLE_INCREASE_EVERY": "obstacle_increase_every",
    "SNAKE_MAX_OBSTACLES": "max_obstacles",
    "SNAKE_SPEED_PROGRESSION": "speed_progression",
    "SNAKE_MOVE_EVERY_MS": "move_every_ms",
    "SNAKE_FOODS_PER_SPEEDUP": "foods_per_speedup",
    "SNAKE_SPEEDUP_STEP_MS": "speedup_step_ms",
    "SNAKE_MIN_MOVE_MS": "min_move_ms",
    "SNAKE_SEED": "seed",
    "SNAKE_BEST_SCORE_PATH": "best_score_path",
}


def _coerce(name: str, raw: str):
    if name == "speed_progression":
        return raw.strip().lower() in ("1", "true", "yes", "on")
    if name in ("edge_policy", "restart_policy", "best_score_path"):
        return raw.strip()
    try:
        return int(raw)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from None


def load_config(base: Optional[Config] = None, **overrides) -> Config:
    """
    Build a Config from SNAKE_* environment variables (a .env file is
    honoured), then apply explicit overrides. Overrides set to None are
    treated as "not given".
    """
    load_dotenv()
    cfg = base or Config()

    values = {}
    for env_name, field_name in _ENV_FIELDS.items():
        raw = os.getenv(env_name)
        if raw is not None and raw != "":
            values[field_name] = _coerce(field_name, raw)

    known = {f.name for f in fields(Config)}
    for key, value in overrides.items():
        if key not in known:
            raise ValueError(f"Unknown config field: {key}")
        if value is not None:
            values[key] = value

    return replace(cfg, **values)
