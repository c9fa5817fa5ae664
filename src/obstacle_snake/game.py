# game.py
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Set, Tuple
import logging
import random

from .config import Config, Move, RIGHT, RestartPolicy
from .difficulty import fill_obstacles, sync_difficulty, tick_interval
from .grid import Cell, Vector, in_bounds, is_opposite, next_cell, occupied, random_free_tile

logger = logging.getLogger(__name__)

MSG_START = "Press any movement key to begin."
MSG_OBSTACLE = "Game over! You crashed into an obstacle."
MSG_SELF = "Game over! You crashed into yourself."
MSG_WALL = "Game over! You crashed into a wall."
MSG_WIN = "You win! No free tiles left. Press Restart to play again."
MSG_NO_ROOM = "No space left to spawn food. Press Restart to try again."


class Phase(Enum):
    NOT_STARTED = "not-started"
    RUNNING = "running"
    OVER = "over"


# ---------- State ----------
@dataclass
class GameState:
    snake: List[Cell] = field(default_factory=list)   # head at index 0
    obstacles: List[Cell] = field(default_factory=list)
    food: Optional[Cell] = None
    direction: Vector = RIGHT
    pending: Vector = RIGHT                           # queued heading, committed on the next tick
    score: int = 0
    best_score: int = 0
    phase: Phase = Phase.NOT_STARTED
    message: str = ""
    won: bool = False
    speed_ms: int = 0                                 # current tick interval
    rng: random.Random = field(default_factory=random.Random, repr=False, compare=False)
    body: Set[Cell] = field(default_factory=set, repr=False, compare=False)

    def __post_init__(self):
        # companion set for O(1) membership, always mirrors snake
        self.body = set(self.snake)

    @property
    def head(self) -> Cell:
        return self.snake[0]

    def push_head(self, cell: Cell) -> None:
        self.snake.insert(0, cell)
        self.body.add(cell)

    def pop_tail(self) -> Cell:
        cell = self.snake.pop()
        self.body.discard(cell)
        return cell

    def set_snake(self, cells: List[Cell]) -> None:
        self.snake = list(cells)
        self.body = set(self.snake)


@dataclass(frozen=True)
class StepResult:
    moved: bool = False
    ate_food: bool = False
    obstacles_added: int = 0
    interval_changed: bool = False
    new_record: bool = False
    game_over: bool = False
    won: bool = False
    message: str = ""


@dataclass(frozen=True)
class Snapshot:
    """Read-only view of a GameState handed to the presentation layer."""
    head: Cell
    body: Tuple[Cell, ...]
    tail: Cell
    obstacles: Tuple[Cell, ...]
    food: Optional[Cell]
    score: int
    best_score: int
    obstacle_count: int
    phase: Phase
    message: str
    won: bool
    speed_ms: int


# ---------- Helpers ----------
def initial_snake(cfg: Config) -> List[Cell]:
    cx = cfg.grid_size // 2
    cy = cfg.grid_size // 2
    length = min(cfg.initial_length, cx + 1)
    return [(cx - i, cy) for i in range(length)]

def spawn_food(state: GameState, cfg: Config) -> Optional[Cell]:
    return random_free_tile(cfg.grid_size, occupied(state.snake, state.obstacles), state.rng)

def snapshot(state: GameState) -> Snapshot:
    return Snapshot(
        head=state.snake[0],
        body=tuple(state.snake),
        tail=state.snake[-1],
        obstacles=tuple(state.obstacles),
        food=state.food,
        score=state.score,
        best_score=state.best_score,
        obstacle_count=len(state.obstacles),
        phase=state.phase,
        message=state.message,
        won=state.won,
        speed_ms=state.speed_ms,
    )


# ---------- Reset ----------
def reset_game(state: GameState, cfg: Config) -> GameState:
    """
    Rebuild every entity for a fresh game. Best score and the RNG survive.
    Obstacles are seeded to the base count only, since the score is back at 0.
    """
    state.set_snake(initial_snake(cfg))
    state.obstacles = []
    state.food = None
    state.direction = RIGHT
    state.pending = RIGHT
    state.score = 0
    state.won = False
    state.speed_ms = tick_interval(0, cfg)
    state.phase = Phase.NOT_STARTED
    state.message = MSG_START

    fill_obstacles(state, min(cfg.base_obstacles, cfg.max_obstacles), cfg)
    state.food = spawn_food(state, cfg)

    if state.food is None:
        state.phase = Phase.OVER
        state.message = MSG_NO_ROOM
        logger.info("No free tile for food after reset (grid %d)", cfg.grid_size)
    return state

def new_game_state(cfg: Config, best_score: int = 0, seed: Optional[int] = None,
                   rng: Optional[random.Random] = None) -> GameState:
    if rng is None:
        rng = random.Random(cfg.seed if seed is None else seed)
    state = GameState(best_score=best_score, rng=rng)
    return reset_game(state, cfg)


# ---------- Input / Update ----------
def set_direction(state: GameState, move: Move) -> bool:
    """Queue a heading unless it reverses the current one (no 180° turns)."""
    cand = move.vector
    if is_opposite(cand, state.direction):
        return False
    state.pending = cand
    if state.phase is Phase.NOT_STARTED:
        state.phase = Phase.RUNNING
        state.message = ""
    return True

def handle_move(state: GameState, move: Move, cfg: Config) -> bool:
    """
    Apply one logical input. While the game is over, movement restarts it
    under RestartPolicy.ANY_KEY and is ignored under EXPLICIT.
    Returns True if the input changed the queued heading.
    """
    if state.phase is Phase.OVER:
        if cfg.restart_policy is not RestartPolicy.ANY_KEY:
            return False
        logger.info("Restarting on input after game over (score %d)", state.score)
        reset_game(state, cfg)
        if state.phase is Phase.OVER:
            return False
    return set_direction(state, move)

def _crash(state: GameState, message: str) -> StepResult:
    state.phase = Phase.OVER
    state.message = message
    logger.info("%s Score %d, best %d", message, state.score, state.best_score)
    return StepResult(game_over=True, message=message)

def step_game(state: GameState, cfg: Config) -> StepResult:
    """
    Advance the game by one tick.
    Collisions are checked obstacle -> self -> wall, first match wins, and
    leave the snake untouched. Self-collision includes the tail cell even
    though it would be vacated this tick.
    """
    if state.phase is not Phase.RUNNING:
        return StepResult(message=state.message)

    # Commit direction once per tick
    state.direction = state.pending

    new_head = next_cell(state.head, state.direction, cfg.grid_size, cfg.edge_policy)

    if new_head in state.obstacles:
        return _crash(state, MSG_OBSTACLE)
    if new_head in state.body:
        return _crash(state, MSG_SELF)
    if not cfg.wraps and not in_bounds(new_head, cfg.grid_size):
        return _crash(state, MSG_WALL)

    state.push_head(new_head)

    if new_head != state.food:
        state.pop_tail()
        return StepResult(moved=True, message=state.message)

    # Eat & grow
    state.score += 1
    new_record = state.score > state.best_score
    if new_record:
        state.best_score = state.score

    added, changed = sync_difficulty(state, cfg)
    state.food = spawn_food(state, cfg)

    if state.food is None:
        state.phase = Phase.OVER
        state.message = MSG_WIN
        state.won = True
        logger.info("Grid filled at score %d", state.score)
        return StepResult(moved=True, ate_food=True, obstacles_added=added,
                          interval_changed=changed, new_record=new_record,
                          game_over=True, won=True, message=MSG_WIN)

    return StepResult(moved=True, ate_food=True, obstacles_added=added,
                      interval_changed=changed, new_record=new_record,
                      message=state.message)
