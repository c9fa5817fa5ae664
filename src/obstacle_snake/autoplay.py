# autoplay.py
from __future__ import annotations
from dataclasses import dataclass, field
from typing import Callable, Dict, Optional, Tuple
import random

import numpy as np  # type: ignore

from .config import Config, Move
from .game import GameState, Phase, handle_move, new_game_state, set_direction, step_game
from .grid import Vector, in_bounds, next_cell

# -----------------------------------------------------------------------------
# Actions: integers -> logical moves
# -----------------------------------------------------------------------------
ACTIONS: Dict[int, Move] = {
    0: Move.UP,
    1: Move.DOWN,
    2: Move.LEFT,
    3: Move.RIGHT,
}

# board_array() cell codes
EMPTY, BODY, HEAD, OBSTACLE, FOOD = 0, 1, 2, 3, 4

# -----------------------------------------------------------------------------
# Small geometry helpers
# -----------------------------------------------------------------------------
def _left_of(direction: Vector) -> Vector:
    """Rotate a direction 90° CCW (y grows downward)."""
    dx, dy = direction
    return (dy, -dx)

def _right_of(direction: Vector) -> Vector:
    """Rotate a direction 90° CW (y grows downward)."""
    dx, dy = direction
    return (-dy, dx)

def would_hit(state: GameState, direction: Vector, cfg: Config) -> bool:
    """True if moving the head one cell along direction ends the game."""
    cell = next_cell(state.head, direction, cfg.grid_size, cfg.edge_policy)
    if not in_bounds(cell, cfg.grid_size):
        return True
    return cell in state.obstacles or cell in state.body

def _wrapped_delta(a: int, b: int, size: int, wraps: bool) -> int:
    d = b - a
    if wraps:
        if d > size / 2:
            d -= size
        elif d < -size / 2:
            d += size
    return d

# -----------------------------------------------------------------------------
# Observations
# -----------------------------------------------------------------------------
def board_array(state: GameState, cfg: Config) -> np.ndarray:
    """int8 grid indexed [y, x] with the EMPTY/BODY/HEAD/OBSTACLE/FOOD codes."""
    board = np.zeros((cfg.grid_size, cfg.grid_size), dtype=np.int8)
    for x, y in state.obstacles:
        board[y, x] = OBSTACLE
    for x, y in state.snake[1:]:
        board[y, x] = BODY
    if state.food is not None:
        fx, fy = state.food
        board[fy, fx] = FOOD
    hx, hy = state.head
    board[hy, hx] = HEAD
    return board

def observe(state: GameState, cfg: Config) -> np.ndarray:
    """
    Compact 9-D observation:
      0-1: head x, y normalized in [0, 1]
      2-3: food x, y normalized in [0, 1] (head position when there is no food)
      4-5: current direction components
      6-8: danger ahead / left / right
    """
    denom = max(cfg.grid_size - 1, 1)
    hx, hy = state.head
    fx, fy = state.food if state.food is not None else state.head
    dx, dy = state.direction
    return np.array(
        [
            hx / denom, hy / denom, fx / denom, fy / denom,
            float(dx), float(dy),
            float(would_hit(state, state.direction, cfg)),
            float(would_hit(state, _left_of(state.direction), cfg)),
            float(would_hit(state, _right_of(state.direction), cfg)),
        ],
        dtype=np.float32,
    )

# -----------------------------------------------------------------------------
# Policies
# -----------------------------------------------------------------------------
def policy_random(env: "SnakeEnv") -> int:
    """Uniformly random action."""
    return int(env.np_rng.integers(len(ACTIONS)))

def greedy_move(state: GameState, cfg: Config) -> Move:
    """
    Head for the food along the shortest (wrap-aware) path, never choosing a
    move that is immediately fatal if a safe one exists.
    """
    hx, hy = state.head
    fx, fy = state.food if state.food is not None else state.head
    ddx = _wrapped_delta(hx, fx, cfg.grid_size, cfg.wraps)
    ddy = _wrapped_delta(hy, fy, cfg.grid_size, cfg.wraps)

    prefs = []
    if ddx:
        prefs.append(Move.RIGHT if ddx > 0 else Move.LEFT)
    if ddy:
        prefs.append(Move.DOWN if ddy > 0 else Move.UP)
    for move in (Move(state.direction), Move.UP, Move.DOWN, Move.LEFT, Move.RIGHT):
        if move not in prefs:
            prefs.append(move)

    reverse = (-state.direction[0], -state.direction[1])
    for move in prefs:
        if move.vector != reverse and not would_hit(state, move.vector, cfg):
            return move
    # boxed in
    return Move(state.direction)

def policy_greedy(env: "SnakeEnv") -> int:
    assert env.state is not None, "Call reset() first."
    return _action_for(greedy_move(env.state, env.cfg))

def _action_for(move: Move) -> int:
    for a, m in ACTIONS.items():
        if m is move:
            return a
    raise KeyError(move)

# -----------------------------------------------------------------------------
# Environment
# -----------------------------------------------------------------------------
@dataclass
class SnakeEnv:
    """
    Gym-like headless wrapper around the game core. Every step() is one tick.

    Rewards:
      + eat_reward   when food is eaten
      + step_penalty per step
      + death_reward on a crash (winning is not a death)
    """
    cfg: Config = field(default_factory=Config)
    step_penalty: float = -0.001
    eat_reward: float   = 1.0
    death_reward: float = -1.0
    seed_value: Optional[int] = 0

    def __post_init__(self):
        self.rng = random.Random(self.seed_value)
        self.np_rng = np.random.default_rng(self.seed_value)
        self.state: Optional[GameState] = None

    def reset(self, seed: Optional[int] = None) -> np.ndarray:
        """Start a new episode. Returns the initial observation."""
        if seed is not None:
            self.seed_value = seed
            self.rng.seed(seed)
            self.np_rng = np.random.default_rng(seed)
        best = self.state.best_score if self.state is not None else 0
        self.state = new_game_state(self.cfg, best_score=best, rng=self.rng)
        return observe(self.state, self.cfg)

    def step(self, action: int) -> Tuple[np.ndarray, float, bool, dict]:
        """
        Apply an action (0..3), advance exactly one tick, return (obs, reward, done, info).

        A first action that reverses the starting heading is rejected like any
        other reversal; the episode then starts by keeping the current heading,
        so every call is still exactly one tick.
        """
        assert self.state is not None, "Call reset() first."
        assert action in ACTIONS, f"Invalid action {action}"

        if not handle_move(self.state, ACTIONS[action], self.cfg) and self.state.phase is Phase.NOT_STARTED:
            set_direction(self.state, Move(self.state.direction))

        result = step_game(self.state, self.cfg)

        reward = self.step_penalty
        if result.ate_food:
            reward += self.eat_reward
        if result.game_over and not result.won:
            reward += self.death_reward

        info = {"score": self.state.score, "won": result.won}
        if result.game_over:
            info["reason"] = result.message
        return observe(self.state, self.cfg), reward, result.game_over, info

    @property
    def action_space_n(self) -> int:
        return len(ACTIONS)

    @property
    def observation_space_shape(self):
        # 9 features defined in observe()
        return (9,)


def run_episode(env: SnakeEnv, policy: Callable[[SnakeEnv], int],
                max_steps: int = 10_000) -> Tuple[int, float, int]:
    """
    Run one episode with a fixed policy.

    Returns:
        steps: number of steps taken
        total: total return (sum of rewards)
        score: final score
    """
    env.reset()
    total = 0.0
    steps = 0
    score = 0
    while steps < max_steps:
        obs, r, done, info = env.step(policy(env))
        total += r
        steps += 1
        score = info["score"]
        if done:
            break
    return steps, total, score
