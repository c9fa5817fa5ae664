# difficulty.py
"""
Score -> difficulty mapping.

Two derived quantities, both pure functions of the score:
  - how many obstacles should be on the board
  - how long the scheduler waits between ticks
`sync_difficulty` brings a live game up to date with both after food is eaten.
"""
from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Tuple

from .config import Config
from .grid import occupied, random_free_tile

if TYPE_CHECKING:
    from .game import GameState

logger = logging.getLogger(__name__)


def target_obstacle_count(score: int, cfg: Config) -> int:
    if cfg.obstacle_increase_every <= 0:
        return min(cfg.max_obstacles, cfg.base_obstacles)
    return min(cfg.max_obstacles, cfg.base_obstacles + score // cfg.obstacle_increase_every)

def tick_interval(score: int, cfg: Config) -> int:
    if not cfg.speed_progression:
        return cfg.move_every_ms
    steps = score // cfg.foods_per_speedup
    return max(cfg.min_move_ms, cfg.move_every_ms - cfg.speedup_step_ms * steps)

def add_obstacle(state: GameState, cfg: Config) -> bool:
    """Place one obstacle on a free tile. False at the cap or when nothing is free."""
    if len(state.obstacles) >= cfg.max_obstacles:
        return False
    taken = occupied(state.snake, state.obstacles, [state.food])
    cell = random_free_tile(cfg.grid_size, taken, state.rng)
    if cell is None:
        return False
    state.obstacles.append(cell)
    return True

def fill_obstacles(state: GameState, target: int, cfg: Config) -> int:
    """Add obstacles one at a time until target is met or placement fails."""
    added = 0
    while len(state.obstacles) < target:
        if not add_obstacle(state, cfg):
            logger.debug("No room for obstacle %d/%d, will retry later",
                         len(state.obstacles) + 1, target)
            break
        added += 1
    return added

def sync_difficulty(state: GameState, cfg: Config) -> Tuple[int, bool]:
    """
    Grow the obstacle set toward the score's target and refresh the tick
    interval. Returns (obstacles_added, interval_changed).
    """
    added = fill_obstacles(state, target_obstacle_count(state.score, cfg), cfg)

    new_speed = tick_interval(state.score, cfg)
    changed = new_speed != state.speed_ms
    if changed:
        logger.debug("Tick interval %d ms -> %d ms at score %d",
                     state.speed_ms, new_speed, state.score)
        state.speed_ms = new_speed
    return added, changed
