import random

import pytest

from obstacle_snake.config import Config, RIGHT
from obstacle_snake.game import GameState, Phase


@pytest.fixture
def bare_cfg():
    """20x20 wrap grid with no obstacles, so steps are fully predictable."""
    return Config(base_obstacles=0, max_obstacles=0, seed=1)


@pytest.fixture
def make_state():
    def _make(snake, food=None, obstacles=(), direction=RIGHT, pending=None,
              phase=Phase.RUNNING, score=0, best_score=0, speed_ms=120, seed=0):
        return GameState(
            snake=list(snake),
            obstacles=list(obstacles),
            food=food,
            direction=direction,
            pending=direction if pending is None else pending,
            score=score,
            best_score=best_score,
            phase=phase,
            speed_ms=speed_ms,
            rng=random.Random(seed),
        )
    return _make


def _assert_invariants(state, cfg):
    snake = state.snake
    assert len(snake) >= 1
    assert len(set(snake)) == len(snake), "snake overlaps itself"
    assert state.body == set(snake)
    assert not set(state.obstacles) & set(snake)
    assert len(set(state.obstacles)) == len(state.obstacles)
    assert len(state.obstacles) <= cfg.max_obstacles
    if state.food is not None:
        assert state.food not in set(snake) | set(state.obstacles)


@pytest.fixture
def assert_invariants():
    """Checks the occupancy invariants that must hold in every reachable state."""
    return _assert_invariants


@pytest.fixture
def headless_pygame(monkeypatch):
    """pygame running on SDL's dummy video driver, torn down afterwards."""
    import pygame  # type: ignore
    monkeypatch.setenv("SDL_VIDEODRIVER", "dummy")
    pygame.init()
    pygame.display.set_mode((1, 1))
    pygame.event.clear()
    yield pygame
    pygame.quit()
