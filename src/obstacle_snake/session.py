# session.py
from __future__ import annotations

import logging
from typing import Any, Callable, Optional

from .config import Config, Move, RestartPolicy
from .game import (
    GameState, Phase, Snapshot, StepResult,
    handle_move, new_game_state, reset_game, snapshot, step_game,
)

logger = logging.getLogger(__name__)

Renderer = Callable[[Snapshot], None]
Autopilot = Callable[[GameState, Config], Move]


class SnakeSession:
    """
    One running game: owns its GameState and drives it through the
    collaborators it is given.

    store      -- load() / save(value) for the best score
    scheduler  -- schedule_repeating(ms, callback) / cancel(handle)
    on_render  -- receives a Snapshot after every tick, restart and reset
    autopilot  -- optional (state, cfg) -> Move consulted before each tick
    """

    def __init__(self, cfg: Config, store, scheduler, on_render: Optional[Renderer] = None,
                 autopilot: Optional[Autopilot] = None):
        self.cfg = cfg
        self.store = store
        self.scheduler = scheduler
        self.on_render = on_render
        self.autopilot = autopilot
        self.state: GameState = new_game_state(cfg, best_score=store.load())
        self._handle: Any = None
        self._interval: Optional[int] = None

    # ---------- scheduling ----------
    def _schedule(self) -> None:
        """(Re)start the timer at state.speed_ms if it differs from the live one."""
        if self._handle is not None and self._interval == self.state.speed_ms:
            return
        if self._handle is not None:
            self.scheduler.cancel(self._handle)
        self._interval = self.state.speed_ms
        self._handle = self.scheduler.schedule_repeating(self._interval, self.tick)
        logger.debug("Ticking every %d ms", self._interval)

    def start(self) -> None:
        self._schedule()
        self.render()

    def stop(self) -> None:
        if self._handle is not None:
            self.scheduler.cancel(self._handle)
        self._handle = None
        self._interval = None

    @property
    def interval_ms(self) -> Optional[int]:
        return self._interval

    # ---------- game flow ----------
    def render(self) -> None:
        if self.on_render is not None:
            self.on_render(snapshot(self.state))

    def tick(self) -> StepResult:
        if self.autopilot is not None and self.state.phase is not Phase.OVER:
            self.press(self.autopilot(self.state, self.cfg))
        result = step_game(self.state, self.cfg)
        if result.new_record:
            logger.info("New best score: %d", self.state.best_score)
            self.store.save(self.state.best_score)
        if result.interval_changed and self._handle is not None:
            self._schedule()
        self.render()
        return result

    def press(self, move: Move) -> bool:
        was_over = self.state.phase is Phase.OVER
        accepted = handle_move(self.state, move, self.cfg)
        if was_over and self.cfg.restart_policy is RestartPolicy.ANY_KEY:
            # implicit restart: back to the base pace
            self._resync()
        return accepted

    def restart(self) -> None:
        logger.info("Restart requested (score %d)", self.state.score)
        reset_game(self.state, self.cfg)
        self._resync()

    def _resync(self) -> None:
        if self._handle is not None:
            self._schedule()
        self.render()
