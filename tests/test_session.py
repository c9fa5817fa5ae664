"""Tests for the tick scheduler and the session that drives a game with it."""

import pytest

from obstacle_snake.config import Config, Move, RestartPolicy
from obstacle_snake.game import Phase
from obstacle_snake.scheduler import ManualScheduler
from obstacle_snake.session import SnakeSession
from obstacle_snake.storage import MemoryBestScoreStore


class TestManualScheduler:

    def test_repeats_at_interval(self):
        sched = ManualScheduler()
        calls = []
        sched.schedule_repeating(100, lambda: calls.append(sched.now))
        assert sched.advance(350) == 3
        assert calls == [100, 200, 300]

    def test_cancel_stops_firing(self):
        sched = ManualScheduler()
        calls = []
        handle = sched.schedule_repeating(100, lambda: calls.append(1))
        sched.advance(100)
        sched.cancel(handle)
        sched.advance(1000)
        assert calls == [1]
        assert sched.active == {}

    def test_reschedule_from_callback_does_not_double_fire(self):
        """Swapping the timer inside its own callback leaves exactly one live timer."""
        sched = ManualScheduler()
        calls = []
        state = {}

        def cb():
            calls.append(sched.now)
            if len(calls) == 1:
                sched.cancel(state["handle"])
                state["handle"] = sched.schedule_repeating(50, cb)

        state["handle"] = sched.schedule_repeating(100, cb)
        sched.advance(200)
        assert calls == [100, 150, 200]
        assert list(sched.active.values()) == [50]

    def test_rejects_non_positive_interval(self):
        with pytest.raises(ValueError):
            ManualScheduler().schedule_repeating(0, lambda: None)


@pytest.fixture
def speedy_cfg():
    # speeds up on every food so one bite changes the interval
    return Config(base_obstacles=0, obstacle_increase_every=0, foods_per_speedup=1, seed=2)


def _session(cfg, best=0, **kwargs):
    renders = []
    store = MemoryBestScoreStore(best)
    sched = ManualScheduler()
    session = SnakeSession(cfg, store, sched, on_render=renders.append, **kwargs)
    return session, store, sched, renders


def _place(session, snake, food, obstacles=()):
    session.state.set_snake(snake)
    session.state.food = food
    session.state.obstacles = list(obstacles)


class TestSession:

    def test_loads_best_score(self, speedy_cfg):
        session, _, _, _ = _session(speedy_cfg, best=7)
        assert session.state.best_score == 7

    def test_start_schedules_and_renders(self, speedy_cfg):
        session, _, sched, renders = _session(speedy_cfg)
        session.start()
        assert list(sched.active.values()) == [120]
        assert len(renders) == 1
        assert renders[0].phase is Phase.NOT_STARTED

    def test_idle_ticks_before_first_input(self, speedy_cfg):
        session, _, sched, renders = _session(speedy_cfg)
        session.start()
        head = session.state.head
        sched.advance(360)
        assert session.state.head == head
        assert len(renders) == 4

    def test_eating_reschedules_and_saves_record(self, speedy_cfg):
        session, store, sched, renders = _session(speedy_cfg)
        session.start()
        _place(session, [(10, 10), (9, 10)], food=(11, 10))
        session.press(Move.RIGHT)

        sched.advance(120)
        assert session.state.score == 1
        assert store.load() == 1
        assert store.saves == 1
        assert session.interval_ms == 110
        assert list(sched.active.values()) == [110]

        # next tick comes 110 ms later, not 120, and only once
        fired = len(sched.fired)
        sched.advance(109)
        assert len(sched.fired) == fired
        sched.advance(1)
        assert len(sched.fired) == fired + 1

    def test_no_save_without_record(self, speedy_cfg):
        session, store, sched, _ = _session(speedy_cfg, best=50)
        session.start()
        _place(session, [(10, 10), (9, 10)], food=(11, 10))
        session.press(Move.RIGHT)
        sched.advance(120)
        assert store.saves == 0
        assert session.state.best_score == 50

    def test_any_key_restart_restores_base_interval(self, speedy_cfg):
        session, store, sched, renders = _session(speedy_cfg)
        session.start()
        _place(session, [(10, 10), (9, 10)], food=(11, 10), obstacles=[(12, 10)])
        session.press(Move.RIGHT)
        sched.advance(120)   # eat
        sched.advance(110)   # crash into the obstacle
        assert session.state.phase is Phase.OVER

        assert session.press(Move.UP) is True
        assert session.state.phase is Phase.RUNNING
        assert session.state.score == 0
        assert session.state.best_score == 1
        assert session.interval_ms == 120
        assert list(sched.active.values()) == [120]
        assert renders[-1].phase is Phase.RUNNING

    def test_explicit_restart_policy(self):
        cfg = Config(base_obstacles=0, restart_policy=RestartPolicy.EXPLICIT, seed=2)
        session, _, sched, _ = _session(cfg)
        session.start()
        _place(session, [(10, 10), (9, 10)], food=(0, 0), obstacles=[(11, 10)])
        session.press(Move.RIGHT)
        sched.advance(120)
        assert session.state.phase is Phase.OVER

        assert session.press(Move.UP) is False
        assert session.state.phase is Phase.OVER

        session.restart()
        assert session.state.phase is Phase.NOT_STARTED
        assert session.state.obstacles == []

    def test_stop_cancels_timer(self, speedy_cfg):
        session, _, sched, _ = _session(speedy_cfg)
        session.start()
        session.stop()
        assert sched.active == {}
        assert session.interval_ms is None

    def test_autopilot_steers_before_tick(self, speedy_cfg):
        session, _, sched, _ = _session(speedy_cfg, autopilot=lambda state, cfg: Move.DOWN)
        session.start()
        sched.advance(120)
        assert session.state.phase is Phase.RUNNING
        assert session.state.head == (10, 11)

    def test_sessions_do_not_share_state(self, speedy_cfg):
        a, _, sched_a, _ = _session(speedy_cfg)
        b, _, _, _ = _session(speedy_cfg)
        a.start()
        a.press(Move.UP)
        sched_a.advance(120)
        assert a.state.head != b.state.head
        assert b.state.phase is Phase.NOT_STARTED
