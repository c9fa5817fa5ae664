# main.py
import argparse
import logging

import pygame  # type: ignore

from .autoplay import greedy_move
from .config import EdgePolicy, RestartPolicy, load_config
from .controls import is_restart_key, move_for_key
from .render import draw
from .scheduler import PygameScheduler
from .session import SnakeSession
from .storage import JsonBestScoreStore

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Grid snake with obstacles.")
    parser.add_argument("--grid-size", type=int, default=None)
    parser.add_argument(
        "--edge",
        choices=[p.value for p in EdgePolicy],
        default=None,
        help="wrap: leave one edge, enter the opposite one; wall: edges are fatal",
    )
    parser.add_argument(
        "--restart",
        choices=[p.value for p in RestartPolicy],
        default=None,
        help="any-key: movement restarts a finished game; explicit: only R restarts",
    )
    parser.add_argument(
        "--no-speedup",
        action="store_true",
        help="Keep the tick interval constant regardless of score.",
    )
    parser.add_argument("--seed", type=int, default=None)
    parser.add_argument("--best-score-file", type=str, default=None)
    parser.add_argument(
        "--autoplay",
        action="store_true",
        help="Let the greedy policy steer the snake.",
    )
    parser.add_argument("--log-level", type=str, default="INFO")
    return parser


def main(argv=None):
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=getattr(logging, args.log_level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    cfg = load_config(
        grid_size=args.grid_size,
        edge_policy=args.edge,
        restart_policy=args.restart,
        speed_progression=False if args.no_speedup else None,
        seed=args.seed,
        best_score_path=args.best_score_file,
    )
    logger.info("Starting: grid=%d edge=%s restart=%s",
                cfg.grid_size, cfg.edge_policy.value, cfg.restart_policy.value)

    pygame.init()
    font = pygame.font.SysFont(None, 24)
    screen = pygame.display.set_mode(cfg.window_size)
    pygame.display.set_caption("Snake")
    clock = pygame.time.Clock()

    scheduler = PygameScheduler()
    session = SnakeSession(
        cfg,
        store=JsonBestScoreStore(cfg.best_score_path),
        scheduler=scheduler,
        on_render=lambda snap: draw(screen, font, snap, cfg),
        autopilot=greedy_move if args.autoplay else None,
    )
    session.start()

    running = True
    while running:
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                running = False
            elif event.type == pygame.KEYDOWN:
                if event.key == pygame.K_ESCAPE:
                    running = False
                elif is_restart_key(event.key):
                    session.restart()
                else:
                    move = move_for_key(event.key)
                    if move is not None:
                        session.press(move)
            else:
                scheduler.dispatch(event)
        clock.tick(60)  # movement is paced by the tick timer, not the frame rate

    session.stop()
    pygame.quit()


if __name__ == "__main__":
    main()
