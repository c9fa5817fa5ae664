# controls.py
from typing import Optional

import pygame  # type: ignore

from .config import Move

# Arrow keys and WASD map to the same four logical directions
KEY_TO_MOVE = {
    pygame.K_UP: Move.UP,
    pygame.K_DOWN: Move.DOWN,
    pygame.K_LEFT: Move.LEFT,
    pygame.K_RIGHT: Move.RIGHT,
    pygame.K_w: Move.UP,
    pygame.K_s: Move.DOWN,
    pygame.K_a: Move.LEFT,
    pygame.K_d: Move.RIGHT,
}

RESTART_KEYS = (pygame.K_r,)


def move_for_key(key: int) -> Optional[Move]:
    """Logical direction for a raw key code, or None for anything else."""
    return KEY_TO_MOVE.get(key)

def is_restart_key(key: int) -> bool:
    return key in RESTART_KEYS
