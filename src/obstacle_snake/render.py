# render.py
from typing import Tuple

import pygame  # type: ignore

from .config import (
    CELL_SIZE, HUD_HEIGHT,
    BG, SNAKE, HEAD, FOOD, OBSTACLE, TEXT,
    Config,
)
from .game import Phase, Snapshot
from .grid import direction_between


def cell_rect(gx: int, gy: int) -> pygame.Rect:
    # 1px gutter so neighbouring tiles read as separate cells
    return pygame.Rect(gx * CELL_SIZE + 1, HUD_HEIGHT + gy * CELL_SIZE + 1,
                       CELL_SIZE - 2, CELL_SIZE - 2)

def draw_cell(screen: pygame.Surface, gx: int, gy: int, color: Tuple[int, int, int]) -> None:
    pygame.draw.rect(screen, color, cell_rect(gx, gy))

def draw_food(screen: pygame.Surface, gx: int, gy: int) -> None:
    rect = cell_rect(gx, gy)
    pygame.draw.circle(screen, FOOD, rect.center, rect.width // 2)

def draw_tail(screen: pygame.Surface, snap: Snapshot, cfg: Config) -> None:
    """Tail drawn as a wedge pointing away from the segment in front of it."""
    if len(snap.body) < 2:
        return
    tx, ty = snap.tail
    dx, dy = direction_between(snap.body[-2], snap.tail, cfg.grid_size)
    rect = cell_rect(tx, ty)
    cx, cy = rect.center
    half = rect.width // 2
    tip = (cx + dx * half, cy + dy * half)
    # base corners sit on the edge facing the body
    bx, by = cx - dx * half, cy - dy * half
    px, py = -dy * half, dx * half
    pygame.draw.polygon(screen, SNAKE, [tip, (bx + px, by + py), (bx - px, by - py)])

def blit_lines(screen: pygame.Surface, font: pygame.font.Font, lines, center_x: int, top: int,
               spacing: int = 4) -> int:
    """Render (text, color) pairs centred on center_x, stacked from top. Returns the bottom y."""
    y = top
    for text, color in lines:
        if not text:
            continue
        surf = font.render(text, True, color)
        screen.blit(surf, surf.get_rect(midtop=(center_x, y)))
        y += surf.get_height() + spacing
    return y

def draw_hud(screen: pygame.Surface, font: pygame.font.Font, snap: Snapshot) -> None:
    status = f"Score {snap.score}   Best {snap.best_score}   Obstacles {snap.obstacle_count}"
    # once the game ends the message moves into the game-over panel
    message = snap.message if snap.phase is not Phase.OVER else ""
    blit_lines(screen, font, [(status, TEXT), (message, TEXT)], screen.get_width() // 2, 6)

def draw_game(screen: pygame.Surface, font: pygame.font.Font, snap: Snapshot, cfg: Config) -> None:
    screen.fill(BG)
    for x, y in snap.obstacles:
        draw_cell(screen, x, y, OBSTACLE)
    if snap.food is not None:
        draw_food(screen, *snap.food)
    # body, tail, then head on top
    for x, y in snap.body[1:-1]:
        draw_cell(screen, x, y, SNAKE)
    draw_tail(screen, snap, cfg)
    draw_cell(screen, snap.head[0], snap.head[1], HEAD)
    draw_hud(screen, font, snap)

def draw_game_over(screen: pygame.Surface, font: pygame.font.Font, snap: Snapshot) -> None:
    """Dim the board under the HUD and show the result panel."""
    if snap.phase is not Phase.OVER:
        return
    width, height = screen.get_size()
    board = pygame.Rect(0, HUD_HEIGHT, width, height - HUD_HEIGHT)
    shade = pygame.Surface(board.size, pygame.SRCALPHA)
    shade.fill((*BG, 190))
    screen.blit(shade, board.topleft)

    accent = HEAD if snap.won else OBSTACLE
    lines = [
        ("YOU WIN" if snap.won else "GAME OVER", accent),
        (snap.message, TEXT),
        (f"Score {snap.score} / Best {snap.best_score}", TEXT),
    ]
    panel = pygame.Rect(0, 0, width - 2 * CELL_SIZE, 3 * (font.get_linesize() + 4) + 16)
    panel.center = board.center
    pygame.draw.rect(screen, BG, panel)
    pygame.draw.rect(screen, accent, panel, width=2)
    blit_lines(screen, font, lines, panel.centerx, panel.top + 8)

def draw(screen: pygame.Surface, font: pygame.font.Font, snap: Snapshot, cfg: Config) -> None:
    draw_game(screen, font, snap, cfg)
    draw_game_over(screen, font, snap)
    pygame.display.flip()
