from __future__ import annotations

import argparse
import logging
from pathlib import Path
from typing import Optional, Tuple

import pygame

from block_blast.game import BlockBlastGame, FullLines, GameConfig, JsonBestScoreStore, TurnState


LOGGER = logging.getLogger(__name__)

CELL_SIZE = 40
MARGIN = 20
SLOT_SPAN = 5  # cells reserved per slot preview
CLEAR_DELAY_MS = 180
DEFAULT_BEST_FILE = Path.home() / ".block_blast" / "best.json"

EMPTY = (40, 40, 48)
FILLED = (70, 130, 240)
BURST = (255, 230, 120)
PIECE = (200, 180, 60)
USED = (70, 70, 78)
VALID = (120, 220, 140)
INVALID = (220, 120, 120)
TEXT = (230, 230, 230)


def _cell_rect(x: int, y: int, x0: int = MARGIN, y0: int = MARGIN, cell: int = CELL_SIZE) -> pygame.Rect:
    return pygame.Rect(x0 + x * cell, y0 + y * cell, cell - 1, cell - 1)


def _panel_origin(game: BlockBlastGame) -> int:
    return MARGIN * 2 + game.grid.size * CELL_SIZE


def _preview_cell() -> int:
    return CELL_SIZE // 2


def board_cell_at(game: BlockBlastGame, pos: Tuple[int, int]) -> Optional[Tuple[int, int]]:
    gx = (pos[0] - MARGIN) // CELL_SIZE
    gy = (pos[1] - MARGIN) // CELL_SIZE
    if game.grid.is_inside(gx, gy):
        return gx, gy
    return None


def slot_at(game: BlockBlastGame, pos: Tuple[int, int]) -> Optional[int]:
    x0 = _panel_origin(game)
    span = SLOT_SPAN * _preview_cell()
    if not (x0 <= pos[0] < x0 + span):
        return None
    idx = (pos[1] - MARGIN) // span
    if 0 <= idx < len(game.slots):
        return int(idx)
    return None


def draw_board(screen: pygame.Surface, game: BlockBlastGame, burst: Optional[FullLines] = None) -> None:
    highlighted = burst.cells(game.grid.size) if burst else set()
    board = game.board
    for y in range(game.grid.size):
        for x in range(game.grid.size):
            if (x, y) in highlighted:
                color = BURST
            else:
                color = FILLED if board[y, x] else EMPTY
            pygame.draw.rect(screen, color, _cell_rect(x, y))


def draw_slots(screen: pygame.Surface, game: BlockBlastGame) -> None:
    x0 = _panel_origin(game)
    cell = _preview_cell()
    span = SLOT_SPAN * cell
    for idx, piece in enumerate(game.slots):
        y0 = MARGIN + idx * span
        if piece is None:
            pygame.draw.rect(screen, USED, pygame.Rect(x0, y0, span - 4, span - 4), 1)
            continue
        for dx, dy in piece.cells:
            pygame.draw.rect(screen, PIECE, _cell_rect(dx, dy, x0, y0, cell))
        if idx == game.selected_slot:
            outline = pygame.Rect(x0, y0, piece.width * cell, piece.height * cell)
            pygame.draw.rect(screen, (255, 255, 255), outline, 2)


def draw_ghost(screen: pygame.Surface, game: BlockBlastGame, origin: Optional[Tuple[int, int]]) -> None:
    if origin is None or game.selected_slot is None:
        return
    piece = game.slots[game.selected_slot]
    if piece is None:
        return
    color = VALID if game.grid.is_valid_placement(piece, *origin) else INVALID
    for x, y in piece.cells_at(*origin):
        if game.grid.is_inside(x, y):
            pygame.draw.rect(screen, color, _cell_rect(x, y), 2)


def draw_hud(screen: pygame.Surface, game: BlockBlastGame, font: pygame.font.Font) -> None:
    x_text = _panel_origin(game)
    y_text = MARGIN + len(game.slots) * SLOT_SPAN * _preview_cell() + 10
    goal = game.goal_progress()
    lines = [
        f"Score: {game.score}",
        f"Best: {game.best_score}",
        goal.text,
        game.status,
        "Select: click a piece or 1-9",
        "Restart: N",
    ]
    for i, txt in enumerate(lines):
        if txt:
            screen.blit(font.render(txt, True, TEXT), (x_text, y_text + i * 20))
    bar = pygame.Rect(x_text, y_text + len(lines) * 20 + 6, 160, 8)
    pygame.draw.rect(screen, USED, bar)
    pygame.draw.rect(screen, VALID, pygame.Rect(bar.x, bar.y, int(bar.width * goal.progress), bar.height))


def run(best_file: Path = DEFAULT_BEST_FILE, seed: Optional[int] = None) -> None:
    pygame.init()
    try:
        screen: Optional[pygame.Surface] = None

        def flash_clear(lines: FullLines) -> None:
            if screen is None:
                return
            draw_board(screen, game, burst=lines)
            pygame.display.flip()
            pygame.time.delay(CLEAR_DELAY_MS)

        game = BlockBlastGame(
            GameConfig(random_seed=seed),
            best_score_store=JsonBestScoreStore(best_file),
            clear_hook=flash_clear,
        )
        board_px = game.grid.size * CELL_SIZE
        side_panel_w = 10 * _preview_cell() + 180
        screen = pygame.display.set_mode((MARGIN * 3 + board_px + side_panel_w, MARGIN * 2 + board_px + 40))
        pygame.display.set_caption("Block Blast")
        font = pygame.font.SysFont(None, 22)

        running = True
        clock = pygame.time.Clock()
        while running:
            for event in pygame.event.get():
                if event.type == pygame.QUIT:
                    running = False
                elif event.type == pygame.KEYDOWN:
                    if event.key == pygame.K_ESCAPE:
                        running = False
                    elif event.key == pygame.K_n:
                        game.restart()
                    elif pygame.K_1 <= event.key <= pygame.K_9:
                        game.select_slot(event.key - pygame.K_1)
                elif event.type == pygame.MOUSEBUTTONDOWN and event.button == 1:
                    slot = slot_at(game, event.pos)
                    if slot is not None:
                        game.select_slot(slot)
                        continue
                    target = board_cell_at(game, event.pos)
                    if target is not None and game.selected_slot is not None:
                        result = game.attempt_placement(game.selected_slot, *target)
                        LOGGER.debug("Placement at %s: %s", target, result.status.name)

            screen.fill((15, 15, 20))
            draw_board(screen, game)
            draw_ghost(screen, game, board_cell_at(game, pygame.mouse.get_pos()))
            draw_slots(screen, game)
            draw_hud(screen, game, font)
            if game.turn_state == TurnState.GAME_OVER:
                over = font.render("Game Over - Press N to restart", True, (255, 100, 100))
                screen.blit(over, (MARGIN, MARGIN * 2 + game.grid.size * CELL_SIZE))

            pygame.display.flip()
            clock.tick(60)
    finally:
        pygame.quit()


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(description="Play Block Blast with pygame.")
    p.add_argument("--best-file", type=Path, default=DEFAULT_BEST_FILE)
    p.add_argument("--seed", type=int, default=None)
    p.add_argument("--log-level", default="WARNING")
    return p


def main() -> None:
    args = build_parser().parse_args()
    logging.basicConfig(level=getattr(logging, args.log_level.upper(), logging.WARNING), format="%(message)s")
    run(best_file=args.best_file, seed=args.seed)


if __name__ == "__main__":  # pragma: no cover
    main()
