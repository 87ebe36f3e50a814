from __future__ import annotations

import argparse
import logging
import sys

import pygame

from snakeboard.board import Board, Cell, Direction, GameStatus, WallMode
from snakeboard.snapshot import as_grid, render_text

KEY_DIRECTIONS = {
    pygame.K_UP: Direction.UP,
    pygame.K_RIGHT: Direction.RIGHT,
    pygame.K_DOWN: Direction.DOWN,
    pygame.K_LEFT: Direction.LEFT,
}

COLORS = {
    Cell.OCCUPIED: (0, 150, 0),
    Cell.FOOD: (200, 50, 50),
}
BACKGROUND = (20, 20, 20)
GRID_COLOR = (30, 30, 30)

TICK_EVENT = pygame.USEREVENT + 1


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Play Snake")
    parser.add_argument("--grid", type=int, nargs=2, default=(32, 32))
    parser.add_argument("--cell-size", type=int, default=20)
    parser.add_argument("--interval", type=int, default=200, help="Milliseconds between ticks")
    parser.add_argument("--seed", type=int, default=None)
    parser.add_argument("--wrap", action="store_true", help="Wrap around the edges instead of dying")
    parser.add_argument("--log-level", type=str, default="INFO")
    return parser.parse_args()


def draw(window, board: Board, cell_size: int) -> None:
    window.fill(BACKGROUND)
    grid = as_grid(board)
    for y in range(board.height):
        for x in range(board.width):
            rect = pygame.Rect(x * cell_size, y * cell_size, cell_size, cell_size)
            color = COLORS.get(Cell(grid[y, x]))
            if color is None:
                pygame.draw.rect(window, GRID_COLOR, rect, 1)
            else:
                pygame.draw.rect(window, color, rect)
    pygame.display.set_caption(f"Snake - Score: {board.score()}")
    pygame.display.flip()


def main() -> None:
    args = parse_args()
    logging.basicConfig(level=args.log_level.upper(), format="%(levelname)s %(name)s: %(message)s")

    width, height = args.grid
    board = Board(
        width,
        height,
        seed=args.seed,
        wall_mode=WallMode.WRAP if args.wrap else WallMode.DEATH,
    )

    pygame.init()
    window = pygame.display.set_mode((width * args.cell_size, height * args.cell_size))
    draw(window, board, args.cell_size)
    pygame.time.set_timer(TICK_EVENT, args.interval)

    while board.status is GameStatus.RUNNING:
        event = pygame.event.wait()
        if event.type == pygame.QUIT:
            pygame.quit()
            sys.exit()
        if event.type == pygame.KEYDOWN:
            direction = KEY_DIRECTIONS.get(event.key)
            if direction is None or direction == board.direction().reverse():
                continue
            board.change_direction(direction)
            # Re-arming the timer drops the tick that was already scheduled.
            pygame.time.set_timer(TICK_EVENT, args.interval)
            board.tick()
            draw(window, board, args.cell_size)
        elif event.type == TICK_EVENT:
            board.tick()
            draw(window, board, args.cell_size)

    print(render_text(board))
    print(f"Game over ({board.status.value})! Final score: {board.score()}")
    pygame.quit()


if __name__ == "__main__":
    main()
