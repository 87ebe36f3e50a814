from __future__ import annotations

import enum
import logging
import numbers
import random
from collections import deque
from dataclasses import dataclass
from typing import Deque, List, Optional, Tuple

import numpy as np

logger = logging.getLogger(__name__)

Vec2 = Tuple[int, int]

MIN_SIZE = 4
INITIAL_LENGTH = 3


def add_pos(a: Vec2, b: Vec2) -> Vec2:
    return a[0] + b[0], a[1] + b[1]


class Direction(enum.IntEnum):
    UP = 0
    RIGHT = 1
    DOWN = 2
    LEFT = 3

    @property
    def delta(self) -> Vec2:
        return DIRECTIONS[self]

    def reverse(self) -> Direction:
        return Direction((self + 2) % 4)


DIRECTIONS = {
    Direction.UP: (0, -1),
    Direction.RIGHT: (1, 0),
    Direction.DOWN: (0, 1),
    Direction.LEFT: (-1, 0),
}


class Cell(enum.IntEnum):
    """Status codes stored in the cell buffer, one byte per cell."""

    EMPTY = 0
    OCCUPIED = 1
    FOOD = 2


class GameStatus(enum.Enum):
    RUNNING = "running"
    LOST = "lost"
    WON = "won"


class WallMode(enum.Enum):
    """What happens when the head leaves the grid."""

    DEATH = "death"
    WRAP = "wrap"


class InvalidDimensions(ValueError):
    """The grid is too small to hold the initial snake."""


@dataclass
class StepResult:
    snake: List[Vec2]
    food: Optional[Vec2]
    score: int
    status: GameStatus
    ate_food: bool
    collision: Optional[str]

    @property
    def done(self) -> bool:
        return self.status is not GameStatus.RUNNING


class Board:
    """Snake board advanced one cell per :meth:`tick`.

    The board owns a flat, row-major status buffer (``index = y * width + x``)
    that mirrors the snake body and the food cell. Positions are ``(x, y)``
    tuples with ``x`` the column and ``y`` the row. The body deque keeps the
    head at index 0 and the tail at the end.

    Food placement draws from ``rng``, any object with a ``choice(seq)``
    method. When omitted a ``random.Random(seed)`` is used.
    """

    def __init__(
        self,
        width: int,
        height: int,
        *,
        seed: Optional[int] = None,
        rng=None,
        wall_mode: WallMode = WallMode.DEATH,
        food_score: int = 1,
    ) -> None:
        if not isinstance(width, numbers.Integral) or not isinstance(height, numbers.Integral):
            raise InvalidDimensions(f"Board dimensions must be integers, got {width!r}x{height!r}")
        width, height = int(width), int(height)
        if width < MIN_SIZE or height < MIN_SIZE:
            raise InvalidDimensions(
                f"Board must be at least {MIN_SIZE}x{MIN_SIZE}, got {width}x{height}"
            )

        self._width = width
        self._height = height
        self.wall_mode = wall_mode
        self.food_score = food_score
        self.random = rng if rng is not None else random.Random(seed)

        self._cells = np.zeros(width * height, dtype=np.uint8)
        # Single read-only view handed to renderers; never reallocated.
        self._view = self._cells.view()
        self._view.flags.writeable = False

        self._body: Deque[Vec2] = deque()
        self._direction = Direction.RIGHT
        self._pending: Optional[Direction] = None
        self._food: Optional[Vec2] = None
        self._score = 0
        self._status = GameStatus.RUNNING
        self.ticks = 0

        self.reset()

    @property
    def width(self) -> int:
        return self._width

    @property
    def height(self) -> int:
        return self._height

    @property
    def status(self) -> GameStatus:
        return self._status

    @property
    def food(self) -> Optional[Vec2]:
        return self._food

    @property
    def snake(self) -> Tuple[Vec2, ...]:
        return tuple(self._body)

    @property
    def pending_direction(self) -> Optional[Direction]:
        return self._pending

    def index(self, x: int, y: int) -> int:
        return y * self._width + x

    def position(self, index: int) -> Vec2:
        return index % self._width, index // self._width

    def reset(self) -> StepResult:
        self._cells[:] = Cell.EMPTY
        self._body.clear()

        head = (self._width // 2, self._height // 2)
        self._direction = Direction.RIGHT
        self._pending = None
        back = self._direction.reverse().delta
        pos = head
        for _ in range(INITIAL_LENGTH):
            self._body.append(pos)
            self._cells[self.index(*pos)] = Cell.OCCUPIED
            pos = add_pos(pos, back)

        self._score = 0
        self._status = GameStatus.RUNNING
        self.ticks = 0
        self._food = None
        self._spawn_food()

        return self._result(ate_food=False, collision=None)

    def direction(self) -> Direction:
        return self._direction

    def score(self) -> int:
        return self._score

    def cells(self) -> np.ndarray:
        """Read-only view of the cell buffer.

        The same view is returned on every call. Its contents are only
        meaningful until the next :meth:`tick`.
        """
        return self._view

    def change_direction(self, new_direction) -> None:
        """Queue ``new_direction`` for the next tick.

        Requests that reverse the active heading are ignored, as is anything
        sent after the game has ended.
        """
        if self._status is not GameStatus.RUNNING:
            return
        new_direction = Direction(new_direction)
        if new_direction == self._direction.reverse():
            return
        self._pending = new_direction

    def tick(self) -> StepResult:
        if self._status is not GameStatus.RUNNING:
            return self._result(ate_food=False, collision=None)

        if self._pending is not None:
            self._direction = self._pending
            self._pending = None

        candidate = self._next_head()
        if candidate is None:
            return self._lose("wall")

        tail = self._body[-1]
        if self._cells[self.index(*candidate)] == Cell.OCCUPIED and candidate != tail:
            return self._lose("self")

        ate_food = candidate == self._food

        # Vacate the tail before claiming the head so that a move into the
        # old tail cell ends up OCCUPIED.
        if not ate_food:
            self._body.pop()
            self._cells[self.index(*tail)] = Cell.EMPTY
        self._body.appendleft(candidate)
        self._cells[self.index(*candidate)] = Cell.OCCUPIED
        self.ticks += 1

        if ate_food:
            self._score += self.food_score
            self._food = None
            self._spawn_food()

        return self._result(ate_food=ate_food, collision=None)

    def _next_head(self) -> Optional[Vec2]:
        x, y = add_pos(self._body[0], self._direction.delta)
        if 0 <= x < self._width and 0 <= y < self._height:
            return x, y
        if self.wall_mode is WallMode.WRAP:
            return x % self._width, y % self._height
        return None

    def _spawn_food(self) -> None:
        available = np.flatnonzero(self._cells == Cell.EMPTY).tolist()
        if not available:
            self._status = GameStatus.WON
            logger.info("Board filled after %d ticks with score %d.", self.ticks, self._score)
            return

        idx = self.random.choice(available)
        assert self._cells[idx] == Cell.EMPTY, f"food placed on non-empty cell {idx}"
        self._cells[idx] = Cell.FOOD
        self._food = self.position(idx)
        logger.debug("Food spawned at %s.", self._food)

    def _lose(self, reason: str) -> StepResult:
        self._status = GameStatus.LOST
        logger.info(
            "Snake died (%s) after %d ticks with score %d.", reason, self.ticks, self._score
        )
        return self._result(ate_food=False, collision=reason)

    def _result(self, ate_food: bool, collision: Optional[str]) -> StepResult:
        return StepResult(
            snake=list(self._body),
            food=self._food,
            score=self._score,
            status=self._status,
            ate_food=ate_food,
            collision=collision,
        )

    def __repr__(self) -> str:
        return (
            f"<Board {self._width}x{self._height} status={self._status.value} "
            f"score={self._score} length={len(self._body)}>"
        )
