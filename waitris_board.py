"""Board grid: cells are EMPTY or a (left, right) payload pair"""
from typing import Iterator, List, Optional, Tuple

Cell = Optional[Tuple[str, str]]
EMPTY: Cell = None

class Board:
    def __init__(self, width: int, height: int):
        self.width = width
        self.height = height
        self.rows: List[List[Cell]] = [[EMPTY] * width for _ in range(height)]

    def inside(self, x: int, y: int) -> bool:
        return 0 <= x < self.width and 0 <= y < self.height

    def get(self, x: int, y: int) -> Cell:
        if not self.inside(x, y):
            raise IndexError(f"cell ({x}, {y}) outside {self.width}x{self.height} board")
        return self.rows[y][x]

    def set(self, x: int, y: int, cell: Cell) -> None:
        if not self.inside(x, y):
            raise IndexError(f"cell ({x}, {y}) outside {self.width}x{self.height} board")
        self.rows[y][x] = cell

    def is_filled(self, x: int, y: int) -> bool:
        return self.rows[y][x] is not EMPTY

    def row_full(self, y: int) -> bool:
        return all(c is not EMPTY for c in self.rows[y])

    def filled_cells(self) -> Iterator[Tuple[int, int]]:
        for y, row in enumerate(self.rows):
            for x, c in enumerate(row):
                if c is not EMPTY:
                    yield x, y

    def filled_count(self) -> int:
        return sum(1 for _ in self.filled_cells())

    def empty_row(self) -> List[Cell]:
        return [EMPTY] * self.width

    def remove_rows(self, ys) -> int:
        """Drop rows ys, keep the rest in order and pad empty rows on top."""
        drop = set(ys)
        kept = [row for y, row in enumerate(self.rows) if y not in drop]
        removed = self.height - len(kept)
        self.rows = [self.empty_row() for _ in range(removed)] + kept
        return removed

    def push_up(self, bottom: List[Cell]) -> List[Cell]:
        """Shift every row up by one, append bottom, return the discarded top row."""
        if len(bottom) != self.width:
            raise ValueError("bottom row width mismatch")
        top = self.rows[0]
        self.rows = self.rows[1:] + [list(bottom)]
        return top
