"""Piece model, shapes, rotation"""
from dataclasses import dataclass, replace
from typing import Iterator, List, Sequence, Tuple

from waitris_config import CONFIG, FILLER

Pair = Tuple[str, str]

SHAPES = {
    "I": [[0,0,0,0],[1,1,1,1],[0,0,0,0],[0,0,0,0]],
    "J": [[1,0,0],[1,1,1],[0,0,0]],
    "L": [[0,0,1],[1,1,1],[0,0,0]],
    "O": [[1,1],[1,1]],
    "S": [[0,1,1],[1,1,0],[0,0,0]],
    "T": [[0,1,0],[1,1,1],[0,0,0]],
    "Z": [[1,1,0],[0,1,1],[0,0,0]],
}

def rotate_cw(m): return [list(r) for r in zip(*m[::-1])]

def shape_matrix(t: str, state: int) -> List[List[int]]:
    m = SHAPES[t]
    for _ in range(state % 4):
        m = rotate_cw(m)
    return m

@dataclass(frozen=True)
class Piece:
    t: str
    state: int
    x: int
    y: int
    payload: Tuple[Pair, ...]

    def cells(self) -> Iterator[Tuple[int, int]]:
        """Board coordinates of occupied cells, row-major over the rotated box."""
        for r, row in enumerate(shape_matrix(self.t, self.state)):
            for c, v in enumerate(row):
                if v:
                    yield self.x + c, self.y + r

    def cells_with_pairs(self) -> Iterator[Tuple[int, int, Pair]]:
        for i, (x, y) in enumerate(self.cells()):
            pair = self.payload[i] if i < len(self.payload) else (FILLER, FILLER)
            yield x, y, pair

    def shifted(self, dx: int, dy: int) -> "Piece":
        return replace(self, x=self.x + dx, y=self.y + dy)

    def rotated(self) -> "Piece":
        return replace(self, state=(self.state + 1) % 4)

def spawn_piece(t: str, payload: Sequence[Pair], width: int = None) -> Piece:
    """Centre the shape's box and lift it so its top occupied row sits on row 0."""
    if width is None:
        width = CONFIG["BOARD_W"]
    s = SHAPES[t]
    empty = 0
    for r in s:
        if all(v == 0 for v in r): empty += 1
        else: break
    return Piece(t, 0, (width - len(s[0])) // 2, -empty, tuple(payload))

def random_shape(rng) -> str:
    return rng.next_shape()
