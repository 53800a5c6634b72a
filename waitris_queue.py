"""Pending-piece FIFO and its refill policy"""
import logging
from collections import deque
from dataclasses import dataclass
from typing import Deque, Iterator, Optional

from waitris_config import BOMB_GLYPH
from waitris_piece import Piece, spawn_piece

log = logging.getLogger(__name__)

BOMB_RUN_ID = 0

@dataclass(frozen=True)
class QueuedPiece:
    run_id: int
    cycle: int
    piece: Piece
    is_bomb: bool = False

def make_bomb_piece(width: int, chunk_size: int) -> Piece:
    """Compact 2x2 O footprint with a solid payload."""
    return spawn_piece("O", [(BOMB_GLYPH, BOMB_GLYPH)] * (chunk_size // 2), width)

class PieceQueue:
    def __init__(self, width: int, chunk_size: int):
        self.width = width
        self.chunk_size = chunk_size
        self.items: Deque[QueuedPiece] = deque()

    def __len__(self) -> int:
        return len(self.items)

    def __iter__(self) -> Iterator[QueuedPiece]:
        return iter(self.items)

    def extend(self, run_id: int, cycle: int, pieces) -> None:
        for p in pieces:
            self.items.append(QueuedPiece(run_id, cycle, p))

    def pop(self) -> Optional[QueuedPiece]:
        return self.items.popleft() if self.items else None

    def discard_repeats(self, run_id: int) -> int:
        """Drop queued pieces of run_id from cycles after the first."""
        before = len(self.items)
        self.items = deque(q for q in self.items if q.run_id != run_id or q.cycle <= 1)
        return before - len(self.items)

    def run_ids(self) -> set:
        return {q.run_id for q in self.items}

    def ensure_supply(self, tracker, bombs: int) -> int:
        """
        Refill an empty queue with one new cycle from every active run.

        If nothing came in and bombs are banked, queue a single bomb piece.
        Returns how many banked bombs were spent (0 or 1).
        """
        if self.items:
            return 0
        for run in tracker.active_runs():
            cycle, pieces = tracker.next_cycle(run)
            self.extend(run.id, cycle, pieces)
        if not self.items and bombs > 0:
            bomb = make_bomb_piece(self.width, self.chunk_size)
            self.items.append(QueuedPiece(BOMB_RUN_ID, 0, bomb, True))
            log.debug("dispensing bomb, %d left in bank", bombs - 1)
            return 1
        return 0
