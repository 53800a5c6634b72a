"""
Game state machine: falling piece, locking, staged line clears, and the
command-driven meta-mechanics (garbage rows, infection, variety meter, bombs).

The Game is the single owner of the board, the piece queue and the run
tracker. It is not thread-safe; command events coming from another thread
must be funnelled through waitris_events.EventFeed and applied on the loop
thread.
"""
import logging
from dataclasses import dataclass
from typing import List, Optional, Tuple, Union

from waitris_board import EMPTY, Board
from waitris_config import CONFIG, GARBAGE_PAIR, INFECTED_PAIR
from waitris_events import CommandEnd, CommandStart
from waitris_piece import Piece
from waitris_queue import PieceQueue
from waitris_rng import WaitrisRandom
from waitris_runs import RunTracker

log = logging.getLogger(__name__)

SCORE_TABLE = {1: 100, 2: 300, 3: 500, 4: 800}

# -------------------------------------------------------------
# WHAT IS FALLING
# -------------------------------------------------------------

@dataclass(frozen=True)
class Idle:
    pass

@dataclass(frozen=True)
class NormalPiece:
    run_id: int

@dataclass(frozen=True)
class BombPiece:
    pass

Falling = Union[Idle, NormalPiece, BombPiece]

# -------------------------------------------------------------
# FLASH STAGES
# -------------------------------------------------------------

@dataclass
class ClearStage:
    """Full rows found at lock time, removed once remaining hits zero."""
    rows: List[int]
    remaining: int

@dataclass
class LockFlash:
    cells: List[Tuple[int, int]]
    remaining: int

def score_for(cleared: int) -> int:
    return SCORE_TABLE.get(cleared, 0)


class Game:
    def __init__(self, rng: Optional[WaitrisRandom] = None, width: int = None, height: int = None,
                 chunk_size: int = None, variety_thresh: int = None, bomb_cap: int = None):
        self.width = width if width is not None else CONFIG["BOARD_W"]
        self.height = height if height is not None else CONFIG["BOARD_H"]
        self.chunk_size = chunk_size if chunk_size is not None else CONFIG["CHUNK_SIZE"]
        self.variety_thresh = variety_thresh if variety_thresh is not None else CONFIG["VARIETY_THRESH"]
        self.bomb_cap = bomb_cap if bomb_cap is not None else CONFIG["BOMB_CAP"]
        self.infect_max = CONFIG["INFECT_MAX"]
        self.clear_frames = CONFIG["CLEAR_FLASH_FRAMES"]
        self.lock_frames = CONFIG["LOCK_FLASH_FRAMES"]

        self.rng = rng if rng is not None else WaitrisRandom(CONFIG["SEED"])
        self.board = Board(self.width, self.height)
        self.queue = PieceQueue(self.width, self.chunk_size)
        self.runs = RunTracker(self.rng, self.width, self.chunk_size)

        self.current: Optional[Piece] = None
        self.falling: Falling = Idle()
        self.clearing: Optional[ClearStage] = None
        self.lock_flash: Optional[LockFlash] = None
        self.game_over = False
        self.score = 0
        self.lines_cleared = 0

        self.bombs = 0
        self.variety_meter = 0
        self.variety_streak = 0
        self.last_identity: Optional[str] = None

    # ---------- Read-only views ----------
    @property
    def active_piece(self) -> bool:
        return not isinstance(self.falling, Idle)

    @property
    def active_run(self) -> Optional[int]:
        return self.falling.run_id if isinstance(self.falling, NormalPiece) else None

    @property
    def current_is_bomb(self) -> bool:
        return isinstance(self.falling, BombPiece)

    @property
    def pending_clear(self) -> List[int]:
        return list(self.clearing.rows) if self.clearing else []

    @property
    def clear_flash_frames(self) -> int:
        return self.clearing.remaining if self.clearing else 0

    @property
    def lock_flash_cells(self) -> List[Tuple[int, int]]:
        return list(self.lock_flash.cells) if self.lock_flash else []

    @property
    def lock_flash_frames(self) -> int:
        return self.lock_flash.remaining if self.lock_flash else 0

    def is_running(self) -> bool:
        return self.active_piece or len(self.queue) > 0 or self.runs.any_active()

    # ---------- Collision & movement ----------
    def can_place(self, piece: Piece) -> bool:
        for x, y in piece.cells():
            if not self.board.inside(x, y):
                return False
            if self.board.is_filled(x, y):
                return False
        return True

    def _try(self, candidate: Piece) -> bool:
        if self.can_place(candidate):
            self.current = candidate
            return True
        return False

    def move(self, dx: int, dy: int) -> bool:
        if self.game_over or self.current is None or not self.active_piece:
            return False
        return self._try(self.current.shifted(dx, dy))

    def rotate(self) -> bool:
        if self.game_over or self.current is None or not self.active_piece:
            return False
        return self._try(self.current.rotated())

    def tick_gravity(self) -> None:
        if self.game_over or not self.active_piece:
            return
        if not self.move(0, 1):
            self.lock_piece()
            self.spawn_next()

    def hard_drop(self) -> None:
        if self.game_over or not self.active_piece:
            return
        while self.move(0, 1):
            pass
        self.lock_piece()
        self.spawn_next()

    def ghost_piece(self) -> Optional[Piece]:
        if self.current is None or not self.active_piece:
            return None
        ghost = self.current
        while self.can_place(ghost.shifted(0, 1)):
            ghost = ghost.shifted(0, 1)
        return ghost

    # ---------- Lock / spawn ----------
    def lock_piece(self) -> None:
        if self.game_over or self.current is None or not self.active_piece:
            return
        piece, was_bomb = self.current, self.current_is_bomb
        cells = []
        for x, y, pair in piece.cells_with_pairs():
            if self.board.inside(x, y):
                self.board.set(x, y, pair)
                cells.append((x, y))
        self.lock_flash = LockFlash(cells, self.lock_frames)
        self.falling = Idle()
        self.current = None

        full = [y for y in range(self.height) if self.board.row_full(y)]
        if full:
            self.clearing = ClearStage(full, self.clear_frames)
        if was_bomb:
            self.apply_bomb_clear(piece)

    def spawn_next(self) -> None:
        if self.game_over:
            return
        self.bombs -= self.queue.ensure_supply(self.runs, self.bombs)
        qp = self.queue.pop()
        if qp is None:
            self.falling = Idle()
            self.current = None
        else:
            self.falling = BombPiece() if qp.is_bomb else NormalPiece(qp.run_id)
            if self.can_place(qp.piece):
                self.current = qp.piece
            else:
                self.current = None
                self.falling = Idle()
                self._top_out("spawn position blocked")
        referenced = self.queue.run_ids()
        if self.active_run is not None:
            referenced.add(self.active_run)
        for rid in self.runs.sweep(referenced):
            log.debug("run %d drained, no longer tracked", rid)

    def _top_out(self, reason: str) -> None:
        self.game_over = True
        log.info("game over (%s): score=%d lines=%d", reason, self.score, self.lines_cleared)

    # ---------- Per-tick effects ----------
    def process_effects(self) -> None:
        if self.lock_flash:
            self.lock_flash.remaining -= 1
            if self.lock_flash.remaining <= 0:
                self.lock_flash = None
        if self.clearing and not self.game_over:
            self.clearing.remaining -= 1
            if self.clearing.remaining <= 0:
                self.perform_pending_clear()

    def perform_pending_clear(self) -> None:
        stage, self.clearing = self.clearing, None
        if not stage or not stage.rows:
            return
        cleared = self.board.remove_rows(stage.rows)
        self.lines_cleared += cleared
        self.score += score_for(cleared)
        log.debug("cleared %d rows, score=%d", cleared, self.score)

    # ---------- Command events ----------
    def handle_command_event(self, ev) -> None:
        if self.game_over:
            log.debug("ignoring %r after game over", ev)
            return
        if isinstance(ev, CommandStart):
            self.start_run(ev.id, ev.command)
        elif isinstance(ev, CommandEnd):
            self.end_run(ev.id, ev.exit_code)
        else:
            raise TypeError(f"unknown command event {ev!r}")

    def start_run(self, run_id: int, command: str) -> None:
        cycle, pieces = self.runs.start(run_id, command)
        self.queue.extend(run_id, cycle, pieces)
        if not self.active_piece:
            self.spawn_next()

    def end_run(self, run_id: int, exit_code: int) -> None:
        run = self.runs.end(run_id)
        dropped = self.queue.discard_repeats(run_id)
        if dropped:
            log.debug("run %d ended, dropped %d repeat pieces", run_id, dropped)
        if exit_code != 0:
            self.apply_garbage_row()
            self.apply_infection()
        if run is not None:
            self.apply_variety(run.identity, exit_code)
            self.last_identity = run.identity

    # ---------- Meta-mechanics ----------
    def apply_garbage_row(self) -> None:
        hole = self.rng.randrange(self.width)
        row = [GARBAGE_PAIR] * self.width
        row[hole] = EMPTY
        top = self.board.push_up(row)
        log.debug("garbage row injected, hole at column %d", hole)
        # staged rows and flash cells ride up with the board
        if self.clearing:
            self.clearing.rows = [y - 1 for y in self.clearing.rows if y > 0]
            if not self.clearing.rows:
                self.clearing = None
        if self.lock_flash:
            self.lock_flash.cells = [(x, y - 1) for x, y in self.lock_flash.cells if y > 0]
        if any(c is not EMPTY for c in top):
            self._top_out("garbage pushed blocks off the top")

    def apply_infection(self) -> None:
        filled = list(self.board.filled_cells())
        for x, y in self.rng.sample(filled, self.infect_max):
            self.board.set(x, y, INFECTED_PAIR)

    def apply_variety(self, identity: str, exit_code: int) -> None:
        if self.last_identity == identity:
            self.variety_meter = max(self.variety_meter - 5, 0)
            self.variety_streak = 0
            points = 0
        else:
            self.variety_meter = max(self.variety_meter - 2, 0)
            self.variety_streak += 1
            points = 10 + 3 * min(self.variety_streak, 10)
        if exit_code != 0:
            points //= 2
        self.variety_meter += points
        while self.variety_meter >= self.variety_thresh:
            self.variety_meter -= self.variety_thresh
            self.bombs = min(self.bombs + 1, self.bomb_cap)
            log.debug("bomb earned, bank=%d", self.bombs)

    def apply_bomb_clear(self, piece: Piece) -> None:
        """Empty the 3x3 neighbourhood around every cell of the bomb."""
        blast = set()
        for x, y in piece.cells():
            for dy in (-1, 0, 1):
                for dx in (-1, 0, 1):
                    if self.board.inside(x + dx, y + dy):
                        blast.add((x + dx, y + dy))
        for x, y in blast:
            self.board.set(x, y, EMPTY)
