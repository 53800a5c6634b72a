"""Command runs: one record per observed command invocation"""
import logging
from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional, Tuple

from waitris_commands import chunk_to_payload, command_identity, command_to_chunks
from waitris_piece import Piece, random_shape, spawn_piece

log = logging.getLogger(__name__)

CYCLE_MASK = 0xFFFFFFFFFFFFFFFF

@dataclass
class CommandRun:
    id: int
    identity: str
    chunks: Tuple[str, ...]
    cycle: int = 0
    active: bool = True

class RunTracker:
    """
    Owns every CommandRun keyed by run id.

    A run is created on a Start event and flagged inactive on its End event.
    Inactive runs stay tracked until sweep() finds nothing left that refers
    to them.
    """

    def __init__(self, rng, width: int, chunk_size: int):
        self.rng = rng
        self.width = width
        self.chunk_size = chunk_size
        self.runs: Dict[int, CommandRun] = {}

    def __contains__(self, run_id: int) -> bool:
        return run_id in self.runs

    def __len__(self) -> int:
        return len(self.runs)

    def get(self, run_id: int) -> Optional[CommandRun]:
        return self.runs.get(run_id)

    def start(self, run_id: int, command: str) -> Tuple[int, List[Piece]]:
        """Track a new run and return its first cycle of pieces."""
        chunks = tuple(command_to_chunks(command, self.chunk_size))
        run = CommandRun(run_id, command_identity(command), chunks)
        if run_id in self.runs:
            log.debug("run %d restarted, replacing previous record", run_id)
        self.runs[run_id] = run
        log.debug("run %d started: %r (%d chunks)", run_id, run.identity, len(chunks))
        return self.next_cycle(run)

    def next_cycle(self, run: CommandRun) -> Tuple[int, List[Piece]]:
        run.cycle = (run.cycle + 1) & CYCLE_MASK
        pieces = []
        for chunk in run.chunks:
            payload = chunk_to_payload(chunk, self.chunk_size)
            pieces.append(spawn_piece(random_shape(self.rng), payload, self.width))
        return run.cycle, pieces

    def end(self, run_id: int) -> Optional[CommandRun]:
        run = self.runs.get(run_id)
        if run is None:
            log.debug("end for unknown run %d", run_id)
            return None
        run.active = False
        return run

    def active_runs(self) -> Iterable[CommandRun]:
        return [r for r in self.runs.values() if r.active]

    def any_active(self) -> bool:
        return any(r.active for r in self.runs.values())

    def sweep(self, referenced) -> List[int]:
        """Evict inactive runs whose id is not in referenced."""
        gone = [rid for rid, r in self.runs.items() if not r.active and rid not in referenced]
        for rid in gone:
            del self.runs[rid]
        return gone
