"""Command lifecycle events and the channel that carries them to the game loop"""
import json
import logging
import os
import queue
import socket
import threading
from dataclasses import dataclass
from typing import List, Optional, Union

log = logging.getLogger(__name__)

@dataclass(frozen=True)
class CommandStart:
    id: int
    command: str

@dataclass(frozen=True)
class CommandEnd:
    id: int
    exit_code: int

CommandEvent = Union[CommandStart, CommandEnd]


class EventParseError(ValueError):
    pass


def parse_event(line: str) -> CommandEvent:
    """
    Decode one JSON line from the shell hook:
      {"event": "start", "id": 7, "command": "make test"}
      {"event": "end", "id": 7, "exit_code": 2}
    """
    try:
        obj = json.loads(line)
    except json.JSONDecodeError as e:
        raise EventParseError(f"bad json: {e}") from e
    if not isinstance(obj, dict):
        raise EventParseError("event must be a JSON object")
    kind = obj.get("event")
    run_id = obj.get("id")
    if not isinstance(run_id, int) or isinstance(run_id, bool) or run_id <= 0:
        raise EventParseError(f"bad run id {run_id!r}")
    if kind == "start":
        command = obj.get("command")
        if not isinstance(command, str):
            raise EventParseError("start event needs a command string")
        return CommandStart(run_id, command)
    if kind == "end":
        code = obj.get("exit_code", 0)
        if not isinstance(code, int) or isinstance(code, bool):
            raise EventParseError(f"bad exit code {code!r}")
        return CommandEnd(run_id, code)
    raise EventParseError(f"unknown event kind {kind!r}")


class EventFeed:
    """Thread-safe hand-off; producers put(), the loop thread drain()s into the game."""

    def __init__(self):
        self._q: "queue.Queue[CommandEvent]" = queue.Queue()

    def put(self, ev: CommandEvent) -> None:
        self._q.put(ev)

    def pending(self) -> List[CommandEvent]:
        out = []
        while True:
            try:
                out.append(self._q.get_nowait())
            except queue.Empty:
                return out

    def drain(self, game) -> int:
        events = self.pending()
        for ev in events:
            game.handle_command_event(ev)
        return len(events)


class EventListener:
    """Accepts shell-hook connections on a Unix socket and feeds parsed events."""

    def __init__(self, feed: EventFeed, path: str):
        self.feed = feed
        self.path = path
        self._sock: Optional[socket.socket] = None
        self._thread: Optional[threading.Thread] = None
        self._stop = threading.Event()

    def start(self) -> None:
        if os.path.exists(self.path):
            os.unlink(self.path)
        self._sock = socket.socket(socket.AF_UNIX, socket.SOCK_STREAM)
        self._sock.bind(self.path)
        self._sock.listen()
        self._sock.settimeout(0.2)
        self._thread = threading.Thread(target=self._serve, name="waitris-events", daemon=True)
        self._thread.start()
        log.debug("listening for command events on %s", self.path)

    def stop(self) -> None:
        self._stop.set()
        if self._thread:
            self._thread.join(timeout=1.0)
        if self._sock:
            self._sock.close()
        if os.path.exists(self.path):
            os.unlink(self.path)

    def _serve(self) -> None:
        while not self._stop.is_set():
            try:
                conn, _ = self._sock.accept()
            except socket.timeout:
                continue
            except OSError:
                return
            with conn:
                self.handle_stream(conn.makefile("r", encoding="utf-8", errors="replace"))

    def handle_stream(self, lines) -> int:
        n = 0
        for line in lines:
            line = line.strip()
            if not line:
                continue
            try:
                self.feed.put(parse_event(line))
                n += 1
            except EventParseError as e:
                log.warning("skipping event line %r: %s", line, e)
        return n
