"""
Scripted engine transport for deterministic tests without Stockfish.

ScriptedTransport answers the handshake like a UCI engine and replies to
'go' with canned output chosen per FEN:

    transport = ScriptedTransport(
        searches={
            START_FEN: ["info depth 1 score cp 20 nodes 30 pv e2e4", "bestmove e2e4"],
        }
    )

Positions without a script get DEFAULT_SEARCH. A script may be a list of
lines, or a list of such lists consumed one per search of that FEN.
Searching a FEN listed in crash_fens makes the engine go silent and
close its output, like a process that died.
"""

import queue
from typing import Dict, List, Optional, Sequence, Union

from chess_analysis.engine.client import EngineClient
from chess_analysis.engine.config import EngineConfig
from chess_analysis.engine.transport import EngineTransport
from chess_analysis.errors import EngineUnavailable

START_FEN = "rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR w KQkq - 0 1"

DEFAULT_SEARCH = [
    "info depth 1 seldepth 1 score cp 0 nodes 20 pv e2e4",
    "bestmove e2e4",
]

Script = Union[List[str], List[List[str]]]


class ScriptedTransport(EngineTransport):
    """In-memory engine with canned replies."""

    def __init__(
        self,
        searches: Optional[Dict[str, Script]] = None,
        fail_start: bool = False,
        answer_handshake: bool = True,
        reply_to_stop: bool = True,
        crash_fens: Sequence[str] = (),
    ):
        self.searches = searches or {}
        self.crash_fens = set(crash_fens)
        self.fail_start = fail_start
        self.answer_handshake = answer_handshake
        self.reply_to_stop = reply_to_stop

        self.sent: List[str] = []
        self.started = 0
        self.closed = 0
        self._lines: "queue.Queue[str]" = queue.Queue()
        self._fen: Optional[str] = None
        self._calls: Dict[str, int] = {}
        self._alive = False
        self._searching = False
        self._crashed = False

    def start(self) -> None:
        self.started += 1
        if self.fail_start:
            raise EngineUnavailable("scripted start failure")
        self._alive = True

    def send(self, command: str) -> None:
        if not self._alive:
            raise EngineUnavailable("scripted engine is not running")
        self.sent.append(command)

        if command == "uci" and self.answer_handshake:
            self._emit(["id name Scripted", "id author Tests", "uciok"])
        elif command == "isready" and self.answer_handshake:
            self._emit(["readyok"])
        elif command.startswith("position fen "):
            self._fen = command[len("position fen "):]
        elif command.startswith("go") and self._fen in self.crash_fens:
            self._crashed = True
        elif command.startswith("go"):
            lines = self._next_search()
            self._emit(lines)
            self._searching = not any(line.startswith("bestmove") for line in lines)
        elif command == "stop" and self._searching and self.reply_to_stop:
            self._searching = False
            self._emit(["bestmove 0000"])

    def _next_search(self) -> Sequence[str]:
        script = self.searches.get(self._fen, DEFAULT_SEARCH)
        if script and isinstance(script[0], list):
            index = self._calls.get(self._fen, 0)
            self._calls[self._fen] = index + 1
            return script[min(index, len(script) - 1)]
        return script

    def _emit(self, lines: Sequence[str]) -> None:
        for line in lines:
            self._lines.put(line)

    def next_event(self, timeout: float) -> Optional[str]:
        if self._crashed and self._lines.empty():
            raise EngineUnavailable("scripted engine crashed")
        try:
            return self._lines.get(timeout=max(0.0, timeout))
        except queue.Empty:
            return None

    def close(self) -> None:
        self.closed += 1
        self._alive = False

    @property
    def is_alive(self) -> bool:
        return self._alive

    def commands(self, prefix: str) -> List[str]:
        return [c for c in self.sent if c.startswith(prefix)]


def make_client(version: str = "17", **transport_kwargs) -> EngineClient:
    """Client over a ScriptedTransport with short timeouts."""
    config = EngineConfig(handshake_timeout=0.5, stop_grace=0.2)
    return EngineClient(version, ScriptedTransport(**transport_kwargs), config)


class ScriptedFactory:
    """Client factory for EnginePool that records what it builds."""

    def __init__(
        self,
        searches: Optional[Dict[str, Script]] = None,
        broken=(),
        crash_fens=(),
    ):
        self.searches = searches or {}
        self.crash_fens = tuple(crash_fens)
        self.broken = set(broken)
        self.created: List[EngineClient] = []

    def __call__(self, version: str, config: EngineConfig) -> EngineClient:
        transport = ScriptedTransport(
            searches=self.searches,
            fail_start=version in self.broken,
            crash_fens=self.crash_fens,
        )
        client = EngineClient(
            version,
            transport,
            EngineConfig(handshake_timeout=0.5, stop_grace=0.2),
        )
        self.created.append(client)
        return client
