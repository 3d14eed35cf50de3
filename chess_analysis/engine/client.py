"""
Engine Protocol Client

Owns one engine process and runs searches on it.

Lifecycle:
    UNINITIALIZED -> INITIALIZING -> READY <-> SEARCHING
                                        \\-> TERMINATED

    initialize() performs the handshake (uci/uciok), sends the tuning
    options, starts a new game and waits for readyok. Any failure on the
    way leaves the client TERMINATED and flagged as degraded.

Search stop conditions (first one wins):
    1. 'bestmove' received
    2. reported depth reaches the requested depth
    3. the time budget runs out

    On (2) and (3) the client sends 'stop' and drains output up to the
    engine's 'bestmove' so the next search starts on a clean stream.

Threading:
    Only one search runs per client. Concurrent callers queue on a lock;
    search(block=False) raises EngineBusy instead of waiting.
"""

import logging
import threading
import time
from typing import Callable, Optional

from chess_analysis.engine.config import EngineConfig
from chess_analysis.engine.protocol import (
    EngineState,
    SearchAccumulator,
    SearchRequest,
    SearchResult,
    parse_bestmove,
    parse_info_line,
)
from chess_analysis.engine.transport import EngineTransport
from chess_analysis.errors import EngineBusy, EngineNotReady, EngineUnavailable

logger = logging.getLogger(__name__)


class EngineClient:
    """
    Client for one engine process, identified by its version string.

    Attributes:
        version: Engine version identifier (e.g. "17")
        transport: Channel to the engine process
        config: Tuning options and timeouts
        degraded: True once initialization or I/O failed
    """

    def __init__(
        self,
        version: str,
        transport: EngineTransport,
        config: Optional[EngineConfig] = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.version = version
        self.transport = transport
        self.config = config or EngineConfig()
        self.degraded = False

        self._clock = clock
        self._state = EngineState.UNINITIALIZED
        self._state_lock = threading.Lock()
        self._search_lock = threading.Lock()

    @property
    def state(self) -> EngineState:
        return self._state

    @property
    def is_ready(self) -> bool:
        return self._state is EngineState.READY

    def _set_state(self, state: EngineState) -> None:
        with self._state_lock:
            logger.debug(f"[{self.version}] {self._state.value} -> {state.value}")
            self._state = state

    def _transition(self, expected: EngineState, state: EngineState) -> bool:
        """Move to state only if the client is still in expected."""
        with self._state_lock:
            if self._state is not expected:
                return False
            logger.debug(f"[{self.version}] {self._state.value} -> {state.value}")
            self._state = state
            return True

    def _send(self, command: str) -> None:
        logger.debug(f"[{self.version}] >>> {command}")
        self.transport.send(command)

    def _wait_for(self, token: str, timeout: float) -> None:
        deadline = self._clock() + timeout
        while True:
            remaining = deadline - self._clock()
            if remaining <= 0:
                raise EngineUnavailable(
                    f"Engine {self.version} did not answer '{token}' within {timeout:.1f}s"
                )
            line = self.transport.next_event(remaining)
            if line is None:
                continue
            logger.debug(f"[{self.version}] <<< {line}")
            if line.strip() == token:
                return

    def initialize(self) -> None:
        """
        Start the engine and run the handshake.

        Raises:
            EngineUnavailable: If the process cannot start or the handshake
                times out. The client is then TERMINATED and degraded.
            EngineNotReady: If the client was already terminated
        """
        with self._state_lock:
            if self._state is EngineState.READY:
                return
            if self._state is not EngineState.UNINITIALIZED:
                raise EngineNotReady(
                    f"Engine {self.version} cannot initialize from state {self._state.value}"
                )
            self._state = EngineState.INITIALIZING

        try:
            self.transport.start()
            self._send("uci")
            self._wait_for("uciok", self.config.handshake_timeout)

            self._send(f"setoption name Threads value {self.config.threads}")
            self._send(f"setoption name Hash value {self.config.hash_mb}")
            self._send(f"setoption name Ponder value {str(self.config.ponder).lower()}")
            self._send("ucinewgame")
            self._send("isready")
            self._wait_for("readyok", self.config.handshake_timeout)

        except EngineUnavailable as e:
            logger.warning(f"Stockfish {self.version} unavailable: {e}")
            self.degraded = True
            self.transport.close()
            self._set_state(EngineState.TERMINATED)
            raise

        if not self._transition(EngineState.INITIALIZING, EngineState.READY):
            raise EngineNotReady(f"Engine {self.version} was terminated during initialization")
        logger.info(f"Stockfish {self.version} initialized")

    def search(self, request: SearchRequest, block: bool = True) -> SearchResult:
        """
        Search one position.

        Args:
            request: Position and limits
            block: Wait for a running search to finish (True) or fail fast

        Returns:
            SearchResult from the terminal event, or the last progress
            snapshot if the depth or time limit ended the search

        Raises:
            EngineNotReady: If the client is not READY
            EngineBusy: If block is False and another search is running
            EngineUnavailable: If the engine died mid-search
        """
        if not self._search_lock.acquire(blocking=block):
            raise EngineBusy(f"Engine {self.version} is already searching")

        try:
            if not self._transition(EngineState.READY, EngineState.SEARCHING):
                raise EngineNotReady(
                    f"Engine {self.version} is {self._state.value}, cannot search"
                )

            try:
                result = self._run_search(request)
            except EngineUnavailable:
                self.degraded = True
                self.transport.close()
                self._set_state(EngineState.TERMINATED)
                raise

            # terminate() may have run while the search was in flight
            if not self._transition(EngineState.SEARCHING, EngineState.READY):
                logger.info(f"[{self.version}] Terminated during search")
            return result

        finally:
            self._search_lock.release()

    def _run_search(self, request: SearchRequest) -> SearchResult:
        start = self._clock()
        deadline = start + request.time_limit_ms / 1000
        acc = SearchAccumulator()

        self._send(f"position fen {request.fen}")
        self._send(f"go depth {request.depth_limit}")

        def elapsed_ms() -> int:
            return int((self._clock() - start) * 1000)

        while True:
            remaining = deadline - self._clock()
            if remaining <= 0:
                logger.info(
                    f"[{self.version}] Time limit {request.time_limit_ms}ms reached "
                    f"at depth {acc.depth}"
                )
                self._stop()
                return acc.snapshot(elapsed_ms())

            line = self.transport.next_event(remaining)
            if line is None:
                continue
            logger.debug(f"[{self.version}] <<< {line}")

            if line.startswith("bestmove"):
                acc.best_move = parse_bestmove(line)
                return acc.snapshot(elapsed_ms())

            if line.startswith("info"):
                parse_info_line(line, acc)
                if acc.depth >= request.depth_limit:
                    self._stop()
                    return acc.snapshot(elapsed_ms())

    def _stop(self) -> None:
        """Send 'stop' and discard output up to the engine's 'bestmove'."""
        self._send("stop")
        deadline = self._clock() + self.config.stop_grace
        while True:
            remaining = deadline - self._clock()
            if remaining <= 0:
                logger.warning(f"[{self.version}] No bestmove after stop")
                return
            line = self.transport.next_event(remaining)
            if line is None:
                continue
            logger.debug(f"[{self.version}] <<< {line} (drained)")
            if line.startswith("bestmove"):
                return

    def terminate(self) -> None:
        """Send 'quit' and release the process. Safe to call repeatedly."""
        with self._state_lock:
            previous = self._state
            if previous is EngineState.TERMINATED:
                return
            self._state = EngineState.TERMINATED

        if previous is EngineState.UNINITIALIZED:
            return

        try:
            self._send("quit")
        except EngineUnavailable as e:
            logger.warning(f"[{self.version}] quit failed: {e}")
        finally:
            self.transport.close()
        logger.info(f"Stockfish {self.version} terminated")

    def __enter__(self):
        self.initialize()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.terminate()

    def __repr__(self) -> str:
        return f"EngineClient(version={self.version!r}, state={self._state.value})"
