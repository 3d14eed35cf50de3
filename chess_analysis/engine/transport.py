"""
Engine Transports

A transport moves protocol lines between the client and an engine. The
client only needs to send a line and wait for the next one, so the
process behind it (pipe, socket, in-process worker) can be swapped
without touching parsing or analysis code.

Threading:
    SubprocessTransport runs one daemon reader thread per process that
    copies stdout lines into a queue. The consuming side blocks on the
    queue with a timeout, which is the only suspension point of a search.
"""

import logging
import queue
import subprocess
import threading
from abc import ABC, abstractmethod
from typing import List, Optional

from chess_analysis.errors import EngineUnavailable

logger = logging.getLogger(__name__)

_EOF = object()


class EngineTransport(ABC):
    """Line-oriented channel to one engine."""

    @abstractmethod
    def start(self) -> None:
        """
        Bring the engine up.

        Raises:
            EngineUnavailable: If the engine cannot be started
        """

    @abstractmethod
    def send(self, command: str) -> None:
        """
        Send one command line (without trailing newline).

        Raises:
            EngineUnavailable: On any I/O failure
        """

    @abstractmethod
    def next_event(self, timeout: float) -> Optional[str]:
        """
        Wait for the next output line.

        Args:
            timeout: Maximum wait in seconds

        Returns:
            Line without trailing newline, or None if nothing arrived in time

        Raises:
            EngineUnavailable: If the engine closed its output
        """

    @abstractmethod
    def close(self) -> None:
        """Release the engine. Safe to call more than once."""

    @property
    @abstractmethod
    def is_alive(self) -> bool:
        """True while the engine can accept commands."""

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}()"


class SubprocessTransport(EngineTransport):
    """Transport over the stdin/stdout pipes of a child process."""

    def __init__(self, command: List[str], quit_timeout: float = 1.0):
        """
        Args:
            command: Argument vector, e.g. ["/usr/bin/stockfish"]
            quit_timeout: Seconds to wait for exit in close() before killing
        """
        self.command = command
        self.quit_timeout = quit_timeout
        self._process: Optional[subprocess.Popen] = None
        self._lines: "queue.Queue[object]" = queue.Queue()
        self._reader: Optional[threading.Thread] = None

    def start(self) -> None:
        try:
            self._process = subprocess.Popen(
                self.command,
                stdin=subprocess.PIPE,
                stdout=subprocess.PIPE,
                stderr=subprocess.DEVNULL,
                text=True,
                bufsize=1,
            )
        except OSError as e:
            raise EngineUnavailable(f"Failed to start {self.command[0]}: {e}") from e

        self._reader = threading.Thread(
            target=self._read_loop,
            args=(self._process,),
            name=f"engine-reader-{self._process.pid}",
            daemon=True,
        )
        self._reader.start()
        logger.info(f"Started engine process {self.command[0]} (pid={self._process.pid})")

    def _read_loop(self, process: subprocess.Popen) -> None:
        try:
            for line in process.stdout:
                self._lines.put(line.rstrip("\r\n"))
        except (OSError, ValueError) as e:
            logger.debug(f"Engine reader stopped: {e}")
        finally:
            self._lines.put(_EOF)

    def send(self, command: str) -> None:
        if self._process is None or self._process.stdin is None:
            raise EngineUnavailable("Engine process not started")
        try:
            self._process.stdin.write(command + "\n")
            self._process.stdin.flush()
        except (OSError, ValueError) as e:
            raise EngineUnavailable(f"Failed to write to engine: {e}") from e

    def next_event(self, timeout: float) -> Optional[str]:
        try:
            item = self._lines.get(timeout=max(0.0, timeout))
        except queue.Empty:
            return None
        if item is _EOF:
            # Keep the marker so later calls fail the same way
            self._lines.put(_EOF)
            raise EngineUnavailable("Engine process closed its output")
        return item

    def close(self) -> None:
        process = self._process
        if process is None:
            return
        self._process = None

        if process.stdin is not None:
            try:
                process.stdin.close()
            except OSError as e:
                logger.debug(f"Closing engine stdin failed: {e}")

        try:
            process.wait(timeout=self.quit_timeout)
        except subprocess.TimeoutExpired:
            logger.warning(f"Engine pid={process.pid} did not exit, killing it")
            process.kill()
            process.wait()

        if self._reader is not None:
            self._reader.join(timeout=self.quit_timeout)

    @property
    def is_alive(self) -> bool:
        return self._process is not None and self._process.poll() is None

    def __repr__(self) -> str:
        return f"SubprocessTransport({self.command[0]!r})"
