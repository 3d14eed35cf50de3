"""
Engine Pool

Registry of engine clients keyed by version string. Each version gets at
most one client, created and initialized on first request. Failed
initializations, and clients that died during a search, are remembered
so a broken version is not retried on every call.

Threading:
    The registry lock only guards insert-if-absent of a slot. Each slot has
    its own lock around initialization, so two callers asking for the same
    new version trigger exactly one initialize() while different versions
    can start in parallel.
"""

import logging
import threading
from typing import Callable, Dict, Iterable, List, Optional

from chess_analysis.engine.client import EngineClient
from chess_analysis.engine.config import EngineConfig
from chess_analysis.engine.protocol import SearchRequest, SearchResult
from chess_analysis.engine.transport import SubprocessTransport
from chess_analysis.errors import EngineUnavailable

logger = logging.getLogger(__name__)

ClientFactory = Callable[[str, EngineConfig], EngineClient]

DEFAULT_COMPARE_VERSIONS = ("17", "16", "15")


def subprocess_client_factory(version: str, config: EngineConfig) -> EngineClient:
    """Build a client that talks to a local Stockfish binary."""
    path = config.resolve_path(version)
    transport = SubprocessTransport([path], quit_timeout=config.quit_timeout)
    return EngineClient(version, transport, config)


class _Slot:
    """Registry entry for one version."""

    def __init__(self):
        self.lock = threading.Lock()
        self.client: Optional[EngineClient] = None
        self.error: Optional[EngineUnavailable] = None


class EnginePool:
    """
    Lazily created engine clients, one per version.

    The pool owns every client it creates and is the only component that
    terminates them.

    Example:
        with EnginePool() as pool:
            engine = pool.get_engine("17")
            result = engine.search(SearchRequest(fen, depth_limit=18, time_limit_ms=8000))
    """

    def __init__(
        self,
        config: Optional[EngineConfig] = None,
        client_factory: Optional[ClientFactory] = None,
    ):
        self.config = config or EngineConfig()
        self._factory = client_factory or subprocess_client_factory
        self._slots: Dict[str, _Slot] = {}
        self._lock = threading.Lock()

    def get_engine(self, version: str) -> EngineClient:
        """
        Return the initialized client for a version, creating it if needed.

        Args:
            version: Engine version identifier

        Returns:
            READY EngineClient

        Raises:
            EngineUnavailable: If the engine could not be started, now or on
                an earlier attempt, or if it died during an earlier search
        """
        with self._lock:
            slot = self._slots.get(version)
            if slot is None:
                slot = _Slot()
                self._slots[version] = slot

        with slot.lock:
            if slot.client is None and slot.error is None:
                logger.info(f"Creating engine for version {version}")
                try:
                    client = self._factory(version, self.config)
                    client.initialize()
                except EngineUnavailable as e:
                    slot.error = e
                    raise
                slot.client = client

            if slot.client is not None and slot.client.degraded and slot.error is None:
                slot.error = EngineUnavailable(f"Stockfish {version} stopped responding")
                logger.warning(f"Version {version} marked unavailable after engine failure")

            if slot.error is not None:
                logger.debug(f"Version {version} previously failed: {slot.error}")
                raise slot.error

            return slot.client

    def compare_across_versions(
        self,
        fen: str,
        versions: Iterable[str] = DEFAULT_COMPARE_VERSIONS,
        depth: int = 20,
        time_limit_ms: int = 10000,
    ) -> Dict[str, SearchResult]:
        """
        Search the same position on several engine versions, one at a time.

        Args:
            fen: Position to search
            versions: Version identifiers in the order to run them
            depth: Depth limit for every search
            time_limit_ms: Time budget for every search

        Returns:
            Mapping version -> SearchResult in request order

        Raises:
            EngineUnavailable: If any requested version cannot be started
        """
        request = SearchRequest(fen=fen, depth_limit=depth, time_limit_ms=time_limit_ms)
        results: Dict[str, SearchResult] = {}
        for version in versions:
            engine = self.get_engine(version)
            results[version] = engine.search(request)
            logger.debug(
                f"Version {version}: {results[version].best_move} "
                f"({results[version].evaluation:+.2f})"
            )
        return results

    def versions(self) -> List[str]:
        """Versions that have been requested so far, including failed ones."""
        with self._lock:
            return list(self._slots)

    def terminate_all(self) -> None:
        """Terminate every client and clear the registry. Idempotent."""
        with self._lock:
            slots = list(self._slots.values())
            self._slots.clear()

        for slot in slots:
            with slot.lock:
                if slot.client is not None:
                    slot.client.terminate()

        if slots:
            logger.info(f"Terminated {len(slots)} engine slot(s)")

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.terminate_all()

    def __len__(self) -> int:
        return len(self._slots)
