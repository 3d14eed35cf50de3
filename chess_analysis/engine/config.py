"""
Engine configuration and the catalogue of supported Stockfish versions.
"""

import logging
import shutil
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional

from chess_analysis.errors import EngineUnavailable

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class EngineVersion:
    """A known engine release."""

    version: str
    name: str
    release_date: str
    elo: int


STOCKFISH_VERSIONS: List[EngineVersion] = [
    EngineVersion("17", "Stockfish 17", "2024-12", 3548),
    EngineVersion("16.1", "Stockfish 16.1", "2024-07", 3532),
    EngineVersion("16", "Stockfish 16", "2024-03", 3525),
    EngineVersion("15.1", "Stockfish 15.1", "2023-10", 3513),
    EngineVersion("15", "Stockfish 15", "2023-06", 3508),
]

DEFAULT_VERSION = "17"

# Searched in order when no explicit binary is configured
STOCKFISH_CANDIDATES = [
    "stockfish",
    "/usr/local/bin/stockfish",
    "/usr/bin/stockfish",
    "/usr/games/stockfish",
    "/opt/homebrew/bin/stockfish",
]


@dataclass
class EngineConfig:
    """Configuration shared by every engine process in a pool.

    Tuning values are sent to each engine during the handshake; timeouts
    bound every blocking wait on the engine's output.
    """

    # Binaries
    engine_paths: Dict[str, str] = field(default_factory=dict)
    """Explicit binary per version string, e.g. {"16": "/opt/sf16/stockfish"}"""

    default_path: Optional[str] = None
    """Binary used for versions missing from engine_paths (None = auto-detect)"""

    # Tuning commands
    threads: int = 4
    """Value for 'setoption name Threads'"""

    hash_mb: int = 256
    """Value for 'setoption name Hash' in megabytes"""

    ponder: bool = False
    """Value for 'setoption name Ponder'"""

    # Timeouts (seconds)
    handshake_timeout: float = 5.0
    """Maximum wait for 'uciok' and 'readyok' during initialization"""

    stop_grace: float = 1.0
    """Time allowed for the engine to answer 'stop' with 'bestmove'"""

    quit_timeout: float = 1.0
    """Time allowed for the process to exit after 'quit' before it is killed"""

    def resolve_path(self, version: str) -> str:
        """
        Find the engine binary for a version.

        Args:
            version: Engine version identifier

        Returns:
            Path to an executable

        Raises:
            EngineUnavailable: If no binary can be found
        """
        path = self.engine_paths.get(version) or self.default_path
        if path is not None:
            if Path(path).exists() or shutil.which(path):
                return path
            raise EngineUnavailable(
                f"Stockfish {version} binary not found at: {path}"
            )

        for candidate in STOCKFISH_CANDIDATES:
            found = shutil.which(candidate)
            if found:
                logger.debug(f"Auto-detected engine for version {version}: {found}")
                return found

        raise EngineUnavailable(
            "Stockfish not found. Install with: brew install stockfish (macOS) "
            "or apt install stockfish (Linux)"
        )


def get_version_info(version: str) -> Optional[EngineVersion]:
    """Look up catalogue metadata for a version string."""
    for info in STOCKFISH_VERSIONS:
        if info.version == version:
            return info
    return None
