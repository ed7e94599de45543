"""
FakeHuman Configuration

Loads tunables from environment variables with sensible defaults.
"""

import os
from pathlib import Path

from dotenv import load_dotenv

# Load .env file if it exists
load_dotenv()


ARBITRATION_MODES = ("precedence", "best_score")


def _env_flag(name: str) -> bool:
    return os.getenv(name, "").strip().lower() in ("1", "true", "yes", "on")


class Config:
    """Decision-layer configuration loaded from environment variables."""

    # Paths
    PROJECT_ROOT: Path = Path(__file__).parent.parent

    # Arbitration between advisor recommendations ("precedence" | "best_score")
    ARBITRATION: str = os.getenv("FAKEHUMAN_ARBITRATION", "precedence")

    # Strategic strike (MIRV)
    MIRV_COOLDOWN_TICKS: int = int(os.getenv("FAKEHUMAN_MIRV_COOLDOWN_TICKS", "600"))
    MIRV_HESITATION_ODDS: int = int(os.getenv("FAKEHUMAN_MIRV_HESITATION_ODDS", "7"))
    VICTORY_DENIAL_TEAM_THRESHOLD: float = float(
        os.getenv("FAKEHUMAN_VICTORY_DENIAL_TEAM_THRESHOLD", "0.8")
    )
    VICTORY_DENIAL_INDIVIDUAL_THRESHOLD: float = float(
        os.getenv("FAKEHUMAN_VICTORY_DENIAL_INDIVIDUAL_THRESHOLD", "0.65")
    )
    STEAMROLL_GAP_MULTIPLIER: float = float(os.getenv("FAKEHUMAN_STEAMROLL_GAP_MULTIPLIER", "1.3"))
    STEAMROLL_MIN_LEADER_STRUCTURES: int = int(
        os.getenv("FAKEHUMAN_STEAMROLL_MIN_LEADER_STRUCTURES", "10")
    )
    TARGET_CACHE_TICKS: int = int(os.getenv("FAKEHUMAN_TARGET_CACHE_TICKS", "20"))

    # Gold reserve kept back for the next MIRV
    MIRV_RESERVE_MIN: int = int(os.getenv("FAKEHUMAN_MIRV_RESERVE_MIN", "35000000"))
    MIRV_RESERVE_TARGET: int = int(os.getenv("FAKEHUMAN_MIRV_RESERVE_TARGET", "40000000"))

    # Conventional nukes
    NUKE_MEMORY_TICKS: int = int(os.getenv("FAKEHUMAN_NUKE_MEMORY_TICKS", "500"))

    # Diplomacy
    EMBARGO_RELATION_PENALTY: int = int(os.getenv("FAKEHUMAN_EMBARGO_RELATION_PENALTY", "-20"))

    # Economy
    WARSHIP_BUILD_ODDS: int = int(os.getenv("FAKEHUMAN_WARSHIP_BUILD_ODDS", "2"))

    # Spawning
    SPAWN_SEARCH_RADIUS: int = int(os.getenv("FAKEHUMAN_SPAWN_SEARCH_RADIUS", "25"))
    SPAWN_ATTEMPTS: int = int(os.getenv("FAKEHUMAN_SPAWN_ATTEMPTS", "50"))

    # Logging
    VERBOSE: bool = _env_flag("FAKEHUMAN_VERBOSE")
    NO_COLOR: bool = _env_flag("FAKEHUMAN_NO_COLOR")

    @classmethod
    def validate(cls) -> None:
        """Validate configuration and raise errors for out-of-range values."""
        if cls.ARBITRATION not in ARBITRATION_MODES:
            raise ValueError(
                f"FAKEHUMAN_ARBITRATION must be one of {', '.join(ARBITRATION_MODES)}, "
                f"got '{cls.ARBITRATION}'"
            )

        for name in ("VICTORY_DENIAL_TEAM_THRESHOLD", "VICTORY_DENIAL_INDIVIDUAL_THRESHOLD"):
            value = getattr(cls, name)
            if not 0 < value <= 1:
                raise ValueError(f"{name} must be in (0, 1], got {value}")

        if cls.STEAMROLL_GAP_MULTIPLIER < 1:
            raise ValueError(
                f"STEAMROLL_GAP_MULTIPLIER must be >= 1, got {cls.STEAMROLL_GAP_MULTIPLIER}"
            )

        if cls.MIRV_RESERVE_TARGET < cls.MIRV_RESERVE_MIN:
            raise ValueError("MIRV_RESERVE_TARGET must not be below MIRV_RESERVE_MIN")

        for name in ("MIRV_COOLDOWN_TICKS", "NUKE_MEMORY_TICKS", "TARGET_CACHE_TICKS", "SPAWN_ATTEMPTS"):
            if getattr(cls, name) < 0:
                raise ValueError(f"{name} must not be negative")

    @classmethod
    def display(cls) -> str:
        """Return a formatted string showing current configuration."""
        lines = [
            "FakeHuman Configuration:",
            f"  Arbitration: {cls.ARBITRATION}",
            f"  MIRV cooldown: {cls.MIRV_COOLDOWN_TICKS} ticks (hesitation 1 in {cls.MIRV_HESITATION_ODDS})",
            f"  Victory denial: team {cls.VICTORY_DENIAL_TEAM_THRESHOLD:.0%}, "
            f"individual {cls.VICTORY_DENIAL_INDIVIDUAL_THRESHOLD:.0%}",
            f"  Steamroll: {cls.STEAMROLL_GAP_MULTIPLIER}x gap, floor {cls.STEAMROLL_MIN_LEADER_STRUCTURES}",
            f"  MIRV reserve: {cls.MIRV_RESERVE_MIN:,} - {cls.MIRV_RESERVE_TARGET:,}",
            f"  Verbose: {cls.VERBOSE}",
        ]
        return "\n".join(lines)
