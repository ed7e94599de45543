"""
Pydantic schemas for the FakeHuman decision layer.

Everything that crosses the boundary between the decision layer and the game
engine is defined here:

- Enumerations shared with the engine (unit, player, terrain, relation types)
- Execution requests submitted through ``GameView.add_execution``
- The ``Recommendation`` an advisor hands to the coordinator
- ``Nation``: the setup record an agent is created from

Design Philosophy:
- Requests are plain data; the engine decides how to carry them out
- Gold is always an ``int`` (costs and balances can exceed 2**31)
- Recommendations are ephemeral and never serialized (``execute`` is excluded)
"""

from __future__ import annotations

from enum import Enum, IntEnum
from typing import Callable, Literal, Optional, Union

from pydantic import BaseModel, Field


TileRef = int
"""Index of a tile in the map (``y * width + x``)."""


# ============================================================================
# Enumerations
# ============================================================================


class UnitType(str, Enum):
    """Every unit the decision layer reasons about."""

    CITY = "City"
    PORT = "Port"
    FACTORY = "Factory"
    DEFENSE_POST = "Defense Post"
    SAM_LAUNCHER = "SAM Launcher"
    MISSILE_SILO = "Missile Silo"
    WARSHIP = "Warship"
    TRANSPORT_SHIP = "Transport"
    ATOM_BOMB = "Atom Bomb"
    HYDROGEN_BOMB = "Hydrogen Bomb"
    MIRV = "MIRV"
    MIRV_WARHEAD = "MIRV Warhead"


STRUCTURE_TYPES = (
    UnitType.CITY,
    UnitType.PORT,
    UnitType.FACTORY,
    UnitType.DEFENSE_POST,
    UnitType.SAM_LAUNCHER,
    UnitType.MISSILE_SILO,
)

NUKE_TYPES = (UnitType.ATOM_BOMB, UnitType.HYDROGEN_BOMB, UnitType.MIRV)


class PlayerType(str, Enum):
    HUMAN = "HUMAN"
    BOT = "BOT"
    FAKEHUMAN = "FAKEHUMAN"


class TerrainType(str, Enum):
    OCEAN = "ocean"
    PLAINS = "plains"
    MOUNTAIN = "mountain"


class Relation(IntEnum):
    """Discrete hostility scale between two players (ordered)."""

    HOSTILE = 0
    DISTRUSTFUL = 1
    NEUTRAL = 2
    FRIENDLY = 3


class AdvisorPriority(IntEnum):
    """Priority bands for advisor recommendations (lower value = more urgent)."""

    CRITICAL = 0  # Must execute immediately (e.g., betrayal decisions)
    HIGH = 1      # Important strategic actions (e.g., MIRV launch)
    NORMAL = 2    # Regular actions (e.g., building structures)
    LOW = 3       # Optional actions (e.g., alliance requests)


# ============================================================================
# Setup records
# ============================================================================


class Cell(BaseModel):
    """Map coordinate."""

    x: int
    y: int


class Nation(BaseModel):
    """Setup record for an AI-controlled nation.

    The coordinator only knows its nation until the engine creates the
    matching player during the spawn phase.
    """

    player_id: str = Field(..., description="Stable player identifier")
    name: str = Field(..., description="Display name used in logs")
    spawn_cell: Cell = Field(..., description="Preferred spawn location")
    player_type: PlayerType = Field(PlayerType.FAKEHUMAN, description="Always FAKEHUMAN for agents")


# ============================================================================
# Execution requests (decision layer -> engine)
# ============================================================================


class ExecutionRequest(BaseModel):
    """Base class for every effect the decision layer asks the engine to apply."""

    kind: str
    player_id: str = Field(..., description="Player issuing the request")


class SpawnRequest(ExecutionRequest):
    kind: Literal["spawn"] = "spawn"
    name: str
    player_type: PlayerType = PlayerType.FAKEHUMAN
    tile: TileRef


class ConstructionRequest(ExecutionRequest):
    kind: Literal["construction"] = "construction"
    unit_type: UnitType
    tile: TileRef


class NukeRequest(ExecutionRequest):
    kind: Literal["nuke"] = "nuke"
    unit_type: Literal[UnitType.ATOM_BOMB, UnitType.HYDROGEN_BOMB]
    tile: TileRef


class MirvRequest(ExecutionRequest):
    kind: Literal["mirv"] = "mirv"
    tile: TileRef


class TransportShipRequest(ExecutionRequest):
    kind: Literal["transport_ship"] = "transport_ship"
    target_id: Optional[str] = Field(None, description="None targets unclaimed land")
    tile: TileRef
    troops: int = Field(..., ge=0)


class AttackRequest(ExecutionRequest):
    kind: Literal["attack"] = "attack"
    target_id: Optional[str] = Field(None, description="None targets unclaimed land")
    troops: int = Field(..., ge=0)


class EmojiRequest(ExecutionRequest):
    kind: Literal["emoji"] = "emoji"
    recipient_id: str
    emoji: str


AnyExecutionRequest = Union[
    SpawnRequest,
    ConstructionRequest,
    NukeRequest,
    MirvRequest,
    TransportShipRequest,
    AttackRequest,
    EmojiRequest,
]


# ============================================================================
# Advisor output
# ============================================================================


class Recommendation(BaseModel):
    """An action proposed by an advisor for the current tick.

    ``execute`` performs the action (usually by submitting a request to the
    engine and updating advisor bookkeeping). Recommendations are consumed in
    the tick they are produced and never persisted.
    """

    execute: Callable[[], None] = Field(..., exclude=True, repr=False)
    score: float = Field(..., description="Higher is better")
    priority: AdvisorPriority = Field(AdvisorPriority.NORMAL)
    description: str = Field("", description="Human-readable reason for logs")
    advisor: Optional[str] = Field(None, description="Name of the advisor that produced it")

    def sort_key(self) -> tuple[int, float]:
        """Ordering used by score-based arbitration (smallest first wins)."""
        return (int(self.priority), -self.score)
