"""
FakeHuman - autonomous decision layer for computer-controlled nations.

Advisors evaluate the game each tick and a coordinator decides which of
their recommendations to carry out. The game itself is reached only through
the ``GameView`` / ``PlayerView`` interfaces; ``InMemoryGame`` is a reference
implementation for tests and example scripts.
"""

__version__ = "0.1.0"

# Main components
from .coordinator import FakeHumanCoordinator, AgentPhase
from .runner import Skirmish
from .behavior import BotBehavior, EMOJI_HECKLE
from .cadence import AttackCadence, BehaviorRatios

# Advisors
from .advisors import (
    AdvisorDependencies,
    AdvisorStateError,
    BaseAdvisor,
    DiplomacyAdvisor,
    EconomyAdvisor,
    MilitaryAdvisor,
    MIRVAdvisor,
)

# Game interface
from .game import (
    GameView,
    PlayerView,
    InMemoryGame,
    InMemoryPlayer,
    TerraNullius,
    Unit,
    Alliance,
    AllianceRequest,
    DEFAULT_UNIT_COSTS,
)
from .environment import GameMap

# Targeting
from .targeting import (
    StrikeMemory,
    TargetCache,
    WeaponProfile,
    WEAPON_PROFILES,
    score_strike_tile,
    select_strike_tile,
    valid_strike_targets,
    select_counter_strike_target,
    select_victory_denial_target,
    select_steamroll_target,
)

# Core schemas
from .schemas import (
    AdvisorPriority,
    Cell,
    Nation,
    PlayerType,
    Recommendation,
    Relation,
    TerrainType,
    UnitType,
    ExecutionRequest,
    SpawnRequest,
    ConstructionRequest,
    NukeRequest,
    MirvRequest,
    TransportShipRequest,
    AttackRequest,
    EmojiRequest,
)
from .pseudo_random import PseudoRandom, simple_hash

# Scenario loader helpers
from .scenario import load_scenario, ScenarioLoader, ScenarioSpec

__all__ = [
    # Main components
    "FakeHumanCoordinator",
    "AgentPhase",
    "Skirmish",
    "BotBehavior",
    "EMOJI_HECKLE",
    "AttackCadence",
    "BehaviorRatios",
    # Advisors
    "AdvisorDependencies",
    "AdvisorStateError",
    "BaseAdvisor",
    "DiplomacyAdvisor",
    "EconomyAdvisor",
    "MilitaryAdvisor",
    "MIRVAdvisor",
    # Game interface
    "GameView",
    "PlayerView",
    "InMemoryGame",
    "InMemoryPlayer",
    "TerraNullius",
    "Unit",
    "Alliance",
    "AllianceRequest",
    "DEFAULT_UNIT_COSTS",
    "GameMap",
    # Targeting
    "StrikeMemory",
    "TargetCache",
    "WeaponProfile",
    "WEAPON_PROFILES",
    "score_strike_tile",
    "select_strike_tile",
    "valid_strike_targets",
    "select_counter_strike_target",
    "select_victory_denial_target",
    "select_steamroll_target",
    # Schemas
    "AdvisorPriority",
    "Cell",
    "Nation",
    "PlayerType",
    "Recommendation",
    "Relation",
    "TerrainType",
    "UnitType",
    "ExecutionRequest",
    "SpawnRequest",
    "ConstructionRequest",
    "NukeRequest",
    "MirvRequest",
    "TransportShipRequest",
    "AttackRequest",
    "EmojiRequest",
    "PseudoRandom",
    "simple_hash",
    # Scenario helpers
    "load_scenario",
    "ScenarioLoader",
    "ScenarioSpec",
]
