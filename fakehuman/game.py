"""
Game-state interface consumed by the FakeHuman decision layer.

This module provides the abstract views advisors read from, plus an in-memory
reference engine that implements them.

Key responsibilities:
- GameView: map geometry, ownership, player lookup, unit costs, effect submission
- PlayerView: territory, inventory, gold, relations, embargoes, alliances
- InMemoryGame / InMemoryPlayer: a small, synchronous engine used by tests,
  example scripts and the tick runner

Design principle: the decision layer decides *that* and *where* something
happens; the engine decides *how*. Advisors never mutate engine state except
through ``add_execution`` and the relation/embargo calls on ``PlayerView``.
"""

from __future__ import annotations

import math
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence, Set, Union

from .environment.grid import GameMap
from .schemas import (
    AttackRequest,
    Cell,
    ConstructionRequest,
    EmojiRequest,
    ExecutionRequest,
    MirvRequest,
    NukeRequest,
    PlayerType,
    Relation,
    SpawnRequest,
    STRUCTURE_TYPES,
    TerrainType,
    TileRef,
    TransportShipRequest,
    UnitType,
)


DEFAULT_UNIT_COSTS: Dict[UnitType, int] = {
    UnitType.CITY: 125_000,
    UnitType.PORT: 125_000,
    UnitType.FACTORY: 125_000,
    UnitType.DEFENSE_POST: 50_000,
    UnitType.SAM_LAUNCHER: 1_500_000,
    UnitType.MISSILE_SILO: 1_000_000,
    UnitType.WARSHIP: 250_000,
    UnitType.TRANSPORT_SHIP: 0,
    UnitType.ATOM_BOMB: 750_000,
    UnitType.HYDROGEN_BOMB: 5_000_000,
    UnitType.MIRV: 35_000_000,
    UnitType.MIRV_WARHEAD: 0,
}

ALLIANCE_DURATION_TICKS = 3000
SPAWN_RADIUS = 2


@dataclass
class Unit:
    """A unit as seen by the decision layer."""

    type: UnitType
    owner_id: str
    tile: TileRef
    target_tile: Optional[TileRef] = None


@dataclass
class Alliance:
    """Alliance between two players with an expiry tick."""

    requestor_id: str
    recipient_id: str
    expires_at: int
    extension_requests: Set[str] = field(default_factory=set)

    def other(self, player_id: str) -> str:
        return self.recipient_id if player_id == self.requestor_id else self.requestor_id

    def request_extension(self, player_id: str) -> None:
        self.extension_requests.add(player_id)
        if {self.requestor_id, self.recipient_id} <= self.extension_requests:
            self.expires_at += ALLIANCE_DURATION_TICKS
            self.extension_requests.clear()


class TerraNullius:
    """Owner of every unclaimed tile."""

    id: Optional[str] = None
    small_id: int = 0
    name = "Terra Nullius"

    def is_player(self) -> bool:
        return False

    def __repr__(self) -> str:  # pragma: no cover - debugging aid
        return "TerraNullius()"


# ============================================================================
# Abstract views
# ============================================================================


class PlayerView(ABC):
    """Read access (plus relation/embargo updates) for one player."""

    id: str
    small_id: int
    name: str
    type: PlayerType
    team: Optional[str]

    def is_player(self) -> bool:
        return True

    @abstractmethod
    def is_alive(self) -> bool:
        pass

    # --- territory -----------------------------------------------------

    @abstractmethod
    def tiles(self) -> List[TileRef]:
        """All owned tiles, in a stable order."""
        pass

    @abstractmethod
    def border_tiles(self) -> List[TileRef]:
        """Owned tiles adjacent to a tile owned by someone else (or nobody)."""
        pass

    @abstractmethod
    def num_tiles_owned(self) -> int:
        pass

    # --- inventory -----------------------------------------------------

    @abstractmethod
    def units(self, *types: UnitType) -> List[Unit]:
        """Units of the given types (all units when no type is given)."""
        pass

    @abstractmethod
    def unit_count(self, unit_type: UnitType) -> int:
        pass

    @abstractmethod
    def units_owned(self, unit_type: UnitType) -> int:
        """Units of a type including those still under construction."""
        pass

    @abstractmethod
    def gold(self) -> int:
        pass

    @abstractmethod
    def troops(self) -> int:
        pass

    @abstractmethod
    def max_troops(self) -> int:
        pass

    # --- relations -----------------------------------------------------

    @abstractmethod
    def relation(self, other: "PlayerView") -> Relation:
        pass

    @abstractmethod
    def update_relation(self, other: "PlayerView", delta: int) -> None:
        pass

    @abstractmethod
    def is_on_same_team(self, other: "Owner") -> bool:
        pass

    @abstractmethod
    def is_friendly(self, other: "Owner") -> bool:
        """Teammate or ally."""
        pass

    @abstractmethod
    def allies(self) -> List["PlayerView"]:
        pass

    @abstractmethod
    def alliances(self) -> List[Alliance]:
        pass

    @abstractmethod
    def alliance_with(self, other: "PlayerView") -> Optional[Alliance]:
        pass

    @abstractmethod
    def break_alliance(self, alliance: Alliance) -> None:
        pass

    @abstractmethod
    def targets(self) -> List["PlayerView"]:
        """Players this player has publicly marked as targets."""
        pass

    @abstractmethod
    def can_send_alliance_request(self, other: "PlayerView") -> bool:
        pass

    @abstractmethod
    def create_alliance_request(self, other: "PlayerView") -> None:
        pass

    @abstractmethod
    def incoming_alliance_requests(self) -> List["AllianceRequest"]:
        pass

    # --- embargoes -----------------------------------------------------

    @abstractmethod
    def has_embargo_against(self, other: "PlayerView") -> bool:
        pass

    @abstractmethod
    def add_embargo(self, other: "PlayerView", temporary: bool = False) -> None:
        pass

    @abstractmethod
    def stop_embargo(self, other: "PlayerView") -> None:
        pass

    # --- actions -------------------------------------------------------

    @abstractmethod
    def can_build(self, unit_type: UnitType, tile: TileRef) -> bool:
        pass

    @abstractmethod
    def shares_border_with(self, other: "Owner") -> bool:
        pass


Owner = Union[PlayerView, TerraNullius]


class GameView(ABC):
    """Read access to the simulation plus effect submission."""

    @abstractmethod
    def ticks(self) -> int:
        pass

    @abstractmethod
    def in_spawn_phase(self) -> bool:
        pass

    @abstractmethod
    def players(self) -> List[PlayerView]:
        """Live players."""
        pass

    @abstractmethod
    def player(self, player_id: str) -> Optional[PlayerView]:
        pass

    @abstractmethod
    def player_by_small_id(self, small_id: int) -> Owner:
        pass

    @abstractmethod
    def terra_nullius(self) -> TerraNullius:
        pass

    # --- geometry ------------------------------------------------------

    @abstractmethod
    def width(self) -> int:
        pass

    @abstractmethod
    def height(self) -> int:
        pass

    @abstractmethod
    def ref(self, x: int, y: int) -> TileRef:
        pass

    @abstractmethod
    def x(self, tile: TileRef) -> int:
        pass

    @abstractmethod
    def y(self, tile: TileRef) -> int:
        pass

    @abstractmethod
    def is_valid_coord(self, x: int, y: int) -> bool:
        pass

    def is_on_map(self, cell: Cell) -> bool:
        return self.is_valid_coord(cell.x, cell.y)

    @abstractmethod
    def is_land(self, tile: TileRef) -> bool:
        pass

    @abstractmethod
    def is_ocean(self, tile: TileRef) -> bool:
        pass

    @abstractmethod
    def is_ocean_shore(self, tile: TileRef) -> bool:
        pass

    @abstractmethod
    def terrain_type(self, tile: TileRef) -> TerrainType:
        pass

    @abstractmethod
    def neighbors(self, tile: TileRef) -> List[TileRef]:
        pass

    @abstractmethod
    def euclidean_dist_squared(self, a: TileRef, b: TileRef) -> int:
        pass

    @abstractmethod
    def num_land_tiles(self) -> int:
        pass

    # --- ownership -----------------------------------------------------

    @abstractmethod
    def owner_id(self, tile: TileRef) -> int:
        """Small id of the tile owner (0 for unclaimed)."""
        pass

    def owner(self, tile: TileRef) -> Owner:
        return self.player_by_small_id(self.owner_id(tile))

    def has_owner(self, tile: TileRef) -> bool:
        return self.owner_id(tile) != 0

    # --- economy and effects -------------------------------------------

    @abstractmethod
    def unit_cost(self, unit_type: UnitType, player: PlayerView) -> int:
        pass

    @abstractmethod
    def placement_value(self, player: PlayerView, unit_type: UnitType, tile: TileRef) -> float:
        """How desirable ``tile`` is for a new structure (higher is better)."""
        pass

    @abstractmethod
    def add_execution(self, request: ExecutionRequest) -> None:
        pass


# ============================================================================
# In-memory engine
# ============================================================================


@dataclass(eq=False)
class AllianceRequest:
    """Pending alliance request between two in-memory players."""

    game: "InMemoryGame" = field(repr=False)
    requestor: "InMemoryPlayer"
    recipient: "InMemoryPlayer"
    created_at: int

    def accept(self) -> None:
        self.game._resolve_alliance_request(self, accepted=True)

    def reject(self) -> None:
        self.game._resolve_alliance_request(self, accepted=False)


def relation_from_value(value: int) -> Relation:
    if value < -50:
        return Relation.HOSTILE
    if value < 0:
        return Relation.DISTRUSTFUL
    if value < 50:
        return Relation.NEUTRAL
    return Relation.FRIENDLY


class InMemoryPlayer(PlayerView):
    """Player state held by ``InMemoryGame``."""

    def __init__(
        self,
        game: "InMemoryGame",
        player_id: str,
        small_id: int,
        *,
        name: Optional[str] = None,
        player_type: PlayerType = PlayerType.HUMAN,
        team: Optional[str] = None,
        gold: int = 0,
        troops: int = 0,
        max_troops: Optional[int] = None,
    ):
        self._game = game
        self.id = player_id
        self.small_id = small_id
        self.name = name or player_id
        self.type = player_type
        self.team = team
        self._gold = gold
        self._troops = troops
        self._max_troops = max_troops if max_troops is not None else max(troops, 1)
        # dict keeps conquest order so tiles() is stable
        self._tiles: Dict[TileRef, None] = {}
        self._units: List[Unit] = []
        self._relations: Dict[str, int] = {}
        self._embargoes: Set[str] = set()
        self._targets: List[PlayerView] = []
        self._incoming_requests: List[AllianceRequest] = []

    def __repr__(self) -> str:  # pragma: no cover - debugging aid
        return f"InMemoryPlayer({self.id!r})"

    def is_alive(self) -> bool:
        return bool(self._tiles)

    # --- territory -----------------------------------------------------

    def tiles(self) -> List[TileRef]:
        return list(self._tiles)

    def border_tiles(self) -> List[TileRef]:
        game_map = self._game.map
        owners = self._game._owners
        return [
            t
            for t in self._tiles
            if any(owners[n] != self.small_id for n in game_map.neighbors(t))
        ]

    def num_tiles_owned(self) -> int:
        return len(self._tiles)

    # --- inventory -----------------------------------------------------

    def units(self, *types: UnitType) -> List[Unit]:
        if not types:
            return list(self._units)
        return [u for u in self._units if u.type in types]

    def unit_count(self, unit_type: UnitType) -> int:
        return sum(1 for u in self._units if u.type == unit_type)

    def units_owned(self, unit_type: UnitType) -> int:
        return self.unit_count(unit_type)

    def gold(self) -> int:
        return self._gold

    def add_gold(self, amount: int) -> None:
        self._gold += amount

    def remove_gold(self, amount: int) -> None:
        self._gold = max(0, self._gold - amount)

    def troops(self) -> int:
        return self._troops

    def set_troops(self, troops: int, max_troops: Optional[int] = None) -> None:
        self._troops = troops
        if max_troops is not None:
            self._max_troops = max_troops

    def max_troops(self) -> int:
        return self._max_troops

    # --- relations -----------------------------------------------------

    def relation_value(self, other: PlayerView) -> int:
        return self._relations.get(other.id, 0)

    def relation(self, other: PlayerView) -> Relation:
        return relation_from_value(self.relation_value(other))

    def update_relation(self, other: PlayerView, delta: int) -> None:
        value = self.relation_value(other) + delta
        self._relations[other.id] = max(-100, min(100, value))

    def is_on_same_team(self, other: Owner) -> bool:
        if other is self or not other.is_player():
            return False
        return self.team is not None and self.team == other.team

    def is_allied_with(self, other: Owner) -> bool:
        if not other.is_player():
            return False
        return self.alliance_with(other) is not None

    def is_friendly(self, other: Owner) -> bool:
        return self.is_on_same_team(other) or self.is_allied_with(other)

    def allies(self) -> List[PlayerView]:
        result = []
        for alliance in self.alliances():
            other = self._game.player(alliance.other(self.id))
            if other is not None:
                result.append(other)
        return result

    def alliances(self) -> List[Alliance]:
        return [a for a in self._game._alliances if self.id in (a.requestor_id, a.recipient_id)]

    def alliance_with(self, other: PlayerView) -> Optional[Alliance]:
        for alliance in self.alliances():
            if alliance.other(self.id) == other.id:
                return alliance
        return None

    def break_alliance(self, alliance: Alliance) -> None:
        if alliance in self._game._alliances:
            self._game._alliances.remove(alliance)

    def targets(self) -> List[PlayerView]:
        return list(self._targets)

    def set_targets(self, targets: Sequence[PlayerView]) -> None:
        self._targets = list(targets)

    def can_send_alliance_request(self, other: PlayerView) -> bool:
        if other is self or not other.is_player():
            return False
        if self.is_friendly(other):
            return False
        return not any(r.requestor is self for r in other.incoming_alliance_requests())

    def create_alliance_request(self, other: PlayerView) -> None:
        if not self.can_send_alliance_request(other):
            return
        request = AllianceRequest(
            game=self._game, requestor=self, recipient=other, created_at=self._game.ticks()
        )
        other._incoming_requests.append(request)

    def incoming_alliance_requests(self) -> List[AllianceRequest]:
        return list(self._incoming_requests)

    # --- embargoes -----------------------------------------------------

    def has_embargo_against(self, other: PlayerView) -> bool:
        return other.id in self._embargoes

    def add_embargo(self, other: PlayerView, temporary: bool = False) -> None:
        self._embargoes.add(other.id)

    def stop_embargo(self, other: PlayerView) -> None:
        self._embargoes.discard(other.id)

    # --- actions -------------------------------------------------------

    def can_build(self, unit_type: UnitType, tile: TileRef) -> bool:
        game = self._game
        if not 0 <= tile < game.map.width * game.map.height:
            return False
        if self._gold < game.unit_cost(unit_type, self):
            return False

        if unit_type in STRUCTURE_TYPES:
            if game.owner_id(tile) != self.small_id or not game.is_land(tile):
                return False
            if unit_type == UnitType.PORT:
                return game.is_ocean_shore(tile)
            return True

        if unit_type == UnitType.WARSHIP:
            return game.is_ocean(tile) and self.unit_count(UnitType.PORT) > 0

        if unit_type in (UnitType.ATOM_BOMB, UnitType.HYDROGEN_BOMB):
            return self.unit_count(UnitType.MISSILE_SILO) > 0

        if unit_type == UnitType.MIRV:
            if self.unit_count(UnitType.MISSILE_SILO) == 0:
                return False
            owner = game.owner(tile)
            return owner.is_player() and owner is not self

        if unit_type == UnitType.TRANSPORT_SHIP:
            return any(game.is_ocean_shore(t) for t in self.border_tiles())

        return False

    def shares_border_with(self, other: Owner) -> bool:
        owners = self._game._owners
        for tile in self.border_tiles():
            for n in self._game.map.neighbors(tile):
                if owners[n] == other.small_id:
                    return True
        return False


class InMemoryGame(GameView):
    """Synchronous in-memory engine implementing ``GameView``.

    Requests submitted through ``add_execution`` are queued and applied by
    ``execute_next_tick``:

    - SpawnRequest: creates the player if needed and claims a small area
    - ConstructionRequest: pays the cost and builds instantly
    - NukeRequest / MirvRequest: pays the cost and records an in-flight unit
    - Attack / transport / emoji requests: recorded only (no combat model)
    """

    def __init__(
        self,
        game_map: GameMap,
        *,
        game_id: str = "game",
        spawn_phase_ticks: int = 0,
        unit_costs: Optional[Dict[UnitType, int]] = None,
    ):
        self.map = game_map
        self.game_id = game_id
        self.spawn_phase_ticks = spawn_phase_ticks
        self.unit_costs = dict(DEFAULT_UNIT_COSTS)
        if unit_costs:
            self.unit_costs.update(unit_costs)

        self._ticks = 0
        self._owners: List[int] = [0] * (game_map.width * game_map.height)
        self._players: Dict[str, InMemoryPlayer] = {}
        self._by_small_id: Dict[int, InMemoryPlayer] = {}
        self._terra_nullius = TerraNullius()
        self._alliances: List[Alliance] = []
        self._pending: List[ExecutionRequest] = []
        # Every request ever submitted, in order (useful for tests and replays)
        self.executions: List[ExecutionRequest] = []

    # --- setup helpers -------------------------------------------------

    def add_player(
        self,
        player_id: str,
        *,
        name: Optional[str] = None,
        player_type: PlayerType = PlayerType.HUMAN,
        team: Optional[str] = None,
        gold: int = 0,
        troops: int = 0,
        max_troops: Optional[int] = None,
    ) -> InMemoryPlayer:
        if player_id in self._players:
            raise ValueError(f"player '{player_id}' already exists")
        small_id = len(self._players) + 1
        player = InMemoryPlayer(
            self,
            player_id,
            small_id,
            name=name,
            player_type=player_type,
            team=team,
            gold=gold,
            troops=troops,
            max_troops=max_troops,
        )
        self._players[player_id] = player
        self._by_small_id[small_id] = player
        return player

    def conquer(self, player: InMemoryPlayer, tile: TileRef) -> None:
        previous = self._owners[tile]
        if previous == player.small_id:
            return
        if previous != 0:
            self._by_small_id[previous]._tiles.pop(tile, None)
        self._owners[tile] = player.small_id
        player._tiles[tile] = None

    def relinquish(self, tile: TileRef) -> None:
        previous = self._owners[tile]
        if previous != 0:
            self._by_small_id[previous]._tiles.pop(tile, None)
            self._owners[tile] = 0

    def conquer_rect(self, player: InMemoryPlayer, x0: int, y0: int, x1: int, y1: int) -> int:
        """Claim every land tile with ``x0 <= x < x1`` and ``y0 <= y < y1``."""
        count = 0
        for y in range(max(0, y0), min(self.map.height, y1)):
            for x in range(max(0, x0), min(self.map.width, x1)):
                tile = self.map.ref(x, y)
                if self.map.is_land(tile):
                    self.conquer(player, tile)
                    count += 1
        return count

    def build_unit(
        self,
        player: InMemoryPlayer,
        unit_type: UnitType,
        tile: TileRef,
        target_tile: Optional[TileRef] = None,
    ) -> Unit:
        unit = Unit(type=unit_type, owner_id=player.id, tile=tile, target_tile=target_tile)
        player._units.append(unit)
        return unit

    def create_alliance(self, a: PlayerView, b: PlayerView) -> Alliance:
        alliance = Alliance(
            requestor_id=a.id,
            recipient_id=b.id,
            expires_at=self._ticks + ALLIANCE_DURATION_TICKS,
        )
        self._alliances.append(alliance)
        return alliance

    def set_ticks(self, ticks: int) -> None:
        self._ticks = ticks

    def _resolve_alliance_request(self, request: AllianceRequest, accepted: bool) -> None:
        if request in request.recipient._incoming_requests:
            request.recipient._incoming_requests.remove(request)
        if accepted and request.recipient.alliance_with(request.requestor) is None:
            self.create_alliance(request.requestor, request.recipient)

    # --- GameView ------------------------------------------------------

    def ticks(self) -> int:
        return self._ticks

    def in_spawn_phase(self) -> bool:
        return self._ticks < self.spawn_phase_ticks

    def players(self) -> List[PlayerView]:
        return [p for p in self._players.values() if p.is_alive()]

    def all_players(self) -> List[InMemoryPlayer]:
        return list(self._players.values())

    def player(self, player_id: str) -> Optional[InMemoryPlayer]:
        return self._players.get(player_id)

    def player_by_small_id(self, small_id: int) -> Owner:
        if small_id == 0:
            return self._terra_nullius
        return self._by_small_id[small_id]

    def terra_nullius(self) -> TerraNullius:
        return self._terra_nullius

    def width(self) -> int:
        return self.map.width

    def height(self) -> int:
        return self.map.height

    def ref(self, x: int, y: int) -> TileRef:
        return self.map.ref(x, y)

    def x(self, tile: TileRef) -> int:
        return self.map.x(tile)

    def y(self, tile: TileRef) -> int:
        return self.map.y(tile)

    def is_valid_coord(self, x: int, y: int) -> bool:
        return self.map.is_valid_coord(x, y)

    def is_land(self, tile: TileRef) -> bool:
        return self.map.is_land(tile)

    def is_ocean(self, tile: TileRef) -> bool:
        return self.map.is_ocean(tile)

    def is_ocean_shore(self, tile: TileRef) -> bool:
        return self.map.is_ocean_shore(tile)

    def terrain_type(self, tile: TileRef) -> TerrainType:
        return self.map.terrain_type(tile)

    def neighbors(self, tile: TileRef) -> List[TileRef]:
        return self.map.neighbors(tile)

    def euclidean_dist_squared(self, a: TileRef, b: TileRef) -> int:
        return self.map.euclidean_dist_squared(a, b)

    def num_land_tiles(self) -> int:
        return self.map.num_land_tiles()

    def owner_id(self, tile: TileRef) -> int:
        return self._owners[tile]

    def unit_cost(self, unit_type: UnitType, player: PlayerView) -> int:
        return self.unit_costs[unit_type]

    def placement_value(self, player: PlayerView, unit_type: UnitType, tile: TileRef) -> float:
        """Prefer tiles far from structures of the same type (capped at 50)."""
        same_type = player.units(unit_type)
        if not same_type:
            return 50.0
        closest = min(self.map.euclidean_dist_squared(tile, u.tile) for u in same_type)
        return min(50.0, math.sqrt(closest))

    def add_execution(self, request: ExecutionRequest) -> None:
        self.executions.append(request)
        self._pending.append(request)

    # --- tick processing -----------------------------------------------

    def execute_next_tick(self) -> List[ExecutionRequest]:
        """Apply queued requests, advance the clock, return what was applied."""
        pending, self._pending = self._pending, []
        for request in pending:
            self._apply(request)
        self._ticks += 1
        return pending

    def _apply(self, request: ExecutionRequest) -> None:
        if isinstance(request, SpawnRequest):
            self._apply_spawn(request)
            return

        player = self._players.get(request.player_id)
        if player is None or not player.is_alive():
            return

        if isinstance(request, ConstructionRequest):
            if player.can_build(request.unit_type, request.tile):
                player.remove_gold(self.unit_cost(request.unit_type, player))
                self.build_unit(player, request.unit_type, request.tile)
        elif isinstance(request, (NukeRequest, MirvRequest)):
            unit_type = request.unit_type if isinstance(request, NukeRequest) else UnitType.MIRV
            if player.can_build(unit_type, request.tile):
                player.remove_gold(self.unit_cost(unit_type, player))
                silo = player.units(UnitType.MISSILE_SILO)[0]
                self.build_unit(player, unit_type, silo.tile, target_tile=request.tile)
        elif isinstance(request, (AttackRequest, TransportShipRequest, EmojiRequest)):
            # Combat and chat are outside the decision layer; keep the record only.
            pass

    def _apply_spawn(self, request: SpawnRequest) -> None:
        if self.owner_id(request.tile) != 0 or not self.map.is_land(request.tile):
            return
        player = self._players.get(request.player_id)
        if player is None:
            player = self.add_player(
                request.player_id, name=request.name, player_type=request.player_type
            )
        for tile in player.tiles():
            self.relinquish(tile)
        cx, cy = self.map.x(request.tile), self.map.y(request.tile)
        for y in range(cy - SPAWN_RADIUS, cy + SPAWN_RADIUS + 1):
            for x in range(cx - SPAWN_RADIUS, cx + SPAWN_RADIUS + 1):
                if not self.map.is_valid_coord(x, y):
                    continue
                tile = self.map.ref(x, y)
                if self.map.is_land(tile) and self._owners[tile] == 0:
                    self.conquer(player, tile)
