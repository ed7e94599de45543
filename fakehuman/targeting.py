"""
Threat assessment and spatial targeting for nuclear strikes.

Two families of algorithms live here:

- Area-strike tile scoring (conventional atom / hydrogen bombs): pick the tile
  inside an enemy's territory that destroys the most value, avoids SAM cover,
  stays near our own silos and does not re-hit recently struck areas.
- Strategic-strike target selection (MIRV): counter-strike, victory denial and
  steamroll prevention, evaluated in that order.

Design Philosophy:
- Pure functions over ``GameView``; all mutable state is in ``StrikeMemory``
  and ``TargetCache`` owned by the calling advisor
- "No target" is a normal outcome and returns ``None``
- Scores are floats; gold never passes through here
"""

from __future__ import annotations

import math
from collections import deque
from dataclasses import dataclass
from typing import Callable, Deque, Dict, Iterable, List, Optional, Sequence, Tuple

from .config import Config
from .environment.helpers import bounding_box_ring, closest_two_tiles, within_distance
from .environment.sampling import rand_territory_tile_array
from .game import GameView, PlayerView, Unit
from .pseudo_random import PseudoRandom
from .schemas import PlayerType, TileRef, UnitType


# Value of destroying each structure type with an area strike
STRUCTURE_VALUES: Dict[UnitType, int] = {
    UnitType.CITY: 25_000,
    UnitType.MISSILE_SILO: 50_000,
    UnitType.PORT: 10_000,
    UnitType.DEFENSE_POST: 5_000,
}

SAM_PENALTY = 50_000
SILO_DISTANCE_PENALTY = 30
RECENT_STRIKE_PENALTY = 1_000_000
STRIKE_CANDIDATE_SAMPLES = 10

# Structures a strike candidate can be centred on, in evaluation order
STRIKE_STRUCTURE_TYPES = (
    UnitType.CITY,
    UnitType.DEFENSE_POST,
    UnitType.MISSILE_SILO,
    UnitType.PORT,
    UnitType.SAM_LAUNCHER,
)

STEAMROLL_STRUCTURE_TYPES = (
    UnitType.CITY,
    UnitType.FACTORY,
    UnitType.PORT,
    UnitType.DEFENSE_POST,
    UnitType.SAM_LAUNCHER,
    UnitType.MISSILE_SILO,
)


@dataclass(frozen=True)
class WeaponProfile:
    """Geometry of an area-strike weapon.

    footprint: radius that must lie entirely inside the target's territory
    value_radius: radius in which structures count toward the score
    sam_radius: radius in which enemy SAM launchers penalise the tile
    """

    unit_type: UnitType
    footprint: int
    value_radius: int
    sam_radius: int


WEAPON_PROFILES: Dict[UnitType, WeaponProfile] = {
    UnitType.ATOM_BOMB: WeaponProfile(UnitType.ATOM_BOMB, footprint=15, value_radius=25, sam_radius=50),
    UnitType.HYDROGEN_BOMB: WeaponProfile(
        UnitType.HYDROGEN_BOMB, footprint=60, value_radius=60, sam_radius=85
    ),
}


# ============================================================================
# Advisor-owned state
# ============================================================================


class StrikeMemory:
    """Recent strikes as ``(tick, tile)`` pairs, oldest first.

    An entry is evicted once ``now - tick >= max_age``.
    """

    def __init__(self, max_age: int):
        self.max_age = max_age
        self._events: Deque[Tuple[int, TileRef]] = deque()

    def evict(self, now: int) -> None:
        while self._events and now - self._events[0][0] >= self.max_age:
            self._events.popleft()

    def record(self, tick: int, tile: TileRef) -> None:
        self.evict(tick)
        self._events.append((tick, tile))

    def is_cooling_down(self, now: int) -> bool:
        self.evict(now)
        return bool(self._events)

    def tiles(self) -> List[TileRef]:
        return [tile for _, tile in self._events]

    def clear(self) -> None:
        self._events.clear()

    def __len__(self) -> int:
        return len(self._events)

    def __iter__(self):
        return iter(self._events)


class TargetCache:
    """Valid strike targets computed at ``computed_at``, reused for ``ttl`` ticks."""

    def __init__(self, ttl: int = Config.TARGET_CACHE_TICKS):
        self.ttl = ttl
        self.computed_at: Optional[int] = None
        self.players: List[PlayerView] = []

    def get(self, now: int, compute: Callable[[], List[PlayerView]]) -> List[PlayerView]:
        if self.computed_at is not None and now - self.computed_at < self.ttl:
            return self.players
        self.players = compute()
        self.computed_at = now
        return self.players

    def invalidate(self) -> None:
        self.computed_at = None
        self.players = []


# ============================================================================
# Area strikes
# ============================================================================


def score_strike_tile(
    game: GameView,
    tile: TileRef,
    silos: Sequence[Unit],
    structures: Sequence[Unit],
    recent: Iterable[TileRef],
    profile: WeaponProfile,
) -> float:
    """Score an area-strike tile (higher is better, may be negative)."""
    value = 0.0
    for unit in structures:
        if within_distance(game, tile, unit.tile, profile.value_radius):
            value += STRUCTURE_VALUES.get(unit.type, 0)

    sams = [
        u
        for u in structures
        if u.type == UnitType.SAM_LAUNCHER and within_distance(game, tile, u.tile, profile.sam_radius)
    ]
    value -= SAM_PENALTY * len(sams)

    closest = closest_two_tiles(game, [u.tile for u in silos], [tile])
    if closest is not None:
        value -= SILO_DISTANCE_PENALTY * math.sqrt(game.euclidean_dist_squared(tile, closest[0]))

    for struck in recent:
        if within_distance(game, tile, struck, profile.value_radius):
            value -= RECENT_STRIKE_PENALTY

    return value


def footprint_inside_target(
    game: GameView, tile: TileRef, target: PlayerView, footprint: int
) -> bool:
    """True when both perimeter rings (full and half footprint) are target-owned."""
    for radius in (footprint, footprint // 2):
        for t in bounding_box_ring(game, tile, radius):
            if game.owner_id(t) != target.small_id:
                return False
    return True


def select_strike_tile(
    game: GameView,
    player: PlayerView,
    target: PlayerView,
    unit_type: UnitType,
    random: PseudoRandom,
    recent: Iterable[TileRef] = (),
) -> Optional[TileRef]:
    """Best strictly-positive area-strike tile in ``target``'s territory."""
    profile = WEAPON_PROFILES[unit_type]
    silos = player.units(UnitType.MISSILE_SILO)
    structures = target.units(*STRIKE_STRUCTURE_TYPES)
    recent = list(recent)

    candidates = rand_territory_tile_array(game, target, random, STRIKE_CANDIDATE_SAMPLES)
    candidates.extend(u.tile for u in structures)

    best_tile: Optional[TileRef] = None
    best_value = 0.0
    # dict.fromkeys dedupes while keeping first-seen order
    for tile in dict.fromkeys(candidates):
        if not footprint_inside_target(game, tile, target, profile.footprint):
            continue
        if not player.can_build(unit_type, tile):
            continue
        value = score_strike_tile(game, tile, silos, structures, recent, profile)
        if value > best_value:
            best_tile, best_value = tile, value
    return best_tile


# ============================================================================
# Strategic strikes
# ============================================================================


def valid_strike_targets(game: GameView, player: PlayerView) -> List[PlayerView]:
    """Live players we may strike: not us, not bots, not teammates."""
    return [
        p
        for p in game.players()
        if p is not player
        and p.is_player()
        and p.type != PlayerType.BOT
        and not player.is_on_same_team(p)
    ]


def has_inbound_mirv_from(game: GameView, player: PlayerView, attacker: PlayerView) -> bool:
    for mirv in attacker.units(UnitType.MIRV):
        dst = mirv.target_tile
        if dst is None or not game.has_owner(dst):
            continue
        if game.owner(dst) is player:
            return True
    return False


def select_counter_strike_target(
    game: GameView, player: PlayerView, targets: Sequence[PlayerView]
) -> Optional[PlayerView]:
    """The largest valid target with a MIRV in flight toward our territory."""
    attackers = [p for p in targets if has_inbound_mirv_from(game, player, p)]
    if not attackers:
        return None
    return max(attackers, key=lambda p: p.num_tiles_owned())


def select_victory_denial_target(
    game: GameView,
    targets: Sequence[PlayerView],
    team_threshold: float = Config.VICTORY_DENIAL_TEAM_THRESHOLD,
    individual_threshold: float = Config.VICTORY_DENIAL_INDIVIDUAL_THRESHOLD,
) -> Optional[PlayerView]:
    """The target (or team's largest member) closest to winning on land share."""
    total_land = game.num_land_tiles()
    if total_land == 0:
        return None

    best: Optional[PlayerView] = None
    best_severity = 0.0
    for p in targets:
        severity = 0.0
        if p.team is not None:
            members = [x for x in game.players() if x.is_player() and x.team == p.team]
            team_share = sum(m.num_tiles_owned() for m in members) / total_land
            if team_share >= team_threshold:
                largest = max(members, key=lambda m: m.num_tiles_owned())
                if largest is p:
                    severity = team_share
        else:
            share = p.num_tiles_owned() / total_land
            if share >= individual_threshold:
                severity = share

        if severity > best_severity:
            best, best_severity = p, severity
    return best


def count_structures(player: PlayerView, structure_types: Sequence[UnitType]) -> int:
    return sum(player.unit_count(t) for t in structure_types)


def select_steamroll_target(
    game: GameView,
    targets: Sequence[PlayerView],
    structure_types: Sequence[UnitType] = (UnitType.CITY,),
    gap_multiplier: float = Config.STEAMROLL_GAP_MULTIPLIER,
    min_leader_structures: int = Config.STEAMROLL_MIN_LEADER_STRUCTURES,
) -> Optional[PlayerView]:
    """The valid target whose structure count runs away from everyone else.

    The leader must own more than ``min_leader_structures`` and at least
    ``gap_multiplier`` times the runner-up's count (runner-up taken over all
    live players, not just valid targets).
    """
    if not targets:
        return None

    leader = max(targets, key=lambda p: count_structures(p, structure_types))
    leader_count = count_structures(leader, structure_types)
    if leader_count <= min_leader_structures:
        return None

    others = [p for p in game.players() if p.is_player() and p is not leader]
    if not others:
        return None
    runner_up = max(count_structures(p, structure_types) for p in others)

    if leader_count >= runner_up * gap_multiplier:
        return leader
    return None
