"""
Military advisor: border analysis, enemy selection, boats and conventional nukes.

Each call looks at what lies beyond the agent's border and proposes one of:

- expanding into unclaimed land (HIGH)
- a direct land attack on a neighbouring enemy (HIGH)
- a boat attack on an enemy we do not touch by land (NORMAL)
- a random boat landing somewhere reachable (NORMAL)
- an alliance request to a neighbour (LOW)

Taunts and conventional nukes ride along with the enemy attack. So does joining
an ally's fight, which costs goodwill with that ally. None of it happens until
the recommendation is executed.
"""

from __future__ import annotations

from typing import Dict, List, Optional, Tuple

from ..behavior import EMOJI_HECKLE, BotBehavior
from ..config import Config
from ..environment.helpers import closest_two_tiles
from ..environment.sampling import random_boat_target
from ..game import PlayerView
from ..logging_utils import log_decision
from ..schemas import (
    AdvisorPriority,
    EmojiRequest,
    NukeRequest,
    PlayerType,
    Recommendation,
    TileRef,
    TransportShipRequest,
    UnitType,
)
from ..targeting import StrikeMemory, select_strike_tile
from .base import AdvisorDependencies, BaseAdvisor


NO_BORDER_BOAT_ODDS = 10
RANDOM_BOAT_ODDS = 20
ALLIANCE_REQUEST_ODDS = 20
BOAT_SEARCH_RADIUS = 150
BOAT_TROOP_DIVISOR = 5
EMOJI_COOLDOWN_TICKS = 300

RANDOM_BOAT_SCORE = 60
TERRA_NULLIUS_SCORE = 80
ALLIANCE_REQUEST_SCORE = 30
DIRECT_ATTACK_SCORE = 150
BOAT_ATTACK_SCORE = 120


class MilitaryAdvisor(BaseAdvisor):
    name = "military"

    def __init__(self, deps: AdvisorDependencies, *, behavior: Optional[BotBehavior] = None):
        super().__init__(deps)
        self.behavior = behavior
        self.nuke_memory = StrikeMemory(Config.NUKE_MEMORY_TICKS)
        self.last_emoji_sent: Dict[str, int] = {}

    def recommend(self) -> Optional[Recommendation]:
        enemy_border = self.enemy_border_tiles()

        if not enemy_border:
            if self.random.chance(NO_BORDER_BOAT_ODDS):
                return self.recommend_random_boat_attack()
            return None

        if self.random.chance(RANDOM_BOAT_ODDS):
            return self.recommend_random_boat_attack()

        owners = [self.game.owner(t) for t in enemy_border]
        if any(not o.is_player() for o in owners):
            return self.recommend_terra_nullius_attack()

        # Distinct neighbours, weakest first
        enemies: List[PlayerView] = sorted(
            {o.id: o for o in owners}.values(), key=lambda p: p.troops()
        )

        if self.random.chance(ALLIANCE_REQUEST_ODDS):
            rec = self.recommend_alliance_request(enemies)
            if rec is not None:
                return rec

        if self.behavior is None:
            return None

        self.behavior.forget_old_enemies()
        # An ally's fight takes over; the goodwill cost is paid on execution
        assist = self.behavior.ally_to_assist()
        if assist is not None:
            ally, enemy = assist
        else:
            ally, enemy = None, self.behavior.select_enemy(enemies)
        if enemy is None:
            return None

        if self.player.shares_border_with(enemy):
            return self.recommend_direct_attack(enemy, ally)
        return self.recommend_boat_attack_on(enemy, ally)

    def enemy_border_tiles(self) -> List[TileRef]:
        """Land tiles just past our border that we do not own."""
        own = self.player.small_id
        return [
            n
            for t in self.player.border_tiles()
            for n in self.game.neighbors(t)
            if self.game.is_land(n) and self.game.owner_id(n) != own
        ]

    def ocean_shore_border(self, player: PlayerView) -> List[TileRef]:
        return [t for t in player.border_tiles() if self.game.is_ocean_shore(t)]

    # ------------------------------------------------------------------
    # Recommendations
    # ------------------------------------------------------------------

    def recommend_random_boat_attack(self) -> Optional[Recommendation]:
        shore = self.ocean_shore_border(self.player)
        if not shore:
            return None

        src = self.random.rand_element(shore)
        dst = random_boat_target(self.game, self.player, self.random, src, BOAT_SEARCH_RADIUS)
        if dst is None:
            return None

        target_id = self.game.owner(dst).id
        return self.recommendation(
            execute=lambda: self._send_boat(target_id, dst),
            score=RANDOM_BOAT_SCORE,
            priority=AdvisorPriority.NORMAL,
            description=f"Random boat attack to tile {dst}",
        )

    def recommend_terra_nullius_attack(self) -> Recommendation:
        def execute() -> None:
            if self.behavior is not None:
                self.behavior.send_attack(self.game.terra_nullius())

        return self.recommendation(
            execute=execute,
            score=TERRA_NULLIUS_SCORE,
            priority=AdvisorPriority.HIGH,
            description="Attack unclaimed territory",
        )

    def recommend_alliance_request(self, enemies: List[PlayerView]) -> Optional[Recommendation]:
        if not enemies:
            return None
        to_ally = self.random.rand_element(enemies)
        if not self.player.can_send_alliance_request(to_ally):
            return None

        return self.recommendation(
            execute=lambda: self.player.create_alliance_request(to_ally),
            score=ALLIANCE_REQUEST_SCORE,
            priority=AdvisorPriority.LOW,
            description=f"Alliance request to {to_ally.id}",
        )

    def recommend_direct_attack(
        self, enemy: PlayerView, ally: Optional[PlayerView] = None
    ) -> Recommendation:
        nuke = self.plan_nuke(enemy)

        def execute() -> None:
            self._join_ally(ally, enemy)
            self._harass(enemy, nuke)
            if self.behavior is not None:
                self.behavior.send_attack(enemy)

        return self.recommendation(
            execute=execute,
            score=DIRECT_ATTACK_SCORE,
            priority=AdvisorPriority.HIGH,
            description=f"Direct attack on {enemy.id}{_assisting(ally)}",
        )

    def recommend_boat_attack_on(
        self, enemy: PlayerView, ally: Optional[PlayerView] = None
    ) -> Optional[Recommendation]:
        closest = closest_two_tiles(
            self.game, self.ocean_shore_border(self.player), self.ocean_shore_border(enemy)
        )
        if closest is None:
            return None

        nuke = self.plan_nuke(enemy)
        _, dst = closest

        def execute() -> None:
            self._join_ally(ally, enemy)
            self._harass(enemy, nuke)
            self._send_boat(enemy.id, dst)

        return self.recommendation(
            execute=execute,
            score=BOAT_ATTACK_SCORE,
            priority=AdvisorPriority.NORMAL,
            description=f"Boat attack on {enemy.id}{_assisting(ally)}",
        )

    # ------------------------------------------------------------------
    # Nukes and taunts
    # ------------------------------------------------------------------

    def can_nuke(self, enemy: PlayerView) -> bool:
        return (
            self.player.unit_count(UnitType.MISSILE_SILO) > 0
            and self.can_afford_with_reserve(self.cost(UnitType.ATOM_BOMB))
            and enemy.type != PlayerType.BOT
            and not self.player.is_on_same_team(enemy)
        )

    def nuke_type(self) -> UnitType:
        if self.spendable_gold() > self.cost(UnitType.HYDROGEN_BOMB):
            return UnitType.HYDROGEN_BOMB
        return UnitType.ATOM_BOMB

    def plan_nuke(self, enemy: PlayerView) -> Optional[Tuple[UnitType, TileRef]]:
        """Best conventional strike on ``enemy``, or None if none qualifies."""
        if not self.can_nuke(enemy):
            return None
        unit_type = self.nuke_type()
        self.nuke_memory.evict(self.game.ticks())
        tile = select_strike_tile(
            self.game, self.player, enemy, unit_type, self.random, self.nuke_memory.tiles()
        )
        if tile is None:
            return None
        log_decision(f"{self.player.name}: {unit_type.value} on {enemy.name} at {tile}")
        return unit_type, tile

    def _join_ally(self, ally: Optional[PlayerView], enemy: PlayerView) -> None:
        if ally is not None and self.behavior is not None:
            self.behavior.assist_ally(ally, enemy)

    def _harass(self, enemy: PlayerView, nuke: Optional[Tuple[UnitType, TileRef]]) -> None:
        self.maybe_send_emoji(enemy)
        if nuke is not None:
            self._send_nuke(*nuke)

    def maybe_send_emoji(self, enemy: PlayerView) -> None:
        if enemy.type != PlayerType.HUMAN:
            return
        now = self.game.ticks()
        last = self.last_emoji_sent.get(enemy.id)
        if last is not None and now - last <= EMOJI_COOLDOWN_TICKS:
            return
        self.last_emoji_sent[enemy.id] = now
        self.game.add_execution(
            EmojiRequest(
                player_id=self.player.id,
                recipient_id=enemy.id,
                emoji=self.random.rand_element(EMOJI_HECKLE),
            )
        )

    def _send_nuke(self, unit_type: UnitType, tile: TileRef) -> None:
        self.nuke_memory.record(self.game.ticks(), tile)
        self.game.add_execution(NukeRequest(player_id=self.player.id, unit_type=unit_type, tile=tile))

    def _send_boat(self, target_id: Optional[str], tile: TileRef) -> None:
        self.game.add_execution(
            TransportShipRequest(
                player_id=self.player.id,
                target_id=target_id,
                tile=tile,
                troops=self.player.troops() // BOAT_TROOP_DIVISOR,
            )
        )


def _assisting(ally: Optional[PlayerView]) -> str:
    return f" (assisting {ally.id})" if ally is not None else ""
