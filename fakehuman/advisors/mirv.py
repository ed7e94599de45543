"""
MIRV advisor: strategic strikes and the gold reserve that funds them.

Key responsibilities:
- Gate strategic strikes (silo, gold, cooldown, hesitation)
- Pick a target: counter-strike, then victory denial, then steamroll prevention
- Maintain an adaptive gold reserve every other advisor spends around
- Tell the economy advisor when missile silos should jump the build queue
"""

from __future__ import annotations

import math
from typing import List, Optional, Sequence

from ..config import Config
from ..environment.helpers import calculate_territory_center
from ..game import PlayerView
from ..logging_utils import log_decision
from ..schemas import AdvisorPriority, MirvRequest, Recommendation, TileRef, UnitType
from ..targeting import (
    StrikeMemory,
    TargetCache,
    select_counter_strike_target,
    select_steamroll_target,
    select_victory_denial_target,
    valid_strike_targets,
)
from .base import AdvisorDependencies, BaseAdvisor


COUNTER_STRIKE = "Counter-MIRV"
VICTORY_DENIAL = "Victory Denial"
STEAMROLL_PREVENTION = "Steamroll Prevention"

BASE_SCORE = 200
TERRITORY_SCORE_PER_TILE = 2
COUNTER_STRIKE_MULTIPLIER = 1.5

# Reserve heuristics
GOLD_LEVEL_REFERENCE = 20_000_000
RICH_OPPONENT_GOLD = 25_000_000
RESERVE_CAP_FACTOR = 1.5
LEADER_FLOOR_FACTOR = 0.7


class MIRVAdvisor(BaseAdvisor):
    name = "mirv"

    def __init__(
        self,
        deps: AdvisorDependencies,
        *,
        cooldown_ticks: Optional[int] = None,
        hesitation_odds: Optional[int] = None,
        reserve_min: Optional[int] = None,
        reserve_target: Optional[int] = None,
        steamroll_structures: Sequence[UnitType] = (UnitType.CITY,),
    ):
        super().__init__(deps)
        self.hesitation_odds = (
            Config.MIRV_HESITATION_ODDS if hesitation_odds is None else hesitation_odds
        )
        self.reserve_min = Config.MIRV_RESERVE_MIN if reserve_min is None else reserve_min
        self.reserve_target = (
            Config.MIRV_RESERVE_TARGET if reserve_target is None else reserve_target
        )
        self.steamroll_structures = tuple(steamroll_structures)
        self.memory = StrikeMemory(
            Config.MIRV_COOLDOWN_TICKS if cooldown_ticks is None else cooldown_ticks
        )
        self.target_cache = TargetCache(Config.TARGET_CACHE_TICKS)

    # ------------------------------------------------------------------
    # Strikes
    # ------------------------------------------------------------------

    def recommend(self) -> Optional[Recommendation]:
        player = self.player
        if player.unit_count(UnitType.MISSILE_SILO) == 0:
            return None
        if player.gold() < self.cost(UnitType.MIRV):
            return None

        now = self.game.ticks()
        if self.memory.is_cooling_down(now):
            return None

        if self.random.chance(self.hesitation_odds):
            log_decision(f"{player.name}: hesitating on MIRV launch")
            self._trigger_cooldown()
            return None

        targets = self.valid_targets()

        target = select_counter_strike_target(self.game, player, targets)
        if target is not None:
            return self._create_recommendation(target, COUNTER_STRIKE)

        target = select_victory_denial_target(
            self.game,
            targets,
            Config.VICTORY_DENIAL_TEAM_THRESHOLD,
            Config.VICTORY_DENIAL_INDIVIDUAL_THRESHOLD,
        )
        if target is not None:
            return self._create_recommendation(target, VICTORY_DENIAL)

        target = select_steamroll_target(
            self.game,
            targets,
            self.steamroll_structures,
            Config.STEAMROLL_GAP_MULTIPLIER,
            Config.STEAMROLL_MIN_LEADER_STRUCTURES,
        )
        if target is not None:
            return self._create_recommendation(target, STEAMROLL_PREVENTION)

        return None

    def valid_targets(self) -> List[PlayerView]:
        return self.target_cache.get(
            self.game.ticks(), lambda: valid_strike_targets(self.game, self.player)
        )

    def strike_tile(self, target: PlayerView) -> Optional[TileRef]:
        """Territory centre if we can hit it, else the first strikeable tile."""
        center = calculate_territory_center(self.game, target)
        if center is not None and self.player.can_build(UnitType.MIRV, center):
            return center
        for tile in target.tiles():
            if self.player.can_build(UnitType.MIRV, tile):
                return tile
        return None

    @staticmethod
    def score(target: PlayerView, reason: str) -> int:
        multiplier = COUNTER_STRIKE_MULTIPLIER if reason == COUNTER_STRIKE else 1.0
        return math.floor((BASE_SCORE + TERRITORY_SCORE_PER_TILE * target.num_tiles_owned()) * multiplier)

    def _create_recommendation(self, target: PlayerView, reason: str) -> Optional[Recommendation]:
        tile = self.strike_tile(target)
        if tile is None:
            return None

        log_decision(f"{self.player.name}: MIRV {reason} against {target.name}")
        return self.recommendation(
            execute=lambda: self._send_mirv(tile),
            score=self.score(target, reason),
            priority=AdvisorPriority.HIGH,
            description=f"MIRV {reason} against {target.id}",
        )

    def _send_mirv(self, tile: TileRef) -> None:
        self._trigger_cooldown(tile)
        self.game.add_execution(MirvRequest(player_id=self.player.id, tile=tile))

    def _trigger_cooldown(self, tile: Optional[TileRef] = None) -> None:
        if tile is None:
            owned = self.player.tiles()
            tile = owned[0] if owned else 0
        self.memory.record(self.game.ticks(), tile)

    # ------------------------------------------------------------------
    # Reserve
    # ------------------------------------------------------------------

    def _opponents(self) -> List[PlayerView]:
        return [
            p
            for p in self.game.players()
            if p is not self.player and p.is_player() and p.is_alive()
        ]

    def get_mirv_reserve_threshold(self) -> int:
        """Gold to hold back so a MIRV stays within reach.

        Scales with how rich the opponents are, weighting the top three, and
        never exceeds ``1.5 * reserve_target``.
        """
        if self.player.unit_count(UnitType.MISSILE_SILO) == 0:
            return 0

        opponents = self._opponents()
        if not opponents:
            return self.reserve_min

        levels = sorted((float(p.gold()) for p in opponents), reverse=True)
        max_gold = levels[0]
        avg = sum(levels) / len(levels)
        top3 = levels[:3]
        top3_avg = sum(top3) / len(top3)

        benchmark = top3_avg * 0.6 + avg * 0.4
        gap_ratio = (max_gold - benchmark) / benchmark if benchmark > 0 else 0.0
        level_ratio = benchmark / GOLD_LEVEL_REFERENCE

        multiplier = 1.0
        if gap_ratio > 0.6:
            multiplier = 1.3
        elif gap_ratio > 0.3:
            multiplier = 1.2
        elif gap_ratio > 0.1:
            multiplier = 1.1

        if level_ratio > 1.5:
            multiplier = max(multiplier, 1.2)
        elif level_ratio > 1.0:
            multiplier = max(multiplier, 1.1)

        if max_gold >= RICH_OPPONENT_GOLD:
            multiplier = max(multiplier, 1.4)
        elif top3_avg >= GOLD_LEVEL_REFERENCE:
            multiplier = max(multiplier, 1.2)

        threshold = max(float(self.reserve_min), benchmark * multiplier, max_gold * LEADER_FLOOR_FACTOR)
        threshold = min(threshold, self.reserve_target * RESERVE_CAP_FACTOR)
        return math.floor(threshold)

    def get_spendable_gold(self) -> int:
        return max(0, self.player.gold() - self.get_mirv_reserve_threshold())

    def can_afford_with_reserve(self, cost: int) -> bool:
        return self.get_spendable_gold() >= cost

    def should_prioritize_missile_silos(self) -> bool:
        silos = self.player.unit_count(UnitType.MISSILE_SILO)
        ticks = self.game.ticks()

        if silos == 0 and ticks > 300:
            return True
        if silos < 2 and ticks > 600:
            return True
        if silos < 2 and self.player.gold() > 10_000_000 and self.player.num_tiles_owned() > 50:
            return True

        opponents = self._opponents()
        if opponents and silos < 2:
            return max(p.gold() for p in opponents) > 20_000_000
        return False
