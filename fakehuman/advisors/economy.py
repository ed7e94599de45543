"""Economy advisor: what to build next and where."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Callable, List, Optional

from ..config import Config
from ..environment.sampling import rand_coastal_tile_array, rand_territory_tile_array
from ..logging_utils import log_decision, log_warning
from ..schemas import AdvisorPriority, ConstructionRequest, Recommendation, TileRef, UnitType
from .base import AdvisorDependencies, BaseAdvisor
from .mirv import MIRVAdvisor


STRUCTURE_SAMPLES = 25
WARSHIP_SEARCH_RADIUS = 250
WARSHIP_SEARCH_ATTEMPTS = 50
WARSHIP_SCORE = 100

BASE_SCORES = {
    UnitType.CITY: 100,
    UnitType.PORT: 80,
    UnitType.FACTORY: 60,
    UnitType.DEFENSE_POST: 40,
    UnitType.SAM_LAUNCHER: 30,
    UnitType.MISSILE_SILO: 90,
}
DEFAULT_BASE_SCORE = 50


@dataclass(frozen=True)
class BuildStep:
    """One entry of the build plan.

    ``multiplier`` maps ``owned + 1`` to how many times the real cost the
    agent must hold before building another one.
    """

    unit_type: UnitType
    multiplier: Callable[[int], int]


BUILD_ORDER: List[BuildStep] = [
    BuildStep(UnitType.CITY, lambda n: n),
    BuildStep(UnitType.PORT, lambda n: n),
    BuildStep(UnitType.WARSHIP, lambda n: 0),
    BuildStep(UnitType.FACTORY, lambda n: n),
    BuildStep(UnitType.DEFENSE_POST, lambda n: (n + 2) ** 2),
    BuildStep(UnitType.SAM_LAUNCHER, lambda n: n ** 2),
    BuildStep(UnitType.MISSILE_SILO, lambda n: n ** 2),
]


def structure_score(unit_type: UnitType, owned: int) -> int:
    """Base score with diminishing returns for every copy already owned."""
    base = BASE_SCORES.get(unit_type, DEFAULT_BASE_SCORE)
    return math.floor(base * max(0.1, 1 / (owned + 1)))


class EconomyAdvisor(BaseAdvisor):
    name = "economy"

    def __init__(
        self,
        deps: AdvisorDependencies,
        *,
        mirv: Optional[MIRVAdvisor] = None,
        warship_odds: Optional[int] = None,
        warship_radius: int = WARSHIP_SEARCH_RADIUS,
    ):
        super().__init__(deps)
        self.mirv = mirv
        if self.reserve is None:
            self.reserve = mirv
        self.warship_odds = Config.WARSHIP_BUILD_ODDS if warship_odds is None else warship_odds
        self.warship_radius = warship_radius

    def build_order(self) -> List[BuildStep]:
        order = list(BUILD_ORDER)
        if self.mirv is not None and self.mirv.should_prioritize_missile_silos():
            silo = next(step for step in order if step.unit_type == UnitType.MISSILE_SILO)
            order.remove(silo)
            order.insert(0, silo)
        return order

    def recommend(self) -> Optional[Recommendation]:
        for step in self.build_order():
            if step.unit_type == UnitType.WARSHIP:
                rec = self.recommend_warship()
            else:
                rec = self.recommend_structure(step)
            if rec is not None:
                return rec
        return None

    # ------------------------------------------------------------------
    # Structures
    # ------------------------------------------------------------------

    def recommend_structure(self, step: BuildStep) -> Optional[Recommendation]:
        unit_type = step.unit_type
        owned = self.player.units_owned(unit_type)
        perceived_cost = self.cost(unit_type) * step.multiplier(owned + 1)
        if not self.can_afford_with_reserve(perceived_cost):
            return None

        tile = self.structure_spawn_tile(unit_type)
        if tile is None:
            return None
        if not self.player.can_build(unit_type, tile):
            return None

        log_decision(f"{self.player.name}: build {unit_type.value} at {tile}")
        return self.recommendation(
            execute=lambda: self._construct(unit_type, tile),
            score=structure_score(unit_type, owned),
            priority=AdvisorPriority.NORMAL,
            description=f"Build {unit_type.value} at tile {tile}",
        )

    def structure_spawn_tile(self, unit_type: UnitType) -> Optional[TileRef]:
        """Best buildable tile among a random sample (coastal for ports)."""
        if unit_type == UnitType.PORT:
            tiles = rand_coastal_tile_array(self.game, self.player, self.random, STRUCTURE_SAMPLES)
        else:
            tiles = rand_territory_tile_array(self.game, self.player, self.random, STRUCTURE_SAMPLES)

        best_tile: Optional[TileRef] = None
        best_value = 0.0
        for tile in tiles:
            value = self.game.placement_value(self.player, unit_type, tile)
            if value < 0:
                continue
            if best_tile is not None and value <= best_value:
                continue
            if not self.player.can_build(unit_type, tile):
                continue
            best_tile, best_value = tile, value
        return best_tile

    # ------------------------------------------------------------------
    # Warships
    # ------------------------------------------------------------------

    def recommend_warship(self) -> Optional[Recommendation]:
        if not self.random.chance(self.warship_odds):
            return None

        ports = self.player.units(UnitType.PORT)
        if not ports or self.player.unit_count(UnitType.WARSHIP) > 0:
            return None
        if self.spendable_gold() <= self.cost(UnitType.WARSHIP):
            return None

        port = self.random.rand_element(ports)
        tile = self.warship_spawn_tile(port.tile)
        if tile is None:
            return None
        if not self.player.can_build(UnitType.WARSHIP, tile):
            log_warning(f"{self.player.name}: cannot spawn warship at {tile}")
            return None

        return self.recommendation(
            execute=lambda: self._construct(UnitType.WARSHIP, tile),
            score=WARSHIP_SCORE,
            priority=AdvisorPriority.HIGH,
            description=f"Build warship near port at tile {tile}",
        )

    def warship_spawn_tile(self, port_tile: TileRef) -> Optional[TileRef]:
        px, py = self.game.x(port_tile), self.game.y(port_tile)
        radius = self.warship_radius
        for _ in range(WARSHIP_SEARCH_ATTEMPTS):
            x = self.random.next_int(px - radius, px + radius + 1)
            y = self.random.next_int(py - radius, py + radius + 1)
            if not self.game.is_valid_coord(x, y):
                continue
            tile = self.game.ref(x, y)
            if self.game.is_ocean(tile):
                return tile
        return None

    def _construct(self, unit_type: UnitType, tile: TileRef) -> None:
        self.game.add_execution(
            ConstructionRequest(player_id=self.player.id, unit_type=unit_type, tile=tile)
        )
