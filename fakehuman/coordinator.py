"""
FakeHuman coordinator: the per-agent tick driver.

One coordinator controls one AI nation. On each of its cadence ticks it walks
the agent lifecycle:

    DORMANT -> SPAWNING -> UNINITIALIZED -> WARMING -> ACTIVE -> DEAD

- SPAWNING: during the spawn phase, request a spawn near the nation's cell
- UNINITIALIZED: spawn phase over, waiting for the engine to create our player
- WARMING: first tick with a player; build advisors and grab unclaimed land
- ACTIVE: consult diplomacy, alliances, economy, MIRV and military advisors
- DEAD: our player has been eliminated; the coordinator never acts again

Arbitration between advisors is configurable:
- "precedence" (default): advisors run in the fixed order above and each
  recommendation is executed as soon as it is produced
- "best_score": every advisor is asked first, then only the best
  recommendation by (priority, -score) is executed
"""

from __future__ import annotations

from enum import Enum
from typing import Callable, List, Optional, Tuple

from .advisors import (
    AdvisorDependencies,
    AdvisorStateError,
    BaseAdvisor,
    DiplomacyAdvisor,
    EconomyAdvisor,
    MilitaryAdvisor,
    MIRVAdvisor,
)
from .behavior import BotBehavior
from .cadence import AttackCadence, BehaviorRatios
from .config import ARBITRATION_MODES, Config
from .game import GameView, PlayerView
from .logging_utils import log_decision, log_error, log_success, log_warning
from .pseudo_random import PseudoRandom, simple_hash
from .schemas import Nation, Recommendation, SpawnRequest, TerrainType, TileRef


class AgentPhase(str, Enum):
    DORMANT = "dormant"
    SPAWNING = "spawning"
    UNINITIALIZED = "uninitialized"
    WARMING = "warming"
    ACTIVE = "active"
    DEAD = "dead"


class FakeHumanCoordinator:
    """Drives one AI-controlled nation through the game.

    Args:
        game_id: Identifier of the match (part of the random seed)
        nation: Setup record for the nation this agent plays
        game: Game-state view the agent reads from and submits requests to
        arbitration: "precedence" or "best_score" (defaults to Config.ARBITRATION)
    """

    def __init__(
        self,
        game_id: str,
        nation: Nation,
        game: GameView,
        *,
        arbitration: Optional[str] = None,
    ):
        self.game_id = game_id
        self.nation = nation
        self.game = game
        self.arbitration = arbitration or Config.ARBITRATION
        if self.arbitration not in ARBITRATION_MODES:
            raise ValueError(
                f"arbitration must be one of {', '.join(ARBITRATION_MODES)}, got '{self.arbitration}'"
            )

        self.random = PseudoRandom(simple_hash(nation.player_id) + simple_hash(game_id))
        self.cadence = AttackCadence.draw(self.random)
        self.ratios = BehaviorRatios.draw(self.random)

        self.active = True
        self.player: Optional[PlayerView] = None
        self.behavior: Optional[BotBehavior] = None
        self.diplomacy: Optional[DiplomacyAdvisor] = None
        self.economy: Optional[EconomyAdvisor] = None
        self.mirv: Optional[MIRVAdvisor] = None
        self.military: Optional[MilitaryAdvisor] = None
        self._phase = AgentPhase.DORMANT

    @property
    def attack_rate(self) -> int:
        return self.cadence.attack_rate

    @property
    def attack_tick(self) -> int:
        return self.cadence.attack_tick

    @property
    def phase(self) -> AgentPhase:
        return self._phase

    def is_active(self) -> bool:
        return self.active

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def tick(self, ticks: int) -> None:
        if not self.active:
            return
        if not self.cadence.is_due(ticks):
            return

        if self.game.in_spawn_phase():
            self._phase = AgentPhase.SPAWNING
            self._request_spawn()
            return

        if self.player is None:
            self.player = next(
                (p for p in self.game.players() if p.id == self.nation.player_id), None
            )
            if self.player is None:
                self._phase = AgentPhase.UNINITIALIZED
                return

        if not self.player.is_alive():
            log_decision(f"{self.nation.name}: eliminated, going dormant for good")
            self.active = False
            self._phase = AgentPhase.DEAD
            return

        if self.behavior is None:
            self._phase = AgentPhase.WARMING
            self._warm_up(self.player)
            return

        self._phase = AgentPhase.ACTIVE
        if self.arbitration == "best_score":
            self._run_best_score()
        else:
            self._run_precedence()

    def _request_spawn(self) -> None:
        tile = self.random_spawn_land()
        if tile is None:
            log_warning(f"cannot spawn {self.nation.name}")
            return
        self.game.add_execution(
            SpawnRequest(
                player_id=self.nation.player_id,
                name=self.nation.name,
                player_type=self.nation.player_type,
                tile=tile,
            )
        )

    def _warm_up(self, player: PlayerView) -> None:
        self.behavior = BotBehavior(
            self.random,
            self.game,
            player,
            self.ratios.trigger,
            self.ratios.reserve,
            self.ratios.expand,
        )
        self.mirv = MIRVAdvisor(self._deps(player))
        self.diplomacy = DiplomacyAdvisor(self._deps(player))
        self.economy = EconomyAdvisor(self._deps(player), mirv=self.mirv)
        self.military = MilitaryAdvisor(self._deps(player), behavior=self.behavior)

        # Opening move: grab unclaimed land before anything else
        self.behavior.force_send_attack(self.game.terra_nullius())

    def _deps(self, player: PlayerView) -> AdvisorDependencies:
        return AdvisorDependencies(
            game=self.game, player=player, random=self.random, reserve=self.mirv
        )

    # ------------------------------------------------------------------
    # Arbitration
    # ------------------------------------------------------------------

    def steps(self) -> List[Tuple[str, Callable[[], None]]]:
        """Per-tick work in precedence order."""
        return [
            ("diplomacy", lambda: self._consult(self.diplomacy)),
            ("alliances", self._handle_alliances),
            ("economy", lambda: self._consult(self.economy)),
            ("mirv", lambda: self._consult(self.mirv)),
            ("military", lambda: self._consult(self.military)),
        ]

    def advisors(self) -> List[BaseAdvisor]:
        return [a for a in (self.diplomacy, self.economy, self.mirv, self.military) if a is not None]

    def _handle_alliances(self) -> None:
        self.behavior.handle_alliance_requests()
        self.behavior.handle_alliance_extension_requests()

    def _consult(self, advisor: Optional[BaseAdvisor]) -> None:
        if advisor is None:
            return
        rec = advisor.recommend()
        if rec is not None:
            self._execute(rec)

    def _run_precedence(self) -> None:
        for name, step in self.steps():
            try:
                step()
            except AdvisorStateError as exc:
                log_error(f"{self.nation.name}: {name} skipped: {exc}")

    def _run_best_score(self) -> None:
        self._handle_alliances()

        recommendations: List[Recommendation] = []
        for advisor in self.advisors():
            try:
                rec = advisor.recommend()
            except AdvisorStateError as exc:
                log_error(f"{self.nation.name}: {advisor.name} skipped: {exc}")
                continue
            if rec is not None:
                recommendations.append(rec)

        if not recommendations:
            return
        # min() keeps the earliest advisor on ties
        self._execute(min(recommendations, key=lambda r: r.sort_key()))

    def _execute(self, rec: Recommendation) -> None:
        rec.execute()
        log_success(f"{self.nation.name}: [{rec.advisor}] {rec.description}")

    # ------------------------------------------------------------------
    # Spawning
    # ------------------------------------------------------------------

    def random_spawn_land(self) -> Optional[TileRef]:
        """Random unowned land tile near the nation's spawn cell.

        Mountains are skipped half of the time.
        """
        cell = self.nation.spawn_cell
        delta = Config.SPAWN_SEARCH_RADIUS
        for _ in range(Config.SPAWN_ATTEMPTS):
            x = self.random.next_int(cell.x - delta, cell.x + delta + 1)
            y = self.random.next_int(cell.y - delta, cell.y + delta + 1)
            if not self.game.is_valid_coord(x, y):
                continue
            tile = self.game.ref(x, y)
            if not self.game.is_land(tile) or self.game.has_owner(tile):
                continue
            if self.game.terrain_type(tile) == TerrainType.MOUNTAIN and self.random.chance(2):
                continue
            return tile
        return None
