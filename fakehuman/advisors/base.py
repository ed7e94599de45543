"""
BaseAdvisor interface for FakeHuman strategic advisors.

Each advisor looks at the game from one angle (diplomacy, economy, strategic
strikes, military) and proposes at most one ``Recommendation`` per tick. The
coordinator decides what actually runs.

Design Philosophy:
- Advisors are created per agent and never share state
- ``recommend()`` has no side effects on the game; executing the returned
  recommendation does
- Spending goes through ``can_afford_with_reserve`` so the MIRV reserve holds
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional, Protocol

from ..game import GameView, PlayerView
from ..pseudo_random import PseudoRandom
from ..schemas import Recommendation, UnitType


class AdvisorStateError(RuntimeError):
    """An advisor was used before its player was bound."""


class ReserveProvider(Protocol):
    """Anything that can tell how much gold is free to spend."""

    def get_spendable_gold(self) -> int:
        ...


@dataclass
class AdvisorDependencies:
    game: GameView
    player: Optional[PlayerView]
    random: PseudoRandom
    reserve: Optional[ReserveProvider] = None


class BaseAdvisor(ABC):
    """Abstract base class for every strategic advisor."""

    name = "advisor"

    def __init__(self, deps: AdvisorDependencies):
        self.game = deps.game
        self.random = deps.random
        self.reserve = deps.reserve
        self._player = deps.player

    @property
    def player(self) -> PlayerView:
        if self._player is None:
            raise AdvisorStateError(f"{type(self).__name__} used before its player was bound")
        return self._player

    def cost(self, unit_type: UnitType) -> int:
        return self.game.unit_cost(unit_type, self.player)

    def spendable_gold(self) -> int:
        """Gold left after the MIRV reserve (all of it without a reserve provider)."""
        if self.reserve is None:
            return self.player.gold()
        return self.reserve.get_spendable_gold()

    def can_afford_with_reserve(self, cost: int) -> bool:
        return self.spendable_gold() >= cost

    def recommendation(self, **kwargs) -> Recommendation:
        """Build a Recommendation tagged with this advisor's name."""
        return Recommendation(advisor=self.name, **kwargs)

    @abstractmethod
    def recommend(self) -> Optional[Recommendation]:
        """Analyse the game and propose at most one action."""
        pass
