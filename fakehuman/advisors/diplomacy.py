"""
Diplomacy advisor: embargoes, relation bookkeeping and (future) betrayals.

Relation changes caused by embargoes are tracked in a small ledger so each
penalty is applied exactly once and reversed exactly once. All transitions are
applied from the recommendation's ``execute`` and are guarded, so running it
twice in a tick changes nothing the second time.
"""

from __future__ import annotations

from typing import List, Optional, Set

from ..config import Config
from ..game import PlayerView
from ..logging_utils import log_decision
from ..schemas import AdvisorPriority, Recommendation, Relation
from .base import AdvisorDependencies, BaseAdvisor


DIPLOMACY_SCORE = 50
BETRAYAL_SCORE = 200


class DiplomacyAdvisor(BaseAdvisor):
    name = "diplomacy"

    def __init__(self, deps: AdvisorDependencies, *, embargo_penalty: Optional[int] = None):
        super().__init__(deps)
        self.embargo_penalty = (
            Config.EMBARGO_RELATION_PENALTY if embargo_penalty is None else embargo_penalty
        )
        # Ids of opponents whose embargo penalty is currently applied
        self.penalized: Set[str] = set()

    def _others(self) -> List[PlayerView]:
        return [p for p in self.game.players() if p.id != self.player.id]

    # --- detection -----------------------------------------------------

    def pending_penalties(self) -> List[PlayerView]:
        return [
            o
            for o in self._others()
            if o.has_embargo_against(self.player) and o.id not in self.penalized
        ]

    def pending_penalty_lifts(self) -> List[PlayerView]:
        return [
            o
            for o in self._others()
            if not o.has_embargo_against(self.player) and o.id in self.penalized
        ]

    def should_start_embargo(self, other: PlayerView) -> bool:
        return (
            self.player.relation(other) <= Relation.HOSTILE
            and not self.player.has_embargo_against(other)
            and not self.player.is_on_same_team(other)
        )

    def should_stop_embargo(self, other: PlayerView) -> bool:
        # Sticky: an embargo survives DISTRUSTFUL and only ends at NEUTRAL
        return self.player.relation(other) >= Relation.NEUTRAL and self.player.has_embargo_against(other)

    def has_pending_transitions(self) -> bool:
        if self.pending_penalties() or self.pending_penalty_lifts():
            return True
        return any(
            self.should_start_embargo(o) or self.should_stop_embargo(o) for o in self._others()
        )

    def betrayal_candidates(self) -> List[PlayerView]:
        """Allies we could, in principle, turn on."""
        return self.player.allies()

    def should_betray(self, candidate: PlayerView) -> bool:
        """Policy hook for strategic betrayal. Never betrays for now."""
        return False

    # --- effects -------------------------------------------------------

    def update_relations_from_embargoes(self) -> None:
        for other in self._others():
            embargoed = other.has_embargo_against(self.player)
            if embargoed and other.id not in self.penalized:
                self.player.update_relation(other, self.embargo_penalty)
                self.penalized.add(other.id)
            elif not embargoed and other.id in self.penalized:
                self.player.update_relation(other, -self.embargo_penalty)
                self.penalized.discard(other.id)

    def handle_embargoes_to_hostile_nations(self) -> None:
        for other in self._others():
            if self.should_start_embargo(other):
                log_decision(f"{self.player.name}: embargo on {other.name}")
                self.player.add_embargo(other, False)
            elif self.should_stop_embargo(other):
                log_decision(f"{self.player.name}: lifting embargo on {other.name}")
                self.player.stop_embargo(other)

    def apply_transitions(self) -> None:
        self.update_relations_from_embargoes()
        self.handle_embargoes_to_hostile_nations()

    def _betray(self, target: PlayerView) -> None:
        self.apply_transitions()
        alliance = self.player.alliance_with(target)
        if alliance is not None:
            self.player.break_alliance(alliance)

    # --- recommendation ------------------------------------------------

    def recommend(self) -> Optional[Recommendation]:
        for candidate in self.betrayal_candidates():
            if self.should_betray(candidate):
                return self.recommendation(
                    execute=lambda target=candidate: self._betray(target),
                    score=BETRAYAL_SCORE,
                    priority=AdvisorPriority.CRITICAL,
                    description=f"Strategic betrayal of {candidate.id}",
                )

        if not self.has_pending_transitions():
            return None

        return self.recommendation(
            execute=self.apply_transitions,
            score=DIPLOMACY_SCORE,
            priority=AdvisorPriority.NORMAL,
            description="Update embargoes and relations",
        )
