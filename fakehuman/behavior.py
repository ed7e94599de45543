"""Troop and alliance behaviour shared by computer-controlled players.

``BotBehavior`` owns the agent's current enemy and turns "attack X" decisions
into ``AttackRequest``s sized by the agent's behaviour ratios.
"""

from __future__ import annotations

from typing import List, Optional, Sequence, Tuple

from .game import GameView, Owner, PlayerView
from .pseudo_random import PseudoRandom
from .schemas import AttackRequest, EmojiRequest, PlayerType, Relation


EMOJI_HECKLE = ["🤡", "😡", "🖕", "💀", "🥱", "😈"]
EMOJI_ASSIST = "👍"

ENEMY_MEMORY_TICKS = 1000
ALLIANCE_EXTENSION_WINDOW = 300
ASSIST_RELATION_COST = -20


class BotBehavior:
    def __init__(
        self,
        random: PseudoRandom,
        game: GameView,
        player: PlayerView,
        trigger_ratio: float,
        reserve_ratio: float,
        expand_ratio: float,
    ):
        self.random = random
        self.game = game
        self.player = player
        self.trigger_ratio = trigger_ratio
        self.reserve_ratio = reserve_ratio
        self.expand_ratio = expand_ratio

        self.enemy: Optional[PlayerView] = None
        self.enemy_updated_at: Optional[int] = None

    # --- alliances -----------------------------------------------------

    def handle_alliance_requests(self) -> None:
        """Accept requests from players we are at least neutral with."""
        for request in self.player.incoming_alliance_requests():
            if self.player.relation(request.requestor) >= Relation.NEUTRAL:
                request.accept()
            else:
                request.reject()

    def handle_alliance_extension_requests(self) -> None:
        now = self.game.ticks()
        for alliance in self.player.alliances():
            if alliance.expires_at - now > ALLIANCE_EXTENSION_WINDOW:
                continue
            partner = self.game.player(alliance.other(self.player.id))
            if partner is None or self.player.relation(partner) < Relation.FRIENDLY:
                continue
            alliance.request_extension(self.player.id)

    # --- attacks -------------------------------------------------------

    def send_attack(self, target: Owner) -> None:
        """Attack with every troop above the reserve for this kind of target."""
        if target.is_player() and self.player.is_on_same_team(target):
            return
        ratio = self.reserve_ratio if target.is_player() else self.expand_ratio
        troops = self.player.troops() - int(self.player.max_troops() * ratio)
        if troops < 1:
            return
        self._attack(target, troops)

    def force_send_attack(self, target: Owner) -> None:
        """Attack with half our troops regardless of the reserve."""
        troops = self.player.troops() // 2
        if troops < 1:
            return
        self._attack(target, troops)

    def _attack(self, target: Owner, troops: int) -> None:
        self.game.add_execution(
            AttackRequest(player_id=self.player.id, target_id=target.id, troops=troops)
        )

    # --- enemy selection -----------------------------------------------

    def _set_enemy(self, enemy: PlayerView) -> None:
        self.enemy = enemy
        self.enemy_updated_at = self.game.ticks()

    def has_sufficient_troops(self) -> bool:
        return self.player.troops() >= self.player.max_troops() * self.trigger_ratio

    def select_enemy(self, enemies: Sequence[PlayerView]) -> Optional[PlayerView]:
        """Return the enemy to attack, choosing a new one when troops allow.

        ``enemies`` are the neighbouring players, weakest first.
        """
        if self.enemy is None and self.has_sufficient_troops():
            bots = [e for e in enemies if e.type == PlayerType.BOT]
            if bots:
                self._set_enemy(min(bots, key=lambda e: e.troops()))
            else:
                hostile: List[PlayerView] = [
                    e for e in enemies if self.player.relation(e) == Relation.HOSTILE
                ]
                if hostile:
                    self._set_enemy(hostile[0])

        # Never keep attacking someone we have since allied or teamed with
        if self.enemy is not None and self.player.is_friendly(self.enemy):
            self.enemy = None
        return self.enemy

    def forget_old_enemies(self) -> None:
        if self.enemy_updated_at is None:
            return
        if self.game.ticks() - self.enemy_updated_at > ENEMY_MEMORY_TICKS:
            self.enemy = None
            self.enemy_updated_at = None

    def ally_to_assist(self) -> Optional[Tuple[PlayerView, PlayerView]]:
        """The first FRIENDLY ally with a non-friendly target, and that target."""
        for ally in self.player.allies():
            if self.player.relation(ally) < Relation.FRIENDLY:
                continue
            for target in ally.targets():
                if target is self.player or self.player.is_friendly(target):
                    continue
                return ally, target
        return None

    def assist_ally(self, ally: PlayerView, target: PlayerView) -> None:
        """Adopt ``ally``'s target, paying for it in goodwill and thanks."""
        self.player.update_relation(ally, ASSIST_RELATION_COST)
        self._set_enemy(target)
        self.game.add_execution(
            EmojiRequest(player_id=self.player.id, recipient_id=ally.id, emoji=EMOJI_ASSIST)
        )

    def assist_allies(self) -> None:
        """Join the first friendly ally's fight against a non-friendly target."""
        found = self.ally_to_assist()
        if found is not None:
            self.assist_ally(*found)
