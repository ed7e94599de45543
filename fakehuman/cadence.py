"""Per-agent activation cadence and behaviour ratios.

An agent only acts on ticks where ``tick % attack_rate == attack_tick``. Both
numbers, and the three troop ratios handed to ``BotBehavior``, are drawn once
from the agent's own random stream so agents sharing a game act out of phase.
"""

from __future__ import annotations

from dataclasses import dataclass

from .pseudo_random import PseudoRandom


ATTACK_RATE_RANGE = (40, 80)
TRIGGER_RATIO_RANGE = (50, 60)
RESERVE_RATIO_RANGE = (30, 40)
EXPAND_RATIO_RANGE = (10, 20)


@dataclass(frozen=True)
class AttackCadence:
    attack_rate: int
    attack_tick: int

    @classmethod
    def draw(cls, random: PseudoRandom) -> "AttackCadence":
        attack_rate = random.next_int(*ATTACK_RATE_RANGE)
        attack_tick = random.next_int(0, attack_rate)
        return cls(attack_rate=attack_rate, attack_tick=attack_tick)

    def is_due(self, tick: int) -> bool:
        return tick % self.attack_rate == self.attack_tick


@dataclass(frozen=True)
class BehaviorRatios:
    """Troop ratios (fractions of max troops) used when attacking.

    trigger: troops needed before picking a fight with a neighbour
    reserve: troops kept home when attacking a player
    expand: troops kept home when expanding into unclaimed land
    """

    trigger: float
    reserve: float
    expand: float

    @classmethod
    def draw(cls, random: PseudoRandom) -> "BehaviorRatios":
        # Draw order matters for replay
        trigger = random.next_int(*TRIGGER_RATIO_RANGE) / 100
        reserve = random.next_int(*RESERVE_RATIO_RANGE) / 100
        expand = random.next_int(*EXPAND_RATIO_RANGE) / 100
        return cls(trigger=trigger, reserve=reserve, expand=expand)
