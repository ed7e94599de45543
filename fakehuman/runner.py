"""Tick loop that runs FakeHuman coordinators against an in-memory game."""

from __future__ import annotations

from typing import Callable, Dict, List, Optional, Sequence

from .coordinator import FakeHumanCoordinator
from .game import InMemoryGame
from .logging_utils import colored, Color, LOG_TAG_INFO, log_error
from .schemas import ExecutionRequest

TickListener = Callable[[int, List[ExecutionRequest]], None]


class Skirmish:
    """Drive a set of coordinators tick by tick.

    Each tick every coordinator sees the same clock value, then the engine
    applies whatever they submitted and the listeners are notified with the
    requests applied on that tick.
    """

    def __init__(
        self,
        game: InMemoryGame,
        coordinators: Sequence[FakeHumanCoordinator],
        tick_listeners: Optional[Sequence[TickListener]] = None,
    ):
        self.game = game
        self.coordinators = list(coordinators)
        self.tick_listeners = list(tick_listeners or [])

    def add_listener(self, listener: TickListener) -> None:
        self.tick_listeners.append(listener)

    def step(self) -> List[ExecutionRequest]:
        tick = self.game.ticks()
        for coordinator in self.coordinators:
            coordinator.tick(tick)

        applied = self.game.execute_next_tick()

        for listener in self.tick_listeners:
            try:
                listener(tick, applied)
            except Exception as exc:  # a failing listener must not end the match
                log_error(f"tick listener failed at tick {tick}: {exc}")
        return applied

    def run(self, num_ticks: int) -> Dict[str, int]:
        """Run ``num_ticks`` ticks and return how many requests of each kind were applied."""
        print(colored(f"\n{LOG_TAG_INFO} Running skirmish for {num_ticks} ticks", Color.CYAN, bold=True))
        counts: Dict[str, int] = {}
        for _ in range(num_ticks):
            for request in self.step():
                counts[request.kind] = counts.get(request.kind, 0) + 1

        alive = sum(1 for c in self.coordinators if c.is_active())
        print(colored(f"{LOG_TAG_INFO} Finished at tick {self.game.ticks()}: {alive} agents active", Color.CYAN))
        return counts
