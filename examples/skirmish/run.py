"""Run FakeHuman agents through a bundled scenario.

By default the two-islands scenario runs for 600 ticks with the default
(precedence) arbitration:

    python examples/skirmish/run.py

Pick another scenario, arbitration mode, or turn on decision traces:

    python examples/skirmish/run.py --scenario spawn_race --ticks 400
    python examples/skirmish/run.py --arbitration best_score --verbose

Environment variables (see fakehuman.config.Config) tune the advisors, e.g.
`FAKEHUMAN_MIRV_COOLDOWN_TICKS` or `FAKEHUMAN_WARSHIP_BUILD_ODDS`.
"""

from __future__ import annotations

import argparse
from typing import Dict, List

from fakehuman import FakeHumanCoordinator, Skirmish
from fakehuman.config import ARBITRATION_MODES, Config
from fakehuman.game import InMemoryGame
from fakehuman.logging_utils import Color, LOG_TAG_INFO, colored, log_info
from fakehuman.scenario import ScenarioLoader
from fakehuman.schemas import ExecutionRequest


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="FakeHuman skirmish")
    parser.add_argument("--scenario", default="two_islands", help="Scenario name under examples/scenarios")
    parser.add_argument("--ticks", type=int, default=600, help="Number of ticks to simulate")
    parser.add_argument(
        "--arbitration",
        choices=ARBITRATION_MODES,
        default=None,
        help="How advisor recommendations are arbitrated (defaults to FAKEHUMAN_ARBITRATION)",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Print every advisor decision and executed recommendation",
    )
    return parser.parse_args()


def summarize(game: InMemoryGame) -> None:
    print(colored(f"\n{LOG_TAG_INFO} Final standings", Color.CYAN, bold=True))
    for player in sorted(game.all_players(), key=lambda p: -p.num_tiles_owned()):
        structures = ", ".join(
            f"{unit_type.value} x{count}"
            for unit_type, count in _unit_counts(player).items()
        )
        print(
            f"  {player.name:<16} {player.type.value:<10} tiles={player.num_tiles_owned():<4} "
            f"gold={player.gold():>12,}  {structures or '-'}"
        )


def _unit_counts(player) -> Dict:
    counts: Dict = {}
    for unit in player.units():
        counts[unit.type] = counts.get(unit.type, 0) + 1
    return counts


def main(args: argparse.Namespace) -> None:
    if args.verbose:
        Config.VERBOSE = True
    Config.validate()
    print(Config.display())

    game, nations = ScenarioLoader().load(args.scenario)
    coordinators: List[FakeHumanCoordinator] = [
        FakeHumanCoordinator(game.game_id, nation, game, arbitration=args.arbitration)
        for nation in nations
    ]
    for c in coordinators:
        log_info(f"{c.nation.name}: acts every {c.attack_rate} ticks (offset {c.attack_tick})")

    def report_strikes(tick: int, applied: List[ExecutionRequest]) -> None:
        for request in applied:
            if request.kind in ("nuke", "mirv"):
                log_info(f"tick {tick}: {request.player_id} launched {request.kind} at tile {request.tile}")

    skirmish = Skirmish(game, coordinators, tick_listeners=[report_strikes])
    counts = skirmish.run(args.ticks)

    print(colored(f"\n{LOG_TAG_INFO} Requests applied", Color.CYAN, bold=True))
    for kind, count in sorted(counts.items()):
        print(f"  {kind:<16} {count}")
    summarize(game)


if __name__ == "__main__":
    main(parse_args())
