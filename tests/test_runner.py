"""Tests for the Skirmish tick loop."""

from fakehuman.coordinator import AgentPhase, FakeHumanCoordinator
from fakehuman.runner import Skirmish
from fakehuman.scenario import load_scenario


SPAWN_RACE = {
    "name": "Tiny race",
    "game_id": "tiny",
    "spawn_phase_ticks": 100,
    "map": ["." * 12] + ["." + "#" * 10 + "."] * 10 + ["." * 12],
    "nations": [
        {"player_id": "a", "name": "A", "spawn_cell": {"x": 3, "y": 3}},
        {"player_id": "b", "name": "B", "spawn_cell": {"x": 8, "y": 8}},
    ],
}


def make_skirmish(data=SPAWN_RACE):
    game, nations = load_scenario(data)
    coordinators = [FakeHumanCoordinator(game.game_id, n, game) for n in nations]
    return game, coordinators, Skirmish(game, coordinators)


def test_agents_spawn_then_warm_up():
    game, coordinators, skirmish = make_skirmish()
    counts = skirmish.run(260)

    assert game.ticks() == 260
    assert counts["spawn"] >= 2
    for coordinator in coordinators:
        assert coordinator.player is not None
        assert coordinator.phase in (AgentPhase.WARMING, AgentPhase.ACTIVE)


def test_listeners_see_every_tick_and_failures_are_contained(capsys):
    _, _, skirmish = make_skirmish()
    seen = []

    def broken(tick, applied):
        raise RuntimeError("boom")

    skirmish.add_listener(lambda tick, applied: seen.append(tick))
    skirmish.add_listener(broken)
    skirmish.run(3)

    assert seen == [0, 1, 2]
    assert "tick listener failed at tick 0: boom" in capsys.readouterr().out


def test_same_match_replays_identically():
    game_a, _, skirmish_a = make_skirmish()
    game_b, _, skirmish_b = make_skirmish()
    skirmish_a.run(200)
    skirmish_b.run(200)

    assert [r.model_dump() for r in game_a.executions] == [r.model_dump() for r in game_b.executions]
