"""Tests for the military advisor's border analysis, attacks and nukes."""

from fakehuman.advisors import AdvisorDependencies, MilitaryAdvisor, military
from fakehuman.behavior import EMOJI_ASSIST, EMOJI_HECKLE, BotBehavior
from fakehuman.environment import GameMap
from fakehuman.game import InMemoryGame
from fakehuman.schemas import AdvisorPriority, PlayerType, UnitType


def make_military(scripted_random, game, me, chances=(), with_behavior=True):
    random = scripted_random(chances)
    behavior = BotBehavior(random, game, me, 0.5, 0.3, 0.1) if with_behavior else None
    advisor = MilitaryAdvisor(
        AdvisorDependencies(game=game, player=me, random=random), behavior=behavior
    )
    return advisor


def kinds(game):
    return [r.kind for r in game.executions]


def make_neighbours(enemy_type=PlayerType.HUMAN, width=10, height=10, split=5, **me_kwargs):
    game = InMemoryGame(GameMap(width=width, height=height))
    me = game.add_player("me", troops=1000, max_troops=1000, **me_kwargs)
    enemy = game.add_player("enemy", player_type=enemy_type, troops=500, max_troops=1000)
    game.conquer_rect(me, 0, 0, split, height)
    game.conquer_rect(enemy, split, 0, width, height)
    return game, me, enemy


def test_unclaimed_neighbour_land_is_taken_first(scripted_random):
    game = InMemoryGame(GameMap(width=10, height=10))
    me = game.add_player("me", troops=1000, max_troops=1000)
    game.conquer_rect(me, 2, 2, 5, 5)
    advisor = make_military(scripted_random, game, me)

    rec = advisor.recommend()
    assert rec.priority == AdvisorPriority.HIGH
    assert rec.score == 80
    assert rec.description == "Attack unclaimed territory"
    assert advisor.random.chance_calls == [20]
    assert game.executions == []

    rec.execute()
    [attack] = game.executions
    assert attack.kind == "attack"
    assert attack.target_id is None
    assert attack.troops == 900


def test_no_enemy_border_usually_does_nothing(scripted_random):
    game = InMemoryGame(GameMap(width=6, height=6))
    me = game.add_player("me", troops=1000)
    game.conquer_rect(me, 0, 0, 6, 6)
    advisor = make_military(scripted_random, game, me)

    assert advisor.enemy_border_tiles() == []
    assert advisor.recommend() is None
    assert advisor.random.chance_calls == [10]


def test_alliance_request_to_neighbour(scripted_random):
    game, me, enemy = make_neighbours()
    advisor = make_military(scripted_random, game, me, chances=[False, True])

    rec = advisor.recommend()
    assert rec.priority == AdvisorPriority.LOW
    assert rec.score == 30
    assert rec.description == "Alliance request to enemy"
    assert enemy.incoming_alliance_requests() == []

    rec.execute()
    [request] = enemy.incoming_alliance_requests()
    assert request.requestor is me


def test_without_behavior_no_enemy_is_chosen(scripted_random):
    game, me, _ = make_neighbours()
    advisor = make_military(scripted_random, game, me, with_behavior=False)
    assert advisor.recommend() is None


def test_neutral_neighbour_is_left_alone(scripted_random):
    game, me, _ = make_neighbours()
    advisor = make_military(scripted_random, game, me)
    assert advisor.recommend() is None


def test_direct_attack_on_bot_neighbour(scripted_random):
    game, me, enemy = make_neighbours(enemy_type=PlayerType.BOT)
    advisor = make_military(scripted_random, game, me)

    rec = advisor.recommend()
    assert rec.priority == AdvisorPriority.HIGH
    assert rec.score == 150
    assert rec.description == "Direct attack on enemy"

    rec.execute()
    # Bots get neither taunts nor nukes
    assert kinds(game) == ["attack"]
    assert game.executions[0].target_id == "enemy"
    assert game.executions[0].troops == 700


def test_direct_attack_on_hostile_human_taunts_and_nukes(scripted_random):
    game, me, enemy = make_neighbours(width=80, height=40, split=20, gold=1_000_000)
    game.build_unit(me, UnitType.MISSILE_SILO, game.ref(5, 5))
    game.build_unit(enemy, UnitType.CITY, game.ref(50, 20))
    me.update_relation(enemy, -80)
    advisor = make_military(scripted_random, game, me)

    rec = advisor.recommend()
    assert rec.description == "Direct attack on enemy"
    assert game.executions == []
    assert len(advisor.nuke_memory) == 0

    rec.execute()
    assert kinds(game) == ["emoji", "nuke", "attack"]
    emoji, nuke, _ = game.executions
    assert emoji.recipient_id == "enemy"
    assert emoji.emoji in EMOJI_HECKLE
    assert nuke.unit_type == UnitType.ATOM_BOMB
    assert game.owner(nuke.tile) is enemy
    assert advisor.nuke_memory.tiles() == [nuke.tile]


def test_no_nuke_without_silo_or_against_teammates(scripted_random):
    game, me, enemy = make_neighbours(width=80, height=40, split=20, gold=1_000_000)
    game.build_unit(enemy, UnitType.CITY, game.ref(50, 20))
    advisor = make_military(scripted_random, game, me)
    assert advisor.plan_nuke(enemy) is None

    game.build_unit(me, UnitType.MISSILE_SILO, game.ref(5, 5))
    assert advisor.plan_nuke(enemy) is not None

    me.team = enemy.team = "blue"
    assert advisor.plan_nuke(enemy) is None


def test_hydrogen_bomb_when_gold_allows(scripted_random):
    game, me, _ = make_neighbours(gold=6_000_000)
    advisor = make_military(scripted_random, game, me)
    assert advisor.nuke_type() == UnitType.HYDROGEN_BOMB

    me.remove_gold(2_000_000)
    assert advisor.nuke_type() == UnitType.ATOM_BOMB


def test_emoji_cooldown(scripted_random):
    game, me, enemy = make_neighbours()
    advisor = make_military(scripted_random, game, me)

    advisor.maybe_send_emoji(enemy)
    game.set_ticks(300)
    advisor.maybe_send_emoji(enemy)
    assert kinds(game) == ["emoji"]

    game.set_ticks(301)
    advisor.maybe_send_emoji(enemy)
    assert kinds(game) == ["emoji", "emoji"]


ISLANDS = [
    ".............",
    ".####...####.",
    ".####...####.",
    ".####...####.",
    ".............",
]


def test_boat_attack_on_enemy_across_water(scripted_random):
    game = InMemoryGame(GameMap.from_rows(ISLANDS))
    me = game.add_player("me", troops=1000, max_troops=1000)
    neighbour = game.add_player("neighbour")
    far = game.add_player("far")
    game.conquer_rect(me, 1, 1, 3, 4)
    game.conquer_rect(neighbour, 3, 1, 5, 4)
    game.conquer_rect(far, 8, 1, 12, 4)
    advisor = make_military(scripted_random, game, me)
    advisor.behavior.enemy = far
    advisor.behavior.enemy_updated_at = game.ticks()

    rec = advisor.recommend()
    assert rec.priority == AdvisorPriority.NORMAL
    assert rec.score == 120
    assert rec.description == "Boat attack on far"

    rec.execute()
    assert kinds(game) == ["emoji", "transport_ship"]
    boat = game.executions[1]
    assert boat.target_id == "far"
    assert game.owner(boat.tile) is far
    assert boat.troops == 200


def test_random_boat_lands_on_other_island(scripted_random, monkeypatch):
    monkeypatch.setattr(military, "BOAT_SEARCH_RADIUS", 12)
    game = InMemoryGame(GameMap.from_rows(ISLANDS))
    me = game.add_player("me", troops=1000)
    game.conquer_rect(me, 1, 1, 5, 4)
    advisor = make_military(scripted_random, game, me, chances=[True])

    rec = advisor.recommend()
    assert rec.priority == AdvisorPriority.NORMAL
    assert rec.score == 60

    rec.execute()
    [boat] = game.executions
    assert boat.kind == "transport_ship"
    assert boat.target_id is None
    assert game.x(boat.tile) >= 8


def add_ally(game, me, targets):
    ally = game.add_player("ally", troops=500, max_troops=1000)
    game.create_alliance(me, ally)
    me.update_relation(ally, 60)
    ally.set_targets(targets)
    return ally


def test_recommending_an_ally_assist_leaves_the_game_untouched(scripted_random):
    game, me, _ = make_neighbours()
    foe = game.add_player("foe", troops=500)
    ally = add_ally(game, me, [foe])
    advisor = make_military(scripted_random, game, me)

    # The ally's target is out of reach, so there is nothing to execute
    assert advisor.recommend() is None
    assert game.executions == []
    assert me.relation_value(ally) == 60
    assert advisor.behavior.enemy is None


def test_ally_assist_is_paid_for_only_on_execution(scripted_random):
    game, me, enemy = make_neighbours()
    ally = add_ally(game, me, [enemy])
    advisor = make_military(scripted_random, game, me)

    rec = advisor.recommend()
    assert rec.description == "Direct attack on enemy (assisting ally)"
    assert game.executions == []
    assert me.relation_value(ally) == 60

    rec.execute()
    assert kinds(game) == ["emoji", "emoji", "attack"]
    thanks, taunt, attack = game.executions
    assert (thanks.recipient_id, thanks.emoji) == ("ally", EMOJI_ASSIST)
    assert taunt.recipient_id == "enemy"
    assert attack.target_id == "enemy"
    assert me.relation_value(ally) == 40
    assert advisor.behavior.enemy is enemy
