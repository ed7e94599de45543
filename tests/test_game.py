"""Tests for the in-memory reference engine."""

import pytest

from fakehuman.environment import GameMap
from fakehuman.game import InMemoryGame, relation_from_value
from fakehuman.schemas import (
    ConstructionRequest,
    MirvRequest,
    PlayerType,
    Relation,
    SpawnRequest,
    UnitType,
)


def make_island_game() -> InMemoryGame:
    return InMemoryGame(
        GameMap.from_rows(
            [
                "........",
                ".######.",
                ".######.",
                ".##^###.",
                "........",
            ]
        ),
        game_id="test",
    )


def test_map_parsing_and_geometry():
    game = make_island_game()
    assert game.width() == 8 and game.height() == 5
    assert game.num_land_tiles() == 18
    tile = game.ref(3, 3)
    assert (game.x(tile), game.y(tile)) == (3, 3)
    assert game.is_land(tile)
    assert game.is_ocean(game.ref(0, 0))
    assert game.is_ocean_shore(game.ref(1, 1))
    assert not game.is_ocean_shore(game.ref(3, 2))
    assert game.euclidean_dist_squared(game.ref(0, 0), game.ref(3, 4)) == 25
    with pytest.raises(ValueError):
        game.ref(8, 0)


def test_unknown_terrain_symbol_is_rejected():
    with pytest.raises(ValueError):
        GameMap.from_rows(["#?#"])


def test_ownership_and_liveness():
    game = make_island_game()
    alpha = game.add_player("alpha")
    assert game.players() == []

    claimed = game.conquer_rect(alpha, 1, 1, 4, 3)
    assert claimed == 6
    assert game.players() == [alpha]
    assert game.owner(game.ref(2, 2)) is alpha
    assert not game.owner(game.ref(5, 2)).is_player()
    assert game.player_by_small_id(0) is game.terra_nullius()

    beta = game.add_player("beta")
    game.conquer_rect(beta, 4, 1, 7, 3)
    assert alpha.shares_border_with(beta)
    assert game.ref(3, 1) in alpha.border_tiles()

    for tile in alpha.tiles():
        game.relinquish(tile)
    assert not alpha.is_alive()
    assert game.players() == [beta]
    assert game.player("alpha") is alpha


def test_spawn_request_creates_player_on_next_tick():
    game = make_island_game()
    game.add_execution(
        SpawnRequest(player_id="red", name="Red", player_type=PlayerType.FAKEHUMAN, tile=game.ref(3, 2))
    )
    assert game.player("red") is None

    applied = game.execute_next_tick()
    assert len(applied) == 1
    assert game.ticks() == 1
    red = game.player("red")
    assert red.type == PlayerType.FAKEHUMAN
    assert game.owner(game.ref(3, 2)) is red
    assert red.num_tiles_owned() > 1


def test_construction_pays_cost_and_respects_rules():
    game = make_island_game()
    alpha = game.add_player("alpha", gold=300_000)
    game.conquer_rect(alpha, 1, 1, 7, 4)

    inland = game.ref(3, 2)
    shore = game.ref(1, 1)
    assert not alpha.can_build(UnitType.PORT, inland)
    assert alpha.can_build(UnitType.PORT, shore)
    assert not alpha.can_build(UnitType.CITY, game.ref(0, 0))

    game.add_execution(ConstructionRequest(player_id="alpha", unit_type=UnitType.CITY, tile=inland))
    game.execute_next_tick()
    assert alpha.unit_count(UnitType.CITY) == 1
    assert alpha.gold() == 300_000 - game.unit_cost(UnitType.CITY, alpha)


def test_mirv_needs_silo_and_enemy_tile():
    game = make_island_game()
    alpha = game.add_player("alpha", gold=50_000_000)
    beta = game.add_player("beta")
    game.conquer_rect(alpha, 1, 1, 3, 4)
    game.conquer_rect(beta, 4, 1, 7, 4)
    enemy_tile = game.ref(5, 2)

    assert not alpha.can_build(UnitType.MIRV, enemy_tile)
    silo = game.build_unit(alpha, UnitType.MISSILE_SILO, game.ref(1, 1))
    assert alpha.can_build(UnitType.MIRV, enemy_tile)
    assert not alpha.can_build(UnitType.MIRV, game.ref(2, 2))

    game.add_execution(MirvRequest(player_id="alpha", tile=enemy_tile))
    game.execute_next_tick()
    mirvs = alpha.units(UnitType.MIRV)
    assert len(mirvs) == 1
    assert mirvs[0].tile == silo.tile
    assert mirvs[0].target_tile == enemy_tile


def test_relation_buckets_and_clamping():
    assert relation_from_value(-51) == Relation.HOSTILE
    assert relation_from_value(-50) == Relation.DISTRUSTFUL
    assert relation_from_value(0) == Relation.NEUTRAL
    assert relation_from_value(50) == Relation.FRIENDLY

    game = make_island_game()
    alpha = game.add_player("alpha")
    beta = game.add_player("beta")
    alpha.update_relation(beta, -500)
    assert alpha.relation_value(beta) == -100
    assert alpha.relation(beta) == Relation.HOSTILE
    assert beta.relation(alpha) == Relation.NEUTRAL


def test_alliance_requests_and_embargoes():
    game = make_island_game()
    alpha = game.add_player("alpha")
    beta = game.add_player("beta")

    assert alpha.can_send_alliance_request(beta)
    alpha.create_alliance_request(beta)
    assert not alpha.can_send_alliance_request(beta)

    [request] = beta.incoming_alliance_requests()
    request.accept()
    assert beta.incoming_alliance_requests() == []
    assert alpha.is_friendly(beta)
    assert alpha.allies() == [beta]

    alpha.break_alliance(alpha.alliance_with(beta))
    assert not alpha.is_friendly(beta)

    alpha.add_embargo(beta)
    assert alpha.has_embargo_against(beta)
    assert not beta.has_embargo_against(alpha)
    alpha.stop_embargo(beta)
    assert not alpha.has_embargo_against(beta)


def test_teammates_are_friendly_but_not_to_themselves():
    game = make_island_game()
    alpha = game.add_player("alpha", team="blue")
    beta = game.add_player("beta", team="blue")
    gamma = game.add_player("gamma", team="red")
    assert alpha.is_on_same_team(beta)
    assert alpha.is_friendly(beta)
    assert not alpha.is_on_same_team(gamma)
    assert not alpha.is_on_same_team(alpha)
    assert not alpha.is_on_same_team(game.terra_nullius())
