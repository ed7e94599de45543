"""Tests for spatial helpers and territory sampling."""

from fakehuman.environment import (
    GameMap,
    array_sampler,
    bounding_box_ring,
    calculate_bounding_box,
    calculate_territory_center,
    closest_two_tiles,
    rand_coastal_tile_array,
    rand_territory_tile,
    rand_territory_tile_array,
    random_boat_target,
    within_distance,
)
from fakehuman.game import InMemoryGame
from fakehuman.pseudo_random import PseudoRandom


class NoDrawRandom(PseudoRandom):
    """Fails the test if any integer is drawn."""

    def __init__(self):
        super().__init__(0)

    def next_int(self, lo, hi):
        raise AssertionError("unexpected random draw")


def make_game(width=10, height=10) -> InMemoryGame:
    return InMemoryGame(GameMap(width=width, height=height))


def test_bounding_box_of_no_tiles_is_none():
    game = make_game()
    assert calculate_bounding_box(game, []) is None


def test_bounding_box_covers_tiles():
    game = make_game()
    box = calculate_bounding_box(game, [game.ref(2, 7), game.ref(5, 1), game.ref(3, 3)])
    assert (box.min_x, box.min_y, box.max_x, box.max_y) == (2, 1, 5, 7)
    assert box.contains(5, 7)
    assert not box.contains(6, 7)


def test_array_sampler_short_list_yields_everything_in_order_without_drawing():
    items = [4, 8, 15]
    assert list(array_sampler(items, 3, NoDrawRandom())) == items
    assert list(array_sampler(items, 10, NoDrawRandom())) == items
    assert list(array_sampler([], 5, NoDrawRandom())) == []


def test_array_sampler_long_list_yields_distinct_items():
    items = list(range(20))
    picked = list(array_sampler(items, 5, PseudoRandom(11)))
    assert len(picked) == 5
    assert len(set(picked)) == 5
    assert set(picked) <= set(items)


def test_rand_territory_tile_only_returns_owned_tiles():
    game = make_game()
    player = game.add_player("p1")
    game.conquer_rect(player, 2, 2, 6, 6)
    random = PseudoRandom(3)

    for _ in range(30):
        tile = rand_territory_tile(game, player, random)
        assert tile is not None
        assert game.owner(tile) is player


def test_rand_territory_tile_box_bounds_are_inclusive():
    game = make_game()
    player = game.add_player("p1")
    left, right = game.ref(2, 4), game.ref(3, 4)
    game.conquer(player, left)
    game.conquer(player, right)
    random = PseudoRandom(9)

    seen = {rand_territory_tile(game, player, random) for _ in range(60)}
    assert seen == {left, right}


def test_rand_territory_tile_without_territory_returns_none():
    game = make_game()
    player = game.add_player("p1")
    assert rand_territory_tile(game, player, PseudoRandom(1)) is None
    assert rand_territory_tile_array(game, player, PseudoRandom(1), 5) == []


def test_rand_territory_tile_array_returns_at_most_n():
    game = make_game()
    player = game.add_player("p1")
    # Leave a margin so the territory has a border to sample around
    game.conquer_rect(player, 1, 1, 9, 9)
    tiles = rand_territory_tile_array(game, player, PseudoRandom(2), 7)
    assert len(tiles) == 7
    assert all(game.owner(t) is player for t in tiles)


def test_rand_territory_tile_array_returns_a_small_territory_whole():
    game = make_game()
    player = game.add_player("p1")
    owned = [game.ref(2, 2), game.ref(3, 2), game.ref(7, 5)]
    for tile in owned:
        game.conquer(player, tile)
    random = PseudoRandom(4)

    tiles = rand_territory_tile_array(game, player, random, 25)
    assert sorted(tiles) == sorted(owned)
    assert random.next_int(0, 1000) == PseudoRandom(4).next_int(0, 1000)


def test_rand_coastal_tile_array_only_returns_shore_border_tiles():
    game = InMemoryGame(
        GameMap.from_rows(
            [
                "......",
                ".####.",
                ".####.",
                ".####.",
                "......",
            ]
        )
    )
    player = game.add_player("p1")
    game.conquer_rect(player, 1, 1, 5, 4)

    tiles = rand_coastal_tile_array(game, player, PseudoRandom(4), 25)
    # Fewer shore tiles than requested: every one is returned
    assert len(tiles) == 10
    assert all(game.is_ocean_shore(t) for t in tiles)
    assert game.ref(2, 2) not in tiles


def test_bounding_box_ring():
    game = make_game(5, 5)
    center = game.ref(2, 2)
    assert bounding_box_ring(game, center, 0) == [center]

    ring = bounding_box_ring(game, center, 1)
    assert len(ring) == 8
    assert center not in ring

    # Clipped at the map edge
    corner_ring = bounding_box_ring(game, game.ref(0, 0), 1)
    assert sorted(corner_ring) == sorted([game.ref(1, 0), game.ref(0, 1), game.ref(1, 1)])


def test_closest_two_tiles_and_distance():
    game = make_game()
    xs = [game.ref(0, 0), game.ref(4, 4)]
    ys = [game.ref(9, 9), game.ref(5, 4)]
    assert closest_two_tiles(game, xs, ys) == (game.ref(4, 4), game.ref(5, 4))
    assert closest_two_tiles(game, [], ys) is None
    assert closest_two_tiles(game, xs, []) is None

    assert within_distance(game, game.ref(0, 0), game.ref(3, 4), 5)
    assert not within_distance(game, game.ref(0, 0), game.ref(3, 4), 4.9)


def test_territory_center_snaps_to_owned_tile():
    game = make_game()
    player = game.add_player("p1")
    assert calculate_territory_center(game, player) is None

    game.conquer_rect(player, 1, 1, 4, 4)
    assert calculate_territory_center(game, player) == game.ref(2, 2)


def test_random_boat_target_skips_own_and_friendly_land():
    game = InMemoryGame(
        GameMap.from_rows(
            [
                "##....##",
                "##....##",
            ]
        )
    )
    player = game.add_player("p1")
    game.conquer_rect(player, 0, 0, 2, 2)
    src = game.ref(1, 0)

    target = random_boat_target(game, player, PseudoRandom(8), src, 10)
    assert target is not None
    assert game.is_land(target)
    assert game.x(target) >= 6
