"""Randomized spatial sampling over a player's territory.

All helpers use rejection sampling with fixed attempt caps; running out of
attempts is a normal outcome and returns ``None`` (or a short list), never an
error. Every draw goes through the caller's ``PseudoRandom`` so results replay.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Iterator, List, Optional, Sequence, TypeVar

from ..schemas import TileRef
from .helpers import BoundingBox, calculate_bounding_box

if TYPE_CHECKING:  # pragma: no cover
    from ..game import GameView, PlayerView
    from ..pseudo_random import PseudoRandom

T = TypeVar("T")

TERRITORY_TILE_ATTEMPTS = 100
BOAT_TARGET_ATTEMPTS = 500


def rand_territory_tile(
    game: "GameView",
    player: "PlayerView",
    random: "PseudoRandom",
    box: Optional[BoundingBox] = None,
) -> Optional[TileRef]:
    """Draw a tile owned by ``player`` from inside its border bounding box.

    Coordinates are drawn uniformly within the box (bounds inclusive). Draws
    that land off the map or on a tile owned by someone else are retried, up to
    ``TERRITORY_TILE_ATTEMPTS`` times.
    """
    if box is None:
        box = calculate_bounding_box(game, player.border_tiles())
        if box is None:
            return None

    for _ in range(TERRITORY_TILE_ATTEMPTS):
        x = random.next_int(box.min_x, box.max_x + 1)
        y = random.next_int(box.min_y, box.max_y + 1)
        if not game.is_valid_coord(x, y):
            continue
        tile = game.ref(x, y)
        if game.owner_id(tile) == player.small_id:
            return tile
    return None


def rand_territory_tile_array(
    game: "GameView", player: "PlayerView", random: "PseudoRandom", n: int
) -> List[TileRef]:
    """Up to ``n`` territory tiles sharing one bounding box.

    Draws may repeat. A territory of at most ``n`` tiles is returned whole,
    each tile once, through ``array_sampler``.
    """
    if player.num_tiles_owned() <= n:
        return list(array_sampler(player.tiles(), n, random))

    box = calculate_bounding_box(game, player.border_tiles())
    if box is None:
        return []

    tiles = []
    for _ in range(n):
        tile = rand_territory_tile(game, player, random, box)
        if tile is not None:
            tiles.append(tile)
    return tiles


def rand_coastal_tile_array(
    game: "GameView", player: "PlayerView", random: "PseudoRandom", n: int
) -> List[TileRef]:
    """Up to ``n`` distinct border tiles that touch the ocean."""
    coastal = [t for t in player.border_tiles() if game.is_ocean_shore(t)]
    return list(array_sampler(coastal, n, random))


def array_sampler(items: Sequence[T], n: int, random: "PseudoRandom") -> Iterator[T]:
    """Yield ``n`` distinct items, or all of them when there are no more than ``n``.

    The short case yields every item in its original order without drawing
    from ``random``.
    """
    if len(items) <= n:
        yield from items
        return

    pool = list(items)
    for _ in range(n):
        index = random.next_int(0, len(pool))
        # Swap-remove keeps each pop O(1)
        pool[index], pool[-1] = pool[-1], pool[index]
        yield pool.pop()


def random_boat_target(
    game: "GameView",
    player: "PlayerView",
    random: "PseudoRandom",
    tile: TileRef,
    dist: int,
) -> Optional[TileRef]:
    """Find a land tile near ``tile`` that a transport ship could invade.

    Accepts unowned land or land owned by a player that is not friendly.
    """
    cx, cy = game.x(tile), game.y(tile)
    for _ in range(BOAT_TARGET_ATTEMPTS):
        x = random.next_int(cx - dist, cx + dist + 1)
        y = random.next_int(cy - dist, cy + dist + 1)
        if not game.is_valid_coord(x, y):
            continue
        candidate = game.ref(x, y)
        if not game.is_land(candidate):
            continue
        owner = game.owner(candidate)
        if not owner.is_player():
            return candidate
        if owner is not player and not player.is_friendly(owner):
            return candidate
    return None
