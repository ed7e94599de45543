"""Spatial utilities over the game-state interface.

Pure functions: they read geometry and ownership through ``GameView`` and never
draw random numbers. Random sampling lives in ``sampling``.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Iterable, List, Optional, Sequence, Tuple

from ..schemas import Cell, TileRef

if TYPE_CHECKING:  # pragma: no cover
    from ..game import GameView, PlayerView


@dataclass(frozen=True)
class BoundingBox:
    """Axis-aligned box, inclusive on every side."""

    min_x: int
    min_y: int
    max_x: int
    max_y: int

    def contains(self, x: int, y: int) -> bool:
        return self.min_x <= x <= self.max_x and self.min_y <= y <= self.max_y


def calculate_bounding_box(game: "GameView", tiles: Iterable[TileRef]) -> Optional[BoundingBox]:
    """Return the smallest box holding every tile, or None when there are none."""
    min_x = min_y = max_x = max_y = None
    for tile in tiles:
        x, y = game.x(tile), game.y(tile)
        if min_x is None:
            min_x, max_x, min_y, max_y = x, x, y, y
            continue
        min_x = min(min_x, x)
        max_x = max(max_x, x)
        min_y = min(min_y, y)
        max_y = max(max_y, y)
    if min_x is None:
        return None
    return BoundingBox(min_x=min_x, min_y=min_y, max_x=max_x, max_y=max_y)


def bounding_box_ring(game: "GameView", center: TileRef, radius: int) -> List[TileRef]:
    """On-map tiles on the square perimeter at Chebyshev distance ``radius``.

    A radius of zero yields the centre tile itself.
    """
    cx, cy = game.x(center), game.y(center)
    if radius <= 0:
        return [center]

    coords: List[Tuple[int, int]] = []
    for x in range(cx - radius, cx + radius + 1):
        coords.append((x, cy - radius))
        coords.append((x, cy + radius))
    # Corners were already emitted by the horizontal edges
    for y in range(cy - radius + 1, cy + radius):
        coords.append((cx - radius, y))
        coords.append((cx + radius, y))

    return [game.ref(x, y) for x, y in coords if game.is_valid_coord(x, y)]


def within_distance(game: "GameView", a: TileRef, b: TileRef, radius: float) -> bool:
    """Euclidean distance test (inclusive)."""
    return game.euclidean_dist_squared(a, b) <= radius * radius


def manhattan_dist(game: "GameView", a: TileRef, b: TileRef) -> int:
    return abs(game.x(a) - game.x(b)) + abs(game.y(a) - game.y(b))


def closest_two_tiles(
    game: "GameView", xs: Sequence[TileRef], ys: Sequence[TileRef]
) -> Optional[Tuple[TileRef, TileRef]]:
    """Return ``(x, y)`` with the smallest Manhattan distance between the two sets.

    Returns None if either side is empty. Ties keep the first pair found.
    """
    if not xs or not ys:
        return None

    best: Optional[Tuple[TileRef, TileRef]] = None
    best_dist = None
    for a in xs:
        for b in ys:
            dist = manhattan_dist(game, a, b)
            if best_dist is None or dist < best_dist:
                best, best_dist = (a, b), dist
                if dist == 0:
                    return best
    return best


def calculate_territory_center(game: "GameView", player: "PlayerView") -> Optional[TileRef]:
    """Mean of the owned tile coordinates, snapped to the closest owned tile."""
    tiles = player.tiles()
    if not tiles:
        return None

    mean_x = sum(game.x(t) for t in tiles) / len(tiles)
    mean_y = sum(game.y(t) for t in tiles) / len(tiles)

    best = tiles[0]
    best_dist = None
    for tile in tiles:
        dx = game.x(tile) - mean_x
        dy = game.y(tile) - mean_y
        dist = dx * dx + dy * dy
        if best_dist is None or dist < best_dist:
            best, best_dist = tile, dist
    return best


def cell_to_tile(game: "GameView", cell: Cell) -> Optional[TileRef]:
    if not game.is_on_map(cell):
        return None
    return game.ref(cell.x, cell.y)
