"""Map geometry and territory sampling for FakeHuman agents."""

from .grid import GameMap, TERRAIN_SYMBOLS
from .helpers import (
    BoundingBox,
    calculate_bounding_box,
    bounding_box_ring,
    within_distance,
    manhattan_dist,
    closest_two_tiles,
    calculate_territory_center,
    cell_to_tile,
)
from .sampling import (
    rand_territory_tile,
    rand_territory_tile_array,
    rand_coastal_tile_array,
    array_sampler,
    random_boat_target,
)

__all__ = [
    "GameMap",
    "TERRAIN_SYMBOLS",
    "BoundingBox",
    "calculate_bounding_box",
    "bounding_box_ring",
    "within_distance",
    "manhattan_dist",
    "closest_two_tiles",
    "calculate_territory_center",
    "cell_to_tile",
    "rand_territory_tile",
    "rand_territory_tile_array",
    "rand_coastal_tile_array",
    "array_sampler",
    "random_boat_target",
]
