"""Tile grid used by the in-memory game.

Tiles are addressed by ``TileRef`` (``y * width + x``), mirroring how the
engine exposes its map. Only terrain lives here; ownership belongs to the game.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Sequence

from ..schemas import TerrainType, TileRef


TERRAIN_SYMBOLS: Dict[str, TerrainType] = {
    ".": TerrainType.OCEAN,
    "#": TerrainType.PLAINS,
    "^": TerrainType.MOUNTAIN,
}


@dataclass
class GameMap:
    """Rectangular terrain grid."""

    width: int
    height: int
    terrain: List[TerrainType] = field(default_factory=list)

    def __post_init__(self) -> None:
        if self.width <= 0 or self.height <= 0:
            raise ValueError("GameMap dimensions must be positive")
        if not self.terrain:
            self.terrain = [TerrainType.PLAINS] * (self.width * self.height)
        if len(self.terrain) != self.width * self.height:
            raise ValueError(
                f"terrain has {len(self.terrain)} tiles, expected {self.width * self.height}"
            )
        self._land_count = sum(1 for t in self.terrain if t != TerrainType.OCEAN)

    @classmethod
    def from_rows(cls, rows: Sequence[str]) -> "GameMap":
        """Build a map from text rows (``.`` ocean, ``#`` plains, ``^`` mountain)."""
        if not rows:
            raise ValueError("map needs at least one row")
        width = len(rows[0])
        terrain: List[TerrainType] = []
        for y, row in enumerate(rows):
            if len(row) != width:
                raise ValueError(f"row {y} has width {len(row)}, expected {width}")
            for symbol in row:
                if symbol not in TERRAIN_SYMBOLS:
                    raise ValueError(f"unknown terrain symbol '{symbol}' in row {y}")
                terrain.append(TERRAIN_SYMBOLS[symbol])
        return cls(width=width, height=len(rows), terrain=terrain)

    def ref(self, x: int, y: int) -> TileRef:
        if not self.is_valid_coord(x, y):
            raise ValueError(f"coordinate ({x}, {y}) is off the map")
        return y * self.width + x

    def x(self, tile: TileRef) -> int:
        return tile % self.width

    def y(self, tile: TileRef) -> int:
        return tile // self.width

    def is_valid_coord(self, x: int, y: int) -> bool:
        return 0 <= x < self.width and 0 <= y < self.height

    def terrain_type(self, tile: TileRef) -> TerrainType:
        return self.terrain[tile]

    def is_land(self, tile: TileRef) -> bool:
        return self.terrain[tile] != TerrainType.OCEAN

    def is_ocean(self, tile: TileRef) -> bool:
        return self.terrain[tile] == TerrainType.OCEAN

    def neighbors(self, tile: TileRef) -> List[TileRef]:
        """Four-directional neighbours that are on the map."""
        x, y = self.x(tile), self.y(tile)
        result = []
        for dx, dy in ((0, -1), (0, 1), (-1, 0), (1, 0)):
            nx, ny = x + dx, y + dy
            if self.is_valid_coord(nx, ny):
                result.append(ny * self.width + nx)
        return result

    def is_ocean_shore(self, tile: TileRef) -> bool:
        """Land tile touching at least one ocean tile."""
        return self.is_land(tile) and any(self.is_ocean(n) for n in self.neighbors(tile))

    def euclidean_dist_squared(self, a: TileRef, b: TileRef) -> int:
        dx = self.x(a) - self.x(b)
        dy = self.y(a) - self.y(b)
        return dx * dx + dy * dy

    def num_land_tiles(self) -> int:
        return self._land_count
