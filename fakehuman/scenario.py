"""
Scenario loading for JSON-defined skirmishes.

A scenario describes the starting position of a match: the terrain, the
players already on the map (territory, gold, troops, structures), the AI
nations that will be driven by coordinators, and the spawn phase length.

Scenario file structure:
```json
{
  "name": "Two Islands",
  "game_id": "two-islands",
  "spawn_phase_ticks": 0,
  "map": ["........", ".###.##.", "........"],
  "players": [
    {
      "id": "red", "type": "FAKEHUMAN", "gold": 2000000, "troops": 5000,
      "territory": [{"x0": 1, "y0": 1, "x1": 4, "y1": 2}],
      "units": [{"type": "City", "x": 2, "y": 1}]
    }
  ],
  "nations": [
    {"player_id": "red", "name": "Red", "spawn_cell": {"x": 2, "y": 1}}
  ]
}
```

Design philosophy:
- Scenarios are data, validated by pydantic before anything is built
- Players listed in ``players`` exist from tick 0; nations without a matching
  player must spawn during the spawn phase

Usage:
    loader = ScenarioLoader()
    game, nations = loader.load("two_islands")
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple, Union

from pydantic import BaseModel, Field, model_validator

from .config import Config
from .environment.grid import GameMap
from .environment.helpers import cell_to_tile
from .game import InMemoryGame
from .schemas import Cell, Nation, PlayerType, UnitType


class Rect(BaseModel):
    """Half-open rectangle of tiles: ``x0 <= x < x1``, ``y0 <= y < y1``."""

    x0: int
    y0: int
    x1: int
    y1: int

    @model_validator(mode="after")
    def _check_order(self) -> "Rect":
        if self.x1 <= self.x0 or self.y1 <= self.y0:
            raise ValueError("rectangle must have x1 > x0 and y1 > y0")
        return self


class UnitSpec(BaseModel):
    type: UnitType
    x: int
    y: int
    target: Optional[Cell] = Field(None, description="Target cell for in-flight missiles")


class PlayerSpec(BaseModel):
    id: str
    name: Optional[str] = None
    type: PlayerType = PlayerType.HUMAN
    team: Optional[str] = None
    gold: int = Field(0, ge=0)
    troops: int = Field(0, ge=0)
    max_troops: Optional[int] = Field(None, ge=0)
    territory: List[Rect] = Field(default_factory=list)
    units: List[UnitSpec] = Field(default_factory=list)


class ScenarioSpec(BaseModel):
    name: str
    description: str = ""
    game_id: str = "scenario"
    spawn_phase_ticks: int = Field(0, ge=0)
    map: List[str] = Field(..., min_length=1, description="Rows of . (ocean) # (plains) ^ (mountain)")
    unit_costs: Dict[UnitType, int] = Field(default_factory=dict)
    players: List[PlayerSpec] = Field(default_factory=list)
    nations: List[Nation] = Field(default_factory=list)

    @model_validator(mode="after")
    def _check_unique_ids(self) -> "ScenarioSpec":
        ids = [p.id for p in self.players]
        if len(ids) != len(set(ids)):
            raise ValueError("player ids must be unique")
        nation_ids = [n.player_id for n in self.nations]
        if len(nation_ids) != len(set(nation_ids)):
            raise ValueError("nation player ids must be unique")
        return self


def build_game(spec: ScenarioSpec) -> InMemoryGame:
    """Create an ``InMemoryGame`` in the starting position described by ``spec``."""
    game_map = GameMap.from_rows(spec.map)
    game = InMemoryGame(
        game_map,
        game_id=spec.game_id,
        spawn_phase_ticks=spec.spawn_phase_ticks,
        unit_costs=spec.unit_costs,
    )

    for p in spec.players:
        player = game.add_player(
            p.id,
            name=p.name,
            player_type=p.type,
            team=p.team,
            gold=p.gold,
            troops=p.troops,
            max_troops=p.max_troops,
        )
        for rect in p.territory:
            game.conquer_rect(player, rect.x0, rect.y0, rect.x1, rect.y1)
        for unit in p.units:
            tile = game_map.ref(unit.x, unit.y)
            target = None
            if unit.target is not None:
                target = cell_to_tile(game, unit.target)
                if target is None:
                    raise ValueError(f"unit target ({unit.target.x}, {unit.target.y}) is off the map")
            game.build_unit(player, unit.type, tile, target_tile=target)

    return game


def load_scenario(source: Union[str, Path, Dict[str, Any]]) -> Tuple[InMemoryGame, List[Nation]]:
    """Build a game from a scenario dict, a JSON file path, or a name.

    A bare name (no ``.json`` suffix, no directory) is resolved through
    ``ScenarioLoader`` and the default scenarios directory.
    """
    if isinstance(source, dict):
        spec = ScenarioSpec.model_validate(source)
        return build_game(spec), list(spec.nations)

    path = Path(source)
    if path.suffix != ".json" and path.parent == Path("."):
        return ScenarioLoader().load(str(source))

    if not path.exists():
        raise FileNotFoundError(f"Scenario file not found: {path}")
    spec = ScenarioSpec.model_validate(json.loads(path.read_text()))
    return build_game(spec), list(spec.nations)


class ScenarioLoader:
    """Load scenarios by name from a directory of JSON files.

    Directory structure:
    - Default: {PROJECT_ROOT}/examples/scenarios/
    - Override via constructor: ScenarioLoader(Path("/custom/scenarios"))
    - Scenario files: {scenario_name}.json
    """

    def __init__(self, scenarios_dir: Optional[Path] = None):
        self.scenarios_dir = scenarios_dir or (Config.PROJECT_ROOT / "examples" / "scenarios")

    def load(self, scenario_name: str) -> Tuple[InMemoryGame, List[Nation]]:
        """Load ``{scenario_name}.json`` and build the starting game.

        Raises:
            FileNotFoundError: If the scenario file doesn't exist
            pydantic.ValidationError: If the document does not match ScenarioSpec
            ValueError: If the map or units are inconsistent
        """
        scenario_path = self.scenarios_dir / f"{scenario_name}.json"
        if not scenario_path.exists():
            raise FileNotFoundError(f"Scenario '{scenario_name}' not found at {scenario_path}")

        data = json.loads(scenario_path.read_text())
        spec = ScenarioSpec.model_validate(data)
        return build_game(spec), list(spec.nations)
