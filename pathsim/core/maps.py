# pathsim/core/maps.py
#!/usr/bin/env python3
"""
JSON map files.

    {
      "width": 15, "height": 15,
      "start": [0, 0], "goal": [14, 14],
      "cells": [[0, 0, 1, ...], ...]     # [row][col], 1 = obstacle
    }
"""

import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Union

from pathsim.core.errors import MapFormatError, OutOfBounds, InvalidDimension
from pathsim.core.grid import GridGraph, create_grid
from pathsim.core.types import Cell

logger = logging.getLogger(__name__)

MAP_DIR = Path(__file__).resolve().parents[1] / "maps"


@dataclass
class GridMap:
    graph: GridGraph
    start: Cell
    goal: Cell
    name: str = "custom"

    @property
    def width(self) -> int:
        return self.graph.width

    @property
    def height(self) -> int:
        return self.graph.height


def blank_map(width: int = 15, height: int = 15) -> GridMap:
    """Empty grid with start in the top-left corner and goal in the bottom-right."""
    graph = create_grid(width, height)
    return GridMap(graph, (0, 0), (width - 1, height - 1), name=f"blank {width}x{height}")


def parse_map(data: dict, name: str = "custom") -> GridMap:
    try:
        width = int(data["width"])
        height = int(data["height"])
        start = tuple(int(v) for v in data["start"])
        goal = tuple(int(v) for v in data["goal"])
        cells = data.get("cells")
    except (KeyError, TypeError, ValueError) as ex:
        raise MapFormatError(f"map {name!r}: {ex}") from ex

    try:
        graph = create_grid(width, height)
    except InvalidDimension as ex:
        raise MapFormatError(f"map {name!r}: {ex}") from ex

    if len(start) != 2 or len(goal) != 2:
        raise MapFormatError(f"map {name!r}: start and goal must be [x, y] pairs")
    for label, c in (("start", start), ("goal", goal)):
        if not graph.in_bounds(c):
            raise MapFormatError(f"map {name!r}: {label} {c} out of bounds")

    if cells is not None:
        if not (isinstance(cells, list) and all(isinstance(row, list) for row in cells)):
            raise MapFormatError(f"map {name!r}: cells must be a list of rows")
        if len(cells) != height or any(len(row) != width for row in cells):
            raise MapFormatError(f"map {name!r}: cells size mismatch, expected {width}x{height}")
        for y, row in enumerate(cells):
            for x, v in enumerate(row):
                if v == 1:
                    graph.set_obstacle((x, y))

    return GridMap(graph, start, goal, name=name)


def load_map(path: Union[str, Path]) -> GridMap:
    path = Path(path)
    try:
        with open(path, "r") as f:
            data = json.load(f)
    except json.JSONDecodeError as ex:
        raise MapFormatError(f"{path}: invalid JSON ({ex})", path=path) from ex
    if not isinstance(data, dict):
        raise MapFormatError(f"{path}: top-level value must be an object", path=path)
    grid_map = parse_map(data, name=path.stem)
    logger.debug("loaded map %s (%dx%d, %d obstacles)", path.stem, grid_map.width,
                 grid_map.height, len(grid_map.graph.obstacle_cells()))
    return grid_map


def dump_map(grid_map: GridMap) -> dict:
    g = grid_map.graph
    return {
        "width": g.width,
        "height": g.height,
        "start": list(grid_map.start),
        "goal": list(grid_map.goal),
        "cells": [[1 if g.obstacles[y * g.width + x] else 0 for x in range(g.width)]
                  for y in range(g.height)],
    }


def save_map(grid_map: GridMap, path: Union[str, Path]) -> None:
    with open(path, "w") as f:
        json.dump(dump_map(grid_map), f)


def move_endpoint(grid_map: GridMap, which: str, cell: Cell) -> None:
    """Move the start or goal of grid_map to cell. Raises OutOfBounds."""
    if not grid_map.graph.in_bounds(cell):
        raise OutOfBounds(cell, grid_map.width, grid_map.height)
    if which == "start":
        grid_map.start = cell
    elif which == "goal":
        grid_map.goal = cell
    else:
        raise ValueError(f"unknown endpoint: {which!r}")
