"""Block positions, path nodes and pathfinding options."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from enum import IntEnum
from typing import Optional


@dataclass(frozen=True)
class Vec3:
    """An integer block position in the world."""

    x: int
    y: int
    z: int

    def __str__(self) -> str:
        return f"({self.x}, {self.y}, {self.z})"

    def add(self, dx: int, dy: int, dz: int) -> "Vec3":
        """Return the position offset by the given deltas."""
        return Vec3(self.x + dx, self.y + dy, self.z + dz)

    def distance_to(self, other: "Vec3") -> float:
        """Euclidean distance between two block positions."""
        return math.sqrt(
            (self.x - other.x) ** 2 + (self.y - other.y) ** 2 + (self.z - other.z) ** 2
        )


class MoveType(IntEnum):
    """How the bot moves from one path node to the next."""

    WALK = 0
    DIAGONAL = 1
    JUMP = 2
    DROP = 3
    SPRINT_JUMP = 4
    LADDER_UP = 5
    LADDER_DOWN = 6
    SWIM = 7

    def __str__(self) -> str:
        return self.name.lower()


@dataclass
class Node:
    """A single step of a computed path.

    ``g`` is the cost from the start, ``h`` the heuristic to the goal and
    ``f`` their sum. ``move`` says how this node was reached from ``parent``.
    """

    pos: Vec3
    g: float = 0.0
    h: float = 0.0
    f: float = 0.0
    parent: Optional["Node"] = field(default=None, compare=False, repr=False)
    move: MoveType = MoveType.WALK


@dataclass
class Options:
    """Settings for the A* search."""

    max_iterations: int = 5000
    max_fall_distance: int = 3
    allow_water: bool = True
    allow_ladder: bool = True
    sprint: bool = True
    max_path_length: int = 200


def default_options() -> Options:
    """Return the default pathfinding options."""
    return Options()