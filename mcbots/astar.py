"""A* search over block positions."""

from __future__ import annotations

import heapq
import itertools
from typing import Optional, Protocol

from .movements import get_neighbors
from .node import Node, Options, Vec3, default_options


class WorldView(Protocol):
    """Read-only access to the world needed by the search."""

    def get_block(self, x: int, y: int, z: int) -> int: ...
    def has_chunk(self, x: int, z: int) -> bool: ...
    def is_block_solid(self, x: int, y: int, z: int) -> bool: ...
    def is_passable(self, x: int, y: int, z: int) -> bool: ...
    def is_water(self, x: int, y: int, z: int) -> bool: ...
    def is_climbable(self, x: int, y: int, z: int) -> bool: ...
    def is_dangerous(self, x: int, y: int, z: int) -> bool: ...
    def can_stand_at(self, x: int, y: int, z: int) -> bool: ...
    def can_stand_in_water(self, x: int, y: int, z: int) -> bool: ...
    def is_safe_to_fall(self, x: int, start_y: int, z: int, max_drop: int) -> Optional[int]: ...


class PathError(Exception):
    """Base class for pathfinding failures."""

    default_message = "pathfinding failed"

    def __init__(self, message: Optional[str] = None) -> None:
        super().__init__(message or self.default_message)


class NoPathError(PathError):
    default_message = "no path found"


class TooFarError(PathError):
    default_message = "path exceeds maximum length"


class MaxIterationsError(PathError):
    default_message = "exceeded maximum iterations"


class UnloadedError(PathError):
    default_message = "start or goal in unloaded chunk"


def heuristic(a: Vec3, goal: Vec3) -> float:
    """Octile distance on the XZ plane plus a weighted vertical term."""
    dx = abs(a.x - goal.x)
    dy = abs(a.y - goal.y)
    dz = abs(a.z - goal.z)
    high, low = max(dx, dz), min(dx, dz)
    return (high - low) + low * 1.41 + dy * 1.5


def _path_length(node: Optional[Node]) -> int:
    count = 0
    while node is not None:
        count += 1
        node = node.parent
    return count


def _reconstruct(node: Optional[Node]) -> list[Node]:
    path: list[Node] = []
    while node is not None:
        path.append(node)
        node = node.parent
    path.reverse()
    return path


def find_path(
    start: Vec3, goal: Vec3, world: WorldView, options: Optional[Options] = None
) -> list[Node]:
    """Compute a path from ``start`` to ``goal``, both inclusive.

    Raises MaxIterationsError when the iteration budget runs out and
    NoPathError when the reachable area is exhausted.
    """
    if options is None or options.max_iterations == 0:
        options = default_options()

    start_node = Node(pos=start, g=0.0, h=heuristic(start, goal))
    start_node.f = start_node.g + start_node.h

    order = itertools.count()
    open_heap: list[tuple[float, int, Node]] = [(start_node.f, next(order), start_node)]
    closed: set[Vec3] = set()
    g_scores: dict[Vec3, float] = {start: 0.0}

    iterations = 0
    while open_heap:
        iterations += 1
        if iterations > options.max_iterations:
            raise MaxIterationsError()

        _, _, current = heapq.heappop(open_heap)
        if current.pos == goal:
            return _reconstruct(current)
        closed.add(current.pos)

        for neighbor in get_neighbors(current, world, options):
            if neighbor.pos in closed:
                continue
            tentative = current.g + neighbor.g  # neighbor.g is the edge cost
            known = g_scores.get(neighbor.pos)
            if known is not None and tentative >= known:
                continue
            g_scores[neighbor.pos] = tentative

            node = Node(
                pos=neighbor.pos,
                g=tentative,
                h=heuristic(neighbor.pos, goal),
                parent=current,
                move=neighbor.move,
            )
            node.f = node.g + node.h

            if options.max_path_length > 0 and _path_length(node) > options.max_path_length:
                continue
            heapq.heappush(open_heap, (node.f, next(order), node))

    raise NoPathError()