"""Neighbour generation for the A* search."""

from __future__ import annotations

from .node import MoveType, Node, Options

_CARDINALS = ((1, 0), (-1, 0), (0, 1), (0, -1))
_DIAGONALS = ((1, 1), (1, -1), (-1, 1), (-1, -1))


def get_neighbors(current: Node, world, options: Options) -> list[Node]:
    """Return every node reachable in one move from ``current``.

    The ``g`` of each returned node is the cost of the edge, not the
    accumulated cost.
    """
    neighbors: list[Node] = []
    pos = current.pos

    def add(dest, cost: float, move: MoveType) -> None:
        neighbors.append(Node(pos=dest, g=cost, move=move))

    for dx, dz in _CARDINALS:
        dest = pos.add(dx, 0, dz)

        if world.can_stand_at(dest.x, dest.y, dest.z):
            add(dest, 1.0, MoveType.WALK)

        up = pos.add(dx, 1, dz)
        if (
            world.is_passable(pos.x, pos.y + 2, pos.z)
            and world.can_stand_at(up.x, up.y, up.z)
            and world.is_passable(up.x, up.y + 1, up.z)
        ):
            add(up, 2.0, MoveType.JUMP)

        if world.is_passable(dest.x, dest.y, dest.z) and world.is_passable(
            dest.x, dest.y + 1, dest.z
        ):
            land_y = world.is_safe_to_fall(dest.x, dest.y, dest.z, options.max_fall_distance)
            if land_y is not None:
                drop = pos.add(dx, land_y - pos.y, dz)
                add(drop, 1.0 + (pos.y - land_y) * 0.5, MoveType.DROP)

        if options.sprint:
            far = pos.add(dx * 2, 0, dz * 2)
            mid = pos.add(dx, 0, dz)
            mid_clear = world.is_passable(mid.x, mid.y, mid.z) and world.is_passable(
                mid.x, mid.y + 1, mid.z
            )
            above_clear = world.is_passable(pos.x, pos.y + 2, pos.z)
            if mid_clear and above_clear and world.can_stand_at(far.x, far.y, far.z):
                add(far, 2.5, MoveType.SPRINT_JUMP)
            far_up = pos.add(dx * 2, 1, dz * 2)
            if (
                mid_clear
                and world.is_passable(mid.x, mid.y + 2, mid.z)
                and above_clear
                and world.can_stand_at(far_up.x, far_up.y, far_up.z)
            ):
                add(far_up, 3.5, MoveType.SPRINT_JUMP)

        if options.allow_ladder:
            above = pos.add(0, 1, 0)
            if world.is_climbable(pos.x, pos.y, pos.z) or world.is_climbable(
                above.x, above.y, above.z
            ):
                if world.is_passable(above.x, above.y + 1, above.z):
                    add(above, 1.5, MoveType.LADDER_UP)
            adjacent = pos.add(dx, 0, dz)
            if world.is_climbable(adjacent.x, adjacent.y, adjacent.z):
                climb = adjacent.add(0, 1, 0)
                if world.is_passable(climb.x, climb.y, climb.z) and world.is_passable(
                    climb.x, climb.y + 1, climb.z
                ):
                    add(climb, 2.0, MoveType.LADDER_UP)

            below = pos.add(0, -1, 0)
            if world.is_climbable(pos.x, pos.y, pos.z) or world.is_climbable(
                below.x, below.y, below.z
            ):
                if world.is_passable(below.x, below.y, below.z) or world.is_climbable(
                    below.x, below.y, below.z
                ):
                    add(below, 1.5, MoveType.LADDER_DOWN)

        if options.allow_water:
            if world.can_stand_in_water(dest.x, dest.y, dest.z):
                add(dest, 2.0, MoveType.SWIM)
            swim_up = pos.add(dx, 1, dz)
            if world.is_water(swim_up.x, swim_up.y, swim_up.z) and (
                world.is_passable(swim_up.x, swim_up.y + 1, swim_up.z)
                or world.is_water(swim_up.x, swim_up.y + 1, swim_up.z)
            ):
                add(swim_up, 2.5, MoveType.SWIM)
            swim_down = pos.add(dx, -1, dz)
            if world.is_water(swim_down.x, swim_down.y, swim_down.z):
                add(swim_down, 2.0, MoveType.SWIM)
            in_water = world.is_water(pos.x, pos.y, pos.z)
            straight_up = pos.add(0, 1, 0)
            if in_water and (
                world.is_water(straight_up.x, straight_up.y, straight_up.z)
                or world.is_passable(straight_up.x, straight_up.y, straight_up.z)
            ):
                add(straight_up, 2.0, MoveType.SWIM)
            straight_down = pos.add(0, -1, 0)
            if in_water and world.is_water(straight_down.x, straight_down.y, straight_down.z):
                add(straight_down, 1.5, MoveType.SWIM)

    for dx, dz in _DIAGONALS:
        dest = pos.add(dx, 0, dz)
        side_a = pos.add(dx, 0, 0)
        side_b = pos.add(0, 0, dz)
        if (
            world.can_stand_at(dest.x, dest.y, dest.z)
            and world.is_passable(side_a.x, side_a.y, side_a.z)
            and world.is_passable(side_a.x, side_a.y + 1, side_a.z)
            and world.is_passable(side_b.x, side_b.y, side_b.z)
            and world.is_passable(side_b.x, side_b.y + 1, side_b.z)
        ):
            add(dest, 1.41, MoveType.DIAGONAL)

    return neighbors