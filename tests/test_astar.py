import pytest

from mcbots.astar import (
    MaxIterationsError,
    NoPathError,
    PathError,
    find_path,
    heuristic,
)
from mcbots.node import Options, Vec3
from mcbots.world import World

SOLID = 1


class BlockMap(World):
    def __init__(self, blocks=None):
        super().__init__()
        self.blocks = dict(blocks or {})

    def get_block(self, x, y, z):
        return self.blocks.get((x, y, z), 0)

    def has_chunk(self, x, z):
        return True


def flat_floor(size=10, y=63):
    return BlockMap(
        {(x, y, z): SOLID for x in range(-size, size + 1) for z in range(-size, size + 1)}
    )


def test_path_connects_start_and_goal():
    world = flat_floor()
    start, goal = Vec3(0, 64, 0), Vec3(4, 64, 3)
    path = find_path(start, goal, world, Options())
    assert path[0].pos == start
    assert path[-1].pos == goal
    for prev, node in zip(path, path[1:]):
        assert node.parent is prev
        assert node.g > prev.g


def test_straight_path_cost_equals_distance():
    world = flat_floor()
    path = find_path(Vec3(0, 64, 0), Vec3(3, 64, 0), world, Options())
    assert path[-1].g == pytest.approx(3.0)


def test_start_equals_goal():
    world = flat_floor()
    path = find_path(Vec3(1, 64, 1), Vec3(1, 64, 1), world, Options())
    assert [node.pos for node in path] == [Vec3(1, 64, 1)]


def test_no_path_in_empty_world():
    with pytest.raises(NoPathError):
        find_path(Vec3(0, 64, 0), Vec3(5, 64, 0), BlockMap(), Options())


def test_max_iterations():
    world = flat_floor()
    with pytest.raises(MaxIterationsError):
        find_path(Vec3(0, 64, 0), Vec3(50, 64, 0), world, Options(max_iterations=1))


def test_max_path_length_limits_search():
    world = flat_floor(size=4)
    with pytest.raises(NoPathError):
        find_path(Vec3(0, 64, 0), Vec3(3, 64, 0), world, Options(max_path_length=2))


def test_errors_share_base_class():
    assert issubclass(NoPathError, PathError)
    assert str(NoPathError()) == "no path found"
    assert str(MaxIterationsError()) == "exceeded maximum iterations"


def test_none_options_uses_defaults():
    world = flat_floor()
    path = find_path(Vec3(0, 64, 0), Vec3(2, 64, 2), world, None)
    assert path[-1].pos == Vec3(2, 64, 2)


def test_heuristic_properties():
    a, b = Vec3(1, 2, 3), Vec3(-4, 7, 9)
    assert heuristic(a, a) == 0
    assert heuristic(a, b) == pytest.approx(heuristic(b, a))
    assert heuristic(Vec3(0, 0, 0), Vec3(3, 0, 0)) == pytest.approx(3.0)