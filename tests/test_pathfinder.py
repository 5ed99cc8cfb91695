import threading

from mcbots.bot import Bot
from mcbots.node import Options
from mcbots.world import ChunkColumn, ChunkSection, World


def floor_world():
    world = World()
    sections = [ChunkSection() for _ in range(24)]
    sections[7] = ChunkSection(block_count=4096, bits_per_entry=0, palette=[1])
    world.set_chunk(ChunkColumn(x=0, z=0, sections=sections))
    return world


def make_bot(x=0.5, y=64.0, z=0.5):
    bot = Bot("walker", world=floor_world())
    bot.state.set_position(x, y, z)
    return bot


def test_same_block_reaches_immediately():
    bot = make_bot()
    reached = []
    bot.navigator.set_callbacks(lambda: reached.append(True), None)
    assert bot.navigator.go_to(0.9, 64.0, 0.1) is None
    assert reached == [True]
    assert not bot.navigator.is_navigating()


def test_start_inside_ground_is_corrected():
    bot = make_bot(y=63.999)
    reached = []
    bot.navigator.set_callbacks(lambda: reached.append(True), None)
    assert bot.navigator.go_to(0.5, 64.0, 0.5) is None
    assert reached == [True]


def test_reachable_goal_starts_following():
    bot = make_bot()
    worker = bot.navigator.go_to(5.5, 64.0, 0.5)
    worker.join(timeout=10)
    assert bot.navigator.is_navigating()
    current, total = bot.navigator.progress()
    assert current == 1
    assert total > 1


def test_unreachable_goal_reports_failure():
    bot = make_bot()
    failed = []
    done = threading.Event()

    def on_failed(reason):
        failed.append(reason)
        done.set()

    bot.navigator.set_callbacks(None, on_failed)
    bot.navigator.go_to(5.0, 30.0, 5.0)
    assert done.wait(timeout=10)
    assert failed == ["pathfinding failed: no path found"]
    assert not bot.navigator.is_navigating()


def test_iteration_limit_reports_failure():
    bot = make_bot()
    failed = []
    bot.navigator.set_options(Options(max_iterations=1))
    bot.navigator.set_callbacks(None, failed.append)
    bot.navigator.go_to(8.5, 64.0, 8.5).join(timeout=10)
    assert failed == ["pathfinding failed: exceeded maximum iterations"]


def test_stop_clears_navigation():
    bot = make_bot()
    bot.navigator.go_to(5.5, 64.0, 0.5).join(timeout=10)
    bot.set_control_state("forward", True)
    bot.navigator.stop()
    assert not bot.navigator.is_navigating()
    assert bot.navigator.progress() == (0, 0)
    assert bot.get_control_state("forward") is False


def test_new_goal_replaces_current_path():
    bot = make_bot()
    bot.navigator.go_to(5.5, 64.0, 0.5).join(timeout=10)
    assert bot.navigator.is_navigating()
    bot.navigator.go_to(0.5, 64.0, 0.5)
    assert not bot.navigator.is_navigating()


def test_ticks_walk_bot_to_goal():
    bot = make_bot()
    reached = threading.Event()
    bot.navigator.set_callbacks(reached.set, None)
    bot.navigator.go_to(5.5, 64.0, 0.5).join(timeout=10)
    for _ in range(400):
        if reached.is_set():
            break
        bot.physics.tick()
    assert reached.is_set()
    x, y, z = bot.get_position()
    assert abs(x - 5.5) < 0.35
    assert abs(z - 0.5) < 0.35
    assert not bot.navigator.is_navigating()