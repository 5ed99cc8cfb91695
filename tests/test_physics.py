import threading

from mcbots import bot as bot_module
from mcbots.bot import Bot
from mcbots.physics import STOP_SNEAKING, STOP_SPRINTING
from mcbots.world import ChunkColumn, ChunkSection, World


class Recorder:
    def __init__(self):
        self.packets = []

    def send(self, packet, *fields):
        self.packets.append((packet, fields))


def section_with(blocks):
    data = [0] * 256
    for lx, ly, lz in blocks:
        index = (ly << 8) | (lz << 4) | lx
        data[index // 16] |= 1 << ((index % 16) * 4)
    return ChunkSection(bits_per_entry=4, palette=[0, 1], data=data)


def world_with(floor=True, upper=None):
    world = World()
    sections = [ChunkSection() for _ in range(24)]
    if floor:
        sections[7] = ChunkSection(block_count=4096, bits_per_entry=0, palette=[1])
    if upper is not None:
        sections[8] = upper
    world.set_chunk(ChunkColumn(x=0, z=0, sections=sections))
    return world


def make_bot(world=None, connection=None):
    bot = Bot("mover", connection=connection, world=world or world_with())
    bot.state.set_position(0.5, 64.0, 0.5)
    return bot


def run(bot, ticks):
    for _ in range(ticks):
        bot.physics.simulate()


def walked(mode):
    bot = make_bot()
    bot.physics.set_control_state("forward", True)
    if mode != "walk":
        bot.physics.set_control_state(mode, True)
    run(bot, 5)
    return bot.state.position()[2] - 0.5


def test_set_and_get_control_state():
    bot = make_bot()
    bot.physics.set_control_state("forward", True)
    bot.physics.set_control_state("nonsense", True)
    assert bot.physics.get_control_state("forward") is True
    assert bot.physics.get_control_state("back") is False
    assert bot.physics.get_control_state("nonsense") is False


def test_sprint_toggle_sends_commands_once():
    connection = Recorder()
    bot = make_bot(connection=connection)
    bot.state.entity_id = 7
    bot.physics.set_control_state("sprint", True)
    bot.physics.set_control_state("sprint", True)
    bot.physics.set_control_state("sprint", False)
    assert connection.packets == [
        (bot_module.PLAYER_COMMAND, (7, 3, 0)),
        (bot_module.PLAYER_COMMAND, (7, 4, 0)),
    ]


def test_sneak_toggle_sends_commands():
    connection = Recorder()
    bot = make_bot(connection=connection)
    bot.physics.set_control_state("sneak", True)
    bot.physics.set_control_state("sneak", False)
    assert [fields[1] for _, fields in connection.packets] == [0, 1]


def test_clear_releases_everything():
    connection = Recorder()
    bot = make_bot(connection=connection)
    for control in ("forward", "jump", "sprint", "sneak"):
        bot.physics.set_control_state(control, True)
    connection.packets.clear()
    bot.physics.clear_control_states()
    assert [fields[1] for _, fields in connection.packets] == [STOP_SPRINTING, STOP_SNEAKING]
    assert not any(
        bot.physics.get_control_state(c) for c in ("forward", "jump", "sprint", "sneak")
    )


def test_walk_forward_along_positive_z():
    bot = make_bot()
    bot.physics.set_control_state("forward", True)
    run(bot, 5)
    x, y, z = bot.state.position()
    assert z > 0.5
    assert abs(x - 0.5) < 1e-9
    assert y == 64.0
    assert bot.state.on_ground is True


def test_sprint_is_faster_and_sneak_slower_than_walking():
    walk = walked("walk")
    sprint = walked("sprint")
    sneak = walked("sneak")
    assert sprint > walk
    assert walk > sneak
    assert sneak > 0


def test_jump_leaves_ground():
    bot = make_bot()
    bot.physics.set_control_state("jump", True)
    run(bot, 1)
    assert bot.state.position()[1] > 64.0
    assert bot.state.on_ground is False


def test_falls_without_floor():
    bot = make_bot(world=world_with(floor=False))
    run(bot, 3)
    assert bot.state.position()[1] < 64.0
    assert bot.state.on_ground is False
    assert bot.state.velocity()[1] < 0


def test_wall_stops_movement():
    wall = section_with([(0, 0, 2), (0, 1, 2)])
    bot = make_bot(world=world_with(upper=wall))
    bot.physics.set_control_state("forward", True)
    run(bot, 40)
    x, _, z = bot.state.position()
    assert 1.0 < z < 1.7
    assert abs(x - 0.5) < 1e-9


def test_dead_bot_does_not_tick():
    bot = make_bot()
    ticks = []
    bot.events.on_physics_tick = lambda: ticks.append(1)
    bot.state.alive = False
    bot.physics.set_control_state("forward", True)
    bot.physics.tick()
    assert ticks == []
    assert bot.state.position() == (0.5, 64.0, 0.5)


def test_tick_emits_event():
    bot = make_bot()
    ticks = []
    bot.events.on_physics_tick = lambda: ticks.append(1)
    bot.physics.tick()
    bot.physics.tick()
    assert ticks == [1, 1]


def test_reports_only_changes():
    connection = Recorder()
    bot = make_bot(connection=connection)
    bot.physics.start()
    bot.physics.stop()
    bot.physics.tick()
    assert connection.packets == []

    bot.state.set_rotation(90.0, 0.0)
    bot.physics.tick()
    assert connection.packets == [(bot_module.PLAYER_ROTATION, (90.0, 0.0, 1))]

    connection.packets.clear()
    bot.physics.tick()
    assert connection.packets == []


def test_movement_reports_position():
    connection = Recorder()
    bot = make_bot(connection=connection)
    bot.physics.start()
    bot.physics.stop()
    bot.physics.set_control_state("forward", True)
    bot.physics.tick()
    assert [name for name, _ in connection.packets] == [bot_module.PLAYER_POSITION]
    x, y, z, on_ground = connection.packets[0][1]
    assert (x, y, z) == bot.state.position()
    assert on_ground == 1


def test_loop_ticks_until_stopped():
    bot = make_bot()
    ticked = threading.Event()
    bot.events.on_physics_tick = ticked.set
    bot.physics.start()
    bot.physics.start()
    try:
        assert bot.physics.running
        assert ticked.wait(timeout=5)
    finally:
        bot.physics.stop()
    bot.physics.stop()
    assert not bot.physics.running