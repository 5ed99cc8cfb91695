"""Client-side movement simulation and position reporting."""

from __future__ import annotations

import math
import threading
import time
from dataclasses import dataclass, fields, replace
from typing import Optional

PHYSICS_INTERVAL = 0.05
GRAVITY = 0.08
DRAG = 0.02
WALK_SPEED = 0.1
SPRINT_SPEED = 0.13
SNEAK_SPEED = 0.03
TERMINAL_VELOCITY = -3.92
PLAYER_WIDTH = 0.6
PLAYER_HEIGHT = 1.8
JUMP_VELOCITY = 0.42
POSITION_RESEND_INTERVAL = 1.0

START_SNEAKING = 0
STOP_SNEAKING = 1
START_SPRINTING = 3
STOP_SPRINTING = 4

# control -> (command when switched on, command when switched off)
_TOGGLE_COMMANDS = {
    "sprint": (START_SPRINTING, STOP_SPRINTING),
    "sneak": (START_SNEAKING, STOP_SNEAKING),
}


@dataclass
class ControlState:
    """Which movement keys are held."""

    forward: bool = False
    back: bool = False
    left: bool = False
    right: bool = False
    jump: bool = False
    sprint: bool = False
    sneak: bool = False


_CONTROLS = frozenset(f.name for f in fields(ControlState))


class Physics:
    """Moves the bot every tick from its controls and reports the result."""

    def __init__(self, bot) -> None:
        self._bot = bot
        self._lock = threading.Lock()
        self._control = ControlState()
        self._stop_event: Optional[threading.Event] = None
        self._last_pos: tuple[float, float, float] = (0.0, 0.0, 0.0)
        self._last_look: tuple[float, float] = (0.0, 0.0)
        self._last_on_ground = False
        self._last_time = 0.0

    @property
    def running(self) -> bool:
        with self._lock:
            return self._stop_event is not None

    def start(self) -> None:
        """Start the tick loop on a background thread; no-op if running."""
        state = self._bot.state
        with self._lock:
            if self._stop_event is not None:
                return
            stop = threading.Event()
            self._stop_event = stop
            self._last_pos = state.position()
            self._last_look = state.rotation()
            self._last_on_ground = state.on_ground
            self._last_time = time.monotonic()
        threading.Thread(target=self._loop, args=(stop,), name="physics", daemon=True).start()

    def stop(self) -> None:
        """Stop the tick loop; no-op if not running."""
        with self._lock:
            if self._stop_event is None:
                return
            self._stop_event.set()
            self._stop_event = None

    def _loop(self, stop: threading.Event) -> None:
        while not stop.wait(PHYSICS_INTERVAL):
            self.tick()

    def set_control_state(self, control: str, state: bool) -> None:
        """Press or release a control; sprint and sneak changes notify the server."""
        if control not in _CONTROLS:
            return
        command = None
        with self._lock:
            toggle = _TOGGLE_COMMANDS.get(control)
            if toggle is not None and getattr(self._control, control) != state:
                command = toggle[0] if state else toggle[1]
            setattr(self._control, control, state)
        if command is not None:
            self._bot._send_player_command(command)

    def get_control_state(self, control: str) -> bool:
        if control not in _CONTROLS:
            return False
        with self._lock:
            return getattr(self._control, control)

    def clear_control_states(self) -> None:
        """Release every control, telling the server to stop sprinting/sneaking."""
        with self._lock:
            was_sprinting = self._control.sprint
            was_sneaking = self._control.sneak
            self._control = ControlState()
        if was_sprinting:
            self._bot._send_player_command(STOP_SPRINTING)
        if was_sneaking:
            self._bot._send_player_command(STOP_SNEAKING)

    def tick(self) -> None:
        """Run one physics step: navigation, movement, reporting, event."""
        if not self._bot.state.alive:
            return
        self._bot.navigator.tick()
        self.simulate()
        self._update_position()
        self._bot.events.emit("physics_tick")

    def simulate(self) -> None:
        """Apply controls, gravity, drag and simple collisions to the state."""
        with self._lock:
            ctrl = replace(self._control)

        state = self._bot.state
        world = self._bot.world
        x, y, z = state.position()
        vx, vy, vz = state.velocity()
        yaw, _ = state.rotation()
        on_ground = state.on_ground

        rad = math.radians(yaw)
        sin, cos = math.sin(rad), math.cos(rad)
        move_x = move_z = 0.0
        if ctrl.forward:
            move_x -= sin
            move_z += cos
        if ctrl.back:
            move_x += sin
            move_z -= cos
        if ctrl.left:
            move_x += cos
            move_z += sin
        if ctrl.right:
            move_x -= cos
            move_z -= sin

        length = math.hypot(move_x, move_z)
        if length > 0:
            move_x /= length
            move_z /= length

        if ctrl.sneak:
            speed = SNEAK_SPEED
        elif ctrl.sprint:
            speed = SPRINT_SPEED
        else:
            speed = WALK_SPEED

        if on_ground:
            vx = move_x * speed
            vz = move_z * speed
            if ctrl.jump:
                vy = JUMP_VELOCITY
        else:
            vx += move_x * 0.02
            vz += move_z * 0.02

        vy = max(vy - GRAVITY, TERMINAL_VELOCITY)
        vx *= 1 - DRAG
        vz *= 1 - DRAG
        vy *= 0.98

        new_x, new_y, new_z = x + vx, y + vy, z + vz
        new_on_ground = False

        below_y = math.floor(new_y - 0.01)
        if world.is_block_solid_or_unloaded(math.floor(new_x), below_y, math.floor(new_z)):
            ground_y = float(below_y + 1)
            if new_y < ground_y:
                new_y = ground_y
                vy = 0.0
                new_on_ground = True

        half = PLAYER_WIDTH / 2.0
        corners = [
            (math.floor(new_x + sx * half), math.floor(new_z + sz * half))
            for sx, sz in ((-1, -1), (1, -1), (-1, 1), (1, 1))
        ]
        heights = range(math.floor(new_y), math.floor(new_y + PLAYER_HEIGHT) + 1)
        if any(world.is_block_solid(cx, cy, cz) for cy in heights for cx, cz in corners):
            new_x, new_z = x, z
            vx = vz = 0.0

        state.set_position(new_x, new_y, new_z)
        state.set_velocity(vx, vy, vz)
        state.on_ground = new_on_ground

    def _update_position(self) -> None:
        state = self._bot.state
        pos = state.position()
        look = state.rotation()
        on_ground = state.on_ground

        with self._lock:
            pos_changed = (
                pos != self._last_pos
                or time.monotonic() - self._last_time >= POSITION_RESEND_INTERVAL
            )
            look_changed = look != self._last_look
            ground_changed = on_ground != self._last_on_ground

        bot = self._bot
        try:
            if pos_changed and look_changed:
                bot._send_position_and_rotation()
            elif pos_changed:
                bot._send_position()
            elif look_changed:
                bot._send_rotation()
            elif ground_changed:
                bot._send_on_ground()
        except OSError:
            return

        with self._lock:
            if pos_changed:
                self._last_pos = pos
                self._last_time = time.monotonic()
            if look_changed:
                self._last_look = look
            self._last_on_ground = on_ground