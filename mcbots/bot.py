"""The bot: player state, world, physics and navigation in one object."""

from __future__ import annotations

import hashlib
import math
import threading
import uuid
from typing import Optional, Protocol

from .events import Events
from .pathfinder import Pathfinder
from .physics import Physics
from .state import State
from .world import World

PLAYER_COMMAND = "player_command"
PLAYER_POSITION = "player_position"
PLAYER_ROTATION = "player_rotation"
PLAYER_POSITION_ROTATION = "player_position_rotation"
PLAYER_ON_GROUND = "player_on_ground"
ACCEPT_TELEPORT = "accept_teleport"

EYE_HEIGHT = 1.62

RELATIVE_X = 0x01
RELATIVE_Y = 0x02
RELATIVE_Z = 0x04
RELATIVE_YAW = 0x08
RELATIVE_PITCH = 0x10


class Connection(Protocol):
    """Where the bot writes its outgoing packets."""

    def send(self, packet: str, *fields) -> None: ...


def offline_uuid(name: str) -> uuid.UUID:
    """The name-based (version 3) UUID an offline-mode server gives ``name``."""
    digest = bytearray(
        hashlib.md5(f"OfflinePlayer:{name}".encode(), usedforsecurity=False).digest()
    )
    digest[6] = (digest[6] & 0x0F) | 0x30
    digest[8] = (digest[8] & 0x3F) | 0x80
    return uuid.UUID(bytes=bytes(digest))


def _ground_byte(on_ground: bool) -> int:
    return 1 if on_ground else 0


class Bot:
    """A player controlled by code.

    Outgoing packets go to ``connection``; without one they are dropped.
    """

    def __init__(
        self, name: str, connection: Optional[Connection] = None, world: Optional[World] = None
    ) -> None:
        self.name = name
        self.connection = connection
        self.events = Events()
        self.state = State()
        self.world = world if world is not None else World()
        self.physics = Physics(self)
        self.navigator = Pathfinder(self, self.world)
        self.navigator.set_callbacks(
            lambda: self.events.emit("goal_reached"),
            lambda reason: self.events.emit("path_failed", reason),
        )
        self._write_lock = threading.Lock()

    def _send(self, packet: str, *fields) -> None:
        if self.connection is None:
            return
        with self._write_lock:
            self.connection.send(packet, *fields)

    def close(self) -> None:
        """Stop physics and close the connection if it can be closed."""
        self.physics.stop()
        close = getattr(self.connection, "close", None)
        if close is not None:
            close()

    def get_position(self) -> tuple[float, float, float]:
        return self.state.position()

    def get_rotation(self) -> tuple[float, float]:
        return self.state.rotation()

    def get_health(self) -> tuple[float, float]:
        return self.state.health, self.state.food

    def is_alive(self) -> bool:
        return self.state.alive

    def is_on_ground(self) -> bool:
        return self.state.on_ground

    def set_control_state(self, control: str, state: bool) -> None:
        self.physics.set_control_state(control, state)

    def get_control_state(self, control: str) -> bool:
        return self.physics.get_control_state(control)

    def clear_control_states(self) -> None:
        self.physics.clear_control_states()

    def get_block(self, x: int, y: int, z: int) -> int:
        return self.world.get_block(x, y, z)

    def go_to(self, x: float, y: float, z: float, sprint: bool = False) -> Optional[threading.Thread]:
        """Navigate to (x, y, z); see Pathfinder.go_to."""
        return self.navigator.go_to(x, y, z, sprint)

    def stop_pathfinding(self) -> None:
        self.navigator.stop()

    def is_navigating(self) -> bool:
        return self.navigator.is_navigating()

    def get_path_progress(self) -> tuple[int, int]:
        return self.navigator.progress()

    def look(self, yaw: float, pitch: float) -> None:
        self.state.set_rotation(yaw, pitch)

    def look_at(self, x: float, y: float, z: float) -> None:
        """Turn the head so the eyes point at (x, y, z)."""
        px, py, pz = self.state.position()
        dx, dy, dz = x - px, y - (py + EYE_HEIGHT), z - pz
        yaw = -math.degrees(math.atan2(dx, dz))
        pitch = -math.degrees(math.atan2(dy, math.hypot(dx, dz)))
        self.state.set_rotation(yaw, pitch)

    def _sync_position(
        self,
        teleport_id: int,
        x: float,
        y: float,
        z: float,
        dx: float,
        dy: float,
        dz: float,
        yaw: float,
        pitch: float,
        flags: int,
    ) -> None:
        """Apply a server position sync, confirm it and report back."""
        cur_x, cur_y, cur_z = self.state.position()
        cur_yaw, cur_pitch = self.state.rotation()
        if flags & RELATIVE_X:
            x += cur_x
        if flags & RELATIVE_Y:
            y += cur_y
        if flags & RELATIVE_Z:
            z += cur_z
        if flags & RELATIVE_YAW:
            yaw += cur_yaw
        if flags & RELATIVE_PITCH:
            pitch += cur_pitch

        self.state.set_position(x, y, z)
        self.state.set_rotation(yaw, pitch)
        self.state.on_ground = True
        self.state.set_velocity(dx, dy, dz)

        self._send(ACCEPT_TELEPORT, teleport_id)
        self._send_position_and_rotation()
        self.events.emit("position_update", x, y, z)

    def _update_health(self, health: float, food: float, saturation: float) -> None:
        """Record new vitals, detecting death and revival."""
        self.state.set_health(health, food, saturation)
        if health <= 0:
            if self.state.alive:
                self.state.alive = False
                self.physics.stop()
                self.events.emit("death")
        elif not self.state.alive:
            self.state.alive = True
            self.events.emit("spawn")
        self.events.emit("health_update", health, food)

    def _respawned(self) -> None:
        self.state.alive = True
        self.state.set_velocity(0.0, 0.0, 0.0)
        self.state.on_ground = True
        self.physics.start()

    def _send_player_command(self, action: int) -> None:
        self._send(PLAYER_COMMAND, self.state.entity_id, action, 0)

    def _send_position_and_rotation(self) -> None:
        x, y, z = self.state.position()
        yaw, pitch = self.state.rotation()
        self._send(
            PLAYER_POSITION_ROTATION, x, y, z, yaw, pitch, _ground_byte(self.state.on_ground)
        )

    def _send_position(self) -> None:
        x, y, z = self.state.position()
        self._send(PLAYER_POSITION, x, y, z, _ground_byte(self.state.on_ground))

    def _send_rotation(self) -> None:
        yaw, pitch = self.state.rotation()
        self._send(PLAYER_ROTATION, yaw, pitch, _ground_byte(self.state.on_ground))

    def _send_on_ground(self) -> None:
        self._send(PLAYER_ON_GROUND, _ground_byte(self.state.on_ground))