"""Thread-safe player state shared between network, physics and navigation."""

from __future__ import annotations

import threading
from dataclasses import dataclass, field


@dataclass
class State:
    """Position, motion and vitals of the bot's player."""

    x: float = 0.0
    y: float = 0.0
    z: float = 0.0
    yaw: float = 0.0
    pitch: float = 0.0
    vel_x: float = 0.0
    vel_y: float = 0.0
    vel_z: float = 0.0
    on_ground: bool = True
    health: float = 0.0
    food: float = 0.0
    food_saturation: float = 0.0
    entity_id: int = 0
    alive: bool = True
    _lock: threading.Lock = field(
        default_factory=threading.Lock, init=False, repr=False, compare=False
    )

    def position(self) -> tuple[float, float, float]:
        with self._lock:
            return self.x, self.y, self.z

    def set_position(self, x: float, y: float, z: float) -> None:
        with self._lock:
            self.x, self.y, self.z = x, y, z

    def rotation(self) -> tuple[float, float]:
        with self._lock:
            return self.yaw, self.pitch

    def set_rotation(self, yaw: float, pitch: float) -> None:
        with self._lock:
            self.yaw, self.pitch = yaw, pitch

    def velocity(self) -> tuple[float, float, float]:
        with self._lock:
            return self.vel_x, self.vel_y, self.vel_z

    def set_velocity(self, vx: float, vy: float, vz: float) -> None:
        with self._lock:
            self.vel_x, self.vel_y, self.vel_z = vx, vy, vz

    def set_health(self, health: float, food: float, saturation: float) -> None:
        with self._lock:
            self.health, self.food, self.food_saturation = health, food, saturation