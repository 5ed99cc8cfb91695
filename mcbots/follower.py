"""Steers a bot along a computed path one physics tick at a time."""

from __future__ import annotations

import math
import threading
from typing import Callable, Optional, Protocol, Sequence

from .node import MoveType, Node

WAYPOINT_REACH_THRESHOLD = 0.35
STUCK_TICK_THRESHOLD = 60
STUCK_DIST_THRESHOLD = 0.1


class BotController(Protocol):
    """What the follower needs from a bot."""

    def get_position(self) -> tuple[float, float, float]: ...
    def set_control_state(self, control: str, state: bool) -> None: ...
    def clear_control_states(self) -> None: ...
    def look_at(self, x: float, y: float, z: float) -> None: ...
    def is_on_ground(self) -> bool: ...


def _center(node: Node) -> tuple[float, float, float]:
    return node.pos.x + 0.5, float(node.pos.y), node.pos.z + 0.5


class Follower:
    """Follows a path, calling ``on_reached`` or ``on_failed`` when done."""

    def __init__(
        self,
        path: Sequence[Node],
        sprint: bool,
        on_reached: Optional[Callable[[], None]] = None,
        on_failed: Optional[Callable[[str], None]] = None,
    ) -> None:
        self._path = list(path)
        self._index = 1  # the first node is where the bot already stands
        self._active = True
        self._sprint = sprint
        self._stuck_ticks = 0
        self._last_x = 0.0
        self._last_z = 0.0
        self._on_reached = on_reached
        self._on_failed = on_failed
        self._lock = threading.Lock()

    def is_active(self) -> bool:
        with self._lock:
            return self._active

    def progress(self) -> tuple[int, int]:
        """Current waypoint index and total path length."""
        with self._lock:
            return self._index, len(self._path)

    def stop(self, bot: BotController) -> None:
        """Cancel navigation and release the bot's controls."""
        with self._lock:
            self._active = False
            bot.clear_control_states()

    def _finish(self, bot: BotController) -> None:
        bot.clear_control_states()
        if self._on_reached is not None:
            self._on_reached()

    def tick(self, bot: BotController) -> None:
        """Advance along the path by one physics tick."""
        with self._lock:
            if not self._active:
                return
            if self._index >= len(self._path):
                self._active = False
                target = None
            else:
                target = self._path[self._index]
        if target is None:
            self._finish(bot)
            return

        bx, by, bz = bot.get_position()
        tx, ty, tz = _center(target)
        horizontal = math.hypot(tx - bx, tz - bz)

        if horizontal < WAYPOINT_REACH_THRESHOLD and abs(ty - by) < 1.5:
            with self._lock:
                self._index += 1
                self._stuck_ticks = 0
                if self._index >= len(self._path):
                    self._active = False
                    target = None
                else:
                    target = self._path[self._index]
            if target is None:
                self._finish(bot)
                return
            tx, ty, tz = _center(target)
            horizontal = math.hypot(tx - bx, tz - bz)

        with self._lock:
            moved = math.hypot(bx - self._last_x, bz - self._last_z)
            self._stuck_ticks = self._stuck_ticks + 1 if moved < STUCK_DIST_THRESHOLD else 0
            self._last_x, self._last_z = bx, bz
            stuck = self._stuck_ticks > STUCK_TICK_THRESHOLD
            if stuck:
                self._active = False

        if stuck:
            bot.clear_control_states()
            if self._on_failed is not None:
                self._on_failed("stuck: no progress for too long")
            return

        self._steer(bot, target, tx, ty, tz, horizontal)

    def _steer(
        self, bot: BotController, target: Node, tx: float, ty: float, tz: float, horizontal: float
    ) -> None:
        bx, by, bz = bot.get_position()
        bot.look_at(tx, ty + 1.0, tz)

        forward = sprint = jump = sneak = False
        move = target.move
        far_or_sprinting = self._sprint or horizontal > 2.0

        if move in (MoveType.WALK, MoveType.DIAGONAL):
            forward = True
            sprint = far_or_sprinting
        elif move is MoveType.JUMP:
            forward = True
            jump = bot.is_on_ground() and ty > by + 0.5
        elif move is MoveType.DROP:
            forward = True
        elif move is MoveType.SPRINT_JUMP:
            forward = sprint = True
            if bot.is_on_ground():
                with self._lock:
                    prev_index = self._index - 1
                if 0 <= prev_index < len(self._path):
                    prev = self._path[prev_index].pos
                    if math.hypot(bx - prev.x - 0.5, bz - prev.z - 0.5) > 0.4:
                        jump = True
        elif move is MoveType.LADDER_UP:
            forward = True
            jump = ty > by + 0.5
        elif move is MoveType.LADDER_DOWN:
            forward = sneak = True
        elif move is MoveType.SWIM:
            forward = True
            jump = ty > by + 0.3
            sprint = far_or_sprinting

        bot.set_control_state("forward", forward)
        bot.set_control_state("sprint", sprint)
        bot.set_control_state("jump", jump)
        bot.set_control_state("sneak", sneak)