"""Plans paths with A* and hands them to a follower that steers the bot."""

from __future__ import annotations

import logging
import math
import threading
from typing import Callable, Optional

from .astar import PathError, find_path
from .follower import BotController, Follower
from .node import Options, Vec3, default_options

log = logging.getLogger(__name__)


class Pathfinder:
    """Computes paths for a bot and follows them tick by tick."""

    def __init__(self, bot: BotController, world, options: Optional[Options] = None) -> None:
        self._bot = bot
        self._world = world
        self._options = options if options is not None else default_options()
        self._follower: Optional[Follower] = None
        self._on_reached: Optional[Callable[[], None]] = None
        self._on_failed: Optional[Callable[[str], None]] = None
        self._lock = threading.Lock()

    def set_callbacks(
        self,
        on_reached: Optional[Callable[[], None]],
        on_failed: Optional[Callable[[str], None]],
    ) -> None:
        """Set the callbacks fired when a goal is reached or a path fails."""
        with self._lock:
            self._on_reached = on_reached
            self._on_failed = on_failed

    def set_options(self, options: Options) -> None:
        with self._lock:
            self._options = options

    def _standable(self, pos: Vec3, *offsets: int) -> Vec3:
        for dy in offsets:
            if self._world.can_stand_at(pos.x, pos.y + dy, pos.z):
                return pos.add(0, dy, 0)
        return pos

    def go_to(self, x: float, y: float, z: float, sprint: bool = False) -> Optional[threading.Thread]:
        """Start navigating to (x, y, z).

        The search runs on a background thread, which is returned. When the
        bot already stands on the goal block, the reached callback fires at
        once and None is returned.
        """
        with self._lock:
            if self._follower is not None and self._follower.is_active():
                self._follower.stop(self._bot)
            self._follower = None
            options = self._options
            on_reached = self._on_reached
            on_failed = self._on_failed

        bx, by, bz = self._bot.get_position()
        start = Vec3(math.floor(bx), math.floor(by), math.floor(bz))
        goal = Vec3(math.floor(x), math.floor(y), math.floor(z))

        # Feet slightly inside the ground after float rounding, e.g. 82.999.
        if not self._world.can_stand_at(start.x, start.y, start.z):
            start = self._standable(start, 1)
        if not self._world.can_stand_at(goal.x, goal.y, goal.z):
            goal = self._standable(goal, 1, -1)

        if start == goal:
            if on_reached is not None:
                on_reached()
            return None

        worker = threading.Thread(
            target=self._search,
            args=(start, goal, options, sprint, on_reached, on_failed),
            name="pathfinder",
            daemon=True,
        )
        worker.start()
        return worker

    def _search(
        self,
        start: Vec3,
        goal: Vec3,
        options: Options,
        sprint: bool,
        on_reached: Optional[Callable[[], None]],
        on_failed: Optional[Callable[[str], None]],
    ) -> None:
        log.info(
            "Computing path from %s to %s (start chunk loaded: %s, goal chunk loaded: %s)",
            start,
            goal,
            self._world.has_chunk(start.x, start.z),
            self._world.has_chunk(goal.x, goal.z),
        )
        try:
            path = find_path(start, goal, self._world, options)
        except PathError as exc:
            log.info("Path computation failed: %s", exc)
            if on_failed is not None:
                on_failed(f"pathfinding failed: {exc}")
            return

        log.info("Path found: %d nodes", len(path))
        follower = Follower(path, sprint, on_reached, on_failed)
        with self._lock:
            self._follower = follower

    def stop(self) -> None:
        """Cancel navigation and release the bot's controls."""
        with self._lock:
            if self._follower is not None:
                self._follower.stop(self._bot)
                self._follower = None

    def is_navigating(self) -> bool:
        with self._lock:
            return self._follower is not None and self._follower.is_active()

    def progress(self) -> tuple[int, int]:
        """Current waypoint index and path length; (0, 0) when idle."""
        with self._lock:
            if self._follower is None:
                return 0, 0
            return self._follower.progress()

    def tick(self) -> None:
        """Advance the current path by one physics tick."""
        with self._lock:
            follower = self._follower
        if follower is not None:
            follower.tick(self._bot)