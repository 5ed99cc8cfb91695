"""Optional callbacks fired by the bot on game events."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Optional

# event name -> (callback attribute, number of arguments it takes)
_SIGNATURES: dict[str, tuple[str, int]] = {
    "spawn": ("on_spawn", 0),
    "death": ("on_death", 0),
    "chat": ("on_chat", 2),
    "system_message": ("on_system_message", 1),
    "position_update": ("on_position_update", 3),
    "health_update": ("on_health_update", 2),
    "physics_tick": ("on_physics_tick", 0),
    "disconnect": ("on_disconnect", 1),
    "goal_reached": ("on_goal_reached", 0),
    "path_failed": ("on_path_failed", 1),
}


@dataclass
class Events:
    """Callbacks for bot events; any of them may be left unset."""

    on_spawn: Optional[Callable[[], None]] = None
    on_death: Optional[Callable[[], None]] = None
    on_chat: Optional[Callable[[str, str], None]] = None
    on_system_message: Optional[Callable[[str], None]] = None
    on_position_update: Optional[Callable[[float, float, float], None]] = None
    on_health_update: Optional[Callable[[float, float], None]] = None
    on_physics_tick: Optional[Callable[[], None]] = None
    on_disconnect: Optional[Callable[[str], None]] = None
    on_goal_reached: Optional[Callable[[], None]] = None
    on_path_failed: Optional[Callable[[str], None]] = None

    def emit(self, name: str, *args) -> None:
        """Call the callback for ``name`` if it is set and enough arguments are given.

        Unknown event names are ignored.
        """
        signature = _SIGNATURES.get(name)
        if signature is None:
            return
        attribute, arity = signature
        callback = getattr(self, attribute)
        if callback is None or len(args) < arity:
            return
        callback(*args[:arity])