"""Headless Minecraft bot toolkit: world model, physics, pathfinding, chat and settings."""

__version__ = "0.1.0"

__all__ = [
    "astar",
    "bot",
    "chat",
    "config",
    "events",
    "follower",
    "movements",
    "node",
    "pathfinder",
    "physics",
    "state",
    "world",
]