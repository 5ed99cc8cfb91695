"""Settings from the environment and logging setup."""

from __future__ import annotations

import logging
import os
import sys
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

DEFAULT_PORT = "8080"


@dataclass
class Config:
    """Service settings."""

    port: str = DEFAULT_PORT
    log_info: bool = False


def load_config() -> Config:
    """Read settings, loading ``.env`` from the working directory if present.

    Variables already set in the environment win over the file.
    """
    env_file = Path.cwd() / ".env"
    if env_file.is_file():
        load_dotenv(env_file, override=False)
    port = os.environ.get("PORT") or DEFAULT_PORT
    return Config(port=port, log_info=os.environ.get("LOG_INFO") == "true")


def setup_logger(config: Config) -> None:
    """Log to stdout: everything when ``log_info`` is on, else warnings and errors."""
    level = logging.DEBUG if config.log_info else logging.WARNING
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(
        logging.Formatter("time=%(asctime)s level=%(levelname)s msg=%(message)s")
    )
    root = logging.getLogger()
    for existing in list(root.handlers):
        root.removeHandler(existing)
    root.addHandler(handler)
    root.setLevel(level)