"""
Interpreter settings.

Author: xwest
"""

import os
from dataclasses import dataclass


@dataclass
class InterpreterConfig:
    """Interpreter configuration."""
    # Render the value of bare expression statements (REPL behaviour)
    echo_results: bool = False
    # Deepest allowed nesting of function calls
    max_call_depth: int = 64
    filename: str = "<input>"
    # Script lines containing this marker are skipped by execute_file
    header_marker: str = "main library"
    log_level: str = "WARNING"

    @classmethod
    def from_env(cls, **overrides) -> "InterpreterConfig":
        """Build a config from KISUMU_* environment variables, then apply overrides."""
        config = cls()

        echo = os.environ.get("KISUMU_ECHO")
        if echo is not None:
            config.echo_results = echo.strip().lower() in ("1", "true", "yes", "on")

        depth = os.environ.get("KISUMU_MAX_CALL_DEPTH")
        if depth is not None:
            try:
                config.max_call_depth = int(depth)
            except ValueError:
                raise ValueError(f"KISUMU_MAX_CALL_DEPTH must be an integer, got {depth!r}")

        level = os.environ.get("KISUMU_LOG_LEVEL")
        if level:
            config.log_level = level.strip().upper()

        for key, value in overrides.items():
            if not hasattr(config, key):
                raise TypeError(f"unknown config option: {key}")
            setattr(config, key, value)

        return config
