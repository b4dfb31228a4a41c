"""
Dedicated session logger for the orientation drill.

This module provides a singleton logger that routes the game's named
loggers into per-session files for easier analysis after a run.

Features:
- Singleton pattern (one instance per session)
- Separate log files for rounds, sensor feed and audio
- DEBUG level logging to files
- WARNING level console output for critical messages

Log Files:
- rounds.log: Round targets, resolutions, session summary
- sensor.log: Permission, calibration, feed attach/detach, dropped samples
- audio.log:  TTS and tone backend events

Modules log through ``logging.getLogger("game.<name>")`` and never touch
this class; the CLI creates it once so tests stay free of log files.

Usage:
    from core.telemetry.loggers.game_logger import get_game_logger

    game_logger = get_game_logger(session_dir=Path("logs/session_2025-01-15_10-30-00"))
    game_logger.rounds.info("Round 1/10: target=left")
"""

import logging
from datetime import datetime
from pathlib import Path

LOGGER_FILES = {
    "rounds": "rounds.log",
    "sensor": "sensor.log",
    "audio": "audio.log",
}


class GameLogger:
    """Singleton logger for game session debugging."""

    _instance = None
    _initialized = False

    def __new__(cls, session_dir: Path = None):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __init__(self, session_dir: Path = None):
        if self._initialized:
            return

        # Use provided session directory or create new one
        if session_dir is None:
            from utils.config import Config

            timestamp = datetime.now().strftime("%Y-%m-%d_%H-%M-%S")
            self.log_dir = Path.cwd() / Config.LOG_DIR_NAME / f"session_{timestamp}"
        else:
            self.log_dir = Path(session_dir)

        self.log_dir.mkdir(parents=True, exist_ok=True)

        for name, filename in LOGGER_FILES.items():
            self._setup_logger(name, filename)

        self._initialized = True

    def _setup_logger(self, name: str, filename: str):
        """Setup individual logger with file handler."""
        logger = logging.getLogger(f"game.{name}")
        logger.setLevel(logging.DEBUG)
        logger.propagate = False

        # Clear existing handlers
        logger.handlers.clear()

        # File handler
        fh = logging.FileHandler(self.log_dir / filename, mode='w')
        fh.setLevel(logging.DEBUG)

        # Console handler (critical messages only; the presenter owns the screen)
        ch = logging.StreamHandler()
        ch.setLevel(logging.WARNING)

        formatter = logging.Formatter(
            '%(asctime)s.%(msecs)03d [%(levelname)s] %(message)s',
            datefmt='%H:%M:%S'
        )
        fh.setFormatter(formatter)
        ch.setFormatter(formatter)

        logger.addHandler(fh)
        logger.addHandler(ch)

        setattr(self, name, logger)

    def close(self):
        """Close all handlers."""
        for name in LOGGER_FILES:
            logger = getattr(self, name, None)
            if logger:
                for handler in logger.handlers[:]:
                    handler.close()
                    logger.removeHandler(handler)
                logger.propagate = True
        GameLogger._instance = None
        GameLogger._initialized = False


# Global instance
_game_logger = None


def get_game_logger(session_dir: Path = None):
    """Get or create game logger instance."""
    global _game_logger
    if _game_logger is None:
        _game_logger = GameLogger(session_dir=session_dir)
    return _game_logger


def close_game_logger():
    """Close the global instance so a later session can start fresh."""
    global _game_logger
    if _game_logger is not None:
        _game_logger.close()
        _game_logger = None
