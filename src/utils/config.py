"""
Centralized configuration for the Orientation Drill game.

This module provides all configuration constants and runtime settings for:
- Direction classification (heading tolerance, tilt threshold)
- Round timing (settle period, start delay, frame rate)
- Session defaults and recommended bounds
- Audio system (TTS and feedback tones)
- Orientation sources (mock player, UDP receiver)
- Logging

The Config class contains all constants as class attributes, making them
accessible throughout the application without instantiation.

Usage:
    from utils.config import Config

    tolerance = Config.HEADING_TOLERANCE_DEG
    if Config.AUDIO_TONES_ENABLED:
        # Play feedback tones
"""

import logging

log = logging.getLogger(__name__)


class Config:
    """System configuration constants for Orientation Drill."""

    # ==========================================================================
    # DIRECTION CLASSIFIER: Tolerances
    # ==========================================================================

    # Front/Back/Left/Right share one heading tolerance.
    HEADING_TOLERANCE_DEG = 40.0
    # Up/Down only look at front-back tilt, with a tighter fixed threshold.
    TILT_THRESHOLD_DEG = 30.0

    # ==========================================================================
    # ROUND TIMING
    # ==========================================================================

    SETTLE_SECONDS = 1.0                # Feedback pause after each round
    START_DELAY_SECONDS = 0.5           # Pause between start tone and first command
    LOW_TIME_WARNING_SECONDS = 1.0      # Single tick tone below this remaining time
    LOW_TIME_TICK_ENABLED = True
    FRAME_RATE_HZ = 60                  # Polling cadence of the frame loop

    # ==========================================================================
    # SESSION DEFAULTS & RECOMMENDED BOUNDS
    # ==========================================================================

    DEFAULT_SECONDS_PER_ROUND = 3.0
    DEFAULT_TOTAL_ROUNDS = 10
    SECONDS_PER_ROUND_BOUNDS = (1.0, 5.0)
    TOTAL_ROUNDS_BOUNDS = (5, 20)

    # ==========================================================================
    # AUDIO: Feedback tones
    # ==========================================================================

    AUDIO_TONES_ENABLED = True
    TONE_SAMPLE_RATE = 44100
    TONE_VOLUME = 0.7                   # Master gain applied on top of per-tone gain
    TONE_FADE_SECONDS = 0.01

    # ==========================================================================
    # AUDIO: Speech
    # ==========================================================================

    AUDIO_SPEECH_ENABLED = True
    TTS_RATE_MACOS = 190
    TTS_RATE_LINUX = 150                # espeak-ng is fast by default
    TTS_VOICE_PREFERENCES = ["Samantha", "Alex", "Victoria", "Daniel"]

    # Direction -> spoken command
    COMMAND_LABELS = {
        "front": "Face front",
        "back": "Turn around",
        "left": "Turn left",
        "right": "Turn right",
        "up": "Tilt up",
        "down": "Tilt down",
    }

    # Direction -> short on-screen label
    DIRECTION_DISPLAY_LABELS = {
        "front": "FRONT",
        "back": "BACK",
        "left": "LEFT",
        "right": "RIGHT",
        "up": "UP",
        "down": "DOWN",
    }

    # ==========================================================================
    # ORIENTATION SOURCES
    # ==========================================================================

    # UDP receiver for phones streaming {"alpha", "beta", "gamma"} as JSON
    RECEIVER_HOST = "0.0.0.0"
    RECEIVER_PORT = 5555
    RECEIVER_SOCKET_TIMEOUT = 0.5
    RECEIVER_MAX_DATAGRAM = 4096

    # Simulated player used in mock mode
    MOCK_RATE_HZ = 60
    MOCK_NOISE_DEG = 2.0
    MOCK_REACTION_SECONDS = 0.8
    MOCK_ACCURACY = 0.8
    MOCK_DROPOUT_RATE = 0.0
    MOCK_TURN_DEG = 90.0                # Left/Right rotation of the simulated player
    MOCK_TILT_DEG = 45.0                # Up/Down tilt of the simulated player

    # ==========================================================================
    # PRESENTATION
    # ==========================================================================

    CONSOLE_REFRESH_SECONDS = 0.25

    # ==========================================================================
    # LOGGING
    # ==========================================================================

    LOG_TO_FILES = True
    LOG_DIR_NAME = "logs"
