"""
Typed configuration sections for Orientation Drill.

This module provides strongly-typed configuration sections to replace
scattered getattr(Config, ...) calls with proper type hints and defaults.

Benefits:
- Type safety: IDE autocomplete and type checking
- Discoverability: All config options visible in one place
- Default values: Centralized and documented
- Better testing: Can build sections directly without touching Config
"""

import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class SessionConfig:
    """Parameters chosen before a session starts. Immutable during play."""

    seconds_per_round: float = 3.0
    total_rounds: int = 10

    def __post_init__(self) -> None:
        if isinstance(self.seconds_per_round, bool) or not isinstance(self.seconds_per_round, (int, float)):
            raise ValueError(f"seconds_per_round must be a number, got {self.seconds_per_round!r}")
        if not self.seconds_per_round > 0:
            raise ValueError(f"seconds_per_round must be > 0, got {self.seconds_per_round}")
        if isinstance(self.total_rounds, bool) or not isinstance(self.total_rounds, int):
            raise ValueError(f"total_rounds must be an integer, got {self.total_rounds!r}")
        if self.total_rounds <= 0:
            raise ValueError(f"total_rounds must be > 0, got {self.total_rounds}")


@dataclass
class ClassifierConfig:
    """Configuration for the direction classifier."""

    # Heading tolerance shared by Front/Back/Left/Right
    tolerance_deg: float = 40.0

    # Tilt threshold for Up/Down
    tilt_threshold_deg: float = 30.0


@dataclass
class RoundTimingConfig:
    """Configuration for round pacing."""

    settle_seconds: float = 1.0  # Feedback pause, no classification
    start_delay: float = 0.5  # Start tone -> first command
    low_time_warning_seconds: float = 1.0
    low_time_tick_enabled: bool = True
    frame_rate_hz: int = 60


@dataclass
class ToneConfig:
    """Configuration for synthesized feedback tones."""

    enabled: bool = True
    sample_rate: int = 44100
    volume: float = 0.7  # 0.0 to 1.0
    fade_seconds: float = 0.01


@dataclass
class SpeechConfig:
    """Configuration for spoken commands."""

    enabled: bool = True
    rate_macos: int = 190
    rate_linux: int = 150
    voice_preferences: List[str] = field(
        default_factory=lambda: ["Samantha", "Alex", "Victoria", "Daniel"]
    )
    command_labels: Dict[str, str] = field(default_factory=dict)


@dataclass
class ReceiverConfig:
    """Configuration for the UDP orientation receiver."""

    host: str = "0.0.0.0"
    port: int = 5555
    socket_timeout: float = 0.5
    max_datagram: int = 4096


@dataclass
class MockSourceConfig:
    """Configuration for the simulated orientation source."""

    rate_hz: int = 60
    noise_deg: float = 2.0
    reaction_seconds: float = 0.8
    accuracy: float = 0.8
    dropout_rate: float = 0.0
    turn_deg: float = 90.0
    tilt_deg: float = 45.0


def load_session_config(
    seconds_per_round: Optional[float] = None,
    total_rounds: Optional[int] = None,
) -> SessionConfig:
    """
    Build a SessionConfig, filling missing values from Config.

    Values outside the recommended bounds are accepted but logged.

    Raises:
        ValueError: if a value is not positive
    """
    from utils.config import Config

    if seconds_per_round is None:
        seconds_per_round = getattr(Config, "DEFAULT_SECONDS_PER_ROUND", 3.0)
    if total_rounds is None:
        total_rounds = getattr(Config, "DEFAULT_TOTAL_ROUNDS", 10)

    session = SessionConfig(seconds_per_round=seconds_per_round, total_rounds=total_rounds)

    seconds_bounds: Tuple[float, float] = getattr(Config, "SECONDS_PER_ROUND_BOUNDS", (1.0, 5.0))
    rounds_bounds: Tuple[int, int] = getattr(Config, "TOTAL_ROUNDS_BOUNDS", (5, 20))
    if not seconds_bounds[0] <= session.seconds_per_round <= seconds_bounds[1]:
        log.warning(
            "seconds_per_round=%s outside recommended range %s-%s",
            session.seconds_per_round, *seconds_bounds,
        )
    if not rounds_bounds[0] <= session.total_rounds <= rounds_bounds[1]:
        log.warning(
            "total_rounds=%s outside recommended range %s-%s",
            session.total_rounds, *rounds_bounds,
        )
    return session


def load_classifier_config() -> ClassifierConfig:
    """
    Load classifier configuration from Config with fallback defaults.

    Returns:
        ClassifierConfig with values from Config or defaults
    """
    from utils.config import Config

    return ClassifierConfig(
        tolerance_deg=getattr(Config, "HEADING_TOLERANCE_DEG", 40.0),
        tilt_threshold_deg=getattr(Config, "TILT_THRESHOLD_DEG", 30.0),
    )


def load_round_timing_config() -> RoundTimingConfig:
    """
    Load round timing configuration from Config with fallback defaults.

    Returns:
        RoundTimingConfig with values from Config or defaults
    """
    from utils.config import Config

    return RoundTimingConfig(
        settle_seconds=getattr(Config, "SETTLE_SECONDS", 1.0),
        start_delay=getattr(Config, "START_DELAY_SECONDS", 0.5),
        low_time_warning_seconds=getattr(Config, "LOW_TIME_WARNING_SECONDS", 1.0),
        low_time_tick_enabled=getattr(Config, "LOW_TIME_TICK_ENABLED", True),
        frame_rate_hz=getattr(Config, "FRAME_RATE_HZ", 60),
    )


def load_tone_config() -> ToneConfig:
    """
    Load tone configuration from Config with fallback defaults.

    Returns:
        ToneConfig with values from Config or defaults
    """
    from utils.config import Config

    return ToneConfig(
        enabled=getattr(Config, "AUDIO_TONES_ENABLED", True),
        sample_rate=getattr(Config, "TONE_SAMPLE_RATE", 44100),
        volume=getattr(Config, "TONE_VOLUME", 0.7),
        fade_seconds=getattr(Config, "TONE_FADE_SECONDS", 0.01),
    )


def load_speech_config() -> SpeechConfig:
    """
    Load speech configuration from Config with fallback defaults.

    Returns:
        SpeechConfig with values from Config or defaults
    """
    from utils.config import Config

    return SpeechConfig(
        enabled=getattr(Config, "AUDIO_SPEECH_ENABLED", True),
        rate_macos=getattr(Config, "TTS_RATE_MACOS", 190),
        rate_linux=getattr(Config, "TTS_RATE_LINUX", 150),
        voice_preferences=list(getattr(Config, "TTS_VOICE_PREFERENCES", [])),
        command_labels=dict(getattr(Config, "COMMAND_LABELS", {})),
    )


def load_receiver_config() -> ReceiverConfig:
    """
    Load UDP receiver configuration from Config with fallback defaults.

    Returns:
        ReceiverConfig with values from Config or defaults
    """
    from utils.config import Config

    return ReceiverConfig(
        host=getattr(Config, "RECEIVER_HOST", "0.0.0.0"),
        port=getattr(Config, "RECEIVER_PORT", 5555),
        socket_timeout=getattr(Config, "RECEIVER_SOCKET_TIMEOUT", 0.5),
        max_datagram=getattr(Config, "RECEIVER_MAX_DATAGRAM", 4096),
    )


def load_mock_source_config() -> MockSourceConfig:
    """
    Load mock source configuration from Config with fallback defaults.

    Returns:
        MockSourceConfig with values from Config or defaults
    """
    from utils.config import Config

    return MockSourceConfig(
        rate_hz=getattr(Config, "MOCK_RATE_HZ", 60),
        noise_deg=getattr(Config, "MOCK_NOISE_DEG", 2.0),
        reaction_seconds=getattr(Config, "MOCK_REACTION_SECONDS", 0.8),
        accuracy=getattr(Config, "MOCK_ACCURACY", 0.8),
        dropout_rate=getattr(Config, "MOCK_DROPOUT_RATE", 0.0),
        turn_deg=getattr(Config, "MOCK_TURN_DEG", 90.0),
        tilt_deg=getattr(Config, "MOCK_TILT_DEG", 45.0),
    )
