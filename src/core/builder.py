"""
Simple Builder Pattern - Orientation Drill
Creates every game dependency in one place so main() stays a thin script.
"""

import random
from dataclasses import replace
from typing import Optional

from communication.orientation_receiver import OrientationReceiver
from core.audio.audio_system import AudioSystem
from core.audio.message_formatter import MessageFormatter
from core.game.direction_classifier import DirectionClassifier
from core.game.frame_loop import FrameLoop
from core.game.game_session import GameSession
from core.game.round_state_machine import RoundState
from core.imu.mock_orientation_source import MockOrientationSource
from core.imu.orientation_sampler import OrientationSampler
from core.imu.permission_gate import (
    CapabilityStatus,
    PermissionGate,
    PromptPermissionGate,
    StaticPermissionGate,
)
from utils.config_sections import (
    load_mock_source_config,
    load_receiver_config,
    load_round_timing_config,
    load_speech_config,
    load_tone_config,
)

SOURCES = ("mock", "udp")


class Builder:
    """Builder que crea todas las dependencias del juego"""

    def __init__(self, seed: Optional[int] = None):
        self.seed = seed

    def build_sampler(self) -> OrientationSampler:
        print("  📦 Creating OrientationSampler...")
        return OrientationSampler()

    def build_audio_system(self, mute: bool = False) -> AudioSystem:
        print("  📦 Creating AudioSystem...")
        speech_config = load_speech_config()
        tone_config = load_tone_config()
        if mute:
            speech_config = replace(speech_config, enabled=False)
            tone_config = replace(tone_config, enabled=False)
        return AudioSystem(speech_config=speech_config, tone_config=tone_config)

    def build_frame_loop(self) -> FrameLoop:
        print("  📦 Creating FrameLoop...")
        return FrameLoop(fps=load_round_timing_config().frame_rate_hz)

    def build_permission_gate(self, source: str, prompt=input) -> PermissionGate:
        # A real phone needs the player's consent; the simulator does not
        if source == "udp":
            return PromptPermissionGate(prompt=prompt)
        return StaticPermissionGate(CapabilityStatus.AVAILABLE)

    def build_session(self, sampler, permission_gate, loop, audio) -> GameSession:
        print("  📦 Creating GameSession...")
        return GameSession(
            sampler=sampler,
            permission_gate=permission_gate,
            loop=loop,
            audio=audio,
            classifier=DirectionClassifier(),
            formatter=MessageFormatter(command_labels=load_speech_config().command_labels),
            rng=random.Random(self.seed),
        )

    def build_orientation_source(
        self,
        source: str,
        sampler: OrientationSampler,
        session: GameSession,
        port: Optional[int] = None,
        mock_accuracy: Optional[float] = None,
    ):
        """Mock player following the session's targets, or the UDP receiver."""
        if source not in SOURCES:
            raise ValueError(f"Unknown source: {source}")

        if source == "udp":
            print("  📦 Creating OrientationReceiver...")
            config = load_receiver_config()
            if port is not None:
                config = replace(config, port=port)
            return OrientationReceiver(sampler, config)

        print("  📦 Creating MockOrientationSource (simulated player)...")
        config = load_mock_source_config()
        if mock_accuracy is not None:
            config = replace(config, accuracy=mock_accuracy)

        def target_provider():
            machine = session.machine
            if machine is None or machine.state is not RoundState.AWAITING_MATCH:
                return None
            target = machine.target
            if target is None:
                return None
            return machine.baseline, target

        return MockOrientationSource(
            sampler,
            mode="player",
            target_provider=target_provider,
            config=config,
            seed=self.seed,
        )
