"""
Speech commands and feedback tones for the game.

AudioSystem is an explicitly owned handle: the session creates it, calls
``initialize()`` on the calibration confirmation (the first user gesture of
a session) and ``close()`` on teardown. Nothing is kept in module globals.

Speech backends:
- macOS: ``say`` subprocess (terminated to cancel)
- Linux/Windows: pyttsx3 on one worker thread fed by a queue
  (``engine.stop()`` to cancel)

A new utterance always cancels the one in flight, so commands never overlap.

Tones are synthesized with numpy and played non-blocking with sounddevice:
- START:   triangle sweep 440 -> 880 Hz, linear fade (0.4s)
- SUCCESS: sine jump 987 -> 1318 Hz, exponential decay (0.6s)
- FAILURE: sawtooth buzz 150 -> 100 Hz, exponential decay (0.4s)
- TICK:    short square blip at 800 Hz (0.05s)

Every backend call is best effort: failures are logged and swallowed so a
broken audio stack never blocks or delays gameplay.
"""

import logging
import platform
import queue
import shutil
import subprocess
import threading
from dataclasses import dataclass
from enum import Enum
from typing import Dict, Optional, Tuple

import numpy as np

# PortAudio may be missing on headless machines; tones are then disabled
try:
    import sounddevice as sd
except (ImportError, OSError):
    sd = None

try:
    import pyttsx3
except ImportError:
    pyttsx3 = None

from utils.config_sections import (
    SpeechConfig,
    ToneConfig,
    load_speech_config,
    load_tone_config,
)

log = logging.getLogger("game.audio")


class ToneKind(Enum):
    START = "start"
    SUCCESS = "success"
    FAILURE = "failure"
    TICK = "tick"


@dataclass(frozen=True)
class ToneSpec:
    waveform: str            # sine | square | sawtooth | triangle
    start_frequency: float   # Hz
    end_frequency: float     # Hz, reached after sweep_seconds
    sweep_seconds: float
    duration: float          # seconds
    gain: float
    hold_seconds: float = 0.0    # gain held flat before the decay starts
    decay: str = "exponential"   # exponential | linear


TONE_SPECS: Dict[ToneKind, ToneSpec] = {
    ToneKind.START: ToneSpec("triangle", 440.0, 880.0, 0.4, 0.4, 0.2, decay="linear"),
    ToneKind.SUCCESS: ToneSpec("sine", 987.0, 1318.0, 0.08, 0.6, 0.2, hold_seconds=0.08),
    ToneKind.FAILURE: ToneSpec("sawtooth", 150.0, 100.0, 0.3, 0.4, 0.2),
    ToneKind.TICK: ToneSpec("square", 800.0, 800.0, 0.0, 0.05, 0.05),
}

_DECAY_FLOOR = 0.001


def synthesize_tone(
    spec: ToneSpec,
    sample_rate: int = 44100,
    volume: float = 1.0,
    fade_seconds: float = 0.01,
) -> np.ndarray:
    """Render a tone to a mono float32 buffer in [-1, 1]."""
    n_samples = max(1, int(sample_rate * spec.duration))
    t = np.arange(n_samples) / float(sample_rate)

    # Frequency sweep then hold, integrated into phase so the sweep is click-free
    if spec.sweep_seconds > 0:
        progress = np.clip(t / spec.sweep_seconds, 0.0, 1.0)
        frequency = spec.start_frequency + (spec.end_frequency - spec.start_frequency) * progress
    else:
        frequency = np.full(n_samples, spec.start_frequency)
    cycles = np.cumsum(frequency) / float(sample_rate)

    if spec.waveform == "square":
        wave = np.where(np.sin(2 * np.pi * cycles) >= 0, 1.0, -1.0)
    elif spec.waveform == "sawtooth":
        wave = 2.0 * (cycles % 1.0) - 1.0
    elif spec.waveform == "triangle":
        wave = 2.0 * np.abs(2.0 * (cycles % 1.0) - 1.0) - 1.0
    else:
        wave = np.sin(2 * np.pi * cycles)

    # Gain envelope: flat hold, then decay to the floor at the end
    decay_span = max(spec.duration - spec.hold_seconds, 1e-6)
    decay_progress = np.clip((t - spec.hold_seconds) / decay_span, 0.0, 1.0)
    if spec.decay == "linear":
        envelope = spec.gain + (_DECAY_FLOOR - spec.gain) * decay_progress
    else:
        envelope = spec.gain * (_DECAY_FLOOR / spec.gain) ** decay_progress

    tone = wave * envelope * volume

    fade_samples = int(sample_rate * fade_seconds)
    if fade_samples > 0 and len(tone) > fade_samples * 2:
        tone[:fade_samples] *= np.linspace(0, 1, fade_samples)
        tone[-fade_samples:] *= np.linspace(1, 0, fade_samples)

    return tone.astype(np.float32)


class AudioSystem:
    """Lifecycle-scoped speech + tone handle."""

    def __init__(
        self,
        speech_config: Optional[SpeechConfig] = None,
        tone_config: Optional[ToneConfig] = None,
    ) -> None:
        self.speech_config = speech_config or load_speech_config()
        self.tone_config = tone_config or load_tone_config()

        self.tts_engine = None
        self.tts_backend: Optional[str] = None
        self.tts_rate = self.speech_config.rate_linux
        self.selected_voice: Optional[str] = None

        self._lock = threading.Lock()
        self._say_process = None
        self._speech_queue: "queue.Queue[Optional[Tuple[int, str]]]" = queue.Queue()
        self._speech_worker: Optional[threading.Thread] = None
        self._utterance_id = 0
        self.tts_speaking = False
        self.last_phrase: Optional[str] = None
        self.initialized = False

        self.tone_stats: Dict[str, int] = {kind.value: 0 for kind in ToneKind}
        self._tone_cache: Dict[ToneKind, np.ndarray] = {}

    @property
    def is_speaking(self) -> bool:
        return self.tts_speaking

    @property
    def tones_available(self) -> bool:
        return self.tone_config.enabled and sd is not None

    def initialize(self) -> None:
        """Set up backends. Safe to call more than once."""
        if self.initialized:
            return
        if self.speech_config.enabled:
            self._setup_tts()
        if self.tone_config.enabled and sd is None:
            log.warning("sounddevice unavailable (PortAudio missing?); tones disabled")
        self.initialized = True
        log.info(
            "Audio system initialized (speech=%s, tones=%s)",
            self.tts_backend or "off", "on" if self.tones_available else "off",
        )

    def _setup_tts(self) -> None:
        """Configure TTS based on the operating system."""
        system = platform.system()

        if system == "Darwin" and shutil.which("say"):
            self.tts_backend = "say"
            self.tts_rate = self.speech_config.rate_macos
            prefs = self.speech_config.voice_preferences
            self.selected_voice = prefs[0] if prefs else None
            log.info("Using 'say' for TTS on macOS (rate=%s)", self.tts_rate)
            return

        if pyttsx3 is None:
            log.warning("pyttsx3 not installed; speech disabled on %s", system)
            self.tts_backend = None
            return

        try:
            self.tts_engine = pyttsx3.init()
            self.tts_rate = self.speech_config.rate_linux
            self.tts_engine.setProperty("rate", self.tts_rate)
            self.tts_engine.setProperty("volume", 1.0)
            self.tts_backend = "pyttsx3"
            log.info("Using pyttsx3 for TTS on %s (rate=%s)", system, self.tts_rate)
        except Exception as e:
            log.warning("Failed to initialize pyttsx3 on %s: %s", system, e)
            self.tts_engine = None
            self.tts_backend = None

    def speak(self, message: str) -> bool:
        """Speak ``message``, cancelling whatever is being said. Fire-and-forget."""
        if not message or not self.tts_backend:
            return False

        self._cancel_in_flight()
        with self._lock:
            self._utterance_id += 1
            utterance_id = self._utterance_id
        self.last_phrase = message

        if self.tts_backend == "pyttsx3":
            # runAndWait() is not re-entrant: one worker owns the engine loop
            self._ensure_speech_worker()
            self._speech_queue.put((utterance_id, message))
            return True

        def _speak():
            try:
                self.tts_speaking = True
                log.debug("speak('%s') backend=%s", message, self.tts_backend)

                run_cmd = ["say", "-r", str(self.tts_rate)]
                if self.selected_voice:
                    run_cmd.extend(["-v", self.selected_voice])
                run_cmd.append(message)
                # No wait(): the process is terminated if a new command arrives
                process = subprocess.Popen(run_cmd)
                with self._lock:
                    if utterance_id == self._utterance_id:
                        self._say_process = process
                    else:
                        # Superseded before it started
                        process.terminate()

            except Exception as e:
                log.warning("TTS error: %s", e)
            finally:
                if utterance_id == self._utterance_id:
                    self.tts_speaking = False

        threading.Thread(target=_speak, daemon=True).start()
        return True

    def _ensure_speech_worker(self) -> None:
        if self._speech_worker is None:
            self._speech_worker = threading.Thread(target=self._speech_worker_loop, daemon=True)
            self._speech_worker.start()

    def _speech_worker_loop(self) -> None:
        """Speak queued pyttsx3 utterances one at a time until a None sentinel."""
        while True:
            item = self._speech_queue.get()
            if item is None:
                break

            utterance_id, message = item
            if utterance_id != self._utterance_id:
                continue

            try:
                self.tts_speaking = True
                log.debug("speak('%s') backend=pyttsx3", message)
                self.tts_engine.say(message)
                self.tts_engine.runAndWait()
            except Exception as e:
                log.warning("TTS error: %s", e)
            finally:
                if utterance_id == self._utterance_id:
                    self.tts_speaking = False

    def _cancel_in_flight(self) -> None:
        with self._lock:
            process, self._say_process = self._say_process, None
        # Drop utterances still waiting for the worker
        while True:
            try:
                self._speech_queue.get_nowait()
            except queue.Empty:
                break
        try:
            if process is not None and process.poll() is None:
                process.terminate()
            if self.tts_backend == "pyttsx3" and self.tts_engine and self.tts_speaking:
                self.tts_engine.stop()
        except Exception as e:
            log.warning("Failed to cancel utterance: %s", e)
        self.tts_speaking = False

    def play_tone(self, kind: ToneKind) -> bool:
        """Play a feedback tone without blocking. Returns False if skipped."""
        if not self.tones_available:
            return False

        try:
            buffer = self._tone_cache.get(kind)
            if buffer is None:
                buffer = synthesize_tone(
                    TONE_SPECS[kind],
                    sample_rate=self.tone_config.sample_rate,
                    volume=self.tone_config.volume,
                    fade_seconds=self.tone_config.fade_seconds,
                )
                self._tone_cache[kind] = buffer
            sd.play(buffer, samplerate=self.tone_config.sample_rate, blocking=False)
        except Exception as e:
            log.warning("Failed to play %s tone: %s", kind.value, e)
            return False

        self.tone_stats[kind.value] += 1
        return True

    def get_tone_stats(self) -> dict:
        return dict(self.tone_stats)

    def close(self) -> None:
        self._cancel_in_flight()
        if self._speech_worker is not None:
            self._speech_queue.put(None)
            self._speech_worker.join(timeout=2.0)
            self._speech_worker = None
        if self.tts_backend == "pyttsx3" and self.tts_engine:
            try:
                self.tts_engine.stop()
            except Exception:
                pass
        if sd is not None and self.tone_config.enabled:
            try:
                sd.stop()
            except Exception as e:
                log.debug("sounddevice stop failed: %s", e)
        self.initialized = False
        log.info("AudioSystem closed")
