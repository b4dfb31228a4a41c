#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Orientation Drill - reaction game for a phone's orientation sensor

The game speaks a direction (front, back, left, right, up, down) and the
player rotates the phone to match before time runs out.

Flow:
1. Settings (CLI flags)
2. Calibration: hold the phone pointing forward, press Enter
3. Rounds until the configured count is reached
4. Result screen, optionally play again

Sources:
- mock: simulated player (no hardware needed)
- udp:  phone streaming {"alpha", "beta", "gamma"} JSON datagrams
"""

import argparse
import sys
import time

from core.builder import SOURCES, Builder
from core.telemetry.loggers.game_logger import close_game_logger, get_game_logger
from presentation.console_presenter import ConsolePresenter
from utils.config import Config
from utils.config_sections import load_session_config
from utils.ctrl_handler import CtrlCHandler


def parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Orientation reaction game")
    parser.add_argument("--source", choices=SOURCES, default="mock",
                        help="orientation feed (default: mock)")
    parser.add_argument("--seconds", type=float, default=Config.DEFAULT_SECONDS_PER_ROUND,
                        help="seconds per round (recommended 1-5)")
    parser.add_argument("--rounds", type=int, default=Config.DEFAULT_TOTAL_ROUNDS,
                        help="number of rounds (recommended 5-20)")
    parser.add_argument("--port", type=int, default=None,
                        help=f"UDP port for --source udp (default {Config.RECEIVER_PORT})")
    parser.add_argument("--mock-accuracy", type=float, default=None,
                        help="hit probability of the simulated player (0-1)")
    parser.add_argument("--mute", action="store_true", help="disable speech and tones")
    parser.add_argument("--seed", type=int, default=None, help="random seed for targets")
    parser.add_argument("--no-log-files", action="store_true", help="do not write session logs")
    return parser.parse_args(argv)


def wait_for_first_sample(calibration, presenter, ctrl_handler, poll_seconds=0.1) -> bool:
    """Show the live readout until the feed delivers a valid sample."""
    while not ctrl_handler.should_stop:
        presenter.render_calibration(calibration.current_reading)
        if calibration.can_confirm:
            return True
        time.sleep(poll_seconds)
    return False


def play_once(session, presenter, ctrl_handler, args) -> bool:
    """One settings -> calibration -> playing -> result pass. False if aborted."""
    session.configure(args.seconds, args.rounds)

    presenter.message("\n📱 Calibration: hold the phone screen-facing-you, pointing straight ahead.")
    status = session.enter_calibration()
    while not status.usable:
        presenter.message(f"❌ {session.calibration.error}")
        retry = ctrl_handler.prompt("Retry permission request? (y/n): ").strip().lower()
        if retry != "y":
            return False
        status = session.enter_calibration()

    if not wait_for_first_sample(session.calibration, presenter, ctrl_handler):
        return False
    presenter.message("")
    ctrl_handler.prompt("Press Enter to set FRONT and start...")
    if ctrl_handler.should_stop:
        return False

    session.confirm_calibration()
    presenter.message("🎮 Go!\n")

    def on_frame():
        if session.machine is not None:
            presenter.render_round(session.machine)

    session.loop.add_tick(on_frame)
    try:
        session.loop.run(until=lambda: session.finished or ctrl_handler.should_stop)
    finally:
        session.loop.remove_tick(on_frame)

    if not session.finished:
        return False
    presenter.render_result(session.result)
    return True


def main(argv=None) -> int:
    """
    Entry point

    Flow:
    1. Build components (sampler, audio, frame loop, session, feed)
    2. Start the orientation feed
    3. Play sessions until the player quits
    4. Ordered cleanup
    """
    args = parse_args(argv)
    try:
        load_session_config(args.seconds, args.rounds)
    except ValueError as e:
        print(f"❌ Invalid settings: {e}")
        return 2

    print("=" * 60)
    print("🧭 Orientation Drill")
    print("=" * 60)

    ctrl_handler = CtrlCHandler()

    if Config.LOG_TO_FILES and not args.no_log_files:
        game_logger = get_game_logger()
        print(f"  📝 Session logs: {game_logger.log_dir}")

    source = None
    session = None
    audio = None

    try:
        print("\n🔧 Initializing components...")
        builder = Builder(seed=args.seed)
        sampler = builder.build_sampler()
        audio = builder.build_audio_system(mute=args.mute)
        loop = builder.build_frame_loop()
        gate = builder.build_permission_gate(args.source, prompt=ctrl_handler.prompt)
        session = builder.build_session(sampler, gate, loop, audio)
        ctrl_handler.on_stop(loop.stop)

        source = builder.build_orientation_source(
            args.source, sampler, session,
            port=args.port, mock_accuracy=args.mock_accuracy,
        )
        if args.source == "udp":
            if not source.start():
                print("❌ Could not open the UDP port")
                return 1
            print(f"  📡 Stream orientation JSON to UDP port {source.config.port}")
        else:
            source.start()

        presenter = ConsolePresenter(formatter=session.formatter)

        while not ctrl_handler.should_stop:
            if not play_once(session, presenter, ctrl_handler, args):
                break
            again = ctrl_handler.prompt("\nPlay again? (y/n): ").strip().lower()
            if again != "y":
                break
            session.restart()

    except (EOFError, KeyboardInterrupt):
        print("\n[INFO] Input closed, exiting...")
    finally:
        print("\n🧹 Cleaning up...")
        if session is not None:
            session.teardown()
        if source is not None:
            source.stop()
        if audio is not None:
            audio.close()
        close_game_logger()
        print("👋 Bye")

    return 0


if __name__ == "__main__":
    sys.exit(main())
