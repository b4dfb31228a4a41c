"""Tests for the command-line entry point."""

from __future__ import annotations

import main as main_module


def test_parse_args_defaults():
    args = main_module.parse_args([])
    assert args.source == "mock"
    assert args.mute is False
    assert args.port is None


def test_parse_args_overrides():
    args = main_module.parse_args(["--source", "udp", "--seconds", "2.5", "--rounds", "5", "--port", "6000", "--mute"])
    assert args.source == "udp"
    assert args.seconds == 2.5
    assert args.rounds == 5
    assert args.port == 6000
    assert args.mute is True


def test_invalid_settings_exit_with_usage_error(capsys):
    assert main_module.main(["--rounds", "0", "--no-log-files"]) == 2
    assert "Invalid settings" in capsys.readouterr().out
