"""Tests for the sensor permission gates."""

from __future__ import annotations

from core.imu.permission_gate import CapabilityStatus, PromptPermissionGate, StaticPermissionGate


def test_static_gate_returns_configured_status():
    assert StaticPermissionGate().query() is CapabilityStatus.AVAILABLE
    assert StaticPermissionGate(CapabilityStatus.DENIED).query() is CapabilityStatus.DENIED


def test_usable_flags():
    assert CapabilityStatus.AVAILABLE.usable
    assert CapabilityStatus.GRANTED.usable
    assert not CapabilityStatus.DENIED.usable


def test_prompt_gate_grants_on_yes():
    questions = []

    def prompt(question):
        questions.append(question)
        return " Yes "

    assert PromptPermissionGate(prompt=prompt).query() is CapabilityStatus.GRANTED
    assert len(questions) == 1


def test_prompt_gate_denies_on_anything_else():
    assert PromptPermissionGate(prompt=lambda _: "n").query() is CapabilityStatus.DENIED
    assert PromptPermissionGate(prompt=lambda _: "").query() is CapabilityStatus.DENIED


def test_prompt_gate_denies_on_closed_input():
    def closed(_):
        raise EOFError

    assert PromptPermissionGate(prompt=closed).query() is CapabilityStatus.DENIED
