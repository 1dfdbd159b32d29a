"""Pytest configuration and fixtures for pyibswinfo tests."""

from __future__ import annotations

import pytest
from fakes import (
    SAMPLE_FAN_RPM,
    SAMPLE_FILES,
    FakeTransport,
    load_sample,
    mfsm_output,
)

from pyibswinfo.registers.definitions import RegisterName
from pyibswinfo.tool_version import ToolVersion


@pytest.fixture
def tool_version() -> ToolVersion:
    """A current MFT release (slot aware, SPZR without router_entity)."""
    return ToolVersion(4, 22, 1)


@pytest.fixture
def sample_responses() -> dict[RegisterName | tuple[RegisterName, str], str]:
    """Canned output for every planned register plus per-tachometer MFSM."""
    responses: dict[RegisterName | tuple[RegisterName, str], str] = {
        register: load_sample(name) for register, name in SAMPLE_FILES.items()
    }
    for tacho, rpm in SAMPLE_FAN_RPM.items():
        responses[(RegisterName.MFSM, f"tacho=0x{tacho:x}")] = mfsm_output(rpm)
    return responses


@pytest.fixture
def fake_transport(sample_responses) -> FakeTransport:
    """Transport replaying the SB7800 sample dumps."""
    return FakeTransport(sample_responses, definition=load_sample("mfcr_definition.txt"))
