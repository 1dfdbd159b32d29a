"""Shared fixtures for integration tests against a real switch.

Set ``IBSWINFO_DEVICE`` (in the environment or a ``.env`` file at the
repository root) to an MST switch device or ``lid-N`` and run as root:

    IBSWINFO_DEVICE=lid-44 pytest -m integration
"""

from __future__ import annotations

import os
from pathlib import Path

import pytest
from dotenv import load_dotenv

from pyibswinfo.config import QueryConfig

# Load .env file before running tests
env_path = Path(__file__).parent.parent.parent / ".env"
if env_path.exists():
    load_dotenv(env_path)

IBSWINFO_DEVICE = os.getenv("IBSWINFO_DEVICE")


@pytest.fixture
def live_config() -> QueryConfig:
    """Query configuration for the switch under test."""
    if not IBSWINFO_DEVICE:
        pytest.skip("Integration tests require the IBSWINFO_DEVICE environment variable")
    if os.geteuid() != 0:
        pytest.skip("Integration tests must run as root")
    return QueryConfig.from_env(IBSWINFO_DEVICE, timeout=60.0)
