"""Pytest configuration and shared fixtures.

This module provides:
- Pytest markers for test categorization (unit, integration, slow, macos_only)
- Fixtures for data directories, stores, event buses and mock components
"""
import tempfile
from pathlib import Path
from typing import Generator
from unittest.mock import MagicMock, patch

import pytest

from app.events import EventBus
from app.menu_state import MenuStateStore
from config.settings import MonitorSettings
from tests.mocks import LSOF_CURL, LSOF_HEADER, LSOF_NODE, MockSampler, RecordingMenuAdapter


# =============================================================================
# Pytest Configuration
# =============================================================================


def pytest_configure(config: pytest.Config) -> None:
    """Register custom markers for test categorization."""
    config.addinivalue_line("markers", "unit: mark test as a unit test (fast, isolated)")
    config.addinivalue_line("markers", "integration: mark test as an integration test")
    config.addinivalue_line("markers", "slow: mark test as slow running")
    config.addinivalue_line("markers", "macos_only: mark test as requiring macOS")


# =============================================================================
# Directory Fixtures
# =============================================================================


@pytest.fixture
def temp_data_dir() -> Generator[Path, None, None]:
    """Create a temporary directory for test data."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


# =============================================================================
# Sample Data Fixtures
# =============================================================================


@pytest.fixture
def lsof_sample() -> str:
    """Two IPv4 listeners behind a header line."""
    return LSOF_HEADER + LSOF_CURL + LSOF_NODE


# =============================================================================
# Component Fixtures
# =============================================================================


@pytest.fixture
def settings() -> MonitorSettings:
    return MonitorSettings(poll_interval=0.05, sampler_timeout=0.05)


@pytest.fixture
def store() -> MenuStateStore:
    return MenuStateStore()


@pytest.fixture
def sync_bus() -> Generator[EventBus, None, None]:
    """Event bus dispatching on the publishing thread."""
    bus = EventBus(async_mode=False)
    yield bus
    bus.shutdown()


@pytest.fixture
def adapter() -> RecordingMenuAdapter:
    return RecordingMenuAdapter()


@pytest.fixture
def mock_sampler(lsof_sample: str) -> MockSampler:
    return MockSampler([lsof_sample])


@pytest.fixture
def mock_subprocess() -> Generator[MagicMock, None, None]:
    """Mock subprocess.run for command execution testing."""
    with patch("subprocess.run") as mock_run:
        mock_run.return_value = MagicMock(returncode=0, stdout="", stderr="")
        yield mock_run
