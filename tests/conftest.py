"""
Pytest configuration and shared fixtures for ChatCal testing.

Provides a fixed resolution context, temporary configuration directories and
a wired-up application for unit and integration tests.
"""

from pathlib import Path

import pytest
import yaml

from chatcal.core.application import ChatCalApp
from chatcal.core.config_manager import ConfigManager
from chatcal.processors.models import ResolutionContext

from .fixtures.sample_data import (
    DEFAULT_DURATION,
    REFERENCE_NOW,
    REFERENCE_TIMEZONE,
    SAMPLE_CONFIGURATIONS,
    SAMPLE_MESSAGES,
)


@pytest.fixture(autouse=True)
def clean_chatcal_env(monkeypatch):
    """Keep CHATCAL_* variables from the developer's shell out of the tests"""
    import os
    for key in list(os.environ):
        if key.startswith("CHATCAL_"):
            monkeypatch.delenv(key, raising=False)


# Resolution Fixtures
@pytest.fixture
def reference_now():
    """Monday 2024-10-21 10:00 local time"""
    return REFERENCE_NOW


@pytest.fixture
def ctx():
    """Resolution context used by the documented examples"""
    return ResolutionContext(
        reference_now=REFERENCE_NOW,
        timezone=REFERENCE_TIMEZONE,
        default_duration_minutes=DEFAULT_DURATION,
    )


# Configuration Fixtures
@pytest.fixture
def temp_config_dir(tmp_path):
    """Temporary directory holding default and testing configuration files"""
    config_dir = tmp_path / "config"
    config_dir.mkdir()

    with open(config_dir / "default_config.yaml", 'w') as f:
        yaml.dump(SAMPLE_CONFIGURATIONS["default"], f)

    with open(config_dir / "testing.yaml", 'w') as f:
        yaml.dump(SAMPLE_CONFIGURATIONS["testing"], f)

    return config_dir


@pytest.fixture
def config_manager(temp_config_dir):
    """Configuration manager reading the temporary directory"""
    return ConfigManager(temp_config_dir, environment="development")


@pytest.fixture
def app(config_manager):
    """Application wired to the temporary configuration"""
    return ChatCalApp(config_manager=config_manager)


# Test Data Fixtures
@pytest.fixture
def sample_messages():
    """Sample chat messages with expected events"""
    return list(SAMPLE_MESSAGES)


# Custom pytest markers
def pytest_configure(config):
    """Configure custom pytest markers"""
    config.addinivalue_line(
        "markers", "unit: mark test as unit test"
    )
    config.addinivalue_line(
        "markers", "integration: mark test as integration test"
    )
    config.addinivalue_line(
        "markers", "slow: mark test as slow running"
    )


# Test Collection Hooks
def pytest_collection_modifyitems(config, items):
    """Modify test collection to add markers based on file location"""
    for item in items:
        path = Path(str(item.fspath))
        if "unit" in path.parts:
            item.add_marker(pytest.mark.unit)
        elif "integration" in path.parts:
            item.add_marker(pytest.mark.integration)
