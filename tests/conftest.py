"""
Pytest configuration and shared fixtures for all tests.
"""

import json
import sys
from pathlib import Path

import pytest  # type: ignore

# Add the project root to sys.path so we can import from src
project_root = Path(__file__).parent.parent
if str(project_root) not in sys.path:
    sys.path.insert(0, str(project_root))

from tests.factories import FakeClock  # noqa: E402


@pytest.fixture
def clock():
    """Controllable clock for cooldown and TTL tests."""
    return FakeClock()


@pytest.fixture(scope="session")
def fixtures_dir():
    """Get the fixtures directory path."""
    return Path(__file__).parent / "fixtures"


@pytest.fixture(scope="session")
def load_fixture(fixtures_dir):
    """Read a fixture file as text, or as JSON for .json files."""
    def _load(name):
        path = fixtures_dir / name
        with open(path, encoding="utf-8") as f:
            if path.suffix == ".json":
                return json.load(f)
            return f.read()
    return _load


@pytest.fixture
def config_file(tmp_path):
    """Write a minimal valid configuration file."""
    data = {
        "environment": "test",
        "api": {"timeout": 5, "max_retries": 1},
        "cache": {"max_entries": 32},
        "rate_limit": {"request_delay": 0.0, "cooldown": 0.0},
        "notifications": {"settings_file": str(tmp_path / "settings.json")},
    }
    path = tmp_path / "config.json"
    path.write_text(json.dumps(data))
    return str(path)


def pytest_configure(config):
    """Configure pytest markers."""
    config.addinivalue_line(
        "markers", "integration: mark test as integration test across components"
    )
    config.addinivalue_line(
        "markers", "unit: mark test as unit test (no external dependencies)"
    )
