"""
pytest configuration for soil-water-engine tests.

Ensures environment variables from .env are loaded for all tests and that
cached settings never leak between tests.
"""

import logging
from pathlib import Path

import pytest
from dotenv import load_dotenv

from soil_water_engine.config import clear_settings_cache


def pytest_configure(config):
    """Configure pytest session - load environment variables."""
    # Find .env file in project root (parent of tests directory)
    env_path = Path(__file__).parent.parent / ".env"
    if env_path.exists():
        load_dotenv(env_path)


@pytest.fixture(autouse=True)
def _reset_settings():
    """Drop cached settings before and after every test."""
    clear_settings_cache()
    yield
    clear_settings_cache()


@pytest.fixture(autouse=True)
def _restore_root_logger():
    """Undo setup_logging calls made by a test or a CLI invocation."""
    root = logging.getLogger()
    handlers = list(root.handlers)
    level = root.level
    yield
    for handler in root.handlers:
        if handler not in handlers:
            handler.close()
    root.handlers[:] = handlers
    root.setLevel(level)


@pytest.fixture
def loam_kwargs():
    """Parameters for the reference Clay Loam soil (sand 33%, clay 33%)."""
    return {"sand": 33.0, "clay": 33.0, "organic_matter": 0.0}
