"""Shared test fixtures for the race card extraction system."""

import pytest

from config import ConfigurationManager


SAMPLE_PROGRAM = """SANTA ANITA
March 15, 2024
RACE 1
6 Furlongs Dirt Purse $40,000
1. MIDNIGHT RUN (J. Smith) 5-1
2. SOLAR FLARE (A. Lee) 3-1
RACE 2
"""

MULTI_RACE_PROGRAM = """Gulfstream Park - Official Program
Saturday 3/16/2024

RACE 3
1 Mile Turf Purse $75,000
1. OCEAN BREEZE (L. Saez) 2-1
4. NORTHERN LIGHTS 7/2

RACE 1
5.5 Furlongs Main Track
Purse 32,000
2. DUSTY TRAIL (I. Ortiz) 9-2

RACE 2
Scratches: none
"""

CLOUD_ENV_VARS = (
    "GOOGLE_CLOUD_KEY_FILE",
    "GOOGLE_CLOUD_PROJECT_ID",
    "GOOGLE_CLOUD_API_KEY",
    "LOG_LEVEL",
    "MAX_FILE_SIZE",
)


@pytest.fixture(autouse=True)
def fresh_config(monkeypatch):
    """Start every test from the bundled settings without environment overrides."""
    for name in CLOUD_ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    ConfigurationManager.reset()
    yield
    ConfigurationManager.reset()


@pytest.fixture
def config() -> ConfigurationManager:
    """The loaded configuration manager."""
    return ConfigurationManager()


@pytest.fixture
def sample_program_text() -> str:
    """The single-race program used throughout the docs."""
    return SAMPLE_PROGRAM


@pytest.fixture
def multi_race_program_text() -> str:
    """A program with out-of-order races and one race without entries."""
    return MULTI_RACE_PROGRAM
