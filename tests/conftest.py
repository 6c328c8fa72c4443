"""
Test configuration and fixtures.
"""
import io
import random

import pytest
from rich.console import Console

from price_predictor import config
from price_predictor.config import DEFAULT_TIMEFRAMES, Settings
from price_predictor.schemas import TimeframeBucket
from price_predictor.ui.console import ConsoleUI


@pytest.fixture(autouse=True)
def fresh_settings(monkeypatch):
    """Keep the settings singleton from leaking between tests"""
    for name in ("POLL_INTERVAL", "REQUEST_TIMEOUT", "LOG_LEVEL", "ASSET_ID", "VS_CURRENCY"):
        monkeypatch.delenv(name, raising=False)
    config.reset_settings()
    yield
    config.reset_settings()


@pytest.fixture
def settings():
    return Settings(_env_file=None)


@pytest.fixture
def buckets():
    return [TimeframeBucket(**tf) for tf in DEFAULT_TIMEFRAMES]


@pytest.fixture
def rng():
    return random.Random(42)


@pytest.fixture
def output():
    return io.StringIO()


@pytest.fixture
def ui(settings, output):
    console = Console(file=output, width=100, force_terminal=False, color_system=None)
    return ConsoleUI(settings, console=console)
