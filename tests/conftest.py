"""Pytest configuration — makes src/ importable and isolates parser configuration."""

import sys
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from money_value import get_settings, reset_config  # noqa: E402


@pytest.fixture
def fresh_config(monkeypatch):
    """Start from the default parser with no MONEY_* overrides."""
    monkeypatch.delenv("MONEY_PARSER", raising=False)
    get_settings.cache_clear()
    reset_config()
    yield
    get_settings.cache_clear()
    reset_config()
