"""Shared fixtures."""

import pytest

from card_digitizer.config import get_settings


@pytest.fixture
def card_image(tmp_path):
    """A small file with a supported image extension."""
    path = tmp_path / "card.png"
    path.write_bytes(b"\x89PNG\r\n\x1a\nfake image bytes")
    return path


@pytest.fixture(autouse=True)
def clear_settings_cache():
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()
