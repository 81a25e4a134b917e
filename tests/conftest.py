"""Pytest fixtures for easykill tests."""

import pytest

from easykill.ui.base import KeyEvent


@pytest.fixture(autouse=True)
def clear_caches(tmp_path, monkeypatch):
    """Clear the config cache and isolate the config dir for each test."""
    from easykill.config import clear_config_cache

    monkeypatch.setenv("EASYKILL_CONFIG_DIR", str(tmp_path / "config"))
    clear_config_cache()

    yield

    clear_config_cache()


class ScriptedSurface:
    """TerminalSurface that replays a fixed list of keys.

    `display` holds what is currently on screen; `frames` holds a snapshot
    of the display taken every time a key is read.
    """

    def __init__(self, keys):
        self._keys = list(keys)
        self.display: list[str] = []
        self.frames: list[list[str]] = []
        self.clears: list[int] = []

    def write_line(self, text: str) -> None:
        self.display.append(text)

    def read_key(self) -> KeyEvent:
        self.frames.append(list(self.display))
        if not self._keys:
            raise AssertionError("menu asked for more keys than scripted")
        return self._keys.pop(0)

    def clear_last_lines(self, count: int) -> None:
        assert count <= len(self.display), "erased more lines than were drawn"
        self.clears.append(count)
        del self.display[len(self.display) - count :]


@pytest.fixture
def surface():
    """Factory for scripted surfaces."""
    return ScriptedSurface
