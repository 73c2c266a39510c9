"""Shared fixtures for the CHIP-8 test-suite."""

from __future__ import annotations

import pytest

from pychip8.utils import debug


@pytest.fixture(autouse=True)
def _isolate_debug_categories(monkeypatch):
    monkeypatch.delenv("CHIP8_DEBUG", raising=False)
    debug.reload_categories()
    yield
    debug.reload_categories()
