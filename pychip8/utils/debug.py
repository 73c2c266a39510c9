"""Category-filtered debug output for the CHIP-8 interpreter.

Set ``CHIP8_DEBUG`` to a comma-separated list of categories (``cpu``,
``input``, ``audio``, ``perf``, ``trace``) or to ``all``. Messages go to
stdout as ``[CHIP8][category] message``.
"""

from __future__ import annotations

import os
from typing import FrozenSet

DEBUG_ENV_VAR = "CHIP8_DEBUG"
_PREFIX = "CHIP8"

_categories: FrozenSet[str] | None = None


def enabled_categories() -> FrozenSet[str]:
    """Return the categories named in ``CHIP8_DEBUG`` (read once, then cached)."""

    global _categories
    if _categories is None:
        raw = os.environ.get(DEBUG_ENV_VAR, "")
        _categories = frozenset(part.strip().lower() for part in raw.split(",") if part.strip())
    return _categories


def reload_categories() -> None:
    """Forget the cached categories so ``CHIP8_DEBUG`` is read again."""

    global _categories
    _categories = None


def debug_enabled(category: str | None = None) -> bool:
    categories = enabled_categories()
    if not categories:
        return False
    if category is None or "all" in categories:
        return True
    return category.lower() in categories


def debug_log(category: str, message: str, *args) -> None:
    if not debug_enabled(category):
        return
    if args:
        try:
            message = message % args
        except (TypeError, ValueError):
            message = f"{message} {args!r}"
    print(f"[{_PREFIX}][{category}] {message}")
