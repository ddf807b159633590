"""Shared pytest hooks.

Tests marked ``tui`` start a headless Textual app. ``TERNBIRD_CI=1`` leaves
them out so the plain suite never needs an event loop driver.
"""

from __future__ import annotations

import os

import pytest

SKIP_TUI = os.environ.get("TERNBIRD_CI") == "1"


def pytest_runtest_setup(item: pytest.Item) -> None:
    if SKIP_TUI and item.get_closest_marker("tui") is not None:
        pytest.skip("TERNBIRD_CI is set; run the tests-tui session instead")
