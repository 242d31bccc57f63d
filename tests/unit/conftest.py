"""Shared fixtures for unit tests."""

from __future__ import annotations

import os

import pytest


@pytest.fixture(autouse=True)
def _isolate_env(monkeypatch):
    """Keep TRADE_JOURNAL_* variables from the shell out of every test."""
    for name in list(os.environ):
        if name.startswith("TRADE_JOURNAL_"):
            monkeypatch.delenv(name)
