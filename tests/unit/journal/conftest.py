"""Shared fixtures and trade builders for journal tests."""

from __future__ import annotations

from datetime import datetime, timedelta
from itertools import count
from typing import Any

import pytest

from trade_journal.journal.record import TradeRecord

BASE_TIME = datetime(2024, 1, 1, 9, 0, 0)  # A Monday

_ids = count(1)


def make_trade(**overrides: Any) -> TradeRecord:
    """Build a TradeRecord with sane defaults; any field can be overridden.

    Defaults describe a closed EURUSD buy with no logged P&L.
    """
    fields: dict[str, Any] = {
        "id": f"trade-{next(_ids)}",
        "symbol": "EURUSD",
        "asset_class": "forex",
        "direction": "buy",
        "entry_date": BASE_TIME,
        "exit_date": BASE_TIME + timedelta(hours=4),
        "entry_price": 1.1,
        "lot_size": 1,
        "status": "win",
    }
    fields.update(overrides)
    return TradeRecord(**fields)


def win(amount: float, **overrides: Any) -> TradeRecord:
    return make_trade(status="win", reward_amount=amount, **overrides)


def loss(amount: float, **overrides: Any) -> TradeRecord:
    return make_trade(status="loss", reward_amount=amount, **overrides)


def breakeven(**overrides: Any) -> TradeRecord:
    overrides.setdefault("profit_loss", 0)
    return make_trade(status="breakeven", **overrides)


def open_trade(**overrides: Any) -> TradeRecord:
    return make_trade(status=None, exit_date=None, **overrides)


@pytest.fixture
def mixed_trades():
    """The reference scenario: one win, one loss, one legacy breakeven."""
    return [win(100), loss(50), breakeven()]
