"""Headline performance statistics over a trade set."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import asdict, dataclass
from typing import Any

from ..core.enums import TradeStatus
from .record import TradeRecord

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TradeStats:
    """Summary metrics for completed trades.

    Amount fields are in account currency.  ``average_loss`` is a
    positive magnitude; ``largest_loss`` is reported negative.
    """

    total_trades: int = 0
    winning_trades: int = 0
    losing_trades: int = 0
    breakeven_trades: int = 0
    win_rate: float = 0.0  # Percent, 0-100
    total_profit_loss: float = 0.0
    average_win: float = 0.0
    average_loss: float = 0.0
    largest_win: float = 0.0
    largest_loss: float = 0.0
    profit_factor: float = 0.0  # +inf with wins and no losses
    average_rr: float = 0.0
    expectancy: float = 0.0
    average_risk_amount: float = 0.0
    total_risk_amount: float = 0.0
    average_pips: float = 0.0
    total_pips: float = 0.0

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


def _mean(total: float, count: int) -> float:
    return total / count if count > 0 else 0.0


def calculate_stats(trades: Sequence[TradeRecord]) -> TradeStats:
    """Compute headline statistics from the completed trades in ``trades``.

    Open trades are ignored.  Every ratio falls back to 0 on an empty
    denominator, except profit factor which is +inf when there are
    winning amounts but no losing amounts.
    """
    completed = [t for t in trades if t.is_completed]
    if not completed:
        return TradeStats()

    wins = [t for t in completed if t.status == TradeStatus.WIN]
    losses = [t for t in completed if t.status == TradeStatus.LOSS]
    breakeven = [t for t in completed if t.status == TradeStatus.BREAKEVEN]

    total_pl = sum(t.realized_pl for t in completed)
    win_amounts = [abs(t.realized_pl) for t in wins]
    loss_amounts = [abs(t.realized_pl) for t in losses]
    total_win_amount = sum(win_amounts)
    total_loss_amount = sum(loss_amounts)

    average_win = _mean(total_win_amount, len(wins))
    average_loss = _mean(total_loss_amount, len(losses))

    largest_win = max(win_amounts) if win_amounts else 0.0
    largest_loss = -max(loss_amounts) if loss_amounts else 0.0

    if total_loss_amount > 0:
        profit_factor = total_win_amount / total_loss_amount
    elif total_win_amount > 0:
        profit_factor = float("inf")
    else:
        profit_factor = 0.0

    # Logged R:R beats the derived ratio whenever any trade has one
    logged_rr = [t.risk_reward_ratio for t in completed if t.risk_reward_ratio is not None]
    if logged_rr:
        average_rr = sum(logged_rr) / len(logged_rr)
    else:
        average_rr = average_win / average_loss if average_loss > 0 else 0.0

    n = len(completed)
    win_rate = len(wins) / n * 100
    loss_rate = len(losses) / n
    expectancy = (win_rate / 100 * average_win) - (loss_rate * average_loss)

    risks = [float(t.risk_amount) for t in completed if t.risk_amount is not None]
    pips = [t.pips for t in completed if t.pips is not None]
    total_risk = sum(risks)
    total_pips = sum(pips)

    stats = TradeStats(
        total_trades=n,
        winning_trades=len(wins),
        losing_trades=len(losses),
        breakeven_trades=len(breakeven),
        win_rate=win_rate,
        total_profit_loss=total_pl,
        average_win=average_win,
        average_loss=average_loss,
        largest_win=largest_win,
        largest_loss=largest_loss,
        profit_factor=profit_factor,
        average_rr=average_rr,
        expectancy=expectancy,
        average_risk_amount=_mean(total_risk, len(risks)),
        total_risk_amount=total_risk,
        average_pips=_mean(total_pips, len(pips)),
        total_pips=total_pips,
    )
    logger.debug(
        "Stats over %d completed trades: win_rate=%.2f pf=%s",
        n, win_rate, profit_factor,
    )
    return stats


def win_loss_distribution(trades: Sequence[TradeRecord]) -> list[dict[str, Any]]:
    """Win / loss / breakeven counts for a pie chart, zero slices dropped."""
    stats = calculate_stats(trades)
    slices = [
        {"name": "Wins", "value": stats.winning_trades},
        {"name": "Losses", "value": stats.losing_trades},
        {"name": "Breakeven", "value": stats.breakeven_trades},
    ]
    return [s for s in slices if s["value"] > 0]
