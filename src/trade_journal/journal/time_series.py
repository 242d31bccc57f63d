"""Time-bucketed performance: equity curve, months, weekdays, calendar days.

Usage::

    curve = equity_curve(trades)
    for point in curve:           # iterate as often as needed
        print(point.date, point.equity)
    print(curve.max_drawdown)

    months = monthly_performance(trades)
    weekdays = day_of_week_performance(trades)   # always 7 entries
"""

from __future__ import annotations

import logging
from collections import defaultdict
from collections.abc import Iterator, Sequence
from dataclasses import asdict, dataclass, field
from datetime import date, datetime, timezone
from typing import Any

import numpy as np

from ..core.enums import TradeStatus
from .record import TradeRecord

logger = logging.getLogger(__name__)

# Sunday-first, matching the calendar view
DAY_NAMES = ("Sun", "Mon", "Tue", "Wed", "Thu", "Fri", "Sat")
MONTH_ABBR = (
    "Jan", "Feb", "Mar", "Apr", "May", "Jun",
    "Jul", "Aug", "Sep", "Oct", "Nov", "Dec",
)


def _chrono_key(ts: datetime) -> datetime:
    """Comparable key for mixed naive / aware timestamps (aware → naive UTC)."""
    if ts.tzinfo is None:
        return ts
    return ts.astimezone(timezone.utc).replace(tzinfo=None)


def _pct(part: int, whole: int) -> float:
    return part / whole * 100 if whole > 0 else 0.0


# ---------------------------------------------------------------------------
# Equity curve
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class EquityPoint:
    date: date
    equity: float
    trade_id: str = ""


class EquityCurve:
    """Cumulative realized P&L ordered by exit time.

    Iterating yields :class:`EquityPoint` objects lazily; the curve can be
    iterated any number of times and always yields the same points.
    Trades sharing an exit timestamp keep their input order.
    """

    def __init__(self, trades: Sequence[TradeRecord]) -> None:
        closed = [t for t in trades if t.is_completed and t.exit_date is not None]
        closed.sort(key=lambda t: _chrono_key(t.exit_date))
        self._legs: tuple[tuple[date, float, str], ...] = tuple(
            (t.exit_date.date(), t.realized_pl, t.id) for t in closed
        )

    def __iter__(self) -> Iterator[EquityPoint]:
        cumulative = 0.0
        for day, pl, trade_id in self._legs:
            cumulative += pl
            yield EquityPoint(date=day, equity=cumulative, trade_id=trade_id)

    def __len__(self) -> int:
        return len(self._legs)

    def _equity_array(self) -> np.ndarray:
        return np.cumsum(np.array([pl for _, pl, _ in self._legs], dtype=float))

    @property
    def final_equity(self) -> float:
        return float(sum(pl for _, pl, _ in self._legs))

    @property
    def peak_equity(self) -> float:
        """Highest cumulative P&L reached (0 for an empty curve)."""
        if not self._legs:
            return 0.0
        return max(0.0, float(np.max(self._equity_array())))

    @property
    def max_drawdown(self) -> float:
        """Largest peak-to-trough decline, as a positive amount.

        The curve starts from a flat 0 baseline, so an initial losing
        streak counts as drawdown.
        """
        if not self._legs:
            return 0.0
        eq = np.concatenate(([0.0], self._equity_array()))
        running_max = np.maximum.accumulate(eq)
        return float(np.max(running_max - eq))

    def to_list(self) -> list[dict[str, Any]]:
        return [
            {"date": p.date.isoformat(), "equity": p.equity, "trade_id": p.trade_id}
            for p in self
        ]


def equity_curve(trades: Sequence[TradeRecord]) -> EquityCurve:
    """Build the equity curve from completed trades that have an exit date."""
    return EquityCurve(trades)


@dataclass
class _Tally:
    """Running totals for one time bucket."""

    profit: float = 0.0
    trades: int = 0
    wins: int = 0
    trade_ids: list[str] = field(default_factory=list)

    def record(self, trade: TradeRecord) -> None:
        self.profit += trade.realized_pl
        self.trades += 1
        if trade.status == TradeStatus.WIN:
            self.wins += 1
        self.trade_ids.append(trade.id)

    @property
    def win_rate(self) -> float:
        return _pct(self.wins, self.trades)


# ---------------------------------------------------------------------------
# Monthly
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class MonthlyPerformance:
    month: str  # "YYYY-MM"
    label: str  # "Jan 2024"
    profit: float = 0.0
    trades: int = 0
    wins: int = 0
    win_rate: float = 0.0

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


def monthly_performance(trades: Sequence[TradeRecord]) -> list[MonthlyPerformance]:
    """Per calendar month of exit, ascending by month."""
    tallies: dict[tuple[int, int], _Tally] = defaultdict(_Tally)
    for t in trades:
        if t.is_completed and t.exit_date is not None:
            tallies[(t.exit_date.year, t.exit_date.month)].record(t)

    return [
        MonthlyPerformance(
            month=f"{year:04d}-{month:02d}",
            label=f"{MONTH_ABBR[month - 1]} {year}",
            profit=tally.profit,
            trades=tally.trades,
            wins=tally.wins,
            win_rate=tally.win_rate,
        )
        for (year, month), tally in sorted(tallies.items())
    ]


# ---------------------------------------------------------------------------
# Day of week
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class DayOfWeekPerformance:
    day: str
    index: int  # 0=Sunday .. 6=Saturday
    trades: int = 0
    wins: int = 0
    win_rate: float = 0.0
    profit: float = 0.0

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


def day_of_week_performance(trades: Sequence[TradeRecord]) -> list[DayOfWeekPerformance]:
    """All trades by weekday of entry.  Always seven entries, Sunday first."""
    tallies = [_Tally() for _ in DAY_NAMES]
    for t in trades:
        # date.weekday() is Monday=0; shift to Sunday=0
        tallies[(t.entry_date.weekday() + 1) % 7].record(t)
    return [
        DayOfWeekPerformance(
            day=name,
            index=i,
            trades=tally.trades,
            wins=tally.wins,
            win_rate=tally.win_rate,
            profit=tally.profit,
        )
        for i, (name, tally) in enumerate(zip(DAY_NAMES, tallies))
    ]


# ---------------------------------------------------------------------------
# Calendar
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class DailyPnl:
    date: str  # "YYYY-MM-DD"
    pnl: float = 0.0
    trades: int = 0
    trade_ids: tuple[str, ...] = ()


@dataclass(frozen=True)
class PnlCalendar:
    days: tuple[DailyPnl, ...] = ()
    month: str | None = None

    @property
    def total_pnl(self) -> float:
        return sum(d.pnl for d in self.days)

    @property
    def total_trades(self) -> int:
        return sum(d.trades for d in self.days)

    def to_dict(self) -> dict[str, Any]:
        return {
            "month": self.month,
            "total_pnl": self.total_pnl,
            "total_trades": self.total_trades,
            "days": [
                {"date": d.date, "pnl": d.pnl, "trades": d.trades, "trade_ids": list(d.trade_ids)}
                for d in self.days
            ],
        }


def daily_pnl_calendar(
    trades: Sequence[TradeRecord],
    *,
    month: str | None = None,
) -> PnlCalendar:
    """P&L per calendar day, keyed by exit date (entry date while open).

    Args:
        trades: All trades.
        month: Optional ``"YYYY-MM"`` filter.
    """
    tallies: dict[str, _Tally] = defaultdict(_Tally)
    for t in trades:
        key = (t.exit_date or t.entry_date).strftime("%Y-%m-%d")
        if month is not None and not key.startswith(f"{month}-"):
            continue
        tallies[key].record(t)
    days = tuple(
        DailyPnl(date=key, pnl=tally.profit, trades=tally.trades, trade_ids=tuple(tally.trade_ids))
        for key, tally in sorted(tallies.items())
    )
    return PnlCalendar(days=days, month=month)
