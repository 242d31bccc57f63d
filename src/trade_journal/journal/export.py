"""Trade log and analytics report export.

Produces the CSV trade log, the sectioned CSV analytics report and a JSON
rendering of :class:`~trade_journal.journal.analytics.AnalyticsReport`.

Usage::

    exporter = AnalyticsExporter()
    log_csv = exporter.trade_log_csv(trades)
    report_csv = exporter.report_csv(analytics.report(trades))
    name = export_filename("analytics-report", ExportFormat.CSV)
"""

from __future__ import annotations

import csv
import io
import json
import logging
import math
from collections.abc import Sequence
from datetime import date
from typing import Any

from ..core.enums import ExportFormat
from ..core.errors import ExportError
from .analytics import AnalyticsReport
from .record import TradeRecord

logger = logging.getLogger(__name__)

_TRADE_LOG_COLUMNS = [
    "Date",
    "Symbol",
    "Asset Class",
    "Direction",
    "Status",
    "Exit Reason",
    "Entry Price",
    "Exit Price",
    "Lot Size",
    "Stop Loss",
    "Take Profit",
    "P&L ($)",
    "Pips",
    "Risk ($)",
    "Reward ($)",
    "R:R Ratio",
    "Strategy",
    "Reasoning",
    "Emotions",
    "Lessons",
]


def export_filename(
    prefix: str,
    fmt: ExportFormat = ExportFormat.CSV,
    *,
    on: date | None = None,
) -> str:
    """``"<prefix>-YYYY-MM-DD.<ext>"``, dated today unless ``on`` is given."""
    day = on or date.today()
    return f"{prefix}-{day.isoformat()}.{ExportFormat(fmt).value}"


def _json_safe(value: Any) -> Any:
    """Replace non-finite floats, which JSON cannot represent."""
    if isinstance(value, float) and not math.isfinite(value):
        return "Infinity" if value > 0 else ("-Infinity" if value < 0 else None)
    if isinstance(value, dict):
        return {k: _json_safe(v) for k, v in value.items()}
    if isinstance(value, list):
        return [_json_safe(v) for v in value]
    return value


class AnalyticsExporter:
    """Export trades and analytics reports.

    Parameters
    ----------
    decimal_places : int
        Rounding precision for money columns in the report.  Default 2.
    """

    def __init__(self, *, decimal_places: int = 2) -> None:
        self._dp = decimal_places

    # ------------------------------------------------------------------ #
    # Trade log                                                            #
    # ------------------------------------------------------------------ #

    def trade_log_csv(self, trades: Sequence[TradeRecord]) -> str:
        """One row per trade, with the raw logged values."""
        buf = io.StringIO()
        writer = csv.writer(buf, lineterminator="\n")
        writer.writerow(_TRADE_LOG_COLUMNS)
        for trade in trades:
            writer.writerow(self._trade_to_row(trade))
        return buf.getvalue()

    # ------------------------------------------------------------------ #
    # Analytics report                                                     #
    # ------------------------------------------------------------------ #

    def report_csv(self, report: AnalyticsReport) -> str:
        """Sectioned CSV report.

        Performance summary, monthly and day-of-week sections are always
        present; strategy, exit-reason and asset-class sections are left
        out when empty.
        """
        s = report.stats
        sections = [
            self._section("PERFORMANCE SUMMARY", ["Metric", "Value"], [
                ["Total Trades", s.total_trades],
                ["Win Rate (%)", self._fmt(s.win_rate, 1)],
                ["Total P&L ($)", self._fmt(s.total_profit_loss)],
                ["Profit Factor", self._fmt(s.profit_factor)],
                ["Expectancy ($)", self._fmt(s.expectancy)],
                ["Average Win ($)", self._fmt(s.average_win)],
                ["Average Loss ($)", self._fmt(s.average_loss)],
                ["Largest Win ($)", self._fmt(s.largest_win)],
                ["Largest Loss ($)", self._fmt(s.largest_loss)],
                ["Average R:R", self._fmt(s.average_rr)],
                ["Winning Trades", s.winning_trades],
                ["Losing Trades", s.losing_trades],
                ["Breakeven Trades", s.breakeven_trades],
                ["Total Pips", self._fmt(s.total_pips, 1)],
                ["Average Pips", self._fmt(s.average_pips, 1)],
                ["Max Drawdown ($)", self._fmt(report.equity_curve.max_drawdown)],
            ]),
            self._section("MONTHLY PERFORMANCE", ["Month", "P&L ($)", "Trades", "Win Rate (%)"], [
                [m.label, self._fmt(m.profit), m.trades, self._fmt(m.win_rate, 1)]
                for m in report.monthly
            ]),
        ]

        if report.strategies:
            sections.append(self._section(
                "STRATEGY PERFORMANCE",
                ["Strategy", "Trades", "Wins", "Losses", "Win Rate (%)", "P&L ($)", "Avg R:R"],
                [
                    [g.label, g.trades, g.wins, g.losses, self._fmt(g.win_rate, 1),
                     self._fmt(g.total_pl), self._fmt(g.average_rr)]
                    for g in report.strategies
                ],
            ))

        if report.exit_reasons:
            sections.append(self._section(
                "EXIT REASON BREAKDOWN",
                ["Exit Reason", "Count", "Percentage (%)", "P&L ($)"],
                [
                    [e.reason, e.count, self._fmt(e.percentage, 1), self._fmt(e.total_pl)]
                    for e in report.exit_reasons
                ],
            ))

        sections.append(self._section(
            "DAY OF WEEK PERFORMANCE",
            ["Day", "Trades", "Win Rate (%)", "P&L ($)"],
            [
                [d.day, d.trades, self._fmt(d.win_rate, 1), self._fmt(d.profit)]
                for d in report.day_of_week
            ],
        ))

        if report.asset_classes:
            sections.append(self._section(
                "ASSET CLASS PERFORMANCE",
                ["Asset Class", "Trades", "P&L ($)"],
                [[g.label, g.trades, self._fmt(g.total_pl)] for g in report.asset_classes],
            ))

        return "\n\n".join(sections) + "\n"

    def report_json(self, report: AnalyticsReport, *, indent: int = 2) -> str:
        """JSON rendering of the full report; infinities become strings."""
        return json.dumps(_json_safe(report.to_dict()), indent=indent, default=str)

    def render(self, report: AnalyticsReport, fmt: ExportFormat | str) -> str:
        """Render ``report`` in the requested format.

        Raises:
            ExportError: ``fmt`` is not a known export format.
        """
        try:
            fmt = ExportFormat(fmt)
        except ValueError as exc:
            raise ExportError(f"Unsupported export format: {fmt!r}") from exc
        if fmt == ExportFormat.JSON:
            return self.report_json(report)
        return self.report_csv(report)

    # ------------------------------------------------------------------ #
    # Private helpers                                                      #
    # ------------------------------------------------------------------ #

    def _fmt(self, value: float, places: int | None = None) -> str:
        if math.isinf(value):
            return "Infinity" if value > 0 else "-Infinity"
        return f"{value:.{self._dp if places is None else places}f}"

    def _section(
        self,
        title: str,
        headers: list[str],
        rows: list[list[Any]],
    ) -> str:
        buf = io.StringIO()
        writer = csv.writer(buf, lineterminator="\n")
        writer.writerow(headers)
        writer.writerows(rows)
        return f"=== {title} ===\n{buf.getvalue().rstrip()}"

    def _trade_to_row(self, trade: TradeRecord) -> list[Any]:
        """Flatten a TradeRecord into trade-log column order."""
        return [
            trade.entry_date.date().isoformat(),
            trade.symbol,
            trade.asset_class.value,
            trade.direction.value,
            trade.status.value,
            trade.exit_reason,
            trade.entry_price,
            trade.exit_price,
            trade.lot_size,
            trade.stop_loss,
            trade.take_profit,
            trade.profit_loss,
            trade.pips,
            trade.risk_amount,
            trade.reward_amount,
            trade.risk_reward_ratio,
            trade.strategy,
            trade.reasoning,
            ", ".join(trade.emotions),
            trade.lessons,
        ]
