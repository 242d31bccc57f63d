"""One-call analytics over a trade set.

:class:`TradeAnalytics` runs every aggregator and bundles the results in
an :class:`AnalyticsReport`.  Aggregators stay pure; the facade only adds
a bounded memo keyed by the trade set itself, so a dashboard asking for
the same trades twice does not recompute.

Usage::

    analytics = TradeAnalytics(load_settings("journal.toml"))
    report = analytics.report(trades)
    print(report.stats.win_rate, report.equity_curve.max_drawdown)
"""

from __future__ import annotations

import logging
from collections import OrderedDict
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from types import MappingProxyType
from typing import Any

from ..core.config import AnalyticsSettings
from .breakdowns import (
    EmotionStats,
    ExitReasonStats,
    GroupStats,
    RuleStats,
    asset_class_breakdown,
    emotion_performance,
    exit_reason_breakdown,
    pair_performance,
    rule_performance,
    setup_quality_performance,
    strategy_performance,
)
from .insights import Insight, performance_insights
from .record import TradeRecord
from .stats import TradeStats, calculate_stats, win_loss_distribution
from .time_series import (
    DayOfWeekPerformance,
    EquityCurve,
    MonthlyPerformance,
    PnlCalendar,
    daily_pnl_calendar,
    day_of_week_performance,
    equity_curve,
    monthly_performance,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AnalyticsReport:
    """Every aggregate for one trade set.  Field names are stable.

    Reports are shared between callers through the :class:`TradeAnalytics`
    cache, so every member is immutable: sequences are tuples and the
    result records are frozen dataclasses.
    """

    stats: TradeStats
    win_loss: tuple[Mapping[str, Any], ...]
    insights: tuple[Insight, ...]
    equity_curve: EquityCurve
    monthly: tuple[MonthlyPerformance, ...]
    day_of_week: tuple[DayOfWeekPerformance, ...]
    calendar: PnlCalendar
    asset_classes: tuple[GroupStats, ...]
    pairs: tuple[GroupStats, ...]
    strategies: tuple[GroupStats, ...]
    exit_reasons: tuple[ExitReasonStats, ...]
    rules: tuple[RuleStats, ...]
    emotions: tuple[EmotionStats, ...]
    setup_quality: tuple[GroupStats, ...]
    open_trades: int = 0
    trade_count: int = 0

    def to_dict(self) -> dict[str, Any]:
        return {
            "trade_count": self.trade_count,
            "open_trades": self.open_trades,
            "stats": self.stats.to_dict(),
            "win_loss": [dict(slice_) for slice_ in self.win_loss],
            "insights": [i.to_dict() for i in self.insights],
            "equity_curve": {
                "points": self.equity_curve.to_list(),
                "final_equity": self.equity_curve.final_equity,
                "peak_equity": self.equity_curve.peak_equity,
                "max_drawdown": self.equity_curve.max_drawdown,
            },
            "monthly": [m.to_dict() for m in self.monthly],
            "day_of_week": [d.to_dict() for d in self.day_of_week],
            "calendar": self.calendar.to_dict(),
            "asset_classes": [g.to_dict() for g in self.asset_classes],
            "pairs": [g.to_dict() for g in self.pairs],
            "strategies": [g.to_dict() for g in self.strategies],
            "exit_reasons": [e.to_dict() for e in self.exit_reasons],
            "rules": [r.to_dict() for r in self.rules],
            "emotions": [e.to_dict() for e in self.emotions],
            "setup_quality": [g.to_dict() for g in self.setup_quality],
        }


def build_report(
    trades: Sequence[TradeRecord],
    settings: AnalyticsSettings | None = None,
) -> AnalyticsReport:
    """Run every aggregator over ``trades`` (no caching)."""
    settings = settings or AnalyticsSettings()
    stats = calculate_stats(trades)
    return AnalyticsReport(
        stats=stats,
        win_loss=tuple(MappingProxyType(s) for s in win_loss_distribution(trades)),
        insights=tuple(performance_insights(stats)),
        equity_curve=equity_curve(trades),
        monthly=tuple(monthly_performance(trades)),
        day_of_week=tuple(day_of_week_performance(trades)),
        calendar=daily_pnl_calendar(trades),
        asset_classes=tuple(asset_class_breakdown(trades)),
        pairs=tuple(pair_performance(trades)),
        strategies=tuple(strategy_performance(trades)),
        exit_reasons=tuple(exit_reason_breakdown(trades)),
        rules=tuple(rule_performance(trades)),
        emotions=tuple(emotion_performance(trades)),
        setup_quality=tuple(setup_quality_performance(
            trades, ranks=settings.setup_quality.ranks
        )),
        open_trades=sum(1 for t in trades if not t.is_completed),
        trade_count=len(trades),
    )


class TradeAnalytics:
    """Memoizing front door to the aggregators.

    Parameters
    ----------
    settings : AnalyticsSettings | None
        Rank table and cache size.  Defaults to ``AnalyticsSettings()``.
    """

    def __init__(self, settings: AnalyticsSettings | None = None) -> None:
        self._settings = settings or AnalyticsSettings()
        self._max_cached = max(0, self._settings.report.max_cached_reports)
        self._cache: OrderedDict[tuple[TradeRecord, ...], AnalyticsReport] = OrderedDict()
        self.hits = 0
        self.misses = 0

    @property
    def settings(self) -> AnalyticsSettings:
        return self._settings

    def report(self, trades: Sequence[TradeRecord]) -> AnalyticsReport:
        """Return the report for ``trades``, reusing a cached one if the
        same records in the same order were seen recently."""
        key = tuple(trades)
        cached = self._cache.get(key)
        if cached is not None:
            self._cache.move_to_end(key)
            self.hits += 1
            return cached

        self.misses += 1
        report = build_report(key, self._settings)
        if self._max_cached:
            self._cache[key] = report
            while len(self._cache) > self._max_cached:
                self._cache.popitem(last=False)
        logger.debug(
            "Computed analytics for %d trades (cache %d/%d)",
            len(key), len(self._cache), self._max_cached,
        )
        return report

    def clear(self) -> None:
        self._cache.clear()
