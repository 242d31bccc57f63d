"""Trade Journal Analytics: performance statistics over logged trades.

Every aggregator is a pure function of the trade list: nothing is cached
or mutated between calls, and none of them raise on empty or partial
data.

Key components
--------------
**Model**

TradeRecord          Normalized trade row (legacy and current schema)
load_trades          Batch loading from raw storage rows

**Aggregators**

calculate_stats          Win rate, P&L, profit factor, expectancy, R:R
equity_curve             Cumulative P&L by exit time
monthly_performance      Per-month P&L and win rate
day_of_week_performance  Per-weekday performance (always 7 days)
daily_pnl_calendar       Per-day P&L for the calendar view
asset_class_breakdown, pair_performance, strategy_performance,
exit_reason_breakdown, rule_performance, emotion_performance,
setup_quality_performance

**Reporting**

TradeAnalytics       Memoized one-call report over a trade set
AnalyticsExporter    CSV trade log, CSV/JSON analytics report
"""

from .record import RULE_FIELDS, TradeRecord, load_trades
from .emotions import EmotionShape, classify, parse_emotions
from .stats import TradeStats, calculate_stats, win_loss_distribution
from .time_series import (
    EquityCurve,
    EquityPoint,
    daily_pnl_calendar,
    day_of_week_performance,
    equity_curve,
    monthly_performance,
)
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
from .analytics import AnalyticsReport, TradeAnalytics, build_report
from .export import AnalyticsExporter, export_filename

__all__ = [
    "RULE_FIELDS",
    "TradeRecord",
    "load_trades",
    "EmotionShape",
    "classify",
    "parse_emotions",
    "TradeStats",
    "calculate_stats",
    "win_loss_distribution",
    "EquityCurve",
    "EquityPoint",
    "equity_curve",
    "monthly_performance",
    "day_of_week_performance",
    "daily_pnl_calendar",
    "GroupStats",
    "ExitReasonStats",
    "RuleStats",
    "EmotionStats",
    "asset_class_breakdown",
    "pair_performance",
    "strategy_performance",
    "exit_reason_breakdown",
    "rule_performance",
    "emotion_performance",
    "setup_quality_performance",
    "Insight",
    "performance_insights",
    "AnalyticsReport",
    "TradeAnalytics",
    "build_report",
    "AnalyticsExporter",
    "export_filename",
]
