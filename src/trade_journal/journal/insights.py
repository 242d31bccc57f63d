"""Plain-language grading of headline statistics for the dashboard."""

from __future__ import annotations

import enum
from dataclasses import asdict, dataclass
from typing import Any

from .stats import TradeStats


class Sentiment(str, enum.Enum):
    POSITIVE = "positive"
    NEUTRAL = "neutral"
    NEGATIVE = "negative"


@dataclass(frozen=True)
class Insight:
    category: str
    grade: str
    sentiment: Sentiment
    message: str

    def to_dict(self) -> dict[str, Any]:
        data = asdict(self)
        data["sentiment"] = self.sentiment.value
        return data


def _win_rate_insight(win_rate: float) -> Insight:
    if win_rate >= 60:
        grade, msg = "excellent", "Excellent win rate! Keep following your rules."
    elif win_rate >= 50:
        grade, msg = "good", "Good win rate. Focus on increasing R:R to boost profits."
    elif win_rate >= 40:
        grade, msg = "average", "Average win rate. Higher R:R trades can still be profitable."
    else:
        grade, msg = "low", "Low win rate. Review entry criteria and consider tighter filters."
    sentiment = Sentiment.POSITIVE if win_rate >= 50 else Sentiment.NEGATIVE
    return Insight("win_rate", grade, sentiment, msg)


def _risk_reward_insight(average_rr: float) -> Insight:
    if average_rr >= 2:
        grade, msg = "great", "Great R:R ratio! You're letting winners run."
    elif average_rr >= 1.5:
        grade, msg = "solid", "Solid R:R. Consider holding winners a bit longer."
    elif average_rr >= 1:
        grade, msg = "breakeven", "Break-even R:R. Need higher win rate to profit."
    else:
        grade, msg = "low", "Low R:R. Consider wider take profits or tighter stops."
    sentiment = Sentiment.POSITIVE if average_rr >= 1.5 else Sentiment.NEUTRAL
    return Insight("risk_reward", grade, sentiment, msg)


def _edge_insight(expectancy: float) -> Insight:
    if expectancy > 50:
        grade, msg = "strong", "Strong positive expectancy. Your system has an edge."
    elif expectancy > 0:
        grade, msg = "positive", "Positive expectancy. Keep refining for better results."
    elif expectancy == 0:
        grade, msg = "breakeven", "Break-even system. Focus on increasing win rate or R:R."
    else:
        grade, msg = "negative", "Negative expectancy. Review your strategy and risk management."
    sentiment = Sentiment.POSITIVE if expectancy > 0 else Sentiment.NEGATIVE
    return Insight("edge", grade, sentiment, msg)


def performance_insights(stats: TradeStats) -> list[Insight]:
    """Win rate, risk/reward and edge insights, in that order."""
    return [
        _win_rate_insight(stats.win_rate),
        _risk_reward_insight(stats.average_rr),
        _edge_insight(stats.expectancy),
    ]
