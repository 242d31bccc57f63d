"""Categorical performance breakdowns.

Groups trades by asset class, symbol, strategy, exit reason, confluence
rule, emotion and setup grade.  Each function takes the full trade list
and decides its own filter:

===================  ==========================================
Breakdown            Trades considered
===================  ==========================================
asset class          all
pair                 all
strategy             all (no strategy → ``"No Strategy"``)
exit reason          trades with an exit reason
confluence rule      completed trades answering "yes"
emotion              completed trades with at least one tag
setup quality        completed trades with a setup grade
===================  ==========================================
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable, Mapping, Sequence
from dataclasses import asdict, dataclass
from typing import Any

from ..core.config import DEFAULT_QUALITY_RANKS
from ..core.enums import ExitReason, RuleAnswer, TradeStatus
from .record import RULE_FIELDS, TradeRecord

logger = logging.getLogger(__name__)

NO_STRATEGY = "No Strategy"

EXIT_REASON_LABELS = {
    ExitReason.TP_HIT.value: "Take Profit Hit",
    ExitReason.SL_HIT.value: "Stop Loss Hit",
    ExitReason.MANUAL_CLOSE.value: "Manual Close",
    ExitReason.BREAKEVEN.value: "Breakeven Exit",
}

RULE_LABELS = {
    "rule_in_plan": "In Plan",
    "rule_bos": "BOS",
    "rule_liquidity": "Liquidity",
    "rule_trend": "Trend",
    "rule_news": "News Check",
    "rule_rr": "1:2 R:R",
    "rule_emotions": "Emotions in Check",
    "rule_lot_size": "Lot Size",
}


# ---------------------------------------------------------------------------
# Shared accumulator
# ---------------------------------------------------------------------------

@dataclass
class _Bucket:
    """Running totals for one group."""

    trades: int = 0
    wins: int = 0
    losses: int = 0
    breakeven: int = 0
    total_pl: float = 0.0
    win_amount: float = 0.0
    loss_amount: float = 0.0
    rr_total: float = 0.0
    rr_count: int = 0

    def record(self, trade: TradeRecord) -> None:
        pl = trade.realized_pl
        self.trades += 1
        self.total_pl += pl
        if trade.status == TradeStatus.WIN:
            self.wins += 1
            self.win_amount += abs(pl)
        elif trade.status == TradeStatus.LOSS:
            self.losses += 1
            self.loss_amount += abs(pl)
        elif trade.status == TradeStatus.BREAKEVEN:
            self.breakeven += 1
        if trade.risk_reward_ratio is not None:
            self.rr_total += trade.risk_reward_ratio
            self.rr_count += 1

    @property
    def win_fraction(self) -> float:
        return self.wins / self.trades if self.trades else 0.0

    @property
    def loss_fraction(self) -> float:
        return self.losses / self.trades if self.trades else 0.0

    @property
    def average_pl(self) -> float:
        return self.total_pl / self.trades if self.trades else 0.0

    @property
    def average_win(self) -> float:
        return self.win_amount / self.wins if self.wins else 0.0

    @property
    def average_loss(self) -> float:
        return self.loss_amount / self.losses if self.losses else 0.0

    @property
    def average_rr(self) -> float:
        return self.rr_total / self.rr_count if self.rr_count else 0.0

    def expectancy(self, *, count_breakeven_as_loss: bool = False) -> float:
        """Expected P&L per trade from this bucket's win/loss magnitudes.

        With ``count_breakeven_as_loss`` the loss weight is ``1 - win
        rate`` (everything not a win), otherwise the loss fraction.
        """
        wr = self.win_fraction
        lr = 1.0 - wr if count_breakeven_as_loss else self.loss_fraction
        return wr * self.average_win - lr * self.average_loss


def _group(
    trades: Iterable[TradeRecord],
    key: Callable[[TradeRecord], str],
) -> dict[str, _Bucket]:
    buckets: dict[str, _Bucket] = {}
    for t in trades:
        k = key(t)
        if k not in buckets:
            buckets[k] = _Bucket()
        buckets[k].record(t)
    return buckets


# ---------------------------------------------------------------------------
# Result types
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class GroupStats:
    """Per-group performance for asset class, pair, strategy and setup grade."""

    label: str
    trades: int
    wins: int
    losses: int
    breakeven: int
    win_rate: float  # Percent
    total_pl: float
    average_pl: float
    expectancy: float
    average_rr: float

    @classmethod
    def from_bucket(cls, label: str, b: _Bucket) -> GroupStats:
        return cls(
            label=label,
            trades=b.trades,
            wins=b.wins,
            losses=b.losses,
            breakeven=b.breakeven,
            win_rate=b.win_fraction * 100,
            total_pl=b.total_pl,
            average_pl=b.average_pl,
            expectancy=b.expectancy(),
            average_rr=b.average_rr,
        )

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class ExitReasonStats:
    reason: str  # Display label
    code: str
    count: int
    percentage: float
    total_pl: float

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class RuleStats:
    rule: str  # Display label
    field: str
    trades: int
    wins: int
    win_rate: float
    total_pl: float

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class EmotionStats:
    emotion: str
    count: int
    total_pl: float
    avg_pl: float
    wins: int
    losses: int
    win_rate: float
    expectancy: float

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


# ---------------------------------------------------------------------------
# Breakdowns
# ---------------------------------------------------------------------------

def asset_class_breakdown(trades: Sequence[TradeRecord]) -> list[GroupStats]:
    """All trades by asset class, in first-seen order.  Labels are capitalized."""
    buckets = _group(trades, lambda t: t.asset_class.value)
    return [GroupStats.from_bucket(k.capitalize(), b) for k, b in buckets.items()]


def pair_performance(trades: Sequence[TradeRecord]) -> list[GroupStats]:
    """All trades by symbol, most traded first."""
    buckets = _group(trades, lambda t: t.symbol)
    stats = [GroupStats.from_bucket(k, b) for k, b in buckets.items()]
    return sorted(stats, key=lambda s: s.trades, reverse=True)


def strategy_performance(trades: Sequence[TradeRecord]) -> list[GroupStats]:
    """All trades by strategy label, most profitable first."""
    buckets = _group(trades, lambda t: t.strategy or NO_STRATEGY)
    stats = [GroupStats.from_bucket(k, b) for k, b in buckets.items()]
    return sorted(stats, key=lambda s: s.total_pl, reverse=True)


def exit_reason_breakdown(trades: Sequence[TradeRecord]) -> list[ExitReasonStats]:
    """Share and P&L per exit reason, most frequent first.

    Percentages are relative to trades that have an exit reason, so
    they sum to 100 whenever any bucket is returned.
    """
    with_reason = [t for t in trades if t.exit_reason]
    total = len(with_reason)
    buckets = _group(with_reason, lambda t: t.exit_reason)
    stats = [
        ExitReasonStats(
            reason=EXIT_REASON_LABELS.get(code, code),
            code=code,
            count=b.trades,
            percentage=b.trades / total * 100 if total else 0.0,
            total_pl=b.total_pl,
        )
        for code, b in buckets.items()
    ]
    return sorted(stats, key=lambda s: s.count, reverse=True)


def rule_performance(trades: Sequence[TradeRecord]) -> list[RuleStats]:
    """Outcome of completed trades where each checklist rule was met.

    Rules nobody answered "yes" to are left out.
    """
    completed = [t for t in trades if t.is_completed]
    result = []
    for rule in RULE_FIELDS:
        b = _Bucket()
        for t in completed:
            if t.rule_answer(rule) == RuleAnswer.YES:
                b.record(t)
        if b.trades == 0:
            continue
        result.append(RuleStats(
            rule=RULE_LABELS[rule],
            field=rule,
            trades=b.trades,
            wins=b.wins,
            win_rate=b.win_fraction * 100,
            total_pl=b.total_pl,
        ))
    return result


def emotion_performance(trades: Sequence[TradeRecord]) -> list[EmotionStats]:
    """Completed-trade outcome per emotion tag, best expectancy first.

    A trade counts once towards each of its tags.  Expectancy weights the
    average loss by ``1 - win rate``.
    """
    buckets: dict[str, _Bucket] = {}
    for t in trades:
        if not t.is_completed:
            continue
        for tag in t.emotion_tags:
            buckets.setdefault(tag, _Bucket()).record(t)

    stats = [
        EmotionStats(
            emotion=tag,
            count=b.trades,
            total_pl=b.total_pl,
            avg_pl=b.average_pl,
            wins=b.wins,
            losses=b.losses,
            win_rate=b.win_fraction * 100,
            expectancy=b.expectancy(count_breakeven_as_loss=True),
        )
        for tag, b in buckets.items()
    ]
    return sorted(stats, key=lambda s: s.expectancy, reverse=True)


def setup_quality_performance(
    trades: Sequence[TradeRecord],
    *,
    ranks: Mapping[str, int] | None = None,
) -> list[GroupStats]:
    """Completed trades by setup grade, best grade first.

    Args:
        trades: All trades.
        ranks: Grade → rank table; higher ranks sort first and grades
            missing from the table rank 0.  Defaults to A+ > A > B > C.
    """
    table = DEFAULT_QUALITY_RANKS if ranks is None else ranks
    graded = [t for t in trades if t.is_completed and t.setup_type]
    buckets = _group(graded, lambda t: t.setup_type)
    unknown = [g for g in buckets if g not in table]
    if unknown:
        logger.debug("Setup grades without a rank: %s", unknown)
    stats = [GroupStats.from_bucket(k, b) for k, b in buckets.items()]
    return sorted(stats, key=lambda s: table.get(s.label, 0), reverse=True)
