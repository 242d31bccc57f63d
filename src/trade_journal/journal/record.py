"""Trade record: the canonical shape every aggregator consumes.

Two generations of journal rows coexist in storage: legacy rows that only
carry ``profit_loss``, and newer rows logged with ``risk_amount`` /
``reward_amount``, confluence ``rule_*`` answers and an emotions array.
Both load into the same :class:`TradeRecord`; :attr:`TradeRecord.effective_pl`
is the single place they are reconciled to one P&L number.

Records are frozen (and therefore hashable) so a trade set can be used as
a cache key by :class:`~trade_journal.journal.analytics.TradeAnalytics`.
"""

from __future__ import annotations

import logging
import uuid
from collections.abc import Iterable, Mapping
from datetime import datetime
from decimal import Decimal
from typing import Any

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    ValidationError,
    ValidationInfo,
    field_validator,
    model_validator,
)

from ..core.config import EmotionConfig
from ..core.enums import AssetClass, Direction, RuleAnswer, TradeStatus
from ..core.errors import TradeRecordError
from .emotions import parse_emotions

logger = logging.getLogger(__name__)

RULE_FIELDS: tuple[str, ...] = (
    "rule_in_plan",
    "rule_bos",
    "rule_liquidity",
    "rule_trend",
    "rule_news",
    "rule_rr",
    "rule_emotions",
    "rule_lot_size",
)

# Synthetic emotion contributed by the "emotions in check?" checklist answer
_RULE_EMOTION_TAGS = {
    RuleAnswer.YES: "Calm",
    RuleAnswer.NO: "Anxious",
}

_RULE_ANSWER_ALIASES = {
    "yes": RuleAnswer.YES,
    "y": RuleAnswer.YES,
    "true": RuleAnswer.YES,
    "no": RuleAnswer.NO,
    "n": RuleAnswer.NO,
    "false": RuleAnswer.NO,
    "n/a": RuleAnswer.NOT_APPLICABLE,
    "na": RuleAnswer.NOT_APPLICABLE,
}


def _emotion_config(info: ValidationInfo) -> EmotionConfig:
    return (info.context or {}).get("emotions") or EmotionConfig()


class TradeRecord(BaseModel):
    """One journaled trade.

    Only ``symbol``, ``asset_class``, ``direction``, ``entry_date``,
    ``entry_price`` and ``lot_size`` are required; every outcome field is
    optional because open trades and legacy rows leave them empty.
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    # Identity
    id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    symbol: str
    asset_class: AssetClass
    direction: Direction

    # Timing and prices
    entry_date: datetime
    exit_date: datetime | None = None
    entry_price: Decimal
    exit_price: Decimal | None = None
    lot_size: Decimal = Field(gt=0)
    stop_loss: Decimal | None = None
    take_profit: Decimal | None = None

    # Outcome
    status: TradeStatus = TradeStatus.OPEN
    profit_loss: Decimal | None = None       # Legacy signed P&L
    reward_amount: Decimal | None = None     # Supersedes profit_loss
    risk_amount: Decimal | None = None
    risk_reward_ratio: float | None = None   # Logged realized R-multiple
    pips: float | None = None

    # Labels
    strategy: str | None = None
    exit_reason: str | None = None  # Unknown codes kept verbatim
    setup_type: str | None = None
    probability: str | None = None
    emotions: tuple[str, ...] = ()  # Also loaded from emotions_array
    tags: tuple[str, ...] = ()

    # Confluence checklist
    rule_in_plan: RuleAnswer | None = None
    rule_bos: RuleAnswer | None = None
    rule_liquidity: RuleAnswer | None = None
    rule_trend: RuleAnswer | None = None
    rule_news: RuleAnswer | None = None
    rule_rr: RuleAnswer | None = None
    rule_emotions: RuleAnswer | None = None
    rule_lot_size: RuleAnswer | None = None

    # Review notes
    reasoning: str | None = None
    lessons: str | None = None
    needs_review: bool | None = None
    mt5_ticket: str | None = None

    # ------------------------------------------------------------------ #
    # Boundary normalization                                               #
    # ------------------------------------------------------------------ #

    @model_validator(mode="before")
    @classmethod
    def _merge_emotion_columns(cls, data: Any, info: ValidationInfo) -> Any:
        """Prefer ``emotions_array`` and fall back to the legacy ``emotions`` text.

        Rows can carry both columns with only one of them populated, so
        an empty or null array never shadows the legacy value.
        """
        if not isinstance(data, Mapping) or "emotions_array" not in data:
            return data
        data = dict(data)
        cfg = _emotion_config(info)
        tags = parse_emotions(
            data.pop("emotions_array"),
            min_length=cfg.min_tag_length,
            acronyms=cfg.acronyms,
        )
        if tags:
            data["emotions"] = tags
        return data

    @field_validator("symbol", mode="before")
    @classmethod
    def _upper_symbol(cls, v: Any) -> Any:
        return v.strip().upper() if isinstance(v, str) else v

    @field_validator("asset_class", "direction", mode="before")
    @classmethod
    def _lower_enum(cls, v: Any) -> Any:
        return v.strip().lower() if isinstance(v, str) else v

    @field_validator("status", mode="before")
    @classmethod
    def _status_default_open(cls, v: Any) -> Any:
        if v is None:
            return TradeStatus.OPEN
        if isinstance(v, str):
            v = v.strip().lower()
            return v or TradeStatus.OPEN
        return v

    @field_validator(
        "strategy", "exit_reason", "setup_type", "probability", mode="before"
    )
    @classmethod
    def _blank_to_none(cls, v: Any) -> Any:
        if isinstance(v, str):
            v = v.strip()
            return v or None
        return v

    @field_validator("tags", mode="before")
    @classmethod
    def _null_tags(cls, v: Any) -> Any:
        return () if v is None else v

    @field_validator("emotions", mode="before")
    @classmethod
    def _parse_emotions(cls, v: Any, info: ValidationInfo) -> tuple[str, ...]:
        cfg = _emotion_config(info)
        return parse_emotions(v, min_length=cfg.min_tag_length, acronyms=cfg.acronyms)

    @field_validator(*RULE_FIELDS, mode="before")
    @classmethod
    def _lenient_rule_answer(cls, v: Any) -> RuleAnswer | None:
        if v is None or isinstance(v, RuleAnswer):
            return v
        answer = _RULE_ANSWER_ALIASES.get(str(v).strip().lower())
        if answer is None and str(v).strip():
            logger.debug("Unrecognised checklist answer %r treated as unanswered", v)
        return answer

    # ------------------------------------------------------------------ #
    # Computed properties                                                  #
    # ------------------------------------------------------------------ #

    @property
    def is_completed(self) -> bool:
        """True once the trade has a win/loss/breakeven outcome."""
        return self.status.is_completed

    @property
    def effective_pl(self) -> float | None:
        """Schema-normalized realized P&L.

        ``reward_amount`` is an unsigned magnitude and wins over
        ``profit_loss`` whenever it is present; it is negated for losses.
        """
        if self.reward_amount is not None:
            if self.status == TradeStatus.LOSS:
                return -abs(float(self.reward_amount))
            return float(self.reward_amount)
        if self.profit_loss is None:
            return None
        return float(self.profit_loss)

    @property
    def realized_pl(self) -> float:
        """``effective_pl`` with null treated as zero, for summing."""
        pl = self.effective_pl
        return 0.0 if pl is None else pl

    @property
    def emotion_tags(self) -> tuple[str, ...]:
        """Logged emotions plus the checklist's synthetic Calm/Anxious tag."""
        synthetic = _RULE_EMOTION_TAGS.get(self.rule_emotions)
        if synthetic is None:
            return self.emotions
        return tuple(dict.fromkeys(self.emotions + (synthetic,)))

    def rule_answer(self, rule: str) -> RuleAnswer | None:
        if rule not in RULE_FIELDS:
            raise KeyError(rule)
        return getattr(self, rule)

    # ------------------------------------------------------------------ #
    # Loading / serialisation                                              #
    # ------------------------------------------------------------------ #

    @classmethod
    def from_row(
        cls,
        row: Mapping[str, Any],
        *,
        emotion_config: EmotionConfig | None = None,
    ) -> TradeRecord:
        """Validate a raw storage row (extra columns are ignored)."""
        return cls.model_validate(dict(row), context={"emotions": emotion_config})

    def to_dict(self) -> dict[str, Any]:
        """Export to a flat JSON-friendly dictionary."""
        data = self.model_dump(mode="json")
        data["effective_pl"] = self.effective_pl
        return data


def load_trades(
    rows: Iterable[Mapping[str, Any]],
    *,
    skip_invalid: bool = False,
    emotion_config: EmotionConfig | None = None,
) -> list[TradeRecord]:
    """Load a batch of raw rows into trade records.

    Raises:
        TradeRecordError: On the first invalid row, unless
            ``skip_invalid`` is set, in which case the row is logged
            and dropped.
    """
    trades: list[TradeRecord] = []
    for index, row in enumerate(rows):
        try:
            trades.append(TradeRecord.from_row(row, emotion_config=emotion_config))
        except ValidationError as exc:
            if not skip_invalid:
                raise TradeRecordError(
                    f"Trade row {index} is invalid: {exc}", index=index
                ) from exc
            logger.warning(
                "Skipping invalid trade row %d (id=%s): %d error(s)",
                index, row.get("id"), exc.error_count(),
            )
    logger.debug("Loaded %d trade records", len(trades))
    return trades
