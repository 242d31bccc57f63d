"""Enumerations used across the trade journal."""

from enum import Enum


class AssetClass(str, Enum):
    """Asset class of the traded instrument."""

    FOREX = "forex"
    CRYPTO = "crypto"
    COMMODITIES = "commodities"
    STOCKS = "stocks"


class Direction(str, Enum):
    BUY = "buy"
    SELL = "sell"


class TradeStatus(str, Enum):
    """Outcome state of a trade.

    ``OPEN`` is the only incomplete state.  Storage rows with a null or
    empty status are normalized to ``OPEN`` when loaded.
    """

    OPEN = "open"
    WIN = "win"
    LOSS = "loss"
    BREAKEVEN = "breakeven"

    @property
    def is_completed(self) -> bool:
        return self is not TradeStatus.OPEN


class ExitReason(str, Enum):
    TP_HIT = "tp_hit"
    SL_HIT = "sl_hit"
    MANUAL_CLOSE = "manual_close"
    BREAKEVEN = "breakeven"


class RuleAnswer(str, Enum):
    """Tri-state answer to a confluence checklist question."""

    YES = "yes"
    NO = "no"
    NOT_APPLICABLE = "n/a"


class ExportFormat(str, Enum):
    CSV = "csv"
    JSON = "json"
