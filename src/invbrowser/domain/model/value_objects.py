"""Value Objects and coercion helpers shared across the domain.

Raw numeric input arrives as text from the CLI or a draft field. These
helpers defuse it into Decimals (or ``None``) before it reaches the
pipeline, so the pipeline itself never has to raise.
"""

from __future__ import annotations

from decimal import Decimal, InvalidOperation
from enum import Enum

# Sentinel held in a draft field the user has cleared or typed garbage into.
EMPTY = ""

LOW_STOCK_THRESHOLD = 10
MEDIUM_STOCK_CEILING = 20


def parse_number(raw: object) -> Decimal | None:
    """Coerce *raw* to a finite Decimal, or None when blank/unparseable."""
    if raw is None or isinstance(raw, bool):
        return None
    if isinstance(raw, Decimal):
        return raw if raw.is_finite() else None
    if isinstance(raw, (int, float)):
        raw = str(raw)
    if not isinstance(raw, str) or not raw.strip():
        return None
    try:
        value = Decimal(raw.strip())
    except InvalidOperation:
        return None
    return value if value.is_finite() else None


def clamp_non_negative(raw: object) -> Decimal | str:
    """Draft-field coercion: a number clamped to >= 0, or the EMPTY sentinel."""
    value = parse_number(raw)
    if value is None:
        return EMPTY
    return max(Decimal("0"), value)


class StockStatus(Enum):
    OUT_OF_STOCK = "Out of Stock"
    LOW = "Low Stock"
    MEDIUM = "Medium Stock"
    HIGH = "High Stock"

    @staticmethod
    def classify(
        stock: int,
        low_threshold: int = LOW_STOCK_THRESHOLD,
        medium_ceiling: int = MEDIUM_STOCK_CEILING,
    ) -> StockStatus:
        if stock == 0:
            return StockStatus.OUT_OF_STOCK
        if stock < low_threshold:
            return StockStatus.LOW
        if stock <= medium_ceiling:
            return StockStatus.MEDIUM
        return StockStatus.HIGH

    def __str__(self) -> str:
        return self.value
