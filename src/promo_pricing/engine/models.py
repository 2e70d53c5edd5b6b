"""
Data models for the pricing engine.

Uses dataclasses for structured, type-safe data representation.
Money values are always decimal.Decimal.
"""
from dataclasses import dataclass, field
from decimal import Decimal, InvalidOperation
from typing import Optional

from .errors import ConfigurationError


def as_decimal(value, what: str = "value") -> Decimal:
    """Convert a price-like value to Decimal without going through binary floats."""
    if isinstance(value, Decimal):
        result = value
    elif isinstance(value, bool):
        raise ConfigurationError(f"{what} must be a number, got {value!r}")
    elif isinstance(value, (int, str)):
        try:
            result = Decimal(str(value).strip())
        except InvalidOperation:
            raise ConfigurationError(f"{what} is not a valid decimal: {value!r}") from None
    elif isinstance(value, float):
        result = Decimal(repr(value))
    else:
        raise ConfigurationError(f"{what} must be a number, got {type(value).__name__}")

    if not result.is_finite():
        raise ConfigurationError(f"{what} must be finite, got {value!r}")
    return result


@dataclass
class TraceStep:
    """A single step in the pricing trace."""
    step: str
    description: str
    value: Optional[str] = None


@dataclass(frozen=True)
class InventoryItem:
    """A catalog entry: SKU and its unit price."""
    sku: str
    price: Decimal


@dataclass(frozen=True)
class OrderItem:
    """A single order line."""
    sku: str
    quantity: int


@dataclass
class Order:
    """An order as a sequence of lines. SKUs may repeat across lines."""
    items: list[OrderItem] = field(default_factory=list)


@dataclass(frozen=True)
class PromotionItem:
    """A required SKU and the quantity consumed each time the promotion fires."""
    sku: str
    quantity: int


@dataclass(frozen=True)
class PromotionPriceItem:
    """Part of a promotion's price, as a percentage of a SKU's catalog price (100 = full price)."""
    sku: str
    percentage: Decimal


@dataclass
class Promotion:
    """
    A promotion rule.

    Fires when the order holds every item in `items` at the required quantity.
    Each firing costs `base_price` plus the percentage-of-catalog price items.
    """
    items: list[PromotionItem] = field(default_factory=list)
    price_items: list[PromotionPriceItem] = field(default_factory=list)
    base_price: Decimal = Decimal("0")
    promotion_id: Optional[str] = None
    name: Optional[str] = None


@dataclass
class AppliedPromotion:
    """A promotion that fired one or more times against an order."""
    promotion_id: str
    name: str
    firings: int
    unit_price: Decimal
    amount: Decimal
    consumed: dict[str, int] = field(default_factory=dict)


@dataclass
class LeftoverLine:
    """Quantity not consumed by any promotion, charged at catalog price."""
    sku: str
    quantity: int
    unit_price: Decimal
    extended_price: Decimal


@dataclass
class PricingResult:
    """Complete result of a pricing calculation."""
    total: Decimal
    applied: list[AppliedPromotion] = field(default_factory=list)
    leftovers: list[LeftoverLine] = field(default_factory=list)
    trace: list[TraceStep] = field(default_factory=list)

    @property
    def promotions_total(self) -> Decimal:
        return sum((a.amount for a in self.applied), Decimal("0"))

    @property
    def leftovers_total(self) -> Decimal:
        return sum((line.extended_price for line in self.leftovers), Decimal("0"))

    def firing_counts(self) -> dict[str, int]:
        """Promotion id → number of firings, for promotions that fired."""
        return {a.promotion_id: a.firings for a in self.applied}

    def add_trace(self, step: str, description: str, value: str = None):
        """Add a step to the result trace."""
        self.trace.append(TraceStep(step=step, description=description, value=value))

    def get_trace_text(self) -> str:
        """Get human-readable trace as formatted text."""
        lines = []
        for t in self.trace:
            if t.value:
                lines.append(f"• {t.step}: {t.description} = {t.value}")
            else:
                lines.append(f"• {t.step}: {t.description}")
        return "\n".join(lines)

    def to_dict(self) -> dict:
        """Plain dict form, with money values as strings."""
        return {
            "Total": str(self.total),
            "Promotions": [
                {
                    "Promotion": a.promotion_id,
                    "Name": a.name,
                    "Firings": a.firings,
                    "Unit Price": str(a.unit_price),
                    "Total": str(a.amount),
                }
                for a in self.applied
            ],
            "Lines": [
                {
                    "SKU": line.sku,
                    "Quantity": line.quantity,
                    "Unit Price": str(line.unit_price),
                    "Total": str(line.extended_price),
                }
                for line in self.leftovers
            ],
        }
