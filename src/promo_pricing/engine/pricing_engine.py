"""
Pricing Engine - Order totals with promotion matching and traceability.

Resolution order:
1. Merge order lines into a working quantity map
2. Fire each promotion, in the order supplied, as many times as it matches
3. Price every firing (base price + percentage-of-catalog items)
4. Price leftover quantities at catalog price
"""
import logging
from collections.abc import Mapping
from decimal import Decimal
from typing import Iterable, Union

from .errors import ConfigurationError, InvalidOrderError, UnknownSkuError
from .models import (
    AppliedPromotion,
    InventoryItem,
    LeftoverLine,
    Order,
    OrderItem,
    PricingResult,
    Promotion,
    as_decimal,
)
from .promotion_matcher import PromotionMatcher

logger = logging.getLogger(__name__)

PriceListInput = Union[Mapping, Iterable[InventoryItem]]
OrderInput = Union[Order, Mapping, Iterable]


class PricingEngine:
    """
    Calculates order totals from a price list and an ordered list of promotions.

    The engine is read-only after construction. Each calculation works on its
    own quantity map, so one instance can price many orders, including from
    several threads at once.
    """

    def __init__(self, price_list: PriceListInput, promotions: Iterable[Promotion] = ()):
        """Build the SKU → price lookup and validate promotions."""
        self._prices: dict[str, Decimal] = self._build_price_lookup(price_list)
        self.matcher = PromotionMatcher(promotions)
        logger.debug(
            "Pricing engine ready: %d SKUs, %d promotions",
            len(self._prices), len(self.matcher.promotions)
        )

    @staticmethod
    def _build_price_lookup(price_list: PriceListInput) -> dict[str, Decimal]:
        if isinstance(price_list, Mapping):
            entries = price_list.items()
        else:
            entries = []
            for item in price_list:
                if not isinstance(item, InventoryItem):
                    raise ConfigurationError(
                        f"Price list entries must be InventoryItem, got {type(item).__name__}"
                    )
                entries.append((item.sku, item.price))

        prices = {}
        for sku, price in entries:
            if not isinstance(sku, str) or not sku:
                raise ConfigurationError(f"Invalid SKU in price list: {sku!r}")
            if sku in prices:
                raise ConfigurationError(f"Duplicate SKU '{sku}' in price list")
            value = as_decimal(price, f"Price for {sku}")
            if value < 0:
                raise ConfigurationError(f"Price for {sku} is negative: {value}")
            prices[sku] = value
        return prices

    @property
    def prices(self) -> dict[str, Decimal]:
        """A copy of the SKU → price lookup."""
        return dict(self._prices)

    def price_of(self, sku: str) -> Decimal:
        """Catalog price for a SKU; raises UnknownSkuError if it is not listed."""
        try:
            return self._prices[sku]
        except KeyError:
            raise UnknownSkuError(sku) from None

    @staticmethod
    def _order_lines(order: OrderInput) -> Iterable[tuple[str, int]]:
        if isinstance(order, Order):
            lines = order.items
        elif isinstance(order, Mapping):
            lines = order.items()
        else:
            lines = order

        for line in lines:
            if isinstance(line, OrderItem):
                yield line.sku, line.quantity
            else:
                try:
                    sku, quantity = line
                except (TypeError, ValueError):
                    raise InvalidOrderError(f"Unrecognised order line: {line!r}") from None
                yield sku, quantity

    @classmethod
    def working_quantities(cls, order: OrderInput) -> dict[str, int]:
        """Merge order lines into a fresh SKU → quantity map."""
        working: dict[str, int] = {}
        for sku, quantity in cls._order_lines(order):
            if not isinstance(sku, str) or not sku:
                raise InvalidOrderError(f"Invalid SKU in order: {sku!r}")
            if isinstance(quantity, bool) or not isinstance(quantity, int):
                raise InvalidOrderError(f"Quantity for {sku} must be an integer, got {quantity!r}")
            if quantity < 0:
                raise InvalidOrderError(f"Quantity for {sku} is negative: {quantity}")
            working[sku] = working.get(sku, 0) + quantity
        return working

    def apply_promotions(self, order: OrderInput) -> tuple[dict[str, int], dict[str, int]]:
        """
        Match promotions without pricing anything.

        Returns (promotion id → firings, remaining SKU → quantity).
        """
        working = self.working_quantities(order)
        fired = self.matcher.apply(working)
        return {promotion.promotion_id: firings for promotion, firings in fired}, working

    def calculate_total(self, order: OrderInput) -> Decimal:
        """Total price of the order after promotions."""
        return self.calculate(order).total

    def calculate(self, order: OrderInput) -> PricingResult:
        """
        Price an order with full traceability.

        Args:
            order: Order, SKU → quantity mapping, or iterable of (sku, quantity) pairs

        Returns:
            PricingResult with applied promotions, leftover lines and trace

        Raises:
            UnknownSkuError: a priced SKU is missing from the price list
            InvalidOrderError: an order line is malformed
        """
        working = self.working_quantities(order)
        result = PricingResult(total=Decimal("0"))
        result.add_trace("Order", "Merged order quantities", self._format_quantities(working))

        fired = self.matcher.apply(working)
        if not fired:
            result.add_trace("Promotions", "No promotions applied")

        for promotion, firings in fired:
            unit_price = self.matcher.firing_price(promotion, self.price_of)
            amount = unit_price * firings
            result.applied.append(AppliedPromotion(
                promotion_id=promotion.promotion_id,
                name=promotion.name,
                firings=firings,
                unit_price=unit_price,
                amount=amount,
                consumed={sku: qty * firings for sku, qty in promotion.required},
            ))
            result.total += amount
            result.add_trace(
                "Promotion Applied",
                f"{promotion.name} ({promotion.promotion_id}) × {firings} @ {unit_price}",
                str(amount),
            )

        for sku, quantity in working.items():
            if quantity <= 0:
                continue
            unit_price = self.price_of(sku)
            extended = unit_price * quantity
            result.leftovers.append(LeftoverLine(
                sku=sku,
                quantity=quantity,
                unit_price=unit_price,
                extended_price=extended,
            ))
            result.total += extended
            result.add_trace("Catalog Price", f"Quantity {quantity} × {sku} @ {unit_price}", str(extended))

        result.add_trace("Total", "Order total", str(result.total))
        return result

    @staticmethod
    def _format_quantities(quantities: dict[str, int]) -> str:
        return ", ".join(f"{sku}={qty}" for sku, qty in quantities.items()) or "(empty)"
