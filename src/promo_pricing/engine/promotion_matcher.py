"""
Promotion Matcher - Matches promotions against working order quantities.

Used by the pricing engine to decide how many times each promotion fires
and what a single firing costs.
"""
import logging
from dataclasses import dataclass
from decimal import Decimal
from typing import Callable, Iterable

from .errors import ConfigurationError
from .models import Promotion, as_decimal

logger = logging.getLogger(__name__)

HUNDRED = Decimal("100")


@dataclass(frozen=True)
class ActivePromotion:
    """A validated promotion, ready for matching."""
    promotion_id: str
    name: str
    required: tuple[tuple[str, int], ...]
    price_items: tuple[tuple[str, Decimal], ...]
    base_price: Decimal


class PromotionMatcher:
    """
    Applies promotions to a working quantity map.

    Promotions are kept in the order given. Each one fires as many times as
    the working quantities allow before the next one is considered; an
    earlier promotion is never revisited.
    """

    def __init__(self, promotions: Iterable[Promotion]):
        """Validate promotions and fix their order."""
        active = []
        seen_ids = set()
        for position, promotion in enumerate(promotions, start=1):
            prepared = self._prepare(promotion, position)
            if prepared.promotion_id in seen_ids:
                raise ConfigurationError(f"Duplicate promotion id '{prepared.promotion_id}'")
            seen_ids.add(prepared.promotion_id)
            active.append(prepared)
        self.promotions: tuple[ActivePromotion, ...] = tuple(active)

    @staticmethod
    def _prepare(promotion: Promotion, position: int) -> ActivePromotion:
        promotion_id = promotion.promotion_id or f"PROMO-{position}"
        items = list(promotion.items)
        price_items_in = list(promotion.price_items)

        if not items:
            raise ConfigurationError(f"Promotion {promotion_id} has no required items")

        required: dict[str, int] = {}
        for item in items:
            if not item.sku:
                raise ConfigurationError(f"Promotion {promotion_id} has an item with no SKU")
            if isinstance(item.quantity, bool) or not isinstance(item.quantity, int):
                raise ConfigurationError(
                    f"Promotion {promotion_id}: quantity for {item.sku} must be an integer"
                )
            # max_firings divides by each requirement, and every firing must consume something
            if item.quantity < 1:
                raise ConfigurationError(
                    f"Promotion {promotion_id}: quantity for {item.sku} must be at least 1"
                )
            # Repeated SKUs are summed so one firing never overdraws a quantity
            required[item.sku] = required.get(item.sku, 0) + item.quantity

        base_price = as_decimal(promotion.base_price, f"Promotion {promotion_id} base price")
        if base_price < 0:
            raise ConfigurationError(f"Promotion {promotion_id} has a negative base price")

        price_items = []
        for price_item in price_items_in:
            if not price_item.sku:
                raise ConfigurationError(f"Promotion {promotion_id} has a price item with no SKU")
            percentage = as_decimal(
                price_item.percentage, f"Promotion {promotion_id} percentage for {price_item.sku}"
            )
            if percentage < 0:
                raise ConfigurationError(
                    f"Promotion {promotion_id}: percentage for {price_item.sku} is negative"
                )
            price_items.append((price_item.sku, percentage))

        return ActivePromotion(
            promotion_id=promotion_id,
            name=promotion.name or promotion_id,
            required=tuple(required.items()),
            price_items=tuple(price_items),
            base_price=base_price,
        )

    @staticmethod
    def max_firings(promotion: ActivePromotion, working: dict[str, int]) -> int:
        """How many times the promotion can fire against the working quantities."""
        return min(working.get(sku, 0) // qty for sku, qty in promotion.required)

    def apply(self, working: dict[str, int]) -> list[tuple[ActivePromotion, int]]:
        """
        Fire every promotion, in order, until it no longer matches.

        Mutates `working` in place. Returns (promotion, firings) for each
        promotion that fired at least once, in firing order.
        """
        fired = []
        for promotion in self.promotions:
            firings = self.max_firings(promotion, working)
            if firings == 0:
                continue
            for sku, qty in promotion.required:
                working[sku] -= qty * firings
            logger.debug("Promotion %s fired %d time(s)", promotion.promotion_id, firings)
            fired.append((promotion, firings))
        return fired

    @staticmethod
    def firing_price(promotion: ActivePromotion, price_of: Callable[[str], Decimal]) -> Decimal:
        """
        Price of a single firing: base price plus percentage-of-catalog items.

        `price_of` raises for SKUs missing from the price list.
        """
        price = promotion.base_price
        for sku, percentage in promotion.price_items:
            price += price_of(sku) * percentage / HUNDRED
        return price
