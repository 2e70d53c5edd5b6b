"""
Reference order scenarios.
Catalog: A=50, B=30, C=20, D=15. Promotions: 3×A for 130, 2×B for 45, C+D for 30.
"""
from decimal import Decimal

import pytest

from promo_pricing.engine import (
    Order,
    OrderItem,
    PricingEngine,
    Promotion,
    PromotionItem,
    PromotionPriceItem,
)


def make_order(**quantities) -> Order:
    return Order(items=[OrderItem(sku=sku, quantity=qty) for sku, qty in quantities.items()])


@pytest.mark.parametrize("quantities, expected", [
    ({"A": 1, "B": 1, "C": 1}, Decimal("100")),
    ({"A": 5, "B": 5, "C": 1}, Decimal("370")),
    ({"A": 3, "B": 5, "C": 1, "D": 1}, Decimal("280")),
], ids=["no-promotions", "subset-of-order", "all-promotions"])
def test_order_totals(engine, quantities, expected):
    assert engine.calculate_total(make_order(**quantities)) == expected


def test_no_promotions_apply(engine):
    result = engine.calculate(make_order(A=1, B=1, C=1))

    assert result.applied == []
    assert result.total == Decimal("100")
    assert [(line.sku, line.quantity) for line in result.leftovers] == [("A", 1), ("B", 1), ("C", 1)]


def test_promotions_apply_to_subset(engine):
    result = engine.calculate(make_order(A=5, B=5, C=1))

    assert result.firing_counts() == {"R1": 1, "R2": 2}
    assert result.promotions_total == Decimal("220")  # 130 + 2 × 45
    assert result.leftovers_total == Decimal("150")   # 2×A + 1×B + 1×C
    assert result.total == Decimal("370")


def test_promotions_apply_to_all_items(engine):
    result = engine.calculate(make_order(A=3, B=5, C=1, D=1))

    assert result.firing_counts() == {"R1": 1, "R2": 2, "R3": 1}
    # One B is left over after two firings of R2
    assert [(line.sku, line.quantity) for line in result.leftovers] == [("B", 1)]
    assert result.total == Decimal("280")


def test_percentage_priced_promotion(inventory, promotions):
    # 3 of C for the price of 2: 200% of C's catalog price
    promotions.append(Promotion(
        promotion_id="R4",
        base_price=Decimal("0"),
        items=[PromotionItem(sku="C", quantity=3)],
        price_items=[PromotionPriceItem(sku="C", percentage=Decimal("200"))],
    ))
    engine = PricingEngine(inventory, promotions)

    result = engine.calculate(make_order(C=4))

    assert result.firing_counts() == {"R4": 1}
    assert result.applied[0].unit_price == Decimal("40")
    assert result.total == Decimal("60")
