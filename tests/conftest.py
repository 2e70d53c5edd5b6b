"""Shared fixtures: the A/B/C/D catalog and its three standard promotions."""
import os
import sys
from decimal import Decimal

import pytest

# Add src to path for internal imports
src_path = os.path.join(os.path.dirname(os.path.dirname(os.path.abspath(__file__))), 'src')
if src_path not in sys.path:
    sys.path.insert(0, src_path)

from promo_pricing.engine import (
    InventoryItem,
    PricingEngine,
    Promotion,
    PromotionItem,
)


@pytest.fixture
def inventory() -> list[InventoryItem]:
    return [
        InventoryItem(sku="A", price=Decimal("50")),
        InventoryItem(sku="B", price=Decimal("30")),
        InventoryItem(sku="C", price=Decimal("20")),
        InventoryItem(sku="D", price=Decimal("15")),
    ]


@pytest.fixture
def promotions() -> list[Promotion]:
    return [
        Promotion(
            promotion_id="R1",
            base_price=Decimal("130"),
            items=[PromotionItem(sku="A", quantity=3)],
        ),
        Promotion(
            promotion_id="R2",
            base_price=Decimal("45"),
            items=[PromotionItem(sku="B", quantity=2)],
        ),
        Promotion(
            promotion_id="R3",
            base_price=Decimal("30"),
            items=[PromotionItem(sku="C", quantity=1), PromotionItem(sku="D", quantity=1)],
        ),
    ]


@pytest.fixture
def engine(inventory, promotions) -> PricingEngine:
    return PricingEngine(inventory, promotions)
