"""Engine subpackage - promotion matching and order pricing."""
from .pricing_engine import PricingEngine
from .models import (
    InventoryItem,
    Order,
    OrderItem,
    Promotion,
    PromotionItem,
    PromotionPriceItem,
    AppliedPromotion,
    LeftoverLine,
    PricingResult,
)
from .errors import PricingError, UnknownSkuError, ConfigurationError, InvalidOrderError

__all__ = [
    'PricingEngine',
    'InventoryItem', 'Order', 'OrderItem',
    'Promotion', 'PromotionItem', 'PromotionPriceItem',
    'AppliedPromotion', 'LeftoverLine', 'PricingResult',
    'PricingError', 'UnknownSkuError', 'ConfigurationError', 'InvalidOrderError',
]
