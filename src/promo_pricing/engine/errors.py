"""Exceptions raised by the pricing engine and its data adapters."""


class PricingError(Exception):
    """Base class for all pricing failures."""


class UnknownSkuError(PricingError, KeyError):
    """A SKU had to be priced but is missing from the price list."""

    def __init__(self, sku: str):
        self.sku = sku
        super().__init__(sku)

    def __str__(self) -> str:
        return f"SKU id '{self.sku}' not recognised in inventory"


class ConfigurationError(PricingError, ValueError):
    """Price list, promotions or source files are malformed."""


class InvalidOrderError(PricingError, ValueError):
    """An order line has a missing SKU or a bad quantity."""
