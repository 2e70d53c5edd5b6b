"""
CSV Loaders - Build engine inputs from inventory and order exports.

Inventory CSV columns: SKU, Price
Order CSV columns: SKU, Quantity
"""
import logging
from pathlib import Path
from typing import Union

import pandas as pd

from ..engine.errors import ConfigurationError, InvalidOrderError
from ..engine.models import InventoryItem, Order, OrderItem, as_decimal

logger = logging.getLogger(__name__)


def _read_table(path: Path, required: list[str], label: str) -> pd.DataFrame:
    """Read a CSV as strings, strip SKUs and drop rows without one."""
    if not path.exists():
        raise ConfigurationError(f"{label} file not found at {path}")

    try:
        df = pd.read_csv(path, dtype=str)
    except (pd.errors.EmptyDataError, pd.errors.ParserError) as e:
        raise ConfigurationError(f"{label} file {path} could not be read: {e}") from e
    df.columns = [str(c).strip() for c in df.columns]

    missing = [c for c in required if c not in df.columns]
    if missing:
        raise ConfigurationError(f"{label} file {path} is missing columns: {', '.join(missing)}")

    df['SKU'] = df['SKU'].str.strip()
    df = df.dropna(subset=['SKU'])
    df = df[df['SKU'] != '']
    return df


def load_inventory(path: Union[str, Path]) -> list[InventoryItem]:
    """
    Load the price list from an inventory CSV.

    Duplicate SKUs are kept (and logged) so the engine can reject them.
    """
    path = Path(path)
    df = _read_table(path, ['SKU', 'Price'], "Inventory")

    no_price = df[df['Price'].isna()]['SKU'].tolist()
    if no_price:
        raise ConfigurationError(f"Inventory rows without a price: {', '.join(no_price)}")

    duplicates = df[df['SKU'].duplicated()]['SKU'].unique().tolist()
    if duplicates:
        logger.warning("Inventory %s has duplicate SKUs: %s", path, ", ".join(duplicates))

    items = [
        InventoryItem(sku=sku, price=as_decimal(price, f"Price for {sku}"))
        for sku, price in zip(df['SKU'], df['Price'])
    ]
    logger.info("Loaded %d inventory items from %s", len(items), path)
    return items


def load_order(path: Union[str, Path]) -> Order:
    """Load an order from a CSV of order lines, keeping line order."""
    path = Path(path)
    df = _read_table(path, ['SKU', 'Quantity'], "Order")

    order = Order()
    for sku, raw_qty in zip(df['SKU'], df['Quantity']):
        if pd.isna(raw_qty):
            raise InvalidOrderError(f"Order line for {sku} has no quantity")
        try:
            quantity = int(str(raw_qty).strip())
        except ValueError:
            raise InvalidOrderError(f"Quantity for {sku} must be an integer, got {raw_qty!r}") from None
        order.items.append(OrderItem(sku=sku, quantity=quantity))
    return order
