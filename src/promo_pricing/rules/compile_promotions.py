"""
Promotion Compiler - Validates and compiles promotions from CSV to JSON.

Reads promotions.csv, validates each row, and outputs compiled_promotions.json.
Row order is kept: promotions are applied in the order they are listed.

CSV columns:
    promotion_id, name, active, base_price, items, price_items, notes

`items` lists required SKUs as "A:3;B:1". `price_items` lists percentage
price components as "C:200" (100 = full catalog price).
"""
import csv
import json
import logging
import sys
from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from pathlib import Path
from typing import Optional, Union

from ..engine.errors import ConfigurationError
from ..engine.models import Promotion, PromotionItem, PromotionPriceItem, as_decimal

logger = logging.getLogger(__name__)


@dataclass
class PromotionRecord:
    """A compiled promotion row."""
    promotion_id: str
    name: str
    active: bool
    base_price: Decimal
    items: list[PromotionItem]
    price_items: list[PromotionPriceItem] = field(default_factory=list)
    notes: str = ""

    def to_json(self) -> dict:
        return {
            "promotion_id": self.promotion_id,
            "name": self.name,
            "active": self.active,
            "base_price": str(self.base_price),
            "items": [{"sku": i.sku, "quantity": i.quantity} for i in self.items],
            "price_items": [{"sku": p.sku, "percentage": str(p.percentage)} for p in self.price_items],
            "notes": self.notes,
        }


def parse_bool(value: str) -> bool:
    """Parse a boolean from CSV string."""
    return value.strip().lower() in ('true', '1', 'yes', 'on')


def parse_optional_str(value: Optional[str]) -> Optional[str]:
    """Parse optional string (empty = None)."""
    if not value or value.strip() == '':
        return None
    return value.strip()


def parse_pairs(value: Optional[str]) -> list[tuple[str, str]]:
    """Split "A:3;B:1" into [("A", "3"), ("B", "1")]."""
    text = parse_optional_str(value)
    if text is None:
        return []

    pairs = []
    for chunk in text.split(';'):
        chunk = chunk.strip()
        if not chunk:
            continue
        sku, sep, amount = chunk.rpartition(':')
        if not sep or not sku.strip() or not amount.strip():
            raise ValueError(f"expected SKU:VALUE, got '{chunk}'")
        pairs.append((sku.strip(), amount.strip()))
    return pairs


def validate_promotion(row: dict, line_num: int) -> tuple[Optional[PromotionRecord], list[str]]:
    """
    Validate and parse a promotion from a CSV row.

    Returns (record, errors) - record is None if validation failed.
    """
    errors = []

    promotion_id = parse_optional_str(row.get('promotion_id', ''))
    if not promotion_id:
        errors.append(f"Line {line_num}: promotion_id is required")
        return None, errors

    name = parse_optional_str(row.get('name', '')) or promotion_id
    active = parse_bool(row.get('active') or 'true')

    base_price = Decimal("0")
    base_price_str = parse_optional_str(row.get('base_price', ''))
    if base_price_str is not None:
        try:
            base_price = as_decimal(base_price_str, "base_price")
        except ConfigurationError:
            errors.append(f"Line {line_num}: base_price must be a decimal number")
        else:
            if base_price < 0:
                errors.append(f"Line {line_num}: base_price must not be negative")

    items = []
    try:
        item_pairs = parse_pairs(row.get('items', ''))
    except ValueError as e:
        errors.append(f"Line {line_num}: items {e}")
        item_pairs = []
    else:
        if not item_pairs:
            errors.append(f"Line {line_num}: items is required")

    for sku, qty_str in item_pairs:
        try:
            qty = int(qty_str)
        except ValueError:
            errors.append(f"Line {line_num}: quantity for {sku} must be an integer")
            continue
        if qty < 1:
            errors.append(f"Line {line_num}: quantity for {sku} must be at least 1")
            continue
        items.append(PromotionItem(sku=sku, quantity=qty))

    price_items = []
    try:
        price_pairs = parse_pairs(row.get('price_items', ''))
    except ValueError as e:
        errors.append(f"Line {line_num}: price_items {e}")
        price_pairs = []

    for sku, pct_str in price_pairs:
        try:
            percentage = as_decimal(pct_str, f"percentage for {sku}")
        except ConfigurationError:
            errors.append(f"Line {line_num}: percentage for {sku} must be a decimal number")
            continue
        if percentage < 0:
            errors.append(f"Line {line_num}: percentage for {sku} must not be negative")
            continue
        price_items.append(PromotionPriceItem(sku=sku, percentage=percentage))

    if errors:
        return None, errors

    notes = parse_optional_str(row.get('notes', '')) or ""
    return PromotionRecord(
        promotion_id=promotion_id,
        name=name,
        active=active,
        base_price=base_price,
        items=items,
        price_items=price_items,
        notes=notes,
    ), []


def compile_promotions(
    promotions_csv: Path,
    output_json: Path,
    verbose: bool = True
) -> tuple[bool, list[PromotionRecord], list[str]]:
    """
    Compile promotions from CSV to JSON.

    Returns (success, records, errors).
    """
    all_errors = []
    records = []
    seen_ids = set()

    if not promotions_csv.exists():
        all_errors.append(f"Promotions file not found: {promotions_csv}")
        return False, [], all_errors

    with open(promotions_csv, 'r', newline='', encoding='utf-8') as f:
        reader = csv.DictReader(f)

        for line_num, row in enumerate(reader, start=2):  # +2 for 1-indexed header row
            record, errors = validate_promotion(row, line_num)

            if errors:
                all_errors.extend(errors)
            elif record:
                if record.promotion_id in seen_ids:
                    all_errors.append(f"Line {line_num}: duplicate promotion_id '{record.promotion_id}'")
                    continue
                seen_ids.add(record.promotion_id)
                records.append(record)

    if all_errors:
        if verbose:
            print("Validation errors:")
            for err in all_errors:
                print(f"  ❌ {err}")
        logger.warning("Promotion compile failed with %d errors", len(all_errors))
        return False, records, all_errors

    output_data = {
        "compiled_at": datetime.now().isoformat(),
        "source_file": str(promotions_csv),
        "total_promotions": len(records),
        "active_promotions": sum(1 for r in records if r.active),
        "promotions": [r.to_json() for r in records],
    }

    output_json.parent.mkdir(parents=True, exist_ok=True)
    with open(output_json, 'w', encoding='utf-8') as f:
        json.dump(output_data, f, indent=2)

    logger.info("Compiled %d promotions to %s", len(records), output_json)
    if verbose:
        print(f"✅ Compiled {len(records)} promotions ({output_data['active_promotions']} active)")
        print(f"   Output: {output_json}")

    return True, records, []


def _entry_quantity(item: dict) -> int:
    quantity = item['quantity']
    if isinstance(quantity, bool) or not isinstance(quantity, int):
        raise ValueError(f"quantity for {item['sku']} must be an integer, got {quantity!r}")
    return quantity


def load_promotions(compiled_json: Union[str, Path], include_inactive: bool = False) -> list[Promotion]:
    """Load compiled promotions in file order, skipping inactive ones by default."""
    compiled_json = Path(compiled_json)
    if not compiled_json.exists():
        raise ConfigurationError(
            f"{compiled_json.name} not found at {compiled_json}. Run compile_promotions first."
        )

    try:
        with open(compiled_json, 'r', encoding='utf-8') as f:
            data = json.load(f)
    except json.JSONDecodeError as e:
        raise ConfigurationError(f"Invalid JSON in {compiled_json}: {e}") from e

    if not isinstance(data, dict) or not isinstance(data.get('promotions', []), list):
        raise ConfigurationError(f"{compiled_json} must hold an object with a 'promotions' list")

    promotions = []
    for entry in data.get('promotions', []):
        try:
            active = entry.get('active', False)
            if not isinstance(active, bool):
                raise ValueError(f"active must be true or false, got {active!r}")
            if not include_inactive and not active:
                continue
            promotions.append(Promotion(
                items=[PromotionItem(sku=i['sku'], quantity=_entry_quantity(i)) for i in entry['items']],
                price_items=[
                    PromotionPriceItem(sku=p['sku'], percentage=as_decimal(p['percentage'], "percentage"))
                    for p in entry.get('price_items', [])
                ],
                base_price=as_decimal(entry.get('base_price', '0'), "base_price"),
                promotion_id=entry['promotion_id'],
                name=entry.get('name') or entry['promotion_id'],
            ))
        except (AttributeError, KeyError, TypeError, ValueError) as e:
            raise ConfigurationError(f"Malformed promotion entry in {compiled_json}: {e}") from e
    return promotions


def main():
    """CLI entry point."""
    from ..config.settings import get_settings

    logging.basicConfig(level=logging.INFO, format='%(levelname)s %(name)s: %(message)s')
    settings = get_settings()

    print("Compiling promotions...")
    success, records, errors = compile_promotions(settings.promotions_csv, settings.compiled_promotions)

    if not success:
        print(f"\n❌ Compilation failed with {len(errors)} errors")
        sys.exit(1)


if __name__ == "__main__":
    main()
