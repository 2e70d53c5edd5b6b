#!/usr/bin/env python
"""
Build pipeline - compiles promotions, checks inventory, prices the sample order.

Usage:
    python scripts/build_all.py
"""
import sys
from pathlib import Path

# Add src to path
src_path = Path(__file__).parent.parent / 'src'
sys.path.insert(0, str(src_path))

from promo_pricing.config.settings import get_settings
from promo_pricing.data import load_inventory, load_order
from promo_pricing.engine import PricingEngine, PricingError
from promo_pricing.rules import compile_promotions, load_promotions


def main():
    settings = get_settings()

    print("=" * 60)
    print("PROMO PRICING BUILD PIPELINE")
    print("=" * 60)
    print()

    print("[1/3] Compiling promotions...")
    success, _, errors = compile_promotions(settings.promotions_csv, settings.compiled_promotions)
    if not success:
        print(f"\n❌ BUILD FAILED ({len(errors)} promotion errors)")
        sys.exit(1)

    print()
    print("[2/3] Loading inventory and promotions...")
    try:
        engine = PricingEngine(
            load_inventory(settings.inventory_csv),
            load_promotions(settings.compiled_promotions),
        )
    except PricingError as e:
        print(f"\n❌ BUILD FAILED: {e}")
        sys.exit(1)
    print(f"   {len(engine.prices)} SKUs, {len(engine.matcher.promotions)} active promotions")

    print()
    print("[3/3] Pricing sample order...")
    if settings.order_csv is None or not settings.order_csv.exists():
        print("   No sample order found, skipping")
        return

    try:
        result = engine.calculate(load_order(settings.order_csv))
    except PricingError as e:
        print(f"\n❌ PRICING FAILED: {e}")
        sys.exit(1)

    print(result.get_trace_text())
    print()
    print(f"✅ Order total: {result.total}")


if __name__ == "__main__":
    main()
