"""
Promo Pricing Package

Order totals from a catalog price list and an ordered set of promotions.
Applies each promotion greedily, then prices whatever the promotions left over.
"""

__version__ = "1.0.0"
