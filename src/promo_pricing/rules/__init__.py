"""Rules subpackage - promotion definitions compiled from CSV."""
from .compile_promotions import compile_promotions, load_promotions, PromotionRecord

__all__ = ['compile_promotions', 'load_promotions', 'PromotionRecord']
