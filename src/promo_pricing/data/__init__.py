"""Data subpackage - CSV adapters producing engine inputs."""
from .loaders import load_inventory, load_order

__all__ = ['load_inventory', 'load_order']
