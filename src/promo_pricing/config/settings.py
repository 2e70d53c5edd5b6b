"""
Centralized settings and path configuration for promo pricing.
"""
from pathlib import Path
from dataclasses import dataclass
from typing import Optional


def get_project_root() -> Path:
    """
    Get the project root directory (where pyproject.toml lives).

    The default data paths assume a source checkout or an editable install.
    A regular install into site-packages has no project root above it, so
    pass project_root to Settings.load() explicitly in that case.
    """
    current = Path(__file__).resolve()
    for parent in current.parents:
        if (parent / 'pyproject.toml').exists() or (parent / 'data' / 'inventory.csv').exists():
            return parent
    # Fallback: the checkout root above src/promo_pricing/config
    return Path(__file__).resolve().parent.parent.parent.parent


@dataclass
class Settings:
    """Application settings with sensible defaults."""

    # Project paths
    project_root: Path

    # Input files
    inventory_csv: Path
    promotions_csv: Path

    # Output files
    compiled_promotions: Path

    # Optional sample order used by scripts
    order_csv: Optional[Path] = None

    @classmethod
    def load(cls, project_root: Optional[Path] = None) -> 'Settings':
        """Load settings from the project structure."""
        root = project_root or get_project_root()
        data_dir = root / 'data'

        return cls(
            project_root=root,
            inventory_csv=data_dir / 'inventory.csv',
            promotions_csv=data_dir / 'promotions.csv',
            compiled_promotions=data_dir / 'compiled_promotions.json',
            order_csv=data_dir / 'order.csv',
        )


# Default settings instance
_settings: Optional[Settings] = None


def get_settings() -> Settings:
    """Get the global settings instance."""
    global _settings
    if _settings is None:
        _settings = Settings.load()
    return _settings
