"""
Centralized settings and path configuration for AutoPricing.
"""
import os
from pathlib import Path
from dataclasses import dataclass
from typing import Optional


DATA_DIR_ENV = 'AUTOPRICING_DATA_DIR'


def get_project_root() -> Path:
    """Get the project root directory (where pyproject.toml lives)."""
    current = Path(__file__).resolve()
    for parent in current.parents:
        if (parent / 'pyproject.toml').exists():
            return parent
    # Fallback to 3 levels up from this file
    return Path(__file__).resolve().parent.parent.parent.parent


@dataclass
class Settings:
    """Application settings with sensible defaults."""

    # Project paths
    project_root: Path
    data_dir: Path

    # Key-value store file (local storage analogue)
    store_file: Path

    # Storage keys
    history_key: str = 'pricingHistory'
    theme_key: str = 'theme'

    # Pricing constants
    vat_rate: float = 0.12
    currency_symbol: str = '$'

    app_title: str = 'Smart Pricing System'

    @classmethod
    def load(cls, project_root: Optional[Path] = None, data_dir: Optional[Path] = None) -> 'Settings':
        """Load settings from the project structure and environment."""
        root = project_root or get_project_root()

        env_dir = os.environ.get(DATA_DIR_ENV)
        if data_dir is None:
            data_dir = Path(env_dir) if env_dir else root / 'data'

        return cls(
            project_root=root,
            data_dir=data_dir,
            store_file=data_dir / 'local_storage.json',
        )


# Default settings instance
_settings: Optional[Settings] = None


def get_settings() -> Settings:
    """Get the global settings instance."""
    global _settings
    if _settings is None:
        _settings = Settings.load()
    return _settings
