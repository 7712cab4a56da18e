"""Services layer - Configuration and kernel execution."""

from .config import CoreConfig, load_config, get_config, reset_config_cache

__all__ = [
    "CoreConfig",
    "load_config",
    "get_config",
    "reset_config_cache",
]
