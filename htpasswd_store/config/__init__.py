"""配置管理"""

from .manager import (
    DEFAULT_CONFIG_PATH,
    StoreConfig,
    default_config,
    load_config,
)

__all__ = [
    "DEFAULT_CONFIG_PATH",
    "StoreConfig",
    "default_config",
    "load_config",
]
