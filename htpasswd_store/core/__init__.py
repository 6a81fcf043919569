"""核心模块"""

from .reload_manager import (
    ReloadCallback,
    ReloadEvent,
    AutoReloader,
)

__all__ = [
    "ReloadCallback",
    "ReloadEvent",
    "AutoReloader",
]
