"""配置加载模块

读取命令行入口使用的 JSON 配置。存储本身不读取任何配置，
这里的值只在创建 HtpasswdFile 和 AutoReloader 时传入。
"""

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional, Union

from loguru import logger

DEFAULT_CONFIG_PATH = Path("data") / "config.json"


def default_config() -> Dict[str, Any]:
    """默认配置"""
    return {
        "htpasswd": {
            "path": ".htpasswd",
            # 0 表示不启用自动重载
            "check_interval": 0,
        },
        "log_level": "INFO",
    }


@dataclass
class StoreConfig:
    """凭据存储配置"""
    path: str = ".htpasswd"
    check_interval: float = 0
    log_level: str = "INFO"

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "StoreConfig":
        """从配置字典创建

        Raises:
            ValueError: 字段类型或取值无效
        """
        htpasswd = data.get("htpasswd", {})
        if not isinstance(htpasswd, dict):
            raise ValueError("htpasswd 配置必须是对象")

        try:
            check_interval = float(htpasswd.get("check_interval", 0))
        except (TypeError, ValueError):
            raise ValueError(f"check_interval 必须是数字: {htpasswd.get('check_interval')!r}")
        if check_interval < 0:
            raise ValueError(f"check_interval 不能为负数: {check_interval}")

        return cls(
            path=str(htpasswd.get("path", ".htpasswd")),
            check_interval=check_interval,
            log_level=str(data.get("log_level", "INFO")).upper(),
        )

    def to_dict(self) -> Dict[str, Any]:
        """转换为字典"""
        return {
            "htpasswd": {
                "path": self.path,
                "check_interval": self.check_interval,
            },
            "log_level": self.log_level,
        }


def load_config(config_path: Optional[Union[str, Path]] = None) -> StoreConfig:
    """加载配置文件，如果不存在返回默认配置

    Args:
        config_path: 配置文件路径，默认 data/config.json

    Raises:
        RuntimeError: 配置文件无法读取或不是合法 JSON
        ValueError: 配置取值无效
    """
    path = Path(config_path) if config_path else DEFAULT_CONFIG_PATH
    config = default_config()

    if not path.exists():
        logger.debug(f"配置文件不存在，使用默认配置: {path}")
        return StoreConfig.from_dict(config)

    try:
        with open(path, "r", encoding="utf-8") as f:
            loaded = json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        raise RuntimeError(f"加载配置文件失败: {e}")

    if not isinstance(loaded, dict):
        raise RuntimeError(f"配置文件格式错误: {path}")

    htpasswd = loaded.get("htpasswd") or {}
    if not isinstance(htpasswd, dict):
        raise ValueError("htpasswd 配置必须是对象")

    # 合并默认值
    config["htpasswd"].update(htpasswd)
    if "log_level" in loaded:
        config["log_level"] = loaded["log_level"]

    logger.debug(f"已加载配置: {path}")
    return StoreConfig.from_dict(config)


__all__ = [
    "DEFAULT_CONFIG_PATH",
    "StoreConfig",
    "default_config",
    "load_config",
]
