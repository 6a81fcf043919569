"""异常定义

凭据文件加载过程中可能出现的错误
"""

from typing import Optional


class HtpasswdError(Exception):
    """凭据存储异常基类"""


class FileAccessError(HtpasswdError, OSError):
    """凭据文件不存在、不可读或无法 stat"""

    @classmethod
    def from_os_error(cls, error: OSError, path: str) -> "FileAccessError":
        """从底层 OSError 构造，保留 errno 和文件名

        Args:
            error: 原始异常
            path: 凭据文件路径

        Returns:
            包装后的异常
        """
        return cls(error.errno, error.strerror or str(error), error.filename or path)


class FormatError(HtpasswdError, ValueError):
    """某一行既不是注释也不是合法的凭据行"""

    def __init__(self, line: str, lineno: Optional[int] = None):
        self.line = line
        self.lineno = lineno
        super().__init__(f"Invalid line found: {line}")


__all__ = [
    "HtpasswdError",
    "FileAccessError",
    "FormatError",
]
