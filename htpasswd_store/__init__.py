"""htpasswd_store 公共 API

基于 htpasswd 文件的内存凭据存储，支持文件变化后的热重载。

使用示例:
```python
from htpasswd_store import open_htpasswd, AutoReloader

store = open_htpasswd(".htpasswd", check_interval=30)
store.authenticate("example1", "secret")
```
"""

# 版本信息
__version__ = "1.0.0"

# Logger 是 loguru 库的直接导出
from loguru import logger as _logger
logger = _logger

from .errors import (
    HtpasswdError,
    FileAccessError,
    FormatError,
)
from .auth import (
    PasswordVerifier,
    BcryptVerifier,
    FileMetadata,
    HtpasswdFile,
    open_htpasswd,
)
from .core import (
    AutoReloader,
    ReloadEvent,
)

__all__ = [
    "__version__",
    "logger",
    "HtpasswdError",
    "FileAccessError",
    "FormatError",
    "PasswordVerifier",
    "BcryptVerifier",
    "FileMetadata",
    "HtpasswdFile",
    "open_htpasswd",
    "AutoReloader",
    "ReloadEvent",
]
