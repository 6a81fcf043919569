"""认证模块

提供 htpasswd 文件解析、凭据存储和密码比对功能
"""

from .hash import (
    PasswordVerifier,
    BcryptVerifier,
    get_password_hash,
    verify_password,
)
from .parser import (
    BCRYPT_LINE,
    COMMENT_LINE,
    FileMetadata,
    is_valid_line,
    parse_lines,
    parse_file,
)
from .store import (
    Snapshot,
    HtpasswdFile,
    open_htpasswd,
)

__all__ = [
    "PasswordVerifier",
    "BcryptVerifier",
    "get_password_hash",
    "verify_password",
    "BCRYPT_LINE",
    "COMMENT_LINE",
    "FileMetadata",
    "is_valid_line",
    "parse_lines",
    "parse_file",
    "Snapshot",
    "HtpasswdFile",
    "open_htpasswd",
]
