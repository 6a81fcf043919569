"""htpasswd 文件解析模块

逐行校验并解析 bcrypt 格式的 htpasswd 文件：
https://httpd.apache.org/docs/2.4/misc/password_encryptions.html

任何无法识别的行都会导致整个文件解析失败，不支持部分成功。
"""

import os
import re
from dataclasses import dataclass
from typing import Dict, Iterable, Tuple, Union

from ..errors import FileAccessError, FormatError

# 2a、2b、2y 三种 bcrypt 规范
BCRYPT_LINE = re.compile(r"[a-zA-Z]+[a-zA-Z0-9_-]*:\$2[aby]\$[0-9]{2}\$[A-Za-z0-9./]{53}")

# 注释行
COMMENT_LINE = re.compile(r"#.*")

# 行首尾去除的空白字符，不包含 \x1c-\x1f 分隔符
WHITESPACE = "\t\n\v\f\r \x85\xa0\u1680\u2000\u2001\u2002\u2003\u2004\u2005\u2006\u2007\u2008\u2009\u200a\u2028\u2029\u202f\u205f\u3000"


@dataclass(frozen=True)
class FileMetadata:
    """凭据文件的变更签名（修改时间 + 大小）"""
    mtime_ns: int = 0
    size: int = 0

    @classmethod
    def from_stat(cls, stat: os.stat_result) -> "FileMetadata":
        return cls(mtime_ns=stat.st_mtime_ns, size=stat.st_size)


def is_valid_line(pattern: "re.Pattern[str]", line: str) -> bool:
    """检查整行是否匹配给定的正则

    Args:
        pattern: BCRYPT_LINE 或 COMMENT_LINE
        line: 已去除首尾空白的行

    Returns:
        是否匹配
    """
    return pattern.fullmatch(line) is not None


def parse_lines(lines: Iterable[Union[bytes, str]]) -> Dict[str, str]:
    """解析 htpasswd 内容

    Args:
        lines: 行迭代器，可以是二进制文件对象

    Returns:
        用户名到哈希值的映射，重复用户名以最后一次出现为准

    Raises:
        FormatError: 出现无效行。非 UTF-8 字节会被替换为 U+FFFD，
            因此 FormatError.line 此时不是原始字节
    """
    users: Dict[str, str] = {}

    for lineno, raw in enumerate(lines, start=1):
        if isinstance(raw, bytes):
            raw = raw.decode("utf-8", errors="replace")
        line = raw.strip(WHITESPACE)

        if not line or is_valid_line(COMMENT_LINE, line):
            continue

        if is_valid_line(BCRYPT_LINE, line):
            username, hashed = line.split(":", 1)
            users[username] = hashed
        else:
            raise FormatError(line, lineno)

    return users


def parse_file(path: str) -> Tuple[Dict[str, str], FileMetadata]:
    """读取并解析 htpasswd 文件，同时记录文件元数据

    Args:
        path: 文件路径

    Returns:
        (用户映射, 文件元数据)

    Raises:
        FileAccessError: 文件无法打开或 stat
        FormatError: 出现无效行
    """
    try:
        with open(path, "rb") as f:
            # 先记录元数据，读取期间的写入会在下次重载时被发现
            stat = os.fstat(f.fileno())
            users = parse_lines(f)
    except OSError as e:
        raise FileAccessError.from_os_error(e, path) from e

    return users, FileMetadata.from_stat(stat)


__all__ = [
    "BCRYPT_LINE",
    "COMMENT_LINE",
    "WHITESPACE",
    "FileMetadata",
    "is_valid_line",
    "parse_lines",
    "parse_file",
]
