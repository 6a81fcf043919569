"""htpasswd 凭据存储

HtpasswdFile 在内存中保存从 htpasswd 文件解析出的用户映射，提供认证，
并在文件变化时重新加载。

CheckInterval 语义：check_interval 是建议的重载检查间隔（秒），由外部调度器
（见 core.reload_manager.AutoReloader）读取，本类自身不会定时执行任何操作。
为 0 时表示不启用自动重载。
"""

import os
import threading
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import List, Mapping, Optional, Union

from loguru import logger

from ..errors import FileAccessError
from .hash import BcryptVerifier, PasswordVerifier
from .parser import FileMetadata, parse_file


@dataclass(frozen=True)
class Snapshot:
    """一次成功加载的结果，用户映射与文件元数据总是一起替换"""
    users: Mapping[str, str] = field(default_factory=lambda: MappingProxyType({}))
    metadata: FileMetadata = field(default_factory=FileMetadata)


class HtpasswdFile:
    """htpasswd 文件认证器

    只应通过 open() 或 open_htpasswd() 创建，创建时必须成功解析一次文件。
    直接调用构造函数得到的是未加载的实例：没有任何用户，所有认证都失败，
    直到第一次 reload() 成功。
    """

    def __init__(
        self,
        path: Union[str, "os.PathLike[str]"],
        check_interval: float = 0,
        verifier: Optional[PasswordVerifier] = None,
    ):
        """内部使用：只初始化状态，不读取文件，请使用 open()

        Args:
            path: htpasswd 文件路径，会被解析为绝对路径
            check_interval: 建议的重载检查间隔（秒）
            verifier: 哈希比对实现，默认使用 bcrypt
        """
        self._path = os.path.abspath(os.fspath(path))
        self._verifier: PasswordVerifier = verifier or BcryptVerifier()
        self._lock = threading.Lock()
        self._snapshot = Snapshot()
        self.check_interval = check_interval

    @classmethod
    def open(
        cls,
        path: Union[str, "os.PathLike[str]"],
        check_interval: float = 0,
        verifier: Optional[PasswordVerifier] = None,
    ) -> "HtpasswdFile":
        """打开 htpasswd 文件并加载用户

        Raises:
            FileAccessError: 文件无法读取
            FormatError: 文件中存在无效行
        """
        store = cls(path, check_interval=check_interval, verifier=verifier)
        with store._lock:
            store._read_file()
        return store

    @property
    def path(self) -> str:
        return self._path

    @property
    def check_interval(self) -> float:
        return self._check_interval

    @check_interval.setter
    def check_interval(self, value: float) -> None:
        if value < 0:
            raise ValueError(f"check_interval 不能为负数: {value}")
        self._check_interval = value

    @property
    def metadata(self) -> FileMetadata:
        """最后一次成功解析时的文件元数据"""
        with self._lock:
            return self._snapshot.metadata

    def authenticate(self, username: str, password: str) -> bool:
        """校验用户名和密码

        未知用户使用空哈希走同样的比对流程，调用方无法区分“用户不存在”
        和“密码错误”。锁只保护查找，哈希比对在锁外进行。

        Args:
            username: 用户名
            password: 明文密码

        Returns:
            是否认证通过
        """
        with self._lock:
            hashed = self._snapshot.users.get(username, "")

        try:
            return bool(self._verifier.verify(password, hashed))
        except Exception as e:
            logger.debug(f"用户 {username} 哈希比对出错: {e}")
            return False

    def reload(self) -> bool:
        """检查文件的修改时间和大小，有变化时重新读取

        重载是全有或全无的：任何失败都会保留之前的用户映射。

        Returns:
            是否装载了新的用户映射

        Raises:
            FileAccessError: 文件无法 stat 或读取
            FormatError: 文件中存在无效行
        """
        with self._lock:
            try:
                stat = os.stat(self._path)
            except OSError as e:
                raise FileAccessError.from_os_error(e, self._path) from e

            if FileMetadata.from_stat(stat) == self._snapshot.metadata:
                logger.debug(f"htpasswd 文件未变化: {self._path}")
                return False

            self._read_file()
            return True

    def _read_file(self) -> None:
        """解析文件并替换快照，调用方必须持有锁"""
        users, metadata = parse_file(self._path)
        self._snapshot = Snapshot(users=MappingProxyType(users), metadata=metadata)
        logger.info(f"已从 {self._path} 加载 {len(users)} 个用户")

    def users(self) -> List[str]:
        """当前所有用户名（已排序）"""
        with self._lock:
            return sorted(self._snapshot.users)

    def has_user(self, username: str) -> bool:
        with self._lock:
            return username in self._snapshot.users

    def get_hash(self, username: str) -> Optional[str]:
        with self._lock:
            return self._snapshot.users.get(username)

    def __contains__(self, username: object) -> bool:
        return isinstance(username, str) and self.has_user(username)

    def __len__(self) -> int:
        with self._lock:
            return len(self._snapshot.users)

    def __repr__(self) -> str:
        return f"<HtpasswdFile path={self._path!r} users={len(self)}>"


def open_htpasswd(
    path: Union[str, "os.PathLike[str]"],
    check_interval: float = 0,
    verifier: Optional[PasswordVerifier] = None,
) -> HtpasswdFile:
    """返回加载了指定 htpasswd 文件用户的 HtpasswdFile"""
    return HtpasswdFile.open(path, check_interval=check_interval, verifier=verifier)


__all__ = [
    "Snapshot",
    "HtpasswdFile",
    "open_htpasswd",
]
