"""密码哈希模块"""

from typing import Protocol

import bcrypt


class PasswordVerifier(Protocol):
    """哈希比对能力接口，测试中可替换为假实现"""

    def verify(self, plain_password: str, hashed_password: str) -> bool:
        ...


def get_password_hash(password: str, rounds: int = 12) -> str:
    """生成密码哈希值"""
    # bcrypt算法只能处理最多72字节的密码
    password_bytes = password.encode("utf-8")
    if len(password_bytes) > 72:
        password_bytes = password_bytes[:72]
    hashed = bcrypt.hashpw(password_bytes, bcrypt.gensalt(rounds=rounds))
    return hashed.decode("utf-8")


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """验证密码

    哈希为空或格式损坏时返回 False，不抛出异常
    """
    # bcrypt算法只能处理最多72字节的密码
    plain_bytes = plain_password.encode("utf-8")
    if len(plain_bytes) > 72:
        plain_bytes = plain_bytes[:72]
    hashed_bytes = hashed_password.encode("utf-8")
    try:
        return bcrypt.checkpw(plain_bytes, hashed_bytes)
    except ValueError:
        return False


class BcryptVerifier:
    """基于 bcrypt 的默认比对实现"""

    def verify(self, plain_password: str, hashed_password: str) -> bool:
        return verify_password(plain_password, hashed_password)


__all__ = [
    "PasswordVerifier",
    "BcryptVerifier",
    "get_password_hash",
    "verify_password",
]
