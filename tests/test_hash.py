"""密码哈希单元测试"""

import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

from htpasswd_store.auth.hash import BcryptVerifier, get_password_hash, verify_password
from htpasswd_store.auth.parser import BCRYPT_LINE, is_valid_line

HASH_2A = "$2a$10$3cz0nlM0jWIAs1wXcBu7XuLJjNg9Mz36RSExfwSW.0rs.xPs2Gghu"
HASH_2Y = "$2y$05$Vdk6E1bKMHVG.t0SLw5yiO224pZyGC27TcDCPPx3gmyf7us3X8yNa"


class TestVerifyPassword:
    """测试密码比对"""

    def test_known_hashes(self):
        assert verify_password("secret", HASH_2A) is True
        assert verify_password("secret", HASH_2Y) is True
        assert verify_password("wrong", HASH_2A) is False

    def test_empty_or_corrupt_hash(self):
        """空哈希或损坏的哈希返回 False"""
        assert verify_password("secret", "") is False
        assert verify_password("secret", "not-a-hash") is False

    def test_generated_hash_is_accepted_by_parser(self):
        """生成的哈希可以写入 htpasswd 文件"""
        hashed = get_password_hash("secret", rounds=4)

        assert is_valid_line(BCRYPT_LINE, f"generated:{hashed}")
        assert BcryptVerifier().verify("secret", hashed) is True

    def test_long_password_is_truncated(self):
        """超过 72 字节的部分被忽略"""
        hashed = get_password_hash("a" * 72, rounds=4)

        assert verify_password("a" * 100, hashed) is True
