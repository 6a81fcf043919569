"""htpasswd 解析单元测试

测试行格式校验和整文件解析
"""

import io
import sys
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).parent.parent))

from htpasswd_store.auth.parser import (
    BCRYPT_LINE,
    COMMENT_LINE,
    FileMetadata,
    is_valid_line,
    parse_file,
    parse_lines,
)
from htpasswd_store.errors import FileAccessError, FormatError

TESTDATA = Path(__file__).parent / "testdata"

HASH_2A = "$2a$10$3cz0nlM0jWIAs1wXcBu7XuLJjNg9Mz36RSExfwSW.0rs.xPs2Gghu"
HASH_2Y = "$2y$05$Vdk6E1bKMHVG.t0SLw5yiO224pZyGC27TcDCPPx3gmyf7us3X8yNa"


class TestLineValidation:
    """测试单行校验"""

    @pytest.mark.parametrize("line,expected", [
        (f"example:{HASH_2A}", True),
        (f"example:{HASH_2Y}", True),
        (f"example:{HASH_2A.replace('$2a$', '$2b$')}", True),
        (f"ex_am-ple9:{HASH_2A}", True),
        # 哈希少于 53 个字符
        ("example:$2a$10$3cz0nlM0jWIAs1wXcBu7XuLJjNg9Mz36RSExfwSW.0rs.", False),
        # 哈希多于 53 个字符
        (f"example:{HASH_2A}XXXXXXX", False),
        # 没有用户名
        (HASH_2A, False),
        # 用户名以数字开头
        (f"1:{HASH_2A}", False),
        # 不支持的哈希标记
        (f"example:{HASH_2A.replace('$2a$', '$2x$')}", False),
        # 多余的字段
        (f"example:{HASH_2A}:extra", False),
        ("Well I'll be a monkey's ass", False),
    ])
    def test_bcrypt_line(self, line, expected):
        """测试 bcrypt 凭据行"""
        assert is_valid_line(BCRYPT_LINE, line) is expected

    @pytest.mark.parametrize("line,expected", [
        ("# Hi", True),
        ("#", True),
        ("// Not a comment", False),
        ("That really shouldn't happen, no. really.", False),
    ])
    def test_comment_line(self, line, expected):
        """测试注释行"""
        assert is_valid_line(COMMENT_LINE, line) is expected


class TestParseLines:
    """测试内容解析"""

    def test_comments_and_blank_lines_are_skipped(self):
        """注释和空行不产生用户"""
        users = parse_lines(["# comment\n", "\n", "   \t\n", f"example1:{HASH_2A}\n"])
        assert users == {"example1": HASH_2A}

    def test_whitespace_is_trimmed(self):
        """行首尾空白会被去除"""
        users = parse_lines([f"  example1:{HASH_2A}  \r\n"])
        assert users == {"example1": HASH_2A}

    def test_last_duplicate_wins(self):
        """重复用户名以最后一次为准"""
        users = parse_lines([f"example:{HASH_2A}", f"example:{HASH_2Y}"])
        assert users == {"example": HASH_2Y}

    def test_bytes_stream(self):
        """支持二进制流"""
        stream = io.BytesIO(f"example1:{HASH_2A}\nexample2:{HASH_2Y}\n".encode())
        assert parse_lines(stream) == {"example1": HASH_2A, "example2": HASH_2Y}

    def test_empty_input(self):
        """空内容得到空映射"""
        assert parse_lines([]) == {}

    def test_invalid_line_fails_whole_parse(self):
        """任意一行无效都会导致整体失败"""
        with pytest.raises(FormatError) as exc_info:
            parse_lines([f"example1:{HASH_2A}", "Well I'll be a monkey's ass", f"example2:{HASH_2Y}"])

        assert exc_info.value.line == "Well I'll be a monkey's ass"
        assert exc_info.value.lineno == 2
        assert str(exc_info.value) == "Invalid line found: Well I'll be a monkey's ass"

    @pytest.mark.parametrize("separator", ["\x1c", "\x1d", "\x1e", "\x1f"])
    def test_separator_characters_are_not_trimmed(self, separator):
        """文件、组、记录、单元分隔符不算空白"""
        with pytest.raises(FormatError):
            parse_lines([f"{separator}example:{HASH_2A}"])

    @pytest.mark.parametrize("space", ["\t", "\v", "\f", "\xa0", "\u3000"])
    def test_unicode_whitespace_is_trimmed(self, space):
        """Unicode 空白会被去除"""
        assert parse_lines([f"{space}example:{HASH_2A}{space}"]) == {"example": HASH_2A}

    def test_undecodable_bytes_are_invalid(self):
        """无法解码的字节视为无效行"""
        with pytest.raises(FormatError):
            parse_lines([b"\xff\xfe:" + HASH_2A.encode()])


class TestParseFile:
    """测试文件解析"""

    def test_valid_file(self):
        """合法文件"""
        users, metadata = parse_file(str(TESTDATA / "htpasswd.valid"))

        assert set(users) == {"example1", "example2"}
        assert users["example2"] == HASH_2Y
        assert metadata.size == (TESTDATA / "htpasswd.valid").stat().st_size
        assert metadata != FileMetadata()

    def test_invalid_file(self):
        """包含无效行的文件"""
        with pytest.raises(FormatError):
            parse_file(str(TESTDATA / "htpasswd.invalid"))

    def test_missing_file(self):
        """文件不存在"""
        with pytest.raises(FileAccessError) as exc_info:
            parse_file(str(TESTDATA / "htpasswd"))

        assert isinstance(exc_info.value, OSError)
        assert exc_info.value.filename == str(TESTDATA / "htpasswd")
