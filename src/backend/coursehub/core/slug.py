"""
课程 slug 编解码工具类

slug 格式："<标题片段>-<数字ID>"，例如 "python-basics-42"
"""
import re
from typing import Optional


class SlugCodec:
    """URL slug 编解码器（无需查表即可从 slug 还原实体 ID）"""

    MAX_TITLE_LENGTH = 50  # 标题片段最大长度
    MAX_ID = 2 ** 63 - 1  # 数据库 INTEGER 上限，超出的 ID 不可能存在

    _INVALID_CHARS = re.compile(r"[^a-z0-9\s-]")
    _WHITESPACE = re.compile(r"\s+")
    _HYPHENS = re.compile(r"-+")
    _DIGITS = re.compile(r"[0-9]+")

    @classmethod
    def slugify(cls, title: str) -> str:
        """
        将标题转换为 URL 友好的片段

        Args:
            title: 标题

        Returns:
            str: 只包含 [a-z0-9-] 的片段（可能为空）
        """
        text = (title or "").lower().strip()
        text = cls._INVALID_CHARS.sub("", text)
        text = cls._WHITESPACE.sub("-", text)
        text = cls._HYPHENS.sub("-", text)
        return text[:cls.MAX_TITLE_LENGTH]

    @classmethod
    def encode(cls, title: str, entity_id: int) -> str:
        """
        生成带 ID 的 slug

        Args:
            title: 标题
            entity_id: 实体 ID（正整数）

        Returns:
            str: 形如 "course-title-123" 的 slug，标题为空时仍包含 ID 后缀
        """
        return f"{cls.slugify(title)}-{entity_id}"

    @classmethod
    def decode(cls, slug: str) -> str:
        """
        从 slug 中提取 ID 字符串

        从右向左解析：取最后一个连字符之后的片段，
        因此标题本身以数字结尾（如 "course-2-5"）时仍返回 "5"。

        Args:
            slug: slug 或纯数字 ID

        Returns:
            str: 提取到的 ID；无法提取时原样返回输入
        """
        if cls._DIGITS.fullmatch(slug):
            return slug

        last_part = slug.split("-")[-1]
        if cls._DIGITS.fullmatch(last_part):
            return last_part

        return slug

    @classmethod
    def is_valid_id(cls, entity_id: int) -> bool:
        """ID 是否落在数据库可存储的正整数范围内"""
        return 0 < entity_id <= cls.MAX_ID

    @classmethod
    def to_id(cls, slug: str) -> Optional[int]:
        """解析 slug 为整数 ID，无法解析或超出范围时返回 None"""
        decoded = cls.decode(slug)
        if cls._DIGITS.fullmatch(decoded):
            entity_id = int(decoded)
            if entity_id <= cls.MAX_ID:
                return entity_id
        return None
