"""
固定行缓冲的逐行读取。

约束：
- 单行（不含换行符）超过 line_buffer 字节时抛 IncludeError(kind="line_too_long")，
  不做截断或静默拼接。
"""

from __future__ import annotations

from typing import BinaryIO

from .errors import IncludeError


DEFAULT_LINE_BUFFER = 1024


def read_line(handle: BinaryIO, line_buffer: int = DEFAULT_LINE_BUFFER, *, source: str | None = None) -> bytes | None:
    """读取一行（保留结尾换行符）；EOF 返回 None。"""

    raw = handle.readline(line_buffer + 1)
    if raw == b"":
        return None
    if len(raw) > line_buffer and not raw.endswith(b"\n"):
        raise IncludeError(
            "line_too_long",
            f"单行超过行缓冲上限 {line_buffer} 字节",
            offset=handle.tell() - len(raw),
            source=source,
        )
    return raw


def decode_line(raw: bytes) -> str:
    """去掉结尾换行并解码；非 UTF-8 字节替换为 U+FFFD（只影响判定，不改写原始字节）。"""

    if raw.endswith(b"\n"):
        raw = raw[:-1]
    return raw.decode("utf-8", errors="replace")
