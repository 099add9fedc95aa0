"""
拓扑解析错误类型。

约定：
- 所有格式错误都继承 TopologyError（同时是 ValueError，便于上层按 ValueError 统一兜底）。
- 每个错误携带 kind（稳定的机器可读标识），测试与 API 均按 kind 区分，不按消息文本区分。
- 文件系统错误（FileNotFoundError / PermissionError 等）不做包装，原样向上传播。
"""

from __future__ import annotations

from typing import Literal


ErrorKind = Literal[
    # 词法（单行）
    "missing_delimiter",
    "empty_name",
    "invalid_name",
    "missing_keyword",
    "missing_separator",
    "empty_path",
    "invalid_path",
    "empty_token",
    "invalid_token",
    # 结构（指令读取器）
    "unexpected_token",
    "missing_token",
    "invalid_count",
    "duplicate_molecule",
    # include 展开 / 读取
    "cyclic_include",
    "include_outside_base",
    "line_too_long",
    # 定位
    "directive_not_found",
]


class TopologyError(ValueError):
    """拓扑格式错误基类。"""

    def __init__(
        self,
        kind: ErrorKind,
        message: str,
        *,
        line_no: int | None = None,
        offset: int | None = None,
        source: str | None = None,
    ) -> None:
        self.kind = kind
        self.message = message
        self.line_no = line_no
        self.offset = offset
        self.source = source
        super().__init__(self._format())

    def _format(self) -> str:
        where: list[str] = []
        if self.source is not None:
            where.append(f"file={self.source}")
        if self.line_no is not None:
            where.append(f"line={self.line_no}")
        if self.offset is not None:
            where.append(f"offset={self.offset}")
        if not where:
            return f"[{self.kind}] {self.message}"
        return f"[{self.kind}] {self.message}（{' '.join(where)}）"

    def to_dict(self) -> dict[str, object]:
        return {
            "kind": self.kind,
            "message": self.message,
            "line_no": self.line_no,
            "offset": self.offset,
            "source": self.source,
        }


class LexicalError(TopologyError):
    """单行词法错误；调用方通常可以跳过该行。"""


class StructuralError(TopologyError):
    """指令内容结构错误；对该指令的整体解析是致命的。"""


class IncludeError(TopologyError):
    """#include 展开或逐行读取过程中的错误（循环 include、行超长）。"""


class DirectiveNotFoundError(TopologyError):
    """文档中不存在指定名称的指令（区别于“指令存在但内容为空”）。"""

    def __init__(self, name: str, *, source: str | None = None) -> None:
        self.name = name
        super().__init__("directive_not_found", f"未找到指令 [ {name} ]", source=source)
