"""
monolith 拼装：把根拓扑文件及其全部 #include 递归展开为一份扁平文档。

约定：
- 每行：去注释 → 去首尾空白 → 空行丢弃（不保留任何空行分隔）。
- `#include "path"` 行在原位置被被包含文件的完整展开结果替换（深度优先、先序）；
  被包含文件与根文件使用同一个 base_dir 解析相对路径。
- 其余行原样（字节级）写出，并以单个 `\\n` 结尾。

约束：
- 正在展开的 include 链上若再次出现同一个文件（按 resolve 后的路径判断），
  抛 IncludeError(kind="cyclic_include")，不允许无界递归。
- 同一文件在不同位置被重复 include（非循环）是允许的，按出现次数展开。
- include 目标（resolve 之后，含符号链接）必须位于 base_dir 之内；绝对路径或 `..` 越界抛
  IncludeError(kind="include_outside_base")。
- 文件打不开 / 读失败：原样抛出 OSError 系列异常。
"""

from __future__ import annotations

import io
import logging
from pathlib import Path
from typing import BinaryIO

from .errors import IncludeError
from .lexical import BLANKS, COMMENT, include_path, is_include_path
from .linereader import DEFAULT_LINE_BUFFER, read_line


logger = logging.getLogger(__name__)

_COMMENT_B = COMMENT.encode("ascii")
_BLANKS_B = (BLANKS + "\n").encode("ascii")


def _content_of(raw: bytes) -> bytes:
    i = raw.find(_COMMENT_B)
    if i != -1:
        raw = raw[:i]
    return raw.strip(_BLANKS_B)


def write_monolith(
    out: BinaryIO,
    base_dir: Path,
    file_name: str,
    *,
    line_buffer: int = DEFAULT_LINE_BUFFER,
    _chain: tuple[Path, ...] = (),
) -> None:
    """把 file_name（相对 base_dir）展开后写入 out。"""

    base = base_dir.resolve()
    path = (base / file_name).resolve()
    if not path.is_relative_to(base):
        raise IncludeError("include_outside_base", f"include 目标不在拓扑目录内：{file_name!r}", source=file_name)
    if path in _chain:
        cycle = " -> ".join(p.name for p in (*_chain, path))
        raise IncludeError("cyclic_include", f"检测到循环 include：{cycle}", source=file_name)

    chain = (*_chain, path)
    logger.debug("展开拓扑文件：%s（深度 %d）", path, len(_chain))

    with path.open("rb") as f:
        line_no = 0
        while True:
            raw = read_line(f, line_buffer, source=file_name)
            if raw is None:
                break
            line_no += 1

            content = _content_of(raw)
            if not content:
                continue

            text = content.decode("utf-8", errors="replace")
            if is_include_path(text):
                target = include_path(text)
                logger.debug("%s:%d include %s", file_name, line_no, target)
                write_monolith(out, base_dir, target, line_buffer=line_buffer, _chain=chain)
            else:
                out.write(content + b"\n")


def create_monolith(base_dir: Path, file_name: str, *, line_buffer: int = DEFAULT_LINE_BUFFER) -> bytes:
    """展开根文件，返回 monolith 字节串。"""

    buf = io.BytesIO()
    write_monolith(buf, Path(base_dir), file_name, line_buffer=line_buffer)
    monolith = buf.getvalue()
    logger.info("monolith 拼装完成：%s（%d 字节）", file_name, len(monolith))
    return monolith
