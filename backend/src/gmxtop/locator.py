"""
指令定位器：在文档中按名称找到 `[ name ]` 段落。

两种模式：
- 内存模式（find_section）：对已拼装好的 monolith（bytes）按字节偏移返回原始内容区间，
  不修改区间内任何字节（内容行去注释由调用方在分词时负责）。
- 流式模式（find_section_streaming）：对可 seek 的二进制句柄逐行读取，收集去注释、去空行后的
  内容行；结束时把读指针放回“下一个指令头所在行”的第一个字节，便于下一次调用从该处继续。

约束：
- 指令头判定失败（格式不合法的 `[...]` 行）只意味着“这一行不是指令头”，扫描继续；
  除此之外不吞任何错误。
- 同名指令多次出现时，只返回扫描方向上第一次出现的那一段。
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import BinaryIO, Iterator

from .errors import DirectiveNotFoundError, LexicalError
from .lexical import directive_name, is_directive, strip_comment, trim
from .linereader import DEFAULT_LINE_BUFFER, decode_line, read_line


@dataclass(frozen=True)
class SectionMatch:
    """内存模式定位结果。

    - content：半开区间 [content_start, end_offset) 的原始字节；区间为空时为 None
    - end_offset：下一个指令头的起始偏移；最后一段则为文档长度
    """

    content: bytes | None
    content_start: int
    end_offset: int

    def text(self) -> str:
        """内容区间解码为文本；无内容为空串，非 UTF-8 字节替换为 U+FFFD。"""

        if self.content is None:
            return ""
        return self.content.decode("utf-8", errors="replace")

    def lines(self) -> list[str]:
        """内容区间按行拆分（丢弃空行，不去注释）。"""

        return [line for line in self.text().split("\n") if line != ""]


@dataclass(frozen=True)
class DirectiveHeader:
    name: str
    offset: int


def _iter_lines(document: bytes, start: int) -> Iterator[tuple[int, str, int]]:
    """逐行产出 (行起始偏移, 解码后的行文本, 下一行起始偏移)。"""

    pos = start
    n = len(document)
    while pos < n:
        j = document.find(b"\n", pos)
        nxt = n if j == -1 else j + 1
        yield pos, decode_line(document[pos:nxt]), nxt
        pos = nxt


def _header_name(line: str) -> str | None:
    try:
        return directive_name(line)
    except LexicalError:
        return None


def iter_directives(document: bytes) -> Iterator[DirectiveHeader]:
    """按出现顺序列出所有合法指令头。"""

    for offset, line, _ in _iter_lines(document, 0):
        name = _header_name(line)
        if name is not None:
            yield DirectiveHeader(name=name, offset=offset)


def find_section(document: bytes, name: str, *, start: int = 0) -> SectionMatch:
    """从 start 偏移开始查找 `[ name ]`，返回其内容区间。

    - 未找到该指令：抛 DirectiveNotFoundError
    - 找到但内容为空（紧跟下一个指令头或文档结束）：content=None
    """

    if not (0 <= start <= len(document)):
        raise ValueError(f"start 超界：{start}（文档长度 {len(document)}）")

    content_start: int | None = None
    for _, line, nxt in _iter_lines(document, start):
        if _header_name(line) == name:
            content_start = nxt
            break
    if content_start is None:
        raise DirectiveNotFoundError(name)

    end = len(document)
    for offset, line, _ in _iter_lines(document, content_start):
        if is_directive(line):
            end = offset
            break

    content = document[content_start:end] if end > content_start else None
    return SectionMatch(content=content, content_start=content_start, end_offset=end)


def find_section_streaming(handle: BinaryIO, name: str, *, line_buffer: int = DEFAULT_LINE_BUFFER) -> list[str]:
    """从句柄当前位置查找 `[ name ]`，返回去注释、去空白后的非空内容行。

    返回后句柄读指针位于下一个指令头行的第一个字节（或 EOF）；未找到时读指针停在 EOF。
    """

    source = getattr(handle, "name", None)
    source = str(source) if source is not None else None

    while True:
        raw = read_line(handle, line_buffer, source=source)
        if raw is None:
            raise DirectiveNotFoundError(name, source=source)
        if _header_name(decode_line(raw)) == name:
            break

    out: list[str] = []
    while True:
        pos = handle.tell()
        raw = read_line(handle, line_buffer, source=source)
        if raw is None:
            break
        line = decode_line(raw)
        if is_directive(line):
            handle.seek(pos)
            break
        content = trim(strip_comment(line))
        if content:
            out.append(content)
    return out
