"""
拓扑文本的单行词法判定。

约定（与 GROMACS .top/.itp 的常见写法一致）：
- 注释：`;` 到行尾，任何位置都生效；所有判定之前先去注释。
- 指令头：`[ name ]`，name 非空且不含空白。
- include：`#include "path"`，path 非空且不含空白。
- define：`#define TOKEN`，TOKEN 非空且不含空白。

约束：
- 这里只做纯函数判定，不做 I/O；失败抛 LexicalError（带 kind），is_* 系列永不抛错。
"""

from __future__ import annotations

from .errors import LexicalError


COMMENT = ";"
BLANKS = " \t\r"

INCLUDE_KEYWORD = "#include"
DEFINE_KEYWORD = "#define"

_BLANK_TO_SPACE = str.maketrans({c: " " for c in BLANKS})


def strip_comment(line: str) -> str:
    """截断到第一个 `;`（不含）；没有注释则原样返回。"""

    i = line.find(COMMENT)
    if i == -1:
        return line
    return line[:i]


def trim(text: str) -> str:
    return text.strip(BLANKS)


def has_blank(text: str) -> bool:
    return any(c in BLANKS for c in text)


def tokens(text: str) -> list[str]:
    """按空白（BLANKS）连续段分词；其它 Unicode 空白视为 token 的一部分。"""

    return [t for t in text.translate(_BLANK_TO_SPACE).split(" ") if t]


def directive_name(line: str) -> str:
    """提取指令名：`[ foo ] ; comment` → `foo`。"""

    directive = strip_comment(line)
    i = directive.find("[")
    j = directive.find("]")
    if i == -1 or j == -1:
        raise LexicalError("missing_delimiter", f"指令头缺少 '[' 或 ']'：{line!r}")
    # `] foo [` 这类倒序分隔符视为缺少分隔符
    if j <= i:
        raise LexicalError("missing_delimiter", f"指令头分隔符顺序非法：{line!r}")

    name = trim(directive[i + 1 : j])
    if name == "":
        raise LexicalError("empty_name", f"指令名为空：{line!r}")
    if has_blank(name):
        raise LexicalError("invalid_name", f"指令名包含空白：{name!r}")
    return name


def is_directive(line: str) -> bool:
    try:
        directive_name(line)
    except LexicalError:
        return False
    return True


def include_path(line: str) -> str:
    """提取 include 路径：`#include "./a.itp" ; c` → `./a.itp`。"""

    include = strip_comment(line).lstrip(BLANKS)
    if not include.startswith(INCLUDE_KEYWORD):
        raise LexicalError("missing_keyword", f"缺少 {INCLUDE_KEYWORD} 关键字：{line!r}")

    i = include.find('"')
    if i == -1:
        raise LexicalError("missing_delimiter", f"include 路径缺少引号：{line!r}")
    j = include.find('"', i + 1)
    if j == -1:
        raise LexicalError("missing_delimiter", f"include 路径缺少闭合引号：{line!r}")

    path = trim(include[i + 1 : j])
    if path == "":
        raise LexicalError("empty_path", f"include 路径为空：{line!r}")
    if has_blank(path):
        raise LexicalError("invalid_path", f"include 路径包含空白：{path!r}")
    return path


def is_include_path(line: str) -> bool:
    try:
        include_path(line)
    except LexicalError:
        return False
    return True


def define_token(line: str) -> str:
    """提取 define 符号：`#define POSRES` → `POSRES`。"""

    define = strip_comment(line).lstrip(BLANKS)
    if not define.startswith(DEFINE_KEYWORD):
        raise LexicalError("missing_keyword", f"缺少 {DEFINE_KEYWORD} 关键字：{line!r}")

    rest = define[len(DEFINE_KEYWORD) :]
    if rest == "" or rest[0] not in BLANKS:
        raise LexicalError("missing_separator", f"{DEFINE_KEYWORD} 后缺少空白分隔：{line!r}")

    token = trim(rest)
    if token == "":
        raise LexicalError("empty_token", f"define 符号为空：{line!r}")
    if has_blank(token):
        raise LexicalError("invalid_token", f"define 符号包含空白：{token!r}")
    return token


def is_define_token(line: str) -> bool:
    try:
        define_token(line)
    except LexicalError:
        return False
    return True
