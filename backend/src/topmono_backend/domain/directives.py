"""
类型化指令读取器：从 monolith 中取出 `[ system ]` 与 `[ molecules ]` 的内容。

定位：
- 这是 gmxtop 指令定位器的“参考消费者”：只做文本提取与按空白分词，不做任何力场数值解析。
- 结果（str / dict）与源 monolith 的生命周期无关，调用方可以随时丢弃 monolith。

约束（正确地失败）：
- molecules 每行必须恰好是 `name count` 两个 token；count 为 u64 十进制。
- 重复的分子名直接失败，不允许后写覆盖先写；任一行失败即整体失败，不做部分恢复。
- 分词只按空格 / 制表符 / 回车切分；非 UTF-8 字节按 U+FFFD 读出，不因编码失败而中断。
"""

from __future__ import annotations

from dataclasses import dataclass, field

from gmxtop.errors import StructuralError
from gmxtop.lexical import strip_comment, tokens
from gmxtop.locator import find_section


U64_MAX = 2**64 - 1


@dataclass
class SystemDirective:
    """`[ system ]`：单个去掉首尾换行的标题串。"""

    name: str = ""

    def parse_monolith(self, monolith: bytes) -> None:
        match = find_section(monolith, "system")
        self.name = match.text().strip("\n")


def _parse_count(token: str, *, line_no: int) -> int:
    if not token.isdigit() or not token.isascii():
        raise StructuralError("invalid_count", f"分子数量必须是非负十进制整数：{token!r}", line_no=line_no)
    n = int(token, 10)
    if n > U64_MAX:
        raise StructuralError("invalid_count", f"分子数量超出 u64 范围：{token!r}", line_no=line_no)
    return n


@dataclass
class MoleculesDirective:
    """`[ molecules ]`：分子名 → 数量，保持出现顺序。"""

    molecules: dict[str, int] = field(default_factory=dict)

    def add_molecule(self, name: str, count: int, *, line_no: int | None = None) -> None:
        if name in self.molecules:
            raise StructuralError("duplicate_molecule", f"分子名重复：{name!r}", line_no=line_no)
        self.molecules[name] = count

    def parse_monolith(self, monolith: bytes) -> None:
        match = find_section(monolith, "molecules")
        if match.content is None:
            return

        for line_no, line in enumerate(match.lines(), start=1):
            parts = tokens(strip_comment(line))
            if not parts:
                continue
            if len(parts) < 2:
                raise StructuralError("missing_token", f"分子行缺少数量：{line!r}", line_no=line_no)
            if len(parts) > 2:
                raise StructuralError("unexpected_token", f"分子行多余 token：{parts[2]!r}（原行 {line!r}）", line_no=line_no)
            self.add_molecule(parts[0], _parse_count(parts[1], line_no=line_no), line_no=line_no)


def parse_system_title(document: bytes) -> str:
    d = SystemDirective()
    d.parse_monolith(document)
    return d.name


def parse_molecule_table(document: bytes) -> dict[str, int]:
    d = MoleculesDirective()
    d.parse_monolith(document)
    return dict(d.molecules)
