"""
拓扑概要（面向前端 UI / API）。

定位：
- 对一份 monolith 给出“有哪些指令、定义了哪些符号、体系标题与分子表”的轻量视图。
- system / molecules 段缺失时对应字段为 None（概要只做诊断，不把缺段当作错误）；
  段存在但内容非法时，读取器的 StructuralError 原样向上传播。

约束：
- 该模块只读，不修改 monolith。
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from gmxtop.errors import DirectiveNotFoundError, LexicalError
from gmxtop.lexical import define_token
from gmxtop.locator import iter_directives

from .directives import parse_molecule_table, parse_system_title


@dataclass(frozen=True)
class TopologySummary:
    directives: list[str]
    defines: list[str]
    system: str | None
    molecules: dict[str, int] | None


def _defines(monolith: bytes) -> list[str]:
    out: list[str] = []
    for line in monolith.decode("utf-8", errors="replace").split("\n"):
        try:
            out.append(define_token(line))
        except LexicalError:
            continue
    return out


def summarize(monolith: bytes) -> TopologySummary:
    try:
        system: str | None = parse_system_title(monolith)
    except DirectiveNotFoundError:
        system = None
    try:
        molecules: dict[str, int] | None = parse_molecule_table(monolith)
    except DirectiveNotFoundError:
        molecules = None

    return TopologySummary(
        directives=[h.name for h in iter_directives(monolith)],
        defines=_defines(monolith),
        system=system,
        molecules=molecules,
    )


def summary_to_dict(summary: TopologySummary) -> dict[str, Any]:
    return {
        "directives": list(summary.directives),
        "defines": list(summary.defines),
        "system": summary.system,
        "molecules": (
            [{"name": name, "count": count} for name, count in summary.molecules.items()]
            if summary.molecules is not None
            else None
        ),
    }
