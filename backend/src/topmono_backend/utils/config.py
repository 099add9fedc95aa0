"""
后端配置加载（YAML）。

约定：
- 配置文件：backend/config/topmono.yaml；文件不存在时使用默认值。
- 未识别字段不能静默忽略；取值非法必须抛出明确异常。
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml

from gmxtop.linereader import DEFAULT_LINE_BUFFER


LOG_LEVELS = ("critical", "error", "warning", "info", "debug")

_KNOWN_KEYS = {"workspace_dir", "line_buffer", "log_level"}


@dataclass(frozen=True)
class Settings:
    workspace_dir: Path
    line_buffer: int = DEFAULT_LINE_BUFFER
    log_level: str = "info"

    @classmethod
    def from_dict(cls, d: dict[str, Any] | None, *, repo_root: Path) -> "Settings":
        d = d or {}
        unknown = set(d) - _KNOWN_KEYS
        if unknown:
            raise ValueError(f"未识别的配置项：{sorted(unknown)!r}")

        workspace = Path(str(d.get("workspace_dir") or "backend/workspace"))
        if not workspace.is_absolute():
            workspace = repo_root / workspace

        line_buffer = d.get("line_buffer", DEFAULT_LINE_BUFFER)
        if not isinstance(line_buffer, int) or isinstance(line_buffer, bool) or line_buffer <= 0:
            raise ValueError(f"line_buffer 必须是正整数：{line_buffer!r}")

        log_level = str(d.get("log_level") or "info").lower()
        if log_level not in LOG_LEVELS:
            raise ValueError(f"未知 log_level：{log_level!r}（可选 {LOG_LEVELS!r}）")

        return cls(workspace_dir=workspace, line_buffer=line_buffer, log_level=log_level)

    @classmethod
    def load(cls, path: Path, *, repo_root: Path) -> "Settings":
        if not path.exists():
            return cls.from_dict(None, repo_root=repo_root)
        d = yaml.safe_load(path.read_text(encoding="utf-8"))
        if d is not None and not isinstance(d, dict):
            raise ValueError(f"配置文件顶层必须是映射：{path}")
        return cls.from_dict(d, repo_root=repo_root)

    @classmethod
    def load_from_repo(cls, repo_root: Path) -> "Settings":
        """从仓库内置 YAML 加载配置。"""

        return cls.load(repo_root / "backend" / "config" / "topmono.yaml", repo_root=repo_root)
