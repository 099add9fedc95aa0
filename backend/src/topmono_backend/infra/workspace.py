"""
后端 workspace（文件夹）管理：拓扑项目。

约定（workspace 根目录下）：

每个项目一个目录：

{workspace}/{project_id}/
  project.json
  files/
    topol.top
    molecule.itp
    ...

说明：
- files/ 是所有 #include 的解析基准目录；文件名只允许 files/ 内的相对路径。
- monolith 不落盘，每次按需从 files/ 重新拼装。
"""

from __future__ import annotations

import json
import logging
import secrets
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path, PurePosixPath
from typing import Any

from gmxtop.linereader import DEFAULT_LINE_BUFFER
from gmxtop.monolith import create_monolith


logger = logging.getLogger(__name__)


def _utc_now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


def _ensure_dir(p: Path) -> None:
    p.mkdir(parents=True, exist_ok=True)


def _read_json(p: Path) -> dict[str, Any]:
    return json.loads(p.read_text(encoding="utf-8"))


def _write_json(p: Path, obj: dict[str, Any]) -> None:
    p.write_text(json.dumps(obj, ensure_ascii=False, indent=2) + "\n", encoding="utf-8")


@dataclass(frozen=True)
class ProjectMeta:
    project_id: str
    name: str
    created_at: str
    root_file: str
    files: tuple[str, ...]

    def to_dict(self) -> dict[str, Any]:
        return {
            "project_id": self.project_id,
            "name": self.name,
            "created_at": self.created_at,
            "root_file": self.root_file,
            "files": list(self.files),
        }

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> "ProjectMeta":
        return cls(
            project_id=d["project_id"],
            name=d["name"],
            created_at=d["created_at"],
            root_file=d["root_file"],
            files=tuple(d.get("files") or ()),
        )


def generate_project_id() -> str:
    return "P" + secrets.token_hex(8)


def validate_file_name(name: str) -> str:
    """只允许 files/ 内的相对路径（不允许绝对路径与 `..`）。"""

    if not name or name.strip() != name:
        raise ValueError(f"非法文件名：{name!r}")
    p = PurePosixPath(name)
    if p.is_absolute() or ".." in p.parts or "\\" in name:
        raise ValueError(f"文件名必须是 files/ 内的相对路径：{name!r}")
    return str(p)


def project_dir(root: Path, project_id: str) -> Path:
    if not project_id.startswith("P") or not project_id[1:].isalnum():
        raise ValueError(f"非法 project_id：{project_id!r}")
    return root / project_id


def project_meta_path(root: Path, project_id: str) -> Path:
    return project_dir(root, project_id) / "project.json"


def project_files_dir(root: Path, project_id: str) -> Path:
    return project_dir(root, project_id) / "files"


def list_projects(root: Path) -> list[ProjectMeta]:
    _ensure_dir(root)
    out: list[ProjectMeta] = []
    for p in sorted(root.iterdir()):
        if not p.is_dir():
            continue
        meta_p = p / "project.json"
        if not meta_p.exists():
            continue
        out.append(ProjectMeta.from_dict(_read_json(meta_p)))
    return out


def load_project_meta(root: Path, project_id: str) -> ProjectMeta:
    p = project_meta_path(root, project_id)
    if not p.exists():
        raise FileNotFoundError(str(p))
    return ProjectMeta.from_dict(_read_json(p))


def create_project(*, root: Path, name: str, root_file: str, files: dict[str, str]) -> ProjectMeta:
    if not files:
        raise ValueError("项目至少需要一个拓扑文件")
    names = [validate_file_name(n) for n in files]
    root_file = validate_file_name(root_file)
    if root_file not in names:
        raise ValueError(f"root_file 不在上传文件中：{root_file!r}")

    project_id = generate_project_id()
    files_dir = project_files_dir(root, project_id)
    _ensure_dir(files_dir)

    for file_name, text in zip(names, files.values()):
        target = files_dir / file_name
        _ensure_dir(target.parent)
        target.write_text(text, encoding="utf-8")

    meta = ProjectMeta(
        project_id=project_id,
        name=name,
        created_at=_utc_now_iso(),
        root_file=root_file,
        files=tuple(names),
    )
    _write_json(project_meta_path(root, project_id), meta.to_dict())
    logger.info("创建拓扑项目 %s（%s，%d 个文件）", project_id, name, len(names))
    return meta


def build_project_monolith(root: Path, meta: ProjectMeta, *, line_buffer: int = DEFAULT_LINE_BUFFER) -> bytes:
    return create_monolith(project_files_dir(root, meta.project_id), meta.root_file, line_buffer=line_buffer)
