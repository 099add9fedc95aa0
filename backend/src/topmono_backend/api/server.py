"""
TopMono 后端 API（FastAPI）。

约定：
- 服务端口：7130
- workspace：默认 backend/workspace（文件夹管理多个拓扑项目），见 backend/config/topmono.yaml

API 设计原则：
- 以“项目 + 根拓扑文件”为核心：monolith 每次按需拼装，不缓存、不落盘。
- 严格校验，宁可失败，不做静默降级；格式错误以 kind 区分返回给前端。
"""

from __future__ import annotations

import logging
from dataclasses import asdict
from pathlib import Path
from typing import Any

from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, Field

from gmxtop.errors import DirectiveNotFoundError, TopologyError
from gmxtop.locator import find_section

from ..domain.summary import summarize, summary_to_dict
from ..infra.workspace import (
    ProjectMeta,
    build_project_monolith,
    create_project,
    list_projects,
    load_project_meta,
)
from ..utils.config import Settings
from ..utils.paths import find_repo_root


logger = logging.getLogger(__name__)


class CreateProjectRequest(BaseModel):
    name: str = Field(min_length=1)
    root_file: str = Field(default="topol.top", min_length=1)
    files: dict[str, str]


def _error_detail(e: TopologyError) -> dict[str, Any]:
    return e.to_dict()


def create_app(settings: Settings | None = None) -> FastAPI:
    app = FastAPI(title="TopMono Backend", version="0.1.0")

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=False,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    resolved: dict[str, Settings] = {}

    def get_settings() -> Settings:
        if settings is not None:
            return settings
        if "settings" not in resolved:
            resolved["settings"] = Settings.load_from_repo(find_repo_root())
        return resolved["settings"]

    def workspace() -> Path:
        return get_settings().workspace_dir

    def load_meta(project_id: str) -> ProjectMeta:
        try:
            return load_project_meta(workspace(), project_id)
        except FileNotFoundError as e:
            raise HTTPException(status_code=404, detail=f"项目不存在：{project_id}") from e
        except ValueError as e:
            raise HTTPException(status_code=400, detail=str(e)) from e

    def monolith_of(meta: ProjectMeta) -> bytes:
        try:
            return build_project_monolith(workspace(), meta, line_buffer=get_settings().line_buffer)
        except FileNotFoundError as e:
            raise HTTPException(status_code=404, detail=f"拓扑文件不存在：{e.filename or e}") from e
        except TopologyError as e:
            logger.warning("monolith 拼装失败 project=%s: %s", meta.project_id, e)
            raise HTTPException(status_code=400, detail=_error_detail(e)) from e

    @app.get("/health")
    def health() -> dict[str, str]:
        return {"status": "ok"}

    @app.get("/projects")
    def api_list_projects() -> list[dict[str, Any]]:
        return [p.to_dict() for p in list_projects(workspace())]

    @app.post("/projects")
    def api_create_project(req: CreateProjectRequest) -> dict[str, Any]:
        try:
            meta = create_project(root=workspace(), name=req.name, root_file=req.root_file, files=req.files)
        except ValueError as e:
            raise HTTPException(status_code=400, detail=str(e)) from e
        return meta.to_dict()

    @app.get("/projects/{project_id}")
    def api_get_project(project_id: str) -> dict[str, Any]:
        return load_meta(project_id).to_dict()

    @app.get("/projects/{project_id}/monolith")
    def api_get_monolith(project_id: str) -> dict[str, Any]:
        meta = load_meta(project_id)
        monolith = monolith_of(meta)
        return {"project_id": project_id, "root_file": meta.root_file, "monolith": monolith.decode("utf-8", errors="replace")}

    @app.get("/projects/{project_id}/sections/{name}")
    def api_get_section(project_id: str, name: str, start: int = 0) -> dict[str, Any]:
        monolith = monolith_of(load_meta(project_id))
        try:
            match = find_section(monolith, name, start=start)
        except DirectiveNotFoundError as e:
            raise HTTPException(status_code=404, detail=_error_detail(e)) from e
        except ValueError as e:
            raise HTTPException(status_code=400, detail=str(e)) from e
        out = asdict(match)
        out["content"] = match.text() if match.content is not None else None
        out["name"] = name
        return out

    @app.get("/projects/{project_id}/summary")
    def api_get_summary(project_id: str) -> dict[str, Any]:
        monolith = monolith_of(load_meta(project_id))
        try:
            summary = summarize(monolith)
        except TopologyError as e:
            raise HTTPException(status_code=400, detail=_error_detail(e)) from e
        return summary_to_dict(summary)

    return app


app = create_app()
