"""
FastAPI 애플리케이션: namespace를 HTTP 경로로 서빙.

- GET /            → server.default_namespace (기본 /home)
- GET /<path>      → namespace "/<path>"의 index 템플릿
- 없는 namespace   → server.notfound_namespace (404), 그것도 없으면 plain 404

실행:
- 개발: uv run uvicorn templatex.app.main:app --reload
- 설정: TEMPLATEX_CONFIG, 없으면 프로젝트 루트 또는 현재 디렉터리의 default.yaml
"""

import logging
import os
import posixpath
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml
from fastapi import FastAPI, Request, Response
from fastapi.responses import HTMLResponse, PlainTextResponse

from templatex.core.registry import NamespaceRegistry
from templatex.domain.constants import (
    DEFAULT_EXTENSION,
    DEFAULT_HOME_NAMESPACE,
    DEFAULT_INDEX,
    DEFAULT_NOTFOUND_NAMESPACE,
    DEFAULT_TEMPLATES_ROOT,
    ROOT_NAMESPACE,
)
from templatex.domain.errors import NamespaceNotFoundError, TemplatexError

logger = logging.getLogger(__name__)

PROJECT_ROOT = Path(__file__).parent.parent.parent.parent

# =============================================================================
# Configuration
# =============================================================================


def default_config_path() -> Path:
    """
    설정 파일 경로.

    1. TEMPLATEX_CONFIG 환경변수
    2. 소스 체크아웃의 프로젝트 루트 default.yaml
    3. 현재 작업 디렉터리의 default.yaml (wheel 설치 시)
    """
    env_path = os.getenv("TEMPLATEX_CONFIG")
    if env_path:
        return Path(env_path)

    project_config = PROJECT_ROOT / "default.yaml"
    if project_config.exists():
        return project_config
    return Path.cwd() / "default.yaml"


def load_config(config_path: Path | None = None) -> dict:
    """설정 파일 로드 (없으면 빈 dict)."""
    if config_path is None:
        config_path = default_config_path()

    if not config_path.exists():
        return {}

    with open(config_path, encoding="utf-8") as f:
        data: dict[Any, Any] = yaml.safe_load(f) or {}
        return data


@dataclass
class ServerSettings:
    """서버 설정 (default.yaml의 templates/server 섹션)."""
    root: Path
    index: str = DEFAULT_INDEX
    ext: str = DEFAULT_EXTENSION
    default_namespace: str = DEFAULT_HOME_NAMESPACE
    notfound_namespace: str = DEFAULT_NOTFOUND_NAMESPACE

    @classmethod
    def from_config(cls, config: dict[str, Any], base_dir: Path) -> "ServerSettings":
        """
        Args:
            config: load_config() 결과
            base_dir: 상대 경로 root의 기준 디렉터리
        """
        templates = config.get("templates", {}) or {}
        server = config.get("server", {}) or {}

        root = Path(templates.get("root", DEFAULT_TEMPLATES_ROOT))
        if not root.is_absolute():
            root = base_dir / root

        return cls(
            root=root,
            index=templates.get("index", DEFAULT_INDEX),
            ext=templates.get("ext", DEFAULT_EXTENSION),
            default_namespace=server.get("default_namespace", DEFAULT_HOME_NAMESPACE),
            notfound_namespace=server.get("notfound_namespace", DEFAULT_NOTFOUND_NAMESPACE),
        )


def resolve_namespace(url_path: str, default_namespace: str) -> str:
    """요청 경로 → namespace 경로 ("/" 는 default_namespace)."""
    namespace = posixpath.normpath("/" + url_path.lstrip("/"))
    if namespace == ROOT_NAMESPACE:
        return default_namespace
    return namespace


# =============================================================================
# App Factory
# =============================================================================


def create_app(config_path: Path | None = None) -> FastAPI:
    """
    FastAPI 앱 생성.

    시작 시 설정을 읽고 템플릿 루트를 빌드해 app.state.registry에 보관.
    빌드 실패 시 시작 자체가 실패 (ParseError 전파).
    """
    if config_path is None:
        config_path = default_config_path()

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
        # Startup
        config = load_config(config_path)
        settings = ServerSettings.from_config(config, config_path.parent)

        registry = NamespaceRegistry(settings.index, settings.ext)
        registry.build(settings.root)
        logger.info(f"Serving {len(registry)} namespaces from {settings.root}")

        app.state.settings = settings
        app.state.registry = registry

        yield

    app = FastAPI(
        title="templatex",
        description="디렉터리 기반 계층형 템플릿 namespace 서버",
        version="0.1.0",
        lifespan=lifespan,
    )

    @app.get("/health")
    async def health() -> dict[str, str]:
        """헬스 체크."""
        return {"status": "ok"}

    @app.get("/{url_path:path}", response_class=HTMLResponse)
    def serve_namespace(url_path: str, request: Request) -> Response:
        """namespace 렌더링."""
        settings: ServerSettings = request.app.state.settings
        registry: NamespaceRegistry = request.app.state.registry

        namespace = resolve_namespace(url_path, settings.default_namespace)
        data = {"namespace": namespace, "query": dict(request.query_params)}

        try:
            return HTMLResponse(registry.render_namespace(namespace, data))
        except NamespaceNotFoundError:
            logger.info(f"Namespace not found: {namespace}")
        except TemplatexError as e:
            logger.error(f"Failed to render namespace {namespace}: {e}")
            return PlainTextResponse(str(e), status_code=500)

        try:
            content = registry.render_namespace(settings.notfound_namespace, data)
        except NamespaceNotFoundError:
            return PlainTextResponse("404 Not Found", status_code=404)
        except TemplatexError as e:
            logger.error(f"Failed to render not-found namespace: {e}")
            return PlainTextResponse(str(e), status_code=500)
        return HTMLResponse(content, status_code=404)

    return app


app = create_app()


# =============================================================================
# CLI Entry Point
# =============================================================================

if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "templatex.app.main:app",
        host="127.0.0.1",
        port=8080,
        reload=True,
    )
