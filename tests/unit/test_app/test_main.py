"""
test_main.py - FastAPI 앱 테스트

엔드포인트:
- GET /health
- GET /            → default_namespace (/home)
- GET /<path>      → namespace 렌더링
- 없는 namespace   → notfound_namespace (404) 또는 plain 404
- 렌더 실패        → 500
"""

from pathlib import Path

import pytest
import yaml
from fastapi.testclient import TestClient

from templatex.app import main as main_module
from templatex.app.main import (
    ServerSettings,
    create_app,
    default_config_path,
    load_config,
    resolve_namespace,
)

# =============================================================================
# Fixtures
# =============================================================================


def write_config(path: Path, root: Path, **server) -> Path:
    config = {
        "templates": {"root": str(root), "index": "index", "ext": ".html"},
        "server": server,
    }
    path.write_text(yaml.safe_dump(config), encoding="utf-8")
    return path


@pytest.fixture
def client(tmp_path: Path, data_root: Path):
    """tests/data를 서빙하는 TestClient."""
    config_path = write_config(tmp_path / "config.yaml", data_root)
    with TestClient(create_app(config_path)) as client:
        yield client


# =============================================================================
# Configuration
# =============================================================================


class TestConfig:
    """설정 로드 테스트."""

    def test_missing_config_is_empty(self, tmp_path: Path):
        assert load_config(tmp_path / "missing.yaml") == {}

    def test_defaults(self, tmp_path: Path):
        settings = ServerSettings.from_config({}, tmp_path)

        assert settings.root == tmp_path / "templates"
        assert settings.index == "index"
        assert settings.ext == ".html"
        assert settings.default_namespace == "/home"
        assert settings.notfound_namespace == "/notfound"

    def test_relative_root_resolved_against_base_dir(self, tmp_path: Path):
        settings = ServerSettings.from_config({"templates": {"root": "site"}}, tmp_path)

        assert settings.root == tmp_path / "site"

    def test_project_default_config(self, project_root: Path):
        config = load_config(project_root / "default.yaml")

        assert config["templates"]["ext"] == ".html"
        assert config["server"]["default_namespace"] == "/home"

    def test_config_path_from_env(self, monkeypatch, tmp_path: Path):
        monkeypatch.setenv("TEMPLATEX_CONFIG", str(tmp_path / "site.yaml"))

        assert default_config_path() == tmp_path / "site.yaml"

    def test_config_path_in_source_checkout(self, monkeypatch, project_root: Path):
        monkeypatch.delenv("TEMPLATEX_CONFIG", raising=False)

        assert default_config_path().resolve() == (project_root / "default.yaml").resolve()

    def test_config_path_falls_back_to_cwd(self, monkeypatch, tmp_path: Path):
        """프로젝트 루트에 default.yaml이 없으면 (wheel 설치) 현재 디렉터리."""
        monkeypatch.delenv("TEMPLATEX_CONFIG", raising=False)
        monkeypatch.setattr(main_module, "PROJECT_ROOT", tmp_path / "site-packages")
        monkeypatch.chdir(tmp_path)

        assert default_config_path().resolve() == (tmp_path / "default.yaml").resolve()


class TestResolveNamespace:
    """요청 경로 → namespace 변환 테스트."""

    @pytest.mark.parametrize(
        ("url_path", "expected"),
        [
            ("", "/home"),
            ("/", "/home"),
            ("settings", "/settings"),
            ("settings/profile/", "/settings/profile"),
            ("settings/../home", "/home"),
            ("//settings", "/settings"),
            ("../..", "/home"),
        ],
    )
    def test_paths(self, url_path: str, expected: str):
        assert resolve_namespace(url_path, "/home") == expected


# =============================================================================
# Routes
# =============================================================================


class TestRoutes:
    """namespace 서빙 테스트."""

    def test_health(self, client):
        response = client.get("/health")

        assert response.status_code == 200
        assert response.json() == {"status": "ok"}

    def test_root_serves_default_namespace(self, client):
        response = client.get("/")

        assert response.status_code == 200
        assert "text/html" in response.headers["content-type"]
        assert "<p>home content</p>" in response.text

    def test_nested_namespace(self, client):
        response = client.get("/settings/preferences")

        assert response.status_code == 200
        assert "<header>preferences header</header>" in response.text

    def test_missing_namespace_renders_notfound(self, client):
        response = client.get("/missing/page")

        assert response.status_code == 404
        assert "nothing at /missing/page" in response.text

    def test_plain_404_without_notfound_namespace(self, tmp_path: Path, data_root: Path):
        config_path = write_config(
            tmp_path / "config.yaml", data_root, notfound_namespace="/nope"
        )

        with TestClient(create_app(config_path)) as client:
            response = client.get("/missing")

        assert response.status_code == 404
        assert response.text == "404 Not Found"

    def test_render_failure_returns_500(self, tmp_path: Path, write_tree):
        root = write_tree({"home/index.html": '{% include "gone.html" %}'})
        config_path = write_config(tmp_path / "config.yaml", root)

        with TestClient(create_app(config_path)) as client:
            response = client.get("/")

        assert response.status_code == 500
        assert "RENDER_FAILED" in response.text
