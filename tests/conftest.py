"""
Pytest fixtures for templatex tests.

구성:
- tests/data: 샘플 템플릿 트리 (/, /home, /settings, /settings/profile, ...)
- write_tree: tmp_path에 임의 트리 생성
- memory_fs: fsspec 메모리 파일시스템 (테스트마다 고유 루트)
"""

import uuid
from collections.abc import Callable, Generator
from pathlib import Path

import pytest
from fsspec.implementations.memory import MemoryFileSystem

# =============================================================================
# Path Fixtures
# =============================================================================

@pytest.fixture
def project_root() -> Path:
    """프로젝트 루트 경로."""
    return Path(__file__).parent.parent


@pytest.fixture
def data_root() -> Path:
    """샘플 템플릿 트리 루트."""
    return Path(__file__).parent / "data"


@pytest.fixture
def data_namespaces() -> set[str]:
    """tests/data에서 기대되는 namespace 목록."""
    return {
        "/",
        "/home",
        "/notfound",
        "/settings",
        "/settings/preferences",
        "/settings/profile",
    }


# =============================================================================
# Tree Fixtures
# =============================================================================

def write_files(root: Path, files: dict[str, str]) -> Path:
    """상대 경로 → 내용 dict로 파일 생성 (내용은 그대로, 줄바꿈 추가 없음)."""
    for rel, content in files.items():
        path = root / rel
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")
    return root


@pytest.fixture
def write_tree(tmp_path: Path) -> Callable[[dict[str, str]], Path]:
    """
    tmp_path/site 아래에 템플릿 트리 생성.

    Usage:
        root = write_tree({"index.html": "hi", "home/index.html": "home"})
    """
    root = tmp_path / "site"

    def _write(files: dict[str, str]) -> Path:
        root.mkdir(exist_ok=True)
        return write_files(root, files)

    return _write


@pytest.fixture
def scenario_files() -> dict[str, str]:
    """
    기본 시나리오: 루트 index + header, /home index + content.

    /home의 index.html이 루트 index.html을 덮어쓰고,
    header.html은 루트에서 상속.
    """
    return {
        "index.html": '{% include "header.html" %}<main>root</main>',
        "header.html": "<header>H</header>",
        "home/index.html": '{% include "header.html" %}{% include "content.html" %}<main>home</main>',
        "home/content.html": "<section>C</section>",
    }


# =============================================================================
# fsspec Fixtures
# =============================================================================

@pytest.fixture
def memory_fs() -> Generator[tuple[MemoryFileSystem, str], None, None]:
    """
    메모리 파일시스템 + 고유 루트 경로.

    MemoryFileSystem은 인스턴스 간 저장소를 공유하므로 테스트마다
    고유 루트를 쓰고 종료 시 삭제.
    """
    fs = MemoryFileSystem()
    root = f"/templatex-{uuid.uuid4().hex[:8]}"
    fs.mkdir(root)

    yield fs, root

    if fs.exists(root):
        fs.rm(root, recursive=True)


def pipe_files(fs: MemoryFileSystem, root: str, files: dict[str, str]) -> None:
    """메모리 파일시스템에 상대 경로 → 내용 dict로 파일 생성."""
    for rel, content in files.items():
        fs.pipe_file(f"{root}/{rel}", content.encode("utf-8"))


@pytest.fixture
def memory_tree(
    memory_fs: tuple[MemoryFileSystem, str],
) -> Callable[[dict[str, str]], tuple[MemoryFileSystem, str]]:
    """
    메모리 파일시스템에 템플릿 트리 생성.

    Usage:
        fs, root = memory_tree({"index.html": "hi"})
    """
    fs, root = memory_fs

    def _write(files: dict[str, str]) -> tuple[MemoryFileSystem, str]:
        pipe_files(fs, root, files)
        return fs, root

    return _write
