"""
Directory walker: 디렉터리 트리 재귀 순회 + 템플릿 상속.

알고리즘 (디렉터리마다):
1. 항목 나열 (이름순)
2. 파일/하위 디렉터리 분리, 확장자 일치 파일만 템플릿
3. 템플릿 파일을 상속받은 집합에 파싱 (첫 에러에서 중단)
4. 확장된 집합을 현재 namespace로 등록
5. 하위 디렉터리마다 집합을 clone → 재귀

clone-per-branch: 형제 디렉터리는 서로의 템플릿을 보지 못함.
상속은 루트 → 잎 방향으로만 흐른다.

소스:
- LocalSource: pathlib 기반 로컬 파일시스템
- FSSpecSource: fsspec AbstractFileSystem (memory, dir, zip 등)
"""

import logging
import posixpath
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Protocol

from templatex.core.template_set import TemplateSet, TemplateSetError
from templatex.domain.errors import (
    ErrorCodes,
    ParseError,
    UnsupportedOperationError,
)

logger = logging.getLogger(__name__)


@dataclass
class DirListing:
    """디렉터리 나열 결과 (이름순)."""
    files: list[str] = field(default_factory=list)
    subdirs: list[str] = field(default_factory=list)


class DirectorySource(Protocol):
    """walker가 필요로 하는 파일시스템 기능."""

    def list_dir(self, path: str) -> DirListing: ...

    def read_text(self, path: str) -> str: ...

    def join(self, path: str, name: str) -> str: ...


# =============================================================================
# Sources
# =============================================================================

class LocalSource:
    """로컬 파일시스템 소스."""

    def list_dir(self, path: str) -> DirListing:
        listing = DirListing()
        for entry in sorted(Path(path).iterdir(), key=lambda p: p.name):
            # symlink 디렉터리는 하위 디렉터리로 취급하지 않음
            if entry.is_dir() and not entry.is_symlink():
                listing.subdirs.append(entry.name)
            else:
                listing.files.append(entry.name)
        return listing

    def read_text(self, path: str) -> str:
        return Path(path).read_text(encoding="utf-8")

    def join(self, path: str, name: str) -> str:
        return str(Path(path) / name)


class FSSpecSource:
    """
    fsspec 파일시스템 소스.

    fs.ls(detail=True)로 나열, fs.cat_file로 읽기.
    ls를 지원하지 않는 파일시스템 → UnsupportedOperationError.
    """

    def __init__(self, fs: Any):
        self.fs = fs

    def list_dir(self, path: str) -> DirListing:
        ls = getattr(self.fs, "ls", None)
        if not callable(ls):
            raise UnsupportedOperationError(
                ErrorCodes.UNSUPPORTED_FS_OPERATION,
                operation="ls",
                filesystem=type(self.fs).__name__,
            )

        try:
            entries = ls(path, detail=True)
        except NotImplementedError as e:
            raise UnsupportedOperationError(
                ErrorCodes.UNSUPPORTED_FS_OPERATION,
                operation="ls",
                filesystem=type(self.fs).__name__,
                cause=e,
            ) from e

        # 파일 경로에 대한 ls는 그 파일 하나의 정보를 돌려줌
        if len(entries) == 1 and entries[0].get("type") != "directory":
            if _same_path(entries[0]["name"], path):
                raise NotADirectoryError(path)

        named = []
        for info in entries:
            name = posixpath.basename(info["name"].rstrip("/"))
            if name:
                named.append((name, info.get("type")))

        listing = DirListing()
        for name, kind in sorted(named):
            if kind == "directory":
                listing.subdirs.append(name)
            else:
                listing.files.append(name)
        return listing

    def read_text(self, path: str) -> str:
        data: bytes = self.fs.cat_file(path)
        return data.decode("utf-8")

    def join(self, path: str, name: str) -> str:
        return posixpath.join(path, name)


def _same_path(a: str, b: str) -> bool:
    return posixpath.normpath(a.strip("/")) == posixpath.normpath(b.strip("/"))


# =============================================================================
# Walk
# =============================================================================

def walk(
    source: DirectorySource,
    directory: str,
    namespace: str,
    templates: TemplateSet,
    ext: str,
    table: dict[str, TemplateSet],
) -> None:
    """
    directory를 재귀 순회하며 namespace별 TemplateSet을 table에 등록.

    Args:
        source: 파일시스템 소스
        directory: 현재 디렉터리 경로 (source 기준)
        namespace: 현재 namespace 경로 (예: "/", "/settings/profile")
        templates: 상위에서 상속받은 집합 (이 호출이 소유, 직접 확장)
        ext: 템플릿 확장자 (점 포함)
        table: 결과를 채울 namespace 테이블

    Raises:
        ParseError: DIRECTORY_READ_FAILED, TEMPLATE_READ_FAILED,
                    TEMPLATE_PARSE_FAILED, TEMPLATE_CLONE_FAILED
        UnsupportedOperationError: 파일시스템이 디렉터리 나열 불가
    """
    try:
        listing = source.list_dir(directory)
    except OSError as e:
        raise ParseError(
            ErrorCodes.DIRECTORY_READ_FAILED,
            path=directory,
            cause=e,
        ) from e

    for name in listing.files:
        if not name.endswith(ext):
            logger.debug(f"Skipping non-template file: {source.join(directory, name)}")
            continue

        file_path = source.join(directory, name)
        try:
            content = source.read_text(file_path)
        except (OSError, UnicodeDecodeError) as e:
            raise ParseError(
                ErrorCodes.TEMPLATE_READ_FAILED,
                path=file_path,
                cause=e,
            ) from e

        try:
            templates.parse(name, content)
        except TemplateSetError as e:
            raise ParseError(
                ErrorCodes.TEMPLATE_PARSE_FAILED,
                path=file_path,
                template=name,
                lineno=e.lineno,
                cause=e,
            ) from e

    table[namespace] = templates
    logger.debug(f"Registered namespace {namespace} ({len(templates)} templates)")

    for sub in listing.subdirs:
        try:
            child = templates.clone()
        except TemplateSetError as e:
            raise ParseError(
                ErrorCodes.TEMPLATE_CLONE_FAILED,
                path=source.join(directory, sub),
                namespace=namespace,
                cause=e,
            ) from e

        walk(
            source,
            source.join(directory, sub),
            posixpath.join(namespace, sub),
            child,
            ext,
            table,
        )
