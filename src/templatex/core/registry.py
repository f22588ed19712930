"""
NamespaceRegistry: 계층형 템플릿 namespace 테이블.

규칙:
- namespace = 디렉터리 경로 ("/", "/home", "/settings/profile")
- 하위 namespace는 상위 템플릿을 상속, 같은 이름이면 하위가 덮어씀
- 빌드 실패 시 기존 테이블 유지 (새 테이블에 빌드 후 성공 시에만 교체)
- 조회/실행은 스레드 안전, 빌드 중에도 이전 테이블로 응답
"""

import io
import logging
import os
import posixpath
import threading
from typing import Any

from jinja2 import Environment

from templatex.core.template_set import TemplateSet, TextSink
from templatex.core.walker import DirectorySource, FSSpecSource, LocalSource, walk
from templatex.domain.constants import (
    DEFAULT_EXTENSION,
    DEFAULT_INDEX,
    FORBIDDEN_EXTENSION_CHARS,
    ROOT_NAMESPACE,
)
from templatex.domain.errors import (
    ErrorCodes,
    NamespaceNotFoundError,
    ParseError,
    RenderError,
    TemplatexError,
)

logger = logging.getLogger(__name__)


def validate_extension(ext: str) -> None:
    """
    템플릿 확장자 검증.

    규칙:
    - "."로 시작, 점 뒤에 최소 1자
    - glob 메타문자(* ? [ ]), 경로 구분자 금지

    Raises:
        ParseError: EXTENSION_INVALID
    """
    if not ext.startswith(".") or len(ext) < 2:
        raise ParseError(
            ErrorCodes.EXTENSION_INVALID,
            ext=ext,
            reason="extension must start with '.' followed by at least one character",
        )

    found_forbidden = set(ext) & FORBIDDEN_EXTENSION_CHARS
    if found_forbidden:
        raise ParseError(
            ErrorCodes.EXTENSION_INVALID,
            ext=ext,
            forbidden=sorted(found_forbidden),
        )


class NamespaceRegistry:
    """
    템플릿 namespace 레지스트리.

    Usage:
        registry = NamespaceRegistry("index", ".html")
        registry.build("templates")
        registry.execute_namespace(sink, "/home", {"user": "kim"})
    """

    def __init__(
        self,
        index: str = DEFAULT_INDEX,
        ext: str = DEFAULT_EXTENSION,
        environment: Environment | None = None,
    ):
        """
        Args:
            index: namespace 실행 시 렌더할 템플릿 이름 (확장자 제외)
            ext: 템플릿 파일 확장자 (점 포함)
            environment: 루트 TemplateSet의 기반 Environment

        Raises:
            ParseError: EXTENSION_INVALID
        """
        validate_extension(ext)
        self._index = index
        self._ext = ext
        self._environment = environment
        # _lock: 테이블 참조 보호, _build_lock: 빌드 직렬화
        self._lock = threading.Lock()
        self._build_lock = threading.Lock()
        self._namespaces: dict[str, TemplateSet] = {}

    @property
    def index(self) -> str:
        return self._index

    @property
    def ext(self) -> str:
        return self._ext

    @property
    def index_template(self) -> str:
        """실행 시 렌더되는 템플릿 이름 (index + ext)."""
        return self._index + self._ext

    # =========================================================================
    # Build
    # =========================================================================

    def build(self, root: str | os.PathLike[str]) -> None:
        """
        로컬 디렉터리 root를 재귀 파싱해 namespace 테이블 생성.

        Raises:
            ParseError: 디렉터리 읽기/파싱/복제 실패 (기존 테이블 유지)
        """
        self._build(LocalSource(), os.path.normpath(os.fspath(root)))

    def build_fs(self, fs: Any, root: str = "") -> None:
        """
        fsspec 파일시스템의 root를 재귀 파싱해 namespace 테이블 생성.

        Args:
            fs: fsspec AbstractFileSystem 인스턴스
            root: fs 기준 루트 경로 ("", "." → fs의 루트)

        Raises:
            ParseError: 디렉터리 읽기/파싱/복제 실패 (기존 테이블 유지)
            UnsupportedOperationError: fs가 디렉터리 나열을 지원하지 않음
        """
        root = posixpath.normpath(root) if root else ""
        if root == ".":
            root = ""
        self._build(FSSpecSource(fs), root)

    def _build(self, source: DirectorySource, root: str) -> None:
        with self._build_lock:
            table: dict[str, TemplateSet] = {}
            try:
                walk(
                    source,
                    root,
                    ROOT_NAMESPACE,
                    TemplateSet(self._environment),
                    self._ext,
                    table,
                )
            except TemplatexError as e:
                logger.warning(f"Build from {root!r} failed, keeping previous namespaces: {e}")
                raise

            with self._lock:
                self._namespaces = table

        logger.info(f"Built {len(table)} namespaces from {root!r}")

    # =========================================================================
    # Query
    # =========================================================================

    def lookup(self, namespace: str) -> TemplateSet | None:
        """namespace 경로와 정확히 일치하는 TemplateSet (없으면 None)."""
        with self._lock:
            return self._namespaces.get(namespace)

    def list_namespaces(self) -> list[str]:
        """등록된 namespace 경로 목록. 순서는 보장하지 않음."""
        with self._lock:
            return list(self._namespaces)

    def __contains__(self, namespace: object) -> bool:
        with self._lock:
            return namespace in self._namespaces

    def __len__(self) -> int:
        with self._lock:
            return len(self._namespaces)

    # =========================================================================
    # Execute
    # =========================================================================

    def execute_namespace(self, sink: TextSink, namespace: str, data: Any = None) -> None:
        """
        namespace의 index 템플릿을 data로 렌더해 sink에 기록.

        Raises:
            NamespaceNotFoundError: 등록되지 않은 namespace (sink에 아무것도 기록 안 됨)
            RenderError: 템플릿 엔진 에러 (일부 출력이 이미 기록됐을 수 있음)
        """
        templates = self.lookup(namespace)
        if templates is None:
            raise NamespaceNotFoundError(
                ErrorCodes.NAMESPACE_NOT_FOUND,
                namespace=namespace,
            )

        try:
            templates.execute(sink, self.index_template, data)
        except Exception as e:
            raise RenderError(
                ErrorCodes.RENDER_FAILED,
                namespace=namespace,
                template=self.index_template,
                cause=e,
            ) from e

    def render_namespace(self, namespace: str, data: Any = None) -> str:
        """execute_namespace 결과를 문자열로 반환."""
        buf = io.StringIO()
        self.execute_namespace(buf, namespace, data)
        return buf.getvalue()


def parse_root(
    root: str | os.PathLike[str],
    index: str = DEFAULT_INDEX,
    ext: str = DEFAULT_EXTENSION,
) -> NamespaceRegistry:
    """
    NamespaceRegistry 생성 + build.

    Raises:
        ParseError: 확장자 검증/빌드 실패
    """
    registry = NamespaceRegistry(index, ext)
    registry.build(root)
    return registry
