"""
TemplateSet: 복제 가능한 Jinja2 템플릿 누적 집합.

규칙:
- 템플릿 이름은 집합 내에서 유일 (파일 base name, 예: "index.html")
- 같은 이름 재파싱 → 해당 이름만 교체, 나머지 유지
- clone() → 독립 복사본 (복사본 수정이 원본에 영향 없음, 반대도 동일)

구현:
- 소스는 dict[name, source]로 보관, DictLoader가 같은 dict를 참조
- clone은 dict 복사 + Environment.overlay (filters/globals 공유, cache 분리)
"""

from collections.abc import Mapping
from typing import Any, Protocol

from jinja2 import (
    DictLoader,
    Environment,
    Template,
    TemplateSyntaxError,
    select_autoescape,
)


class TextSink(Protocol):
    """렌더 결과를 받는 출력 대상 (write(str)만 필요)."""

    def write(self, s: str, /) -> Any: ...


class TemplateSetError(Exception):
    """템플릿 엔진 수준의 파싱/복제 실패."""

    def __init__(
        self,
        message: str,
        name: str | None = None,
        lineno: int | None = None,
    ) -> None:
        self.message = message
        self.name = name
        self.lineno = lineno
        super().__init__(message)


def default_environment() -> Environment:
    """기본 Environment: HTML/XML autoescape, 끝 줄바꿈 유지."""
    return Environment(
        autoescape=select_autoescape(),
        keep_trailing_newline=True,
    )


def make_context(data: Any) -> dict[str, Any]:
    """
    렌더 컨텍스트 생성.

    - Mapping → 그대로 템플릿 변수
    - None → 빈 컨텍스트
    - 그 외 → "data" 변수로 노출
    """
    if data is None:
        return {}
    if isinstance(data, Mapping):
        return dict(data)
    return {"data": data}


class TemplateSet:
    """
    이름 → 템플릿 소스 집합.

    Usage:
        ts = TemplateSet()
        ts.parse("index.html", "{% include 'header.html' %}")
        child = ts.clone()
        child.parse("index.html", "{% include 'header.html' %} home")
    """

    def __init__(self, environment: Environment | None = None):
        """
        Args:
            environment: 기반 Environment (filters/globals/autoescape 정책).
                None이면 default_environment() 사용.
        """
        self._sources: dict[str, str] = {}
        base = environment if environment is not None else default_environment()
        self._env = base.overlay(loader=DictLoader(self._sources))

    # =========================================================================
    # Mutation
    # =========================================================================

    def parse(self, name: str, source: str) -> None:
        """
        소스를 컴파일해 검증한 뒤 name으로 추가 (기존 name이면 교체).

        Raises:
            TemplateSetError: 문법 오류 (이 경우 집합은 변경되지 않음)
        """
        try:
            self._env.compile(source, name=name)
        except TemplateSyntaxError as e:
            raise TemplateSetError(e.message or str(e), name=name, lineno=e.lineno) from e

        self._sources[name] = source

    def clone(self) -> "TemplateSet":
        """
        독립 복사본 생성.

        Raises:
            TemplateSetError: Environment 복제 실패
        """
        other = object.__new__(TemplateSet)
        other._sources = dict(self._sources)
        try:
            # overlay의 설정 검사는 assert 기반 (-O에서는 생략됨)
            other._env = self._env.overlay(loader=DictLoader(other._sources))
        except (AssertionError, TypeError, ValueError) as e:
            raise TemplateSetError(f"clone failed: {e}") from e
        return other

    # =========================================================================
    # Read
    # =========================================================================

    @property
    def environment(self) -> Environment:
        return self._env

    def names(self) -> list[str]:
        """정의된 템플릿 이름 목록 (정렬)."""
        return sorted(self._sources)

    def source(self, name: str) -> str | None:
        return self._sources.get(name)

    def get_template(self, name: str) -> Template:
        """
        Raises:
            jinja2.TemplateNotFound: 정의되지 않은 이름
        """
        return self._env.get_template(name)

    def __contains__(self, name: object) -> bool:
        return name in self._sources

    def __len__(self) -> int:
        return len(self._sources)

    def __repr__(self) -> str:
        return f"TemplateSet({self.names()!r})"

    # =========================================================================
    # Render
    # =========================================================================

    def execute(self, sink: TextSink, name: str, data: Any = None) -> None:
        """
        name 템플릿을 data로 렌더해 sink에 순차 기록.

        엔진 에러(TemplateNotFound, UndefinedError 등)는 그대로 전파.
        에러 이전에 생성된 chunk는 이미 sink에 기록되어 있을 수 있음.
        """
        template = self.get_template(name)
        for chunk in template.generate(make_context(data)):
            sink.write(chunk)

    def render(self, name: str, data: Any = None) -> str:
        """name 템플릿을 문자열로 렌더."""
        return self.get_template(name).render(make_context(data))
