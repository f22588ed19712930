"""
Error definitions for templatex.

규칙:
- 빌드 중 에러 → 전체 빌드 중단, 기존 namespace 테이블 유지
- 조회/실행 에러 → 해당 호출에만 국한
- 에러 종류는 code로 구분 (싱글톤 에러 객체 없음)

Usage:
    raise ParseError(ErrorCodes.TEMPLATE_PARSE_FAILED, path="a/index.html", cause=e)
"""

from typing import Any


class TemplatexError(Exception):
    """
    templatex 기본 에러.

    code로 종류를 구분하고, context에 원인 경로/원인 예외 등을 담는다.
    """

    def __init__(self, code: str, **context: Any) -> None:
        self.code = code
        self.context = context
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        ctx_str = ", ".join(f"{k}={v!r}" for k, v in self.context.items())
        return f"[{self.code}] {ctx_str}" if ctx_str else f"[{self.code}]"

    def to_dict(self) -> dict[str, Any]:
        """로그/JSON 직렬화용."""
        data: dict[str, Any] = {"code": self.code}
        for key, value in self.context.items():
            data[key] = str(value) if isinstance(value, BaseException) else value
        return data


class ParseError(TemplatexError):
    """
    빌드(디렉터리 순회 + 파싱) 실패.

    codes: DIRECTORY_READ_FAILED, EXTENSION_INVALID, TEMPLATE_READ_FAILED,
           TEMPLATE_PARSE_FAILED, TEMPLATE_CLONE_FAILED
    """


class UnsupportedOperationError(TemplatexError):
    """파일시스템이 필요한 기능(디렉터리 목록)을 지원하지 않음."""


class NamespaceNotFoundError(TemplatexError):
    """등록되지 않은 namespace 조회. 호출자가 복구 가능한 유일한 에러."""


class RenderError(TemplatexError):
    """namespace 실행 중 템플릿 엔진 에러."""


# =============================================================================
# Error Codes
# =============================================================================

class ErrorCodes:
    """에러 코드 상수."""

    # === Build ===
    DIRECTORY_READ_FAILED = "DIRECTORY_READ_FAILED"
    EXTENSION_INVALID = "EXTENSION_INVALID"
    TEMPLATE_READ_FAILED = "TEMPLATE_READ_FAILED"
    TEMPLATE_PARSE_FAILED = "TEMPLATE_PARSE_FAILED"
    TEMPLATE_CLONE_FAILED = "TEMPLATE_CLONE_FAILED"

    # === Filesystem ===
    UNSUPPORTED_FS_OPERATION = "UNSUPPORTED_FS_OPERATION"

    # === Query / Execute ===
    NAMESPACE_NOT_FOUND = "NAMESPACE_NOT_FOUND"
    RENDER_FAILED = "RENDER_FAILED"
