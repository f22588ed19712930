"""
templatex: 디렉터리 트리 기반 계층형 Jinja2 템플릿 namespace.

하위 디렉터리는 상위 디렉터리의 템플릿을 상속하고, 같은 이름의
템플릿을 정의하면 덮어쓴다. 형제 디렉터리끼리는 격리된다.
"""

from templatex.core import NamespaceRegistry, TemplateSet, parse_root
from templatex.domain.errors import (
    ErrorCodes,
    NamespaceNotFoundError,
    ParseError,
    RenderError,
    TemplatexError,
    UnsupportedOperationError,
)

__version__ = "0.1.0"

__all__ = [
    "NamespaceRegistry",
    "TemplateSet",
    "parse_root",
    # errors
    "TemplatexError",
    "ParseError",
    "UnsupportedOperationError",
    "NamespaceNotFoundError",
    "RenderError",
    "ErrorCodes",
]
