"""
Core layer: namespace 빌드 핵심 모듈.

역할:
- TemplateSet: 복제 가능한 템플릿 누적 집합
- walker: 디렉터리 재귀 순회 + 상속
- NamespaceRegistry: namespace 테이블 + 조회/실행
"""

from .registry import NamespaceRegistry, parse_root, validate_extension
from .template_set import TemplateSet, TemplateSetError
from .walker import FSSpecSource, LocalSource, walk

__all__ = [
    # registry
    "NamespaceRegistry",
    "parse_root",
    "validate_extension",
    # template_set
    "TemplateSet",
    "TemplateSetError",
    # walker
    "LocalSource",
    "FSSpecSource",
    "walk",
]
