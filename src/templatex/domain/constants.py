"""
Domain Constants: namespace 빌드 전역 상수.
"""

# =============================================================================
# Namespace
# =============================================================================

# 루트 디렉터리의 namespace 경로
ROOT_NAMESPACE = "/"

# namespace 실행 시 렌더할 기본 템플릿 이름 (확장자 제외)
DEFAULT_INDEX = "index"

# 템플릿 파일로 인식할 기본 확장자 (점 포함)
DEFAULT_EXTENSION = ".html"

# 확장자에 허용되지 않는 문자 (glob 메타문자 + 경로 구분자)
FORBIDDEN_EXTENSION_CHARS = set("*?[]/\\")

# =============================================================================
# Server
# =============================================================================

DEFAULT_TEMPLATES_ROOT = "templates"
DEFAULT_HOME_NAMESPACE = "/home"
DEFAULT_NOTFOUND_NAMESPACE = "/notfound"
