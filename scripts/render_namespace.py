#!/usr/bin/env python3
"""
render_namespace.py - 템플릿 루트의 namespace 목록 조회 / 렌더링

사용법:
    # namespace 목록
    uv run python scripts/render_namespace.py list templates

    # namespace 렌더링 (stdout)
    uv run python scripts/render_namespace.py render templates /home

    # 데이터 파일(YAML/JSON)로 렌더링
    uv run python scripts/render_namespace.py render templates /settings/profile --data user.yaml

    # 다른 index/확장자
    uv run python scripts/render_namespace.py --index main --ext .j2 list templates

종료 코드:
    0: 성공
    1: 빌드/조회/렌더 실패
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import Any

import yaml

from templatex.core.registry import NamespaceRegistry
from templatex.domain.constants import DEFAULT_EXTENSION, DEFAULT_INDEX
from templatex.domain.errors import TemplatexError

# 로깅 설정 (stdout은 렌더 결과 전용)
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
    stream=sys.stderr,
)
logger = logging.getLogger(__name__)


def load_data(data_path: Path | None) -> Any:
    """렌더 데이터 로드 (YAML은 JSON의 상위집합)."""
    if data_path is None:
        return None
    with open(data_path, encoding="utf-8") as f:
        return yaml.safe_load(f)


def list_namespaces(registry: NamespaceRegistry, out) -> None:
    """namespace 목록을 정렬해 출력."""
    for namespace in sorted(registry.list_namespaces()):
        out.write(namespace + "\n")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="템플릿 namespace 조회/렌더링",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    parser.add_argument(
        "--index",
        default=DEFAULT_INDEX,
        help=f"실행할 템플릿 이름, 확장자 제외 (기본: {DEFAULT_INDEX})",
    )
    parser.add_argument(
        "--ext",
        default=DEFAULT_EXTENSION,
        help=f"템플릿 파일 확장자 (기본: {DEFAULT_EXTENSION})",
    )

    sub = parser.add_subparsers(dest="command", required=True)

    list_cmd = sub.add_parser("list", help="namespace 목록")
    list_cmd.add_argument("root", type=Path, help="템플릿 루트 디렉터리")

    render_cmd = sub.add_parser("render", help="namespace 렌더링")
    render_cmd.add_argument("root", type=Path, help="템플릿 루트 디렉터리")
    render_cmd.add_argument("namespace", help="namespace 경로 (예: /home)")
    render_cmd.add_argument("--data", type=Path, help="렌더 데이터 (YAML/JSON)")

    return parser


def main(argv: list[str] | None = None, out=None) -> int:
    args = build_parser().parse_args(argv)
    out = out if out is not None else sys.stdout

    try:
        registry = NamespaceRegistry(args.index, args.ext)
        registry.build(args.root)

        if args.command == "list":
            list_namespaces(registry, out)
        else:
            registry.execute_namespace(out, args.namespace, load_data(args.data))
    except TemplatexError as e:
        logger.error(f"{args.command} 실패: {e}")
        return 1
    except (OSError, yaml.YAMLError) as e:
        logger.error(f"데이터 파일 읽기 실패 {args.data}: {e}")
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
