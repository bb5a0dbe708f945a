"""
cli/ui/console.py - Rich 콘솔 유틸리티

일관된 콘솔 출력과 로깅 설정을 위한 함수들
"""

import logging
import platform

from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from core.config import LogConfig

# botocore 노이즈 로그 제한
logging.getLogger("botocore.httpchecksum").setLevel(logging.WARNING)
logging.getLogger("botocore.credentials").setLevel(logging.WARNING)
logging.getLogger("botocore.loaders").setLevel(logging.WARNING)
logging.getLogger("botocore.session").setLevel(logging.WARNING)


def get_console(stderr: bool = False) -> Console:
    """Rich Console 인스턴스를 생성하고 반환합니다."""
    is_windows = platform.system().lower() == "windows"

    return Console(
        stderr=stderr,
        color_system="auto",
        highlight=True,
        soft_wrap=True,
        markup=True,
        emoji=not is_windows,
    )


# 전역 콘솔 인스턴스 (결과는 stdout, 로그는 stderr)
console = get_console()
err_console = get_console(stderr=True)


def setup_logging(config: LogConfig | None = None, debug: bool = False) -> None:
    """루트 logger에 Rich 핸들러 설정

    Args:
        config: 로깅 설정 (None이면 환경변수에서 로드)
        debug: True면 DEBUG 레벨 강제
    """
    config = config or LogConfig.from_env()
    level = logging.DEBUG if debug else getattr(logging, config.level, logging.INFO)

    handler = RichHandler(console=err_console, rich_tracebacks=True, show_path=debug)
    handler.setFormatter(logging.Formatter("%(message)s", datefmt="[%X]"))

    root = logging.getLogger()
    for existing in list(root.handlers):
        if isinstance(existing, RichHandler):
            root.removeHandler(existing)
    root.addHandler(handler)
    root.setLevel(level)


# =============================================================================
# 표준 출력 스타일 (이모지 없이 Rich 스타일만 사용)
# =============================================================================

SYMBOL_SUCCESS = "✓"
SYMBOL_ERROR = "✗"
SYMBOL_WARNING = "!"


def print_success(message: str) -> None:
    """성공 메시지 출력 (초록색 체크마크)"""
    console.print(f"[green]{SYMBOL_SUCCESS} {message}[/green]")


def print_error(message: str) -> None:
    """에러 메시지 출력 (빨간색 X)"""
    err_console.print(f"[red]{SYMBOL_ERROR} {message}[/red]")


def print_warning(message: str) -> None:
    """경고 메시지 출력 (노란색 경고)"""
    err_console.print(f"[yellow]{SYMBOL_WARNING} {message}[/yellow]")


def build_summary_table(
    references: dict[str, int],
    records: dict[str, int] | None = None,
) -> Table:
    """리소스 종류별 참조 수 / 조회 레코드 수 테이블

    Args:
        references: {종류: 참조 개수}
        records: {종류: 조회된 레코드 개수} (조회하지 않았으면 None)

    Returns:
        Rich Table
    """
    table = Table(title="Targeted refresh", show_lines=False)
    table.add_column("Kind", style="cyan")
    table.add_column("References", justify="right")
    if records is not None:
        table.add_column("Records", justify="right")

    kinds = list(references)
    if records is not None:
        kinds.extend(k for k in records if k not in references)

    for kind in kinds:
        row = [kind, str(references.get(kind, 0))]
        if records is not None:
            row.append(str(records.get(kind, 0)))
        table.add_row(*row)

    return table
