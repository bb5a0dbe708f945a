# cli/ui - 콘솔 출력 컴포넌트 (rich)
"""
콘솔 출력 모듈

CLI 전용 UI 컴포넌트들 (결과 테이블, 메시지 출력, 로깅 설정)
"""

from .console import (
    SYMBOL_ERROR,
    SYMBOL_SUCCESS,
    SYMBOL_WARNING,
    build_summary_table,
    console,
    err_console,
    get_console,
    print_error,
    print_success,
    print_warning,
    setup_logging,
)

__all__ = [
    "SYMBOL_ERROR",
    "SYMBOL_SUCCESS",
    "SYMBOL_WARNING",
    "build_summary_table",
    "console",
    "err_console",
    "get_console",
    "print_error",
    "print_success",
    "print_warning",
    "setup_logging",
]
