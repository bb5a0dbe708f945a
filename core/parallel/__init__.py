"""
core/parallel - 병렬 처리 모듈

읽기 전용 AWS API 호출을 제한된 워커 풀에서 안전하게 병렬 처리합니다.

주요 구성 요소:
- get_client: retry/timeout이 설정된 boto3 client
- bounded_map / run_concurrently: ThreadPoolExecutor 기반 병렬 실행
- CallOutcome / capture / records_or_raise: 참조별 호출 결과와 not-found 억제

Example:
    from core.parallel import bounded_map, capture, records_or_raise

    outcomes = bounded_map(lambda name: capture(describe_stack, cf, name), names, max_workers=10)
    stacks = records_or_raise(outcomes, "cloudformation", "describe_stacks")
"""

from .client import get_client
from .errors import (
    NOT_FOUND_CODES,
    capture,
    categorize_error_code,
    is_not_found_for,
    records_or_raise,
)
from .executor import ParallelConfig, bounded_map, run_concurrently
from .types import CallOutcome, ErrorCategory

__all__: list[str] = [
    # Executor
    "ParallelConfig",
    "bounded_map",
    "run_concurrently",
    # Client (retry 적용)
    "get_client",
    # Error handling
    "NOT_FOUND_CODES",
    "capture",
    "categorize_error_code",
    "is_not_found_for",
    "records_or_raise",
    # Types
    "CallOutcome",
    "ErrorCategory",
]
