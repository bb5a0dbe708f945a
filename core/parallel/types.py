"""
core/parallel/types.py - 병렬 실행 결과 타입

주요 구성 요소:
- ErrorCategory: API 에러 분류
- CallOutcome: 단일 API 호출 결과 (records, error) 쌍
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class ErrorCategory(Enum):
    """API 에러 카테고리"""

    ACCESS_DENIED = "access_denied"
    NOT_FOUND = "not_found"
    THROTTLING = "throttling"
    TIMEOUT = "timeout"
    INVALID_REQUEST = "invalid_request"
    SERVICE_ERROR = "service_error"
    UNKNOWN = "unknown"


@dataclass
class CallOutcome:
    """참조 하나에 대한 API 호출 결과

    호출이 성공하면 records에 결과가, 실패하면 error에 예외가 담깁니다.
    예외를 바로 던지지 않고 값으로 돌려주므로, 호출한 쪽에서
    "없음(not found)"을 빈 결과로 처리할지 명시적으로 결정할 수 있습니다.

    Attributes:
        reference: 조회 대상 (스택 이름, LB 이름 등)
        records: 조회 결과 레코드
        error: 호출 중 발생한 예외 (성공 시 None)
    """

    reference: str
    records: list[dict[str, Any]] = field(default_factory=list)
    error: Exception | None = None
