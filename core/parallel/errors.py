"""
core/parallel/errors.py - API 에러 분류 및 not-found 억제

참조 단위 API 호출(CloudFormation 스택, Classic ELB)의 결과를
CallOutcome으로 수집하고, 서비스별 "리소스 없음" 에러를 빈 결과로 변환합니다.

주요 구성 요소:
- categorize_error_code: 에러 코드 문자열 -> ErrorCategory
- is_not_found_for: 서비스별 not-found 분류기
- capture: 호출을 CallOutcome으로 감싸기
- records_or_raise: CallOutcome 목록을 레코드로 합치기 (not-found 억제)

Example:
    outcomes = [capture(describe_stack, cf, name) for name in stack_names]
    stacks = records_or_raise(outcomes, "cloudformation", "describe_stacks")
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable
from typing import Any

from botocore.exceptions import ClientError

from core.exceptions import APICallError, is_not_found

from .types import CallOutcome, ErrorCategory

logger = logging.getLogger(__name__)

# 단일 리소스 조회 시 "삭제됨"을 뜻하는 서비스별 에러 코드
#   - CloudFormation: 없는 스택은 ValidationError("Stack with id ... does not exist")
#   - Classic ELB: LoadBalancerNotFound
NOT_FOUND_CODES: dict[str, frozenset[str]] = {
    "cloudformation": frozenset({"ValidationError"}),
    "elb": frozenset({"LoadBalancerNotFound", "AccessPointNotFound"}),
}


def categorize_error_code(error_code: str) -> ErrorCategory:
    """에러 코드 문자열을 기반으로 ErrorCategory 분류

    Args:
        error_code: AWS 에러 코드 문자열 (예: "AccessDenied", "ThrottlingException")

    Returns:
        분류된 에러 카테고리. 매칭되는 키워드가 없으면 UNKNOWN 반환.
    """
    code = error_code.lower()

    if any(x in code for x in ["accessdenied", "unauthorized", "forbidden"]):
        return ErrorCategory.ACCESS_DENIED
    if any(x in code for x in ["notfound", "nosuch", "doesnotexist"]):
        return ErrorCategory.NOT_FOUND
    if any(x in code for x in ["throttl", "ratelimit", "toomanyrequests", "requestlimitexceeded"]):
        return ErrorCategory.THROTTLING
    if any(x in code for x in ["timeout", "timedout"]):
        return ErrorCategory.TIMEOUT
    if any(x in code for x in ["invalid", "validation", "malformed"]):
        return ErrorCategory.INVALID_REQUEST
    if any(x in code for x in ["internal", "serviceunavailable", "serviceerror"]):
        return ErrorCategory.SERVICE_ERROR

    return ErrorCategory.UNKNOWN


def is_not_found_for(service: str, error: Exception) -> bool:
    """서비스 문맥에서 error가 "리소스 없음"인지 판단

    Args:
        service: AWS 서비스 이름 ("cloudformation", "elb" 등)
        error: 호출 중 발생한 예외

    Returns:
        빈 결과로 취급해야 하면 True
    """
    if not isinstance(error, ClientError):
        return False

    code = error.response.get("Error", {}).get("Code", "")
    if code in NOT_FOUND_CODES.get(service, frozenset()):
        return True
    return is_not_found(error)


def capture(func: Callable[[Any, str], list[dict[str, Any]]], client: Any, reference: str) -> CallOutcome:
    """func(client, reference)를 실행하고 결과를 CallOutcome으로 반환

    ClientError만 값으로 잡습니다. 그 외 예외(네트워크 오류 등)는 그대로 전파됩니다.
    """
    try:
        return CallOutcome(reference=reference, records=func(client, reference))
    except ClientError as e:
        return CallOutcome(reference=reference, error=e)


def records_or_raise(
    outcomes: Iterable[CallOutcome],
    service: str,
    operation: str,
) -> list[dict[str, Any]]:
    """CallOutcome 목록을 하나의 레코드 목록으로 합침

    not-found 결과는 레코드 0건으로 처리하고, 그 외 에러는 APICallError로 전파합니다.

    Args:
        outcomes: 참조별 호출 결과
        service: AWS 서비스 이름 (분류기 선택용)
        operation: API 작업 이름 (로깅/예외용)

    Returns:
        성공한 호출의 레코드를 입력 순서대로 이어붙인 목록
    """
    records: list[dict[str, Any]] = []
    for outcome in outcomes:
        error = outcome.error
        if error is None:
            records.extend(outcome.records)
            continue

        if is_not_found_for(service, error):
            logger.debug(f"{service}.{operation}: {outcome.reference} 없음 (삭제된 것으로 간주)")
            continue

        raised = APICallError.from_client_error(service, operation, error)
        category = categorize_error_code(raised.error_code or "")
        raised.details["category"] = category.value
        logger.warning(f"{service}.{operation}: {outcome.reference} 조회 실패 [{category.value}]")
        raise raised from error

    return records
