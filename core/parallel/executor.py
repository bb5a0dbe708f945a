"""
core/parallel/executor.py - 제한된 워커 풀 실행기

ThreadPoolExecutor 기반으로 독립적인 읽기 전용 API 호출을 병렬 처리합니다.
결과는 항상 입력 순서대로 반환되며, 작업 중 하나라도 예외가 나면
남은 작업을 취소하고 그 예외를 그대로 전파합니다.

주요 구성 요소:
- ParallelConfig: 병렬 실행 설정 (워커 수)
- bounded_map: 항목별 함수 병렬 적용
- run_concurrently: 이름 붙은 작업 묶음 병렬 실행

Example:
    from core.parallel import bounded_map

    outcomes = bounded_map(lambda name: capture(describe_stack, cf, name), stack_names, max_workers=10)
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping, Sequence
from concurrent.futures import FIRST_EXCEPTION, Future, ThreadPoolExecutor, wait
from dataclasses import dataclass
from typing import TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")
R = TypeVar("R")

MAX_WORKERS_LIMIT = 100


@dataclass
class ParallelConfig:
    """병렬 실행 설정

    Attributes:
        max_workers: 최대 동시 스레드 수 (1~100)
    """

    max_workers: int = 20

    def __post_init__(self) -> None:
        if self.max_workers < 1:
            raise ValueError(f"max_workers must be >= 1, got {self.max_workers}")
        if self.max_workers > MAX_WORKERS_LIMIT:
            self.max_workers = MAX_WORKERS_LIMIT


def _collect(futures: Sequence[Future[R]]) -> list[R]:
    """완료 대기 후 결과 수집 (첫 예외 발생 시 나머지 취소 후 전파)"""
    done, pending = wait(futures, return_when=FIRST_EXCEPTION)
    for future in done:
        error = future.exception()
        if error is not None:
            for p in pending:
                p.cancel()
            raise error
    return [f.result() for f in futures]


def bounded_map(
    func: Callable[[T], R],
    items: Sequence[T],
    max_workers: int = 20,
) -> list[R]:
    """items 각각에 func를 병렬 적용

    Args:
        func: 항목 하나를 받는 함수
        items: 처리할 항목
        max_workers: 최대 동시 스레드 수

    Returns:
        items와 같은 순서의 결과 목록
    """
    if not items:
        return []

    config = ParallelConfig(max_workers=min(max_workers, len(items)))
    if config.max_workers == 1:
        return [func(item) for item in items]

    logger.debug(f"병렬 실행: {len(items)}개 작업, max_workers={config.max_workers}")
    with ThreadPoolExecutor(max_workers=config.max_workers) as executor:
        futures = [executor.submit(func, item) for item in items]
        return _collect(futures)


def run_concurrently(
    tasks: Mapping[str, Callable[[], R]],
    max_workers: int = 20,
) -> dict[str, R]:
    """이름 붙은 작업들을 병렬 실행

    Args:
        tasks: {이름: 인자 없는 함수}
        max_workers: 최대 동시 스레드 수

    Returns:
        {이름: 결과} (tasks와 같은 키 순서)
    """
    names = list(tasks)
    results = bounded_map(lambda name: tasks[name](), names, max_workers=max_workers)
    return dict(zip(names, results))
