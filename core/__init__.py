# core/__init__.py
"""
core - AWS Automation 대상 갱신(targeted refresh) 인프라

변경 이벤트로 전달된 인스턴스와 그에 연결된 모든 리소스를 찾아
최신 상태를 일괄 조회하는 기능을 제공합니다.

아키텍처:
    core/
    ├── parallel/       # 병렬 처리 (bounded executor, client, not-found 억제)
    ├── data/           # 데이터 서비스 (inventory: 참조 확장 + 일괄 조회)
    ├── config.py       # 중앙 설정 관리
    └── exceptions.py   # 통합 예외 계층

Usage:
    # 설정 사용
    from core.config import settings, get_default_region
    region = get_default_region()  # "ap-northeast-2"

    # 예외 처리
    from core.exceptions import APICallError, format_error_for_user

    # 대상 갱신
    from core.data.inventory import TargetCollection, instance_seeds
    collection = TargetCollection(session, store, instance_seeds(["i-0abc"]))
"""

from core import config, data, exceptions, parallel

__all__: list[str] = [
    # 서브패키지
    "data",
    "parallel",
    # 모듈
    "config",
    "exceptions",
]
