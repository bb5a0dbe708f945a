"""
core/config.py - 중앙 설정 관리

애플리케이션 전체에서 사용되는 상수와 환경변수 기반 설정을 제공합니다.

주요 구성 요소:
- Settings: 불변 상수 모음 (기본 리전, API 타임아웃, 필터 한도 등)
- RefreshConfig: 대상 갱신(targeted refresh) 실행 설정
- LogConfig: 로깅 설정
- get_env_int: 환경변수 변환 헬퍼

Usage:
    from core.config import settings, get_default_region, RefreshConfig

    region = get_default_region()  # "ap-northeast-2"
    config = RefreshConfig.from_env()
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from importlib import metadata

from core.exceptions import ConfigError

# =============================================================================
# 상수
# =============================================================================


@dataclass(frozen=True)
class Settings:
    """애플리케이션 상수 (불변)"""

    DEFAULT_REGION: str = "ap-northeast-2"

    # botocore client 설정
    API_TIMEOUT: int = 30
    API_CONNECT_TIMEOUT: int = 10
    API_MAX_ATTEMPTS: int = 5

    # 병렬 처리
    MAX_WORKERS: int = 20

    # EC2 Describe* API는 필터당 값 200개까지 허용
    FILTER_VALUE_LIMIT: int = 200

    # 실제 ENI만 network port로 취급
    NETWORK_PORT_PREFIX: str = "eni-"

    # CloudFormation이 인스턴스에 붙이는 스택 태그
    STACK_ID_TAG: str = "aws:cloudformation:stack-id"


settings = Settings()


# =============================================================================
# 환경변수 헬퍼
# =============================================================================


def get_env_int(name: str, default: int) -> int:
    """환경변수를 int로 변환 (실패 시 기본값)"""
    value = os.environ.get(name)
    if value is None:
        return default
    try:
        return int(value)
    except ValueError:
        return default


def get_default_profile() -> str | None:
    """AWS_PROFILE / AWS_DEFAULT_PROFILE 환경변수에서 프로파일 조회"""
    return os.environ.get("AWS_PROFILE") or os.environ.get("AWS_DEFAULT_PROFILE") or None


def get_default_region() -> str:
    """AWS_REGION / AWS_DEFAULT_REGION 환경변수에서 리전 조회 (없으면 기본 리전)"""
    return os.environ.get("AWS_REGION") or os.environ.get("AWS_DEFAULT_REGION") or settings.DEFAULT_REGION


def get_version() -> str:
    """설치된 패키지 버전 (개발 환경에서는 "0.0.0")"""
    try:
        return metadata.version("aa-target-refresh")
    except metadata.PackageNotFoundError:
        return "0.0.0"


# =============================================================================
# 실행 설정
# =============================================================================


@dataclass
class RefreshConfig:
    """대상 갱신 실행 설정

    Attributes:
        max_workers: 스택/LB 개별 조회 및 종류별 조회에 사용할 최대 스레드 수
        filter_value_limit: 필터 한 번에 넣을 최대 ID 개수
        network_port_prefix: DB에서 가져온 network port 중 실제 ENI로 인정할 접두어
        stack_id_tag: 인스턴스 태그에서 스택 ID를 찾을 키 (대소문자 무시)
    """

    max_workers: int = settings.MAX_WORKERS
    filter_value_limit: int = settings.FILTER_VALUE_LIMIT
    network_port_prefix: str = settings.NETWORK_PORT_PREFIX
    stack_id_tag: str = settings.STACK_ID_TAG

    def __post_init__(self) -> None:
        if self.max_workers < 1:
            raise ConfigError("max_workers", f"1 이상이어야 합니다 (현재: {self.max_workers})")
        if not 1 <= self.filter_value_limit <= settings.FILTER_VALUE_LIMIT:
            raise ConfigError(
                "filter_value_limit",
                f"1~{settings.FILTER_VALUE_LIMIT} 범위여야 합니다 (현재: {self.filter_value_limit})",
            )
        if not self.network_port_prefix:
            raise ConfigError("network_port_prefix", "비어있을 수 없습니다")
        if not self.stack_id_tag:
            raise ConfigError("stack_id_tag", "비어있을 수 없습니다")

    @classmethod
    def from_env(cls) -> RefreshConfig:
        """AA_REFRESH_* 환경변수에서 로드"""
        return cls(
            max_workers=get_env_int("AA_REFRESH_MAX_WORKERS", settings.MAX_WORKERS),
            filter_value_limit=get_env_int("AA_REFRESH_FILTER_LIMIT", settings.FILTER_VALUE_LIMIT),
            network_port_prefix=os.environ.get("AA_REFRESH_PORT_PREFIX", settings.NETWORK_PORT_PREFIX),
            stack_id_tag=os.environ.get("AA_REFRESH_STACK_TAG", settings.STACK_ID_TAG),
        )


@dataclass
class LogConfig:
    """로깅 설정"""

    level: str = "INFO"
    format: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    date_format: str = "%Y-%m-%d %H:%M:%S"

    @classmethod
    def from_env(cls) -> LogConfig:
        """LOG_LEVEL / LOG_FORMAT 환경변수에서 로드"""
        defaults = cls()
        return cls(
            level=os.environ.get("LOG_LEVEL", defaults.level).upper(),
            format=os.environ.get("LOG_FORMAT", defaults.format),
        )
