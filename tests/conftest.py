"""
tests/conftest.py - pytest 공통 픽스처

AWS API 모킹과 테스트 헬퍼를 제공합니다.

Usage:
    def test_something(mock_boto3_session, mock_ec2_client, make_client_error):
        # mock_ec2_client: describe_* 응답이 설정된 EC2 클라이언트 모킹
        # make_client_error: ClientError 생성 헬퍼
        pass
"""

import os
import sys
from pathlib import Path
from typing import Any, Dict, List
from unittest.mock import MagicMock

import pytest

# 프로젝트 루트를 sys.path에 추가
project_root = Path(__file__).parent.parent
if str(project_root) not in sys.path:
    sys.path.insert(0, str(project_root))


# =============================================================================
# 환경 설정
# =============================================================================


@pytest.fixture(autouse=True)
def setup_test_environment():
    """테스트 환경 설정"""
    os.environ.setdefault("AWS_DEFAULT_REGION", "ap-northeast-2")
    os.environ.setdefault("AWS_ACCESS_KEY_ID", "testing")
    os.environ.setdefault("AWS_SECRET_ACCESS_KEY", "testing")

    yield


# =============================================================================
# 샘플 페이로드
# =============================================================================

STACK_ARN = "arn:aws:cloudformation:ap-northeast-2:123456789012:stack/web/1a2b3c4d"


def make_instance(
    instance_id: str = "i-0123456789abcdef0",
    network_interfaces: List[Dict[str, Any]] | None = None,
    **overrides: Any,
) -> Dict[str, Any]:
    """DescribeInstances의 Instances 항목 생성"""
    instance: Dict[str, Any] = {
        "InstanceId": instance_id,
        "ImageId": "ami-0abc",
        "Placement": {"AvailabilityZone": "ap-northeast-2a"},
        "KeyName": "deploy",
        "Tags": [{"Key": "aws:cloudformation:stack-id", "Value": STACK_ARN}],
        "NetworkInterfaces": (
            network_interfaces
            if network_interfaces is not None
            else [{"NetworkInterfaceId": "eni-0aaa", "SubnetId": "subnet-0aaa", "VpcId": "vpc-0aaa"}]
        ),
        "SecurityGroups": [{"GroupId": "sg-0aaa"}, {"GroupId": "sg-0bbb"}],
        "BlockDeviceMappings": [{"DeviceName": "/dev/xvda", "Ebs": {"VolumeId": "vol-0aaa"}}],
    }
    instance.update(overrides)
    return instance


def make_network_interface(
    eni_id: str = "eni-0aaa",
    allocation_id: str | None = "eipalloc-0aaa",
    public_ip: str | None = "3.34.0.10",
) -> Dict[str, Any]:
    """DescribeNetworkInterfaces의 NetworkInterfaces 항목 생성"""
    private_ip: Dict[str, Any] = {"PrivateIpAddress": "10.0.1.10"}
    association = {}
    if allocation_id:
        association["AllocationId"] = allocation_id
    if public_ip:
        association["PublicIp"] = public_ip
    if association:
        private_ip["Association"] = association
    return {"NetworkInterfaceId": eni_id, "PrivateIpAddresses": [private_ip]}


@pytest.fixture
def instance_factory():
    return make_instance


@pytest.fixture
def network_interface_factory():
    return make_network_interface


# =============================================================================
# AWS 모킹 픽스처
# =============================================================================


@pytest.fixture
def mock_boto3_session():
    """boto3.Session 모킹"""
    mock_session = MagicMock()
    mock_session.client.return_value = MagicMock()
    mock_session.region_name = "ap-northeast-2"
    return mock_session


def set_pages(client: MagicMock, pages_by_operation: Dict[str, List[Dict[str, Any]]]) -> None:
    """get_paginator(operation).paginate() 가 operation별 페이지를 돌려주도록 설정"""
    paginators: Dict[str, MagicMock] = {}
    for operation, pages in pages_by_operation.items():
        paginator = MagicMock()
        paginator.paginate.return_value = pages
        paginators[operation] = paginator

    def get_paginator(operation: str) -> MagicMock:
        if operation not in paginators:
            empty = MagicMock()
            empty.paginate.return_value = []
            paginators[operation] = empty
        return paginators[operation]

    client.get_paginator.side_effect = get_paginator


@pytest.fixture
def paginated():
    """set_pages 헬퍼"""
    return set_pages


@pytest.fixture
def mock_ec2_client(instance_factory, network_interface_factory):
    """EC2 클라이언트 모킹 (인스턴스 1개, ENI 1개)"""
    client = MagicMock()
    set_pages(
        client,
        {
            "describe_instances": [{"Reservations": [{"Instances": [instance_factory()]}]}],
            "describe_network_interfaces": [{"NetworkInterfaces": [network_interface_factory()]}],
        },
    )
    client.describe_addresses.return_value = {"Addresses": []}
    client.describe_key_pairs.return_value = {"KeyPairs": []}
    client.describe_availability_zones.return_value = {"AvailabilityZones": []}
    return client


# =============================================================================
# 유틸리티 함수
# =============================================================================


def create_mock_client_error(
    error_code: str,
    error_message: str = "Test error",
    operation: str = "TestOperation",
) -> Exception:
    """ClientError 생성 헬퍼"""
    from botocore.exceptions import ClientError

    return ClientError(
        {
            "Error": {
                "Code": error_code,
                "Message": error_message,
            }
        },
        operation,
    )


@pytest.fixture
def make_client_error():
    """create_mock_client_error 헬퍼"""
    return create_mock_client_error


# =============================================================================
# moto 통합 (선택적)
# =============================================================================

try:
    import moto

    @pytest.fixture
    def aws_credentials():
        """moto 사용 시 AWS 자격 증명 설정"""
        os.environ["AWS_ACCESS_KEY_ID"] = "testing"
        os.environ["AWS_SECRET_ACCESS_KEY"] = "testing"
        os.environ["AWS_SECURITY_TOKEN"] = "testing"
        os.environ["AWS_SESSION_TOKEN"] = "testing"
        os.environ["AWS_DEFAULT_REGION"] = "ap-northeast-2"

    @pytest.fixture
    def moto_ec2(aws_credentials):
        """moto를 사용한 EC2 모킹 (VPC, 서브넷 생성)"""
        with moto.mock_aws():
            import boto3

            ec2 = boto3.client("ec2", region_name="ap-northeast-2")

            vpc = ec2.create_vpc(CidrBlock="10.0.0.0/16")
            vpc_id = vpc["Vpc"]["VpcId"]

            subnet = ec2.create_subnet(VpcId=vpc_id, CidrBlock="10.0.1.0/24")
            subnet_id = subnet["Subnet"]["SubnetId"]

            yield ec2, vpc_id, subnet_id

except ImportError:
    # moto가 설치되지 않은 경우 더미 픽스처
    @pytest.fixture
    def moto_ec2():
        pytest.skip("moto not installed")
