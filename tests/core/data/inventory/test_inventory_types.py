"""
tests/core/data/inventory/test_inventory_types.py - 참조 키 및 페이로드 타입 테스트
"""

import pytest

from core.data.inventory.types import (
    InstancePayload,
    KeyField,
    NetworkPortPayload,
    PrivateIpPayload,
    ReferenceKey,
    ResourceKind,
    Target,
    fetch_path,
    tag_value,
)


class TestReferenceKey:
    """ReferenceKey 정규화 테스트"""

    def test_strips_whitespace(self):
        assert ReferenceKey.ems_ref("  sg-1 ").value == "sg-1"

    @pytest.mark.parametrize("value", [None, "", "   "])
    def test_blank(self, value):
        assert ReferenceKey.ems_ref(value).is_blank

    def test_name_field(self):
        key = ReferenceKey.name("deploy")
        assert key.field == KeyField.NAME
        assert key != ReferenceKey.ems_ref("deploy")

    def test_hashable(self):
        assert len({ReferenceKey.ems_ref("a"), ReferenceKey.ems_ref(" a")}) == 1

    def test_target_str(self):
        target = Target(ResourceKind.KEY_PAIR, ReferenceKey.name("deploy"))
        assert str(target) == "key-pair:name=deploy"


class TestHelpers:
    def test_fetch_path(self):
        data = {"Placement": {"AvailabilityZone": "ap-northeast-2a"}}

        assert fetch_path(data, "Placement", "AvailabilityZone") == "ap-northeast-2a"
        assert fetch_path(data, "Placement", "Tenancy") is None
        assert fetch_path(data, "Missing", "Deeper") is None
        assert fetch_path(None, "Placement") is None

    def test_fetch_path_through_non_dict(self):
        assert fetch_path({"a": "text"}, "a", "b") is None

    def test_tag_value_case_insensitive(self):
        tags = [{"Key": "Name", "Value": "web"}, {"Key": "AWS:CloudFormation:Stack-Id", "Value": "arn:1"}]

        assert tag_value(tags, "aws:cloudformation:stack-id") == "arn:1"
        assert tag_value(tags, "owner") is None
        assert tag_value(None, "Name") is None


class TestInstancePayload:
    """InstancePayload.from_api 테스트"""

    def test_from_api(self, instance_factory):
        vm = InstancePayload.from_api(instance_factory())

        assert vm.instance_id == "i-0123456789abcdef0"
        assert vm.image_id == "ami-0abc"
        assert vm.availability_zone == "ap-northeast-2a"
        assert vm.key_name == "deploy"
        assert vm.security_group_ids == ("sg-0aaa", "sg-0bbb")
        assert vm.volume_ids == ("vol-0aaa",)
        assert vm.network_interfaces[0].network_interface_id == "eni-0aaa"
        assert vm.network_interfaces[0].vpc_id == "vpc-0aaa"
        assert vm.stack_id("aws:cloudformation:stack-id").endswith("stack/web/1a2b3c4d")
        assert not vm.is_classic

    def test_sparse_payload(self):
        """키가 없어도 실패하지 않음"""
        vm = InstancePayload.from_api({"InstanceId": "i-1"})

        assert vm.image_id is None
        assert vm.availability_zone is None
        assert vm.security_group_ids == ()
        assert vm.stack_id("aws:cloudformation:stack-id") is None
        assert vm.is_classic

    def test_instance_store_mapping(self):
        """EBS가 아닌 블록 디바이스는 None 볼륨"""
        vm = InstancePayload.from_api({"InstanceId": "i-1", "BlockDeviceMappings": [{"DeviceName": "/dev/sdb"}]})
        assert vm.volume_ids == (None,)

    def test_classic_public_ip(self):
        vm = InstancePayload.from_api({"InstanceId": "i-1", "PublicIpAddress": "54.1.2.3"})
        assert vm.is_classic
        assert vm.public_ip == "54.1.2.3"


class TestNetworkPortPayload:
    def test_allocation_id_preferred(self, network_interface_factory):
        port = NetworkPortPayload.from_api(network_interface_factory())

        assert port.network_interface_id == "eni-0aaa"
        assert port.private_ip_addresses[0].floating_ip_ref == "eipalloc-0aaa"

    def test_public_ip_fallback(self, network_interface_factory):
        port = NetworkPortPayload.from_api(network_interface_factory(allocation_id=None))
        assert port.private_ip_addresses[0].floating_ip_ref == "3.34.0.10"

    def test_no_association(self):
        ip = PrivateIpPayload.from_api({"PrivateIpAddress": "10.0.0.1"})
        assert ip.floating_ip_ref is None
