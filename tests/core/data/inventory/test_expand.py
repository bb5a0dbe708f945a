"""
tests/core/data/inventory/test_expand.py - 로컬/원격 참조 확장 테스트
"""

from unittest.mock import MagicMock, patch

import pytest

from core.data.inventory.expand import LocalGraphExpander, RemoteGraphExpander
from core.data.inventory.fetcher import BatchFetcher
from core.data.inventory.store import (
    InMemoryInventoryStore,
    StoredInstance,
    StoredKeyPair,
    StoredRef,
    StoredStack,
)
from core.data.inventory.targets import TargetAccumulator
from core.data.inventory.types import ResourceKind

STACK_TAG = "aws:cloudformation:stack-id"


@pytest.fixture
def store():
    root = StoredStack("arn:root", name="root")
    child = StoredStack("arn:child", name="child", parent=root)
    return InMemoryInventoryStore(
        [
            StoredInstance(
                "i-1",
                orchestration_stack=child,
                cloud_subnets=[StoredRef("subnet-1")],
                floating_ips=[StoredRef("eipalloc-1")],
                network_ports=[StoredRef("eni-1"), StoredRef("lo-internal"), StoredRef(None)],
                key_pairs=[StoredKeyPair("deploy")],
            )
        ]
    )


class TestLocalGraphExpander:
    """LocalGraphExpander 테스트"""

    def test_expands_stored_relations(self, store):
        targets = TargetAccumulator()
        targets.add_ref(ResourceKind.INSTANCE, "i-1")

        LocalGraphExpander(store, targets).expand()

        assert targets.references_of(ResourceKind.STACK) == ["arn:child", "arn:root"]
        assert targets.references_of(ResourceKind.CLOUD_SUBNET) == ["subnet-1"]
        assert targets.references_of(ResourceKind.FLOATING_IP) == ["eipalloc-1"]
        assert targets.name_references(ResourceKind.KEY_PAIR) == ["deploy"]

    def test_stack_with_two_ancestors(self):
        """중첩 스택 leaf -> mid -> root 는 스택 참조 3개"""
        root = StoredStack("arn:root")
        mid = StoredStack("arn:mid", parent=root)
        leaf = StoredStack("arn:leaf", parent=mid)
        targets = TargetAccumulator()
        targets.add_ref(ResourceKind.INSTANCE, "i-3")

        LocalGraphExpander(InMemoryInventoryStore([StoredInstance("i-3", orchestration_stack=leaf)]), targets).expand()

        assert targets.references_of(ResourceKind.STACK) == ["arn:leaf", "arn:mid", "arn:root"]

    def test_non_eni_ports_skipped(self, store):
        """접두어가 맞지 않는 port는 제외"""
        targets = TargetAccumulator()
        targets.add_ref(ResourceKind.INSTANCE, "i-1")

        LocalGraphExpander(store, targets).expand()

        assert targets.references_of(ResourceKind.NETWORK_PORT) == ["eni-1"]

    def test_custom_prefix(self, store):
        targets = TargetAccumulator()
        targets.add_ref(ResourceKind.INSTANCE, "i-1")

        LocalGraphExpander(store, targets, network_port_prefix="lo-").expand()

        assert targets.references_of(ResourceKind.NETWORK_PORT) == ["lo-internal"]

    def test_unknown_instance(self, store):
        """저장소에 없는 인스턴스는 아무것도 추가하지 않음"""
        targets = TargetAccumulator()
        targets.add_ref(ResourceKind.INSTANCE, "i-new")

        LocalGraphExpander(store, targets).expand()

        assert len(targets) == 1

    def test_no_instances_no_lookup(self):
        store = MagicMock()

        LocalGraphExpander(store, TargetAccumulator()).expand()

        store.find_instances.assert_not_called()

    def test_instance_without_stack(self):
        targets = TargetAccumulator()
        targets.add_ref(ResourceKind.INSTANCE, "i-2")

        LocalGraphExpander(InMemoryInventoryStore([StoredInstance("i-2")]), targets).expand()

        assert targets.references_of(ResourceKind.STACK) == []


class TestRemoteGraphExpander:
    """RemoteGraphExpander 테스트"""

    @pytest.fixture
    def ec2(self, mock_ec2_client):
        return mock_ec2_client

    @pytest.fixture
    def expand(self, mock_boto3_session, ec2):
        def _expand(targets, stack_id_tag=STACK_TAG):
            with patch("core.data.inventory.fetcher.get_client", return_value=ec2):
                fetcher = BatchFetcher(mock_boto3_session, targets)
                RemoteGraphExpander(fetcher, targets, stack_id_tag).expand()

        return _expand

    def test_instance_references(self, expand):
        targets = TargetAccumulator()
        targets.add_ref(ResourceKind.INSTANCE, "i-0123456789abcdef0")

        expand(targets)

        assert targets.references_of(ResourceKind.IMAGE) == ["ami-0abc"]
        assert targets.references_of(ResourceKind.AVAILABILITY_ZONE) == ["ap-northeast-2a"]
        assert targets.references_of(ResourceKind.STACK)[0].endswith("stack/web/1a2b3c4d")
        assert targets.name_references(ResourceKind.KEY_PAIR) == ["deploy"]
        assert targets.references_of(ResourceKind.NETWORK_PORT) == ["eni-0aaa"]
        assert targets.references_of(ResourceKind.CLOUD_SUBNET) == ["subnet-0aaa"]
        assert targets.references_of(ResourceKind.CLOUD_NETWORK) == ["vpc-0aaa"]
        assert targets.references_of(ResourceKind.SECURITY_GROUP) == ["sg-0aaa", "sg-0bbb"]
        assert targets.references_of(ResourceKind.CLOUD_VOLUME) == ["vol-0aaa"]

    def test_floating_ip_from_eni(self, expand, ec2):
        """ENI 조회 결과의 allocation id가 floating ip 참조로 추가됨"""
        targets = TargetAccumulator()
        targets.add_ref(ResourceKind.INSTANCE, "i-0123456789abcdef0")

        expand(targets)

        assert targets.references_of(ResourceKind.FLOATING_IP) == ["eipalloc-0aaa"]
        paginate = ec2.get_paginator("describe_network_interfaces").paginate
        assert paginate.call_args.kwargs["Filters"] == [{"Name": "network-interface-id", "Values": ["eni-0aaa"]}]

    def test_eni_lookup_sees_local_ports(self, expand, ec2):
        """로컬 확장에서 추가된 ENI도 함께 조회"""
        targets = TargetAccumulator()
        targets.add_ref(ResourceKind.INSTANCE, "i-0123456789abcdef0")
        targets.add_ref(ResourceKind.NETWORK_PORT, "eni-0old")

        expand(targets)

        paginate = ec2.get_paginator("describe_network_interfaces").paginate
        assert paginate.call_args.kwargs["Filters"][0]["Values"] == ["eni-0old", "eni-0aaa"]

    def test_prefix_filter_applies_to_stored_ports_only(self, expand, ec2, paginated, instance_factory, store):
        """저장된 port만 접두어로 거르고, AWS가 돌려준 interface id는 그대로 추가"""
        vm = instance_factory(
            instance_id="i-1",
            network_interfaces=[{"NetworkInterfaceId": "attach-0xyz", "SubnetId": "subnet-1", "VpcId": "vpc-1"}],
        )
        paginated(ec2, {"describe_instances": [{"Reservations": [{"Instances": [vm]}]}]})
        targets = TargetAccumulator()
        targets.add_ref(ResourceKind.INSTANCE, "i-1")

        LocalGraphExpander(store, targets).expand()
        expand(targets)

        ports = targets.references_of(ResourceKind.NETWORK_PORT)
        assert ports == ["eni-1", "attach-0xyz"]
        assert "lo-internal" not in ports

    def test_public_ip_without_allocation(self, expand, ec2, paginated, instance_factory, network_interface_factory):
        paginated(
            ec2,
            {
                "describe_instances": [{"Reservations": [{"Instances": [instance_factory()]}]}],
                "describe_network_interfaces": [
                    {"NetworkInterfaces": [network_interface_factory(allocation_id=None, public_ip="13.0.0.1")]}
                ],
            },
        )
        targets = TargetAccumulator()
        targets.add_ref(ResourceKind.INSTANCE, "i-0123456789abcdef0")

        expand(targets)

        assert targets.references_of(ResourceKind.FLOATING_IP) == ["13.0.0.1"]

    def test_classic_instance_public_ip(self, expand, ec2, paginated, instance_factory):
        """ENI가 없는 인스턴스는 공인 IP를 floating ip로 사용"""
        classic = instance_factory(network_interfaces=[], PublicIpAddress="54.0.0.1")
        paginated(ec2, {"describe_instances": [{"Reservations": [{"Instances": [classic]}]}]})
        targets = TargetAccumulator()
        targets.add_ref(ResourceKind.INSTANCE, "i-0123456789abcdef0")

        expand(targets)

        assert targets.references_of(ResourceKind.FLOATING_IP) == ["54.0.0.1"]
        assert targets.references_of(ResourceKind.NETWORK_PORT) == []

    def test_vpc_public_ip_not_used(self, expand, ec2, paginated, instance_factory):
        """VPC 인스턴스의 공인 IP는 floating ip 참조가 아님"""
        vm = instance_factory(PublicIpAddress="54.0.0.2")
        paginated(ec2, {"describe_instances": [{"Reservations": [{"Instances": [vm]}]}]})
        targets = TargetAccumulator()
        targets.add_ref(ResourceKind.INSTANCE, "i-0123456789abcdef0")

        expand(targets)

        assert "54.0.0.2" not in targets.references_of(ResourceKind.FLOATING_IP)

    def test_stack_tag_case_insensitive(self, expand, ec2, paginated, instance_factory):
        vm = instance_factory(Tags=[{"Key": "AWS:CloudFormation:Stack-Id", "Value": "arn:upper"}])
        paginated(ec2, {"describe_instances": [{"Reservations": [{"Instances": [vm]}]}]})
        targets = TargetAccumulator()
        targets.add_ref(ResourceKind.INSTANCE, "i-0123456789abcdef0")

        expand(targets)

        assert targets.references_of(ResourceKind.STACK) == ["arn:upper"]

    def test_sparse_instance(self, expand, ec2, paginated):
        """선택 필드가 없어도 빈 참조는 추가되지 않음"""
        paginated(ec2, {"describe_instances": [{"Reservations": [{"Instances": [{"InstanceId": "i-1"}]}]}]})
        targets = TargetAccumulator()
        targets.add_ref(ResourceKind.INSTANCE, "i-1")

        expand(targets)

        assert len(targets) == 1

    def test_no_instances_no_call(self, expand, ec2):
        expand(TargetAccumulator())
        ec2.get_paginator.assert_not_called()
