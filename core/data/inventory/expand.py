"""
core/data/inventory/expand.py - Reference expansion for changed instances

Events only name the instance that changed. To keep the stored view of that
instance consistent, everything it points at (and everything that points at
it) is refreshed too. Two sources are walked:

    - LocalGraphExpander: relations already in the persisted inventory
    - RemoteGraphExpander: the instance as AWS describes it right now, then
      its ENIs, which carry the Elastic IP allocation ids the instance
      payload lacks
"""

from __future__ import annotations

import logging

from core.config import settings

from .fetcher import BatchFetcher
from .store import InventoryStore
from .targets import TargetAccumulator
from .types import InstancePayload, NetworkPortPayload, ResourceKind

logger = logging.getLogger(__name__)


class LocalGraphExpander:
    """Adds targets from the stored relations of the seeded instances

    Args:
        store: persisted inventory
        targets: accumulator to fill
        network_port_prefix: stored ports not starting with it are internal
            artifacts rather than real ENIs and are skipped
    """

    def __init__(
        self,
        store: InventoryStore,
        targets: TargetAccumulator,
        network_port_prefix: str = settings.NETWORK_PORT_PREFIX,
    ):
        self._store = store
        self._targets = targets
        self._network_port_prefix = network_port_prefix

    def expand(self) -> None:
        instance_refs = self._targets.references_of(ResourceKind.INSTANCE)
        if not instance_refs:
            return

        instances = self._store.find_instances(instance_refs)
        logger.debug(f"local expansion: {len(instances)}/{len(instance_refs)} instances known to the store")

        for vm in instances:
            stack = vm.orchestration_stack
            all_stacks = [stack, *stack.ancestors()] if stack is not None else []
            for s in all_stacks:
                self._targets.add_ref(ResourceKind.STACK, s.ems_ref)

            for subnet in vm.cloud_subnets:
                self._targets.add_ref(ResourceKind.CLOUD_SUBNET, subnet.ems_ref)
            for floating_ip in vm.floating_ips:
                self._targets.add_ref(ResourceKind.FLOATING_IP, floating_ip.ems_ref)
            for port in vm.network_ports:
                if port.ems_ref and port.ems_ref.startswith(self._network_port_prefix):
                    self._targets.add_ref(ResourceKind.NETWORK_PORT, port.ems_ref)
            for key_pair in vm.key_pairs:
                self._targets.add_name(ResourceKind.KEY_PAIR, key_pair.name)


class RemoteGraphExpander:
    """Adds targets found in the live instance and ENI payloads

    Args:
        fetcher: fetcher reading from the same accumulator
        targets: accumulator to fill
        stack_id_tag: tag key holding the owning CloudFormation stack id
    """

    def __init__(
        self,
        fetcher: BatchFetcher,
        targets: TargetAccumulator,
        stack_id_tag: str = settings.STACK_ID_TAG,
    ):
        self._fetcher = fetcher
        self._targets = targets
        self._stack_id_tag = stack_id_tag

    def expand(self) -> None:
        if not self._targets.references_of(ResourceKind.INSTANCE):
            return

        instances = [InstancePayload.from_api(record) for record in self._fetcher.instances()]
        logger.debug(f"remote expansion: {len(instances)} instances returned by AWS")
        for vm in instances:
            self._add_instance_refs(vm)

        # port ids collected above must be visible to the ENI lookup below
        self._targets.invalidate_derived_view()

        # Elastic IP allocation ids are only reliable on the ENI listing
        for record in self._fetcher.network_ports():
            port = NetworkPortPayload.from_api(record)
            for private_ip in port.private_ip_addresses:
                self._targets.add_ref(ResourceKind.FLOATING_IP, private_ip.floating_ip_ref)

    def _add_instance_refs(self, vm: InstancePayload) -> None:
        targets = self._targets
        targets.add_ref(ResourceKind.IMAGE, vm.image_id)
        targets.add_ref(ResourceKind.AVAILABILITY_ZONE, vm.availability_zone)
        targets.add_ref(ResourceKind.STACK, vm.stack_id(self._stack_id_tag))
        targets.add_name(ResourceKind.KEY_PAIR, vm.key_name)

        for interface in vm.network_interfaces:
            targets.add_ref(ResourceKind.NETWORK_PORT, interface.network_interface_id)
            targets.add_ref(ResourceKind.CLOUD_SUBNET, interface.subnet_id)
            targets.add_ref(ResourceKind.CLOUD_NETWORK, interface.vpc_id)

        for group_id in vm.security_group_ids:
            targets.add_ref(ResourceKind.SECURITY_GROUP, group_id)

        for volume_id in vm.volume_ids:
            targets.add_ref(ResourceKind.CLOUD_VOLUME, volume_id)

        # EC2-Classic: the public IP itself is the floating ip reference
        if vm.is_classic and vm.public_ip:
            targets.add_ref(ResourceKind.FLOATING_IP, vm.public_ip)
