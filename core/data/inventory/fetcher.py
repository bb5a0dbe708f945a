"""
core/data/inventory/fetcher.py - Per-kind batch fetch of referenced resources

One method per resource kind. Each method reads the kind's reference list,
returns [] without calling AWS when it is empty, and otherwise issues one
filtered Describe* call (split only when the list exceeds the filter value
limit). Stacks and Classic ELBs cannot be list-filtered: they are looked up one
reference at a time on a bounded worker pool, and references that no longer
exist contribute zero records.

Usage:
    fetcher = BatchFetcher(session, view, region_name="ap-northeast-2")
    volumes = fetcher.cloud_volumes()
    everything = fetcher.fetch_all()
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable, Iterable
from typing import TYPE_CHECKING, Any

from botocore.exceptions import ClientError

from core.config import RefreshConfig
from core.exceptions import APICallError
from core.parallel import bounded_map, capture, get_client, is_not_found_for, records_or_raise, run_concurrently

from .services import (
    describe_addresses,
    describe_availability_zones,
    describe_images,
    describe_instance_health,
    describe_instances,
    describe_key_pairs,
    describe_load_balancer,
    describe_network_interfaces,
    describe_security_groups,
    describe_snapshots,
    describe_stack,
    describe_subnets,
    describe_volumes,
    describe_vpcs,
    get_template_body,
    list_stack_resources,
)
from .targets import ReferenceSource
from .types import KeyField, RawRecord, ResourceKind

if TYPE_CHECKING:
    from boto3 import Session

logger = logging.getLogger(__name__)


class _SharedState:
    """Clients and memoized results shared by fetchers bound to one pass"""

    def __init__(self) -> None:
        self.clients: dict[str, Any] = {}
        self.memo: dict[tuple[str, tuple[str, ...]], list[RawRecord]] = {}
        self.lock = threading.Lock()


class BatchFetcher:
    """Fetches the current state of every referenced object, kind by kind

    Args:
        session: boto3 Session
        references: where reference lists are read from (an accumulator during
            expansion, a sealed TargetView afterwards)
        region_name: AWS region (None uses the session default)
        config: worker pool size and filter value limit
    """

    def __init__(
        self,
        session: Session,
        references: ReferenceSource,
        region_name: str | None = None,
        config: RefreshConfig | None = None,
        _state: _SharedState | None = None,
    ):
        self._session = session
        self._references = references
        self._region_name = region_name
        self._config = config or RefreshConfig()
        self._state = _state or _SharedState()

    def bind(self, references: ReferenceSource) -> BatchFetcher:
        """Fetcher over another reference source, sharing clients and memoized results"""
        return BatchFetcher(self._session, references, self._region_name, self._config, _state=self._state)

    @property
    def references(self) -> ReferenceSource:
        return self._references

    # =========================================================================
    # EC2
    # =========================================================================

    def instances(self) -> list[RawRecord]:
        """Instances; memoized for the pass"""
        refs = self._refs(ResourceKind.INSTANCE)
        if not refs:
            return []
        return self._memoized("instances", refs, lambda: describe_instances(self._ec2, refs, self._chunk))

    def availability_zones(self) -> list[RawRecord]:
        refs = self._refs(ResourceKind.AVAILABILITY_ZONE)
        if not refs:
            return []
        return describe_availability_zones(self._ec2, refs, self._chunk)

    def key_pairs(self) -> list[RawRecord]:
        refs = self._refs(ResourceKind.KEY_PAIR, KeyField.NAME)
        if not refs:
            return []
        return describe_key_pairs(self._ec2, refs, self._chunk)

    def images(self) -> list[RawRecord]:
        refs = self._refs(ResourceKind.IMAGE)
        if not refs:
            return []
        return describe_images(self._ec2, refs, self._chunk)

    def security_groups(self) -> list[RawRecord]:
        refs = self._refs(ResourceKind.SECURITY_GROUP)
        if not refs:
            return []
        return describe_security_groups(self._ec2, refs, self._chunk)

    def cloud_volumes(self) -> list[RawRecord]:
        refs = self._refs(ResourceKind.CLOUD_VOLUME)
        if not refs:
            return []
        return describe_volumes(self._ec2, refs, self._chunk)

    def cloud_volume_snapshots(self) -> list[RawRecord]:
        refs = self._refs(ResourceKind.CLOUD_VOLUME_SNAPSHOT)
        if not refs:
            return []
        return describe_snapshots(self._ec2, refs, self._chunk)

    # =========================================================================
    # VPC
    # =========================================================================

    def cloud_networks(self) -> list[RawRecord]:
        refs = self._refs(ResourceKind.CLOUD_NETWORK)
        if not refs:
            return []
        return describe_vpcs(self._ec2, refs, self._chunk)

    def cloud_subnets(self) -> list[RawRecord]:
        refs = self._refs(ResourceKind.CLOUD_SUBNET)
        if not refs:
            return []
        return describe_subnets(self._ec2, refs, self._chunk)

    def network_ports(self) -> list[RawRecord]:
        """ENIs; memoized for the pass"""
        refs = self._refs(ResourceKind.NETWORK_PORT)
        if not refs:
            return []
        return self._memoized("network_ports", refs, lambda: describe_network_interfaces(self._ec2, refs, self._chunk))

    def floating_ips(self) -> list[RawRecord]:
        refs = self._refs(ResourceKind.FLOATING_IP)
        if not refs:
            return []
        return describe_addresses(self._ec2, refs, self._chunk)

    # =========================================================================
    # Per-reference lookups
    # =========================================================================

    def stacks(self) -> list[RawRecord]:
        refs = self._refs(ResourceKind.STACK)
        if not refs:
            return []
        return self._per_reference("cloudformation", "describe_stacks", describe_stack, refs)

    def load_balancers(self) -> list[RawRecord]:
        refs = self._refs(ResourceKind.LOAD_BALANCER)
        if not refs:
            return []
        return self._per_reference("elb", "describe_load_balancers", describe_load_balancer, refs)

    # =========================================================================
    # Object storage (not collected by targeted refresh)
    # =========================================================================

    def cloud_object_store_containers(self) -> list[RawRecord]:
        return []

    def cloud_object_store_objects(self) -> list[RawRecord]:
        return []

    # =========================================================================
    # Nested lookups for fetched stacks and load balancers
    # =========================================================================

    def stack_resources(self, stack_name: str) -> list[RawRecord]:
        """Resources of a stack; [] when the stack is gone"""
        if not stack_name:
            return []
        outcome = capture(list_stack_resources, self._client("cloudformation"), stack_name)
        return records_or_raise([outcome], "cloudformation", "list_stack_resources")

    def health_check_members(self, load_balancer_name: str) -> list[RawRecord]:
        """Instance health states behind a Classic ELB"""
        try:
            return describe_instance_health(self._client("elb"), load_balancer_name)
        except ClientError as e:
            raise APICallError.from_client_error("elb", "describe_instance_health", e) from e

    def stack_template(self, stack_name: str) -> str:
        """Template body of a stack; "" when the stack is gone"""
        if not stack_name:
            return ""
        try:
            return get_template_body(self._client("cloudformation"), stack_name)
        except ClientError as e:
            if is_not_found_for("cloudformation", e):
                logger.debug(f"cloudformation.get_template: {stack_name} not found, treated as deleted")
                return ""
            raise APICallError.from_client_error("cloudformation", "get_template", e) from e

    # =========================================================================
    # Dispatch
    # =========================================================================

    def fetch(self, kind: ResourceKind) -> list[RawRecord]:
        """Records for one kind"""
        return getattr(self, _FETCH_METHODS[kind])()

    def fetch_all(self, kinds: Iterable[ResourceKind] | None = None) -> dict[ResourceKind, list[RawRecord]]:
        """Records for several kinds, fetched concurrently

        Kinds are independent of each other, so their calls run in parallel.
        Kinds with no references resolve to [] without a call.

        Args:
            kinds: kinds to fetch (default: every kind)

        Returns:
            {kind: records} in the order of `kinds`
        """
        wanted = list(kinds) if kinds is not None else list(ResourceKind)
        tasks: dict[str, Callable[[], list[RawRecord]]] = {kind.value: self._fetch_task(kind) for kind in wanted}
        results = run_concurrently(tasks, max_workers=self._config.max_workers)
        counts = ", ".join(f"{name}={len(records)}" for name, records in results.items() if records)
        logger.info(f"fetched records: {counts or 'none'}")
        return {kind: results[kind.value] for kind in wanted}

    # =========================================================================
    # Internal Methods
    # =========================================================================

    def _fetch_task(self, kind: ResourceKind) -> Callable[[], list[RawRecord]]:
        return lambda: self.fetch(kind)

    @property
    def _ec2(self) -> Any:
        return self._client("ec2")

    @property
    def _chunk(self) -> int:
        return self._config.filter_value_limit

    def _refs(self, kind: ResourceKind, field: KeyField = KeyField.EMS_REF) -> list[str]:
        return self._references.references_of(kind, field)

    def _client(self, service: str) -> Any:
        with self._state.lock:
            client = self._state.clients.get(service)
            if client is None:
                client = get_client(
                    self._session,
                    service,
                    region_name=self._region_name,
                    max_pool_connections=self._config.max_workers + 5,
                )
                self._state.clients[service] = client
        return client

    def _memoized(self, name: str, refs: list[str], loader: Callable[[], list[RawRecord]]) -> list[RawRecord]:
        """Shared result for (name, refs); callers get their own list"""
        key = (name, tuple(refs))
        with self._state.lock:
            cached = self._state.memo.get(key)
        if cached is not None:
            return list(cached)

        records = loader()
        with self._state.lock:
            self._state.memo[key] = list(records)
        return records

    def _per_reference(
        self,
        service: str,
        operation: str,
        func: Callable[[Any, str], list[RawRecord]],
        refs: list[str],
    ) -> list[RawRecord]:
        client = self._client(service)
        outcomes = bounded_map(lambda ref: capture(func, client, ref), refs, max_workers=self._config.max_workers)
        return records_or_raise(outcomes, service, operation)


_FETCH_METHODS: dict[ResourceKind, str] = {
    ResourceKind.INSTANCE: "instances",
    ResourceKind.AVAILABILITY_ZONE: "availability_zones",
    ResourceKind.KEY_PAIR: "key_pairs",
    ResourceKind.IMAGE: "images",
    ResourceKind.STACK: "stacks",
    ResourceKind.CLOUD_NETWORK: "cloud_networks",
    ResourceKind.CLOUD_SUBNET: "cloud_subnets",
    ResourceKind.SECURITY_GROUP: "security_groups",
    ResourceKind.NETWORK_PORT: "network_ports",
    ResourceKind.LOAD_BALANCER: "load_balancers",
    ResourceKind.FLOATING_IP: "floating_ips",
    ResourceKind.CLOUD_VOLUME: "cloud_volumes",
    ResourceKind.CLOUD_VOLUME_SNAPSHOT: "cloud_volume_snapshots",
    ResourceKind.OBJECT_STORE_CONTAINER: "cloud_object_store_containers",
    ResourceKind.OBJECT_STORE_OBJECT: "cloud_object_store_objects",
}
