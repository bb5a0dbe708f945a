"""
core/data/inventory/types.py - Reference and payload types for targeted refresh

Resource kinds, reference keys, seeds, and typed views over the raw boto3
payloads that reference expansion reads.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from enum import Enum
from typing import Any

RawRecord = dict[str, Any]


class ResourceKind(str, Enum):
    """Category of cloud object a reference belongs to"""

    INSTANCE = "compute-instance"
    AVAILABILITY_ZONE = "availability-zone"
    KEY_PAIR = "key-pair"
    IMAGE = "machine-image"
    STACK = "orchestration-stack"
    CLOUD_NETWORK = "cloud-network"
    CLOUD_SUBNET = "cloud-subnet"
    SECURITY_GROUP = "security-group"
    NETWORK_PORT = "network-port"
    LOAD_BALANCER = "load-balancer"
    FLOATING_IP = "floating-ip"
    CLOUD_VOLUME = "cloud-volume"
    CLOUD_VOLUME_SNAPSHOT = "cloud-volume-snapshot"
    OBJECT_STORE_CONTAINER = "object-store-container"
    OBJECT_STORE_OBJECT = "object-store-object"


class KeyField(str, Enum):
    """Which attribute a reference value identifies"""

    EMS_REF = "ems_ref"  # provider id
    NAME = "name"  # key pairs only


@dataclass(frozen=True)
class ReferenceKey:
    """Identifying key of one object within a kind"""

    field: KeyField
    value: str | None

    def __post_init__(self) -> None:
        # blank and whitespace-only values become None
        object.__setattr__(self, "value", _normalize(self.value))

    @classmethod
    def ems_ref(cls, value: Any) -> ReferenceKey:
        return cls(KeyField.EMS_REF, value)

    @classmethod
    def name(cls, value: Any) -> ReferenceKey:
        return cls(KeyField.NAME, value)

    @property
    def is_blank(self) -> bool:
        return not self.value


@dataclass(frozen=True)
class Target:
    """(kind, field, value) identity used for de-duplication"""

    kind: ResourceKind
    key: ReferenceKey

    def __str__(self) -> str:
        return f"{self.kind.value}:{self.key.field.value}={self.key.value}"


@dataclass(frozen=True)
class ChangedObject:
    """Seed reference: an object reported as changed"""

    kind: ResourceKind
    ems_ref: str | None


def _normalize(value: Any) -> str | None:
    if value is None:
        return None
    text = value if isinstance(value, str) else str(value)
    text = text.strip()
    return text or None


def fetch_path(data: Any, *path: str) -> Any | None:
    """Nested dict lookup that stops at the first missing level

    Example:
        fetch_path(instance, "Placement", "AvailabilityZone")
    """
    current = data
    for key in path:
        if not isinstance(current, dict):
            return None
        current = current.get(key)
        if current is None:
            return None
    return current


def tag_value(tags: Iterable[dict[str, Any]] | None, key: str) -> str | None:
    """Value of the first tag whose key matches case-insensitively"""
    wanted = key.lower()
    for tag in tags or []:
        tag_key = tag.get("Key")
        if isinstance(tag_key, str) and tag_key.lower() == wanted:
            return tag.get("Value")
    return None


# =============================================================================
# Typed payload views
# =============================================================================


@dataclass(frozen=True)
class InterfacePayload:
    """Network interface embedded in an instance payload"""

    network_interface_id: str | None
    subnet_id: str | None
    vpc_id: str | None

    @classmethod
    def from_api(cls, data: RawRecord) -> InterfacePayload:
        return cls(
            network_interface_id=data.get("NetworkInterfaceId"),
            subnet_id=data.get("SubnetId"),
            vpc_id=data.get("VpcId"),
        )


@dataclass(frozen=True)
class InstancePayload:
    """Reference fields of an EC2 DescribeInstances record"""

    instance_id: str | None
    image_id: str | None = None
    availability_zone: str | None = None
    key_name: str | None = None
    public_ip: str | None = None
    tags: tuple[dict[str, Any], ...] = ()
    network_interfaces: tuple[InterfacePayload, ...] = ()
    security_group_ids: tuple[str | None, ...] = ()
    volume_ids: tuple[str | None, ...] = ()

    @classmethod
    def from_api(cls, data: RawRecord) -> InstancePayload:
        return cls(
            instance_id=data.get("InstanceId"),
            image_id=data.get("ImageId"),
            availability_zone=fetch_path(data, "Placement", "AvailabilityZone"),
            key_name=data.get("KeyName"),
            public_ip=data.get("PublicIpAddress"),
            tags=tuple(data.get("Tags") or []),
            network_interfaces=tuple(InterfacePayload.from_api(n) for n in data.get("NetworkInterfaces") or []),
            security_group_ids=tuple(sg.get("GroupId") for sg in data.get("SecurityGroups") or []),
            volume_ids=tuple(fetch_path(bdm, "Ebs", "VolumeId") for bdm in data.get("BlockDeviceMappings") or []),
        )

    def stack_id(self, tag_key: str) -> str | None:
        return tag_value(self.tags, tag_key)

    @property
    def is_classic(self) -> bool:
        """EC2-Classic instances carry no network interfaces"""
        return not self.network_interfaces


@dataclass(frozen=True)
class PrivateIpPayload:
    private_ip: str | None
    allocation_id: str | None
    public_ip: str | None

    @classmethod
    def from_api(cls, data: RawRecord) -> PrivateIpPayload:
        return cls(
            private_ip=data.get("PrivateIpAddress"),
            allocation_id=fetch_path(data, "Association", "AllocationId"),
            public_ip=fetch_path(data, "Association", "PublicIp"),
        )

    @property
    def floating_ip_ref(self) -> str | None:
        """Allocation id when known, else the bare public IP"""
        return self.allocation_id or self.public_ip


@dataclass(frozen=True)
class NetworkPortPayload:
    """Reference fields of an EC2 DescribeNetworkInterfaces record"""

    network_interface_id: str | None
    private_ip_addresses: tuple[PrivateIpPayload, ...] = ()

    @classmethod
    def from_api(cls, data: RawRecord) -> NetworkPortPayload:
        return cls(
            network_interface_id=data.get("NetworkInterfaceId"),
            private_ip_addresses=tuple(
                PrivateIpPayload.from_api(ip) for ip in data.get("PrivateIpAddresses") or []
            ),
        )
