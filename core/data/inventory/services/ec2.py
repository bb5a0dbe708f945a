"""
core/data/inventory/services/ec2.py - EC2 resource lookups by id list

Instances, availability zones, key pairs, images, security groups, volumes,
and snapshots. Each function returns raw boto3 records.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any

from core.config import settings

from .common import describe_filtered


def describe_instances(
    ec2: Any,
    instance_ids: Sequence[str],
    chunk_size: int = settings.FILTER_VALUE_LIMIT,
) -> list[dict[str, Any]]:
    """Instances by id, flattened out of their reservations"""
    reservations = describe_filtered(
        ec2, "describe_instances", "Reservations", "instance-id", instance_ids, chunk_size=chunk_size
    )
    return [instance for reservation in reservations for instance in reservation.get("Instances", [])]


def describe_availability_zones(
    ec2: Any,
    zone_names: Sequence[str],
    chunk_size: int = settings.FILTER_VALUE_LIMIT,
) -> list[dict[str, Any]]:
    return describe_filtered(
        ec2,
        "describe_availability_zones",
        "AvailabilityZones",
        "zone-name",
        zone_names,
        paginate=False,
        chunk_size=chunk_size,
    )


def describe_key_pairs(
    ec2: Any,
    key_names: Sequence[str],
    chunk_size: int = settings.FILTER_VALUE_LIMIT,
) -> list[dict[str, Any]]:
    """Key pairs by name (they have no id usable as a filter key here)"""
    return describe_filtered(
        ec2, "describe_key_pairs", "KeyPairs", "key-name", key_names, paginate=False, chunk_size=chunk_size
    )


def describe_images(
    ec2: Any,
    image_ids: Sequence[str],
    chunk_size: int = settings.FILTER_VALUE_LIMIT,
) -> list[dict[str, Any]]:
    return describe_filtered(ec2, "describe_images", "Images", "image-id", image_ids, chunk_size=chunk_size)


def describe_security_groups(
    ec2: Any,
    group_ids: Sequence[str],
    chunk_size: int = settings.FILTER_VALUE_LIMIT,
) -> list[dict[str, Any]]:
    return describe_filtered(
        ec2, "describe_security_groups", "SecurityGroups", "group-id", group_ids, chunk_size=chunk_size
    )


def describe_volumes(
    ec2: Any,
    volume_ids: Sequence[str],
    chunk_size: int = settings.FILTER_VALUE_LIMIT,
) -> list[dict[str, Any]]:
    return describe_filtered(ec2, "describe_volumes", "Volumes", "volume-id", volume_ids, chunk_size=chunk_size)


def describe_snapshots(
    ec2: Any,
    snapshot_ids: Sequence[str],
    chunk_size: int = settings.FILTER_VALUE_LIMIT,
) -> list[dict[str, Any]]:
    return describe_filtered(
        ec2, "describe_snapshots", "Snapshots", "snapshot-id", snapshot_ids, chunk_size=chunk_size
    )
