"""
core/data/inventory/services/vpc.py - VPC resource lookups by id list

VPCs, subnets, ENIs, and Elastic IPs.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any

from core.config import settings

from .common import describe_filtered

# Allocation ids look like "eipalloc-0123abcd"; anything else among floating-ip
# references is an EC2-Classic public IP.
ALLOCATION_ID_PREFIX = "eipalloc-"


def describe_vpcs(
    ec2: Any,
    vpc_ids: Sequence[str],
    chunk_size: int = settings.FILTER_VALUE_LIMIT,
) -> list[dict[str, Any]]:
    return describe_filtered(ec2, "describe_vpcs", "Vpcs", "vpc-id", vpc_ids, chunk_size=chunk_size)


def describe_subnets(
    ec2: Any,
    subnet_ids: Sequence[str],
    chunk_size: int = settings.FILTER_VALUE_LIMIT,
) -> list[dict[str, Any]]:
    return describe_filtered(ec2, "describe_subnets", "Subnets", "subnet-id", subnet_ids, chunk_size=chunk_size)


def describe_network_interfaces(
    ec2: Any,
    eni_ids: Sequence[str],
    chunk_size: int = settings.FILTER_VALUE_LIMIT,
) -> list[dict[str, Any]]:
    return describe_filtered(
        ec2,
        "describe_network_interfaces",
        "NetworkInterfaces",
        "network-interface-id",
        eni_ids,
        chunk_size=chunk_size,
    )


def describe_addresses(
    ec2: Any,
    floating_ip_refs: Sequence[str],
    chunk_size: int = settings.FILTER_VALUE_LIMIT,
) -> list[dict[str, Any]]:
    """Elastic IPs by allocation id, EC2-Classic ones by public IP

    A mixed reference list costs one call per filter.
    """
    allocation_ids = [ref for ref in floating_ip_refs if ref.startswith(ALLOCATION_ID_PREFIX)]
    public_ips = [ref for ref in floating_ip_refs if not ref.startswith(ALLOCATION_ID_PREFIX)]

    addresses = describe_filtered(
        ec2, "describe_addresses", "Addresses", "allocation-id", allocation_ids, paginate=False, chunk_size=chunk_size
    )
    addresses.extend(
        describe_filtered(
            ec2, "describe_addresses", "Addresses", "public-ip", public_ips, paginate=False, chunk_size=chunk_size
        )
    )
    return addresses
