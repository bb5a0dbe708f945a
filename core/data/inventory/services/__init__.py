"""
core/data/inventory/services - AWS service-specific lookups by reference

Each service module provides describe functions for specific AWS resources.
"""

from .cloudformation import describe_stack, get_template_body, list_stack_resources
from .common import chunk, describe_filtered
from .ec2 import (
    describe_availability_zones,
    describe_images,
    describe_instances,
    describe_key_pairs,
    describe_security_groups,
    describe_snapshots,
    describe_volumes,
)
from .elb import describe_instance_health, describe_load_balancer
from .vpc import describe_addresses, describe_network_interfaces, describe_subnets, describe_vpcs

__all__ = [
    # Common
    "chunk",
    "describe_filtered",
    # EC2
    "describe_instances",
    "describe_availability_zones",
    "describe_key_pairs",
    "describe_images",
    "describe_security_groups",
    "describe_volumes",
    "describe_snapshots",
    # VPC
    "describe_vpcs",
    "describe_subnets",
    "describe_network_interfaces",
    "describe_addresses",
    # CloudFormation
    "describe_stack",
    "list_stack_resources",
    "get_template_body",
    # ELB
    "describe_load_balancer",
    "describe_instance_health",
]
