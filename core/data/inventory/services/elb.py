"""
core/data/inventory/services/elb.py - Classic Load Balancer lookups

DescribeLoadBalancers fails the whole call when any listed name is missing,
so lookups are issued one name at a time.
"""

from __future__ import annotations

from typing import Any


def describe_load_balancer(elb: Any, name: str) -> list[dict[str, Any]]:
    """Load balancer by name (a deleted one raises LoadBalancerNotFound)"""
    return elb.describe_load_balancers(LoadBalancerNames=[name]).get("LoadBalancerDescriptions", [])


def describe_instance_health(elb: Any, name: str) -> list[dict[str, Any]]:
    """Health-check state of each registered instance"""
    return elb.describe_instance_health(LoadBalancerName=name).get("InstanceStates", [])
