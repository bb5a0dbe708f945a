"""
core/data/inventory/services/cloudformation.py - CloudFormation lookups

DescribeStacks has no list filter, so stacks are looked up one reference at a
time. These functions let ClientError through; callers decide whether a
missing stack is an error (see core.parallel.errors.records_or_raise).
"""

from __future__ import annotations

import json
from typing import Any


def describe_stack(cf: Any, stack_ref: str) -> list[dict[str, Any]]:
    """Stack by name or id (a deleted stack raises ValidationError)"""
    return cf.describe_stacks(StackName=stack_ref).get("Stacks", [])


def list_stack_resources(cf: Any, stack_name: str) -> list[dict[str, Any]]:
    resources: list[dict[str, Any]] = []
    paginator = cf.get_paginator("list_stack_resources")
    for page in paginator.paginate(StackName=stack_name):
        resources.extend(page.get("StackResourceSummaries", []))
    return resources


def get_template_body(cf: Any, stack_name: str) -> str:
    """Template body as text

    boto3 hands JSON templates back already parsed; those are serialized back
    to a JSON string.
    """
    body = cf.get_template(StackName=stack_name).get("TemplateBody", "")
    if isinstance(body, str):
        return body
    return json.dumps(body, default=str)
