"""
core/data/inventory/seeds.py - Seed references from change events

Understands the two event shapes that name changed instances:

    - EventBridge "EC2 Instance State-change Notification"
      (detail["instance-id"])
    - CloudTrail "AWS API Call via CloudTrail" for EC2 calls
      (detail.requestParameters / detail.responseElements .instancesSet.items)
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from typing import Any

from .types import ChangedObject, ResourceKind, fetch_path

logger = logging.getLogger(__name__)

STATE_CHANGE_DETAIL_TYPE = "EC2 Instance State-change Notification"
CLOUDTRAIL_DETAIL_TYPE = "AWS API Call via CloudTrail"


def instance_seeds(instance_ids: Iterable[str | None]) -> list[ChangedObject]:
    """Seeds for a plain list of instance ids"""
    return [ChangedObject(ResourceKind.INSTANCE, instance_id) for instance_id in instance_ids]


def seeds_from_event(event: dict[str, Any]) -> list[ChangedObject]:
    """Instance seeds named by an EventBridge event ([] for unknown shapes)"""
    detail_type = event.get("detail-type")
    detail = event.get("detail") or {}

    if detail_type == STATE_CHANGE_DETAIL_TYPE:
        return instance_seeds([detail.get("instance-id")])

    if detail_type == CLOUDTRAIL_DETAIL_TYPE:
        ids: list[str | None] = []
        for section in ("requestParameters", "responseElements"):
            items = fetch_path(detail, section, "instancesSet", "items") or []
            ids.extend(item.get("instanceId") for item in items if isinstance(item, dict))
        return instance_seeds(ref for ref in dict.fromkeys(ids) if ref)

    logger.debug(f"event ignored, no instance ids in detail-type {detail_type!r}")
    return []
