"""
core/data/inventory/services/common.py - Shared filtered-describe helper
"""

from __future__ import annotations

import logging
from collections.abc import Iterator, Sequence
from typing import Any

from botocore.exceptions import ClientError

from core.config import settings
from core.exceptions import APICallError

logger = logging.getLogger(__name__)


def chunk(values: Sequence[str], size: int) -> Iterator[list[str]]:
    """Yield successive chunks of `size` from `values`"""
    for i in range(0, len(values), size):
        yield list(values[i : i + size])


def describe_filtered(
    client: Any,
    operation: str,
    result_key: str,
    filter_name: str,
    values: Sequence[str],
    paginate: bool = True,
    chunk_size: int = settings.FILTER_VALUE_LIMIT,
    service: str = "ec2",
) -> list[dict[str, Any]]:
    """Run a Describe* call filtered by an id list

    One call (or one paginated run) per chunk of `chunk_size` values.
    An empty `values` makes no call at all.

    Args:
        client: boto3 client
        operation: snake_case operation name, e.g. "describe_volumes"
        result_key: list key in the response, e.g. "Volumes"
        filter_name: provider filter, e.g. "volume-id"
        values: filter values
        paginate: use the operation's paginator
        chunk_size: max values per filter
        service: service name for error reporting

    Returns:
        Raw records in response order
    """
    records: list[dict[str, Any]] = []
    if not values:
        return records

    try:
        for batch in chunk(values, chunk_size):
            filters = [{"Name": filter_name, "Values": batch}]
            if paginate:
                paginator = client.get_paginator(operation)
                for page in paginator.paginate(Filters=filters):
                    records.extend(page.get(result_key, []))
            else:
                response = getattr(client, operation)(Filters=filters)
                records.extend(response.get(result_key, []))
    except ClientError as e:
        raise APICallError.from_client_error(service, operation, e) from e

    logger.debug(f"{operation} [{filter_name}]: {len(values)} refs -> {len(records)} records")
    return records
