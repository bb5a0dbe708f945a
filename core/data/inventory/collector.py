"""
core/data/inventory/collector.py - Targeted refresh pass

Turns a handful of changed-object seeds into the full set of references to
refresh, then exposes the per-kind batch fetch over that frozen set.

    seeds -> local expansion -> remote expansion -> seal -> fetch per kind
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from typing import TYPE_CHECKING

from core.config import RefreshConfig

from .expand import LocalGraphExpander, RemoteGraphExpander
from .fetcher import BatchFetcher
from .store import InventoryStore
from .targets import TargetAccumulator, TargetView
from .types import ChangedObject, KeyField, RawRecord, ResourceKind

if TYPE_CHECKING:
    from boto3 import Session

logger = logging.getLogger(__name__)


class TargetCollection:
    """One targeted refresh pass

    Expansion runs in the constructor; afterwards the reference set is sealed
    and only read.

    Example:
        collection = TargetCollection(session, store, instance_seeds(["i-0abc"]))

        collection.references(ResourceKind.SECURITY_GROUP)  # ["sg-1", "sg-2"]
        groups = collection.fetcher.security_groups()
        everything = collection.collect_all()
    """

    def __init__(
        self,
        session: Session,
        store: InventoryStore,
        seeds: Iterable[ChangedObject],
        region_name: str | None = None,
        config: RefreshConfig | None = None,
    ):
        """Initialize and expand

        Args:
            session: boto3 Session
            store: persisted inventory to read known relations from
            seeds: changed objects reported by events or a refresh driver
            region_name: AWS region (None uses the session default)
            config: refresh settings (defaults from RefreshConfig)
        """
        self._config = config or RefreshConfig()
        self._accumulator = TargetAccumulator()
        self._fetcher = BatchFetcher(session, self._accumulator, region_name=region_name, config=self._config)

        self._parse_seeds(seeds)
        self._infer_related_refs(store)

        self._targets = self._accumulator.seal()
        self._fetcher = self._fetcher.bind(self._targets)

    @property
    def targets(self) -> TargetView:
        return self._targets

    @property
    def fetcher(self) -> BatchFetcher:
        return self._fetcher

    def references(self, kind: ResourceKind) -> list[str]:
        return self._targets.references_of(kind)

    def name_references(self, kind: ResourceKind) -> list[str]:
        return self._targets.references_of(kind, KeyField.NAME)

    def collect(self, kind: ResourceKind) -> list[RawRecord]:
        return self._fetcher.fetch(kind)

    def collect_all(self) -> dict[ResourceKind, list[RawRecord]]:
        return self._fetcher.fetch_all()

    # =========================================================================
    # Internal Methods
    # =========================================================================

    def _parse_seeds(self, seeds: Iterable[ChangedObject]) -> None:
        for seed in seeds:
            if seed.kind is ResourceKind.INSTANCE:
                self._accumulator.add_ref(ResourceKind.INSTANCE, seed.ems_ref)
            else:
                logger.debug(f"seed skipped, {seed.kind.value} seeds are not expanded: {seed.ems_ref}")

    def _infer_related_refs(self, store: InventoryStore) -> None:
        instance_refs = self._accumulator.references_of(ResourceKind.INSTANCE)
        if not instance_refs:
            logger.info("no instance seeds, nothing to expand")
            return

        LocalGraphExpander(store, self._accumulator, self._config.network_port_prefix).expand()
        RemoteGraphExpander(self._fetcher, self._accumulator, self._config.stack_id_tag).expand()
        logger.info(f"expanded {len(instance_refs)} instance seeds into {len(self._accumulator)} targets")
