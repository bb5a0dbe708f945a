"""
core/data/inventory/targets.py - Target accumulator for targeted refresh

Collects the references that must be refreshed in one pass, de-duplicated per
kind, and seals them into a read-only view before the batch fetch.

Classes:
    - TargetAccumulator: insert-only builder, safe under concurrent writers
    - TargetView: immutable, fully indexed snapshot produced by seal()

Usage:
    targets = TargetAccumulator()
    targets.add_ref(ResourceKind.INSTANCE, "i-0abc")
    targets.add_name(ResourceKind.KEY_PAIR, "deploy")

    view = targets.seal()
    view.references_of(ResourceKind.INSTANCE)      # ["i-0abc"]
    view.name_references(ResourceKind.KEY_PAIR)    # ["deploy"]
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Iterator
from types import MappingProxyType
from typing import Any, Protocol

from core.exceptions import RefreshError

from .types import KeyField, ReferenceKey, ResourceKind, Target

logger = logging.getLogger(__name__)


class ReferenceSource(Protocol):
    """Anything the batch fetcher can read reference lists from"""

    def references_of(self, kind: ResourceKind, field: KeyField = KeyField.EMS_REF) -> list[str]: ...


class TargetAccumulator:
    """Insert-only set of refresh targets, keyed by kind

    Values are kept in insertion order per kind. Blank values are dropped
    silently, and re-adding a known key is a no-op.

    Derived per-(kind, field) projections are cached for readers and dropped
    whenever an insertion touches their kind, so a reader always sees every
    insertion made before it.
    """

    def __init__(self) -> None:
        # dict used as an insertion-ordered set
        self._targets: dict[ResourceKind, dict[ReferenceKey, None]] = {}
        self._derived: dict[tuple[ResourceKind, KeyField], tuple[str, ...]] = {}
        self._lock = threading.Lock()
        self._sealed = False

    # =========================================================================
    # Insertion
    # =========================================================================

    def add_target(self, kind: ResourceKind, key: ReferenceKey) -> bool:
        """Add key under kind

        Returns:
            True if the key was new, False for blanks and duplicates
        """
        if key.is_blank:
            return False

        with self._lock:
            if self._sealed:
                raise RefreshError("sealed target set cannot be modified", kind=kind.value)

            keys = self._targets.setdefault(kind, {})
            if key in keys:
                return False
            keys[key] = None
            self._derived.pop((kind, key.field), None)

        logger.debug(f"target added: {Target(kind, key)}")
        return True

    def add_ref(self, kind: ResourceKind, value: Any) -> bool:
        """Add a provider id reference"""
        return self.add_target(kind, ReferenceKey.ems_ref(value))

    def add_name(self, kind: ResourceKind, value: Any) -> bool:
        """Add a name reference (key pairs)"""
        return self.add_target(kind, ReferenceKey.name(value))

    # =========================================================================
    # Reading
    # =========================================================================

    def references_of(self, kind: ResourceKind, field: KeyField = KeyField.EMS_REF) -> list[str]:
        """Values stored under (kind, field), empty when never touched"""
        with self._lock:
            cached = self._derived.get((kind, field))
            if cached is None:
                cached = tuple(k.value for k in self._targets.get(kind, {}) if k.field == field and k.value)
                self._derived[(kind, field)] = cached
        return list(cached)

    def name_references(self, kind: ResourceKind) -> list[str]:
        return self.references_of(kind, KeyField.NAME)

    def invalidate_derived_view(self) -> None:
        """Drop every cached projection"""
        with self._lock:
            self._derived.clear()

    def __contains__(self, target: object) -> bool:
        if not isinstance(target, Target):
            return False
        with self._lock:
            return target.key in self._targets.get(target.kind, {})

    def __len__(self) -> int:
        with self._lock:
            return sum(len(keys) for keys in self._targets.values())

    # =========================================================================
    # Sealing
    # =========================================================================

    @property
    def sealed(self) -> bool:
        return self._sealed

    def seal(self) -> TargetView:
        """Freeze the accumulated targets into a read-only view

        The accumulator rejects insertions afterwards.
        """
        with self._lock:
            self._sealed = True
            index: dict[ResourceKind, dict[KeyField, tuple[str, ...]]] = {}
            for kind, keys in self._targets.items():
                by_field: dict[KeyField, list[str]] = {}
                for key in keys:
                    if key.value:
                        by_field.setdefault(key.field, []).append(key.value)
                index[kind] = {f: tuple(values) for f, values in by_field.items()}

        view = TargetView(index)
        logger.info(f"target set sealed: {len(view)} references across {len(view.kinds())} kinds")
        return view


class TargetView:
    """Immutable snapshot of a sealed TargetAccumulator"""

    def __init__(self, index: dict[ResourceKind, dict[KeyField, tuple[str, ...]]]):
        self._index = MappingProxyType({kind: MappingProxyType(dict(fields)) for kind, fields in index.items()})

    def references_of(self, kind: ResourceKind, field: KeyField = KeyField.EMS_REF) -> list[str]:
        """Values stored under (kind, field), empty when never touched"""
        fields = self._index.get(kind)
        if fields is None:
            return []
        return list(fields.get(field, ()))

    def name_references(self, kind: ResourceKind) -> list[str]:
        return self.references_of(kind, KeyField.NAME)

    def is_empty(self, kind: ResourceKind) -> bool:
        fields = self._index.get(kind)
        return not fields or not any(fields.values())

    def kinds(self) -> list[ResourceKind]:
        """Kinds holding at least one reference"""
        return [kind for kind in self._index if not self.is_empty(kind)]

    def counts(self) -> dict[ResourceKind, int]:
        return {kind: sum(len(v) for v in self._index[kind].values()) for kind in self.kinds()}

    def to_dict(self) -> dict[str, dict[str, list[str]]]:
        """JSON-friendly form: {kind: {field: [values]}}"""
        return {
            kind.value: {f.value: list(values) for f, values in fields.items()}
            for kind, fields in self._index.items()
            if any(fields.values())
        }

    def __iter__(self) -> Iterator[Target]:
        for kind, fields in self._index.items():
            for f, values in fields.items():
                for value in values:
                    yield Target(kind, ReferenceKey(f, value))

    def __contains__(self, target: object) -> bool:
        if not isinstance(target, Target):
            return False
        return target.key.value in self._index.get(target.kind, {}).get(target.key.field, ())

    def __len__(self) -> int:
        return sum(len(values) for fields in self._index.values() for values in fields.values())
