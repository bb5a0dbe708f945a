"""
core/data/inventory/store.py - Persisted inventory graph

The local side of reference expansion: instances as last stored, with their
known relations. Real deployments plug their own store in through the
InventoryStore protocol; InMemoryInventoryStore backs tests and the CLI
(loaded from a JSON snapshot).

Snapshot format:
    {
        "stacks": [{"ems_ref": "arn:...", "name": "web", "parent": "arn:..."}],
        "instances": [
            {
                "ems_ref": "i-0abc",
                "stack": "arn:...",
                "cloud_subnets": ["subnet-1"],
                "floating_ips": ["eipalloc-1"],
                "network_ports": ["eni-1"],
                "key_pairs": ["deploy"]
            }
        ]
    }
"""

from __future__ import annotations

import json
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Protocol

from core.exceptions import ValidationError


@dataclass(eq=False)
class StoredStack:
    """Orchestration stack, possibly nested in a parent stack"""

    ems_ref: str | None
    name: str = ""
    parent: StoredStack | None = None

    def ancestors(self) -> list[StoredStack]:
        """Parent chain, nearest first (stops on cycles)"""
        chain: list[StoredStack] = []
        seen = {id(self)}
        current = self.parent
        while current is not None and id(current) not in seen:
            chain.append(current)
            seen.add(id(current))
            current = current.parent
        return chain


@dataclass
class StoredRef:
    """Related object known only by its provider id"""

    ems_ref: str | None


@dataclass
class StoredKeyPair:
    name: str | None
    ems_ref: str | None = None


@dataclass
class StoredInstance:
    """Instance row with eagerly loaded relations"""

    ems_ref: str
    orchestration_stack: StoredStack | None = None
    cloud_subnets: list[StoredRef] = field(default_factory=list)
    floating_ips: list[StoredRef] = field(default_factory=list)
    network_ports: list[StoredRef] = field(default_factory=list)
    key_pairs: list[StoredKeyPair] = field(default_factory=list)


class InventoryStore(Protocol):
    def find_instances(self, ems_refs: Sequence[str]) -> list[StoredInstance]:
        """Instances whose ems_ref is in ems_refs, relations loaded"""
        ...


class InMemoryInventoryStore:
    """Dictionary-backed InventoryStore"""

    def __init__(self, instances: Iterable[StoredInstance] = ()):
        self._instances = {instance.ems_ref: instance for instance in instances}

    def find_instances(self, ems_refs: Sequence[str]) -> list[StoredInstance]:
        return [self._instances[ref] for ref in dict.fromkeys(ems_refs) if ref in self._instances]

    def __len__(self) -> int:
        return len(self._instances)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> InMemoryInventoryStore:
        """Build a store from a snapshot dict (format in the module docstring)"""
        stack_rows = data.get("stacks") or []
        stacks: dict[str, StoredStack] = {}
        for row in stack_rows:
            ref = row.get("ems_ref")
            if not ref:
                raise ValidationError("stacks[].ems_ref", ref, "non-empty stack id")
            stacks[ref] = StoredStack(ems_ref=ref, name=row.get("name", ""))

        for row in stack_rows:
            parent_ref = row.get("parent")
            if parent_ref:
                if parent_ref not in stacks:
                    raise ValidationError("stacks[].parent", parent_ref, "id of a listed stack")
                stacks[row["ems_ref"]].parent = stacks[parent_ref]

        instances = []
        for row in data.get("instances") or []:
            ref = row.get("ems_ref")
            if not ref:
                raise ValidationError("instances[].ems_ref", ref, "non-empty instance id")

            stack_ref = row.get("stack")
            if stack_ref and stack_ref not in stacks:
                raise ValidationError("instances[].stack", stack_ref, "id of a listed stack")

            instances.append(
                StoredInstance(
                    ems_ref=ref,
                    orchestration_stack=stacks.get(stack_ref) if stack_ref else None,
                    cloud_subnets=[StoredRef(r) for r in row.get("cloud_subnets") or []],
                    floating_ips=[StoredRef(r) for r in row.get("floating_ips") or []],
                    network_ports=[StoredRef(r) for r in row.get("network_ports") or []],
                    key_pairs=[StoredKeyPair(name) for name in row.get("key_pairs") or []],
                )
            )

        return cls(instances)

    @classmethod
    def load(cls, path: str | Path) -> InMemoryInventoryStore:
        """Load a JSON snapshot file"""
        with open(path, encoding="utf-8") as fh:
            return cls.from_dict(json.load(fh))
