"""
core/data/inventory - Targeted inventory refresh

Given the instances an event reported as changed, works out every related
object that must be refreshed with them and fetches their current state in
batched, id-filtered calls.

Classes:
    - TargetCollection: one refresh pass (seed, expand, seal, fetch)
    - TargetAccumulator / TargetView: the reference set and its sealed view
    - LocalGraphExpander / RemoteGraphExpander: stored and live expansion
    - BatchFetcher: per-kind fetch
    - InMemoryInventoryStore: snapshot-backed InventoryStore

Usage:
    from core.data.inventory import InMemoryInventoryStore, TargetCollection, instance_seeds

    store = InMemoryInventoryStore.load("inventory.json")
    collection = TargetCollection(session, store, instance_seeds(["i-0abc"]))
    records = collection.collect_all()
"""

from .collector import TargetCollection
from .expand import LocalGraphExpander, RemoteGraphExpander
from .fetcher import BatchFetcher
from .seeds import instance_seeds, seeds_from_event
from .store import (
    InMemoryInventoryStore,
    InventoryStore,
    StoredInstance,
    StoredKeyPair,
    StoredRef,
    StoredStack,
)
from .targets import ReferenceSource, TargetAccumulator, TargetView
from .types import (
    ChangedObject,
    InstancePayload,
    KeyField,
    NetworkPortPayload,
    RawRecord,
    ReferenceKey,
    ResourceKind,
    Target,
    fetch_path,
)

__all__ = [
    # Pass
    "TargetCollection",
    # Targets
    "TargetAccumulator",
    "TargetView",
    "ReferenceSource",
    # Expansion
    "LocalGraphExpander",
    "RemoteGraphExpander",
    # Fetch
    "BatchFetcher",
    # Seeds
    "instance_seeds",
    "seeds_from_event",
    # Store
    "InventoryStore",
    "InMemoryInventoryStore",
    "StoredInstance",
    "StoredStack",
    "StoredRef",
    "StoredKeyPair",
    # Types
    "ChangedObject",
    "InstancePayload",
    "KeyField",
    "NetworkPortPayload",
    "RawRecord",
    "ReferenceKey",
    "ResourceKind",
    "Target",
    "fetch_path",
]
