"""
core/data - Data Services Layer

Data collection services shared by the CLI and library callers.

Modules:
    - inventory: Targeted inventory refresh (reference expansion and batch fetch)

Design Principle:
    core/ = How (infrastructure) + Data (shared services)
    cli/ = Entry points

Usage:
    from core.data.inventory import TargetCollection, instance_seeds
"""

from .inventory import TargetCollection, instance_seeds, seeds_from_event

__all__ = [
    "TargetCollection",
    "instance_seeds",
    "seeds_from_event",
]
