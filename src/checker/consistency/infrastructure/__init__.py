"""Consistency infrastructure module.

Concrete adapters for the consistency ports.
"""

from consistency.infrastructure.in_memory import (
    EventReadinessGate,
    InMemoryPhysicalStore,
    InMemoryTenantRegistry,
    InMemoryTenantStore,
)

__all__ = [
    "EventReadinessGate",
    "InMemoryPhysicalStore",
    "InMemoryTenantRegistry",
    "InMemoryTenantStore",
]
