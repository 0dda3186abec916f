"""Consistency ports (interfaces) module.

Ports define the contracts between the checker and the collaborators that
own the caches, stores and queues it inspects.
"""

from consistency.ports.collaborators import (
    PhysicalCache,
    PhysicalStore,
    ReadinessGate,
    TenantRegistry,
    TenantStore,
)
from consistency.ports.exceptions import (
    CacheSyncError,
    ConsistencyCheckerError,
    EnqueueError,
    ObjectNotFoundError,
    PreconditionFailedError,
    TransientStoreError,
)

__all__ = [
    "CacheSyncError",
    "ConsistencyCheckerError",
    "EnqueueError",
    "ObjectNotFoundError",
    "PhysicalCache",
    "PhysicalStore",
    "PreconditionFailedError",
    "ReadinessGate",
    "TenantRegistry",
    "TenantStore",
    "TransientStoreError",
]
