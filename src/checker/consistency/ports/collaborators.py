"""Collaborator protocols for the Consistency bounded context.

The checker never talks to a store directly. Each protocol below is a narrow
port onto one collaborator; adapters raise the exceptions declared in
``consistency.ports.exceptions``.
"""

from __future__ import annotations

import asyncio
from collections.abc import Sequence
from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from consistency.domain.value_objects import (
        DeleteOptions,
        PhysicalObject,
        TenantName,
        VirtualObject,
    )


@runtime_checkable
class TenantRegistry(Protocol):
    """Source of the currently known tenants.

    The set may grow or shrink between calls; the checker never mutates it.
    """

    def list_tenants(self) -> frozenset[TenantName]:
        """Return the tenants known right now."""
        ...


@runtime_checkable
class TenantStore(Protocol):
    """Read access to tenant stores plus the sync path's work queues."""

    async def list_virtual_objects(self, tenant: TenantName) -> Sequence[VirtualObject]:
        """List every virtual object of ``tenant``.

        Raises:
            ObjectNotFoundError: If the tenant itself is unknown
            TransientStoreError: If the listing failed
        """
        ...

    async def get_virtual_object(self, tenant: TenantName, name: str) -> VirtualObject:
        """Get one virtual object.

        Raises:
            ObjectNotFoundError: If the object does not exist
            TransientStoreError: If the lookup failed
        """
        ...

    async def requeue_virtual_object(
        self, tenant: TenantName, virtual_object: VirtualObject
    ) -> None:
        """Submit ``virtual_object`` to the sync path's queue for ``tenant``.

        Raises:
            EnqueueError: If the object could not be queued
        """
        ...


@runtime_checkable
class PhysicalCache(Protocol):
    """Local, externally maintained cache of the super store."""

    def list_physical_objects(self) -> Sequence[PhysicalObject]:
        """Return every cached physical object, unfiltered.

        Raises:
            TransientStoreError: If the cache cannot be read
        """
        ...

    def get_physical_object(self, name: str) -> PhysicalObject:
        """Get one cached physical object by name.

        Raises:
            ObjectNotFoundError: If no object has this name
            TransientStoreError: If the cache cannot be read
        """
        ...


@runtime_checkable
class PhysicalStore(Protocol):
    """Mutating access to the super store. Only deletes are needed."""

    async def delete_physical_object(self, name: str, options: DeleteOptions) -> None:
        """Delete ``name`` if its fingerprint still matches the precondition.

        Raises:
            PreconditionFailedError: If the object changed since it was read
            ObjectNotFoundError: If the object is already gone
            TransientStoreError: If the delete failed
        """
        ...


@runtime_checkable
class ReadinessGate(Protocol):
    """Barrier reporting when the backing caches finished their initial sync."""

    async def wait_for_sync(self, stop_event: asyncio.Event) -> bool:
        """Block until caches are synced.

        Returns:
            True once synced, False if ``stop_event`` was set first.
        """
        ...
