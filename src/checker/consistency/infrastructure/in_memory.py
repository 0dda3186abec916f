"""In-memory collaborator adapters.

Dictionary-backed implementations of every consistency port. They back the
test suite and let the checker be embedded without a real control plane.
Failure switches allow transient errors to be injected per tenant.
"""

from __future__ import annotations

import asyncio
from collections.abc import Iterable, Sequence

from consistency.domain.value_objects import (
    DeleteOptions,
    PhysicalObject,
    TenantName,
    VirtualObject,
)
from consistency.ports.exceptions import (
    EnqueueError,
    ObjectNotFoundError,
    PreconditionFailedError,
    TransientStoreError,
)


class InMemoryTenantRegistry:
    """Tenant registry holding a mutable set of tenant names."""

    def __init__(self, tenants: Iterable[TenantName] = ()) -> None:
        self._tenants: set[TenantName] = set(tenants)

    def add(self, tenant: TenantName) -> None:
        self._tenants.add(tenant)

    def remove(self, tenant: TenantName) -> None:
        self._tenants.discard(tenant)

    def list_tenants(self) -> frozenset[TenantName]:
        return frozenset(self._tenants)


class InMemoryTenantStore:
    """Tenant stores keyed by tenant, plus a record of requeued objects."""

    def __init__(self) -> None:
        self._objects: dict[TenantName, dict[str, VirtualObject]] = {}
        self._failing_tenants: set[TenantName] = set()
        self._fail_requeue = False
        self.requeued: list[tuple[TenantName, VirtualObject]] = []

    def add_tenant(self, tenant: TenantName) -> None:
        self._objects.setdefault(tenant, {})

    def put(self, virtual_object: VirtualObject) -> None:
        self._objects.setdefault(virtual_object.tenant, {})[virtual_object.name] = (
            virtual_object
        )

    def delete(self, tenant: TenantName, name: str) -> None:
        self._objects.get(tenant, {}).pop(name, None)

    def fail_listing_for(self, tenant: TenantName, failing: bool = True) -> None:
        """Make list and get calls for ``tenant`` raise TransientStoreError."""
        if failing:
            self._failing_tenants.add(tenant)
        else:
            self._failing_tenants.discard(tenant)

    def fail_requeue(self, failing: bool = True) -> None:
        """Make every requeue raise EnqueueError."""
        self._fail_requeue = failing

    def _objects_of(self, tenant: TenantName) -> dict[str, VirtualObject]:
        if tenant in self._failing_tenants:
            raise TransientStoreError(f"tenant {tenant} store unavailable")
        try:
            return self._objects[tenant]
        except KeyError:
            raise ObjectNotFoundError(tenant) from None

    async def list_virtual_objects(self, tenant: TenantName) -> Sequence[VirtualObject]:
        return list(self._objects_of(tenant).values())

    async def get_virtual_object(self, tenant: TenantName, name: str) -> VirtualObject:
        try:
            return self._objects_of(tenant)[name]
        except KeyError:
            raise ObjectNotFoundError(name, tenant=tenant) from None

    async def requeue_virtual_object(
        self, tenant: TenantName, virtual_object: VirtualObject
    ) -> None:
        if self._fail_requeue:
            raise EnqueueError(f"queue for tenant {tenant} is shut down")
        self.requeued.append((tenant, virtual_object))


class InMemoryPhysicalStore:
    """Super store serving as both the local cache and the mutator."""

    def __init__(self, objects: Iterable[PhysicalObject] = ()) -> None:
        self._objects: dict[str, PhysicalObject] = {obj.name: obj for obj in objects}
        self._fail_reads = False
        self.deletes: list[tuple[str, DeleteOptions]] = []

    def put(self, physical: PhysicalObject) -> None:
        self._objects[physical.name] = physical

    def fail_reads(self, failing: bool = True) -> None:
        """Make list and get calls raise TransientStoreError."""
        self._fail_reads = failing

    def __contains__(self, name: object) -> bool:
        return name in self._objects

    def list_physical_objects(self) -> Sequence[PhysicalObject]:
        if self._fail_reads:
            raise TransientStoreError("super store cache unavailable")
        return list(self._objects.values())

    def get_physical_object(self, name: str) -> PhysicalObject:
        if self._fail_reads:
            raise TransientStoreError("super store cache unavailable")
        try:
            return self._objects[name]
        except KeyError:
            raise ObjectNotFoundError(name) from None

    async def delete_physical_object(self, name: str, options: DeleteOptions) -> None:
        current = self._objects.get(name)
        if current is None:
            raise ObjectNotFoundError(name)
        actual = current.delegated_uid or ""
        if actual != options.precondition_fingerprint:
            raise PreconditionFailedError(
                name, options.precondition_fingerprint, current.delegated_uid
            )
        del self._objects[name]
        self.deletes.append((name, options))


class EventReadinessGate:
    """Readiness gate backed by an ``asyncio.Event`` the host sets once synced."""

    def __init__(self, synced: asyncio.Event | None = None) -> None:
        self._synced = synced or asyncio.Event()

    def mark_synced(self) -> None:
        self._synced.set()

    async def wait_for_sync(self, stop_event: asyncio.Event) -> bool:
        if self._synced.is_set():
            return True
        synced = asyncio.ensure_future(self._synced.wait())
        stopped = asyncio.ensure_future(stop_event.wait())
        try:
            await asyncio.wait({synced, stopped}, return_when=asyncio.FIRST_COMPLETED)
        finally:
            synced.cancel()
            stopped.cancel()
        return self._synced.is_set()
