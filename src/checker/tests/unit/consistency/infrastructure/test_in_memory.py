"""Unit tests for the in-memory collaborator adapters."""

import asyncio

import pytest

from consistency.domain.value_objects import (
    LABEL_UID,
    DeleteOptions,
    PhysicalObject,
    VirtualObject,
)
from consistency.infrastructure.in_memory import (
    EventReadinessGate,
    InMemoryPhysicalStore,
    InMemoryTenantRegistry,
    InMemoryTenantStore,
)
from consistency.ports.collaborators import (
    PhysicalCache,
    PhysicalStore,
    ReadinessGate,
    TenantRegistry,
    TenantStore,
)
from consistency.ports.exceptions import (
    EnqueueError,
    ObjectNotFoundError,
    PreconditionFailedError,
    TransientStoreError,
)


class TestProtocolConformance:
    """The adapters satisfy the collaborator protocols."""

    def test_registry(self):
        assert isinstance(InMemoryTenantRegistry(), TenantRegistry)

    def test_tenant_store(self):
        assert isinstance(InMemoryTenantStore(), TenantStore)

    def test_physical_store_is_cache_and_store(self):
        store = InMemoryPhysicalStore()
        assert isinstance(store, PhysicalCache)
        assert isinstance(store, PhysicalStore)

    def test_gate(self):
        assert isinstance(EventReadinessGate(), ReadinessGate)


class TestInMemoryTenantRegistry:
    def test_add_and_remove(self):
        registry = InMemoryTenantRegistry(["t1"])
        registry.add("t2")
        registry.remove("t1")
        registry.remove("missing")

        assert registry.list_tenants() == frozenset({"t2"})


class TestInMemoryTenantStore:
    """Tests for the tenant store double."""

    @pytest.mark.asyncio
    async def test_get_unknown_object(self):
        store = InMemoryTenantStore()
        store.add_tenant("t1")

        with pytest.raises(ObjectNotFoundError) as exc_info:
            await store.get_virtual_object("t1", "ns1")

        assert exc_info.value.tenant == "t1"

    @pytest.mark.asyncio
    async def test_unknown_tenant_is_not_found(self):
        with pytest.raises(ObjectNotFoundError):
            await InMemoryTenantStore().list_virtual_objects("ghost")

    @pytest.mark.asyncio
    async def test_failing_tenant_is_transient(self):
        store = InMemoryTenantStore()
        store.put(VirtualObject(name="ns1", tenant="t1", uid="u1"))
        store.fail_listing_for("t1")

        with pytest.raises(TransientStoreError):
            await store.list_virtual_objects("t1")
        with pytest.raises(TransientStoreError):
            await store.get_virtual_object("t1", "ns1")

        store.fail_listing_for("t1", failing=False)
        assert len(await store.list_virtual_objects("t1")) == 1

    @pytest.mark.asyncio
    async def test_requeue_failure(self):
        store = InMemoryTenantStore()
        store.fail_requeue()

        with pytest.raises(EnqueueError):
            await store.requeue_virtual_object(
                "t1", VirtualObject(name="ns1", tenant="t1", uid="u1")
            )
        assert store.requeued == []


class TestInMemoryPhysicalStore:
    """Tests for the guarded delete."""

    @pytest.mark.asyncio
    async def test_delete_with_matching_precondition(self):
        store = InMemoryPhysicalStore(
            [PhysicalObject(name="t1-ns1", annotations={LABEL_UID: "u1"})]
        )

        await store.delete_physical_object("t1-ns1", DeleteOptions("u1"))

        assert "t1-ns1" not in store
        assert store.deletes[0][0] == "t1-ns1"

    @pytest.mark.asyncio
    async def test_delete_with_stale_precondition(self):
        store = InMemoryPhysicalStore(
            [PhysicalObject(name="t1-ns1", annotations={LABEL_UID: "u2"})]
        )

        with pytest.raises(PreconditionFailedError) as exc_info:
            await store.delete_physical_object("t1-ns1", DeleteOptions("u1"))

        assert exc_info.value.actual == "u2"
        assert "t1-ns1" in store

    @pytest.mark.asyncio
    async def test_delete_missing_object(self):
        with pytest.raises(ObjectNotFoundError):
            await InMemoryPhysicalStore().delete_physical_object(
                "t1-ns1", DeleteOptions("u1")
            )

    def test_failing_reads(self):
        store = InMemoryPhysicalStore([PhysicalObject(name="t1-ns1")])
        store.fail_reads()

        with pytest.raises(TransientStoreError):
            store.list_physical_objects()
        with pytest.raises(TransientStoreError):
            store.get_physical_object("t1-ns1")


class TestEventReadinessGate:
    """Tests for the readiness gate."""

    @pytest.mark.asyncio
    async def test_already_synced(self):
        gate = EventReadinessGate()
        gate.mark_synced()

        assert await gate.wait_for_sync(asyncio.Event()) is True

    @pytest.mark.asyncio
    async def test_sync_while_waiting(self):
        gate = EventReadinessGate()
        waiter = asyncio.create_task(gate.wait_for_sync(asyncio.Event()))
        await asyncio.sleep(0)

        gate.mark_synced()

        assert await asyncio.wait_for(waiter, timeout=1.0) is True

    @pytest.mark.asyncio
    async def test_stop_before_sync(self):
        gate = EventReadinessGate()
        stop_event = asyncio.Event()
        waiter = asyncio.create_task(gate.wait_for_sync(stop_event))
        await asyncio.sleep(0)

        stop_event.set()

        assert await asyncio.wait_for(waiter, timeout=1.0) is False
