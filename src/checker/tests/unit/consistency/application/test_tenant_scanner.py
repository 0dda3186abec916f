"""Unit tests for TenantScanner.

Uses the in-memory stores so that requeues and deletes can be asserted on
the collaborators themselves.
"""

from unittest.mock import AsyncMock, MagicMock

import pytest

from consistency.application.services.remediation_executor import (
    RemediationExecutor,
)
from consistency.application.services.tenant_scanner import TenantScanner
from consistency.domain.value_objects import (
    LABEL_CLUSTER,
    LABEL_NAMESPACE,
    LABEL_UID,
    PhysicalObject,
    RemedyStat,
    ReportMismatch,
    RequeueVirtual,
    VirtualObject,
)
from consistency.ports.exceptions import TransientStoreError


def _mirror(tenant: str, name: str, uid: str) -> PhysicalObject:
    return PhysicalObject(
        name=f"{tenant}-{name}",
        annotations={LABEL_CLUSTER: tenant, LABEL_NAMESPACE: name, LABEL_UID: uid},
    )


@pytest.fixture
def scanner(tenant_store, physical_store, probe) -> TenantScanner:
    executor = RemediationExecutor(
        physical_store=physical_store, tenant_store=tenant_store, probe=probe
    )
    return TenantScanner(
        tenant_store=tenant_store,
        physical_cache=physical_store,
        executor=executor,
        probe=probe,
    )


class TestMissingPhysicalObject:
    """Virtual objects without a mirror are requeued."""

    @pytest.mark.asyncio
    async def test_requeues_virtual_object_without_mirror(
        self, scanner, tenant_store, stats
    ):
        """Tenant t1 has ns1 but the super store has nothing."""
        ns1 = VirtualObject(name="ns1", tenant="t1", uid="u1")
        tenant_store.put(ns1)

        decisions = await scanner.scan_tenant("t1")

        assert decisions == [RequeueVirtual(tenant="t1", virtual_object=ns1)]
        assert tenant_store.requeued == [("t1", ns1)]
        assert stats.get(RemedyStat.VIRTUAL_OBJECTS_REQUEUED) == 1

    @pytest.mark.asyncio
    async def test_requeues_every_missing_object(self, scanner, tenant_store, physical_store):
        tenant_store.put(VirtualObject(name="ns1", tenant="t1", uid="u1"))
        tenant_store.put(VirtualObject(name="ns2", tenant="t1", uid="u2"))
        physical_store.put(_mirror("t1", "ns2", "u2"))

        decisions = await scanner.scan_tenant("t1")

        assert [d.virtual_object.name for d in decisions] == ["ns1"]

    @pytest.mark.asyncio
    async def test_failed_requeue_is_not_counted(self, scanner, tenant_store, stats):
        tenant_store.put(VirtualObject(name="ns1", tenant="t1", uid="u1"))
        tenant_store.fail_requeue()

        decisions = await scanner.scan_tenant("t1")

        assert len(decisions) == 1
        assert stats.get(RemedyStat.VIRTUAL_OBJECTS_REQUEUED) == 0


class TestConsistentObjects:
    """Consistent pairs produce no decisions."""

    @pytest.mark.asyncio
    async def test_matching_mirror_needs_nothing(
        self, scanner, tenant_store, physical_store, stats
    ):
        tenant_store.put(VirtualObject(name="ns1", tenant="t1", uid="u1"))
        physical_store.put(_mirror("t1", "ns1", "u1"))

        decisions = await scanner.scan_tenant("t1")

        assert decisions == []
        assert tenant_store.requeued == []
        assert stats.snapshot()["counters"] == {
            "orphans_deleted": 0,
            "virtual_objects_requeued": 0,
        }

    @pytest.mark.asyncio
    async def test_empty_tenant(self, scanner, tenant_store):
        tenant_store.add_tenant("t1")

        assert await scanner.scan_tenant("t1") == []


class TestFingerprintMismatch:
    """Stale mirrors are reported, never deleted, by the tenant scan."""

    @pytest.mark.asyncio
    async def test_reports_mismatch_without_mutation(
        self, scanner, tenant_store, physical_store, mock_logger
    ):
        tenant_store.put(VirtualObject(name="ns1", tenant="t1", uid="u2"))
        physical_store.put(_mirror("t1", "ns1", "u1"))

        decisions = await scanner.scan_tenant("t1")

        assert decisions == [
            ReportMismatch(physical_name="t1-ns1", tenant="t1", virtual_name="ns1")
        ]
        assert "t1-ns1" in physical_store
        assert physical_store.deletes == []
        assert tenant_store.requeued == []
        mock_logger.warning.assert_called_once()
        assert mock_logger.warning.call_args.args[0] == "fingerprint_mismatch_detected"


class TestLookupFailures:
    """Non-semantic failures are logged and never treated as drift."""

    @pytest.mark.asyncio
    async def test_listing_failure_aborts_tenant(self, scanner, tenant_store, mock_logger):
        tenant_store.put(VirtualObject(name="ns1", tenant="t1", uid="u1"))
        tenant_store.fail_listing_for("t1")

        decisions = await scanner.scan_tenant("t1")

        assert decisions == []
        assert tenant_store.requeued == []
        assert mock_logger.error.call_args.args[0] == "virtual_objects_list_failed"

    @pytest.mark.asyncio
    async def test_unknown_tenant_aborts_scan(self, scanner, tenant_store, mock_logger):
        """A vanished tenant store is expected churn, not an error."""
        assert await scanner.scan_tenant("ghost") == []
        assert tenant_store.requeued == []
        mock_logger.error.assert_not_called()
        mock_logger.info.assert_called_once_with("tenant_store_not_found", tenant="ghost")

    @pytest.mark.asyncio
    async def test_physical_lookup_error_is_not_drift(self, tenant_store, probe):
        """A failing cache lookup must not trigger a requeue."""
        tenant_store.put(VirtualObject(name="ns1", tenant="t1", uid="u1"))
        cache = MagicMock()
        cache.get_physical_object.side_effect = TransientStoreError("cache unavailable")
        executor = AsyncMock(spec=RemediationExecutor)
        scanner = TenantScanner(
            tenant_store=tenant_store,
            physical_cache=cache,
            executor=executor,
            probe=probe,
        )

        decisions = await scanner.scan_tenant("t1")

        assert decisions == []
        executor.execute.assert_not_called()
        cache.get_physical_object.assert_called_once_with("t1-ns1")

    @pytest.mark.asyncio
    async def test_decisions_go_through_executor_with_scoped_probe(
        self, tenant_store, physical_store, probe
    ):
        tenant_store.put(VirtualObject(name="ns1", tenant="t1", uid="u1"))
        executor = AsyncMock(spec=RemediationExecutor)
        scanner = TenantScanner(
            tenant_store=tenant_store,
            physical_cache=physical_store,
            executor=executor,
            probe=probe,
        )
        scoped_probe = MagicMock()

        decisions = await scanner.scan_tenant("t1", probe=scoped_probe)

        executor.execute.assert_awaited_once_with(decisions[0], probe=scoped_probe)
        scoped_probe.tenant_scan_started.assert_called_once_with("t1")
