"""Per-tenant consistency scan.

Walks one tenant's virtual objects and checks that each has a physical
mirror carrying the right fingerprint.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from consistency.domain.identity import fingerprints_match, physical_name_for
from consistency.domain.value_objects import (
    RemediationDecision,
    ReportMismatch,
    RequeueVirtual,
    TenantName,
    VirtualObject,
)
from consistency.ports.exceptions import ObjectNotFoundError, TransientStoreError

if TYPE_CHECKING:
    from consistency.application.observability import ConsistencyCheckerProbe
    from consistency.application.services.remediation_executor import (
        RemediationExecutor,
    )
    from consistency.ports.collaborators import PhysicalCache, TenantStore


class TenantScanner:
    """Finds virtual objects whose physical mirror is missing or stale.

    A missing mirror is repaired by requeuing the virtual object; a stale
    mirror is only reported, because the orphan scan owns that delete.
    """

    def __init__(
        self,
        tenant_store: TenantStore,
        physical_cache: PhysicalCache,
        executor: RemediationExecutor,
        probe: ConsistencyCheckerProbe,
    ) -> None:
        self._tenant_store = tenant_store
        self._physical_cache = physical_cache
        self._executor = executor
        self._probe = probe

    async def scan_tenant(
        self,
        tenant: TenantName,
        probe: ConsistencyCheckerProbe | None = None,
    ) -> list[RemediationDecision]:
        """Check every virtual object of ``tenant``.

        Listing failures, including a tenant store that no longer exists,
        abort the scan of this tenant without side effects.

        Args:
            tenant: The tenant to check
            probe: Optional context-bound probe for this scan

        Returns:
            The decisions emitted, in listing order
        """
        probe = probe or self._probe
        probe.tenant_scan_started(tenant)

        try:
            virtual_objects = await self._tenant_store.list_virtual_objects(tenant)
        except ObjectNotFoundError:
            # Tenant went away between the registry read and the listing.
            probe.tenant_store_not_found(tenant)
            return []
        except TransientStoreError as e:
            probe.virtual_objects_list_failed(tenant, e)
            return []

        decisions: list[RemediationDecision] = []
        for virtual_object in virtual_objects:
            decision = self._check(tenant, virtual_object, probe)
            if decision is None:
                continue
            decisions.append(decision)
            await self._executor.execute(decision, probe=probe)

        return decisions

    def _check(
        self,
        tenant: TenantName,
        virtual_object: VirtualObject,
        probe: ConsistencyCheckerProbe,
    ) -> RemediationDecision | None:
        target_name = physical_name_for(tenant, virtual_object.name)
        try:
            physical = self._physical_cache.get_physical_object(target_name)
        except ObjectNotFoundError:
            # Mirror is gone while the tenant object still exists.
            return RequeueVirtual(tenant=tenant, virtual_object=virtual_object)
        except TransientStoreError as e:
            probe.physical_object_lookup_failed(target_name, e)
            return None

        if fingerprints_match(physical, virtual_object):
            return None
        return ReportMismatch(
            physical_name=target_name,
            tenant=tenant,
            virtual_name=virtual_object.name,
        )
