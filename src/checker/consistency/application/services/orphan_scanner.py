"""Super store orphan scan.

Walks every cached physical object once per cycle and deletes the ones whose
virtual owner no longer exists or has been recreated under a new identity.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from consistency.domain.identity import fingerprints_match, owner_of
from consistency.domain.value_objects import (
    DeletePhysical,
    PhysicalObject,
    RemediationDecision,
)
from consistency.ports.exceptions import ObjectNotFoundError, TransientStoreError

if TYPE_CHECKING:
    from consistency.application.observability import ConsistencyCheckerProbe
    from consistency.application.services.remediation_executor import (
        RemediationExecutor,
    )
    from consistency.ports.collaborators import PhysicalCache, TenantStore


class OrphanScanner:
    """Finds physical objects without a live, matching virtual owner.

    Must only run after every tenant scan of the cycle has finished.
    Objects without owner annotations are not managed by the syncer and
    are left alone.
    """

    def __init__(
        self,
        physical_cache: PhysicalCache,
        tenant_store: TenantStore,
        executor: RemediationExecutor,
        probe: ConsistencyCheckerProbe,
    ) -> None:
        self._physical_cache = physical_cache
        self._tenant_store = tenant_store
        self._executor = executor
        self._probe = probe

    async def scan_physical(
        self, probe: ConsistencyCheckerProbe | None = None
    ) -> list[RemediationDecision]:
        """Check every cached physical object against its virtual owner.

        Returns:
            The delete decisions emitted, in listing order
        """
        probe = probe or self._probe

        try:
            physical_objects = self._physical_cache.list_physical_objects()
        except TransientStoreError as e:
            probe.physical_objects_list_failed(e)
            return []

        decisions: list[RemediationDecision] = []
        for physical in physical_objects:
            decision = await self._check(physical, probe)
            if decision is None:
                continue
            decisions.append(decision)
            await self._executor.execute(decision, probe=probe)

        return decisions

    async def _check(
        self, physical: PhysicalObject, probe: ConsistencyCheckerProbe
    ) -> RemediationDecision | None:
        owner = owner_of(physical)
        if owner is None:
            return None

        try:
            virtual = await self._tenant_store.get_virtual_object(
                owner.tenant, owner.virtual_name
            )
        except ObjectNotFoundError:
            return self._delete(physical)
        except TransientStoreError as e:
            probe.virtual_object_lookup_failed(owner.tenant, owner.virtual_name, e)
            return None

        if fingerprints_match(physical, virtual):
            return None

        probe.fingerprint_mismatch_detected(
            physical.name, owner.tenant, owner.virtual_name, scanner="orphan_scan"
        )
        return self._delete(physical)

    @staticmethod
    def _delete(physical: PhysicalObject) -> DeletePhysical:
        return DeletePhysical(
            physical_name=physical.name,
            expected_fingerprint=physical.delegated_uid or "",
        )
