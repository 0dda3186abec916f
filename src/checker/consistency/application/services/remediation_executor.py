"""Remediation executor.

Applies the decisions produced by the scanners. Nothing is retried here: a
failed delete or requeue is reported and picked up again by the next cycle
or by the event-driven sync path.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from consistency.domain.value_objects import (
    DeleteOptions,
    DeletePhysical,
    PropagationPolicy,
    RemediationDecision,
    ReportMismatch,
    RequeueVirtual,
)
from consistency.ports.exceptions import (
    EnqueueError,
    ObjectNotFoundError,
    PreconditionFailedError,
    TransientStoreError,
)

if TYPE_CHECKING:
    from consistency.application.observability import ConsistencyCheckerProbe
    from consistency.ports.collaborators import PhysicalStore, TenantStore


class RemediationExecutor:
    """Executes remediation decisions against the stores.

    Deletes are always conditional on the fingerprint the scanner observed,
    which makes them safe to race against concurrent recreates.
    """

    def __init__(
        self,
        physical_store: PhysicalStore,
        tenant_store: TenantStore,
        probe: ConsistencyCheckerProbe,
        propagation_policy: PropagationPolicy = PropagationPolicy.BACKGROUND,
    ) -> None:
        self._physical_store = physical_store
        self._tenant_store = tenant_store
        self._probe = probe
        self._propagation_policy = propagation_policy

    async def execute(
        self,
        decision: RemediationDecision,
        probe: ConsistencyCheckerProbe | None = None,
    ) -> None:
        """Apply one decision.

        Args:
            decision: The decision to apply
            probe: Optional context-bound probe overriding the executor's own
        """
        probe = probe or self._probe
        match decision:
            case DeletePhysical():
                await self._delete_physical(decision, probe)
            case RequeueVirtual():
                await self._requeue_virtual(decision, probe)
            case ReportMismatch():
                # Stale physical objects are deleted by the orphan scan only.
                probe.fingerprint_mismatch_detected(
                    decision.physical_name,
                    decision.tenant,
                    decision.virtual_name,
                    scanner="tenant_scan",
                )
            case _:
                raise TypeError(f"Unknown remediation decision: {decision!r}")

    async def _delete_physical(
        self, decision: DeletePhysical, probe: ConsistencyCheckerProbe
    ) -> None:
        options = DeleteOptions(
            precondition_fingerprint=decision.expected_fingerprint,
            propagation_policy=self._propagation_policy,
        )
        try:
            await self._physical_store.delete_physical_object(
                decision.physical_name, options
            )
        except PreconditionFailedError as e:
            probe.orphan_delete_precondition_failed(decision.physical_name, e)
        except ObjectNotFoundError:
            probe.orphan_already_deleted(decision.physical_name)
        except TransientStoreError as e:
            probe.orphan_delete_failed(decision.physical_name, e)
        else:
            probe.orphan_deleted(decision.physical_name)

    async def _requeue_virtual(
        self, decision: RequeueVirtual, probe: ConsistencyCheckerProbe
    ) -> None:
        virtual_name = decision.virtual_object.name
        try:
            await self._tenant_store.requeue_virtual_object(
                decision.tenant, decision.virtual_object
            )
        except EnqueueError as e:
            probe.virtual_object_requeue_failed(decision.tenant, virtual_name, e)
        else:
            probe.virtual_object_requeued(decision.tenant, virtual_name)
