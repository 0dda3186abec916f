"""Periodic consistency checker.

The checker runs as a single background task owned by the host process:

1. Wait for the backing caches to finish their initial sync (or give up
   when the stop signal fires first).
2. Run a check cycle: all tenant scans concurrently, then one orphan scan.
3. Sleep for the configured period after the cycle completes, then repeat
   until stopped.

Reads of the tenant stores and the super store are not transactional, so a
cycle may act on a skewed snapshot. The fingerprint-guarded delete and the
idempotent requeue keep such false positives harmless; the next cycle or the
event-driven sync path repairs them.
"""

from __future__ import annotations

import asyncio
import time
from itertools import count
from typing import TYPE_CHECKING

from consistency.domain.value_objects import CheckerState, TenantName
from consistency.ports.exceptions import CacheSyncError
from shared_kernel.observability_context import ObservationContext

if TYPE_CHECKING:
    from consistency.application.observability import ConsistencyCheckerProbe
    from consistency.application.services.orphan_scanner import OrphanScanner
    from consistency.application.services.tenant_scanner import TenantScanner
    from consistency.ports.collaborators import ReadinessGate, TenantRegistry


class PeriodChecker:
    """Drives check cycles on a fixed, non-overlapping period.

    State transitions: UNINITIALIZED -> WAITING_FOR_SYNC -> RUNNING -> STOPPED,
    or WAITING_FOR_SYNC -> STOPPED when the caches never sync or the readiness
    gate fails.
    """

    def __init__(
        self,
        tenant_registry: TenantRegistry,
        readiness_gate: ReadinessGate,
        tenant_scanner: TenantScanner,
        orphan_scanner: OrphanScanner,
        probe: ConsistencyCheckerProbe,
        period_seconds: float = 60.0,
        resource_kind: str = "namespace",
    ) -> None:
        """Initialize the checker.

        Args:
            tenant_registry: Source of the known tenants
            readiness_gate: Initial cache sync barrier
            tenant_scanner: Scanner run once per tenant per cycle
            orphan_scanner: Scanner run once per cycle after all tenant scans
            probe: Observability probe for logging/metrics
            period_seconds: Pause between the end of a cycle and the next one
            resource_kind: Kind of mirrored resource, attached to every event
        """
        if period_seconds <= 0:
            raise ValueError("period_seconds must be positive")
        self._tenant_registry = tenant_registry
        self._readiness_gate = readiness_gate
        self._tenant_scanner = tenant_scanner
        self._orphan_scanner = orphan_scanner
        self._period = period_seconds
        self._resource_kind = resource_kind
        self._context = ObservationContext(resource_kind=resource_kind)
        self._probe = probe.with_context(self._context)
        self._state = CheckerState.UNINITIALIZED
        self._cycles = count(1)

    @property
    def state(self) -> CheckerState:
        return self._state

    @property
    def period_seconds(self) -> float:
        return self._period

    @property
    def resource_kind(self) -> str:
        return self._resource_kind

    async def start(self, stop_event: asyncio.Event) -> None:
        """Run the checker until ``stop_event`` is set.

        Blocks for the lifetime of the checker, so it should be run as a
        background task.

        Raises:
            CacheSyncError: If ``stop_event`` fired before the caches synced;
                no cycle has run in that case.
            Exception: Whatever the readiness gate raised; the checker is
                STOPPED afterwards.
            RuntimeError: If the checker was already started.
        """
        if self._state is not CheckerState.UNINITIALIZED:
            raise RuntimeError(f"checker cannot start from state {self._state.value}")

        self._state = CheckerState.WAITING_FOR_SYNC
        self._probe.waiting_for_sync()
        try:
            synced = await self._readiness_gate.wait_for_sync(stop_event)
        except Exception as e:
            self._state = CheckerState.STOPPED
            self._probe.sync_crashed(e)
            raise
        except asyncio.CancelledError:
            self._state = CheckerState.STOPPED
            raise
        if not synced:
            self._state = CheckerState.STOPPED
            self._probe.sync_failed()
            raise CacheSyncError(
                f"failed to wait for caches to sync before starting "
                f"{self._resource_kind} checker"
            )

        self._state = CheckerState.RUNNING
        self._probe.checker_started(self._period)
        try:
            while not stop_event.is_set():
                try:
                    await self.run_cycle()
                except Exception as e:
                    self._probe.cycle_crashed(e)

                if await self._wait_for_stop(stop_event):
                    break
        finally:
            self._state = CheckerState.STOPPED
            self._probe.checker_stopped()

    async def run_cycle(self) -> None:
        """Run one full check cycle.

        Tenant scans run concurrently and are joined before the orphan scan
        starts, so every requeue of this cycle happens before any orphan
        decision. A crash in one tenant's scan is reported and does not
        affect the others.
        """
        tenants = sorted(self._tenant_registry.list_tenants())
        if not tenants:
            self._probe.cycle_skipped_no_tenants()
            return

        context = self._context.with_cycle(f"c-{next(self._cycles)}")
        probe = self._probe.with_context(context)
        started = time.perf_counter()
        try:
            await self._scan_tenants(tenants, context)
            await self._orphan_scanner.scan_physical(probe=probe)
        finally:
            probe.scan_completed(len(tenants), time.perf_counter() - started)

    async def _scan_tenants(
        self, tenants: list[TenantName], context: ObservationContext
    ) -> None:
        results = await asyncio.gather(
            *(
                self._tenant_scanner.scan_tenant(
                    tenant, probe=self._probe.with_context(context.with_tenant(tenant))
                )
                for tenant in tenants
            ),
            return_exceptions=True,
        )
        for tenant, result in zip(tenants, results):
            if isinstance(result, asyncio.CancelledError):
                raise result
            if isinstance(result, BaseException):
                self._probe.with_context(context).tenant_scan_crashed(tenant, result)

    async def _wait_for_stop(self, stop_event: asyncio.Event) -> bool:
        """Sleep for one period; return True if stopped in the meantime."""
        try:
            await asyncio.wait_for(stop_event.wait(), timeout=self._period)
        except asyncio.TimeoutError:
            return False
        return True
