"""Domain probes for the consistency checker.

Following Domain Oriented Observability, the probe captures domain-significant
events (drift found, remediation applied, cycle finished) without cluttering
the scanners with logging concerns. The default probe doubles as the metrics
sink: it keeps the remediation counters and scan durations in-process.
"""

from __future__ import annotations

from collections import Counter
from threading import Lock
from typing import TYPE_CHECKING, Any, Protocol

import structlog

from consistency.domain.value_objects import RemedyStat

if TYPE_CHECKING:
    from shared_kernel.observability_context import ObservationContext


class RemedyStats:
    """In-process remediation counters and scan duration statistics.

    Shared by every probe derived through ``with_context`` so that per-tenant
    probes feed the same totals.
    """

    def __init__(self) -> None:
        self._lock = Lock()
        self._counts: Counter[RemedyStat] = Counter()
        self._scan_count = 0
        self._last_scan_duration: float | None = None
        self._total_scan_duration = 0.0

    def increment(self, stat: RemedyStat, amount: int = 1) -> None:
        with self._lock:
            self._counts[stat] += amount

    def get(self, stat: RemedyStat) -> int:
        with self._lock:
            return self._counts[stat]

    def record_scan(self, duration_seconds: float) -> None:
        with self._lock:
            self._scan_count += 1
            self._last_scan_duration = duration_seconds
            self._total_scan_duration += duration_seconds

    @property
    def scan_count(self) -> int:
        return self._scan_count

    @property
    def last_scan_duration(self) -> float | None:
        return self._last_scan_duration

    def snapshot(self) -> dict[str, Any]:
        """Return a JSON-friendly copy of all statistics."""
        with self._lock:
            return {
                "counters": {stat.value: self._counts[stat] for stat in RemedyStat},
                "scans": self._scan_count,
                "last_scan_duration_seconds": self._last_scan_duration,
                "total_scan_duration_seconds": self._total_scan_duration,
            }


class ConsistencyCheckerProbe(Protocol):
    """Domain probe for the periodic consistency checker."""

    def waiting_for_sync(self) -> None:
        """Record that the checker is waiting for caches to sync."""
        ...

    def sync_failed(self) -> None:
        """Record that the stop signal fired before caches synced."""
        ...

    def sync_crashed(self, error: BaseException) -> None:
        """Record that the readiness gate failed while waiting for sync."""
        ...

    def checker_started(self, period_seconds: float) -> None:
        """Record that the periodic loop is running."""
        ...

    def checker_stopped(self) -> None:
        """Record that the periodic loop exited."""
        ...

    def cycle_skipped_no_tenants(self) -> None:
        """Record that a cycle was skipped because no tenant is known."""
        ...

    def scan_completed(self, tenant_count: int, duration_seconds: float) -> None:
        """Record the duration of a full check cycle."""
        ...

    def cycle_crashed(self, error: BaseException) -> None:
        """Record an unexpected failure that aborted a cycle."""
        ...

    def tenant_scan_started(self, tenant: str) -> None:
        """Record that one tenant is being checked."""
        ...

    def tenant_scan_crashed(self, tenant: str, error: BaseException) -> None:
        """Record an unexpected failure while checking one tenant."""
        ...

    def tenant_store_not_found(self, tenant: str) -> None:
        """Record that a registered tenant has no store to list."""
        ...

    def virtual_objects_list_failed(self, tenant: str, error: Exception) -> None:
        """Record that a tenant's objects could not be listed."""
        ...

    def physical_objects_list_failed(self, error: Exception) -> None:
        """Record that the super store cache could not be listed."""
        ...

    def physical_object_lookup_failed(self, physical_name: str, error: Exception) -> None:
        """Record that a physical lookup failed for a reason other than absence."""
        ...

    def virtual_object_lookup_failed(
        self, tenant: str, virtual_name: str, error: Exception
    ) -> None:
        """Record that a virtual lookup failed for a reason other than absence."""
        ...

    def fingerprint_mismatch_detected(
        self, physical_name: str, tenant: str, virtual_name: str, scanner: str
    ) -> None:
        """Record a physical object whose delegated fingerprint is stale."""
        ...

    def orphan_deleted(self, physical_name: str) -> None:
        """Record that an orphaned physical object was deleted."""
        ...

    def orphan_delete_precondition_failed(
        self, physical_name: str, error: Exception
    ) -> None:
        """Record that a delete lost a race against a recreate."""
        ...

    def orphan_already_deleted(self, physical_name: str) -> None:
        """Record that an orphan disappeared before it could be deleted."""
        ...

    def orphan_delete_failed(self, physical_name: str, error: Exception) -> None:
        """Record that deleting an orphan failed."""
        ...

    def virtual_object_requeued(self, tenant: str, virtual_name: str) -> None:
        """Record that a virtual object was handed back to the sync path."""
        ...

    def virtual_object_requeue_failed(
        self, tenant: str, virtual_name: str, error: Exception
    ) -> None:
        """Record that a requeue failed."""
        ...

    def with_context(self, context: ObservationContext) -> ConsistencyCheckerProbe:
        """Create a new probe with observation context bound."""
        ...


class DefaultConsistencyCheckerProbe:
    """Default implementation of ConsistencyCheckerProbe using structlog.

    Counters are kept in the shared ``RemedyStats``; everything else is a
    structured log event. Explicit event fields win over context fields.
    """

    def __init__(
        self,
        logger: structlog.stdlib.BoundLogger | None = None,
        context: ObservationContext | None = None,
        stats: RemedyStats | None = None,
    ):
        self._logger = logger or structlog.get_logger()
        self._context = context
        self._stats = stats if stats is not None else RemedyStats()

    @property
    def stats(self) -> RemedyStats:
        return self._stats

    def _fields(self, **kwargs: Any) -> dict[str, Any]:
        if self._context is None:
            return kwargs
        return {**self._context.as_dict(), **kwargs}

    def with_context(
        self, context: ObservationContext
    ) -> DefaultConsistencyCheckerProbe:
        return DefaultConsistencyCheckerProbe(
            logger=self._logger, context=context, stats=self._stats
        )

    def waiting_for_sync(self) -> None:
        self._logger.info("checker_waiting_for_sync", **self._fields())

    def sync_failed(self) -> None:
        self._logger.error(
            "checker_sync_failed",
            **self._fields(reason="stopped before caches synced"),
        )

    def sync_crashed(self, error: BaseException) -> None:
        self._logger.error(
            "checker_sync_crashed",
            **self._fields(error=str(error), error_type=type(error).__name__),
        )

    def checker_started(self, period_seconds: float) -> None:
        self._logger.info(
            "checker_started", **self._fields(period_seconds=period_seconds)
        )

    def checker_stopped(self) -> None:
        self._logger.info("checker_stopped", **self._fields())

    def cycle_skipped_no_tenants(self) -> None:
        self._logger.info("checker_cycle_skipped_no_tenants", **self._fields())

    def scan_completed(self, tenant_count: int, duration_seconds: float) -> None:
        self._stats.record_scan(duration_seconds)
        self._logger.info(
            "checker_scan_completed",
            **self._fields(
                tenant_count=tenant_count, duration_seconds=duration_seconds
            ),
        )

    def cycle_crashed(self, error: BaseException) -> None:
        self._logger.error(
            "checker_cycle_crashed",
            **self._fields(error=str(error), error_type=type(error).__name__),
        )

    def tenant_scan_started(self, tenant: str) -> None:
        self._logger.debug("tenant_scan_started", **self._fields(tenant=tenant))

    def tenant_scan_crashed(self, tenant: str, error: BaseException) -> None:
        self._logger.error(
            "tenant_scan_crashed",
            **self._fields(
                tenant=tenant, error=str(error), error_type=type(error).__name__
            ),
        )

    def tenant_store_not_found(self, tenant: str) -> None:
        self._logger.info("tenant_store_not_found", **self._fields(tenant=tenant))

    def virtual_objects_list_failed(self, tenant: str, error: Exception) -> None:
        self._logger.error(
            "virtual_objects_list_failed",
            **self._fields(tenant=tenant, error=str(error)),
        )

    def physical_objects_list_failed(self, error: Exception) -> None:
        self._logger.error(
            "physical_objects_list_failed", **self._fields(error=str(error))
        )

    def physical_object_lookup_failed(self, physical_name: str, error: Exception) -> None:
        self._logger.error(
            "physical_object_lookup_failed",
            **self._fields(physical_name=physical_name, error=str(error)),
        )

    def virtual_object_lookup_failed(
        self, tenant: str, virtual_name: str, error: Exception
    ) -> None:
        self._logger.error(
            "virtual_object_lookup_failed",
            **self._fields(
                tenant=tenant, virtual_name=virtual_name, error=str(error)
            ),
        )

    def fingerprint_mismatch_detected(
        self, physical_name: str, tenant: str, virtual_name: str, scanner: str
    ) -> None:
        self._logger.warning(
            "fingerprint_mismatch_detected",
            **self._fields(
                physical_name=physical_name,
                tenant=tenant,
                virtual_name=virtual_name,
                scanner=scanner,
            ),
        )

    def orphan_deleted(self, physical_name: str) -> None:
        self._stats.increment(RemedyStat.ORPHANS_DELETED)
        self._logger.info(
            "orphan_physical_object_deleted",
            **self._fields(physical_name=physical_name),
        )

    def orphan_delete_precondition_failed(
        self, physical_name: str, error: Exception
    ) -> None:
        self._logger.info(
            "orphan_delete_precondition_failed",
            **self._fields(physical_name=physical_name, error=str(error)),
        )

    def orphan_already_deleted(self, physical_name: str) -> None:
        self._logger.info(
            "orphan_already_deleted", **self._fields(physical_name=physical_name)
        )

    def orphan_delete_failed(self, physical_name: str, error: Exception) -> None:
        self._logger.error(
            "orphan_delete_failed",
            **self._fields(physical_name=physical_name, error=str(error)),
        )

    def virtual_object_requeued(self, tenant: str, virtual_name: str) -> None:
        self._stats.increment(RemedyStat.VIRTUAL_OBJECTS_REQUEUED)
        self._logger.info(
            "virtual_object_requeued",
            **self._fields(tenant=tenant, virtual_name=virtual_name),
        )

    def virtual_object_requeue_failed(
        self, tenant: str, virtual_name: str, error: Exception
    ) -> None:
        self._logger.error(
            "virtual_object_requeue_failed",
            **self._fields(
                tenant=tenant, virtual_name=virtual_name, error=str(error)
            ),
        )
