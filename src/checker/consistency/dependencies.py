"""Dependency wiring for the Consistency bounded context.

Composes collaborator adapters with the scanners, the executor and the
periodic checker. Hosts supply the collaborators; settings come from the
environment unless given explicitly.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from fastapi import Request

from consistency.application.observability import (
    DefaultConsistencyCheckerProbe,
    RemedyStats,
)
from consistency.application.services import (
    OrphanScanner,
    PeriodChecker,
    RemediationExecutor,
    TenantScanner,
)
from consistency.domain.value_objects import PropagationPolicy
from infrastructure.settings import CheckerSettings, get_checker_settings

if TYPE_CHECKING:
    from consistency.application.observability import ConsistencyCheckerProbe
    from consistency.ports.collaborators import (
        PhysicalCache,
        PhysicalStore,
        ReadinessGate,
        TenantRegistry,
        TenantStore,
    )


@dataclass(frozen=True)
class CheckerCollaborators:
    """External collaborators the checker reads from and remediates through."""

    tenant_registry: TenantRegistry
    tenant_store: TenantStore
    physical_cache: PhysicalCache
    physical_store: PhysicalStore
    readiness_gate: ReadinessGate


@dataclass(frozen=True)
class CheckerComponents:
    """A wired checker together with the statistics it feeds."""

    checker: PeriodChecker
    stats: RemedyStats
    settings: CheckerSettings


def build_checker(
    collaborators: CheckerCollaborators,
    settings: CheckerSettings | None = None,
    probe: ConsistencyCheckerProbe | None = None,
    stats: RemedyStats | None = None,
) -> CheckerComponents:
    """Wire a PeriodChecker from collaborators and settings.

    Args:
        collaborators: Stores, caches and gates to check
        settings: Checker settings (default: loaded from the environment)
        probe: Observability probe (default: structlog probe recording into stats)
        stats: Statistics the probe records into (default: fresh RemedyStats)

    Returns:
        The checker and the RemedyStats instance its probe records into
    """
    settings = settings or get_checker_settings()
    stats = stats or RemedyStats()
    probe = probe or DefaultConsistencyCheckerProbe(stats=stats)

    executor = RemediationExecutor(
        physical_store=collaborators.physical_store,
        tenant_store=collaborators.tenant_store,
        probe=probe,
        propagation_policy=PropagationPolicy(settings.deletion_propagation),
    )
    tenant_scanner = TenantScanner(
        tenant_store=collaborators.tenant_store,
        physical_cache=collaborators.physical_cache,
        executor=executor,
        probe=probe,
    )
    orphan_scanner = OrphanScanner(
        physical_cache=collaborators.physical_cache,
        tenant_store=collaborators.tenant_store,
        executor=executor,
        probe=probe,
    )
    checker = PeriodChecker(
        tenant_registry=collaborators.tenant_registry,
        readiness_gate=collaborators.readiness_gate,
        tenant_scanner=tenant_scanner,
        orphan_scanner=orphan_scanner,
        probe=probe,
        period_seconds=settings.period_seconds,
        resource_kind=settings.resource_kind,
    )
    return CheckerComponents(checker=checker, stats=stats, settings=settings)


def get_checker_components(request: Request) -> CheckerComponents:
    """Get the application-scoped checker created during lifespan startup."""
    return request.app.state.checker_components
