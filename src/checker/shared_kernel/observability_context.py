"""Observation context for domain-oriented observability.

Observation contexts collect and manage contextual metadata for instrumentation,
following the Domain Oriented Observability pattern.

See: https://martinfowler.com/articles/domain-oriented-observability.html
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True)
class ObservationContext:
    """Immutable context containing metadata for observability.

    Captures cycle-scoped and domain-relevant metadata that should be
    included with all instrumentation events, so that every event emitted
    while checking one tenant can be correlated.

    Attributes:
        cycle_id: Identifier of the check cycle the event belongs to.
        tenant: Tenant being checked (if applicable).
        resource_kind: Kind of mirrored resource (e.g. "namespace").
        extra: Additional contextual metadata.

    Example:
        context = ObservationContext(cycle_id="c-12", resource_kind="namespace")
        probe = DefaultConsistencyCheckerProbe().with_context(context)
    """

    cycle_id: str | None = None
    tenant: str | None = None
    resource_kind: str | None = None
    extra: dict[str, Any] = field(default_factory=dict)

    def as_dict(self) -> dict[str, Any]:
        """Convert context to a dictionary for logging.

        Only includes non-None values to keep logs clean.
        """
        result: dict[str, Any] = {}
        if self.cycle_id is not None:
            result["cycle_id"] = self.cycle_id
        if self.tenant is not None:
            result["tenant"] = self.tenant
        if self.resource_kind is not None:
            result["resource_kind"] = self.resource_kind
        result.update(self.extra)
        return result

    def with_cycle(self, cycle_id: str) -> ObservationContext:
        """Create a new context scoped to one check cycle."""
        return ObservationContext(
            cycle_id=cycle_id,
            tenant=self.tenant,
            resource_kind=self.resource_kind,
            extra=self.extra,
        )

    def with_tenant(self, tenant: str) -> ObservationContext:
        """Create a new context scoped to a single tenant."""
        return ObservationContext(
            cycle_id=self.cycle_id,
            tenant=tenant,
            resource_kind=self.resource_kind,
            extra=self.extra,
        )

    def with_extra(self, **kwargs: Any) -> ObservationContext:
        """Create a new context with additional metadata."""
        new_extra = {**self.extra, **kwargs}
        return ObservationContext(
            cycle_id=self.cycle_id,
            tenant=self.tenant,
            resource_kind=self.resource_kind,
            extra=new_extra,
        )
