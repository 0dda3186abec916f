"""Consistency domain module.

Contains value objects and the identity mapper for the Consistency bounded context.
"""

from consistency.domain.identity import (
    fingerprints_match,
    owner_of,
    physical_name_for,
)
from consistency.domain.value_objects import (
    CheckerState,
    DeleteOptions,
    DeletePhysical,
    OwnerReference,
    PhysicalObject,
    PropagationPolicy,
    RemediationDecision,
    RemedyStat,
    ReportMismatch,
    RequeueVirtual,
    TenantName,
    VirtualObject,
)

__all__ = [
    "CheckerState",
    "DeleteOptions",
    "DeletePhysical",
    "OwnerReference",
    "PhysicalObject",
    "PropagationPolicy",
    "RemediationDecision",
    "RemedyStat",
    "ReportMismatch",
    "RequeueVirtual",
    "TenantName",
    "VirtualObject",
    "fingerprints_match",
    "owner_of",
    "physical_name_for",
]
