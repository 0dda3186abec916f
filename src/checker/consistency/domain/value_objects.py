"""Domain value objects for the Consistency bounded context.

These are immutable data structures describing the two sides the checker
compares (tenant-owned virtual objects and their physical mirrors in the
shared super store) and the remediation decisions derived from them.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import TypeAlias

from pydantic import BaseModel, ConfigDict, Field

# Opaque identifier of an isolated tenant store.
TenantName: TypeAlias = str

# Annotations stamped onto every physical object by the syncer.
LABEL_CLUSTER = "tenancy.x-k8s.io/cluster"
LABEL_NAMESPACE = "tenancy.x-k8s.io/namespace"
LABEL_UID = "tenancy.x-k8s.io/uid"


class PropagationPolicy(str, Enum):
    """How dependents of a deleted physical object are garbage collected."""

    BACKGROUND = "Background"
    FOREGROUND = "Foreground"
    ORPHAN = "Orphan"


class CheckerState(str, Enum):
    """Lifecycle of the periodic checker."""

    UNINITIALIZED = "uninitialized"
    WAITING_FOR_SYNC = "waiting_for_sync"
    RUNNING = "running"
    STOPPED = "stopped"


class RemedyStat(str, Enum):
    """Remediation counters exported by the checker."""

    ORPHANS_DELETED = "orphans_deleted"
    VIRTUAL_OBJECTS_REQUEUED = "virtual_objects_requeued"


class VirtualObject(BaseModel):
    """Tenant-scoped logical object, read-only to the checker.

    Attributes:
        name: Name of the object inside its tenant
        tenant: Tenant that owns the object
        uid: Identity fingerprint assigned by the tenant store at creation
        annotations: Free-form metadata
    """

    model_config = ConfigDict(frozen=True)

    name: str
    tenant: TenantName
    uid: str
    annotations: dict[str, str] = Field(default_factory=dict)


class PhysicalObject(BaseModel):
    """Object in the shared super store mirroring one virtual object.

    Attributes:
        name: Name in the super store, derived from tenant and virtual name
        annotations: Owner annotations and the delegated fingerprint
    """

    model_config = ConfigDict(frozen=True)

    name: str
    annotations: dict[str, str] = Field(default_factory=dict)

    @property
    def delegated_uid(self) -> str | None:
        """Fingerprint copied from the virtual object at creation time."""
        return self.annotations.get(LABEL_UID)


@dataclass(frozen=True)
class OwnerReference:
    """The (tenant, virtual name) pair a physical object claims to mirror."""

    tenant: TenantName
    virtual_name: str


@dataclass(frozen=True)
class DeleteOptions:
    """Options for a conditional physical delete.

    The store rejects the delete unless the object's current delegated
    fingerprint equals ``precondition_fingerprint``.
    """

    precondition_fingerprint: str
    propagation_policy: PropagationPolicy = PropagationPolicy.BACKGROUND


@dataclass(frozen=True)
class DeletePhysical:
    """Delete a physical object whose fingerprint is still the one observed."""

    physical_name: str
    expected_fingerprint: str


@dataclass(frozen=True)
class RequeueVirtual:
    """Hand a virtual object back to the event-driven sync path."""

    tenant: TenantName
    virtual_object: VirtualObject


@dataclass(frozen=True)
class ReportMismatch:
    """Log-only decision: a physical object carries a stale fingerprint."""

    physical_name: str
    tenant: TenantName
    virtual_name: str


RemediationDecision: TypeAlias = DeletePhysical | RequeueVirtual | ReportMismatch
