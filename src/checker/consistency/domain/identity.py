"""Identity mapping between virtual objects and their physical mirrors.

Pure functions only. The owner annotations are the authority on which
tenant object a physical object mirrors; the physical name is merely the
deterministic place the syncer puts it.
"""

from __future__ import annotations

from consistency.domain.value_objects import (
    LABEL_CLUSTER,
    LABEL_NAMESPACE,
    OwnerReference,
    PhysicalObject,
    TenantName,
    VirtualObject,
)


def owner_of(physical: PhysicalObject) -> OwnerReference | None:
    """Return the virtual owner recorded on a physical object.

    Returns:
        The owner, or None when either owner annotation is missing or
        empty, meaning the object is not managed by the syncer.
    """
    tenant = physical.annotations.get(LABEL_CLUSTER, "")
    virtual_name = physical.annotations.get(LABEL_NAMESPACE, "")
    if not tenant or not virtual_name:
        return None
    return OwnerReference(tenant=tenant, virtual_name=virtual_name)


def physical_name_for(tenant: TenantName, virtual_name: str) -> str:
    """Compute the super store name of a tenant object.

    Args:
        tenant: Owning tenant
        virtual_name: Name of the object inside the tenant

    Returns:
        ``"<tenant>-<virtual_name>"``

    Raises:
        ValueError: If either part is empty
    """
    if not tenant:
        raise ValueError("tenant must not be empty")
    if not virtual_name:
        raise ValueError("virtual_name must not be empty")
    return f"{tenant}-{virtual_name}"


def fingerprints_match(physical: PhysicalObject, virtual: VirtualObject) -> bool:
    """Check that a physical object was created for this incarnation of ``virtual``.

    A physical object without a delegated fingerprint never matches.
    """
    delegated = physical.delegated_uid
    if delegated is None:
        return False
    return delegated == virtual.uid
