"""Exceptions raised by consistency checker collaborators.

Collaborator adapters translate their backend errors into these types so
that the scanners and the executor can classify them without knowing the
backend. None of them is fatal to a check cycle.
"""


class ConsistencyCheckerError(Exception):
    """Base class for all consistency checker errors."""


class ObjectNotFoundError(ConsistencyCheckerError):
    """Raised when a looked-up object does not exist.

    This is the expected steady-state signal that drives remediation,
    not a failure.
    """

    def __init__(self, name: str, tenant: str | None = None):
        where = f" in tenant {tenant}" if tenant else ""
        super().__init__(f"object {name!r} not found{where}")
        self.name = name
        self.tenant = tenant


class TransientStoreError(ConsistencyCheckerError):
    """Raised when a list, get or delete call fails for a non-semantic reason."""


class PreconditionFailedError(ConsistencyCheckerError):
    """Raised when a conditional delete finds a different fingerprint.

    The object was recreated or changed after it was observed; the delete
    is rejected and the race is benign.
    """

    def __init__(self, name: str, expected: str, actual: str | None):
        super().__init__(
            f"precondition failed for {name!r}: expected fingerprint "
            f"{expected!r}, found {actual!r}"
        )
        self.name = name
        self.expected = expected
        self.actual = actual


class EnqueueError(ConsistencyCheckerError):
    """Raised when a virtual object cannot be requeued for synchronization."""


class CacheSyncError(ConsistencyCheckerError):
    """Raised when the stop signal fires before the backing caches synced.

    This is the only error the checker surfaces to its host process.
    """
