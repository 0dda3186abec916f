"""Unit test fixtures with in-memory collaborators."""

from unittest.mock import MagicMock

import pytest
import structlog

from consistency.application.observability import (
    DefaultConsistencyCheckerProbe,
    RemedyStats,
)
from consistency.infrastructure.in_memory import (
    EventReadinessGate,
    InMemoryPhysicalStore,
    InMemoryTenantRegistry,
    InMemoryTenantStore,
)


@pytest.fixture
def tenant_registry() -> InMemoryTenantRegistry:
    """Provide an empty tenant registry."""
    return InMemoryTenantRegistry()


@pytest.fixture
def tenant_store() -> InMemoryTenantStore:
    """Provide an empty set of tenant stores."""
    return InMemoryTenantStore()


@pytest.fixture
def physical_store() -> InMemoryPhysicalStore:
    """Provide an empty super store (cache and mutator)."""
    return InMemoryPhysicalStore()


@pytest.fixture
def readiness_gate() -> EventReadinessGate:
    """Provide a readiness gate that is already synced."""
    gate = EventReadinessGate()
    gate.mark_synced()
    return gate


@pytest.fixture
def stats() -> RemedyStats:
    """Provide fresh remediation statistics."""
    return RemedyStats()


@pytest.fixture
def mock_logger() -> MagicMock:
    """Provide a mocked structlog logger."""
    return MagicMock(spec=structlog.stdlib.BoundLogger)


@pytest.fixture
def probe(mock_logger: MagicMock, stats: RemedyStats) -> DefaultConsistencyCheckerProbe:
    """Provide a real probe that logs to a mock and records into ``stats``."""
    return DefaultConsistencyCheckerProbe(logger=mock_logger, stats=stats)
