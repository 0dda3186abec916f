"""Domain probe for host startup and lifecycle events.

Following Domain-Oriented Observability patterns, this probe captures
domain-significant events while the host starts and stops the checker.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

import structlog

if TYPE_CHECKING:
    from shared_kernel.observability_context import ObservationContext


class StartupProbe(Protocol):
    """Domain probe for host startup operations."""

    def checker_task_started(self, resource_kind: str, period_seconds: float) -> None:
        """Record that the checker background task was scheduled."""
        ...

    def checker_disabled(self) -> None:
        """Record that the checker is disabled by configuration."""
        ...

    def checker_startup_failed(self, error: str) -> None:
        """Record that the checker gave up before its first cycle."""
        ...

    def checker_crashed(self, error: BaseException) -> None:
        """Record that the checker task died on an unexpected error."""
        ...

    def checker_task_finished(self) -> None:
        """Record that the checker background task finished on shutdown."""
        ...

    def with_context(self, context: ObservationContext) -> StartupProbe:
        """Create a new probe with observation context bound."""
        ...


class DefaultStartupProbe:
    """Default implementation of StartupProbe using structlog."""

    def __init__(
        self,
        logger: structlog.stdlib.BoundLogger | None = None,
        context: ObservationContext | None = None,
    ):
        self._logger = logger or structlog.get_logger()
        self._context = context

    def _fields(self, **kwargs: Any) -> dict[str, Any]:
        """Merge bound context with event fields; event fields win."""
        if self._context is None:
            return kwargs
        return {**self._context.as_dict(), **kwargs}

    def with_context(self, context: ObservationContext) -> DefaultStartupProbe:
        """Create a new probe with observation context bound."""
        return DefaultStartupProbe(logger=self._logger, context=context)

    def checker_task_started(self, resource_kind: str, period_seconds: float) -> None:
        """Record that the checker background task was scheduled."""
        self._logger.info(
            "checker_task_started",
            **self._fields(resource_kind=resource_kind, period_seconds=period_seconds),
        )

    def checker_disabled(self) -> None:
        """Record that the checker is disabled by configuration."""
        self._logger.info("checker_disabled", **self._fields())

    def checker_startup_failed(self, error: str) -> None:
        """Record that the checker gave up before its first cycle."""
        self._logger.error("checker_startup_failed", **self._fields(error=error))

    def checker_crashed(self, error: BaseException) -> None:
        """Record that the checker task died on an unexpected error."""
        self._logger.error(
            "checker_task_crashed",
            **self._fields(error=str(error), error_type=type(error).__name__),
        )

    def checker_task_finished(self) -> None:
        """Record that the checker background task finished on shutdown."""
        self._logger.info("checker_task_finished", **self._fields())
