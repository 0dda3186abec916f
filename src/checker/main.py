"""FastAPI host for the periodic consistency checker."""

from __future__ import annotations

import asyncio
from contextlib import asynccontextmanager
from typing import Annotated, Any

from fastapi import Depends, FastAPI

from consistency.application.services import PeriodChecker
from consistency.dependencies import (
    CheckerCollaborators,
    CheckerComponents,
    build_checker,
    get_checker_components,
)
from consistency.ports.exceptions import CacheSyncError
from infrastructure.logging import configure_logging
from infrastructure.observability import DefaultStartupProbe, StartupProbe
from infrastructure.settings import CheckerSettings, Settings, get_settings
from infrastructure.version import __version__


async def run_checker(
    checker: PeriodChecker, stop_event: asyncio.Event, probe: StartupProbe
) -> None:
    """Run the checker until stopped.

    A failed initial sync and any unexpected crash end the task; both are
    reported through the startup probe so the host keeps serving health
    checks with the checker in state ``stopped``.
    """
    try:
        await checker.start(stop_event)
    except CacheSyncError as e:
        probe.checker_startup_failed(str(e))
    except Exception as e:
        probe.checker_crashed(e)


def create_app(
    collaborators: CheckerCollaborators,
    settings: Settings | None = None,
    checker_settings: CheckerSettings | None = None,
    startup_probe: StartupProbe | None = None,
) -> FastAPI:
    """Create the host application around a set of collaborators.

    Args:
        collaborators: Stores, caches and gates the checker works against
        settings: Application settings (default: loaded from the environment)
        checker_settings: Checker settings (default: loaded from the environment)
        startup_probe: Lifecycle probe (default: structlog probe)

    Returns:
        FastAPI application whose lifespan owns the checker task
    """
    settings = settings or get_settings()
    checker_settings = checker_settings or settings.checker
    probe = startup_probe or DefaultStartupProbe()

    @asynccontextmanager
    async def checker_lifespan(app: FastAPI):
        """Application lifespan context.

        Manages:
        - Logging configuration
        - Checker background task (started after startup, stopped on shutdown)
        """
        configure_logging(debug=settings.debug)
        components = build_checker(collaborators, settings=checker_settings)
        app.state.checker_components = components

        stop_event = asyncio.Event()
        task: asyncio.Task[None] | None = None
        if checker_settings.enabled:
            task = asyncio.create_task(
                run_checker(components.checker, stop_event, probe)
            )
            probe.checker_task_started(
                checker_settings.resource_kind, checker_settings.period_seconds
            )
        else:
            probe.checker_disabled()

        try:
            yield
        finally:
            stop_event.set()
            if task is not None:
                await task
                probe.checker_task_finished()

    app = FastAPI(
        title=settings.app_name,
        description="Periodic drift detection between tenant stores and the super store",
        version=__version__,
        lifespan=checker_lifespan,
    )

    @app.get("/health")
    def health():
        """Basic health check endpoint."""
        return {"status": "ok"}

    @app.get("/health/checker")
    def health_checker(
        components: Annotated[CheckerComponents, Depends(get_checker_components)],
    ) -> dict[str, Any]:
        """Report the checker state and its remediation counters."""
        checker = components.checker
        return {
            "state": checker.state.value,
            "resource_kind": checker.resource_kind,
            "period_seconds": checker.period_seconds,
            **components.stats.snapshot(),
        }

    return app
