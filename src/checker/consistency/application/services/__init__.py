"""Application services for the Consistency bounded context."""

from consistency.application.services.orphan_scanner import OrphanScanner
from consistency.application.services.period_checker import PeriodChecker
from consistency.application.services.remediation_executor import RemediationExecutor
from consistency.application.services.tenant_scanner import TenantScanner

__all__ = [
    "OrphanScanner",
    "PeriodChecker",
    "RemediationExecutor",
    "TenantScanner",
]
