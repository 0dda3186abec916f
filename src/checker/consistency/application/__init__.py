"""Consistency application layer.

Contains the scanners, the remediation executor and the periodic scheduler
that together detect and repair drift between tenant stores and the super
store.
"""

from consistency.application.services import PeriodChecker

__all__ = ["PeriodChecker"]
