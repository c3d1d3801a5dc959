"""SSM readiness diagnostics."""

from __future__ import annotations

from quickssm.diagnostics.checks import CHECKS
from quickssm.diagnostics.engine import DiagnosticEngine
from quickssm.diagnostics.models import (
    CheckName,
    CheckStatus,
    DiagnosticCheckResult,
    DiagnosticReport,
    InstanceContext,
    Verdict,
)
from quickssm.diagnostics.report import render_banner, render_report

__all__ = [
    "CHECKS",
    "CheckName",
    "CheckStatus",
    "DiagnosticCheckResult",
    "DiagnosticEngine",
    "DiagnosticReport",
    "InstanceContext",
    "Verdict",
    "render_banner",
    "render_report",
]
