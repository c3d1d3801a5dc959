"""Terminal rendering of diagnostic reports."""

from __future__ import annotations

from rich.console import Console
from rich.text import Text

from quickssm.diagnostics.models import CheckStatus, DiagnosticReport, Verdict

RULE_WIDTH = 60

STATUS_STYLES = {
    CheckStatus.PASS: ("✅", "green"),
    CheckStatus.FAIL: ("❌", "red"),
    CheckStatus.WARN: ("⚠️ ", "yellow"),
}

VERDICT_MESSAGES = {
    Verdict.ALL_PASS: (
        "🎉 All checks passed! Instance should be ready for SSM connection.",
        "green",
    ),
    Verdict.HAS_FAIL: (
        "⚠️  Some checks failed. Please address the issues above before connecting.",
        "red",
    ),
    Verdict.WARN_ONLY: (
        "⚠️  Some warnings detected. Instance may work but review the warnings above.",
        "yellow",
    ),
}


def render_banner(console: Console, instance_id: str) -> None:
    """Print the banner shown before the checks run."""
    rule = "=" * RULE_WIDTH
    console.print()
    console.print(Text(rule, style="blue"))
    title = Text("DIAGNOSTIC CHECKS FOR INSTANCE: ", style="bold blue")
    title.append(instance_id, style="white")
    console.print(title)
    console.print(Text(rule, style="blue"))


def render_report(console: Console, report: DiagnosticReport) -> None:
    """Print per-check lines, the summary counts and the overall verdict."""
    console.print()
    for result in report.results:
        icon, style = STATUS_STYLES[result.status]
        line = Text(f"{icon} ")
        line.append(result.check.value, style=f"bold {style}")
        line.append(f": {result.message}")
        console.print(line)

    rule = "=" * RULE_WIDTH
    console.print()
    console.print(Text(rule, style="magenta"))
    console.print(Text("DIAGNOSTIC SUMMARY", style="bold magenta"))
    console.print(Text(rule, style="magenta"))

    console.print(_summary_line("✅ Passed: ", report.pass_count, "green"))
    console.print(_summary_line("⚠️  Warnings: ", report.warn_count, "yellow"))
    console.print(_summary_line("❌ Failed: ", report.fail_count, "red"))

    message, style = VERDICT_MESSAGES[report.verdict]
    console.print()
    console.print(Text(message, style=style))


def _summary_line(label: str, count: int, style: str) -> Text:
    line = Text(label, style=style)
    line.append(str(count), style=f"bold {style}")
    return line
