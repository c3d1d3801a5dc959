"""CLI output, instance picker and entry point."""

from __future__ import annotations

from quickssm.cli.picker import prompt_selection, render_header, render_listing

__all__ = [
    "prompt_selection",
    "render_header",
    "render_listing",
]
