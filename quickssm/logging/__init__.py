"""Logging helpers for the quickssm CLI."""

from quickssm.logging.filters import StreamRoutingFilter

__all__ = ["StreamRoutingFilter"]
