"""Fakes for quickssm capabilities and session processes."""
