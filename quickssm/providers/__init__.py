"""Cloud provider capabilities and their exceptions."""

from __future__ import annotations

from quickssm.providers.exceptions import (
    InstanceNotFoundError,
    ProviderAPIError,
    ProviderConnectionError,
    ProviderCredentialsError,
    ProviderError,
)

__all__ = [
    "ProviderError",
    "ProviderCredentialsError",
    "ProviderAPIError",
    "ProviderConnectionError",
    "InstanceNotFoundError",
]
