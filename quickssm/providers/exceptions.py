"""Provider-agnostic exceptions raised by cloud capability implementations."""

from __future__ import annotations


class ProviderError(Exception):
    """Base class for all cloud provider errors."""


class ProviderCredentialsError(ProviderError):
    """Raised when cloud credentials are missing, invalid or expired."""


class ProviderConnectionError(ProviderError):
    """Raised when the cloud provider endpoint cannot be reached."""


class ProviderAPIError(ProviderError):
    """Raised when a cloud provider API call fails.

    Parameters
    ----------
    message : str
        Human-readable error message
    error_code : str | None
        Provider-specific error code (e.g. ``UnauthorizedOperation``)
    operation : str | None
        Name of the API operation that failed
    """

    def __init__(
        self,
        message: str,
        error_code: str | None = None,
        operation: str | None = None,
    ) -> None:
        super().__init__(message)
        self.error_code = error_code
        self.operation = operation


class InstanceNotFoundError(ProviderError):
    """Raised when an instance id does not match any instance."""

    def __init__(self, instance_id: str) -> None:
        super().__init__(f"Instance {instance_id} not found")
        self.instance_id = instance_id
