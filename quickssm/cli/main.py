"""CLI entry point for quickssm."""

from __future__ import annotations

import logging
import os
import sys
from collections.abc import Callable
from typing import Any

import fire

from quickssm.constants import EXIT_CONFIG_ERROR, EXIT_FAILURE, EXIT_INTERRUPTED
from quickssm.core.session import LauncherNotFoundError, SessionLaunchError, SessionResult
from quickssm.logging import StreamRoutingFilter
from quickssm.providers import (
    InstanceNotFoundError,
    ProviderAPIError,
    ProviderConnectionError,
    ProviderCredentialsError,
)
from quickssm.providers.aws.utils import get_aws_credentials_error_message
from quickssm.utils import log_and_print_error

DEBUG_ENV_VAR = "QUICKSSM_DEBUG"


def get_quickssm_base_class() -> type:
    """Get QuickSSM base class on-demand to avoid circular imports.

    Returns
    -------
    type
        QuickSSM base class
    """
    from quickssm.__main__ import QuickSSM

    return QuickSSM


class QuickSSMCLI:
    """CLI wrapper that turns command results into process exit codes.

    This is defined as a factory that creates a subclass of QuickSSM at
    runtime to avoid circular import issues.
    """

    _cached_class: type | None = None

    def __new__(cls, **kwargs: Any) -> Any:
        """Create QuickSSMCLI instance with dynamic subclassing.

        Parameters
        ----------
        **kwargs : Any
            Dependency overrides passed to QuickSSM

        Returns
        -------
        Any
            Instance of dynamically created QuickSSMCLI subclass
        """
        if cls._cached_class is None:
            QuickSSM = get_quickssm_base_class()

            class QuickSSMCLIImpl(QuickSSM):
                """CLI wrapper implementation for QuickSSM."""

                def connect(
                    self,
                    instance: str | None = None,
                    region: str | None = None,
                    profile: str | None = None,
                    private_mode: bool | None = None,
                    check: bool = False,
                ) -> None:
                    """Select an instance and open an SSM session to it.

                    Parameters
                    ----------
                    instance : str | None
                        Instance id; skips the listing and picker when given
                    region : str | None
                        AWS region
                    profile : str | None
                        AWS named profile
                    private_mode : bool | None
                        Hide account information in the header
                    check : bool
                        Run diagnostics instead of connecting
                    """
                    result = super().connect(
                        instance=instance,
                        region=region,
                        profile=profile,
                        private_mode=private_mode,
                        check=check,
                    )

                    if isinstance(result, SessionResult) and not result.ok:
                        log_and_print_error("%s", result.error)
                        sys.exit(EXIT_FAILURE)

                def check(
                    self,
                    instance: str | None = None,
                    region: str | None = None,
                    profile: str | None = None,
                    private_mode: bool | None = None,
                ) -> None:
                    """Select an instance and diagnose its SSM readiness.

                    Parameters
                    ----------
                    instance : str | None
                        Instance id; skips the listing and picker when given
                    region : str | None
                        AWS region
                    profile : str | None
                        AWS named profile
                    private_mode : bool | None
                        Hide account information in the header
                    """
                    super().check(
                        instance=instance,
                        region=region,
                        profile=profile,
                        private_mode=private_mode,
                    )

            cls._cached_class = QuickSSMCLIImpl

        return cls._cached_class(**kwargs)


def handle_credentials_error(debug_mode: bool) -> None:
    """Handle provider credentials error.

    Parameters
    ----------
    debug_mode : bool
        Whether debug mode is enabled

    Raises
    ------
    ProviderCredentialsError
        Re-raised if debug mode is enabled
    """
    if debug_mode:
        raise

    print(get_aws_credentials_error_message(), file=sys.stderr)
    sys.exit(EXIT_FAILURE)


def handle_launcher_error(error: SessionLaunchError, debug_mode: bool) -> None:
    """Handle a missing or unstartable session launcher.

    Parameters
    ----------
    error : SessionLaunchError
        The launch error that was raised
    debug_mode : bool
        Whether debug mode is enabled

    Raises
    ------
    SessionLaunchError
        Re-raised if debug mode is enabled
    """
    if debug_mode:
        raise

    log_and_print_error("%s", error)

    if isinstance(error, LauncherNotFoundError):
        print("\nThe session-manager-plugin is required as well:", file=sys.stderr)
        print(
            "  https://docs.aws.amazon.com/systems-manager/latest/userguide/"
            "session-manager-working-with-install-plugin.html",
            file=sys.stderr,
        )

    sys.exit(EXIT_FAILURE)


def handle_not_found_error(error: InstanceNotFoundError, debug_mode: bool) -> None:
    """Handle an unknown instance id.

    Parameters
    ----------
    error : InstanceNotFoundError
        The lookup error that was raised
    debug_mode : bool
        Whether debug mode is enabled

    Raises
    ------
    InstanceNotFoundError
        Re-raised if debug mode is enabled
    """
    if debug_mode:
        raise

    log_and_print_error("%s", error)
    print("\nCheck the instance id and region:", file=sys.stderr)
    print("  quickssm list --region <region>", file=sys.stderr)
    sys.exit(EXIT_FAILURE)


def handle_value_error(error: ValueError, debug_mode: bool) -> None:
    """Handle configuration errors.

    Parameters
    ----------
    error : ValueError
        The value error that was raised
    debug_mode : bool
        Whether debug mode is enabled

    Raises
    ------
    ValueError
        Re-raised if debug mode is enabled
    """
    if debug_mode:
        raise

    print(f"Configuration error: {error}", file=sys.stderr)
    sys.exit(EXIT_CONFIG_ERROR)


def handle_api_error(error: ProviderAPIError, debug_mode: bool) -> None:
    """Handle provider API error with context-specific messages.

    Parameters
    ----------
    error : ProviderAPIError
        The API error that was raised
    debug_mode : bool
        Whether debug mode is enabled

    Raises
    ------
    ProviderAPIError
        Re-raised if debug mode is enabled
    """
    if debug_mode:
        raise

    error_code = error.error_code

    if error_code in ["UnauthorizedOperation", "AccessDenied", "AccessDeniedException"]:
        print("Insufficient IAM permissions\n", file=sys.stderr)
        print("Your AWS credentials don't have the required permissions.", file=sys.stderr)
        print("Contact your AWS administrator to grant:", file=sys.stderr)
        print("  - ec2:DescribeInstances, ec2:DescribeSubnets", file=sys.stderr)
        print("  - ec2:DescribeRouteTables, ec2:DescribeSecurityGroups", file=sys.stderr)
        print("  - iam:GetInstanceProfile, iam:ListAttachedRolePolicies", file=sys.stderr)
        print("  - iam:ListRolePolicies, iam:GetRolePolicy", file=sys.stderr)
        print("  - ssm:StartSession", file=sys.stderr)
    elif error_code == "RequestLimitExceeded":
        print("AWS API rate limit exceeded\n", file=sys.stderr)
        print("Wait a moment and run the command again.", file=sys.stderr)
    else:
        print(f"AWS API error: {error}", file=sys.stderr)

    sys.exit(EXIT_FAILURE)


def handle_connection_error(error: ProviderConnectionError, debug_mode: bool) -> None:
    """Handle an unreachable AWS endpoint.

    Parameters
    ----------
    error : ProviderConnectionError
        The connection error that was raised
    debug_mode : bool
        Whether debug mode is enabled

    Raises
    ------
    ProviderConnectionError
        Re-raised if debug mode is enabled
    """
    if debug_mode:
        raise

    print(f"Could not reach AWS: {error}\n", file=sys.stderr)
    print("Check your network connection and the configured region.", file=sys.stderr)
    sys.exit(EXIT_FAILURE)


def handle_runtime_error(error: RuntimeError, debug_mode: bool) -> None:
    """Handle unexpected runtime error.

    Parameters
    ----------
    error : RuntimeError
        The runtime error that was raised
    debug_mode : bool
        Whether debug mode is enabled

    Raises
    ------
    RuntimeError
        Re-raised if debug mode is enabled
    """
    if debug_mode:
        raise

    print(f"Unexpected error: {error}", file=sys.stderr)
    sys.exit(EXIT_FAILURE)


def handle_keyboard_interrupt() -> None:
    """Exit quietly when the user presses Ctrl+C outside a session."""
    print("\nOperation cancelled by user", file=sys.stderr)
    sys.exit(EXIT_INTERRUPTED)


def configure_logging(debug_mode: bool) -> None:
    """Route INFO records to stdout and warnings/errors to stderr."""
    stdout_handler = logging.StreamHandler(sys.stdout)
    stdout_handler.setFormatter(logging.Formatter("%(message)s"))
    stdout_handler.addFilter(StreamRoutingFilter("stdout"))

    stderr_handler = logging.StreamHandler(sys.stderr)
    stderr_handler.setFormatter(logging.Formatter("%(message)s"))
    stderr_handler.addFilter(StreamRoutingFilter("stderr"))

    logging.basicConfig(
        level=logging.DEBUG if debug_mode else logging.INFO,
        handlers=[stdout_handler, stderr_handler],
    )

    for boto_module in ["botocore", "boto3", "urllib3"]:
        logging.getLogger(boto_module).setLevel(logging.WARNING)


def main(cli_factory: Callable[[], Any] | None = None) -> None:
    """Entry point for Fire CLI with graceful error handling.

    Fire maps the public methods of QuickSSM (``connect``, ``check`` and
    ``list``) to sub-commands and their parameters to flags.

    Parameters
    ----------
    cli_factory : Callable[[], Any] | None
        Factory for the object handed to Fire. If None, uses QuickSSMCLI
    """
    debug_mode = os.environ.get(DEBUG_ENV_VAR) == "1"
    configure_logging(debug_mode)

    try:
        fire.Fire((cli_factory or QuickSSMCLI)())
    except ProviderCredentialsError:
        handle_credentials_error(debug_mode)
    except InstanceNotFoundError as e:
        handle_not_found_error(e, debug_mode)
    except ProviderAPIError as e:
        handle_api_error(e, debug_mode)
    except ProviderConnectionError as e:
        handle_connection_error(e, debug_mode)
    except SessionLaunchError as e:
        handle_launcher_error(e, debug_mode)
    except ValueError as e:
        handle_value_error(e, debug_mode)
    except RuntimeError as e:
        handle_runtime_error(e, debug_mode)
    except KeyboardInterrupt:
        handle_keyboard_interrupt()
