#!/usr/bin/env python3
"""quickssm - pick an EC2 instance and open an SSM session to it."""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any

from rich.console import Console

for _boto_module in ["botocore", "boto3", "urllib3"]:
    logging.getLogger(_boto_module).setLevel(logging.WARNING)

from quickssm.cli.main import main  # noqa: E402
from quickssm.cli.picker import prompt_selection, render_header, render_listing  # noqa: E402
from quickssm.core.config import ConfigLoader  # noqa: E402
from quickssm.core.models import InstanceRecord  # noqa: E402
from quickssm.core.naming import resolve_display_names  # noqa: E402
from quickssm.core.session import SessionController, SessionResult  # noqa: E402
from quickssm.diagnostics import (  # noqa: E402
    DiagnosticEngine,
    DiagnosticReport,
    render_banner,
    render_report,
)
from quickssm.providers.aws import (  # noqa: E402
    IdentityInspector,
    InventoryClient,
    NetworkInspector,
)
from quickssm.providers.aws.utils import make_client_factory  # noqa: E402

logger = logging.getLogger(__name__)


class QuickSSM:
    """Main CLI interface for quickssm."""

    def __init__(
        self,
        boto3_client_factory: Callable[..., Any] | None = None,
        session_controller_factory: Callable[..., SessionController] | None = None,
        console: Console | None = None,
        input_func: Callable[[str], str] = input,
    ) -> None:
        """Initialize QuickSSM with optional dependency injection."""
        self._config_loader = ConfigLoader()
        self._boto3_client_factory = boto3_client_factory
        self._session_controller_factory = session_controller_factory or SessionController
        self._console = console or Console(highlight=False)
        self._input = input_func

    def _settings(self, **overrides: Any) -> dict[str, Any]:
        return self._config_loader.get_effective_config(overrides=overrides)

    def _client_factory(self, settings: dict[str, Any]) -> Callable[..., Any]:
        if self._boto3_client_factory is not None:
            return self._boto3_client_factory
        return make_client_factory(settings["profile"])

    def _select_instance(
        self,
        settings: dict[str, Any],
        inventory: InventoryClient,
        identity: IdentityInspector,
        check_mode: bool,
        instance: str | None,
        pick: bool = True,
    ) -> InstanceRecord | None:
        caller = identity.get_caller_identity()
        render_header(
            self._console,
            caller=None if settings["private_mode"] else caller,
            check_mode=check_mode,
        )

        if instance is not None:
            logger.debug("Using instance %s given on the command line", instance)
            return InstanceRecord(instance_id=instance, name=instance, display_name=instance)

        records = resolve_display_names(inventory.list_instances())
        if not records:
            self._console.print("No instances found")
            return None

        render_listing(self._console, records)

        if not pick:
            return None

        return prompt_selection(self._console, records, input_func=self._input)

    def list(
        self,
        region: str | None = None,
        profile: str | None = None,
        private_mode: bool | None = None,
    ) -> None:
        """List instances with their display names."""
        settings = self._settings(region=region, profile=profile, private_mode=private_mode)
        factory = self._client_factory(settings)
        inventory = InventoryClient(region=settings["region"], boto3_client_factory=factory)
        identity = IdentityInspector(region=settings["region"], boto3_client_factory=factory)

        self._select_instance(settings, inventory, identity, False, None, pick=False)

    def connect(
        self,
        instance: str | None = None,
        region: str | None = None,
        profile: str | None = None,
        private_mode: bool | None = None,
        check: bool = False,
    ) -> SessionResult | DiagnosticReport | None:
        """Select an instance and open an SSM session to it.

        Parameters
        ----------
        instance : str | None
            Instance id; skips the listing and picker when given
        region : str | None
            AWS region, overriding config and environment
        profile : str | None
            AWS named profile, overriding config
        private_mode : bool | None
            Hide account information in the header
        check : bool
            Run diagnostics instead of connecting

        Returns
        -------
        SessionResult | DiagnosticReport | None
            Session outcome, diagnostic report in check mode, or None when
            the operator exits the picker
        """
        if check:
            return self.check(
                instance=instance, region=region, profile=profile, private_mode=private_mode
            )

        settings = self._settings(region=region, profile=profile, private_mode=private_mode)
        controller = self._session_controller_factory(
            launcher=settings["launcher"],
            region=settings["region"],
            profile=settings["profile"],
        )
        controller.ensure_launcher()

        factory = self._client_factory(settings)
        inventory = InventoryClient(region=settings["region"], boto3_client_factory=factory)
        identity = IdentityInspector(region=settings["region"], boto3_client_factory=factory)

        selected = self._select_instance(settings, inventory, identity, False, instance)
        if selected is None:
            return None

        self._console.print("Connecting to instance. This may take a few moments: ")
        result = controller.start(selected.instance_id)
        logger.debug("Session for %s ended: %s", selected.instance_id, result.state.value)
        return result

    def check(
        self,
        instance: str | None = None,
        region: str | None = None,
        profile: str | None = None,
        private_mode: bool | None = None,
    ) -> DiagnosticReport | None:
        """Select an instance and diagnose its SSM readiness.

        Parameters
        ----------
        instance : str | None
            Instance id; skips the listing and picker when given
        region : str | None
            AWS region, overriding config and environment
        profile : str | None
            AWS named profile, overriding config
        private_mode : bool | None
            Hide account information in the header

        Returns
        -------
        DiagnosticReport | None
            Report, or None when the operator exits the picker
        """
        settings = self._settings(region=region, profile=profile, private_mode=private_mode)
        factory = self._client_factory(settings)
        inventory = InventoryClient(region=settings["region"], boto3_client_factory=factory)
        identity = IdentityInspector(region=settings["region"], boto3_client_factory=factory)

        selected = self._select_instance(settings, inventory, identity, True, instance)
        if selected is None:
            return None

        engine = DiagnosticEngine(
            inventory=inventory,
            identity=identity,
            network=NetworkInspector(inventory.ec2_client),
            parallel=settings["parallel_checks"],
            max_workers=settings["max_workers"],
        )

        render_banner(self._console, selected.instance_id)
        report = engine.run(selected.instance_id)
        render_report(self._console, report)
        return report


if __name__ == "__main__":
    main()
