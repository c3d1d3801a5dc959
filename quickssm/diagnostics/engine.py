"""Diagnostic engine running the SSM readiness checks for one instance."""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor

from quickssm.core.interfaces import IdentityProvider, InventoryProvider, NetworkProvider
from quickssm.diagnostics.checks import CHECKS, Check
from quickssm.diagnostics.models import (
    CheckName,
    DiagnosticCheckResult,
    DiagnosticReport,
    InstanceContext,
)
from quickssm.providers.exceptions import ProviderError

logger = logging.getLogger(__name__)


class DiagnosticEngine:
    """Evaluate the registered checks and aggregate them into a report.

    Parameters
    ----------
    inventory : InventoryProvider
        Source of the instance description
    identity : IdentityProvider
        IAM lookups for the identity check
    network : NetworkProvider
        EC2 network lookups for the route and traffic checks
    parallel : bool
        Run checks on a thread pool instead of one after another
    max_workers : int
        Thread pool size when ``parallel`` is set
    checks : tuple[tuple[CheckName, Check], ...]
        Checks to run, in report order
    """

    def __init__(
        self,
        inventory: InventoryProvider,
        identity: IdentityProvider,
        network: NetworkProvider,
        parallel: bool = True,
        max_workers: int = 3,
        checks: tuple[tuple[CheckName, Check], ...] = CHECKS,
    ) -> None:
        self.inventory = inventory
        self.identity = identity
        self.network = network
        self.parallel = parallel
        self.max_workers = max_workers
        self.checks = checks

    def run(self, instance_id: str) -> DiagnosticReport:
        """Diagnose one instance.

        Parameters
        ----------
        instance_id : str
            Instance to diagnose

        Returns
        -------
        DiagnosticReport
            Results in check declaration order

        Raises
        ------
        InstanceNotFoundError
            If the instance does not exist
        ProviderCredentialsError
            If AWS credentials are not usable
        """
        instance = self.inventory.describe_instance(instance_id)
        context = InstanceContext.from_instance(instance, self.identity, self.network)
        return self.evaluate(context)

    def evaluate(self, context: InstanceContext) -> DiagnosticReport:
        """Run every check against an already built context."""
        if self.parallel and len(self.checks) > 1:
            with ThreadPoolExecutor(
                max_workers=self.max_workers, thread_name_prefix="quickssm-check"
            ) as executor:
                futures = [
                    executor.submit(self._run_check, name, check, context)
                    for name, check in self.checks
                ]
                results = [future.result() for future in futures]
        else:
            results = [self._run_check(name, check, context) for name, check in self.checks]

        report = DiagnosticReport(instance_id=context.instance_id, results=tuple(results))
        logger.debug(
            "Diagnostics for %s: %d passed, %d warnings, %d failed",
            context.instance_id,
            report.pass_count,
            report.warn_count,
            report.fail_count,
        )
        return report

    def _run_check(
        self, name: CheckName, check: Check, context: InstanceContext
    ) -> DiagnosticCheckResult:
        logger.debug("Running check '%s' for %s", name.value, context.instance_id)
        try:
            return check(context)
        except (ProviderError, KeyError, ValueError) as e:
            logger.debug("Check '%s' raised %s", name.value, e, exc_info=True)
            return DiagnosticCheckResult.warned(name, f"Check could not complete: {e}")
