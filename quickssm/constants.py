"""Global constants for quickssm application.

This module contains application-wide constants used by the CLI and the
session controller.
"""

DEFAULT_LAUNCHER = "aws"
"""Executable that starts SSM sessions (the AWS CLI).

The AWS CLI hands the session over to the session-manager-plugin, which then
owns the terminal until the session ends.
"""

AWS_CLI_INSTALL_URL = (
    "https://docs.aws.amazon.com/cli/latest/userguide/"
    "getting-started-install.html#getting-started-install-instructions"
)
"""Installation instructions shown when the launcher is missing."""

SESSION_EVENT_POLL_SECONDS = 0.5
"""Upper bound in seconds for a single blocking wait on session events.

The controller waits again after each bound, so sessions have no duration
limit. Bounded waits let the interpreter run pending signal handlers on
platforms where a blocking queue read is not interrupted by signals.
"""

DEFAULT_MAX_WORKERS = 3
"""Thread pool size used when diagnostic checks run in parallel."""

HEADER_TITLE = "-- SSM Quick Connect --"
"""Title line of the header printed before the listing."""

SPACER_WIDTH = 40
"""Width of the dashed separator lines around the header and listing."""

SELECTION_PROMPT = "Select instance. Blank, or non-numeric input will exit: "
"""Prompt shown by the number-based instance picker."""

EXIT_FAILURE = 1
"""Process exit code for fatal errors and failed sessions."""

EXIT_CONFIG_ERROR = 2
"""Process exit code for configuration errors."""

EXIT_INTERRUPTED = 130
"""Process exit code when the user cancels with Ctrl+C (128 + SIGINT)."""
