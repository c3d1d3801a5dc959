"""Logging filters for stdout/stderr stream routing."""

import logging


class StreamRoutingFilter(logging.Filter):
    """Route records to the stdout or stderr handler by level.

    Records below WARNING go to stdout, WARNING and above to stderr.

    Parameters
    ----------
    target : str
        ``"stdout"`` or ``"stderr"``
    """

    def __init__(self, target: str) -> None:
        if target not in ("stdout", "stderr"):
            raise ValueError(f"Unknown stream target: {target}")
        super().__init__()
        self.target = target

    def filter(self, record: logging.LogRecord) -> bool:
        is_error = record.levelno >= logging.WARNING
        return is_error if self.target == "stderr" else not is_error
