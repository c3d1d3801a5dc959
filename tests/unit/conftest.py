"""Pytest configuration and fixtures for quickssm tests."""

import io
import os
import sys
from pathlib import Path
from typing import Any
from collections.abc import Generator

import pytest
import yaml
from rich.console import Console

tests_root = Path(__file__).parent.parent.parent
if str(tests_root) not in sys.path:
    sys.path.insert(0, str(tests_root))


@pytest.fixture(autouse=True)
def cleanup_quickssm_env() -> Generator[None, None, None]:
    """Ensure QUICKSSM_* variables from the developer shell do not leak in.

    Yields
    ------
    None
        Control back to test after ensuring clean environment
    """
    saved = {
        key: os.environ.pop(key)
        for key in ("QUICKSSM_CONFIG", "QUICKSSM_DEBUG")
        if key in os.environ
    }

    yield

    for key in ("QUICKSSM_CONFIG", "QUICKSSM_DEBUG"):
        os.environ.pop(key, None)
    os.environ.update(saved)


@pytest.fixture
def aws_credentials() -> Generator[None, None, None]:
    """Fixture to set AWS credentials for testing with proper cleanup.

    Sets mock AWS credentials in environment variables for the duration of the test,
    then restores the original environment state.

    Yields
    ------
    None
        Control back to test after setting credentials
    """
    keys = ("AWS_ACCESS_KEY_ID", "AWS_SECRET_ACCESS_KEY", "AWS_DEFAULT_REGION", "AWS_PROFILE")
    saved = {key: os.environ.get(key) for key in keys}

    os.environ["AWS_ACCESS_KEY_ID"] = "testing"
    os.environ["AWS_SECRET_ACCESS_KEY"] = "testing"
    os.environ["AWS_DEFAULT_REGION"] = "us-east-1"
    os.environ.pop("AWS_PROFILE", None)

    yield

    for key, value in saved.items():
        if value is not None:
            os.environ[key] = value
        else:
            os.environ.pop(key, None)


@pytest.fixture
def config_file(tmp_path: Path) -> Generator[Path, None, None]:
    """Create a temporary config file path and point QUICKSSM_CONFIG at it.

    Parameters
    ----------
    tmp_path : Path
        Pytest temporary directory path

    Yields
    ------
    Path
        Path to temporary config file
    """
    config_path = tmp_path / "quickssm.yaml"
    os.environ["QUICKSSM_CONFIG"] = str(config_path)

    yield config_path

    os.environ.pop("QUICKSSM_CONFIG", None)


@pytest.fixture
def write_config(config_file: Path):
    """Helper fixture to write config data to file.

    Parameters
    ----------
    config_file : Path
        Path to config file from config_file fixture

    Returns
    -------
    callable
        Function that takes config_data dict and writes to file
    """

    def _write(config_data: dict[str, Any]) -> None:
        with open(config_file, "w") as f:
            yaml.dump(config_data, f)

    return _write


@pytest.fixture
def console_output() -> io.StringIO:
    """Buffer receiving console output."""
    return io.StringIO()


@pytest.fixture
def console(console_output: io.StringIO) -> Console:
    """Plain, wide rich console writing to ``console_output``."""
    return Console(file=console_output, width=200, color_system=None, highlight=False)
