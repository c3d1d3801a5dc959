import copy
import logging
import os
from pathlib import Path
from typing import Any

import yaml
from omegaconf import OmegaConf
from omegaconf.errors import InterpolationResolutionError

from quickssm.constants import DEFAULT_LAUNCHER, DEFAULT_MAX_WORKERS

logger = logging.getLogger(__name__)

CONFIG_ENV_VAR = "QUICKSSM_CONFIG"
DEFAULT_CONFIG_FILE = "quickssm.yaml"


class ConfigLoader:
    """Load YAML configuration and merge it with defaults and CLI overrides."""

    def __init__(self) -> None:
        """Initialize ConfigLoader with built-in defaults."""
        self.BUILT_IN_DEFAULTS: dict[str, Any] = {
            "region": None,
            "profile": None,
            "launcher": DEFAULT_LAUNCHER,
            "private_mode": False,
            "parallel_checks": True,
            "max_workers": DEFAULT_MAX_WORKERS,
        }

    def load_config(self, config_path: str | None = None) -> dict[str, Any]:
        """Load configuration from YAML file.

        Parameters
        ----------
        config_path : str | None
            Path to YAML config file. If None, checks QUICKSSM_CONFIG env var,
            then falls back to quickssm.yaml

        Returns
        -------
        dict[str, Any]
            Parsed configuration with a ``defaults`` section, with all variable
            interpolations resolved

        Raises
        ------
        ValueError
            If the file is not valid YAML or variables cannot be resolved
        RuntimeError
            If the file exists but cannot be read
        """
        if config_path is None:
            config_path = os.environ.get(CONFIG_ENV_VAR, DEFAULT_CONFIG_FILE)

        config_file = Path(config_path)

        if not config_file.exists():
            return {"defaults": {}}

        try:
            cfg = OmegaConf.load(config_file)
        except yaml.YAMLError as e:
            logger.error("Failed to parse YAML config file %s: %s", config_file, e)
            raise ValueError(f"Invalid YAML in {config_file}: {e}") from e
        except OSError as e:
            logger.error("Failed to read config file %s: %s", config_file, e)
            raise RuntimeError(f"Failed to read config file {config_file}: {e}") from e

        if cfg is None:
            return {"defaults": {}}

        try:
            config = OmegaConf.to_container(cfg, resolve=True, throw_on_missing=True)
        except InterpolationResolutionError as e:
            logger.error("Failed to resolve configuration variables: %s", e)
            raise ValueError(f"Configuration variable resolution error: {e}") from e

        if not isinstance(config, dict):
            raise ValueError(f"Configuration in {config_file} must be a mapping")

        config.setdefault("defaults", {})
        return config

    def get_effective_config(
        self,
        overrides: dict[str, Any] | None = None,
        config: dict[str, Any] | None = None,
    ) -> dict[str, Any]:
        """Merge built-in defaults, YAML defaults and CLI overrides.

        Parameters
        ----------
        overrides : dict[str, Any] | None
            CLI arguments; None values mean "not given" and are skipped
        config : dict[str, Any] | None
            Already loaded configuration. If None, :meth:`load_config` is used

        Returns
        -------
        dict[str, Any]
            Validated effective configuration
        """
        if config is None:
            config = self.load_config()

        merged = copy.deepcopy(self.BUILT_IN_DEFAULTS)

        yaml_defaults = config.get("defaults") or {}
        for key, value in yaml_defaults.items():
            merged[key] = value

        for key, value in (overrides or {}).items():
            if value is not None:
                merged[key] = value

        self.validate_config(merged)
        return merged

    def validate_config(self, config: dict[str, Any]) -> None:
        """Validate configuration keys and value types.

        Parameters
        ----------
        config : dict[str, Any]
            Configuration to validate

        Raises
        ------
        ValueError
            If configuration is invalid
        """
        unknown = sorted(set(config) - set(self.BUILT_IN_DEFAULTS))
        if unknown:
            raise ValueError(f"Unknown configuration keys: {unknown}")

        for field in ("region", "profile"):
            value = config.get(field)
            if value is not None and (not isinstance(value, str) or not value):
                raise ValueError(f"{field} must be a non-empty string")

        launcher = config.get("launcher")
        if not isinstance(launcher, str) or not launcher:
            raise ValueError("launcher must be a non-empty string")

        for field in ("private_mode", "parallel_checks"):
            if not isinstance(config.get(field), bool):
                raise ValueError(f"{field} must be a boolean")

        max_workers = config.get("max_workers")
        if isinstance(max_workers, bool) or not isinstance(max_workers, int) or max_workers < 1:
            raise ValueError("max_workers must be a positive integer")
