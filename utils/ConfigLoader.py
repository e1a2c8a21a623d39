#!/usr/bin/env python3
# -*- coding: utf-8 -*-

import os
import yaml
from pathlib import Path
from copy import deepcopy

# GLOBALS
_config = None

ROOT_DIR = Path(__file__).resolve().parent.parent
DEFAULT_CONFIG_PATH = ROOT_DIR / "etc" / "config.yaml"

DEFAULTS = {
    "tool_name": "SRP6a LoginCore",
    "crypto": {
        "second_factor": "none",
        "validate_parameters": False,
    },
    "database": {
        "driver": "sqlite",
        "path": "etc/accounts.db",
    },
    "Logging": {
        "logging_levels": "Success, Information, Warning, Error",
        "logging_file_levels": "None",
        "log_file": "srp6a.log",
        "log_dir": "logs",
        "date_format": "[%H:%M:%S]",
    },
}


def _merge_dicts(base: dict, override: dict) -> dict:
    """
    Shallow+nested merge: values in override win; dict values are merged recursively.
    """
    result = deepcopy(base)
    for k, v in override.items():
        if isinstance(v, dict) and isinstance(result.get(k), dict):
            result[k] = _merge_dicts(result[k], v)
        else:
            result[k] = deepcopy(v)
    return result


def _resolve_path(filepath: str | Path | None) -> Path:
    if filepath is None:
        filepath = os.environ.get("SRP6A_CONFIG") or DEFAULT_CONFIG_PATH
    return Path(filepath)


class ConfigLoader:
    @staticmethod
    def get_config() -> dict:
        """
        Returns the cached configuration, loading it on first use.
        """
        global _config
        if _config is None:
            _config = ConfigLoader.load_config()
        return _config

    @staticmethod
    def load_config(filepath: str | Path | None = None) -> dict:
        """
        Loads the configuration file if not already cached.

        The file is overlaid on the built-in defaults, so a partial
        config.yaml only needs the keys it changes. The path defaults to
        etc/config.yaml and can be overridden with SRP6A_CONFIG.
        """
        global _config

        if _config is None:
            path = _resolve_path(filepath)
            try:
                with open(path, "r", encoding="utf-8") as file:
                    loaded = yaml.safe_load(file) or {}
            except FileNotFoundError:
                raise RuntimeError(f"Configuration file not found at {path}.")
            except yaml.YAMLError as e:
                raise RuntimeError(f"Error parsing YAML file: {e}")

            if not isinstance(loaded, dict):
                raise RuntimeError(f"Configuration root in {path} must be a mapping.")

            _config = _merge_dicts(DEFAULTS, loaded)

        return _config

    @staticmethod
    def reload_config(filepath: str | Path | None = None):
        """
        Reload the configuration from disk.

        Returns:
            dict: The reloaded configuration dictionary.
        """

        global _config
        _config = None

        return ConfigLoader.load_config(filepath)
