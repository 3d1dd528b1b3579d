#!/usr/bin/env python3

import os
import json
import tomllib
import logging
import sys
from pathlib import Path

import toml
import yaml

from .exit_codes import ConfigError

logger = logging.getLogger("gitdevflow")

CONFIG_FILENAMES = ['config.json', 'config.toml', 'config.yaml', 'config.yml']


def get_config_path():
    """Get the path to the configuration file.

    Checks in order:
    1. GITDEVFLOW_CONFIG environment variable
    2. ~/.gitdevflow/ directory
    """
    if 'GITDEVFLOW_CONFIG' in os.environ:
        path = Path(os.environ['GITDEVFLOW_CONFIG'])
        if path.exists():
            return path

    config_dir = Path.home() / '.gitdevflow'
    for filename in CONFIG_FILENAMES:
        path = config_dir / filename
        if path.exists():
            return path

    # If no file exists, return default path for saving
    return config_dir / 'config.json'


def get_default_config():
    """Get default configuration."""
    return {
        "versioning": {
            "release_branches": ["master"],
            "minor_types": ["feat"],
            "patch_types": ["fix", "docs", "style", "refactor", "perf", "test", "chore"]
        },
        "git": {
            "timeout_seconds": 30
        },
        "logging": {
            "level": "WARNING",
            "format": "%(levelname)s: %(message)s"
        }
    }


def _read_config_file(config_path):
    suffix = config_path.suffix.lower()
    if suffix == '.toml':
        with open(config_path, 'rb') as f:
            return tomllib.load(f)
    if suffix in ['.yaml', '.yml']:
        with open(config_path, 'r') as f:
            return yaml.safe_load(f) or {}
    with open(config_path, 'r') as f:
        return json.load(f)


def load_config():
    """Load configuration from file.

    Defaults are overridden by the config file, which is overridden by
    GITDEVFLOW_* environment variables.

    Raises:
        ConfigError: if the config file exists but cannot be parsed
    """
    config_path = get_config_path()
    config = get_default_config()

    if config_path.exists():
        try:
            file_config = _read_config_file(config_path)
        except (OSError, ValueError, yaml.YAMLError) as e:
            raise ConfigError(f"Error loading config from {config_path}: {e}") from e
        if not isinstance(file_config, dict):
            raise ConfigError(f"Config file {config_path} must contain a mapping")
        config = merge_configs(config, file_config)

    return apply_env_overrides(config)


def save_config(config):
    """Save configuration to file, in the format given by its suffix."""
    config_path = get_config_path()
    config_path.parent.mkdir(parents=True, exist_ok=True)

    suffix = config_path.suffix.lower()
    with open(config_path, 'w') as f:
        if suffix == '.toml':
            toml.dump(config, f)
        elif suffix in ['.yaml', '.yml']:
            yaml.safe_dump(config, f, default_flow_style=False)
        else:
            json.dump(config, f, indent=2)

    logger.info(f"Configuration saved to {config_path}")
    return config_path


def merge_configs(base_config, override_config):
    """
    Recursively merge two configuration dictionaries.

    Args:
        base_config (dict): Base configuration
        override_config (dict): Configuration to merge/override with

    Returns:
        dict: Merged configuration
    """
    merged = base_config.copy()

    for key, value in override_config.items():
        if key in merged and isinstance(merged[key], dict) and isinstance(value, dict):
            merged[key] = merge_configs(merged[key], value)
        else:
            merged[key] = value

    return merged


def _convert_env_value(value, current):
    if isinstance(current, list):
        return [item.strip() for item in value.split(',') if item.strip()]
    if value.lower() in ('true', '1', 'yes', 'on'):
        return True
    if value.lower() in ('false', '0', 'no', 'off'):
        return False
    if value.isdigit():
        return int(value)
    return value


def apply_env_overrides(config):
    """
    Apply environment variable overrides to configuration.
    Environment variables follow the pattern: GITDEVFLOW_SECTION_KEY
    For example: GITDEVFLOW_GIT_TIMEOUT_SECONDS=60
    List values are comma separated:
    GITDEVFLOW_VERSIONING_RELEASE_BRANCHES=master,main
    """
    env_prefix = "GITDEVFLOW_"

    for env_key, value in os.environ.items():
        if not env_key.startswith(env_prefix) or env_key == 'GITDEVFLOW_CONFIG':
            continue

        key_parts = env_key[len(env_prefix):].lower().split('_')

        current_level = config
        i = 0
        while i < len(key_parts):
            # Find the longest key in current_level that is a prefix of the remaining key_parts
            best_match_len = 0
            matched_key = None

            for config_key in current_level.keys():
                config_key_parts = config_key.split('_')
                if key_parts[i:i + len(config_key_parts)] == config_key_parts:
                    if len(config_key_parts) > best_match_len:
                        best_match_len = len(config_key_parts)
                        matched_key = config_key

            if not matched_key:
                break

            if i + best_match_len == len(key_parts):
                current_level[matched_key] = _convert_env_value(value, current_level[matched_key])
                break

            if isinstance(current_level[matched_key], dict):
                current_level = current_level[matched_key]
                i += best_match_len
            else:
                # Path conflict: env var is longer than the config path
                break

    return config


def configure_logging(config, verbose=False):
    """Send gitdevflow log records to stderr at the configured level."""
    logging_config = config.get('logging', {})
    level = "DEBUG" if verbose else str(logging_config.get('level', 'WARNING')).upper()
    logging.basicConfig(
        level=getattr(logging, level, logging.WARNING),
        format=logging_config.get('format', "%(levelname)s: %(message)s"),
        handlers=[
            logging.StreamHandler(sys.stderr)
        ],
        force=True
    )
