"""
High-level Python API for gitdevflow.

Example:
    import gitdevflow

    # Version of a working directory
    gitdevflow.resolve_version("/path/to/project")        # "1.4.0"

    # Version for a build descriptor, as a build backend hook would ask
    gitdevflow.resolve_version_from_descriptor("/path/to/project/pyproject.toml")

Both functions return "unknown-SNAPSHOT" instead of raising when the
version cannot be determined.
"""

import logging
from pathlib import Path
from typing import Any, Dict, Optional

from .config import get_default_config, load_config
from .exit_codes import ConfigError
from .services.version_service import UNKNOWN_SNAPSHOT, VersionService


def _service(config: Optional[Dict[str, Any]], logger) -> VersionService:
    try:
        return VersionService(config=config if config is not None else load_config(), logger=logger)
    except ConfigError as e:
        logging.getLogger(__name__).warning(f"{e}; using default configuration")
        return VersionService(config=get_default_config(), logger=logger)


def resolve_version(path, config: Optional[Dict[str, Any]] = None, logger=None) -> str:
    """
    Compute the version of the working directory at path.

    Args:
        path: Directory inside a git working tree
        config: Configuration dict (loaded from the user's config if None)
        logger: Logger-like object for tracing the resolution

    Returns:
        "MAJOR.MINOR.PATCH", "BASE.TYPE.MAJOR.MINOR.PATCH",
        "BRANCH-SNAPSHOT" or "unknown-SNAPSHOT"
    """
    return _service(config, logger).resolve_version(path)


def resolve_version_from_descriptor(
    descriptor_path,
    config: Optional[Dict[str, Any]] = None,
    logger=None
) -> str:
    """
    Compute the version for a build descriptor (pyproject.toml, setup.cfg, ...).

    The working directory is the directory containing the descriptor.
    """
    log = logger or logging.getLogger(__name__)
    if descriptor_path is None or not Path(descriptor_path).is_file():
        log.info(f"Build descriptor ({descriptor_path}) is not a file, falling back to {UNKNOWN_SNAPSHOT}")
        return UNKNOWN_SNAPSHOT

    descriptor = Path(descriptor_path).resolve()
    log.info(f"Resolving {descriptor} version with gitdevflow")
    return resolve_version(descriptor.parent, config=config, logger=logger)
