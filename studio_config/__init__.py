"""
studio_config -- single public entrypoint for studio configuration.

Responsibility:
    Provides the ONLY way to obtain configuration at runtime through
    ``get_active_config()``.  No other component reads configuration
    files or environment variables.

Architecture position:
    Configuration -- YAML-driven defaults.  This package sits above
    ``studio_kernel`` and ``studio_engines`` and below ``studio_services``
    / ``studio_modules``.  The kernel never imports ``studio_config``;
    ``studio_config.bridges`` translates config into kernel inputs.

Invariants enforced:
    - Single entrypoint: all runtime config flows through ``get_active_config()``.
    - The path is an explicit argument; environment variables are not read.
    - Deterministic checksum: the same YAML always yields the same checksum.

Failure modes:
    - ``FileNotFoundError`` -- the configuration file does not exist.
    - ``yaml.YAMLError`` -- the file is not valid YAML.
    - ``ConfigError`` -- missing keys or invalid values.

Audit relevance:
    Every successful ``get_active_config()`` call emits a
    ``STUDIO_CONFIG_TRACE`` log entry with the config id, version and
    checksum, tying computed figures to the configuration in force.
"""

from __future__ import annotations

import logging
from pathlib import Path

from studio_config.loader import load_config_file
from studio_config.schema import (
    InvoiceDefaults,
    PermissionGrant,
    PlanConfig,
    StudioConfig,
    SubscriptionConfig,
)

_logger = logging.getLogger("studio_kernel.config")

DEFAULT_CONFIG_PATH = Path(__file__).parent / "defaults" / "studio.yaml"


def get_active_config(config_path: Path | None = None) -> StudioConfig:
    """The ONLY public configuration entrypoint.

    Args:
        config_path: Override path to a studio YAML file.  Defaults to
            the packaged ``studio_config/defaults/studio.yaml``.

    Returns:
        A frozen ``StudioConfig`` carrying the source checksum.
    """
    path = Path(config_path) if config_path is not None else DEFAULT_CONFIG_PATH
    config = load_config_file(path)

    _logger.info(
        "STUDIO_CONFIG_TRACE",
        extra={
            "trace_type": "STUDIO_CONFIG_TRACE",
            "config_id": config.config_id,
            "config_version": config.version,
            "checksum": config.checksum,
            "currency": config.currency,
            "permission_grant_count": len(config.permissions),
        },
    )
    return config


__all__ = [
    "DEFAULT_CONFIG_PATH",
    "InvoiceDefaults",
    "PermissionGrant",
    "PlanConfig",
    "StudioConfig",
    "SubscriptionConfig",
    "get_active_config",
]
