"""
query_binding.config -- binding configuration entrypoint.

``get_binding_config()`` is the one way to obtain a ``BindingConfig``.
Without a path it loads the packaged ``defaults.yaml``. Every call emits a
``BINDING_CONFIG_TRACE`` log entry carrying the config checksum.
"""

from __future__ import annotations

from pathlib import Path

from query_binding.config.loader import compute_checksum, load_config, parse_config
from query_binding.config.schema import BindingConfig
from query_binding.logging_config import get_logger

_logger = get_logger("config")

_DEFAULT_CONFIG_PATH = Path(__file__).parent / "defaults.yaml"


def get_binding_config(path: Path | None = None) -> BindingConfig:
    """
    Load and validate a binding configuration.

    Args:
        path: YAML file to load. Defaults to the packaged defaults.

    Raises:
        FileNotFoundError: If ``path`` does not exist.
        ConfigError: If the file is malformed.
    """
    config_path = path or _DEFAULT_CONFIG_PATH
    config = load_config(config_path)
    _logger.debug(
        "BINDING_CONFIG_TRACE",
        extra={
            "trace_type": "BINDING_CONFIG_TRACE",
            "config_path": str(config_path),
            "checksum": compute_checksum(config),
            "tag_name": config.tag_name,
        },
    )
    return config


__all__ = [
    "BindingConfig",
    "compute_checksum",
    "get_binding_config",
    "load_config",
    "parse_config",
]
