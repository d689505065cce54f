"""
Configuration Loader (``query_binding.config.loader``).

Loads a YAML file and parses it into a ``BindingConfig``.

Failure modes
-------------
* Missing YAML file  -> ``FileNotFoundError`` propagates.
* Malformed YAML, a non-mapping document, unknown keys, or values of the
  wrong type  -> ``ConfigError``.
"""

from __future__ import annotations

import dataclasses
import hashlib
import json
from pathlib import Path
from typing import Any

import yaml

from query_binding.config.schema import BindingConfig
from query_binding.exceptions import ConfigError

_KNOWN_KEYS = frozenset(f.name for f in dataclasses.fields(BindingConfig))


def load_yaml_file(path: Path) -> dict[str, Any]:
    """Load a YAML file into a dict; an empty file yields ``{}``."""
    with open(path) as f:
        try:
            data = yaml.safe_load(f) or {}
        except yaml.YAMLError as exc:
            raise ConfigError(str(path), f"invalid YAML: {exc}") from exc
    if not isinstance(data, dict):
        raise ConfigError(str(path), "top-level document must be a mapping")
    return data


def parse_config(data: dict[str, Any], source: str = "<memory>") -> BindingConfig:
    unknown = sorted(set(data) - _KNOWN_KEYS)
    if unknown:
        raise ConfigError(source, f"unknown keys: {', '.join(unknown)}")
    try:
        return BindingConfig(**data)
    except ValueError as exc:
        raise ConfigError(source, str(exc)) from exc


def load_config(path: Path) -> BindingConfig:
    return parse_config(load_yaml_file(path), str(path))


def compute_checksum(config: BindingConfig) -> str:
    """SHA-256 of the canonical JSON form of ``config``; deterministic."""
    canonical = json.dumps(dataclasses.asdict(config), sort_keys=True, default=str)
    return hashlib.sha256(canonical.encode()).hexdigest()
