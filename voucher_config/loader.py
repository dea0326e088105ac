"""
Configuration Loader (``voucher_config.loader``).

Responsibility
--------------
Loads a YAML file and parses it into a frozen ``EngineConfig``.  Callers
use ``voucher_config.get_active_config()``; this module is its tooling.

Failure modes
-------------
* Missing YAML file  -> ``FileNotFoundError`` propagates.
* Malformed YAML  -> ``yaml.YAMLError`` propagates.
* Unknown keys or bad values  -> ``ValueError``.
"""

from __future__ import annotations

import hashlib
import json
from pathlib import Path
from typing import Any

import yaml

from voucher_config.schema import EngineConfig

_KNOWN_KEYS = frozenset(
    {"locale", "off_balance_prefixes", "doc_no_max_attempts", "database_url", "log_level"}
)


def load_yaml_file(path: Path) -> dict[str, Any]:
    """
    Load a single YAML file and return its contents as a dict.

    Raises:
        FileNotFoundError: if the file does not exist.
        yaml.YAMLError: if the file contains invalid YAML.
        ValueError: if the top level is not a mapping.
    """
    with open(path, encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}
    if not isinstance(data, dict):
        raise ValueError(f"{path}: expected a mapping at the top level")
    return data


def parse_engine_config(data: dict[str, Any]) -> EngineConfig:
    """
    Parse an ``EngineConfig`` from a dict.  Missing keys take defaults;
    the nested ``engine:`` section is accepted as the root.

    Raises:
        ValueError: on unknown keys or invalid values.
    """
    section = data.get("engine", data)
    if not isinstance(section, dict):
        raise ValueError(
            f"engine config section must be a mapping, got {type(section).__name__}"
        )
    unknown = set(section) - _KNOWN_KEYS
    if unknown:
        raise ValueError(f"Unknown engine config keys: {sorted(unknown)}")

    kwargs: dict[str, Any] = {}
    if "locale" in section:
        kwargs["locale"] = str(section["locale"]).lower()
    if "off_balance_prefixes" in section:
        prefixes = section["off_balance_prefixes"] or []
        if isinstance(prefixes, str):
            prefixes = [prefixes]
        kwargs["off_balance_prefixes"] = tuple(str(p) for p in prefixes)
    if "doc_no_max_attempts" in section:
        try:
            kwargs["doc_no_max_attempts"] = int(section["doc_no_max_attempts"])
        except (TypeError, ValueError) as e:
            raise ValueError(
                f"doc_no_max_attempts must be an integer, got {section['doc_no_max_attempts']!r}"
            ) from e
    if "database_url" in section:
        kwargs["database_url"] = str(section["database_url"])
    if "log_level" in section:
        kwargs["log_level"] = str(section["log_level"]).upper()

    return EngineConfig(checksum=compute_checksum(section), **kwargs)


def compute_checksum(data: dict[str, Any]) -> str:
    """SHA-256 of the canonical JSON form; identical data, identical checksum."""
    canonical = json.dumps(data, sort_keys=True, default=str)
    return hashlib.sha256(canonical.encode()).hexdigest()
