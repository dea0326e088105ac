"""
voucher_config -- single public entrypoint for engine configuration.

Responsibility:
    ``get_active_config()`` is the only way to obtain engine settings at
    runtime.  It reads a YAML file (the ``VOUCHER_CONFIG`` environment
    variable, an explicit path, or the packaged ``defaults.yaml``) and
    returns a validated, frozen ``EngineConfig``.

Architecture position:
    Configuration -- sits above ``voucher_kernel.domain``.  The kernel
    never imports from this package; callers pass the resulting catalog,
    predicate and limits into the services.

Failure modes:
    - ``FileNotFoundError`` -- the requested file does not exist.
    - ``yaml.YAMLError`` -- malformed YAML.
    - ``ValueError`` -- unknown keys or invalid values.

Audit relevance:
    Every successful call emits a ``VOUCHER_CONFIG_TRACE`` log entry with
    the source path and checksum.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path

from voucher_config.loader import load_yaml_file, parse_engine_config
from voucher_config.schema import EngineConfig

_logger = logging.getLogger("voucher_kernel.config")

CONFIG_ENV_VAR = "VOUCHER_CONFIG"
DEFAULT_CONFIG_PATH = Path(__file__).parent / "defaults.yaml"


def get_active_config(path: Path | str | None = None) -> EngineConfig:
    """Load and validate the engine configuration.

    Args:
        path: YAML file to read.  Defaults to ``$VOUCHER_CONFIG``, then to
            the packaged defaults.
    """
    source = Path(path or os.environ.get(CONFIG_ENV_VAR) or DEFAULT_CONFIG_PATH)
    config = parse_engine_config(load_yaml_file(source))

    _logger.info(
        "VOUCHER_CONFIG_TRACE",
        extra={
            "trace_type": "VOUCHER_CONFIG_TRACE",
            "source": str(source),
            "checksum": config.checksum,
            "locale": config.locale,
            "doc_no_max_attempts": config.doc_no_max_attempts,
        },
    )
    return config


__all__ = ["CONFIG_ENV_VAR", "DEFAULT_CONFIG_PATH", "EngineConfig", "get_active_config"]
