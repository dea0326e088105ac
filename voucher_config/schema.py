"""
EngineConfig schema.

Runtime settings for the voucher engine, parsed from YAML by the loader.
The balance tolerance is deliberately absent: it is a kernel constant.
"""

from __future__ import annotations

from dataclasses import dataclass

from voucher_kernel.domain.accounts import OffBalancePredicate, off_balance_predicate
from voucher_kernel.domain.messages import CATALOGS, MessageCatalog, get_catalog

_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


@dataclass(frozen=True)
class EngineConfig:
    """Validated engine settings."""

    locale: str = "vi"
    off_balance_prefixes: tuple[str, ...] = ("0",)
    doc_no_max_attempts: int = 5
    database_url: str = "sqlite://"
    log_level: str = "INFO"
    checksum: str = ""

    def __post_init__(self) -> None:
        if self.locale not in CATALOGS:
            raise ValueError(
                f"Unknown locale {self.locale!r}; expected one of {sorted(CATALOGS)}"
            )
        if self.doc_no_max_attempts < 1:
            raise ValueError(
                f"doc_no_max_attempts must be >= 1, got {self.doc_no_max_attempts}"
            )
        if self.log_level.upper() not in _LOG_LEVELS:
            raise ValueError(f"Unknown log_level {self.log_level!r}")
        if not self.database_url:
            raise ValueError("database_url must not be empty")

    def message_catalog(self) -> MessageCatalog:
        return get_catalog(self.locale)

    def off_balance_predicate(self) -> OffBalancePredicate:
        return off_balance_predicate(self.off_balance_prefixes)
