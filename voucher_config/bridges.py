"""
Config -> Kernel Bridges.

Functions that turn an ``EngineConfig`` into kernel objects.  These live
in voucher_config (the producer) because the kernel must never import
voucher_config.

Usage:
    from voucher_config import get_active_config
    from voucher_config.bridges import apply_runtime_config, build_voucher_service

    config = get_active_config()
    apply_runtime_config(config)
    with session_scope() as session:
        build_voucher_service(session, config).post(voucher_id)
"""

from __future__ import annotations

from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session

from voucher_config.schema import EngineConfig
from voucher_kernel.db.engine import init_engine_from_url
from voucher_kernel.domain.clock import Clock
from voucher_kernel.logging_config import configure_logging
from voucher_kernel.services.settings_service import SettingsService
from voucher_kernel.services.voucher_service import VoucherService


def apply_runtime_config(config: EngineConfig) -> Engine:
    """Configure logging and initialize the database engine."""
    configure_logging(level=config.log_level)
    return init_engine_from_url(config.database_url)


def build_voucher_service(
    session: Session,
    config: EngineConfig,
    clock: Clock | None = None,
) -> VoucherService:
    """VoucherService wired with the configured locale, predicate and retry limit."""
    return VoucherService(
        session,
        clock,
        settings=SettingsService(session),
        messages=config.message_catalog(),
        is_off_balance=config.off_balance_predicate(),
        max_doc_no_attempts=config.doc_no_max_attempts,
    )
