"""
Module: voucher_kernel.models.settings
Responsibility: Key/value system settings, most importantly the period
    lock date (``locked_until_date``).
Architecture position: Kernel > Models.  May import from db/base.py only.
"""

from sqlalchemy import String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from voucher_kernel.db.base import TrackedBase

LOCKED_UNTIL_DATE_KEY = "locked_until_date"


class SystemSetting(TrackedBase):
    """One named setting. ``key`` is unique; ``value`` is free text."""

    __tablename__ = "system_settings"

    __table_args__ = (
        UniqueConstraint("key", name="uq_system_setting_key"),
    )

    key: Mapped[str] = mapped_column(String(100), nullable=False)
    value: Mapped[str] = mapped_column(String(500), nullable=False, default="")
    description: Mapped[str | None] = mapped_column(String(500), nullable=True)

    def __repr__(self) -> str:
        return f"<SystemSetting {self.key}={self.value!r}>"
