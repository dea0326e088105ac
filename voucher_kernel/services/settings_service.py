"""
SettingsService -- read and write the period lock date.

Responsibility:
    Supplies the active ``locked_until_date`` to validation and posting,
    and lets an administrator move it.

Architecture position:
    Kernel > Services -- imperative shell.  Flush-only.

Failure modes:
    - InvalidSettingError: lock date is not ``YYYY-MM-DD``.
"""

from datetime import date

from sqlalchemy import select

from voucher_kernel.exceptions import InvalidSettingError
from voucher_kernel.logging_config import get_logger
from voucher_kernel.models.settings import LOCKED_UNTIL_DATE_KEY, SystemSetting
from voucher_kernel.services.base import BaseService

logger = get_logger("services.settings")


class SettingsService(BaseService[SystemSetting]):
    """Key/value settings with typed accessors for the period lock."""

    def get(self, key: str) -> str | None:
        row = self.session.execute(
            select(SystemSetting).where(SystemSetting.key == key)
        ).scalar_one_or_none()
        return row.value if row is not None else None

    def set(self, key: str, value: str, actor: str | None = None) -> SystemSetting:
        row = self.session.execute(
            select(SystemSetting).where(SystemSetting.key == key)
        ).scalar_one_or_none()
        if row is None:
            row = SystemSetting(key=key, value=value, created_by=actor)
            self.session.add(row)
        else:
            row.value = value
            row.updated_by = actor
        self.session.flush()
        return row

    def get_locked_until(self) -> str | None:
        """Active lock date, or None when no period is locked.

        A missing row or an empty value means no lock.
        """
        value = self.get(LOCKED_UNTIL_DATE_KEY)
        if value is None or not value.strip():
            return None
        return value.strip()

    def set_locked_until(self, locked_until: date | str | None, actor: str | None = None) -> None:
        """Move the lock date; None or "" removes the lock.

        Raises:
            InvalidSettingError: If the value is not an ISO date.
        """
        if isinstance(locked_until, date):
            value = locked_until.isoformat()[:10]
        else:
            value = (locked_until or "").strip()
            if value:
                try:
                    date.fromisoformat(value)
                except ValueError as e:
                    raise InvalidSettingError(
                        LOCKED_UNTIL_DATE_KEY, value, "expected YYYY-MM-DD"
                    ) from e
                if len(value) != 10:
                    raise InvalidSettingError(
                        LOCKED_UNTIL_DATE_KEY, value, "expected YYYY-MM-DD"
                    )

        previous = self.get_locked_until()
        self.set(LOCKED_UNTIL_DATE_KEY, value, actor)
        logger.info(
            "period_lock_changed",
            extra={"previous_lock": previous, "locked_until": value or None, "actor": actor},
        )
