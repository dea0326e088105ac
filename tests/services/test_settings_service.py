"""Tests for SettingsService and the period lock setting."""

from datetime import date, datetime

import pytest

from voucher_kernel.exceptions import InvalidSettingError
from voucher_kernel.models.settings import LOCKED_UNTIL_DATE_KEY, SystemSetting


class TestKeyValue:
    def test_missing_key(self, settings_service):
        assert settings_service.get("nope") is None

    def test_set_then_update(self, settings_service, session):
        settings_service.set("company_name", "Công ty A", actor="admin")
        row = settings_service.set("company_name", "Công ty B", actor="admin2")

        assert settings_service.get("company_name") == "Công ty B"
        assert row.updated_by == "admin2"
        assert session.query(SystemSetting).count() == 1


class TestLockedUntil:
    def test_no_lock_by_default(self, settings_service):
        assert settings_service.get_locked_until() is None

    def test_blank_value_means_no_lock(self, settings_service):
        settings_service.set(LOCKED_UNTIL_DATE_KEY, "   ")

        assert settings_service.get_locked_until() is None

    def test_set_from_string(self, settings_service):
        settings_service.set_locked_until("2024-01-31", actor="admin")

        assert settings_service.get_locked_until() == "2024-01-31"

    def test_set_from_date_and_datetime(self, settings_service):
        settings_service.set_locked_until(date(2024, 6, 30))
        assert settings_service.get_locked_until() == "2024-06-30"

        settings_service.set_locked_until(datetime(2024, 9, 30, 17, 45))
        assert settings_service.get_locked_until() == "2024-09-30"

    def test_clear_lock(self, settings_service):
        settings_service.set_locked_until("2024-01-31")
        settings_service.set_locked_until(None)

        assert settings_service.get_locked_until() is None

    @pytest.mark.parametrize("value", ["31/01/2024", "2024-13-01", "20240131", "yesterday"])
    def test_rejects_malformed(self, settings_service, value):
        with pytest.raises(InvalidSettingError) as exc_info:
            settings_service.set_locked_until(value)

        assert exc_info.value.key == LOCKED_UNTIL_DATE_KEY
        assert exc_info.value.code == "INVALID_SETTING"
        assert settings_service.get_locked_until() is None

    def test_change_logged(self, settings_service, captured_logs):
        settings_service.set_locked_until("2024-01-31", actor="admin")
        settings_service.set_locked_until("2024-02-29", actor="admin")

        changes = [r for r in captured_logs() if r["message"] == "period_lock_changed"]
        assert changes[-1]["previous_lock"] == "2024-01-31"
        assert changes[-1]["locked_until"] == "2024-02-29"
