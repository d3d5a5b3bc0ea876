# tests/test_notification_service.py
import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

import pytest
from unittest.mock import AsyncMock, patch
from app.models.enums import NotificationType
from app.models.notification import SystemNotification
from app.services.notification_service import create_notification, list_notifications, mark_all_read


class TestNotificationService:
    def test_notification_is_staged_until_commit(self, db):
        note = create_notification(db, NotificationType.POLICY_BREACH, "Policy exceeded: Asha",
                                   "Asha has driven 61,000 km.", vehicle_id="v1")
        assert note.is_read is False
        assert note.related_vehicle_id == "v1"

        db.rollback()
        assert db.query(SystemNotification).count() == 0

    def test_list_unread_only(self, db):
        create_notification(db, NotificationType.GENERIC_ALERT, "one", "")
        read = create_notification(db, NotificationType.GENERIC_ALERT, "two", "")
        read.is_read = True
        db.commit()

        assert [n.subject for n in list_notifications(db, unread_only=True)] == ["one"]
        assert len(list_notifications(db)) == 2

    @pytest.mark.asyncio
    async def test_mark_all_read_waits_then_flags_everything(self, db):
        for subject in ("a", "b", "c"):
            create_notification(db, NotificationType.TRIP_DISPATCH, subject, "")
        db.commit()

        with patch("app.services.notification_service.asyncio.sleep", new_callable=AsyncMock) as mock_sleep:
            changed = await mark_all_read(db, delay=2.0)

        mock_sleep.assert_awaited_once_with(2.0)
        assert changed == 3
        db.expire_all()
        assert all(n.is_read for n in db.query(SystemNotification).all())

    @pytest.mark.asyncio
    async def test_mark_all_read_without_delay(self, db):
        with patch("app.services.notification_service.asyncio.sleep", new_callable=AsyncMock) as mock_sleep:
            assert await mark_all_read(db, delay=0) == 0
        mock_sleep.assert_not_awaited()
