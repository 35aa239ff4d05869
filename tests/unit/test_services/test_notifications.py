"""Unit tests for notifiers and the notification queue."""
import smtplib
from unittest.mock import MagicMock, patch

import pytest

from wellpulse.core.config import NotificationConfig
from wellpulse.core.errors import DeliveryError
from wellpulse.services.notifications import (
    LoggingNotifier,
    Notification,
    NotificationQueue,
    SmtpNotifier,
    build_notifier,
)
from tests.utils import RecordingNotifier


def make_notification(subject="Hello acme.com", kind="checkin"):
    return Notification(recipients=["lead@acme.com"], subject=subject, body="body", kind=kind)


@pytest.mark.unit
class TestBuildNotifier:

    def test_without_smtp_host_logs_only(self):
        notifier = build_notifier(NotificationConfig())
        assert isinstance(notifier, LoggingNotifier)
        notifier.send(["lead@acme.com"], "subject", "body")

    def test_with_smtp_host(self):
        assert isinstance(build_notifier(NotificationConfig(smtp_host="smtp.example.com")), SmtpNotifier)


@pytest.mark.unit
class TestSmtpNotifier:

    def test_sends_multipart_message(self):
        config = NotificationConfig(smtp_host="smtp.example.com", smtp_user="mailer", smtp_password="pw")
        with patch("wellpulse.services.notifications.smtplib.SMTP") as smtp_class:
            smtp = smtp_class.return_value.__enter__.return_value
            SmtpNotifier(config).send(["a@acme.com", "b@acme.com"], "Subject", "text", "<p>html</p>")

        smtp_class.assert_called_once_with("smtp.example.com", 587, timeout=8.0)
        smtp.starttls.assert_called_once()
        smtp.login.assert_called_once_with("mailer", "pw")
        message = smtp.send_message.call_args[0][0]
        assert message["To"] == "a@acme.com, b@acme.com"
        assert message["From"] == "no-reply@wellpulse.app"
        assert message.is_multipart()

    def test_transport_error_becomes_delivery_error(self):
        config = NotificationConfig(smtp_host="smtp.example.com", smtp_use_tls=False)
        with patch("wellpulse.services.notifications.smtplib.SMTP") as smtp_class:
            smtp_class.side_effect = smtplib.SMTPConnectError(421, b"busy")
            with pytest.raises(DeliveryError):
                SmtpNotifier(config).send(["a@acme.com"], "Subject", "text")

    def test_no_recipients(self):
        with pytest.raises(DeliveryError):
            SmtpNotifier(NotificationConfig(smtp_host="smtp.example.com")).send([], "Subject", "text")


@pytest.mark.unit
class TestNotificationQueue:

    def test_enqueue_before_initialize_drops(self):
        queue = NotificationQueue(RecordingNotifier())
        assert queue.enqueue(make_notification()) is False

    @pytest.mark.asyncio
    async def test_full_queue_drops(self):
        queue = NotificationQueue(RecordingNotifier(), max_depth=1)
        queue.initialize()
        assert queue.enqueue(make_notification()) is True
        assert queue.enqueue(make_notification()) is False

    @pytest.mark.asyncio
    async def test_workers_deliver(self):
        notifier = RecordingNotifier()
        queue = NotificationQueue(notifier, worker_count=2)
        queue.initialize()
        await queue.start_workers()
        try:
            queue.enqueue(make_notification("one"))
            queue.enqueue(make_notification("two"))
            await queue.drain()
        finally:
            await queue.stop_workers()

        assert sorted(message["subject"] for message in notifier.sent) == ["one", "two"]
        assert queue.workers == []

    @pytest.mark.asyncio
    async def test_delivery_error_does_not_stop_worker(self):
        notifier = RecordingNotifier(fail_domains=["beta.io"])
        queue = NotificationQueue(notifier)
        queue.initialize()
        await queue.start_workers()
        try:
            queue.enqueue(make_notification("Hello beta.io"))
            queue.enqueue(make_notification("Hello acme.com"))
            await queue.drain()
        finally:
            await queue.stop_workers()

        assert [message["subject"] for message in notifier.sent] == ["Hello acme.com"]

    @pytest.mark.asyncio
    async def test_unexpected_error_is_contained(self):
        notifier = MagicMock()
        notifier.send.side_effect = [RuntimeError("boom"), None]
        queue = NotificationQueue(notifier)
        queue.initialize()
        await queue.start_workers()
        try:
            queue.enqueue(make_notification("first"))
            queue.enqueue(make_notification("second"))
            await queue.drain()
        finally:
            await queue.stop_workers()

        assert notifier.send.call_count == 2

    @pytest.mark.asyncio
    async def test_deliver_reports_failure(self):
        queue = NotificationQueue(RecordingNotifier(fail_domains=["beta.io"]))
        assert await queue.deliver(make_notification("Hello beta.io")) is False
        assert await queue.deliver(make_notification("Hello acme.com")) is True

    @pytest.mark.asyncio
    async def test_start_requires_initialize(self):
        with pytest.raises(RuntimeError):
            await NotificationQueue(RecordingNotifier()).start_workers()
