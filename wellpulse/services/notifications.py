"""
Outbound email: the notifier collaborator and the fire-and-forget queue.

Request handlers never talk SMTP. They ``enqueue`` a ``Notification`` and
return; worker tasks started in the app lifespan drain the queue and run
the blocking send in a thread. A failed send is logged and dropped, it is
never reported back to the request that caused it.

The weekly dispatch job calls ``Notifier.send`` directly because it needs
to know whether delivery succeeded before recording a receipt.
"""
import asyncio
import smtplib
from email.message import EmailMessage
from typing import List, Optional, Protocol, Sequence

from pydantic import BaseModel

from wellpulse.core.config import NotificationConfig
from wellpulse.core.errors import DeliveryError
from wellpulse.core.logging_config import get_logger

logger = get_logger(__name__)


class Notification(BaseModel):
    recipients: List[str]
    subject: str
    body: str
    html: Optional[str] = None
    kind: str = "generic"


class Notifier(Protocol):
    def send(self, recipients: Sequence[str], subject: str, body: str, html: Optional[str] = None) -> None:
        """Hand one message to the transport; raise ``DeliveryError`` on failure."""
        ...


class SmtpNotifier:
    def __init__(self, config: NotificationConfig):
        self.config = config

    def _message(self, recipients: Sequence[str], subject: str, body: str, html: Optional[str]) -> EmailMessage:
        message = EmailMessage()
        message["From"] = self.config.from_address
        message["To"] = ", ".join(recipients)
        message["Subject"] = subject
        message.set_content(body)
        if html:
            message.add_alternative(html, subtype="html")
        return message

    def send(self, recipients: Sequence[str], subject: str, body: str, html: Optional[str] = None) -> None:
        if not recipients:
            raise DeliveryError("No recipients given")

        message = self._message(recipients, subject, body, html)
        try:
            with smtplib.SMTP(
                self.config.smtp_host,
                self.config.smtp_port,
                timeout=self.config.smtp_timeout_seconds,
            ) as smtp:
                if self.config.smtp_use_tls:
                    smtp.starttls()
                if self.config.smtp_user:
                    smtp.login(self.config.smtp_user, self.config.smtp_password or "")
                smtp.send_message(message)
        except (smtplib.SMTPException, OSError) as e:
            raise DeliveryError(f"SMTP delivery failed: {e}")

        logger.info("email_sent", recipients=len(recipients), subject=subject)


class LoggingNotifier:
    """Stands in for SMTP in development: logs what would have been sent."""

    def send(self, recipients: Sequence[str], subject: str, body: str, html: Optional[str] = None) -> None:
        logger.info("email_not_sent_no_smtp", recipients=list(recipients), subject=subject)


def build_notifier(config: NotificationConfig) -> Notifier:
    if config.smtp_host:
        return SmtpNotifier(config)
    logger.warning("smtp_not_configured", detail="emails will be logged, not delivered")
    return LoggingNotifier()


class NotificationQueue:
    """Bounded in-process queue with a small pool of delivery workers."""

    def __init__(self, notifier: Notifier, max_depth: int = 1000, worker_count: int = 1):
        self.notifier = notifier
        self.max_depth = max_depth
        self.worker_count = worker_count
        self.queue: Optional[asyncio.Queue] = None
        self.workers: List[asyncio.Task] = []

    def initialize(self) -> None:
        self.queue = asyncio.Queue(maxsize=self.max_depth)
        logger.info("notification_queue_initialized", max_depth=self.max_depth, workers=self.worker_count)

    async def start_workers(self) -> None:
        if self.queue is None:
            raise RuntimeError("Queue not initialized")
        for worker_id in range(self.worker_count):
            self.workers.append(asyncio.create_task(self._worker_loop(worker_id)))

    async def stop_workers(self) -> None:
        for worker in self.workers:
            worker.cancel()
        if self.workers:
            await asyncio.gather(*self.workers, return_exceptions=True)
        self.workers.clear()
        logger.info("notification_workers_stopped")

    def enqueue(self, notification: Notification) -> bool:
        """Queue a notification. Returns False when it had to be dropped."""
        if self.queue is None:
            logger.warning("notification_dropped", reason="queue_not_initialized", kind=notification.kind)
            return False
        try:
            self.queue.put_nowait(notification)
        except asyncio.QueueFull:
            logger.warning("notification_dropped", reason="queue_full", kind=notification.kind)
            return False
        return True

    async def deliver(self, notification: Notification) -> bool:
        try:
            await asyncio.to_thread(
                self.notifier.send,
                notification.recipients,
                notification.subject,
                notification.body,
                notification.html,
            )
        except DeliveryError as e:
            logger.warning("notification_delivery_failed", kind=notification.kind, error=e.message)
            return False
        return True

    async def _worker_loop(self, worker_id: int) -> None:
        while True:
            notification = await self.queue.get()
            try:
                await self.deliver(notification)
            except Exception:
                # Keep the worker alive; one bad message must not stop delivery
                logger.exception("notification_worker_error", worker_id=worker_id, kind=notification.kind)
            finally:
                self.queue.task_done()

    async def drain(self) -> None:
        """Wait until everything queued so far has been attempted."""
        if self.queue is not None:
            await self.queue.join()
