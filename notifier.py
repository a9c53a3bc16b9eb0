"""
Best-effort email notifications.

Handlers publish to the Outbox only after their database work has been
committed. Delivery runs on a background executor (or inline when
NOTIFY_SYNC is set) and every failure stops at the Outbox: it is logged and
never reaches the HTTP response.
"""
from __future__ import annotations

import logging
import smtplib
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from email.message import EmailMessage

from errors import NotifierFailure

logger = logging.getLogger(__name__)


@dataclass
class Notification:
    kind: str
    to: list[str]
    subject: str
    body: str
    context: dict = field(default_factory=dict)


class SmtpNotifier:
    def __init__(self, host, port, user=None, password=None, use_tls=True,
                 sender=None, timeout=30):
        self.host = host
        self.port = port
        self.user = user
        self.password = password
        self.use_tls = use_tls
        self.sender = sender or user
        self.timeout = timeout

    def send(self, notification: Notification) -> None:
        msg = EmailMessage()
        msg["From"] = self.sender
        msg["To"] = ", ".join(notification.to)
        msg["Subject"] = notification.subject
        msg.set_content(notification.body)

        try:
            with smtplib.SMTP(self.host, self.port, timeout=self.timeout) as smtp:
                if self.use_tls:
                    smtp.starttls()
                if self.user and self.password:
                    smtp.login(self.user, self.password)
                smtp.send_message(msg)
        except (smtplib.SMTPException, OSError) as exc:
            raise NotifierFailure(f"smtp delivery failed: {exc}") from exc


class LogNotifier:
    """Used when no SMTP host is configured."""

    def send(self, notification: Notification) -> None:
        logger.info(
            "notification %s to %s: %s",
            notification.kind, ", ".join(notification.to), notification.subject,
        )


class Outbox:
    def __init__(self, notifier, executor: ThreadPoolExecutor | None = None):
        self.notifier = notifier
        self.executor = executor

    def publish(self, notification: Notification) -> None:
        recipients = [r for r in dict.fromkeys(notification.to) if r]
        if not recipients:
            logger.debug("notification %s has no recipients", notification.kind)
            return
        notification.to = recipients

        if self.executor is None:
            self._deliver(notification)
        else:
            self.executor.submit(self._deliver, notification)

    def _deliver(self, notification: Notification) -> None:
        try:
            self.notifier.send(notification)
        except Exception:
            logger.exception(
                "notification %s to %s failed", notification.kind, notification.to
            )

    def shutdown(self) -> None:
        if self.executor is not None:
            self.executor.shutdown(wait=True)


def welcome_notification(account) -> Notification:
    return Notification(
        kind="account_created",
        to=[account.email],
        subject="Welcome to the submission portal",
        body=f"Welcome, {account.name}.\n\nYour account has been created.\n",
    )


def submission_notification(account, submission, operator_email) -> Notification:
    return Notification(
        kind="submission_received",
        to=[account.email, operator_email],
        subject="New assignment submitted",
        body=(
            f"{account.name} ({account.student_id}) submitted a new assignment.\n\n"
            f"Assignment: {submission.name}\n"
            f"File: {submission.stored_file_id}\n"
            f"Submitted at: {submission.submitted_at.isoformat()}\n"
        ),
        context={"record_id": submission.record_id},
    )


def build_outbox(config) -> Outbox:
    if config.get("SMTP_HOST"):
        notifier = SmtpNotifier(
            host=config["SMTP_HOST"],
            port=config.get("SMTP_PORT", 587),
            user=config.get("SMTP_USER"),
            password=config.get("SMTP_PASSWORD"),
            use_tls=config.get("SMTP_USE_TLS", True),
            sender=config.get("MAIL_FROM"),
            timeout=config.get("SMTP_TIMEOUT", 30),
        )
    else:
        notifier = LogNotifier()

    executor = None
    if not config.get("NOTIFY_SYNC"):
        executor = ThreadPoolExecutor(max_workers=2, thread_name_prefix="notify")
    return Outbox(notifier, executor)
