import smtplib
from concurrent.futures import ThreadPoolExecutor

import pytest

from errors import NotifierFailure
from notifier import (
    LogNotifier,
    Notification,
    Outbox,
    SmtpNotifier,
    build_outbox,
)


class Recorder:
    def __init__(self):
        self.sent = []

    def send(self, notification):
        self.sent.append(notification)


class Exploding:
    def send(self, notification):
        raise NotifierFailure("boom")


def _note(to=("student@school.test",)):
    return Notification(kind="test", to=list(to), subject="s", body="b")


def test_outbox_delivers_inline_without_executor():
    rec = Recorder()
    Outbox(rec).publish(_note())
    assert len(rec.sent) == 1


def test_outbox_drops_empty_and_duplicate_recipients():
    rec = Recorder()
    outbox = Outbox(rec)
    outbox.publish(_note(to=["a@x.test", None, "a@x.test", "b@x.test"]))
    outbox.publish(_note(to=[None]))
    assert len(rec.sent) == 1
    assert rec.sent[0].to == ["a@x.test", "b@x.test"]


def test_outbox_swallows_and_logs_failures(caplog):
    Outbox(Exploding()).publish(_note())
    assert "notification test" in caplog.text
    assert "boom" in caplog.text


def test_outbox_background_delivery():
    rec = Recorder()
    outbox = Outbox(rec, ThreadPoolExecutor(max_workers=1))
    outbox.publish(_note())
    outbox.shutdown()
    assert len(rec.sent) == 1


def test_background_failure_never_raises(caplog):
    outbox = Outbox(Exploding(), ThreadPoolExecutor(max_workers=1))
    outbox.publish(_note())
    outbox.shutdown()
    assert "failed" in caplog.text


def test_smtp_errors_become_notifier_failure(monkeypatch):
    def refuse(*args, **kwargs):
        raise ConnectionRefusedError("no server")

    monkeypatch.setattr(smtplib, "SMTP", refuse)
    notifier = SmtpNotifier("localhost", 2525, sender="portal@school.test", timeout=1)
    with pytest.raises(NotifierFailure):
        notifier.send(_note())


def test_smtp_sends_message(monkeypatch):
    sessions = []

    class FakeSMTP:
        def __init__(self, host, port, timeout):
            self.host, self.port, self.timeout = host, port, timeout
            self.calls = []
            sessions.append(self)

        def __enter__(self):
            return self

        def __exit__(self, *exc):
            return False

        def starttls(self):
            self.calls.append("starttls")

        def login(self, user, password):
            self.calls.append(("login", user))

        def send_message(self, msg):
            self.calls.append(("send", msg["To"], msg["Subject"]))

    monkeypatch.setattr(smtplib, "SMTP", FakeSMTP)
    notifier = SmtpNotifier("smtp.school.test", 587, user="portal", password="pw",
                            sender="portal@school.test", timeout=30)
    notifier.send(_note(to=["a@x.test", "ops@x.test"]))

    smtp = sessions[0]
    assert smtp.timeout == 30
    assert smtp.calls == ["starttls", ("login", "portal"), ("send", "a@x.test, ops@x.test", "s")]


def test_build_outbox_without_smtp_logs_only():
    outbox = build_outbox({"SMTP_HOST": None, "NOTIFY_SYNC": True})
    assert isinstance(outbox.notifier, LogNotifier)
    assert outbox.executor is None


def test_build_outbox_with_smtp_runs_in_background():
    outbox = build_outbox({"SMTP_HOST": "smtp.school.test", "SMTP_PORT": 25, "NOTIFY_SYNC": False})
    try:
        assert isinstance(outbox.notifier, SmtpNotifier)
        assert outbox.executor is not None
    finally:
        outbox.shutdown()
