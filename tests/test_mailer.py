"""Tests for the password reset email sender."""

import logging

import pytest

from drive_api import config, mailer

# bound before the autouse fixture swaps the module attribute out
from drive_api.mailer import send_password_reset

LINK = "http://localhost:5173/reset-password/abc123"


class FakeSMTP:
    """Records what the sender does with the SMTP connection."""

    def __init__(self, host, port, timeout=None):
        self.host = host
        self.port = port
        self.calls = []
        self.messages = []

    def __enter__(self):
        return self

    def __exit__(self, *exc_info):
        return False

    def starttls(self):
        self.calls.append("starttls")

    def login(self, user, password):
        self.calls.append(("login", user, password))

    def send_message(self, message):
        self.calls.append("send_message")
        self.messages.append(message)


@pytest.fixture
def smtp_connections(monkeypatch):
    connections = []

    def connect(host, port, timeout=None):
        connection = FakeSMTP(host, port, timeout)
        connections.append(connection)
        return connection

    monkeypatch.setattr(mailer.smtplib, "SMTP", connect)
    return connections


def test_without_smtp_host_logs_warning(monkeypatch, caplog, smtp_connections):
    monkeypatch.setattr(config, "SMTP_HOST", None)

    with caplog.at_level(logging.WARNING, logger="drive_api.mailer"):
        send_password_reset("owner@example.com", LINK)

    assert smtp_connections == []
    warnings = [r for r in caplog.records if r.levelno == logging.WARNING]
    assert len(warnings) == 1
    assert "owner@example.com" in warnings[0].getMessage()
    assert LINK not in caplog.text


def test_sends_over_smtp(monkeypatch, smtp_connections):
    monkeypatch.setattr(config, "SMTP_HOST", "smtp.example.com")
    monkeypatch.setattr(config, "SMTP_PORT", 2525)
    monkeypatch.setattr(config, "SMTP_USER", "mailer")
    monkeypatch.setattr(config, "SMTP_PASSWORD", "mail-pass")
    monkeypatch.setattr(config, "MAIL_FROM", "noreply@example.com")

    send_password_reset("owner@example.com", LINK)

    assert len(smtp_connections) == 1
    smtp = smtp_connections[0]
    assert (smtp.host, smtp.port) == ("smtp.example.com", 2525)
    assert smtp.calls == ["starttls", ("login", "mailer", "mail-pass"), "send_message"]
    message = smtp.messages[0]
    assert message["To"] == "owner@example.com"
    assert message["From"] == "noreply@example.com"
    assert message["Subject"] == "Password Reset"
    assert LINK in message.get_content()


def test_skips_login_without_user(monkeypatch, smtp_connections):
    monkeypatch.setattr(config, "SMTP_HOST", "smtp.example.com")
    monkeypatch.setattr(config, "SMTP_USER", None)
    monkeypatch.setattr(config, "MAIL_FROM", "noreply@example.com")

    send_password_reset("owner@example.com", LINK)

    assert smtp_connections[0].calls == ["starttls", "send_message"]
