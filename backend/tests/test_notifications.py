"""
Tests for activation notification: SMTP mail, the Celery task and the queueing notifier.
"""

from types import SimpleNamespace
from unittest.mock import patch

import pytest
from kombu.exceptions import OperationalError

from userdir.exceptions import NotificationError
from userdir.services.mail_service import MailService
from userdir.services.notifications import CeleryActivationNotifier
from userdir.tasks.notifications import send_activation_email


@pytest.fixture
def mail_service() -> MailService:
    return MailService(
        smtp_server="smtp.test",
        smtp_port=2525,
        mail_from="no-reply@hdmon.com",
        username="mailer",
        password="secret",
        activation_base_url="https://hdmon.test/activate",
    )


class TestMailService:
    def test_activation_message_carries_link(self, mail_service):
        msg = mail_service.build_activation_message("alice@example.com", "alice", "abc123")

        assert msg["To"] == "alice@example.com"
        assert msg["From"] == "no-reply@hdmon.com"
        body = msg.get_payload()[0].get_payload()
        assert "https://hdmon.test/activate?key=abc123" in body
        assert "alice" in body

    def test_sends_over_smtp(self, mail_service):
        with patch("userdir.services.mail_service.smtplib.SMTP") as smtp_cls:
            server = smtp_cls.return_value.__enter__.return_value

            mail_service.send_activation_email("alice@example.com", "alice", "abc123")

        smtp_cls.assert_called_once_with("smtp.test", 2525)
        server.starttls.assert_called_once()
        server.login.assert_called_once_with("mailer", "secret")
        server.send_message.assert_called_once()

    def test_smtp_failure_becomes_notification_error(self, mail_service):
        with patch("userdir.services.mail_service.smtplib.SMTP", side_effect=OSError("connection refused")):
            with pytest.raises(NotificationError):
                mail_service.send_activation_email("alice@example.com", "alice", "abc123")


class TestSendActivationTask:
    def test_placeholder_recipient_is_skipped(self):
        with patch("userdir.tasks.notifications.MailService") as mail_cls:
            result = send_activation_email("alice", "alice.no-email@hdmon.com", "abc123")

        assert result["status"] == "skipped"
        mail_cls.from_settings.assert_not_called()

    def test_real_recipient_is_mailed(self):
        with patch("userdir.tasks.notifications.MailService") as mail_cls:
            result = send_activation_email("alice", "alice@example.com", "abc123")

        assert result["status"] == "sent"
        mail_cls.from_settings.return_value.send_activation_email.assert_called_once_with(
            "alice@example.com", "alice", "abc123"
        )

    def test_delivery_failure_is_reported(self):
        with patch("userdir.tasks.notifications.MailService") as mail_cls:
            mail_cls.from_settings.return_value.send_activation_email.side_effect = NotificationError("smtp down")
            result = send_activation_email("alice", "alice@example.com", "abc123")

        assert result == {"status": "error", "login": "alice", "message": "smtp down"}


class TestCeleryActivationNotifier:
    def test_queues_the_task(self):
        user = SimpleNamespace(login="alice", email="alice@example.com", activation_key="abc123")

        with patch("userdir.tasks.notifications.send_activation_email") as task:
            CeleryActivationNotifier().send_activation(user)

        task.delay.assert_called_once_with("alice", "alice@example.com", "abc123")

    def test_broker_failure_becomes_notification_error(self):
        user = SimpleNamespace(login="alice", email="alice@example.com", activation_key="abc123")

        with patch("userdir.tasks.notifications.send_activation_email") as task:
            task.delay.side_effect = OperationalError("connection refused")
            with pytest.raises(NotificationError):
                CeleryActivationNotifier().send_activation(user)
