"""
Notification Tasks
Background tasks delivering account activation messages.
"""

import logging

from userdir.exceptions import NotificationError
from userdir.services.mail_service import MailService
from userdir.services.placeholder_email import is_placeholder
from userdir.worker import celery_app

logger = logging.getLogger(__name__)


@celery_app.task(bind=True, name="userdir.tasks.notifications.send_activation_email")
def send_activation_email(self, login: str, email: str, activation_key: str):
    """
    Send the activation mail for a newly created user.

    Args:
        login: Login of the new user
        email: Stored email (possibly the login's placeholder)
        activation_key: Key embedded in the activation link

    Returns:
        dict with delivery status
    """
    if is_placeholder(login, email):
        # Mobile-only accounts have nowhere to receive mail
        logger.info(f"Skipping activation email for '{login}': no real email on file")
        return {"status": "skipped", "login": login}

    try:
        MailService.from_settings().send_activation_email(email, login, activation_key)
    except NotificationError as e:
        return {"status": "error", "login": login, "message": str(e)}

    return {"status": "sent", "login": login}
