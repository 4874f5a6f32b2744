"""
Activation Notifiers
Dispatch the account activation message for a newly created user.
"""

import logging
from abc import ABC, abstractmethod

from celery.exceptions import CeleryError
from kombu.exceptions import KombuError

from userdir.exceptions import NotificationError
from userdir.models.user import User

logger = logging.getLogger(__name__)


class ActivationNotifier(ABC):
    @abstractmethod
    def send_activation(self, user: User) -> None:
        """Dispatch the activation message; raise NotificationError on failure."""


class CeleryActivationNotifier(ActivationNotifier):
    """Hands the activation mail to the notifications queue."""

    def send_activation(self, user: User) -> None:
        from userdir.tasks.notifications import send_activation_email

        try:
            task = send_activation_email.delay(user.login, user.email, user.activation_key)
        except (CeleryError, KombuError, OSError) as e:
            raise NotificationError(f"Could not queue activation email for '{user.login}': {e}") from e

        logger.debug(f"Queued activation email for '{user.login}' (task {task.id})")
