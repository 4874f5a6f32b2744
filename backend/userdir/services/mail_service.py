"""
Mail Service
Sends account activation mail over SMTP.
"""

import logging
import smtplib
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText

from userdir.config import Settings, settings
from userdir.exceptions import NotificationError

logger = logging.getLogger(__name__)

ACTIVATION_SUBJECT = "Account activation"

ACTIVATION_TEMPLATE = """Dear {login},

Your account has been created, please click on the link below to activate it:

{activation_url}

Regards,
The HDMON team
"""


class MailService:
    def __init__(
        self,
        smtp_server: str,
        smtp_port: int,
        mail_from: str,
        username: str = "",
        password: str = "",
        use_tls: bool = True,
        activation_base_url: str = "",
    ):
        self.smtp_server = smtp_server
        self.smtp_port = smtp_port
        self.mail_from = mail_from
        self.username = username
        self.password = password
        self.use_tls = use_tls
        self.activation_base_url = activation_base_url

    @classmethod
    def from_settings(cls, config: Settings = settings) -> "MailService":
        return cls(
            smtp_server=config.smtp_server,
            smtp_port=config.smtp_port,
            mail_from=config.mail_from,
            username=config.smtp_username,
            password=config.smtp_password,
            use_tls=config.smtp_use_tls,
            activation_base_url=config.activation_base_url,
        )

    def activation_url(self, activation_key: str) -> str:
        return f"{self.activation_base_url}?key={activation_key}"

    def build_activation_message(self, to: str, login: str, activation_key: str) -> MIMEMultipart:
        msg = MIMEMultipart()
        msg["From"] = self.mail_from
        msg["To"] = to
        msg["Subject"] = ACTIVATION_SUBJECT
        body = ACTIVATION_TEMPLATE.format(login=login, activation_url=self.activation_url(activation_key))
        msg.attach(MIMEText(body, "plain"))
        return msg

    def send_activation_email(self, to: str, login: str, activation_key: str) -> None:
        """
        Sends the activation mail for a freshly created account.

        Raises:
            NotificationError: If the SMTP exchange fails.
        """
        msg = self.build_activation_message(to, login, activation_key)
        try:
            with smtplib.SMTP(self.smtp_server, self.smtp_port) as server:
                if self.use_tls:
                    server.starttls()
                if self.username:
                    server.login(self.username, self.password)
                server.send_message(msg, to_addrs=[to])
        except (smtplib.SMTPException, OSError) as e:
            logger.error(f"Failed to send activation email to '{to}': {e}")
            raise NotificationError(f"Failed to send activation email: {e}") from e

        logger.info(f"Activation email sent to user '{login}'")
