import logging
import smtplib
from email.message import EmailMessage

from . import config

logger = logging.getLogger(__name__)

RESET_TEMPLATE = """\
You are receiving this because you (or someone else) have requested the reset of the password for your account.

Please click on the following link, or paste this into your browser to complete the process:

{link}

If you did not request this, please ignore this email and your password will remain unchanged.
"""


def send_password_reset(email: str, link: str) -> None:
    if not config.SMTP_HOST:
        logger.warning("SMTP_HOST is not set, password reset email to %s not sent", email)
        return

    message = EmailMessage()
    message["Subject"] = "Password Reset"
    message["From"] = config.MAIL_FROM
    message["To"] = email
    message.set_content(RESET_TEMPLATE.format(link=link))

    with smtplib.SMTP(config.SMTP_HOST, config.SMTP_PORT, timeout=10) as smtp:
        smtp.starttls()
        if config.SMTP_USER:
            smtp.login(config.SMTP_USER, config.SMTP_PASSWORD or "")
        smtp.send_message(message)
    logger.info("Password reset email sent to %s", email)
