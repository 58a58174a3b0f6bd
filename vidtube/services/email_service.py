"""Email service using SendGrid.

Sends are best effort: failures are logged and reported as ``False``, never
raised. Routers schedule these methods as background tasks so a request
never waits on the mail provider.
"""

import logging

from sendgrid import SendGridAPIClient
from sendgrid.helpers.mail import Mail

from vidtube.config import Settings
from vidtube.services.action_token_service import ActionToken

logger = logging.getLogger(__name__)

USERS_PATH = "/api/v1/users"


class EmailService:
    """Service for sending transactional emails via SendGrid."""

    def __init__(self, settings: Settings) -> None:
        self._settings = settings

    def verification_link(self, token: ActionToken) -> str:
        return f"{self._base_url}{USERS_PATH}/verify/{token.iv}/{token.token}"

    def password_reset_link(self, token: ActionToken) -> str:
        return f"{self._base_url}{USERS_PATH}/reset-password/{token.iv}/{token.token}"

    @property
    def _base_url(self) -> str:
        return self._settings.public_base_url.rstrip("/")

    def _send_email(self, to_email: str, subject: str, text: str) -> bool:
        """Send email via SendGrid. Returns True if successful."""
        if not self._settings.sendgrid_api_key:
            logger.warning("SendGrid API key not configured, skipping email send")
            return False

        message = Mail(
            from_email=(self._settings.email_from_address, self._settings.email_from_name),
            to_emails=to_email,
            subject=subject,
            plain_text_content=text,
        )

        try:
            sg = SendGridAPIClient(self._settings.sendgrid_api_key)
            response = sg.send(message)
            logger.info(f"Email sent to {to_email}, status: {response.status_code}")
            return response.status_code in (200, 201, 202)
        except Exception:
            logger.exception(f"Failed to send email to {to_email}")
            return False

    def send_verification_email(self, email: str, token: ActionToken) -> bool:
        """Send email verification link."""
        hours = self._settings.email_verification_expire_hours
        text = (
            "Welcome to VidTube! Verify your account by opening this link: "
            f"{self.verification_link(token)}\n"
            f"The link expires in {hours} hours."
        )
        return self._send_email(email, "Verify your VidTube account", text)

    def send_welcome_email(self, email: str) -> bool:
        """Send welcome email after verification."""
        text = "Your account is verified. You can now log in and start uploading."
        return self._send_email(email, "Welcome to VidTube!", text)

    def send_password_reset_email(self, email: str, token: ActionToken) -> bool:
        """Send password reset link."""
        minutes = self._settings.password_reset_expire_minutes
        text = (
            f"Reset your password by opening this link: {self.password_reset_link(token)}\n"
            f"The link expires in {minutes} minutes. "
            "If you didn't request this, you can ignore this email."
        )
        return self._send_email(email, "Reset your VidTube password", text)

    def send_password_changed_notification(self, email: str) -> bool:
        """Notify user their password was changed."""
        text = (
            "Your password was changed. If you didn't make this change, "
            "reset your password immediately."
        )
        return self._send_email(email, "Your VidTube password was changed", text)
