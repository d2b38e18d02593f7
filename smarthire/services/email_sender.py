"""Send notification emails over SMTP (HTML-formatted)."""

import smtplib
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
from html import escape
from typing import Optional

from smarthire.utils.config import EmailSettings, get_settings
from smarthire.utils.constants import EMAIL_SUBJECTS, NotificationType
from smarthire.utils.logger import get_logger

logger = get_logger(__name__)

_ACCENT_COLORS = {
    NotificationType.APPLICATION_UPDATE.value: "#818cf8",
    NotificationType.INTERVIEW.value: "#fbbf24",
    NotificationType.OFFER.value: "#34d399",
    NotificationType.SYSTEM.value: "#38bdf8",
}


def build_email_html(recipient_name: str, message: str, notification_type: str, link: str) -> str:
    accent = _ACCENT_COLORS.get(notification_type, _ACCENT_COLORS[NotificationType.SYSTEM.value])
    return f"""<div style="font-family:'Segoe UI',Arial,sans-serif;max-width:560px;margin:0 auto;padding:16px;color:#333">
<h2 style="margin:0 0 16px;color:#2c3e50">Hi {escape(recipient_name)}!</h2>
<div style="border-left:3px solid {accent};padding:12px 16px;margin-bottom:20px">
<p style="margin:0;line-height:1.6">{escape(message)}</p>
</div>
<a href="{escape(link)}" style="color:{accent};font-weight:700">Open SmartHire</a>
<hr style="border:none;border-top:1px solid #e0e0e0;margin:20px 0 8px">
<p style="font-size:11px;color:#999">You're receiving this because you have an account on SmartHire.</p>
</div>"""


class EmailSender:
    """SMTP mailer for notification emails."""

    def __init__(self, settings: Optional[EmailSettings] = None):
        self.settings = settings or get_settings().email

    @property
    def enabled(self) -> bool:
        return self.settings.enabled

    def _smtp_send(self, to_addr: str, msg: MIMEMultipart) -> None:
        s = self.settings
        with smtplib.SMTP(s.smtp_host, s.smtp_port) as server:
            server.starttls()
            server.login(s.username, s.password)
            server.sendmail(s.username, [to_addr], msg.as_string())

    def send(
        self,
        to_email: str,
        to_name: str,
        message: str,
        notification_type: str = NotificationType.SYSTEM.value,
    ) -> bool:
        """
        Send one notification email.

        Returns True if the email was handed to the SMTP server. Never raises:
        a failed email must not fail the action that triggered it.
        """
        if not self.enabled:
            logger.debug(f"SMTP not configured, skipping email to {to_email}")
            return False

        notification_type = getattr(notification_type, "value", notification_type)
        subject = EMAIL_SUBJECTS.get(notification_type, EMAIL_SUBJECTS[NotificationType.SYSTEM.value])

        msg = MIMEMultipart("alternative")
        msg["Subject"] = subject
        msg["From"] = f'"{self.settings.from_name}" <{self.settings.username}>'
        msg["To"] = to_email
        msg.attach(MIMEText(f"Hi {to_name}!\n\n{message}", "plain", "utf-8"))
        msg.attach(
            MIMEText(
                build_email_html(to_name, message, notification_type, self.settings.frontend_url),
                "html",
                "utf-8",
            )
        )

        try:
            self._smtp_send(to_email, msg)
            logger.info(f"Email sent to {to_email}")
            return True
        except (smtplib.SMTPException, OSError) as e:
            logger.error(f"Email to {to_email} failed: {e}")
            return False
