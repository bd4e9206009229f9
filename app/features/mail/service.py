"""Outbound transactional mail over SMTP."""

import logging
import re
import smtplib
from datetime import datetime, timezone
from email.message import EmailMessage

from app.Core.config import Settings

logger = logging.getLogger("mail")

_TAG_RE = re.compile(r"<[^>]*>")


class MailService:
    def __init__(self, settings: Settings):
        self.host = settings.mail_host
        self.port = settings.mail_port
        self.username = settings.mail_username
        self.password = settings.mail_password
        self.encryption = settings.mail_encryption
        self.from_name = settings.mail_from_name
        self.from_address = settings.mail_from_address

    def send_mail(self, to_email: str, subject: str, html: str, text: str | None = None) -> None:
        if not self.host:
            raise RuntimeError("Mail transport not configured (MAIL_HOST)")

        msg = EmailMessage()
        msg["Subject"] = subject
        msg["From"] = f"{self.from_name} <{self.from_address}>"
        msg["To"] = to_email
        msg.set_content(text or _TAG_RE.sub("", html))
        msg.add_alternative(html, subtype="html")

        smtp_cls = smtplib.SMTP_SSL if self.encryption == "ssl" else smtplib.SMTP
        with smtp_cls(self.host, self.port, timeout=10) as smtp:
            if self.encryption == "tls":
                smtp.starttls()
            if self.username:
                smtp.login(self.username, self.password)
            smtp.send_message(msg)
        logger.info("mail.sent to=%s subject=%s", to_email, subject)

    def _footer(self) -> str:
        year = datetime.now(timezone.utc).year
        return (
            '<hr style="border: none; border-top: 1px solid #ddd; margin: 20px 0;">'
            f'<p style="color: #999; font-size: 12px;">&copy; {year} {self.from_name}. All rights reserved.</p>'
        )

    def send_forgot_password_email(self, email: str, reset_token: str, reset_link: str) -> None:
        html = f"""
        <div style="font-family: Arial, sans-serif; max-width: 600px; margin: 0 auto;">
          <h2 style="color: #333;">Password Reset Request</h2>
          <p>Hello,</p>
          <p>We received a request to reset your password. Click the link below to reset it:</p>
          <p><a href="{reset_link}">Reset Password</a></p>
          <p>Or copy and paste this link in your browser:</p>
          <p style="word-break: break-all; color: #666;">{reset_link}</p>
          <p style="color: #999; font-size: 12px;">This link will expire in 1 hour.</p>
          <p style="color: #999; font-size: 12px;">If you didn't request a password reset, please ignore this email.</p>
          {self._footer()}
        </div>
        """
        self.send_mail(email, "Password Reset Request", html)

    def send_password_reset_confirmation(self, email: str) -> None:
        html = f"""
        <div style="font-family: Arial, sans-serif; max-width: 600px; margin: 0 auto;">
          <h2 style="color: #333;">Password Reset Successful</h2>
          <p>Hello,</p>
          <p>Your password has been successfully reset.</p>
          <p>If you didn't make this change, please contact our support team immediately.</p>
          <p style="margin-top: 30px;"><strong>Best regards,</strong><br>{self.from_name} Team</p>
          {self._footer()}
        </div>
        """
        self.send_mail(email, "Password Reset Successful", html)
