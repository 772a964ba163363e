"""Mail transport — sends report emails through Resend."""

import logging

import resend

logger = logging.getLogger(__name__)


class ResendMailer:
    """Thin wrapper over the Resend SDK with a fixed sender."""

    def __init__(self, api_key: str, from_email: str, from_name: str = ""):
        self.api_key = api_key
        self.sender = f"{from_name} <{from_email}>" if from_name else from_email

    def send(self, to_email: str, subject: str, html: str) -> str:
        """Send one HTML email. Returns the Resend message id.

        Raises RuntimeError when no API key is configured; SDK errors
        propagate to the caller.
        """
        if not self.api_key:
            raise RuntimeError("RESEND_API_KEY not set — cannot send")

        resend.api_key = self.api_key
        result = resend.Emails.send({
            "from": self.sender,
            "to": [to_email],
            "subject": subject,
            "html": html,
        })
        resend_id = result.get("id", "")
        logger.info("Sent '%s' to %s (resend_id=%s)", subject, to_email, resend_id)
        return resend_id
