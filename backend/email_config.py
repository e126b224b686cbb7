"""
Email Configuration Module
Provides transactional email sending through the Resend HTTP API.
"""

import requests
from flask import render_template, has_app_context
import logging
from email.utils import formataddr, parseaddr

from errors import EmailNotConfiguredError, EmailSendError

logger = logging.getLogger(__name__)

NOT_CONFIGURED_MESSAGE = 'The email service is not configured. Please try again later or contact us directly.'

DEFAULT_SENDER = 'PDSCC Info <info@azpdscc.org>'
NOREPLY_SENDER = 'PDSCC Bot <noreply@azpdscc.org>'
ADMIN_RECIPIENT = 'admin@azpdscc.org'
RESEND_API_URL = 'https://api.resend.com/emails'


def with_display_name(sender: str, display_name: str = None) -> str:
    """Same mailbox as `sender`, shown under `display_name` when one is given"""
    if not display_name:
        return sender
    return formataddr((display_name, parseaddr(sender)[1]))


def render_email_template(template_name: str, site_base_url: str = '', **context):
    """
    Safely render an email template, creating app context if needed.

    Args:
        template_name: Template path relative to templates directory
        site_base_url: Public site URL used for links in the email
        **context: Template context variables

    Returns:
        str: Rendered HTML template
    """
    context = {'site_base_url': site_base_url, **context}
    if has_app_context():
        return render_template(template_name, **context)
    else:
        # Command-line callers (cron) have no app; borrow one for the template loader
        from flask import Flask
        app = Flask(__name__)
        with app.app_context():
            return render_template(template_name, **context)


class EmailService:
    """Sends one email per call via the provider's HTTP API"""

    def __init__(self, api_key: str = None, default_sender: str = None, admin_recipient: str = None,
                 api_url: str = None, timeout: float = 10, noreply_sender: str = None):
        self.api_key = api_key
        self.default_sender = default_sender or DEFAULT_SENDER
        self.noreply_sender = noreply_sender or NOREPLY_SENDER
        self.admin_recipient = admin_recipient or ADMIN_RECIPIENT
        self.api_url = api_url or RESEND_API_URL
        self.timeout = timeout

    @classmethod
    def from_settings(cls, settings: dict):
        return cls(
            api_key=settings.get('RESEND_API_KEY'),
            default_sender=settings.get('MAIL_DEFAULT_SENDER'),
            admin_recipient=settings.get('ADMIN_NOTIFICATION_EMAIL'),
            api_url=settings.get('RESEND_API_URL'),
            noreply_sender=settings.get('MAIL_NOREPLY_SENDER'),
        )

    def is_configured(self) -> bool:
        """Check if the provider credential is present"""
        return bool(self.api_key)

    def send_email(
        self,
        to,
        subject: str,
        html: str = None,
        text: str = None,
        from_email: str = None,
        reply_to: str = None
    ) -> str:
        """
        Send an email.

        Args:
            to: Recipient address or list of addresses
            subject: Email subject
            html: HTML body
            text: Plain text body
            from_email: Sender (defaults to the configured default sender)
            reply_to: Optional reply-to address

        Returns:
            str: Provider message id

        Raises:
            EmailNotConfiguredError: No API key is configured
            EmailSendError: The provider rejected the request or could not be reached
        """
        if not self.is_configured():
            raise EmailNotConfiguredError('RESEND_API_KEY is not set')

        if not html and not text:
            raise ValueError('An email needs an html or text body')

        payload = {
            'from': from_email or self.default_sender,
            'to': to if isinstance(to, list) else [to],
            'subject': subject,
        }
        if html:
            payload['html'] = html
        if text:
            payload['text'] = text
        if reply_to:
            payload['reply_to'] = reply_to

        try:
            response = requests.post(
                self.api_url,
                json=payload,
                headers={'Authorization': f'Bearer {self.api_key}'},
                timeout=self.timeout
            )
        except requests.exceptions.RequestException as e:
            logger.error(f"Email request failed for {payload['to']}: {e}")
            raise EmailSendError(f"Could not reach email provider: {e}") from e

        if response.status_code not in (200, 201, 202):
            try:
                detail = response.json().get('message', response.text)
            except ValueError:
                detail = response.text
            logger.error(f"Email provider returned {response.status_code}: {detail}")
            raise EmailSendError(f"Email provider error ({response.status_code}): {detail}")

        # Accepted; a body we cannot read only costs us the message id
        try:
            body = response.json()
        except ValueError:
            logger.warning(f"Email provider returned {response.status_code} with a non-JSON body")
            body = {}
        message_id = body.get('id') if isinstance(body, dict) else None
        logger.info(f"Email sent successfully to {payload['to']}: {subject}")
        return message_id

    def send_admin_notification(self, subject: str, text: str = None, html: str = None,
                                reply_to: str = None, from_email: str = None) -> str:
        """Send a notification to the organization's admin inbox"""
        return self.send_email(
            to=self.admin_recipient,
            subject=subject,
            html=html,
            text=text,
            from_email=from_email or self.noreply_sender,
            reply_to=reply_to
        )
