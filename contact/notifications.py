"""
Contact Notification Emails

Builds and sends the admin notification for a new submission. Every part of
the message comes from a NotificationComposer; subclass it and point
CONTACT_NOTIFICATION_COMPOSER at the subclass to change recipient, subject,
headers or body independently.
"""
import logging
import smtplib

from django.conf import settings
from django.core.mail import EmailMessage

from .models import unpack_ip
from .sanitizers import sanitize_email, sanitize_text

logger = logging.getLogger(__name__)

DEFAULT_SUBJECT = 'New contact form submission'
DEFAULT_HEADERS = ('Content-Type: text/plain; charset=UTF-8',)


def build_notification_context(record, insert_id):
    """
    Normalize a submission record into the dict handed to the composer.

    Missing optional values become ''; the packed IP is rendered as text.
    """
    created_at = record.get('created_at') or ''
    if hasattr(created_at, 'strftime'):
        created_at = created_at.strftime('%Y-%m-%d %H:%M:%S')

    return {
        'name': sanitize_text(str(record.get('name') or '')),
        'email': sanitize_email(str(record.get('email') or '')),
        'created_at': sanitize_text(str(created_at)),
        'consent_ip': unpack_ip(record.get('consent_ip')),
        'user_agent': sanitize_text(str(record.get('user_agent') or '')),
        'insert_id': int(insert_id),
    }


class NotificationComposer:
    """Default composition of the admin notification email."""

    def get_recipient(self, context):
        return getattr(settings, 'CONTACT_EMAIL_TO', None) or settings.DEFAULT_FROM_EMAIL

    def get_subject(self, context):
        return DEFAULT_SUBJECT

    def get_headers(self, context):
        return list(DEFAULT_HEADERS)

    def get_body(self, context):
        lines = [
            'You have received a new contact form submission.',
            '',
            f"Name: {context['name']}",
            f"Email: {context['email']}",
            f"Entry ID: {context['insert_id']}",
        ]

        if context['created_at']:
            lines.append(f"Submitted at: {context['created_at']}")

        if context['consent_ip']:
            lines.append(f"IP Address: {context['consent_ip']}")

        if context['user_agent']:
            lines.append(f"User Agent: {context['user_agent']}")

        return '\n'.join(lines)

    def build_message(self, context):
        """Assemble an EmailMessage from the composer's parts."""
        recipient = self.get_recipient(context)
        recipients = list(recipient) if isinstance(recipient, (list, tuple)) else [recipient]

        content_type, charset, reply_to, extra_headers = split_headers(self.get_headers(context))

        message = EmailMessage(
            subject=self.get_subject(context),
            body=self.get_body(context),
            from_email=getattr(settings, 'CONTACT_EMAIL_FROM', settings.DEFAULT_FROM_EMAIL),
            to=recipients,
            reply_to=reply_to or None,
            headers=extra_headers,
        )
        if content_type == 'text/html':
            message.content_subtype = 'html'
        if charset:
            message.encoding = charset
        return message


def split_headers(headers):
    """
    Map 'Name: value' header lines onto EmailMessage arguments.

    Returns (content_type, charset, reply_to, extra_headers). Content-Type and
    Reply-To are lifted out since EmailMessage manages them itself.
    """
    content_type = 'text/plain'
    charset = None
    reply_to = []
    extra = {}

    for line in headers or []:
        if not isinstance(line, str) or ':' not in line:
            continue
        name, value = line.split(':', 1)
        name, value = name.strip(), value.strip()
        lowered = name.lower()

        if lowered == 'content-type':
            parts = [part.strip() for part in value.split(';')]
            content_type = parts[0].lower()
            for param in parts[1:]:
                key, _, param_value = param.partition('=')
                if key.strip().lower() == 'charset' and param_value:
                    charset = param_value.strip().strip('"')
        elif lowered == 'reply-to':
            reply_to.extend(addr.strip() for addr in value.split(',') if addr.strip())
        elif lowered not in ('from', 'to', 'cc', 'bcc', 'subject'):
            extra[name] = value

    return content_type, charset, reply_to, extra


def send_admin_notification(composer, record, insert_id):
    """
    Send the admin notification for a stored submission.

    Returns True when the transport accepted the message. Transport errors and
    malformed addresses or headers (BadHeaderError is a ValueError) are logged
    and reported as False; they never propagate to the visitor.
    """
    context = build_notification_context(record, insert_id)

    try:
        message = composer.build_message(context)
        sent = bool(message.send(fail_silently=False))
    except (smtplib.SMTPException, OSError, ValueError):
        logger.warning(
            "Failed to send contact notification for entry %s",
            insert_id,
            exc_info=True,
        )
        return False

    if sent:
        logger.info("Contact notification sent for entry %s", insert_id)
    else:
        logger.warning("Mail transport rejected contact notification for entry %s", insert_id)
    return sent
