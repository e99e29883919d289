"""
Contact Form Models

Database schema for contact form submissions.
"""
import ipaddress

from django.db import models
from django.core.validators import EmailValidator
from django.utils import timezone
from django.utils.translation import gettext_lazy as _


class SubmissionError(models.TextChoices):
    """
    Closed set of submission failures reported back to the visitor.

    The label is the user-facing notice for each code.
    """

    NONCE = 'nonce', _('Security check failed. Please try again.')
    MISSING_FIELDS = 'missing_fields', _('Please fill in both your name and email.')
    INVALID_EMAIL = 'invalid_email', _('Please provide a valid email address.')
    DATABASE = 'database', _('We could not process your request. Please try again.')


GENERIC_ERROR_MESSAGE = _('We could not process your request. Please try again.')


class ContactSubmission(models.Model):
    """
    A single contact form submission.

    Rows are written once by the submission handler and never updated.
    """

    NAME_MAX_LENGTH = 120
    EMAIL_MAX_LENGTH = 190
    USER_AGENT_MAX_LENGTH = 255

    name = models.CharField(
        max_length=NAME_MAX_LENGTH,
        help_text="Name of the person contacting us"
    )

    email = models.EmailField(
        max_length=EMAIL_MAX_LENGTH,
        db_index=True,
        validators=[EmailValidator()],
        help_text="Email address for follow-up"
    )

    created_at = models.DateTimeField(
        default=timezone.now,
        db_index=True,
        help_text="When the message was submitted (UTC)"
    )

    consent_ip = models.BinaryField(
        max_length=16,
        null=True,
        blank=True,
        help_text="Packed IPv4/IPv6 address of the submitter"
    )

    user_agent = models.CharField(
        max_length=USER_AGENT_MAX_LENGTH,
        null=True,
        blank=True,
        help_text="Browser user agent"
    )

    class Meta:
        db_table = 'contact_submissions'
        ordering = ['-created_at']
        verbose_name = 'Contact Submission'
        verbose_name_plural = 'Contact Submissions'

    def __str__(self):
        return f"{self.name} <{self.email}>"

    @property
    def consent_ip_display(self):
        """Printable form of the stored address, or '' when absent."""
        return unpack_ip(self.consent_ip)


def pack_ip(value):
    """Pack a textual IP address into 4 or 16 bytes, or None if unparseable."""
    if not value:
        return None
    try:
        return ipaddress.ip_address(value.strip()).packed
    except ValueError:
        return None


def unpack_ip(value):
    """Render packed (or textual) address data as printable text."""
    if not value:
        return ''
    if isinstance(value, memoryview):
        value = value.tobytes()
    try:
        if isinstance(value, (bytes, bytearray)) and len(value) in (4, 16):
            return str(ipaddress.ip_address(bytes(value)))
        if isinstance(value, (bytes, bytearray)):
            value = value.decode('ascii')
        return str(ipaddress.ip_address(str(value).strip()))
    except (ValueError, UnicodeDecodeError):
        return ''
