"""
Request Metadata Helpers

Extracts the submitter's address and browser details from the request.
"""
from django.conf import settings

from .models import ContactSubmission, pack_ip
from .sanitizers import sanitize_text


def get_client_ip(request):
    """Get client IP address from request."""
    if getattr(settings, 'CONTACT_TRUST_X_FORWARDED_FOR', False):
        x_forwarded_for = request.META.get('HTTP_X_FORWARDED_FOR')
        if x_forwarded_for:
            return x_forwarded_for.split(',')[0].strip()
    return request.META.get('REMOTE_ADDR')


def get_packed_ip(request):
    """Client address as packed bytes, or None when absent or unparseable."""
    return pack_ip(get_client_ip(request))


def get_user_agent(request):
    """Sanitized user agent, or None when empty."""
    agent = sanitize_text(request.META.get('HTTP_USER_AGENT', ''))
    agent = agent[:ContactSubmission.USER_AGENT_MAX_LENGTH]
    return agent or None
