"""
Submission Notices

Turns the sc_status / sc_error / sc_token query parameters left by the
submission redirect into the one-time notice shown above the form.
"""
from urllib.parse import parse_qsl, urlencode, urlsplit, urlunsplit

from .models import GENERIC_ERROR_MESSAGE, SubmissionError
from .sanitizers import sanitize_text

STATUS_PARAM = 'sc_status'
ERROR_PARAM = 'sc_error'
TOKEN_PARAM = 'sc_token'
NOTICE_PARAMS = (STATUS_PARAM, ERROR_PARAM, TOKEN_PARAM)

STATUS_SUCCESS = 'success'
STATUS_ERROR = 'error'


def default_success_message(message, payload):
    """Default success-message resolver: the configured message, unchanged."""
    return message


def get_query_param(request, key):
    return sanitize_text(request.GET.get(key, ''))


def error_message(code):
    """User-facing message for an error code; unknown codes get the generic one."""
    if code in SubmissionError.values:
        return str(SubmissionError(code).label)
    return str(GENERIC_ERROR_MESSAGE)


def build_notice(request, success_message, contact_context):
    """
    Return the notice text for the current request, or '' for none.

    A success token is consumed here; rendering again with the same token
    passes an empty payload to the resolver.
    """
    status = get_query_param(request, STATUS_PARAM)

    if status == STATUS_SUCCESS:
        token = get_query_param(request, TOKEN_PARAM)
        payload = contact_context.token_store.pop(token) if token else {}
        message = contact_context.success_message_resolver(success_message, payload)
        return str(message) if message else ''

    if status == STATUS_ERROR:
        return error_message(get_query_param(request, ERROR_PARAM))

    return ''


def strip_notice_params(url):
    """Remove any sc_* notice parameters from url."""
    parts = urlsplit(url)
    query = [
        (key, value)
        for key, value in parse_qsl(parts.query, keep_blank_values=True)
        if key not in NOTICE_PARAMS
    ]
    return urlunsplit(parts._replace(query=urlencode(query)))


def add_notice_params(url, status, error=None, token=None):
    """
    Append the notice parameters for a submission outcome to url.

    Stale sc_* parameters already on the URL are replaced.
    """
    params = [(STATUS_PARAM, status)]
    if error:
        params.append((ERROR_PARAM, error))
    if token:
        params.append((TOKEN_PARAM, token))

    parts = urlsplit(strip_notice_params(url))
    query = parse_qsl(parts.query, keep_blank_values=True) + params
    return urlunsplit(parts._replace(query=urlencode(query)))
