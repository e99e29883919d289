"""
Contact Form Submission Handler

Runs a single POST through validation, persistence, notification and the
post-submit redirect:

    received -> validated -> persisted -> notified -> redirected(success)
    received -> redirected(error:<code>)

Every terminal condition ends in a redirect carrying sc_status and either
sc_error or a one-time sc_token.
"""
import enum
import logging

from django.conf import settings
from django.db import DatabaseError, transaction
from django.utils import timezone
from django.utils.http import url_has_allowed_host_and_scheme
from rest_framework.authentication import CSRFCheck

from .models import ContactSubmission, SubmissionError
from .notices import STATUS_ERROR, STATUS_SUCCESS, add_notice_params
from .notifications import send_admin_notification
from .request_info import get_packed_ip, get_user_agent
from .serializers import ContactFormSubmitSerializer, SuccessPayloadSerializer
from .signals import submission_post_insert, submission_pre_insert

logger = logging.getLogger(__name__)

CSRF_FIELD_NAME = 'csrfmiddlewaretoken'


class SubmissionState(str, enum.Enum):
    RECEIVED = 'received'
    VALIDATED = 'validated'
    PERSISTED = 'persisted'
    NOTIFIED = 'notified'
    REDIRECTED = 'redirected'


class SubmissionRejected(Exception):
    """Raised to end a submission early with a SubmissionError code."""

    def __init__(self, code):
        self.code = SubmissionError(code)
        super().__init__(self.code.value)


class SubmissionOutcome:
    """Where to send the visitor and why."""

    def __init__(self, location, status, error=None, token=None, submission=None, notified=False):
        self.location = location
        self.status = status
        self.error = error
        self.token = token
        self.submission = submission
        self.notified = notified

    @property
    def is_success(self):
        return self.status == STATUS_SUCCESS

    def __repr__(self):
        return f"<SubmissionOutcome {self.status} {self.error or ''} -> {self.location}>"


def _ignore_response(request):
    return None


class SubmissionHandler:
    """
    Handles one contact form POST.

    Usage:
        handler = SubmissionHandler(contact_context)
        outcome = handler.handle(request)
        return HttpResponseRedirect(outcome.location)
    """

    def __init__(self, contact_context):
        self.context = contact_context
        self.state = SubmissionState.RECEIVED

    def transition(self, state):
        logger.debug("Contact submission %s -> %s", self.state.value, state.value)
        self.state = state

    def handle(self, request):
        self.state = SubmissionState.RECEIVED
        redirect_to = self.get_redirect_url(request)

        try:
            self.verify_csrf(request)
            record = self.build_record(request, self.validate(request))
            self.transition(SubmissionState.VALIDATED)
            submission = self.persist(record)
            self.transition(SubmissionState.PERSISTED)
        except SubmissionRejected as exc:
            logger.warning("Contact submission rejected: %s", exc.code.value)
            self.transition(SubmissionState.REDIRECTED)
            return SubmissionOutcome(
                add_notice_params(redirect_to, STATUS_ERROR, error=exc.code.value),
                STATUS_ERROR,
                error=exc.code.value,
            )

        submission_post_insert.send(
            sender=self.__class__,
            submission_id=submission.pk,
            record=dict(record),
        )

        notified = send_admin_notification(self.context.composer, record, submission.pk)
        self.transition(SubmissionState.NOTIFIED)

        token = self.context.token_store.put(SuccessPayloadSerializer(submission).data)

        self.transition(SubmissionState.REDIRECTED)
        return SubmissionOutcome(
            add_notice_params(redirect_to, STATUS_SUCCESS, token=token),
            STATUS_SUCCESS,
            token=token,
            submission=submission,
            notified=notified,
        )

    def verify_csrf(self, request):
        """Require a CSRF token in the form or header and run Django's check on it."""
        supplied = request.POST.get(CSRF_FIELD_NAME) or request.META.get(settings.CSRF_HEADER_NAME)
        if not supplied:
            raise SubmissionRejected(SubmissionError.NONCE)

        check = CSRFCheck(_ignore_response)
        check.process_request(request)
        reason = check.process_view(request, None, (), {})
        if reason:
            logger.info("CSRF verification failed for contact submission: %s", reason)
            raise SubmissionRejected(SubmissionError.NONCE)

    def validate(self, request):
        serializer = ContactFormSubmitSerializer(data=request.POST)
        if not serializer.is_valid():
            raise SubmissionRejected(serializer.get_error_code())
        return serializer.validated_data

    def build_record(self, request, validated_data):
        return {
            'name': validated_data['name'],
            'email': validated_data['email'],
            'created_at': timezone.now(),
            'consent_ip': get_packed_ip(request),
            'user_agent': get_user_agent(request),
        }

    def persist(self, record):
        """
        Fire the pre-insert signal and save the row.

        The signal is not undone when the insert fails.
        """
        submission_pre_insert.send(sender=self.__class__, record=dict(record))

        try:
            with transaction.atomic():
                return ContactSubmission.objects.create(**record)
        except DatabaseError as exc:
            logger.exception("Failed to store contact submission from %s", record['email'])
            raise SubmissionRejected(SubmissionError.DATABASE) from exc

    def get_redirect_url(self, request):
        """Posted redirect_to when it points at an allowed host, else the home URL."""
        home_url = self.context.home_url
        redirect_to = request.POST.get('redirect_to', '')
        if not isinstance(redirect_to, str) or not redirect_to.strip():
            return home_url

        redirect_to = redirect_to.strip()
        allowed_hosts = {request.get_host()} | set(self.context.allowed_redirect_hosts)
        if url_has_allowed_host_and_scheme(
            redirect_to,
            allowed_hosts=allowed_hosts,
            require_https=request.is_secure(),
        ):
            return redirect_to
        return home_url
