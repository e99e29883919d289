"""
Tests for the contact form submission handler.
"""
import ipaddress
import smtplib
from unittest.mock import patch
from urllib.parse import parse_qs, urlsplit

import pytest
from django.apps import apps
from django.core.mail import BadHeaderError
from django.db import DatabaseError
from django.test import RequestFactory, override_settings

from contact.models import ContactSubmission
from contact.submission import SubmissionHandler, SubmissionState

HOME_URL = 'https://example.com/'


def query_of(response):
    return parse_qs(urlsplit(response['Location']).query)


@pytest.mark.django_db
class TestSuccessfulSubmission:
    """A valid POST is stored, announced and acknowledged."""

    def test_persists_notifies_and_redirects_with_token(self, client, submit_url, valid_data, mailoutbox):
        response = client.post(submit_url, valid_data)

        assert response.status_code == 302
        location = response['Location']
        assert location.startswith('https://example.com/contact/?sc_status=success&sc_token=')

        submission = ContactSubmission.objects.get()
        assert submission.name == 'Jane Doe'
        assert submission.email == 'jane@example.com'
        assert len(mailoutbox) == 1

        token = query_of(response)['sc_token'][0]
        assert len(token) >= 16
        assert 'sc_error' not in query_of(response)

    def test_success_payload_is_stored_for_the_token(self, client, submit_url, valid_data):
        response = client.post(submit_url, valid_data, REMOTE_ADDR='203.0.113.25')
        token = query_of(response)['sc_token'][0]
        submission = ContactSubmission.objects.get()

        payload = apps.get_app_config('contact').context.token_store.pop(token)

        assert payload['name'] == 'Jane Doe'
        assert payload['email'] == 'jane@example.com'
        assert payload['insert_id'] == submission.pk
        assert payload['consent_ip'] == '203.0.113.25'
        assert payload['created_at']
        assert 'user_agent' not in payload

    def test_sanitizes_name(self, client, submit_url, valid_data):
        valid_data['simple_contact_name'] = '<b>Jane</b>\x00 Doe\n'

        client.post(submit_url, valid_data)

        assert ContactSubmission.objects.get().name == 'Jane Doe'

    def test_truncates_long_name(self, client, submit_url, valid_data):
        valid_data['simple_contact_name'] = 'J' * 300

        client.post(submit_url, valid_data)

        assert ContactSubmission.objects.get().name == 'J' * 120

    def test_records_ip_and_user_agent(self, client, submit_url, valid_data):
        client.post(
            submit_url,
            valid_data,
            REMOTE_ADDR='203.0.113.25',
            HTTP_USER_AGENT='IntegrationBot/1.0',
        )

        submission = ContactSubmission.objects.get()
        assert bytes(submission.consent_ip) == ipaddress.ip_address('203.0.113.25').packed
        assert submission.consent_ip_display == '203.0.113.25'
        assert submission.user_agent == 'IntegrationBot/1.0'

    def test_records_ipv6_address(self, client, submit_url, valid_data):
        client.post(submit_url, valid_data, REMOTE_ADDR='2001:db8::1')

        submission = ContactSubmission.objects.get()
        assert len(bytes(submission.consent_ip)) == 16
        assert submission.consent_ip_display == '2001:db8::1'

    def test_unparseable_ip_and_empty_agent_are_null(self, client, submit_url, valid_data):
        client.post(submit_url, valid_data, REMOTE_ADDR='not-an-ip', HTTP_USER_AGENT='   ')

        submission = ContactSubmission.objects.get()
        assert submission.consent_ip is None
        assert submission.user_agent is None

    @override_settings(CONTACT_TRUST_X_FORWARDED_FOR=True)
    def test_forwarded_for_used_when_trusted(self, client, submit_url, valid_data):
        client.post(
            submit_url,
            valid_data,
            REMOTE_ADDR='10.0.0.1',
            HTTP_X_FORWARDED_FOR='198.51.100.7, 10.0.0.1',
        )

        assert ContactSubmission.objects.get().consent_ip_display == '198.51.100.7'

    def test_forwarded_for_ignored_by_default(self, client, submit_url, valid_data):
        client.post(
            submit_url,
            valid_data,
            REMOTE_ADDR='10.0.0.1',
            HTTP_X_FORWARDED_FOR='198.51.100.7',
        )

        assert ContactSubmission.objects.get().consent_ip_display == '10.0.0.1'

    def test_signals_fire_with_record_and_id(self, client, submit_url, valid_data, signal_calls):
        client.post(submit_url, valid_data)

        submission = ContactSubmission.objects.get()
        assert len(signal_calls['pre']) == 1
        assert signal_calls['pre'][0]['email'] == 'jane@example.com'
        assert signal_calls['post'] == [(submission.pk, signal_calls['post'][0][1])]
        assert signal_calls['post'][0][1]['name'] == 'Jane Doe'

    def test_mail_failure_does_not_block_success(self, client, submit_url, valid_data, mailoutbox):
        with patch(
            'contact.notifications.EmailMessage.send',
            side_effect=smtplib.SMTPException('server down'),
        ):
            response = client.post(submit_url, valid_data)

        assert query_of(response)['sc_status'] == ['success']
        assert ContactSubmission.objects.count() == 1
        assert len(mailoutbox) == 0

    def test_bad_header_does_not_block_success(self, client, submit_url, valid_data):
        with patch(
            'contact.notifications.EmailMessage.send',
            side_effect=BadHeaderError('bad header'),
        ):
            response = client.post(submit_url, valid_data)

        assert response.status_code == 302
        assert query_of(response)['sc_status'] == ['success']
        assert ContactSubmission.objects.count() == 1

    def test_handler_walks_states_to_redirected(self, valid_data):
        request = RequestFactory().post('/contact/submit/', valid_data)
        request._dont_enforce_csrf_checks = True
        handler = SubmissionHandler(apps.get_app_config('contact').context)

        outcome = handler.handle(request)

        assert outcome.is_success
        assert outcome.notified is True
        assert outcome.submission.pk == ContactSubmission.objects.get().pk
        assert handler.state is SubmissionState.REDIRECTED
        assert handler.state == 'redirected'


@pytest.mark.django_db
class TestRejectedSubmission:
    """Each failure ends in a redirect carrying its error code."""

    def test_missing_csrf_token_redirects_with_nonce(self, client, submit_url, valid_data, mailoutbox):
        valid_data['csrfmiddlewaretoken'] = ''

        response = client.post(submit_url, valid_data)

        assert response.status_code == 302
        assert response['Location'] == 'https://example.com/contact/?sc_status=error&sc_error=nonce'
        assert ContactSubmission.objects.count() == 0
        assert len(mailoutbox) == 0

    def test_missing_csrf_token_without_redirect_goes_home(self, client, submit_url, valid_data):
        del valid_data['csrfmiddlewaretoken']
        del valid_data['redirect_to']

        response = client.post(submit_url, valid_data)

        assert response['Location'] == HOME_URL + '?sc_status=error&sc_error=nonce'

    def test_mismatched_csrf_token_redirects_with_nonce(self, csrf_client, submit_url, valid_data):
        csrf_client.cookies['csrftoken'] = 'a' * 32
        valid_data['csrfmiddlewaretoken'] = 'b' * 32

        response = csrf_client.post(submit_url, valid_data)

        assert query_of(response)['sc_error'] == ['nonce']
        assert ContactSubmission.objects.count() == 0

    def test_nonce_wins_over_invalid_fields(self, csrf_client, submit_url):
        response = csrf_client.post(submit_url, {
            'simple_contact_name': '',
            'simple_contact_email': 'not-an-email',
            'csrfmiddlewaretoken': 'b' * 32,
        })

        assert query_of(response)['sc_error'] == ['nonce']

    def test_matching_csrf_token_is_accepted(self, csrf_client, submit_url, valid_data):
        csrf_client.cookies['csrftoken'] = 'a' * 32
        valid_data['csrfmiddlewaretoken'] = 'a' * 32

        response = csrf_client.post(submit_url, valid_data)

        assert query_of(response)['sc_status'] == ['success']
        assert ContactSubmission.objects.count() == 1

    @pytest.mark.parametrize('field', ['simple_contact_name', 'simple_contact_email'])
    def test_missing_field(self, client, submit_url, valid_data, field):
        del valid_data[field]

        response = client.post(submit_url, valid_data)

        assert query_of(response)['sc_error'] == ['missing_fields']
        assert ContactSubmission.objects.count() == 0

    def test_blank_after_sanitizing_is_missing(self, client, submit_url, valid_data):
        valid_data['simple_contact_name'] = '  <br>\t\x00 '

        response = client.post(submit_url, valid_data)

        assert query_of(response)['sc_error'] == ['missing_fields']

    def test_missing_name_wins_over_invalid_email(self, client, submit_url, valid_data):
        valid_data['simple_contact_name'] = ''
        valid_data['simple_contact_email'] = 'not-an-email'

        response = client.post(submit_url, valid_data)

        assert query_of(response)['sc_error'] == ['missing_fields']

    def test_invalid_email(self, client, submit_url, valid_data, mailoutbox):
        valid_data['simple_contact_email'] = 'not-an-email'

        response = client.post(submit_url, valid_data)

        assert response['Location'] == 'https://example.com/contact/?sc_status=error&sc_error=invalid_email'
        assert ContactSubmission.objects.count() == 0
        assert len(mailoutbox) == 0

    def test_overlong_email_is_invalid(self, client, submit_url, valid_data):
        valid_data['simple_contact_email'] = ('a' * 185) + '@example.com'

        response = client.post(submit_url, valid_data)

        assert query_of(response)['sc_error'] == ['invalid_email']

    def test_database_failure(self, client, submit_url, valid_data, signal_calls, mailoutbox):
        with patch.object(
            ContactSubmission.objects, 'create', side_effect=DatabaseError('disk full')
        ):
            response = client.post(submit_url, valid_data)

        assert query_of(response)['sc_error'] == ['database']
        assert len(signal_calls['pre']) == 1
        assert signal_calls['post'] == []
        assert len(mailoutbox) == 0
        assert ContactSubmission.objects.count() == 0

    def test_get_is_not_allowed(self, client, submit_url):
        response = client.get(submit_url)

        assert response.status_code == 405


@pytest.mark.django_db
class TestRedirectTarget:
    """redirect_to is honoured only for allowed hosts."""

    def test_foreign_host_falls_back_to_home(self, client, submit_url, valid_data):
        valid_data['redirect_to'] = 'https://evil.example.org/phish'

        response = client.post(submit_url, valid_data)

        assert response['Location'].startswith(HOME_URL + '?sc_status=success&sc_token=')

    def test_javascript_scheme_falls_back_to_home(self, client, submit_url, valid_data):
        valid_data['redirect_to'] = 'javascript:alert(1)'
        valid_data['csrfmiddlewaretoken'] = ''

        response = client.post(submit_url, valid_data)

        assert response['Location'] == HOME_URL + '?sc_status=error&sc_error=nonce'

    def test_relative_path_is_allowed(self, client, submit_url, valid_data):
        valid_data['redirect_to'] = '/thanks/?ref=footer'

        response = client.post(submit_url, valid_data)

        assert response['Location'].startswith('/thanks/?ref=footer&sc_status=success&sc_token=')

    def test_request_host_is_allowed(self, client, submit_url, valid_data):
        valid_data['redirect_to'] = 'http://testserver/about/'

        response = client.post(submit_url, valid_data)

        assert response['Location'].startswith('http://testserver/about/?sc_status=success')

    @override_settings(CONTACT_ALLOWED_REDIRECT_HOSTS=['partner.example.net'])
    def test_configured_host_is_allowed(self, client, submit_url, valid_data):
        valid_data['redirect_to'] = 'https://partner.example.net/form/'

        response = client.post(submit_url, valid_data)

        assert response['Location'].startswith('https://partner.example.net/form/?sc_status=success')

    def test_stale_notice_params_are_replaced(self, client, submit_url, valid_data):
        valid_data['redirect_to'] = 'https://example.com/contact/?sc_status=error&sc_error=nonce&page=2'

        response = client.post(submit_url, valid_data)

        query = query_of(response)
        assert query['page'] == ['2']
        assert query['sc_status'] == ['success']
        assert 'sc_error' not in query
