"""
Shared pytest fixtures for contact form tests.
"""
import pytest
from django.core.cache import cache
from django.test import Client
from django.urls import reverse

from contact.signals import submission_post_insert, submission_pre_insert


@pytest.fixture(autouse=True)
def clear_cache():
    """Clear cache before and after each test to prevent pollution."""
    cache.clear()
    yield
    cache.clear()


@pytest.fixture
def submit_url():
    return reverse('contact:submit')


@pytest.fixture
def csrf_client():
    """Client that runs Django's CSRF checks like a real browser would."""
    return Client(enforce_csrf_checks=True)


@pytest.fixture
def valid_data():
    return {
        'simple_contact_name': ' Jane Doe ',
        'simple_contact_email': ' jane@example.com ',
        'csrfmiddlewaretoken': 'test-token',
        'redirect_to': 'https://example.com/contact/',
    }


@pytest.fixture
def signal_calls():
    """Record pre/post insert signal deliveries."""
    calls = {'pre': [], 'post': []}

    def on_pre_insert(sender, record, **kwargs):
        calls['pre'].append(record)

    def on_post_insert(sender, submission_id, record, **kwargs):
        calls['post'].append((submission_id, record))

    submission_pre_insert.connect(on_pre_insert, weak=False)
    submission_post_insert.connect(on_post_insert, weak=False)
    yield calls
    submission_pre_insert.disconnect(on_pre_insert)
    submission_post_insert.disconnect(on_post_insert)
