"""
Contact Form Signals

Extension points around persistence, plus internal receivers.

    submission_pre_insert(sender, record)
        Sent with the sanitized record just before it is saved.

    submission_post_insert(sender, submission_id, record)
        Sent after the row has been saved.
"""
import logging

from django.core.signals import setting_changed
from django.db.models.signals import post_save
from django.dispatch import Signal, receiver

from .models import ContactSubmission

logger = logging.getLogger(__name__)

submission_pre_insert = Signal()
submission_post_insert = Signal()

CONTEXT_SETTINGS = {
    'SITE_URL',
    'CONTACT_ALLOWED_REDIRECT_HOSTS',
    'CONTACT_NOTIFICATION_COMPOSER',
    'CONTACT_SUCCESS_MESSAGE_RESOLVER',
    'CONTACT_SUCCESS_TOKEN_TIMEOUT',
    'CONTACT_SUCCESS_TOKEN_CACHE',
}


@receiver(post_save, sender=ContactSubmission)
def contact_submission_post_save(sender, instance, created, **kwargs):
    """Log new contact submissions."""
    if created:
        logger.info("New contact submission %s from %s", instance.pk, instance.email)


@receiver(setting_changed)
def rebuild_contact_context(sender, setting, **kwargs):
    """Keep the app's ContactContext in step with overridden settings."""
    if setting in CONTEXT_SETTINGS:
        from django.apps import apps

        apps.get_app_config('contact').build_context()
