"""
Contact Application Context

Collaborators shared by the contact views, built once when the app loads.
"""
from urllib.parse import urlsplit

from django.conf import settings
from django.utils.module_loading import import_string

from .notifications import NotificationComposer
from .notices import default_success_message
from .tokens import SuccessTokenStore


class ContactContext:
    """
    Holds the token store, notification composer and success-message resolver.

    Views receive it through the ``contact_context`` init kwarg and otherwise
    fall back to the instance built by ContactConfig.ready().
    """

    def __init__(self, token_store, composer, success_message_resolver,
                 home_url='/', allowed_redirect_hosts=()):
        self.token_store = token_store
        self.composer = composer
        self.success_message_resolver = success_message_resolver
        self.home_url = home_url
        self.allowed_redirect_hosts = frozenset(allowed_redirect_hosts)

    @classmethod
    def from_settings(cls):
        composer_path = getattr(settings, 'CONTACT_NOTIFICATION_COMPOSER', None)
        composer = import_string(composer_path)() if composer_path else NotificationComposer()

        resolver_path = getattr(settings, 'CONTACT_SUCCESS_MESSAGE_RESOLVER', None)
        resolver = import_string(resolver_path) if resolver_path else default_success_message

        token_store = SuccessTokenStore(
            cache_alias=getattr(settings, 'CONTACT_SUCCESS_TOKEN_CACHE', 'default'),
            timeout=getattr(settings, 'CONTACT_SUCCESS_TOKEN_TIMEOUT', SuccessTokenStore.DEFAULT_TIMEOUT),
        )

        home_url = getattr(settings, 'SITE_URL', '') or '/'
        hosts = set(getattr(settings, 'CONTACT_ALLOWED_REDIRECT_HOSTS', []) or [])
        home_host = urlsplit(home_url).netloc
        if home_host:
            hosts.add(home_host)

        return cls(
            token_store=token_store,
            composer=composer,
            success_message_resolver=resolver,
            home_url=home_url,
            allowed_redirect_hosts=hosts,
        )
