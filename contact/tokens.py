"""
Success Token Store

Passes submission details across the post-submit redirect. Payloads live in
the Django cache under a random token for a short time and can be read once.
"""
import logging
import re
import secrets

from django.core.cache import caches

from .serializers import clean_success_payload

logger = logging.getLogger(__name__)

TOKEN_PATTERN = re.compile(r'^[A-Za-z0-9_-]{1,128}$')


class SuccessTokenStore:
    """
    Read-once key/value store with expiry, backed by a Django cache alias.

    Usage:
        store = SuccessTokenStore()
        token = store.put({'name': 'Jane'})
        store.pop(token)  # -> {'name': 'Jane'}
        store.pop(token)  # -> {}
    """

    KEY_PREFIX = 'simple_contact_success_'
    DEFAULT_TIMEOUT = 60

    def __init__(self, cache_alias='default', timeout=DEFAULT_TIMEOUT):
        self.cache_alias = cache_alias
        self.timeout = timeout

    @property
    def cache(self):
        return caches[self.cache_alias]

    def make_key(self, token):
        return f"{self.KEY_PREFIX}{token}"

    def generate_token(self):
        return secrets.token_urlsafe(16)

    def put(self, payload):
        """Store payload under a fresh token and return the token."""
        token = self.generate_token()
        self.cache.set(self.make_key(token), dict(payload), timeout=self.timeout)
        return token

    def pop(self, token):
        """
        Return and delete the payload for token.

        Returns {} for malformed, unknown, expired or already consumed tokens.
        Only the caller whose delete actually removed the key gets the payload.
        """
        if not isinstance(token, str) or not TOKEN_PATTERN.match(token):
            return {}

        key = self.make_key(token)
        data = self.cache.get(key)
        if data is None:
            return {}

        if not self.cache.delete(key):
            logger.info("Success token %s was consumed concurrently", token[:8])
            return {}

        return clean_success_payload(data)
