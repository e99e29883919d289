"""
Contact Form Serializers

Validation of the public form payload and shaping of the one-time success
payload handed across the post-submit redirect.
"""
import datetime

from rest_framework import serializers
from rest_framework.fields import empty

from .models import ContactSubmission, SubmissionError, unpack_ip
from .sanitizers import sanitize_email, sanitize_text

MISSING_VALUE_CODES = {'required', 'blank', 'null'}


class SanitizedCharField(serializers.CharField):
    """CharField that reduces input to plain single-line text before validating."""

    def __init__(self, *args, truncate_to=None, **kwargs):
        self.truncate_to = truncate_to
        super().__init__(*args, **kwargs)

    def run_validation(self, data=empty):
        if isinstance(data, str):
            data = sanitize_text(data)
            if self.truncate_to:
                data = data[:self.truncate_to]
        return super().run_validation(data)


class SanitizedEmailField(serializers.EmailField):
    """EmailField that trims and strips control characters before validating."""

    def run_validation(self, data=empty):
        if isinstance(data, str):
            data = sanitize_email(data)
        return super().run_validation(data)


class ContactFormSubmitSerializer(serializers.Serializer):
    """
    Public contact form submission serializer.

    Field names match the HTML form; validated data uses the model's names.
    """

    simple_contact_name = SanitizedCharField(
        source='name',
        truncate_to=ContactSubmission.NAME_MAX_LENGTH,
        help_text="Name of the person contacting us"
    )

    simple_contact_email = SanitizedEmailField(
        source='email',
        max_length=ContactSubmission.EMAIL_MAX_LENGTH,
        help_text="Valid email address for follow-up"
    )

    def get_error_code(self):
        """
        Collapse field errors into a single SubmissionError.

        Missing values on either field win over a malformed address.
        """
        errors = self.errors
        for field_name in ('simple_contact_name', 'simple_contact_email'):
            for detail in errors.get(field_name, []):
                if getattr(detail, 'code', None) in MISSING_VALUE_CODES:
                    return SubmissionError.MISSING_FIELDS
        return SubmissionError.INVALID_EMAIL


class SuccessPayloadSerializer(serializers.ModelSerializer):
    """
    Ephemeral copy of a stored submission used to personalise the success notice.
    """

    created_at = serializers.DateTimeField(
        format='%Y-%m-%d %H:%M:%S',
        default_timezone=datetime.timezone.utc,
    )
    consent_ip = serializers.SerializerMethodField()
    insert_id = serializers.IntegerField(source='id')

    class Meta:
        model = ContactSubmission
        fields = ['name', 'email', 'created_at', 'consent_ip', 'user_agent', 'insert_id']

    def get_consent_ip(self, obj):
        return unpack_ip(obj.consent_ip)

    def to_representation(self, instance):
        data = super().to_representation(instance)
        if not data.get('user_agent'):
            data.pop('user_agent', None)
        return dict(data)


def clean_success_payload(data):
    """
    Re-sanitize a payload read back from the token store.

    Unknown keys are dropped; anything that is not a dict yields {}.
    """
    if not isinstance(data, dict):
        return {}

    cleaned = {}

    for key in ('name', 'created_at', 'user_agent'):
        if key in data:
            cleaned[key] = sanitize_text(str(data[key]))

    if 'email' in data:
        cleaned['email'] = sanitize_email(str(data['email']))

    if data.get('consent_ip'):
        ip = unpack_ip(str(data['consent_ip']))
        if ip:
            cleaned['consent_ip'] = ip

    if 'insert_id' in data:
        try:
            cleaned['insert_id'] = abs(int(data['insert_id']))
        except (TypeError, ValueError):
            cleaned['insert_id'] = 0

    return cleaned
