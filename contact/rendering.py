"""
Contact Form Rendering

Shared renderer behind the shortcode tag, the block tag and the block view.
"""
from django.template.loader import render_to_string
from django.urls import reverse

from .notices import build_notice, strip_notice_params
from .sanitizers import sanitize_class_list, sanitize_text

DEFAULT_SUCCESS_MESSAGE = 'Thank you for contacting us. We will get back to you soon.'
WRAPPER_CLASS = 'simple-contact-form'
TEMPLATE_NAME = 'contact/contact_form.html'


def get_contact_context(contact_context=None):
    if contact_context is not None:
        return contact_context
    from django.apps import apps

    return apps.get_app_config('contact').context


def shortcode_attributes(success_message='', css_class=''):
    """Sanitize shortcode-style attributes."""
    return {
        'success_message': sanitize_text(success_message),
        'css_class': sanitize_text(css_class),
    }


def block_attributes(attributes):
    """Translate camelCase block attributes into shortcode attributes."""
    attributes = attributes if isinstance(attributes, dict) else {}
    return shortcode_attributes(
        success_message=attributes.get('successMessage', ''),
        css_class=attributes.get('cssClass', ''),
    )


def render_contact_form(request, success_message='', css_class='', contact_context=None):
    """
    Render the contact form fragment, with any pending notice, for request.

    Args:
        request: The current HttpRequest (query string carries the notice).
        success_message: Text shown after a successful submission.
        css_class: Space separated extra classes for the wrapper.
        contact_context: Optional ContactContext; defaults to the app's.

    Returns:
        SafeString with the rendered HTML.
    """
    contact_context = get_contact_context(contact_context)

    success_message = sanitize_text(success_message) or DEFAULT_SUCCESS_MESSAGE
    classes = [WRAPPER_CLASS] + sanitize_class_list(css_class)

    notice = build_notice(request, success_message, contact_context)

    return render_to_string(
        TEMPLATE_NAME,
        {
            'wrapper_class': ' '.join(classes),
            'notice': notice,
            'action': reverse('contact:submit'),
            'redirect_to': strip_notice_params(request.build_absolute_uri()),
        },
        request=request,
    )
