"""
Template tags for embedding the contact form.

    {% load contact_tags %}
    {% contact_form success_message="Thanks!" css_class="hero banner" %}
    {% contact_form_block block.attributes %}
"""
from django import template

from contact.rendering import block_attributes, render_contact_form, shortcode_attributes

register = template.Library()


@register.simple_tag(takes_context=True)
def contact_form(context, success_message='', css_class=''):
    """Shortcode-style entry point."""
    attributes = shortcode_attributes(success_message, css_class)
    return render_contact_form(
        context['request'],
        contact_context=context.get('contact_context'),
        **attributes
    )


@register.simple_tag(takes_context=True)
def contact_form_block(context, attributes=None):
    """Block entry point; takes a dict of camelCase block attributes."""
    return render_contact_form(
        context['request'],
        contact_context=context.get('contact_context'),
        **block_attributes(attributes)
    )
