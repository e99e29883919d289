"""
Input sanitizing helpers shared by the form handler and the renderers.
"""
import re

from django.utils.html import strip_tags

_WHITESPACE_RUN = re.compile(r'[\r\n\t ]+')
_CONTROL_CHARS = re.compile(r'[\x00-\x08\x0b\x0c\x0e-\x1f\x7f]')
_PERCENT_OCTETS = re.compile(r'%[a-fA-F0-9]{2}')
_CLASS_NAME_INVALID = re.compile(r'[^A-Za-z0-9_-]')


def sanitize_text(value):
    """
    Reduce arbitrary input to a single line of plain text.

    Strips tags, drops control characters, collapses whitespace runs and trims.
    Non-string input yields ''.
    """
    if not isinstance(value, str):
        return ''
    value = strip_tags(value)
    value = _CONTROL_CHARS.sub('', value)
    value = _WHITESPACE_RUN.sub(' ', value)
    return value.strip()


def sanitize_email(value):
    """Trim an email address and remove control characters and inner whitespace."""
    if not isinstance(value, str):
        return ''
    value = _CONTROL_CHARS.sub('', value)
    return _WHITESPACE_RUN.sub('', value.strip())


def sanitize_class_name(value):
    value = _PERCENT_OCTETS.sub('', value)
    return _CLASS_NAME_INVALID.sub('', value)


def sanitize_class_list(value):
    """
    Split a space separated class list into safe class names.

    Example: ' hero   banner ' -> ['hero', 'banner']
    """
    if not isinstance(value, str):
        return []
    classes = []
    for class_name in value.split():
        class_name = sanitize_class_name(class_name)
        if class_name:
            classes.append(class_name)
    return classes
