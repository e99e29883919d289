"""
Contact Form Django Admin Configuration
"""
from django.contrib import admin
from .models import ContactSubmission


@admin.register(ContactSubmission)
class ContactSubmissionAdmin(admin.ModelAdmin):
    """Read-only admin interface for contact submissions."""

    list_display = [
        'id', 'name', 'email', 'created_at', 'ip_address', 'user_agent'
    ]

    list_filter = [
        'created_at'
    ]

    search_fields = [
        'name', 'email'
    ]

    readonly_fields = [
        'id', 'name', 'email', 'created_at', 'ip_address', 'user_agent'
    ]

    fields = readonly_fields

    date_hierarchy = 'created_at'

    def ip_address(self, obj):
        """Printable submitter address."""
        return obj.consent_ip_display or '-'
    ip_address.short_description = 'IP Address'

    def has_add_permission(self, request):
        """Submissions only arrive through the public form."""
        return False

    def has_change_permission(self, request, obj=None):
        return False
