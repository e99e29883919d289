"""
Contact Form Views

Public endpoints: the form submission target, the embeddable block fragment
and a standalone contact page.
"""
from django.http import HttpResponseRedirect
from django.utils.decorators import method_decorator
from django.views.decorators.clickjacking import xframe_options_sameorigin
from django.views.generic import TemplateView
from rest_framework.parsers import FormParser, MultiPartParser
from rest_framework.permissions import AllowAny
from rest_framework.views import APIView

from .rendering import get_contact_context
from .submission import SubmissionHandler


class ContactFormSubmitView(APIView):
    """
    Public endpoint for contact form submissions.

    POST /contact/submit/

    Always answers with a redirect; the outcome travels in the query string.
    CSRF is verified by the handler so failures redirect instead of 403.
    """

    permission_classes = [AllowAny]
    authentication_classes = []
    parser_classes = [FormParser, MultiPartParser]
    contact_context = None

    def post(self, request):
        """Submit a contact form."""
        outcome = SubmissionHandler(get_contact_context(self.contact_context)).handle(request)
        return HttpResponseRedirect(outcome.location)


class ContactTemplateView(TemplateView):
    """Template view exposing the ContactContext to the contact template tags."""

    contact_context = None

    def get_context_data(self, **kwargs):
        context = super().get_context_data(**kwargs)
        context['contact_context'] = get_contact_context(self.contact_context)
        return context


class ContactPageView(ContactTemplateView):
    """
    Standalone page showing the contact form.

    GET /
    """

    template_name = 'contact/contact_page.html'

    def get_context_data(self, **kwargs):
        context = super().get_context_data(**kwargs)
        context['css_class'] = self.request.GET.get('css_class', '')
        return context


@method_decorator(xframe_options_sameorigin, name='dispatch')
class ContactFormBlockView(ContactTemplateView):
    """
    Server-rendered block fragment, embeddable in a same-origin frame.

    GET /contact/block/?successMessage=...&cssClass=...
    """

    template_name = 'contact/contact_block.html'

    def get_context_data(self, **kwargs):
        context = super().get_context_data(**kwargs)
        context['attributes'] = {
            'successMessage': self.request.GET.get('successMessage', ''),
            'cssClass': self.request.GET.get('cssClass', ''),
        }
        return context
