from django.apps import AppConfig


class ContactConfig(AppConfig):
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'contact'
    verbose_name = 'Contact Form'

    context = None

    def ready(self):
        """Import signals and build the shared ContactContext."""
        import contact.signals  # noqa
        self.build_context()

    def build_context(self):
        from contact.context import ContactContext

        self.context = ContactContext.from_settings()
        return self.context
