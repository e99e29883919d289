"""
Uninstall Contact Form Management Command

Drops the contact_submissions table and the schema version records by
unapplying every contact migration:

    python manage.py uninstall_contact --noinput
"""

from django.core.management import call_command
from django.core.management.base import BaseCommand, CommandError
from django.db import connections
from django.db.migrations.recorder import MigrationRecorder


class Command(BaseCommand):
    help = 'Remove the contact submissions table and its schema version records'

    def add_arguments(self, parser):
        parser.add_argument(
            '--noinput', '--no-input',
            action='store_false',
            dest='interactive',
            help='Do not prompt for confirmation',
        )
        parser.add_argument(
            '--database',
            default='default',
            help='Database alias to uninstall from',
        )

    def handle(self, *args, **options):
        database = options['database']
        recorder = MigrationRecorder(connections[database])

        if not recorder.has_table() or not recorder.migration_qs.filter(app='contact').exists():
            self.stdout.write(self.style.SUCCESS('✓ Contact form is not installed'))
            return

        if options['interactive']:
            answer = input(
                'This will permanently delete all contact submissions. Type "yes" to continue: '
            )
            if answer.strip().lower() != 'yes':
                raise CommandError('Uninstall cancelled.')

        self.stdout.write('Unapplying contact migrations...')
        call_command(
            'migrate', 'contact', 'zero',
            database=database,
            interactive=False,
            verbosity=options.get('verbosity', 1),
            stdout=self.stdout,
        )

        self.stdout.write(self.style.SUCCESS('✓ Contact submissions table and schema records removed'))
