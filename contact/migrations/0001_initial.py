import django.core.validators
import django.utils.timezone
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name='ContactSubmission',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('name', models.CharField(help_text='Name of the person contacting us', max_length=120)),
                ('email', models.EmailField(db_index=True, help_text='Email address for follow-up', max_length=190, validators=[django.core.validators.EmailValidator()])),
                ('created_at', models.DateTimeField(db_index=True, default=django.utils.timezone.now, help_text='When the message was submitted (UTC)')),
                ('consent_ip', models.BinaryField(blank=True, help_text='Packed IPv4/IPv6 address of the submitter', max_length=16, null=True)),
                ('user_agent', models.CharField(blank=True, help_text='Browser user agent', max_length=255, null=True)),
            ],
            options={
                'verbose_name': 'Contact Submission',
                'verbose_name_plural': 'Contact Submissions',
                'db_table': 'contact_submissions',
                'ordering': ['-created_at'],
            },
        ),
    ]
