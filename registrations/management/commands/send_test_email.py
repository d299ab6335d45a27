"""
Management command to check the email settings by sending a test message.

Run: python manage.py send_test_email --to someone@example.com
Without --to the message goes to EMAIL_HOST_USER.
"""
from django.conf import settings
from django.core.management.base import BaseCommand, CommandError

from registrations.emails import send_test_email


class Command(BaseCommand):
    help = 'Send a test email using the configured mail backend'

    def add_arguments(self, parser):
        parser.add_argument('--to', dest='recipient', help='Recipient address (default: EMAIL_HOST_USER).')

    def handle(self, *args, **options):
        recipient = options['recipient'] or settings.EMAIL_HOST_USER
        if not recipient:
            raise CommandError('No recipient: pass --to or set EMAIL_HOST_USER.')
        try:
            send_test_email(recipient)
        except Exception as e:
            raise CommandError(f'Failed to send test mail: {str(e)}')
        self.stdout.write(self.style.SUCCESS(f'✓ Test mail sent to {recipient}'))
