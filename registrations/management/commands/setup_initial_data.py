"""
Management command to set up initial fest data.
Migrations already seed the group events; run this to restore any that were deleted:
python manage.py setup_initial_data
"""
from django.core.management.base import BaseCommand
from django.db import transaction
from registrations.event_limits import seed_group_events
from registrations.models import EventConfig


class Command(BaseCommand):
    help = 'Sets up initial fest data (group events and their member limits)'

    def handle(self, *args, **options):
        self.stdout.write('Setting up initial fest data...')

        try:
            with transaction.atomic():
                for event, created in seed_group_events(EventConfig):
                    if created:
                        self.stdout.write(self.style.SUCCESS(f'✓ Created Event: {event}'))
                    else:
                        self.stdout.write(self.style.WARNING(f'Event {event.key} already exists'))

        except Exception as e:
            self.stdout.write(self.style.ERROR(f'Error setting up initial data: {str(e)}'))
            raise

        self.stdout.write(self.style.SUCCESS('\n✓ Initial data setup complete!'))
