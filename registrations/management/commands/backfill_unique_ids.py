"""
Management command to assign unique IDs to registrations saved before IDs existed.
Registrations sharing an email get the same ID.

Run: python manage.py backfill_unique_ids
Use --dry-run to only print what would be changed.
"""
from django.core.management.base import BaseCommand
from django.db import transaction

from registrations.models import Registration
from registrations.utils import backfill_unique_ids


class Command(BaseCommand):
    help = 'Assign a unique ID (YUKTI-<year>-XXXXXXXX) to every registration missing one'

    def add_arguments(self, parser):
        parser.add_argument(
            '--dry-run',
            action='store_true',
            help='Only show what would be updated, do not save.',
        )

    def handle(self, *args, **options):
        dry_run = options['dry_run']
        if dry_run:
            self.stdout.write(self.style.WARNING('Dry run: no changes will be saved.'))

        missing = Registration.objects.missing_unique_id().count()
        self.stdout.write(f'Found {missing} registrations without unique_id')

        with transaction.atomic():
            updated = backfill_unique_ids(dry_run=dry_run, log=lambda msg: self.stdout.write(f'  {msg}'))

        self.stdout.write('')
        self.stdout.write(self.style.SUCCESS(f'Done. Assigned: {updated}'))
        if dry_run and updated:
            self.stdout.write(self.style.WARNING('Run without --dry-run to apply changes.'))
