from django.db import migrations

from registrations.event_limits import GROUP_EVENTS, seed_group_events


def seed_event_limits(apps, schema_editor):
    seed_group_events(apps.get_model('registrations', 'EventConfig'))


def remove_event_limits(apps, schema_editor):
    EventConfig = apps.get_model('registrations', 'EventConfig')
    EventConfig.objects.filter(key__in=[event['key'] for event in GROUP_EVENTS]).delete()


class Migration(migrations.Migration):

    dependencies = [
        ('registrations', '0001_initial'),
    ]

    operations = [
        migrations.RunPython(seed_event_limits, remove_event_limits),
    ]
