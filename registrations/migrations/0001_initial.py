# Generated manually for the initial registration schema

from django.db import migrations, models
import django.db.models.deletion
import django.db.models.functions.text


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name='EventConfig',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('key', models.CharField(help_text='Event key sent by the frontend, e.g. roadies', max_length=64, unique=True)),
                ('name', models.CharField(help_text='Display name used in emails', max_length=200)),
                ('min_members', models.PositiveSmallIntegerField(default=1)),
                ('max_members', models.PositiveSmallIntegerField(default=1)),
                ('is_active', models.BooleanField(default=True, help_text='Inactive configs are ignored (event treated as solo)')),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
            ],
            options={
                'verbose_name': 'Event',
                'verbose_name_plural': 'Events',
                'ordering': ['key'],
            },
        ),
        migrations.CreateModel(
            name='Registration',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('unique_id', models.CharField(blank=True, db_index=True, help_text='Generated ID e.g. YUKTI-2025-7FK3Z2QX, reused across events for the same email', max_length=40, null=True)),
                ('event', models.CharField(db_index=True, max_length=64)),
                ('name', models.CharField(help_text='Participant name, or group name for group events', max_length=200)),
                ('usn', models.CharField(blank=True, default='', help_text='Student USN (solo events only)', max_length=32)),
                ('college', models.CharField(max_length=200)),
                ('department', models.CharField(max_length=200)),
                ('year', models.CharField(max_length=20)),
                ('email', models.EmailField(max_length=254)),
                ('phone', models.CharField(max_length=20)),
                ('is_group', models.BooleanField(default=False)),
                ('transaction_id', models.CharField(max_length=100, unique=True)),
                ('amount', models.DecimalField(decimal_places=2, max_digits=10)),
                ('payment_method', models.CharField(help_text='e.g. UPI, Card, Cash', max_length=50)),
                ('created_at', models.DateTimeField(auto_now_add=True, db_index=True)),
            ],
            options={
                'verbose_name': 'Registration',
                'verbose_name_plural': 'Registrations',
                'ordering': ['-created_at'],
            },
        ),
        migrations.CreateModel(
            name='GroupMember',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('event', models.CharField(max_length=64)),
                ('name', models.CharField(max_length=200)),
                ('usn', models.CharField(max_length=32)),
                ('position', models.PositiveSmallIntegerField(default=0)),
                ('registration', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='members', to='registrations.registration')),
            ],
            options={
                'ordering': ['registration', 'position'],
            },
        ),
        migrations.AddConstraint(
            model_name='registration',
            constraint=models.UniqueConstraint(fields=('event', 'email'), name='unique_registration_event_email'),
        ),
        migrations.AddConstraint(
            model_name='registration',
            constraint=models.UniqueConstraint(condition=models.Q(('usn', ''), _negated=True), fields=('event', 'usn'), name='unique_registration_event_usn'),
        ),
        migrations.AddConstraint(
            model_name='registration',
            constraint=models.UniqueConstraint(django.db.models.functions.text.Lower('name'), models.F('event'), condition=models.Q(('is_group', True)), name='unique_group_name_per_event'),
        ),
        migrations.AddConstraint(
            model_name='groupmember',
            constraint=models.UniqueConstraint(fields=('event', 'usn'), name='unique_member_usn_per_event'),
        ),
    ]
