from decimal import Decimal
from io import StringIO
from unittest.mock import patch

import pytest
from django.core.management import call_command
from django.core.management.base import CommandError

from registrations.models import EventConfig, Registration
from registrations.utils import unique_id_pattern


@pytest.mark.django_db
class TestSetupInitialData:

    def test_migrations_seed_group_events(self):
        roadies = EventConfig.objects.get(key="roadies")
        assert (roadies.min_members, roadies.max_members) == (3, 3)
        assert EventConfig.objects.count() == 10

    def test_restores_deleted_group_events(self):
        EventConfig.objects.all().delete()

        call_command("setup_initial_data", stdout=StringIO())

        roadies = EventConfig.objects.get(key="roadies")
        assert (roadies.min_members, roadies.max_members) == (3, 3)
        assert EventConfig.objects.count() == 10
        assert all(event.is_group for event in EventConfig.objects.all())

    def test_is_idempotent(self):
        call_command("setup_initial_data", stdout=StringIO())
        EventConfig.objects.filter(key="skit").update(max_members=10)

        out = StringIO()
        call_command("setup_initial_data", stdout=out)

        assert EventConfig.objects.count() == 10
        assert EventConfig.objects.get(key="skit").max_members == 10
        assert "already exists" in out.getvalue()


@pytest.mark.django_db
class TestBackfillCommand:

    def _legacy(self, email, transaction_id, event="quiz"):
        return Registration.objects.create(
            event=event, name="Old", usn=transaction_id, college="C", department="D", year="1",
            email=email, phone="1", transaction_id=transaction_id, amount=Decimal("10"), payment_method="Cash",
        )

    def test_backfills(self):
        legacy = self._legacy("old@example.com", "T1")

        out = StringIO()
        call_command("backfill_unique_ids", stdout=out)

        legacy.refresh_from_db()
        assert unique_id_pattern().match(legacy.unique_id)
        assert "Found 1 registrations without unique_id" in out.getvalue()
        assert "Assigned: 1" in out.getvalue()

    def test_dry_run(self):
        legacy = self._legacy("old@example.com", "T1")

        out = StringIO()
        call_command("backfill_unique_ids", "--dry-run", stdout=out)

        legacy.refresh_from_db()
        assert legacy.unique_id is None
        assert "Dry run" in out.getvalue()


class TestSendTestEmail:

    def test_sends_to_given_address(self, mailoutbox):
        out = StringIO()
        call_command("send_test_email", "--to", "ops@example.com", stdout=out)

        assert mailoutbox[0].to == ["ops@example.com"]
        assert "Test mail sent" in out.getvalue()

    def test_requires_recipient(self, settings):
        settings.EMAIL_HOST_USER = ""

        with pytest.raises(CommandError):
            call_command("send_test_email", stdout=StringIO())

    def test_smtp_failure_is_command_error(self):
        with patch("registrations.emails.send_mail", side_effect=OSError("refused")):
            with pytest.raises(CommandError, match="refused"):
                call_command("send_test_email", "--to", "ops@example.com", stdout=StringIO())
