from decimal import Decimal
from unittest.mock import patch

import pytest
from django.utils import timezone

from registrations.models import Registration
from registrations.utils import (
    UNIQUE_ID_ALPHABET,
    assign_unique_id,
    backfill_unique_ids,
    generate_unique_id,
    mint_unique_id,
    unique_id_pattern,
)


def make_registration(email, transaction_id, unique_id=None, event="solo_singing", usn=""):
    return Registration.objects.create(
        unique_id=unique_id,
        event=event,
        name="Someone",
        usn=usn,
        college="VTU College",
        department="CSE",
        year="1",
        email=email,
        phone="9000000000",
        transaction_id=transaction_id,
        amount=Decimal("100.00"),
        payment_method="UPI",
    )


class TestGenerateUniqueId:

    def test_format(self):
        unique_id = generate_unique_id()

        assert unique_id_pattern().match(unique_id)
        assert unique_id.startswith(f"YUKTI-{timezone.now().year}-")

    def test_excludes_ambiguous_characters(self):
        suffixes = "".join(generate_unique_id().rsplit("-", 1)[1] for _ in range(200))

        assert not set(suffixes) & set("0O1I")
        assert set(suffixes) <= set(UNIQUE_ID_ALPHABET)

    def test_alphabet_has_32_symbols(self):
        assert len(UNIQUE_ID_ALPHABET) == 32
        assert len(set(UNIQUE_ID_ALPHABET)) == 32

    def test_explicit_year(self):
        assert generate_unique_id(year=2025).startswith("YUKTI-2025-")

    def test_prefix_from_settings(self, settings):
        settings.UNIQUE_ID_PREFIX = "FEST"

        assert generate_unique_id().startswith("FEST-")


@pytest.mark.django_db
class TestAssignUniqueId:

    def test_new_email_gets_fresh_id(self):
        assert unique_id_pattern().match(assign_unique_id("new@example.com"))

    def test_reuses_id_for_same_email(self):
        make_registration("asha@example.com", "T1", unique_id="YUKTI-2025-ABCDEFGH")

        assert assign_unique_id("asha@example.com") == "YUKTI-2025-ABCDEFGH"

    def test_converges_on_earliest_id_after_concurrent_mint(self):
        make_registration("asha@example.com", "T1", unique_id="YUKTI-2025-AAAAAAAA", event="quiz")
        make_registration("asha@example.com", "T2", unique_id="YUKTI-2025-BBBBBBBB", event="skit")

        assert assign_unique_id("asha@example.com") == "YUKTI-2025-AAAAAAAA"

    def test_ignores_rows_without_id(self):
        make_registration("asha@example.com", "T1", unique_id=None)

        assert unique_id_pattern().match(assign_unique_id("asha@example.com"))

    def test_regenerates_on_collision_with_other_email(self):
        make_registration("other@example.com", "T1", unique_id="YUKTI-2025-AAAAAAAA")

        with patch("registrations.utils.generate_unique_id", side_effect=["YUKTI-2025-AAAAAAAA", "YUKTI-2025-BBBBBBBB"]):
            assert mint_unique_id("asha@example.com") == "YUKTI-2025-BBBBBBBB"

    def test_gives_up_after_repeated_collisions(self):
        make_registration("other@example.com", "T1", unique_id="YUKTI-2025-AAAAAAAA")

        with patch("registrations.utils.generate_unique_id", return_value="YUKTI-2025-AAAAAAAA"):
            with pytest.raises(RuntimeError):
                mint_unique_id("asha@example.com")


@pytest.mark.django_db
class TestBackfillUniqueIds:

    def test_assigns_missing_ids(self):
        make_registration("a@example.com", "T1")
        make_registration("b@example.com", "T2", unique_id="")

        assert backfill_unique_ids() == 2
        assert not Registration.objects.missing_unique_id().exists()

    def test_same_email_shares_one_id(self):
        make_registration("a@example.com", "T1", event="solo_singing")
        make_registration("a@example.com", "T2", event="quiz")

        backfill_unique_ids()

        ids = set(Registration.objects.values_list("unique_id", flat=True))
        assert len(ids) == 1

    def test_reuses_existing_id_for_email(self):
        make_registration("a@example.com", "T1", unique_id="YUKTI-2025-ZZZZZZZZ", event="quiz")
        legacy = make_registration("a@example.com", "T2", event="solo_singing")

        backfill_unique_ids()

        legacy.refresh_from_db()
        assert legacy.unique_id == "YUKTI-2025-ZZZZZZZZ"

    def test_dry_run_changes_nothing(self):
        make_registration("a@example.com", "T1")

        assert backfill_unique_ids(dry_run=True) == 1
        assert Registration.objects.missing_unique_id().count() == 1
