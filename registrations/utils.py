"""
Utility functions for the registrations app.
"""
import logging
import re
import secrets

from django.conf import settings
from django.utils import timezone

logger = logging.getLogger(__name__)


# Unique ID format: YUKTI-{year}-{8 chars}, e.g. YUKTI-2025-7FK3Z2QX
# Alphabet leaves out 0/O/1/I so IDs can be read aloud and copied by hand.
UNIQUE_ID_ALPHABET = "ABCDEFGHJKLMNPQRSTUVWXYZ23456789"
UNIQUE_ID_LENGTH = 8
UNIQUE_ID_MAX_ATTEMPTS = 5


def get_unique_id_prefix():
    return getattr(settings, 'UNIQUE_ID_PREFIX', 'YUKTI')


def unique_id_pattern():
    """Compiled regex matching a well-formed unique ID."""
    prefix = re.escape(get_unique_id_prefix())
    return re.compile(rf"^{prefix}-\d{{4}}-[{UNIQUE_ID_ALPHABET}]{{{UNIQUE_ID_LENGTH}}}$")


def generate_unique_id(year=None):
    """
    Return a fresh unique ID for the current (or given) year.
    Characters are drawn uniformly from UNIQUE_ID_ALPHABET.
    """
    year = year or timezone.now().year
    suffix = ''.join(secrets.choice(UNIQUE_ID_ALPHABET) for _ in range(UNIQUE_ID_LENGTH))
    return f"{get_unique_id_prefix()}-{year}-{suffix}"


def mint_unique_id(email):
    """
    Generate an ID that no other email already holds.
    Raises RuntimeError after UNIQUE_ID_MAX_ATTEMPTS collisions.
    """
    from .models import Registration

    for attempt in range(1, UNIQUE_ID_MAX_ATTEMPTS + 1):
        candidate = generate_unique_id()
        taken = Registration.objects.filter(unique_id=candidate).exclude(email=email).exists()
        if not taken:
            return candidate
        logger.warning(f"Unique ID collision on {candidate} (attempt {attempt})")
    raise RuntimeError("Could not generate a free unique ID")


def assign_unique_id(email):
    """
    Return the unique ID for a registrant email.
    Reuses the ID from any earlier registration with the same email,
    otherwise mints a new one.
    """
    from .models import Registration

    existing = Registration.objects.unique_id_for_email(email)
    if existing:
        return existing
    new_id = mint_unique_id(email)
    logger.info(f"Generated unique_id {new_id} for {email}")
    return new_id


def backfill_unique_ids(dry_run=False, log=None):
    """
    Assign a unique ID to every registration lacking one.
    Rows sharing an email get the same ID, reusing one already assigned to
    that email when it exists. Returns the number of rows updated.
    """
    from .models import Registration

    log = log or logger.info
    assigned = {}
    updated = 0
    for reg in Registration.objects.missing_unique_id().order_by('created_at'):
        unique_id = assigned.get(reg.email)
        if not unique_id:
            unique_id = Registration.objects.unique_id_for_email(reg.email) or mint_unique_id(reg.email)
            assigned[reg.email] = unique_id
        if not dry_run:
            reg.unique_id = unique_id
            reg.save(update_fields=['unique_id'])
        updated += 1
        log(f"Assigned {unique_id} to {reg.email} ({reg.event})")
    return updated
