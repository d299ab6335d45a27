"""
Validation pipeline for incoming registration payloads.

Checks run in a fixed order and stop at the first failure, so the registrant
always sees the most basic problem first. Nothing is written to the database
here; the view persists the cleaned registration once every check passes.
"""
from dataclasses import dataclass, field
from decimal import Decimal, InvalidOperation
import logging

from .models import EventConfig, GroupMember, Registration

logger = logging.getLogger(__name__)


REQUIRED_FIELDS = ('event', 'name', 'college', 'department', 'year', 'email', 'phone')
PAYMENT_FIELDS = ('transactionId', 'amount', 'paymentMethod')
CENTS = Decimal('0.01')

FIELD_LABELS = {
    'event': 'Event',
    'name': 'Name',
    'usn': 'USN',
    'college': 'College',
    'department': 'Department',
    'year': 'Year',
    'email': 'Email',
    'phone': 'Phone',
    'transaction_id': 'Transaction ID',
    'payment_method': 'Payment method',
}


class RegistrationValidationError(Exception):
    """A payload failed one of the registration rules. Maps to HTTP 400."""

    def __init__(self, message, code='invalid'):
        super().__init__(message)
        self.message = message
        self.code = code


@dataclass
class CleanedRegistration:
    event: str
    name: str
    usn: str
    college: str
    department: str
    year: str
    email: str
    phone: str
    transaction_id: str
    amount: Decimal
    payment_method: str
    is_group: bool = False
    min_members: int = 1
    max_members: int = 1
    members: list = field(default_factory=list)

    @property
    def identity_usns(self):
        """USNs that identify this registrant within an event."""
        if self.is_group:
            return [m['usn'] for m in self.members if m.get('usn')]
        return [self.usn] if self.usn else []


def _text(value):
    if value is None:
        return ''
    return str(value).strip()


def _normalize_usn(value):
    return _text(value).upper()


def _clean_members(raw_members):
    """Normalize the members list. Non-dict entries become blank members."""
    if not isinstance(raw_members, (list, tuple)):
        return None
    members = []
    for raw in raw_members:
        if not isinstance(raw, dict):
            raw = {}
        members.append({'name': _text(raw.get('name')), 'usn': _normalize_usn(raw.get('usn'))})
    return members


def _parse_amount(value):
    try:
        amount = Decimal(str(value).strip())
    except (InvalidOperation, ValueError):
        raise RegistrationValidationError('Payment amount must be a number.', code='invalid_amount')
    if not amount.is_finite():
        raise RegistrationValidationError('Payment amount must be a positive number.', code='invalid_amount')
    if amount == 0:
        raise RegistrationValidationError('All payment details are required!', code='missing_payment')
    if amount < 0:
        raise RegistrationValidationError('Payment amount must be a positive number.', code='invalid_amount')

    # Largest value the amount column can hold, e.g. 10^8 for max_digits=10, decimal_places=2
    amount_field = Registration._meta.get_field('amount')
    limit = Decimal(10) ** (amount_field.max_digits - amount_field.decimal_places)
    if amount >= limit or amount.quantize(CENTS) >= limit:
        raise RegistrationValidationError('Payment amount is too large.', code='invalid_amount')

    amount = amount.quantize(CENTS)
    if amount == 0:
        raise RegistrationValidationError('Payment amount must be a positive number.', code='invalid_amount')
    return amount


def check_required_fields(payload, is_group):
    values = {name: _text(payload.get(name)) for name in REQUIRED_FIELDS}
    if is_group:
        # Group events are registered under the group name
        values['name'] = _text(payload.get('groupName')) or values['name']
    if not all(values.values()):
        raise RegistrationValidationError('All required fields must be filled!', code='missing_fields')
    values['email'] = values['email'].lower()
    return values


def check_payment(payload):
    payment = payload.get('payment')
    if not isinstance(payment, dict) or not all(_text(payment.get(name)) for name in PAYMENT_FIELDS):
        raise RegistrationValidationError('All payment details are required!', code='missing_payment')
    return {
        'transaction_id': _text(payment['transactionId']),
        'amount': _parse_amount(payment['amount']),
        'payment_method': _text(payment['paymentMethod']),
    }


def check_not_registered(cleaned):
    duplicate = Registration.objects.for_identity(
        cleaned.event, cleaned.email, cleaned.identity_usns
    ).exists()
    if duplicate:
        raise RegistrationValidationError(
            f'You have already registered for {cleaned.event}.', code='duplicate_registration'
        )


def check_transaction_unused(cleaned):
    if Registration.objects.with_transaction_id(cleaned.transaction_id).exists():
        raise RegistrationValidationError(
            f'Transaction ID "{cleaned.transaction_id}" is already used for another registration.',
            code='duplicate_transaction',
        )


def check_group_name_free(cleaned):
    if Registration.objects.with_group_name(cleaned.event, cleaned.name).exists():
        raise RegistrationValidationError(
            f'Group "{cleaned.name}" has already registered for {cleaned.event}.', code='duplicate_group'
        )


def check_group_members(cleaned, members):
    if members is None or not (cleaned.min_members <= len(members) <= cleaned.max_members):
        raise RegistrationValidationError(
            f'{cleaned.event} requires between {cleaned.min_members} and {cleaned.max_members} members.',
            code='member_count',
        )
    for member in members:
        if not member['name'] or not member['usn']:
            raise RegistrationValidationError('Each group member must have a name and USN.', code='member_fields')
    usns = [m['usn'] for m in members]
    if len(set(usns)) != len(usns):
        raise RegistrationValidationError('Each group member must have a different USN.', code='member_duplicate')


def _max_length(model, field_name):
    return model._meta.get_field(field_name).max_length


def check_field_lengths(cleaned):
    """Reject values longer than their database column."""
    for field_name, label in FIELD_LABELS.items():
        if cleaned.is_group and field_name == 'name':
            label = 'Group name'
        limit = _max_length(Registration, field_name)
        if len(getattr(cleaned, field_name)) > limit:
            raise RegistrationValidationError(
                f'{label} is too long (maximum {limit} characters).', code='field_too_long'
            )
    for member in cleaned.members:
        for field_name, label in (('name', 'Member name'), ('usn', 'Member USN')):
            limit = _max_length(GroupMember, field_name)
            if len(member[field_name]) > limit:
                raise RegistrationValidationError(
                    f'{label} is too long (maximum {limit} characters).', code='field_too_long'
                )


def validate_registration(payload):
    """
    Run every registration rule against a raw payload.

    Returns a CleanedRegistration, or raises RegistrationValidationError
    naming the first rule that failed.
    """
    if not isinstance(payload, dict):
        raise RegistrationValidationError('Invalid registration data.', code='invalid_payload')

    event_key = _text(payload.get('event'))
    config = EventConfig.for_event(event_key)
    is_group = bool(config and config.is_group)

    values = check_required_fields(payload, is_group)
    payment = check_payment(payload)

    usn = _normalize_usn(payload.get('USN'))
    if not is_group and not usn:
        raise RegistrationValidationError('USN is required for solo events!', code='missing_usn')

    members = _clean_members(payload.get('members')) if is_group else []
    cleaned = CleanedRegistration(
        event=values['event'],
        name=values['name'],
        usn='' if is_group else usn,
        college=values['college'],
        department=values['department'],
        year=values['year'],
        email=values['email'],
        phone=values['phone'],
        is_group=is_group,
        min_members=config.min_members if is_group else 1,
        max_members=config.max_members if is_group else 1,
        members=members or [],
        **payment,
    )

    check_field_lengths(cleaned)
    check_not_registered(cleaned)
    check_transaction_unused(cleaned)

    if is_group:
        check_group_name_free(cleaned)
        check_group_members(cleaned, members)

    return cleaned


def explain_conflict(cleaned):
    """
    Build the validation error for a write rejected by a database constraint.
    A concurrent registration has committed in the meantime, so re-running the
    store checks finds it and reports the same message a sequential request would get.
    """
    try:
        check_not_registered(cleaned)
        check_transaction_unused(cleaned)
        if cleaned.is_group:
            check_group_name_free(cleaned)
    except RegistrationValidationError as e:
        return e
    logger.warning(f"Constraint violation for {cleaned.email} ({cleaned.event}) not matched by any store check")
    return RegistrationValidationError(
        f'You have already registered for {cleaned.event}.', code='duplicate_registration'
    )
