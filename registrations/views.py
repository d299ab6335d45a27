"""
Public API views: event registration.
"""
import json
import logging

from django.db import IntegrityError, transaction
from django.http import JsonResponse
from django.views.decorators.csrf import csrf_exempt
from django.views.decorators.http import require_http_methods

from .emails import send_registration_confirmation_email
from .models import Registration
from .tasks import export_registration, retry_confirmation_email
from .utils import assign_unique_id
from .validation import RegistrationValidationError, explain_conflict, validate_registration

logger = logging.getLogger(__name__)


def _parse_body_json(request):
    """Read JSON body and return it. Return None if the body is not valid JSON."""
    try:
        return json.loads(request.body or b'{}')
    except (json.JSONDecodeError, UnicodeDecodeError, TypeError):
        return None


def _save_registration(cleaned):
    """
    Assign the unique ID and persist the registration.
    Raises RegistrationValidationError when a database constraint rejects the write.
    """
    try:
        with transaction.atomic():
            unique_id = assign_unique_id(cleaned.email)
            registration = Registration.objects.create_registration(cleaned, unique_id)
    except IntegrityError as e:
        logger.warning(f"Registration write rejected by constraint for {cleaned.email} ({cleaned.event}): {str(e)}")
        raise explain_conflict(cleaned)
    return registration


def _run_followups(registration):
    """
    Send the confirmation email and queue the Excel export for a committed registration.
    Returns whether the email went out. Never raises: the registration is already saved.
    """
    email_sent = send_registration_confirmation_email(registration)
    try:
        if not email_sent:
            retry_confirmation_email(registration.id)
    except Exception:
        logger.exception(f"Could not queue email retry for registration {registration.id}")
    try:
        export_registration(registration.id)
    except Exception:
        logger.exception(f"Could not export registration {registration.id}")
    return email_sent


@csrf_exempt
@require_http_methods(["POST"])
def register(request):
    """
    Register a participant or group for an event.

    Body: event, name / groupName, USN, college, department, year, email, phone,
    members [{name, usn}] for group events, payment {transactionId, amount, paymentMethod}.
    """
    payload = _parse_body_json(request)
    if payload is None:
        return JsonResponse({'error': 'Invalid registration data.'}, status=400)

    try:
        cleaned = validate_registration(payload)
        registration = _save_registration(cleaned)
    except RegistrationValidationError as e:
        return JsonResponse({'error': e.message}, status=400)
    except Exception:
        logger.exception("Error during registration")
        return JsonResponse({'error': 'Server error. Registration failed'}, status=500)

    logger.info(f"Registered {registration.unique_id} for {registration.event} (registration {registration.id})")

    email_sent = _run_followups(registration)

    return JsonResponse({
        'message': 'Registration successful!',
        'uniqueId': registration.unique_id,
        'event': registration.event,
        'emailSent': email_sent,
    }, status=201)
