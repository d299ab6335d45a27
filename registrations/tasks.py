"""
Follow-up work for accepted registrations (Excel export, confirmation email retry).

Both run as django-background-tasks jobs processed by `manage.py process_tasks`,
which records failures and retries them up to MAX_ATTEMPTS. With
AUTO_BACKGROUND_TASKS set they run inline instead (tests, single-process setups).
"""
from functools import wraps
import logging

from background_task import background
from django.conf import settings

from .emails import deliver_confirmation_email
from .exports import append_registration_rows
from .models import Registration

logger = logging.getLogger(__name__)

INTERNAL_KWARGS = {'schedule', 'repeat', 'repeat_until', 'remove_existing_tasks'}


def background_auto(schedule=0, **background_kwargs):
    """
    Decorator: queue the function as a background task, or call it directly
    when AUTO_BACKGROUND_TASKS is set. Arguments must be JSON-serializable.
    """

    def decorator(original_function):
        background_task = background(schedule=schedule, **background_kwargs)(original_function)

        @wraps(original_function)
        def wrapper(*args, **kwargs):
            if getattr(settings, 'AUTO_BACKGROUND_TASKS', False):
                filtered_kwargs = {key: value for key, value in kwargs.items() if key not in INTERNAL_KWARGS}
                return original_function(*args, **filtered_kwargs)
            return background_task(*args, **kwargs)

        wrapper.task = background_task
        wrapper.task_function = original_function
        return wrapper

    return decorator


def _load(registration_id):
    return Registration.objects.prefetch_related('members').get(pk=registration_id)


@background_auto()
def export_registration(registration_id):
    """Append the registration's rows to the solo or group workbook."""
    registration = _load(registration_id)
    try:
        count = append_registration_rows(registration)
    except Exception as e:
        logger.error(f"Excel export failed for registration {registration_id}: {str(e)}")
        raise
    logger.info(f"Exported {count} row(s) for {registration.unique_id} ({registration.event})")
    return count


@background_auto(schedule=60)
def retry_confirmation_email(registration_id):
    """Resend a confirmation email that failed during the request. Raises so the queue retries it."""
    registration = _load(registration_id)
    try:
        deliver_confirmation_email(registration)
    except Exception as e:
        logger.error(f"Confirmation email retry failed for registration {registration_id}: {str(e)}")
        raise
    logger.info(f"Confirmation email resent to {registration.email} for {registration.unique_id}")
