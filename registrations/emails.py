"""
Email sending functions for registration confirmations.
"""
from django.core.mail import send_mail
from django.template.loader import render_to_string
from django.conf import settings
from django.utils.html import strip_tags
import logging

logger = logging.getLogger(__name__)


def get_event_display_name(event_key):
    """Display name from the event config, else a title-cased key (dumb_charades -> Dumb Charades)."""
    from .models import EventConfig

    config = EventConfig.objects.filter(key=event_key).first()
    if config:
        return config.name
    return event_key.replace('_', ' ').title()


def deliver_confirmation_email(registration):
    """
    Render and send the confirmation email with the event name and the
    registrant's unique ID. Errors propagate to the caller.
    """
    fest_name = getattr(settings, 'FEST_NAME', 'Yukti VTU Fest')
    event_name = get_event_display_name(registration.event)
    context = {
        'registration': registration,
        'event_name': event_name,
        'fest_name': fest_name,
        'members': list(registration.members.all()) if registration.is_group else [],
    }

    subject = f'Registration Confirmation - {event_name}'
    html_message = render_to_string('registrations/emails/registration_confirmation.html', context)
    plain_message = strip_tags(html_message)

    send_mail(
        subject=subject,
        message=plain_message,
        from_email=settings.DEFAULT_FROM_EMAIL,
        recipient_list=[registration.email],
        html_message=html_message,
        fail_silently=False,
    )
    logger.info(f"Confirmation email sent to {registration.email} for registration {registration.unique_id}")


def send_registration_confirmation_email(registration):
    """
    Send the confirmation email without raising.

    Args:
        registration: Registration instance

    Returns:
        True if the message was handed to the mail backend, False otherwise.
    """
    try:
        deliver_confirmation_email(registration)
        return True
    except Exception as e:
        logger.error(f"Failed to send confirmation email to {registration.email}: {str(e)}")
        # Don't raise - email failure shouldn't break the registration flow
        return False


def send_test_email(recipient):
    """
    Send a test message to check the SMTP settings. Errors propagate to the caller.
    """
    fest_name = getattr(settings, 'FEST_NAME', 'Yukti VTU Fest')
    html_message = render_to_string('registrations/emails/test_email.html', {'fest_name': fest_name})
    send_mail(
        subject=f'Test Mail from {fest_name}',
        message=strip_tags(html_message),
        from_email=settings.DEFAULT_FROM_EMAIL,
        recipient_list=[recipient],
        html_message=html_message,
        fail_silently=False,
    )
    logger.info(f"Test email sent to {recipient}")
