"""
Admin API views: token login and the registration listing.
"""
import logging

from django.core.exceptions import ImproperlyConfigured
from django.http import JsonResponse
from django.views.decorators.csrf import csrf_exempt
from django.views.decorators.http import require_http_methods

from . import auth
from .auth import AuthError, admin_token_required
from .models import Registration
from .views import _parse_body_json

logger = logging.getLogger(__name__)


@csrf_exempt
@require_http_methods(["POST"])
def admin_login(request):
    """
    Exchange the admin username and password for a bearer token.
    """
    body = _parse_body_json(request) or {}
    if not isinstance(body, dict):
        body = {}
    username = body.get('username')
    password = body.get('password')

    logger.info(f"Admin login attempt for username {username!r}")

    if not username or not password:
        return JsonResponse({'error': 'Username and password are required'}, status=400)

    try:
        token = auth.login(username, password)
    except AuthError as e:
        return JsonResponse({'error': e.message}, status=e.status)
    except ImproperlyConfigured as e:
        logger.error(f"Admin login unavailable: {str(e)}")
        return JsonResponse({'error': 'Admin login is not configured.'}, status=503)

    return JsonResponse({'token': token})


@require_http_methods(["GET"])
@admin_token_required
def admin_registrations(request):
    """
    All registrations, newest first.
    """
    try:
        registrations = Registration.objects.prefetch_related('members').order_by('-created_at', '-id')
        data = [r.to_dict() for r in registrations]
    except Exception:
        logger.exception("Error fetching registrations")
        return JsonResponse({'error': 'Failed to fetch data'}, status=500)
    return JsonResponse(data, safe=False)
