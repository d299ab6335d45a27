"""
Token access for the admin API.

A single admin identity is configured through the environment (ADMIN_USERNAME,
ADMIN_PASSWORD, ADMIN_JWT_SECRET). Logging in returns a short-lived HS256 token
that must be sent as `Authorization: Bearer <token>`.
"""
from functools import wraps
import hmac
import logging
import time

from django.conf import settings
from django.core.exceptions import ImproperlyConfigured
from django.http import JsonResponse
from jose import JWTError, jwt

logger = logging.getLogger(__name__)

JWT_ALGORITHM = 'HS256'
ADMIN_ROLE = 'admin'


class AuthError(Exception):
    """Rejected credentials or token. `status` is the HTTP status to answer with."""

    def __init__(self, message, status=401):
        super().__init__(message)
        self.message = message
        self.status = status


def _admin_settings():
    username = getattr(settings, 'ADMIN_USERNAME', None)
    password = getattr(settings, 'ADMIN_PASSWORD', None)
    secret = getattr(settings, 'ADMIN_JWT_SECRET', None)
    if not (username and password and secret):
        raise ImproperlyConfigured('ADMIN_USERNAME, ADMIN_PASSWORD and ADMIN_JWT_SECRET must be set')
    return username, password, secret


def create_token(subject, secret, lifetime=None):
    lifetime = lifetime or getattr(settings, 'ADMIN_TOKEN_LIFETIME_SECONDS', 3600)
    now = int(time.time())
    claims = {
        'role': ADMIN_ROLE,
        'sub': subject,
        'iat': now,
        'exp': now + lifetime,
    }
    return jwt.encode(claims, secret, algorithm=JWT_ALGORITHM)


def login(username, password):
    """
    Check the admin credentials and return a signed token.
    The username is matched case-insensitively; both values are trimmed.
    Raises AuthError (401) on a mismatch, ImproperlyConfigured when unset.
    """
    admin_user, admin_pass, secret = _admin_settings()

    user_ok = hmac.compare_digest(
        str(username).strip().lower().encode(), admin_user.strip().lower().encode()
    )
    pass_ok = hmac.compare_digest(str(password).strip().encode(), admin_pass.encode())
    if not (user_ok and pass_ok):
        logger.warning("Invalid admin login credentials")
        raise AuthError('Invalid credentials', status=401)

    logger.info("Admin login successful")
    return create_token(admin_user.strip().lower(), secret)


def verify(token):
    """
    Decode an admin token and return its claims.
    Raises AuthError (403) when the token is malformed, expired or not an admin token.
    """
    try:
        _, _, secret = _admin_settings()
    except ImproperlyConfigured:
        logger.error("Admin token presented but admin access is not configured")
        raise AuthError('Invalid or expired token', status=403)

    if not token:
        raise AuthError('Invalid or expired token', status=403)
    try:
        claims = jwt.decode(token, secret, algorithms=[JWT_ALGORITHM])
    except JWTError as e:
        logger.info(f"Rejected admin token: {str(e)}")
        raise AuthError('Invalid or expired token', status=403)

    if claims.get('role') != ADMIN_ROLE:
        raise AuthError('Invalid or expired token', status=403)
    return claims


def admin_token_required(view_func):
    """
    View decorator: 401 when no Authorization header is sent,
    403 when the bearer token does not verify.
    """
    @wraps(view_func)
    def wrapper(request, *args, **kwargs):
        auth_header = request.headers.get('Authorization')
        if not auth_header:
            return JsonResponse({'error': 'No token provided'}, status=401)

        parts = auth_header.split()
        token = parts[1] if len(parts) == 2 and parts[0].lower() == 'bearer' else None
        try:
            request.admin_claims = verify(token)
        except AuthError as e:
            return JsonResponse({'error': e.message}, status=e.status)
        return view_func(request, *args, **kwargs)

    return wrapper
