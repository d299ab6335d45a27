import json

import pytest

ADMIN_USERNAME = "admin"
ADMIN_PASSWORD = "test-pass-123"
ADMIN_JWT_SECRET = "test-signing-secret"


@pytest.fixture(autouse=True)
def _email_backend(settings):
    settings.EMAIL_BACKEND = "django.core.mail.backends.locmem.EmailBackend"


@pytest.fixture(autouse=True)
def _background_tasks_inline(settings, tmp_path):
    settings.AUTO_BACKGROUND_TASKS = True
    settings.EXPORT_DIR = tmp_path / "exports"
    settings.SOLO_EXPORT_PATH = settings.EXPORT_DIR / "solo_registrations.xlsx"
    settings.GROUP_EXPORT_PATH = settings.EXPORT_DIR / "group_registrations.xlsx"


@pytest.fixture(autouse=True)
def _admin_credentials(settings):
    settings.ADMIN_USERNAME = ADMIN_USERNAME
    settings.ADMIN_PASSWORD = ADMIN_PASSWORD
    settings.ADMIN_JWT_SECRET = ADMIN_JWT_SECRET
    settings.ADMIN_TOKEN_LIFETIME_SECONDS = 3600


@pytest.fixture
def solo_payload():
    def make(**overrides):
        payload = {
            "event": "solo_singing",
            "name": "Asha Rao",
            "USN": "1VT21CS001",
            "college": "VTU College",
            "department": "CSE",
            "year": "3",
            "email": "asha@example.com",
            "phone": "9876543210",
            "payment": {"transactionId": "TXN-1001", "amount": 150, "paymentMethod": "UPI"},
        }
        payload.update(overrides)
        return payload

    return make


@pytest.fixture
def group_payload():
    def make(member_count=3, usn_prefix="U", **overrides):
        payload = {
            "event": "roadies",
            "groupName": "Road Runners",
            "name": "Road Runners",
            "college": "VTU College",
            "department": "MECH",
            "year": "2",
            "email": "runners@example.com",
            "phone": "9123456780",
            "members": [{"name": f"Member {i}", "usn": f"{usn_prefix}{i}"} for i in range(1, member_count + 1)],
            "payment": {"transactionId": "TXN-2001", "amount": 450, "paymentMethod": "Card"},
        }
        payload.update(overrides)
        return payload

    return make


@pytest.fixture
def post_json(client):
    def post(url, payload, **extra):
        return client.post(url, data=json.dumps(payload), content_type="application/json", **extra)

    return post
