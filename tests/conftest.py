"""
Shared fixtures for the test suite.
"""
import pytest

from core.config import reset_settings
from core.schema import EmailCredentials

SETTINGS_ENV = [
    "APP_NAME",
    "HOST",
    "PORT",
    "LOG_LEVEL",
    "AWS_REGION",
    "AWS_MAX_ATTEMPTS",
    "OBJECT_KEY_PREFIX",
    "EMAIL_SECRET_ID",
    "EMAIL_RECIPIENT",
    "EMAIL_SUBJECT",
    "SMTP_PORT",
    "SMTP_TIMEOUT",
    "INPUT_ENCODING",
    "ZERO_COUNT_AVERAGE_POLICY",
]

SCENARIO_A_CSV = (
    "id,date,amount\n"
    "0,7/15,+60.50\n"
    "1,7/28,-10.30\n"
    "2,8/2,-20.46\n"
    "3,8/13,+10.00\n"
)


@pytest.fixture(autouse=True)
def clean_settings(monkeypatch):
    """Isolate every test from the caller's environment."""
    for name in SETTINGS_ENV:
        monkeypatch.delenv(name, raising=False)
    reset_settings()
    yield
    reset_settings()


@pytest.fixture
def scenario_a_csv():
    return SCENARIO_A_CSV


@pytest.fixture
def credentials():
    return EmailCredentials(username="reports@example.com", password="hunter2", host="smtp.example.com")


class FakeStore:
    """In-memory stand-in for S3ObjectStore."""

    def __init__(self, data: bytes):
        self.data = data
        self.calls = []

    def fetch(self, bucket, key):
        self.calls.append((bucket, key))
        return self.data


class FakeCredentials:
    """Stand-in for SecretsManagerCredentials."""

    def __init__(self, credentials):
        self.credentials = credentials
        self.calls = []

    def get_email_credentials(self, secret_id):
        self.calls.append(secret_id)
        return self.credentials


class FakeMailer:
    """Records sent messages instead of talking to SMTP."""

    def __init__(self):
        self.sent = []

    def send(self, **kwargs):
        self.sent.append(kwargs)


def make_event(key="csv/transactions.csv", bucket="uploads", count=1):
    """Build an S3 ObjectCreated notification with `count` identical records."""
    record = {
        "eventVersion": "2.1",
        "eventSource": "aws:s3",
        "eventTime": "2026-10-18T09:00:00.000Z",
        "eventName": "ObjectCreated:Put",
        "s3": {
            "bucket": {"name": bucket},
            "object": {"key": key, "size": 64},
        },
    }
    return {"Records": [record] * count}


@pytest.fixture
def fake_collaborators(scenario_a_csv, credentials):
    return (
        FakeStore(scenario_a_csv.encode("utf-8")),
        FakeCredentials(credentials),
        FakeMailer(),
    )
