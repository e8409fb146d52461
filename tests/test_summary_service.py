"""
Unit tests for the summary orchestrator and the Lambda entry point.
"""
from decimal import Decimal
from types import SimpleNamespace

import pytest

from app import lambda_handler
from conftest import FakeCredentials, FakeMailer, FakeStore, make_event
from core.exceptions import (
    DeliveryError,
    DivisionUndefinedError,
    InvalidEventError,
    MalformedInputError,
)
from services.summary_service import SummaryService


def build_service(store, credentials, mailer):
    return SummaryService(store=store, credentials=credentials, mailer=mailer)


def test_summarize(scenario_a_csv, fake_collaborators):
    summary, report = build_service(*fake_collaborators).summarize(scenario_a_csv)
    assert summary.record_count == 4
    assert report.total_balance == Decimal("39.74")


def test_process_event_delivers_report(fake_collaborators):
    store, credentials, mailer = fake_collaborators

    result = build_service(store, credentials, mailer).process_event(make_event())

    assert result["status"] == "delivered"
    assert result["recipient"] == "reports@example.com"
    assert result["record_count"] == 4
    assert result["report"]["total_balance"] == "39.74"
    assert store.calls == [("uploads", "csv/transactions.csv")]
    assert credentials.calls == ["EMAIL_SECRET"]

    assert len(mailer.sent) == 1
    sent = mailer.sent[0]
    assert sent["recipient"] == "reports@example.com"
    assert sent["subject"] == "Transaction Summary"
    assert "<p>Total Balance: 39.74</p>" in sent["html_body"]
    assert "Average credit amount: 35.25" in sent["text_body"]


def test_recipient_override(monkeypatch, fake_collaborators):
    monkeypatch.setenv("EMAIL_RECIPIENT", "owner@example.com")
    store, credentials, mailer = fake_collaborators

    build_service(store, credentials, mailer).process_event(make_event())
    assert mailer.sent[0]["recipient"] == "owner@example.com"


def test_object_key_is_url_decoded(fake_collaborators):
    store, credentials, mailer = fake_collaborators

    result = build_service(store, credentials, mailer).process_event(
        make_event(key="csv/May+2026%281%29.csv")
    )
    assert result["key"] == "csv/May 2026(1).csv"
    assert store.calls == [("uploads", "csv/May 2026(1).csv")]


def test_object_outside_prefix_skipped(fake_collaborators):
    store, credentials, mailer = fake_collaborators

    result = build_service(store, credentials, mailer).process_event(make_event(key="other/t.csv"))

    assert result["status"] == "skipped"
    assert store.calls == []
    assert mailer.sent == []


@pytest.mark.parametrize("event", [
    make_event(count=0),
    make_event(count=2),
    {"Records": [{"s3": {"bucket": {}}}]},
    {"detail": "not an s3 event", "Records": "nope"},
])
def test_invalid_events(event, fake_collaborators):
    store, credentials, mailer = fake_collaborators

    with pytest.raises(InvalidEventError):
        build_service(store, credentials, mailer).process_event(event)
    assert store.calls == []
    assert mailer.sent == []


def test_malformed_input_delivers_nothing(credentials):
    mailer = FakeMailer()
    service = build_service(FakeStore(b"id,date,amount\n1,7/15\n"), FakeCredentials(credentials), mailer)

    with pytest.raises(MalformedInputError):
        service.process_event(make_event())
    assert mailer.sent == []


def test_fail_policy_delivers_nothing(monkeypatch, credentials):
    monkeypatch.setenv("ZERO_COUNT_AVERAGE_POLICY", "fail")
    mailer = FakeMailer()
    service = build_service(FakeStore(b"id,date,amount\n1,7/15,-3.00\n"), FakeCredentials(credentials), mailer)

    with pytest.raises(DivisionUndefinedError):
        service.process_event(make_event())
    assert mailer.sent == []


def test_delivery_failure_propagates(scenario_a_csv, credentials):
    class FailingMailer:
        def send(self, **kwargs):
            raise DeliveryError("SMTP down")

    service = build_service(FakeStore(scenario_a_csv.encode()), FakeCredentials(credentials), FailingMailer())

    with pytest.raises(DeliveryError):
        service.process_event(make_event())


def test_lambda_handler(monkeypatch, fake_collaborators):
    monkeypatch.setattr(lambda_handler, "_service", build_service(*fake_collaborators))

    result = lambda_handler.handler(make_event(), SimpleNamespace(aws_request_id="req-1"))

    assert result["status"] == "delivered"
    assert result["bucket"] == "uploads"


def test_lambda_handler_propagates_errors(monkeypatch, credentials):
    service = build_service(FakeStore(b""), FakeCredentials(credentials), FakeMailer())
    monkeypatch.setattr(lambda_handler, "_service", service)

    with pytest.raises(MalformedInputError):
        lambda_handler.handler(make_event(), None)
