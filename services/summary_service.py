"""
Transaction summary service.
Runs one batch through parse, aggregate, render and deliver.
"""
from typing import Any, Dict, Optional, Tuple
from urllib.parse import unquote_plus

from pydantic import ValidationError

from core.aggregation import aggregate
from core.config import get_settings
from core.exceptions import InvalidEventError, TransactionSummaryException
from core.logger import setup_logger
from core.parsing import decode_payload, parse_transactions
from core.reporting import build_report, render_report, render_report_text
from core.schema import Report, S3EventNotification, S3EventRecord, Summary
from integrations.mailer import SmtpMailer
from integrations.secrets import SecretsManagerCredentials
from integrations.storage import S3ObjectStore

logger = setup_logger(__name__)


class SummaryService:
    """Orchestrates one summary invocation. Any failure aborts delivery."""

    def __init__(
        self,
        store: Optional[S3ObjectStore] = None,
        credentials: Optional[SecretsManagerCredentials] = None,
        mailer: Optional[SmtpMailer] = None,
    ):
        """Initialize summary service; collaborators default to the AWS/SMTP ones."""
        self.settings = get_settings()
        self.store = store or S3ObjectStore()
        self.credentials = credentials or SecretsManagerCredentials()
        self.mailer = mailer or SmtpMailer()

    def summarize(self, text: str) -> Tuple[Summary, Report]:
        """
        Parse and aggregate CSV text, then derive its report.

        Args:
            text: Raw CSV content

        Returns:
            Tuple of (summary, report)
        """
        records = parse_transactions(text)
        logger.debug(f"Records: {[record.model_dump() for record in records]}")

        summary = aggregate(records)
        logger.info(
            f"Summary: credits={summary.credit_count} ({summary.credit_total}), "
            f"debits={summary.debit_count} ({summary.debit_total}), "
            f"months={summary.monthly_counts}"
        )

        report = build_report(summary, self.settings.zero_count_average_policy)
        return summary, report

    def summarize_bytes(self, data: bytes) -> Tuple[Summary, Report]:
        """Decode raw bytes with the configured encoding and summarize them."""
        return self.summarize(decode_payload(data, self.settings.input_encoding))

    def deliver(self, report: Report) -> str:
        """
        Render a report and send it to the configured recipient.

        The recipient defaults to the credential username.

        Returns:
            Address the report was sent to
        """
        html_body = render_report(report)
        text_body = render_report_text(report)

        credentials = self.credentials.get_email_credentials(self.settings.email_secret_id)
        recipient = self.settings.email_recipient or credentials.username

        self.mailer.send(
            credentials=credentials,
            recipient=recipient,
            subject=self.settings.email_subject,
            html_body=html_body,
            text_body=text_body,
        )
        return recipient

    def resolve_event(self, event: Dict[str, Any]) -> S3EventRecord:
        """
        Validate a trigger event and return its single object record.

        Raises:
            InvalidEventError: If the event is malformed or does not reference
                exactly one object
        """
        try:
            notification = S3EventNotification.model_validate(event)
        except ValidationError as e:
            raise InvalidEventError(
                "Event is not an S3 notification",
                details={"errors": [err["msg"] for err in e.errors()]}
            )

        for record in notification.records:
            logger.info(
                f"[{record.event_source} - {record.event_time}] "
                f"Bucket = {record.s3.bucket.name}, Key = {record.s3.object.key}"
            )

        if len(notification.records) != 1:
            raise InvalidEventError(
                f"Expected exactly one object per event, got {len(notification.records)}",
                details={"record_count": len(notification.records)}
            )
        return notification.records[0]

    def process_event(self, event: Dict[str, Any]) -> Dict[str, Any]:
        """
        Run the full pipeline for one S3 ObjectCreated event.

        Args:
            event: S3 notification payload

        Returns:
            Result dictionary with bucket, key, status and report

        Raises:
            TransactionSummaryException: Any stage failure, unchanged; nothing
                is delivered in that case
        """
        record = self.resolve_event(event)
        bucket = record.s3.bucket.name
        key = unquote_plus(record.s3.object.key)
        result: Dict[str, Any] = {"bucket": bucket, "key": key}

        if not key.startswith(self.settings.object_key_prefix):
            logger.warning(
                f"Skipping s3://{bucket}/{key}: outside prefix '{self.settings.object_key_prefix}'"
            )
            return {**result, "status": "skipped"}

        try:
            data = self.store.fetch(bucket, key)
            summary, report = self.summarize_bytes(data)
            recipient = self.deliver(report)
        except TransactionSummaryException as e:
            logger.error(f"Summary for s3://{bucket}/{key} failed: {e.message}")
            if e.details:
                logger.error(f"Details: {e.details}")
            raise

        return {
            **result,
            "status": "delivered",
            "recipient": recipient,
            "record_count": summary.record_count,
            "report": report.model_dump(mode="json"),
        }
