"""
Pydantic schemas for transaction records, summaries and reports.
Also defines the S3 notification shape accepted as a trigger.
"""
from decimal import Decimal
from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field


class TransactionRecord(BaseModel):
    """One data row of the input. Field contents are not validated here."""
    model_config = ConfigDict(frozen=True)

    id: str
    date: str = Field(..., description="Date in month/day form, no year")
    amount: str = Field(..., description="Signed decimal amount as written in the input")


class Summary(BaseModel):
    """Counts and totals accumulated over one batch."""
    model_config = ConfigDict(frozen=True)

    credit_count: int = 0
    credit_total: Decimal = Decimal("0")
    debit_count: int = 0
    debit_total: Decimal = Decimal("0")
    monthly_counts: Dict[str, int] = Field(default_factory=dict)
    record_count: int = 0

    @property
    def unclassified_count(self) -> int:
        """Records with a zero amount, counted as neither credit nor debit."""
        return self.record_count - self.credit_count - self.debit_count


class Report(BaseModel):
    """
    Presentation-ready values derived from a Summary.
    Averages are None when there were no transactions of that kind.
    """
    model_config = ConfigDict(frozen=True)

    total_balance: Decimal
    monthly_counts: Dict[str, int] = Field(default_factory=dict)
    credit_average: Optional[Decimal] = None
    debit_average: Optional[Decimal] = None


class EmailCredentials(BaseModel):
    """SMTP credentials stored as a JSON secret."""
    username: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1, repr=False)
    host: str = Field(..., min_length=1)


class S3Bucket(BaseModel):
    name: str


class S3Object(BaseModel):
    key: str
    size: Optional[int] = None


class S3Entity(BaseModel):
    bucket: S3Bucket
    object: S3Object


class S3EventRecord(BaseModel):
    """Single record of an S3 event notification."""
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    event_source: Optional[str] = Field(None, alias="eventSource")
    event_time: Optional[str] = Field(None, alias="eventTime")
    event_name: Optional[str] = Field(None, alias="eventName")
    s3: S3Entity


class S3EventNotification(BaseModel):
    """S3 ObjectCreated notification as delivered to the handler."""
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    records: List[S3EventRecord] = Field(default_factory=list, alias="Records")
