"""
Aggregation of transaction records into a batch summary.
Month extraction, amount parsing and credit/debit classification.
"""
import re
from decimal import MAX_EMAX, MAX_PREC, MIN_EMIN, Context, Decimal, localcontext
from types import MappingProxyType
from typing import Dict, Iterable, Mapping

from core.exceptions import InvalidAmountError, InvalidDateError
from core.logger import setup_logger
from core.schema import Summary, TransactionRecord

logger = setup_logger(__name__)

MONTH_NAMES: Mapping[int, str] = MappingProxyType({
    1: "January",
    2: "February",
    3: "March",
    4: "April",
    5: "May",
    6: "June",
    7: "July",
    8: "August",
    9: "September",
    10: "October",
    11: "November",
    12: "December",
})

_MONTH_TOKEN = re.compile(r"[+-]?[0-9]+")
_AMOUNT = re.compile(r"[+-]?(?:[0-9]+(?:\.[0-9]*)?|\.[0-9]+)(?:[eE][+-]?[0-9]+)?")

# Amounts beyond these powers of ten are rejected so that sums stay exact
MAX_AMOUNT_EXPONENT = 50
MIN_AMOUNT_EXPONENT = -50


def exact_context() -> Context:
    """Decimal context in which additions never round."""
    return Context(prec=MAX_PREC, Emax=MAX_EMAX, Emin=MIN_EMIN)


def month_from_date(date: str) -> str:
    """
    Map a month/day date to its month name.

    Only the segment before the first "/" is used; the day is ignored.

    Raises:
        InvalidDateError: If the month is not an integer in 1-12
    """
    token = date.split("/")[0].strip()
    if not _MONTH_TOKEN.fullmatch(token):
        raise InvalidDateError(
            f"Invalid month in date: '{date}'",
            details={"date": date}
        )

    month = int(token)
    if month not in MONTH_NAMES:
        raise InvalidDateError(
            f"Unknown month {month} in date: '{date}'",
            details={"date": date, "month": month}
        )
    return MONTH_NAMES[month]


def parse_amount(value: str) -> Decimal:
    """
    Parse a signed decimal amount.

    Only plain ASCII decimal notation with an optional exponent is accepted.

    Raises:
        InvalidAmountError: If the value is not a decimal number or lies
            outside the supported range
    """
    text = value.strip()
    if not _AMOUNT.fullmatch(text):
        raise InvalidAmountError(
            f"Invalid amount: '{value}'",
            details={"amount": value}
        )

    amount = Decimal(text)
    if amount and not (
        MIN_AMOUNT_EXPONENT <= amount.as_tuple().exponent
        and amount.adjusted() <= MAX_AMOUNT_EXPONENT
    ):
        raise InvalidAmountError(
            f"Amount out of range: '{value}'",
            details={"amount": value}
        )
    return amount


def aggregate(records: Iterable[TransactionRecord]) -> Summary:
    """
    Fold records into a Summary in a single pass.

    Positive amounts are credits and negative amounts are debits. Zero
    amounts are counted for their month but in neither bucket. The first
    record that fails to parse aborts the whole batch.

    Args:
        records: Parsed transaction records

    Returns:
        Summary of the batch

    Raises:
        InvalidDateError: On the first record with an unusable month
        InvalidAmountError: On the first record with an unusable amount
    """
    credit_count = 0
    debit_count = 0
    record_count = 0
    credit_total = Decimal("0")
    debit_total = Decimal("0")
    monthly_counts: Dict[str, int] = {}

    with localcontext(exact_context()):
        for record in records:
            month = month_from_date(record.date)
            monthly_counts[month] = monthly_counts.get(month, 0) + 1

            amount = parse_amount(record.amount)
            if amount > 0:
                credit_count += 1
                credit_total += amount
            elif amount < 0:
                debit_count += 1
                debit_total += amount
            else:
                logger.debug(f"Record {record.id} has a zero amount; left unclassified")

            record_count += 1

    summary = Summary(
        credit_count=credit_count,
        credit_total=credit_total,
        debit_count=debit_count,
        debit_total=debit_total,
        monthly_counts=monthly_counts,
        record_count=record_count,
    )
    logger.info(
        f"Aggregated {record_count} records: {credit_count} credits, "
        f"{debit_count} debits, {summary.unclassified_count} unclassified"
    )
    return summary
