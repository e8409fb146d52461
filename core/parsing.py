"""
CSV parsing for transaction exports.
The first row is a header and is always discarded; every data row must
carry exactly three fields: identifier, date, amount.
"""
import csv
import io
from typing import List

import pandas as pd

from core.exceptions import ConfigurationError, MalformedInputError
from core.logger import setup_logger
from core.schema import TransactionRecord

logger = setup_logger(__name__)

FIELD_COUNT = 3


def decode_payload(data: bytes, encoding: str = "utf-8") -> str:
    """
    Decode a raw object body into text.

    A leading UTF-8 byte order mark is dropped.

    Raises:
        MalformedInputError: If the bytes are not valid in the given encoding
        ConfigurationError: If the encoding is unknown
    """
    codec = "utf-8-sig" if encoding.lower().replace("_", "-") in ("utf-8", "utf8") else encoding
    try:
        return data.decode(codec)
    except UnicodeDecodeError as e:
        raise MalformedInputError(
            f"Input is not valid {encoding} text",
            details={"encoding": encoding, "position": e.start}
        )
    except LookupError:
        raise ConfigurationError(
            f"Unknown input encoding: {encoding}",
            details={"encoding": encoding}
        )


def _read_cells(text: str, **options) -> pd.DataFrame:
    return pd.read_csv(
        io.StringIO(text),
        header=None,
        keep_default_na=False,
        skip_blank_lines=True,
        **options,
    )


def parse_transactions(text: str) -> List[TransactionRecord]:
    """
    Parse CSV text into transaction records.

    Empty fields are kept as empty strings and left for the aggregation
    step to reject; only rows with fewer or more than three fields are
    structurally malformed.

    Args:
        text: Raw CSV content, header row first

    Returns:
        Records in input row order (blank lines are skipped)

    Raises:
        MalformedInputError: If the input is empty, cannot be tokenized
            (e.g. unbalanced quotes, a row longer than the header), or a
            row does not have exactly three fields
    """
    try:
        df = _read_cells(text, dtype=str)
        # The C reader pads short rows with empty strings; the python reader
        # leaves the missing cells null, which tells them apart
        cells = _read_cells(text, dtype=object, engine="python")
    except pd.errors.EmptyDataError:
        raise MalformedInputError("Input contains no header row")
    except (pd.errors.ParserError, csv.Error) as e:
        logger.error(f"Failed to tokenize CSV input: {e}")
        raise MalformedInputError(
            "Invalid CSV format",
            details={"error": str(e)}
        )

    if df.shape != cells.shape:
        raise MalformedInputError(
            "Invalid CSV format",
            details={"error": f"inconsistent row structure {df.shape} vs {cells.shape}"}
        )

    if df.shape[1] != FIELD_COUNT:
        raise MalformedInputError(
            f"Expected {FIELD_COUNT} fields per row, found {df.shape[1]}",
            details={"columns": int(df.shape[1])}
        )

    missing = cells.isna().to_numpy()

    records: List[TransactionRecord] = []
    # Header row is discarded without inspection
    for position in range(1, len(df)):
        if missing[position].any():
            raise MalformedInputError(
                f"Row {position} is missing a field",
                details={
                    "row": position,
                    "values": [v for v, gone in zip(df.iloc[position], missing[position]) if not gone],
                }
            )
        record_id, date, amount = df.iloc[position]
        records.append(TransactionRecord(id=record_id, date=date, amount=amount))

    logger.info(f"Parsed {len(records)} transaction rows")
    return records
