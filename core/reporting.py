"""
Report derivation and rendering.
Rounds summary statistics for presentation and renders them into the
notification document with Jinja2 templates.
"""
from decimal import ROUND_HALF_UP, Decimal, localcontext
from pathlib import Path
from typing import List, Literal, Optional, Tuple

from jinja2 import Environment, FileSystemLoader, StrictUndefined, select_autoescape

from core.aggregation import MONTH_NAMES, exact_context
from core.exceptions import DivisionUndefinedError
from core.logger import setup_logger
from core.schema import Report, Summary

logger = setup_logger(__name__)

TEMPLATES_DIR = Path(__file__).parent / "templates"
HTML_TEMPLATE = "summary_email.html"
TEXT_TEMPLATE = "summary_email.txt"
NOT_APPLICABLE = "N/A"

_MONTH_ORDER = {name: number for number, name in MONTH_NAMES.items()}

ZeroCountPolicy = Literal["omit", "fail"]


def round_half_away_from_zero(value: Decimal, places: int = 2) -> Decimal:
    """Round to a fixed number of decimal places, ties away from zero."""
    with localcontext() as ctx:
        # quantize fails when the result has more digits than the context allows
        ctx.prec = max(ctx.prec, value.adjusted() + places + 2)
        return value.quantize(Decimal(1).scaleb(-places), rounding=ROUND_HALF_UP)


def _average(total: Decimal, count: int, kind: str, policy: ZeroCountPolicy) -> Optional[Decimal]:
    if count == 0:
        if policy == "fail":
            raise DivisionUndefinedError(
                f"No {kind} transactions to average",
                details={"kind": kind}
            )
        return None
    with localcontext() as ctx:
        # enough guard digits below the cent for the final rounding
        ctx.prec = max(ctx.prec, total.adjusted() + 30)
        average = total / count
    return round_half_away_from_zero(average)


def build_report(summary: Summary, zero_count_policy: ZeroCountPolicy = "omit") -> Report:
    """
    Derive presentation values from a summary.

    Args:
        summary: Aggregated batch summary
        zero_count_policy: "omit" leaves an average as None when its count
            is zero; "fail" raises DivisionUndefinedError instead

    Returns:
        Report with totals and averages rounded to two places
    """
    with localcontext(exact_context()):
        balance = summary.credit_total + summary.debit_total

    return Report(
        total_balance=round_half_away_from_zero(balance),
        monthly_counts=dict(summary.monthly_counts),
        credit_average=_average(summary.credit_total, summary.credit_count, "credit", zero_count_policy),
        debit_average=_average(summary.debit_total, summary.debit_count, "debit", zero_count_policy),
    )


def format_amount(value: Optional[Decimal]) -> str:
    """Format an amount with two decimals, or N/A when there is none."""
    if value is None:
        return NOT_APPLICABLE
    return f"{value:.2f}"


def ordered_months(report: Report) -> List[Tuple[str, int]]:
    """Monthly counts in calendar order."""
    return sorted(
        report.monthly_counts.items(),
        key=lambda item: _MONTH_ORDER.get(item[0], len(_MONTH_ORDER) + 1)
    )


def _environment() -> Environment:
    env = Environment(
        loader=FileSystemLoader(str(TEMPLATES_DIR)),
        autoescape=select_autoescape(["html"]),
        undefined=StrictUndefined,
        trim_blocks=True,
        lstrip_blocks=True,
        keep_trailing_newline=True,
    )
    env.filters["amount"] = format_amount
    return env


_env = _environment()


def _render(template_name: str, report: Report) -> str:
    template = _env.get_template(template_name)
    return template.render(report=report, months=ordered_months(report))


def render_report(report: Report) -> str:
    """
    Render the HTML notification document for a report.

    Pure function: no I/O beyond loading the bundled template.
    """
    return _render(HTML_TEMPLATE, report)


def render_report_text(report: Report) -> str:
    """Render the plain-text alternative of the notification."""
    return _render(TEXT_TEMPLATE, report)
