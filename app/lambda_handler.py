"""
AWS Lambda entry point for S3 ObjectCreated notifications.
"""
from typing import Any, Dict, Optional

from core.logger import setup_logger
from services.summary_service import SummaryService

logger = setup_logger(__name__)

_service: Optional[SummaryService] = None


def get_service() -> SummaryService:
    """Get or create the service singleton reused across warm invocations."""
    global _service
    if _service is None:
        _service = SummaryService()
    return _service


def handler(event: Dict[str, Any], context: Any = None) -> Dict[str, Any]:
    """
    Summarize the uploaded object and e-mail the report.

    Errors propagate so the invocation is marked as failed.
    """
    request_id = getattr(context, "aws_request_id", None)
    logger.info(f"Invocation {request_id} started")
    result = get_service().process_event(event)
    logger.info(f"Invocation {request_id} finished: {result['status']}")
    return result
