"""
FastAPI routes for CSV upload, report preview and S3 event processing.
Clean API layer following separation of concerns principle.
"""
from pathlib import Path
from typing import Any, Dict

from fastapi import Body, FastAPI, File, HTTPException, Request, UploadFile
from fastapi.responses import HTMLResponse, JSONResponse, Response
from fastapi.templating import Jinja2Templates

from core.config import get_settings
from core.exceptions import (
    COLLABORATOR_ERRORS,
    INPUT_ERRORS,
    InvalidEventError,
    TransactionSummaryException,
)
from core.logger import setup_logger
from core.reporting import render_report
from services.summary_service import SummaryService

logger = setup_logger(__name__)
settings = get_settings()

# Initialize FastAPI app
app = FastAPI(
    title="Transaction Summary",
    description="Summarize transaction CSV exports and deliver the report by e-mail",
    version="1.0.0"
)

# Setup templates
templates_dir = Path(__file__).parent / "templates"
templates = Jinja2Templates(directory=str(templates_dir))

# Service instance
summary_service = SummaryService()


def status_code_for(exc: TransactionSummaryException) -> int:
    """Map a pipeline error to an HTTP status code."""
    if isinstance(exc, INPUT_ERRORS):
        return 422
    if isinstance(exc, InvalidEventError):
        return 400
    if isinstance(exc, COLLABORATOR_ERRORS):
        return 502
    return 500


@app.exception_handler(TransactionSummaryException)
async def summary_exception_handler(request: Request, exc: TransactionSummaryException) -> JSONResponse:
    """Render pipeline errors as JSON."""
    return JSONResponse(
        content={
            "status": "error",
            "error": type(exc).__name__,
            "message": exc.message,
            "details": exc.details,
        },
        status_code=status_code_for(exc)
    )


@app.get("/", response_class=HTMLResponse)
async def index(request: Request):
    """Render upload form."""
    return templates.TemplateResponse(request, "index.html", {"app_name": settings.app_name})


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {
        "status": "healthy",
        "service": "transaction_summary",
        "version": "1.0.0"
    }


@app.get("/favicon.ico")
async def favicon():
    """Return empty response for favicon to avoid 404 errors."""
    return Response(status_code=204)


def validate_file_extension(filename: str) -> None:
    """
    Validate file has correct extension.

    Raises:
        HTTPException: If file extension is invalid
    """
    if not filename or not filename.lower().endswith(".csv"):
        raise HTTPException(
            status_code=400,
            detail=f"Invalid file type: {filename}. Only .csv is supported."
        )


async def read_upload(file: UploadFile) -> bytes:
    validate_file_extension(file.filename)
    content = await file.read()
    logger.info(f"Received {file.filename} ({len(content)} bytes)")
    return content


@app.post("/summaries")
async def create_summary(file: UploadFile = File(...)) -> Dict[str, Any]:
    """
    Summarize an uploaded CSV without delivering it.

    Returns:
        Summary and report as JSON
    """
    content = await read_upload(file)
    summary, report = summary_service.summarize_bytes(content)
    return {
        "status": "ok",
        "summary": summary.model_dump(mode="json"),
        "report": report.model_dump(mode="json"),
    }


@app.post("/summaries/preview", response_class=HTMLResponse)
async def preview_summary(file: UploadFile = File(...)):
    """Render the notification document for an uploaded CSV."""
    content = await read_upload(file)
    _, report = summary_service.summarize_bytes(content)
    return HTMLResponse(render_report(report))


@app.post("/events")
def process_event(event: Dict[str, Any] = Body(...)) -> Dict[str, Any]:
    """
    Process an S3 ObjectCreated notification end to end, including delivery.

    Runs synchronously; the response is sent once delivery has finished.
    """
    return summary_service.process_event(event)


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host=settings.host, port=settings.port)
