"""
Error report ingestion endpoint.
"""

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse
from starlette.concurrency import run_in_threadpool
from starlette.requests import ClientDisconnect

from app.errors import IngestionError, MalformedInputError
from app.middleware.logging import RequestContext, get_request_context
from app.services.ingestion import ReportIngestor
from app.utils.logging import log_error_with_context

router = APIRouter(tags=["ingest"])

CONFIRMATION_MESSAGE = "Error logged"


def get_ingestor(request: Request) -> ReportIngestor:
    """FastAPI dependency returning the app's ReportIngestor."""
    return request.app.state.ingestor


async def read_body(request: Request, ctx: RequestContext) -> bytes:
    """
    Read the full request body.

    Raises:
        MalformedInputError: If the client went away mid-body
    """
    try:
        return await request.body()
    except ClientDisconnect as e:
        ctx.logger.error(f"Error reading request body: {e!r}")
        raise MalformedInputError("Error reading request body") from e


@router.post("/")
async def ingest_error_report(
    request: Request,
    ctx: RequestContext = Depends(get_request_context),
    ingestor: ReportIngestor = Depends(get_ingestor),
) -> JSONResponse:
    """
    Receive an error report and store it as an error_logs point.

    Expected JSON body:
    {
        "service": "billing",
        "endpoint": "/v1/invoices",
        "error": "timeout",
        "traceback": "..."   # optional
    }

    Returns:
        200 with "Error logged" once the point is written

    Raises:
        IngestionError: Rendered by the app's exception handler as
            415 (wrong Content-Type), 400 (bad body) or 500 (store failure)
    """
    try:
        ingestor.check_content_type(request.headers.get("content-type"), ctx)
        body = await read_body(request, ctx)

        # The store write blocks, keep it off the event loop
        await run_in_threadpool(ingestor.ingest, body, ctx)

        return JSONResponse(status_code=200, content=CONFIRMATION_MESSAGE)

    except IngestionError:
        raise
    except Exception as e:
        log_error_with_context(ctx.logger, "Unexpected error handling error report", e)
        raise IngestionError() from e


async def ingestion_error_handler(request: Request, exc: IngestionError) -> JSONResponse:
    """Render an IngestionError as its status code and public message."""
    return JSONResponse(status_code=exc.status_code, content=exc.public_message)
