"""
Importer API - HTTP surface of the Yahoo import pipeline.

Endpoints:
    POST /admin/custom/yahoo-import   run one import
    GET  /health                      liveness

Every failure answers with {"message": ...}: 400 for bad input or missing
store setup, 502 when the auction page cannot be fetched, 500 otherwise.
"""
import threading
from typing import Callable, Optional

from fastapi import APIRouter, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from core.errors import AuctionImportError
from core.importer.pipeline import YahooImportPipeline
from core.logging import get_logger
from core.models.api import ImportRequest

logger = get_logger("importer-api")

IMPORT_PATH = "/admin/custom/yahoo-import"

router = APIRouter()

PipelineFactory = Callable[[], YahooImportPipeline]


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"message": message})


def _best_message(exc: Exception) -> str:
    return getattr(exc, "detail", None) or getattr(exc, "message", None) or str(exc) or "Import failed"


class DefaultPipelineFactory:
    """
    Builds pipelines on the MongoDB platform and the configured fetcher.

    Both are created on the first request and shared afterwards, so the
    index setup runs once per process.
    """

    def __init__(self):
        self._platform = None
        self._fetcher = None
        self._lock = threading.Lock()

    def __call__(self) -> YahooImportPipeline:
        from core.commerce import get_commerce_platform
        from core.yahoo.fetcher import get_page_fetcher

        if self._platform is None:
            with self._lock:
                if self._platform is None:
                    self._fetcher = get_page_fetcher()
                    self._platform = get_commerce_platform()
        return YahooImportPipeline(fetcher=self._fetcher, platform=self._platform)


@router.post(IMPORT_PATH)
def yahoo_import(body: ImportRequest, request: Request):
    """Import one auction; see ImportRequest / ImportResponse for the shapes."""
    try:
        pipeline = request.app.state.pipeline_factory()
        result = pipeline.run(body)
    except AuctionImportError as e:
        logger.warning(
            f"Import rejected: {e.message}",
            extra={"status_code": e.status_code, "url": body.url},
        )
        return _error(e.status_code, e.message)
    except Exception as e:
        logger.error("Import failed", exc_info=True, extra={"url": body.url})
        return _error(500, _best_message(e))

    return result.model_dump()


@router.get("/health")
def health():
    return {"status": "ok"}


async def _validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = exc.errors()
    first = errors[0] if errors else {}
    location = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
    message = first.get("msg", "Invalid request body")
    if location:
        message = f"Invalid request body: {location}: {message}"
    return _error(400, message)


def create_app(pipeline_factory: Optional[PipelineFactory] = None) -> FastAPI:
    """
    Build the FastAPI application.

    Args:
        pipeline_factory: Builds a pipeline per request (DefaultPipelineFactory
            when omitted)
    """
    app = FastAPI(title="AuctionBridge Importer")
    app.state.pipeline_factory = pipeline_factory or DefaultPipelineFactory()
    app.add_exception_handler(RequestValidationError, _validation_error_handler)
    app.include_router(router)
    return app
