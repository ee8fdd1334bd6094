import logging
import os
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, Response
from fastapi.staticfiles import StaticFiles

from conseil.api import cv, legal, media
from conseil.api.deps import get_knowledge
from conseil.config import settings
from conseil.models.schemas import ErrorResponse, HealthResponse
from conseil.services.completion import CompletionGateway
from conseil.services.errors import (
    InternalError,
    InvalidInput,
    ProviderError,
    ServiceError,
)
from conseil.services.knowledge import reload_knowledge
from conseil.services.media import MediaStore, MediaSynthesizer
from conseil.services.upload_store import UploadStore

logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Knowledge is loaded before the server accepts requests. A failed load
    # leaves an empty snapshot and the legal endpoint reports it per request.
    logger.info(f"Starting {settings.app_name}...")
    reload_knowledge(app)

    app.state.gateway = CompletionGateway()
    app.state.synthesizer = MediaSynthesizer()
    app.state.upload_store = UploadStore(
        settings.upload_dir, max_bytes=settings.max_upload_mb * 1024 * 1024
    )
    app.state.media_store = MediaStore(
        settings.static_dir, settings.media_subdir, settings.media_naming
    )

    yield

    logger.info("Shutting down...")


app = FastAPI(title=settings.app_name, version=settings.app_version, lifespan=lifespan)


class EmptyPreflightCORSMiddleware(CORSMiddleware):
    """Answers accepted preflight requests with an empty body"""

    def preflight_response(self, request_headers) -> Response:
        response = super().preflight_response(request_headers)
        if response.status_code != 200:
            return response

        headers = {
            key: value
            for key, value in response.headers.items()
            if key not in ("content-length", "content-type")
        }
        return Response(status_code=200, headers=headers)


# CORS middleware
app.add_middleware(
    EmptyPreflightCORSMiddleware,
    allow_origins=settings.cors_allow_origins,
    allow_methods=settings.cors_allow_methods,
    allow_headers=settings.cors_allow_headers,
)


@app.exception_handler(ServiceError)
async def service_error_handler(request: Request, exc: ServiceError):
    if isinstance(exc, ProviderError):
        logger.error(f"{request.method} {request.url.path} provider failure: {exc.detail}")
    return JSONResponse(status_code=exc.status_code, content={"error": exc.message})


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    # Wrongly typed form or body fields, e.g. a text value where a file is expected
    logger.info(f"{request.method} {request.url.path} rejected: {exc.errors()}")
    error = InvalidInput()
    return JSONResponse(status_code=error.status_code, content={"error": error.message})


@app.exception_handler(Exception)
async def unexpected_error_handler(request: Request, exc: Exception):
    logger.exception(f"{request.method} {request.url.path} failed")
    error = InternalError()
    return JSONResponse(status_code=error.status_code, content={"error": error.message})


# Include routers
error_responses = {400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}}
app.include_router(cv.router, tags=["CV"], responses=error_responses)
app.include_router(legal.router, tags=["Legal"], responses=error_responses)
app.include_router(media.router, tags=["Media"], responses=error_responses)


@app.get("/health", response_model=HealthResponse)
def health_check(request: Request):
    return HealthResponse(
        status="healthy", knowledge_loaded=get_knowledge(request).available
    )


# Static assets are mounted last so the API routes above take precedence
os.makedirs(settings.static_dir, exist_ok=True)
app.mount("/", StaticFiles(directory=settings.static_dir, html=True), name="static")


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("conseil.main:app", host=settings.host, port=settings.port)
