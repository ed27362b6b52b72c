import logging
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Optional

from fastapi import Depends, FastAPI, Request
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import JSONResponse
from sqlalchemy.engine import Engine
from starlette.exceptions import HTTPException as StarletteHTTPException

from .core.config import Config
from .core.http import read_limited_body
from .core.middleware import (
    add_cors_headers,
    global_exception_handler,
    http_exception_handler,
    log_requests,
    payload_decode_handler,
    validation_exception_handler,
)
from .core.validation import PayloadDecodeError, ValidationFailed, decode_submission, validate_submission
from .services.contact_repository import ContactRepository
from .services.static_files import (
    CONTACT_PAGE,
    image_content_type,
    resolve_static_path,
    serve_static_file,
)

logger = logging.getLogger(__name__)


def get_repository(request: Request) -> ContactRepository:
    return request.app.state.repository


def create_app(
    engine: Engine,
    static_dir: Optional[str | Path] = None,
    max_body_bytes: Optional[int] = None,
) -> FastAPI:
    """Build the contact form application around an existing engine.

    The engine is disposed when the application shuts down.
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        yield
        engine.dispose()
        logger.info("Database connections closed")

    app = FastAPI(
        title="Contact Form API",
        lifespan=lifespan,
        docs_url=None,
        redoc_url=None,
        openapi_url=None,
        redirect_slashes=False,
    )

    static_root = Path(static_dir or Config.STATIC_DIR)
    app.state.repository = ContactRepository(engine)
    app.state.static_dir = static_root
    app.state.max_body_bytes = max_body_bytes or Config.MAX_BODY_BYTES

    # Last registered runs first: requests are logged, then CORS is applied
    @app.middleware("http")
    async def _add_cors_headers(request, call_next):
        return await add_cors_headers(request, call_next)

    @app.middleware("http")
    async def _log_requests(request, call_next):
        return await log_requests(request, call_next)

    app.add_exception_handler(ValidationFailed, validation_exception_handler)
    app.add_exception_handler(PayloadDecodeError, payload_decode_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(Exception, global_exception_handler)

    @app.get("/")
    def contact_page():
        return serve_static_file(resolve_static_path(static_root, CONTACT_PAGE), "text/html")

    @app.get("/css/{asset_path:path}")
    def stylesheet(asset_path: str):
        return serve_static_file(resolve_static_path(static_root / "css", asset_path), "text/css")

    @app.get("/js/{asset_path:path}")
    def script(asset_path: str):
        return serve_static_file(resolve_static_path(static_root / "js", asset_path), "application/javascript")

    @app.get("/images/{asset_path:path}")
    def image(asset_path: str):
        file_path = resolve_static_path(static_root / "images", asset_path)
        content_type = image_content_type(file_path) if file_path else "application/octet-stream"
        return serve_static_file(file_path, content_type)

    @app.post("/submit-contact")
    async def submit_contact(request: Request, repository: ContactRepository = Depends(get_repository)):
        """Validate a contact form submission and store it.

        - Empty body or failed validation: 400
        - Undecodable payload: 500
        - Otherwise 200 with the repository result, including its error results
        """
        body = await read_limited_body(request, request.app.state.max_body_bytes)
        submission = validate_submission(decode_submission(body))

        result = await run_in_threadpool(
            repository.save,
            submission.name,
            submission.email,
            submission.phone,
            submission.message,
        )
        return JSONResponse(status_code=200, content=result.to_content())

    return app
