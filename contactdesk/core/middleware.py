import logging
import time
from typing import Callable

from fastapi import Request
from fastapi.responses import JSONResponse, Response
from starlette.exceptions import HTTPException as StarletteHTTPException

from .validation import PayloadDecodeError, ValidationFailed


logger = logging.getLogger(__name__)

NOT_FOUND_MESSAGE = "Page not found"
SERVER_ERROR_MESSAGE = "Server error. Please try again later."

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": "GET, POST, OPTIONS",
    "Access-Control-Allow-Headers": "Content-Type",
}


def _request_id(request: Request) -> str:
    return f"{int(time.time() * 1000)}-{id(request)}"


def error_response(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"status": "error", "message": message})


async def add_cors_headers(request: Request, call_next: Callable):
    if request.method == "OPTIONS":
        response = Response(status_code=200)
    else:
        response = await call_next(request)
    response.headers.update(CORS_HEADERS)
    return response


async def log_requests(request: Request, call_next: Callable):
    start_time = time.time()
    request_id = _request_id(request)

    try:
        response = await call_next(request)
        process_time = time.time() - start_time
        logger.info(f"[{request_id}] {request.method} {request.url.path} - {response.status_code} - {process_time:.3f}s")
        return response
    except Exception as e:
        process_time = time.time() - start_time
        logger.error(f"[{request_id}] {request.method} {request.url.path} - ERROR: {str(e)} - {process_time:.3f}s")
        raise


async def validation_exception_handler(request: Request, exc: ValidationFailed):
    logger.info(f"Rejected submission on {request.url.path}: {exc.message}")
    return error_response(exc.status_code, exc.message)


async def payload_decode_handler(request: Request, exc: PayloadDecodeError):
    logger.error(f"Error processing request on {request.url.path}: {exc}")
    return error_response(500, SERVER_ERROR_MESSAGE)


async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    # Unknown routes and unsupported methods both surface as a plain 404
    if exc.status_code in (404, 405):
        return error_response(404, NOT_FOUND_MESSAGE)
    return error_response(exc.status_code, str(exc.detail))


async def global_exception_handler(request: Request, exc: Exception):
    request_id = _request_id(request)
    logger.error(f"[{request_id}] Unhandled exception in {request.method} {request.url.path}: {str(exc)}", exc_info=True)

    # Runs outside the middleware stack, so CORS headers are added here
    response = error_response(500, SERVER_ERROR_MESSAGE)
    response.headers.update(CORS_HEADERS)
    return response
