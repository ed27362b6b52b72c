import logging

from fastapi import Request

from .validation import PayloadTooLarge


logger = logging.getLogger(__name__)


async def read_limited_body(request: Request, max_bytes: int) -> bytes:
    """Buffer the request body, refusing anything larger than max_bytes."""
    declared = request.headers.get("content-length")
    if declared and declared.isdigit() and int(declared) > max_bytes:
        logger.warning(f"Declared body of {declared} bytes exceeds limit of {max_bytes}")
        raise PayloadTooLarge(max_bytes)

    body = bytearray()
    async for chunk in request.stream():
        body.extend(chunk)
        if len(body) > max_bytes:
            logger.warning(f"Streamed body exceeded limit of {max_bytes} bytes")
            raise PayloadTooLarge(max_bytes)

    return bytes(body)
