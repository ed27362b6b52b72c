import logging
from pathlib import Path
from typing import Optional

from fastapi.responses import PlainTextResponse, Response


logger = logging.getLogger(__name__)

CONTACT_PAGE = "contact.html"

IMAGE_CONTENT_TYPES = {
    ".png": "image/png",
    ".jpg": "image/jpeg",
    ".jpeg": "image/jpeg",
    ".gif": "image/gif",
    ".svg": "image/svg+xml",
}
DEFAULT_CONTENT_TYPE = "application/octet-stream"


def image_content_type(path: Path) -> str:
    return IMAGE_CONTENT_TYPES.get(path.suffix.lower(), DEFAULT_CONTENT_TYPE)


def resolve_static_path(base_dir: Path, url_path: str) -> Optional[Path]:
    """Map a request path onto a file under base_dir.

    Returns None when the result would escape base_dir.
    """
    base = base_dir.resolve()
    candidate = (base / url_path.lstrip("/")).resolve()
    if candidate != base and base not in candidate.parents:
        logger.warning(f"Rejected static path outside {base}: {url_path}")
        return None
    return candidate


def not_found() -> Response:
    return PlainTextResponse("File not found", status_code=404)


def serve_static_file(file_path: Optional[Path], content_type: str) -> Response:
    if file_path is None:
        return not_found()

    logger.debug(f"Serving file from: {file_path}")
    try:
        content = file_path.read_bytes()
    except OSError as e:
        logger.error(f"Error reading file {file_path}: {e}")
        return not_found()

    return Response(content=content, status_code=200, media_type=content_type)
