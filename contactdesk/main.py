import errno
import logging
import socket
import sys
from datetime import datetime

import uvicorn

from .app import create_app
from .core.config import Config
from .core.database import check_connection, create_db_engine
from .services.schema import SchemaInitError, initialize_schema

logger = logging.getLogger(__name__)


def configure_logging(level: str = "INFO") -> None:
    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        handlers=[
            logging.StreamHandler(),
        ]
    )


def _bind(host: str, port: int) -> socket.socket:
    sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
    sock.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
    try:
        sock.bind((host, port))
    except OSError:
        sock.close()
        raise
    sock.set_inheritable(True)
    return sock


def bind_socket(host: str, port: int) -> socket.socket:
    """Bind the listen socket, falling back once to port + 1 if it is taken."""
    try:
        return _bind(host, port)
    except OSError as e:
        if e.errno != errno.EADDRINUSE:
            raise
        logger.warning(f"Port {port} is busy, trying port {port + 1}...")
        return _bind(host, port + 1)


def main() -> None:
    configure_logging(Config.LOG_LEVEL)

    try:
        Config.validate()
    except ValueError as e:
        logger.error(f"ERROR: {e}")
        logger.error("Please create a .env file with your database URL:")
        logger.error(f"DATABASE_URL={Config.EXAMPLE_DATABASE_URL}")
        sys.exit(1)

    engine = create_db_engine(Config.database_url())
    check_connection(engine)

    try:
        initialize_schema(engine, strict=Config.SCHEMA_STRICT)
    except SchemaInitError as e:
        logger.error(f"Failed to start server: {e}")
        sys.exit(1)

    app = create_app(engine)

    try:
        sock = bind_socket(Config.HOST, Config.PORT)
    except OSError as e:
        logger.error(f"Server error: {e}")
        sys.exit(1)

    port = sock.getsockname()[1]
    logger.info(f"Server running at http://localhost:{port}")
    logger.info(f"Contact form endpoint: http://localhost:{port}/submit-contact")
    logger.info(f"Serving contact page from {app.state.static_dir}")
    logger.info(f"Server started at: {datetime.now().isoformat()}")

    server = uvicorn.Server(uvicorn.Config(app, log_level=Config.LOG_LEVEL.lower()))
    server.run(sockets=[sock])


if __name__ == "__main__":
    main()
