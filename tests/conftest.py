"""
Shared fixtures: a file-backed SQLite engine per test and a temp directory
holding the contact page and its assets. The real application and repository
run against them; nothing is mocked unless a test says so.
"""

from __future__ import annotations

from pathlib import Path

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import text

from contactdesk.app import create_app
from contactdesk.core.database import create_db_engine
from contactdesk.services.schema import initialize_schema


@pytest.fixture()
def engine(tmp_path):
    engine = create_db_engine(f"sqlite:///{tmp_path / 'contacts.db'}")
    yield engine
    engine.dispose()


@pytest.fixture()
def schema_engine(engine):
    initialize_schema(engine)
    return engine


@pytest.fixture()
def static_dir(tmp_path) -> Path:
    root = tmp_path / "site"
    (root / "css").mkdir(parents=True)
    (root / "js").mkdir()
    (root / "images").mkdir()
    (root / "contact.html").write_text("<html><body>Contact us</body></html>")
    (root / "css" / "style.css").write_text("body { margin: 0; }")
    (root / "js" / "contact.js").write_text("console.log('ready');")
    (root / "images" / "logo.png").write_bytes(b"\x89PNG\r\n\x1a\n")
    (root / "images" / "photo.JPEG").write_bytes(b"\xff\xd8\xff")
    (root / "images" / "archive.bin").write_bytes(b"\x00\x01")
    (tmp_path / "secret.txt").write_text("do not serve")
    (root / "Backend").mkdir()
    (root / "Backend" / ".env").write_text("DATABASE_URL=postgresql://user:secret@db/prod")
    return root


@pytest.fixture()
def app(schema_engine, static_dir):
    return create_app(schema_engine, static_dir=static_dir)


@pytest.fixture()
def client(app):
    with TestClient(app) as c:
        yield c


@pytest.fixture()
def fetch_contacts():
    """Return every stored row as a dict, oldest first."""

    def _fetch(engine):
        with engine.connect() as conn:
            rows = conn.execute(
                text("SELECT id, name, email, phone, message, created_at FROM contacts ORDER BY id")
            ).mappings().all()
        return [dict(row) for row in rows]

    return _fetch
