import base64
import logging
import sqlite3
from logging.handlers import RotatingFileHandler

import pytest

from certificate_registry_api.app.core.config import DEFAULT_SECRET_KEY, settings
from certificate_registry_api.app.core.db import get_connection, init_db
from certificate_registry_api.app.core.exceptions import StorageError
from certificate_registry_api.app.core.qr import build_verification_url, generate_qr_data_uri
from certificate_registry_api.app.core.logging_config import resolve_level, setup_logging
from certificate_registry_api.app.core.storage import remove_upload, sanitize_filename, save_upload
from certificate_registry_api.app.main import create_app


def test_init_db_is_idempotent():
    init_db()
    init_db()
    conn = get_connection()
    try:
        versions = [row["version"] for row in conn.execute("SELECT version FROM migrations")]
        tables = {
            row["name"]
            for row in conn.execute("SELECT name FROM sqlite_master WHERE type = 'table'")
        }
    finally:
        conn.close()
    assert versions == [1]
    assert {"students", "users"} <= tables


def test_email_is_unique_in_store():
    conn = get_connection()
    try:
        conn.execute("INSERT INTO users (name, email, password) VALUES ('a', 'x@example.com', 'h')")
        with pytest.raises(sqlite3.IntegrityError):
            conn.execute("INSERT INTO users (name, email, password) VALUES ('b', 'x@example.com', 'h')")
    finally:
        conn.close()


def test_verification_url(monkeypatch):
    monkeypatch.setattr(settings, "verification_base_url", "https://verify.example.org/")
    assert build_verification_url("abc123") == "https://verify.example.org/student/abc123"


def test_qr_data_uri_is_png():
    uri = generate_qr_data_uri("https://verify.example.org/student/abc123")
    header, _, body = uri.partition(",")
    assert header == "data:image/png;base64"
    assert base64.b64decode(body).startswith(b"\x89PNG\r\n\x1a\n")


@pytest.mark.parametrize(
    "filename, expected",
    [
        ("photo.jpg", "photo.jpg"),
        ("my photo.png", "my_photo.png"),
        ("../../etc/passwd", "passwd"),
        ("C:\\Users\\me\\scan.pdf", "scan.pdf"),
        ("...", "upload"),
    ],
)
def test_sanitize_filename(filename, expected):
    assert sanitize_filename(filename) == expected


def test_save_upload(tmp_path, monkeypatch):
    monkeypatch.setattr(settings, "upload_dir", str(tmp_path / "files"))

    reference = save_upload("scan.png", b"data")

    assert reference.startswith("uploads/")
    stored = tmp_path / "files" / reference.split("/", 1)[1]
    assert stored.read_bytes() == b"data"


def test_save_upload_failure(tmp_path, monkeypatch):
    blocker = tmp_path / "not-a-dir"
    blocker.write_text("x")
    monkeypatch.setattr(settings, "upload_dir", str(blocker))

    with pytest.raises(StorageError):
        save_upload("scan.png", b"data")


def test_remove_upload(tmp_path, monkeypatch):
    monkeypatch.setattr(settings, "upload_dir", str(tmp_path))
    reference = save_upload("scan.png", b"data")

    remove_upload(reference)
    assert list(tmp_path.iterdir()) == []

    # Already gone: nothing to do.
    remove_upload(reference)


def test_default_secret_refused_outside_debug(monkeypatch):
    monkeypatch.setattr(settings, "secret_key", DEFAULT_SECRET_KEY)
    monkeypatch.setattr(settings, "debug", False)

    with pytest.raises(RuntimeError):
        create_app()


def test_default_secret_tolerated_in_debug(monkeypatch, caplog):
    monkeypatch.setattr(settings, "secret_key", DEFAULT_SECRET_KEY)
    monkeypatch.setattr(settings, "debug", True)

    with caplog.at_level(logging.WARNING):
        assert create_app() is not None
    assert "JWT_SECRET is not set" in caplog.text


@pytest.mark.parametrize(
    "name, expected",
    [("debug", logging.DEBUG), (" Warning ", logging.WARNING), ("nonsense", logging.INFO)],
)
def test_resolve_level(name, expected):
    assert resolve_level(name) == expected


def test_setup_logging_adds_rotating_file_once(tmp_path):
    root = logging.getLogger()
    previous_level = root.level
    ours = [h for h in root.handlers if getattr(h, "_certificate_registry_handler", False)]
    for handler in ours:
        root.removeHandler(handler)
    logfile = tmp_path / "logs" / "registry.log"
    try:
        setup_logging("debug", str(logfile))
        setup_logging("debug", str(logfile))

        added = [h for h in root.handlers if getattr(h, "_certificate_registry_handler", False)]
        assert len(added) == 2
        assert sum(isinstance(h, RotatingFileHandler) for h in added) == 1
        assert root.level == logging.DEBUG
        assert logging.getLogger("multipart").level == logging.INFO

        logging.getLogger("certificate_registry_api.tests").info("issued certificate")
        for handler in added:
            handler.flush()
        assert "[INFO] certificate_registry_api.tests: issued certificate" in logfile.read_text()
    finally:
        for handler in [h for h in root.handlers if getattr(h, "_certificate_registry_handler", False)]:
            root.removeHandler(handler)
            handler.close()
        for handler in ours:
            root.addHandler(handler)
        root.setLevel(previous_level)
