"""
Contact service test configuration and fixtures.
Shared pytest fixtures for all test modules. No network: the SMTP class is
replaced with a MagicMock and logs go to a per-test tmp directory.
"""
import json
import os
import tempfile
from unittest.mock import MagicMock

import pytest

# Must be in place before main is imported anywhere.
os.environ["VERIFY_SMTP_ON_STARTUP"] = "false"
os.environ.setdefault("LOG_DIR", tempfile.mkdtemp(prefix="contact-logs-"))

import main  # noqa: E402
import submission_log  # noqa: E402
import transport  # noqa: E402


# =============================================================================
# Environment Fixtures
# =============================================================================


@pytest.fixture(autouse=True)
def log_dir(tmp_path, monkeypatch):
    """Point the submission log at a fresh directory for every test."""
    directory = tmp_path / "logs"
    directory.mkdir()
    monkeypatch.setattr(submission_log, "LOG_DIR", str(directory))
    return directory


@pytest.fixture(autouse=True)
def smtp_settings(monkeypatch):
    """Deterministic relay configuration."""
    monkeypatch.setattr(transport, "SMTP_HOST", "smtp.test.local")
    monkeypatch.setattr(transport, "SMTP_PORT", 2525)
    monkeypatch.setattr(transport, "SMTP_USER", "shop@example.com")
    monkeypatch.setattr(transport, "SMTP_PASSWORD", "app-password")
    monkeypatch.setattr(transport, "SMTP_FROM", "shop@example.com")
    monkeypatch.setattr(transport, "SMTP_USE_TLS", True)
    monkeypatch.setattr(transport, "RECIPIENT_EMAIL", "inbox@example.com")
    monkeypatch.setattr(transport, "_verified", None)


@pytest.fixture
def smtp_server(monkeypatch):
    """Replace the SMTP class; yields the connected server mock."""
    smtp_class = MagicMock(name="TimeoutSMTP")
    server = smtp_class.return_value
    server.__enter__.return_value = server
    server.__exit__.return_value = False
    monkeypatch.setattr(transport, "TimeoutSMTP", smtp_class)
    server.smtp_class = smtp_class
    return server


# =============================================================================
# Data Fixtures
# =============================================================================


@pytest.fixture
def valid_submission():
    """The canonical valid submission."""
    return {
        "name": "Jo",
        "email": "jo@x.com",
        "phone": "",
        "service": "leak repair",
        "message": "my pipe is leaking badly",
    }


@pytest.fixture
def log_lines(log_dir):
    """Callable returning every JSON line across the daily files, by file name."""
    def read():
        lines = []
        for path in sorted(log_dir.glob("contact-*.log")):
            text = path.read_text(encoding="utf-8")
            lines.extend(json.loads(line) for line in text.splitlines() if line.strip())
        return lines
    return read


# =============================================================================
# API Fixtures
# =============================================================================


@pytest.fixture
def client():
    main.app.config["TESTING"] = True
    with main.app.test_client() as test_client:
        yield test_client
