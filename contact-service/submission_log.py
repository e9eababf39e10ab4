"""
submission_log.py — Append-only Submission Log
===============================================
One JSON object per line, one file per UTC calendar day:

    <LOG_DIR>/contact-YYYY-MM-DD.log

Every contact attempt lands here, whatever its outcome. Lines are never
rewritten. There is no rotation and no size cap; concurrent writers rely on
O_APPEND.

Configuration (environment variables):
  LOG_DIR — directory for the daily files (default: logs/ next to this module)
"""

import os
import json
import logging
from datetime import datetime, timezone

log = logging.getLogger(__name__)

LOG_DIR = os.environ.get('LOG_DIR', os.path.join(os.path.dirname(os.path.abspath(__file__)), 'logs'))

STATUSES = ("success", "validation_error", "error")

MESSAGE_PREVIEW_CHARS = 100


def ensure_log_dir() -> str:
    """Called once at startup."""
    if not os.path.isdir(LOG_DIR):
        os.makedirs(LOG_DIR, exist_ok=True)
        log.info(f"Created log directory {LOG_DIR}")
    return LOG_DIR


def log_path(day: datetime | None = None) -> str:
    day = day or datetime.now(timezone.utc)
    return os.path.join(LOG_DIR, f"contact-{day.astimezone(timezone.utc):%Y-%m-%d}.log")


def _preview(message):
    if not isinstance(message, str):
        return message
    if len(message) > MESSAGE_PREVIEW_CHARS:
        return message[:MESSAGE_PREVIEW_CHARS] + '...'
    return message


def utc_timestamp(now: datetime | None = None) -> str:
    now = now or datetime.now(timezone.utc)
    return now.astimezone(timezone.utc).isoformat(timespec='milliseconds').replace('+00:00', 'Z')


def build_entry(data: dict, status: str, error: str | None, now: datetime) -> dict:
    return {
        "timestamp": utc_timestamp(now),
        "status": status,
        "data": {
            "name":    data.get('name'),
            "email":   data.get('email'),
            "phone":   data.get('phone'),
            "service": data.get('service'),
            "message": _preview(data.get('message')),
        },
        "error": error,
    }


def record(data: dict, status: str, error: str | None = None, now: datetime | None = None) -> dict:
    """Append one entry for a contact attempt and return it."""
    if status not in STATUSES:
        raise ValueError(f"Unknown submission status: {status}")
    now = now or datetime.now(timezone.utc)
    entry = build_entry(data, status, error, now)
    with open(log_path(now), 'a', encoding='utf-8') as fh:
        fh.write(json.dumps(entry, ensure_ascii=False) + '\n')
    return entry


def recent(limit: int = 10, now: datetime | None = None) -> list[dict] | None:
    """
    Last `limit` entries from today's file, oldest first.
    Returns None when there is no file for today. Unparseable lines are skipped.
    """
    path = log_path(now)
    if not os.path.exists(path):
        return None

    entries = []
    with open(path, encoding='utf-8') as fh:
        for lineno, line in enumerate(fh, start=1):
            if not line.strip():
                continue
            try:
                entries.append(json.loads(line))
            except json.JSONDecodeError as e:
                log.warning(f"Skipping unreadable line {lineno} in {path}: {e}")
    return entries[-limit:]
