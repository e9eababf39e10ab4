"""
pipeline.py — Contact Submission Pipeline
==========================================
Executes the processing pipeline for every contact form submission.
Linear: one attempt, no retries, no queue. Every outcome is logged.

Steps:
1. Validate fields                   → validation_error
2. Render notification email
3. Hand off to transport layer       → error
4. Record success
"""

import logging
import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone

import submission_log
import templates
import transport
import validation

log = logging.getLogger(__name__)


@dataclass
class ContactResult:
    status: str                      # "success" | "validation_error" | "error"
    message_id: str | None
    errors: list[str] = field(default_factory=list)
    error_message: str | None = None


def _record(message_id: str, data: dict, status: str, error: str | None = None) -> None:
    """The outcome stands even when the log cannot be written."""
    try:
        submission_log.record(data, status, error)
    except OSError:
        log.exception(f"[{message_id}] Could not append {status} entry to submission log")


def _reject(message_id: str, data: dict, errors: list[str]) -> ContactResult:
    joined = ", ".join(errors)
    log.warning(f"[{message_id}] Submission rejected: {joined}")
    _record(message_id, data, "validation_error", joined)
    return ContactResult(
        status="validation_error",
        message_id=None,
        errors=errors,
        error_message=joined,
    )


def process(data: dict) -> ContactResult:
    message_id = str(uuid.uuid4())
    log.info(f"[{message_id}] Processing contact submission")

    # ── Step 1: Validate fields ───────────────────────────────────────────────
    errors = validation.validate(data)
    if errors:
        return _reject(message_id, data, errors)

    # ── Step 2: Render ────────────────────────────────────────────────────────
    subject, body, body_html = templates.render_contact(data, datetime.now(timezone.utc))

    # ── Step 3: Hand off to transport ─────────────────────────────────────────
    transport_result = transport.deliver(transport.TransportMessage(
        to_address=transport.RECIPIENT_EMAIL,
        subject=subject,
        body_text=body,
        body_html=body_html,
        message_id=message_id,
        reply_to=data['email'],
    ))

    if not transport_result.success:
        log.error(f"[{message_id}] Transport failed: {transport_result.error}")
        _record(message_id, data, "error", transport_result.error)
        return ContactResult(
            status="error",
            message_id=message_id,
            error_message=transport_result.error,
        )

    # ── Step 4: Record ────────────────────────────────────────────────────────
    _record(message_id, data, "success")
    log.info(f"[{message_id}] Email sent successfully for service '{data['service']}'")
    return ContactResult(status="success", message_id=message_id)
