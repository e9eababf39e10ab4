"""
transport.py — Mail Transport Layer
====================================
This is the ONLY file that knows about SMTP. The pipeline hands over a
TransportMessage and gets a TransportResult back; nothing is raised upward.

Configuration (environment variables):
  SMTP_HOST                — relay hostname (default: smtp.gmail.com, empty = console fallback)
  SMTP_PORT                — relay port (default: 587)
  SMTP_USER                — username for SMTP auth (optional)
  SMTP_PASSWORD            — password / app password for SMTP auth (optional)
  SMTP_FROM                — From address (default: SMTP_USER)
  SMTP_USE_TLS             — use STARTTLS (default: true)
  RECIPIENT_EMAIL          — business inbox that receives submissions (default: SMTP_USER)
  SMTP_CONNECTION_TIMEOUT  — seconds allowed to open the TCP connection (default: 10)
  SMTP_GREETING_TIMEOUT    — seconds allowed for the server's 220 greeting (default: 5)
  SMTP_SOCKET_TIMEOUT      — seconds allowed per socket operation afterwards (default: 10)

One attempt per message. No retries, no queue.
"""

import os
import logging
import smtplib
from email.message import EmailMessage
from dataclasses import dataclass

log = logging.getLogger(__name__)

# ── SMTP Configuration ────────────────────────────────────────────────────────

SMTP_HOST       = os.environ.get('SMTP_HOST', 'smtp.gmail.com')
SMTP_PORT       = int(os.environ.get('SMTP_PORT', '587'))
SMTP_USER       = os.environ.get('SMTP_USER', '')
SMTP_PASSWORD   = os.environ.get('SMTP_PASSWORD', '')
SMTP_FROM       = os.environ.get('SMTP_FROM', '') or SMTP_USER
SMTP_USE_TLS    = os.environ.get('SMTP_USE_TLS', 'true').lower() == 'true'
RECIPIENT_EMAIL = os.environ.get('RECIPIENT_EMAIL', '') or SMTP_USER

CONNECTION_TIMEOUT = float(os.environ.get('SMTP_CONNECTION_TIMEOUT', '10'))
GREETING_TIMEOUT   = float(os.environ.get('SMTP_GREETING_TIMEOUT', '5'))
SOCKET_TIMEOUT     = float(os.environ.get('SMTP_SOCKET_TIMEOUT', '10'))

# None until verify() has run, then the outcome of the last check.
_verified: bool | None = None


@dataclass
class TransportMessage:
    """Normalized message envelope. Transport layer speaks only this."""
    to_address: str
    subject: str
    body_text: str
    body_html: str | None
    message_id: str
    reply_to: str | None = None


@dataclass
class TransportResult:
    success: bool
    error: str | None = None


class TimeoutSMTP(smtplib.SMTP):
    """
    smtplib.SMTP with separate caps for the three phases of a session.
    `timeout` bounds the TCP connect, the greeting gets GREETING_TIMEOUT,
    and open_session() drops to SOCKET_TIMEOUT once the greeting is in.
    """

    def _get_socket(self, host, port, timeout):
        sock = super()._get_socket(host, port, timeout)
        sock.settimeout(GREETING_TIMEOUT)
        return sock


def _sender() -> str:
    return SMTP_FROM or f"noreply@{SMTP_HOST or 'localhost'}"


def _build_message(msg: TransportMessage) -> EmailMessage:
    """Plain text first, HTML as the preferred alternative when present."""
    sender = _sender()
    email = EmailMessage()
    email["Subject"] = msg.subject
    email["From"] = sender
    email["To"] = msg.to_address
    email["Message-ID"] = f"<{msg.message_id}@{sender.rpartition('@')[2]}>"
    if msg.reply_to:
        email["Reply-To"] = msg.reply_to

    email.set_content(msg.body_text)
    if msg.body_html:
        email.add_alternative(msg.body_html, subtype="html")
    return email


def open_session() -> smtplib.SMTP:
    """Connect, greet, STARTTLS and authenticate. Caller closes."""
    server = TimeoutSMTP(SMTP_HOST, SMTP_PORT, timeout=CONNECTION_TIMEOUT)
    try:
        if server.sock is not None:
            server.sock.settimeout(SOCKET_TIMEOUT)
        if SMTP_USE_TLS:
            server.starttls()
        if SMTP_USER and SMTP_PASSWORD:
            server.login(SMTP_USER, SMTP_PASSWORD)
    except Exception:
        server.close()
        raise
    return server


def _smtp_send(msg: TransportMessage) -> TransportResult:
    """
    Real SMTP delivery via smtplib.
    Falls back to console log if SMTP_HOST is not configured.
    """
    if not SMTP_HOST:
        log.warning(f"[{msg.message_id}] SMTP_HOST not set — falling back to console output")
        _console_fallback(msg)
        return TransportResult(success=True)

    if not msg.to_address:
        return TransportResult(success=False, error="No recipient address configured")

    email = _build_message(msg)

    try:
        log.info(f"[{msg.message_id}] Connecting to SMTP {SMTP_HOST}:{SMTP_PORT}")
        with open_session() as server:
            server.sendmail(_sender(), [msg.to_address], email.as_string())

        log.info(f"[{msg.message_id}] Delivered: to={msg.to_address} subject='{msg.subject}'")
        return TransportResult(success=True)

    except smtplib.SMTPException as e:
        log.error(f"[{msg.message_id}] SMTP error: {e}")
        return TransportResult(success=False, error=f"SMTP error: {e}")
    except OSError as e:
        log.error(f"[{msg.message_id}] Connection failed to {SMTP_HOST}:{SMTP_PORT}: {e}")
        return TransportResult(success=False, error=f"Connection failed: {e}")


def _console_fallback(msg: TransportMessage) -> None:
    preview = msg.body_text if len(msg.body_text) <= 300 else msg.body_text[:300] + "..."
    log.info(
        f"[{msg.message_id}] No SMTP host, printing instead of sending.\n"
        f"  To: {msg.to_address or '(no recipient)'}  Reply-To: {msg.reply_to}\n"
        f"  Subject: {msg.subject}\n\n{preview}"
    )


def deliver(msg: TransportMessage) -> TransportResult:
    """Single attempt. Never raises; failures come back as TransportResult."""
    try:
        return _smtp_send(msg)
    except Exception as e:
        log.exception(f"[{msg.message_id}] Unexpected transport failure")
        return TransportResult(success=False, error=str(e))


def verify() -> bool:
    """Open and close one session so misconfiguration shows up at startup."""
    global _verified
    if not SMTP_HOST:
        log.info("SMTP verification skipped — console fallback mode")
        _verified = True
        return _verified
    try:
        with open_session() as server:
            server.noop()
    except (smtplib.SMTPException, OSError) as e:
        log.error(f"Email transport verification failed: {e}")
        _verified = False
    else:
        log.info("Email transport is ready")
        _verified = True
    return _verified


def email_ready() -> bool:
    """Configured, and not known to be broken."""
    if _verified is not None:
        return _verified
    return bool(SMTP_HOST and RECIPIENT_EMAIL)


def smtp_config_summary() -> dict:
    """Return current SMTP config for health endpoint."""
    return {
        "host":      SMTP_HOST or "(not set — console fallback)",
        "port":      SMTP_PORT,
        "from":      _sender(),
        "recipient": RECIPIENT_EMAIL or "(not set)",
        "auth":      bool(SMTP_USER),
        "tls":       SMTP_USE_TLS,
        "mode":      "smtp" if SMTP_HOST else "console",
    }
