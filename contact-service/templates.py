"""
templates.py — Contact Notification Renderer
=============================================
Turns a validated submission into the email the business inbox receives.

render_contact() returns (subject, body_text, body_html).
Plain text is always provided for non-HTML clients. Every visitor-supplied
value is HTML-escaped before it goes anywhere near body_html, and the name is
folded onto one line before it goes into the Subject header.
"""

import os
from datetime import datetime
from html import escape

BUSINESS_NAME = os.environ.get('BUSINESS_NAME', 'Kaizen Repair')

NOT_PROVIDED = 'Not provided'


def _one_line(value: str) -> str:
    return " ".join(value.split())


def _field(submission: dict, name: str) -> str:
    value = submission.get(name)
    return value if isinstance(value, str) else ''


def subject_for(name: str) -> str:
    return f"🔧 New Repair Service Inquiry from {_one_line(name)}"


# ── HTML base template ────────────────────────────────────────────────────────

def _html_wrap(title: str, body_inner: str) -> str:
    return f"""<!DOCTYPE html>
<html>
<head>
  <meta charset="utf-8">
  <meta name="viewport" content="width=device-width, initial-scale=1">
  <title>{escape(title)}</title>
</head>
<body style="margin:0;padding:0;background:#f4f6f8;">
  <div style="font-family: Arial, sans-serif; max-width: 600px; margin: 0 auto;">
    <h2 style="color: #333; border-bottom: 2px solid #007bff; padding-bottom: 10px;">
      New Contact Form Submission
    </h2>
    {body_inner}
    <div style="color:#888;font-size:11px;text-align:center;margin:16px 0;">
      Sent by the {escape(BUSINESS_NAME)} website contact form.
    </div>
  </div>
</body>
</html>"""


# ── Renderer ──────────────────────────────────────────────────────────────────

def render_contact(submission: dict, submitted_at: datetime) -> tuple[str, str, str]:
    """
    Returns (subject, body_text, body_html).
    Validate first — fields are embedded as submitted, only escaped for HTML.
    """
    name    = _field(submission, 'name')
    email   = _field(submission, 'email')
    phone   = _field(submission, 'phone') or NOT_PROVIDED
    service = _field(submission, 'service')
    message = _field(submission, 'message')
    when    = submitted_at.strftime('%Y-%m-%d %H:%M:%S %Z').strip()

    subject = subject_for(name)

    text = (
        f"New Contact Form Submission\n\n"
        f"Name: {name}\n"
        f"Email: {email}\n"
        f"Phone: {phone}\n"
        f"Service Needed: {service}\n"
        f"Message: {message}\n\n"
        f"Submitted: {when}\n"
    )

    message_html = escape(message).replace('\r\n', '\n').replace('\n', '<br>')
    html = _html_wrap(subject, f"""
    <div style="background: #f8f9fa; padding: 20px; border-radius: 5px; margin: 20px 0;">
      <p><strong>📧 Customer Details:</strong></p>
      <ul style="list-style: none; padding: 0;">
        <li><strong>Name:</strong> {escape(name)}</li>
        <li><strong>Email:</strong> {escape(email)}</li>
        <li><strong>Phone:</strong> {escape(phone)}</li>
        <li><strong>Service Needed:</strong> {escape(service)}</li>
      </ul>
    </div>
    <div style="background: #fff; padding: 20px; border-left: 4px solid #007bff; margin: 20px 0;">
      <p><strong>💬 Message:</strong></p>
      <p style="line-height: 1.6;">{message_html}</p>
    </div>
    <div style="background: #e9ecef; padding: 15px; border-radius: 5px; margin-top: 20px;">
      <p style="margin: 0; font-size: 12px; color: #666;">
        <strong>Submission Time:</strong> {escape(when)}<br>
        <strong>Reply promptly to maintain customer satisfaction!</strong>
      </p>
    </div>
""")
    return subject, text, html
