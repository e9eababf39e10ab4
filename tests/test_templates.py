"""
Tests for the contact notification renderer.
"""
from datetime import datetime, timezone

import templates

SUBMITTED_AT = datetime(2026, 3, 1, 14, 30, 0, tzinfo=timezone.utc)


def test_subject_embeds_sender_name(valid_submission):
    subject, _, _ = templates.render_contact(valid_submission, SUBMITTED_AT)
    assert subject == "🔧 New Repair Service Inquiry from Jo"


def test_subject_is_a_single_line(valid_submission):
    valid_submission["name"] = "Jo\r\nBcc: victim@example.com"
    subject, _, _ = templates.render_contact(valid_submission, SUBMITTED_AT)
    assert "\n" not in subject and "\r" not in subject
    assert subject.endswith("Jo Bcc: victim@example.com")


def test_text_body_carries_every_field(valid_submission):
    valid_submission["phone"] = "+1 (555) 123-4567"
    _, text, _ = templates.render_contact(valid_submission, SUBMITTED_AT)
    assert "Name: Jo" in text
    assert "Email: jo@x.com" in text
    assert "Phone: +1 (555) 123-4567" in text
    assert "Service Needed: leak repair" in text
    assert "Message: my pipe is leaking badly" in text
    assert "Submitted: 2026-03-01 14:30:00 UTC" in text


def test_missing_phone_reads_not_provided(valid_submission):
    _, text, html = templates.render_contact(valid_submission, SUBMITTED_AT)
    assert "Phone: Not provided" in text
    assert "<strong>Phone:</strong> Not provided" in html


def test_html_body_escapes_visitor_input(valid_submission):
    valid_submission["name"] = "<b>Jo</b>"
    valid_submission["message"] = "<script>alert('x')</script> leaking"
    _, _, html = templates.render_contact(valid_submission, SUBMITTED_AT)
    assert "<script>" not in html
    assert "&lt;script&gt;" in html
    assert "&lt;b&gt;Jo&lt;/b&gt;" in html


def test_text_body_is_verbatim(valid_submission):
    valid_submission["message"] = "<script>alert('x')</script> leaking"
    _, text, _ = templates.render_contact(valid_submission, SUBMITTED_AT)
    assert "<script>alert('x')</script> leaking" in text


def test_message_line_breaks_render_as_br(valid_submission):
    valid_submission["message"] = "first line\nsecond line"
    _, _, html = templates.render_contact(valid_submission, SUBMITTED_AT)
    assert "first line<br>second line" in html
