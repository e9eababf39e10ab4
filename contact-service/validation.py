"""
validation.py — Contact Form Field Rules
=========================================
Pure functions. The same rules run in the browser (contact-frontend/script.js)
for instant feedback; this copy is the one that counts.
"""

import re

EMAIL_RE = re.compile(r'[^\s@]+@[^\s@]+\.[^\s@]+')
PHONE_RE = re.compile(r'[0-9\s\-+().]+')

MIN_NAME_LENGTH    = 2
MIN_SERVICE_LENGTH = 2
MIN_MESSAGE_LENGTH = 10


def _text(value) -> str:
    """Non-string values are treated as missing."""
    return value if isinstance(value, str) else ''


def validate(data: dict) -> list[str]:
    """Returns list of validation errors, at most one per field. Empty list = valid."""
    errors = []

    if len(_text(data.get('name')).strip()) < MIN_NAME_LENGTH:
        errors.append('Name must be at least 2 characters long')

    if not EMAIL_RE.fullmatch(_text(data.get('email'))):
        errors.append('Please provide a valid email address')

    if len(_text(data.get('service')).strip()) < MIN_SERVICE_LENGTH:
        errors.append('Please specify the service you need')

    if len(_text(data.get('message')).strip()) < MIN_MESSAGE_LENGTH:
        errors.append('Message must be at least 10 characters long')

    phone = data.get('phone')
    if phone and not (isinstance(phone, str) and PHONE_RE.fullmatch(phone)):
        errors.append('Please provide a valid phone number')

    return errors
