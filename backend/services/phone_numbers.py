# backend/services/phone_numbers.py
import re

# checked in order, first match wins
KNOWN_COUNTRY_CODES = ("1", "44", "234", "27", "254", "255", "256", "91", "86", "61", "33", "49")

_PHONE_RE = re.compile(r"^[+]?[(]?[0-9]{1,4}[)]?[-\s.]?[0-9]{1,4}[-\s.]?[0-9]{1,9}$")
_EMAIL_RE = re.compile(r"^[A-Z0-9._%+-]+@[A-Z0-9.-]+\.[A-Z]{2,}$", re.IGNORECASE)


def is_email(value: str) -> bool:
    return bool(_EMAIL_RE.match(value))


def is_valid_phone_number(phone_number: str) -> bool:
    """International formats with or without country code, at least 7 digits."""
    digits = re.sub(r"\D", "", phone_number)
    return bool(_PHONE_RE.match(phone_number)) and len(digits) >= 7


def format_phone_number(phone_number: str) -> str:
    """
    Normalizes a phone number to international digits without the leading "+",
    which is how numbers are stored on user records.

    Numbers without a "+" get one when they start with a known country code;
    local Nigerian numbers (leading 0) become +234.
    """
    cleaned = re.sub(r"[^\d+]", "", phone_number)

    if not cleaned.startswith("+"):
        for code in KNOWN_COUNTRY_CODES:
            if cleaned.startswith(code):
                cleaned = "+" + cleaned
                break
        else:
            if cleaned.startswith("0"):
                cleaned = "+234" + cleaned[1:]
            else:
                cleaned = "+" + cleaned

    return cleaned.lstrip("+")
