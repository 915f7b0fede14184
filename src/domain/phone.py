"""Phone number normalization shared by contacts, profiles and likes."""

import re

_NON_DIGITS = re.compile(r"\D")

MIN_PHONE_DIGITS = 10
MAX_PHONE_DIGITS = 15
DEFAULT_COUNTRY_CODE = "1"


def normalize_phone(raw: str) -> str | None:
    """Normalize a raw phone number into ``+<digits>`` form.

    Punctuation and whitespace are stripped, bare 10-digit numbers get the
    default country code. Returns ``None`` when the result cannot be a
    dialable E.164 number.
    """
    digits = _NON_DIGITS.sub("", raw or "")
    if len(digits) == MIN_PHONE_DIGITS:
        digits = DEFAULT_COUNTRY_CODE + digits
    if not MIN_PHONE_DIGITS <= len(digits) <= MAX_PHONE_DIGITS:
        return None
    return f"+{digits}"
