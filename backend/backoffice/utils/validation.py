"""
Input validation helpers shared by services.
"""

import re
from typing import Iterable, List

from email_validator import EmailNotValidError, validate_email

MONTH_PATTERN = re.compile(r"^\d{4}-(0[1-9]|1[0-2])$")


def is_valid_email(value: str) -> bool:
    """
    Syntax check through email-validator, as pydantic's EmailStr does.
    Surrounding whitespace is ignored; callers store the stripped value.
    """
    if not value or not value.strip():
        return False
    try:
        validate_email(value.strip(), check_deliverability=False)
    except EmailNotValidError:
        return False
    return True


def find_invalid_emails(emails: Iterable[str]) -> List[str]:
    """Entries that are not valid email addresses, in input order."""
    return [email for email in emails if not is_valid_email(email)]


def is_valid_month(value: str) -> bool:
    """True for ``YYYY-MM`` with a month between 01 and 12."""
    return bool(MONTH_PATTERN.fullmatch(value or ""))
