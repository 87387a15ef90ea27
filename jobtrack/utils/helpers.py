"""Helper utilities."""

import hashlib
import re
import secrets
import string
from datetime import date, datetime
from typing import Any, Optional


def generate_hash(text: str) -> str:
    """Generate SHA256 hash of text."""
    return hashlib.sha256(text.encode()).hexdigest()


def sanitize_company(company: Optional[str]) -> str:
    """Company name as used inside resume filenames."""
    return re.sub(r"[^a-zA-Z0-9]", "_", company or "")


def generate_temporary_password(length: int = 8) -> str:
    """Random lowercase alphanumeric password."""
    alphabet = string.ascii_lowercase + string.digits
    return "".join(secrets.choice(alphabet) for _ in range(length))


def isoformat(value: Any) -> Optional[str]:
    """ISO string for dates/datetimes, None passes through."""
    if value is None:
        return None
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    return str(value)


def percent(part: float, whole: float, digits: int = 1) -> str:
    """Percentage with a fixed number of decimals ("0.0" when whole is 0)."""
    if not whole:
        return f"{0:.{digits}f}"
    return f"{part / whole * 100:.{digits}f}"
