from __future__ import annotations

import re
from datetime import time
from typing import Optional

from ..core.constants import NOTES_MAX_LENGTH
from ..core.exceptions import ValidationError

# Zero-padded HH:MM, 00:00 - 23:59
TIME_REGEX = re.compile(r"^([01][0-9]|2[0-3]):([0-5][0-9])$")
# CSV of 0-6 (0 = Sunday)
WORK_DAYS_REGEX = re.compile(r"^[0-6](,[0-6])*$")


def parse_work_days(value: Optional[str]) -> Optional[frozenset[int]]:
    """Parse a work-days CSV such as ``"1,2,3,4,5"``.

    Returns None for blank or malformed values so callers fall back to the team default.
    """

    if value is None:
        return None
    text = str(value).replace(" ", "")
    if not WORK_DAYS_REGEX.match(text):
        return None
    return frozenset(int(part) for part in text.split(","))


def parse_hhmm(value) -> Optional[time]:
    if value is None:
        return None
    if isinstance(value, time):
        return value.replace(second=0, microsecond=0)
    match = TIME_REGEX.match(str(value).strip())
    if not match:
        return None
    return time(hour=int(match.group(1)), minute=int(match.group(2)))


def clean_notes(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    value = value.strip()
    if not value:
        return None
    if len(value) > NOTES_MAX_LENGTH:
        raise ValidationError(f"Notes must be at most {NOTES_MAX_LENGTH} characters")
    return value
