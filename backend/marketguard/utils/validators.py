"""Field level validators shared by the schemas"""
import re
from typing import Optional

# Indian mobile numbers: ten digits starting with 6, 7, 8 or 9
MOBILE_RE = re.compile(r"[6-9][0-9]{9}")
PHONE_SEPARATORS_RE = re.compile(r"[\s-]")


def normalize_phone_number(phone: str) -> Optional[str]:
    """Return the ten digit mobile number, or None if `phone` is not one."""
    if not phone:
        return None

    cleaned = PHONE_SEPARATORS_RE.sub("", phone)

    # Country code and trunk prefix
    if cleaned.startswith("+91") and len(cleaned) == 13:
        cleaned = cleaned[3:]
    elif cleaned.startswith("91") and len(cleaned) == 12:
        cleaned = cleaned[2:]
    elif cleaned.startswith("0") and len(cleaned) == 11:
        cleaned = cleaned[1:]

    return cleaned if MOBILE_RE.fullmatch(cleaned) else None


def validate_phone_number(phone: str) -> bool:
    return normalize_phone_number(phone) is not None
