import re
from datetime import datetime
from typing import Any, Optional

# 2026/10/02, 2026.10.2, 2026年10月2日, optionally followed by a time
_LOOSE_DATE = re.compile(r"^(\d{4})\s*[/.年]\s*(\d{1,2})\s*[/.月]\s*(\d{1,2})\s*日?\s*(.*)$")


def local_now() -> datetime:
    """Server-side 'now' in host local time (naive, canonical)."""
    return datetime.now()


def to_local_naive(dt: Optional[datetime]) -> Optional[datetime]:
    """
    Normalize a datetime to host-local naive time.

    - None -> None
    - naive values are taken as already local
    - aware values are converted to local time and tzinfo is stripped
    """
    if dt is None:
        return None
    if dt.tzinfo is None:
        return dt
    return dt.astimezone().replace(tzinfo=None)


def same_month(dt: datetime, reference: datetime) -> bool:
    return dt.month == reference.month and dt.year == reference.year


def clean_date_input(v: Any) -> Any:
    """
    Pre-parse hook for user and OCR supplied dates.

    - blank strings mean "not given" -> None
    - slash, dot and 年月日 dates are rewritten as ISO ("2026/10/02" -> "2026-10-02")
    - anything else is passed through for normal datetime parsing
    """
    if not isinstance(v, str):
        return v
    text = v.strip()
    if not text:
        return None
    m = _LOOSE_DATE.match(text)
    if m is None:
        return text
    year, month, day, rest = m.groups()
    iso = f"{year}-{int(month):02d}-{int(day):02d}"
    return f"{iso}T{rest}" if rest else iso
