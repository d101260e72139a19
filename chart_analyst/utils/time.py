"""Time utilities (IST)."""

from datetime import datetime
from zoneinfo import ZoneInfo

IST = ZoneInfo("Asia/Kolkata")


def now_ist() -> datetime:
    """Current time as an IST-aware datetime."""
    return datetime.now(IST)


def now_ist_iso() -> str:
    """Current IST time as ISO string with offset, for response stamps."""
    return now_ist().isoformat()
