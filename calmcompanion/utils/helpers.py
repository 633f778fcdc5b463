"""Helper utility functions"""
from ..common_imports import *


def export_filename(now: Optional[datetime] = None) -> str:
    """Download name for an export, e.g. therapy-data-2025-01-31T10-15-00.json"""
    stamp = (now or datetime.now()).isoformat(timespec="seconds")
    # ':' is not allowed in Windows file names
    return f"therapy-data-{stamp.replace(':', '-')}.json"


def format_ts(ts: Optional[int]) -> str:
    """Local date/time for an epoch-ms timestamp, '—' when unknown"""
    if not ts:
        return "—"
    return datetime.fromtimestamp(ts / 1000).strftime("%Y-%m-%d %H:%M:%S")


def journal_entry(text: str, now: Optional[datetime] = None) -> str:
    """Journal slot content: dated header followed by the free text"""
    stamp = (now or datetime.now()).strftime("%Y-%m-%d %H:%M:%S")
    return f"Journal — {stamp}:\n{text}"
