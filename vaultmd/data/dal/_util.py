from datetime import datetime, timezone


def now_iso() -> str:
    """Current UTC time as stored in every timestamp column."""
    return datetime.now(timezone.utc).isoformat()
