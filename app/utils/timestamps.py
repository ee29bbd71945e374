from datetime import datetime, timezone

def utc_now() -> datetime:
    """Current UTC time at millisecond precision, the resolution BSON dates keep"""
    now = datetime.now(timezone.utc)
    return now.replace(microsecond=now.microsecond // 1000 * 1000)
