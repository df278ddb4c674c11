from datetime import datetime, UTC


def utcnow() -> datetime:
    """Timezone-aware current time used for created/updated stamps."""
    return datetime.now(UTC)
