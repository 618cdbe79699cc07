from datetime import UTC, datetime


def now() -> datetime:
    return datetime.now(UTC)


def normalize_email(email: str) -> str:
    """Lowercase and strip an email address for lookups and storage."""
    return email.strip().lower()


def mask_key(key: str, visible: int = 6) -> str:
    """Shorten an entry key for log output."""
    if len(key) <= visible:
        return "***"
    return f"{key[:visible]}..."
