from datetime import datetime, timezone

UTC = timezone.utc


def to_utc(dt: datetime | None) -> datetime | None:
    """Convert any datetime to UTC timezone-aware datetime."""
    if dt is None:
        return None

    if dt.tzinfo is None:
        # Naive datetimes coming from tag payloads are already UTC
        return dt.replace(tzinfo=UTC)
    return dt.astimezone(UTC)


def utc_now() -> datetime:
    return datetime.now(UTC)


def iso_timestamp(dt: datetime | None = None) -> str:
    """ISO-8601 UTC timestamp with a trailing Z, as the dashboard expects."""
    moment = to_utc(dt) or utc_now()
    return moment.isoformat(timespec="milliseconds").replace("+00:00", "Z")
