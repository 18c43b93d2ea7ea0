from datetime import UTC, date, datetime, timedelta


def utcnow_naive():
    """Return current UTC timestamp as naive datetime for DB timestamp columns."""
    return datetime.now(UTC).replace(tzinfo=None)


def parse_activity_date(value):
    """Parse the calendar day from an activity date string.

    Activity dates are stored as entered; the first ten characters must be a
    ``YYYY-MM-DD`` day, anything after (a time part) is ignored.
    Returns ``None`` when the text is not a valid day.
    """
    text = str(value or '').strip()
    if len(text) < 10:
        return None
    try:
        return date.fromisoformat(text[:10])
    except ValueError:
        return None


def date_key(value):
    """Comparable ``YYYY-MM-DD`` key for an activity date string."""
    return str(value or '').strip()[:10]


def start_of_week(day):
    """Monday of the week containing ``day``."""
    return day - timedelta(days=day.weekday())


def format_minutes(total_minutes):
    try:
        total = int(total_minutes)
    except (TypeError, ValueError, OverflowError):
        return '0h 0m'
    if total <= 0:
        return '0h 0m'
    hours, minutes = divmod(total, 60)
    return f'{hours}h {minutes}m'
