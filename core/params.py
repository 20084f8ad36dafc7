from datetime import datetime, time

from django.utils import timezone
from django.utils.dateparse import parse_date, parse_datetime
from rest_framework.exceptions import ValidationError


def query_int(params, name):
    """Integer query parameter, or None when absent. Malformed values are a 400."""
    raw = params.get(name)
    if not raw:
        return None
    try:
        return int(raw)
    except ValueError:
        raise ValidationError({name: [f"Expected an integer, got '{raw}'."]})


def query_datetime(params, name):
    """Datetime query parameter; a bare date means midnight of that day."""
    raw = params.get(name)
    if not raw:
        return None
    try:
        dt = parse_datetime(raw)
        if dt is None:
            day = parse_date(raw)
            dt = datetime.combine(day, time.min) if day else None
    except ValueError:
        dt = None
    if dt is None:
        raise ValidationError({name: [f"Expected an ISO 8601 date or datetime, got '{raw}'."]})
    if timezone.is_naive(dt):
        dt = timezone.make_aware(dt)
    return dt
