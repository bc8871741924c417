from __future__ import annotations

import unicodedata
from datetime import date, datetime
from decimal import Decimal, InvalidOperation

ZERO = Decimal('0')


def normalize_sort_text(value: object) -> str:
    if value is None:
        return ''
    text = unicodedata.normalize('NFKD', str(value).strip())
    return ''.join(char for char in text if not unicodedata.combining(char)).casefold()


def to_decimal(value: object) -> Decimal:
    if value is None or isinstance(value, bool):
        return ZERO
    if isinstance(value, Decimal):
        return value if value.is_finite() else ZERO
    try:
        parsed = Decimal(str(value).strip())
    except (InvalidOperation, ValueError):
        return ZERO
    if not parsed.is_finite():
        return ZERO
    return parsed


def parse_due_date(value: object) -> date | None:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not value:
        return None
    try:
        return date.fromisoformat(str(value).strip()[:10])
    except ValueError:
        return None


def due_date_sort_key(value: object) -> tuple[int, date]:
    parsed = parse_due_date(value)
    if parsed is None:
        # Undated tasks go after every dated one.
        return (1, date.max)
    return (0, parsed)
