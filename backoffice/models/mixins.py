from datetime import datetime
from decimal import Decimal

from backoffice.extensions import db


class TimestampMixin:
    created_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow, onupdate=datetime.utcnow)


def format_money(value):
    """Two-decimal string for a Numeric column, None when NULL."""
    if value is None:
        return None
    return f"{Decimal(value):.2f}"


def format_datetime(value):
    return value.isoformat() if value else None
