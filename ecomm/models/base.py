from datetime import datetime, timezone
from decimal import Decimal, InvalidOperation
from enum import Enum

from sqlalchemy import false

from ecomm import db
from ecomm.errors import ConstraintViolation


def utcnow():
    """Naive UTC timestamp, matching TIMESTAMP WITHOUT TIME ZONE columns"""
    return datetime.now(timezone.utc).replace(tzinfo=None)


class RecordState(Enum):
    """Soft-delete state of a row"""
    ACTIVE = "active"
    DELETED = "deleted"


class AuditMixin:
    """Identity, audit timestamps and the soft-delete flag shared by every table"""

    id = db.Column(db.Integer, primary_key=True)
    created_at = db.Column(db.DateTime, default=utcnow)
    updated_at = db.Column(db.DateTime, default=utcnow, onupdate=utcnow)
    is_deleted = db.Column(db.Boolean, default=False, nullable=False)

    def __init__(self, **kwargs):
        now = utcnow()
        kwargs.setdefault('created_at', now)
        kwargs.setdefault('updated_at', now)
        kwargs.setdefault('is_deleted', False)
        super().__init__(**kwargs)

    @property
    def record_state(self):
        return RecordState.DELETED if self.is_deleted else RecordState.ACTIVE

    @classmethod
    def active(cls):
        """Query restricted to rows that are not soft-deleted"""
        return cls.query.filter(cls.is_deleted == false())

    def touch(self):
        self.updated_at = utcnow()


def non_negative_decimal(entity, field, value):
    """Validator body for NUMERIC columns that carry a ``>= 0`` check"""
    if value is None:
        return None
    try:
        amount = Decimal(str(value))
        if not amount.is_finite():
            raise InvalidOperation(value)
    except (InvalidOperation, ValueError):
        raise ConstraintViolation(
            f'{field} must be a decimal number, got {value!r}',
            constraint=f'ck_{entity}_{field}_non_negative', entity=entity
        )
    if amount < 0:
        raise ConstraintViolation(
            f'{field} must not be negative, got {value}',
            constraint=f'ck_{entity}_{field}_non_negative', entity=entity
        )
    return amount


def bounded_integer(entity, field, value, minimum, rule):
    """Validator body for INT columns that carry a lower-bound check"""
    if value is None:
        return None
    if isinstance(value, bool) or not isinstance(value, int):
        raise ConstraintViolation(
            f'{field} must be an integer, got {value!r}',
            constraint=f'ck_{entity}_{field}_{rule}', entity=entity
        )
    if value < minimum:
        raise ConstraintViolation(
            f'{field} must be at least {minimum}, got {value}',
            constraint=f'ck_{entity}_{field}_{rule}', entity=entity
        )
    return value
