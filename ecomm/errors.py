"""
Error taxonomy for the data-access layer

Every failure is deterministic and visible to the caller: a write either
commits as one unit or is rolled back and one of these is raised.
"""

import re
from typing import Any, Optional

from sqlalchemy.exc import IntegrityError


class DataModelError(Exception):
    """Base class for data-model failures"""


class ConstraintViolation(DataModelError):
    """A check, unique, not-null or foreign-key rule rejected a write"""

    def __init__(self, message: str, constraint: Optional[str] = None,
                 entity: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.constraint = constraint
        self.entity = entity

    def to_dict(self):
        return {
            'error_type': 'constraint_violation',
            'message': self.message,
            'constraint': self.constraint,
            'entity': self.entity,
        }


class NotFound(DataModelError):
    """An operation targeted an identity that does not exist"""

    def __init__(self, entity: str, identity: Any):
        super().__init__(f'{entity} {identity} not found')
        self.entity = entity
        self.identity = identity

    def to_dict(self):
        return {
            'error_type': 'not_found',
            'message': str(self),
            'entity': self.entity,
            'identity': self.identity,
        }


# SQLite: "UNIQUE constraint failed: categories.name", "CHECK constraint failed: ck_products_price_non_negative"
_SQLITE_PATTERN = re.compile(r'(UNIQUE|CHECK|NOT NULL|FOREIGN KEY) constraint failed(?::\s*(\S+))?')
# PostgreSQL: 'violates check constraint "ck_products_price_non_negative"'
_POSTGRES_PATTERN = re.compile(r'violates (?:[\w-]+ )*constraint "([^"]+)"')


def translate_integrity_error(error: IntegrityError, entity: Optional[str] = None) -> ConstraintViolation:
    """
    Map a storage-engine IntegrityError to ConstraintViolation

    Args:
        error (IntegrityError): error raised on flush/commit
        entity (Optional[str]): table the write targeted

    Returns:
        ConstraintViolation: carrying the constraint name when the driver reports it
    """
    detail = str(error.orig) if error.orig is not None else str(error)
    constraint = None

    match = _POSTGRES_PATTERN.search(detail)
    if match:
        constraint = match.group(1)
    else:
        match = _SQLITE_PATTERN.search(detail)
        if match:
            constraint = match.group(2) or match.group(1).lower().replace(' ', '_')

    return ConstraintViolation(detail, constraint=constraint, entity=entity)
