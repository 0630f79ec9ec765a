"""
Data-access operations for the entity tables

create / update / soft_delete for every entity, hard_delete for orders only.
Each write commits as one unit; on any failure the session is rolled back
before the error propagates.
"""

import logging
from contextlib import contextmanager
from typing import Any, Dict, Optional

import newrelic.agent
from sqlalchemy.exc import IntegrityError

from ecomm import db
from ecomm.errors import ConstraintViolation, NotFound, translate_integrity_error
from ecomm.models import Category, Customer, Order, OrderItem, Product

logger = logging.getLogger(__name__)

PROTECTED_FIELDS = frozenset(['id', 'created_at', 'updated_at', 'is_deleted'])


class EntityRepository:
    """Write and lookup operations for one mapped entity"""

    def __init__(self, model, references: Optional[Dict[str, Any]] = None):
        """
        Args:
            model: Flask-SQLAlchemy model class
            references (Optional[Dict[str, Any]]): foreign-key column -> referenced model
        """
        self.model = model
        self.references = references or {}
        self.entity = model.__tablename__

    def get(self, identity):
        """Return the row, active or soft-deleted"""
        instance = db.session.get(self.model, identity)
        if instance is None:
            raise NotFound(self.entity, identity)
        return instance

    def list(self, include_deleted=False):
        query = self.model.query if include_deleted else self.model.active()
        return query.order_by(self.model.id).all()

    @contextmanager
    def _unit_of_work(self, operation):
        """Commit the changes made in the block, or roll all of them back"""
        try:
            yield
            db.session.commit()
        except IntegrityError as e:
            db.session.rollback()
            raise self._violation(translate_integrity_error(e, self.entity), operation)
        except ConstraintViolation as e:
            db.session.rollback()
            raise self._violation(e, operation)
        except Exception as e:
            db.session.rollback()
            logger.error(f'{self.entity} {operation} failed: {e}', extra={
                'event_type': 'write_failed',
                'entity': self.entity,
                'operation': operation,
                'exception_type': type(e).__name__
            })
            raise

    @newrelic.agent.function_trace()
    def create(self, **fields):
        unknown = set(fields) - set(self.model.__table__.columns.keys())
        if unknown:
            raise ValueError(f'Unknown {self.entity} columns: {sorted(unknown)}')

        with self._unit_of_work('create'):
            self._check_references(fields)
            instance = self.model(**fields)
            db.session.add(instance)

        logger.info(f'{self.entity} {instance.id} created', extra={
            'event_type': 'entity_created',
            'entity': self.entity,
            'entity_id': instance.id
        })
        return instance

    @newrelic.agent.function_trace()
    def update(self, identity, **fields):
        """Apply field changes and refresh updated_at"""
        columns = set(self.model.__table__.columns.keys())
        invalid = set(fields) - (columns - PROTECTED_FIELDS)
        if invalid:
            raise ValueError(f'Cannot update {self.entity} columns: {sorted(invalid)}')

        instance = self.get(identity)
        with self._unit_of_work('update'):
            self._check_references(fields)
            for name, value in fields.items():
                setattr(instance, name, value)
            instance.touch()

        logger.info(f'{self.entity} {identity} updated', extra={
            'event_type': 'entity_updated',
            'entity': self.entity,
            'entity_id': identity,
            'fields': sorted(fields)
        })
        return instance

    @newrelic.agent.function_trace()
    def soft_delete(self, identity):
        """Mark the row deleted; referencing rows are left untouched"""
        instance = self.get(identity)
        if instance.is_deleted:
            logger.debug(f'{self.entity} {identity} already soft-deleted')
            return instance

        with self._unit_of_work('soft_delete'):
            instance.is_deleted = True
            instance.touch()

        logger.info(f'{self.entity} {identity} soft-deleted', extra={
            'event_type': 'entity_soft_deleted',
            'entity': self.entity,
            'entity_id': identity
        })
        return instance

    def _check_references(self, fields):
        for column, target in self.references.items():
            if column not in fields:
                continue
            value = fields[column]
            if value is None:
                if self.model.__table__.columns[column].nullable:
                    continue
                raise ConstraintViolation(
                    f'{column} is required', constraint=f'{self.entity}.{column}', entity=self.entity
                )
            if db.session.get(target, value) is None:
                raise ConstraintViolation(
                    f'{column}={value} does not reference an existing {target.__tablename__} row',
                    constraint=f'{self.entity}_{column}_fkey', entity=self.entity
                )

    def _violation(self, error, operation):
        logger.warning(f'{self.entity} {operation} rejected: {error.message}', extra={
            'event_type': 'constraint_violation',
            'entity': self.entity,
            'operation': operation,
            'constraint': error.constraint
        })
        return error


class OrderRepository(EntityRepository):

    @newrelic.agent.function_trace()
    def hard_delete(self, identity):
        """Physically remove the order; its items go with it"""
        instance = self.get(identity)
        item_count = len(instance.items)

        with self._unit_of_work('hard_delete'):
            db.session.delete(instance)

        logger.info(f'orders {identity} deleted with {item_count} items', extra={
            'event_type': 'order_hard_deleted',
            'entity': self.entity,
            'entity_id': identity,
            'item_count': item_count
        })
        return item_count


categories = EntityRepository(Category)
products = EntityRepository(Product, references={'category_id': Category})
customers = EntityRepository(Customer)
orders = OrderRepository(Order, references={'customer_id': Customer})
order_items = EntityRepository(OrderItem, references={'order_id': Order, 'product_id': Product})

REPOSITORIES = {
    'categories': categories,
    'products': products,
    'customers': customers,
    'orders': orders,
    'order_items': order_items,
}


def repository_for(entity):
    try:
        return REPOSITORIES[entity]
    except KeyError:
        raise ValueError(f'Unknown entity: {entity}')
