"""
Derived read views over the entity tables

The select constructs here are the single definition of each view: the
report functions execute them directly and ``install_views`` compiles the
same statements into ``CREATE VIEW`` DDL for SQL consumers.
"""

import logging

from sqlalchemy import and_, case, false, func, select, text

from ecomm import db
from ecomm.models.category import Category
from ecomm.models.customer import Customer
from ecomm.models.order import Order, OrderItem
from ecomm.models.product import Product

logger = logging.getLogger(__name__)

ORDER_SUMMARY_VIEW = 'order_summary_view'
PRODUCT_AVAILABILITY_VIEW = 'product_availability_view'

IN_STOCK = 'In Stock'
OUT_OF_STOCK = 'Out of Stock'


def order_summary_select(include_empty=False):
    """
    One row per active order with its customer and active line-item count.

    Orders are inner-joined to their items, so an order whose items are all
    soft-deleted (or that has none) does not appear. ``include_empty=True``
    outer-joins instead and reports such orders with ``total_items = 0``.
    """
    columns = (
        Order.id.label('order_id'),
        Order.order_date,
        Customer.full_name.label('customer_name'),
        Customer.email,
        Order.status,
        Order.total_amount,
        func.count(OrderItem.id).label('total_items'),
    )
    group_by = (
        Order.id, Order.order_date, Customer.full_name,
        Customer.email, Order.status, Order.total_amount,
    )

    stmt = (
        select(*columns)
        .select_from(Order)
        .join(Customer, Order.customer_id == Customer.id)
    )
    if include_empty:
        stmt = stmt.outerjoin(
            OrderItem,
            and_(Order.id == OrderItem.order_id, OrderItem.is_deleted == false())
        ).where(Order.is_deleted == false())
    else:
        stmt = stmt.join(OrderItem, Order.id == OrderItem.order_id).where(
            Order.is_deleted == false(), OrderItem.is_deleted == false()
        )

    return stmt.group_by(*group_by).order_by(Order.id)


def product_availability_select():
    """
    One row per active product in an active category.

    Products without a category, or whose category is soft-deleted, are
    excluded by the inner join.
    """
    availability = case(
        (Product.stock_quantity > 0, IN_STOCK),
        else_=OUT_OF_STOCK,
    ).label('availability')

    return (
        select(
            Product.id.label('product_id'),
            Product.name.label('product_name'),
            Category.name.label('category_name'),
            Product.price,
            Product.stock_quantity,
            availability,
        )
        .select_from(Product)
        .join(Category, Product.category_id == Category.id)
        .where(Product.is_deleted == false(), Category.is_deleted == false())
        .order_by(Product.id)
    )


VIEW_DEFINITIONS = {
    ORDER_SUMMARY_VIEW: order_summary_select,
    PRODUCT_AVAILABILITY_VIEW: product_availability_select,
}


def compile_view_sql(name, dialect):
    stmt = VIEW_DEFINITIONS[name]()
    # Views cannot hold bound parameters; ORDER BY is left to the reader
    stmt = stmt.order_by(None)
    compiled = stmt.compile(dialect=dialect, compile_kwargs={'literal_binds': True})
    return f'CREATE VIEW {name} AS {compiled}'


def install_views(connection):
    """(Re)create every derived view on the given connection"""
    drop_views(connection)
    for name in VIEW_DEFINITIONS:
        connection.exec_driver_sql(compile_view_sql(name, connection.dialect))
        logger.info(f'View created: {name}', extra={
            'event_type': 'view_created',
            'view': name
        })


def drop_views(connection):
    for name in VIEW_DEFINITIONS:
        connection.execute(text(f'DROP VIEW IF EXISTS {name}'))


def fetch_view(name):
    """Read every row of an installed view as a list of mappings"""
    if name not in VIEW_DEFINITIONS:
        raise ValueError(f'Unknown view: {name}')
    result = db.session.execute(text(f'SELECT * FROM {name}'))
    return [dict(row) for row in result.mappings()]
