"""
Read-side projections: order summary and product availability

Every call recomputes from the base tables; nothing is cached.
"""

import logging
from dataclasses import asdict, dataclass
from datetime import datetime
from decimal import Decimal
from typing import Any, Dict, List, Optional

from ecomm import db
from ecomm.models.order import Order
from ecomm.models.views import order_summary_select, product_availability_select

logger = logging.getLogger(__name__)


@dataclass
class OrderSummaryRow:
    """A row of the order summary view"""
    order_id: int
    order_date: Optional[datetime]
    customer_name: str
    email: str
    status: Optional[str]
    total_amount: Optional[Decimal]
    total_items: int

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class ProductAvailabilityRow:
    """A row of the product availability view"""
    product_id: int
    product_name: str
    category_name: str
    price: Optional[Decimal]
    stock_quantity: Optional[int]
    availability: str

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def order_summary(include_empty: bool = False) -> List[OrderSummaryRow]:
    """
    Summarize active orders

    Args:
        include_empty (bool): also report active orders that have no active items

    Returns:
        List[OrderSummaryRow]: one row per order, ordered by order id
    """
    result = db.session.execute(order_summary_select(include_empty=include_empty))
    rows = [OrderSummaryRow(**row) for row in result.mappings()]

    logger.debug(f'Order summary computed: {len(rows)} rows', extra={
        'event_type': 'view_computed',
        'view': 'order_summary',
        'row_count': len(rows),
        'include_empty': include_empty
    })
    return rows


def order_summary_for(order_id: int, include_empty: bool = False) -> Optional[OrderSummaryRow]:
    """Summary row for one order, or None when the order is not visible"""
    stmt = order_summary_select(include_empty=include_empty).where(Order.id == order_id)
    row = db.session.execute(stmt).mappings().first()
    return OrderSummaryRow(**row) if row is not None else None


def product_availability() -> List[ProductAvailabilityRow]:
    """Availability of every active product in an active category"""
    result = db.session.execute(product_availability_select())
    rows = [ProductAvailabilityRow(**row) for row in result.mappings()]

    logger.debug(f'Product availability computed: {len(rows)} rows', extra={
        'event_type': 'view_computed',
        'view': 'product_availability',
        'row_count': len(rows)
    })
    return rows
