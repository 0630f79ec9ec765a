from ecomm.models.base import AuditMixin, RecordState
from ecomm.models.category import Category
from ecomm.models.product import Product
from ecomm.models.customer import Customer
from ecomm.models.order import Order, OrderItem

__all__ = ['AuditMixin', 'RecordState', 'Category', 'Product', 'Customer', 'Order', 'OrderItem']
