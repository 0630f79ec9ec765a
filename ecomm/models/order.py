from sqlalchemy.orm import validates

from ecomm import db
from ecomm.models.base import AuditMixin, bounded_integer, non_negative_decimal, utcnow

DEFAULT_ORDER_STATUS = 'Pending'


class Order(AuditMixin, db.Model):
    __tablename__ = 'orders'
    __table_args__ = (
        db.CheckConstraint('total_amount >= 0', name='ck_orders_total_amount_non_negative'),
    )

    customer_id = db.Column(db.Integer, db.ForeignKey('customers.id'), nullable=False)
    order_date = db.Column(db.DateTime, default=utcnow)
    status = db.Column(db.String(20), default=DEFAULT_ORDER_STATUS)  # free text: Pending, Shipped, Delivered, ...
    total_amount = db.Column(db.Numeric(12, 2))

    # Relationships
    customer = db.relationship('Customer', back_populates='orders')
    items = db.relationship('OrderItem', back_populates='order', lazy=True,
                            cascade='all, delete-orphan')

    def __init__(self, **kwargs):
        kwargs.setdefault('order_date', utcnow())
        kwargs.setdefault('status', DEFAULT_ORDER_STATUS)
        super().__init__(**kwargs)

    @validates('total_amount')
    def validate_total_amount(self, key, value):
        return non_negative_decimal('orders', key, value)

    def __repr__(self):
        return f'<Order {self.id}>'


class OrderItem(AuditMixin, db.Model):
    __tablename__ = 'order_items'
    __table_args__ = (
        db.CheckConstraint('quantity > 0', name='ck_order_items_quantity_positive'),
        db.CheckConstraint('price_per_unit >= 0', name='ck_order_items_price_per_unit_non_negative'),
    )

    order_id = db.Column(db.Integer, db.ForeignKey('orders.id', ondelete='CASCADE'), nullable=False)
    product_id = db.Column(db.Integer, db.ForeignKey('products.id'), nullable=False)
    quantity = db.Column(db.Integer, nullable=False)
    price_per_unit = db.Column(db.Numeric(10, 2))

    # Relationships
    order = db.relationship('Order', back_populates='items')
    product = db.relationship('Product', back_populates='order_items')

    @validates('quantity')
    def validate_quantity(self, key, value):
        return bounded_integer('order_items', key, value, 1, 'positive')

    @validates('price_per_unit')
    def validate_price_per_unit(self, key, value):
        return non_negative_decimal('order_items', key, value)

    @property
    def line_total(self):
        if self.price_per_unit is None:
            return None
        return self.price_per_unit * self.quantity

    def __repr__(self):
        return f'<OrderItem {self.id}>'
