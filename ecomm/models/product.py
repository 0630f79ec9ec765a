from sqlalchemy.orm import validates

from ecomm import db
from ecomm.models.base import AuditMixin, bounded_integer, non_negative_decimal


class Product(AuditMixin, db.Model):
    __tablename__ = 'products'
    __table_args__ = (
        db.CheckConstraint('price >= 0', name='ck_products_price_non_negative'),
        db.CheckConstraint('stock_quantity >= 0', name='ck_products_stock_quantity_non_negative'),
    )

    name = db.Column(db.String(150), nullable=False)
    description = db.Column(db.Text)
    price = db.Column(db.Numeric(10, 2))
    stock_quantity = db.Column(db.Integer)
    category_id = db.Column(db.Integer, db.ForeignKey('categories.id'), nullable=True)

    # Relationships
    category = db.relationship('Category', back_populates='products')
    order_items = db.relationship('OrderItem', back_populates='product', lazy=True)

    @validates('price')
    def validate_price(self, key, value):
        return non_negative_decimal('products', key, value)

    @validates('stock_quantity')
    def validate_stock_quantity(self, key, value):
        return bounded_integer('products', key, value, 0, 'non_negative')

    @property
    def in_stock(self):
        return (self.stock_quantity or 0) > 0

    def __repr__(self):
        return f'<Product {self.name}>'
