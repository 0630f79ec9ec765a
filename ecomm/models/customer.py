from ecomm import db
from ecomm.models.base import AuditMixin


class Customer(AuditMixin, db.Model):
    __tablename__ = 'customers'

    full_name = db.Column(db.String(150), nullable=False)
    email = db.Column(db.String(100), unique=True, nullable=False)
    phone = db.Column(db.String(15))
    address = db.Column(db.Text)

    # Relationships
    orders = db.relationship('Order', back_populates='customer', lazy=True)

    def __repr__(self):
        return f'<Customer {self.email}>'
