"""
Sample data for the e-commerce schema
3 categories, 6 products, 3 customers, 3 orders and 5 order items
"""

import logging
from decimal import Decimal

from ecomm import db
from ecomm.models import Category, Customer, Order, OrderItem, Product

logger = logging.getLogger(__name__)

SAMPLE_CATEGORIES = [
    {'name': 'Electronics', 'description': 'Devices and gadgets'},
    {'name': 'Clothing', 'description': 'Apparel and accessories'},
    {'name': 'Books', 'description': 'All kinds of books'},
]

SAMPLE_PRODUCTS = [
    {'name': 'Smartphone', 'description': 'Latest Android smartphone',
     'price': Decimal('29999.99'), 'stock_quantity': 50, 'category': 'Electronics'},
    {'name': 'Laptop', 'description': 'High-performance laptop',
     'price': Decimal('74999.00'), 'stock_quantity': 20, 'category': 'Electronics'},
    {'name': 'T-Shirt', 'description': '100% cotton t-shirt',
     'price': Decimal('499.00'), 'stock_quantity': 100, 'category': 'Clothing'},
    {'name': 'Jeans', 'description': 'Slim fit jeans',
     'price': Decimal('1199.00'), 'stock_quantity': 60, 'category': 'Clothing'},
    {'name': 'Novel', 'description': 'Fictional novel',
     'price': Decimal('299.00'), 'stock_quantity': 200, 'category': 'Books'},
    {'name': 'Textbook', 'description': 'Academic textbook',
     'price': Decimal('799.00'), 'stock_quantity': 150, 'category': 'Books'},
]

SAMPLE_CUSTOMERS = [
    {'full_name': 'Alice Johnson', 'email': 'alice@example.com',
     'phone': '9876543210', 'address': '123 Maple Street, NY'},
    {'full_name': 'Bob Smith', 'email': 'bob@example.com',
     'phone': '9876500000', 'address': '456 Oak Avenue, LA'},
    {'full_name': 'Charlie Brown', 'email': 'charlie@example.com',
     'phone': '9999912345', 'address': '789 Pine Road, TX'},
]

SAMPLE_ORDERS = [
    {'customer': 'alice@example.com', 'status': 'Pending', 'total_amount': Decimal('30598.99'),
     'items': [('Smartphone', 1, Decimal('29999.99')), ('Novel', 2, Decimal('299.00'))]},
    {'customer': 'bob@example.com', 'status': 'Shipped', 'total_amount': Decimal('499.00'),
     'items': [('T-Shirt', 1, Decimal('499.00'))]},
    {'customer': 'charlie@example.com', 'status': 'Delivered', 'total_amount': Decimal('1998.00'),
     'items': [('Jeans', 1, Decimal('1199.00')), ('Textbook', 1, Decimal('799.00'))]},
]

EXAMPLE_SOFT_DELETED_PRODUCT_ID = 1


def load_seed_data():
    """
    Insert the sample rows in dependency order

    Returns:
        dict: inserted row counts per table (all zero when data already exists)
    """
    counts = {'categories': 0, 'products': 0, 'customers': 0, 'orders': 0, 'order_items': 0}

    if Category.query.first():
        logger.info('Database already seeded', extra={'event_type': 'seed_skipped'})
        return counts

    try:
        _insert_sample_rows(counts)
        db.session.commit()
    except Exception as e:
        db.session.rollback()
        logger.error(f'Sample data load failed: {e}', extra={
            'event_type': 'seed_failed',
            'exception_type': type(e).__name__
        })
        raise

    logger.info('Sample data loaded', extra={'event_type': 'seed_loaded', **counts})
    return counts


def _insert_sample_rows(counts):
    categories = {}
    for data in SAMPLE_CATEGORIES:
        categories[data['name']] = Category(**data)
        db.session.add(categories[data['name']])
    db.session.flush()
    counts['categories'] = len(categories)

    products = {}
    for data in SAMPLE_PRODUCTS:
        data = dict(data)
        category = categories[data.pop('category')]
        products[data['name']] = Product(category_id=category.id, **data)
        db.session.add(products[data['name']])
    db.session.flush()
    counts['products'] = len(products)

    customers = {}
    for data in SAMPLE_CUSTOMERS:
        customers[data['email']] = Customer(**data)
        db.session.add(customers[data['email']])
    db.session.flush()
    counts['customers'] = len(customers)

    for data in SAMPLE_ORDERS:
        order = Order(customer_id=customers[data['customer']].id,
                      status=data['status'], total_amount=data['total_amount'])
        db.session.add(order)
        db.session.flush()

        for product_name, quantity, price_per_unit in data['items']:
            db.session.add(OrderItem(order_id=order.id, product_id=products[product_name].id,
                                     quantity=quantity, price_per_unit=price_per_unit))
            counts['order_items'] += 1
        counts['orders'] += 1


def soft_delete_example_product():
    """Soft-delete product 1 (Smartphone), the documented example mutation"""
    from ecomm.services.repository import products

    return products.soft_delete(EXAMPLE_SOFT_DELETED_PRODUCT_ID)
