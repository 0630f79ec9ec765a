"""
Derived views over the sample data: order summary and product availability
"""
from decimal import Decimal

import pytest
from sqlalchemy import text

from ecomm import db
from ecomm.models.views import (
    ORDER_SUMMARY_VIEW,
    PRODUCT_AVAILABILITY_VIEW,
    compile_view_sql,
    fetch_view,
)
from ecomm.seed import soft_delete_example_product
from ecomm.services import reports
from ecomm.services.repository import categories, order_items, orders, products


class TestOrderSummary:

    def test_summary_for_first_order(self, seeded):
        row = reports.order_summary_for(1)

        assert row.total_items == 2
        assert row.customer_name == 'Alice Johnson'
        assert row.email == 'alice@example.com'
        assert row.status == 'Pending'
        assert row.total_amount == Decimal('30598.99')

    def test_summary_covers_every_seeded_order(self, seeded):
        rows = reports.order_summary()

        assert [(r.order_id, r.total_items) for r in rows] == [(1, 2), (2, 1), (3, 2)]
        assert [r.status for r in rows] == ['Pending', 'Shipped', 'Delivered']

    def test_soft_deleted_items_are_not_counted(self, seeded):
        order_items.soft_delete(2)
        assert reports.order_summary_for(1).total_items == 1

    def test_soft_deleted_order_is_excluded(self, seeded):
        orders.soft_delete(2)
        assert [r.order_id for r in reports.order_summary()] == [1, 3]

    def test_soft_deleted_customer_does_not_hide_order(self, seeded):
        from ecomm.services.repository import customers
        customers.soft_delete(1)
        assert reports.order_summary_for(1) is not None

    def test_order_with_all_items_soft_deleted_is_absent(self, seeded):
        order_items.soft_delete(3)

        assert orders.get(2).is_deleted is False
        assert reports.order_summary_for(2) is None
        assert 2 not in [r.order_id for r in reports.order_summary()]

    def test_order_without_items_is_absent(self, seeded):
        order = orders.create(customer_id=2, total_amount=0)
        assert reports.order_summary_for(order.id) is None

    def test_include_empty_keeps_orders_without_active_items(self, seeded):
        order_items.soft_delete(3)
        empty = orders.create(customer_id=3, total_amount=0)

        rows = {r.order_id: r.total_items for r in reports.order_summary(include_empty=True)}

        assert rows == {1: 2, 2: 0, 3: 2, empty.id: 0}

    def test_include_empty_still_hides_deleted_orders(self, seeded):
        orders.soft_delete(1)
        rows = reports.order_summary(include_empty=True)
        assert 1 not in [r.order_id for r in rows]

    def test_cascade_delete_of_first_order(self, seeded):
        orders.hard_delete(1)

        remaining = db.session.execute(
            text('SELECT order_id, product_id FROM order_items ORDER BY id')
        ).all()
        assert [tuple(r) for r in remaining] == [(2, 3), (3, 4), (3, 6)]
        assert [r.order_id for r in reports.order_summary()] == [2, 3]

    def test_rows_serialize(self, seeded):
        data = reports.order_summary_for(3).to_dict()
        assert set(data) == {'order_id', 'order_date', 'customer_name', 'email',
                             'status', 'total_amount', 'total_items'}


class TestProductAvailability:

    def test_all_seeded_products_in_stock(self, seeded):
        rows = reports.product_availability()

        assert [r.product_name for r in rows] == [
            'Smartphone', 'Laptop', 'T-Shirt', 'Jeans', 'Novel', 'Textbook'
        ]
        assert {r.availability for r in rows} == {'In Stock'}
        assert rows[0].category_name == 'Electronics'
        assert rows[0].price == Decimal('29999.99')

    def test_zero_stock_is_out_of_stock(self, seeded):
        products.update(2, stock_quantity=0)
        row = {r.product_id: r for r in reports.product_availability()}[2]
        assert row.availability == 'Out of Stock'

    def test_soft_deleted_product_scenario(self, seeded):
        product = soft_delete_example_product()

        assert product.id == 1
        assert product.is_deleted is True
        assert 1 not in [r.product_id for r in reports.product_availability()]

        rows = db.session.execute(text('SELECT id, is_deleted FROM products ORDER BY id')).all()
        assert len(rows) == 6
        assert rows[0].id == 1 and bool(rows[0].is_deleted) is True

    def test_soft_deleted_category_hides_its_products(self, seeded):
        categories.soft_delete(3)
        names = [r.product_name for r in reports.product_availability()]
        assert 'Novel' not in names and 'Textbook' not in names
        assert len(names) == 4

    def test_uncategorized_product_is_excluded(self, seeded):
        loose = products.create(name='Gift card', price=10, stock_quantity=5)
        assert loose.id not in [r.product_id for r in reports.product_availability()]


class TestInstalledViews:

    def test_installed_views_match_query_functions(self, seeded):
        order_items.soft_delete(3)
        products.soft_delete(4)

        summary = fetch_view(ORDER_SUMMARY_VIEW)
        assert sorted((r['order_id'], r['total_items']) for r in summary) == [
            (r.order_id, r.total_items) for r in reports.order_summary()
        ]

        availability = fetch_view(PRODUCT_AVAILABILITY_VIEW)
        assert sorted((r['product_id'], r['availability']) for r in availability) == [
            (r.product_id, r.availability) for r in reports.product_availability()
        ]

    def test_view_ddl_has_no_bound_parameters(self, app):
        sql = compile_view_sql(PRODUCT_AVAILABILITY_VIEW, db.engine.dialect)
        assert sql.startswith('CREATE VIEW product_availability_view AS SELECT')
        assert "'In Stock'" in sql and "'Out of Stock'" in sql
        assert 'ORDER BY' not in sql

    def test_fetch_unknown_view(self, app):
        with pytest.raises(ValueError):
            fetch_view('sales_view')
