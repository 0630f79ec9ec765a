"""
Flask CLI commands against a file-backed SQLite database
"""
import json

import pytest

from ecomm import create_app
from ecomm.config import Settings


def make_settings(database_url):
    return Settings(database_url=database_url, log_level='WARNING')


@pytest.fixture
def runner(tmp_path):
    app = create_app(make_settings(f"sqlite:///{tmp_path / 'cli.db'}"))
    runner = app.test_cli_runner()
    result = runner.invoke(args=['init-db', '--seed'])
    assert result.exit_code == 0, result.output
    return runner


def _json_lines(output):
    return [json.loads(line) for line in output.splitlines() if line.startswith('{')]


def test_init_db_reports_seed_counts(tmp_path):
    app = create_app(make_settings(f"sqlite:///{tmp_path / 'fresh.db'}"))
    result = app.test_cli_runner().invoke(args=['init-db', '--seed'])

    assert result.exit_code == 0
    assert 'Database tables and views created.' in result.output
    assert '"order_items": 5' in result.output


def test_seed_db_is_idempotent(runner):
    result = runner.invoke(args=['seed-db'])
    assert 'Database already seeded.' in result.output


def test_product_availability_report(runner):
    result = runner.invoke(args=['report', 'product-availability'])

    rows = _json_lines(result.output)
    assert result.exit_code == 0
    assert [row['product_id'] for row in rows] == [1, 2, 3, 4, 5, 6]
    assert rows[0]['availability'] == 'In Stock'


def test_soft_delete_command_hides_product(runner):
    result = runner.invoke(args=['soft-delete', 'products', '1'])
    assert result.exit_code == 0
    assert 'products 1 soft-deleted.' in result.output

    rows = _json_lines(runner.invoke(args=['report', 'product-availability']).output)
    assert 1 not in [row['product_id'] for row in rows]


def test_soft_delete_missing_row_fails(runner):
    result = runner.invoke(args=['soft-delete', 'customers', '99'])
    assert result.exit_code != 0
    assert 'customers 99 not found' in result.output


def test_delete_order_command(runner):
    result = runner.invoke(args=['delete-order', '1'])
    assert result.exit_code == 0
    assert 'Order 1 deleted with 2 items.' in result.output

    rows = _json_lines(runner.invoke(args=['report', 'order-summary']).output)
    assert [row['order_id'] for row in rows] == [2, 3]


def test_order_summary_include_empty(runner):
    runner.invoke(args=['soft-delete', 'order_items', '3'])

    default = _json_lines(runner.invoke(args=['report', 'order-summary']).output)
    with_empty = _json_lines(runner.invoke(args=['report', 'order-summary', '--include-empty']).output)

    assert [row['order_id'] for row in default] == [1, 3]
    assert [(row['order_id'], row['total_items']) for row in with_empty] == [(1, 2), (2, 0), (3, 2)]
    assert with_empty[0]['total_amount'] == '30598.99'


def test_init_db_drop_recreates_empty_schema(runner):
    result = runner.invoke(args=['init-db', '--drop'])
    assert result.exit_code == 0

    rows = _json_lines(runner.invoke(args=['report', 'order-summary']).output)
    assert rows == []
