"""
Flask CLI commands: schema setup, sample data, deletes and view reports
"""

import json

import click
from flask.cli import with_appcontext

from ecomm import init_schema, reset_schema
from ecomm.errors import DataModelError
from ecomm.seed import load_seed_data
from ecomm.services import reports
from ecomm.services.repository import REPOSITORIES, orders, repository_for


@click.command('init-db')
@click.option('--seed', is_flag=True, help='Load the sample data after creating the schema.')
@click.option('--drop', is_flag=True, help='Drop views and tables first.')
@with_appcontext
def init_db_command(seed, drop):
    """Create tables and derived views."""
    if drop:
        reset_schema()
    init_schema()
    click.echo('Database tables and views created.')

    if seed:
        counts = load_seed_data()
        click.echo(f'Sample data: {json.dumps(counts)}')


@click.command('seed-db')
@with_appcontext
def seed_db_command():
    """Load the sample data into an empty database."""
    counts = load_seed_data()
    if not any(counts.values()):
        click.echo('Database already seeded.')
    else:
        click.echo(f'Sample data: {json.dumps(counts)}')


@click.command('soft-delete')
@click.argument('entity', type=click.Choice(sorted(REPOSITORIES)))
@click.argument('identity', type=int)
@with_appcontext
def soft_delete_command(entity, identity):
    """Mark a row as deleted."""
    try:
        repository_for(entity).soft_delete(identity)
    except DataModelError as e:
        raise click.ClickException(str(e))
    click.echo(f'{entity} {identity} soft-deleted.')


@click.command('delete-order')
@click.argument('identity', type=int)
@with_appcontext
def delete_order_command(identity):
    """Physically delete an order and its items."""
    try:
        item_count = orders.hard_delete(identity)
    except DataModelError as e:
        raise click.ClickException(str(e))
    click.echo(f'Order {identity} deleted with {item_count} items.')


@click.command('report')
@click.argument('view', type=click.Choice(['order-summary', 'product-availability']))
@click.option('--include-empty', is_flag=True,
              help='Order summary only: keep active orders without active items.')
@with_appcontext
def report_command(view, include_empty):
    """Print a derived view as JSON lines."""
    if view == 'order-summary':
        rows = reports.order_summary(include_empty=include_empty)
    else:
        rows = reports.product_availability()

    for row in rows:
        click.echo(json.dumps(row.to_dict(), default=str, ensure_ascii=False))


def register_commands(app):
    for command in (init_db_command, seed_db_command, soft_delete_command,
                    delete_order_command, report_command):
        app.cli.add_command(command)
