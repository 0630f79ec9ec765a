import pytest

from ecomm import create_app, db, init_schema
from ecomm.config import Settings
from ecomm.seed import load_seed_data


def make_settings(database_url='sqlite://', **overrides):
    return Settings(database_url=database_url, log_level='WARNING', **overrides)


@pytest.fixture
def app():
    """Application bound to a fresh in-memory database"""
    app = create_app(make_settings())
    with app.app_context():
        init_schema()
        yield app
        db.session.remove()


@pytest.fixture
def seeded(app):
    """The sample data, loaded before any deletes"""
    load_seed_data()
    return app
