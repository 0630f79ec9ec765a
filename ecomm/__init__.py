import logging
import sqlite3

from flask import Flask
from flask_sqlalchemy import SQLAlchemy
from sqlalchemy import event
from sqlalchemy.engine import Engine

db = SQLAlchemy()

logger = logging.getLogger(__name__)


@event.listens_for(Engine, "connect")
def _enable_sqlite_foreign_keys(dbapi_connection, connection_record):
    # SQLite ignores REFERENCES / ON DELETE CASCADE unless asked per connection
    if isinstance(dbapi_connection, sqlite3.Connection):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()


def create_app(settings=None):
    from ecomm.config import Settings

    settings = settings or Settings()

    app = Flask(__name__)

    # Configuration
    app.config.update(settings.flask_config())
    app.extensions['ecomm_settings'] = settings

    # Setup logging
    from ecomm.logging_config import configure_app_logging
    configure_app_logging(app, settings)

    # Initialize extensions
    db.init_app(app)

    # Models must be imported before create_all can see them
    from ecomm import models  # noqa: F401

    from ecomm.cli import register_commands
    register_commands(app)

    logger.info('Application created', extra={
        'event_type': 'app_created',
        'database': db_backend_name(settings.database_url)
    })

    return app


def init_schema(install_views=None):
    """Create all tables and, unless disabled, the derived SQL views"""
    from flask import current_app
    from ecomm.models.views import install_views as create_views

    if install_views is None:
        install_views = current_app.config.get('ECOMM_INSTALL_VIEWS', True)

    db.create_all()
    if install_views:
        with db.engine.begin() as connection:
            create_views(connection)

    logger.info('Schema initialized', extra={
        'event_type': 'schema_initialized',
        'views_installed': bool(install_views)
    })


def reset_schema():
    """Drop the derived views, then every table"""
    from ecomm.models.views import drop_views

    db.session.remove()
    with db.engine.begin() as connection:
        drop_views(connection)
    db.drop_all()

    logger.warning('Schema dropped', extra={'event_type': 'schema_dropped'})


def db_backend_name(database_url):
    return database_url.split(':', 1)[0]
