"""
Settings and application factory
"""
from ecomm import create_app, db_backend_name
from ecomm.config import Settings


def test_settings_read_prefixed_environment(monkeypatch):
    monkeypatch.setenv('ECOMM_DATABASE_URL', 'postgresql://shop:shop@db:5432/shop')
    monkeypatch.setenv('ECOMM_SQL_ECHO', 'true')
    monkeypatch.setenv('ECOMM_INSTALL_VIEWS', 'false')

    settings = Settings()

    assert settings.database_url == 'postgresql://shop:shop@db:5432/shop'
    assert settings.sql_echo is True
    assert settings.install_views is False


def test_flask_config_mapping():
    config = Settings(database_url='sqlite://').flask_config()

    assert config['SQLALCHEMY_DATABASE_URI'] == 'sqlite://'
    assert config['SQLALCHEMY_TRACK_MODIFICATIONS'] is False
    assert config['ECOMM_INSTALL_VIEWS'] is True


def test_create_app_applies_settings():
    settings = Settings(database_url='sqlite://', log_level='WARNING', install_views=False)
    app = create_app(settings)

    assert app.config['SQLALCHEMY_DATABASE_URI'] == 'sqlite://'
    assert app.config['ECOMM_INSTALL_VIEWS'] is False
    assert app.extensions['ecomm_settings'] is settings
    assert 'init-db' in app.cli.commands


def test_backend_name():
    assert db_backend_name('postgresql://u:p@h/db') == 'postgresql'
    assert db_backend_name('sqlite://') == 'sqlite'
