# evoting/__init__.py

from flask import Flask
from flask_sqlalchemy import SQLAlchemy
from flask_migrate import Migrate
from flask_limiter import Limiter
from flask_limiter.util import get_remote_address
from werkzeug.middleware.proxy_fix import ProxyFix
import os

from evoting.config import Config, setup_logging

# Extensions are created unbound and attached to each app in create_app
db = SQLAlchemy()  # Database ORM
migrate = Migrate()  # DB migrations
limiter = Limiter(key_func=get_remote_address, default_limits=["10000/hour"])

MIGRATIONS_DIR = os.path.join(os.path.dirname(__file__), 'database', 'migrations')


def create_app(config=None):
    """Build the Flask application from an explicit ``Config``."""
    config = config or Config.from_env()
    setup_logging(config.log_level)

    app = Flask(__name__)
    app.config.from_mapping(config.to_flask())
    app.extensions['evoting.config'] = config

    # Fix proxy headers for HTTPS
    app.wsgi_app = ProxyFix(app.wsgi_app, x_for=1, x_proto=1, x_host=1, x_port=1)

    db.init_app(app)
    migrate.init_app(app, db, directory=MIGRATIONS_DIR)
    limiter.init_app(app)

    # Ensure model modules are imported so SQLAlchemy metadata is populated
    # for Flask-Migrate / Alembic (`flask db migrate`).
    from evoting.database import models  # noqa: F401
    from evoting.audit.audit_logger import AuditLogger
    from evoting.routes import api
    from evoting.cli import register_commands

    app.extensions['evoting.audit'] = AuditLogger(log_dir=config.audit_log_dir,
                                                 key_path=config.audit_key_path)
    app.register_blueprint(api)
    register_commands(app)
    return app
