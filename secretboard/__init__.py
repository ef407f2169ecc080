# secretboard/__init__.py
import logging

from flask import Flask

from .blueprints import register_blueprints
from .extensions import cors, db, login_manager, migrate, oauth
from .oauth_providers import default_providers, register_providers
from .services import build_services


def configure_logging(app):
    level = app.config.get('LOG_LEVEL', 'INFO')
    # Levels only; handlers belong to whoever runs the app (see run.py).
    logging.getLogger(__name__).setLevel(level)
    app.logger.setLevel(level)


def create_app(test_config=None, providers=None):
    app = Flask(__name__)
    app.config.from_object('secretboard.config.Config')
    if test_config:
        app.config.update(test_config)

    configure_logging(app)

    cors.init_app(app, resources={
        r"/*": {
            "origins": app.config['CORS_ORIGINS'],
            "methods": ["GET", "POST", "OPTIONS"],
            "allow_headers": ["Content-Type", "X-Requested-With"],
        }
    }, supports_credentials=True)

    # Initialize extensions
    db.init_app(app)
    login_manager.init_app(app)
    migrate.init_app(app, db)
    oauth.init_app(app)
    register_providers(app)

    services = build_services(app, db, providers if providers is not None else default_providers())
    app.extensions['secretboard'] = services

    @login_manager.request_loader
    def load_user_from_session_cookie(req):
        return services.gate.current_user(services.sessions.token_from(req))

    register_blueprints(app, services)

    # Create database tables if they don't exist
    with app.app_context():
        db.create_all()

    return app
