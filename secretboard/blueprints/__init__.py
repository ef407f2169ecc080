from .auth import create_auth_blueprint
from .main import create_main_blueprint


def register_blueprints(app, services):
    app.register_blueprint(create_main_blueprint(services))
    app.register_blueprint(create_auth_blueprint(services))
