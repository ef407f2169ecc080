from flask_sqlalchemy import SQLAlchemy
from flask_login import LoginManager
from flask_migrate import Migrate
from flask_cors import CORS
from authlib.integrations.flask_client import OAuth

db = SQLAlchemy()
login_manager = LoginManager()
migrate = Migrate()
oauth = OAuth()
cors = CORS()

login_manager.login_view = 'auth.login'
login_manager.login_message = 'Please log in to share a secret.'
login_manager.login_message_category = 'info'
