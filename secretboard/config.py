import os
from datetime import timedelta

from dotenv import load_dotenv

load_dotenv()


def _env_flag(name, default=False):
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in ('1', 'true', 'yes', 'on')


def _env_list(name, default=''):
    raw = os.getenv(name, default)
    return [item.strip() for item in raw.split(',') if item.strip()]


class Config:
    SECRET_KEY = os.getenv('SECRET_KEY', 'dev-secret-change-me')

    SQLALCHEMY_DATABASE_URI = os.getenv('DATABASE_URL', 'sqlite:///secretboard.db')
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    GOOGLE_CLIENT_ID = os.getenv('GOOGLE_CLIENT_ID')
    GOOGLE_CLIENT_SECRET = os.getenv('GOOGLE_CLIENT_SECRET')
    FACEBOOK_APP_ID = os.getenv('FACEBOOK_APP_ID')
    FACEBOOK_APP_SECRET = os.getenv('FACEBOOK_APP_SECRET')
    # e.g. http://localhost:5000 ; falls back to url_for(..., _external=True)
    OAUTH_CALLBACK_BASE_URL = os.getenv('OAUTH_CALLBACK_BASE_URL')

    AUTH_COOKIE_NAME = os.getenv('AUTH_COOKIE_NAME', 'secretboard_session')
    SESSION_LIFETIME = timedelta(days=int(os.getenv('SESSION_LIFETIME_DAYS', '14')))
    SESSION_COOKIE_SECURE = _env_flag('SESSION_COOKIE_SECURE')
    SESSION_COOKIE_SAMESITE = os.getenv('SESSION_COOKIE_SAMESITE', 'Lax')
    # Keeps the login redirect at a bare /login
    USE_SESSION_FOR_NEXT = True

    CORS_ORIGINS = _env_list('CORS_ORIGINS', 'http://localhost:5000')

    PORT = int(os.getenv('PORT', '5000'))
    LOG_LEVEL = os.getenv('LOG_LEVEL', 'INFO')
