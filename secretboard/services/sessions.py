"""Server-side sessions keyed by an opaque cookie token.

The cookie carries nothing but the token; the user reference and expiry
live in the ``user_sessions`` table.
"""

import logging
import secrets
from datetime import datetime, timedelta, timezone

from sqlalchemy.exc import SQLAlchemyError

from ..errors import SessionInvalid, StoreUnavailable
from ..models import User, UserSession

logger = logging.getLogger(__name__)

TOKEN_BYTES = 32


def _utcnow():
    # Naive UTC, matching what SQLite hands back for DateTime columns.
    return datetime.now(timezone.utc).replace(tzinfo=None)


class SessionManager:
    def __init__(self, db, cookie_name='secretboard_session',
                 lifetime=timedelta(days=14), cookie_secure=False,
                 cookie_samesite='Lax'):
        self.db = db
        self.cookie_name = cookie_name
        self.lifetime = lifetime
        self.cookie_secure = cookie_secure
        self.cookie_samesite = cookie_samesite

    @classmethod
    def from_config(cls, db, config):
        return cls(
            db,
            cookie_name=config['AUTH_COOKIE_NAME'],
            lifetime=config['SESSION_LIFETIME'],
            cookie_secure=config.get('SESSION_COOKIE_SECURE', False),
            cookie_samesite=config.get('SESSION_COOKIE_SAMESITE', 'Lax'),
        )

    def create(self, user_id):
        now = _utcnow()
        token = secrets.token_urlsafe(TOKEN_BYTES)
        record = UserSession(
            token=token,
            user_id=user_id,
            created_at=now,
            expires_at=now + self.lifetime,
        )
        try:
            self.db.session.add(record)
            self.db.session.commit()
        except SQLAlchemyError as exc:
            self.db.session.rollback()
            raise StoreUnavailable('Could not create session') from exc
        logger.info('Session created', extra={'user_id': user_id})
        return token

    def resolve(self, token):
        """Return the user id behind ``token``, or None if it is not live."""
        if not token:
            return None
        try:
            record = self.db.session.get(UserSession, token)
            if record is None:
                return None
            if record.expires_at <= _utcnow():
                self.db.session.delete(record)
                self.db.session.commit()
                return None
            return record.user_id
        except SQLAlchemyError as exc:
            self.db.session.rollback()
            raise StoreUnavailable('Could not read session') from exc

    def deserialize(self, token):
        """Reconstitute the full User for ``token``.

        Raises SessionInvalid when the session points at a user that no
        longer exists; the dangling row is removed first.
        """
        user_id = self.resolve(token)
        if user_id is None:
            return None
        try:
            user = self.db.session.get(User, user_id)
        except SQLAlchemyError as exc:
            self.db.session.rollback()
            raise StoreUnavailable('Could not load session user') from exc
        if user is None:
            self.destroy(token)
            raise SessionInvalid(f'Session refers to missing user {user_id}')
        return user

    def destroy(self, token):
        if not token:
            return
        try:
            record = self.db.session.get(UserSession, token)
            if record is not None:
                self.db.session.delete(record)
                self.db.session.commit()
                logger.info('Session destroyed', extra={'user_id': record.user_id})
        except SQLAlchemyError as exc:
            self.db.session.rollback()
            raise StoreUnavailable('Could not destroy session') from exc

    # ---- cookie plumbing ----

    def token_from(self, request):
        return request.cookies.get(self.cookie_name)

    def set_cookie(self, response, token):
        response.set_cookie(
            self.cookie_name,
            token,
            max_age=int(self.lifetime.total_seconds()),
            httponly=True,
            secure=self.cookie_secure,
            samesite=self.cookie_samesite,
        )
        return response

    def clear_cookie(self, response):
        response.delete_cookie(
            self.cookie_name,
            httponly=True,
            secure=self.cookie_secure,
            samesite=self.cookie_samesite,
        )
        return response
