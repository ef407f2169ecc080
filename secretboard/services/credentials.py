"""Local username/password credentials.

Passwords are stored as Werkzeug salted hashes. Verification never tells
the caller whether the username or the password was wrong.
"""

import logging

from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from ..errors import (
    DuplicateUsernameError,
    InvalidCredentialsError,
    RegistrationError,
    StoreUnavailable,
)
from ..models import User
from ..utils import hash_password, verify_password

logger = logging.getLogger(__name__)


class CredentialVerifier:
    def __init__(self, db):
        self.db = db

    def register(self, username, password):
        """Create a local-auth user.

        Raises:
            RegistrationError: blank username or password.
            DuplicateUsernameError: username already taken, including when a
                concurrent registration wins the unique constraint.
            StoreUnavailable: the database failed.
        """
        username = (username or '').strip()
        if not username or not password:
            raise RegistrationError('Username and password are required')

        try:
            if self._find(username) is not None:
                raise DuplicateUsernameError(f'Username {username!r} is taken')

            user = User(username=username, password_hash=hash_password(password))
            self.db.session.add(user)
            self.db.session.commit()
        except IntegrityError as exc:
            self.db.session.rollback()
            raise DuplicateUsernameError(f'Username {username!r} is taken') from exc
        except SQLAlchemyError as exc:
            self.db.session.rollback()
            logger.exception('Registration failed', extra={'username': username})
            raise StoreUnavailable('Could not save the new account') from exc

        logger.info('Registered local user', extra={'user_id': user.id})
        return user

    def verify(self, username, password):
        username = (username or '').strip()
        try:
            user = self._find(username) if username else None
        except SQLAlchemyError as exc:
            self.db.session.rollback()
            raise StoreUnavailable('Could not look up the account') from exc

        stored_hash = user.password_hash if user is not None else None
        if not verify_password(stored_hash, password or ''):
            logger.info('Rejected local login')
            raise InvalidCredentialsError()
        return user

    def _find(self, username):
        return self.db.session.execute(
            self.db.select(User).filter_by(username=username)
        ).scalar_one_or_none()
