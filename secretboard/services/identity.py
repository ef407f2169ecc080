"""Resolve an OAuth provider identity to a local user.

Rules:
1. A user whose provider column matches the profile id is returned as is.
2. Otherwise a new user is created with only that provider column set.
3. Two first logins racing for the same provider id produce one row: the
   loser hits the unique constraint, rolls back and re-reads the winner.

There is no linking across providers or to local accounts.
"""

import logging

from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from ..errors import ProviderAuthFailure, StoreUnavailable
from ..models import User

logger = logging.getLogger(__name__)

PROVIDER_FIELDS = {
    'google': 'google_id',
    'facebook': 'facebook_id',
}


def provider_field(provider_key):
    """Map ``google``/``google_id`` style keys to the User column name."""
    if provider_key in PROVIDER_FIELDS.values():
        return provider_key
    try:
        return PROVIDER_FIELDS[provider_key]
    except KeyError:
        raise ValueError(f'Unknown identity provider: {provider_key!r}') from None


class IdentityLinker:
    def __init__(self, db):
        self.db = db

    def find_or_create(self, provider_key, value):
        field = provider_field(provider_key)
        value = str(value).strip() if value is not None else ''
        if not value:
            raise ProviderAuthFailure('Provider profile has no id')

        try:
            user = self._lookup(field, value)
            if user is not None:
                logger.info(
                    'Returning OAuth user',
                    extra={'user_id': user.id, 'provider_field': field},
                )
                return user
            return self._create(field, value)
        except SQLAlchemyError as exc:
            self.db.session.rollback()
            logger.exception('Identity lookup failed', extra={'provider_field': field})
            raise StoreUnavailable('Could not resolve the provider identity') from exc

    def _lookup(self, field, value):
        return self.db.session.execute(
            self.db.select(User).filter_by(**{field: value})
        ).scalar_one_or_none()

    def _create(self, field, value):
        user = User(**{field: value})
        self.db.session.add(user)
        try:
            self.db.session.commit()
        except IntegrityError:
            # Another request created the same identity first.
            self.db.session.rollback()
            existing = self._lookup(field, value)
            if existing is None:
                raise
            logger.info(
                'Concurrent first login resolved to existing user',
                extra={'user_id': existing.id, 'provider_field': field},
            )
            return existing

        logger.info(
            'Created new OAuth user',
            extra={'user_id': user.id, 'provider_field': field},
        )
        return user
