import logging

from sqlalchemy.exc import SQLAlchemyError

from ..errors import StoreUnavailable
from ..models import User

logger = logging.getLogger(__name__)


class SecretBoard:
    """One secret per user, overwritten on each submission."""

    def __init__(self, db):
        self.db = db

    def submit(self, user, text):
        user_id = user.id
        text = (text or '').strip()
        if not text:
            raise ValueError('Secret must not be empty')
        try:
            user.secret = text
            self.db.session.commit()
        except SQLAlchemyError as exc:
            self.db.session.rollback()
            logger.exception('Saving secret failed', extra={'user_id': user_id})
            raise StoreUnavailable('Could not save the secret') from exc
        logger.info('Secret updated', extra={'user_id': user_id})

    def list_secrets(self):
        try:
            return self.db.session.execute(
                self.db.select(User)
                .where(User.secret.isnot(None), User.secret != '')
                .order_by(User.id)
            ).scalars().all()
        except SQLAlchemyError as exc:
            self.db.session.rollback()
            raise StoreUnavailable('Could not load secrets') from exc
