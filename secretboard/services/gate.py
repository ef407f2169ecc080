import logging

from ..errors import SessionInvalid, StoreUnavailable

logger = logging.getLogger(__name__)


class AuthGate:
    """Answers "who is this request?" from a session token. Holds no state."""

    def __init__(self, sessions):
        self.sessions = sessions

    def current_user(self, token):
        try:
            return self.sessions.deserialize(token)
        except SessionInvalid as exc:
            logger.warning('Dropping invalid session: %s', exc)
        except StoreUnavailable:
            logger.exception('Session store unavailable, treating request as anonymous')
        return None

    def is_authenticated(self, token):
        return self.current_user(token) is not None
