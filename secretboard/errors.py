"""Error taxonomy for the authentication and secrets flows.

Every error here is recoverable: the blueprints catch them and turn them
into a flash message plus a redirect back to the originating form.
"""


class AuthError(Exception):
    """Base class for errors raised by the auth services."""


class RegistrationError(AuthError):
    """Registration input was rejected."""


class DuplicateUsernameError(RegistrationError):
    """The requested username is already taken."""


class InvalidCredentialsError(AuthError):
    """Unknown username or wrong password.

    The message never says which of the two it was.
    """

    def __init__(self, message='Invalid username or password'):
        super().__init__(message)


class ProviderAuthFailure(AuthError):
    """The OAuth provider denied the login or returned an unusable profile."""


class StoreUnavailable(AuthError):
    """The user or session store could not complete an operation."""


class SessionInvalid(AuthError):
    """A stale or tampered session token was presented."""
