from .board import SecretBoard
from .credentials import CredentialVerifier
from .gate import AuthGate
from .identity import IdentityLinker
from .sessions import SessionManager


class AuthServices:
    """Everything the blueprints need, handed to them explicitly."""

    def __init__(self, verifier, linker, sessions, gate, board, providers):
        self.verifier = verifier
        self.linker = linker
        self.sessions = sessions
        self.gate = gate
        self.board = board
        self.providers = providers


def build_services(app, db, providers):
    sessions = SessionManager.from_config(db, app.config)
    return AuthServices(
        verifier=CredentialVerifier(db),
        linker=IdentityLinker(db),
        sessions=sessions,
        gate=AuthGate(sessions),
        board=SecretBoard(db),
        providers=providers,
    )


__all__ = [
    'AuthGate',
    'AuthServices',
    'CredentialVerifier',
    'IdentityLinker',
    'SecretBoard',
    'SessionManager',
    'build_services',
]
