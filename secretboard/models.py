from flask_login import UserMixin
from .extensions import db


class User(UserMixin, db.Model):
    __tablename__ = 'users'

    id = db.Column(db.Integer, primary_key=True)
    username = db.Column(db.String(150), unique=True, nullable=True)
    password_hash = db.Column(db.String(256), nullable=True)
    google_id = db.Column(db.String(100), unique=True, nullable=True)
    facebook_id = db.Column(db.String(100), unique=True, nullable=True)
    secret = db.Column(db.Text, nullable=True)
    created_at = db.Column(db.DateTime, server_default=db.func.now())

    sessions = db.relationship(
        'UserSession',
        back_populates='user',
        cascade='all, delete-orphan',
    )

    @property
    def display_name(self):
        if self.username:
            return self.username
        if self.google_id:
            return 'Google user'
        if self.facebook_id:
            return 'Facebook user'
        return 'Anonymous'

    def __repr__(self):
        return f'<User {self.id} {self.display_name}>'


class UserSession(db.Model):
    """Server-side session row; the client only ever holds ``token``."""
    __tablename__ = 'user_sessions'

    token = db.Column(db.String(128), primary_key=True)
    user_id = db.Column(
        db.Integer,
        db.ForeignKey('users.id', ondelete='CASCADE'),
        nullable=False,
        index=True,
    )
    created_at = db.Column(db.DateTime, nullable=False)
    expires_at = db.Column(db.DateTime, nullable=False)

    user = db.relationship('User', back_populates='sessions')

    def __repr__(self):
        return f'<UserSession user={self.user_id} expires={self.expires_at}>'
