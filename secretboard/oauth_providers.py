"""Google and Facebook login strategies on top of the Authlib Flask client.

A strategy does two things: send the browser to the provider's consent
page, and turn the provider's callback into a profile dict with a stable
``id``. Linking that id to a local user is the IdentityLinker's job.
"""

import logging

import requests
from authlib.common.errors import AuthlibBaseError
from flask import request
from joserfc.errors import JoseError

from .errors import ProviderAuthFailure
from .extensions import oauth

logger = logging.getLogger(__name__)

# Authlib validates id_tokens with joserfc, whose errors sit outside AuthlibBaseError.
PROVIDER_ERRORS = (AuthlibBaseError, JoseError, requests.RequestException, ValueError)


def fetch_google_profile(client, token):
    userinfo = token.get('userinfo') or client.userinfo(token=token)
    return {'id': userinfo.get('sub'), 'name': userinfo.get('name')}


def fetch_facebook_profile(client, token):
    resp = client.get('me', params={'fields': 'id,name'}, token=token)
    resp.raise_for_status()
    data = resp.json()
    return {'id': data.get('id'), 'name': data.get('name')}


class OAuthProvider:
    def __init__(self, name, id_field, fetch_profile, label=None):
        self.name = name
        self.id_field = id_field
        self.fetch_profile = fetch_profile
        self.label = label or name.capitalize()

    def client(self):
        return oauth.create_client(self.name)

    def is_configured(self):
        return self.client() is not None

    def begin(self, callback_url):
        client = self.client()
        if client is None:
            raise ProviderAuthFailure(f'{self.label} login is not configured')
        try:
            return client.authorize_redirect(callback_url)
        except PROVIDER_ERRORS as exc:
            raise ProviderAuthFailure(f'{self.label} is unreachable: {exc}') from exc

    def complete(self):
        """Exchange the callback for a profile; raise ProviderAuthFailure on any denial."""
        error = request.args.get('error')
        if error:
            raise ProviderAuthFailure(
                f'{self.label} denied the login: {request.args.get("error_description") or error}'
            )

        client = self.client()
        if client is None:
            raise ProviderAuthFailure(f'{self.label} login is not configured')

        try:
            token = client.authorize_access_token()
            profile = self.fetch_profile(client, token)
        except PROVIDER_ERRORS as exc:
            raise ProviderAuthFailure(f'{self.label} login failed: {exc}') from exc

        if not profile or not profile.get('id'):
            raise ProviderAuthFailure(f'{self.label} returned a profile without an id')
        logger.info('%s profile received', self.label, extra={'provider': self.name})
        return profile


def authenticate(provider, linker):
    """Run the callback half of an OAuth login and return the local User."""
    profile = provider.complete()
    return linker.find_or_create(provider.id_field, profile['id'])


def default_providers():
    return {
        'google': OAuthProvider('google', 'google_id', fetch_google_profile, label='Google'),
        'facebook': OAuthProvider('facebook', 'facebook_id', fetch_facebook_profile, label='Facebook'),
    }


def register_providers(app):
    # Register OAuth clients ONLY if credentials exist (safe for db init & first run)
    google_id = app.config.get('GOOGLE_CLIENT_ID')
    google_secret = app.config.get('GOOGLE_CLIENT_SECRET')
    if google_id and google_secret:
        oauth.register(
            name='google',
            client_id=google_id,
            client_secret=google_secret,
            server_metadata_url='https://accounts.google.com/.well-known/openid-configuration',
            client_kwargs={'scope': 'openid profile'}
        )

    facebook_id = app.config.get('FACEBOOK_APP_ID')
    facebook_secret = app.config.get('FACEBOOK_APP_SECRET')
    if facebook_id and facebook_secret:
        oauth.register(
            name='facebook',
            client_id=facebook_id,
            client_secret=facebook_secret,
            access_token_url='https://graph.facebook.com/v19.0/oauth/access_token',
            authorize_url='https://www.facebook.com/v19.0/dialog/oauth',
            api_base_url='https://graph.facebook.com/v19.0/',
            client_kwargs={'scope': 'public_profile'}
        )
