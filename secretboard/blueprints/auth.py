# secretboard/blueprints/auth.py
import logging

from flask import Blueprint, abort, current_app, flash, redirect, render_template, request, url_for

from ..errors import (
    DuplicateUsernameError,
    InvalidCredentialsError,
    ProviderAuthFailure,
    RegistrationError,
    StoreUnavailable,
)
from ..oauth_providers import authenticate

logger = logging.getLogger(__name__)


def create_auth_blueprint(services):
    auth_bp = Blueprint('auth', __name__)

    # ==================== Helper: Session Start ====================
    def start_session(user):
        """Swap whatever session the client had for a fresh one and go to /secrets."""
        sessions = services.sessions
        sessions.destroy(sessions.token_from(request))
        token = sessions.create(user.id)
        response = redirect(url_for('main.secrets'))
        return sessions.set_cookie(response, token)

    def callback_url(provider_name):
        base = current_app.config.get('OAUTH_CALLBACK_BASE_URL')
        if base:
            return base.rstrip('/') + url_for('auth.oauth_callback', provider=provider_name)
        return url_for('auth.oauth_callback', provider=provider_name, _external=True)

    def get_provider(provider_name):
        provider = services.providers.get(provider_name)
        if provider is None:
            abort(404)
        return provider

    # ==================== Traditional Auth ====================
    @auth_bp.route('/register', methods=['GET', 'POST'])
    def register():
        if request.method == 'POST':
            username = request.form.get('username', '')
            password = request.form.get('password', '')
            try:
                user = services.verifier.register(username, password)
                response = start_session(user)
            except DuplicateUsernameError:
                flash('That username is already registered', 'danger')
                return redirect(url_for('auth.register'))
            except RegistrationError as exc:
                flash(str(exc), 'danger')
                return redirect(url_for('auth.register'))
            except StoreUnavailable:
                logger.exception('Registration aborted')
                flash('Something went wrong, please try again', 'danger')
                return redirect(url_for('auth.register'))
            flash('Account created successfully!', 'success')
            return response

        return render_template('register.html')

    @auth_bp.route('/login', methods=['GET', 'POST'])
    def login():
        if request.method == 'POST':
            username = request.form.get('username', '')
            password = request.form.get('password', '')
            try:
                user = services.verifier.verify(username, password)
                response = start_session(user)
            except InvalidCredentialsError as exc:
                flash(str(exc), 'danger')
                return redirect(url_for('auth.login'))
            except StoreUnavailable:
                logger.exception('Login aborted')
                flash('Something went wrong, please try again', 'danger')
                return redirect(url_for('auth.login'))
            flash('Welcome back!', 'success')
            return response

        return render_template('login.html')

    # ==================== OAuth Login Initiators ====================
    @auth_bp.route('/auth/<provider>')
    def oauth_login(provider):
        strategy = get_provider(provider)
        try:
            return strategy.begin(callback_url(provider))
        except ProviderAuthFailure as exc:
            flash(str(exc), 'danger')
            return redirect(url_for('auth.login'))

    # ==================== OAuth Callbacks ====================
    @auth_bp.route('/auth/<provider>/secrets')
    def oauth_callback(provider):
        strategy = get_provider(provider)
        try:
            user = authenticate(strategy, services.linker)
            response = start_session(user)
        except ProviderAuthFailure as exc:
            logger.warning('OAuth login failed: %s', exc, extra={'provider': provider})
            flash(f'{strategy.label} sign-in failed', 'danger')
            return redirect(url_for('auth.login'))
        except StoreUnavailable:
            logger.exception('OAuth login aborted', extra={'provider': provider})
            flash('Something went wrong, please try again', 'danger')
            return redirect(url_for('auth.login'))
        flash(f'Signed in with {strategy.label}', 'success')
        return response

    # ==================== Logout ====================
    @auth_bp.route('/logout')
    def logout():
        sessions = services.sessions
        try:
            sessions.destroy(sessions.token_from(request))
        except StoreUnavailable:
            logger.exception('Could not delete session row on logout')
        flash('You have been signed out', 'info')
        return sessions.clear_cookie(redirect(url_for('main.index')))

    return auth_bp
