# secretboard/blueprints/main.py
import logging

from flask import Blueprint, flash, redirect, render_template, request, url_for
from flask_login import login_required, current_user

from ..errors import StoreUnavailable

logger = logging.getLogger(__name__)


def create_main_blueprint(services):
    main_bp = Blueprint('main', __name__)

    @main_bp.route('/')
    def index():
        return render_template('home.html')

    # Public on purpose: anyone may read, only members may post.
    @main_bp.route('/secrets')
    def secrets():
        try:
            users_with_secrets = services.board.list_secrets()
        except StoreUnavailable:
            logger.exception('Could not list secrets')
            flash('Secrets are unavailable right now', 'danger')
            users_with_secrets = []
        return render_template('secrets.html', users_with_secrets=users_with_secrets)

    @main_bp.route('/submit', methods=['GET', 'POST'])
    @login_required
    def submit():
        if request.method == 'POST':
            try:
                services.board.submit(current_user._get_current_object(), request.form.get('secret'))
            except ValueError:
                flash('Your secret cannot be empty', 'danger')
                return redirect(url_for('main.submit'))
            except StoreUnavailable:
                flash('Could not save your secret, please try again', 'danger')
                return redirect(url_for('main.submit'))
            return redirect(url_for('main.secrets'))

        return render_template('submit.html')

    return main_bp
