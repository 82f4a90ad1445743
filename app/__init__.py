"""
Flask application factory for the Biodiversity Hub.

Persistence and authentication live in the hosted backend; this app renders
pages, validates forms and forwards calls.
"""

import os
import logging
from flask import Flask, request, redirect, url_for, render_template
from flask_login import LoginManager
from flask_wtf.csrf import CSRFProtect, CSRFError
from flask_session import Session
from config import Config

logger = logging.getLogger(__name__)

login_manager = LoginManager()
csrf = CSRFProtect()
sess = Session()


@login_manager.user_loader
def load_user(user_id):
    """Resolve the signed-in user from the backend session kept server side."""
    from .auth_session import get_current_session
    auth_session = get_current_session()
    if auth_session is None or auth_session.user.id != user_id:
        return None
    return auth_session.user


@login_manager.unauthorized_handler
def unauthorized():
    """Protected pages send visitors without a session back home."""
    return redirect(url_for('main.index'))


def _configure_logging(app):
    # Configure Python logging level from LOG_LEVEL (default ERROR)
    log_level_name = str(app.config.get('LOG_LEVEL') or 'ERROR').upper()
    log_level = getattr(logging, log_level_name, logging.ERROR)
    if not logging.getLogger().handlers:
        logging.basicConfig(format='[%(asctime)s] %(levelname)s %(name)s: %(message)s')
    logging.getLogger().setLevel(log_level)
    app.logger.setLevel(log_level)


def create_app(config_class=Config):
    app = Flask(__name__)
    app.config.from_object(config_class)

    _configure_logging(app)

    app.secret_key = app.config.get('SECRET_KEY')
    if not app.secret_key:
        # Workers must share one key or sessions and CSRF tokens break
        raise RuntimeError("SECRET_KEY must be set in environment or config")

    from .debug_utils import setup_debug_logging, print_debug_banner, register_request_logging
    with app.app_context():
        setup_debug_logging()
        print_debug_banner()
    register_request_logging(app)

    # Extensions
    csrf.init_app(app)
    session_type = (app.config.get('SESSION_TYPE') or 'null').lower()
    if session_type != 'null':
        if session_type == 'filesystem':
            os.makedirs(app.config['SESSION_FILE_DIR'], exist_ok=True)
        sess.init_app(app)
    login_manager.init_app(app)
    login_manager.login_view = 'main.index'  # type: ignore

    from .supabase_client import init_supabase
    init_supabase(app)

    from .template_context import register_context_processors
    register_context_processors(app)

    @app.context_processor
    def inject_csrf_token():
        """Make CSRF token available in all templates."""
        from flask_wtf.csrf import generate_csrf
        return dict(csrf_token=generate_csrf)

    @app.errorhandler(CSRFError)
    def handle_csrf_error(e):
        """Handle CSRF errors with user-friendly messages."""
        from .utils.notifications import flash_toast, ERROR
        flash_toast('Security token expired.', 'Please try again.', ERROR)
        return redirect(request.referrer or url_for('main.index'))

    @app.errorhandler(403)
    def forbidden(e):
        return render_template('error.html', title='Not allowed', code=403,
                               message='Only the author of this species can change it.'), 403

    @app.errorhandler(404)
    def not_found(e):
        return render_template('error.html', title='Not found', code=404,
                               message='The page you are looking for does not exist.'), 404

    from .routes import register_blueprints
    from .auth import auth
    register_blueprints(app)
    app.register_blueprint(auth, url_prefix='/auth')

    app.logger.info(f"{app.config.get('SITE_NAME')} application created")
    return app
