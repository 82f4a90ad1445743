"""
Routes package initialization.
Registers all blueprint modules for the Biodiversity Hub application.
"""

import logging

from flask import Blueprint, render_template
from flask_login import current_user

from app.debug_utils import debug_log

logger = logging.getLogger(__name__)

# Import all blueprint modules
from .species_routes import species_bp
from .users_routes import users_bp
from .chart_routes import charts_bp

# Create a main blueprint that can be registered with the app
main_bp = Blueprint('main', __name__)


@main_bp.route('/')
def index():
    """Home page: sign-in form for visitors, shortcuts for signed-in users."""
    from app.forms import SignInForm
    form = None if current_user.is_authenticated else SignInForm()
    return render_template('index.html', title='Home', form=form)


def register_blueprints(app):
    """Register all blueprints with the Flask application."""
    app.register_blueprint(main_bp)
    app.register_blueprint(species_bp, url_prefix='/species')
    app.register_blueprint(users_bp, url_prefix='/users')
    app.register_blueprint(charts_bp, url_prefix='/species-speed')

    debug_log("All blueprints registered successfully", "STARTUP")


__all__ = ['main_bp', 'species_bp', 'users_bp', 'charts_bp', 'register_blueprints']
