"""
Template context processors for making common objects available in templates.
"""

from flask import current_app
from flask_login import current_user

from app.navigation import build_nav_links


def inject_site_name():
    """Make site name available in all templates."""
    return {'site_name': current_app.config.get('SITE_NAME', 'Biodiversity Hub')}


def inject_navigation():
    """Navigation links depend only on whether someone is signed in."""
    try:
        is_authenticated = bool(current_user and current_user.is_authenticated)
    except Exception:
        is_authenticated = False
    return {'nav_links': build_nav_links(is_authenticated)}


def register_context_processors(app):
    """Register all context processors with the Flask app."""
    app.context_processor(inject_site_name)
    app.context_processor(inject_navigation)
