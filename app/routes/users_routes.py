"""User directory routes."""

import logging

from flask import Blueprint, render_template
from flask_login import login_required

from app.services import profile_service
from app.supabase_client import SupabaseError
from app.utils.notifications import flash_backend_error

logger = logging.getLogger(__name__)

users_bp = Blueprint('users', __name__)


@users_bp.route('')
@login_required
def users_list():
    """Every profile, sorted by display name."""
    try:
        profiles = profile_service.list_profiles()
    except SupabaseError as e:
        logger.error(f"Error loading profiles: {e}")
        flash_backend_error(e)
        profiles = []
    return render_template('users/list.html', title='Users', profiles=profiles)
