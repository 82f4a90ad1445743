"""
Server-side access to the backend session.

The backend tokens live in the Flask session (stored server side by
Flask-Session). ``get_current_session`` is the accessor protected pages go
through: it refreshes expired tokens and drops sessions the backend no
longer accepts.
"""

import logging
from typing import Optional

from flask import session, current_app

from .domain.models import AuthSession

logger = logging.getLogger(__name__)

SESSION_KEY = 'sb_session'
REFRESH_LEEWAY_SECONDS = 60


def store_session(auth_session: AuthSession) -> None:
    session[SESSION_KEY] = auth_session.to_dict()


def load_session() -> Optional[AuthSession]:
    data = session.get(SESSION_KEY)
    if not data:
        return None
    try:
        return AuthSession.from_dict(data)
    except (KeyError, TypeError, ValueError) as e:
        logger.warning(f"Discarding malformed backend session: {e}")
        session.pop(SESSION_KEY, None)
        return None


def clear_session() -> None:
    from .supabase_client import AUTH_STORAGE_KEY
    session.pop(SESSION_KEY, None)
    session.pop(AUTH_STORAGE_KEY, None)


def get_current_session() -> Optional[AuthSession]:
    """Return the signed-in backend session, refreshing it when expired."""
    from .supabase_client import SupabaseError

    auth_session = load_session()
    if auth_session is None:
        return None
    if not auth_session.is_expired(REFRESH_LEEWAY_SECONDS):
        return auth_session

    if not auth_session.refresh_token:
        clear_session()
        return None

    connector = current_app.extensions['supabase']
    try:
        refreshed = connector.refresh_session(auth_session.refresh_token)
    except SupabaseError as e:
        logger.info(f"Session refresh failed for user {auth_session.user.id}: {e}")
        clear_session()
        return None

    store_session(refreshed)
    logger.debug(f"Refreshed backend session for user {refreshed.user.id}")
    return refreshed
