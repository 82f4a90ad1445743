"""
Hosted backend access.

The application talks to Supabase through supabase-py: GoTrue for
passwordless sign-in and sessions, PostgREST for table reads and writes.
Row level security is enforced by the backend; table requests carry the
signed-in user's JWT so the policies apply to that user.

A client is built per request. Its auth storage lives in the Flask session,
so the PKCE code verifier written when the sign-in email is requested is
still there when the link comes back to ``/auth/callback``.
"""

import logging
from typing import Any, Dict, Optional

import httpx
from flask import current_app, has_request_context, session
from supabase import AuthError, ClientOptions, PostgrestAPIError, create_client

from .domain.models import AuthSession

logger = logging.getLogger(__name__)

AUTH_STORAGE_KEY = 'sb_auth_storage'
CODE_VERIFIER_SUFFIX = '-code-verifier'


class SupabaseError(Exception):
    """Raised when the backend rejects a request or cannot be reached."""

    def __init__(self, message: str, status_code: Optional[int] = None, code: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.code = code

    def __str__(self) -> str:
        return self.message

    @classmethod
    def from_exception(cls, error: Exception) -> 'SupabaseError':
        """Wrap a supabase-py (or transport) error, keeping the backend's message."""
        if isinstance(error, PostgrestAPIError):
            message = error.message or error.details or "Backend request failed"
            return cls(message, code=error.code)
        if isinstance(error, AuthError):
            return cls(
                error.message or "Authentication request failed",
                status_code=getattr(error, 'status', None),
                code=getattr(error, 'code', None),
            )
        return cls(f"Could not reach the backend: {error}")


BACKEND_ERRORS = (PostgrestAPIError, AuthError, httpx.HTTPError)


def execute(query):
    """Run a PostgREST request, translating library errors to SupabaseError."""
    try:
        return query.execute()
    except BACKEND_ERRORS as e:
        logger.warning(f"[SUPABASE] Query failed: {e}")
        raise SupabaseError.from_exception(e) from e


class FlaskSessionStorage:
    """supabase-py auth storage backed by the visitor's Flask session."""

    def get_item(self, key: str) -> Optional[str]:
        return (session.get(AUTH_STORAGE_KEY) or {}).get(key)

    def set_item(self, key: str, value: str) -> None:
        items = dict(session.get(AUTH_STORAGE_KEY) or {})
        items[key] = value
        session[AUTH_STORAGE_KEY] = items

    def remove_item(self, key: str) -> None:
        items = dict(session.get(AUTH_STORAGE_KEY) or {})
        if items.pop(key, None) is not None:
            session[AUTH_STORAGE_KEY] = items


def pop_code_verifier() -> Optional[str]:
    """Take the PKCE verifier stored when the sign-in email was requested."""
    items = dict(session.get(AUTH_STORAGE_KEY) or {})
    for key in list(items):
        if key.endswith(CODE_VERIFIER_SUFFIX):
            verifier = items.pop(key)
            session[AUTH_STORAGE_KEY] = items
            return verifier
    return None


def _to_auth_session(response) -> AuthSession:
    auth = getattr(response, 'session', None)
    if auth is None:
        raise SupabaseError("The backend did not return a session.")
    user = auth.user
    return AuthSession.from_token_response({
        'access_token': auth.access_token,
        'refresh_token': auth.refresh_token,
        'expires_at': auth.expires_at,
        'expires_in': auth.expires_in,
        'user': {
            'id': user.id,
            'email': user.email,
            'user_metadata': user.user_metadata or {},
        },
    })


class SupabaseConnector:
    """Builds supabase-py clients and runs the auth calls the app needs."""

    def __init__(self, url: str, anon_key: str, timeout: float = 10.0):
        self.url = (url or '').rstrip('/')
        self.anon_key = anon_key
        self.timeout = timeout

    def create(self, access_token: Optional[str] = None):
        """New client; table requests are authorized as ``access_token`` when given."""
        if not self.url or not self.anon_key:
            raise SupabaseError("Backend URL is not configured")
        options: Dict[str, Any] = {
            'flow_type': 'pkce',
            'auto_refresh_token': False,
            'persist_session': False,
            'postgrest_client_timeout': self.timeout,
        }
        if has_request_context():
            options['storage'] = FlaskSessionStorage()
        client = create_client(self.url, self.anon_key, options=ClientOptions(**options))
        if access_token:
            client.postgrest.auth(access_token)
        return client

    def _auth_call(self, name: str, call):
        try:
            return call(self.create().auth)
        except BACKEND_ERRORS as e:
            logger.warning(f"[SUPABASE] auth.{name} failed: {e}")
            raise SupabaseError.from_exception(e) from e

    def sign_in_with_otp(self, email: str, redirect_to: Optional[str] = None) -> None:
        """Send a passwordless sign-in link to ``email``."""
        options: Dict[str, Any] = {'should_create_user': True}
        if redirect_to:
            options['email_redirect_to'] = redirect_to
        self._auth_call('sign_in_with_otp', lambda auth: auth.sign_in_with_otp({
            'email': email,
            'options': options,
        }))

    def exchange_code_for_session(self, auth_code: str, code_verifier: str) -> AuthSession:
        response = self._auth_call('exchange_code_for_session', lambda auth: auth.exchange_code_for_session({
            'auth_code': auth_code,
            'code_verifier': code_verifier,
        }))
        return _to_auth_session(response)

    def verify_otp(self, token_hash: str, otp_type: str = 'email') -> AuthSession:
        response = self._auth_call('verify_otp', lambda auth: auth.verify_otp({
            'token_hash': token_hash,
            'type': otp_type,
        }))
        return _to_auth_session(response)

    def refresh_session(self, refresh_token: str) -> AuthSession:
        response = self._auth_call('refresh_session', lambda auth: auth.refresh_session(refresh_token))
        return _to_auth_session(response)

    def sign_out(self, access_token: str) -> None:
        """Revoke the user's refresh tokens on the backend."""
        self._auth_call('sign_out', lambda auth: auth.admin.sign_out(access_token))


def init_supabase(app) -> SupabaseConnector:
    """Register the backend connector on ``app.extensions``."""
    if not app.config.get('SUPABASE_URL') or not app.config.get('SUPABASE_ANON_KEY'):
        app.logger.warning("SUPABASE_URL / SUPABASE_ANON_KEY are not set; backend calls will fail")
    connector = SupabaseConnector(
        app.config.get('SUPABASE_URL', ''),
        app.config.get('SUPABASE_ANON_KEY', ''),
        timeout=app.config.get('SUPABASE_TIMEOUT', 10.0),
    )
    app.extensions['supabase'] = connector
    return connector


def get_supabase():
    """Client for the current request, bound to the signed-in user's token when there is one."""
    connector = current_app.extensions['supabase']
    access_token = None
    if has_request_context():
        from .auth_session import load_session
        auth_session = load_session()
        if auth_session is not None:
            access_token = auth_session.access_token
    return connector.create(access_token)
