import httpx
import pytest
from flask import session
from supabase import AuthApiError, PostgrestAPIError

from app.supabase_client import (
    AUTH_STORAGE_KEY,
    FlaskSessionStorage,
    SupabaseConnector,
    SupabaseError,
    execute,
    get_supabase,
    pop_code_verifier,
)
from conftest import USER_ID, auth_response


def _connector():
    return SupabaseConnector('https://example.supabase.co/', 'anon-key', timeout=5)


def test_client_uses_pkce_and_session_storage(app, fake_supabase):
    with app.test_request_context():
        _connector().create()
    created = fake_supabase.created[0]
    assert created['url'] == 'https://example.supabase.co'
    assert created['key'] == 'anon-key'
    options = created['options']
    assert options.flow_type == 'pkce'
    assert options.auto_refresh_token is False
    assert options.persist_session is False
    assert options.postgrest_client_timeout == 5
    assert isinstance(options.storage, FlaskSessionStorage)


def test_user_token_is_used_for_table_requests(app, fake_supabase):
    fake_supabase.queue([{'id': 1}])
    with app.test_request_context():
        response = execute(_connector().create('user-jwt').table('species').select('*'))
    assert response.data == [{'id': 1}]
    assert fake_supabase.calls[0]['token'] == 'user-jwt'


def test_get_supabase_is_anonymous_without_session(app, fake_supabase):
    fake_supabase.queue([])
    with app.test_request_context():
        execute(get_supabase().table('profiles').select('*'))
    assert fake_supabase.calls[0]['token'] is None


def test_missing_url_is_reported():
    with pytest.raises(SupabaseError, match='not configured'):
        SupabaseConnector('', 'anon-key').create()


def test_postgrest_error_keeps_backend_message(app, fake_supabase):
    fake_supabase.queue(PostgrestAPIError({'message': 'permission denied for table species', 'code': '42501'}))
    with app.test_request_context():
        with pytest.raises(SupabaseError) as excinfo:
            execute(_connector().create().table('species').select('*'))
    assert str(excinfo.value) == 'permission denied for table species'
    assert excinfo.value.code == '42501'


def test_network_failure_becomes_supabase_error(app, fake_supabase):
    fake_supabase.queue(httpx.ConnectError('connection refused'))
    with app.test_request_context():
        with pytest.raises(SupabaseError, match='Could not reach the backend'):
            execute(_connector().create().table('profiles').select('*'))


def test_sign_in_with_otp_credentials(app, fake_supabase):
    fake_supabase.queue(None)
    with app.test_request_context():
        _connector().sign_in_with_otp('ada@example.com', redirect_to='http://localhost/auth/callback')
    assert fake_supabase.auth_calls == [('sign_in_with_otp', {
        'email': 'ada@example.com',
        'options': {'should_create_user': True, 'email_redirect_to': 'http://localhost/auth/callback'},
    })]


def test_rate_limit_error_message(app, fake_supabase):
    fake_supabase.queue(AuthApiError('Email rate limit exceeded', 429, 'over_email_send_rate_limit'))
    with app.test_request_context():
        with pytest.raises(SupabaseError) as excinfo:
            _connector().sign_in_with_otp('ada@example.com')
    assert excinfo.value.message == 'Email rate limit exceeded'
    assert excinfo.value.status_code == 429


def test_exchange_code_for_session(app, fake_supabase):
    fake_supabase.queue(auth_response())
    with app.test_request_context():
        auth_session = _connector().exchange_code_for_session('auth-code', 'verifier')
    assert fake_supabase.auth_calls[0] == ('exchange_code_for_session',
                                           {'auth_code': 'auth-code', 'code_verifier': 'verifier'})
    assert auth_session.user.id == USER_ID
    assert auth_session.refresh_token == f'refresh-{USER_ID}'
    assert not auth_session.is_expired()


def test_response_without_session_is_an_error(app, fake_supabase):
    fake_supabase.queue(auth_response())
    fake_supabase.responses[0].session = None
    with app.test_request_context():
        with pytest.raises(SupabaseError, match='did not return a session'):
            _connector().verify_otp('hash', 'email')


def test_sign_out_revokes_user_token(app, fake_supabase):
    fake_supabase.queue(None)
    with app.test_request_context():
        _connector().sign_out('user-jwt')
    assert fake_supabase.auth_calls == [('admin.sign_out', 'user-jwt')]


def test_session_storage_and_code_verifier(app):
    storage = FlaskSessionStorage()
    with app.test_request_context():
        storage.set_item('supabase.auth.token-code-verifier', 'abc')
        assert storage.get_item('supabase.auth.token-code-verifier') == 'abc'
        assert pop_code_verifier() == 'abc'
        assert pop_code_verifier() is None
        storage.set_item('other', 'x')
        storage.remove_item('other')
        assert session[AUTH_STORAGE_KEY] == {}
