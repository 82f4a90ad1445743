import time
from types import SimpleNamespace

import pytest
import requests

from app import create_app
from app.auth_session import SESSION_KEY
from config import TestingConfig

USER_ID = '11111111-1111-1111-1111-111111111111'
OTHER_USER_ID = '22222222-2222-2222-2222-222222222222'


class DummyResponse:
    """Stand-in for ``requests.Response`` with just what the app reads."""

    def __init__(self, payload=None, status_code=200, reason='OK'):
        self._payload = payload
        self.status_code = status_code
        self.reason = reason

    @property
    def ok(self):
        return self.status_code < 400

    def json(self):
        if self._payload is None:
            raise ValueError("No JSON body")
        return self._payload

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.HTTPError(f"status {self.status_code}")


class FakeQuery:
    """Records a PostgREST call chain (``table().select().eq()...``)."""

    def __init__(self, backend, table, token):
        self.backend = backend
        self.call = {'table': table, 'token': token, 'ops': []}

    def _op(self, name, *args, **kwargs):
        self.call['ops'].append((name, args, kwargs))
        return self

    def select(self, *args, **kwargs):
        return self._op('select', *args, **kwargs)

    def insert(self, *args, **kwargs):
        return self._op('insert', *args, **kwargs)

    def update(self, *args, **kwargs):
        return self._op('update', *args, **kwargs)

    def delete(self, *args, **kwargs):
        return self._op('delete', *args, **kwargs)

    def eq(self, *args, **kwargs):
        return self._op('eq', *args, **kwargs)

    def order(self, *args, **kwargs):
        return self._op('order', *args, **kwargs)

    def limit(self, *args, **kwargs):
        return self._op('limit', *args, **kwargs)

    def execute(self):
        self.backend.calls.append(self.call)
        return self.backend.next_response()


class FakeAuth:
    def __init__(self, backend):
        self.backend = backend
        self.admin = SimpleNamespace(sign_out=lambda jwt, scope='global': backend.auth_call('admin.sign_out', jwt))

    def sign_in_with_otp(self, credentials):
        return self.backend.auth_call('sign_in_with_otp', credentials)

    def exchange_code_for_session(self, params):
        return self.backend.auth_call('exchange_code_for_session', params)

    def verify_otp(self, params):
        return self.backend.auth_call('verify_otp', params)

    def refresh_session(self, refresh_token=None):
        return self.backend.auth_call('refresh_session', refresh_token)


class FakeClient:
    def __init__(self, backend):
        self.backend = backend
        self.token = None
        self.auth = FakeAuth(backend)
        self.postgrest = SimpleNamespace(auth=self._set_token)

    def _set_token(self, token):
        self.token = token

    def table(self, name):
        return FakeQuery(self.backend, name, self.token)


class FakeSupabase:
    """Replaces ``supabase.create_client``; answers calls from a queue.

    Queued lists become query results (``response.data``), exceptions are
    raised, anything else is returned as-is (auth responses).
    """

    def __init__(self):
        self.responses = []
        self.calls = []
        self.auth_calls = []
        self.created = []

    def create_client(self, url, key, options=None):
        self.created.append({'url': url, 'key': key, 'options': options})
        return FakeClient(self)

    def queue(self, *responses):
        self.responses.extend(responses)

    def auth_call(self, name, argument):
        self.auth_calls.append((name, argument))
        return self.next_response()

    def next_response(self):
        if not self.responses:
            raise AssertionError("Unexpected backend call")
        response = self.responses.pop(0)
        if isinstance(response, Exception):
            raise response
        if isinstance(response, list):
            return SimpleNamespace(data=response)
        return response


def species_row(species_id=1, author=USER_ID, **overrides):
    row = {
        'id': species_id,
        'scientific_name': 'Cavia porcellus',
        'common_name': 'Guinea pig',
        'kingdom': 'Animalia',
        'total_population': 300000,
        'image': None,
        'description': 'A species of rodent belonging to the genus Cavia in the family Caviidae.',
        'endangered': False,
        'author': author,
        'profiles': {'display_name': 'Ada', 'email': 'ada@example.com'},
    }
    row.update(overrides)
    return row


def auth_response(user_id=USER_ID, email='ada@example.com', access_token=None, expires_in=3600):
    """Shape of supabase-py's AuthResponse as read by the app."""
    user = SimpleNamespace(id=user_id, email=email, user_metadata={})
    session = SimpleNamespace(
        access_token=access_token or f'access-{user_id}',
        refresh_token=f'refresh-{user_id}',
        expires_in=expires_in,
        expires_at=None,
        token_type='bearer',
        user=user,
    )
    return SimpleNamespace(session=session, user=user)


@pytest.fixture
def app():
    app = create_app(TestingConfig)
    return app


@pytest.fixture
def fake_supabase(app, monkeypatch):
    backend = FakeSupabase()
    monkeypatch.setattr('app.supabase_client.create_client', backend.create_client)
    return backend


@pytest.fixture
def login(client):
    """Put a signed-in backend session into the test client's cookie session."""

    def _login(user_id=USER_ID, email='ada@example.com', expires_at=None):
        with client.session_transaction() as sess:
            sess[SESSION_KEY] = {
                'access_token': f'access-{user_id}',
                'refresh_token': f'refresh-{user_id}',
                'expires_at': expires_at or int(time.time()) + 3600,
                'user': {'id': user_id, 'email': email, 'user_metadata': {}},
            }
            sess['_user_id'] = user_id
            sess['_fresh'] = True
        return user_id

    return _login


def flashed(client):
    """Flashed toast dicts still waiting in the session."""
    with client.session_transaction() as sess:
        return [message for _category, message in sess.get('_flashes', [])]
