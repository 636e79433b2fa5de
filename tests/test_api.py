"""HTTP-level tests for the routers, using a recording pool."""

from datetime import datetime, timedelta, timezone
from decimal import Decimal

import pytest
from fastapi.testclient import TestClient
from jose import jwt

import auth
from api import app
from config import settings_conf
from database import get_pool
from tests.conftest import ACCOUNT_ID, FakePool

@pytest.fixture
def pool():
    pool = FakePool()
    app.dependency_overrides[get_pool] = lambda: pool
    yield pool
    app.dependency_overrides.clear()

@pytest.fixture
def client(pool):
    # Not used as a context manager, so the lifespan never opens a real pool
    return TestClient(app)

@pytest.fixture
def auth_headers():
    token = auth.manager.issue_tokens('web-app')['accessToken']
    return {'Authorization': f'Bearer {token}'}

def _summary_row(dapp_id, name, ratings):
    return {
        'dapp_id': dapp_id, 'name': name, 'chains': 'ethereum', 'categories': 'DeFi',
        'logo': None, 'link': None, 'ratings': ratings
    }

# Authentication gate

def test_search_requires_token(client, pool):
    response = client.get('/dapp-search')

    assert response.status_code == 401
    assert response.json() == {
        'success': False,
        'error': 'Access token required',
        'message': 'Please provide a valid access token in the Authorization header'
    }
    assert pool.calls == []

def test_search_rejects_invalid_token(client, pool):
    response = client.get('/dapp-search', headers={'Authorization': 'Bearer not-a-jwt'})

    assert response.status_code == 403
    assert response.json()['error'] == 'Invalid token'
    assert pool.calls == []

def test_search_rejects_expired_token(client):
    token = jwt.encode(
        {
            'clientId': 'web-app', 'type': 'access',
            'iss': settings_conf['jwt_issuer'], 'aud': settings_conf['jwt_audience'],
            'exp': int((datetime.now(timezone.utc) - timedelta(minutes=1)).timestamp())
        },
        settings_conf['jwt_secret'],
        algorithm='HS256'
    )
    response = client.get('/dapp-search', headers={'Authorization': f'Bearer {token}'})

    assert response.status_code == 401
    assert response.json()['error'] == 'Token expired'

def test_details_rejects_refresh_token(client):
    token = auth.manager.issue_tokens('web-app')['refreshToken']
    response = client.get('/api/dapps/7', headers={'Authorization': f'Bearer {token}'})
    assert response.status_code == 403

# Search

def test_search(client, pool, auth_headers):
    pool.queue([_summary_row(1, 'Swapper', Decimal('4.5'))])

    response = client.get(
        '/dapp-search?category=DeFi&category=Gaming,NFT&limit=abc&page=1',
        headers=auth_headers
    )

    assert response.status_code == 200
    body = response.json()
    assert body['success'] is True
    assert body['data'][0]['name'] == 'Swapper'
    assert body['data'][0]['chains'] == ['ethereum']
    assert body['data'][0]['ratings'] == 4.5
    assert body['pagination'] == {'page': 1, 'limit': 20, 'count': 1}

    _, _, args = pool.calls[0]
    assert list(args[:3]) == ['DeFi', 'Gaming', 'NFT']
    assert list(args[-2:]) == [20, 0]

def test_search_empty_result(client, pool, auth_headers):
    response = client.get('/dapp-search?page=99', headers=auth_headers)

    assert response.status_code == 200
    assert response.json()['data'] == []

def test_search_huge_page_is_empty(client, pool, auth_headers):
    response = client.get('/dapp-search?page=99999999999999999999', headers=auth_headers)

    assert response.status_code == 200
    assert response.json()['data'] == []
    _, _, args = pool.calls[0]
    assert 0 <= args[-1] <= 2**63 - 1

def test_search_store_failure_is_generic_500(client, pool, auth_headers):
    pool.queue(ConnectionRefusedError("password authentication failed for user geode"))

    response = client.get('/dapp-search', headers=auth_headers)

    assert response.status_code == 500
    body = response.json()
    assert body['success'] is False
    assert 'geode' not in body['message']

# Details

def test_details_invalid_id(client, pool, auth_headers):
    response = client.get('/api/dapps/abc', headers=auth_headers)

    assert response.status_code == 400
    assert response.json() == {
        'success': False,
        'error': 'Invalid dapp_id parameter',
        'message': 'dapp_id must be a positive integer'
    }
    assert pool.calls == []

def test_details_not_found(client, pool, auth_headers):
    response = client.get('/api/dapps/999', headers=auth_headers)

    assert response.status_code == 404
    assert response.json()['error'] == 'Dapp not found'
    assert response.json()['message'] == 'No DApp exists with the given dapp_id'

@pytest.mark.parametrize("dapp_id", ['9223372036854775808', '99999999999999999999', '\u0661\u0662\u0663'])
def test_details_unbindable_id_is_rejected(client, pool, auth_headers, dapp_id):
    """Ids that cannot be bound as INT8 never reach the store."""
    response = client.get(f'/api/dapps/{dapp_id}', headers=auth_headers)

    assert response.status_code == 400
    assert pool.calls == []

def test_details_largest_int8_id_is_not_found(client, pool, auth_headers):
    response = client.get('/api/dapps/9223372036854775807', headers=auth_headers)

    assert response.status_code == 404
    assert pool.calls[0][2] == (9223372036854775807,)

def test_details(client, pool, auth_headers):
    pool.queue([{
        'name': 'Swapper', 'description': 'd', 'full_description': 'fd',
        'logo': None, 'website': None, 'chains': 'ethereum', 'categories': 'DeFi',
        'social_links': None, 'tags': None, 'smartcontract': '0xabc',
        'balance': Decimal('10'), 'transactions': 3, 'uaw': 2, 'volume': Decimal('1.5'),
        'link': 'https://r.io', 'platform': 'reddit', 'review': 'ok',
        'ratings': Decimal('4.0'), 'summarized_review': 'fine'
    }])

    response = client.get('/api/dapps/7', headers=auth_headers)

    assert response.status_code == 200
    data = response.json()['data']
    assert data['metrics']['volume'] == 1.5
    assert data['reviews'] == {'reddit': {'review': 'ok', 'link': 'https://r.io'}}
    assert data['social_links'] == []

# Favorites

def test_add_favorite_created_then_unchanged(client, pool):
    pool.queue(True, {'fav_dapp_id': [123], 'inserted': True})
    response = client.post('/api/favorites', json={'accountId': ACCOUNT_ID, 'dappId': 123})

    assert response.status_code == 201
    assert response.json() == {
        'success': True,
        'message': 'Favorite added successfully',
        'data': {'accountId': ACCOUNT_ID, 'favorites': [123]}
    }

    pool.queue(True, None, [123])
    response = client.post('/api/favorites', json={'accountId': ACCOUNT_ID, 'dappId': '123'})

    assert response.status_code == 200
    assert response.json()['message'] == 'DApp already in favorites'
    assert response.json()['data']['favorites'] == [123]

@pytest.mark.parametrize("body", [
    {'dappId': 1},
    {'accountId': 'short', 'dappId': 1},
    {'accountId': ACCOUNT_ID},
    {'accountId': ACCOUNT_ID, 'dappId': -4},
    {'accountId': ACCOUNT_ID, 'dappId': True},
    {'accountId': ACCOUNT_ID, 'dappId': 1e20},
    {'accountId': ACCOUNT_ID, 'dappId': '99999999999999999999'},
])
def test_add_favorite_invalid(client, pool, body):
    response = client.post('/api/favorites', json=body)

    assert response.status_code == 400
    assert response.json()['success'] is False
    assert response.json()['message']
    assert pool.calls == []

def test_add_favorite_unknown_dapp(client, pool):
    pool.queue(False)
    response = client.post('/api/favorites', json={'accountId': ACCOUNT_ID, 'dappId': 5})

    assert response.status_code == 404
    assert response.json() == {
        'success': False,
        'error': 'DApp not found',
        'message': 'No DApp exists with the given dappId'
    }

def test_remove_favorite(client, pool):
    pool.queue({'fav_dapp_id': []})
    response = client.request(
        'DELETE', '/api/favorites?removeEmpty=true',
        json={'accountId': ACCOUNT_ID, 'dappId': 123}
    )

    assert response.status_code == 200
    assert response.json()['message'] == 'Favorite removed successfully'
    assert response.json()['data']['favorites'] == []
    assert 'DELETE FROM userprefs' in pool.calls[1][1]

def test_remove_favorite_not_present(client, pool):
    pool.queue(None, {'fav_dapp_id': [9]})
    response = client.request('DELETE', '/api/favorites', json={'accountId': ACCOUNT_ID, 'dappId': 123})

    assert response.status_code == 200
    assert response.json()['message'] == 'DApp not in favorites'
    assert response.json()['data']['favorites'] == [9]

def test_remove_favorite_unknown_account(client, pool):
    pool.queue(None, None)
    response = client.request('DELETE', '/api/favorites', json={'accountId': ACCOUNT_ID, 'dappId': 123})

    assert response.status_code == 404
    assert response.json()['error'] == 'Account not found in favorites'

def test_list_favorites_unknown_account(client, pool):
    response = client.get(f'/api/favorites/{ACCOUNT_ID}')

    assert response.status_code == 200
    assert response.json() == {'success': True, 'data': {'accountId': ACCOUNT_ID, 'favorites': []}}

def test_list_favorites_with_details(client, pool):
    pool.queue([3], [_summary_row(3, 'Alpha', 0) | {'description': None, 'website': None}])
    response = client.get(f'/api/favorites/{ACCOUNT_ID}?includeDetails=true')

    data = response.json()['data']
    assert data['favorites'] == [3]
    assert data['dappDetails'][0]['name'] == 'Alpha'

def test_list_favorites_invalid_account(client, pool):
    response = client.get('/api/favorites/not-valid')

    assert response.status_code == 400
    assert pool.calls == []

def test_check_favorite(client, pool):
    pool.queue(True)
    response = client.get(f'/api/favorites/{ACCOUNT_ID}/123')

    assert response.status_code == 200
    assert response.json()['data'] == {'accountId': ACCOUNT_ID, 'dappId': 123, 'isFavorited': True}

def test_check_favorite_invalid_dapp(client, pool):
    response = client.get(f'/api/favorites/{ACCOUNT_ID}/abc')

    assert response.status_code == 400
    assert response.json()['error'] == 'Invalid dappId'

# Token endpoints

def test_generate_token_missing_credentials(client):
    response = client.post('/auth/generate-token', json={'clientId': 'web-app'})

    assert response.status_code == 400
    assert response.json()['error'] == 'Missing credentials'

def test_generate_token_unknown_client(client, pool):
    pool.queue(None)
    response = client.post('/auth/generate-token', json={'clientId': 'x', 'clientSecret': 'y'})

    assert response.status_code == 401
    assert response.json()['error'] == 'Invalid credentials'

def test_refresh_and_validate(client):
    refresh = auth.manager.issue_tokens('web-app')['refreshToken']
    response = client.post('/auth/refresh-token', json={'refreshToken': refresh})

    assert response.status_code == 200
    access = response.json()['data']['accessToken']

    response = client.post('/auth/validate-token', headers={'Authorization': f'Bearer {access}'})
    assert response.json()['data'] == {'valid': True, 'clientId': 'web-app', 'type': 'access'}

def test_refresh_rejects_access_token(client, auth_headers):
    access = auth_headers['Authorization'].split(' ')[1]
    response = client.post('/auth/refresh-token', json={'refreshToken': access})
    assert response.status_code == 403

def test_root(client):
    assert client.get('/').json()['status'] == 'running'

def test_unknown_route_uses_envelope(client):
    response = client.get('/no-such-route')

    assert response.status_code == 404
    body = response.json()
    assert body['success'] is False
    assert body['error'] == 'Not Found'
    assert body['message']
