from fastapi.testclient import TestClient
from collegehub.main import app

client = TestClient(app)


def test_register_login_and_protected_endpoint():
    r = client.post('/auth/register', json={'username': 'testuser', 'password': 'pass123'})
    assert r.status_code == 200
    # registering again is idempotent
    again = client.post('/auth/register', json={'username': 'testuser', 'password': 'pass123'})
    assert again.json()['id'] == r.json()['id']
    r2 = client.post('/auth/login', json={'username': 'testuser', 'password': 'pass123'})
    assert r2.status_code == 200
    token = r2.json()['access_token']
    # protected endpoint rejects missing token
    r3 = client.post('/api/colleges', json={'name': 'Trinity'})
    assert r3.status_code == 401
    r4 = client.post('/api/colleges', json={'name': 'Trinity'}, headers={'Authorization': f'Bearer {token}'})
    assert r4.status_code == 201
    assert r4.json()['name'] == 'Trinity'
    listed = client.get('/api/colleges').json()
    assert [c['name'] for c in listed] == ['Trinity']


def test_login_rejects_wrong_password():
    client.post('/auth/register', json={'username': 'alice', 'password': 'right'})
    r = client.post('/auth/login', json={'username': 'alice', 'password': 'wrong'})
    assert r.status_code == 401


def test_garbage_token_is_rejected():
    r = client.post('/api/colleges', json={'name': 'X'}, headers={'Authorization': 'Bearer not-a-jwt'})
    assert r.status_code == 401


def test_health_and_request_id():
    r = client.get('/health', headers={'X-Request-ID': 'abc123'})
    assert r.status_code == 200
    assert r.json() == {'status': 'ok'}
    assert r.headers['X-Request-ID'] == 'abc123'
