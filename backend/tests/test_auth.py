import uuid

from donation_admin.modules.auth.service import create_access_token, create_refresh_token


def test_login_success(client, admin_user, user_password):
    response = client.post(
        '/api/auth/login',
        json={'email': 'ADMIN@doacoes.org', 'password': user_password},
    )

    assert response.status_code == 200
    body = response.json()
    assert body['access_token']
    assert body['refresh_token']
    assert body['token_type'] == 'bearer'


def test_login_invalid_password(client, admin_user):
    response = client.post(
        '/api/auth/login',
        json={'email': 'admin@doacoes.org', 'password': 'errada'},
    )

    assert response.status_code == 401
    assert response.json() == {'success': False, 'message': 'Credenciais invalidas'}


def test_login_inactive_user(client, make_user, user_password):
    make_user('bloqueado@doacoes.org', is_active=False)

    response = client.post(
        '/api/auth/login',
        json={'email': 'bloqueado@doacoes.org', 'password': user_password},
    )

    assert response.status_code == 401


def test_login_malformed_email_returns_400(client):
    response = client.post('/api/auth/login', json={'email': 'nao-e-email', 'password': 'x'})

    assert response.status_code == 400


def test_me_returns_current_user(client, donor_headers, donor_user):
    response = client.get('/api/auth/me', headers=donor_headers)

    assert response.status_code == 200
    body = response.json()
    assert body['id'] == str(donor_user.id)
    assert body['role'] == 'donor'


def test_me_rejects_refresh_token(client, donor_user):
    token = create_refresh_token(str(donor_user.id))

    response = client.get('/api/auth/me', headers={'Authorization': f'Bearer {token}'})

    assert response.status_code == 401


def test_me_rejects_unknown_user(client, db_session):
    token = create_access_token(str(uuid.uuid4()))

    response = client.get('/api/auth/me', headers={'Authorization': f'Bearer {token}'})

    assert response.status_code == 401


def test_me_rejects_garbage_token(client, db_session):
    response = client.get('/api/auth/me', headers={'Authorization': 'Bearer nao.e.jwt'})

    assert response.status_code == 401


def test_refresh_issues_new_tokens(client, donor_user):
    token = create_refresh_token(str(donor_user.id))

    response = client.post('/api/auth/refresh', json={'refresh_token': token})

    assert response.status_code == 200
    assert response.json()['access_token']
