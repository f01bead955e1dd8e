from sqlalchemy.exc import OperationalError

from donation_admin.main import app
from donation_admin.modules.settings.defaults import DEFAULT_SETTINGS
from donation_admin.modules.settings.repository import SettingRepository
from donation_admin.modules.settings.router import get_setting_repository


def test_settings_requires_token(client):
    response = client.get('/api/settings')

    assert response.status_code == 401
    assert response.json()['success'] is False


def test_settings_forbidden_for_non_admin(client, donor_headers):
    response = client.get('/api/settings', headers=donor_headers)

    assert response.status_code == 403
    assert response.json() == {
        'success': False,
        'message': 'Permissao insuficiente para esta acao',
    }


def test_upsert_then_get_category(client, admin_headers):
    first = client.put(
        '/api/settings',
        json={'category': 'branding', 'values': {'logo_url': '/x.png'}},
        headers=admin_headers,
    )
    assert first.status_code == 200
    assert first.json()['values'] == {'logo_url': '/x.png'}

    client.put(
        '/api/settings',
        json={'category': 'branding', 'values': {'primary_color': '#000'}},
        headers=admin_headers,
    )

    response = client.get('/api/settings/branding', headers=admin_headers)
    assert response.status_code == 200
    body = response.json()
    assert body['success'] is True
    assert body['category'] == 'branding'
    assert body['values'] == {'primary_color': '#000'}


def test_upsert_preserves_scalar_types(client, admin_headers):
    values = {'smtp_port': 465, 'smtp_secure': True, 'ratio': 0.5, 'from_email': 'a@b.org', 'reply_to': None}
    client.put('/api/settings', json={'category': 'email', 'values': values}, headers=admin_headers)

    response = client.get('/api/settings/email', headers=admin_headers)
    assert response.json()['values'] == values


def test_upsert_malformed_payload_returns_400(client, admin_headers):
    response = client.put(
        '/api/settings',
        json={'category': 'branding', 'values': ['not', 'an', 'object']},
        headers=admin_headers,
    )

    assert response.status_code == 400
    body = response.json()
    assert body['success'] is False
    assert body['errors']


def test_upsert_missing_category_returns_400(client, admin_headers):
    response = client.put('/api/settings', json={'values': {'a': 1}}, headers=admin_headers)

    assert response.status_code == 400


def test_get_unknown_category_returns_404(client, admin_headers):
    response = client.get('/api/settings/unknown', headers=admin_headers)

    assert response.status_code == 404
    assert response.json()['success'] is False


def test_get_all_includes_defaults(client, admin_headers):
    client.put('/api/settings', json={'category': 'custom', 'values': {'x': 1}}, headers=admin_headers)

    response = client.get('/api/settings', headers=admin_headers)

    assert response.status_code == 200
    settings = response.json()['settings']
    assert settings['custom'] == {'x': 1}
    assert settings['security'] == dict(DEFAULT_SETTINGS['security'])


def test_get_defaults_is_not_shadowed_by_category_route(client, admin_headers):
    response = client.get('/api/settings/defaults', headers=admin_headers)

    assert response.status_code == 200
    assert set(response.json()['settings']) == set(DEFAULT_SETTINGS)


def test_reset_category(client, admin_headers):
    client.put('/api/settings', json={'category': 'features', 'values': {'enable_comments': False}}, headers=admin_headers)

    response = client.put('/api/settings/features/reset', headers=admin_headers)

    assert response.status_code == 200
    assert response.json()['values'] == dict(DEFAULT_SETTINGS['features'])


def test_reset_custom_category_returns_404(client, admin_headers):
    client.put('/api/settings', json={'category': 'custom', 'values': {'x': 1}}, headers=admin_headers)

    response = client.put('/api/settings/custom/reset', headers=admin_headers)

    assert response.status_code == 404


def test_bulk_upsert(client, admin_headers):
    response = client.put(
        '/api/settings/bulk',
        json={'categories': {'branding': {'primary_color': '#abc'}, 'legal': {'terms_url': '/termos'}}},
        headers=admin_headers,
    )

    assert response.status_code == 200
    body = response.json()
    assert body['success'] is True
    assert sorted(body['updated_categories']) == ['branding', 'legal']
    assert body['failed_categories'] == {}

    legal = client.get('/api/settings/legal', headers=admin_headers).json()
    assert legal['values'] == {'terms_url': '/termos'}


def test_bulk_upsert_malformed_payload_writes_nothing(client, admin_headers):
    response = client.put(
        '/api/settings/bulk',
        json={'categories': {'branding': {'primary_color': '#abc'}, 'legal': 'oops'}},
        headers=admin_headers,
    )

    assert response.status_code == 400
    branding = client.get('/api/settings/branding', headers=admin_headers).json()
    assert branding['values'] == dict(DEFAULT_SETTINGS['branding'])


def test_bulk_upsert_partial_failure_returns_207(client, admin_headers, db_session):

    class PaymentFailsRepository(SettingRepository):
        def upsert(self, category, encrypted_values, updated_by=None):
            if category == 'payment':
                raise OperationalError('UPDATE settings', {}, Exception('lock timeout'))
            return super().upsert(category, encrypted_values, updated_by)

    app.dependency_overrides[get_setting_repository] = lambda: PaymentFailsRepository(db_session)

    response = client.put(
        '/api/settings/bulk',
        json={'categories': {'branding': {'primary_color': '#abc'}, 'payment': {'currency': 'BRL'}}},
        headers=admin_headers,
    )

    assert response.status_code == 207
    body = response.json()
    assert body['success'] is False
    assert body['updated_categories'] == ['branding']
    assert list(body['failed_categories']) == ['payment']


def test_settings_writes_are_audited(client, admin_headers, admin_user):
    client.put('/api/settings', json={'category': 'branding', 'values': {'a': 'b'}}, headers=admin_headers)

    response = client.get(
        '/api/audit-logs',
        params={'action': 'admin_update_settings'},
        headers=admin_headers,
    )

    assert response.status_code == 200
    body = response.json()
    assert body['total'] == 1
    item = body['items'][0]
    assert item['user_id'] == str(admin_user.id)
    assert item['resource_type'] == 'settings'
    assert item['details'] == {'category': 'branding', 'settings_keys': ['a']}


def test_public_settings_without_auth(client, admin_headers):
    client.put(
        '/api/settings',
        json={'category': 'payment', 'values': {'razorpay_key_secret': 'sk_live_999'}},
        headers=admin_headers,
    )

    response = client.get('/api/public/settings')

    assert response.status_code == 200
    body = response.json()
    assert body['success'] is True
    assert body['settings']['theme']['primary_color'] == '#007bff'
    assert 'sk_live_999' not in response.text


def test_upsert_round_trips_whitespace_and_newlines(client, admin_headers):
    values = {'tagline': '  Doe agora  ', 'footer': 'linha\n'}

    client.put('/api/settings', json={'category': 'branding', 'values': values}, headers=admin_headers)

    response = client.get('/api/settings/branding', headers=admin_headers)
    assert response.json()['values'] == values


def test_upsert_rejects_padded_keys(client, admin_headers):
    response = client.put(
        '/api/settings',
        json={'category': 'branding', 'values': {' a': 1, 'a': 2}},
        headers=admin_headers,
    )

    assert response.status_code == 400
