from decimal import Decimal

import pytest

from donation_admin.modules.campaigns.repository import CampaignRepository
from donation_admin.modules.share_links.service import LINK_NOT_FOUND_MESSAGE, RESOURCE_NOT_FOUND_MESSAGE


@pytest.fixture
def campaign(db_session, admin_user):
    return CampaignRepository(db_session).create({
        'title': 'Agua para todos',
        'description': 'Pocos artesianos no sertao',
        'goal_amount': Decimal('50000.00'),
        'approval_status': 'approved',
        'is_active': True,
        'created_by': admin_user.id,
    })


def _share_profile(client, headers, user_id):
    return client.post(f'/api/users/{user_id}/share', headers=headers)


def test_share_requires_admin(client, donor_headers, donor_user):
    response = _share_profile(client, donor_headers, donor_user.id)

    assert response.status_code == 403


def test_share_requires_token(client, donor_user):
    response = client.post(f'/api/users/{donor_user.id}/share')

    assert response.status_code == 401


def test_create_then_reuse_profile_link(client, admin_headers, donor_user):
    first = _share_profile(client, admin_headers, donor_user.id)
    second = _share_profile(client, admin_headers, donor_user.id)

    assert first.status_code == 201
    assert second.status_code == 200
    first_body, second_body = first.json(), second.json()
    assert first_body['created'] is True
    assert second_body['created'] is False
    assert first_body['share_id'] == second_body['share_id']
    assert first_body['share_url'] == f'http://frontend.local/share/profile/{first_body["share_id"]}'
    assert first_body['api_url'] == f'http://api.local/api/public/share/profile/{first_body["share_id"]}'


def test_public_profile_resolution_counts_views(client, admin_headers, donor_user):
    share_id = _share_profile(client, admin_headers, donor_user.id).json()['share_id']

    first = client.get(f'/api/public/share/profile/{share_id}')
    second = client.get(f'/api/public/share/profile/{share_id}')

    assert first.status_code == 200
    data = first.json()['data']
    assert data['type'] == 'donor'
    assert data['user']['email'] == donor_user.email
    assert data['user']['name'] == 'Maria Doadora'
    assert 'hashed_password' not in data['user']
    assert data['custom_design'] == {}
    assert data['view_count'] == 1
    assert second.json()['data']['view_count'] == 2


def test_public_campaign_resolution(client, admin_headers, campaign):
    created = client.post(f'/api/campaigns/{campaign.id}/share', headers=admin_headers)
    assert created.status_code == 201
    share_id = created.json()['share_id']
    assert created.json()['share_url'].endswith(f'/share/campaign/{share_id}')

    response = client.get(f'/api/public/share/campaign/{share_id}')

    assert response.status_code == 200
    data = response.json()['data']
    assert data['campaign']['title'] == 'Agua para todos'
    assert data['campaign']['id'] == str(campaign.id)
    assert data['view_count'] == 1


def test_campaign_link_not_resolved_as_profile(client, admin_headers, campaign):
    share_id = client.post(f'/api/campaigns/{campaign.id}/share', headers=admin_headers).json()['share_id']

    response = client.get(f'/api/public/share/profile/{share_id}')

    assert response.status_code == 404


def test_unknown_share_id_returns_404(client):
    response = client.get('/api/public/share/profile/' + '0' * 32)

    assert response.status_code == 404
    assert response.json() == {'success': False, 'message': LINK_NOT_FOUND_MESSAGE}


def test_dangling_profile_link_returns_distinct_404(client, admin_headers):
    share_id = _share_profile(client, admin_headers, 'user123').json()['share_id']

    response = client.get(f'/api/public/share/profile/{share_id}')

    assert response.status_code == 404
    assert response.json()['message'] == RESOURCE_NOT_FOUND_MESSAGE


def test_inactive_user_profile_is_not_exposed(client, admin_headers, make_user):
    inactive = make_user('inativo@doacoes.org', is_active=False)
    share_id = _share_profile(client, admin_headers, inactive.id).json()['share_id']

    response = client.get(f'/api/public/share/profile/{share_id}')

    assert response.status_code == 404


def test_deactivate_and_reactivate_link(client, admin_headers, donor_user):
    share_id = _share_profile(client, admin_headers, donor_user.id).json()['share_id']

    deactivated = client.put(
        f'/api/share/{share_id}/status',
        json={'is_active': False},
        headers=admin_headers,
    )
    assert deactivated.status_code == 200
    assert deactivated.json()['share_link']['is_active'] is False
    assert client.get(f'/api/public/share/profile/{share_id}').status_code == 404

    client.put(f'/api/share/{share_id}/status', json={'is_active': True}, headers=admin_headers)
    resolved = client.get(f'/api/public/share/profile/{share_id}')
    assert resolved.status_code == 200
    assert resolved.json()['data']['view_count'] == 1


def test_expired_link_returns_404(client, admin_headers, donor_user):
    share_id = _share_profile(client, admin_headers, donor_user.id).json()['share_id']

    client.put(
        f'/api/share/{share_id}/status',
        json={'is_active': True, 'expires_at': '2020-01-01T00:00:00Z'},
        headers=admin_headers,
    )

    assert client.get(f'/api/public/share/profile/{share_id}').status_code == 404


def test_status_of_unknown_link_returns_404(client, admin_headers):
    response = client.put(
        '/api/share/' + 'c' * 32 + '/status',
        json={'is_active': False},
        headers=admin_headers,
    )

    assert response.status_code == 404


def test_customize_profile_with_html_and_css(client, admin_headers, donor_user):
    response = client.put(
        f'/api/users/{donor_user.id}/customize',
        json={'html': '<h1>Ola</h1>', 'css': 'h1 { color: red; }', 'customDesign': {'layout': 'wide'}},
        headers=admin_headers,
    )

    assert response.status_code == 200
    body = response.json()
    assert body['custom_design'] == {'html': '<h1>Ola</h1>', 'css': 'h1 { color: red; }', 'layout': 'wide'}
    share_id = body['share_link']['share_id']
    assert body['share_url'] == f'http://frontend.local/share/profile/{share_id}'

    public = client.get(f'/api/public/share/profile/{share_id}').json()
    assert public['data']['custom_design']['layout'] == 'wide'


def test_customize_profile_replaces_previous_design(client, admin_headers, donor_user):
    url = f'/api/users/{donor_user.id}/customize'
    client.put(url, json={'html': '<h1>A</h1>', 'css': 'a{}'}, headers=admin_headers)
    client.put(url, json={'customDesign': {'theme': 'dark'}}, headers=admin_headers)

    response = client.get(url, headers=admin_headers)

    assert response.status_code == 200
    assert response.json()['custom_design'] == {'theme': 'dark'}


def test_get_customization_without_link(client, admin_headers):
    response = client.get('/api/users/nonexistent-user/customize', headers=admin_headers)

    assert response.status_code == 200
    body = response.json()
    assert body['custom_design'] == {'html': '', 'css': ''}
    assert body['share_url'] is None
    assert body['api_url'] is None
    assert body['share_link'] is None


def test_customize_by_share_id(client, admin_headers, campaign):
    share_id = client.post(f'/api/campaigns/{campaign.id}/share', headers=admin_headers).json()['share_id']

    response = client.put(
        f'/api/share/{share_id}/customize',
        json={'customDesign': {'banner': '/banner.png'}},
        headers=admin_headers,
    )
    assert response.status_code == 200

    fetched = client.get(f'/api/share/{share_id}/customize', headers=admin_headers)
    assert fetched.json()['custom_design'] == {'banner': '/banner.png'}
    assert fetched.json()['share_link']['resource_type'] == 'campaign'


def test_customize_unknown_share_id_returns_404(client, admin_headers):
    response = client.get('/api/share/' + 'd' * 32 + '/customize', headers=admin_headers)

    assert response.status_code == 404


def test_share_actions_are_audited(client, admin_headers, donor_user):
    _share_profile(client, admin_headers, donor_user.id)
    client.put(f'/api/users/{donor_user.id}/customize', json={'html': '<p/>'}, headers=admin_headers)

    response = client.get('/api/audit-logs', params={'resource_type': 'share_link'}, headers=admin_headers)

    actions = sorted(item['action'] for item in response.json()['items'])
    assert actions == ['share_link_created', 'share_link_customized']


def test_custom_design_object_round_trips_exactly(client, admin_headers, campaign):
    share_id = client.post(f'/api/campaigns/{campaign.id}/share', headers=admin_headers).json()['share_id']
    design = {'css': 'body { color: red; }\n', 'title': '  Ola  ', 'theme': {'font': ' serif '}}

    client.put(f'/api/share/{share_id}/customize', json={'customDesign': design}, headers=admin_headers)

    fetched = client.get(f'/api/share/{share_id}/customize', headers=admin_headers)
    assert fetched.json()['custom_design'] == design


def test_html_and_css_fields_round_trip_exactly(client, admin_headers, donor_user):
    html = '<div>\n  <p> Doe </p>\n</div>\n'
    css = 'p {\n  margin: 0;\n}\n'
    url = f'/api/users/{donor_user.id}/customize'

    client.put(url, json={'html': html, 'css': css}, headers=admin_headers)

    assert client.get(url, headers=admin_headers).json()['custom_design'] == {'html': html, 'css': css}
