"""
Tests for sponsor ordering, the sponsor admin form API and team members.
"""
import json
from datetime import datetime, timedelta, timezone

import jwt

from schemas import SponsorForm
from services_sponsors import sponsor_sort_key


def add_sponsor(services, name, level):
    return services.sponsors.create_sponsor(SponsorForm(
        name=name, logo=f'https://example.com/{name.lower()}.png', level=level
    ))


def test_sponsors_ordered_by_level_then_name(services):
    add_sponsor(services, 'Zaika Grill', 'Gold')
    add_sponsor(services, 'Bharat Bazaar', 'Bronze')
    add_sponsor(services, 'apna Insurance', 'Gold')
    add_sponsor(services, 'Desert Dental', 'Diamond')
    add_sponsor(services, 'Chai Corner', 'Other')
    add_sponsor(services, 'Saffron Realty', 'Silver')

    names = [s['name'] for s in services.sponsors.list_sponsors()]

    assert names == ['Desert Dental', 'apna Insurance', 'Zaika Grill', 'Saffron Realty', 'Bharat Bazaar',
                     'Chai Corner']


def test_unknown_level_sorts_last():
    sponsors = [{'name': 'A', 'level': 'Platinum'}, {'name': 'B', 'level': 'Other'}]
    assert [s['name'] for s in sorted(sponsors, key=sponsor_sort_key)] == ['B', 'A']


def test_public_sponsor_list(client, services):
    add_sponsor(services, 'Zaika Grill', 'Silver')
    add_sponsor(services, 'Desert Dental', 'Diamond')

    response = client.get('/api/sponsors')

    assert response.status_code == 200
    assert [s['name'] for s in response.get_json()['sponsors']] == ['Desert Dental', 'Zaika Grill']


def test_sponsor_admin_without_token_returns_form_error(client):
    response = client.post('/api/sponsors/admin', json={'name': 'Zaika Grill'})

    assert response.status_code == 401
    assert response.get_json() == {'errors': {'_form': ['Authentication required']}}


def test_sponsor_admin_with_bad_token_returns_form_error(client):
    response = client.post('/api/sponsors/admin', json={'name': 'Zaika Grill'},
                           headers={'Authorization': 'Bearer not-a-real-token'})

    assert response.status_code == 401
    assert response.get_json()['errors']['_form'] == ['Invalid or expired token']


def test_sponsor_admin_field_errors(client, admin_headers):
    response = client.post('/api/sponsors/admin', json={
        'name': 'Zaika Grill',
        'logo': 'zaika.png',
        'level': 'Platinum'
    }, headers=admin_headers)

    assert response.status_code == 400
    errors = response.get_json()['errors']
    assert errors['logo'] == ['Please enter a valid URL.']
    assert 'level' in errors


def test_sponsor_admin_crud(client, admin_headers, services):
    created = client.post('/api/sponsors/admin', json={
        'name': 'Zaika Grill',
        'logo': 'https://example.com/zaika.png',
        'level': 'Gold',
        'website': ''
    }, headers=admin_headers)
    assert created.status_code == 201
    sponsor = created.get_json()['sponsor']
    assert sponsor['website'] is None

    updated = client.put(f"/api/sponsors/admin/{sponsor['id']}", json={
        'name': 'Zaika Grill',
        'logo': 'https://example.com/zaika.png',
        'level': 'Diamond',
        'website': 'https://zaika.example.com'
    }, headers=admin_headers)
    assert updated.get_json()['sponsor']['level'] == 'Diamond'

    assert client.delete(f"/api/sponsors/admin/{sponsor['id']}", headers=admin_headers).status_code == 200
    assert services.sponsors.list_sponsors() == []

    missing = client.delete(f"/api/sponsors/admin/{sponsor['id']}", headers=admin_headers)
    assert missing.status_code == 404


# ----- Team -----

def test_team_seed_only_fills_empty_table(services, tmp_path):
    seed = tmp_path / 'team.json'
    seed.write_text(json.dumps([
        {'name': 'Rana Singh', 'role': 'President', 'order': 1},
        {'name': 'Aman Gill', 'role': 'Treasurer', 'order': 2},
    ]))

    assert services.team.seed_if_empty(str(seed)) == 2
    assert services.team.seed_if_empty(str(seed)) == 0
    assert [m['name'] for m in services.team.list_members()] == ['Rana Singh', 'Aman Gill']


def test_bundled_seed_file_loads(services):
    inserted = services.team.seed_if_empty()

    members = services.team.list_members()
    assert inserted == len(members) > 0
    assert members[0]['role'] == 'President'


def test_team_api(client, admin_headers):
    assert client.post('/api/team', json={'name': 'Aman Gill', 'role': 'Treasurer'}).status_code == 401

    created = client.post('/api/team', json={'name': 'Aman Gill', 'role': 'Treasurer', 'order': 3},
                          headers=admin_headers)
    assert created.status_code == 201
    member_id = created.get_json()['member']['id']

    members = client.get('/api/team').get_json()['members']
    assert [m['name'] for m in members] == ['Aman Gill']

    client.put(f'/api/team/{member_id}', json={'name': 'Aman Gill', 'role': 'Vice President', 'order': 2},
               headers=admin_headers)
    assert client.get(f'/api/team/{member_id}').get_json()['member']['role'] == 'Vice President'

    assert client.delete(f'/api/team/{member_id}', headers=admin_headers).status_code == 200
    assert client.get(f'/api/team/{member_id}').status_code == 404


def test_about_page_lists_team(client, services):
    services.team.seed_if_empty()

    response = client.get('/about')

    assert response.status_code == 200
    assert 'Rana Singh' in response.get_data(as_text=True)


def test_public_sponsor_detail(client, services):
    sponsor = add_sponsor(services, 'Desert Dental', 'Diamond')

    response = client.get(f"/api/sponsors/{sponsor['id']}")

    assert response.status_code == 200
    assert response.get_json()['sponsor']['level'] == 'Diamond'
    assert client.get('/api/sponsors/missing').status_code == 404


def test_team_writes_reject_bad_tokens(client, services, volunteer_headers):
    forged = jwt.encode(
        {'sub': 'admin-uid', 'exp': datetime.now(timezone.utc) + timedelta(hours=1)},
        'not-the-id-token-secret',
        algorithm='HS256'
    )
    bad_headers = [
        {'Authorization': f'Bearer {forged}'},
        {'Authorization': 'Bearer not-a-real-token'},
        volunteer_headers,
    ]
    member = {'name': 'Aman Gill', 'role': 'Treasurer'}

    for headers in bad_headers:
        response = client.post('/api/team', json=member, headers=headers)
        assert response.status_code == 401
        assert response.get_json() == {'success': False, 'error': 'Invalid or expired token'}
        assert client.put('/api/team/some-id', json=member, headers=headers).status_code == 401
        assert client.delete('/api/team/some-id', headers=headers).status_code == 401

    assert services.team.list_members() == []
