"""
Tests for the application factory: health check, headers, error pages and
the public pages.
"""
from app import create_app, sanitize_html
from schemas import EventForm


def test_health(client):
    response = client.get('/health')

    assert response.status_code == 200
    data = response.get_json()
    assert data['status'] == 'ok'
    assert data['service'] == 'PDSCC Application'


def test_security_headers(client):
    response = client.get('/health')

    assert response.headers['X-Content-Type-Options'] == 'nosniff'
    assert response.headers['X-Frame-Options'] == 'SAMEORIGIN'
    assert "object-src 'none'" in response.headers['Content-Security-Policy']
    assert response.headers['Cache-Control'] == 'no-cache, no-store, must-revalidate'


def test_unknown_api_route_is_json_404(client):
    response = client.get('/api/does-not-exist')

    assert response.status_code == 404
    assert response.get_json() == {'success': False, 'error': 'Endpoint not found'}


def test_unknown_page_is_html_404(client):
    response = client.get('/events/no-such-event', headers={'Accept': 'text/html'})

    assert response.status_code == 404
    assert '404 - Page Not Found' in response.get_data(as_text=True)


def test_pages_render(client, services):
    services.events.create_event(EventForm(
        name='Vaisakhi Mela 2099', date='2099-04-13', category='Cultural',
        description='Harvest festival celebrations.', full_description='<p>Bhangra all day.</p>'
    ))

    for path in ('/', '/events', '/events/vaisakhi-mela-2099', '/blog', '/sponsorship', '/about'):
        response = client.get(path)
        assert response.status_code == 200, path

    assert 'Vaisakhi Mela 2099' in client.get('/').get_data(as_text=True)
    assert '<p>Bhangra all day.</p>' in client.get('/events/vaisakhi-mela-2099').get_data(as_text=True)


def test_team_is_seeded_on_startup(settings, services):
    settings['SEED_TEAM'] = True

    create_app(settings, services)

    assert len(services.team.list_members()) > 0


def test_sanitize_html():
    assert sanitize_html('') == ''
    assert sanitize_html('<p onclick="x()">Hi <b>there</b></p>') == '<p>Hi <b>there</b></p>'
    assert sanitize_html('<img src=x onerror=alert(1)>') == ''
