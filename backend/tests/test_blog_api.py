"""
Tests for the keyed admin blog API, the admin blog screens and the blog pages.
"""
from sqlalchemy.exc import OperationalError

from conftest import ai_reply, BLOG_REPLY
from routes_api_blog import ADMIN_API_FAILURE
from schemas import BlogPostForm, ScheduledBlogForm

API_KEY_HEADERS = {'x-admin-api-key': 'test-admin-key'}

POST_BODY = {
    'title': 'Teeyan Da Mela Recap',
    'author': 'PDSCC Team',
    'date': '2025-08-10T00:00:00.000Z',
    'excerpt': 'Highlights from this year\'s Teeyan.',
    'content': '<p>Giddha, swings and mehndi.</p>',
    'status': 'Published',
}


# ----- /api/admin/blog -----

def test_admin_blog_requires_api_key(client):
    assert client.post('/api/admin/blog', json=POST_BODY).status_code == 401

    response = client.post('/api/admin/blog', json=POST_BODY, headers={'x-admin-api-key': 'wrong'})
    assert response.status_code == 401
    assert response.get_json() == {'message': 'Unauthorized'}


def test_admin_blog_rejects_unsupported_method_after_auth(client):
    assert client.get('/api/admin/blog').status_code == 401

    response = client.get('/api/admin/blog', headers=API_KEY_HEADERS)
    assert response.status_code == 405
    assert response.get_json() == {'message': 'Method GET Not Allowed'}


def test_admin_blog_create(client, services):
    response = client.post('/api/admin/blog', json=POST_BODY, headers=API_KEY_HEADERS)

    assert response.status_code == 200
    data = response.get_json()
    assert data['success'] is True

    post = services.blog.get_post(data['id'])
    assert post['title'] == 'Teeyan Da Mela Recap'
    assert post['date'] == '2025-08-10'
    assert post['slug'] == 'teeyan-da-mela-recap'


def test_admin_blog_create_invalid(client):
    response = client.post('/api/admin/blog', json={'title': 'No body'}, headers=API_KEY_HEADERS)

    assert response.status_code == 400
    assert 'content' in response.get_json()['errors']


def test_admin_blog_update_merges_fields(client, services):
    post_id = client.post('/api/admin/blog', json=POST_BODY, headers=API_KEY_HEADERS).get_json()['id']

    response = client.put('/api/admin/blog', json={'id': post_id, 'excerpt': 'Updated excerpt.'},
                          headers=API_KEY_HEADERS)

    assert response.status_code == 200
    assert response.get_json() == {'success': True, 'id': post_id}
    post = services.blog.get_post(post_id)
    assert post['excerpt'] == 'Updated excerpt.'
    assert post['title'] == 'Teeyan Da Mela Recap'


def test_admin_blog_update_and_delete_need_id(client):
    put = client.put('/api/admin/blog', json={'title': 'x'}, headers=API_KEY_HEADERS)
    assert put.status_code == 400
    assert put.get_json() == {'message': 'Document ID is required for update.'}

    delete = client.delete('/api/admin/blog', json={}, headers=API_KEY_HEADERS)
    assert delete.status_code == 400
    assert delete.get_json() == {'message': 'Document ID is required for deletion.'}


def test_admin_blog_delete(client, services):
    post_id = client.post('/api/admin/blog', json=POST_BODY, headers=API_KEY_HEADERS).get_json()['id']

    response = client.delete('/api/admin/blog', json={'id': post_id}, headers=API_KEY_HEADERS)

    assert response.status_code == 200
    assert services.blog.get_post(post_id) is None


# ----- Admin screens -----

def test_blog_posts_screen_requires_id_token(client):
    response = client.get('/api/admin/blog-posts')
    assert response.status_code == 401
    assert response.get_json()['success'] is False


def test_draft_review_and_publish(client, admin_headers):
    created = client.post('/api/admin/blog-posts', json={**POST_BODY, 'status': 'Draft'}, headers=admin_headers)
    assert created.status_code == 201
    post_id = created.get_json()['post']['id']

    drafts = client.get('/api/admin/blog-posts?status=Draft', headers=admin_headers).get_json()['posts']
    assert [p['id'] for p in drafts] == [post_id]

    published = client.post(f'/api/admin/blog-posts/{post_id}/publish', headers=admin_headers)
    assert published.get_json()['post']['status'] == 'Published'


def test_scheduled_blog_screen(client, admin_headers, openai_mock):
    openai_mock.chat.completions.create.return_value = ai_reply(BLOG_REPLY)

    created = client.post('/api/admin/scheduled-blog', json={
        'topic': 'Vaisakhi traditions in the Phoenix valley',
        'publish_date': '2025-06-01'
    }, headers=admin_headers)
    assert created.status_code == 201
    assert created.get_json()['entry']['author'] == 'PDSCC Team'

    short = client.post('/api/admin/scheduled-blog', json={'topic': 'Too short', 'publish_date': '2025-06-01'},
                        headers=admin_headers)
    assert short.status_code == 400
    assert 'topic' in short.get_json()['errors']

    processed = client.post('/api/admin/scheduled-blog/process', headers=admin_headers).get_json()
    assert len(processed['published']) == 1
    assert client.get('/api/admin/scheduled-blog', headers=admin_headers).get_json()['scheduled'] == []


def test_manual_automated_post(client, admin_headers, openai_mock):
    openai_mock.chat.completions.create.return_value = ai_reply(BLOG_REPLY)

    response = client.post('/api/admin/automated-post', headers=admin_headers)

    assert response.status_code == 200
    assert response.get_json()['post_title'] == BLOG_REPLY['title']


# ----- Pages -----

def test_blog_page_publishes_due_scheduled_posts(client, services, openai_mock):
    openai_mock.chat.completions.create.return_value = ai_reply(BLOG_REPLY)
    services.scheduled_blog.create_scheduled(ScheduledBlogForm(
        topic='Vaisakhi traditions in the Phoenix valley', publish_date='2025-06-01'
    ))

    response = client.get('/blog')

    assert response.status_code == 200
    assert BLOG_REPLY['title'] in response.get_data(as_text=True)
    assert services.scheduled_blog.list_scheduled() == []


def test_blog_page_renders_when_generation_fails(client, services, openai_mock):
    openai_mock.chat.completions.create.return_value = ai_reply('')
    services.blog.create_post(BlogPostForm(**POST_BODY))
    services.scheduled_blog.create_scheduled(ScheduledBlogForm(
        topic='Vaisakhi traditions in the Phoenix valley', publish_date='2025-06-01'
    ))

    response = client.get('/blog')

    assert response.status_code == 200
    assert 'Teeyan Da Mela Recap' in response.get_data(as_text=True)
    assert services.scheduled_blog.list_scheduled()[0]['status'] == 'Error'


def test_draft_posts_are_not_public(client, services):
    services.blog.create_post(BlogPostForm(**{**POST_BODY, 'status': 'Draft'}))

    assert client.get('/blog/teeyan-da-mela-recap').status_code == 404
    assert 'Teeyan Da Mela Recap' not in client.get('/blog').get_data(as_text=True)


def test_blog_post_content_is_sanitized(client, services):
    services.blog.create_post(BlogPostForm(**{
        **POST_BODY,
        'content': '<p>Safe paragraph</p><script>alert("x")</script><a href="javascript:alert(1)">bad</a>'
    }))

    html = client.get('/blog/teeyan-da-mela-recap').get_data(as_text=True)

    assert '<p>Safe paragraph</p>' in html
    assert '<script>alert' not in html
    assert 'javascript:' not in html


def test_admin_blog_create_with_gurmukhi_title(client, services):
    response = client.post('/api/admin/blog', json={**POST_BODY, 'title': 'ਵਿਸਾਖੀ'}, headers=API_KEY_HEADERS)

    assert response.status_code == 200
    post = services.blog.get_post(response.get_json()['id'])
    assert post['title'] == 'ਵਿਸਾਖੀ'
    assert post['slug'].startswith('post-')
    assert client.get(f"/blog/{post['slug']}").status_code == 200


def test_scheduled_post_with_non_latin_title_is_published(services, openai_mock):
    openai_mock.chat.completions.create.return_value = ai_reply({**BLOG_REPLY, 'title': 'ਤੀਆਂ ਦਾ ਮੇਲਾ', 'slug': 'ਤੀਆਂ'})
    services.scheduled_blog.create_scheduled(ScheduledBlogForm(
        topic='Teeyan traditions in the Phoenix valley', publish_date='2025-06-01'
    ))

    summary = services.automation.process_scheduled_posts()

    assert len(summary['published']) == 1
    assert services.blog.get_post(summary['published'][0])['slug'].startswith('post-')


def test_admin_blog_database_error_is_not_echoed(client, services, monkeypatch):
    def broken_create(form):
        raise OperationalError('INSERT INTO blog_posts (id, slug) VALUES (?, ?)', ('abc', 'secret-slug'), Exception('disk I/O error'))

    monkeypatch.setattr(services.blog, 'create_post', broken_create)

    response = client.post('/api/admin/blog', json=POST_BODY, headers=API_KEY_HEADERS)

    assert response.status_code == 500
    assert response.get_json() == {'message': ADMIN_API_FAILURE}
    assert 'INSERT' not in response.get_data(as_text=True)
