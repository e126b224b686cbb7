"""
Tests for the AI content flows and the event editor endpoints that use them.
"""
import pytest
from openai import OpenAIError

from ai_client import AIClient
from conftest import ai_reply
from errors import AINotConfiguredError, AIProviderError, FlowValidationError
from flows_content import CHAT_FALLBACK, CHAT_HISTORY_LIMIT, ContentFlows
from schemas import ChatMessage, EventForm

DESCRIPTIONS = {
    'description': 'Dance, food and fireworks under the desert sky.',
    'full_description': 'Join the Phoenix Indian community for an evening of bhangra, street food and fireworks.'
}


def diwali_form(**overrides):
    data = {
        'name': 'Diwali Mela 2099',
        'date': '2099-11-01',
        'time': '4:00 PM',
        'location_name': 'Goodyear Ballpark',
        'category': 'Cultural',
        'description': DESCRIPTIONS['description'],
        'full_description': DESCRIPTIONS['full_description'],
    }
    data.update(overrides)
    return data


# ----- Flows -----

def test_event_descriptions_parsed(services, openai_mock):
    openai_mock.chat.completions.create.return_value = ai_reply(DESCRIPTIONS)

    result = services.content_flows.generate_event_descriptions('Diwali festival with fireworks')

    assert result.description == DESCRIPTIONS['description']
    kwargs = openai_mock.chat.completions.create.call_args.kwargs
    assert kwargs['model'] == 'test-model'
    assert kwargs['response_format'] == {'type': 'json_object'}
    assert 'Diwali festival with fireworks' in kwargs['messages'][1]['content']


@pytest.mark.parametrize('content, message', [
    ('', 'AI response was empty'),
    ('   ', 'AI response was empty'),
    ('Sure! Here are your descriptions', 'not valid JSON'),
    ('["description"]', 'not a JSON object'),
    ('{"description": "Only the short one"}', 'full_description'),
])
def test_event_descriptions_bad_output(services, openai_mock, content, message):
    openai_mock.chat.completions.create.return_value = ai_reply(content)

    with pytest.raises(FlowValidationError) as exc_info:
        services.content_flows.generate_event_descriptions('Diwali festival')

    assert exc_info.value.flow_name == 'generate_event_descriptions'
    assert message in str(exc_info.value)


def test_event_descriptions_too_long(services, openai_mock):
    openai_mock.chat.completions.create.return_value = ai_reply({
        'description': 'x' * 151,
        'full_description': 'Long enough.'
    })

    with pytest.raises(FlowValidationError):
        services.content_flows.generate_event_descriptions('Diwali festival')


def test_no_choices_is_a_validation_error(services, openai_mock):
    openai_mock.chat.completions.create.return_value.choices = []

    with pytest.raises(FlowValidationError):
        services.content_flows.generate_event_descriptions('Diwali festival')


def test_provider_failure(services, openai_mock):
    openai_mock.chat.completions.create.side_effect = OpenAIError('rate limited')

    with pytest.raises(AIProviderError):
        services.content_flows.generate_event_descriptions('Diwali festival')


def test_unconfigured_ai():
    flows = ContentFlows(AIClient())

    with pytest.raises(AINotConfiguredError):
        flows.generate_event_descriptions('Diwali festival')


def test_highlights_need_three_or_four_items(services, openai_mock):
    openai_mock.chat.completions.create.return_value = ai_reply({'highlights': ['Fireworks', 'Food']})

    with pytest.raises(FlowValidationError):
        services.content_flows.generate_event_highlights('Diwali Mela', 'Festival of lights')

    openai_mock.chat.completions.create.return_value = ai_reply(
        {'highlights': ['Fireworks', 'Food stalls', 'Bhangra']}
    )
    result = services.content_flows.generate_event_highlights('Diwali Mela', 'Festival of lights')
    assert len(result.highlights) == 3


def test_social_posts_link_to_event_page(services, openai_mock):
    openai_mock.chat.completions.create.return_value = ai_reply({
        'twitter_post': 'Diwali Mela is coming! #PDSCC',
        'facebook_post': 'Celebrate the festival of lights with us.'
    })

    services.content_flows.generate_social_posts('Diwali Mela', 'Lights', 'November 01, 2099', 'diwali-mela')

    prompt = openai_mock.chat.completions.create.call_args.kwargs['messages'][1]['content']
    assert 'https://www.azpdscc.org/events/diwali-mela' in prompt


def test_chat_uses_recent_history_and_upcoming_events(services, openai_mock):
    services.events.create_event(EventForm(**diwali_form()))
    openai_mock.chat.completions.create.return_value = ai_reply('Diwali Mela is on November 01, 2099.')
    history = [
        ChatMessage(role='user' if i % 2 == 0 else 'model', content=f'message {i}')
        for i in range(CHAT_HISTORY_LIMIT + 3)
    ]

    reply = services.content_flows.chat(history)

    assert reply == 'Diwali Mela is on November 01, 2099.'
    messages = openai_mock.chat.completions.create.call_args.kwargs['messages']
    assert messages[0]['role'] == 'system'
    assert 'Diwali Mela 2099' in messages[0]['content']
    assert len(messages) == CHAT_HISTORY_LIMIT + 1
    assert messages[-1]['content'] == f'message {CHAT_HISTORY_LIMIT + 2}'
    assert {m['role'] for m in messages[1:]} == {'user', 'assistant'}


# ----- Event API -----

def test_ai_descriptions_endpoint(client, admin_headers, openai_mock):
    openai_mock.chat.completions.create.return_value = ai_reply(DESCRIPTIONS)

    response = client.post('/api/events/ai-descriptions', json={'prompt': 'Diwali'}, headers=admin_headers)

    assert response.status_code == 200
    assert response.get_json()['full_description'] == DESCRIPTIONS['full_description']


def test_ai_descriptions_requires_admin(client):
    response = client.post('/api/events/ai-descriptions', json={'prompt': 'Diwali'})
    assert response.status_code == 401


def test_ai_descriptions_malformed_output_is_502(client, admin_headers, openai_mock):
    openai_mock.chat.completions.create.return_value = ai_reply('not json')

    response = client.post('/api/events/ai-descriptions', json={'prompt': 'Diwali'}, headers=admin_headers)

    assert response.status_code == 502
    assert 'not valid JSON' in response.get_json()['error']


def test_ai_descriptions_not_configured_is_503(client, admin_headers, services):
    services.content_flows.ai = AIClient()

    response = client.post('/api/events/ai-descriptions', json={'prompt': 'Diwali'}, headers=admin_headers)

    assert response.status_code == 503
    assert response.get_json()['error'] == 'AI generation not configured on server (missing API key)'


def test_ai_descriptions_missing_prompt_is_400(client, admin_headers, openai_mock):
    response = client.post('/api/events/ai-descriptions', json={}, headers=admin_headers)

    assert response.status_code == 400
    assert 'prompt' in response.get_json()['errors']
    openai_mock.chat.completions.create.assert_not_called()


def test_event_crud(client, admin_headers):
    created = client.post('/api/events', json=diwali_form(), headers=admin_headers)
    assert created.status_code == 201
    event = created.get_json()['event']
    assert event['slug'] == 'diwali-mela-2099'

    public = client.get('/api/events/diwali-mela-2099')
    assert public.status_code == 200
    assert public.get_json()['event']['location_name'] == 'Goodyear Ballpark'

    updated = client.put(f"/api/events/{event['id']}", json=diwali_form(time='5:00 PM'), headers=admin_headers)
    assert updated.get_json()['event']['time'] == '5:00 PM'

    assert client.delete(f"/api/events/{event['id']}", headers=admin_headers).status_code == 200
    assert client.get('/api/events/diwali-mela-2099').status_code == 404
    assert client.delete(f"/api/events/{event['id']}", headers=admin_headers).status_code == 404


def test_event_list_upcoming_filter(client, services):
    services.events.create_event(EventForm(**diwali_form()))
    services.events.create_event(EventForm(**diwali_form(name='Lohri 2001', date='2001-01-13')))

    everything = client.get('/api/events').get_json()['events']
    upcoming = client.get('/api/events?filter=upcoming').get_json()['events']

    assert [e['name'] for e in everything] == ['Lohri 2001', 'Diwali Mela 2099']
    assert [e['name'] for e in upcoming] == ['Diwali Mela 2099']


def test_generate_event_persists_and_returns_social_posts(client, admin_headers, services, openai_mock):
    openai_mock.chat.completions.create.return_value = ai_reply({
        'twitter_post': 'Diwali Mela 2099 is coming!',
        'facebook_post': 'Join us for the festival of lights.'
    })

    response = client.post('/api/events/generate', json=diwali_form(), headers=admin_headers)

    assert response.status_code == 201
    data = response.get_json()
    assert data['social_posts']['twitter_post'] == 'Diwali Mela 2099 is coming!'
    assert services.events.get_event_by_slug('diwali-mela-2099') is not None


def test_generate_event_keeps_event_when_social_posts_fail(client, admin_headers, services, openai_mock):
    openai_mock.chat.completions.create.return_value = ai_reply('')

    response = client.post('/api/events/generate', json=diwali_form(), headers=admin_headers)

    assert response.status_code == 201
    assert response.get_json()['social_posts'] is None
    assert services.events.get_event_by_slug('diwali-mela-2099') is not None


def test_event_with_devanagari_name_gets_a_slug(client, admin_headers):
    first = client.post('/api/events', json=diwali_form(name='दिवाली मेला'), headers=admin_headers)
    second = client.post('/api/events', json=diwali_form(name='दिवाली मेला'), headers=admin_headers)

    assert first.status_code == 201
    assert second.status_code == 201
    first_slug = first.get_json()['event']['slug']
    assert first_slug.startswith('event-')
    assert first_slug != second.get_json()['event']['slug']
    assert client.get(f'/api/events/{first_slug}').get_json()['event']['name'] == 'दिवाली मेला'


# ----- Chat API -----

def test_chat_endpoint_replies(client, openai_mock):
    openai_mock.chat.completions.create.return_value = ai_reply('Vaisakhi Mela is in April at Buckeye.')

    response = client.post('/api/chat', json={'history': [{'role': 'user', 'content': 'When is Vaisakhi?'}]})

    assert response.status_code == 200
    assert response.get_json() == {'success': True, 'reply': 'Vaisakhi Mela is in April at Buckeye.'}


def test_chat_endpoint_degrades_when_ai_fails(client, openai_mock):
    openai_mock.chat.completions.create.side_effect = OpenAIError('service unavailable')

    response = client.post('/api/chat', json={'history': [{'role': 'user', 'content': 'Is parking free?'}]})

    assert response.status_code == 200
    assert response.get_json() == {'success': True, 'reply': CHAT_FALLBACK, 'degraded': True}


def test_chat_endpoint_degrades_when_ai_not_configured(client, services):
    services.content_flows.ai = AIClient()

    response = client.post('/api/chat', json={'history': [{'role': 'user', 'content': 'Is parking free?'}]})

    assert response.get_json()['degraded'] is True


def test_chat_endpoint_needs_history(client, openai_mock):
    response = client.post('/api/chat', json={'history': []})

    assert response.status_code == 400
    openai_mock.chat.completions.create.assert_not_called()
