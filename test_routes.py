from unittest.mock import patch

import pytest
import requests

from conftest import groq_response
from features import FEATURES

ORIGIN = {'Origin': 'https://creator.example'}


def test_home(client):
    response = client.get('/')
    assert response.status_code == 200
    assert '/api/generate-titles' in response.get_json()['endpoints']


def test_stats(client, llm_reply):
    llm_reply("A title that is long enough")
    client.post('/api/generate-titles', json={'topic': 'coffee'})
    stats = client.get('/stats').get_json()
    assert stats['daily_usage'] == 1
    assert stats['tracked_clients'] == 1


@pytest.mark.parametrize('name', sorted(FEATURES))
def test_options_preflight(client, name):
    response = client.options(
        f'/api/{name}',
        headers={**ORIGIN, 'Access-Control-Request-Method': 'POST'},
    )
    assert response.status_code == 200
    assert response.data == b''
    assert response.headers['Access-Control-Allow-Origin'] == '*'
    assert 'POST' in response.headers['Access-Control-Allow-Methods']


def test_get_is_rejected(client):
    response = client.get('/api/generate-titles')
    assert response.status_code == 405
    assert response.get_json() == {'error': 'Method not allowed'}
    assert 'POST' in response.headers['Allow']


def test_security_and_cors_headers(client, llm_reply):
    llm_reply("Why nobody talks about cold brew")
    response = client.post('/api/generate-titles', json={'topic': 'coffee'}, headers=ORIGIN)
    assert response.status_code == 200
    assert response.headers['Access-Control-Allow-Origin'] == '*'
    assert response.headers['X-Content-Type-Options'] == 'nosniff'
    assert response.headers['X-Frame-Options'] == 'DENY'
    assert response.headers['X-XSS-Protection'] == '1; mode=block'
    assert response.headers['Referrer-Policy'] == 'strict-origin-when-cross-origin'
    assert response.headers['X-RateLimit-Remaining'] == '29'
    assert response.headers['Access-Control-Allow-Methods'] == 'GET, POST, OPTIONS'
    assert response.headers['Access-Control-Allow-Headers'] == 'Content-Type, Authorization'


def test_cors_headers_on_error_responses(client):
    response = client.post('/api/generate-titles', json={}, headers=ORIGIN)
    assert response.status_code == 400
    assert response.headers['Access-Control-Allow-Origin'] == '*'
    assert 'POST' in response.headers['Access-Control-Allow-Methods']


@pytest.mark.parametrize('name, body', [
    ('generate-titles', {}),
    ('generate-hooks', {'hookType': 'story'}),
    ('generate-hashtags', {'platform': 'tiktok'}),
    ('generate-script', {'topic': 'no niche'}),
    ('generate-description', {'topic': 'missing title'}),
    ('generate-calendar', {}),
    ('analyze', {'type': 'script'}),
    ('analyze-thumbnail', {}),
    ('analyze-competitor', {}),
    ('search-channels', {}),
    ('ai-chat', {'messages': 'not a list'}),
    ('analyze-video', {'question': 'why?'}),
    ('get-transcript', {'url': 'https://example.com/video'}),
    ('transcribe', {}),
])
def test_missing_required_field(client, name, body):
    response = client.post(f'/api/{name}', json=body)
    assert response.status_code == 400
    assert 'error' in response.get_json()


def test_missing_api_key(make_app):
    client = make_app(GROQ_API_KEY=None).test_client()
    response = client.post('/api/generate-titles', json={'topic': 'coffee'})
    assert response.status_code == 500
    assert 'configuration' in response.get_json()['error'].lower()


def test_validation_runs_before_config_check(make_app):
    client = make_app(GROQ_API_KEY=None).test_client()
    response = client.post('/api/generate-script', json={})
    assert response.status_code == 400


def test_malformed_body_is_treated_as_empty(client):
    response = client.post('/api/generate-titles', data='{not json', content_type='application/json')
    assert response.status_code == 400
    assert response.get_json()['error'] == 'Topic is required'


def test_netlify_prefix_serves_same_features(client, llm_reply):
    llm_reply("Stop scrolling, this changes everything about coffee")
    response = client.post('/.netlify/functions/generate-hooks', json={'topic': 'coffee'})
    assert response.status_code == 200
    assert response.get_json()['hooks'] == ["Stop scrolling, this changes everything about coffee"]


def test_rate_limit_exceeded(make_app, llm_reply):
    llm_reply("Some title that works")
    client = make_app(RATE_LIMIT_REQUESTS=2).test_client()

    for _ in range(2):
        assert client.post('/api/generate-titles', json={'topic': 'x'}).status_code == 200

    response = client.post('/api/generate-titles', json={'topic': 'x'})
    assert response.status_code == 429
    body = response.get_json()
    assert body['retryAfter'] > 0
    assert response.headers['Retry-After'] == str(body['retryAfter'])
    assert response.headers['X-RateLimit-Remaining'] == '0'


def test_rate_limit_is_per_client(make_app, llm_reply):
    llm_reply("Some title that works")
    client = make_app(RATE_LIMIT_REQUESTS=1).test_client()

    first = {'X-Forwarded-For': '203.0.113.1'}
    second = {'X-Forwarded-For': '203.0.113.2, 10.0.0.1'}
    assert client.post('/api/generate-titles', json={'topic': 'x'}, headers=first).status_code == 200
    assert client.post('/api/generate-titles', json={'topic': 'x'}, headers=first).status_code == 429
    assert client.post('/api/generate-titles', json={'topic': 'x'}, headers=second).status_code == 200


def test_upstream_unavailable(client):
    with patch('api_integrations.requests.post', side_effect=requests.ConnectionError("refused")):
        response = client.post('/api/generate-titles', json={'topic': 'coffee'})
    assert response.status_code == 503
    assert 'unavailable' in response.get_json()['error']


def test_upstream_error_message_is_passed_through(client):
    with patch('api_integrations.requests.post', return_value=groq_response('model overloaded', 500)):
        response = client.post('/api/generate-description', json={'title': 'My video'})
    assert response.status_code == 500
    assert response.get_json() == {'error': 'model overloaded'}


def test_unexpected_error_is_generic(client):
    with patch('features.get_llm_client', side_effect=RuntimeError("boom")):
        response = client.post('/api/generate-titles', json={'topic': 'coffee'})
    assert response.status_code == 500
    assert 'boom' not in response.get_json()['error']
