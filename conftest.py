import json
from unittest.mock import MagicMock, patch

import pytest

from app import create_app

TEST_CONFIG = {
    'TESTING': True,
    'GROQ_API_KEY': 'test-groq-key',
    'YOUTUBE_API_KEY': None,
    'TRANSCRIPT_LANGUAGES': ['en'],
    'CACHE_TYPE': 'NullCache',
    'FORCE_HTTPS': False,
    'RATE_LIMIT_REQUESTS': 30,
    'RATE_LIMIT_WINDOW': 60,
}


def groq_response(content, status_code=200):
    """Build a fake requests.Response for a chat completion."""
    response = MagicMock()
    response.status_code = status_code
    response.ok = status_code < 400
    if response.ok:
        response.json.return_value = {'choices': [{'message': {'content': content}}]}
    else:
        response.json.return_value = {'error': {'message': content}}
    return response


@pytest.fixture
def make_app():
    def factory(**overrides):
        return create_app({**TEST_CONFIG, **overrides})
    return factory


@pytest.fixture
def app(make_app):
    return make_app()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def llm_reply():
    """Patch the Groq HTTP call; call the fixture with the model output to return."""
    with patch('api_integrations.requests.post') as mock_post:
        def respond(content):
            if not isinstance(content, str):
                content = json.dumps(content)
            mock_post.return_value = groq_response(content)
            return mock_post
        yield respond
