from dotenv import load_dotenv
import os

load_dotenv('.env')


def _env_int(name, default):
    try:
        return int(os.getenv(name, default))
    except (TypeError, ValueError):
        return default


def _env_float(name, default):
    try:
        return float(os.getenv(name, default))
    except (TypeError, ValueError):
        return default


def _env_bool(name, default=False):
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in ('1', 'true', 'yes', 'on')


class Config:
    SECRET_KEY = os.getenv('SECRET_KEY', os.urandom(24).hex())
    FLASK_ENV = os.getenv('FLASK_ENV', 'production')
    PORT = _env_int('PORT', 5000)

    # Groq (OpenAI-compatible chat completions)
    GROQ_API_KEY = os.getenv('GROQ_API_KEY')
    GROQ_API_URL = os.getenv('GROQ_API_URL', 'https://api.groq.com/openai/v1/chat/completions')
    GROQ_MODEL = os.getenv('GROQ_MODEL', 'llama-3.3-70b-versatile')
    LLM_TIMEOUT = _env_float('LLM_TIMEOUT', 60.0)

    # YouTube Data API v3 (optional)
    YOUTUBE_API_KEY = os.getenv('YOUTUBE_API_KEY')
    YOUTUBE_REGION = os.getenv('YOUTUBE_REGION', 'US')

    # Caption languages in preference order
    TRANSCRIPT_LANGUAGES = [c.strip() for c in os.getenv('TRANSCRIPT_LANGUAGES', 'en').split(',') if c.strip()]
    TRANSCRIPT_MAX_CHARS = _env_int('TRANSCRIPT_MAX_CHARS', 8000)

    # Fixed-window limiter, per client IP
    RATE_LIMIT_REQUESTS = _env_int('RATE_LIMIT_REQUESTS', 30)
    RATE_LIMIT_WINDOW = _env_int('RATE_LIMIT_WINDOW', 60)
    RATE_LIMIT_MAX_KEYS = _env_int('RATE_LIMIT_MAX_KEYS', 10000)

    CACHE_TYPE = os.getenv('CACHE_TYPE', 'SimpleCache')
    CACHE_DEFAULT_TIMEOUT = _env_int('CACHE_DEFAULT_TIMEOUT', 300)

    FORCE_HTTPS = _env_bool('FORCE_HTTPS', False)

    LOG_LEVEL = os.getenv('LOG_LEVEL', 'INFO').upper()
    LOG_FILE = os.getenv('LOG_FILE', '')
