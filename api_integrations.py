import logging
import re
from typing import List, Dict, Any, Optional

import requests
from flask import current_app
from flask_caching import Cache
from youtube_transcript_api import CouldNotRetrieveTranscript, YouTubeTranscriptApi

from errors import ConfigurationError, UpstreamServiceError

logger = logging.getLogger(__name__)

# Caches YouTube lookups; bound to the app in create_app()
cache = Cache()

YOUTUBE_API_URL = "https://www.googleapis.com/youtube/v3"

# YouTube videoCategoryId per trend category; 'all' means no filter
YOUTUBE_CATEGORY_IDS = {
    'tech': '28',
    'gaming': '20',
    'entertainment': '24',
    'education': '27',
    'lifestyle': '22',
    'all': '',
}

VIDEO_ID_PATTERN = re.compile(r'^[\w-]{11}$')

# watch?v=, /embed/, /shorts/, /live/ and youtu.be short links
VIDEO_URL_PATTERNS = [
    re.compile(r'(?:v=|/embed/|/shorts/|/live/)([\w-]{11})'),
    re.compile(r'youtu\.be/([\w-]{11})'),
]


class GroqClient:
    """Minimal client for Groq's OpenAI-compatible chat completions endpoint."""

    def __init__(self, api_key: str, model: str, url: str, timeout: float = 60.0):
        self.api_key = api_key
        self.model = model
        self.url = url
        self.timeout = timeout

    def chat(self, messages: List[Dict[str, str]], temperature: float = 0.7, max_tokens: int = 800) -> str:
        """Send one chat completion request and return the reply text.

        Single request: no retry, no streaming.

        Raises:
            UpstreamServiceError: 503 if Groq is unreachable or times out,
                500 if it answers with an error or an unexpected payload.
        """
        payload = {
            "model": self.model,
            "messages": messages,
            "temperature": temperature,
            "max_tokens": max_tokens,
        }
        headers = {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json",
        }

        try:
            response = requests.post(self.url, json=payload, headers=headers, timeout=self.timeout)
        except (requests.ConnectionError, requests.Timeout) as e:
            logger.error(f"Groq request failed: {str(e)}")
            raise UpstreamServiceError("AI service unavailable. Please try again later.", status_code=503)

        if not response.ok:
            message = _upstream_error_message(response) or "AI service error"
            logger.error(f"Groq returned HTTP {response.status_code}: {message}")
            raise UpstreamServiceError(message)

        try:
            data = response.json()
            return data["choices"][0]["message"]["content"] or ""
        except (ValueError, KeyError, IndexError, TypeError) as e:
            logger.error(f"Unexpected Groq payload: {str(e)}")
            raise UpstreamServiceError("AI service returned an invalid response")


def _upstream_error_message(response) -> Optional[str]:
    try:
        error = response.json().get("error")
    except (ValueError, AttributeError):
        return None
    if isinstance(error, dict):
        return error.get("message")
    if isinstance(error, str):
        return error
    return None


def get_llm_client() -> GroqClient:
    """Build a Groq client from app config, failing fast when unconfigured."""
    config = current_app.config
    api_key = config.get('GROQ_API_KEY')
    if not api_key:
        raise ConfigurationError("Configuration error: API key not configured (GROQ_API_KEY)")
    return GroqClient(
        api_key=api_key,
        model=config['GROQ_MODEL'],
        url=config['GROQ_API_URL'],
        timeout=config['LLM_TIMEOUT'],
    )


def format_number(num: int) -> str:
    """Compact display form: 1234567 -> '1.2M', 4321 -> '4.3K'."""
    if num >= 1000000:
        return f"{num / 1000000:.1f}M"
    if num >= 1000:
        return f"{num / 1000:.1f}K"
    return str(num)


def estimate_frequency(video_count: int) -> str:
    """Rough upload cadence assuming the channel has been active ~2 years."""
    per_week = video_count / 104
    if per_week >= 7:
        return 'Daily'
    if per_week >= 3:
        return '3-5 videos/week'
    if per_week >= 1:
        return '1-2 videos/week'
    return '1-4 videos/month'


def _to_int(value) -> int:
    try:
        return int(value)
    except (TypeError, ValueError):
        return 0


def youtube_get(resource: str, **params) -> Dict[str, Any]:
    """GET a YouTube Data API resource (search, channels, videos), cached."""
    api_key = current_app.config.get('YOUTUBE_API_KEY')
    if not api_key:
        raise ConfigurationError("YouTube API key not configured")

    cache_key = f"youtube:{resource}:" + "&".join(f"{k}={params[k]}" for k in sorted(params))
    cached = cache.get(cache_key)
    if cached is not None:
        logger.info(f"Cache hit for {cache_key}")
        return cached

    try:
        response = requests.get(f"{YOUTUBE_API_URL}/{resource}", params={**params, 'key': api_key}, timeout=10)
        response.raise_for_status()
        data = response.json()
    except (requests.RequestException, ValueError) as e:
        raise UpstreamServiceError(f"YouTube API error: {str(e)}", status_code=503)

    cache.set(cache_key, data)
    return data


def youtube_enabled() -> bool:
    return bool(current_app.config.get('YOUTUBE_API_KEY'))


def fetch_trending_videos(category: str = 'all') -> List[Dict[str, Any]]:
    """Fetch the most-popular chart, optionally filtered by category."""
    if not youtube_enabled():
        return []

    params = {
        'part': 'snippet,statistics',
        'chart': 'mostPopular',
        'regionCode': current_app.config['YOUTUBE_REGION'],
        'maxResults': 10,
    }
    category_id = YOUTUBE_CATEGORY_IDS.get(category, '')
    if category_id:
        params['videoCategoryId'] = category_id

    try:
        data = youtube_get('videos', **params)
    except UpstreamServiceError as e:
        logger.error(f"Error fetching YouTube trending videos: {e.message}")
        return []

    videos = []
    for item in data.get('items', []):
        snippet = item.get('snippet', {})
        stats = item.get('statistics', {})
        videos.append({
            'title': snippet.get('title', ''),
            'channel': snippet.get('channelTitle', ''),
            'views': format_number(_to_int(stats.get('viewCount'))),
            'likes': format_number(_to_int(stats.get('likeCount'))),
            'thumbnail': snippet.get('thumbnails', {}).get('medium', {}).get('url'),
            'publishedAt': snippet.get('publishedAt'),
        })
    return videos


def search_channels(query: str, max_results: int = 10) -> List[Dict[str, Any]]:
    """Search channels by keyword and attach subscriber/video statistics."""
    if not youtube_enabled():
        return []

    try:
        search = youtube_get('search', part='snippet', type='channel', q=query, maxResults=max_results)
        channel_ids = [item['id']['channelId'] for item in search.get('items', []) if 'channelId' in item.get('id', {})]
        if not channel_ids:
            return []
        details = youtube_get('channels', part='statistics,snippet', id=','.join(channel_ids))
    except UpstreamServiceError as e:
        logger.error(f"Error searching YouTube channels: {e.message}")
        return []

    channels = []
    for item in details.get('items', []):
        snippet = item.get('snippet', {})
        stats = item.get('statistics', {})
        channels.append({
            'id': item.get('id'),
            'name': snippet.get('title', ''),
            'description': (snippet.get('description') or '')[:150],
            'thumbnail': snippet.get('thumbnails', {}).get('medium', {}).get('url'),
            'subscribers': format_number(_to_int(stats.get('subscriberCount'))),
            'videos': _to_int(stats.get('videoCount')),
            'isRealData': True,
        })
    return channels


def fetch_channel_profile(name: str) -> Optional[Dict[str, Any]]:
    """Look up one channel by name plus its five most-viewed videos.

    Returns None when YouTube is not configured, the channel is not found,
    or the API fails.
    """
    if not youtube_enabled():
        return None

    try:
        search = youtube_get('search', part='snippet', type='channel', q=name, maxResults=1)
        items = search.get('items', [])
        if not items:
            return None
        channel_id = items[0]['id']['channelId']

        info = youtube_get('channels', part='statistics,snippet', id=channel_id)
        if not info.get('items'):
            return None
        stats = info['items'][0].get('statistics', {})
        snippet = info['items'][0].get('snippet', {})

        top = youtube_get('search', part='snippet', channelId=channel_id, type='video', order='viewCount', maxResults=5)
        video_ids = [item['id']['videoId'] for item in top.get('items', []) if 'videoId' in item.get('id', {})]
        video_stats = youtube_get('videos', part='statistics,snippet', id=','.join(video_ids)) if video_ids else {}
    except (UpstreamServiceError, KeyError, IndexError) as e:
        logger.error(f"Error fetching YouTube channel '{name}': {str(e)}")
        return None

    videos = []
    for v in video_stats.get('items', []):
        v_stats = v.get('statistics', {})
        videos.append({
            'title': v.get('snippet', {}).get('title', ''),
            'views': format_number(_to_int(v_stats.get('viewCount'))),
            'likes': format_number(_to_int(v_stats.get('likeCount'))),
            'comments': format_number(_to_int(v_stats.get('commentCount'))),
        })

    return {
        'id': channel_id,
        'name': snippet.get('title', name),
        'description': snippet.get('description', ''),
        'thumbnail': snippet.get('thumbnails', {}).get('high', {}).get('url'),
        'subscribers': format_number(_to_int(stats.get('subscriberCount'))),
        'totalViews': format_number(_to_int(stats.get('viewCount'))),
        'videoCount': _to_int(stats.get('videoCount')),
        'videos': videos,
    }


def extract_video_id(url_or_id: str) -> Optional[str]:
    """Pull the 11-character video id out of a YouTube URL, or accept a bare id."""
    if not url_or_id:
        return None
    if VIDEO_ID_PATTERN.match(url_or_id):
        return url_or_id
    for pattern in VIDEO_URL_PATTERNS:
        match = pattern.search(url_or_id)
        if match:
            return match.group(1)
    logger.warning(f"Could not extract a video id from: {url_or_id}")
    return None


def fetch_video_details(video_id: str) -> Optional[Dict[str, Any]]:
    """Metadata for one video, or None if YouTube does not know the id.

    Raises:
        ConfigurationError: YOUTUBE_API_KEY is not set.
        UpstreamServiceError: the YouTube API call failed.
    """
    data = youtube_get('videos', part='snippet,statistics,contentDetails', id=video_id)
    items = data.get('items') or []
    if not items:
        return None

    snippet = items[0].get('snippet', {})
    stats = items[0].get('statistics', {})
    thumbnails = snippet.get('thumbnails', {})
    thumbnail = thumbnails.get('maxres', {}).get('url') or thumbnails.get('high', {}).get('url')
    return {
        'id': video_id,
        'title': snippet.get('title', ''),
        'channel': snippet.get('channelTitle', ''),
        'channelId': snippet.get('channelId'),
        'description': snippet.get('description') or '',
        'thumbnail': thumbnail,
        'views': _to_int(stats.get('viewCount')),
        'likes': _to_int(stats.get('likeCount')),
        'comments': _to_int(stats.get('commentCount')),
        'publishedAt': snippet.get('publishedAt'),
        'duration': items[0].get('contentDetails', {}).get('duration'),
        'tags': snippet.get('tags') or [],
    }


def fetch_video_title(video_id: str, default: str = 'YouTube Video') -> str:
    """Best-effort title lookup; any YouTube problem yields ``default``."""
    if not youtube_enabled():
        return default
    try:
        details = fetch_video_details(video_id)
    except UpstreamServiceError as e:
        logger.error(f"Error fetching title for video {video_id}: {e.message}")
        return default
    return details['title'] if details and details['title'] else default


def format_timestamp(seconds: float) -> str:
    """83.4 -> '1:23'."""
    total = int(seconds)
    return f"{total // 60}:{total % 60:02d}"


def fetch_transcript(video_id: str) -> Optional[Dict[str, Any]]:
    """Fetch captions for a video in the configured language order, cached.

    Returns ``{'language': ..., 'segments': [{start, duration, timestamp, text}]}``
    or None when the video has no retrievable captions.
    """
    languages = current_app.config['TRANSCRIPT_LANGUAGES']
    cache_key = f"transcript:{video_id}:{','.join(languages)}"
    cached = cache.get(cache_key)
    if cached is not None:
        logger.info(f"Cache hit for {cache_key}")
        return cached

    try:
        fetched = YouTubeTranscriptApi().fetch(video_id, languages=languages)
    except (CouldNotRetrieveTranscript, requests.RequestException) as e:
        logger.warning(f"No transcript for video {video_id}: {type(e).__name__}")
        return None

    segments = []
    for snippet in fetched.snippets:
        text = snippet.text.replace('\n', ' ').strip()
        if text:
            segments.append({
                'start': snippet.start,
                'duration': snippet.duration,
                'timestamp': format_timestamp(snippet.start),
                'text': text,
            })
    if not segments:
        return None

    transcript = {'language': fetched.language, 'segments': segments}
    cache.set(cache_key, transcript)
    return transcript
