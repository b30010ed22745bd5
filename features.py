"""Creator tool handlers.

Each handler takes the parsed JSON request body and returns the response
payload. Handlers validate their inputs before touching the LLM gateway, so a
bad request is rejected with 400 even when the service is unconfigured.
"""

import logging
import re
import time
from typing import List

from flask import current_app

import prompts
from api_integrations import (
    estimate_frequency,
    extract_video_id,
    fetch_channel_profile,
    fetch_transcript,
    fetch_trending_videos,
    fetch_video_details,
    fetch_video_title,
    format_number,
    get_llm_client,
    search_channels as youtube_search_channels,
    youtube_enabled,
)
from errors import ConfigurationError, InvalidInputError, NotFoundError
from extraction import parse_lines, structured_completion
from schemas import (
    CalendarIdea,
    CompetitorInsights,
    Hashtag,
    Niche,
    SuggestedChannel,
    ThumbnailAnalysis,
    TikTokTrends,
    Trend,
    VideoAnalysis,
)

logger = logging.getLogger(__name__)

MAX_FIELD_LENGTH = 1000
HASHTAG_PATTERN = re.compile(r"#\w+")

FALLBACK_HASHTAGS = ['#contentcreator', '#youtube', '#viral', '#creator', '#trending']

FALLBACK_NICHE = Niche(
    name='AI Tools & Productivity',
    competition='Medium',
    monetization='High',
    growth='Growing',
    description='People seeking efficiency through technology',
    content_ideas=['Tool reviews', 'Workflow tutorials', 'Comparisons'],
    target_audience='Professionals and students',
)

FALLBACK_TREND = Trend(
    title='AI Tools for Creators',
    category='Tech',
    growth='🔥 Exploding',
    description='AI tools transforming content creation',
    content_ideas=['Top AI tools', 'AI vs manual', 'Free AI tools'],
    hashtags=['#AI', '#ContentCreator', '#Productivity'],
)

FALLBACK_THUMBNAIL = ThumbnailAnalysis(
    score=72,
    strengths=['Good contrast', 'Clear focal point', 'Readable text'],
    improvements=['Add emotional expression', 'Use bolder colors', 'Add curiosity elements'],
    click_prediction='Above average performance expected',
    color_analysis='Could use more vibrant colors',
    text_analysis='Text present and readable',
    face_analysis='Human elements help relatability',
)

FALLBACK_INSIGHTS = CompetitorInsights(
    content_pattern='Consistent uploads with strong hooks',
    audience='Engaged community interested in niche content',
    opportunities=['Create unique angles', 'Cover underserved topics', 'Try different formats'],
    lessons_to_learn=['Consistency matters', 'Thumbnails are key', 'Engage with comments'],
)

FALLBACK_TIKTOK = TikTokTrends(
    algorithm_tips=['Post consistently', 'Hook in first 0.5s', 'Use trending sounds'],
)

FALLBACK_VIDEO_ANALYSIS = VideoAnalysis(
    viral_score=75,
    hook_analysis='Analysis pending',
)


def sanitize_input(value, max_length=MAX_FIELD_LENGTH):
    """Trim user text and cap its length; non-strings become ''."""
    if not isinstance(value, str):
        return ''
    return value.strip()[:max_length]


def text_field(body, name, default=''):
    return sanitize_input(body.get(name)) or default


def require(body, name, label=None):
    value = text_field(body, name)
    if not value:
        raise InvalidInputError(f"{label or name} is required")
    return value


def _dump(items):
    return [item.to_wire() for item in items]


# ---------------------------------------------------------------------------
# Text features
# ---------------------------------------------------------------------------

def generate_titles(body):
    topic = require(body, 'topic', 'Topic')
    platform = text_field(body, 'platform', 'youtube')
    style = text_field(body, 'style', 'curiosity')
    llm = get_llm_client()

    content = llm.chat(prompts.title_prompt(topic, platform, style), temperature=0.9, max_tokens=500)
    return {'titles': parse_lines(content, min_length=5, limit=prompts.TITLE_COUNT)}


def generate_hooks(body):
    topic = require(body, 'topic', 'Topic')
    hook_type = text_field(body, 'hookType', 'question')
    duration = text_field(body, 'duration', 'short')
    llm = get_llm_client()

    content = llm.chat(prompts.hook_prompt(topic, hook_type, duration), temperature=0.9, max_tokens=600)
    return {'hooks': parse_lines(content, min_length=10, limit=prompts.HOOK_COUNT)}


def generate_description(body):
    title = require(body, 'title', 'Title')
    messages = prompts.description_prompt(
        title,
        topic=text_field(body, 'topic'),
        platform=text_field(body, 'platform', 'youtube'),
        include_timestamps=bool(body.get('includeTimestamps')),
        include_cta=bool(body.get('includeCTA')),
    )
    llm = get_llm_client()
    return {'description': llm.chat(messages, temperature=0.8, max_tokens=800)}


def generate_script(body):
    niche = require(body, 'niche', 'Niche')
    messages = prompts.script_prompt(
        niche,
        topic=text_field(body, 'topic'),
        platform=text_field(body, 'platform', 'youtube'),
        script_length=text_field(body, 'scriptLength', 'medium'),
    )
    llm = get_llm_client()
    script = llm.chat(messages, temperature=0.85, max_tokens=3000)
    return {'script': script or 'Failed to generate script.'}


def analyze(body):
    content = require(body, 'content', 'Content')
    content_type = text_field(body, 'type', 'content')
    llm = get_llm_client()
    return {'analysis': llm.chat(prompts.analysis_prompt(content, content_type), temperature=0.7, max_tokens=800)}


def ai_chat(body):
    messages = body.get('messages')
    if not isinstance(messages, list) or not messages:
        raise InvalidInputError("Messages required")
    if not all(isinstance(m, dict) and 'content' in m for m in messages):
        raise InvalidInputError("Each message needs a role and content")
    llm = get_llm_client()

    reply = llm.chat(prompts.chat_messages(messages, body.get('context')), temperature=0.8, max_tokens=4000)
    return {'reply': reply or 'Sorry, I could not generate a response.'}


# ---------------------------------------------------------------------------
# Structured (JSON) features
# ---------------------------------------------------------------------------

def _hashtags_from_text(content):
    tags = []
    for line in (content or '').split('\n'):
        match = HASHTAG_PATTERN.search(line)
        if match:
            tags.append(Hashtag(tag=match.group(0)))
    return tags or [Hashtag(tag=tag) for tag in FALLBACK_HASHTAGS]


def generate_hashtags(body):
    topic = require(body, 'topic', 'Topic')
    platform = text_field(body, 'platform', 'youtube')
    llm = get_llm_client()

    hashtags, used_fallback = structured_completion(
        llm, prompts.hashtag_prompt(topic, platform), List[Hashtag], _hashtags_from_text,
        kind='array', temperature=0.7, max_tokens=500,
    )
    return {'hashtags': _dump(hashtags), 'usedFallback': used_fallback}


def _calendar_fallback(niche, stamp):
    return [
        CalendarIdea(
            id=f"idea-{stamp}-{i}",
            day=day,
            title=f"{niche} content for {day}",
            type=prompts.CALENDAR_TYPES[i % len(prompts.CALENDAR_TYPES)],
        )
        for i, day in enumerate(prompts.CALENDAR_DAYS)
    ]


def generate_calendar(body):
    niche = require(body, 'niche', 'Niche')
    llm = get_llm_client()
    stamp = int(time.time() * 1000)

    ideas, used_fallback = structured_completion(
        llm, prompts.calendar_prompt(niche), List[CalendarIdea],
        lambda _content: _calendar_fallback(niche, stamp),
        kind='array', temperature=0.9, max_tokens=800,
    )
    for i, idea in enumerate(ideas):
        idea.id = idea.id or f"idea-{stamp}-{i}"
        idea.status = 'idea'
    return {'ideas': _dump(ideas), 'usedFallback': used_fallback}


def find_niches(body):
    interests = text_field(body, 'interests') or text_field(body, 'category', 'general')
    audience = text_field(body, 'audience', 'general audience')
    llm = get_llm_client()

    niches, used_fallback = structured_completion(
        llm, prompts.niche_prompt(interests, audience), List[Niche], [FALLBACK_NICHE],
        kind='array', unwrap='niches', temperature=0.8, max_tokens=1000,
    )
    return {'niches': _dump(niches), 'usedFallback': used_fallback}


def get_trends(body):
    category = text_field(body, 'category', 'all')
    llm = get_llm_client()

    videos = fetch_trending_videos(category)
    trends, used_fallback = structured_completion(
        llm, prompts.trends_prompt(category, videos), List[Trend],
        lambda _content: [FALLBACK_TREND.model_copy()],
        kind='array', temperature=0.8, max_tokens=1000,
    )
    is_real = bool(videos) and not used_fallback
    for trend in trends:
        trend.is_real_data = is_real
    return {
        'trends': _dump(trends),
        'realTrendingVideos': videos[:5],
        'usedFallback': used_fallback,
    }


def analyze_thumbnail(body):
    image_url = require(body, 'imageUrl', 'Image URL')
    llm = get_llm_client()

    analysis, used_fallback = structured_completion(
        llm, prompts.thumbnail_prompt(image_url), ThumbnailAnalysis, FALLBACK_THUMBNAIL,
        temperature=0.8, max_tokens=600,
    )
    return {'analysis': analysis.to_wire(), 'usedFallback': used_fallback}


def analyze_competitor(body):
    channel_name = require(body, 'channelName', 'Channel name').lstrip('@')
    if not channel_name:
        raise InvalidInputError("Channel name is required")
    llm = get_llm_client()

    profile = fetch_channel_profile(channel_name)
    insights, used_fallback = structured_completion(
        llm, prompts.competitor_prompt(channel_name, profile), CompetitorInsights, FALLBACK_INSIGHTS,
        temperature=0.7, max_tokens=600,
    )

    videos = profile['videos'] if profile else []
    if videos:
        top_performing = [
            {'title': v['title'], 'views': v['views'], 'why': f"{v['likes']} likes, {v['comments']} comments"}
            for v in videos[:3]
        ]
    else:
        top_performing = [{'title': 'No data available', 'views': 'N/A', 'why': 'Add YOUTUBE_API_KEY for real data'}]

    analysis = {
        'channelName': profile['name'] if profile else channel_name,
        'channelId': profile['id'] if profile else None,
        'thumbnail': profile['thumbnail'] if profile else None,
        'subscribers': profile['subscribers'] if profile else 'Unknown',
        'totalViews': profile['totalViews'] if profile else 'Unknown',
        'videoCount': profile['videoCount'] if profile else 'Unknown',
        'uploadFrequency': estimate_frequency(profile['videoCount']) if profile else 'Unknown',
        'isRealData': profile is not None,
        'topPerforming': top_performing,
    }
    analysis.update(insights.to_wire())
    return {'analysis': analysis, 'usedFallback': used_fallback}


def search_channels(body):
    query = text_field(body, 'query') or text_field(body, 'niche')
    if not query:
        raise InvalidInputError("query or niche is required")
    llm = get_llm_client()

    channels = youtube_search_channels(query)
    if channels:
        return {'channels': channels, 'usedFallback': False}

    suggestions, used_fallback = structured_completion(
        llm, prompts.channel_suggestion_prompt(query), List[SuggestedChannel], [],
        kind='array', temperature=0.7, max_tokens=600,
    )
    for channel in suggestions:
        channel.is_real_data = False
    return {'channels': _dump(suggestions), 'usedFallback': used_fallback}


def tiktok_trends(body):
    niche = text_field(body, 'niche')
    question = text_field(body, 'question')
    llm = get_llm_client()

    if question:
        answer = llm.chat(prompts.tiktok_question_prompt(question), temperature=0.8, max_tokens=800)
        return {'chatResponse': answer}

    trends, used_fallback = structured_completion(
        llm, prompts.tiktok_trends_prompt(niche), TikTokTrends, FALLBACK_TIKTOK,
        temperature=0.8, max_tokens=2000,
    )
    return {'trends': trends.to_wire(), 'usedFallback': used_fallback}


# ---------------------------------------------------------------------------
# Video and transcript features
# ---------------------------------------------------------------------------

def engagement_rate(likes, views):
    """Likes per hundred views, as a two-decimal string."""
    if not views:
        return '0'
    return f"{likes / views * 100:.2f}"


def _video_id(body, name, label):
    video_id = extract_video_id(require(body, name, label))
    if not video_id:
        raise InvalidInputError("Invalid YouTube URL. Supported: youtube.com/watch, youtube.com/shorts, youtu.be")
    return video_id


def _transcript_or_404(video_id):
    transcript = fetch_transcript(video_id)
    if transcript is None:
        raise NotFoundError("No captions found for this video.")
    return transcript


def _full_text(transcript):
    return ' '.join(segment['text'] for segment in transcript['segments'])


def analyze_video(body):
    video_id = _video_id(body, 'videoUrl', 'Video URL')
    question = text_field(body, 'question')
    if not youtube_enabled():
        raise ConfigurationError("Configuration error: YouTube API key not configured (YOUTUBE_API_KEY)")
    llm = get_llm_client()

    details = fetch_video_details(video_id)
    if details is None:
        raise NotFoundError("Video not found")

    transcript = fetch_transcript(video_id)
    transcript_text = _full_text(transcript) if transcript else ''
    excerpt = transcript_text[:current_app.config['TRANSCRIPT_MAX_CHARS']]

    rate = engagement_rate(details['likes'], details['views'])
    video = {
        **details,
        'views': format_number(details['views']),
        'likes': format_number(details['likes']),
        'comments': format_number(details['comments']),
        'viewsRaw': details['views'],
        'likesRaw': details['likes'],
        'engagementRate': rate,
    }

    chat_response = None
    if question:
        chat_response = llm.chat(
            prompts.video_question_prompt(video, rate, question, excerpt), temperature=0.7, max_tokens=800,
        )

    analysis, used_fallback = structured_completion(
        llm, prompts.video_analysis_prompt(video, rate, excerpt), VideoAnalysis, FALLBACK_VIDEO_ANALYSIS,
        temperature=0.7, max_tokens=1200,
    )
    return {
        'video': video,
        'hasTranscript': transcript is not None,
        'transcript': transcript['segments'] if transcript else None,
        'transcriptText': transcript_text,
        'analysis': analysis.to_wire(),
        'chatResponse': chat_response,
        'usedFallback': used_fallback,
    }


def get_transcript(body):
    video_id = _video_id(body, 'url', 'URL')
    transcript = _transcript_or_404(video_id)
    return {
        'videoId': video_id,
        'title': fetch_video_title(video_id, default='Unknown Title'),
        'language': transcript['language'],
        'transcript': transcript['segments'],
        'fullText': _full_text(transcript),
    }


def transcribe(body):
    """Plain-text transcript for the Netlify client, which sends ``videoId``."""
    video_id = _video_id(body, 'videoId', 'Video ID')
    transcript = _transcript_or_404(video_id)
    return {'transcript': _full_text(transcript), 'title': fetch_video_title(video_id)}


FEATURES = {
    'ai-chat': ai_chat,
    'generate-script': generate_script,
    'generate-titles': generate_titles,
    'generate-hooks': generate_hooks,
    'generate-hashtags': generate_hashtags,
    'generate-description': generate_description,
    'generate-calendar': generate_calendar,
    'analyze': analyze,
    'analyze-thumbnail': analyze_thumbnail,
    'analyze-competitor': analyze_competitor,
    'get-trends': get_trends,
    'find-niches': find_niches,
    'search-channels': search_channels,
    'tiktok-trends': tiktok_trends,
    'analyze-video': analyze_video,
    'get-transcript': get_transcript,
    'transcribe': transcribe,
}
