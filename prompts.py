"""Prompt templates for each creator tool.

Every builder returns a ``[system, user]`` message pair ready for the chat
completions API. Caller-supplied style/platform/category keys are looked up in
the tables below; unknown keys fall back to the first-listed default.
"""

import json
from datetime import date

TITLE_STYLES = {
    'curiosity': 'Create titles with curiosity gaps that make viewers NEED to click. Use phrases like "What happens when...", "The truth about...", "Nobody is talking about..."',
    'listicle': 'Create numbered list titles like "7 Ways to...", "10 Mistakes That...", "5 Secrets to..."',
    'howto': 'Create educational titles like "How to...", "The Ultimate Guide to...", "Learn to..."',
    'controversial': 'Create bold, provocative titles that challenge common beliefs. Use phrases like "Why everyone is wrong about...", "The lie about..."',
    'emotional': 'Create emotionally charged titles that connect with feelings. Use words like "heartbreaking", "life-changing", "incredible"',
    'urgency': 'Create time-sensitive titles with urgency. Use phrases like "Before it\'s too late", "You need to know this NOW", "Stop doing this immediately"',
}

PLATFORM_GUIDES = {
    'youtube': 'Optimize for YouTube search. Keep under 60 characters. Front-load keywords.',
    'tiktok': 'Make it punchy and scroll-stopping. Gen Z style. Use caps strategically.',
    'instagram': 'Keep it clean and aspirational. Works well with emojis.',
    'shorts': 'Ultra short and punchy. Maximum impact in minimum words.',
}

HOOK_STYLES = {
    'question': 'Provocative questions they MUST know the answer to',
    'statistic': 'Shocking statistics or numbers',
    'story': 'Start mid-story: "So there I was..."',
    'controversy': 'Challenge beliefs: "Everyone thinks X but..."',
    'promise': 'Bold promises: "By the end of this..."',
    'pov': 'POV format: "POV: You just discovered..."',
}

HOOK_DURATIONS = {
    'short': '1-2 sentences, under 3 seconds',
    'medium': '2-3 sentences, 5 seconds',
    'long': '3-4 sentences, 10 seconds',
}

HASHTAG_COUNTS = {'youtube': 15, 'tiktok': 8, 'instagram': 20, 'twitter': 5}

SCRIPT_LENGTHS = {
    'short': {'words': '150-300', 'duration': '30-60 seconds'},
    'medium': {'words': '500-800', 'duration': '2-4 minutes'},
    'long': {'words': '1200-2000', 'duration': '8-12 minutes'},
}

CALENDAR_DAYS = ['Monday', 'Tuesday', 'Wednesday', 'Thursday', 'Friday', 'Saturday', 'Sunday']
CALENDAR_TYPES = ['📺 Long-form', '⚡ Short', '🎵 TikTok', '📸 Reel']

TITLE_COUNT = 8
HOOK_COUNT = 5


def lookup(table, key, default):
    return table.get(key) or table[default]


def _month(today=None):
    return (today or date.today()).strftime('%B %Y')


def _messages(system, user):
    return [
        {'role': 'system', 'content': system},
        {'role': 'user', 'content': user},
    ]


def title_prompt(topic, platform='youtube', style='curiosity'):
    system = f"""You are an expert viral title writer for social media. Generate EXACTLY {TITLE_COUNT} unique, click-worthy titles.

STYLE GUIDE: {lookup(TITLE_STYLES, style, 'curiosity')}
PLATFORM: {lookup(PLATFORM_GUIDES, platform, 'youtube')}

Rules:
- Each title must be unique and take a different angle
- Use power words and emotional triggers
- DO NOT number them or add explanations
- Return ONLY the titles, one per line"""
    return _messages(system, f'Generate {TITLE_COUNT} viral {style} titles for: "{topic}"')


def hook_prompt(topic, hook_type='question', duration='short'):
    system = (
        f"Generate {HOOK_COUNT} scroll-stopping hooks. "
        f"Style: {lookup(HOOK_STYLES, hook_type, 'question')}. "
        f"Length: {lookup(HOOK_DURATIONS, duration, 'short')}. "
        "Return only hooks, one per line, no numbering."
    )
    return _messages(system, f'Topic: "{topic}"')


def hashtag_count(platform):
    return HASHTAG_COUNTS.get(platform, HASHTAG_COUNTS['youtube'])


def hashtag_prompt(topic, platform='youtube'):
    system = (
        f"Generate {hashtag_count(platform)} hashtags for {platform}. "
        'Return JSON array: [{"tag": "#hashtag", "popularity": "high/medium/low"}]. '
        "Mix popularity levels. Only return JSON."
    )
    return _messages(system, f'Topic: "{topic}"')


def description_prompt(title, topic='', platform='youtube', include_timestamps=False, include_cta=False):
    instructions = f"Write SEO video description for {platform}.\nTitle: {title}"
    if topic:
        instructions += f"\nTopic: {topic}"
    if include_timestamps:
        instructions += "\nInclude 5-7 realistic timestamps."
    if include_cta:
        instructions += "\nInclude subscribe, like, comment CTAs."
    system = (
        "Write engaging, SEO-optimized video descriptions. Start with a compelling hook. "
        "Use keywords naturally. Add hashtags at the end."
    )
    return _messages(system, instructions)


def script_prompt(niche, topic='', platform='youtube', script_length='medium', today=None):
    length = lookup(SCRIPT_LENGTHS, script_length, 'medium')
    platform_name = 'TikTok' if platform == 'tiktok' else 'YouTube'

    system = f"""You are an elite viral content creator and scriptwriter as of {_month(today)}. You have deep knowledge of:

CURRENT TRENDS:
- AI-enhanced storytelling and content creation
- "Story time" format with visual hooks
- Educational entertainment ("edutainment")
- Raw, unfiltered authenticity over polish
- "POV" and first-person narratives

ALGORITHM INSIGHTS:
- First 1-3 seconds determine most of a video's performance
- Watch time and rewatch rate are primary metrics
- Shares and saves matter more than likes
- Series content gets an algorithmic boost

Your scripts feel REAL, not scripted."""

    about = f' about "{topic}"' if topic else ''
    user = f"""Create a VIRAL {platform_name} script for the "{niche}" niche{about}.

PLATFORM: {platform_name}
LENGTH: {length['words']} words ({length['duration']})

FORMAT:
**🎬 TITLE OPTIONS**
(3 click-worthy, SEO-optimized titles)

**🎯 THE HOOK** (First 3 seconds)

**📜 FULL SCRIPT**
(Include [VISUAL] cues, timestamps, pattern interrupts)

**✨ PRO TIPS**
(Platform-specific advice for this script)"""
    return _messages(system, user)


def calendar_prompt(niche):
    system = f"""Generate a week of content for the {niche} niche. Return JSON array:
[{{"id": "unique-id", "day": "Monday", "title": "Video idea", "type": "{CALENDAR_TYPES[0]}", "status": "idea"}}]
Use days: {', '.join(CALENDAR_DAYS)}. Types: {', '.join(CALENDAR_TYPES)}. Generate 7-10 ideas spread across the week. Only return JSON."""
    return _messages(system, f"Niche: {niche}")


def niche_prompt(interests='general', audience='general audience'):
    system = """Find profitable niches. Return JSON array:
[{
  "name": "Niche name",
  "competition": "Low/Medium/High",
  "monetization": "High/Medium/Low",
  "growth": "Growing/Stable/Declining",
  "description": "Why this niche works",
  "contentIdeas": ["idea1", "idea2", "idea3"],
  "targetAudience": "Who watches this"
}]
Generate 5-6 niches. Be specific and actionable."""
    return _messages(system, f"Interests: {interests}. Target: {audience}")


def trends_prompt(category='all', trending_videos=None, today=None):
    system = """Return 6 trends as JSON array only:
[{"title": "Trend name", "category": "Tech/Gaming/etc", "growth": "🔥 Exploding", "description": "Why trending", "contentIdeas": ["idea1", "idea2", "idea3"], "hashtags": ["#tag1", "#tag2", "#tag3"]}]"""

    month = _month(today)
    if trending_videos:
        listing = '\n'.join(
            f'- "{v["title"]}" by {v["channel"]} ({v["views"]} views)' for v in trending_videos[:8]
        )
        user = (
            f"These are REAL trending YouTube videos from {month}:\n{listing}\n\n"
            "Identify 6 content trends/opportunities based on these REAL videos."
        )
    else:
        scope = f" in {category}" if category and category != 'all' else ''
        user = f"Generate 6 trending content topics for {month}{scope}."
    return _messages(system, user)


def competitor_prompt(channel_name, profile=None):
    system = """Return JSON only:
{
  "contentPattern": "string",
  "audience": "string",
  "opportunities": ["string", "string", "string"],
  "lessonsToLearn": ["string", "string", "string"]
}"""
    ask = "Provide: content pattern, target audience, 3 opportunities, 3 lessons."
    if profile:
        videos = '\n'.join(f'- "{v["title"]}" ({v["views"]} views)' for v in profile['videos'])
        user = f"""Analyze this REAL YouTube channel:
CHANNEL: {profile['name']}
SUBSCRIBERS: {profile['subscribers']}
TOTAL VIEWS: {profile['totalViews']}
VIDEO COUNT: {profile['videoCount']}

TOP VIDEOS:
{videos}

{ask}"""
    else:
        user = f'Analyze creators in this niche: "{channel_name}". {ask}'
    return _messages(system, user)


def thumbnail_prompt(image_url):
    system = """Provide thumbnail analysis as JSON:
{
  "score": 60-95,
  "strengths": ["...", "..."],
  "improvements": ["...", "..."],
  "clickPrediction": "CTR performance prediction",
  "colorAnalysis": "Color usage analysis",
  "textAnalysis": "Text readability analysis",
  "faceAnalysis": "Human elements analysis"
}
Vary responses. Be specific and helpful."""
    return _messages(system, f"Analyze thumbnail best practices for URL: {image_url}")


def channel_suggestion_prompt(query):
    system = """Suggest creators to study. Return JSON:
[{"name": "Creator name", "description": "What they do", "subscribers": "~1M", "niche": "Their niche", "isRealData": false}]
Generate 5-8 suggestions."""
    return _messages(system, f"Find creators in: {query}")


def analysis_prompt(content, content_type='content'):
    system = (
        "You are a content analysis expert. Analyze the given content and provide insights "
        "on viral potential, improvements, and optimization tips."
    )
    return _messages(system, f"Analyze this {content_type}: {content}")


def tiktok_question_prompt(question, today=None):
    system = f"""You are a TikTok growth expert in {_month(today)}. You know the latest trends, sounds, formats, and algorithm secrets. Answer questions about TikTok strategy, content creation, and growth. Be specific and actionable. Use emojis sparingly.

Current TikTok knowledge:
- Completion rate is the #1 ranking factor
- The first 0.5 seconds determine the scroll-stop
- Saves and shares are weighted far more than likes
- Reply videos and stitches get priority
- Consistency beats quantity
- Sound selection is crucial for discoverability"""
    return _messages(system, question)


def tiktok_trends_prompt(niche='', today=None):
    month = _month(today)
    system = f"""You are a TikTok trend analyst in {month}. Return JSON with current TikTok insights:

{{
  "trendingSounds": [{{"name": "Sound name", "description": "What it sounds like", "usage": "How creators use it", "potential": "high/medium/low"}}],
  "trendingFormats": [{{"name": "Format name", "description": "What this format is", "example": "Example video idea", "difficulty": "easy/medium/hard"}}],
  "viralHooks": [{{"hook": "The hook text or pattern", "whyItWorks": "Psychology behind it"}}],
  "nicheOpportunities": [{{"niche": "Niche name", "growth": "Growing/Saturated/Emerging", "strategy": "How to enter"}}],
  "algorithmTips": ["tip1", "tip2", "tip3"],
  "contentIdeas": [{{"idea": "Video idea", "format": "Format type", "estimatedViews": "10K-100K", "difficulty": "easy"}}]
}}"""
    if niche:
        user = (
            f'Analyze TikTok trends and opportunities for the "{niche}" niche. '
            "Include sounds, formats, and content ideas specific to this niche."
        )
    else:
        user = (
            f"What are the current TikTok trends, viral formats, and opportunities in {month}? "
            "Include trending sounds, hook formulas, and algorithm tips."
        )
    return _messages(system, user)


def chat_system_prompt(context=None, today=None):
    today = today or date.today()
    prompt = f"""You are an expert viral content strategist and scriptwriter assistant. Today's date is {today.strftime('%A, %B %d, %Y')}.

YOUR ROLE: Guide creators through an interactive conversation to understand their vision, then generate the perfect viral script.

CONVERSATION FLOW:
1. Ask about their niche/expertise
2. Ask about their target audience
3. Ask about the specific topic/message
4. Ask about their content style (funny, serious, educational, etc.)
5. Ask about the platform (TikTok, YouTube, etc.) and preferred length
6. THEN generate the script with all gathered info

BE CONVERSATIONAL: ask ONE question at a time and build rapport.

When you have enough info, create the script with:
- 🎬 TITLE OPTIONS (3 SEO-optimized titles)
- 🎯 THE HOOK (First 3 seconds)
- 📜 FULL SCRIPT (with [PAUSE], [EMPHASIS], [B-ROLL] markers)
- 🔥 VIRAL ELEMENTS (why this will work)
- 🏷️ HASHTAGS & KEYWORDS
- 💡 CREATOR NOTES"""
    if context:
        prompt += f"\n\nCONTEXT FROM USER: {json.dumps(context)}"
    return prompt


def chat_messages(messages, context=None, today=None):
    """Prepend the strategist system prompt; unknown roles become 'assistant'."""
    history = [{'role': 'system', 'content': chat_system_prompt(context, today)}]
    for m in messages:
        role = m.get('role')
        if role not in ('system', 'user'):
            role = 'assistant'
        history.append({'role': role, 'content': str(m.get('content', ''))})
    return history


def _video_stats(video, engagement_rate):
    return (
        f"TITLE: {video['title']}\n"
        f"CHANNEL: {video['channel']}\n"
        f"VIEWS: {video['views']}\n"
        f"ENGAGEMENT: {engagement_rate}%"
    )


def video_analysis_prompt(video, engagement_rate, transcript_text=''):
    """``video`` carries display-formatted counts; the transcript is already truncated."""
    system = """Analyze this YouTube video and return JSON:
{
  "viralScore": 85,
  "hookAnalysis": "Analysis of the opening hook",
  "contentStructure": "How the video is structured",
  "whyItWorks": ["reason1", "reason2", "reason3"],
  "viralFormulas": ["formula: explanation"],
  "lessonsForCreators": ["lesson1", "lesson2", "lesson3"],
  "keyMoments": ["moment1", "moment2", "moment3"],
  "audienceInsight": "Who watches this and why"
}"""
    stats = _video_stats(video, engagement_rate)
    if transcript_text:
        user = f"Analyze this video using the REAL transcript:\n\n{stats}\n\nTRANSCRIPT:\n{transcript_text}"
    else:
        user = f"Analyze based on metadata only:\n\n{stats}\nDESCRIPTION: {video['description'][:1500]}"
    return _messages(system, user)


def video_question_prompt(video, engagement_rate, question, transcript_text=''):
    system = f"""You are an expert video analyst. Answer questions about this video using the transcript and metadata provided.

VIDEO INFO:
{_video_stats(video, engagement_rate)}

TRANSCRIPT:
{transcript_text or 'Transcript not available'}"""
    return _messages(system, question)
