"""Response shapes for the structured (JSON) features.

Model output is validated against these before it reaches the client. Field
names are snake_case in Python and camelCase on the wire; unknown fields the
model invents are dropped.
"""

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


class WireModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, coerce_numbers_to_str=True)

    def to_wire(self):
        return self.model_dump(by_alias=True)


def round_number(value):
    """Accept 82.5 or "82.5" for an integer score; anything else is left to pydantic."""
    if isinstance(value, str):
        try:
            value = float(value)
        except ValueError:
            return value
    if isinstance(value, float):
        return round(value)
    return value


class Hashtag(WireModel):
    tag: str
    popularity: str = 'medium'


class CalendarIdea(WireModel):
    id: Optional[str] = None
    day: str
    title: str
    type: str = ''
    status: str = 'idea'


class Niche(WireModel):
    name: str
    competition: str
    monetization: str = 'Medium'
    growth: str = 'Stable'
    description: str
    content_ideas: List[str] = Field(default_factory=list)
    target_audience: str = ''


class Trend(WireModel):
    title: str
    category: str = ''
    growth: str = ''
    description: str
    content_ideas: List[str] = Field(default_factory=list)
    hashtags: List[str] = Field(default_factory=list)
    is_real_data: bool = False


class ThumbnailAnalysis(WireModel):
    score: int = Field(ge=0, le=100)
    strengths: List[str]
    improvements: List[str]
    click_prediction: str = ''
    color_analysis: str = ''
    text_analysis: str = ''
    face_analysis: str = ''

    @field_validator('score', mode='before')
    @classmethod
    def round_score(cls, value):
        return round_number(value)


class CompetitorInsights(WireModel):
    content_pattern: str
    audience: str
    opportunities: List[str]
    lessons_to_learn: List[str]


class SuggestedChannel(WireModel):
    name: str
    description: str = ''
    subscribers: str = 'Unknown'
    niche: str = ''
    is_real_data: bool = False


class TrendingSound(WireModel):
    name: str
    description: str = ''
    usage: str = ''
    potential: str = 'medium'


class TrendingFormat(WireModel):
    name: str
    description: str = ''
    example: str = ''
    difficulty: str = 'medium'


class ViralHook(WireModel):
    hook: str
    why_it_works: str = ''


class NicheOpportunity(WireModel):
    niche: str
    growth: str = ''
    strategy: str = ''


class ContentIdea(WireModel):
    idea: str
    format: str = ''
    estimated_views: str = ''
    difficulty: str = 'medium'


class TikTokTrends(WireModel):
    trending_sounds: List[TrendingSound] = Field(default_factory=list)
    trending_formats: List[TrendingFormat] = Field(default_factory=list)
    viral_hooks: List[ViralHook] = Field(default_factory=list)
    niche_opportunities: List[NicheOpportunity] = Field(default_factory=list)
    algorithm_tips: List[str] = Field(default_factory=list)
    content_ideas: List[ContentIdea] = Field(default_factory=list)


class VideoAnalysis(WireModel):
    viral_score: int = Field(ge=0, le=100)
    hook_analysis: str = ''
    content_structure: str = ''
    why_it_works: List[str] = Field(default_factory=list)
    viral_formulas: List[str] = Field(default_factory=list)
    lessons_for_creators: List[str] = Field(default_factory=list)
    key_moments: List[str] = Field(default_factory=list)
    audience_insight: str = ''

    @field_validator('viral_score', mode='before')
    @classmethod
    def round_score(cls, value):
        return round_number(value)
