from typing import List
from unittest.mock import MagicMock

from extraction import extract_json, parse_lines, structured_completion
from schemas import Hashtag, Niche, ThumbnailAnalysis


def fake_llm(reply):
    llm = MagicMock()
    llm.chat.return_value = reply
    return llm


class TestExtractJson:

    def test_object_embedded_in_prose(self):
        reply = 'Sure! Here is the analysis:\n{"score": 80, "tags": ["a", "b"], "nested": {"ok": true}}\nHope it helps.'
        assert extract_json(reply) == {"score": 80, "tags": ["a", "b"], "nested": {"ok": True}}

    def test_array_inside_markdown_fence(self):
        reply = '```json\n[{"tag": "#coffee", "popularity": "high"}]\n```'
        assert extract_json(reply, 'array') == [{"tag": "#coffee", "popularity": "high"}]

    def test_no_json_span(self):
        assert extract_json("I can't help with that.") is None
        assert extract_json("no array here", 'array') is None

    def test_malformed_json(self):
        assert extract_json('{"score": 80,,}') is None
        assert extract_json('[{"tag": "#a"}', 'array') is None

    def test_greedy_span_over_two_objects_fails(self):
        # first "{" through last "}" is not one valid document
        assert extract_json('{"a": 1} and then {"b": 2}') is None

    def test_non_string_input(self):
        assert extract_json(None) is None
        assert extract_json('') is None


class TestParseLines:

    def test_strips_markers_and_quotes(self):
        text = '1. "First title here"\n2) Second title here\n- Third title here\n• Fourth one here\n\n'
        assert parse_lines(text) == ['First title here', 'Second title here', 'Third title here', 'Fourth one here']

    def test_keeps_leading_numbers_that_are_not_markers(self):
        assert parse_lines('7 Ways to Brew Coffee') == ['7 Ways to Brew Coffee']

    def test_min_length_and_limit(self):
        text = 'short\nthis line is long enough\nanother long enough line\nthird long enough line'
        assert parse_lines(text, min_length=5, limit=2) == ['this line is long enough', 'another long enough line']


class TestStructuredCompletion:

    def test_valid_reply(self):
        llm = fake_llm('Here you go: [{"tag": "#coffee", "popularity": "high"}, {"tag": "#brew"}]')
        tags, used_fallback = structured_completion(llm, [], List[Hashtag], [], kind='array', temperature=0.7)
        assert not used_fallback
        assert [t.to_wire() for t in tags] == [
            {'tag': '#coffee', 'popularity': 'high'},
            {'tag': '#brew', 'popularity': 'medium'},
        ]
        llm.chat.assert_called_once_with([], temperature=0.7)

    def test_no_json_returns_static_fallback(self):
        fallback = ThumbnailAnalysis(score=72, strengths=['x'], improvements=['y'])
        result, used_fallback = structured_completion(fake_llm('Looks great!'), [], ThumbnailAnalysis, fallback)
        assert used_fallback
        assert result is fallback

    def test_malformed_json_returns_fallback(self):
        result, used_fallback = structured_completion(fake_llm('{"score": 9'), [], ThumbnailAnalysis, 'fallback')
        assert (result, used_fallback) == ('fallback', True)

    def test_shape_mismatch_is_treated_as_parse_failure(self):
        reply = '{"score": "very good", "strengths": "none"}'
        result, used_fallback = structured_completion(fake_llm(reply), [], ThumbnailAnalysis, 'fallback')
        assert used_fallback
        assert result == 'fallback'

    def test_callable_fallback_receives_raw_reply(self):
        seen = []
        result, used_fallback = structured_completion(
            fake_llm('plain text'), [], List[Hashtag], lambda content: seen.append(content) or ['x'], kind='array',
        )
        assert used_fallback
        assert result == ['x']
        assert seen == ['plain text']

    def test_unwraps_object_wrapper(self):
        reply = '{"niches": [{"name": "Desk setups", "competition": "low", "description": "Underserved"}]}'
        niches, used_fallback = structured_completion(
            fake_llm(reply), [], List[Niche], [], kind='array', unwrap='niches',
        )
        assert not used_fallback
        assert niches[0].name == 'Desk setups'
        assert niches[0].to_wire()['contentIdeas'] == []

    def test_unknown_fields_are_dropped(self):
        reply = '[{"tag": "#a", "popularity": "low", "sponsor": "acme"}]'
        tags, _ = structured_completion(fake_llm(reply), [], List[Hashtag], [], kind='array')
        assert tags[0].to_wire() == {'tag': '#a', 'popularity': 'low'}
