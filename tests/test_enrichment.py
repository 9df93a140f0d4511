"""Test LLM enrichment with a fake Anthropic client."""
import json
from types import SimpleNamespace

import httpx
import pytest
from anthropic import APIConnectionError
from tenacity import wait_none

from extraction import enrichment
from extraction.enrichment import LLMEnricher, extract_json
from extraction.errors import EnrichmentError
from extraction.models import Character, Location
from extraction.profiles import SERVER_PROFILE

STORY = "RUFUS walked into the Dark Forest. Alyssa waited for him. Alyssa sang."


class FakeMessages:
    def __init__(self, reply):
        self.reply = reply
        self.calls = []

    def create(self, **kwargs):
        self.calls.append(kwargs)
        return SimpleNamespace(
            content=[SimpleNamespace(text=self.reply)],
            usage=SimpleNamespace(input_tokens=10, output_tokens=5)
        )


class FakeClient:
    def __init__(self, reply):
        self.messages = FakeMessages(reply)


def _enricher(reply, **kwargs):
    return LLMEnricher(FakeClient(reply), model="test-model", **kwargs)


def test_extract_json_plain_and_fenced():
    """Test JSON parsing with and without code fences."""
    assert extract_json('{"a": 1}') == {"a": 1}
    assert extract_json('Here you go:\n```json\n{"a": 2}\n```') == {"a": 2}
    assert extract_json('```\n{"a": 3}\n```') == {"a": 3}


def test_extract_json_invalid():
    """Test unparseable replies."""
    with pytest.raises(EnrichmentError):
        extract_json("no json here")


def test_enrich_adds_only_new_names():
    """Test merge policy: existing names are untouched, new ones are capped."""
    reply = json.dumps({
        "characters": [
            {"name": "rufus", "role": "protagonist"},
            {"name": "Alyssa", "role": "supporting", "description": "A singer."},
            {"name": "Bob", "role": "villain"},
        ],
        "locations": [{"name": "Dark Forest", "location_type": "natural"}],
    })
    rufus = Character(name="RUFUS", confidence=0.7, sources=["all_caps"])
    enricher = _enricher(reply)

    result = enricher.enrich(STORY, [rufus], [], SERVER_PROFILE)

    assert [c.name for c in result.characters] == ["RUFUS", "Alyssa"]
    assert result.characters[0] is rufus
    alyssa = result.characters[1]
    assert alyssa.confidence == SERVER_PROFILE.enrichment_confidence_cap
    assert alyssa.sources == ["enrichment"]
    assert alyssa.appearances == 2
    assert alyssa.role == "supporting"

    assert [loc.name for loc in result.locations] == ["Dark Forest"]
    assert result.locations[0].confidence <= SERVER_PROFILE.enrichment_confidence_cap
    assert enricher.total_tokens_used == 15


def test_enrich_keeps_existing_locations():
    """Test a suggested location already known is skipped."""
    reply = json.dumps({"characters": [], "locations": [{"name": "dark forest"}]})
    forest = Location(name="Dark Forest", location_type="natural", confidence=0.75)

    result = _enricher(reply).enrich(STORY, [], [forest], SERVER_PROFILE)

    assert result.locations == [forest]


def test_prompt_is_truncated():
    """Test the story text is cut to max_chars."""
    enricher = _enricher('{"characters": [], "locations": []}', max_chars=20)

    enricher.suggest(STORY, [], [])

    prompt = enricher.client.messages.calls[0]["messages"][0]["content"]
    assert STORY[:20] in prompt
    assert STORY not in prompt
    assert enricher.client.messages.calls[0]["model"] == "test-model"


def test_non_object_reply_is_rejected():
    """Test a JSON list is not a usable suggestion."""
    with pytest.raises(EnrichmentError):
        _enricher("[1, 2, 3]").suggest(STORY, [], [])


class FlakyMessages:
    def __init__(self):
        self.attempts = 0

    def create(self, **kwargs):
        self.attempts += 1
        raise APIConnectionError(request=httpx.Request("POST", "https://api.anthropic.com/v1/messages"))


def test_transient_errors_are_retried_then_reported(monkeypatch):
    """Test connection errors are retried max_retries times, then raise EnrichmentError."""
    monkeypatch.setattr(enrichment, "wait_exponential", lambda **kwargs: wait_none())
    client = SimpleNamespace(messages=FlakyMessages())
    enricher = LLMEnricher(client, model="test-model", max_retries=3)

    with pytest.raises(EnrichmentError, match="after 3 attempts"):
        enricher.suggest(STORY, [], [])

    assert client.messages.attempts == 3
