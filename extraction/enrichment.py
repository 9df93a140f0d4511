"""Optional LLM enrichment of heuristic extraction results."""
import json
from typing import Any, Dict, List, NamedTuple

from anthropic import Anthropic, APIConnectionError, APIError, InternalServerError, RateLimitError
from pydantic import ValidationError
from tenacity import RetryError, retry, retry_if_exception_type, stop_after_attempt, wait_exponential

from utils.logger import setup_logger
from extraction import prompts
from extraction.characters import count_mentions
from extraction.errors import EnrichmentError
from extraction.models import Character, Location
from extraction.profiles import ExtractionProfile
import config

logger = setup_logger(__name__)

TRANSIENT_ERRORS = (APIConnectionError, RateLimitError, InternalServerError)


class EnrichmentResult(NamedTuple):
    characters: List[Character]
    locations: List[Location]


def extract_json(response_text: str) -> Any:
    """Parse JSON from a model reply, tolerating a fenced code block.

    Raises:
        EnrichmentError: If no JSON can be parsed
    """
    candidates = [response_text]
    if "```json" in response_text:
        candidates.append(response_text.split("```json", 1)[1].split("```", 1)[0])
    elif "```" in response_text:
        parts = response_text.split("```")
        if len(parts) >= 3:
            candidates.append(parts[1])

    for candidate in candidates:
        try:
            return json.loads(candidate.strip())
        except json.JSONDecodeError:
            continue
    raise EnrichmentError("Enrichment reply did not contain valid JSON")


class LLMEnricher:
    """Asks Anthropic for characters and locations the heuristics missed."""

    def __init__(
        self,
        client: Anthropic,
        model: str = config.ANTHROPIC_MODEL,
        max_chars: int = config.ENRICHMENT_MAX_CHARS,
        max_retries: int = config.MAX_RETRIES
    ):
        """Initialize enricher.

        Args:
            client: Anthropic API client
            model: Model name to use
            max_chars: Story text beyond this many characters is not sent
            max_retries: Attempts per call for transient API errors
        """
        self.client = client
        self.model = model
        self.max_chars = max_chars
        self.max_retries = max_retries
        self.total_tokens_used = 0

    def suggest(self, text: str, characters: List[Character], locations: List[Location]) -> Dict[str, Any]:
        """Return the raw ``{"characters": [...], "locations": [...]}`` suggestion.

        Raises:
            EnrichmentError: If the call fails after retries or the reply is unusable
        """
        prompt = prompts.enrichment_prompt(
            text[:self.max_chars],
            [c.name for c in characters],
            [loc.name for loc in locations]
        )
        try:
            reply = self._call_llm(prompt)
        except RetryError as e:
            raise EnrichmentError(f"Enrichment call failed after {self.max_retries} attempts: {e}")
        except APIError as e:
            raise EnrichmentError(f"Enrichment call failed: {e}")

        data = extract_json(reply)
        if not isinstance(data, dict):
            raise EnrichmentError("Enrichment reply was not a JSON object")
        return data

    def _call_llm(self, prompt: str) -> str:
        @retry(
            stop=stop_after_attempt(self.max_retries),
            wait=wait_exponential(multiplier=config.RETRY_BACKOFF_MULTIPLIER, min=2, max=60),
            retry=retry_if_exception_type(TRANSIENT_ERRORS)
        )
        def _wrapper() -> str:
            message = self.client.messages.create(
                model=self.model,
                max_tokens=2048,
                temperature=config.LLM_TEMPERATURE,
                messages=[{"role": "user", "content": prompt}]
            )
            self.total_tokens_used += message.usage.input_tokens + message.usage.output_tokens
            return message.content[0].text

        return _wrapper()

    def enrich(
        self,
        text: str,
        characters: List[Character],
        locations: List[Location],
        profile: ExtractionProfile
    ) -> EnrichmentResult:
        """Merge LLM suggestions into the heuristic results.

        Only names not already present (case-insensitive) are added. Added
        entities get a confidence capped at the profile's enrichment cap, and
        characters are tagged with the ``enrichment`` source. Existing
        entities are returned untouched.

        Raises:
            EnrichmentError: If the LLM call fails
        """
        data = self.suggest(text, characters, locations)
        cap = profile.enrichment_confidence_cap

        known = {c.name.casefold() for c in characters}
        added_characters = []
        for entry in data.get("characters") or []:
            name = str(entry.get("name", "")).strip() if isinstance(entry, dict) else ""
            if not name or name.casefold() in known:
                continue
            try:
                added_characters.append(Character(
                    name=name,
                    role=entry.get("role") or "other",
                    description=entry.get("description") or "",
                    confidence=cap,
                    appearances=count_mentions(name, text),
                    sources=["enrichment"],
                ))
            except ValidationError as e:
                logger.warning(f"Ignoring enrichment character {name!r}: {e}")
                continue
            known.add(name.casefold())

        known = {loc.name.casefold() for loc in locations}
        added_locations = []
        for entry in data.get("locations") or []:
            name = str(entry.get("name", "")).strip() if isinstance(entry, dict) else ""
            if not name or name.casefold() in known:
                continue
            try:
                added_locations.append(Location(
                    name=name,
                    location_type=entry.get("location_type") or "other",
                    description=entry.get("description") or "",
                    confidence=min(cap, profile.location_confidence),
                ))
            except ValidationError as e:
                logger.warning(f"Ignoring enrichment location {name!r}: {e}")
                continue
            known.add(name.casefold())

        logger.info(f"Enrichment added {len(added_characters)} characters and {len(added_locations)} locations")
        return EnrichmentResult(
            characters=list(characters) + added_characters,
            locations=list(locations) + added_locations,
        )
