"""Narrative extraction pipeline: text in, ExtractionResult out."""
from typing import Optional

from pydantic import ValidationError

from utils.logger import setup_logger
from ingestion.cleaner import prepare_text
from ingestion.format_detector import detect_format
from ingestion.models import ExtractionOptions, StoryInput
from extraction.characters import CharacterExtractor, DuplicateChecker
from extraction.enrichment import LLMEnricher
from extraction.errors import EnrichmentError, InvalidStoryInputError
from extraction.events import EventExtractor, attach_participants
from extraction.inference import infer_arcs, infer_dependencies
from extraction.items import ItemExtractor
from extraction.locations import LocationExtractor
from extraction.models import ExtractionResult
from extraction.plotlines import PlotlineExtractor, infer_plotlines
from extraction.profiles import CharacterOverrides, ExtractionProfile, get_profile
from extraction.relationships import infer_relationships
from extraction.scenes import SceneSegmenter
from extraction.synopsis import generate_synopsis
import config

logger = setup_logger(__name__)


class ExtractionPipeline:
    """Runs every extraction stage over one story.

    The pipeline holds configuration only; each call to :meth:`run` works on
    its own local data, so one instance can be reused across stories.
    """

    def __init__(
        self,
        profile: Optional[ExtractionProfile] = None,
        duplicate_checker: Optional[DuplicateChecker] = None,
        character_overrides: Optional[CharacterOverrides] = None,
        enricher: Optional[LLMEnricher] = None
    ):
        """Initialize pipeline.

        Args:
            profile: Confidence profile (defaults to ``config.EXTRACTION_PROFILE``)
            duplicate_checker: ``(name, story_world_id) -> bool`` used to set ``is_new``
            character_overrides: Optional name -> CharacterOverride table
            enricher: Optional LLM enricher, used when ``options.enrich`` is set
        """
        self.profile = profile or get_profile(config.EXTRACTION_PROFILE)
        self.duplicate_checker = duplicate_checker
        self.character_overrides = character_overrides or {}
        self.enricher = enricher

    def run(self, story: StoryInput, options: Optional[ExtractionOptions] = None) -> ExtractionResult:
        """Extract every enabled entity type from a story.

        Args:
            story: Validated story input
            options: Stage toggles and confidence threshold

        Returns:
            ExtractionResult bundle
        """
        options = options or ExtractionOptions()
        profile = self.profile

        text_format = detect_format(story.story_text)
        prepared = prepare_text(story.story_text, text_format)
        logger.info(
            f"Analyzing '{story.story_title}' as {text_format.value} "
            f"({len(prepared.flat)} chars, {profile.name} profile)"
        )

        character_extractor = CharacterExtractor(profile, self.character_overrides)

        characters = character_extractor.extract(prepared) if options.extract_characters else []
        locations = LocationExtractor(profile).extract(prepared) if options.extract_locations else []
        items = ItemExtractor(profile).extract(prepared) if options.extract_items else []
        events = EventExtractor(profile).extract(prepared) if options.extract_events else []
        explicit_plotlines = PlotlineExtractor(profile).extract(prepared) if options.extract_plotlines else []
        scenes = SceneSegmenter().segment(prepared) if options.extract_scenes else []

        threshold = options.confidence_threshold
        characters = [c for c in characters if c.confidence >= threshold]
        locations = [loc for loc in locations if loc.confidence >= threshold]

        if options.enrich:
            if self.enricher is None:
                logger.warning("Enrichment requested but no enricher is configured; skipping")
            else:
                try:
                    enriched = self.enricher.enrich(story.story_text, characters, locations, profile)
                    if options.extract_characters:
                        characters = enriched.characters
                    if options.extract_locations:
                        locations = enriched.locations
                except EnrichmentError as e:
                    logger.error(f"Enrichment failed, keeping heuristic results: {e}")

        characters = character_extractor.mark_duplicates(characters, story.story_world_id, self.duplicate_checker)
        events = attach_participants(events, characters, locations)

        relationships = (
            infer_relationships(characters, prepared.flat, profile) if options.extract_relationships else []
        )
        plotlines = (
            infer_plotlines(explicit_plotlines, characters, events, prepared, profile)
            if options.extract_plotlines else []
        )
        dependencies = infer_dependencies(events) if options.extract_dependencies else []
        arcs = infer_arcs(characters, events) if options.extract_arcs else []
        synopsis = generate_synopsis(characters, plotlines, events)

        logger.info(
            f"Extraction complete: {len(characters)} characters, {len(locations)} locations, "
            f"{len(items)} items, {len(events)} events, {len(scenes)} scenes, {len(plotlines)} plotlines"
        )

        return ExtractionResult(
            story_title=story.story_title,
            detected_format=text_format.value,
            profile=profile.name,
            characters=characters,
            locations=locations,
            items=items,
            events=events,
            scenes=scenes,
            plotlines=plotlines,
            character_relationships=relationships,
            event_dependencies=dependencies,
            character_arcs=arcs,
            synopsis=synopsis,
        )


def analyze_text(
    story_text: str,
    story_title: str = "Untitled",
    story_world_id: Optional[str] = None,
    options: Optional[ExtractionOptions] = None,
    pipeline: Optional[ExtractionPipeline] = None
) -> ExtractionResult:
    """Validate raw input and run the pipeline.

    Raises:
        InvalidStoryInputError: If ``story_text`` is missing or blank
    """
    try:
        story = StoryInput(story_text=story_text, story_title=story_title, story_world_id=story_world_id)
    except ValidationError as e:
        raise InvalidStoryInputError(f"Invalid story input: {e.errors()[0]['msg']}")

    return (pipeline or ExtractionPipeline()).run(story, options)
