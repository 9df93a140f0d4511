"""Test the end-to-end extraction pipeline."""
import pytest

from extraction.errors import EnrichmentError, InvalidStoryInputError
from extraction.pipeline import ExtractionPipeline, analyze_text
from extraction.profiles import CLIENT_PROFILE, SERVER_PROFILE
from ingestion.models import ExtractionOptions

WOLF_STORY = (
    "RUFUS walked into the forest. STUPUS followed him, smirking. "
    "'I will take Alyssa from you,' said STUPUS."
)

KITCHEN_SCENE = """INT. KITCHEN - DAY

Sarah stirs a pot of soup.

SARAH
Dinner's almost ready.

TOM
I'll set the table."""


def _server():
    return ExtractionPipeline(profile=SERVER_PROFILE)


def test_all_caps_novel_story():
    """Test a short prose story with ALL-CAPS names."""
    result = analyze_text(WOLF_STORY, "The Wolf", pipeline=_server())
    by_name = {c.name: c for c in result.characters}

    assert result.detected_format == "novel"
    assert {"RUFUS", "STUPUS"} <= set(by_name)
    assert by_name["RUFUS"].confidence >= 0.6
    assert by_name["STUPUS"].confidence >= 0.6
    assert by_name["STUPUS"].role == "antagonist"
    assert all(0.0 <= c.confidence <= 1.0 for c in result.characters)
    assert result.character_relationships == []

    assert len(result.events) == 3
    assert [(d.predecessor_sequence, d.successor_sequence) for d in result.event_dependencies] == [(1, 2), (2, 3)]
    assert result.synopsis.startswith("This story follows")


def test_neutral_co_mention_relationship():
    """Test two characters sharing a plain sentence are related as other."""
    story = "RUFUS walked into the forest. RUFUS and STUPUS stood by the river. STUPUS sat down."
    result = analyze_text(story, pipeline=_server())

    assert len(result.character_relationships) == 1
    relationship = result.character_relationships[0]
    assert {relationship.character1, relationship.character2} == {"RUFUS", "STUPUS"}
    assert relationship.relationship_type == "other"


def test_screenplay_story():
    """Test a single-scene screenplay fragment."""
    result = analyze_text(KITCHEN_SCENE, "Dinner", pipeline=_server())
    by_name = {c.name: c for c in result.characters}
    locations = {loc.name: loc for loc in result.locations}

    assert result.detected_format == "screenplay"
    assert by_name["SARAH"].confidence == 0.9
    assert by_name["TOM"].confidence == 0.9
    assert locations["KITCHEN"].location_type == "building"
    assert len(result.scenes) == 1
    assert result.scenes[0].title == "INT. KITCHEN - DAY"
    assert result.event_dependencies == []
    assert result.synopsis == ""


@pytest.mark.parametrize("text", ["", "   \n\t", None])
def test_invalid_input_rejected(text):
    """Test missing or blank story text."""
    with pytest.raises(InvalidStoryInputError):
        analyze_text(text, pipeline=_server())


def test_analysis_is_idempotent():
    """Test the same input gives the same output."""
    pipeline = _server()

    first = analyze_text(WOLF_STORY, "The Wolf", pipeline=pipeline).to_dict()
    second = analyze_text(WOLF_STORY, "The Wolf", pipeline=pipeline).to_dict()

    assert first == second


def test_threshold_filters_characters_and_locations():
    """Test the confidence threshold option."""
    options = ExtractionOptions(confidence_threshold=0.8)

    wolf = analyze_text(WOLF_STORY, options=options, pipeline=_server())
    kitchen = analyze_text(KITCHEN_SCENE, options=options, pipeline=_server())

    assert wolf.characters == []
    assert {c.name for c in kitchen.characters} == {"SARAH", "TOM"}
    assert kitchen.locations == []


def test_disabled_stages_are_empty():
    """Test stage toggles."""
    options = ExtractionOptions(
        extract_characters=False,
        extract_locations=False,
        extract_scenes=False,
        extract_dependencies=False,
    )
    result = analyze_text(KITCHEN_SCENE, options=options, pipeline=_server())

    assert result.characters == []
    assert result.locations == []
    assert result.scenes == []
    assert result.event_dependencies == []


def test_failing_duplicate_checker_marks_existing():
    """Test a checker error never aborts extraction."""
    def checker(name, world_id):
        raise RuntimeError("database offline")

    pipeline = ExtractionPipeline(profile=SERVER_PROFILE, duplicate_checker=checker)
    result = analyze_text(WOLF_STORY, story_world_id="world-1", pipeline=pipeline)

    assert result.characters
    assert all(c.is_new is False for c in result.characters)


def test_client_profile_numbering_and_loglines():
    """Test the client profile numbering scheme."""
    pipeline = ExtractionPipeline(profile=CLIENT_PROFILE)
    result = analyze_text(WOLF_STORY, pipeline=pipeline)

    assert result.profile == "client"
    assert [e.sequence_number for e in result.events] == [0, 10, 20]
    assert [(d.predecessor_sequence, d.successor_sequence) for d in result.event_dependencies] == [(1, 2), (2, 3)]
    assert all(c.logline for c in result.characters)


class _FailingEnricher:
    def enrich(self, text, characters, locations, profile):
        raise EnrichmentError("service unavailable")


def test_enrichment_failure_keeps_heuristic_results():
    """Test that a failed enrichment falls back to the heuristic output."""
    pipeline = ExtractionPipeline(profile=SERVER_PROFILE, enricher=_FailingEnricher())
    result = analyze_text(WOLF_STORY, options=ExtractionOptions(enrich=True), pipeline=pipeline)

    assert {"RUFUS", "STUPUS"} <= {c.name for c in result.characters}


def test_enrichment_requested_without_enricher():
    """Test enrich=True with no enricher configured."""
    result = analyze_text(WOLF_STORY, options=ExtractionOptions(enrich=True), pipeline=_server())

    assert {"RUFUS", "STUPUS"} <= {c.name for c in result.characters}


def test_result_serializes():
    """Test the wire format of a full result."""
    data = analyze_text(WOLF_STORY, pipeline=_server()).to_dict()

    assert set(data) >= {
        "characters", "locations", "items", "events", "scenes", "plotlines",
        "characterRelationships", "eventDependencies", "characterArcs", "synopsis",
    }
