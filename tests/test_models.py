"""Test Pydantic models."""
import pytest
from pydantic import ValidationError

from extraction.models import (
    Character,
    CharacterRelationship,
    Event,
    EventParticipant,
    ExtractionResult,
)
from ingestion.models import ExtractionOptions, StoryInput


def test_character_creation():
    """Test creating a character with defaults."""
    char = Character(name="RUFUS", confidence=0.8)

    assert char.role == "other"
    assert char.is_new is True
    assert char.sources == []


def test_confidence_must_be_in_range():
    """Test that confidence outside [0, 1] is rejected."""
    with pytest.raises(ValidationError):
        Character(name="RUFUS", confidence=1.5)
    with pytest.raises(ValidationError):
        Character(name="RUFUS", confidence=-0.1)


def test_entities_are_frozen():
    """Test that extracted entities cannot be mutated."""
    char = Character(name="RUFUS", confidence=0.8)
    with pytest.raises(ValidationError):
        char.name = "STUPUS"


def test_intensity_range():
    """Test relationship intensity bounds."""
    with pytest.raises(ValidationError):
        CharacterRelationship(character1="A", character2="B", intensity=11)


def test_event_involves_is_case_insensitive():
    """Test participant lookup ignores case."""
    event = Event(
        title="Ambush",
        description="RUFUS is ambushed",
        sequence_number=1,
        confidence=0.5,
        participants=[EventParticipant(name="RUFUS", importance=8)]
    )

    assert event.involves("Rufus")
    assert not event.involves("Stupus")


def test_result_serializes_with_wire_names():
    """Test that to_dict uses the camelCase wire names."""
    result = ExtractionResult(
        characters=[Character(name="RUFUS", confidence=0.8)],
        character_relationships=[
            CharacterRelationship(character1="RUFUS", character2="STUPUS", intensity=2)
        ]
    )
    data = result.to_dict()

    assert "characterRelationships" in data
    assert "eventDependencies" in data
    assert "characterArcs" in data
    assert data["characters"][0]["isNew"] is True
    assert data["synopsis"] == ""


def test_story_input_rejects_blank_text():
    """Test that blank story text is rejected."""
    with pytest.raises(ValidationError):
        StoryInput(story_text="   ")


def test_extraction_options_defaults():
    """Test that every stage is enabled by default."""
    options = ExtractionOptions()

    assert options.extract_characters
    assert options.extract_relationships
    assert options.extract_arcs
    assert options.confidence_threshold == 0.6
    assert options.enrich is False
