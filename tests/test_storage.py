"""Test SQLite storage and result persistence."""
import sqlite3

import pytest

from extraction.models import (
    Character,
    CharacterArc,
    CharacterRelationship,
    Event,
    EventDependency,
    EventParticipant,
    ExtractionResult,
    Item,
    Location,
    Plotline,
    Scene,
)
from storage.database import Database
from storage.persistence import PersistenceAdapter


@pytest.fixture
def db(tmp_path):
    return Database(db_path=tmp_path / "test.db")


def _event(title, sequence, names, places=()):
    return Event(
        title=title,
        description=title,
        sequence_number=sequence,
        confidence=0.5,
        participants=[EventParticipant(name=name, importance=6) for name in names],
        participant_locations=list(places),
    )


def _result():
    return ExtractionResult(
        story_title="The Wolf",
        detected_format="novel",
        characters=[
            Character(name="RUFUS", role="protagonist", confidence=0.9, appearances=20),
            Character(name="STUPUS", role="antagonist", confidence=0.8, appearances=4),
        ],
        locations=[Location(name="Dark Forest", location_type="natural", confidence=0.75)],
        items=[Item(name="sword", item_type="weapon", confidence=0.6)],
        events=[
            _event("RUFUS enters the Dark Forest", 1, ["RUFUS"], ["Dark Forest"]),
            _event("STUPUS attacks RUFUS", 2, ["STUPUS", "RUFUS"]),
            _event("RUFUS escapes", 3, ["RUFUS"]),
        ],
        scenes=[
            Scene(title="Chapter 1", content="RUFUS and STUPUS meet in the Dark Forest.",
                  type="chapter", sequence_number=1),
            Scene(title="Escape", content="Rufus runs.", sequence_number=2, parent_sequence_number=1),
        ],
        plotlines=[Plotline(
            title="RUFUS's Journey",
            description="The main storyline following RUFUS",
            plotline_type="main",
            confidence=0.6,
            character_names=["RUFUS"],
            event_sequences=[1, 2, 3],
        )],
        character_relationships=[
            CharacterRelationship(character1="RUFUS", character2="STUPUS", relationship_type="enemy", intensity=2)
        ],
        event_dependencies=[
            EventDependency(predecessor_sequence=1, successor_sequence=2),
            EventDependency(predecessor_sequence=2, successor_sequence=3),
        ],
        character_arcs=[CharacterArc(
            character_name="RUFUS",
            title="RUFUS's Development",
            description="The character arc of RUFUS throughout the story",
            starting_state="ordinary life",
            ending_state="transformed",
            key_event_sequences=[1, 2, 3],
        )],
        synopsis="This story follows RUFUS.",
    )


def test_story_worlds_and_stories(db):
    """Test world and story records."""
    world_id = db.create_story_world("Wolfland", "Forest tales")
    story_id = db.insert_story("The Wolf", story_world_id=world_id, source_format="txt", word_count=12)

    assert db.get_story_world(world_id)["name"] == "Wolfland"
    assert [w["id"] for w in db.list_story_worlds()] == [world_id]
    assert db.get_story(story_id)["title"] == "The Wolf"
    assert [s["id"] for s in db.list_stories(world_id)] == [story_id]
    assert db.list_stories("other-world") == []


def test_character_lookup_is_case_insensitive_and_scoped(db):
    """Test duplicate detection lookups."""
    world_id = db.create_story_world("Wolfland")
    db.insert_entity("characters", {"story_world_id": world_id, "name": "Rufus", "confidence": 0.9})

    assert db.character_exists("RUFUS", world_id)
    assert db.character_exists("rufus")
    assert not db.character_exists("Rufus", "another-world")
    assert not db.character_exists("Stupus", world_id)


def test_unknown_tables_are_rejected(db):
    """Test the table whitelist."""
    with pytest.raises(ValueError):
        db.insert_entity("stories; DROP TABLE stories", {"name": "x"})
    with pytest.raises(ValueError):
        db.link("characters", {"a": 1})


def test_duplicate_links_are_ignored(db):
    """Test INSERT OR IGNORE on link tables."""
    db.link("scene_characters", {"scene_id": "s1", "character_id": "c1"})
    db.link("scene_characters", {"scene_id": "s1", "character_id": "c1"})

    assert db.count_links("scene_characters") == 1


def test_persist_full_result(db):
    """Test every entity and cross-reference is stored."""
    world_id = db.create_story_world("Wolfland")
    story_id = db.insert_story("The Wolf", story_world_id=world_id)

    report = PersistenceAdapter(db).persist(_result(), story_id, story_world_id=world_id)

    assert report.ok
    assert db.get_story_counts(story_id) == {
        "characters": 2,
        "locations": 1,
        "items": 1,
        "events": 3,
        "scenes": 2,
        "plotlines": 1,
        "character_relationships": 1,
        "event_dependencies": 2,
        "character_arcs": 1,
    }
    assert report.links == {
        "character_events": 4,
        "event_locations": 1,
        "scene_characters": 3,
        "plotline_events": 3,
        "plotline_characters": 1,
        "arc_events": 3,
    }

    scenes = db.get_entities("scenes", story_id)
    assert scenes[0]["parent_scene_id"] is None
    assert scenes[1]["parent_scene_id"] == scenes[0]["id"]

    story = db.get_story(story_id)
    assert story["synopsis"] == "This story follows RUFUS."
    assert story["detected_format"] == "novel"
    assert story["analyzed_at"]


def test_persist_reuses_existing_characters(db):
    """Test characters flagged as existing are not inserted twice."""
    world_id = db.create_story_world("Wolfland")
    first_story = db.insert_story("Part One", story_world_id=world_id)
    PersistenceAdapter(db).persist(_result(), first_story, story_world_id=world_id)

    result = _result()
    result.characters[0] = result.characters[0].model_copy(update={"is_new": False})
    second_story = db.insert_story("Part Two", story_world_id=world_id)
    report = PersistenceAdapter(db).persist(result, second_story, story_world_id=world_id)

    assert report.skipped_characters == ["RUFUS"]
    assert report.inserted["characters"] == 1
    assert report.inserted["character_relationships"] == 1


def test_failed_insert_does_not_abort(db, monkeypatch):
    """Test a failing row is reported and the rest is still stored."""
    story_id = db.insert_story("The Wolf")
    original = db.insert_entity

    def flaky(table, values):
        if table == "characters" and values["name"] == "STUPUS":
            raise sqlite3.OperationalError("disk I/O error")
        return original(table, values)

    monkeypatch.setattr(db, "insert_entity", flaky)
    report = PersistenceAdapter(db).persist(_result(), story_id)

    assert not report.ok
    assert len(report.failures) == 1
    assert "STUPUS" in report.failures[0]
    assert report.inserted["characters"] == 1
    assert report.inserted["events"] == 3
    assert "character_relationships" not in report.inserted
    assert report.links["character_events"] == 3
