"""Writes an ExtractionResult into the SQLite store and wires cross-references."""
import sqlite3
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field

from utils.logger import setup_logger
from extraction.models import ExtractionResult
from storage.database import Database

logger = setup_logger(__name__)


class PersistenceReport(BaseModel):
    """What one persist call stored, skipped and failed to store."""
    story_id: str
    inserted: Dict[str, int] = Field(default_factory=dict)
    links: Dict[str, int] = Field(default_factory=dict)
    skipped_characters: List[str] = Field(default_factory=list)
    failures: List[str] = Field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.failures


class PersistenceAdapter:
    """Persists extraction results entity by entity.

    Every insert stands alone: a failing row is logged, recorded in the
    report and left out of later links, and nothing already written is
    rolled back.
    """

    def __init__(self, db: Database):
        self.db = db

    def _insert(self, report: PersistenceReport, table: str, values: Dict[str, Any], label: str) -> Optional[str]:
        try:
            row_id = self.db.insert_entity(table, values)
        except sqlite3.Error as e:
            logger.error(f"Failed to insert {table} '{label}': {e}")
            report.failures.append(f"{table}: {label}: {e}")
            return None
        report.inserted[table] = report.inserted.get(table, 0) + 1
        return row_id

    def _link(self, report: PersistenceReport, table: str, values: Dict[str, Any]) -> None:
        try:
            self.db.link(table, values)
        except sqlite3.Error as e:
            logger.error(f"Failed to link {table} {values}: {e}")
            report.failures.append(f"{table}: {values}: {e}")
            return
        report.links[table] = report.links.get(table, 0) + 1

    def persist(
        self,
        result: ExtractionResult,
        story_id: str,
        story_world_id: Optional[str] = None,
        skip_existing: bool = True
    ) -> PersistenceReport:
        """Store every entity of an extraction result under a story.

        Args:
            result: Extraction output
            story_id: Target story UUID
            story_world_id: Story world the characters/locations/items belong to
            skip_existing: Reuse stored characters flagged ``is_new = False``
                instead of inserting them again

        Returns:
            PersistenceReport with counts and failures
        """
        report = PersistenceReport(story_id=story_id)
        logger.info(f"Persisting extraction results for story {story_id}")

        # name (casefolded) -> id
        character_ids: Dict[str, str] = {}
        for character in result.characters:
            key = character.name.casefold()
            if skip_existing and not character.is_new:
                existing_id = self.db.find_character_id(character.name, story_world_id)
                if existing_id:
                    character_ids[key] = existing_id
                    report.skipped_characters.append(character.name)
                    continue
            row_id = self._insert(report, "characters", {
                "story_world_id": story_world_id,
                "story_id": story_id,
                "name": character.name,
                "role": character.role,
                "description": character.description,
                "logline": character.logline,
                "confidence": character.confidence,
                "appearances": character.appearances,
            }, character.name)
            if row_id:
                character_ids[key] = row_id

        location_ids: Dict[str, str] = {}
        for location in result.locations:
            row_id = self._insert(report, "locations", {
                "story_world_id": story_world_id,
                "story_id": story_id,
                "name": location.name,
                "location_type": location.location_type,
                "description": location.description,
                "confidence": location.confidence,
            }, location.name)
            if row_id:
                location_ids[location.name.casefold()] = row_id

        for item in result.items:
            self._insert(report, "items", {
                "story_world_id": story_world_id,
                "story_id": story_id,
                "name": item.name,
                "item_type": item.item_type,
                "description": item.description,
                "confidence": item.confidence,
            }, item.name)

        # 1-based event position -> id, and sequence number -> id
        event_ids_by_position: Dict[int, str] = {}
        event_ids_by_sequence: Dict[int, str] = {}
        for position, event in enumerate(result.events, start=1):
            row_id = self._insert(report, "events", {
                "story_id": story_id,
                "title": event.title,
                "description": event.description,
                "sequence_number": event.sequence_number,
                "confidence": event.confidence,
            }, event.title)
            if not row_id:
                continue
            event_ids_by_position[position] = row_id
            event_ids_by_sequence[event.sequence_number] = row_id

            for participant in event.participants:
                character_id = character_ids.get(participant.name.casefold())
                if character_id:
                    self._link(report, "character_events", {
                        "character_id": character_id,
                        "event_id": row_id,
                        "importance": participant.importance,
                    })
            for place in event.participant_locations:
                location_id = location_ids.get(place.casefold())
                if location_id:
                    self._link(report, "event_locations", {"event_id": row_id, "location_id": location_id})

        scene_ids: Dict[int, str] = {}
        for scene in result.scenes:
            row_id = self._insert(report, "scenes", {
                "story_id": story_id,
                "parent_scene_id": scene_ids.get(scene.parent_sequence_number) if scene.parent_sequence_number else None,
                "title": scene.title,
                "content": scene.content,
                "type": scene.type,
                "sequence_number": scene.sequence_number,
            }, scene.title)
            if not row_id:
                continue
            scene_ids[scene.sequence_number] = row_id

            content = scene.content.casefold()
            for character in result.characters:
                character_id = character_ids.get(character.name.casefold())
                if character_id and character.name.casefold() in content:
                    self._link(report, "scene_characters", {"scene_id": row_id, "character_id": character_id})

        for plotline in result.plotlines:
            row_id = self._insert(report, "plotlines", {
                "story_id": story_id,
                "title": plotline.title,
                "description": plotline.description,
                "plotline_type": plotline.plotline_type,
                "confidence": plotline.confidence,
            }, plotline.title)
            if not row_id:
                continue
            for sequence in plotline.event_sequences:
                event_id = event_ids_by_sequence.get(sequence)
                if event_id:
                    self._link(report, "plotline_events", {"plotline_id": row_id, "event_id": event_id})
            for name in plotline.character_names:
                character_id = character_ids.get(name.casefold())
                if character_id:
                    self._link(report, "plotline_characters", {"plotline_id": row_id, "character_id": character_id})

        for relationship in result.character_relationships:
            first = character_ids.get(relationship.character1.casefold())
            second = character_ids.get(relationship.character2.casefold())
            label = f"{relationship.character1} / {relationship.character2}"
            if not first or not second:
                logger.warning(f"Skipping relationship {label}: character not stored")
                continue
            self._insert(report, "character_relationships", {
                "story_id": story_id,
                "character1_id": first,
                "character2_id": second,
                "relationship_type": relationship.relationship_type,
                "description": relationship.description,
                "intensity": relationship.intensity,
            }, label)

        for dependency in result.event_dependencies:
            predecessor = event_ids_by_position.get(dependency.predecessor_sequence)
            successor = event_ids_by_position.get(dependency.successor_sequence)
            label = f"{dependency.predecessor_sequence} -> {dependency.successor_sequence}"
            if not predecessor or not successor:
                logger.warning(f"Skipping dependency {label}: event not stored")
                continue
            self._insert(report, "event_dependencies", {
                "predecessor_event_id": predecessor,
                "successor_event_id": successor,
                "dependency_type": dependency.dependency_type,
                "strength": dependency.strength,
                "description": dependency.description,
            }, label)

        for arc in result.character_arcs:
            character_id = character_ids.get(arc.character_name.casefold())
            if not character_id:
                logger.warning(f"Skipping arc '{arc.title}': character not stored")
                continue
            row_id = self._insert(report, "character_arcs", {
                "story_id": story_id,
                "character_id": character_id,
                "title": arc.title,
                "description": arc.description,
                "starting_state": arc.starting_state,
                "ending_state": arc.ending_state,
            }, arc.title)
            if not row_id:
                continue
            for position in arc.key_event_sequences:
                event_id = event_ids_by_position.get(position)
                if event_id:
                    self._link(report, "arc_events", {"arc_id": row_id, "event_id": event_id})

        try:
            self.db.update_story_analysis(story_id, result.synopsis, result.detected_format)
        except sqlite3.Error as e:
            logger.error(f"Failed to store synopsis for story {story_id}: {e}")
            report.failures.append(f"stories: {story_id}: {e}")

        logger.info(
            f"Persisted {sum(report.inserted.values())} entities and {sum(report.links.values())} links "
            f"({len(report.failures)} failures)"
        )
        return report
