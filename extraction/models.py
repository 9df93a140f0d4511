"""Pydantic models for extracted narrative elements."""
from pydantic import BaseModel, ConfigDict, Field
from typing import Annotated, List, Literal, Optional

CharacterRole = Literal["protagonist", "antagonist", "supporting", "background", "other"]
LocationType = Literal["city", "building", "natural", "country", "realm", "other", "planet"]
ItemType = Literal["weapon", "tool", "clothing", "magical", "technology", "document", "other"]
PlotlineType = Literal["main", "subplot", "character", "thematic", "other"]
SceneType = Literal["scene", "chapter"]
RelationshipType = Literal["family", "friend", "enemy", "romantic", "professional", "other"]
DependencyType = Literal["chronological"]

Confidence = Annotated[float, Field(ge=0.0, le=1.0)]


class Character(BaseModel):
    """A character candidate detected in the story text."""
    model_config = ConfigDict(populate_by_name=True, frozen=True)

    name: str
    role: CharacterRole = "other"
    description: str = ""
    logline: Optional[str] = None
    confidence: Confidence
    appearances: int = 0
    is_new: bool = Field(default=True, alias="isNew")
    sources: List[str] = Field(default_factory=list)  # strategies that proposed the name


class Location(BaseModel):
    """A location candidate."""
    model_config = ConfigDict(frozen=True)

    name: str
    location_type: LocationType = "other"
    description: str = ""
    confidence: Confidence


class Item(BaseModel):
    """An object / item candidate."""
    model_config = ConfigDict(frozen=True)

    name: str
    item_type: ItemType = "other"
    description: str = ""
    confidence: Confidence


class EventParticipant(BaseModel):
    """A character taking part in an event."""
    model_config = ConfigDict(frozen=True)

    name: str
    importance: int = Field(ge=1, le=10)


class Event(BaseModel):
    """An event candidate, ordered by sequence_number."""
    model_config = ConfigDict(frozen=True)

    title: str
    description: str
    sequence_number: int
    confidence: Confidence
    participants: List[EventParticipant] = Field(default_factory=list)
    participant_locations: List[str] = Field(default_factory=list)

    def involves(self, character_name: str) -> bool:
        key = character_name.casefold()
        return any(p.name.casefold() == key for p in self.participants)


class Plotline(BaseModel):
    """A narrative thread."""
    model_config = ConfigDict(frozen=True)

    title: str
    description: str
    plotline_type: PlotlineType = "other"
    confidence: Confidence
    character_names: List[str] = Field(default_factory=list)
    event_sequences: List[int] = Field(default_factory=list)


class Scene(BaseModel):
    """A scene or chapter slice of the story text."""
    model_config = ConfigDict(frozen=True)

    title: str
    content: str
    type: SceneType = "scene"
    sequence_number: int
    parent_sequence_number: Optional[int] = None


class CharacterRelationship(BaseModel):
    """An unordered character pair with an inferred relationship."""
    model_config = ConfigDict(frozen=True)

    character1: str
    character2: str
    relationship_type: RelationshipType = "other"
    description: str = ""
    intensity: int = Field(ge=1, le=10)


class EventDependency(BaseModel):
    """Ordering link between two events, by 1-based event position."""
    model_config = ConfigDict(frozen=True)

    predecessor_sequence: int
    successor_sequence: int
    predecessor_title: str = ""
    successor_title: str = ""
    dependency_type: DependencyType = "chronological"
    strength: int = Field(default=5, ge=1, le=10)
    description: str = ""


class CharacterArc(BaseModel):
    """A character-centred thread across a subset of events."""
    model_config = ConfigDict(frozen=True)

    character_name: str
    title: str
    description: str
    starting_state: str
    ending_state: str
    key_event_sequences: List[int] = Field(default_factory=list)


class ExtractionResult(BaseModel):
    """Everything one extraction run produced."""
    model_config = ConfigDict(populate_by_name=True)

    story_title: str = ""
    detected_format: str = "general"
    profile: str = "server"
    characters: List[Character] = Field(default_factory=list)
    locations: List[Location] = Field(default_factory=list)
    items: List[Item] = Field(default_factory=list)
    events: List[Event] = Field(default_factory=list)
    scenes: List[Scene] = Field(default_factory=list)
    plotlines: List[Plotline] = Field(default_factory=list)
    character_relationships: List[CharacterRelationship] = Field(
        default_factory=list, alias="characterRelationships"
    )
    event_dependencies: List[EventDependency] = Field(default_factory=list, alias="eventDependencies")
    character_arcs: List[CharacterArc] = Field(default_factory=list, alias="characterArcs")
    synopsis: str = ""

    def to_dict(self) -> dict:
        """Serialize with the wire field names."""
        return self.model_dump(by_alias=True)
