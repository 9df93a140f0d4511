"""Confidence profiles and per-character overrides.

Two historical extractors scored candidates on different scales. Rather than
reconcile them, each is kept as a named, immutable profile and the pipeline
is told which one to use.
"""
from typing import Dict, Literal, Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field

from extraction.models import CharacterRole

PlotlineFallback = Literal["events", "title"]


class ExtractionProfile(BaseModel):
    """Confidence values and numbering rules for one extraction profile."""
    model_config = ConfigDict(frozen=True)

    name: str

    # Characters
    character_floor: float = Field(ge=0.0, le=1.0)
    cue_base: float = 0.8
    cue_step: float = 0.05
    cue_cap: float = 0.95
    attribution_base: float = 0.7
    attribution_step: float = 0.05
    attribution_cap: float = 0.9
    proper_noun_confidence: float = 0.6
    caps_cue_dialogue_confidence: float = 0.9
    caps_cue_confidence: float = 0.75
    caps_token_confidence: float = 0.7
    caps_phrase_confidence: float = 0.75
    title_line_confidence: float = 0.85

    # Other entity types
    location_confidence: float = 0.75
    item_confidence: float = 0.6
    event_confidence: float = 0.5
    plotline_confidence: float = 0.6
    relationship_min_confidence: float = 0.7
    enrichment_confidence_cap: float = 0.6

    # Numbering and fallbacks
    event_sequence_start: int = 1
    event_sequence_step: int = 1
    include_loglines: bool = False
    plotline_fallback: PlotlineFallback = "events"

    def event_sequence(self, index: int) -> int:
        """Sequence number for the event at zero-based discovery position ``index``."""
        return self.event_sequence_start + index * self.event_sequence_step


SERVER_PROFILE = ExtractionProfile(
    name="server",
    character_floor=0.5,
    event_sequence_start=1,
    event_sequence_step=1,
    include_loglines=False,
    plotline_fallback="events",
)

CLIENT_PROFILE = ExtractionProfile(
    name="client",
    character_floor=0.0,
    event_sequence_start=0,
    event_sequence_step=10,
    include_loglines=True,
    plotline_fallback="title",
)

PROFILES: Dict[str, ExtractionProfile] = {
    SERVER_PROFILE.name: SERVER_PROFILE,
    CLIENT_PROFILE.name: CLIENT_PROFILE,
}


def get_profile(name: str) -> ExtractionProfile:
    """Look up a profile by name.

    Raises:
        ValueError: If no profile has that name
    """
    try:
        return PROFILES[name.lower()]
    except KeyError:
        raise ValueError(f"Unknown extraction profile: {name!r} (expected one of {sorted(PROFILES)})")


class CharacterOverride(BaseModel):
    """Caller-supplied facts about a named character."""
    model_config = ConfigDict(frozen=True)

    role: Optional[CharacterRole] = None
    description: Optional[str] = None
    logline: Optional[str] = None


CharacterOverrides = Mapping[str, CharacterOverride]


def find_override(overrides: Optional[CharacterOverrides], name: str) -> Optional[CharacterOverride]:
    """Case-insensitive override lookup."""
    if not overrides:
        return None
    key = name.casefold()
    for override_name, override in overrides.items():
        if override_name.casefold() == key:
            return override
    return None
