"""Event dependency and character arc inference."""
import re
from typing import List

from utils.logger import setup_logger
from extraction.models import Character, CharacterArc, Event, EventDependency

logger = setup_logger(__name__)

MIN_ARC_EVENTS = 3
ARC_APPEARANCE_THRESHOLD = 10


def infer_dependencies(events: List[Event]) -> List[EventDependency]:
    """Chain each event to the next one.

    Positions are 1-based: for M events the result holds M-1 dependencies
    ``(1, 2), (2, 3), ... (M-1, M)``.
    """
    dependencies = []
    for i in range(1, len(events)):
        before, after = events[i - 1], events[i]
        dependencies.append(EventDependency(
            predecessor_sequence=i,
            successor_sequence=i + 1,
            predecessor_title=before.title,
            successor_title=after.title,
            dependency_type="chronological",
            strength=5,
            description=f'"{after.title}" follows "{before.title}"',
        ))
    logger.info(f"Inferred {len(dependencies)} event dependencies")
    return dependencies


def _event_positions(character: Character, events: List[Event]) -> List[int]:
    name_re = re.compile(r'\b' + re.escape(character.name) + r'\b', re.IGNORECASE)
    return [
        position for position, event in enumerate(events, start=1)
        if event.involves(character.name) or name_re.search(event.description)
    ]


def is_arc_candidate(character: Character) -> bool:
    return character.role in ("protagonist", "antagonist") or character.appearances > ARC_APPEARANCE_THRESHOLD


def infer_arcs(characters: List[Character], events: List[Event]) -> List[CharacterArc]:
    """Templated arcs for major characters that take part in at least three events."""
    arcs = []
    for character in characters:
        if not is_arc_candidate(character):
            continue
        positions = _event_positions(character, events)
        if len(positions) < MIN_ARC_EVENTS:
            continue

        name = character.name
        if character.role == "antagonist":
            arc = CharacterArc(
                character_name=name,
                title=f"{name}'s Downfall",
                description=f"The arc of {name} as their opposition to the heroes unfolds",
                starting_state="scheming and confident",
                ending_state="confronted",
                key_event_sequences=positions,
            )
        else:
            arc = CharacterArc(
                character_name=name,
                title=f"{name}'s Development",
                description=f"The character arc of {name} throughout the story",
                starting_state="ordinary life",
                ending_state="transformed",
                key_event_sequences=positions,
            )
        arcs.append(arc)

    logger.info(f"Inferred {len(arcs)} character arcs")
    return arcs
