"""Event extraction and participant linking."""
import re
from typing import List, Optional, Pattern, Tuple

from utils.logger import setup_logger
from ingestion.cleaner import PreparedText
from extraction.models import Character, Event, EventParticipant, Location
from extraction.profiles import SERVER_PROFILE, ExtractionProfile
from extraction import vocabulary as vocab

logger = setup_logger(__name__)

_SENTENCE_TAIL = r"[^.!?\n]*[.!?]"

TIME_MARKER_RE = re.compile(
    r"[^.!?\n]*\b(?:" + '|'.join(vocab.TIME_MARKERS) + r")\b" + _SENTENCE_TAIL,
    re.IGNORECASE
)
ACTION_EVENT_RE = re.compile(
    r"[^.!?\n]*\b(?:[A-Z]{3,}S|" + '|'.join(vocab.STRONG_ACTION_VERBS) + r")\b[^.!?\n]*[.!?]?"
)
MARKER_EVENT_RE = re.compile(r"(?:^|\s)EVENT:\s*([^.!?\n]+[.!?]?)", re.MULTILINE)
TRANSITION_EVENT_RE = re.compile(
    r"\b(?:" + '|'.join(vocab.TRANSITION_WORDS) + r")\b[^.!?\n]*[.!?:]"
)
EMOTION_EVENT_RE = re.compile(
    r"[^.!?\n]*\b(?:" + '|'.join(vocab.EMOTION_VERBS) + r")\b" + _SENTENCE_TAIL,
    re.IGNORECASE
)

ACTION_MIN_LENGTH = 10
ACTION_MAX_LENGTH = 100
TITLE_MAX_LENGTH = 60
DESCRIPTION_MAX_LENGTH = 300


def event_title(text: str) -> str:
    """The text itself when short, else its first 8 words and an ellipsis."""
    if len(text) <= TITLE_MAX_LENGTH:
        return text
    return ' '.join(text.split()[:8]) + '...'


class EventExtractor:
    """Finds event phrases and numbers them in text order."""

    def __init__(self, profile: ExtractionProfile = SERVER_PROFILE):
        self.profile = profile

    def find_phrases(self, prepared: PreparedText) -> List[str]:
        """Event phrases ordered by position in the text, duplicates removed."""
        text = prepared.flat
        found: List[Tuple[int, str]] = []

        def collect(pattern: Pattern, group: int = 0, prefix: str = '',
                    min_len: int = 1, max_len: Optional[int] = None):
            for match in pattern.finditer(text):
                phrase = match.group(group).strip()
                if len(phrase) < min_len or (max_len and len(phrase) > max_len):
                    continue
                found.append((match.start(group), prefix + phrase))

        collect(TIME_MARKER_RE)
        collect(ACTION_EVENT_RE, min_len=ACTION_MIN_LENGTH, max_len=ACTION_MAX_LENGTH)
        collect(MARKER_EVENT_RE, group=1)
        collect(TRANSITION_EVENT_RE, prefix='Scene: ')
        collect(EMOTION_EVENT_RE)

        phrases: List[str] = []
        seen = set()
        for _, phrase in sorted(found, key=lambda hit: hit[0]):
            key = phrase.casefold()
            if key in seen:
                continue
            seen.add(key)
            phrases.append(phrase)
        return phrases

    def extract(self, prepared: PreparedText) -> List[Event]:
        """Extract events.

        Args:
            prepared: Normalized story text

        Returns:
            Events numbered with the profile's sequence scheme
        """
        events = [
            Event(
                title=event_title(phrase),
                description=phrase[:DESCRIPTION_MAX_LENGTH],
                sequence_number=self.profile.event_sequence(index),
                confidence=self.profile.event_confidence,
            )
            for index, phrase in enumerate(self.find_phrases(prepared))
        ]
        logger.info(f"Extracted {len(events)} events")
        return events


def participant_importance(name: str, text: str) -> int:
    """Importance 1-10: base 5, +3 when the event opens with the name, +1 per extra mention."""
    mentions = len(re.findall(r'\b' + re.escape(name) + r'\b', text, re.IGNORECASE))
    importance = 5
    if text.casefold().startswith(name.casefold()):
        importance += 3
    importance += max(0, mentions - 1)
    return max(1, min(10, importance))


def attach_participants(
    events: List[Event],
    characters: List[Character],
    locations: List[Location]
) -> List[Event]:
    """Return copies of ``events`` with participant characters and locations filled in."""
    linked = []
    for event in events:
        text = event.description
        participants = [
            EventParticipant(name=c.name, importance=participant_importance(c.name, text))
            for c in characters
            if re.search(r'\b' + re.escape(c.name) + r'\b', text, re.IGNORECASE)
        ]
        places = [
            loc.name for loc in locations
            if re.search(r'\b' + re.escape(loc.name) + r'\b', text, re.IGNORECASE)
        ]
        linked.append(event.model_copy(update={
            "participants": participants,
            "participant_locations": places,
        }))
    return linked
