"""Object / item extraction."""
import re
from collections import OrderedDict
from typing import List

from utils.logger import setup_logger
from ingestion.cleaner import PreparedText
from extraction.characters import is_likely_character_name
from extraction.models import Item, ItemType
from extraction.profiles import SERVER_PROFILE, ExtractionProfile
from extraction import vocabulary as vocab

logger = setup_logger(__name__)

_INDICATORS = '|'.join(re.escape(v) for v in vocab.OBJECT_INDICATORS)
_DETERMINERS = r"(?:a|an|the|his|her|their|its|my|your|our|some)"

INDICATOR_ITEM_RE = re.compile(
    r"\b(?:" + _INDICATORS + r")\s+" + _DETERMINERS + r"\s+([a-z][\w'\-]*(?:\s+[a-z][\w'\-]*){0,2})",
    re.IGNORECASE
)
TYPE_ITEM_RE = re.compile(r"\b(" + '|'.join(vocab.OBJECT_TYPES) + r")s?\b", re.IGNORECASE)
CAPS_ITEM_RE = re.compile(
    r"\b(?:" + _INDICATORS + r")\s+(?:" + _DETERMINERS + r"\s+)?([A-Z]{2,}(?:\s+[A-Z]{2,})?)\b"
)
MARKER_ITEM_RE = re.compile(r"(?:^|\s)(?:OBJECT|ITEM|PROP|ARTIFACT):\s*([^.!?\n]+)", re.MULTILINE)

DESCRIPTION_TEMPLATES = {
    "weapon": "A weapon that appears in the story.",
    "tool": "A tool used in the story.",
    "clothing": "A piece of clothing worn in the story.",
    "magical": "A magical object in the story.",
    "technology": "A piece of technology in the story.",
    "document": "A document that matters to the story.",
    "other": "An object that appears in the story.",
}


def classify_item(name: str) -> ItemType:
    lowered = name.lower()
    for item_type, keywords in vocab.ITEM_TYPE_KEYWORDS:
        if any(keyword in lowered for keyword in keywords):
            return item_type
    return "other"


def trim_object_phrase(phrase: str) -> str:
    """Cut a captured phrase at its first stopword: ``sword and runs`` -> ``sword``."""
    words = []
    for word in phrase.split():
        if word.lower() in vocab.TRAILING_STOPWORDS:
            break
        words.append(word)
    return ' '.join(words)


def _describe(name: str, item_type: ItemType, text: str) -> str:
    match = re.search(r"[^.!?]*\b" + re.escape(name) + r"\b[^.!?]*[.!?]", text, re.IGNORECASE)
    if match:
        sentence = match.group(0).strip()
        if len(sentence) <= 200:
            return sentence
    return DESCRIPTION_TEMPLATES[item_type]


class ItemExtractor:
    """Finds objects characters hold, carry or use."""

    def __init__(self, profile: ExtractionProfile = SERVER_PROFILE):
        self.profile = profile

    def find_names(self, prepared: PreparedText) -> List[str]:
        text = prepared.flat
        names: List[str] = []

        for match in INDICATOR_ITEM_RE.finditer(text):
            name = trim_object_phrase(match.group(1))
            if name:
                names.append(name)

        for match in TYPE_ITEM_RE.finditer(text):
            names.append(match.group(1).lower())

        for match in CAPS_ITEM_RE.finditer(text):
            name = match.group(1)
            words = name.split()
            if any(w in vocab.NON_CHARACTER_WORDS or w in vocab.SLUGLINE_WORDS for w in words):
                continue
            if is_likely_character_name(name) and not any(w in vocab.OBJECT_WORDS for w in words):
                continue
            names.append(name)

        for match in MARKER_ITEM_RE.finditer(prepared.lines):
            name = match.group(1).strip()
            if name:
                names.append(name)

        return names

    def extract(self, prepared: PreparedText) -> List[Item]:
        """Extract deduplicated, typed items.

        Args:
            prepared: Normalized story text

        Returns:
            Items in discovery order
        """
        seen: "OrderedDict[str, Item]" = OrderedDict()
        for name in self.find_names(prepared):
            key = name.casefold()
            if key in seen:
                continue
            item_type = classify_item(name)
            seen[key] = Item(
                name=name,
                item_type=item_type,
                description=_describe(name, item_type, prepared.flat),
                confidence=self.profile.item_confidence,
            )

        logger.info(f"Extracted {len(seen)} items")
        return list(seen.values())
