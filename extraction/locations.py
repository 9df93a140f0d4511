"""Location extraction from scene headings and place phrases."""
import re
from collections import OrderedDict
from typing import List, Optional, Tuple

from utils.logger import setup_logger
from ingestion.cleaner import PreparedText
from extraction.models import Location, LocationType
from extraction.profiles import SERVER_PROFILE, ExtractionProfile
from extraction import vocabulary as vocab

logger = setup_logger(__name__)

HEADING_LOCATION_RE = re.compile(
    r'^[ \t]*(INT\./EXT\.|INT/EXT\.|I/E\.|INT\.|EXT\.)[ \t]*(.+?)[ \t]*(?:[-–—][ \t]*[^-–—\n]*)?$',
    re.MULTILINE
)
PREFIX_LOCATION_RE = re.compile(
    r"\b(?:" + '|'.join(vocab.LOCATION_PREFIXES) + r")\s+(?:the\s+)?"
    r"([A-Z][a-z']+(?:\s+(?:of\s+)?[A-Z][a-z']+){0,3})"
)
INDICATOR_LOCATION_RE = re.compile(
    r"\b((?:[A-Z][a-z']+\s+){1,3}(?i:" + '|'.join(vocab.LOCATION_INDICATORS) + r"))\b"
)
NAMED_LOCATION_RE = re.compile(
    r"\b(" + '|'.join(vocab.LOCATION_NAMING_NOUNS) + r")\s+(?:of|called|named)\s+"
    r"([A-Z][a-z']+(?:\s+[A-Z][a-z']+){0,2})",
    re.IGNORECASE
)

DESCRIPTION_TEMPLATES = {
    "city": "{name} is a settlement in the story.",
    "building": "{name} is a building or interior setting in the story.",
    "natural": "{name} is a natural setting in the story.",
    "country": "{name} is a country or territory in the story.",
    "realm": "{name} is a realm in the story's world.",
    "planet": "{name} is a world in the story.",
    "other": "{name} is a location in the story.",
}


def classify_location(name: str, hint: str = '') -> LocationType:
    """Keyword classifier over the location name (and an optional hint phrase)."""
    haystack = f"{name} {hint}".lower()
    for location_type, keywords in vocab.LOCATION_TYPE_KEYWORDS:
        if any(keyword in haystack for keyword in keywords):
            return location_type
    return "other"


def _describe(name: str, location_type: LocationType, text: str) -> str:
    match = re.search(
        r'\b' + re.escape(name) + r"\b\s+(?:was|is|seemed|looked)\s+[^.!?]*[.!?]",
        text,
        re.IGNORECASE
    )
    if match:
        return match.group(0).strip()
    return DESCRIPTION_TEMPLATES[location_type].format(name=name)


class LocationExtractor:
    """Finds location names and types them."""

    def __init__(self, profile: ExtractionProfile = SERVER_PROFILE):
        self.profile = profile

    def find_names(self, prepared: PreparedText) -> List[Tuple[str, Optional[LocationType], str]]:
        """Raw location hits as (name, default type, classifier hint), in discovery order."""
        hits: List[Tuple[str, Optional[LocationType], str]] = []

        for match in HEADING_LOCATION_RE.finditer(prepared.lines):
            prefix, name = match.group(1), match.group(2).strip(" .,")
            if not name:
                continue
            default = "building" if prefix.startswith(("INT", "I/E")) else "natural"
            hits.append((name, default, ''))

        text = prepared.flat
        for match in PREFIX_LOCATION_RE.finditer(text):
            name = match.group(1).strip()
            if name.split()[0] in vocab.COMMON_CAPITALIZED_WORDS:
                continue
            hits.append((name, None, ''))

        for match in INDICATOR_LOCATION_RE.finditer(text):
            name = match.group(1).strip()
            if name.split()[0] in vocab.COMMON_CAPITALIZED_WORDS:
                continue
            hits.append((name, None, ''))

        for match in NAMED_LOCATION_RE.finditer(text):
            hits.append((match.group(2).strip(), None, match.group(1)))

        return hits

    def extract(self, prepared: PreparedText) -> List[Location]:
        """Extract deduplicated, typed locations.

        Args:
            prepared: Normalized story text

        Returns:
            Locations in discovery order
        """
        seen: "OrderedDict[str, Location]" = OrderedDict()
        for name, default, hint in self.find_names(prepared):
            key = name.casefold()
            if key in seen:
                continue
            location_type = classify_location(name, hint)
            if location_type == "other" and default:
                location_type = default
            seen[key] = Location(
                name=name,
                location_type=location_type,
                description=_describe(name, location_type, prepared.flat),
                confidence=self.profile.location_confidence,
            )

        logger.info(f"Extracted {len(seen)} locations")
        return list(seen.values())
