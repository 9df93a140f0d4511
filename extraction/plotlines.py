"""Plotline extraction from explicit markers, plus character-driven inference."""
import re
from collections import OrderedDict
from typing import List, Optional

from utils.logger import setup_logger
from ingestion.cleaner import PreparedText
from ingestion.format_detector import SCENE_HEADING_RE
from extraction.characters import CAPS_TOKEN_RE, is_likely_character_name
from extraction.models import Character, Event, Plotline, PlotlineType
from extraction.profiles import SERVER_PROFILE, ExtractionProfile
from extraction import vocabulary as vocab

logger = setup_logger(__name__)

SECTION_RE = re.compile(
    r"^[ \t]*(CHAPTER|ACT|PART|BOOK)\s+([IVXLC]+|\d+|[A-Za-z]+)(?:\s*[:.\-–—]\s*|\s+)((?-i:[A-Z])[A-Za-z0-9 ']+?)[ \t]*$",
    re.IGNORECASE | re.MULTILINE
)
THEME_RE = re.compile(
    r"^[ \t]*(SUBPLOT|STORY ARC|PLOTLINE|ARC|THREAD)\s*:\s*([A-Z][^\n]*?)[ \t]*$",
    re.MULTILINE
)
TITLE_LIKE_RE = re.compile(r"^[A-Z][A-Za-z0-9']*(?:\s+[A-Za-z0-9']+)+$")
TITLE_LIKE_MAX_LENGTH = 60


def classify_plotline(title: str) -> PlotlineType:
    lowered = title.lower() + ' '
    for plotline_type, keywords in vocab.PLOTLINE_TYPE_KEYWORDS:
        if any(keyword in lowered for keyword in keywords):
            return plotline_type
    return "other"


def _title_like_line(lines: str) -> Optional[str]:
    """First line that reads like a title: Title-Case start, no sentence punctuation."""
    for line in lines.split('\n'):
        line = line.strip()
        if not line:
            continue
        if SCENE_HEADING_RE.match(line) or len(line) > TITLE_LIKE_MAX_LENGTH:
            return None
        if TITLE_LIKE_RE.match(line) and not line.isupper():
            return line
        return None
    return None


def title_fallback(prepared: PreparedText) -> str:
    """``Main Plot`` title from the first title-like line or the first ALL-CAPS name."""
    title = _title_like_line(prepared.lines)
    if title:
        return f"Main Plot: {title}"
    for match in CAPS_TOKEN_RE.finditer(prepared.lines):
        if is_likely_character_name(match.group(0)):
            return f"Main Plot: {match.group(0)} Journey"
    return "Main Plot"


class PlotlineExtractor:
    """Explicit section and thread markers."""

    def __init__(self, profile: ExtractionProfile = SERVER_PROFILE):
        self.profile = profile

    def extract(self, prepared: PreparedText) -> List[Plotline]:
        """Extract plotlines named in the text itself.

        Args:
            prepared: Normalized story text

        Returns:
            Explicit plotlines, deduplicated by title
        """
        found: "OrderedDict[str, Plotline]" = OrderedDict()

        for match in SECTION_RE.finditer(prepared.lines):
            kind, number, name = match.group(1), match.group(2), match.group(3).strip()
            title = f"{kind.title()} {number}: {name}"
            found.setdefault(title.casefold(), self._plotline(title, f"Plotline: {title}"))

        for match in THEME_RE.finditer(prepared.lines):
            marker, name = match.group(1), match.group(2).strip()
            plotline = self._plotline(name, f"{marker.title()}: {name}", classify_plotline(f"{marker} {name}"))
            found.setdefault(name.casefold(), plotline)

        logger.info(f"Extracted {len(found)} explicit plotlines")
        return list(found.values())

    def _plotline(self, title: str, description: str, plotline_type: Optional[PlotlineType] = None) -> Plotline:
        return Plotline(
            title=title,
            description=description,
            plotline_type=plotline_type or classify_plotline(title),
            confidence=self.profile.plotline_confidence,
        )


def _event_sequences_for(name: str, events: List[Event]) -> List[int]:
    return [e.sequence_number for e in events if e.involves(name)]


def infer_plotlines(
    explicit: List[Plotline],
    characters: List[Character],
    events: List[Event],
    prepared: PreparedText,
    profile: ExtractionProfile = SERVER_PROFILE
) -> List[Plotline]:
    """Combine explicit plotlines with character-driven ones.

    A protagonist gets a ``<Name>'s Journey`` main plotline; each antagonist
    gets a conflict plotline, typed ``subplot`` when a protagonist plotline
    exists and ``main`` otherwise. When nothing at all was found the profile
    decides the fallback.

    Args:
        explicit: Plotlines found by :class:`PlotlineExtractor`
        characters: Final character list
        events: Final event list
        prepared: Normalized story text, used by the title fallback
        profile: Extraction profile

    Returns:
        Plotlines deduplicated by title
    """
    plotlines: "OrderedDict[str, Plotline]" = OrderedDict()
    for plotline in explicit:
        plotlines.setdefault(plotline.title.casefold(), plotline)

    protagonists = [c for c in characters if c.role == "protagonist"]
    antagonists = [c for c in characters if c.role == "antagonist"]

    lead = protagonists[0] if protagonists else None
    if lead:
        title = f"{lead.name}'s Journey"
        plotlines.setdefault(title.casefold(), Plotline(
            title=title,
            description=f"The main storyline following {lead.name}",
            plotline_type="main",
            confidence=profile.plotline_confidence,
            character_names=[lead.name],
            event_sequences=_event_sequences_for(lead.name, events),
        ))

    for antagonist in antagonists:
        title = f"Conflict with {antagonist.name}"
        names = [lead.name, antagonist.name] if lead else [antagonist.name]
        plotlines.setdefault(title.casefold(), Plotline(
            title=title,
            description=f"The conflict between {lead.name if lead else 'the protagonist'} and {antagonist.name}",
            plotline_type="subplot" if lead else "main",
            confidence=profile.plotline_confidence,
            character_names=names,
            event_sequences=sorted({seq for n in names for seq in _event_sequences_for(n, events)}),
        ))

    if not plotlines:
        if profile.plotline_fallback == "events" and events:
            plotlines["main story"] = Plotline(
                title="Main Story",
                description="The main sequence of events in the story",
                plotline_type="main",
                confidence=profile.plotline_confidence,
                event_sequences=[e.sequence_number for e in events],
            )
        elif profile.plotline_fallback == "title":
            title = title_fallback(prepared)
            plotlines[title.casefold()] = Plotline(
                title=title,
                description=f"Plotline: {title}",
                plotline_type=classify_plotline(title),
                confidence=profile.plotline_confidence,
                event_sequences=[e.sequence_number for e in events],
            )

    return list(plotlines.values())
