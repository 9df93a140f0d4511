"""Story text format detection."""
import re
from enum import Enum
from typing import List, Pattern

from utils.logger import setup_logger

logger = setup_logger(__name__)


class TextFormat(str, Enum):
    """Layout families the extractors know how to read."""
    SCREENPLAY = "screenplay"
    FOUNTAIN = "fountain"
    NOVEL = "novel"
    GENERAL = "general"

    @property
    def is_script(self) -> bool:
        return self in (TextFormat.SCREENPLAY, TextFormat.FOUNTAIN)


SCENE_HEADING_RE = re.compile(r'^\s*(?:INT\./EXT\.|INT/EXT\.|I/E\.|INT\.|EXT\.)', re.MULTILINE)

FOUNTAIN_TITLE_RE = re.compile(r"\bTitle:")
FOUNTAIN_AUTHOR_RE = re.compile(r"\bAuthor:")
FOUNTAIN_HEADING_RE = re.compile(r"\b(?:INT|EXT|I/E)\.")

# One point each when found anywhere in the text
SCREENPLAY_PATTERNS: List[Pattern] = [
    re.compile(r'^\s*INT\.', re.MULTILINE),
    re.compile(r'^\s*EXT\.', re.MULTILINE),
    re.compile(r'FADE IN:'),
    re.compile(r'CUT TO:'),
    re.compile(r"^[ \t]*[A-Z][A-Z '.]{1,}[ \t]*$", re.MULTILINE),
    re.compile(r'\s[-–—]\s*(?:DAY|NIGHT|MORNING|EVENING|AFTERNOON|DAWN|DUSK|LATER|CONTINUOUS)\s*$', re.MULTILINE),
    re.compile(r'^[ \t]*\([a-z][^)\n]*\)[ \t]*$', re.MULTILINE),
]

# Weighted 2 when the pattern occurs more than 10 times, else 1
NOVEL_PATTERNS: List[Pattern] = [
    re.compile(r'\bChapter\s+(?:\d+|[IVXLCDM]+)\b', re.IGNORECASE),
    re.compile(
        r'(?:"[^"\n]+"|“[^”\n]+”|\'[^\'\n]+?[,.!?]\')\s*'
        r'(?:said|asked|replied|whispered|shouted|answered|muttered|exclaimed|cried)\b'
    ),
    re.compile(r'\n[ \t]*\n'),
]

SCREENPLAY_THRESHOLD = 3


def screenplay_score(text: str) -> int:
    """Number of screenplay indicator patterns present in the text."""
    return sum(1 for pattern in SCREENPLAY_PATTERNS if pattern.search(text))


def novel_score(text: str) -> int:
    """Weighted count of prose indicator patterns present in the text."""
    score = 0
    for pattern in NOVEL_PATTERNS:
        hits = len(pattern.findall(text))
        if hits > 10:
            score += 2
        elif hits > 0:
            score += 1
    return score


def detect_format(text: str) -> TextFormat:
    """Classify story text as screenplay, fountain, novel or general.

    Args:
        text: Raw story text

    Returns:
        Detected TextFormat. Never raises.
    """
    text = text or ""

    if FOUNTAIN_TITLE_RE.search(text) and FOUNTAIN_AUTHOR_RE.search(text) and FOUNTAIN_HEADING_RE.search(text):
        detected = TextFormat.FOUNTAIN
    elif screenplay_score(text) >= SCREENPLAY_THRESHOLD:
        detected = TextFormat.SCREENPLAY
    elif novel_score(text) > 0:
        detected = TextFormat.NOVEL
    else:
        detected = TextFormat.GENERAL

    logger.debug(f"Detected text format: {detected.value}")
    return detected
