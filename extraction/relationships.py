"""Character relationship inference from co-mention sentences."""
import math
import re
from typing import Dict, List

from utils.logger import setup_logger
from extraction.models import Character, CharacterRelationship, RelationshipType
from extraction.profiles import SERVER_PROFILE, ExtractionProfile
from extraction import vocabulary as vocab

logger = setup_logger(__name__)

SENTENCE_RE = re.compile(r"[^.!?]+[.!?]")

_CATEGORY_RES = {
    category: re.compile(r"\b(?:" + '|'.join(keywords) + r")\w*", re.IGNORECASE)
    for category, keywords in vocab.RELATIONSHIP_KEYWORDS.items()
}

DESCRIPTION_TEMPLATES: Dict[str, str] = {
    "family": "{a} and {b} appear to be family.",
    "friend": "{a} and {b} appear to be friends or allies.",
    "enemy": "{a} and {b} appear to be enemies.",
    "romantic": "{a} and {b} appear to be romantically involved.",
    "professional": "{a} and {b} appear to have a professional relationship.",
    "other": "{a} and {b} appear together in the story.",
}


def split_sentences(text: str) -> List[str]:
    return [s.strip() for s in SENTENCE_RE.findall(text) if s.strip()]


def co_mention_sentences(name1: str, name2: str, sentences: List[str]) -> List[str]:
    """Sentences that mention both names as whole words."""
    first = re.compile(r'\b' + re.escape(name1) + r'\b', re.IGNORECASE)
    second = re.compile(r'\b' + re.escape(name2) + r'\b', re.IGNORECASE)
    return [s for s in sentences if first.search(s) and second.search(s)]


def classify_relationship(sentences: List[str]) -> RelationshipType:
    """Category with a strict plurality of keyword hits, else ``other``."""
    counts = {
        category: sum(len(pattern.findall(s)) for s in sentences)
        for category, pattern in _CATEGORY_RES.items()
    }
    best = max(counts.values()) if counts else 0
    if best == 0:
        return "other"
    leaders = [category for category, count in counts.items() if count == best]
    return leaders[0] if len(leaders) == 1 else "other"


def is_name_variant(name1: str, name2: str) -> bool:
    """True when one name is a whole-word prefix of the other (MARY, MARY SMITH)."""
    words1, words2 = name1.casefold().split(), name2.casefold().split()
    shorter, longer = sorted((words1, words2), key=len)
    return longer[:len(shorter)] == shorter


def relationship_intensity(co_mentions: int) -> int:
    return min(10, max(1, math.ceil(co_mentions / 2)))


def infer_relationships(
    characters: List[Character],
    text: str,
    profile: ExtractionProfile = SERVER_PROFILE
) -> List[CharacterRelationship]:
    """Infer a relationship for each confident character pair that shares a sentence.

    Args:
        characters: Final character list
        text: Normalized story text
        profile: Supplies the minimum character confidence

    Returns:
        At most one relationship per unordered pair, never a self-pair
        or a pair where one name extends the other
    """
    confident = []
    seen = set()
    for character in characters:
        key = character.name.casefold()
        if character.confidence >= profile.relationship_min_confidence and key not in seen:
            seen.add(key)
            confident.append(character)

    sentences = split_sentences(text)
    relationships = []
    for i in range(len(confident)):
        for j in range(i + 1, len(confident)):
            a, b = confident[i].name, confident[j].name
            if is_name_variant(a, b):
                continue
            shared = co_mention_sentences(a, b, sentences)
            if not shared:
                continue

            relationship_type = classify_relationship(shared)
            example = max(shared, key=len)
            description = DESCRIPTION_TEMPLATES[relationship_type].format(a=a, b=b)
            relationships.append(CharacterRelationship(
                character1=a,
                character2=b,
                relationship_type=relationship_type,
                description=f'{description} For example: "{example}"',
                intensity=relationship_intensity(len(shared)),
            ))

    logger.info(f"Inferred {len(relationships)} character relationships")
    return relationships
