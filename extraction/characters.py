"""Character extraction.

Candidates come from a set of strategies chosen by the detected text format.
Every strategy proposes ``(name, confidence)`` hits; hits are merged by
case-insensitive name, re-checked with :func:`is_likely_character_name`, then
turned into :class:`Character` records with a role, description and
appearance count.
"""
import re
from collections import Counter, OrderedDict
from typing import Callable, Dict, List, NamedTuple, Optional, Pattern, Set, Tuple

from utils.logger import setup_logger
from ingestion.cleaner import PreparedText
from ingestion.format_detector import SCENE_HEADING_RE, TextFormat
from extraction.models import Character, CharacterRole
from extraction.profiles import SERVER_PROFILE, CharacterOverrides, ExtractionProfile, find_override
from extraction import vocabulary as vocab

logger = setup_logger(__name__)

# (title-cased name, story world id) -> exists?
DuplicateChecker = Callable[[str, Optional[str]], bool]

CUE_RE = re.compile(r"^[A-Z][A-Z\s',.]+(\([A-Z.]+\))?$")
CAPS_LINE_RE = re.compile(r"^[A-Z][A-Z '.\-]*[A-Z.](?:\s*\([^)]*\))?$")
CAPS_TOKEN_RE = re.compile(r"\b[A-Z][A-Z']*[A-Z]\b")
CAPS_PHRASE_RE = re.compile(r"\b[A-Z][A-Z']*[A-Z]\.?(?: [A-Z][A-Z']*[A-Z]){1,2}\b")
TITLE_LINE_RE = re.compile(r"^([A-Z][A-Z .']{0,40}?[A-Z])\s*:\s*\S")
TRANSITION_RE = re.compile(r"^(?:FADE|CUT|DISSOLVE|SMASH CUT|MATCH CUT|WIPE|THE END)\b|TO:$")
PARENTHETICAL_RE = re.compile(r"\([^)]*\)")
ROMAN_NUMERAL_RE = re.compile(r"^[IVXLCDM]+$")
PROPER_NOUN_RE = re.compile(r"\b[A-Z][a-z]+\b")
SENTENCE_RE = re.compile(r"[^.!?]+[.!?]")
WORD_RE = re.compile(r"[A-Za-z']+")

MAX_QUOTE_LENGTH = 300

_VERBS = '|'.join(vocab.DIALOGUE_VERBS)
ATTRIBUTION_AFTER_RE = re.compile(
    r"[\"“'][^\"”\n]{0," + str(MAX_QUOTE_LENGTH) + r"}?[,.!?]?[\"”']\s*,?\s*(?:" + _VERBS + r")\s+([A-Z][A-Za-z'\-]+)"
)
ATTRIBUTION_BEFORE_RE = re.compile(
    r"[\"”']\s*,?\s*([A-Z][A-Za-z'\-]+)\s+(?:" + _VERBS + r")\b"
)

MAX_CUE_LENGTH = 50
MAX_NAME_WORDS = 3

_REJECT_WORDS = (
    vocab.LOCATION_WORDS | vocab.OBJECT_WORDS | vocab.NON_CHARACTER_WORDS
    | vocab.SLUGLINE_WORDS | vocab.SOUND_EFFECTS
)

ROLE_DESCRIPTIONS: Dict[str, str] = {
    "protagonist": "{name} is the central character whose journey drives the story.",
    "antagonist": "{name} stands in opposition to the story's heroes.",
    "supporting": "{name} plays a recurring part in the story.",
    "background": "{name} makes a brief appearance in the story.",
    "other": "{name} appears in the story.",
}

ROLE_LOGLINES: Dict[str, str] = {
    "protagonist": "{name} must face the story's central conflict and come out changed.",
    "antagonist": "{name} stands in the way of everything the heroes want.",
    "supporting": "{name} helps shape the path of the main characters.",
    "background": "{name} is a minor figure in the world of the story.",
    "other": "{name} has a part to play in the story.",
}


class CandidateHit(NamedTuple):
    name: str
    confidence: float


def _normalize_name(name: str) -> str:
    return ' '.join(name.replace('’', "'").split()).strip(" .,'")


def _name_words(name: str) -> List[str]:
    return re.sub(r"[^\w\s'\-]", ' ', name).upper().split()


def is_likely_character_name(name: str) -> bool:
    """Plausibility filter shared by every strategy.

    A name that starts with an honorific is always accepted. Otherwise it is
    rejected when any of its words is a location, object, screenplay or
    other non-character word, or when the whole phrase is a known
    action-description phrase such as ``DARK FIGURE``.
    """
    words = _name_words(name or '')
    if not words:
        return False
    if words[0].rstrip('.') in vocab.HONORIFICS:
        return True
    if sum(ch.isalpha() for ch in name) < 2:
        return False
    if ' '.join(words) in vocab.ACTION_DESCRIPTION_PHRASES:
        return False
    return not any(word in _REJECT_WORDS or ROMAN_NUMERAL_RE.match(word) for word in words)


def is_scene_heading(line: str) -> bool:
    return bool(SCENE_HEADING_RE.match(line))


def is_transition(line: str) -> bool:
    return bool(TRANSITION_RE.search(line.strip()))


def _is_cue_line(line: str) -> bool:
    line = line.strip()
    return bool(
        line and len(line) < MAX_CUE_LENGTH and CUE_RE.match(line)
        and not is_scene_heading(line) and not is_transition(line)
    )


def _next_non_empty(lines: List[str], index: int) -> Tuple[Optional[int], str]:
    for j in range(index + 1, len(lines)):
        if lines[j].strip():
            return j, lines[j].strip()
    return None, ''


def count_mentions(name: str, text: str) -> int:
    """Case-insensitive whole-word mention count."""
    return len(re.findall(r'\b' + re.escape(name) + r'\b', text, re.IGNORECASE))


# ---------------------------------------------------------------- strategies

class CharacterStrategy:
    """Proposes character name candidates from prepared text."""

    source = "base"

    def find(self, prepared: PreparedText, profile: ExtractionProfile) -> List[CandidateHit]:
        raise NotImplementedError


class ScreenplayCueStrategy(CharacterStrategy):
    """Speaker cues: an ALL-CAPS line followed by something that is not a heading or another cue."""

    source = "screenplay_cue"

    def find(self, prepared: PreparedText, profile: ExtractionProfile) -> List[CandidateHit]:
        lines = prepared.lines.split('\n')
        counts: Counter = Counter()
        order: List[str] = []

        for i, raw in enumerate(lines):
            if not _is_cue_line(raw):
                continue
            _, next_line = _next_non_empty(lines, i)
            if not next_line or is_scene_heading(next_line) or _is_cue_line(next_line):
                continue

            name = _normalize_name(PARENTHETICAL_RE.sub('', raw))
            if not name:
                continue
            if name not in counts:
                order.append(name)
            counts[name] += 1

        return [
            CandidateHit(name, min(profile.cue_cap, profile.cue_base + profile.cue_step * (counts[name] - 1)))
            for name in order
        ]


class NovelStrategy(CharacterStrategy):
    """Dialogue attribution plus frequent capitalized words in prose."""

    source = "novel"

    def find(self, prepared: PreparedText, profile: ExtractionProfile) -> List[CandidateHit]:
        text = prepared.flat
        hits: List[CandidateHit] = []

        attributed: Counter = Counter()
        order: List[str] = []
        for pattern in (ATTRIBUTION_AFTER_RE, ATTRIBUTION_BEFORE_RE):
            for match in pattern.finditer(text):
                name = _normalize_name(match.group(1))
                if name in vocab.COMMON_CAPITALIZED_WORDS or not is_likely_character_name(name):
                    continue
                if name not in attributed:
                    order.append(name)
                attributed[name] += 1

        for name in order:
            confidence = profile.attribution_base + profile.attribution_step * (attributed[name] - 1)
            hits.append(CandidateHit(name, min(profile.attribution_cap, confidence)))

        tokens = Counter(PROPER_NOUN_RE.findall(text))
        for token, count in tokens.items():
            if count < 3 or token in vocab.COMMON_CAPITALIZED_WORDS:
                continue
            if not is_likely_character_name(token):
                continue
            hits.append(CandidateHit(token, profile.proper_noun_confidence))

        return hits


class AllCapsStrategy(CharacterStrategy):
    """ALL-CAPS names anywhere in the text, regardless of format."""

    source = "all_caps"

    def find(self, prepared: PreparedText, profile: ExtractionProfile) -> List[CandidateHit]:
        lines = prepared.lines.split('\n')
        hits: List[CandidateHit] = []
        hits.extend(self._caps_lines(lines, profile))

        phrase_hits, phrase_spans = self._phrases(lines, profile)
        hits.extend(phrase_hits)
        hits.extend(self._tokens(lines, phrase_spans, profile))
        hits.extend(self._title_lines(lines, profile))
        return hits

    def _caps_lines(self, lines: List[str], profile: ExtractionProfile) -> List[CandidateHit]:
        hits = []
        for i, raw in enumerate(lines):
            line = raw.strip()
            if not line or len(line) >= MAX_CUE_LENGTH or not CAPS_LINE_RE.match(line):
                continue
            if is_scene_heading(line) or is_transition(line):
                continue

            name = _normalize_name(PARENTHETICAL_RE.sub('', line))
            if len(name.split()) > MAX_NAME_WORDS or not is_likely_character_name(name):
                continue

            next_index, next_line = _next_non_empty(lines, i)
            if not next_line or is_scene_heading(next_line) or CAPS_LINE_RE.match(next_line):
                continue

            # Dialogue sits directly under its speaker
            if next_index == i + 1:
                hits.append(CandidateHit(name, profile.caps_cue_dialogue_confidence))
            else:
                hits.append(CandidateHit(name, profile.caps_cue_confidence))
        return hits

    def _phrases(self, lines: List[str], profile: ExtractionProfile):
        hits = []
        spans: Dict[int, List[Tuple[int, int]]] = {}
        for line_no, line in enumerate(lines):
            if is_scene_heading(line) or is_transition(line):
                continue
            for match in CAPS_PHRASE_RE.finditer(line):
                phrase = _normalize_name(match.group(0))
                if not is_likely_character_name(phrase):
                    continue
                hits.append(CandidateHit(phrase, profile.caps_phrase_confidence))
                spans.setdefault(line_no, []).append(match.span())
        return hits, spans

    def _tokens(
        self,
        lines: List[str],
        phrase_spans: Dict[int, List[Tuple[int, int]]],
        profile: ExtractionProfile
    ) -> List[CandidateHit]:
        # A token survives if at least one occurrence lies outside every accepted phrase
        standalone: "OrderedDict[str, bool]" = OrderedDict()
        for line_no, line in enumerate(lines):
            if is_scene_heading(line) or is_transition(line):
                continue
            for match in CAPS_TOKEN_RE.finditer(line):
                token = match.group(0)
                if token.endswith("'S"):
                    token = token[:-2]
                if "'" in token or not is_likely_character_name(token):
                    continue
                start, end = match.span()
                absorbed = any(s <= start and end <= e for s, e in phrase_spans.get(line_no, []))
                standalone[token] = standalone.get(token, False) or not absorbed

        return [
            CandidateHit(token, profile.caps_token_confidence)
            for token, keep in standalone.items() if keep
        ]

    def _title_lines(self, lines: List[str], profile: ExtractionProfile) -> List[CandidateHit]:
        hits = []
        for line in lines:
            match = TITLE_LINE_RE.match(line.strip())
            if not match or is_scene_heading(line):
                continue
            name = _normalize_name(match.group(1))
            if len(name.split()) <= MAX_NAME_WORDS and is_likely_character_name(name):
                hits.append(CandidateHit(name, profile.title_line_confidence))
        return hits


def strategies_for(text_format: TextFormat) -> List[CharacterStrategy]:
    """Format-driven strategy selection; the ALL-CAPS strategy always runs."""
    if text_format.is_script:
        return [ScreenplayCueStrategy(), AllCapsStrategy()]
    return [NovelStrategy(), AllCapsStrategy()]


# ---------------------------------------------------------------- roles and prose

def _mention_positions(name: str, words: List[str]) -> List[int]:
    target = [w.lower() for w in WORD_RE.findall(name)]
    size = len(target)
    if not size:
        return []
    return [
        i for i in range(len(words) - size + 1)
        if [w.lower() for w in words[i:i + size]] == target
    ]


def identify_character_role(
    name: str,
    text: str,
    overrides: Optional[CharacterOverrides] = None
) -> CharacterRole:
    """Classify a character as protagonist, antagonist, supporting or background.

    Args:
        name: Character name as extracted
        text: Normalized story text
        overrides: Optional name -> override table; an override role wins

    Returns:
        The character role
    """
    override = find_override(overrides, name)
    if override and override.role:
        return override.role

    mentions = count_mentions(name, text)
    first = re.search(r'\b' + re.escape(name) + r'\b', text, re.IGNORECASE)
    if first and first.start() < 200 and mentions > 15:
        return "protagonist"

    words = [w[:-2] if w.lower().endswith("'s") else w for w in WORD_RE.findall(text)]
    size = len(WORD_RE.findall(name))
    for position in _mention_positions(name, words):
        window = words[max(0, position - 3):position] + words[position + size:position + size + 3]
        if any(w.lower() in vocab.NEGATIVE_SENTIMENT_WORDS for w in window):
            return "antagonist"

    if mentions > 5:
        return "supporting"
    return "background"


def gather_character_context(name: str, text: str, limit: int = 3) -> List[str]:
    """Sentences about a character: direct mentions, plus a following pronoun
    sentence that carries an action verb."""
    sentences = [s.strip() for s in SENTENCE_RE.findall(text)]
    name_re = re.compile(r'\b' + re.escape(name) + r'\b', re.IGNORECASE)
    pronoun_re = re.compile(r'^(?:' + '|'.join(vocab.PRONOUNS) + r')\b', re.IGNORECASE)
    action_re = re.compile(r'\b(?:' + '|'.join(vocab.ACTION_VERBS) + r')\b', re.IGNORECASE)

    context = []
    for i, sentence in enumerate(sentences):
        if name_re.search(sentence):
            context.append(sentence)
            if i + 1 < len(sentences):
                follower = sentences[i + 1]
                if pronoun_re.match(follower) and action_re.search(follower):
                    context.append(follower)
        if len(context) >= limit:
            break
    return context[:limit]


def _verb_sentence(name: str, text: str, verbs) -> Optional[str]:
    pattern = re.compile(
        r'\b' + re.escape(name) + r"\b\s+(?:" + '|'.join(verbs) + r")\b[^.!?]*[.!?]",
        re.IGNORECASE
    )
    match = pattern.search(text)
    return match.group(0).strip() if match else None


def generate_character_description(
    name: str,
    role: CharacterRole,
    text: str,
    overrides: Optional[CharacterOverrides] = None
) -> str:
    """Describe a character from context, falling back to a role template."""
    override = find_override(overrides, name)
    if override and override.description:
        return override.description

    sentence = _verb_sentence(name, text, vocab.DESCRIPTIVE_VERBS) or _verb_sentence(name, text, vocab.ACTION_VERBS)
    if sentence:
        return sentence

    action_re = re.compile(r'\b(?:' + '|'.join(vocab.ACTION_VERBS) + r')\b', re.IGNORECASE)
    for sentence in gather_character_context(name, text):
        if action_re.search(sentence):
            return sentence

    return ROLE_DESCRIPTIONS[role].format(name=name)


def generate_character_logline(
    name: str,
    role: CharacterRole,
    text: str,
    overrides: Optional[CharacterOverrides] = None
) -> str:
    """One-line summary; the override table is consulted first."""
    override = find_override(overrides, name)
    if override and override.logline:
        return override.logline

    sentence = _verb_sentence(name, text, vocab.ACTION_VERBS)
    if sentence:
        return sentence
    return ROLE_LOGLINES[role].format(name=name)


def title_case_name(name: str) -> str:
    return ' '.join(word.capitalize() for word in name.split())


def check_if_character_exists(
    name: str,
    story_world_id: Optional[str],
    checker: DuplicateChecker
) -> bool:
    """Ask the duplicate checker about the Title-Cased form of ``name``."""
    return bool(checker(title_case_name(name), story_world_id))


# ---------------------------------------------------------------- extractor

class CharacterExtractor:
    """Runs the character strategies and builds Character records."""

    def __init__(
        self,
        profile: ExtractionProfile = SERVER_PROFILE,
        overrides: Optional[CharacterOverrides] = None
    ):
        self.profile = profile
        self.overrides = overrides or {}

    def extract(self, prepared: PreparedText) -> List[Character]:
        """Extract character candidates.

        Args:
            prepared: Normalized story text and its detected format

        Returns:
            Characters in discovery order, all at or above the profile floor
        """
        merged: "OrderedDict[str, Tuple[str, float, Set[str]]]" = OrderedDict()
        for strategy in strategies_for(prepared.text_format):
            for hit in strategy.find(prepared, self.profile):
                key = hit.name.casefold()
                if key in merged:
                    name, confidence, sources = merged[key]
                    if hit.confidence > confidence:
                        name = hit.name
                    merged[key] = (name, max(confidence, hit.confidence), sources | {strategy.source})
                else:
                    merged[key] = (hit.name, hit.confidence, {strategy.source})

        characters = []
        for name, confidence, sources in merged.values():
            if not is_likely_character_name(name):
                continue
            confidence = min(1.0, max(0.0, confidence))
            if confidence < self.profile.character_floor:
                continue
            try:
                characters.append(self._build(name, confidence, sources, prepared.flat))
            except Exception as e:
                logger.warning(f"Skipping character candidate {name!r}: {e}")

        logger.info(f"Extracted {len(characters)} characters")
        return characters

    def _build(self, name: str, confidence: float, sources: Set[str], text: str) -> Character:
        role = identify_character_role(name, text, self.overrides)
        logline = None
        if self.profile.include_loglines:
            logline = generate_character_logline(name, role, text, self.overrides)
        return Character(
            name=name,
            role=role,
            description=generate_character_description(name, role, text, self.overrides),
            logline=logline,
            confidence=round(confidence, 4),
            appearances=count_mentions(name, text),
            sources=sorted(sources),
        )

    def mark_duplicates(
        self,
        characters: List[Character],
        story_world_id: Optional[str],
        checker: Optional[DuplicateChecker]
    ) -> List[Character]:
        """Set ``is_new`` on each character using the duplicate checker.

        A checker failure is logged and the character is treated as existing.
        """
        if checker is None:
            return list(characters)

        marked = []
        for character in characters:
            try:
                exists = check_if_character_exists(character.name, story_world_id, checker)
            except Exception as e:
                logger.error(f"Duplicate check failed for {character.name!r}: {e}")
                exists = True
            marked.append(character.model_copy(update={"is_new": not exists}))
        return marked
