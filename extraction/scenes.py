"""Scene and chapter segmentation."""
import re
from typing import List, Tuple

from utils.logger import setup_logger
from ingestion.cleaner import PreparedText
from extraction.models import Scene
from extraction import vocabulary as vocab

logger = setup_logger(__name__)

SLUGLINE_RE = re.compile(r'^(?:INT\.|EXT\.|INT/EXT\.|I/E\.).*$', re.MULTILINE)
CHAPTER_MARKER_RE = re.compile(
    r'^[ \t]*(?:(Chapter\s+(?:\d+|[IVXLCDM]+|one|two|three|four|five|six|seven|eight|nine|ten|eleven|twelve)\b[^\n]*)|\*[ \t]*\*[ \t]*\*[* \t]*)$',
    re.IGNORECASE | re.MULTILINE
)
PARAGRAPH_RE = re.compile(r'(?:[^\n]*\S[^\n]*(?:\n|$))+')
BREAK_INDICATOR_RE = re.compile(
    r'^\W*(?:' + '|'.join(re.escape(p) for p in vocab.SCENE_BREAK_INDICATORS) + r')\b',
    re.IGNORECASE
)
LOCATION_CHANGE_RE = re.compile(
    r'\b(?:' + '|'.join(re.escape(p) for p in vocab.LOCATION_CHANGE_PHRASES) + r')\b',
    re.IGNORECASE
)
SEGMENT_TITLE_MAX_LENGTH = 60

Span = Tuple[int, int]


def is_scene_break(paragraph: str) -> bool:
    """A paragraph opens a new scene when it starts with a time jump, or is
    short and moves the action somewhere else."""
    paragraph = paragraph.strip()
    if BREAK_INDICATOR_RE.match(paragraph):
        return True
    return len(paragraph) < vocab.SHORT_PARAGRAPH_CHARS and bool(LOCATION_CHANGE_RE.search(paragraph))


def split_paragraph_segments(text: str, start: int, end: int) -> List[Span]:
    """Group the paragraphs of ``text[start:end]`` into scene spans."""
    paragraphs = [
        (start + m.start(), start + m.end())
        for m in PARAGRAPH_RE.finditer(text[start:end])
        if m.group(0).strip()
    ]
    if not paragraphs:
        return []

    segments: List[Span] = []
    seg_start, seg_end = paragraphs[0]
    for p_start, p_end in paragraphs[1:]:
        if is_scene_break(text[p_start:p_end]):
            segments.append((seg_start, seg_end))
            seg_start = p_start
        seg_end = p_end
    segments.append((seg_start, seg_end))
    return segments


def _segment_title(content: str, index: int) -> str:
    first_line = content.split('\n', 1)[0].strip()
    if first_line and len(first_line) < SEGMENT_TITLE_MAX_LENGTH:
        return first_line
    return f"Scene {index}"


class SceneSegmenter:
    """Splits story text into scenes (scripts) or chapters and scenes (prose)."""

    def segment(self, prepared: PreparedText) -> List[Scene]:
        """Segment the text.

        Args:
            prepared: Normalized story text; slices are taken from ``prepared.lines``

        Returns:
            Scenes in emission order with sequence numbers from 1
        """
        text = prepared.lines
        scenes: List[Scene] = []
        if prepared.text_format.is_script:
            scenes = self._screenplay_scenes(text)
        if not scenes:
            scenes = self._prose_scenes(text)
        logger.info(f"Segmented {len(scenes)} scenes")
        return scenes

    def _screenplay_scenes(self, text: str) -> List[Scene]:
        headings = list(SLUGLINE_RE.finditer(text))
        scenes = []
        for i, heading in enumerate(headings):
            end = headings[i + 1].start() if i + 1 < len(headings) else len(text)
            scenes.append(Scene(
                title=heading.group(0).strip(),
                content=text[heading.start():end].strip(),
                type="scene",
                sequence_number=i + 1,
            ))
        return scenes

    def _chapters(self, text: str) -> List[Tuple[str, int, int]]:
        """(title, body start, body end) per chapter, including a leading prologue."""
        markers = list(CHAPTER_MARKER_RE.finditer(text))
        if not markers:
            return []

        chapters = []
        if text[:markers[0].start()].strip():
            chapters.append(("Prologue", 0, markers[0].start()))
        for i, marker in enumerate(markers):
            end = markers[i + 1].start() if i + 1 < len(markers) else len(text)
            title = marker.group(1).strip() if marker.group(1) else f"Section {i + 1}"
            chapters.append((title, marker.end(), end))
        return chapters

    def _prose_scenes(self, text: str) -> List[Scene]:
        scenes: List[Scene] = []
        chapters = self._chapters(text)

        if not chapters:
            for index, (start, end) in enumerate(split_paragraph_segments(text, 0, len(text)), start=1):
                content = text[start:end].strip()
                scenes.append(Scene(
                    title=_segment_title(content, index),
                    content=content,
                    type="scene",
                    sequence_number=len(scenes) + 1,
                ))
            return scenes

        for title, start, end in chapters:
            chapter_seq = len(scenes) + 1
            scenes.append(Scene(
                title=title,
                content=text[start:end].strip(),
                type="chapter",
                sequence_number=chapter_seq,
            ))
            segments = split_paragraph_segments(text, start, end)
            if len(segments) <= 1:
                continue
            for index, (seg_start, seg_end) in enumerate(segments, start=1):
                content = text[seg_start:seg_end].strip()
                scenes.append(Scene(
                    title=_segment_title(content, index),
                    content=content,
                    type="scene",
                    sequence_number=len(scenes) + 1,
                    parent_sequence_number=chapter_seq,
                ))
        return scenes
