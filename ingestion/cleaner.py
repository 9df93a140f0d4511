"""Text cleaning and whitespace normalization."""
import re
from typing import List, NamedTuple

from ingestion.format_detector import TextFormat


class PreparedText(NamedTuple):
    """Two normalized views of the same story text.

    ``lines`` keeps line boundaries (one blank line between blocks) and is
    what line-oriented extractors read. ``flat`` is the format-specific
    normalization: collapsed to single spaces for prose, line-wise for
    scripts.
    """
    lines: str
    flat: str
    text_format: TextFormat


def normalize_lines(text: str) -> str:
    """Collapse whitespace inside each line while keeping line boundaries.

    Args:
        text: Raw text

    Returns:
        Text with trimmed lines and at most one blank line between blocks
    """
    text = text.replace('\r\n', '\n').replace('\r', '\n')
    lines = [re.sub(r'[ \t\f\v]+', ' ', line).strip() for line in text.split('\n')]
    text = '\n'.join(lines)
    text = re.sub(r'\n{3,}', '\n\n', text)
    return text.strip()


def normalize_whitespace(text: str, text_format: TextFormat = TextFormat.GENERAL) -> str:
    """Format-aware whitespace normalization.

    Scripts are normalized line by line so scene headings stay on their own
    lines; everything else collapses every whitespace run to one space.

    Args:
        text: Raw text
        text_format: Detected format of the text

    Returns:
        Normalized text
    """
    if text_format.is_script:
        return normalize_lines(text)
    return re.sub(r'\s+', ' ', text).strip()


def prepare_text(text: str, text_format: TextFormat) -> PreparedText:
    """Build both normalized views used by the extractors."""
    return PreparedText(
        lines=normalize_lines(text),
        flat=normalize_whitespace(text, text_format),
        text_format=text_format
    )


def clean_fountain(text: str) -> str:
    """Strip Fountain-only markup that is not story content.

    Removes ``#`` section lines, ``[[notes]]`` and ``/* boneyard */`` blocks.
    """
    text = re.sub(r'/\*.*?\*/', '', text, flags=re.DOTALL)
    text = re.sub(r'\[\[.*?\]\]', '', text, flags=re.DOTALL)
    text = re.sub(r'^#.*$', '', text, flags=re.MULTILINE)
    text = re.sub(r'\n{3,}', '\n\n', text)
    return text.strip()


def clean_markdown(text: str) -> str:
    """Drop Markdown heading markers and emphasis."""
    text = re.sub(r'^#{1,6}\s+', '', text, flags=re.MULTILINE)
    text = re.sub(r'\*\*(.+?)\*\*', r'\1', text)
    text = re.sub(r'(?<![\w*])\*(?!\s)(.+?)(?<!\s)\*(?![\w*])', r'\1', text)
    text = re.sub(r'\n{3,}', '\n\n', text)
    return text.strip()


def clean_text(text: str) -> str:
    """Clean text pulled out of a PDF.

    Args:
        text: Raw page text joined together

    Returns:
        Cleaned text
    """
    # Keep paragraph breaks, drop runs of blank lines
    text = re.sub(r'\n\s*\n\s*\n+', '\n\n', text)

    # Re-join words hyphenated across a line break
    text = re.sub(r'(\w+)-\s*\n\s*(\w+)', r'\1\2', text)

    return normalize_lines(text)


def remove_headers_footers(pages: List[str], max_len: int = 50) -> List[str]:
    """Drop running headers, footers and page numbers from PDF pages.

    Only short lines at the very top or bottom of a page are treated as
    page furniture, and only when the document has at least three pages.

    Args:
        pages: List of page texts
        max_len: Lines shorter than this may be page furniture

    Returns:
        Pages with headers/footers removed
    """
    if len(pages) < 3:
        return pages

    cleaned = []
    for page_text in pages:
        lines = page_text.split('\n')
        if len(lines) < 3:
            cleaned.append(page_text)
            continue

        start = 0
        while start < min(2, len(lines)) and len(lines[start].strip()) < max_len:
            start += 1

        end = len(lines)
        while end > max(len(lines) - 2, start) and len(lines[end - 1].strip()) < max_len:
            end -= 1

        cleaned.append('\n'.join(lines[start:end]))

    return cleaned
