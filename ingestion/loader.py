"""Story file loading: plain text, Markdown, Fountain and PDF."""
import fitz  # PyMuPDF
import re
from pathlib import Path
from typing import List

from utils.logger import setup_logger
from ingestion.models import StoryDocument
from ingestion.cleaner import clean_text, clean_fountain, clean_markdown, remove_headers_footers
from ingestion.format_detector import detect_format

logger = setup_logger(__name__)

SUPPORTED_EXTENSIONS = {'.txt', '.text', '.md', '.markdown', '.fountain', '.pdf'}
MIN_TEXT_LENGTH = 10


class StoryLoadError(Exception):
    """Raised when a story file cannot be loaded."""
    pass


def title_from_filename(path: Path) -> str:
    """Turn ``the-dark_forest draft`` into ``The Dark Forest Draft``."""
    words = [w for w in re.split(r'[-_\s]+', path.stem) if w]
    if not words:
        return "Untitled"
    return ' '.join(word[:1].upper() + word[1:].lower() for word in words)


class StoryLoader:
    """Loads story text from disk."""

    def load(self, file_path: str) -> StoryDocument:
        """Load and clean a story file.

        Args:
            file_path: Path to a .txt, .md, .fountain or .pdf file

        Returns:
            StoryDocument with cleaned text and a title derived from the file name

        Raises:
            StoryLoadError: If the file is missing, unsupported or has no usable text
        """
        path = Path(file_path)

        if not path.exists():
            raise StoryLoadError(f"Story file not found: {path}")

        suffix = path.suffix.lower()
        if suffix not in SUPPORTED_EXTENSIONS:
            raise StoryLoadError(f"Unsupported story file type: {suffix or '(none)'}")

        logger.info(f"Loading story from {path.name}")

        if suffix == '.pdf':
            text, page_count = self._read_pdf(path)
            source_format = 'pdf'
        else:
            text = self._read_text(path)
            page_count = None
            source_format = 'md' if suffix in ('.md', '.markdown') else suffix.lstrip('.')

        if source_format == 'fountain' or detect_format(text).is_script:
            text = clean_fountain(text)
        elif source_format == 'md':
            text = clean_markdown(text)

        if len(text.strip()) < MIN_TEXT_LENGTH:
            raise StoryLoadError(f"Story file {path.name} is too short for analysis")

        word_count = len(text.split())
        logger.info(f"Loaded {word_count} words from {path.name}")

        metadata = {
            'filename': path.name,
            'word_count': word_count,
            'file_path': str(path.absolute())
        }
        if page_count is not None:
            metadata['page_count'] = page_count

        return StoryDocument(
            title=title_from_filename(path),
            text=text,
            source_format=source_format,
            metadata=metadata
        )

    def _read_text(self, path: Path) -> str:
        try:
            return path.read_text(encoding='utf-8')
        except UnicodeDecodeError:
            logger.warning(f"{path.name} is not valid UTF-8, falling back to latin-1")
            return path.read_text(encoding='latin-1')

    def _read_pdf(self, path: Path) -> tuple:
        """Extract page text from a PDF.

        Returns:
            Tuple of (cleaned text, page count)
        """
        try:
            doc = fitz.open(path)
        except Exception as e:
            raise StoryLoadError(f"Failed to open PDF: {e}")

        if doc.page_count == 0:
            doc.close()
            raise StoryLoadError("PDF has no pages")

        try:
            pages: List[str] = [doc[page_num].get_text() for page_num in range(doc.page_count)]
        finally:
            doc.close()

        pages = remove_headers_footers(pages)
        return clean_text('\n\n'.join(pages)), len(pages)
