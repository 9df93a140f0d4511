"""Test story format detection."""
from ingestion.format_detector import TextFormat, detect_format, novel_score, screenplay_score

SCREENPLAY = """INT. KITCHEN - DAY

Sarah stirs a pot of soup.

SARAH
Dinner's almost ready.

TOM
I'll set the table."""


def test_fountain_wins_when_title_author_and_heading_present():
    """Test that Title:/Author:/INT. always means fountain."""
    text = "Title: The Long Night\nAuthor: J. Writer\n\nINT. HOUSE - NIGHT\n\nChapter 1\n\"Hi,\" said Ann."

    assert detect_format(text) == TextFormat.FOUNTAIN


def test_screenplay_detection():
    """Test a plain screenplay fragment."""
    assert screenplay_score(SCREENPLAY) >= 3
    assert detect_format(SCREENPLAY) == TextFormat.SCREENPLAY


def test_novel_detection():
    """Test prose with dialogue attribution."""
    text = '"We should go," said Mara.\n\nThe wind picked up as they left.'

    assert novel_score(text) > 0
    assert detect_format(text) == TextFormat.NOVEL


def test_general_fallback():
    """Test text with no indicators."""
    assert detect_format("just a few plain words") == TextFormat.GENERAL


def test_empty_text_never_raises():
    """Test that empty input is classified, not rejected."""
    assert detect_format("") == TextFormat.GENERAL


def test_detection_is_deterministic():
    """Test repeated detection gives the same answer."""
    assert detect_format(SCREENPLAY) == detect_format(SCREENPLAY)


def test_novel_weight_for_frequent_patterns():
    """Test that a pattern seen more than 10 times weighs 2."""
    many_breaks = "\n\n".join(["A line."] * 12)

    assert novel_score(many_breaks) == 2


def test_script_formats():
    """Test the is_script helper."""
    assert TextFormat.SCREENPLAY.is_script
    assert TextFormat.FOUNTAIN.is_script
    assert not TextFormat.NOVEL.is_script
