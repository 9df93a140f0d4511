"""Test scene segmentation."""
from extraction.scenes import SceneSegmenter, is_scene_break
from ingestion.cleaner import prepare_text
from ingestion.format_detector import detect_format


def _segment(text):
    return SceneSegmenter().segment(prepare_text(text, detect_format(text)))


def test_screenplay_scenes_split_on_headings():
    """Test one scene per slugline, preamble dropped."""
    text = (
        "FADE IN:\n\nINT. KITCHEN - DAY\n\nSarah stirs.\n\n"
        "EXT. GARDEN - NIGHT\n\nTom digs."
    )
    scenes = _segment(text)

    assert [s.title for s in scenes] == ["INT. KITCHEN - DAY", "EXT. GARDEN - NIGHT"]
    assert scenes[0].content == "INT. KITCHEN - DAY\n\nSarah stirs."
    assert [s.sequence_number for s in scenes] == [1, 2]
    assert all(s.type == "scene" for s in scenes)


def test_single_heading_screenplay():
    """Test a one-scene screenplay fragment."""
    text = "INT. KITCHEN - DAY\n\nSarah stirs a pot of soup.\n\nSARAH\nDinner's almost ready."
    scenes = _segment(text)

    assert len(scenes) == 1
    assert scenes[0].title == "INT. KITCHEN - DAY"


def test_chapters_with_sub_scenes():
    """Test chapters are emitted before their scenes."""
    text = (
        "Chapter 1\n\nMara woke early.\n\nLater, she walked to the market.\n\n"
        "Chapter 2\n\nThe storm came."
    )
    scenes = _segment(text)

    assert [(s.type, s.title) for s in scenes] == [
        ("chapter", "Chapter 1"),
        ("scene", "Mara woke early."),
        ("scene", "Later, she walked to the market."),
        ("chapter", "Chapter 2"),
    ]
    assert [s.sequence_number for s in scenes] == [1, 2, 3, 4]
    assert scenes[1].parent_sequence_number == 1
    assert scenes[2].parent_sequence_number == 1
    assert scenes[3].parent_sequence_number is None
    assert scenes[3].content == "The storm came."


def test_prologue_before_first_chapter():
    """Test text before the first marker becomes a prologue."""
    scenes = _segment("A cold wind blew.\n\nChapter 1\n\nMara woke.")

    assert [s.title for s in scenes] == ["Prologue", "Chapter 1"]
    assert scenes[0].content == "A cold wind blew."


def test_asterisk_section_markers():
    """Test *** separators open numbered sections."""
    scenes = _segment("Mara slept.\n\n***\n\nThe dawn came.")

    assert [s.title for s in scenes] == ["Prologue", "Section 1"]


def test_paragraph_segmentation_without_chapters():
    """Test time jumps split prose into scenes."""
    scenes = _segment("Mara woke.\n\nMeanwhile, Vex plotted.\n\nShe slept.")

    assert len(scenes) == 2
    assert scenes[0].content == "Mara woke."
    assert scenes[1].content == "Meanwhile, Vex plotted.\n\nShe slept."
    assert all(s.parent_sequence_number is None for s in scenes)


def test_scene_content_is_verbatim():
    """Test every scene slice is found in the normalized text."""
    text = "Chapter 1\n\nMara woke early.\n\nThe next day, she left."
    prepared = prepare_text(text, detect_format(text))

    for scene in SceneSegmenter().segment(prepared):
        assert scene.content in prepared.lines


def test_scene_break_rules():
    """Test break indicators and short location changes."""
    assert is_scene_break("Later that evening, the rain stopped.")
    assert is_scene_break("She walked into the tavern.")
    assert not is_scene_break("She looked at the sky for a while.")
    assert not is_scene_break("She walked into the tavern. " * 10)
