"""Test event and plotline extraction."""
from extraction.events import EventExtractor, attach_participants, event_title, participant_importance
from extraction.models import Character, Event, EventParticipant, Location
from extraction.plotlines import PlotlineExtractor, infer_plotlines, title_fallback
from extraction.profiles import CLIENT_PROFILE, SERVER_PROFILE
from ingestion.cleaner import prepare_text
from ingestion.format_detector import detect_format

STORY = "Suddenly the door opened. Later, Mara ran to the river. She screams."


def _prepare(text):
    return prepare_text(text, detect_format(text))


def _event(title, sequence, participants=()):
    return Event(
        title=title,
        description=title,
        sequence_number=sequence,
        confidence=0.5,
        participants=[EventParticipant(name=name, importance=5) for name in participants]
    )


def test_events_in_text_order():
    """Test that events follow their position in the text."""
    events = EventExtractor(SERVER_PROFILE).extract(_prepare(STORY))

    assert [e.title for e in events] == [
        "Suddenly the door opened.",
        "Later, Mara ran to the river.",
        "She screams.",
    ]
    assert [e.sequence_number for e in events] == [1, 2, 3]
    assert all(e.confidence == 0.5 for e in events)


def test_client_profile_event_numbering():
    """Test the 0, 10, 20 numbering scheme."""
    events = EventExtractor(CLIENT_PROFILE).extract(_prepare(STORY))

    assert [e.sequence_number for e in events] == [0, 10, 20]


def test_all_caps_action_events():
    """Test ALL-CAPS names ending in S mark action sentences."""
    text = (
        "RUFUS walked into the forest. STUPUS followed him, smirking. "
        "'I will take Alyssa from you,' said STUPUS."
    )

    assert len(EventExtractor().extract(_prepare(text))) == 3


def test_duplicate_phrases_collapse():
    """Test the same sentence found by two patterns is one event."""
    events = EventExtractor().extract(_prepare("Suddenly she screams."))

    assert len(events) == 1


def test_event_title_truncation():
    """Test long phrases are shortened to eight words."""
    long_text = "Later the whole village gathered by the old stone bridge to watch the boats."

    assert event_title("Short one.") == "Short one."
    assert event_title(long_text) == "Later the whole village gathered by the old..."


def test_participant_importance():
    """Test the importance formula and its bounds."""
    assert participant_importance("Mara", "Later, Mara ran.") == 5
    assert participant_importance("Mara", "Mara ran and Mara hid.") == 9
    assert participant_importance("Mara", "Mara " * 10) == 10


def test_attach_participants():
    """Test characters and locations mentioned in an event are linked."""
    events = EventExtractor().extract(_prepare(STORY))
    characters = [Character(name="Mara", confidence=0.8)]
    locations = [Location(name="river", confidence=0.75)]

    linked = attach_participants(events, characters, locations)

    assert linked[1].participants[0].name == "Mara"
    assert linked[1].participant_locations == ["river"]
    assert linked[0].participants == []
    assert events[1].participants == []


def test_explicit_section_plotline():
    """Test CHAPTER lines become main plotlines."""
    plotlines = PlotlineExtractor().extract(_prepare("CHAPTER 1: The Beginning\n\nMara woke."))

    assert plotlines[0].title == "Chapter 1: The Beginning"
    assert plotlines[0].plotline_type == "main"
    assert plotlines[0].confidence == 0.6


def test_explicit_subplot_marker():
    """Test SUBPLOT: markers."""
    plotlines = PlotlineExtractor().extract(_prepare("SUBPLOT: The Lost Heir\n\nMara searched."))

    assert plotlines[0].title == "The Lost Heir"
    assert plotlines[0].plotline_type == "subplot"


def test_infer_protagonist_and_antagonist_plotlines():
    """Test journey and conflict plotlines."""
    characters = [
        Character(name="Mara", role="protagonist", confidence=0.9),
        Character(name="Vex", role="antagonist", confidence=0.9),
    ]
    events = [_event("Mara wakes", 1, ["Mara"]), _event("Vex attacks", 2, ["Vex"])]

    plotlines = infer_plotlines([], characters, events, _prepare(STORY))

    assert [p.title for p in plotlines] == ["Mara's Journey", "Conflict with Vex"]
    assert plotlines[0].plotline_type == "main"
    assert plotlines[0].event_sequences == [1]
    assert plotlines[1].plotline_type == "subplot"
    assert plotlines[1].event_sequences == [1, 2]


def test_antagonist_without_protagonist_is_main():
    """Test conflict plotline becomes main with no lead."""
    characters = [Character(name="Vex", role="antagonist", confidence=0.9)]

    plotlines = infer_plotlines([], characters, [], _prepare(STORY))

    assert plotlines[0].title == "Conflict with Vex"
    assert plotlines[0].plotline_type == "main"


def test_server_fallback_needs_events():
    """Test the Main Story fallback."""
    events = [_event("Mara wakes", 1)]

    plotlines = infer_plotlines([], [], events, _prepare(STORY), SERVER_PROFILE)
    assert [p.title for p in plotlines] == ["Main Story"]

    assert infer_plotlines([], [], [], _prepare(STORY), SERVER_PROFILE) == []


def test_client_fallback_uses_title_line():
    """Test the title-line fallback."""
    prepared = _prepare("The Long Night\n\nMara woke before dawn.")

    assert title_fallback(prepared) == "Main Plot: The Long Night"

    plotlines = infer_plotlines([], [], [], prepared, CLIENT_PROFILE)
    assert plotlines[0].title == "Main Plot: The Long Night"


def test_title_fallback_uses_caps_name():
    """Test the ALL-CAPS name fallback."""
    prepared = _prepare("RUFUS walked into the forest.")

    assert title_fallback(prepared) == "Main Plot: RUFUS Journey"
