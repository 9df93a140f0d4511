"""Test location and item extraction."""
from extraction.items import ItemExtractor, classify_item, trim_object_phrase
from extraction.locations import LocationExtractor, classify_location
from ingestion.cleaner import prepare_text
from ingestion.format_detector import detect_format


def _prepare(text):
    return prepare_text(text, detect_format(text))


def _locations(text):
    return {loc.name: loc for loc in LocationExtractor().extract(_prepare(text))}


def _items(text):
    return {item.name: item for item in ItemExtractor().extract(_prepare(text))}


def test_scene_heading_location():
    """Test INT. headings produce a building location."""
    text = "INT. KITCHEN - DAY\n\nSarah stirs a pot of soup.\n\nSARAH\nDinner's almost ready."
    locations = _locations(text)

    assert list(locations) == ["KITCHEN"]
    assert locations["KITCHEN"].location_type == "building"
    assert locations["KITCHEN"].confidence == 0.75


def test_exterior_heading_defaults_to_natural():
    """Test EXT. headings with no keyword fall back to natural."""
    locations = _locations("EXT. MISTY HOLLOW - NIGHT\n\nWind howls through the trees.")

    assert locations["MISTY HOLLOW"].location_type == "natural"


def test_prefix_locations():
    """Test capitalized places after a location preposition."""
    locations = _locations("They rode to Rivertown and stayed in the Golden Lantern Inn.")

    assert "Rivertown" in locations
    assert "Golden Lantern Inn" in locations
    assert locations["Rivertown"].location_type == "city"


def test_named_location_uses_hint():
    """Test 'the city of X' is typed from the naming noun."""
    locations = _locations("They travelled to the city of Ember.")

    assert locations["Ember"].location_type == "city"


def test_locations_are_deduplicated():
    """Test repeated headings produce one location."""
    text = "INT. KITCHEN - DAY\n\nSARAH\nHi.\n\nINT. KITCHEN - NIGHT\n\nTOM\nBye."

    assert list(_locations(text)) == ["KITCHEN"]


def test_classify_location():
    """Test the keyword classifier order."""
    assert classify_location("Mars Planet") == "planet"
    assert classify_location("Riverside Town") == "city"
    assert classify_location("Old Mill", "forest") == "natural"
    assert classify_location("Nowhere") == "other"


def test_trim_object_phrase():
    """Test captured phrases stop at the first stopword."""
    assert trim_object_phrase("rusty sword and runs") == "rusty sword"
    assert trim_object_phrase("and nothing") == ""


def test_indicator_items():
    """Test objects after handling verbs."""
    items = _items("She picks up the rusty sword and runs.")

    assert "rusty sword" in items
    assert items["rusty sword"].item_type == "weapon"
    assert items["rusty sword"].confidence == 0.6


def test_marker_items():
    """Test explicit OBJECT: lines."""
    items = _items("OBJECT: The Silver Key\n\nIt glows faintly.")

    assert items["The Silver Key"].item_type == "tool"


def test_caps_item_is_magical():
    """Test an ALL-CAPS object after a handling verb."""
    items = _items("RUFUS grabs the AMULET.")

    assert "AMULET" in items
    assert items["AMULET"].item_type == "magical"


def test_character_names_are_not_items():
    """Test that grabbing a person is not an item."""
    assert "STUPUS" not in _items("RUFUS grabs STUPUS.")


def test_classify_item():
    """Test item type keywords."""
    assert classify_item("old map") == "document"
    assert classify_item("laptop") == "technology"
    assert classify_item("pebble") == "other"
