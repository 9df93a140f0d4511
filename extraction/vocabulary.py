"""Stoplists and keyword tables shared by every extractor.

All word lists are upper-case frozensets unless they are ordered keyword
tables (type classifiers), which are checked in declaration order.
"""
from typing import Dict, FrozenSet, List, Tuple

# ---------------------------------------------------------------- characters

NON_CHARACTER_WORDS: FrozenSet[str] = frozenset({
    'THE', 'AND', 'OF', 'TO', 'IN', 'A', 'AN', 'FOR', 'WITH', 'IS', 'ON', 'AT', 'BY', 'AS', 'IT',
    'ALL', 'BUT', 'OR', 'THAT', 'THIS', 'THESE', 'THOSE', 'MY', 'YOUR', 'HIS', 'HER', 'OUR',
    'THEIR', 'ARE', 'WAS', 'WERE', 'BE', 'BEEN', 'BEING', 'HAVE', 'HAS', 'HAD', 'DO', 'DOES',
    'DID', 'NOT', 'NO', 'YES', 'CAN', 'WILL', 'WOULD', 'SHOULD', 'COULD', 'MAY', 'MIGHT',
    'HE', 'SHE', 'WE', 'THEY', 'YOU', 'ME', 'HIM', 'THEM', 'US', 'WHAT', 'WHO', 'WHY', 'HOW',
    'WHEN', 'WHERE', 'THEN', 'NOW', 'HERE', 'THERE', 'OK', 'OKAY', 'OH', 'HEY', 'END', 'THE END',
    'NOTE', 'TITLE', 'AUTHOR', 'DRAFT', 'CONTACT', 'EVENT', 'SUBPLOT', 'PLOTLINE', 'ARC', 'THREAD',
    'STORY', 'OBJECT', 'ITEM', 'PROP', 'ARTIFACT', 'CHAPTER', 'ACT', 'PART', 'BOOK', 'SCENE',
    'PROLOGUE', 'EPILOGUE', 'MONTAGE', 'SERIES', 'SHOTS', 'INTERCUT', 'FLASHBACK', 'TV', 'OS',
    'ENTERS', 'EXITS', 'LOOKS', 'TURNS', 'WALKS', 'RUNS', 'STOPS', 'BEAT', 'PAUSE', 'SILENCE',
    'ATTACK', 'ATTACKS', 'FIGHT', 'FIGHTS', 'BATTLE', 'CONFRONT', 'CONFRONTS', 'REVEAL',
    'REVEALS', 'DISCOVER', 'DISCOVERS', 'ESCAPE', 'ESCAPES', 'ENTER', 'EXIT', 'ARRIVE',
    'ARRIVES', 'LEAVE', 'LEAVES', 'SCREAMS', 'CRIES', 'LAUGHS', 'YELLS', 'SHOUTS', 'WHISPERS',
    'GASPS', 'SOBS', 'ONE', 'TWO', 'THREE', 'FOUR', 'FIVE', 'SIX', 'SEVEN', 'EIGHT', 'NINE',
    'TEN', 'ELEVEN', 'TWELVE', 'FIRST', 'SECOND', 'THIRD', 'LAST', 'FINAL', 'NEW', 'OLD',
})

# Scene-heading and transition vocabulary
SLUGLINE_WORDS: FrozenSet[str] = frozenset({
    'INT', 'EXT', 'INT.', 'EXT.', 'I/E', 'INT/EXT', 'DAY', 'NIGHT', 'MORNING', 'EVENING',
    'AFTERNOON', 'DAWN', 'DUSK', 'LATER', 'CONTINUOUS', 'MOMENTS', 'SAME', 'TIME', 'FADE',
    'FADES', 'CUT', 'DISSOLVE', 'SMASH', 'MATCH', 'WIPE', 'TRANSITION', 'IN', 'OUT', 'TO',
    'BLACK', 'V.O', 'V.O.', 'O.S', 'O.S.', 'O.C', 'O.C.', "CONT'D", 'CONTD', 'POV', 'ANGLE',
    'CLOSE', 'WIDE', 'SHOT', 'INSERT', 'SUPER', 'TITLE', 'CREDITS', 'BACK', 'FADE IN',
    'FADE OUT', 'CUT TO',
})

SOUND_EFFECTS: FrozenSet[str] = frozenset({
    'BANG', 'BOOM', 'CRASH', 'THUD', 'SLAM', 'CRACK', 'SNAP', 'BAM', 'POW', 'WHOOSH', 'CLICK',
    'BEEP', 'RING', 'RINGS', 'KNOCK', 'SMASH', 'SPLASH', 'RUMBLE', 'ROAR', 'HOWL', 'HOWLS',
    'SCREECH', 'THUNDER', 'CREAK', 'BUZZ', 'HISS', 'GUNSHOT', 'EXPLOSION', 'SILENCE',
})

LOCATION_WORDS: FrozenSet[str] = frozenset({
    'FOREST', 'WOODS', 'HOUSE', 'HOME', 'ROOM', 'KITCHEN', 'BEDROOM', 'BATHROOM', 'HALL',
    'HALLWAY', 'CORRIDOR', 'OFFICE', 'STREET', 'ROAD', 'AVENUE', 'LANE', 'ALLEY', 'CITY',
    'TOWN', 'VILLAGE', 'CASTLE', 'PALACE', 'TOWER', 'CAVE', 'MOUNTAIN', 'MOUNTAINS', 'RIVER',
    'LAKE', 'OCEAN', 'SEA', 'BEACH', 'DESERT', 'FIELD', 'FIELDS', 'MEADOW', 'VALLEY', 'HILL',
    'PARK', 'GARDEN', 'BUILDING', 'APARTMENT', 'CAFE', 'RESTAURANT', 'BAR', 'PUB', 'HOTEL',
    'MOTEL', 'SCHOOL', 'UNIVERSITY', 'COLLEGE', 'HOSPITAL', 'CHURCH', 'TEMPLE', 'CHAMBER',
    'KINGDOM', 'REALM', 'EMPIRE', 'COUNTRY', 'LAND', 'PLANET', 'WORLD', 'SHIP', 'STATION',
    'BASE', 'CAMP', 'DEN', 'LAIR', 'CLEARING', 'BRIDGE', 'GATE', 'DUNGEON', 'PRISON', 'JAIL',
    'MARKET', 'SQUARE', 'SHOP', 'STORE', 'WAREHOUSE', 'BARN', 'FARM', 'CABIN', 'LIBRARY',
    'LAB', 'LABORATORY', 'STREETS', 'ROOF', 'ROOFTOP', 'BASEMENT', 'ATTIC', 'CAR', 'TRAIN',
    'PLATFORM', 'GROUNDS', 'TERRITORY', 'SWAMP', 'ISLAND', 'SKY', 'SPACE',
})

OBJECT_WORDS: FrozenSet[str] = frozenset({
    'SWORD', 'GUN', 'KNIFE', 'BOOK', 'LETTER', 'KEY', 'MAP', 'PHONE', 'COMPUTER', 'NECKLACE',
    'RING', 'AMULET', 'CROWN', 'SCEPTER', 'WAND', 'STAFF', 'SHIELD', 'ARMOR', 'ROBE', 'CLOAK',
    'HAT', 'MASK', 'POTION', 'SCROLL', 'ARTIFACT', 'DOOR', 'WINDOW', 'TABLE', 'CHAIR', 'BOX',
    'BAG', 'BOTTLE', 'GLASS', 'CUP', 'PLATE', 'LAMP', 'CANDLE', 'TORCH', 'ROPE', 'BOW',
    'ARROW', 'AXE', 'DAGGER', 'SPEAR', 'PISTOL', 'RIFLE', 'BOMB', 'WATCH', 'CLOCK', 'MIRROR',
    'PHOTO', 'PHOTOGRAPH', 'NOTEBOOK', 'DIARY', 'JOURNAL', 'ENVELOPE', 'PACKAGE', 'BRIEFCASE',
    'SUITCASE', 'CAR', 'BIKE', 'TRUCK', 'RADIO', 'TV', 'SCREEN', 'LAPTOP', 'DEVICE', 'CRYSTAL',
    'ORB', 'GEM', 'COIN', 'COINS', 'GOLD', 'MONEY', 'WEAPON', 'WEAPONS', 'BED', 'DESK',
})

# Descriptive ALL-CAPS phrases in action lines that are not people
ACTION_DESCRIPTION_PHRASES: FrozenSet[str] = frozenset({
    'DARK FIGURE', 'A DARK FIGURE', 'SHADOWY FIGURE', 'MYSTERIOUS FIGURE', 'HOODED FIGURE',
    'FIGURE', 'SHADOW', 'SHADOWS', 'SILHOUETTE', 'SOMEONE', 'SOMETHING', 'NOBODY', 'EVERYONE',
    'CROWD', 'VOICE', 'VOICES', 'THE CROWD', 'A VOICE', 'FOOTSTEPS', 'MUSIC', 'SUDDENLY',
    'LATER', 'MEANWHILE', 'CONTINUED', 'MORE', 'THE END',
})

HONORIFICS: FrozenSet[str] = frozenset({
    'DR', 'MR', 'MRS', 'MS', 'MISS', 'MX', 'SIR', 'DAME', 'LADY', 'LORD', 'KING', 'QUEEN',
    'PRINCE', 'PRINCESS', 'DUKE', 'DUCHESS', 'CAPTAIN', 'CAPT', 'COLONEL', 'GENERAL',
    'SERGEANT', 'SGT', 'LIEUTENANT', 'LT', 'DETECTIVE', 'DET', 'OFFICER', 'AGENT', 'PROFESSOR',
    'PROF', 'SISTER', 'BROTHER', 'FATHER', 'REVEREND', 'UNCLE', 'AUNT', 'GRANDMA', 'GRANDPA',
    'MADAME', 'MONSIEUR', 'SENOR', 'SENORA',
})

# Title-case words that are not names even when frequent
COMMON_CAPITALIZED_WORDS: FrozenSet[str] = frozenset({
    'The', 'I', 'A', 'Mr', 'Mrs', 'Ms', 'Dr', 'Sir',
    'An', 'And', 'But', 'Or', 'If', 'Then', 'When', 'Where', 'Why', 'How', 'What', 'Who',
    'This', 'That', 'These', 'Those', 'He', 'She', 'It', 'We', 'They', 'You', 'His', 'Her',
    'Their', 'Its', 'Our', 'My', 'Your', 'There', 'Here', 'In', 'On', 'At', 'As', 'So', 'Not',
    'No', 'Yes', 'Oh', 'Well', 'After', 'Before', 'While', 'With', 'For', 'From', 'To', 'Of',
    'By', 'Into', 'Just', 'Now', 'Once', 'One', 'All', 'Some', 'Every', 'Each', 'Only', 'Still',
    'Even', 'Later', 'Meanwhile', 'Suddenly', 'Chapter', 'Part', 'Act', 'Book', 'Scene',
    'Monday', 'Tuesday', 'Wednesday', 'Thursday', 'Friday', 'Saturday', 'Sunday',
    'January', 'February', 'March', 'April', 'May', 'June', 'July', 'August', 'September',
    'October', 'November', 'December', 'God', 'Okay', 'Yeah', 'Please', 'Thank', 'Thanks',
})

DIALOGUE_VERBS: Tuple[str, ...] = (
    'said', 'asked', 'replied', 'whispered', 'shouted', 'answered', 'muttered', 'exclaimed',
    'cried', 'yelled', 'murmured', 'responded', 'snapped', 'called',
)

NEGATIVE_SENTIMENT_WORDS: FrozenSet[str] = frozenset({
    'against', 'enemy', 'evil', 'villain', 'foe', 'threat', 'threatens', 'threatened',
    'danger', 'dangerous', 'opponent', 'rival', 'smirk', 'smirks', 'smirking', 'sneer',
    'sneers', 'sneering', 'cruel', 'cruelly', 'wicked', 'menacing', 'menacingly', 'sinister',
    'scheming', 'schemes', 'betrays', 'betrayed', 'snarls', 'snarling', 'glares', 'glaring',
    'mocking', 'mocks', 'taunts', 'taunting',
})

DESCRIPTIVE_VERBS: Tuple[str, ...] = (
    'is', 'was', 'appears', 'appeared', 'looks', 'looked', 'seems', 'seemed', 'stands',
    'stood', 'sits', 'sat',
)

ACTION_VERBS: Tuple[str, ...] = (
    'wants', 'wanted', 'fights', 'fought', 'discovers', 'discovered', 'seeks', 'sought',
    'tries', 'tried', 'needs', 'needed', 'must', 'decides', 'decided', 'loves', 'hates',
    'fears', 'searches', 'protects', 'follows', 'followed', 'hunts', 'dreams', 'plans',
)

PRONOUNS: Tuple[str, ...] = ('he', 'she', 'they', 'him', 'her', 'them', 'his', 'hers', 'their')

# ---------------------------------------------------------------- locations

LOCATION_PREFIXES: Tuple[str, ...] = ('at', 'in', 'to', 'from', 'near', 'around', 'inside', 'outside')

LOCATION_INDICATORS: Tuple[str, ...] = (
    'street', 'avenue', 'road', 'lane', 'drive', 'boulevard', 'highway', 'park', 'building',
    'house', 'apartment', 'office', 'room', 'city', 'town', 'village', 'country', 'kingdom',
    'castle', 'palace', 'mountain', 'river', 'lake', 'ocean', 'sea', 'forest', 'desert', 'cafe',
    'restaurant', 'bar', 'pub', 'hotel', 'motel', 'school', 'university', 'college', 'hospital',
)

LOCATION_NAMING_NOUNS: Tuple[str, ...] = (
    'village', 'town', 'city', 'castle', 'house', 'building', 'forest', 'mountain', 'lake',
    'river', 'ocean', 'valley', 'kingdom', 'realm', 'land', 'country', 'room', 'hall', 'chamber',
    'planet',
)

LOCATION_TYPE_KEYWORDS: List[Tuple[str, Tuple[str, ...]]] = [
    ('planet', ('planet', 'moon', 'asteroid', 'galaxy', 'star system')),
    ('realm', ('realm', 'dimension', 'underworld', 'heaven', 'netherworld', 'plane')),
    ('city', ('city', 'town', 'village', 'suburb', 'neighborhood', 'metropolis', 'capital')),
    ('building', (
        'house', 'building', 'castle', 'office', 'apartment', 'room', 'hotel', 'motel', 'cafe',
        'restaurant', 'hospital', 'kitchen', 'bedroom', 'bathroom', 'hall', 'chamber', 'tower',
        'palace', 'school', 'church', 'temple', 'library', 'bar', 'pub', 'shop', 'store',
        'warehouse', 'barn', 'cabin', 'basement', 'attic', 'lab', 'prison', 'dungeon', 'station',
        'corridor', 'hallway', 'university', 'college',
    )),
    ('natural', (
        'mountain', 'forest', 'woods', 'river', 'lake', 'ocean', 'sea', 'desert', 'park', 'beach',
        'valley', 'hill', 'cave', 'cliff', 'meadow', 'field', 'swamp', 'island', 'clearing',
        'jungle', 'glade',
    )),
    ('country', ('country', 'nation', 'kingdom', 'empire', 'state', 'province', 'territory')),
]

# ---------------------------------------------------------------- items

OBJECT_INDICATORS: Tuple[str, ...] = (
    'holds', 'carries', 'picks up', 'puts down', 'takes', 'drops', 'finds', 'sees', 'looks at',
    'examines', 'opens', 'closes', 'wears', 'carrying', 'holding', 'grabs', 'wields',
)

OBJECT_TYPES: Tuple[str, ...] = (
    'sword', 'gun', 'knife', 'book', 'letter', 'key', 'map', 'phone', 'computer', 'necklace',
    'ring', 'amulet', 'crown', 'scepter', 'wand', 'staff', 'shield', 'armor', 'robe', 'cloak',
    'hat', 'mask', 'potion', 'scroll', 'artifact',
)

ITEM_TYPE_KEYWORDS: List[Tuple[str, Tuple[str, ...]]] = [
    ('weapon', ('sword', 'knife', 'gun', 'bow', 'arrow', 'axe', 'dagger', 'spear', 'weapon',
                'pistol', 'rifle', 'blade')),
    ('tool', ('tool', 'hammer', 'wrench', 'key', 'lock', 'rope', 'compass', 'shovel', 'lantern')),
    ('clothing', ('hat', 'robe', 'cloak', 'armor', 'dress', 'shirt', 'clothing', 'costume',
                  'coat', 'boots', 'mask')),
    ('magical', ('wand', 'staff', 'potion', 'magical', 'amulet', 'talisman', 'crystal', 'spell',
                 'enchanted', 'orb', 'rune')),
    ('technology', ('phone', 'computer', 'laptop', 'device', 'machine', 'robot', 'tech', 'radio',
                    'tablet', 'drone')),
    ('document', ('book', 'letter', 'map', 'scroll', 'manuscript', 'note', 'document', 'diary',
                  'journal', 'contract')),
]

# Words trimmed from the end of captured object phrases
TRAILING_STOPWORDS: FrozenSet[str] = frozenset({
    'and', 'or', 'but', 'from', 'to', 'with', 'in', 'on', 'at', 'of', 'for', 'into', 'then',
    'as', 'off', 'up', 'out', 'the', 'a', 'an', 'his', 'her', 'their', 'its', 'while', 'that',
})

# ---------------------------------------------------------------- events

TIME_MARKERS: Tuple[str, ...] = (
    'suddenly', 'later', 'meanwhile', 'after', 'before', 'during', 'when', 'next day',
    'that night', 'morning', 'afternoon', 'evening', 'midnight', 'yesterday', 'tomorrow',
    'last week', 'next month',
)

STRONG_ACTION_VERBS: Tuple[str, ...] = (
    'ATTACK', 'FIGHT', 'BATTLE', 'CONFRONT', 'REVEAL', 'DISCOVER', 'ESCAPE', 'ENTER', 'EXIT',
    'ARRIVE', 'LEAVE',
)

EMOTION_VERBS: Tuple[str, ...] = (
    'SCREAMS', 'CRIES', 'LAUGHS', 'YELLS', 'SHOUTS', 'WHISPERS', 'GASPS', 'SOBS',
)

TRANSITION_WORDS: Tuple[str, ...] = ('FADE', 'CUT', 'DISSOLVE', 'TRANSITION', 'WIPE', 'SCENE')

# ---------------------------------------------------------------- plotlines

PLOTLINE_TYPE_KEYWORDS: List[Tuple[str, Tuple[str, ...]]] = [
    ('main', ('main plot', 'main story', 'act ', 'chapter ')),
    ('subplot', ('subplot', 'side', 'secondary')),
    ('character', ('character', ' arc', 'journey', 'development')),
    ('thematic', ('theme', 'motif', 'symbol')),
]

# ---------------------------------------------------------------- scenes

SCENE_BREAK_INDICATORS: Tuple[str, ...] = (
    'later', 'meanwhile', 'the next day', 'the next morning', 'the following day',
    'the following morning', 'that night', 'that evening', 'hours later', 'days later',
    'weeks later', 'elsewhere', 'the next night',
)

LOCATION_CHANGE_PHRASES: Tuple[str, ...] = (
    'arrived at', 'arrived in', 'entered', 'went to', 'went into', 'walked into', 'returned to',
    'back at', 'back in', 'headed to', 'headed for', 'reached', 'stepped into', 'made their way to',
    'made his way to', 'made her way to',
)

SHORT_PARAGRAPH_CHARS = 200

# ---------------------------------------------------------------- relationships

RELATIONSHIP_KEYWORDS: Dict[str, Tuple[str, ...]] = {
    'family': ('mother', 'father', 'brother', 'sister', 'son', 'daughter', 'family', 'cousin',
               'uncle', 'aunt', 'parent', 'sibling', 'grandmother', 'grandfather', 'mom', 'dad',
               'nephew', 'niece'),
    'friend': ('friend', 'ally', 'allies', 'companion', 'together', 'trust', 'helped', 'helps',
               'buddy', 'pal', 'loyal', 'comrade'),
    'enemy': ('enemy', 'enemies', 'fight', 'fought', 'attack', 'hate', 'hated', 'rival', 'betray',
              'against', 'threat', 'kill', 'battle', 'foe', 'revenge', 'chase', 'chased'),
    'romantic': ('love', 'loved', 'kiss', 'married', 'marry', 'husband', 'wife', 'lover',
                 'darling', 'romance', 'embrace', 'sweetheart', 'wedding', 'date'),
    'professional': ('boss', 'colleague', 'partner', 'employee', 'employer', 'work', 'client',
                     'commander', 'mentor', 'student', 'teacher', 'apprentice', 'assistant',
                     'officer', 'team'),
}
