"""LLM prompt templates for optional story enrichment."""
from typing import List


def enrichment_prompt(text: str, known_characters: List[str], known_locations: List[str]) -> str:
    """Generate prompt asking for characters and locations the heuristics missed.

    Args:
        text: Story text (already truncated to the configured limit)
        known_characters: Character names found by the heuristic extractors
        known_locations: Location names found by the heuristic extractors

    Returns:
        Formatted prompt string
    """
    characters = ', '.join(known_characters) or '(none)'
    locations = ', '.join(known_locations) or '(none)'

    return f"""You are helping catalogue the characters and locations of a story.

An automatic extractor has already found these:
- Characters: {characters}
- Locations: {locations}

Read the story below and list any NAMED characters or NAMED locations it missed.
Only include names that actually appear in the text. Do not repeat names from the lists above.

For each character provide:
1. **name**: The name as written in the text
2. **role**: One of "protagonist", "antagonist", "supporting", "background"
3. **description**: One sentence describing the character

For each location provide:
1. **name**: The name as written in the text
2. **location_type**: One of "city", "building", "natural", "country", "realm", "planet", "other"
3. **description**: One sentence describing the place

Return the result as a JSON object matching this structure:
```json
{{
  "characters": [
    {{"name": "Name", "role": "supporting", "description": "..."}}
  ],
  "locations": [
    {{"name": "Place", "location_type": "building", "description": "..."}}
  ]
}}
```

STORY TEXT:

{text}

Return ONLY the JSON object, no additional text."""
