"""Template synopsis built from the extracted entities."""
from typing import List

from extraction.models import Character, Event, Plotline

MAX_MAIN_CHARACTERS = 3


def _join_names(names: List[str]) -> str:
    if len(names) == 1:
        return names[0]
    return ', '.join(names[:-1]) + f" and {names[-1]}"


def generate_synopsis(characters: List[Character], plotlines: List[Plotline], events: List[Event]) -> str:
    """Compose a short summary.

    Args:
        characters: Final character list
        plotlines: Final plotline list
        events: Final event list

    Returns:
        The synopsis, or an empty string when there are no characters or no events
    """
    if not characters or not events:
        return ""

    main = [c.name for c in characters if c.role == "protagonist" or c.appearances > 10][:MAX_MAIN_CHARACTERS]
    if not main:
        main = [characters[0].name]

    parts = [f"This story follows {_join_names(main)}."]

    main_plot = next((p for p in plotlines if p.plotline_type == "main"), None)
    if main_plot and main_plot.description:
        description = main_plot.description.rstrip('.')
        parts.append(f"{description}.")

    if len(events) > 3:
        first = events[0].title.rstrip('.')
        middle = events[len(events) // 2].title.rstrip('.')
        last = events[-1].title.rstrip('.')
        parts.append(
            f"It begins with {first.lower()}, continues with {middle.lower()}, "
            f"and culminates in {last.lower()}."
        )

    return ' '.join(parts)
