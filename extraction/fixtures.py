"""Sample character overrides for the bundled demo story.

Nothing in the pipeline reads this module. Pass ``DEMO_CHARACTER_OVERRIDES``
explicitly (or ``--demo-overrides`` on the CLI) to use it.
"""
from extraction.profiles import CharacterOverride

DEMO_CHARACTER_OVERRIDES = {
    "Rufus": CharacterOverride(
        role="protagonist",
        logline="A loyal wanderer who must protect the people he loves from a jealous rival.",
    ),
    "Stupus": CharacterOverride(
        role="antagonist",
        logline="A scheming rival determined to take everything Rufus holds dear.",
    ),
    "Alyssa": CharacterOverride(
        role="supporting",
        logline="The heart of the forest village, caught between two rivals.",
    ),
}
