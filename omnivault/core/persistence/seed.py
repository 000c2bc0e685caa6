"""Default note collection for a fresh or unreadable vault."""

from omnivault.models.note import Note
from omnivault.utils.id_generator import now_ms

HOUR_MS = 1000 * 60 * 60


def initial_notes() -> list[Note]:
    """
    Build the seed collection.

    Timestamps are relative to the call time, most recent first.
    """
    now = now_ms()
    return [
        Note(
            id="1",
            title="Project Phoenix Overview",
            content=(
                "An initiative to build a sustainable habitat on Mars. Research covers "
                "atmospheric conversion, radiation shielding, and soil fertilization."
            ),
            tags=["space", "mars", "habitat"],
            updated_at=now - HOUR_MS * 2,
        ),
        Note(
            id="2",
            title="Character: Elias Thorne",
            content=(
                "The protagonist of the story. Age 32. Former orbital mechanic. Known for a "
                "quick temper and high technical aptitude. Fought the Ion Stalkers in Chapter 3."
            ),
            tags=["novel", "character"],
            updated_at=now - HOUR_MS * 24,
        ),
        Note(
            id="3",
            title="Atmospheric Conversion Notes",
            content=(
                "Focusing on CO2 to O2 conversion using cyanobacteria. Challenges: "
                "temperature control and sunlight availability."
            ),
            tags=["science", "mars"],
            updated_at=now - HOUR_MS * 48,
        ),
        Note(
            id="4",
            title="The Ion Stalkers",
            content=(
                "Bioluminescent predators native to the asteroid belts. Highly sensitive to "
                "heat. Defeated by Elias using an EMP pulse."
            ),
            tags=["novel", "lore", "monsters"],
            updated_at=now - HOUR_MS * 72,
        ),
    ]
