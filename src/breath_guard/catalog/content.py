"""Integration phrases and post-session micro actions."""

from __future__ import annotations

from breath_guard.models import MicroAction, TimeOfDay

INTEGRATION_TEXTS: tuple[str, ...] = (
    "Stay where you are. Feel your body.",
    "Nothing to do. Just be.",
    "Let your breathing be natural.",
    "Feel your feet against the floor.",
    "You are here. Right now.",
)

# Served verbatim, in this order, to overstimulated users.
GROUNDING_SEQUENCE: tuple[str, ...] = (
    "Feel your feet against the floor.",
    "You are here. Right now.",
    "Let your body land.",
)

MICRO_ACTIONS: tuple[MicroAction, ...] = (
    MicroAction(id="water", text="Drink a glass of water"),
    MicroAction(id="walk", text="Take a short walk"),
    MicroAction(id="journal", text="Write one sentence about how you feel"),
    MicroAction(id="sleep", text="Get ready for sleep", time_of_day=TimeOfDay.EVENING),
    MicroAction(id="stretch", text="Have a stretch", time_of_day=TimeOfDay.MORNING),
)
