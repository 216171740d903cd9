"""Level model: XP to level conversion and the level table.

Level n requires floor(100 * n^1.7) cumulative XP (level 0 requires 0).
These values MUST match the frontend exactly:
  client/src/components/XPProgress.tsx, client/src/components/LevelBadge.tsx
"""

from __future__ import annotations

import math
from dataclasses import dataclass

MAX_LEVEL = 30


@dataclass(frozen=True)
class LevelInfo:
    level: int
    symbol: str
    label: str
    tagline: str
    xp_required: int


def calculate_xp_for_level(level: int) -> int:
    """Minimum cumulative XP needed to be at ``level``."""
    if level == 0:
        return 0
    return math.floor(100 * level**1.7)


def calculate_level(total_xp: int) -> int:
    """Largest level whose requirement is <= ``total_xp``. Not capped at MAX_LEVEL."""
    level = 0
    while calculate_xp_for_level(level + 1) <= total_xp:
        level += 1
    return level


def get_xp_for_next_level(current_level: int) -> int:
    return calculate_xp_for_level(current_level + 1)


# (symbol, label, tagline) for levels 0..30
_LEVEL_TEXT: tuple[tuple[str, str, str], ...] = (
    ("\U0001f9eb", "Curious Newcomer", "Welcome to the lab."),
    ("\U0001f52c", "Observer", "Zoom in — discovery starts here."),
    ("\U0001f4a7", "Experimenter", "You're testing the waters."),
    ("\U0001f9ea", "Tinkerer", "Mixing ideas and insights."),
    ("\U0001f525", "Initiator", "You've sparked your curiosity."),
    ("⚙️", "Active Researcher", "Getting results."),
    ("\U0001f97c", "Recognised Researcher", "Your presence is known."),
    ("\U0001f9ed", "Explorer", "New fields, new ideas."),
    ("\U0001f4a1", "Thinker", "Illuminating new directions."),
    ("\U0001f4ca", "Analyst", "Your insights are growing."),
    ("\U0001f9e0", "Collaborator", "Connecting through knowledge."),
    ("\U0001f9f0", "Innovator", "Building tools for others."),
    ("\U0001f9ec", "Contributor", "Adding your piece to the puzzle."),
    ("\U0001f4e1", "Connector", "Others are tuning in."),
    ("\U0001f30c", "Visionary", "Your impact reaches farther."),
    ("\U0001fa90", "Influencer", "You orbit ideas that matter."),
    ("\U0001f30d", "Community Builder", "Science without borders."),
    ("\U0001f578️", "Integrator", "Bringing research together."),
    ("\U0001f52d", "Observatory", "Guiding others through data."),
    ("\U0001f4ab", "Supernova", "Lighting up the field."),
    ("\U0001f9ec", "Mentor", "Helping others grow."),
    ("\U0001f9f1", "Founder", "Creating spaces for science."),
    ("⚛️", "Influencer", "At the core of discovery."),
    ("\U0001f4a5", "Pioneer", "Setting off new ideas."),
    ("\U0001f9ff", "Expert", "Bringing clarity."),
    ("\U0001f320", "Luminary", "Recognised for your brilliance."),
    ("\U0001fa9e", "Visionary Mentor", "Reflecting knowledge."),
    ("\U0001f30a", "Trendsetter", "Shaping the current."),
    ("\U0001f9d9", "Sage", "Wisdom through discovery."),
    ("\U0001f54a️", "Eternal Scholar", "Your research lives on."),
    ("♾️", "Timeless Innovator", "Endless curiosity, endless impact."),
)

LEVEL_DATA: tuple[LevelInfo, ...] = tuple(
    LevelInfo(
        level=level,
        symbol=symbol,
        label=label,
        tagline=tagline,
        xp_required=calculate_xp_for_level(level),
    )
    for level, (symbol, label, tagline) in enumerate(_LEVEL_TEXT)
)


def get_level_info(level: int) -> LevelInfo:
    """Table entry for ``level``; falls back to level 0 outside the table."""
    if 0 <= level < len(LEVEL_DATA):
        return LEVEL_DATA[level]
    return LEVEL_DATA[0]


def get_level_progress(total_xp: int, current_level: int) -> dict:
    """Progress toward the next level. Not clamped.

    At or beyond MAX_LEVEL there is no next table entry, so the span is
    zero and progress is reported as 1.
    """
    current_level_xp = calculate_xp_for_level(current_level)
    if current_level >= MAX_LEVEL:
        next_level_xp = current_level_xp
    else:
        next_level_xp = get_xp_for_next_level(current_level)

    xp_in_level = total_xp - current_level_xp
    xp_needed = next_level_xp - current_level_xp

    return {
        "current_level_xp": current_level_xp,
        "next_level_xp": next_level_xp,
        "progress": xp_in_level / xp_needed if xp_needed > 0 else 1.0,
    }
