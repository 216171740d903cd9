"""Static gamification catalog: badge definitions and gamified actions.

BADGE_DEFINITIONS is the source of truth for the ``badges`` table;
``seed_badges`` mirrors it into storage on startup. Callers identify badges
by trigger, never by name or database id.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType


class BadgeTier(str, Enum):
    COMMON = "Common"
    RARE = "Rare"
    EPIC = "Epic"
    LEGENDARY = "Legendary"


class BadgeTrigger(str, Enum):
    CREATE_ACCOUNT = "create_account"
    CONNECT_ORCID = "connect_orcid"
    COMPLETE_PROFILE = "complete_profile"
    FIRST_SAVE = "first_save"
    FIRST_LIKE = "first_like"
    CREATE_DISCUSSION = "create_discussion"
    FOLLOW_5_USERS = "follow_5_users"
    CREATE_READING_LIST = "create_reading_list"
    PAPER_CITED = "paper_cited"
    TAGGED_MENTOR = "tagged_mentor"
    REACH_1000_FOLLOWERS = "reach_1000_followers"
    SPOTLIGHT_FEATURE = "spotlight_feature"
    CONTRIBUTE_OPEN_SCIENCE = "contribute_open_science"
    REACH_LEVEL_30 = "reach_level_30"


@dataclass(frozen=True)
class BadgeDefinitionData:
    name: str
    trigger: BadgeTrigger
    points: int
    message: str
    tier: BadgeTier


BADGE_DEFINITIONS: tuple[BadgeDefinitionData, ...] = (
    BadgeDefinitionData("First Steps", BadgeTrigger.CREATE_ACCOUNT, 50, "Welcome to MyScience!", BadgeTier.COMMON),
    BadgeDefinitionData(
        "Identity Verified", BadgeTrigger.CONNECT_ORCID, 100, "Your research identity is live.", BadgeTier.RARE
    ),
    BadgeDefinitionData(
        "Profile Complete", BadgeTrigger.COMPLETE_PROFILE, 70, "You're ready to be discovered.", BadgeTier.COMMON
    ),
    BadgeDefinitionData(
        "First Save", BadgeTrigger.FIRST_SAVE, 30, "You've captured your first discovery.", BadgeTier.COMMON
    ),
    BadgeDefinitionData("First Like", BadgeTrigger.FIRST_LIKE, 10, "Science deserves appreciation.", BadgeTier.COMMON),
    BadgeDefinitionData(
        "Community Starter", BadgeTrigger.CREATE_DISCUSSION, 25, "You've sparked conversation.", BadgeTier.RARE
    ),
    BadgeDefinitionData(
        "Connector", BadgeTrigger.FOLLOW_5_USERS, 20, "Connections create discovery.", BadgeTier.COMMON
    ),
    BadgeDefinitionData(
        "Curator", BadgeTrigger.CREATE_READING_LIST, 15, "Sharing your taste in science.", BadgeTier.RARE
    ),
    BadgeDefinitionData("Cited!", BadgeTrigger.PAPER_CITED, 50, "Others are building on your ideas.", BadgeTier.EPIC),
    BadgeDefinitionData("Mentor", BadgeTrigger.TAGGED_MENTOR, 150, "Helping others grow in science.", BadgeTier.EPIC),
    BadgeDefinitionData(
        "Influencer", BadgeTrigger.REACH_1000_FOLLOWERS, 200, "Your impact echoes.", BadgeTier.LEGENDARY
    ),
    BadgeDefinitionData(
        "Luminary", BadgeTrigger.SPOTLIGHT_FEATURE, 100, "Shining in your field.", BadgeTier.LEGENDARY
    ),
    BadgeDefinitionData(
        "Open Scientist", BadgeTrigger.CONTRIBUTE_OPEN_SCIENCE, 250, "Advancing open science.", BadgeTier.EPIC
    ),
    BadgeDefinitionData(
        "Immortal", BadgeTrigger.REACH_LEVEL_30, 0, "Endless curiosity, timeless science.", BadgeTier.LEGENDARY
    ),
)

# Badges granted when a level-up within one call lands at or above the level.
LEVEL_BADGE_TRIGGERS: MappingProxyType[int, BadgeTrigger] = MappingProxyType({
    30: BadgeTrigger.REACH_LEVEL_30,
})


# ---------------------------------------------------------------------------
# Gamified actions
# ---------------------------------------------------------------------------


class GamificationActionType(str, Enum):
    DAILY_LOGIN = "daily_login"
    VIEW_ARTICLE = "view_article"
    SAVE_ARTICLE = "save_article"
    LIKE_ARTICLE = "like_article"
    FOLLOW_USER = "follow_user"
    CREATE_FORUM_POST = "create_forum_post"
    CREATE_COMMENT = "create_comment"
    CREATE_DISCUSSION_SPACE = "create_discussion_space"
    CREATE_READING_LIST = "create_reading_list"


@dataclass(frozen=True)
class ActionDefinition:
    base_xp: int
    daily_cap: int
    badge_trigger: BadgeTrigger | None = None


ACTION_DEFINITIONS: MappingProxyType[GamificationActionType, ActionDefinition] = MappingProxyType({
    GamificationActionType.DAILY_LOGIN: ActionDefinition(base_xp=10, daily_cap=1),
    GamificationActionType.VIEW_ARTICLE: ActionDefinition(base_xp=1, daily_cap=25),
    GamificationActionType.SAVE_ARTICLE: ActionDefinition(
        base_xp=5, daily_cap=20, badge_trigger=BadgeTrigger.FIRST_SAVE
    ),
    GamificationActionType.LIKE_ARTICLE: ActionDefinition(
        base_xp=2, daily_cap=30, badge_trigger=BadgeTrigger.FIRST_LIKE
    ),
    GamificationActionType.FOLLOW_USER: ActionDefinition(
        base_xp=5, daily_cap=10, badge_trigger=BadgeTrigger.FOLLOW_5_USERS
    ),
    GamificationActionType.CREATE_FORUM_POST: ActionDefinition(
        base_xp=20, daily_cap=5, badge_trigger=BadgeTrigger.CREATE_DISCUSSION
    ),
    GamificationActionType.CREATE_COMMENT: ActionDefinition(base_xp=15, daily_cap=10),
    GamificationActionType.CREATE_DISCUSSION_SPACE: ActionDefinition(
        base_xp=25, daily_cap=2, badge_trigger=BadgeTrigger.CREATE_DISCUSSION
    ),
    GamificationActionType.CREATE_READING_LIST: ActionDefinition(
        base_xp=10, daily_cap=3, badge_trigger=BadgeTrigger.CREATE_READING_LIST
    ),
})

_undefined = set(GamificationActionType) - set(ACTION_DEFINITIONS)
if _undefined:
    msg = f"Actions without a definition: {sorted(a.value for a in _undefined)}"
    raise RuntimeError(msg)
