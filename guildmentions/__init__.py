"""Mention parsing and resolution for Discord message content."""

from guildmentions.entities import (
    ChannelType,
    CustomEmoji,
    GuildChannel,
    Member,
    Role,
    ThreadChannel,
    UnicodeEmoji,
    User,
)
from guildmentions.entity_cache import EntityCache, InMemoryEntityCache
from guildmentions.mention_parser import MentionParser
from guildmentions.mention_type import MentionType
from guildmentions.mentions import MessageMentions
from guildmentions.resolvers import MentionResolvers, guild_resolvers, private_resolvers

__all__ = [
    "ChannelType",
    "CustomEmoji",
    "EntityCache",
    "GuildChannel",
    "InMemoryEntityCache",
    "Member",
    "MentionParser",
    "MentionResolvers",
    "MentionType",
    "MessageMentions",
    "Role",
    "ThreadChannel",
    "UnicodeEmoji",
    "User",
    "guild_resolvers",
    "private_resolvers",
]
