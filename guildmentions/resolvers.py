"""
Per-context resolution strategies.

A MentionResolvers bundle tells the engine how to turn a regex match into an
entity. Guild messages resolve against the guild's members, roles and
channels; private messages only know about users, emoji and channels that are
already cached.
"""

import re
from dataclasses import dataclass
from typing import Callable, Optional

from guildmentions.entities import CustomEmoji, GuildChannel, Member, Role, User
from guildmentions.entity_cache import EntityCache
from guildmentions.mention_type import MentionType
from guildmentions.utils import parse_snowflake


@dataclass(frozen=True)
class MentionResolvers:
    match_user: Callable[[re.Match], Optional[User]]
    match_member: Callable[[re.Match], Optional[Member]]
    match_role: Callable[[re.Match], Optional[Role]]
    match_channel: Callable[[re.Match], Optional[GuildChannel]]
    match_emote: Callable[[re.Match], Optional[CustomEmoji]]
    member_of: Callable[[User], Optional[Member]]
    guild_id: Optional[int] = None

    @property
    def has_guild(self) -> bool:
        return self.guild_id is not None


def match_id(match: re.Match, mention_type: MentionType) -> int:
    """Snowflake captured by a match; raises ValueError when it is malformed."""
    return parse_snowflake(match.group(mention_type.id_group))


def _none(_) -> None:
    return None


def _emote_matcher(cache: EntityCache, resolve_unknown_emoji: bool) -> Callable[[re.Match], Optional[CustomEmoji]]:
    def match_emote(match: re.Match) -> Optional[CustomEmoji]:
        emoji_id = match_id(match, MentionType.EMOTE)
        emoji = cache.find_custom_emoji(emoji_id)
        if emoji is None and resolve_unknown_emoji:
            # Detached emoji from another guild, known only by what the text carries
            emoji = CustomEmoji(id=emoji_id, name=match.group(2), animated=match.group(1) is not None)
        return emoji

    return match_emote


def guild_resolvers(cache: EntityCache, guild_id: int, resolve_unknown_emoji: bool = False) -> MentionResolvers:
    """Resolvers for a message sent in a guild channel."""

    def member_of(user: User) -> Optional[Member]:
        return cache.find_member(guild_id, user.id)

    return MentionResolvers(
        match_user=lambda m: cache.find_user(match_id(m, MentionType.USER)),
        match_member=lambda m: cache.find_member(guild_id, match_id(m, MentionType.USER)),
        match_role=lambda m: cache.find_role(guild_id, match_id(m, MentionType.ROLE)),
        match_channel=lambda m: cache.find_channel(guild_id, match_id(m, MentionType.CHANNEL)),
        match_emote=_emote_matcher(cache, resolve_unknown_emoji),
        member_of=member_of,
        guild_id=guild_id,
    )


def private_resolvers(cache: EntityCache, resolve_unknown_emoji: bool = False) -> MentionResolvers:
    """Resolvers for a direct message; members and roles never resolve."""
    return MentionResolvers(
        match_user=lambda m: cache.find_user(match_id(m, MentionType.USER)),
        match_member=_none,
        match_role=_none,
        match_channel=lambda m: cache.find_channel(None, match_id(m, MentionType.CHANNEL)),
        match_emote=_emote_matcher(cache, resolve_unknown_emoji),
        member_of=_none,
    )
