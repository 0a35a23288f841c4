import logging
from typing import Optional

import nextcord

from guildmentions.entities import ChannelType, CustomEmoji, GuildChannel, Member, Role, ThreadChannel, User

logger = logging.getLogger(__name__)


def to_user(user: nextcord.User | nextcord.Member) -> User:
    return User(id=user.id, name=user.name, bot=user.bot)


def to_role(role: nextcord.Role) -> Role:
    return Role(id=role.id, guild_id=role.guild.id, name=role.name, position=role.position)


def to_member(member: nextcord.Member) -> Member:
    return Member(
        user=to_user(member),
        guild_id=member.guild.id,
        roles=tuple(to_role(r) for r in member.roles),
        nick=member.nick,
    )


def to_channel(channel) -> GuildChannel:
    """Convert a nextcord guild channel or thread."""
    channel_type = ChannelType.from_id(channel.type.value)
    if isinstance(channel, nextcord.Thread):
        return ThreadChannel(
            id=channel.id,
            guild_id=channel.guild.id,
            name=channel.name,
            type=channel_type,
            parent_id=channel.parent_id,
            owner_id=channel.owner_id,
            locked=channel.locked,
            message_count=channel.message_count,
            member_count=channel.member_count,
        )
    return GuildChannel(
        id=channel.id,
        guild_id=channel.guild.id,
        name=channel.name,
        type=channel_type,
        parent_id=getattr(channel, "category_id", None),
    )


def to_custom_emoji(emoji: nextcord.Emoji) -> CustomEmoji:
    return CustomEmoji(id=emoji.id, name=emoji.name, animated=emoji.animated, guild_id=emoji.guild_id)


class NextcordEntityCache:
    """EntityCache backed by a nextcord client's in-memory state.

    Only the client's caches are consulted, never the API, so a lookup
    cannot block and an uncached entity simply resolves to None.
    """

    def __init__(self, bot: Optional[nextcord.Client] = None):
        self._bot = bot
        self._warned = False

    def set_bot_client(self, bot: nextcord.Client):
        """Sets the Discord client instance to fully enable the cache."""
        if self._bot is not None:
            logger.warning("Bot client is already set in NextcordEntityCache.")
            return
        self._bot = bot
        logger.info("NextcordEntityCache initialized with bot client.")

    def _client(self) -> Optional[nextcord.Client]:
        if self._bot is None and not self._warned:
            logger.error("NextcordEntityCache has not been initialized with the bot client.")
            self._warned = True
        return self._bot

    def _guild(self, guild_id: int) -> Optional[nextcord.Guild]:
        bot = self._client()
        if bot is None:
            return None
        guild = bot.get_guild(guild_id)
        if guild is None:
            logger.warning(f"Could not find guild with ID {guild_id}")
        return guild

    def find_user(self, user_id: int) -> Optional[User]:
        bot = self._client()
        user = bot.get_user(user_id) if bot else None
        return to_user(user) if user else None

    def find_member(self, guild_id: int, user_id: int) -> Optional[Member]:
        guild = self._guild(guild_id)
        member = guild.get_member(user_id) if guild else None
        return to_member(member) if member else None

    def find_role(self, guild_id: int, role_id: int) -> Optional[Role]:
        guild = self._guild(guild_id)
        role = guild.get_role(role_id) if guild else None
        return to_role(role) if role else None

    def find_channel(self, guild_id: Optional[int], channel_id: int) -> Optional[GuildChannel]:
        if guild_id is not None:
            guild = self._guild(guild_id)
            channel = guild.get_channel_or_thread(channel_id) if guild else None
        else:
            bot = self._client()
            channel = bot.get_channel(channel_id) if bot else None
        # Private and group DMs have no guild and are not mentionable
        if channel is None or getattr(channel, "guild", None) is None:
            return None
        return to_channel(channel)

    def find_custom_emoji(self, emoji_id: int) -> Optional[CustomEmoji]:
        bot = self._client()
        emoji = bot.get_emoji(emoji_id) if bot else None
        return to_custom_emoji(emoji) if emoji else None
