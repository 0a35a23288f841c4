import logging
import threading
from typing import Optional, Protocol

from cachetools import LRUCache

from guildmentions.entities import CustomEmoji, GuildChannel, Member, Role, User

logger = logging.getLogger(__name__)


class EntityCache(Protocol):
    """Read-only lookups the mention engine resolves ids against.

    Implementations return None for unknown ids and must not block on I/O.
    """

    def find_user(self, user_id: int) -> Optional[User]: ...

    def find_member(self, guild_id: int, user_id: int) -> Optional[Member]: ...

    def find_role(self, guild_id: int, role_id: int) -> Optional[Role]: ...

    def find_channel(self, guild_id: Optional[int], channel_id: int) -> Optional[GuildChannel]: ...

    def find_custom_emoji(self, emoji_id: int) -> Optional[CustomEmoji]: ...


class InMemoryEntityCache:
    """Process-local entity registry.

    Users and emoji live in bounded LRU caches; guild-scoped entities are kept
    per guild until the guild is removed.
    """

    def __init__(self, user_cache_size: int = 500, emoji_cache_size: int = 500):
        self._lock = threading.RLock()
        self._users = LRUCache(maxsize=user_cache_size)
        self._emoji = LRUCache(maxsize=emoji_cache_size)
        self._members: dict[int, dict[int, Member]] = {}
        self._roles: dict[int, dict[int, Role]] = {}
        self._channels: dict[int, dict[int, GuildChannel]] = {}

    def add_user(self, user: User) -> None:
        with self._lock:
            self._users[user.id] = user

    def add_member(self, member: Member) -> None:
        with self._lock:
            self._users[member.user.id] = member.user
            self._members.setdefault(member.guild_id, {})[member.id] = member

    def add_role(self, role: Role) -> None:
        with self._lock:
            self._roles.setdefault(role.guild_id, {})[role.id] = role

    def add_channel(self, channel: GuildChannel) -> None:
        with self._lock:
            self._channels.setdefault(channel.guild_id, {})[channel.id] = channel

    def add_custom_emoji(self, emoji: CustomEmoji) -> None:
        with self._lock:
            self._emoji[emoji.id] = emoji

    def remove_guild(self, guild_id: int) -> None:
        """Drop every member, role and channel cached for a guild."""
        with self._lock:
            self._members.pop(guild_id, None)
            self._roles.pop(guild_id, None)
            self._channels.pop(guild_id, None)
        logger.info(f"Removed cached entities for guild {guild_id}")

    def find_user(self, user_id: int) -> Optional[User]:
        with self._lock:
            return self._users.get(user_id)

    def find_member(self, guild_id: int, user_id: int) -> Optional[Member]:
        with self._lock:
            return self._members.get(guild_id, {}).get(user_id)

    def find_role(self, guild_id: int, role_id: int) -> Optional[Role]:
        with self._lock:
            return self._roles.get(guild_id, {}).get(role_id)

    def find_channel(self, guild_id: Optional[int], channel_id: int) -> Optional[GuildChannel]:
        with self._lock:
            if guild_id is not None:
                return self._channels.get(guild_id, {}).get(channel_id)
            # No guild context: any channel already cached
            for channels in self._channels.values():
                channel = channels.get(channel_id)
                if channel is not None:
                    return channel
            return None

    def find_custom_emoji(self, emoji_id: int) -> Optional[CustomEmoji]:
        with self._lock:
            return self._emoji.get(emoji_id)
