import logging
import re
import threading
from dataclasses import dataclass
from typing import Any, Callable, Optional

from guildmentions.entities import CustomEmoji, GuildChannel, Member, Role, User
from guildmentions.mention_type import MentionType
from guildmentions.resolvers import MentionResolvers

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class _Extraction:
    """Resolved entities in source order with the offset of each one's first match."""
    entities: tuple
    offsets: dict


class _LazyList:
    """Compute-once cell; concurrent callers wait for the first computation."""

    UNCOMPUTED = "uncomputed"
    COMPUTING = "computing"
    READY = "ready"

    def __init__(self, compute: Callable[[], _Extraction]):
        self._compute = compute
        self._lock = threading.Lock()
        self._state = self.UNCOMPUTED
        self._value: Optional[_Extraction] = None

    def get(self) -> _Extraction:
        if self._state == self.READY:
            return self._value
        with self._lock:
            if self._state != self.READY:
                self._state = self.COMPUTING
                try:
                    self._value = self._compute()
                except BaseException:
                    self._state = self.UNCOMPUTED
                    raise
                self._state = self.READY
        return self._value


_EMPTY = _Extraction(entities=(), offsets={})


class MessageMentions:
    """
    Mentions found in one message body, resolved against cached entity state.

    Each distinct list (users, members, roles, channels, emotes) is extracted
    lazily and at most once per instance. The *_bag variants rescan the
    content on every call and keep repeated occurrences.
    """

    def __init__(self, content: str, resolvers: MentionResolvers, mentions_everyone: bool, telemetry):
        self.content = content
        self.resolvers = resolvers
        self.telemetry = telemetry
        self._mentions_everyone = mentions_everyone

        self._users = _LazyList(lambda: self._extract(MentionType.USER, resolvers.match_user))
        self._members = _LazyList(lambda: self._extract(MentionType.USER, resolvers.match_member))
        self._roles = _LazyList(lambda: self._extract(MentionType.ROLE, resolvers.match_role))
        self._channels = _LazyList(lambda: self._extract(MentionType.CHANNEL, resolvers.match_channel))
        self._emotes = _LazyList(lambda: self._extract(MentionType.EMOTE, resolvers.match_emote))

    @property
    def guild_id(self) -> Optional[int]:
        return self.resolvers.guild_id

    def mentions_everyone(self) -> bool:
        """Whether the message was allowed to mention @everyone/@here."""
        return self._mentions_everyone

    # Distinct, memoized lists

    def get_users(self) -> tuple[User, ...]:
        return self._users.get().entities

    def get_members(self) -> tuple[Member, ...]:
        if not self.resolvers.has_guild:
            return ()
        return self._members.get().entities

    def get_roles(self) -> tuple[Role, ...]:
        if not self.resolvers.has_guild:
            return ()
        return self._roles.get().entities

    def get_channels(self) -> tuple[GuildChannel, ...]:
        return self._channels.get().entities

    def get_emotes(self) -> tuple[CustomEmoji, ...]:
        return self._emotes.get().entities

    # Bags: every occurrence, recomputed per call

    def get_users_bag(self) -> list[User]:
        return list(self._extract(MentionType.USER, self.resolvers.match_user, distinct=False).entities)

    def get_members_bag(self) -> list[Member]:
        if not self.resolvers.has_guild:
            return []
        return list(self._extract(MentionType.USER, self.resolvers.match_member, distinct=False).entities)

    def get_roles_bag(self) -> list[Role]:
        if not self.resolvers.has_guild:
            return []
        return list(self._extract(MentionType.ROLE, self.resolvers.match_role, distinct=False).entities)

    def get_channels_bag(self) -> list[GuildChannel]:
        return list(self._extract(MentionType.CHANNEL, self.resolvers.match_channel, distinct=False).entities)

    def get_emotes_bag(self) -> list[CustomEmoji]:
        return list(self._extract(MentionType.EMOTE, self.resolvers.match_emote, distinct=False).entities)

    # Aggregation and membership

    def get_mentions(self, *kinds: MentionType) -> tuple[Any, ...]:
        """
        All mentioned entities of the given kinds, deduplicated and ordered by
        where they first appear in the content.

        No kinds means every kind. EVERYONE and HERE contribute nothing.
        A member replaces the user with the same id.
        """
        kinds = self._check_kinds(kinds) or tuple(MentionType)

        # Keyed by kind as well as id: a role and a channel may share an id
        mentions: dict[tuple[MentionType, int], Any] = {}
        offsets: dict[Any, int] = {}
        for kind in dict.fromkeys(kinds):
            for extraction in self._extractions_for(kind):
                for entity in extraction.entities:
                    mentions[(kind, entity.id)] = entity
                    offsets.setdefault(entity, extraction.offsets[entity])

        return tuple(sorted(mentions.values(), key=lambda entity: offsets[entity]))

    def is_mentioned(self, entity, *kinds: MentionType) -> bool:
        """
        Whether the entity is referenced by this message through any of the
        given kinds (all kinds when none are given).

        Members count as mentioned through their user or any of their roles,
        and in a guild a user counts as mentioned through its member's roles.
        A role counts as mentioned when a mentioned member holds it.
        """
        if entity is None:
            raise ValueError("Mentioned entity may not be None")
        kinds = self._check_kinds(kinds) or tuple(MentionType)

        is_user_entity = isinstance(entity, (User, Member))
        for kind in kinds:
            if kind.is_mass:
                if is_user_entity and self._is_mass(kind):
                    return True
            elif kind is MentionType.USER:
                if self._is_user_mentioned(entity):
                    return True
            elif kind is MentionType.ROLE:
                if self._is_role_mentioned(entity):
                    return True
            elif kind is MentionType.CHANNEL:
                if isinstance(entity, GuildChannel) and entity.is_text_based and entity in self.get_channels():
                    return True
            elif kind is MentionType.EMOTE:
                if isinstance(entity, CustomEmoji) and entity in self.get_emotes():
                    return True
        return False

    # Internals

    def _extract(self, kind: MentionType, resolver: Callable[[re.Match], Any], distinct: bool = True) -> _Extraction:
        with self.telemetry.create_span("mentions.extract", attributes={"mention_type": kind.name}) as span:
            entities = []
            offsets = {}
            matches = dropped = 0
            for match in kind.pattern.finditer(self.content):
                matches += 1
                try:
                    entity = resolver(match)
                except ValueError:
                    logger.debug(f"Skipping malformed {kind.name} mention {match.group(0)!r}")
                    self.telemetry.track_mention_resolution("malformed", kind.name)
                    dropped += 1
                    continue
                if entity is None:
                    logger.debug(f"No cached entity for {kind.name} mention {match.group(0)!r}")
                    self.telemetry.track_mention_resolution("miss", kind.name)
                    dropped += 1
                    continue
                if entity in offsets:
                    if distinct:
                        continue
                else:
                    offsets[entity] = match.start()
                entities.append(entity)

            span.set_attribute("matches", matches)
            span.set_attribute("resolved", len(entities))
            span.set_attribute("dropped", dropped)
            return _Extraction(entities=tuple(entities), offsets=offsets)

    def _extractions_for(self, kind: MentionType) -> list[_Extraction]:
        if kind is MentionType.USER:
            # Members last so they take over their user's slot
            members = self._members.get() if self.resolvers.has_guild else _EMPTY
            return [self._users.get(), members]
        if kind is MentionType.ROLE:
            return [self._roles.get()] if self.resolvers.has_guild else []
        if kind is MentionType.CHANNEL:
            return [self._channels.get()]
        if kind is MentionType.EMOTE:
            return [self._emotes.get()]
        return []

    def _is_mass(self, kind: MentionType) -> bool:
        return self._mentions_everyone and kind.token in self.content

    def _is_user_mentioned(self, entity) -> bool:
        if isinstance(entity, User):
            return entity in self.get_users()
        if isinstance(entity, Member):
            return entity.user in self.get_users()
        return False

    def _is_role_mentioned(self, entity) -> bool:
        if isinstance(entity, Role):
            # Also reached through any mentioned member holding the role
            return entity in self.get_roles() or any(entity in m.roles for m in self.get_members())
        if isinstance(entity, Member):
            return not set(entity.roles).isdisjoint(self.get_roles())
        if isinstance(entity, User) and self.resolvers.has_guild:
            member = self.resolvers.member_of(entity)
            return member is not None and not set(member.roles).isdisjoint(self.get_roles())
        return False

    @staticmethod
    def _check_kinds(kinds: tuple) -> tuple:
        for kind in kinds:
            if kind is None:
                raise ValueError("Mention types may not be None")
            if not isinstance(kind, MentionType):
                raise ValueError(f"Not a mention type: {kind!r}")
        return kinds
