from dataclasses import dataclass, field
from enum import Enum


class ChannelType(Enum):
    TEXT = 0
    PRIVATE = 1
    VOICE = 2
    GROUP = 3
    CATEGORY = 4
    NEWS = 5
    NEWS_THREAD = 10
    PUBLIC_THREAD = 11
    PRIVATE_THREAD = 12
    STAGE = 13
    FORUM = 15
    UNKNOWN = -1

    @classmethod
    def from_id(cls, value: int) -> 'ChannelType':
        try:
            return next(t for t in cls if t.value == value)
        except StopIteration:
            return cls.UNKNOWN

    @property
    def is_thread(self) -> bool:
        return self in (ChannelType.NEWS_THREAD, ChannelType.PUBLIC_THREAD, ChannelType.PRIVATE_THREAD)

    @property
    def is_message(self) -> bool:
        """Whether messages can be sent in channels of this type."""
        return self in (
            ChannelType.TEXT, ChannelType.PRIVATE, ChannelType.VOICE, ChannelType.GROUP,
            ChannelType.NEWS, ChannelType.STAGE,
        ) or self.is_thread


@dataclass(frozen=True)
class User:
    """Global user identity."""
    id: int
    name: str = field(default="", compare=False)
    bot: bool = field(default=False, compare=False)

    @property
    def mention(self) -> str:
        return f"<@{self.id}>"


@dataclass(frozen=True)
class Role:
    id: int
    guild_id: int = field(default=0, compare=False)
    name: str = field(default="", compare=False)
    position: int = field(default=0, compare=False)

    @property
    def mention(self) -> str:
        return f"<@&{self.id}>"


@dataclass(frozen=True)
class Member:
    """A user's presence within one guild, carrying the roles held there."""
    user: User
    guild_id: int
    roles: tuple[Role, ...] = field(default=(), compare=False)
    nick: str | None = field(default=None, compare=False)

    @property
    def id(self) -> int:
        return self.user.id

    @property
    def display_name(self) -> str:
        return self.nick or self.user.name

    @property
    def mention(self) -> str:
        return self.user.mention


@dataclass(frozen=True)
class GuildChannel:
    id: int
    guild_id: int = field(default=0, compare=False)
    name: str = field(default="", compare=False)
    type: ChannelType = field(default=ChannelType.TEXT, compare=False)
    parent_id: int | None = field(default=None, compare=False)

    @property
    def is_text_based(self) -> bool:
        return self.type.is_message

    @property
    def mention(self) -> str:
        return f"<#{self.id}>"


@dataclass(frozen=True)
class ThreadChannel(GuildChannel):
    """Thread inside a text, news or forum channel; parent_id points at that channel."""
    type: ChannelType = field(default=ChannelType.PUBLIC_THREAD, compare=False)
    owner_id: int | None = field(default=None, compare=False)
    locked: bool = field(default=False, compare=False)
    # Platform caps both counts at 50
    message_count: int = field(default=0, compare=False)
    member_count: int = field(default=0, compare=False)

    @property
    def is_public(self) -> bool:
        return self.type in (ChannelType.PUBLIC_THREAD, ChannelType.NEWS_THREAD)


@dataclass(frozen=True)
class CustomEmoji:
    """Guild emoji backed by an uploaded image and referenced by id."""
    id: int
    name: str = field(default="", compare=False)
    animated: bool = field(default=False, compare=False)
    guild_id: int | None = field(default=None, compare=False)

    @property
    def mention(self) -> str:
        return f"<{'a' if self.animated else ''}:{self.name}:{self.id}>"


@dataclass(frozen=True)
class UnicodeEmoji:
    """Standard emoji identified by its glyph rather than an id."""
    name: str

    @classmethod
    def from_codepoints(cls, codepoints: str) -> 'UnicodeEmoji':
        """Build from text like 'U+1F44D' or 'U+1F468U+200DU+1F4BB'."""
        parts = [p for p in codepoints.upper().replace(" ", "").split("U+") if p]
        if not parts:
            raise ValueError(f"No codepoints in {codepoints!r}")
        return cls("".join(chr(int(p, 16)) for p in parts))

    @property
    def as_codepoints(self) -> str:
        return "".join(f"U+{ord(c):x}" for c in self.name)

    @property
    def mention(self) -> str:
        return self.name
