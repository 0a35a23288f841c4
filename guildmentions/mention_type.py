import re
from enum import Enum


class MentionType(Enum):
    """Kinds of mention that can appear in message content, each with the pattern that finds it."""

    USER = (r"<@!?(\d+)>", 1)
    ROLE = (r"<@&(\d+)>", 1)
    CHANNEL = (r"<#(\d+)>", 1)
    EMOTE = (r"<(a)?:([a-zA-Z0-9_]+):(\d+)>", 3)
    EVERYONE = (r"@everyone", None)
    HERE = (r"@here", None)

    def __init__(self, regex: str, id_group: int | None):
        self.pattern = re.compile(regex)
        self.id_group = id_group

    @property
    def is_mass(self) -> bool:
        return self.id_group is None

    @property
    def token(self) -> str | None:
        """Literal text of a mass mention, None for the other kinds."""
        return self.pattern.pattern if self.is_mass else None
