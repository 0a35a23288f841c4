import logging
from typing import Optional

import nextcord
from opentelemetry.trace import SpanKind

from guildmentions.entity_cache import EntityCache
from guildmentions.mentions import MessageMentions
from guildmentions.open_telemetry import Telemetry
from guildmentions.resolvers import guild_resolvers, private_resolvers

logger = logging.getLogger(__name__)


class MentionParser:
    """Service that builds MessageMentions for message bodies against an entity cache."""

    def __init__(self, cache: EntityCache, telemetry: Telemetry, resolve_unknown_emoji: bool = False):
        self.cache = cache
        self.telemetry = telemetry
        self.resolve_unknown_emoji = resolve_unknown_emoji

    def parse(self, content: str, guild_id: Optional[int] = None, mentions_everyone: bool = False) -> MessageMentions:
        """
        Prepare mention lookups for a message body.

        Args:
            content: Raw message text.
            guild_id: Guild the message was sent in, None for direct messages.
            mentions_everyone: Whether the author was permitted to use @everyone/@here.

        Returns:
            A MessageMentions whose lists resolve lazily on first access.
        """
        if content is None:
            raise ValueError("Message content may not be None")

        with self.telemetry.create_span("parse_mentions", SpanKind.INTERNAL) as span:
            span.set_attribute("guild_id", guild_id if guild_id is not None else "dm")
            span.set_attribute("content_length", len(content))
            span.set_attribute("mentions_everyone", mentions_everyone)

            if guild_id is not None:
                resolvers = guild_resolvers(self.cache, guild_id, self.resolve_unknown_emoji)
            else:
                resolvers = private_resolvers(self.cache, self.resolve_unknown_emoji)

            self.telemetry.increment_parsed_counter(guild_id)
            return MessageMentions(content, resolvers, mentions_everyone, self.telemetry)

    def parse_message(self, message: nextcord.Message) -> MessageMentions:
        """Prepare mention lookups for a received nextcord message."""
        guild_id = message.guild.id if message.guild else None
        return self.parse(message.content or "", guild_id, bool(message.mention_everyone))
