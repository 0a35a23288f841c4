import nextcord

from guildmentions.config import MentionConfig
from guildmentions.entity_cache import InMemoryEntityCache
from guildmentions.mention_parser import MentionParser
from guildmentions.nextcord_cache import NextcordEntityCache
from guildmentions.open_telemetry import Telemetry


class Container:
    def __init__(self, config: MentionConfig | None = None, telemetry: Telemetry | None = None):
        # Load configuration from environment or use provided config
        self.config = config or MentionConfig()

        self.telemetry = telemetry or Telemetry(
            service_name=self.config.otel_service_name,
            endpoint=self.config.otel_exporter_otlp_endpoint
        )

        # Standalone registry until a live client is attached
        self.entity_cache = InMemoryEntityCache(
            user_cache_size=self.config.user_cache_size,
            emoji_cache_size=self.config.emoji_cache_size
        )

        self.mention_parser = MentionParser(
            cache=self.entity_cache,
            telemetry=self.telemetry,
            resolve_unknown_emoji=self.config.resolve_unknown_emoji
        )

    def attach_client(self, bot: nextcord.Client) -> MentionParser:
        """Resolve mentions against a live client's cache from now on."""
        self.entity_cache = NextcordEntityCache(bot)
        self.mention_parser = MentionParser(
            cache=self.entity_cache,
            telemetry=self.telemetry,
            resolve_unknown_emoji=self.config.resolve_unknown_emoji
        )
        return self.mention_parser
