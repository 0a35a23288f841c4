import unittest
from unittest.mock import Mock

import nextcord

from guildmentions.config import MentionConfig
from guildmentions.container import Container
from guildmentions.entities import Member, Role, User
from guildmentions.entity_cache import InMemoryEntityCache
from guildmentions.mention_parser import MentionParser
from guildmentions.mention_type import MentionType
from guildmentions.nextcord_cache import NextcordEntityCache
from tests.null_telemetry import NullTelemetry


class TestMentionParser(unittest.TestCase):

    def setUp(self):
        self.telemetry = NullTelemetry()
        self.cache = InMemoryEntityCache()
        self.pauli = User(id=190019580, name="Pauli")
        self.exclusion = Role(id=77, guild_id=12345, name="exclusion")
        self.cache.add_member(Member(user=self.pauli, guild_id=12345, roles=(self.exclusion,)))
        self.cache.add_role(self.exclusion)
        self.parser = MentionParser(self.cache, self.telemetry)

    def test_parse_guild_message(self):
        mentions = self.parser.parse("<@190019580> <@&77>", guild_id=12345)
        self.assertEqual(mentions.guild_id, 12345)
        self.assertEqual(mentions.get_roles(), (self.exclusion,))
        self.assertEqual(len(mentions.get_members()), 1)

        name, attributes = self.telemetry.spans[0]
        self.assertEqual(name, "parse_mentions")
        self.assertEqual(attributes["guild_id"], 12345)
        self.assertEqual(attributes["content_length"], 19)

    def test_parse_direct_message(self):
        mentions = self.parser.parse("<@190019580> <@&77>")
        self.assertIsNone(mentions.guild_id)
        self.assertEqual(mentions.get_users(), (self.pauli,))
        self.assertEqual(mentions.get_roles(), ())
        self.assertEqual(self.telemetry.spans[0][1]["guild_id"], "dm")

    def test_parse_is_lazy(self):
        self.parser.parse("<@190019580>", guild_id=12345)
        self.assertEqual([name for name, _ in self.telemetry.spans], ["parse_mentions"])

    def test_none_content_rejected(self):
        with self.assertRaises(ValueError):
            self.parser.parse(None)

    def test_parse_message(self):
        message = Mock(spec=nextcord.Message)
        message.content = "@here <@190019580>"
        message.guild = Mock(id=12345)
        message.mention_everyone = True

        mentions = self.parser.parse_message(message)
        self.assertTrue(mentions.mentions_everyone())
        self.assertTrue(mentions.is_mentioned(self.pauli, MentionType.HERE))
        self.assertFalse(mentions.is_mentioned(self.pauli, MentionType.ROLE))

    def test_parse_dm_message(self):
        message = Mock(spec=nextcord.Message)
        message.content = None
        message.guild = None
        message.mention_everyone = False

        mentions = self.parser.parse_message(message)
        self.assertIsNone(mentions.guild_id)
        self.assertEqual(mentions.content, "")


class TestContainer(unittest.TestCase):

    def setUp(self):
        self.config = MentionConfig(_env_file=None, user_cache_size=10, resolve_unknown_emoji=True)
        self.container = Container(config=self.config, telemetry=NullTelemetry())

    def test_wiring(self):
        self.assertIsInstance(self.container.entity_cache, InMemoryEntityCache)
        self.assertTrue(self.container.mention_parser.resolve_unknown_emoji)
        mentions = self.container.mention_parser.parse("<:wave:8>")
        self.assertEqual(mentions.get_emotes()[0].name, "wave")

    def test_attach_client(self):
        bot = Mock(spec=nextcord.Client)
        bot.get_user.return_value = None
        parser = self.container.attach_client(bot)
        self.assertIs(parser, self.container.mention_parser)
        self.assertIsInstance(self.container.entity_cache, NextcordEntityCache)
        self.assertEqual(parser.parse("<@1>").get_users(), ())
        bot.get_user.assert_called_once_with(1)


if __name__ == '__main__':
    unittest.main()
