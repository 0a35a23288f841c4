import unittest
from unittest.mock import Mock

import nextcord

from guildmentions.entities import ChannelType, CustomEmoji, GuildChannel, Member, Role, ThreadChannel, User
from guildmentions.nextcord_cache import NextcordEntityCache

GUILD_ID = 19001930


class TestNextcordEntityCache(unittest.TestCase):

    def setUp(self):
        self.guild = Mock(spec=nextcord.Guild)
        self.guild.id = GUILD_ID

        self.role = Mock(spec=nextcord.Role)
        self.role.id = 5
        self.role.name = "physicists"
        self.role.position = 2
        self.role.guild = self.guild

        self.user = Mock(spec=nextcord.User)
        self.user.id = 185819470
        self.user.name = "Planck"
        self.user.bot = False

        self.member = Mock(spec=nextcord.Member)
        self.member.id = 185819470
        self.member.name = "Planck"
        self.member.bot = False
        self.member.nick = "Max"
        self.member.guild = self.guild
        self.member.roles = [self.role]

        self.text_channel = Mock(spec=nextcord.TextChannel)
        self.text_channel.id = 6
        self.text_channel.name = "general"
        self.text_channel.type = nextcord.ChannelType.text
        self.text_channel.guild = self.guild
        self.text_channel.category_id = 4

        self.thread = Mock(spec=nextcord.Thread)
        self.thread.id = 7
        self.thread.name = "quanta"
        self.thread.type = nextcord.ChannelType.public_thread
        self.thread.guild = self.guild
        self.thread.parent_id = 6
        self.thread.owner_id = 185819470
        self.thread.locked = False
        self.thread.message_count = 3
        self.thread.member_count = 2

        self.dm_channel = Mock(spec=nextcord.DMChannel)
        self.dm_channel.id = 8
        self.dm_channel.guild = None

        self.emoji = Mock(spec=nextcord.Emoji)
        self.emoji.id = 9
        self.emoji.name = "atom"
        self.emoji.animated = True
        self.emoji.guild_id = GUILD_ID

        channels = {6: self.text_channel, 7: self.thread}
        self.guild.get_member.side_effect = lambda uid: self.member if uid == self.member.id else None
        self.guild.get_role.side_effect = lambda rid: self.role if rid == 5 else None
        self.guild.get_channel_or_thread.side_effect = channels.get

        self.bot = Mock(spec=nextcord.Client)
        self.bot.get_guild.side_effect = lambda gid: self.guild if gid == GUILD_ID else None
        self.bot.get_user.side_effect = lambda uid: self.user if uid == self.user.id else None
        self.bot.get_channel.side_effect = {6: self.text_channel, 7: self.thread, 8: self.dm_channel}.get
        self.bot.get_emoji.side_effect = lambda eid: self.emoji if eid == 9 else None

        self.cache = NextcordEntityCache(self.bot)

    def test_find_user(self):
        user = self.cache.find_user(185819470)
        self.assertEqual(user, User(id=185819470))
        self.assertEqual(user.name, "Planck")
        self.assertIsNone(self.cache.find_user(1))

    def test_find_member_converts_roles(self):
        member = self.cache.find_member(GUILD_ID, 185819470)
        self.assertIsInstance(member, Member)
        self.assertEqual(member.guild_id, GUILD_ID)
        self.assertEqual(member.display_name, "Max")
        self.assertEqual(member.roles, (Role(id=5),))
        self.assertEqual(member.roles[0].name, "physicists")
        self.assertIsNone(self.cache.find_member(GUILD_ID, 1))
        self.assertIsNone(self.cache.find_member(1, 185819470))

    def test_find_role(self):
        role = self.cache.find_role(GUILD_ID, 5)
        self.assertEqual(role.guild_id, GUILD_ID)
        self.assertEqual(role.position, 2)
        self.assertIsNone(self.cache.find_role(GUILD_ID, 6))

    def test_find_channel(self):
        channel = self.cache.find_channel(GUILD_ID, 6)
        self.assertEqual(channel, GuildChannel(id=6))
        self.assertEqual(channel.type, ChannelType.TEXT)
        self.assertEqual(channel.parent_id, 4)

    def test_find_thread(self):
        thread = self.cache.find_channel(GUILD_ID, 7)
        self.assertIsInstance(thread, ThreadChannel)
        self.assertTrue(thread.is_public)
        self.assertEqual(thread.parent_id, 6)
        self.assertEqual(thread.message_count, 3)

    def test_find_channel_without_guild(self):
        self.assertEqual(self.cache.find_channel(None, 6), GuildChannel(id=6))
        self.assertIsNone(self.cache.find_channel(None, 8))
        self.assertIsNone(self.cache.find_channel(None, 99))

    def test_find_custom_emoji(self):
        emoji = self.cache.find_custom_emoji(9)
        self.assertEqual(emoji, CustomEmoji(id=9))
        self.assertTrue(emoji.animated)
        self.assertEqual(emoji.mention, "<a:atom:9>")

    def test_without_client_everything_misses(self):
        cache = NextcordEntityCache()
        with self.assertLogs("guildmentions.nextcord_cache", level="ERROR"):
            self.assertIsNone(cache.find_user(185819470))
        self.assertIsNone(cache.find_member(GUILD_ID, 185819470))
        self.assertIsNone(cache.find_channel(None, 6))
        self.assertIsNone(cache.find_custom_emoji(9))

    def test_set_bot_client_once(self):
        cache = NextcordEntityCache()
        cache.set_bot_client(self.bot)
        with self.assertLogs("guildmentions.nextcord_cache", level="WARNING"):
            cache.set_bot_client(Mock(spec=nextcord.Client))
        self.assertEqual(cache.find_user(185819470), User(id=185819470))


if __name__ == '__main__':
    unittest.main()
