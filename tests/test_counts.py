"""
Tests for statistics aggregation.

- Scope routing (guild/user, all-time/period) and validation notices
- Ranked table and single-line rendering
- Report footer and file naming
"""

import unittest
from datetime import date, datetime
from unittest import mock

from tallybot.models import message_counts, voice_time
from tallybot.utils.counts import (
    MessageStats,
    StatsOutcome,
    StatsRequest,
    StatView,
    VoiceTimeStats,
    format_duration,
    render_single,
    render_table,
)

from tests.helpers import FakeUsers, TempDatabaseMixin

GUILD = 1
ALICE = 100
BOB = 200
FORMED_AT = datetime(2024, 3, 10, 12, 30, 45)
JOINED_AT = datetime(2023, 12, 24, 18, 0, 5)


def make_request(**kwargs):
    params = dict(
        guild_id=GUILD,
        guild_name="Bat Cave",
        initiator_name="carol",
        guild_joined_at=JOINED_AT,
        formed_at=FORMED_AT,
    )
    params.update(kwargs)
    return StatsRequest(**params)


class TestFormatting(unittest.TestCase):

    def test_format_duration(self):
        self.assertEqual(format_duration(0), "00:00:00")
        self.assertEqual(format_duration(600), "00:10:00")
        self.assertEqual(format_duration(3661), "01:01:01")
        self.assertEqual(format_duration(90061), "25:01:01")
        self.assertEqual(format_duration(360000), "100:00:00")

    def test_render_table_pads_columns(self):
        text = render_table([StatView("alice", "10"), StatView("bob", "3")])
        self.assertEqual(text, "1. - alice - 10\n2. - bob --- 3\n")

    def test_render_table_index_width_grows_with_row_count(self):
        views = [StatView(f"u{i}", str(i)) for i in range(10)]
        lines = render_table(views).splitlines()
        self.assertEqual(len(lines), 10)
        self.assertTrue(lines[0].startswith("1. -- u0 - "))
        self.assertTrue(lines[9].startswith("10. - u9 - "))

    def test_render_single(self):
        self.assertEqual(render_single(StatView("alice", "00:20:00")), "alice 00:20:00\n")


class TestScopeValidation(unittest.IsolatedAsyncioTestCase):

    def setUp(self):
        self.stats = MessageStats(FakeUsers({ALICE: "alice"}))
        patcher_all = mock.patch.object(message_counts, "sum_all")
        patcher_one = mock.patch.object(message_counts, "sum_one")
        self.sum_all = patcher_all.start()
        self.sum_one = patcher_one.start()
        self.addCleanup(patcher_all.stop)
        self.addCleanup(patcher_one.stop)

    def assert_no_reads(self):
        self.sum_all.assert_not_called()
        self.sum_one.assert_not_called()

    async def test_only_start_date_is_missing_date(self):
        report = await self.stats.show_stats(make_request(start_date="2024-01-01"))
        self.assertEqual(report.outcome, StatsOutcome.MISSING_DATE)
        self.assertFalse(report.has_file)
        self.assertEqual(report.notice, "One of the dates is missing")
        self.assert_no_reads()

    async def test_only_end_date_is_missing_date(self):
        report = await self.stats.show_stats(make_request(name="alice", end_date="2024-01-01"))
        self.assertEqual(report.outcome, StatsOutcome.MISSING_DATE)
        self.assert_no_reads()

    async def test_malformed_date(self):
        for bad in ("2024/01/01", "2024-13-01", "yesterday", "2024-02-30"):
            report = await self.stats.show_stats(make_request(start_date=bad, end_date="2024-03-01"))
            self.assertEqual(report.outcome, StatsOutcome.INVALID_DATE, bad)
        self.assert_no_reads()

    async def test_start_after_end(self):
        report = await self.stats.show_stats(make_request(start_date="2024-03-02", end_date="2024-03-01"))
        self.assertEqual(report.outcome, StatsOutcome.INVALID_PERIOD)
        self.assert_no_reads()

    async def test_unknown_user(self):
        report = await self.stats.show_stats(make_request(name="nobody"))
        self.assertEqual(report.outcome, StatsOutcome.USER_NOT_FOUND)
        report = await self.stats.show_stats(
            make_request(name="nobody", start_date="2024-01-01", end_date="2024-01-02")
        )
        self.assertEqual(report.outcome, StatsOutcome.USER_NOT_FOUND)
        self.assert_no_reads()

    async def test_routing_picks_query(self):
        self.sum_all.return_value = []
        self.sum_one.return_value = None

        await self.stats.show_stats(make_request())
        self.sum_all.assert_called_once_with(GUILD, None, None)

        self.sum_all.reset_mock()
        await self.stats.show_stats(make_request(start_date="2024-01-01", end_date="2024-01-31"))
        self.sum_all.assert_called_once_with(GUILD, date(2024, 1, 1), date(2024, 1, 31))

        await self.stats.show_stats(make_request(name="alice"))
        self.sum_one.assert_called_once_with(GUILD, ALICE, None, None)

        self.sum_one.reset_mock()
        await self.stats.show_stats(make_request(name="alice", start_date="2024-01-01", end_date="2024-01-31"))
        self.sum_one.assert_called_once_with(GUILD, ALICE, date(2024, 1, 1), date(2024, 1, 31))


class TestMessageStats(TempDatabaseMixin, unittest.IsolatedAsyncioTestCase):

    def setUp(self):
        super().setUp()
        self.stats = MessageStats(FakeUsers({ALICE: "alice", BOB: "bob"}))

    async def test_guild_table_all_time(self):
        message_counts.insert(GUILD, ALICE, date(2024, 1, 5), 10)
        message_counts.insert(GUILD, BOB, date(2024, 1, 6), 3)
        message_counts.insert(GUILD, 300, date(2024, 1, 6), 1)
        message_counts.insert(2, ALICE, date(2024, 1, 6), 50)

        report = await self.stats.show_stats(make_request())

        self.assertEqual(report.outcome, StatsOutcome.TABLE)
        self.assertEqual(
            report.content,
            "1. - alice - 10\n"
            "2. - bob --- 3\n"
            "3. - 300 --- 1\n"
            "\n"
            "Guild: Bat Cave\n"
            "Initiator: carol\n"
            "Period: 2023-12-24T18:00:05 - 2024-03-10T12:30:45",
        )
        self.assertEqual(report.title, "Message count statistics")
        self.assertEqual(report.filename, "Stats_messages_2024-03-10T12-30-45.txt")

    async def test_guild_table_for_period(self):
        message_counts.insert(GUILD, ALICE, date(2024, 1, 31), 4)
        message_counts.insert(GUILD, ALICE, date(2024, 2, 1), 40)
        message_counts.insert(GUILD, BOB, date(2024, 1, 1), 6)

        report = await self.stats.show_stats(make_request(start_date="2024-01-01", end_date="2024-01-31"))

        self.assertEqual(report.outcome, StatsOutcome.TABLE)
        self.assertTrue(report.content.startswith("1. - bob --- 6\n2. - alice - 4\n"))
        self.assertTrue(report.content.endswith("Period: 2024-01-01 - 2024-01-31"))
        self.assertEqual(report.filename, "Stats_messages_period_2024-03-10T12-30-45.txt")

    async def test_single_day_period(self):
        message_counts.insert(GUILD, ALICE, date(2024, 3, 1), 3)
        message_counts.insert(GUILD, ALICE, date(2024, 3, 2), 5)

        report = await self.stats.show_stats(
            make_request(name="alice", start_date="2024-03-01", end_date="2024-03-01")
        )

        self.assertEqual(report.outcome, StatsOutcome.SINGLE)
        self.assertTrue(report.content.startswith("alice 3\n\n"))
        self.assertEqual(
            report.title, "Message count statistics for alice for the period 2024-03-01 - 2024-03-01"
        )
        self.assertEqual(report.filename, "Stats_messages_user_period_2024-03-10T12-30-45.txt")

    async def test_user_all_time(self):
        message_counts.insert(GUILD, BOB, date(2024, 3, 1), 3)
        message_counts.insert(GUILD, BOB, date(2024, 3, 2), 5)

        report = await self.stats.show_stats(make_request(name="bob"))

        self.assertEqual(report.outcome, StatsOutcome.SINGLE)
        self.assertTrue(report.content.startswith("bob 8\n"))

    async def test_no_data(self):
        report = await self.stats.show_stats(make_request())
        self.assertEqual(report.outcome, StatsOutcome.NO_DATA)
        self.assertEqual(report.notice, "No data")

        report = await self.stats.show_stats(make_request(name="alice"))
        self.assertEqual(report.outcome, StatsOutcome.NO_DATA)


class TestVoiceTimeStats(TempDatabaseMixin, unittest.IsolatedAsyncioTestCase):

    def setUp(self):
        super().setUp()
        self.stats = VoiceTimeStats(FakeUsers({ALICE: "alice", BOB: "bob"}))

    async def test_table_formats_durations(self):
        voice_time.add_seconds(GUILD, ALICE, date(2024, 1, 31), 600)
        voice_time.add_seconds(GUILD, ALICE, date(2024, 2, 1), 600)
        voice_time.add_seconds(GUILD, BOB, date(2024, 2, 1), 86400)

        report = await self.stats.show_stats(make_request())

        self.assertEqual(report.outcome, StatsOutcome.TABLE)
        self.assertTrue(report.content.startswith("1. - bob --- 24:00:00\n2. - alice - 00:20:00\n"))
        self.assertEqual(report.filename, "Stats_voice_time_2024-03-10T12-30-45.txt")

    async def test_single_user_for_period(self):
        voice_time.add_seconds(GUILD, ALICE, date(2024, 1, 31), 600)
        voice_time.add_seconds(GUILD, ALICE, date(2024, 2, 1), 3725)

        report = await self.stats.show_stats(
            make_request(name="alice", start_date="2024-02-01", end_date="2024-02-29")
        )

        self.assertEqual(report.outcome, StatsOutcome.SINGLE)
        self.assertTrue(report.content.startswith("alice 01:02:05\n"))
        self.assertEqual(
            report.title,
            "Voice channel time statistics for alice for the period 2024-02-01 - 2024-02-29",
        )


if __name__ == "__main__":
    unittest.main()
