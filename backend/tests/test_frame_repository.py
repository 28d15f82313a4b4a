"""
Frame line table: repository functions and FrameService against in-memory SQLite.
"""
import unittest

from frameline.core.database import Database
from frameline.core.exceptions import NotFoundError, ValidationError
from frameline.core.metrics import MetricsCollector
from frameline.models.orm.frame_line import PLACEHOLDER_CONTENT, PLACEHOLDER_FRAME_NUMBER
from frameline.repository import frame_repository, video_repository
from frameline.services.frame_broadcaster import FrameBroadcaster
from frameline.services.frame_file_service import split_frame_lines
from frameline.services.frame_service import FrameService
from frameline.services.reset_barrier import ResetBarrier


class DatabaseTestCase(unittest.IsolatedAsyncioTestCase):

    async def asyncSetUp(self):
        self.db = Database("sqlite+aiosqlite:///:memory:")
        await self.db.create_database()

    async def asyncTearDown(self):
        await self.db.dispose()


class TestFrameRepository(DatabaseTestCase):

    async def test_reset_creates_placeholders(self):
        for n in (0, 1, 5):
            async with self.db.session() as session:
                inserted = await frame_repository.reset_frame_lines(session, n)
                rows = await frame_repository.get_all_frame_lines(session)
            self.assertEqual(inserted, n)
            self.assertEqual([r.line_number for r in rows], list(range(n)))
            for row in rows:
                self.assertEqual(row.frame_number, PLACEHOLDER_FRAME_NUMBER)
                self.assertEqual(row.line_content, PLACEHOLDER_CONTENT)

    async def test_reset_replaces_previous_rows(self):
        async with self.db.session() as session:
            await frame_repository.reset_frame_lines(session, 10)
            await frame_repository.reset_frame_lines(session, 3)
            self.assertEqual(await frame_repository.count_frame_lines(session), 3)

    async def test_partial_update_leaves_other_lines(self):
        async with self.db.session() as session:
            await frame_repository.reset_frame_lines(session, 3)
            updated = await frame_repository.update_frame_lines(session, 7, [(0, "a"), (2, "b")])
            rows = await frame_repository.get_all_frame_lines(session)

        self.assertEqual(updated, 2)
        self.assertEqual([r.line_content for r in rows], ["a", PLACEHOLDER_CONTENT, "b"])
        self.assertEqual([r.frame_number for r in rows], [7, PLACEHOLDER_FRAME_NUMBER, 7])

    async def test_unmatched_lines_are_skipped(self):
        async with self.db.session() as session:
            await frame_repository.reset_frame_lines(session, 2)
            updated = await frame_repository.update_frame_lines(session, 1, [(1, "x"), (5, "y")])
            self.assertEqual(updated, 1)
            self.assertEqual(await frame_repository.count_frame_lines(session), 2)
            self.assertIsNone(await frame_repository.get_frame_line(session, 5))

    async def test_empty_update(self):
        async with self.db.session() as session:
            await frame_repository.reset_frame_lines(session, 2)
            self.assertEqual(await frame_repository.update_frame_lines(session, 1, []), 0)

    async def test_update_on_empty_table(self):
        async with self.db.session() as session:
            self.assertEqual(await frame_repository.update_frame_lines(session, 1, [(0, "x")]), 0)


class TestVideoRepository(DatabaseTestCase):

    async def test_create_and_list(self):
        async with self.db.session() as session:
            first = await video_repository.create_video(
                session, title="a", file_name="a.mp4", file_id="/uploads/a.mp4",
                file_size=10, file_type="video/mp4",
                src_x_resolution=640, src_y_resolution=480, src_fps=30.0,
            )
            second = await video_repository.create_video(
                session, title="b", file_name="b.mp4", file_id="/uploads/b.mp4",
                file_size=20, file_type="video/mp4",
                src_x_resolution=320, src_y_resolution=240, src_fps=24.0,
                frame_no=48, duration=2.0,
            )
            videos = await video_repository.list_videos(session)
            fetched = await video_repository.get_video_by_id(session, second.id)

        self.assertNotEqual(first.id, second.id)
        self.assertEqual({v.id for v in videos}, {first.id, second.id})
        self.assertEqual(fetched.output_x_resolution, 320)
        self.assertEqual(fetched.frame_no, 48)


class TestFrameService(DatabaseTestCase):

    async def asyncSetUp(self):
        await super().asyncSetUp()
        self.broadcaster = FrameBroadcaster()
        self.metrics = MetricsCollector()
        self.service = FrameService(self.db, ResetBarrier(), self.broadcaster, self.metrics)

    async def test_render_text_joins_lines_in_order(self):
        await self.service.reset(3)
        await self.service.batch_update(1, [(2, "c"), (0, "a"), (1, "b")])
        text, count = await self.service.render_text()
        self.assertEqual(text, "a\nb\nc")
        self.assertEqual(count, 3)

    async def test_separator_characters_round_trip(self):
        lines = split_frame_lines("#\x0c#\r\n\x1c..\x1d\x85\n")
        self.assertEqual(lines, ["#\x0c#", "\x1c..\x1d\x85"])
        await self.service.reset(len(lines))
        await self.service.batch_update(1, list(enumerate(lines)))
        text, count = await self.service.render_text()
        self.assertEqual(text, "#\x0c#\n\x1c..\x1d\x85")
        self.assertEqual(count, 2)

    async def test_fresh_table_renders_blank_lines(self):
        await self.service.reset(2)
        text, _ = await self.service.render_text()
        self.assertEqual(text, " \n ")

    async def test_reset_zero_renders_empty(self):
        await self.service.reset(0)
        self.assertEqual(await self.service.render_text(), ("", 0))

    async def test_negative_reset_rejected(self):
        with self.assertRaises(ValidationError):
            await self.service.reset(-1)

    async def test_publishes_changes(self):
        notify = self.broadcaster.subscribe()
        await self.service.reset(2)
        self.assertTrue(notify.is_set())
        self.assertEqual(self.broadcaster.version, 1)

        notify.clear()
        await self.service.batch_update(5, [(0, "x")])
        self.assertTrue(notify.is_set())
        self.assertEqual(self.broadcaster.last_frame_number, 5)

    async def test_noop_batch_does_not_publish(self):
        await self.service.reset(1)
        version = self.broadcaster.version
        self.assertEqual(await self.service.batch_update(5, [(3, "x")]), 0)
        self.assertEqual(self.broadcaster.version, version)

    async def test_line_lookup(self):
        await self.service.reset(2)
        await self.service.batch_update(4, [(1, "hello")])
        row = await self.service.line(1)
        self.assertEqual(row.line_content, "hello")
        self.assertEqual(row.frame_number, 4)
        with self.assertRaises(NotFoundError):
            await self.service.line(10)

    async def test_metrics_counted(self):
        await self.service.reset(3)
        await self.service.batch_update(1, [(0, "a")])
        await self.service.all_lines()
        self.assertEqual(self.metrics.get("frame_resets"), 1)
        self.assertEqual(self.metrics.get("db_writes"), 4)
        self.assertEqual(self.metrics.get("db_queries"), 1)


if __name__ == "__main__":
    unittest.main()
