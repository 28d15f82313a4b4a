"""
Tests for ProcessingWatcher: start, poll until complete, or give up at the timeout.
"""
import unittest

from frameline.player.processing_watcher import ProcessingWatcher, basename_from_path


class FakeClock:

    def __init__(self):
        self.now = 0.0

    def __call__(self):
        return self.now


class FakeClient:

    def __init__(self, progress_sequence, start_error=None, poll_error_at=()):
        self.progress_sequence = list(progress_sequence)
        self.start_error = start_error
        self.poll_error_at = set(poll_error_at)
        self.polls = 0
        self.started = []

    async def process_video(self, file_path):
        self.started.append(file_path)
        if self.start_error:
            raise self.start_error
        return {"success": True, "message": "Video processing started", "videoBasename": "1760789903437"}

    async def get_progress(self, video_basename):
        self.polls += 1
        if self.polls in self.poll_error_at:
            raise ConnectionError("poll failed")
        index = min(self.polls - 1, len(self.progress_sequence) - 1)
        return self.progress_sequence[index]


def progress(original, ascii_count, pct, complete=False):
    return {"originalCount": original, "asciiCount": ascii_count, "progress": pct, "isComplete": complete}


class TestProcessingWatcher(unittest.IsolatedAsyncioTestCase):

    def make_watcher(self, client, timeout=10.0):
        self.clock = FakeClock()
        self.sleeps = []
        self.statuses = []

        async def sleep(seconds):
            self.sleeps.append(seconds)
            self.clock.now += seconds

        return ProcessingWatcher(
            client,
            poll_interval=0.5,
            timeout=timeout,
            clock=self.clock,
            sleep=sleep,
            on_status=lambda message, p: self.statuses.append(message),
        )

    async def test_polls_until_complete(self):
        client = FakeClient([
            progress(0, 0, 0),
            progress(10, 4, 40),
            progress(10, 10, 100, complete=True),
        ])
        outcome = await self.make_watcher(client).run("/uploads/1760789903437.mp4")

        self.assertTrue(outcome.completed)
        self.assertFalse(outcome.timed_out)
        self.assertEqual(outcome.polls, 3)
        self.assertEqual(outcome.video_basename, "1760789903437")
        self.assertEqual(self.sleeps, [0.5, 0.5])
        self.assertEqual(
            self.statuses,
            ["Extracting frames...", "Converting to ASCII... (4/10)", "Complete!"],
        )

    async def test_hundred_percent_counts_as_complete(self):
        client = FakeClient([progress(3, 3, 100, complete=False)])
        outcome = await self.make_watcher(client).run("/uploads/x.mp4")
        self.assertTrue(outcome.completed)
        self.assertEqual(outcome.polls, 1)

    async def test_timeout_assumes_completion(self):
        client = FakeClient([progress(10, 1, 10)])
        outcome = await self.make_watcher(client, timeout=2.0).run("/uploads/x.mp4")
        self.assertTrue(outcome.completed)
        self.assertTrue(outcome.timed_out)
        self.assertEqual(outcome.polls, 5)

    async def test_poll_errors_keep_polling(self):
        client = FakeClient(
            [progress(10, 5, 50), progress(10, 5, 50), progress(10, 10, 100, complete=True)],
            poll_error_at={1},
        )
        outcome = await self.make_watcher(client).run("/uploads/x.mp4")
        self.assertTrue(outcome.completed)
        self.assertEqual(outcome.polls, 3)

    async def test_start_error_returns_without_polling(self):
        client = FakeClient([], start_error=RuntimeError("500 Server Error"))
        outcome = await self.make_watcher(client).run("/uploads/abc.mp4")
        self.assertFalse(outcome.completed)
        self.assertEqual(outcome.error, "500 Server Error")
        self.assertEqual(outcome.video_basename, "abc")
        self.assertEqual(client.polls, 0)


class TestBasenameFromPath(unittest.TestCase):

    def test_strips_directory_and_extension(self):
        self.assertEqual(basename_from_path("/uploads/1760789903437.mp4"), "1760789903437")
        self.assertEqual(basename_from_path("plain"), "plain")


if __name__ == "__main__":
    unittest.main()
