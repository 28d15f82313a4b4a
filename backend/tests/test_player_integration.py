"""
FramelineClient and PlaybackSync driving the real app in-process over httpx.ASGITransport.
"""
import os
import tempfile
import unittest

import httpx

from frameline.main import app, container
from frameline.player.api_client import FramelineClient
from frameline.player.playback_sync import PlaybackSync
from frameline.player.renderer import render_rows

from support import override_container, write_frame_file


class TestPlayerAgainstApp(unittest.IsolatedAsyncioTestCase):

    async def asyncSetUp(self):
        self._tmp = tempfile.TemporaryDirectory()
        self.paths = override_container(container, self._tmp.name)
        # ASGITransport does not run the lifespan
        await container.db().create_database()
        self.http = httpx.AsyncClient(transport=httpx.ASGITransport(app=app), base_url="http://test")
        self.client = FramelineClient(client=self.http)

    async def asyncTearDown(self):
        await self.client.aclose()
        await self.http.aclose()
        await container.db().dispose()
        container.reset_override()
        container.reset_singletons()
        self._tmp.cleanup()

    async def test_table_round_trip(self):
        self.assertEqual(await self.client.reset_frames(3), 3)
        self.assertEqual(await self.client.batch_update(4, ["a", "b"]), 2)
        rows = await self.client.get_frames()
        self.assertEqual(render_rows(rows), "a\nb\n ")

    async def test_missing_frame_file_is_none(self):
        self.assertIsNone(await self.client.get_frame_file(9999, "nothing"))

    async def test_progress(self):
        progress = await self.client.get_progress("nothing")
        self.assertEqual(progress["progress"], 0)

    async def test_playback_writes_frames_to_table(self):
        ascii_dir = os.path.join(self.paths["ascii"], "777")
        for n in range(1, 6):
            write_frame_file(ascii_dir, n, f"frame{n}-top\nframe{n}-bottom")

        now = [0.0]
        sync = PlaybackSync(self.client, fps=4, video_basename="777", clock=lambda: now[0])
        await sync.play()
        self.assertEqual(sync.line_count, 2)

        for _ in range(5):
            await sync.tick()
            now[0] += 0.25

        self.assertEqual(sync.stats["frames_rendered"], 3)
        text = render_rows(await self.client.get_frames())
        self.assertEqual(text, "frame5-top\nframe5-bottom")


if __name__ == "__main__":
    unittest.main()
