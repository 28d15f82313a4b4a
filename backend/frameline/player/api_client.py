"""Async HTTP client for the frameline API, used by the player."""

import os
from typing import Optional

import httpx

from frameline.player.renderer import parse_sse_lines

API_TIMEOUT = 10  # seconds for API calls


class FramelineClient:

    def __init__(
        self,
        base_url: str = "http://localhost:8000",
        api_prefix: str = "/api",
        timeout: float = API_TIMEOUT,
        client: Optional[httpx.AsyncClient] = None,
    ):
        self.api_prefix = "/" + api_prefix.strip("/") if api_prefix.strip("/") else ""
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(base_url=base_url, timeout=timeout)

    async def __aenter__(self):
        return self

    async def __aexit__(self, *exc):
        await self.aclose()

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    def _url(self, path: str) -> str:
        return f"{self.api_prefix}{path}"

    # ── upload & processing ─────────────────────────────────────────

    async def upload(self, video_path: str) -> str:
        with open(video_path, "rb") as f:
            files = {"file": (os.path.basename(video_path), f, "application/octet-stream")}
            resp = await self._client.post(self._url("/upload"), files=files)
        resp.raise_for_status()
        return resp.json()["filePath"]

    async def process_video(self, file_path: str) -> dict:
        resp = await self._client.post(self._url("/process-video"), json={"filePath": file_path})
        resp.raise_for_status()
        return resp.json()

    async def get_progress(self, video_basename: str) -> dict:
        resp = await self._client.get(self._url(f"/processing-progress/{video_basename}"))
        resp.raise_for_status()
        return resp.json()

    # ── frame files ─────────────────────────────────────────────────

    async def get_frame_file(self, frame_number: int, video_basename: Optional[str] = None) -> Optional[dict]:
        """Fetch one ASCII frame file; None when the server has no such frame."""
        body = {"frameNumber": frame_number}
        if video_basename:
            body["videoBasename"] = video_basename
        resp = await self._client.post(self._url("/getFile"), json=body)
        if resp.status_code == 404:
            return None
        resp.raise_for_status()
        return resp.json()

    # ── frame line table ────────────────────────────────────────────

    async def reset_frames(self, line_count: int) -> int:
        resp = await self._client.post(self._url("/frames/reset"), json={"noOfFrames": line_count})
        resp.raise_for_status()
        return resp.json()["lineCount"]

    async def batch_update(self, frame_number: int, lines: list[str]) -> int:
        body = {
            "frameNumber": frame_number,
            "lines": [{"lineNumber": i, "content": content} for i, content in enumerate(lines)],
        }
        resp = await self._client.post(self._url("/frames/batch"), json=body)
        resp.raise_for_status()
        return resp.json()["updated"]

    async def get_frames(self) -> list[dict]:
        resp = await self._client.get(self._url("/frames"))
        resp.raise_for_status()
        return resp.json()

    async def stream_frames(self):
        """Yield frame payloads pushed by the server-sent event stream."""
        async with self._client.stream("GET", self._url("/frames/stream"), timeout=None) as resp:
            resp.raise_for_status()
            async for event in parse_sse_lines(resp.aiter_lines()):
                if event.get("event") == "frame":
                    yield event["data"]
