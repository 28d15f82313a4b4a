#!/usr/bin/env python3
"""
frameline player

Drives the frame sync protocol from the command line:
    process  - upload (optional) and run extraction, polling progress
    play     - follow playback at a given fps, pushing frames to the table
    watch    - render the frame table as it changes (SSE)
    run      - upload, process, then play and render in one go
"""

import argparse
import asyncio
import logging
import os
import sys

from frameline.player.api_client import FramelineClient
from frameline.player.playback_sync import DEFAULT_LINE_COUNT, DEFAULT_REFRESH_RATE, PlaybackSync
from frameline.player.processing_watcher import POLL_INTERVAL, PROCESSING_TIMEOUT, ProcessingWatcher
from frameline.player.renderer import TerminalRenderer

logger = logging.getLogger("frameline.player")


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s [%(levelname)s] %(message)s",
        handlers=[logging.StreamHandler(sys.stderr)],
    )


async def _process(client: FramelineClient, args) -> str:
    file_path = args.file_path
    if args.video:
        file_path = await client.upload(args.video)
        logger.info(f"Uploaded {args.video} -> {file_path}")
    if not file_path:
        raise SystemExit("either --video or --file-path is required")

    watcher = ProcessingWatcher(
        client,
        poll_interval=args.poll_interval,
        timeout=args.timeout,
        on_status=lambda message, progress: logger.info(f"{message} ({progress.get('progress', 0)}%)"),
    )
    outcome = await watcher.run(file_path)
    if outcome.error:
        logger.error(f"Processing failed to start: {outcome.error}")
    elif outcome.timed_out:
        logger.warning("Timed out waiting for processing; continuing anyway")
    return outcome.video_basename


async def _play(client: FramelineClient, args, video_basename) -> dict:
    duration = args.duration
    if duration is None and video_basename:
        progress = await client.get_progress(video_basename)
        if progress.get("asciiCount"):
            duration = progress["asciiCount"] / args.fps

    sync = PlaybackSync(
        client,
        fps=args.fps,
        duration=duration,
        video_basename=video_basename,
        default_line_count=args.lines,
    )
    stats = await sync.run(refresh_rate=args.refresh_rate)
    logger.info(
        f"Frames rendered: {stats['frames_rendered']}, skipped: {stats['frames_skipped']}, "
        f"DB writes: {stats['db_writes']}, queries: {stats['queries']}"
    )
    return stats


async def _watch(client: FramelineClient, renderer: TerminalRenderer) -> None:
    async for payload in client.stream_frames():
        renderer.draw(payload.get("text", ""), status=f"frame {payload.get('frameNumber')} v{payload.get('version')}")


async def _main(args) -> int:
    async with FramelineClient(base_url=args.backend_url) as client:
        if args.command == "process":
            await _process(client, args)
        elif args.command == "play":
            await _play(client, args, args.basename)
        elif args.command == "watch":
            await _watch(client, TerminalRenderer())
        elif args.command == "run":
            basename = await _process(client, args)
            watch_task = asyncio.create_task(_watch(client, TerminalRenderer()))
            try:
                await _play(client, args, basename)
            finally:
                watch_task.cancel()
                try:
                    await watch_task
                except asyncio.CancelledError:
                    pass
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="frameline-player", description="ASCII video frame sync player")
    parser.add_argument("--backend-url",
                        default=os.environ.get("FRAMELINE_API_URL", "http://localhost:8000"),
                        help="Backend API URL")
    parser.add_argument("-v", "--verbose", action="store_true")

    sub = parser.add_subparsers(dest="command", required=True)

    def add_process_args(p):
        p.add_argument("--video", help="Local video file to upload first")
        p.add_argument("--file-path", help="Already uploaded path, e.g. /uploads/1760789903437.mp4")
        p.add_argument("--poll-interval", type=float, default=POLL_INTERVAL)
        p.add_argument("--timeout", type=float, default=PROCESSING_TIMEOUT)

    def add_play_args(p):
        p.add_argument("--fps", type=float, default=30.0)
        p.add_argument("--duration", type=float, default=None, help="Seconds; derived from frame count if omitted")
        p.add_argument("--lines", type=int, default=DEFAULT_LINE_COUNT, help="Fallback frame height")
        p.add_argument("--refresh-rate", type=float, default=DEFAULT_REFRESH_RATE)

    add_process_args(sub.add_parser("process", help="Upload and extract frames"))

    play = sub.add_parser("play", help="Push frames to the table following playback")
    play.add_argument("--basename", default=None, help="Video basename whose frames to play")
    add_play_args(play)

    sub.add_parser("watch", help="Render the frame table as it changes")

    run = sub.add_parser("run", help="Upload, process, play and render")
    add_process_args(run)
    add_play_args(run)

    return parser


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    _configure_logging(args.verbose)
    try:
        return asyncio.run(_main(args))
    except KeyboardInterrupt:
        return 130


if __name__ == "__main__":
    sys.exit(main())
