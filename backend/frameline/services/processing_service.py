"""
Runs the external frame extraction script against an uploaded video.

The script is opaque: it receives the video path plus the two output
directories and writes numbered frame images into the first and their
ASCII renderings into the second. Progress is read back from disk by
ProgressService, never from the script itself.

Two modes:
- detached: spawn and return immediately; the script runs to completion
  on its own and is not cancelled if the client goes away. A daemon thread
  reaps it and logs the exit code.
- sync: wait for the script (bounded by a timeout) and return its output.
"""

import asyncio
import logging
import os
import signal
import subprocess
import sys
import threading

from frameline.core.exceptions import ProcessingError
from frameline.core.metrics import MetricsCollector
from frameline.services.frame_file_service import FrameFileService
from frameline.services.storage_service import StorageService, video_basename

logger = logging.getLogger(__name__)

MAX_CAPTURED_OUTPUT = 64 * 1024


class ProcessingService:

    def __init__(
        self,
        storage: StorageService,
        frame_files: FrameFileService,
        script: str,
        sync_mode: bool = False,
        timeout_seconds: float = 600,
        metrics: MetricsCollector | None = None,
    ):
        self.storage = storage
        self.frame_files = frame_files
        self.script = script
        self.sync_mode = sync_mode
        self.timeout_seconds = timeout_seconds
        self.metrics = metrics

    def build_command(self, video_path: str, original_dir: str, ascii_dir: str) -> list[str]:
        script = os.path.abspath(self.script)
        if script.endswith(".py"):
            cmd = [sys.executable, script]
        elif script.endswith(".sh"):
            cmd = ["bash", script]
        else:
            cmd = [script]
        return cmd + [video_path, original_dir, ascii_dir]

    async def process(self, file_path: str) -> dict:
        video_path = self.storage.resolve(file_path)
        basename = video_basename(file_path)

        original_dir = self.frame_files.original_dir(basename)
        ascii_dir = self.frame_files.ascii_dir(basename)
        os.makedirs(original_dir, exist_ok=True)
        os.makedirs(ascii_dir, exist_ok=True)

        if not os.path.isfile(self.script):
            logger.error(f"[PROCESS] Extraction script not found: {self.script}")
            raise ProcessingError(detail="Failed to start video processing")

        cmd = self.build_command(video_path, original_dir, ascii_dir)
        if self.metrics:
            self.metrics.increment("processing_started")

        if self.sync_mode:
            return await self._run_and_wait(cmd, basename)
        return self._spawn_detached(cmd, basename)

    def _spawn_detached(self, cmd: list[str], basename: str) -> dict:
        try:
            proc = subprocess.Popen(
                cmd,
                stdout=subprocess.DEVNULL,
                stderr=subprocess.DEVNULL,
                stdin=subprocess.DEVNULL,
                start_new_session=True,
            )
        except OSError as e:
            logger.error(f"[PROCESS] Failed to spawn extraction for {basename}: {e}")
            if self.metrics:
                self.metrics.increment("processing_failed")
            raise ProcessingError(detail="Failed to start video processing")

        logger.info(f"[PROCESS] Extraction started for {basename} (pid={proc.pid})")
        reaper = threading.Thread(
            target=self._reap,
            args=(proc, basename),
            name=f"extract-reaper-{basename}",
            daemon=True,
        )
        reaper.start()
        return {
            "success": True,
            "message": "Video processing started",
            "videoBasename": basename,
        }

    def _reap(self, proc: subprocess.Popen, basename: str) -> int:
        returncode = proc.wait()
        frame_count = self.frame_files.count_ascii(basename)
        if returncode == 0:
            logger.info(f"[PROCESS] Extraction for {basename} exited with code 0 ({frame_count} ascii frames)")
            if self.metrics:
                self.metrics.increment("processing_finished")
        else:
            logger.warning(f"[PROCESS] Extraction for {basename} exited with code {returncode}")
            if self.metrics:
                self.metrics.increment("processing_failed")
        return returncode

    async def _run_and_wait(self, cmd: list[str], basename: str) -> dict:
        try:
            # own process group; a timeout kills the script and its children
            proc = await asyncio.create_subprocess_exec(
                *cmd,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
                stdin=asyncio.subprocess.DEVNULL,
                start_new_session=True,
            )
        except OSError as e:
            logger.error(f"[PROCESS] Failed to spawn extraction for {basename}: {e}")
            if self.metrics:
                self.metrics.increment("processing_failed")
            raise ProcessingError(detail="Failed to start video processing")

        try:
            stdout, stderr = await asyncio.wait_for(proc.communicate(), timeout=self.timeout_seconds)
        except asyncio.TimeoutError:
            try:
                os.killpg(proc.pid, signal.SIGKILL)
            except ProcessLookupError:
                pass
            await proc.wait()
            logger.error(f"[PROCESS] Extraction for {basename} timed out after {self.timeout_seconds}s")
            if self.metrics:
                self.metrics.increment("processing_failed")
            raise ProcessingError(detail="Video processing timed out")

        success = proc.returncode == 0
        frame_count = self.frame_files.count_ascii(basename)
        if success:
            logger.info(f"[PROCESS] Extraction finished for {basename}: {frame_count} ascii frames")
            if self.metrics:
                self.metrics.increment("processing_finished")
        else:
            logger.warning(f"[PROCESS] Extraction for {basename} exited with code {proc.returncode}")
            if self.metrics:
                self.metrics.increment("processing_failed")

        return {
            "success": success,
            "message": "Video processing completed" if success else f"Video processing failed (exit code {proc.returncode})",
            "videoBasename": basename,
            "stdout": stdout.decode(errors="replace")[-MAX_CAPTURED_OUTPUT:],
            "stderr": stderr.decode(errors="replace")[-MAX_CAPTURED_OUTPUT:],
            "frameCount": frame_count,
        }
