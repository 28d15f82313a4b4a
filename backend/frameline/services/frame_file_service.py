"""Access to the numbered frame files written by the extraction script."""

import logging
import os

from frameline.core.exceptions import NotFoundError
from frameline.services.storage_service import validate_basename

logger = logging.getLogger(__name__)


def count_files(directory: str, extension: str) -> int:
    """Count regular files ending in `extension`; a missing directory counts as 0."""
    try:
        with os.scandir(directory) as entries:
            return sum(
                1 for entry in entries
                if entry.is_file() and entry.name.lower().endswith(extension.lower())
            )
    except (FileNotFoundError, NotADirectoryError):
        return 0


def frame_file_name(frame_number: int, prefix: str = "out", suffix: str = ".jpg.txt", width: int = 4) -> str:
    """
    >>> frame_file_name(7)
    'out0007.jpg.txt'
    >>> frame_file_name(12345)
    'out12345.jpg.txt'
    """
    return f"{prefix}{frame_number:0{width}d}{suffix}"


def split_frame_lines(content: str) -> list[str]:
    """
    Split on newlines only; form feeds and other separators stay in the line
    they belong to. One trailing newline and CRs before LF are dropped.

    >>> split_frame_lines("ab\\ncd\\n")
    ['ab', 'cd']
    >>> split_frame_lines("a\\x0cb\\r\\n\\x1cc")
    ['a\\x0cb', '\\x1cc']
    >>> split_frame_lines("")
    []
    """
    if not content:
        return []
    if content.endswith("\n"):
        content = content[:-1]
    return [line[:-1] if line.endswith("\r") else line for line in content.split("\n")]


class FrameFileService:

    def __init__(
        self,
        original_frames_dir: str,
        ascii_frames_dir: str,
        original_ext: str = ".jpg",
        ascii_ext: str = ".txt",
        file_prefix: str = "out",
        file_suffix: str = ".jpg.txt",
        number_width: int = 4,
    ):
        self.original_frames_dir = os.path.abspath(original_frames_dir)
        self.ascii_frames_dir = os.path.abspath(ascii_frames_dir)
        self.original_ext = original_ext
        self.ascii_ext = ascii_ext
        self.file_prefix = file_prefix
        self.file_suffix = file_suffix
        self.number_width = number_width

    def original_dir(self, video_basename: str) -> str:
        return os.path.join(self.original_frames_dir, validate_basename(video_basename))

    def ascii_dir(self, video_basename: str | None = None) -> str:
        if video_basename is None:
            return self.ascii_frames_dir
        return os.path.join(self.ascii_frames_dir, validate_basename(video_basename))

    def count_original(self, video_basename: str) -> int:
        return count_files(self.original_dir(video_basename), self.original_ext)

    def count_ascii(self, video_basename: str) -> int:
        return count_files(self.ascii_dir(video_basename), self.ascii_ext)

    def file_name(self, frame_number: int) -> str:
        return frame_file_name(frame_number, self.file_prefix, self.file_suffix, self.number_width)

    def read_frame(self, frame_number: int, video_basename: str | None = None) -> dict:
        """
        Load one ASCII frame.

        Without a basename the flat ascii frames directory is used.
        Raises NotFoundError when the frame file does not exist.
        """
        if frame_number < 0:
            raise NotFoundError(detail=f"Frame {frame_number} not found")

        file_name = self.file_name(frame_number)
        path = os.path.join(self.ascii_dir(video_basename), file_name)
        try:
            with open(path, "r", encoding="utf-8", errors="replace", newline="") as f:
                content = f.read()
        except (FileNotFoundError, IsADirectoryError):
            raise NotFoundError(detail=f"Frame file {file_name} not found")

        lines = split_frame_lines(content)
        return {
            "frameNumber": frame_number,
            "fileName": file_name,
            "content": content,
            "lines": lines,
            "lineCount": len(lines),
        }
