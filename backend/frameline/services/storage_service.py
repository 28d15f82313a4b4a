"""Local disk storage for uploaded videos."""

import logging
import os
import time

from fastapi import UploadFile

from frameline.core.exceptions import NotFoundError, ValidationError

logger = logging.getLogger(__name__)

CHUNK_SIZE = 1024 * 1024
DEFAULT_VIDEO_EXT = ".mp4"


def generate_file_name(filename: str | None = None) -> str:
    """Create a stored file name from the upload time and the original extension."""
    ext = DEFAULT_VIDEO_EXT
    if filename and "." in filename:
        ext = "." + filename.rsplit(".", 1)[1].lower()
    return f"{int(time.time() * 1000)}{ext}"


def video_basename(file_path: str) -> str:
    """'/uploads/1760789903437.mp4' -> '1760789903437'"""
    name = file_path.replace("\\", "/").rsplit("/", 1)[-1]
    return os.path.splitext(name)[0]


def validate_basename(basename: str) -> str:
    """Reject anything that is not a single path component."""
    if not basename or basename in (".", "..") or "/" in basename or "\\" in basename:
        raise ValidationError(detail=f"Invalid video basename: {basename!r}")
    return basename


class StorageService:
    """Saves uploads under one directory and maps public paths back to disk."""

    def __init__(self, upload_dir: str, url_prefix: str = "/uploads"):
        self.upload_dir = os.path.abspath(upload_dir)
        self.url_prefix = "/" + url_prefix.strip("/")

    async def save_upload(self, upload: UploadFile) -> str:
        """Write the upload to disk; returns its public path."""
        os.makedirs(self.upload_dir, exist_ok=True)

        file_name = generate_file_name(upload.filename)
        stem, ext = os.path.splitext(file_name)
        suffix = 0
        while os.path.exists(os.path.join(self.upload_dir, file_name)):
            # same millisecond as a previous upload
            suffix += 1
            file_name = f"{stem}-{suffix}{ext}"
        disk_path = os.path.join(self.upload_dir, file_name)

        size = 0
        with open(disk_path, "wb") as out:
            while True:
                chunk = await upload.read(CHUNK_SIZE)
                if not chunk:
                    break
                out.write(chunk)
                size += len(chunk)

        logger.info(f"[UPLOAD] Stored {upload.filename!r} as {file_name} ({size} bytes)")
        return f"{self.url_prefix}/{file_name}"

    def resolve(self, file_path: str) -> str:
        """Map a public upload path to the file on disk. Raises NotFoundError if absent."""
        if not file_path:
            raise ValidationError(detail="filePath is required")

        name = file_path.replace("\\", "/").rsplit("/", 1)[-1]
        validate_basename(name)
        disk_path = os.path.join(self.upload_dir, name)
        if not os.path.isfile(disk_path):
            raise NotFoundError(detail=f"Video file not found: {file_path}")
        return disk_path
