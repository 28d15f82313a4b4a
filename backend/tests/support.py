"""
Shared helpers for the frameline tests.

Points the app container at a temporary directory (database, uploads,
frame directories) and writes a stand-in extraction script.
"""
import os
import sys
import textwrap

from dependency_injector import providers

from frameline.core.database import Database
from frameline.services.frame_file_service import FrameFileService
from frameline.services.processing_service import ProcessingService
from frameline.services.storage_service import StorageService

FAKE_SCRIPT = textwrap.dedent(
    """
    import os
    import subprocess
    import sys
    import time

    video_path, original_dir, ascii_dir = sys.argv[1:4]

    child_pid_file = os.environ.get("FAKE_CHILD_PID_FILE")
    if child_pid_file:
        child = subprocess.Popen([sys.executable, "-c", "import time; time.sleep(60)"])
        with open(child_pid_file, "w") as f:
            f.write(str(child.pid))
    time.sleep(float(os.environ.get("FAKE_SLEEP", "0")))

    count = int(os.environ.get("FAKE_FRAME_COUNT", "3"))
    print(f"extracting {count} frames from {os.path.basename(video_path)}")
    for i in range(1, count + 1):
        with open(os.path.join(original_dir, f"out{i:04d}.jpg"), "wb") as f:
            f.write(b"jpg")
        with open(os.path.join(ascii_dir, f"out{i:04d}.jpg.txt"), "w") as f:
            f.write(f"frame {i}\\n#{i}#\\n...")
    sys.stderr.write("done\\n")
    sys.exit(int(os.environ.get("FAKE_EXIT_CODE", "0")))
    """
)


def write_fake_script(root: str) -> str:
    path = os.path.join(root, "fake_extract.py")
    with open(path, "w") as f:
        f.write(FAKE_SCRIPT)
    return path


def write_frame_file(directory: str, frame_number: int, text: str) -> str:
    os.makedirs(directory, exist_ok=True)
    path = os.path.join(directory, f"out{frame_number:04d}.jpg.txt")
    with open(path, "w", encoding="utf-8", newline="") as f:
        f.write(text)
    return path


def override_container(container, root: str, sync_mode: bool = False, script: str | None = None) -> dict:
    """Swap storage, database and processing providers for temp-dir versions."""
    paths = {
        "root": root,
        "db": os.path.join(root, "frameline.db"),
        "uploads": os.path.join(root, "uploads"),
        "original": os.path.join(root, "video-original-frames"),
        "ascii": os.path.join(root, "video-ascii-frames"),
        "script": script or write_fake_script(root),
    }

    container.db.override(providers.Singleton(Database, db_url=f"sqlite+aiosqlite:///{paths['db']}"))
    container.storage_service.override(
        providers.Singleton(StorageService, upload_dir=paths["uploads"], url_prefix="/uploads")
    )
    container.frame_file_service.override(
        providers.Singleton(
            FrameFileService,
            original_frames_dir=paths["original"],
            ascii_frames_dir=paths["ascii"],
        )
    )
    container.processing_service.override(
        providers.Factory(
            ProcessingService,
            storage=container.storage_service,
            frame_files=container.frame_file_service,
            script=paths["script"],
            sync_mode=sync_mode,
            timeout_seconds=30,
            metrics=container.metrics,
        )
    )
    container.reset_singletons()
    return paths


def python_executable() -> str:
    return sys.executable
