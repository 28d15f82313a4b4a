from frameline.services.frame_file_service import FrameFileService
from frameline.utils.video_progress import calculate_progress, is_processing_complete


class ProgressService:
    """Derives extraction progress from the frame files on disk"""

    def __init__(self, frame_files: FrameFileService):
        self.frame_files = frame_files

    def get_progress(self, video_basename: str) -> dict:
        original_count = self.frame_files.count_original(video_basename)
        ascii_count = self.frame_files.count_ascii(video_basename)
        return {
            "originalCount": original_count,
            "asciiCount": ascii_count,
            "progress": calculate_progress(original_count, ascii_count),
            "isComplete": is_processing_complete(original_count, ascii_count),
        }
