from dependency_injector import containers, providers

from frameline.core.config import configs
from frameline.core.database import Database
from frameline.core.metrics import MetricsCollector
from frameline.services.frame_broadcaster import FrameBroadcaster
from frameline.services.frame_file_service import FrameFileService
from frameline.services.frame_service import FrameService
from frameline.services.processing_service import ProcessingService
from frameline.services.progress_service import ProgressService
from frameline.services.reset_barrier import ResetBarrier
from frameline.services.storage_service import StorageService
from frameline.services.video_service import VideoService


class Container(containers.DeclarativeContainer):
    wiring_config = containers.WiringConfiguration(
        modules=[
            "frameline.api.v1.endpoints.video",
            "frameline.api.v1.endpoints.frames",
            "frameline.api.v1.endpoints.stats",
        ]
    )

    db = providers.Singleton(Database, db_url=configs.DATABASE_URL, echo=configs.DB_ECHO)

    metrics = providers.Singleton(MetricsCollector)
    reset_barrier = providers.Singleton(ResetBarrier)
    frame_broadcaster = providers.Singleton(FrameBroadcaster)

    storage_service = providers.Singleton(
        StorageService,
        upload_dir=configs.UPLOAD_DIR,
        url_prefix=configs.UPLOAD_URL_PREFIX,
    )
    frame_file_service = providers.Singleton(
        FrameFileService,
        original_frames_dir=configs.ORIGINAL_FRAMES_DIR,
        ascii_frames_dir=configs.ASCII_FRAMES_DIR,
        original_ext=configs.ORIGINAL_FRAME_EXT,
        ascii_ext=configs.ASCII_FRAME_EXT,
        file_prefix=configs.FRAME_FILE_PREFIX,
        file_suffix=configs.FRAME_FILE_SUFFIX,
        number_width=configs.FRAME_NUMBER_WIDTH,
    )

    progress_service = providers.Factory(ProgressService, frame_files=frame_file_service)
    processing_service = providers.Factory(
        ProcessingService,
        storage=storage_service,
        frame_files=frame_file_service,
        script=configs.EXTRACTION_SCRIPT,
        sync_mode=configs.IS_SYNC_PROCESSING,
        timeout_seconds=configs.PROCESS_TIMEOUT_SECONDS,
        metrics=metrics,
    )
    frame_service = providers.Factory(
        FrameService,
        db=db,
        barrier=reset_barrier,
        broadcaster=frame_broadcaster,
        metrics=metrics,
    )
    video_service = providers.Factory(VideoService, db=db)
