import os
from typing import List

from dotenv import load_dotenv
from pydantic_settings import BaseSettings
from pydantic import computed_field

load_dotenv()


class Configs(BaseSettings):
    # base
    ENV: str = os.getenv("ENV", "dev")
    API_STR: str = "/api"
    PROJECT_NAME: str = "frameline-api"
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")

    # CORS
    BACKEND_CORS_ORIGINS: List[str] = ["*"]

    # database
    # sqlite+aiosqlite for local runs, postgresql+asyncpg in deployments
    DATABASE_URL: str = os.getenv("DATABASE_URL", "sqlite+aiosqlite:///./frameline.db")
    DB_ECHO: bool = False

    # storage
    UPLOAD_DIR: str = os.getenv("UPLOAD_DIR", "uploads")
    UPLOAD_URL_PREFIX: str = "/uploads"
    ORIGINAL_FRAMES_DIR: str = os.getenv("ORIGINAL_FRAMES_DIR", "video-original-frames")
    ASCII_FRAMES_DIR: str = os.getenv("ASCII_FRAMES_DIR", "video-ascii-frames")
    ORIGINAL_FRAME_EXT: str = ".jpg"
    ASCII_FRAME_EXT: str = ".txt"

    # frame file naming: out0001.jpg.txt
    FRAME_FILE_PREFIX: str = "out"
    FRAME_FILE_SUFFIX: str = ".jpg.txt"
    FRAME_NUMBER_WIDTH: int = 4

    # extraction
    EXTRACTION_SCRIPT: str = os.getenv("EXTRACTION_SCRIPT", "scripts/video_to_ascii.sh")
    PROCESS_MODE: str = os.getenv("PROCESS_MODE", "detached")  # detached | sync
    PROCESS_TIMEOUT_SECONDS: int = 60 * 10

    # streaming
    SSE_HEARTBEAT_SECONDS: float = 15.0

    @computed_field
    @property
    def IS_SYNC_PROCESSING(self) -> bool:
        return self.PROCESS_MODE.lower() == "sync"

    class Config:
        case_sensitive = True
        env_file = ".env"
        extra = "ignore"


class TestConfigs(Configs):
    ENV: str = "test"
    DATABASE_URL: str = "sqlite+aiosqlite:///:memory:"


configs = Configs()

if configs.ENV == "test":
    configs = TestConfigs()
