import logging
import sys
from contextlib import asynccontextmanager

from dotenv import load_dotenv
from fastapi import FastAPI
from fastapi.staticfiles import StaticFiles
from starlette.middleware.cors import CORSMiddleware

from frameline.api.v1.routes import routers as api_routers
from frameline.core.config import configs
from frameline.core.container import Container
from frameline.core.middleware import ConnectionMetricsMiddleware
from frameline.utils.class_object import singleton

load_dotenv()

logging.basicConfig(
    level=getattr(logging, configs.LOG_LEVEL.upper(), logging.INFO),
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    handlers=[logging.StreamHandler(sys.stdout)],
)
logger = logging.getLogger(__name__)


@singleton
class AppCreator:
    def __init__(self):
        # Init DI container
        self.container = Container()

        @asynccontextmanager
        async def lifespan(app: FastAPI):
            db = self.container.db()
            await db.create_database()
            logger.info(f"[APP] {configs.PROJECT_NAME} started (process mode: {configs.PROCESS_MODE})")
            yield
            await db.dispose()

        # Init FastAPI
        self.app = FastAPI(
            title=configs.PROJECT_NAME,
            version="0.1.0",
            openapi_url=f"{configs.API_STR}/openapi.json",
            lifespan=lifespan,
        )

        # CORS
        if configs.BACKEND_CORS_ORIGINS:
            self.app.add_middleware(
                CORSMiddleware,
                allow_origins=[str(origin) for origin in configs.BACKEND_CORS_ORIGINS],
                allow_credentials=True,
                allow_methods=["*"],
                allow_headers=["*"],
            )

        self.app.add_middleware(ConnectionMetricsMiddleware, metrics_provider=self.container.metrics)

        # Health check
        @self.app.get("/")
        async def root():
            return {"status": "service is working"}

        # API routes
        self.app.include_router(
            api_routers,
            prefix=configs.API_STR,
        )

        # Uploaded videos are played back straight from disk
        self.app.mount(
            configs.UPLOAD_URL_PREFIX,
            StaticFiles(directory=configs.UPLOAD_DIR, check_dir=False),
            name="uploads",
        )


app_creator = AppCreator()
app = app_creator.app
container = app_creator.container
