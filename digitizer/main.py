from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from dotenv import load_dotenv
from fastapi import APIRouter, FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .app_logging import configure_logging
from .config import get_settings
from .api.v1.dependencies import close_adapters
from .api.v1.routers import batch, exports, pages, uploads

load_dotenv()
configure_logging()

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
  yield
  await close_adapters()
  logger.info("Closed extraction service clients")


app = FastAPI(title="Document Digitizer Backend", version="0.1.0", lifespan=lifespan)

app.add_middleware(
  CORSMiddleware,
  allow_origins=get_settings().allowed_origins(),
  allow_credentials=True,
  allow_methods=["*"],
  allow_headers=["*"],
)

api_router = APIRouter(prefix="/api")
api_router.include_router(uploads.router)
api_router.include_router(pages.router)
api_router.include_router(batch.router)
api_router.include_router(exports.router)

app.include_router(api_router)
