from contextlib import asynccontextmanager
from datetime import datetime, timezone
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
import logging

from . import __version__
from .config import CORS_ORIGINS, LOG_LEVEL
from .db import init_db
from .exceptions import register_exception_handlers
from .routers import users, subjects, assignments

logging.basicConfig(
    level=LOG_LEVEL,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Создание схемы при запуске"""
    init_db()
    logger.info(f"Tesuto API {__version__} starting, CORS origins: {CORS_ORIGINS}")
    yield
    logger.info("Tesuto API stopped")


app = FastAPI(
    title="Tesuto API",
    description="Tutoring platform: subjects, topics, assignments and problems",
    version=__version__,
    lifespan=lifespan
)

# CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_exception_handlers(app)

app.include_router(users.router)
app.include_router(subjects.router)
app.include_router(assignments.router)


@app.get("/")
async def root():
    return {
        "name": "Tesuto API",
        "version": __version__,
        "status": "running"
    }


@app.get("/health")
async def health_check():
    return {
        "status": "ok",
        "timestamp": datetime.now(timezone.utc).isoformat()
    }


def run():
    import uvicorn
    import os

    uvicorn.run("tesuto.main:app", host="0.0.0.0", port=int(os.getenv("PORT", "3001")))
