import logging
from pathlib import Path

from dotenv import load_dotenv
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

BASE_DIR = Path(__file__).resolve().parent.parent
load_dotenv(BASE_DIR / ".env")

from app.core.config import get_cors_origins, get_log_level

logging.basicConfig(
    level=get_log_level(),
    format="%(asctime)s | %(levelname)s | %(message)s"
)

logger = logging.getLogger(__name__)

app = FastAPI(
    title="PhishNix API",
    version="1.0.0",
)

from app.middleware.security import SecurityLoggingMiddleware
app.add_middleware(SecurityLoggingMiddleware)

app.add_middleware(
    CORSMiddleware,
    allow_origins=get_cors_origins(),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.on_event("startup")
def startup():
    logger.info("PhishNix API starting up")


from app.routes.analyze import router as analyze_router
from app.routes.history import router as history_router
from app.routes.profile import router as profile_router

app.include_router(analyze_router)
app.include_router(history_router)
app.include_router(profile_router)


@app.get("/health")
def health_check():
    return {
        "status": "ok",
        "service": "phishnix-backend",
        "version": "1.0.0",
    }
