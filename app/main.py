# app/main.py
from contextlib import asynccontextmanager
import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.core.config import settings
from app.api.quiz import get_quiz_service, router as quiz_router

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # load config and history once; invalid quiz data stops startup here
    get_quiz_service()
    yield


app = FastAPI(
    title="Alignment Quiz",
    version="1.0.0",
    lifespan=lifespan,
)

# --------------------------------------------------
# CORS CONFIG
# --------------------------------------------------
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    # allow origin variations on localhost (ports) during development
    allow_origin_regex=r"http://localhost(:[0-9]+)?",
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# --------------------------------------------------
# API ROUTES
# --------------------------------------------------
app.include_router(
    quiz_router,
    prefix="/api/v1",
    tags=["Quiz"]
)


# --------------------------------------------------
# ROOT HEALTH CHECK
# --------------------------------------------------
@app.get("/")
def health_check():
    return {
        "status": "ok",
        "service": "Alignment Quiz",
        "version": "1.0.0"
    }
