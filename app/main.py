from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.api.routes import analyze, webflow
from app.config import settings
from app.services.logger import logger

VERSION = "2.0.0"


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info(f"ContentOps backend starting (port {settings.port})")
    yield
    logger.info("ContentOps backend stopped")


app = FastAPI(
    title="ContentOps",
    description="Fact-check and rewrite blog posts with web search and Claude",
    version=VERSION,
    lifespan=lifespan,
)

# CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origin_list,
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Routes
app.include_router(analyze.router)
app.include_router(webflow.router)


@app.get("/")
async def root():
    return {"status": "ContentOps Backend Running", "version": VERSION}


@app.get("/api/health")
async def health():
    return {"status": "ok", "service": "contentops"}
