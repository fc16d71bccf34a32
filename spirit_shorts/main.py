import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from . import config
from .api.endpoints.process import router as process_router
from .api.endpoints.videos import router as videos_router

# Configurar logging
logging.basicConfig(level=config.LOG_LEVEL, format=config.LOG_FORMAT)

app = FastAPI(
    title="Spirit Shorts API",
    description="API para convertir videos de YouTube en resúmenes, citas e imágenes para historias",
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc"
)

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=[
        "http://localhost:3000",
        "http://localhost:3001",
        "http://127.0.0.1:3000",
        "http://127.0.0.1:3001",
    ],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include process router
app.include_router(
    process_router,
    prefix="/api",
    tags=["process"]
)

# Include history router
app.include_router(
    videos_router,
    prefix="/api",
    tags=["history"]
)

@app.get("/health", tags=["health"])
async def health():
    return {"status": "ok"}
