import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from linkedart.api.analyze import router as analyze_router
from linkedart.api.parse import router as parse_router
from linkedart.config import configure_logging

configure_logging()

logger = logging.getLogger(__name__)

# --------------------------------------------------
# App
# --------------------------------------------------

app = FastAPI(
    title="Linked Art Analyzer",
    description=(
        "Extracts titles, creators, dates, dimensions, materials and images "
        "from Linked Art JSON-LD, and parses complete entity trees."
    ),
    version="1.0.0"
)

# --------------------------------------------------
# CORS (safe defaults)
# --------------------------------------------------

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# --------------------------------------------------
# Routers
# --------------------------------------------------

app.include_router(
    analyze_router,
    prefix="/api",
    tags=["Analyze"]
)

app.include_router(
    parse_router,
    prefix="/api",
    tags=["Complete Entity Parse"]
)

# --------------------------------------------------
# Health check
# --------------------------------------------------

@app.get("/health")
def health():
    return {
        "status": "ok",
        "service": "linkedart-analyzer"
    }

# --------------------------------------------------
# Startup / Shutdown
# --------------------------------------------------

@app.on_event("startup")
def on_startup():
    logger.info("🚀 Linked Art Analyzer API started")

@app.on_event("shutdown")
def on_shutdown():
    logger.info("🛑 Linked Art Analyzer API shutting down")
