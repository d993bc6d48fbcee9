# order_recon/main.py

import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from order_recon.config import get_settings
from order_recon.routers import health, reconcile

settings = get_settings()

logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

# ============================================
# Create FastAPI app
# ============================================

app = FastAPI(
    title=settings.app_name,
    description="Reconciliation of EOM order exports against Radial fulfillment exports",
    version="1.0.0",
    docs_url="/docs" if settings.debug else None,
    redoc_url="/redoc" if settings.debug else None,
)

# ============================================
# CORS middleware
# ============================================

app.add_middleware(
    CORSMiddleware,
    allow_origins=[
        settings.frontend_url,
        "http://localhost:3000",
    ],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# ============================================
# Include routers
# ============================================

app.include_router(health.router, tags=["Health"])
app.include_router(reconcile.router, tags=["Reconciliation"])

# ============================================
# Root endpoint
# ============================================

@app.get("/")
async def root():
    return {
        "name": settings.app_name,
        "version": "1.0.0",
        "status": "running",
        "upload": "/upload",
        "reports": "/report",
        "docs": "/docs" if settings.debug else None,
    }


def run() -> None:
    """Console entry point: serve the API with uvicorn."""
    import uvicorn

    logging.getLogger(__name__).info(
        "Server started. Go to http://localhost:%d/docs to upload exports.", settings.port
    )
    uvicorn.run("order_recon.main:app", host=settings.host, port=settings.port)
