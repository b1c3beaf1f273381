# Damaged Goods Management - Incident Reporting
# Incident form, photo capture and the incident records API
# v1.0.0.0

import logging

from fastapi import FastAPI
from fastapi.staticfiles import StaticFiles

from core.database import engine, Base
from services.config_service import get_upload_dir

# Import all models to register them
from models.incident import Incident, IncidentPhoto

# Import routers
from api import incidents

logging.basicConfig(level=logging.INFO, format="%(asctime)s - %(name)s - %(levelname)s - %(message)s")

# Create database tables
Base.metadata.create_all(bind=engine)

# Initialize FastAPI app
app = FastAPI(
    title="Damaged Goods Incident API",
    description="Incident (damage report) records and photo storage for the incident form",
    version="1.0.0"
)

log = logging.getLogger(__name__)

# Mount file storage
UPLOAD_DIR = get_upload_dir()
app.mount("/uploads", StaticFiles(directory=str(UPLOAD_DIR)), name="uploads")

# Register routers
app.include_router(incidents.router, prefix="/api")


# ==================== HEALTH CHECK ====================
@app.get("/health")
def health_check():
    """Health check endpoint for Docker and Kubernetes."""
    return {
        "status": "healthy",
        "service": "Damaged Goods Incident API",
        "version": "1.0.0"
    }


@app.get("/api/health")
def api_health():
    """API health check endpoint."""
    return {
        "status": "operational",
        "version": "1.0.0",
        "service": "Damaged Goods Incident API"
    }


if __name__ == "__main__":
    import uvicorn
    log.info("Starting incident API, uploads stored in %s", UPLOAD_DIR)
    uvicorn.run(app, host="0.0.0.0", port=8000)
