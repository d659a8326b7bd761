"""
StockFlow Main Application
FastAPI web server: stock ledger, reconciliation, staff roster and notes
"""
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.responses import RedirectResponse
import uvicorn
import os

from stockflow.api.v1 import api_router
from stockflow.database.config import SessionLocal, init_db
from stockflow.modules.bootstrap import seed_defaults
from stockflow.utils.logger import setup_logger

logger = setup_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    init_db()
    db = SessionLocal()
    try:
        created = seed_defaults(db)
    finally:
        db.close()
    logger.info(f"StockFlow started (seeded: {created})")
    yield


app = FastAPI(title="StockFlow", version="1.0.0", lifespan=lifespan)

app.include_router(api_router, prefix="/api/v1")


@app.get("/")
def read_root():
    """Redirect the root path to the API docs"""
    return RedirectResponse(url="/docs")


@app.get("/api/status")
def api_status():
    """API health check"""
    return {"status": "running", "message": "StockFlow is running."}


if __name__ == "__main__":
    uvicorn.run(app, host=os.getenv("HOST", "0.0.0.0"), port=int(os.getenv("PORT", "8000")))
